###############################################################
# constants

# preference terminator, also returned when a ballot has no next candidate
NO_CANDIDATE = -1

# verbosity thresholds, an event is logged when log_level >= threshold
LOG_FILEIO = 1
LOG_DROP_MINVOTES = 2
LOG_SHOWVOTES = 3
LOG_VOTE_TRANSFERS = 4
LOG_MINVOTE = 5

########################
# helper funcs


def percent(count, total):
    """Percentage of total, rounded to one decimal place. Zero when total is zero."""
    if not total:
        return 0.0
    return round(100.0 * count / total, 1)
