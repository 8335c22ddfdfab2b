"""
Exceptions raised while loading and tallying an election.
"""


class TallyError(RuntimeError):
    pass


class InputError(TallyError):
    """Ballot file could not be read, or its contents are malformed."""
    pass


class TallyInvariantError(TallyError):
    """Candidate statuses reached a state no terminal condition accounts for."""
    pass


class AllocationError(TallyError):
    pass
