"""
Contains ballot file parser functions.
"""

from typing import List

import logging
import pathlib

import rcv_tally.util as util
from rcv_tally.errors import InputError
from rcv_tally.package_types import BallotDictOfLists, ParserDict, Path

logger = logging.getLogger(__name__)

global parser_dict


def add_parser(new_parsers: ParserDict) -> None:
    """Add custom parser functions to the module parser dictionary.

    :param new_parsers: A dictionary containing parser functions, with their names as keys.
    :type new_parsers: Dict
    """
    parser_dict.update(new_parsers)


def get_parser_dict() -> ParserDict:
    """Returns the module parser dictionary. Including both package parsers and
    custom parsers added with :func:`add_parser`.

    :return: A dictionary of parser functions. Keys are parser name strings.
    :rtype: Dict
    """
    return parser_dict


def _format_read_vote(ballot_id: int, ranks: List[int]) -> str:
    return f"#{ballot_id:04d}:<{ranks[0]}> " + "".join(f"{r} " for r in ranks[1:])


def ballot_file(cvr_path: Path, log_level: int = 0) -> BallotDictOfLists:
    """Reads a whitespace separated ballot file.

    The first token is the number of candidates N, the next N tokens are the candidate names, and
    every following group of N integers is one ballot listing 0-based candidate ids in order of
    preference. An id of -1 ends the ballot's preferences. A short group at the end of the file is
    discarded.

    EXAMPLE: 4 candidates, 3 ballots

    4
    Francis Claire Heather Viktor
    0 3 2 1
    1 0 2 3
    -1 2 1 0

    :param cvr_path: The path to the ballot file.
    :type cvr_path: Union[str, pathlib.Path]
    :param log_level: Progress is logged when at least `util.LOG_FILEIO`, defaults to 0
    :type log_level: int, optional
    :raises InputError: File cannot be opened, the candidate count is not a non-negative integer, names are missing, or a ballot token is not an integer.
    :return: A dictionary of lists. 'candidates' holds the names, 'ranks' one list of ids per ballot and 'ballot_id' the 1-based ballot ids in read order.
    :rtype: Dict[str, List]
    """
    cvr_path = pathlib.Path(cvr_path)
    verbose = log_level >= util.LOG_FILEIO

    try:
        with open(cvr_path, encoding="utf8") as cvr_file:
            tokens = cvr_file.read().split()
    except (OSError, UnicodeDecodeError) as err:
        raise InputError(f"couldn't open file '{cvr_path}'") from err

    if verbose:
        logger.info("File '%s' opened", cvr_path)

    if not tokens:
        raise InputError("failed to read number of candidates")

    try:
        n_candidates = int(tokens[0])
    except ValueError:
        raise InputError(f"failed to read number of candidates, got {tokens[0]!r}") from None

    if n_candidates < 0:
        raise InputError(f"number of candidates must not be negative, got {n_candidates}")

    if verbose:
        logger.info("File '%s' has %d candidates", cvr_path, n_candidates)

    candidates = tokens[1:n_candidates + 1]
    if len(candidates) != n_candidates:
        raise InputError("failed to read candidate names")

    if verbose:
        for idx, name in enumerate(candidates):
            logger.info("File '%s' candidate %d is %s", cvr_path, idx, name)

    ranks = []
    ballot_ids = []

    # zero candidates leaves nothing to group ballots by
    vote_tokens = tokens[n_candidates + 1:] if n_candidates else []
    n_complete = len(vote_tokens) - len(vote_tokens) % n_candidates if n_candidates else 0

    for start in range(0, n_complete, n_candidates):
        group = vote_tokens[start:start + n_candidates]
        try:
            ballot_ranks = [int(tok) for tok in group]
        except ValueError:
            raise InputError(f"ballot #{len(ranks) + 1:04d} contains a non-integer preference: {group}") from None

        ranks.append(ballot_ranks)
        ballot_ids.append(len(ranks))

        if verbose:
            logger.info("File '%s' vote %s", cvr_path, _format_read_vote(ballot_ids[-1], ballot_ranks))

    if verbose:
        logger.info("File '%s' end of file reached", cvr_path)

    return {"candidates": candidates, "ranks": ranks, "ballot_id": ballot_ids}


parser_dict = {
    "ballot_file": ballot_file,
}
