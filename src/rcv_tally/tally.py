"""
Contains the Tally class.
Candidate registry plus ballot partition, and the per-round operations that act on them.
"""
from __future__ import annotations
from typing import Callable, Dict, List, Optional

import collections
import enum
import logging

import rcv_tally.util as util

from rcv_tally.ballots import Ballot
from rcv_tally.candidates import Candidate, CandidateRegistry, CandidateStatus
from rcv_tally.errors import AllocationError, InputError, TallyInvariantError
from rcv_tally.partition import BallotPartition
from rcv_tally.tables import Tally_tables

logger = logging.getLogger(__name__)


class TallyCondition(enum.Enum):
    CONTINUE = "continue"
    WINNER = "winner"
    TIE = "tie"
    ERROR = "error"


class Tally(Tally_tables):
    """
    An election in progress. Constructed once from parsed ballots and mutated in place by each round.
    """

    def __init__(
        self,
        parser_func: Optional[Callable] = None,
        parser_args: Optional[Dict] = None,
        parsed_cvr: Optional[Dict] = None,
        log_level: int = 0,
    ) -> None:
        """
        Either **parser_func** and **parser_args** must both be passed or an already parsed CVR must be passed as **parsed_cvr**.

        :param parser_func: A function from `parsers.py` or a custom function with the same signature and return type, defaults to None
        :type parser_func: Optional[Callable], optional
        :param parser_args: Dictionary of arguments unrolled and passed to `parser_func`, defaults to None
        :type parser_args: Optional[Dict], optional
        :param parsed_cvr: Dictionary of lists. 'candidates' holds the candidate names, 'ranks' holds one list of candidate ids per ballot, each as long as the candidate list. An optional 'ballot_id' list gives the ballot ids, otherwise ballots are numbered from 1 in order. Defaults to None
        :type parsed_cvr: Optional[Dict], optional
        :param log_level: Verbosity threshold for trace events, see the LOG_* constants in `util.py`. Defaults to 0
        :type log_level: int, optional
        :raises InputError: Parsed CVR is missing or malformed. Also raised when parser_func is passed without parser_args.
        :raises AllocationError: Memory ran out while building the ballot set.
        """
        self.log_level = log_level
        self.error: Optional[TallyInvariantError] = None

        if parser_func and parser_args is None:
            raise InputError("parser_func was passed without parser_args.")

        if parser_func:
            parsed_cvr = parser_func(**parser_args)

        validated_cvr = self._validate_cvr(parsed_cvr)

        try:
            self.registry = CandidateRegistry(validated_cvr["candidates"])
            self.partition = BallotPartition(self.registry)
            for ballot_id, ranks in zip(validated_cvr["ballot_id"], validated_cvr["ranks"]):
                self.add_vote(Ballot(ballot_id, ranks))
        except MemoryError as err:
            raise AllocationError("ran out of memory while building the tally") from err

        self.ballots_loaded = len(self.partition)

    @staticmethod
    def _validate_cvr(cvr_dict: Optional[Dict[str, List]]) -> Dict[str, List]:

        if not cvr_dict:
            raise InputError("if no parser_func and parser_args are passed, a parsed_cvr must be passed.")

        if "candidates" not in cvr_dict:
            raise InputError('Parsed CVR does not contain field "candidates"')

        if "ranks" not in cvr_dict:
            raise InputError('Parsed CVR does not contain field "ranks"')

        # names are rendered as one padded field per line in round tables
        for name in cvr_dict["candidates"]:
            if not isinstance(name, str) or name != name.strip() or "\n" in name or "\r" in name:
                raise InputError(
                    f"Parsed CVR candidate names must be strings without surrounding whitespace or line breaks, got {name!r}"
                )

        candidate_count = len(cvr_dict["candidates"])
        ranks = cvr_dict["ranks"]

        ballot_lengths = collections.Counter(len(b) for b in ranks)
        if ballot_lengths and set(ballot_lengths) != {candidate_count}:
            raise InputError(
                f"Parsed CVR rank lists must each hold {candidate_count} preferences. {str(ballot_lengths)}"
            )

        for b in ranks:
            for pref in b:
                if isinstance(pref, bool) or not isinstance(pref, int):
                    raise InputError(f"Parsed CVR contains a non-integer preference: {pref!r}")

        validated = {
            "candidates": list(cvr_dict["candidates"]),
            "ranks": ranks,
            "ballot_id": cvr_dict.get("ballot_id", list(range(1, len(ranks) + 1))),
        }

        field_lengths = {k: len(validated[k]) for k in ("ranks", "ballot_id")}
        if len(set(field_lengths.values())) > 1:
            raise InputError(f"Parsed CVR contains fields of unequal length. {str(field_lengths)}")

        for ballot_id in validated["ballot_id"]:
            if isinstance(ballot_id, bool) or not isinstance(ballot_id, int) or ballot_id < 1:
                raise InputError(f"Parsed CVR ballot ids must be positive integers, got {ballot_id!r}")

        if len(set(validated["ballot_id"])) != len(validated["ballot_id"]):
            raise InputError("Parsed CVR contains duplicate ballot ids.")

        return validated

    # BALLOT PLACEMENT
    def add_vote(self, ballot: Ballot) -> None:
        """
        Add a ballot to the bucket of the preference under its cursor. Used while populating the tally;
        `transfer_first_vote` moves ballots once rounds start.
        """
        self.partition.assign(ballot)

    @property
    def candidate_count(self) -> int:
        return len(self.registry)

    @property
    def invalid_vote_count(self) -> int:
        return self.partition.invalid_count

    def transfer_first_vote(self, candidate_id: int) -> None:
        """Transfer the first ballot held by a candidate to the next eligible candidate on it,
        or to the invalid bucket if it has none. Does nothing if the candidate holds no ballots.

        :param candidate_id: Candidate whose first ballot is transferred.
        :type candidate_id: int
        """
        if not 0 <= candidate_id < self.candidate_count:
            return

        moved = self.partition.transfer_first(candidate_id)
        if moved is None or self.log_level < util.LOG_VOTE_TRANSFERS:
            return

        ballot, destination = moved
        origin = self.registry[candidate_id]
        if destination == util.NO_CANDIDATE:
            logger.info("Transferred Vote %s from %d %s to Invalid Votes", str(ballot), origin.id, origin.name)
        else:
            target = self.registry[destination]
            logger.info(
                "Transferred Vote %s from %d %s to %d %s", str(ballot), origin.id, origin.name, target.id, target.name
            )

    # ROUND OPERATIONS
    def set_minvote_candidates(self) -> None:
        """
        Mark every candidate not yet dropped whose vote count equals the lowest such count as MINVOTES.
        All tied candidates are marked.
        """
        remaining = [c for c in self.registry if c.status != CandidateStatus.DROPPED]

        if not remaining:
            if self.log_level >= util.LOG_MINVOTE:
                logger.info("No MIN VOTE count found")
            return

        min_votes = min(c.vote_count for c in remaining)
        if self.log_level >= util.LOG_MINVOTE:
            logger.info("MIN VOTE count is %d", min_votes)

        for c in remaining:
            if c.vote_count == min_votes:
                c.status = CandidateStatus.MINVOTES
                if self.log_level >= util.LOG_MINVOTE:
                    logger.info("MIN VOTE COUNT for candidate %d: %s", c.id, c.name)

    def drop_minvote_candidates(self) -> None:
        """
        Drain every MINVOTES candidate, in candidate id order, then mark it DROPPED.

        A candidate still marked MINVOTES can receive ballots from one drained before it; those
        ballots move on again when its own turn comes.
        """
        for c in self.registry:
            if c.status != CandidateStatus.MINVOTES:
                continue

            while not self.partition.is_empty(c.id):
                self.transfer_first_vote(c.id)

            c.status = CandidateStatus.DROPPED
            if self.log_level >= util.LOG_DROP_MINVOTES:
                logger.info("Dropped Candidate %d: %s", c.id, c.name)

    def _status_counts(self) -> collections.Counter:
        counts = collections.Counter()
        for c in self.registry:
            if not isinstance(c.status, CandidateStatus):
                raise TallyInvariantError(f"candidate {c.id} ({c.name}) has unknown status {c.status!r}")
            counts[c.status] += 1
        return counts

    def condition(self) -> TallyCondition:
        """
        Classify the tally from candidate status counts.

        - exactly one ACTIVE candidate: WINNER
        - two or more ACTIVE: CONTINUE
        - no ACTIVE and two or more MINVOTES: TIE
        - anything else, including an unknown status: ERROR, with the reason kept in `self.error`

        :rtype: TallyCondition
        """
        try:
            counts = self._status_counts()
        except TallyInvariantError as err:
            self.error = err
            return TallyCondition.ERROR

        n_active = counts[CandidateStatus.ACTIVE]
        n_minvotes = counts[CandidateStatus.MINVOTES]

        if n_active == 1:
            return TallyCondition.WINNER
        if n_active > 1:
            return TallyCondition.CONTINUE
        if n_minvotes > 1:
            return TallyCondition.TIE

        self.error = TallyInvariantError(
            f"no active candidates and {n_minvotes} minimum vote candidates remain"
        )
        return TallyCondition.ERROR

    # ACCESSORS
    def candidates(self, status: Optional[CandidateStatus] = None) -> List[Candidate]:
        if status is None:
            return list(self.registry)
        return self.registry.with_status(status)

