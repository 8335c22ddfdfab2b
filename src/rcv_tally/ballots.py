"""
Contains Ballot class
"""

from __future__ import annotations
from typing import Iterable, List, Sequence

from rcv_tally.candidates import CandidateStatus
from rcv_tally.util import NO_CANDIDATE


class Ballot:
    """One voter's ranked candidate ids plus a cursor marking the preference currently counted.

    The cursor only ever moves forward. Once it lands on the `NO_CANDIDATE` terminator, an id
    outside the candidate table, or runs off the end of the preferences, the ballot is
    invalid for good and the cursor stops moving.
    """

    __slots__ = ("id", "preferences", "cursor", "invalid")

    def __init__(self, ballot_id: int, preferences: Iterable[int]) -> None:
        """
        :param ballot_id: Positive, 1-based id assigned in read order.
        :type ballot_id: int
        :param preferences: Candidate ids in order of preference. May contain `NO_CANDIDATE`, anything after it is ignored.
        :type preferences: Iterable[int]
        """
        if isinstance(preferences, (str, bytes)):
            raise TypeError("preferences must be a sequence of candidate ids")

        self.id = ballot_id
        self.preferences: List[int] = [int(pref) for pref in preferences]
        self.cursor = 0
        self.invalid = False

    def __repr__(self) -> str:
        return f"Ballot(id={self.id}, preferences={self.preferences}, cursor={self.cursor})"

    def __str__(self) -> str:
        """
        Render like "#0017: 3 <0> 2  1 ", with the preference under the cursor in angle
        brackets. Rendering stops at the first `NO_CANDIDATE`. No trailing newline.
        """
        pieces = [f"#{self.id:04d}:"]
        for idx, pref in enumerate(self.preferences):
            if pref == NO_CANDIDATE:
                break
            if idx == self.cursor:
                pieces.append(f"<{pref}> ")
            else:
                pieces.append(f" {pref} ")
        return "".join(pieces)

    def _at_cursor(self, candidate_count: int) -> int:
        if self.invalid or self.cursor >= len(self.preferences):
            return NO_CANDIDATE

        candidate = self.preferences[self.cursor]
        if candidate == NO_CANDIDATE or not 0 <= candidate < candidate_count:
            return NO_CANDIDATE

        return candidate

    def current_candidate(self, candidate_count: int) -> int:
        """Candidate id under the cursor, without moving it.

        :param candidate_count: Number of candidates in the election, ids at or above it are out of range.
        :type candidate_count: int
        :return: Candidate id, or `NO_CANDIDATE` if the cursor is on the terminator or an out-of-range id.
        :rtype: int
        """
        return self._at_cursor(candidate_count)

    def advance(self) -> None:
        """Step the cursor one preference forward. No-op once the ballot is invalid."""
        if not self.invalid and self.cursor < len(self.preferences):
            self.cursor += 1

    def next_candidate(self, statuses: Sequence[CandidateStatus]) -> int:
        """Move the cursor forward to the first preference still eligible to receive the ballot and return it.

        Eligible means not `CandidateStatus.DROPPED`. Candidates marked `MINVOTES` are still
        eligible, they only become ineligible once formally dropped. The cursor is left on the
        matched preference, so calling `advance` then `next_candidate` again resumes after it.

        :param statuses: Status of every candidate, indexed by candidate id.
        :type statuses: Sequence[CandidateStatus]
        :return: The matched candidate id, or `NO_CANDIDATE` when preferences are exhausted.
        :rtype: int
        """
        while not self.invalid and self.cursor < len(self.preferences):

            candidate = self._at_cursor(len(statuses))
            if candidate == NO_CANDIDATE:
                self.invalid = True
                return NO_CANDIDATE

            if statuses[candidate] != CandidateStatus.DROPPED:
                return candidate

            self.cursor += 1

        self.invalid = True
        return NO_CANDIDATE
