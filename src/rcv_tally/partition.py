"""
Contains the BallotPartition class, which owns every loaded ballot.
"""

from __future__ import annotations
from typing import Deque, List, Optional, Tuple

import collections

from rcv_tally.ballots import Ballot
from rcv_tally.candidates import CandidateRegistry
from rcv_tally.util import NO_CANDIDATE


class BallotPartition:
    """
    One bucket of ballots per candidate id, plus one bucket of invalid ballots.

    Every ballot sits in exactly one bucket. Ballots move by removal from the front of one
    bucket and insertion at the front of another, and each move updates the `vote_count`
    of the candidates in the registry so it always equals the size of their bucket.
    Order among ballots inside a bucket is newest-first and should not be relied on.
    """

    def __init__(self, registry: CandidateRegistry) -> None:
        self._registry = registry
        self._buckets: List[Deque[Ballot]] = [collections.deque() for _ in range(len(registry))]
        self._invalid: Deque[Ballot] = collections.deque()

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._buckets) + len(self._invalid)

    @property
    def invalid_count(self) -> int:
        return len(self._invalid)

    def bucket(self, candidate_id: int) -> Tuple[Ballot, ...]:
        return tuple(self._buckets[candidate_id])

    def invalid_ballots(self) -> Tuple[Ballot, ...]:
        return tuple(self._invalid)

    def is_empty(self, candidate_id: int) -> bool:
        return not self._buckets[candidate_id]

    def _insert(self, ballot: Ballot, candidate_id: int) -> None:
        if candidate_id == NO_CANDIDATE:
            ballot.invalid = True
            self._invalid.appendleft(ballot)
        else:
            self._buckets[candidate_id].appendleft(ballot)
            self._registry[candidate_id].vote_count += 1

    def assign(self, ballot: Ballot) -> int:
        """Place a newly loaded ballot in the bucket of the preference under its cursor.

        A terminator or out-of-range id under the cursor sends it to the invalid bucket.

        :param ballot: Ballot not yet held by any bucket.
        :type ballot: Ballot
        :return: Candidate id the ballot was assigned to, or `NO_CANDIDATE`.
        :rtype: int
        """
        candidate_id = ballot.current_candidate(len(self._registry))
        self._insert(ballot, candidate_id)
        return candidate_id

    def transfer_first(self, candidate_id: int) -> Optional[Tuple[Ballot, int]]:
        """Move the first ballot in a candidate's bucket to the ballot's next eligible preference.

        :param candidate_id: Candidate whose first ballot is moved.
        :type candidate_id: int
        :return: None if the bucket was empty, else the moved ballot and its destination candidate id (`NO_CANDIDATE` for the invalid bucket).
        :rtype: Optional[Tuple[Ballot, int]]
        """
        bucket = self._buckets[candidate_id]
        if not bucket:
            return None

        ballot = bucket.popleft()
        self._registry[candidate_id].vote_count -= 1

        ballot.advance()
        destination = ballot.next_candidate(self._registry.statuses())
        self._insert(ballot, destination)

        return ballot, destination
