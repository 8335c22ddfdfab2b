"""
Contains the candidate status enum and the CandidateRegistry class.
"""

from __future__ import annotations
from typing import Iterable, Iterator, List

import enum
from dataclasses import dataclass


class CandidateStatus(enum.Enum):
    ACTIVE = "A"
    MINVOTES = "M"
    DROPPED = "D"

    @property
    def letter(self) -> str:
        return self.value

    @classmethod
    def from_letter(cls, letter: str) -> CandidateStatus:
        return cls(letter)


@dataclass
class Candidate:
    id: int
    name: str
    status: CandidateStatus = CandidateStatus.ACTIVE
    vote_count: int = 0

    def __str__(self) -> str:
        return self.name


class CandidateRegistry:
    """Fixed-size table of candidates indexed by candidate id. Built once from the list of names."""

    def __init__(self, names: Iterable[str]) -> None:
        self._candidates = [Candidate(idx, str(name)) for idx, name in enumerate(names)]

    def __len__(self) -> int:
        return len(self._candidates)

    def __iter__(self) -> Iterator[Candidate]:
        return iter(self._candidates)

    def __getitem__(self, candidate_id: int) -> Candidate:
        return self._candidates[candidate_id]

    @property
    def names(self) -> List[str]:
        return [c.name for c in self._candidates]

    def statuses(self) -> List[CandidateStatus]:
        return [c.status for c in self._candidates]

    def with_status(self, status: CandidateStatus) -> List[Candidate]:
        return [c for c in self._candidates if c.status == status]

    def total_votes(self) -> int:
        return sum(c.vote_count for c in self._candidates)
