"""
Contains the ElectionRunner class, which drives a Tally through rounds until a terminal condition.
"""
from __future__ import annotations
from typing import Callable, Iterator, List, Optional

from dataclasses import dataclass, field

import pandas as pd

import rcv_tally.tables as tables
import rcv_tally.util as util

from rcv_tally.candidates import Candidate, CandidateStatus
from rcv_tally.errors import TallyInvariantError
from rcv_tally.tally import Tally, TallyCondition


@dataclass
class RoundSnapshot:
    number: int
    table: pd.DataFrame
    invalid_vote_count: int
    votes_text: Optional[str] = None

    def get_table_text(self) -> str:
        return tables.format_round_table(self.table, self.invalid_vote_count)


@dataclass
class ElectionResult:
    condition: TallyCondition
    winner: Optional[Candidate] = None
    tied: List[Candidate] = field(default_factory=list)
    error: Optional[TallyInvariantError] = None
    rounds: List[RoundSnapshot] = field(default_factory=list)
    invalid_vote_count: int = 0
    unique_id: str = "election"

    @property
    def n_rounds(self) -> int:
        return len(self.rounds)

    def get_outcome_text(self) -> str:
        """
        Closing message: the winner, the members of a multiway tie, or an error notice.
        """
        if self.condition == TallyCondition.WINNER:
            return f"Winner: {self.winner.name} (candidate {self.winner.id})"

        if self.condition == TallyCondition.TIE:
            lines = ["Multiway Tie Between:"]
            lines.extend(f"{c.name} (candidate {c.id})" for c in self.tied)
            return "\n".join(lines)

        return "Something is rotten in the state of Denmark"

    def get_round_by_round_table(self) -> pd.DataFrame:
        return tables.round_by_round_table(self.rounds)


class ElectionRunner:
    """
    Runs rounds on a Tally. Each round drops the candidates marked MINVOTES in the previous
    round (none in round 1), takes a snapshot, marks the new MINVOTES candidates and checks
    the tally condition. Rounds continue while the condition is CONTINUE.
    """

    def __init__(
        self,
        tally: Tally,
        unique_id: str = "election",
        on_round_start: Optional[Callable[[int], None]] = None,
    ) -> None:
        """
        :param tally: Freshly loaded tally, mutated in place by every round
        :type tally: Tally
        :param unique_id: Name used for written tables, defaults to "election"
        :type unique_id: str, optional
        :param on_round_start: Called with the round number before any candidate of that round is dropped, defaults to None
        :type on_round_start: Optional[Callable[[int], None]], optional
        """
        self.tally = tally
        self.on_round_start = on_round_start
        self.unique_id = unique_id
        self.round_num = 0
        self.condition = TallyCondition.CONTINUE
        self.rounds: List[RoundSnapshot] = []

    def _snapshot(self) -> RoundSnapshot:
        votes_text = None
        if self.tally.log_level >= util.LOG_SHOWVOTES:
            votes_text = self.tally.get_votes_text()

        return RoundSnapshot(
            number=self.round_num,
            table=self.tally.get_round_table(),
            invalid_vote_count=self.tally.invalid_vote_count,
            votes_text=votes_text,
        )

    def round_iter(self) -> Iterator[RoundSnapshot]:
        """
        Run rounds, yielding each snapshot as soon as it is taken. Candidate classification for the
        round happens after the snapshot is handed out, so trace events logged while iterating
        follow the table they belong after.
        """
        while self.condition == TallyCondition.CONTINUE:
            self.round_num += 1
            if self.on_round_start is not None:
                self.on_round_start(self.round_num)

            self.tally.drop_minvote_candidates()

            snapshot = self._snapshot()
            self.rounds.append(snapshot)
            yield snapshot

            self.tally.set_minvote_candidates()
            self.condition = self.tally.condition()

    def run(self) -> ElectionResult:
        """Run every remaining round and assemble the result.

        :rtype: ElectionResult
        """
        for _ in self.round_iter():
            pass
        return self.get_result()

    def get_result(self) -> ElectionResult:
        result = ElectionResult(
            condition=self.condition,
            rounds=list(self.rounds),
            invalid_vote_count=self.tally.invalid_vote_count,
            unique_id=self.unique_id,
        )

        if self.condition == TallyCondition.WINNER:
            result.winner = self.tally.candidates(CandidateStatus.ACTIVE)[0]
        elif self.condition == TallyCondition.TIE:
            result.tied = self.tally.candidates(CandidateStatus.MINVOTES)
        elif self.condition == TallyCondition.ERROR:
            result.error = self.tally.error

        return result
