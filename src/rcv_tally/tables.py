"""Contains Tally_tables class which is added into Tally, plus the text and CSV renderings of its tables.
"""
from __future__ import annotations
from typing import TYPE_CHECKING, List, Optional, Union

import pathlib
import re

import pandas as pd

import rcv_tally.util as util
from rcv_tally.candidates import CandidateStatus

if TYPE_CHECKING:
    from rcv_tally.election import ElectionResult, RoundSnapshot

ROUND_TABLE_COLUMNS = ["num", "count", "percent", "status", "name"]
ROUND_TABLE_HEADER = "NUM COUNT %PERC S NAME"

_row_pattern = re.compile(r"^\s*(\d+)\s+(-|\d+)\s+(-|\d+\.\d)\s+([AMD])\s(.*)$")
_invalid_pattern = re.compile(r"^Invalid vote count: (\d+)$")


class Tally_tables:
    """Extra methods added into Tally class"""

    def get_round_table(self) -> pd.DataFrame:
        """
        Snapshot of the tally as a data frame with one row per candidate, in candidate id order.

        Columns are num, count, percent, status (A/M/D letter) and name. Count and percent are
        withheld (<NA>/NaN) for dropped candidates. Percent is the share of all votes currently held
        by candidates, rounded to one decimal place, and 0.0 when no candidate holds any.

        :rtype: pd.DataFrame
        """
        total = self.registry.total_votes()

        rows = []
        for c in self.registry:
            dropped = c.status == CandidateStatus.DROPPED
            rows.append(
                {
                    "num": c.id,
                    "count": None if dropped else c.vote_count,
                    "percent": None if dropped else util.percent(c.vote_count, total),
                    "status": c.status.letter,
                    "name": c.name,
                }
            )

        return _round_table_frame(rows)

    def get_votes_text(self) -> str:
        """
        Every ballot grouped by the candidate it currently counts for. Lists invalid ballots last, if any.

        :rtype: str
        """
        lines = []
        for c in self.registry:
            lines.append(f"VOTES FOR CANDIDATE {c.id}: {c.name}")
            bucket = self.partition.bucket(c.id)
            lines.extend(f"  {ballot}" for ballot in bucket)
            lines.append(f"{len(bucket)} votes total")

        invalid = self.partition.invalid_ballots()
        if invalid:
            lines.append("INVALID VOTES")
            lines.extend(f"  {ballot}" for ballot in invalid)
            lines.append(f"{len(invalid)} votes total")

        return "\n".join(lines)


def _round_table_frame(rows: List[dict]) -> pd.DataFrame:
    df = pd.DataFrame(rows, columns=ROUND_TABLE_COLUMNS)
    df["num"] = df["num"].astype(int)
    df["count"] = pd.array([r["count"] for r in rows], dtype="Int64")
    df["percent"] = df["percent"].astype(float)
    return df


def format_round_table(df: pd.DataFrame, invalid_vote_count: int = 0) -> str:
    """Render a round table as fixed width text.

    NUM COUNT %PERC S NAME
      0     4  57.1 A Francis
      1     1  14.3 M Claire
      2     -     - D Heather

    :param df: Table from `Tally.get_round_table`
    :type df: pd.DataFrame
    :param invalid_vote_count: When positive, a closing "Invalid vote count: N" line is added, defaults to 0
    :type invalid_vote_count: int, optional
    :rtype: str
    """
    lines = [ROUND_TABLE_HEADER]
    for _, row in df.iterrows():
        num, status, name = int(row["num"]), row["status"], row["name"]
        if pd.isna(row["count"]):
            lines.append(f"{num:3d}     -     - {status} {name:<10}")
        else:
            lines.append(f"{num:3d} {int(row['count']):5d} {float(row['percent']):5.1f} {status} {name:<10}")

    if invalid_vote_count > 0:
        lines.append(f"Invalid vote count: {invalid_vote_count}")

    return "\n".join(lines)


def read_round_table(text: str) -> pd.DataFrame:
    """Re-derive a round table from the text produced by `format_round_table`.

    The invalid vote count line, if present, is stored in ``df.attrs["invalid_vote_count"]``.
    Trailing spaces after a name are taken as padding, so names must not end in whitespace.

    :raises ValueError: A line is neither the header, a candidate row, nor the invalid vote count.
    :rtype: pd.DataFrame
    """
    rows = []
    invalid_vote_count = 0

    for line in text.splitlines():
        if not line.strip() or line.strip() == ROUND_TABLE_HEADER:
            continue

        invalid_match = _invalid_pattern.match(line)
        if invalid_match:
            invalid_vote_count = int(invalid_match.group(1))
            continue

        row_match = _row_pattern.match(line)
        if not row_match:
            raise ValueError(f"unrecognized round table line: {line!r}")

        num, count, perc, status, name = row_match.groups()
        rows.append(
            {
                "num": int(num),
                "count": None if count == "-" else int(count),
                "percent": None if perc == "-" else float(perc),
                "status": status,
                "name": name.rstrip(),
            }
        )

    df = _round_table_frame(rows)
    df.attrs["invalid_vote_count"] = invalid_vote_count
    return df


def round_by_round_table(rounds: List[RoundSnapshot]) -> pd.DataFrame:
    """Combine per-round snapshots into a single table.

    One row per candidate plus a final 'invalid' row. For every round N there are columns
    rN_count, rN_percent and rN_status.

    :param rounds: Snapshots in round order, as returned in `ElectionResult.rounds`
    :type rounds: List[RoundSnapshot]
    :rtype: pd.DataFrame
    """
    if not rounds:
        return pd.DataFrame(columns=["candidate"])

    row_names = rounds[0].table["name"].tolist() + ["invalid"]
    rbr_df = pd.DataFrame({"candidate": row_names})

    for snapshot in rounds:
        prefix = f"r{snapshot.number}"
        table = snapshot.table
        rbr_df[f"{prefix}_count"] = pd.array(table["count"].tolist() + [snapshot.invalid_vote_count], dtype="Int64")
        rbr_df[f"{prefix}_percent"] = table["percent"].tolist() + [float("nan")]
        rbr_df[f"{prefix}_status"] = table["status"].tolist() + [None]

    return rbr_df


def write_round_by_round_table(
    result: ElectionResult, save_dir: Union[str, pathlib.Path], uid: Optional[str] = None
) -> pathlib.Path:
    """Write the round by round table to '{save_dir}/round_by_round_table/{uid}.csv'

    :param result: Finished election
    :type result: ElectionResult
    :param save_dir: Directory in which the "round_by_round_table" directory is created
    :type save_dir: Union[str, pathlib.Path]
    :param uid: File stem, defaults to the result's unique_id
    :type uid: Optional[str], optional
    :return: Path of the written file
    :rtype: pathlib.Path
    """
    save_path = pathlib.Path(save_dir) / "round_by_round_table"
    save_path.mkdir(parents=True, exist_ok=True)

    outfile = save_path / f"{uid or result.unique_id}.csv"
    round_by_round_table(result.rounds).to_csv(outfile, index=False)
    return outfile
