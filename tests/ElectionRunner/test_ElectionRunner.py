import pytest
import pandas as pd

from rcv_tally.candidates import CandidateStatus
from rcv_tally.election import ElectionResult, ElectionRunner
from rcv_tally.errors import TallyInvariantError
from rcv_tally.tables import write_round_by_round_table
from rcv_tally.tally import Tally, TallyCondition

scenario_a = {
    "candidates": ["Francis", "Claire", "Heather", "Viktor"],
    "ranks": [
        [0, 3, 2, 1],
        [1, 0, 2, 3],
        [2, 1, 0, 3],
        [2, 1, 0, 3],
        [1, 0, 2, 3],
        [0, 2, 1, 3],
    ],
}

three_rounds = {
    "candidates": ["Francis", "Claire", "Heather", "Viktor"],
    "ranks": [
        [0, 1, 2, 3],
        [0, 2, 1, 3],
        [0, 3, 1, 2],
        [0, 1, 3, 2],
        [1, 0, 2, 3],
        [1, 0, 3, 2],
        [2, 1, 0, 3],
        [2, 3, 1, 0],
        [2, 0, 1, 3],
        [2, 1, 3, 0],
        [2, 3, 0, 1],
        [3, 0, 1, 2],
    ],
}


params = [
    ({
        'input': scenario_a,
        'expected': {
            'condition': TallyCondition.TIE,
            'winner': None,
            'tied': ["Francis", "Claire", "Heather"],
            'n_rounds': 2,
            'outcome': "Multiway Tie Between:\nFrancis (candidate 0)\nClaire (candidate 1)\nHeather (candidate 2)",
        }
    }),
    ({
        'input': three_rounds,
        'expected': {
            'condition': TallyCondition.WINNER,
            'winner': "Francis",
            'tied': [],
            'n_rounds': 3,
            'outcome': "Winner: Francis (candidate 0)",
        }
    }),
    ({
        'input': {"candidates": ["A", "B", "C"], "ranks": [[0, 1, 2], [0, 2, 1], [1, 0, 2], [2, 1, 0], [0, 1, 2]]},
        'expected': {
            'condition': TallyCondition.WINNER,
            'winner': "A",
            'tied': [],
            'n_rounds': 1,
            'outcome': "Winner: A (candidate 0)",
        }
    }),
    ({
        'input': {"candidates": ["A", "B"], "ranks": [[0, 1], [1, 0]]},
        'expected': {
            'condition': TallyCondition.TIE,
            'winner': None,
            'tied': ["A", "B"],
            'n_rounds': 1,
            'outcome': "Multiway Tie Between:\nA (candidate 0)\nB (candidate 1)",
        }
    }),
]


@pytest.mark.parametrize("param_dict", params)
def test_run(param_dict):

    result = ElectionRunner(Tally(parsed_cvr=param_dict['input'])).run()
    expected = param_dict['expected']

    assert result.condition == expected['condition']
    assert (result.winner.name if result.winner else None) == expected['winner']
    assert [c.name for c in result.tied] == expected['tied']
    assert result.n_rounds == expected['n_rounds']
    assert result.get_outcome_text() == expected['outcome']
    assert result.error is None


def test_run_scenario_a_rounds():

    result = ElectionRunner(Tally(parsed_cvr=scenario_a)).run()
    first, second = result.rounds

    assert first.table["count"].tolist() == [2, 2, 2, 0]
    assert first.table["status"].tolist() == ["A", "A", "A", "A"]
    assert second.table["count"].iloc[:3].tolist() == [2, 2, 2]
    assert second.table["status"].tolist() == ["A", "A", "A", "D"]


@pytest.mark.parametrize("candidates, ranks", [(["Solo"], [[0], [0]]), ([], [])])
def test_run_error(candidates, ranks):

    result = ElectionRunner(Tally(parsed_cvr={"candidates": candidates, "ranks": ranks})).run()

    assert result.condition == TallyCondition.ERROR
    assert isinstance(result.error, TallyInvariantError)
    assert result.winner is None
    assert result.get_outcome_text() == "Something is rotten in the state of Denmark"


def test_round_iter_invariants():

    tally = Tally(parsed_cvr=three_rounds)
    runner = ElectionRunner(tally)

    dropped = set()
    for snapshot in runner.round_iter():

        assert snapshot.number == runner.round_num
        assert len(tally.partition) == tally.ballots_loaded
        for c in tally.candidates():
            assert c.vote_count == len(tally.partition.bucket(c.id))

        now_dropped = {c.id for c in tally.candidates(CandidateStatus.DROPPED)}
        assert dropped <= now_dropped
        for cid in now_dropped:
            assert tally.partition.is_empty(cid)
        dropped = now_dropped

    assert runner.condition == TallyCondition.WINNER


def test_on_round_start():

    started = []
    runner = ElectionRunner(Tally(parsed_cvr=three_rounds), on_round_start=started.append)
    runner.run()

    assert started == [1, 2, 3]


@pytest.mark.parametrize("log_level, has_votes_text", [(0, False), (2, False), (3, True)])
def test_votes_text(log_level, has_votes_text):

    result = ElectionRunner(Tally(parsed_cvr=scenario_a, log_level=log_level)).run()

    for snapshot in result.rounds:
        assert (snapshot.votes_text is not None) == has_votes_text


def test_snapshot_table_text():

    result = ElectionRunner(Tally(parsed_cvr=scenario_a)).run()

    assert result.rounds[1].get_table_text().splitlines() == [
        "NUM COUNT %PERC S NAME",
        "  0     2  33.3 A Francis   ",
        "  1     2  33.3 A Claire    ",
        "  2     2  33.3 A Heather   ",
        "  3     -     - D Viktor    ",
    ]


def test_round_by_round_table():

    result = ElectionRunner(Tally(parsed_cvr=three_rounds)).run()
    df = result.get_round_by_round_table()

    assert df["candidate"].tolist() == ["Francis", "Claire", "Heather", "Viktor", "invalid"]
    assert list(df.columns) == [
        "candidate",
        "r1_count", "r1_percent", "r1_status",
        "r2_count", "r2_percent", "r2_status",
        "r3_count", "r3_percent", "r3_status",
    ]
    assert df["r1_count"].tolist() == [4, 2, 5, 1, 0]
    assert df["r3_count"].iloc[[0, 2]].tolist() == [7, 5]
    assert pd.isna(df["r3_count"].iloc[1])
    assert df["r3_status"].iloc[:4].tolist() == ["A", "D", "A", "D"]


def test_round_by_round_table_empty():

    df = ElectionResult(condition=TallyCondition.ERROR).get_round_by_round_table()

    assert list(df.columns) == ["candidate"]
    assert df.empty


def test_write_round_by_round_table(tmp_path):

    result = ElectionRunner(Tally(parsed_cvr=scenario_a), unique_id="scenario_a").run()

    outfile = write_round_by_round_table(result, tmp_path)

    assert outfile == tmp_path / "round_by_round_table" / "scenario_a.csv"
    written = pd.read_csv(outfile)
    assert written["candidate"].tolist() == ["Francis", "Claire", "Heather", "Viktor", "invalid"]
    assert written["r1_count"].tolist() == [2, 2, 2, 0, 0]

    renamed = write_round_by_round_table(result, tmp_path, uid="other")
    assert renamed.name == "other.csv"
