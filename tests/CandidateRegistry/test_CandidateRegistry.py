import pytest

from rcv_tally.candidates import Candidate, CandidateRegistry, CandidateStatus


def test_constructor():

    registry = CandidateRegistry(["Francis", "Claire", "Heather"])

    assert len(registry) == 3
    assert registry.names == ["Francis", "Claire", "Heather"]
    assert [c.id for c in registry] == [0, 1, 2]
    assert registry.statuses() == [CandidateStatus.ACTIVE] * 3
    assert registry.total_votes() == 0


def test_empty():

    registry = CandidateRegistry([])

    assert len(registry) == 0
    assert registry.names == []
    assert registry.total_votes() == 0


def test_getitem():

    registry = CandidateRegistry(["Francis", "Claire"])

    assert registry[1] == Candidate(1, "Claire")
    assert str(registry[1]) == "Claire"


def test_with_status():

    registry = CandidateRegistry(["A", "B", "C", "D"])
    registry[1].status = CandidateStatus.MINVOTES
    registry[3].status = CandidateStatus.MINVOTES
    registry[2].status = CandidateStatus.DROPPED

    assert [c.id for c in registry.with_status(CandidateStatus.ACTIVE)] == [0]
    assert [c.id for c in registry.with_status(CandidateStatus.MINVOTES)] == [1, 3]
    assert [c.id for c in registry.with_status(CandidateStatus.DROPPED)] == [2]


def test_total_votes():

    registry = CandidateRegistry(["A", "B", "C"])
    registry[0].vote_count = 4
    registry[2].vote_count = 3

    assert registry.total_votes() == 7


params = [
    ({'input': 'A', 'expected': CandidateStatus.ACTIVE}),
    ({'input': 'M', 'expected': CandidateStatus.MINVOTES}),
    ({'input': 'D', 'expected': CandidateStatus.DROPPED}),
]


@pytest.mark.parametrize("param_dict", params)
def test_status_letters(param_dict):

    status = CandidateStatus.from_letter(param_dict['input'])

    assert status == param_dict['expected']
    assert status.letter == param_dict['input']


def test_unknown_status_letter():

    with pytest.raises(ValueError):
        CandidateStatus.from_letter('X')
