from rcv_tally.ballots import Ballot
from rcv_tally.candidates import Candidate, CandidateRegistry, CandidateStatus
from rcv_tally.election import ElectionResult, ElectionRunner, RoundSnapshot
from rcv_tally.errors import AllocationError, InputError, TallyError, TallyInvariantError
from rcv_tally.partition import BallotPartition
from rcv_tally.tally import Tally, TallyCondition

__version__ = "0.1.0"
