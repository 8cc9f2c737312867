"""Core HMM algorithms, emission models and sequence I/O."""

from viterbihmm.core.errors import (
    ViterbiError,
    EmptySequenceError,
    InvalidObservationError,
    ModelParameterError,
    LengthMismatchError,
    SequenceFileError,
)
from viterbihmm.core.emission import EmissionModel, CategoricalEmission, PoissonEmission
from viterbihmm.core.hmm import TwoStateHMM, decode, viterbi, forward
from viterbihmm.core.sequence_io import read_sequence_file, read_state_file, format_wrapped
