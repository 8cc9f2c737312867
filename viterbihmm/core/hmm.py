"""
viterbihmm HMM module

Provides:
1. Viterbi decoding for a 2-state HMM in log space
2. The forward algorithm (sequence log-likelihood)
3. TwoStateHMM, an estimator-style wrapper holding the model parameters

Emission scoring is delegated to an EmissionModel (categorical or Poisson),
so a single recurrence serves every emission variant.

Seeding: best_log_prob[:, 0] is the log start distribution. Observation 0 is
only scored when emit_initial=True; by default it conditions nothing, and
the path value at position 0 comes from the back-pointer stored at t=1.
Ties go to the lower state index everywhere.
"""

import warnings
import numpy as np
from typing import Optional, Sequence, Tuple, List, Any

from scipy.special import logsumexp

from viterbihmm.core.emission import EmissionModel
from viterbihmm.core.errors import EmptySequenceError, ModelParameterError


# log start distributions for the two seeding modes
LOG_START_CERTAIN = np.array([0.0, -np.inf])
LOG_START_UNIFORM = np.log(np.array([0.5, 0.5]))


def _as_float_array(values, name: str) -> np.ndarray:
    try:
        return np.asarray(values, dtype=float)
    except (TypeError, ValueError) as e:
        raise ModelParameterError(f"{name} is not a numeric array: {e}") from None


def _check_log_transmat(log_transmat, warn: bool = True) -> np.ndarray:
    """Validate a 2x2 log transition matrix, warning on non-stochastic rows."""
    log_transmat = _as_float_array(log_transmat, "Transition matrix")
    if log_transmat.shape != (2, 2):
        raise ModelParameterError(
            f"Transition matrix must have shape (2, 2), got {log_transmat.shape}"
        )
    if np.any(np.isnan(log_transmat)) or np.any(log_transmat == np.inf):
        raise ModelParameterError("Log transition matrix contains NaN or +inf")

    row_sums = np.exp(log_transmat).sum(axis=1)
    if warn and not np.allclose(row_sums, 1.0, atol=1e-6):
        warnings.warn(
            f"Transition rows sum to {row_sums.tolist()} in linear space, not 1",
            RuntimeWarning,
        )
    return log_transmat


def _check_log_startprob(log_startprob) -> np.ndarray:
    log_startprob = _as_float_array(log_startprob, "Start distribution")
    if log_startprob.shape != (2,) or np.any(np.isnan(log_startprob)):
        raise ModelParameterError(
            f"Start distribution must be 2 log-probabilities, got {log_startprob!r}"
        )
    if np.all(log_startprob == -np.inf):
        raise ModelParameterError("Start distribution assigns zero probability to both states")
    return log_startprob


def _check_log_emit(log_emit) -> np.ndarray:
    log_emit = _as_float_array(log_emit, "Emission matrix")
    if log_emit.ndim != 2 or log_emit.shape[1] != 2:
        raise ModelParameterError(f"Emission matrix must have shape (T, 2), got {log_emit.shape}")
    if log_emit.shape[0] == 0:
        raise EmptySequenceError("Observation sequence is empty")
    if np.any(np.isnan(log_emit)):
        raise ModelParameterError("Emission matrix contains NaN")
    return log_emit


def _check_inputs(log_emit, log_startprob, log_transmat):
    """Coerce and validate the arrays passed to viterbi() and forward()."""
    return (_check_log_emit(log_emit),
            _check_log_startprob(log_startprob),
            _check_log_transmat(log_transmat, warn=False))


def initial_log_startprob(initial_state_certain: bool = True) -> np.ndarray:
    """Log start distribution: state 0 certain, or uniform over both states."""
    if initial_state_certain:
        return LOG_START_CERTAIN.copy()
    return LOG_START_UNIFORM.copy()


def viterbi(log_emit: np.ndarray, log_startprob: np.ndarray,
            log_transmat: np.ndarray,
            emit_initial: bool = False) -> Tuple[np.ndarray, float]:
    """
    Viterbi algorithm for most likely state sequence.

    Args:
        log_emit: (T, 2) log emission probabilities, row t for observation t
        log_startprob: (2,) log start probabilities
        log_transmat: (2, 2) log transition matrix, [from, to]
        emit_initial: Add observation 0's emission to the seed

    Returns:
        path: Most likely state sequence (int8, length T)
        log_prob: Log probability of the path
    """
    log_emit, log_startprob, log_transmat = _check_inputs(log_emit, log_startprob, log_transmat)
    T = log_emit.shape[0]

    log_trans_00 = log_transmat[0, 0]
    log_trans_01 = log_transmat[0, 1]
    log_trans_10 = log_transmat[1, 0]
    log_trans_11 = log_transmat[1, 1]

    # DP table, indexed [state, t]
    best_log_prob = np.empty((2, T))
    back_pointer = np.zeros((2, T), dtype=np.int8)

    best_log_prob[:, 0] = log_startprob
    if emit_initial:
        best_log_prob[:, 0] += log_emit[0]

    for t in range(1, T):
        v0_prev = best_log_prob[0, t-1]
        v1_prev = best_log_prob[1, t-1]

        from_0_to_0 = v0_prev + log_trans_00
        from_1_to_0 = v1_prev + log_trans_10
        if from_0_to_0 >= from_1_to_0:
            best_log_prob[0, t] = from_0_to_0 + log_emit[t, 0]
            back_pointer[0, t] = 0
        else:
            best_log_prob[0, t] = from_1_to_0 + log_emit[t, 0]
            back_pointer[0, t] = 1

        from_0_to_1 = v0_prev + log_trans_01
        from_1_to_1 = v1_prev + log_trans_11
        if from_0_to_1 >= from_1_to_1:
            best_log_prob[1, t] = from_0_to_1 + log_emit[t, 1]
            back_pointer[1, t] = 0
        else:
            best_log_prob[1, t] = from_1_to_1 + log_emit[t, 1]
            back_pointer[1, t] = 1

    path = np.zeros(T, dtype=np.int8)
    if best_log_prob[0, -1] >= best_log_prob[1, -1]:
        path[-1] = 0
    else:
        path[-1] = 1
    log_prob = float(best_log_prob[path[-1], -1])

    # t=0 included: path[0] is the predecessor recorded at t=1
    for t in range(T - 2, -1, -1):
        path[t] = back_pointer[path[t + 1], t + 1]

    return path, log_prob


def forward(log_emit: np.ndarray, log_startprob: np.ndarray,
            log_transmat: np.ndarray,
            emit_initial: bool = False) -> Tuple[np.ndarray, float]:
    """
    Forward algorithm in log space, seeded the same way as viterbi().

    Returns:
        alpha: Forward log probabilities (T x 2)
        log_prob: Log probability of the observation sequence
    """
    log_emit, log_startprob, log_transmat = _check_inputs(log_emit, log_startprob, log_transmat)
    T = log_emit.shape[0]
    alpha = np.empty((T, 2))

    alpha[0] = log_startprob
    if emit_initial:
        alpha[0] += log_emit[0]

    # unreachable states give logsumexp over all -inf
    with np.errstate(divide='ignore'):
        for t in range(1, T):
            alpha[t] = logsumexp(alpha[t-1][:, np.newaxis] + log_transmat, axis=0) + log_emit[t]
        log_prob = float(logsumexp(alpha[-1]))

    return alpha, log_prob


def decode(observations, transition, emission: EmissionModel,
           initial_state_certain: bool = True,
           labels: Optional[Sequence[Any]] = None,
           emit_initial: bool = False) -> List[Any]:
    """
    Decode the most probable state path.

    Args:
        observations: Observation sequence (symbol indices or counts), length >= 1
        transition: (2, 2) LOG transition matrix, transition[i][j] = log P(j | i)
        emission: Emission model scoring each observation per state
        initial_state_certain: Seed with state 0 certain (True) or uniform (False)
        labels: Labels for states 0 and 1 (default: the ints 0 and 1)
        emit_initial: Score observation 0 as well

    Returns:
        List of T state labels

    Raises:
        EmptySequenceError, InvalidObservationError, ModelParameterError
    """
    log_transmat = _check_log_transmat(transition)
    log_emit = emission.log_emissions(observations)

    path, _ = viterbi(log_emit, initial_log_startprob(initial_state_certain),
                      log_transmat, emit_initial=emit_initial)

    if labels is None:
        return [int(s) for s in path]
    return label_path(path, labels)


def label_path(path: np.ndarray, labels: Sequence[Any]) -> List[Any]:
    """Map a 0/1 state path to caller labels."""
    if len(labels) != 2:
        raise ModelParameterError(f"Expected 2 state labels, got {len(labels)}")
    return [labels[s] for s in path]


class TwoStateHMM:
    """
    2-state HMM with fixed parameters, decoded by Viterbi.

    Attributes follow the hmmlearn naming convention:
        startprob_: (2,) start probabilities, None means state 0 certain
        transmat_: (2, 2) transition probabilities (linear space)
        emission_: EmissionModel

    This implementation uses log probabilities throughout for numerical stability.
    """

    def __init__(self, emission: EmissionModel,
                 transmat=None, startprob=None,
                 labels: Sequence[Any] = (0, 1),
                 emit_initial: bool = False):
        self.emission_ = emission
        self.transmat_: Optional[np.ndarray] = None if transmat is None else np.asarray(transmat, dtype=float)
        self.startprob_: Optional[np.ndarray] = None if startprob is None else np.asarray(startprob, dtype=float)
        self.labels = tuple(labels)
        self.emit_initial = emit_initial

        # Log versions (computed when needed)
        self._log_startprob: Optional[np.ndarray] = None
        self._log_transmat: Optional[np.ndarray] = None

    def _compute_log_probs(self):
        """Convert probabilities to log space."""
        if self.transmat_ is None:
            raise ModelParameterError("transmat_ is not set")
        with np.errstate(divide='ignore', invalid='ignore'):  # Handle log(0) gracefully
            self._log_transmat = _check_log_transmat(np.log(self.transmat_))
            if self.startprob_ is None:
                self._log_startprob = initial_log_startprob(True)
            else:
                self._log_startprob = _check_log_startprob(np.log(self.startprob_))

    def _log_emit(self, X) -> np.ndarray:
        return self.emission_.log_emissions(X)

    def decode(self, X) -> Tuple[np.ndarray, float]:
        """
        Most likely state sequence and its log probability.

        Args:
            X: Observation sequence, shape (T, 1) or (T,)

        Returns:
            path: State sequence, shape (T,)
            log_prob: Log probability of the path
        """
        self._compute_log_probs()
        return viterbi(self._log_emit(X), self._log_startprob, self._log_transmat,
                       emit_initial=self.emit_initial)

    def predict(self, X) -> np.ndarray:
        """Predict most likely state sequence (0/1) using Viterbi."""
        path, _ = self.decode(X)
        return path

    def predict_labels(self, X) -> List[Any]:
        """Predict the Viterbi path mapped to self.labels."""
        return label_path(self.predict(X), self.labels)

    def score(self, X) -> float:
        """Log probability of the observation sequence (forward algorithm)."""
        self._compute_log_probs()
        _, log_prob = forward(self._log_emit(X), self._log_startprob, self._log_transmat,
                              emit_initial=self.emit_initial)
        return log_prob

    def __repr__(self):
        return (f"TwoStateHMM(emission={self.emission_!r}, "
                f"transmat={None if self.transmat_ is None else self.transmat_.tolist()}, "
                f"labels={self.labels})")
