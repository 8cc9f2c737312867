"""
Emission models for the two-state HMM.

An emission model turns an observation and a hidden state into
log P(observation | state). Two variants are provided:

1. CategoricalEmission: fixed (2 x n_symbols) probability table, e.g. the
   faces of a fair and a loaded die.
2. PoissonEmission: count-valued observations with one rate per state.

Both score a whole sequence in one vectorised pass (log_emissions), which is
what the Viterbi engine uses; log_emission scores a single cell.
"""

import warnings
from typing import Sequence

import numpy as np
from scipy.special import gammaln, xlogy

from viterbihmm.core.errors import (
    EmptySequenceError,
    InvalidObservationError,
    ModelParameterError,
    ViterbiError,
)


N_STATES = 2
INT64_MAX = np.iinfo(np.int64).max


def as_observations(X) -> np.ndarray:
    """
    Coerce an observation sequence to a flat int64 array.

    Accepts lists, (T,) arrays and (T, 1) column arrays. Float input is
    accepted only when every value is integral.

    Raises:
        EmptySequenceError: if the sequence has no entries
        InvalidObservationError: if a value is not an integer or does not fit
            in int64
    """
    obs = np.asarray(X)
    if obs.ndim != 1:
        obs = obs.reshape(-1)

    if obs.size == 0:
        raise EmptySequenceError("Observation sequence is empty")

    kind = obs.dtype.kind
    if kind == 'u':
        _first_invalid(obs, obs > INT64_MAX, "the int64 range")
    if kind in 'biu':
        return obs.astype(np.int64, copy=False)

    if kind == 'f':
        bad = ~np.isfinite(obs)
        bad[~bad] = obs[~bad] != np.floor(obs[~bad])
        if bad.any():
            i = int(np.argmax(bad))
            raise InvalidObservationError(
                f"Observation {obs[i]!r} at position {i} is not an integer"
            )
        # 2**63 itself is exactly representable and already out of range
        _first_invalid(obs, (obs >= 2.0 ** 63) | (obs < -2.0 ** 63), "the int64 range")
        return obs.astype(np.int64)

    raise InvalidObservationError(
        f"Observations must be integers, got dtype {obs.dtype}"
    )


def _check_state(state) -> int:
    if state not in (0, 1):
        raise ViterbiError(f"State must be 0 or 1, got {state!r}")
    return int(state)


def _first_invalid(obs: np.ndarray, bad: np.ndarray, domain: str):
    if bad.any():
        i = int(np.argmax(bad))
        raise InvalidObservationError(
            f"Observation {obs[i]} at position {i} is outside {domain}"
        )


class EmissionModel:
    """
    Base class for emission models.

    Subclasses implement _validate (raise on out-of-domain observations) and
    _log_pmf (return the (T, 2) log-probability matrix for validated
    observations). Models are immutable after construction and hold no
    per-call state, so one instance can serve concurrent decodes.
    """

    n_states = N_STATES

    def log_emission(self, observation, state) -> float:
        """Log-probability of emitting `observation` from `state`."""
        state = _check_state(state)
        obs = as_observations([observation])
        self._validate(obs)
        return float(self._log_pmf(obs)[0, state])

    def log_emissions(self, observations) -> np.ndarray:
        """
        Score a full sequence.

        Args:
            observations: Observation sequence, shape (T,) or (T, 1)

        Returns:
            Log emission probabilities, shape (T, 2)
        """
        obs = as_observations(observations)
        self._validate(obs)
        return self._log_pmf(obs)

    def _validate(self, obs: np.ndarray) -> None:
        raise NotImplementedError

    def _log_pmf(self, obs: np.ndarray) -> np.ndarray:
        raise NotImplementedError


class CategoricalEmission(EmissionModel):
    """
    Fixed emission table over a finite alphabet.

    emissionprob_[s, k] = P(symbol k | state s), one row per state.
    """

    def __init__(self, emissionprob):
        emissionprob = np.asarray(emissionprob, dtype=float)
        if emissionprob.ndim != 2 or emissionprob.shape[0] != N_STATES \
                or emissionprob.shape[1] == 0:
            raise ModelParameterError(
                f"Emission table must have shape (2, n_symbols), got {emissionprob.shape}"
            )
        if not np.all(np.isfinite(emissionprob)) or np.any(emissionprob < 0):
            raise ModelParameterError("Emission probabilities must be finite and non-negative")

        row_sums = emissionprob.sum(axis=1)
        if not np.allclose(row_sums, 1.0, atol=1e-6):
            warnings.warn(
                f"Emission rows sum to {row_sums.tolist()}, not 1",
                RuntimeWarning,
            )

        self.emissionprob_ = emissionprob
        with np.errstate(divide='ignore'):  # zero entries become -inf
            self.log_emissionprob_ = np.log(emissionprob)

    @property
    def n_symbols(self) -> int:
        return self.emissionprob_.shape[1]

    def _validate(self, obs):
        _first_invalid(obs, (obs < 0) | (obs >= self.n_symbols),
                       f"symbols 0..{self.n_symbols - 1}")

    def _log_pmf(self, obs):
        return self.log_emissionprob_[:, obs].T

    def __repr__(self):
        return f"CategoricalEmission(n_symbols={self.n_symbols})"


class PoissonEmission(EmissionModel):
    """
    Poisson-distributed counts with one rate per state.

    log P(k | s) = k*ln(rate_s) - rate_s - ln(k!), with ln(k!) taken as
    gammaln(k + 1) so large counts stay finite.
    """

    def __init__(self, rates: Sequence[float]):
        rates = np.asarray(rates, dtype=float).reshape(-1)
        if rates.shape != (N_STATES,):
            raise ModelParameterError(f"Expected 2 Poisson rates, got {rates.size}")
        if not np.all(np.isfinite(rates)) or np.any(rates <= 0):
            raise ModelParameterError(f"Poisson rates must be positive and finite, got {rates.tolist()}")

        self.rates_ = rates

    def _validate(self, obs):
        _first_invalid(obs, obs < 0, "non-negative counts")

    def _log_pmf(self, obs):
        k = obs.astype(float)[:, np.newaxis]
        return xlogy(k, self.rates_) - self.rates_ - gammaln(k + 1)

    def __repr__(self):
        return f"PoissonEmission(rates={self.rates_.tolist()})"
