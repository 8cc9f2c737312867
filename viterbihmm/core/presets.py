"""
Model presets.

CASINO: the "occasionally dishonest casino" of Durbin et al., Biological
Sequence Analysis (1998), p. 54. State 0 is the fair die (F), state 1 the
loaded die (L), which rolls a six half of the time. Rolls are read 1-based.

POISSON: count data with a low-rate and a high-rate state, labelled 1 and 2.
"""

from typing import Optional, Sequence

import numpy as np

from viterbihmm.core.emission import CategoricalEmission, PoissonEmission
from viterbihmm.core.hmm import TwoStateHMM


CASINO_TRANSMAT = np.array([
    [0.95, 0.05],
    [0.10, 0.90],
])

CASINO_EMISSIONPROB = np.array([
    [1/6, 1/6, 1/6, 1/6, 1/6, 1/6],  # F: fair
    [0.1, 0.1, 0.1, 0.1, 0.1, 0.5],  # L: loaded towards six
])

CASINO_LABELS = ('F', 'L')

POISSON_TRANSMAT = np.array([
    [0.9551, 0.0449],
    [0.0880, 0.9120],
])

POISSON_RATES = (1.8234, 5.7812)

POISSON_LABELS = (1, 2)


def casino_model(transmat: Optional[np.ndarray] = None,
                 startprob: Optional[np.ndarray] = None,
                 emit_initial: bool = False) -> TwoStateHMM:
    """Fair/loaded die model; observations are 0-based faces (0..5)."""
    return TwoStateHMM(
        CategoricalEmission(CASINO_EMISSIONPROB),
        transmat=CASINO_TRANSMAT if transmat is None else transmat,
        startprob=startprob,
        labels=CASINO_LABELS,
        emit_initial=emit_initial,
    )


def poisson_model(rates: Optional[Sequence[float]] = None,
                  transmat: Optional[np.ndarray] = None,
                  startprob: Optional[np.ndarray] = None,
                  emit_initial: bool = False) -> TwoStateHMM:
    """Low/high rate Poisson count model."""
    return TwoStateHMM(
        PoissonEmission(POISSON_RATES if rates is None else rates),
        transmat=POISSON_TRANSMAT if transmat is None else transmat,
        startprob=startprob,
        labels=POISSON_LABELS,
        emit_initial=emit_initial,
    )


# name -> (factory, input symbols are 1-based)
MODEL_PRESETS = {
    'casino': (casino_model, True),
    'poisson': (poisson_model, False),
}
