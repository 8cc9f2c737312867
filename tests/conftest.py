"""
Shared pytest fixtures for viterbihmm tests.
"""
import itertools

import pytest
import numpy as np
import tempfile


@pytest.fixture
def casino_emission():
    """Fair (state 0) and loaded (state 1) die over faces 0..5."""
    from viterbihmm.core.emission import CategoricalEmission
    from viterbihmm.core.presets import CASINO_EMISSIONPROB

    return CategoricalEmission(CASINO_EMISSIONPROB)


@pytest.fixture
def casino_log_transmat():
    from viterbihmm.core.presets import CASINO_TRANSMAT

    return np.log(CASINO_TRANSMAT)


@pytest.fixture
def poisson_emission():
    from viterbihmm.core.emission import PoissonEmission
    from viterbihmm.core.presets import POISSON_RATES

    return PoissonEmission(POISSON_RATES)


@pytest.fixture
def sixes_run_rolls():
    """
    0-based die faces: 20 non-six rolls, 20 sixes, 20 non-six rolls.
    The middle block should decode as the loaded die.
    """
    fair = [0, 1, 2, 3, 4] * 4
    return np.array(fair + [5] * 20 + fair, dtype=np.int64)


@pytest.fixture
def changepoint_counts():
    """30 counts near the low rate followed by 30 near the high rate."""
    low = [1, 2, 1, 0, 2, 3, 1, 2, 1, 1] * 3
    high = [6, 7, 5, 8, 6, 7, 9, 5, 6, 7] * 3
    return np.array(low + high, dtype=np.int64)


@pytest.fixture
def temp_dir():
    """Temporary directory for file operations."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


def brute_force_path(log_emit, log_startprob, log_transmat, emit_initial=False):
    """Score every one of the 2^T paths and return the best (path, log_prob)."""
    T = log_emit.shape[0]
    best_path, best_score = None, -np.inf
    for path in itertools.product((0, 1), repeat=T):
        score = log_startprob[path[0]]
        if emit_initial:
            score += log_emit[0, path[0]]
        for t in range(1, T):
            score += log_transmat[path[t - 1], path[t]] + log_emit[t, path[t]]
        if score > best_score:
            best_path, best_score = path, score
    return np.array(best_path), best_score


@pytest.fixture
def brute_force():
    return brute_force_path
