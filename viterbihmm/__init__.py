"""
viterbihmm - Viterbi decoding for two-state Hidden Markov Models
with categorical (die-face) or Poisson (count) emissions.
"""

__version__ = "1.0.0"

from viterbihmm.core.hmm import TwoStateHMM, decode, viterbi
from viterbihmm.core.emission import EmissionModel, CategoricalEmission, PoissonEmission
from viterbihmm.core.presets import casino_model, poisson_model
