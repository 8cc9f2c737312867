"""
Exception types raised by viterbihmm.

All of them derive from ValueError so that callers treating bad input as a
ValueError (as numpy and scipy do) keep working.
"""


class ViterbiError(ValueError):
    """Base class for every error raised by the decoder and its readers."""


class EmptySequenceError(ViterbiError):
    """The observation sequence has no entries."""


class InvalidObservationError(ViterbiError):
    """An observation lies outside the emission model's domain."""


class ModelParameterError(ViterbiError):
    """Transition, start or emission parameters are malformed."""


class LengthMismatchError(ViterbiError):
    """A reference state file does not match the observation sequence length."""


class SequenceFileError(ViterbiError):
    """A sequence file line could not be parsed."""
