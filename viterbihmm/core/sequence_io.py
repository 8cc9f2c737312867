"""
Line-oriented readers and display helpers for the decode CLI.

Sequence files hold one integer per line (a 1-based die face or a raw
count). State files hold one reference label per line, optionally
preceded by an index column ("12 2").
"""

from typing import Any, List, Optional, Sequence, Tuple

import numpy as np

from viterbihmm.core.errors import (
    EmptySequenceError,
    LengthMismatchError,
    SequenceFileError,
)

INT64_MIN = int(np.iinfo(np.int64).min)
INT64_MAX = int(np.iinfo(np.int64).max)


def read_sequence_file(filepath: str, one_based: bool = False) -> np.ndarray:
    """
    Read an observation sequence, one integer per line.

    Args:
        filepath: Path to sequence file
        one_based: Values are 1-based symbols; shift them to 0-based

    Returns:
        int64 array of observations

    Raises:
        OSError: if the file cannot be opened
        SequenceFileError: on a non-integer line, a value outside int64, or a
            1-based value below 1
        EmptySequenceError: if the file holds no values
    """
    values = []
    with open(filepath, 'r') as f:
        for lineno, line in enumerate(f, start=1):
            token = line.strip()
            if not token:
                continue
            try:
                value = int(token)
            except ValueError:
                raise SequenceFileError(
                    f"{filepath}:{lineno}: expected an integer, got {token!r}"
                ) from None
            if one_based:
                if value < 1:
                    raise SequenceFileError(
                        f"{filepath}:{lineno}: symbol {value} is not a valid 1-based symbol"
                    )
                value -= 1
            if not INT64_MIN <= value <= INT64_MAX:
                raise SequenceFileError(
                    f"{filepath}:{lineno}: value {token} is outside the int64 range"
                )
            values.append(value)

    if not values:
        raise EmptySequenceError(f"{filepath} contains no observations")

    return np.array(values, dtype=np.int64)


def read_state_file(filepath: str, expected_length: Optional[int] = None) -> List[str]:
    """
    Read reference state labels, one per line.

    Lines with several fields keep the last one, so both "F" and "12 2"
    layouts are accepted.

    Raises:
        OSError: if the file cannot be opened
        LengthMismatchError: if expected_length is given and differs
    """
    labels = []
    with open(filepath, 'r') as f:
        for line in f:
            fields = line.split()
            if fields:
                labels.append(fields[-1])

    if expected_length is not None and len(labels) != expected_length:
        raise LengthMismatchError(
            f"{filepath} has {len(labels)} states but the sequence has {expected_length} observations"
        )

    return labels


def format_wrapped(labels: Sequence[Any], width: int = 60) -> str:
    """Concatenate labels into one string, breaking lines every `width` characters."""
    if width < 1:
        raise ValueError(f"width must be positive, got {width}")
    text = ''.join(str(label) for label in labels)
    return '\n'.join(text[i:i + width] for i in range(0, len(text), width))


def path_agreement(decoded: Sequence[Any], reference: Sequence[Any]) -> Tuple[int, int]:
    """
    Count positions where the decoded and reference labels agree.

    Labels are compared as strings, so decoded ints match "1"/"2" read from a file.

    Returns:
        (matches, total)
    """
    if len(decoded) != len(reference):
        raise LengthMismatchError(
            f"Decoded path has {len(decoded)} states, reference has {len(reference)}"
        )
    matches = sum(1 for d, r in zip(decoded, reference) if str(d) == str(r))
    return matches, len(decoded)
