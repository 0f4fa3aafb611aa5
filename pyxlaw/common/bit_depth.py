"""
Bit depth model shared by the codecs, the requantizer and the loudness meter.
Defines the legal sample bit depths and the signed integer range of each.
"""

from typing import Sequence, Union

import numpy as np

from pyxlaw.common.constants import RESERVED_BIT_DEPTHS, SUPPORTED_BIT_DEPTHS
from pyxlaw.common.errors import (
    EmptyInputError,
    InvalidBitDepthError,
    RangeError,
    UnsupportedFeatureError,
)

SampleInput = Union[Sequence[int], np.ndarray]

_SAMPLE_DTYPES = {
    8: np.int8,
    16: np.int16,
    24: np.int32,
    32: np.int32,
}


def validate_bit_depth(bit_depth: int) -> int:
    """
    Checks that a bit depth is one of the supported sample formats.

    Args:
        bit_depth: The bit depth to check.

    Returns:
        The bit depth as a plain int.

    Raises:
        UnsupportedFeatureError: For reserved depths (48) that are recognised
            but not implemented.
        InvalidBitDepthError: For any other depth outside SUPPORTED_BIT_DEPTHS.
    """
    is_integer = isinstance(bit_depth, (int, np.integer)) and not isinstance(bit_depth, bool)
    if is_integer and bit_depth in RESERVED_BIT_DEPTHS:
        raise UnsupportedFeatureError(f"{bit_depth}-bit samples are not implemented")
    if not is_integer or bit_depth not in SUPPORTED_BIT_DEPTHS:
        raise InvalidBitDepthError(
            f"Invalid bit depth {bit_depth!r}, supported values are "
            f"{', '.join(str(b) for b in SUPPORTED_BIT_DEPTHS)}"
        )
    return int(bit_depth)


def max_value(bit_depth: int) -> int:
    """Largest sample value at the given depth: 2^(b-1) - 1."""
    validate_bit_depth(bit_depth)
    return (1 << (bit_depth - 1)) - 1


def min_value(bit_depth: int) -> int:
    """Smallest sample value at the given depth: -2^(b-1)."""
    validate_bit_depth(bit_depth)
    return -(1 << (bit_depth - 1))


def sample_width(bit_depth: int) -> int:
    """Number of bytes used to pack one sample: ceil(b / 8)."""
    validate_bit_depth(bit_depth)
    return (bit_depth + 7) // 8


def sample_dtype(bit_depth: int) -> type:
    """Smallest numpy integer dtype able to hold every sample of the given depth."""
    validate_bit_depth(bit_depth)
    return _SAMPLE_DTYPES[bit_depth]


def validate_sample(sample: int, bit_depth: int) -> int:
    """
    Checks a single sample against the legal range of its bit depth.
    Values are never wrapped or clamped here.

    Raises:
        RangeError: If the sample lies outside [min_value, max_value].
    """
    lo = min_value(bit_depth)
    hi = max_value(bit_depth)
    if not lo <= sample <= hi:
        raise RangeError(
            f"Sample value {sample} is outside the {bit_depth}-bit range [{lo}, {hi}]"
        )
    if int(sample) != sample:
        raise RangeError(f"Sample value {sample!r} is not an integer")
    return int(sample)


def as_sample_array(
    samples: SampleInput, bit_depth: int, allow_empty: bool = False
) -> np.ndarray:
    """
    Converts a sample sequence to a 1-D int64 array, validating every element.

    Args:
        samples: Integer samples (list, tuple or numpy array).
        bit_depth: Declared bit depth of the samples.
        allow_empty: Whether a zero-length sequence is acceptable.

    Returns:
        An int64 numpy array holding the samples.

    Raises:
        EmptyInputError: If the sequence is empty and allow_empty is False.
        RangeError: Naming the first element outside the legal range.
    """
    validate_bit_depth(bit_depth)
    values = np.asarray(samples)
    if values.ndim != 1:
        values = values.reshape(-1)
    if values.size == 0:
        if not allow_empty:
            raise EmptyInputError("Invalid buffer, sample sequence must not be empty")
        return np.zeros(0, dtype=np.int64)

    if not np.issubdtype(values.dtype, np.integer):
        fractional = np.mod(values, 1) != 0
        if np.any(fractional):
            first = int(np.flatnonzero(fractional)[0])
            raise RangeError(
                f"Sample at index {first} is not an integer: {values[first]!r}"
            )

    # Checked before the int64 cast so oversized values cannot wrap
    lo = min_value(bit_depth)
    hi = max_value(bit_depth)
    out_of_range = (values < lo) | (values > hi)
    if np.any(out_of_range):
        first = int(np.flatnonzero(out_of_range)[0])
        raise RangeError(
            f"Sample value {values[first]} at index {first} is outside the "
            f"{bit_depth}-bit range [{lo}, {hi}]"
        )
    return values.astype(np.int64)
