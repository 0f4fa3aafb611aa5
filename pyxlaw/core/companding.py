"""
Shared plumbing for the companding codecs: validation of companded byte input
and conversion between a caller's bit depth and the codecs' native 16-bit domain.
"""

from typing import Optional, Sequence, Union

import numpy as np

from pyxlaw.common.bit_depth import SampleInput, as_sample_array, validate_bit_depth
from pyxlaw.common.constants import CODEC_BIT_DEPTH
from pyxlaw.common.errors import EmptyInputError, RangeError
from pyxlaw.core.requantizer import Requantizer

CompandedInput = Union[bytes, bytearray, memoryview, Sequence[int], np.ndarray]


def validate_companded_byte(value: int) -> int:
    """Checks that a companded value is an unsigned 8-bit integer."""
    if not 0 <= value <= 0xFF or int(value) != value:
        raise RangeError(f"Companded value {value!r} is outside the byte range [0, 255]")
    return int(value)


def as_companded_array(data: CompandedInput) -> np.ndarray:
    """
    Converts companded input (bytes or a sequence of ints) to an int64 array.

    Raises:
        EmptyInputError: If there is no data.
        RangeError: Naming the first value outside [0, 255].
    """
    if isinstance(data, (bytes, bytearray, memoryview)):
        values = np.frombuffer(bytes(data), dtype=np.uint8).astype(np.int64)
    else:
        values = np.asarray(data).reshape(-1)
        if values.size and not np.issubdtype(values.dtype, np.integer):
            bad = np.mod(values, 1) != 0
            if np.any(bad):
                first = int(np.flatnonzero(bad)[0])
                raise RangeError(
                    f"Companded value at index {first} is not an integer: {values[first]!r}"
                )
        values = values.astype(np.int64)

    if values.size == 0:
        raise EmptyInputError("Invalid buffer, companded data must not be empty")

    out_of_range = (values < 0) | (values > 0xFF)
    if np.any(out_of_range):
        first = int(np.flatnonzero(out_of_range)[0])
        raise RangeError(
            f"Companded value {int(values[first])} at index {first} is outside the byte range [0, 255]"
        )
    return values


def to_codec_domain(
    samples: SampleInput,
    bit_depth: int,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
) -> np.ndarray:
    """
    Validates PCM samples at `bit_depth` and brings them to the 16-bit codec domain.
    """
    values = as_sample_array(samples, bit_depth)
    if bit_depth != CODEC_BIT_DEPTH:
        values = Requantizer(bit_depth, CODEC_BIT_DEPTH, rng=rng, seed=seed).requantize(
            values
        )
    return values.astype(np.int64)


def from_codec_domain(
    pcm16: np.ndarray,
    bit_depth: int,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
) -> np.ndarray:
    """
    Converts decoded 16-bit samples to `bit_depth`.
    """
    validate_bit_depth(bit_depth)
    if bit_depth == CODEC_BIT_DEPTH:
        return pcm16.astype(np.int16)
    return Requantizer(CODEC_BIT_DEPTH, bit_depth, rng=rng, seed=seed).requantize(pcm16)
