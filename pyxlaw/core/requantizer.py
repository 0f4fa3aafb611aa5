"""
Bit depth requantization with TPDF dither and first-order noise shaping.

Upscaling is an exact left shift. Downscaling adds triangular dither plus the
previous sample's quantization error scaled by NOISE_SHAPING_COEFF, rounds to the
target step and saturates at the target range. The error of each sample is fed
into the next one, so a pass over a sequence is strictly sequential.
"""

from typing import Optional, Tuple

import numpy as np

from pyxlaw.common.bit_depth import (
    SampleInput,
    as_sample_array,
    max_value,
    min_value,
    sample_dtype,
    validate_bit_depth,
    validate_sample,
)
from pyxlaw.common.constants import NOISE_SHAPING_COEFF
from pyxlaw.common.debug_logger import log_debug


class QuantizationState:
    """
    Quantization error of the previous sample, owned by a single requantization pass.
    Starts at 0 and is updated after every sample.
    """

    def __init__(self, previous_error: float = 0.0):
        self.previous_error = previous_error

    def reset(self):
        self.previous_error = 0.0


def make_rng(
    rng: Optional[np.random.Generator] = None, seed: Optional[int] = None
) -> np.random.Generator:
    """Returns the given generator, or a new one seeded with `seed`."""
    if rng is not None:
        return rng
    return np.random.default_rng(seed)


def triangular_dither(rng: np.random.Generator) -> float:
    """
    Draws one TPDF dither value: the mean of two independent uniform values in [-1, 1].
    """
    u = rng.uniform(-1.0, 1.0, size=2)
    return float(u[0] + u[1]) / 2.0


def _downscale(
    sample: int,
    bit_difference: int,
    lo: int,
    hi: int,
    previous_error: float,
    dither: float,
) -> Tuple[int, float]:
    step = 1 << bit_difference
    shaped = sample + dither + previous_error * NOISE_SHAPING_COEFF
    rounded = int(np.rint(shaped / step))
    error = shaped - rounded * step
    # Saturate, never wrap
    if rounded > hi:
        rounded = hi
    elif rounded < lo:
        rounded = lo
    return rounded, error


def requantize_sample(
    sample: int,
    input_bit_depth: int,
    target_bit_depth: int,
    previous_error: float = 0.0,
    rng: Optional[np.random.Generator] = None,
) -> Tuple[int, float]:
    """
    Converts one sample from input_bit_depth to target_bit_depth.

    Args:
        sample: The input sample, within the input depth's range.
        input_bit_depth: Bit depth of `sample`.
        target_bit_depth: Bit depth to convert to.
        previous_error: Quantization error returned for the previous sample.
        rng: Uniform random source for the dither. A fresh unseeded
             generator is used when omitted.

    Returns:
        A tuple of (requantized sample, quantization error). The error must be
        passed as previous_error when converting the next sample.
    """
    validate_bit_depth(input_bit_depth)
    validate_bit_depth(target_bit_depth)
    sample = validate_sample(sample, input_bit_depth)

    if input_bit_depth == target_bit_depth:
        return sample, 0.0
    if input_bit_depth < target_bit_depth:
        return sample << (target_bit_depth - input_bit_depth), 0.0

    return _downscale(
        sample,
        input_bit_depth - target_bit_depth,
        min_value(target_bit_depth),
        max_value(target_bit_depth),
        previous_error,
        triangular_dither(make_rng(rng)),
    )


class Requantizer:
    """
    Converts sample sequences between two fixed bit depths.
    Each call to requantize() is one pass with its own QuantizationState
    unless the caller supplies a state to continue a previous pass.
    """

    def __init__(
        self,
        input_bit_depth: int,
        target_bit_depth: int,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
    ):
        self.input_bit_depth = validate_bit_depth(input_bit_depth)
        self.target_bit_depth = validate_bit_depth(target_bit_depth)
        self.rng = make_rng(rng, seed)

    @property
    def bit_difference(self) -> int:
        return self.input_bit_depth - self.target_bit_depth

    def requantize(
        self, samples: SampleInput, state: Optional[QuantizationState] = None
    ) -> np.ndarray:
        """
        Requantizes a whole sequence in order, threading the quantization error
        from each sample into the next.

        Args:
            samples: Integer samples at input_bit_depth.
            state: Error carried in from a preceding chunk of the same stream.
                   A fresh state (error 0) is used when omitted, and the final
                   error is left in it when given.

        Returns:
            A numpy array of samples at target_bit_depth.
        """
        values = as_sample_array(samples, self.input_bit_depth)
        if state is None:
            state = QuantizationState()

        out_dtype = sample_dtype(self.target_bit_depth)
        diff = self.bit_difference

        if diff == 0:
            out = values.astype(out_dtype)
            state.reset()
        elif diff < 0:
            out = np.left_shift(values, -diff).astype(out_dtype)
            state.reset()
        else:
            lo = min_value(self.target_bit_depth)
            hi = max_value(self.target_bit_depth)
            dither = self.rng.uniform(-1.0, 1.0, size=(values.size, 2)).mean(axis=1)
            out = np.empty(values.size, dtype=out_dtype)
            error = state.previous_error
            for i in range(values.size):
                out[i], error = _downscale(
                    int(values[i]), diff, lo, hi, error, float(dither[i])
                )
            state.previous_error = error

        log_debug(
            "REQUANT_OUTPUT",
            "samples",
            out,
            input_bit_depth=self.input_bit_depth,
            target_bit_depth=self.target_bit_depth,
            final_error=state.previous_error,
        )
        return out


def requantize(
    samples: SampleInput,
    input_bit_depth: int,
    target_bit_depth: int,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
) -> np.ndarray:
    """
    Requantizes a sample sequence in a single pass starting from zero error.
    See Requantizer.requantize.
    """
    return Requantizer(input_bit_depth, target_bit_depth, rng=rng, seed=seed).requantize(
        samples
    )
