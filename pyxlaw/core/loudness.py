"""
Integrated loudness and RMS level of PCM sequences.

Loudness follows the block-gated scheme: normalize, K-weight, split into 400 ms
blocks, drop blocks at or below the absolute gate, then drop blocks below a gate
10 dB under the mean power of the survivors. The single-pass variant (no blocks,
no gates) is available through gated=False.
"""

import math
from typing import List, Sequence

import numpy as np

from pyxlaw.common.bit_depth import SampleInput, as_sample_array, max_value, validate_bit_depth
from pyxlaw.common.constants import (
    ABSOLUTE_GATE_DB,
    BLOCK_LOUDNESS_OFFSET,
    LOUDNESS_BLOCK_SECONDS,
    RELATIVE_GATE_DB,
)
from pyxlaw.common.debug_logger import log_debug
from pyxlaw.common.errors import InvalidRateError
from pyxlaw.tables.filter_coeffs import K_WEIGHTING_A, K_WEIGHTING_B


def power_to_db(mean_square: float) -> float:
    """10*log10 of a mean square value, -inf for silence."""
    if mean_square <= 0.0:
        return float("-inf")
    return 10.0 * math.log10(mean_square)


def normalize(samples: SampleInput, bit_depth: int) -> np.ndarray:
    """Scales samples to [-1, 1] by dividing by the depth's max value."""
    values = as_sample_array(samples, bit_depth)
    return values.astype(np.float64) / max_value(bit_depth)


def k_weighting_filter(x: Sequence[float]) -> np.ndarray:
    """
    Applies the two-tap recursive K-weighting filter to a normalized signal.
    Filter memory starts at zero; the first two outputs are zero.

    Args:
        x: Normalized samples.

    Returns:
        The filtered signal, same length as x.
    """
    b0, b1, b2 = K_WEIGHTING_B
    a1, a2 = K_WEIGHTING_A
    x = list(x)
    out = np.zeros(len(x), dtype=np.float64)

    w1 = 0.0
    w2 = 0.0
    for i in range(2, len(x)):
        w0 = b0 * x[i] + b1 * x[i - 1] + b2 * x[i - 2] - a1 * w1 - a2 * w2
        out[i] = w0
        w2 = w1
        w1 = w0
    return out


class LoudnessBlock:
    """
    One gating block: a run of samples filtered with its own filter memory,
    reduced to a mean square and a block loudness.
    """

    def __init__(self, index: int, start: int, samples: np.ndarray):
        self.index = index
        self.start = start
        self.length = len(samples)
        filtered = k_weighting_filter(samples)
        self.mean_square = float(np.mean(filtered * filtered)) if self.length else 0.0
        self.loudness_db = BLOCK_LOUDNESS_OFFSET + power_to_db(self.mean_square)


def validate_sample_rate(sample_rate: float) -> float:
    if isinstance(sample_rate, bool) or not 0 < sample_rate < float("inf"):
        raise InvalidRateError(
            f"Invalid sample rate {sample_rate!r}, must be a positive finite number"
        )
    return sample_rate


class LoudnessMeter:
    """
    Integrated loudness meter for mono PCM at a fixed sample rate and bit depth.
    """

    def __init__(self, sample_rate: float, bit_depth: int = 16, gated: bool = True):
        """
        Args:
            sample_rate: Sample rate in Hz, must be positive and finite.
            bit_depth: Bit depth of the PCM that will be measured.
            gated: Block-gated measurement when True, single-pass otherwise.
        """
        self.sample_rate = validate_sample_rate(sample_rate)
        self.bit_depth = validate_bit_depth(bit_depth)
        self.gated = gated

    @property
    def block_size(self) -> int:
        return int(math.floor(LOUDNESS_BLOCK_SECONDS * self.sample_rate))

    def blocks(self, samples: SampleInput) -> List[LoudnessBlock]:
        """
        Splits a sequence into non-overlapping blocks of block_size samples.
        Samples after the last full block are not measured.
        """
        x = normalize(samples, self.bit_depth)
        size = max(self.block_size, 1)
        return [
            LoudnessBlock(index, start, x[start : start + size])
            for index, start in enumerate(range(0, len(x) - size + 1, size))
        ]

    def integrated_loudness(self, samples: SampleInput) -> float:
        """
        Measures the integrated loudness of a sequence.

        Args:
            samples: Integer PCM at the meter's bit depth.

        Returns:
            Loudness in dB, or -inf when nothing passes the gates.
        """
        if not self.gated:
            return self._single_pass_loudness(samples)

        blocks = self.blocks(samples)
        for block in blocks:
            log_debug(
                "BLOCK_LOUDNESS",
                "mean_square",
                block.mean_square,
                block=block.index,
                loudness_db=block.loudness_db,
                start=block.start,
            )

        above_absolute = [b for b in blocks if b.loudness_db > ABSOLUTE_GATE_DB]
        if not above_absolute:
            return float("-inf")

        mean_power = float(np.mean([b.mean_square for b in above_absolute]))
        relative_gate = power_to_db(mean_power) + RELATIVE_GATE_DB

        gated = [b for b in above_absolute if b.loudness_db >= relative_gate]
        log_debug(
            "GATED_BLOCKS",
            "db",
            [b.loudness_db for b in gated],
            absolute_survivors=len(above_absolute),
            relative_gate=relative_gate,
        )
        if not gated:
            return float("-inf")
        return power_to_db(float(np.mean([b.mean_square for b in gated])))

    def _single_pass_loudness(self, samples: SampleInput) -> float:
        filtered = k_weighting_filter(normalize(samples, self.bit_depth))
        mean_square = float(np.mean(filtered * filtered))
        log_debug("SINGLE_PASS_LOUDNESS", "mean_square", mean_square)
        return power_to_db(mean_square)


def calculate_lufs(
    samples: SampleInput, bit_depth: int, sample_rate: float, gated: bool = True
) -> float:
    """
    Computes the integrated loudness of a PCM sequence.

    Raises:
        EmptyInputError: If the sequence is empty.
        InvalidBitDepthError: If the bit depth is not supported.
        UnsupportedFeatureError: For 48-bit input.
        InvalidRateError: If sample_rate is not positive.
        RangeError: If a sample is out of range for bit_depth.
    """
    return LoudnessMeter(sample_rate, bit_depth, gated=gated).integrated_loudness(samples)


def calculate_rms(samples: SampleInput, bit_depth: int) -> float:
    """
    Computes the RMS level of a PCM sequence in dB relative to full scale.
    Returns -inf for silence.
    """
    x = normalize(samples, bit_depth)
    rms = math.sqrt(float(np.mean(x * x)))
    if rms == 0.0:
        return float("-inf")
    return 20.0 * math.log10(rms)
