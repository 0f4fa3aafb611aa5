"""
G.711 A-law codec.
Maps 16-bit linear PCM to 8-bit A-law bytes (segment/mantissa form, even bits
inverted with 0x55) and back. Sequence operations accept PCM at any supported
bit depth and requantize to the 16-bit codec domain first.
"""

from typing import Optional

import numpy as np

from pyxlaw.common.bit_depth import SampleInput, validate_sample
from pyxlaw.common.constants import (
    ALAW_CLIP,
    ALAW_MIN_SAMPLE,
    ALAW_XOR_MASK,
    CODEC_BIT_DEPTH,
)
from pyxlaw.common.debug_logger import log_bytes, log_debug
from pyxlaw.core.companding import (
    CompandedInput,
    as_companded_array,
    from_codec_domain,
    to_codec_domain,
    validate_companded_byte,
)
from pyxlaw.tables.companding_tables import ALAW_LOG_ARRAY, ALAW_LOG_TABLE


def encode_sample(sample: int) -> int:
    """
    Encodes a single 16-bit PCM sample to an 8-bit A-law value.

    Args:
        sample: Signed 16-bit sample.

    Returns:
        The A-law byte (0-255).
    """
    sample = validate_sample(sample, CODEC_BIT_DEPTH)
    # Keep the sign computation symmetric
    if sample == ALAW_MIN_SAMPLE:
        sample = -32767

    # 0x80 for non-negative samples, 0 for negative ones
    sign = (~sample >> 8) & 0x80
    if not sign:
        sample = -sample
    if sample > ALAW_CLIP:
        sample = ALAW_CLIP

    if sample >= 256:
        exponent = ALAW_LOG_TABLE[(sample >> 8) & 0x7F]
        mantissa = (sample >> (exponent + 3)) & 0x0F
        companded = (exponent << 4) | mantissa
    else:
        companded = sample >> 4

    return companded ^ (sign ^ ALAW_XOR_MASK)


def decode_sample(alaw_byte: int) -> int:
    """
    Decodes a single 8-bit A-law value to a 16-bit PCM sample.
    """
    value = validate_companded_byte(alaw_byte) ^ ALAW_XOR_MASK
    negative = False
    if value & 0x80:
        value &= 0x7F
        negative = True

    position = ((value & 0xF0) >> 4) + 4
    if position != 4:
        decoded = (
            (1 << position)
            | ((value & 0x0F) << (position - 4))
            | (1 << (position - 5))
        )
    else:
        decoded = (value << 1) | 1

    if negative:
        decoded = -decoded
    # The sign bit set after the XOR marks a positive sample
    return decoded * 8 * -1


def _encode_array(pcm16: np.ndarray) -> np.ndarray:
    samples = np.where(pcm16 == ALAW_MIN_SAMPLE, -32767, pcm16)
    sign = (~samples >> 8) & 0x80
    magnitude = np.where(sign == 0, -samples, samples)
    magnitude = np.minimum(magnitude, ALAW_CLIP)

    exponent = ALAW_LOG_ARRAY[(magnitude >> 8) & 0x7F]
    mantissa = (magnitude >> (exponent + 3)) & 0x0F
    companded = np.where(magnitude >= 256, (exponent << 4) | mantissa, magnitude >> 4)
    return (companded ^ (sign ^ ALAW_XOR_MASK)).astype(np.uint8)


def _decode_array(values: np.ndarray) -> np.ndarray:
    values = values ^ ALAW_XOR_MASK
    negative = (values & 0x80) != 0
    values = values & 0x7F

    position = ((values & 0xF0) >> 4) + 4
    segment = (
        (1 << position)
        | ((values & 0x0F) << (position - 4))
        | (1 << np.maximum(position - 5, 0))
    )
    linear = (values << 1) | 1
    decoded = np.where(position != 4, segment, linear)
    decoded = np.where(negative, -decoded, decoded)
    return (decoded * 8 * -1).astype(np.int16)


def encode(
    samples: SampleInput,
    bit_depth: int = CODEC_BIT_DEPTH,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
) -> np.ndarray:
    """
    Encodes a PCM sequence to A-law.

    Args:
        samples: Integer PCM samples at `bit_depth`.
        bit_depth: Bit depth of the input. Anything other than 16 is requantized
                   to 16 bits first (dithered when reducing).
        rng: Random source for the requantizer's dither.
        seed: Seed for a new random source when `rng` is not given.

    Returns:
        A uint8 numpy array with one A-law byte per sample.
    """
    pcm16 = to_codec_domain(samples, bit_depth, rng=rng, seed=seed)
    encoded = _encode_array(pcm16)
    log_bytes("ALAW_ENCODE", encoded, law="ALAW", bit_depth=bit_depth)
    return encoded


def decode(
    data: CompandedInput,
    bit_depth: int = CODEC_BIT_DEPTH,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
) -> np.ndarray:
    """
    Decodes A-law bytes to PCM at `bit_depth`. See mulaw.decode.
    """
    values = as_companded_array(data)
    pcm16 = _decode_array(values)
    log_debug("ALAW_DECODE", "samples", pcm16, law="ALAW")
    return from_codec_domain(pcm16, bit_depth, rng=rng, seed=seed)
