"""
G.711 mu-law codec.
Maps 16-bit linear PCM to 8-bit mu-law bytes and back. Sequence operations accept
PCM at any supported bit depth and requantize to the 16-bit codec domain first.
"""

from typing import Optional

import numpy as np

from pyxlaw.common.bit_depth import SampleInput, validate_sample
from pyxlaw.common.constants import CODEC_BIT_DEPTH, MULAW_BIAS, MULAW_CLIP
from pyxlaw.common.debug_logger import log_bytes, log_debug
from pyxlaw.core.companding import (
    CompandedInput,
    as_companded_array,
    from_codec_domain,
    to_codec_domain,
    validate_companded_byte,
)
from pyxlaw.tables.companding_tables import (
    MULAW_DECODE_ARRAY,
    MULAW_DECODE_TABLE,
    MULAW_ENCODE_ARRAY,
    MULAW_ENCODE_TABLE,
)

SILENCE = 0xFF


def encode_sample(sample: int) -> int:
    """
    Encodes a single 16-bit PCM sample to an 8-bit mu-law value.

    Args:
        sample: Signed 16-bit sample.

    Returns:
        The mu-law byte (0-255).
    """
    sample = validate_sample(sample, CODEC_BIT_DEPTH)

    # Sign-magnitude form
    sign = (sample >> 8) & 0x80
    if sign != 0:
        sample = -sample

    sample = sample + MULAW_BIAS
    if sample > MULAW_CLIP:
        sample = MULAW_CLIP

    exponent = MULAW_ENCODE_TABLE[(sample >> 7) & 0xFF]
    mantissa = (sample >> (exponent + 3)) & 0x0F
    return ~(sign | (exponent << 4) | mantissa) & 0xFF


def decode_sample(mulaw_byte: int) -> int:
    """
    Decodes a single 8-bit mu-law value to a 16-bit PCM sample.
    """
    value = ~validate_companded_byte(mulaw_byte) & 0xFF
    sign = value & 0x80
    exponent = (value >> 4) & 0x07
    mantissa = value & 0x0F
    sample = MULAW_DECODE_TABLE[exponent] + (mantissa << (exponent + 3))
    if sign != 0:
        sample = -sample
    return sample


def _encode_array(pcm16: np.ndarray) -> np.ndarray:
    sign = (pcm16 >> 8) & 0x80
    magnitude = np.where(sign != 0, -pcm16, pcm16)
    magnitude = np.minimum(magnitude + MULAW_BIAS, MULAW_CLIP)
    exponent = MULAW_ENCODE_ARRAY[(magnitude >> 7) & 0xFF]
    mantissa = (magnitude >> (exponent + 3)) & 0x0F
    return (~(sign | (exponent << 4) | mantissa) & 0xFF).astype(np.uint8)


def _decode_array(values: np.ndarray) -> np.ndarray:
    inverted = ~values & 0xFF
    sign = inverted & 0x80
    exponent = (inverted >> 4) & 0x07
    mantissa = inverted & 0x0F
    magnitude = MULAW_DECODE_ARRAY[exponent] + (mantissa << (exponent + 3))
    return np.where(sign != 0, -magnitude, magnitude).astype(np.int16)


def encode(
    samples: SampleInput,
    bit_depth: int = CODEC_BIT_DEPTH,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
) -> np.ndarray:
    """
    Encodes a PCM sequence to mu-law.

    Args:
        samples: Integer PCM samples at `bit_depth`.
        bit_depth: Bit depth of the input. Anything other than 16 is requantized
                   to 16 bits first (dithered when reducing).
        rng: Random source for the requantizer's dither.
        seed: Seed for a new random source when `rng` is not given.

    Returns:
        A uint8 numpy array with one mu-law byte per sample.
    """
    pcm16 = to_codec_domain(samples, bit_depth, rng=rng, seed=seed)
    encoded = _encode_array(pcm16)
    log_bytes("MULAW_ENCODE", encoded, law="MULAW", bit_depth=bit_depth)
    return encoded


def decode(
    data: CompandedInput,
    bit_depth: int = CODEC_BIT_DEPTH,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
) -> np.ndarray:
    """
    Decodes mu-law bytes to PCM.

    Args:
        data: mu-law bytes, or a sequence of ints in [0, 255].
        bit_depth: Bit depth of the returned samples.
        rng: Random source for the requantizer's dither (8-bit output only).
        seed: Seed for a new random source when `rng` is not given.

    Returns:
        A numpy array of samples at `bit_depth`.
    """
    values = as_companded_array(data)
    pcm16 = _decode_array(values)
    log_debug("MULAW_DECODE", "samples", pcm16, law="MULAW")
    return from_codec_domain(pcm16, bit_depth, rng=rng, seed=seed)
