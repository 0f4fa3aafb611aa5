"""
Packing of linear PCM samples to and from raw byte buffers.
Samples are stored little-endian, signed, ceil(bit_depth / 8) bytes each.
"""

import numpy as np

from pyxlaw.common.bit_depth import SampleInput, as_sample_array, sample_dtype, sample_width
from pyxlaw.common.errors import BufferLengthError


def pack_samples(samples: SampleInput, bit_depth: int) -> bytes:
    """
    Serializes samples to little-endian signed bytes.

    Args:
        samples: Integer samples within the range of `bit_depth`.
        bit_depth: One of the supported bit depths.

    Returns:
        len(samples) * sample_width(bit_depth) bytes.
    """
    values = as_sample_array(samples, bit_depth, allow_empty=True)
    width = sample_width(bit_depth)

    if width == 3:
        # Low three bytes of each little-endian int32
        raw = values.astype("<i4").view(np.uint8).reshape(-1, 4)[:, :3]
        return raw.tobytes()
    return values.astype(f"<i{width}").tobytes()


def unpack_samples(data: bytes, bit_depth: int) -> np.ndarray:
    """
    Deserializes little-endian signed bytes into samples.

    Args:
        data: Raw bytes, a whole number of samples long.
        bit_depth: One of the supported bit depths.

    Returns:
        A numpy array of samples with dtype sample_dtype(bit_depth).

    Raises:
        BufferLengthError: If len(data) is not a multiple of the sample width.
    """
    width = sample_width(bit_depth)
    if len(data) % width != 0:
        raise BufferLengthError(
            f"Buffer length {len(data)} is not a multiple of the {width}-byte "
            f"sample width for {bit_depth}-bit PCM"
        )

    if width == 3:
        raw = np.frombuffer(bytes(data), dtype=np.uint8).reshape(-1, 3)
        padded = np.zeros((raw.shape[0], 4), dtype=np.uint8)
        padded[:, :3] = raw
        # Sign extension
        padded[:, 3] = np.where(raw[:, 2] & 0x80, 0xFF, 0x00)
        return padded.view("<i4").reshape(-1).astype(sample_dtype(bit_depth))
    return np.frombuffer(bytes(data), dtype=f"<i{width}").astype(sample_dtype(bit_depth))
