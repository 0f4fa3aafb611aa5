"""
Tests for PCM byte packing.
"""

import numpy as np
import pytest
from pyxlaw.core.pcm import pack_samples, unpack_samples
from pyxlaw.common.errors import BufferLengthError, InvalidBitDepthError, RangeError


class TestPackSamples:
    """Test cases for pack_samples."""

    def test_8_bit_is_signed(self):
        assert pack_samples([-128, -1, 0, 127], 8) == b"\x80\xff\x00\x7f"

    def test_16_bit_little_endian(self):
        assert pack_samples([1, -2, 0x1234], 16) == b"\x01\x00\xfe\xff\x34\x12"

    def test_24_bit_three_bytes(self):
        assert pack_samples([-1, 0x123456, -8388608], 24) == (
            b"\xff\xff\xff" b"\x56\x34\x12" b"\x00\x00\x80"
        )

    def test_32_bit(self):
        assert pack_samples([-(2**31), 2**31 - 1], 32) == b"\x00\x00\x00\x80\xff\xff\xff\x7f"

    def test_empty(self):
        assert pack_samples([], 16) == b""

    def test_out_of_range(self):
        with pytest.raises(RangeError, match="index 1"):
            pack_samples([0, 8388608], 24)

    def test_invalid_depth(self):
        with pytest.raises(InvalidBitDepthError):
            pack_samples([0], 12)


class TestUnpackSamples:
    """Test cases for unpack_samples."""

    def test_16_bit(self):
        out = unpack_samples(b"\x01\x00\xfe\xff", 16)
        assert out.dtype == np.int16
        np.testing.assert_array_equal(out, [1, -2])

    def test_24_bit_sign_extension(self):
        out = unpack_samples(b"\xff\xff\xff\x56\x34\x12\x00\x00\x80", 24)
        assert out.dtype == np.int32
        np.testing.assert_array_equal(out, [-1, 0x123456, -8388608])

    def test_8_bit(self):
        np.testing.assert_array_equal(unpack_samples(b"\x80\x7f", 8), [-128, 127])

    def test_misaligned_buffer(self):
        with pytest.raises(BufferLengthError, match="not a multiple"):
            unpack_samples(b"\x00\x00\x00\x00", 24)
        with pytest.raises(BufferLengthError):
            unpack_samples(b"\x00", 16)

    @pytest.mark.parametrize("bit_depth", [8, 16, 24, 32])
    def test_extremes_survive_packing(self, bit_depth):
        lo = -(1 << (bit_depth - 1))
        hi = (1 << (bit_depth - 1)) - 1
        samples = [lo, lo + 1, -1, 0, 1, hi - 1, hi]
        packed = pack_samples(samples, bit_depth)
        assert len(packed) == len(samples) * ((bit_depth + 7) // 8)
        np.testing.assert_array_equal(unpack_samples(packed, bit_depth), samples)
