import unittest
from pyxlaw.common import constants as c


class TestGlobalConstants(unittest.TestCase):
    def test_supported_bit_depths(self):
        self.assertEqual(
            c.SUPPORTED_BIT_DEPTHS, (8, 16, 24, 32), "Supported depths should be 8/16/24/32"
        )

    def test_reserved_bit_depths(self):
        self.assertEqual(c.RESERVED_BIT_DEPTHS, (48,), "48-bit should be reserved")

    def test_codec_bit_depth(self):
        self.assertEqual(c.CODEC_BIT_DEPTH, 16, "Codecs operate on 16-bit PCM")

    def test_mulaw_parameters(self):
        self.assertEqual(c.MULAW_BIAS, 0x84, "mu-law bias should be 0x84")
        self.assertEqual(c.MULAW_CLIP, 32635, "mu-law clip should be 32635")

    def test_alaw_parameters(self):
        self.assertEqual(c.ALAW_CLIP, 32635, "A-law clip should be 32635")
        self.assertEqual(c.ALAW_XOR_MASK, 0x55, "A-law XOR mask should be 0x55")
        self.assertEqual(c.ALAW_MIN_SAMPLE, -32768)

    def test_noise_shaping_coefficient(self):
        self.assertEqual(c.NOISE_SHAPING_COEFF, -1.5)

    def test_loudness_gating(self):
        self.assertAlmostEqual(c.LOUDNESS_BLOCK_SECONDS, 0.4)
        self.assertAlmostEqual(c.BLOCK_LOUDNESS_OFFSET, -0.691)
        self.assertEqual(c.ABSOLUTE_GATE_DB, -70.0)
        self.assertEqual(c.RELATIVE_GATE_DB, -10.0)


if __name__ == "__main__":
    unittest.main()
