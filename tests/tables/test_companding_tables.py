import unittest
import numpy as np
from pyxlaw.tables import companding_tables as ct

# ITU-T G.711 reference segment tables
EXPECTED_MULAW_ENCODE = (
    [0, 0, 1, 1, 2, 2, 2, 2]
    + [3] * 8
    + [4] * 16
    + [5] * 32
    + [6] * 64
    + [7] * 128
)

EXPECTED_ALAW_LOG = (
    [1, 1, 2, 2, 3, 3, 3, 3]
    + [4] * 8
    + [5] * 16
    + [6] * 32
    + [7] * 64
)


class TestCompandingTables(unittest.TestCase):
    def test_mulaw_encode_table(self):
        self.assertEqual(len(ct.MULAW_ENCODE_TABLE), 256, "mu-law encode table should have 256 entries")
        self.assertEqual(ct.MULAW_ENCODE_TABLE, EXPECTED_MULAW_ENCODE)

    def test_mulaw_decode_table(self):
        self.assertEqual(
            ct.MULAW_DECODE_TABLE, [0, 132, 396, 924, 1980, 4092, 8316, 16764]
        )
        # Each entry is the biased base of its segment: 132 * (2^e - 1)
        for exponent, base in enumerate(ct.MULAW_DECODE_TABLE):
            self.assertEqual(base, 132 * ((1 << exponent) - 1))

    def test_alaw_log_table(self):
        self.assertEqual(len(ct.ALAW_LOG_TABLE), 128, "A-law log table should have 128 entries")
        self.assertEqual(ct.ALAW_LOG_TABLE, EXPECTED_ALAW_LOG)

    def test_numpy_views_match_lists(self):
        np.testing.assert_array_equal(ct.MULAW_ENCODE_ARRAY, ct.MULAW_ENCODE_TABLE)
        np.testing.assert_array_equal(ct.MULAW_DECODE_ARRAY, ct.MULAW_DECODE_TABLE)
        np.testing.assert_array_equal(ct.ALAW_LOG_ARRAY, ct.ALAW_LOG_TABLE)

    def test_generate_segment_table(self):
        self.assertEqual(ct.generate_segment_table(8, 0), [0, 0, 1, 1, 2, 2, 2, 2])
        self.assertEqual(ct.generate_segment_table(4, 1), [1, 1, 2, 2])


if __name__ == "__main__":
    unittest.main()
