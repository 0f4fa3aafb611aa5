"""
Lookup tables for the G.711 companding laws.
The mu-law encode table maps bits 7-14 of the biased magnitude to a segment exponent,
the decode table maps an exponent back to the segment's base magnitude,
and the A-law log table maps the high byte of the clipped magnitude to an exponent.
"""

from typing import List

import numpy as np


def generate_segment_table(size: int, first_exponent: int) -> List[int]:
    """
    Generates a segment (exponent) table where entry i holds the position of the
    highest set bit of i, offset so that index 0 maps to first_exponent.

    For mu-law (first_exponent=0): [0, 0, 1, 1, 2, 2, 2, 2, 3, ...] with 256 entries.
    For A-law (first_exponent=1):  [1, 1, 2, 2, 3, 3, 3, 3, 4, ...] with 128 entries.
    """
    table: List[int] = []
    for i in range(size):
        table.append(max(i.bit_length() - 1, 0) + first_exponent)
    return table


MULAW_ENCODE_TABLE: List[int] = generate_segment_table(256, 0)

MULAW_DECODE_TABLE: List[int] = [0, 132, 396, 924, 1980, 4092, 8316, 16764]

ALAW_LOG_TABLE: List[int] = generate_segment_table(128, 1)

MULAW_ENCODE_ARRAY = np.array(MULAW_ENCODE_TABLE, dtype=np.int64)
MULAW_DECODE_ARRAY = np.array(MULAW_DECODE_TABLE, dtype=np.int64)
ALAW_LOG_ARRAY = np.array(ALAW_LOG_TABLE, dtype=np.int64)
