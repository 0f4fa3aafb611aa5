"""
Global constants for the pyxlaw sample-transform engine.
These constants define the supported sample formats, the G.711 companding
parameters and the loudness gating thresholds.
"""

SUPPORTED_BIT_DEPTHS = (8, 16, 24, 32)
RESERVED_BIT_DEPTHS = (48,)
CODEC_BIT_DEPTH = 16

MULAW_BIAS = 0x84
MULAW_CLIP = 32635
ALAW_CLIP = 32635
ALAW_XOR_MASK = 0x55
ALAW_MIN_SAMPLE = -32768

NOISE_SHAPING_COEFF = -1.5

LOUDNESS_BLOCK_SECONDS = 0.4
BLOCK_LOUDNESS_OFFSET = -0.691
ABSOLUTE_GATE_DB = -70.0
RELATIVE_GATE_DB = -10.0
