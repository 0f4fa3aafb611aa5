"""
K-weighting pre-filter coefficients for the loudness meter.
These define the two-tap recursive shelving filter applied to normalized PCM
before block energies are measured.
"""

from typing import Tuple

K_A = 1.53512485958697
K_B = -2.69169618940638
K_C = 1.19839281085285
K_D = -1.69065929318241
K_E = 0.73248077421585

# Feed-forward taps applied to x[i], x[i-1], x[i-2]
K_WEIGHTING_B: Tuple[float, float, float] = (K_A, K_B, K_C)

# Feedback taps applied to w[i-1], w[i-2] (denominator of the transfer function)
K_WEIGHTING_A: Tuple[float, float] = (K_D, K_E)
