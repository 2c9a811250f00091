"""
Numerical tolerances.

DEFAULT_EPSILON is the relative tolerance handed to the updating
regression when the caller does not choose one; it scales the per-column
tolerances used for rank-deficiency detection.
"""

import numpy as np

# float64 machine epsilon, 2**-52
MACHINE_EPSILON = float(np.finfo(np.float64).eps)

DEFAULT_EPSILON = MACHINE_EPSILON
