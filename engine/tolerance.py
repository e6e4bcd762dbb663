"""Approximate float comparison used by every numeric decision in the engine.

Pivot tests, singularity checks and "is this zero" questions all go
through ``nearly_equal``, never through ``==``.
See https://floating-point-gui.de/errors/comparison/
"""

import math
import sys

# Absolute tolerance when one side is exactly zero.
EPSILON = 1e-12
# Relative tolerance otherwise.
RELATIVE_EPSILON = 1e-10
MIN_POSITIVE = sys.float_info.min


def nearly_equal(a: float, b: float) -> bool:
    """Return True when *a* and *b* are equal up to floating-point noise.

    - identical values (infinities included) are equal;
    - against an exact zero the absolute difference must stay below
      ``EPSILON``;
    - two denormal-range values compare against ``EPSILON * MIN_POSITIVE``;
    - everything else uses the relative error ``|a-b| / (|a|+|b|)``.
    """
    if a == b:
        return True
    abs_a = abs(a)
    abs_b = abs(b)
    diff = abs(a - b)
    if a == 0.0 or b == 0.0:
        return diff < EPSILON
    if abs_a + abs_b < MIN_POSITIVE:
        return diff < EPSILON * MIN_POSITIVE
    return diff / (abs_a + abs_b) < RELATIVE_EPSILON


def is_zero(x: float) -> bool:
    return nearly_equal(x, 0.0)


def is_integral(x: float) -> bool:
    """True when *x* is a whole number up to tolerance."""
    if not math.isfinite(x):
        return False
    return nearly_equal(x, float(round(x)))
