"""Box-Muller transform from uniform to skewable gaussian draws."""
import logging
import math
from collections.abc import Callable

from kdroll.logic.number import KDNumber, floating_point_fix
from kdroll.logic.rng import RNGBase
from kdroll.logic.uniform import MersenneTwister


logger = logging.getLogger(__name__)

SourceFactory = Callable[[], RNGBase]


def skew_exponent(skew: float) -> float:
    """
    Convert a skew in [-1, 1] to the exponent applied to a draw.

    Negative skew (right) maps [-1, 0) to an exponent in [0, 1), positive
    skew (left) maps (0, 1] to (0, 4]; zero means no distortion.
    """
    if skew == 0:
        return 1
    n = KDNumber(abs(skew)).clip(0, 1)
    if skew < 0:
        return floating_point_fix(1 - n.value)
    return n.scale(0, 4).value


def _default_resample_source() -> RNGBase:
    return MersenneTwister()


def _box_muller(source: RNGBase) -> float:
    fix = floating_point_fix
    u = 0.0
    v = 0.0
    while u == 0:
        u = source.random()
    while v == 0:
        v = source.random()

    num = fix(math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v))
    # Scale back to roughly [0, 1]
    return fix(num / 10.0 + 0.5)


def gaussian(
    source: RNGBase,
    skew: float = 0,
    resample_source: SourceFactory | None = None,
) -> float:
    """
    Generate a real in [0, 1] with (skewed) gaussian distribution.

    Args:
        source: Uniform generator to draw from.
        skew: In [-1, 1]. Negative values skew data RIGHT (toward 1),
            positive values skew data LEFT (toward 0).
        resample_source: Builds the fresh, independently seeded generator
            used whenever a draw lands outside [0, 1]. Defaults to a new
            randomly seeded MersenneTwister.

    Returns:
        The gaussian draw raised to the skew exponent.
    """
    exponent = skew_exponent(skew)
    factory = resample_source or _default_resample_source

    num = _box_muller(source)
    while num < 0 or num > 1:
        logger.debug("Gaussian draw %r out of range; resampling", num)
        num = _box_muller(factory())

    return floating_point_fix(num**exponent)
