"""Scale, clip and round helpers with floating point correction.

Every helper routes its intermediate results through ``floating_point_fix``,
which trims the long ``0``/``9`` tails binary floating point leaves behind
(``0.1 + 0.2`` gives ``0.30000000000000004``; corrected it is ``0.3``).
"""
import math
import numbers
import re
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Context, Decimal

from kdroll.config import settings


Range = tuple[float, float]

# Enough precision for any fixed-point rendering of a double we re-round.
_DECIMAL_CONTEXT = Context(prec=100)
_HALF = Decimal("0.5")


def number_text(value: float) -> str:
    """
    Render a float as shortest round-trip text.

    Layout follows the ECMAScript Number-to-String rules: positional notation
    for 1e-7 <= |value| < 1e21, exponential notation outside that window.
    Correction and rounding operate on this text, so identical inputs yield
    identical outputs across implementations.
    """
    if value == 0:
        return "0"
    if not math.isfinite(value):
        return repr(value)

    sign = "-" if value < 0 else ""
    parts = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(str(d) for d in parts.digits)
    k = len(digits)
    n = parts.exponent + k  # value == 0.<digits> * 10**n

    if k <= n <= 21:
        return sign + digits + "0" * (n - k)
    if 0 < n <= 21:
        return sign + digits[:n] + "." + digits[n:]
    if -6 < n <= 0:
        return sign + "0." + "0" * -n + digits

    exponent = n - 1
    exponent_text = ("+" if exponent >= 0 else "-") + str(abs(exponent))
    mantissa = digits if k == 1 else digits[0] + "." + digits[1:]
    return f"{sign}{mantissa}e{exponent_text}"


def _to_fixed(value: float, places: int) -> float:
    """Round the exact binary value to ``places`` decimals, half away from zero."""
    quantum = Decimal(1).scaleb(-places)
    fixed = Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP, context=_DECIMAL_CONTEXT)
    return float(fixed)


def floating_point_fix(value: float, repeat: int | None = None) -> float:
    """
    Fix the floating point error left by binary arithmetic.

    Args:
        value: The value or arithmetic result to correct.
        repeat: Length of a run of 0's or 9's treated as noise.
            Defaults to ``settings.float_fix_repeat``.

    Returns:
        The corrected value, or ``value`` unchanged when it has no
        fractional part, is zero or non-finite, or shows no such run.
    """
    if repeat is None:
        repeat = settings.float_fix_repeat

    if isinstance(value, numbers.Integral):
        return value
    if not value or not math.isfinite(value):
        return value

    _, _, decimal_part = number_text(value).partition(".")
    if not decimal_part:
        return value

    matched = re.search(rf"(9{{{repeat},}}|0{{{repeat},}})\d*$", decimal_part)
    if matched is None:
        return value

    # Keep only the digits ahead of the run
    return _to_fixed(value, matched.start())


def scale(value: float, initial_range: Range, target_range: Range) -> float:
    """
    Scale a value from one range to another.

    A zero-width initial range has no proportion to preserve and yields NaN.
    """
    fix = floating_point_fix
    r1_size = initial_range[1] - initial_range[0]
    r2_size = target_range[1] - target_range[0]
    if r1_size == 0:
        return math.nan

    x = fix(value - initial_range[0])
    y = fix(x * r2_size)
    z = fix(y / r1_size)
    return fix(z + target_range[0])


def clip(value: float, value_range: Range) -> float:
    """Limit a value to a hard minimum and maximum."""
    return floating_point_fix(min(max(value_range[0], value), value_range[1]))


def round_half_up(value: float, places: int = 0) -> float:
    """
    Round a value to a number of decimal places.

    Digits below 5 round down, 5 and above round up (toward positive
    infinity on ties). The decimal point is moved by shifting the exponent of
    the value's text rather than by multiplying, so 1.005 rounds to 1.01.
    """
    if isinstance(value, numbers.Integral) and places >= 0:
        return value
    if not math.isfinite(value):
        return value

    shifted = float(Decimal(number_text(value)).scaleb(places, context=_DECIMAL_CONTEXT))
    whole = (Decimal(shifted) + _HALF).to_integral_value(rounding=ROUND_FLOOR)
    return floating_point_fix(float(whole.scaleb(-places, context=_DECIMAL_CONTEXT)))


class KDNumber:
    """
    Chainable wrapper for mutating a number with scale/clip/round.

    Example:
        >>> KDNumber(0.55).scale(0, 10).clip(0, 4.5).round(0).value
        5.0
    """

    def __init__(self, value: "float | str | KDNumber", known_range: Range = (0, 1)):
        if isinstance(value, KDNumber):
            value = value.value
        self.value: float = float(value)
        self.range: Range = (known_range[0], known_range[1])

    def scale(self, min_value: float = 0, max_value: float = 1) -> "KDNumber":
        """Scale to a new range and remember it as the known range."""
        self.value = scale(self.value, self.range, (min_value, max_value))
        self.range = (min_value, max_value)
        return self

    def clip(self, min_value: float, max_value: float) -> "KDNumber":
        """Limit the value to [min_value, max_value]."""
        self.value = clip(self.value, (min_value, max_value))
        return self

    def round(self, places: int = 0) -> "KDNumber":
        """Round half-up to ``places`` decimals."""
        self.value = round_half_up(self.value, places)
        return self

    def __float__(self) -> float:
        return float(self.value)

    def __int__(self) -> int:
        return int(self.value)

    def __repr__(self) -> str:
        return f"KDNumber({self.value!r}, known_range={self.range!r})"
