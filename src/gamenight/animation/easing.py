"""Spin-down curves for the selection wheel.

A curve maps linear progress t in [0, 1] to eased progress in [0, 1].
The wheel uses the ease-out power family ``1 - (1 - t) ** k``: fast
at the start, decelerating to rest, with k controlling how hard it
brakes. k = 3 (ease-out cubic) is the default.
"""

from enum import Enum
from typing import Callable

EasingFunc = Callable[[float], float]


class Easing(Enum):
    """Named curves, valued by their ease-out exponent."""

    LINEAR = 1.0
    EASE_OUT_QUAD = 2.0
    EASE_OUT_CUBIC = 3.0
    EASE_OUT_QUART = 4.0
    EASE_OUT_QUINT = 5.0


def _clamp(t: float) -> float:
    return 0.0 if t < 0.0 else 1.0 if t > 1.0 else t


def ease_out_power(exponent: float) -> EasingFunc:
    """Build the curve ``1 - (1 - t) ** exponent``, clamping t to [0, 1].

    Raises:
        ValueError: If exponent is not positive
    """
    if exponent <= 0:
        raise ValueError(f"Easing exponent must be positive, got {exponent}")

    def ease(t: float) -> float:
        return 1.0 - (1.0 - _clamp(t)) ** exponent

    ease.__name__ = f"ease_out_power_{exponent:g}"
    return ease


ease_out_cubic = ease_out_power(Easing.EASE_OUT_CUBIC.value)


def get_easing(easing: Easing | str) -> EasingFunc:
    """Curve for an Easing member or its name (case-insensitive).

    Raises:
        ValueError: If the name is not a known curve
    """
    if isinstance(easing, str):
        try:
            easing = Easing[easing.upper()]
        except KeyError:
            raise ValueError(f"Unknown easing function: {easing}") from None
    if easing is Easing.EASE_OUT_CUBIC:
        return ease_out_cubic
    return ease_out_power(easing.value)

