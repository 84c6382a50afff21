"""Numeric helpers for user-facing figures."""

import math


def round_half_up(value: float, places: int) -> float:
    """
    Round ``value`` to ``places`` decimals, halves rounding up.

    Computed as ``floor(value * 10**places + 0.5) / 10**places``. Python's
    built-in ``round`` uses banker's rounding, which would change published
    percentages and supply figures, so it must not be used for them.

    Args:
        value: Number to round
        places: Decimal places (0 rounds to a whole number)

    Returns:
        Rounded float
    """
    shift = math.pow(10, places)
    shifted = value * shift
    if not math.isfinite(shifted):
        # magnitudes this large carry no fractional digits
        return value
    return math.floor(shifted + 0.5) / shift
