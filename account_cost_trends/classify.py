"""Day-over-day change classification.

Every comparison is done on ``Decimal`` values so that amounts sitting right
at a threshold (199.995 vs 200.004) land in the right tier.
"""
from __future__ import annotations

import enum
from decimal import Decimal
from typing import Optional, Tuple

HIGH_CHANGE = Decimal("200")
HIGH_PCT_CHANGE = Decimal("100")
MEDIUM_CHANGE = Decimal("50")
MEDIUM_PCT_CHANGE = Decimal("25")


class Trend(enum.Enum):
    UP = "up"
    DOWN = "down"
    FLAT = "flat"


class ColorTier(enum.Enum):
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def classify(prev_amount: Optional[Decimal], curr_amount: Decimal) -> Tuple[Trend, ColorTier]:
    """Return the trend and color tier for a move from prev_amount to curr_amount.

    A missing or zero previous amount is a baseline: no arrow, no color.
    """
    if prev_amount is None or prev_amount == 0:
        return Trend.FLAT, ColorTier.NONE

    change = curr_amount - prev_amount
    if change == 0:
        return Trend.FLAT, ColorTier.NONE
    pct_change = 100 * change / prev_amount

    trend = Trend.UP if change > 0 else Trend.DOWN

    abs_change = abs(change)
    abs_pct_change = abs(pct_change)
    if abs_change >= HIGH_CHANGE or abs_pct_change >= HIGH_PCT_CHANGE:
        return trend, ColorTier.HIGH
    if abs_change >= MEDIUM_CHANGE or abs_pct_change >= MEDIUM_PCT_CHANGE:
        return trend, ColorTier.MEDIUM
    return trend, ColorTier.LOW
