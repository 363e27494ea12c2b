"""
Commission Splitter - partitions a quoted price between the three parties.

No rounding happens here; rounding to currency is left to presentation so
that the three shares always reconstruct the total.
"""
import math

from .models import CommissionSplit


def split_commission(
    total_price: float,
    executor_pct: float,
    reviewer_pct: float,
    platform_pct: float,
) -> CommissionSplit:
    """
    Split `total_price` into executor payout, reviewer commission and platform fee.

    Each share is `total_price * (pct / 100)`, scaling down first so a total
    near the float ceiling cannot overflow. The shares sum to the total only
    when the percentages sum to 100, which PricingConfiguration guarantees.
    """
    if not math.isfinite(total_price) or total_price < 0:
        raise ValueError(f"Cannot split a non-finite or negative price: {total_price!r}")

    return CommissionSplit(
        executor_payout=total_price * (executor_pct / 100),
        reviewer_commission=total_price * (reviewer_pct / 100),
        platform_fee=total_price * (platform_pct / 100),
    )
