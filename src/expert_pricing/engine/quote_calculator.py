"""
Quote Calculator - core job pricing logic with traceability.

Prices a job from a PricingConfiguration and JobParameters:
- Tier / urgency / complexity lookup with no default substitution
- Base price from the active sizing mode (pages or words)
- Urgency and complexity multipliers applied without intermediate rounding
- Three-way commission split of the total
- Execution trace for every step

Everything here is pure: the configuration is passed in, nothing is cached,
and identical inputs give identical results.
"""
import logging
import math
from datetime import datetime
from numbers import Real
from typing import Any, Optional

from .commission import split_commission
from .models import (
    JobParameters,
    PriceBreakdown,
    PricingConfiguration,
    QuoteResult,
    QuoteStatus,
    SizingMode,
    UrgencyMultiplier,
)

logger = logging.getLogger(__name__)


def calculate(config: PricingConfiguration, params: JobParameters) -> QuoteResult:
    """
    Calculate a quote with full traceability.

    Resolution order:
    1. Look up tier, urgency and complexity ids (any miss → INVALID_SELECTION)
    2. Read the quantity of the active sizing mode (missing/invalid → NOT_COMPUTABLE)
    3. base = rate for mode × quantity
    4. total = base × urgency factor × complexity factor
    5. Split total into executor / reviewer / platform shares
    """
    result = QuoteResult(status=QuoteStatus.OK)

    tier = config.get_tier(params.tier_id)
    urgency = config.get_urgency(params.urgency_id)
    complexity = config.get_complexity(params.complexity_id)

    missing = []
    if tier is None:
        missing.append("tier")
        result.add_trace("Tier Lookup", f"Unknown tier '{params.tier_id}'")
    else:
        result.add_trace("Tier Lookup", f"Resolved tier {tier.name}", tier.id)
    if urgency is None:
        missing.append("urgency")
        result.add_trace("Urgency Lookup", f"Unknown urgency '{params.urgency_id}'")
    else:
        result.add_trace("Urgency Lookup", f"Resolved urgency {urgency.name}", f"×{urgency.multiplier}")
    if complexity is None:
        missing.append("complexity")
        result.add_trace("Complexity Lookup", f"Unknown complexity '{params.complexity_id}'")
    else:
        result.add_trace("Complexity Lookup", f"Resolved complexity {complexity.name}", f"×{complexity.multiplier}")

    if missing:
        result.status = QuoteStatus.INVALID_SELECTION
        result.invalid_fields = missing
        result.reason = "Unknown " + ", ".join(
            f"{name} '{getattr(params, name + '_id')}'" for name in missing
        )
        logger.warning("Quote selection could not be resolved: %s", result.reason)
        return result

    mode = params.sizing.mode
    quantity = coerce_quantity(params.sizing.count)
    if quantity is None:
        result.status = QuoteStatus.NOT_COMPUTABLE
        result.reason = f"No valid {mode.value} count entered"
        result.add_trace("Sizing", result.reason)
        logger.debug("Quote not computable: %s (raw=%r)", result.reason, params.sizing.count)
        return result

    if mode is SizingMode.PAGES:
        rate = tier.base_price_per_page
    else:
        rate = tier.base_price_per_word
    base_price = rate * quantity
    result.add_trace("Base Price", f"{quantity:g} {mode.value} × ${rate}", f"${base_price:.2f}")

    total_price = base_price * urgency.multiplier * complexity.multiplier
    result.add_trace(
        "Multipliers",
        f"${base_price:.2f} × {urgency.multiplier} × {complexity.multiplier}",
        f"${total_price:.2f}",
    )
    if not math.isfinite(total_price):
        result.status = QuoteStatus.NOT_COMPUTABLE
        result.reason = f"Price for {quantity:g} {mode.value} is too large to compute"
        logger.debug("Quote not computable: %s", result.reason)
        return result

    split = split_commission(
        total_price,
        config.executor_percentage,
        config.reviewer_percentage,
        config.platform_percentage,
    )
    result.add_trace(
        "Commission Split",
        f"{config.executor_percentage:g}/{config.reviewer_percentage:g}/{config.platform_percentage:g}",
        f"${split.executor_payout:.2f} / ${split.reviewer_commission:.2f} / ${split.platform_fee:.2f}",
    )

    result.breakdown = PriceBreakdown(
        base_price=base_price,
        total_price=total_price,
        executor_payout=split.executor_payout,
        reviewer_commission=split.reviewer_commission,
        platform_fee=split.platform_fee,
        urgency_multiplier=urgency.multiplier,
        complexity_multiplier=complexity.multiplier,
    )
    return result


def price_custom_quote(config: PricingConfiguration, quoted_price: Any) -> QuoteResult:
    """
    Split a price chosen by the reviewer instead of the suggested one.

    The quoted price is taken as-is, so both multipliers are reported as 1.0.
    """
    result = QuoteResult(status=QuoteStatus.OK)

    amount = coerce_quantity(quoted_price)
    if amount is None:
        result.status = QuoteStatus.NOT_COMPUTABLE
        result.reason = "No valid quoted price entered"
        result.add_trace("Custom Quote", result.reason)
        return result

    result.add_trace("Custom Quote", "Reviewer quoted price", f"${amount:.2f}")
    split = split_commission(
        amount,
        config.executor_percentage,
        config.reviewer_percentage,
        config.platform_percentage,
    )
    result.add_trace(
        "Commission Split",
        f"{config.executor_percentage:g}/{config.reviewer_percentage:g}/{config.platform_percentage:g}",
        f"${split.executor_payout:.2f} / ${split.reviewer_commission:.2f} / ${split.platform_fee:.2f}",
    )
    result.breakdown = PriceBreakdown(
        base_price=amount,
        total_price=amount,
        executor_payout=split.executor_payout,
        reviewer_commission=split.reviewer_commission,
        platform_fee=split.platform_fee,
        urgency_multiplier=1.0,
        complexity_multiplier=1.0,
    )
    return result


def resolve_urgency_for_deadline(config: PricingConfiguration, hours_remaining: float) -> UrgencyMultiplier:
    """
    Pick the urgency option matching the time left before a deadline.

    Chooses the tightest window that still covers `hours_remaining`; a
    deadline beyond every window gets the option with the widest window.
    Ties go to the option listed first.
    """
    if not math.isfinite(hours_remaining):
        raise ValueError(f"hours_remaining must be finite, got {hours_remaining!r}")
    hours_remaining = max(0.0, hours_remaining)

    covering = [u for u in config.urgencies if u.hours >= hours_remaining]
    if covering:
        return min(covering, key=lambda u: u.hours)
    return max(config.urgencies, key=lambda u: u.hours)


def hours_until(deadline: datetime, now: Optional[datetime] = None) -> float:
    """Hours between `now` and `deadline` (negative once the deadline passed)."""
    now = now or datetime.now(tz=deadline.tzinfo)
    return (deadline - now).total_seconds() / 3600


def coerce_quantity(raw: Any) -> Optional[float]:
    """
    Turn a raw form value into a positive finite number.

    Returns None for anything that cannot price a job: None, empty or
    non-numeric strings, booleans, zero, negatives, NaN and infinity.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return None
    elif not isinstance(raw, Real):
        return None

    try:
        value = float(raw)
    except (TypeError, ValueError, OverflowError):
        return None

    if not math.isfinite(value) or value <= 0:
        return None
    return value


class QuoteCalculator:
    """
    Calculator bound to one pricing configuration.

    Holds no state besides the configuration; each call recomputes from scratch.
    """

    def __init__(self, config: PricingConfiguration):
        self.config = config

    def calculate(self, params: JobParameters) -> QuoteResult:
        return calculate(self.config, params)

    def price_custom_quote(self, quoted_price: Any) -> QuoteResult:
        return price_custom_quote(self.config, quoted_price)

    def urgency_for_deadline(self, deadline: datetime, now: Optional[datetime] = None) -> UrgencyMultiplier:
        """Resolve the urgency option for an absolute deadline."""
        return resolve_urgency_for_deadline(self.config, hours_until(deadline, now))
