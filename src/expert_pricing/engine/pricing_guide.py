"""
Pricing guide - rate table for every tier × urgency × complexity combination.

Used by the operator UI and the API to show what a given job size would cost
under each option, the way the reviewer-facing pricing guide lists them.
"""
import pandas as pd

from .models import JobParameters, PricingConfiguration, Sizing
from .quote_calculator import calculate

GUIDE_COLUMNS = [
    'Tier', 'Urgency', 'Complexity',
    'Base Price', 'Urgency ×', 'Complexity ×',
    'Total', 'Executor Payout', 'Reviewer Commission', 'Platform Fee',
]


def build_pricing_guide(config: PricingConfiguration, sizing: Sizing) -> pd.DataFrame:
    """
    Price `sizing` under every combination, in configuration order.

    Returns an empty frame (same columns) when the size cannot be priced.
    """
    rows = []
    for tier in config.tiers:
        for urgency in config.urgencies:
            for complexity in config.complexities:
                result = calculate(config, JobParameters(
                    tier_id=tier.id,
                    urgency_id=urgency.id,
                    complexity_id=complexity.id,
                    sizing=sizing,
                ))
                if not result.is_ok:
                    return pd.DataFrame(columns=GUIDE_COLUMNS)

                b = result.breakdown
                rows.append({
                    'Tier': tier.id,
                    'Urgency': urgency.id,
                    'Complexity': complexity.id,
                    'Base Price': b.base_price,
                    'Urgency ×': b.urgency_multiplier,
                    'Complexity ×': b.complexity_multiplier,
                    'Total': b.total_price,
                    'Executor Payout': b.executor_payout,
                    'Reviewer Commission': b.reviewer_commission,
                    'Platform Fee': b.platform_fee,
                })

    return pd.DataFrame(rows, columns=GUIDE_COLUMNS)


def summarize_by_tier(guide: pd.DataFrame) -> pd.DataFrame:
    """Cheapest and most expensive total per tier."""
    if guide.empty:
        return pd.DataFrame(columns=['Tier', 'Min Total', 'Max Total'])
    summary = guide.groupby('Tier', sort=False)['Total'].agg(['min', 'max']).reset_index()
    return summary.rename(columns={'min': 'Min Total', 'max': 'Max Total'})
