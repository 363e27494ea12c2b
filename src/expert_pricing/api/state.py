"""
Shared API state - the calculator bound to the loaded pricing configuration.
"""
from typing import Optional

from ..config.loader import load_pricing_config
from ..engine import PricingConfiguration, QuoteCalculator

_calculator: Optional[QuoteCalculator] = None


def get_calculator() -> QuoteCalculator:
    """Return the calculator, loading the configuration on first use."""
    global _calculator
    if _calculator is None:
        _calculator = QuoteCalculator(load_pricing_config())
    return _calculator


def set_config(config: PricingConfiguration) -> QuoteCalculator:
    """Swap in a new configuration (e.g. after the pricing table was updated)."""
    global _calculator
    _calculator = QuoteCalculator(config)
    return _calculator
