"""Engine subpackage - quote calculation and commission splitting."""
from .commission import split_commission
from .models import (
    CommissionSplit,
    ComplexityMultiplier,
    ConfigurationError,
    JobParameters,
    Pages,
    PriceBreakdown,
    PricingConfiguration,
    PricingTier,
    QuoteResult,
    QuoteStatus,
    SizingMode,
    UrgencyMultiplier,
    Words,
)
from .quote_calculator import (
    QuoteCalculator,
    calculate,
    price_custom_quote,
    resolve_urgency_for_deadline,
)
from .validation import ValidationResult, validate_config

__all__ = [
    'CommissionSplit', 'ComplexityMultiplier', 'ConfigurationError', 'JobParameters',
    'Pages', 'PriceBreakdown', 'PricingConfiguration', 'PricingTier', 'QuoteResult',
    'QuoteStatus', 'SizingMode', 'UrgencyMultiplier', 'Words', 'QuoteCalculator',
    'calculate', 'price_custom_quote', 'resolve_urgency_for_deadline', 'split_commission',
    'ValidationResult', 'validate_config',
]
