"""
Configuration validation - integrity checks for pricing tables.

Runs whenever a PricingConfiguration is built so that a configuration whose
commission percentages do not add up to 100 never reaches the calculator.
"""
import math
from dataclasses import dataclass, field

PERCENTAGE_TOLERANCE = 1e-9


@dataclass
class ValidationResult:
    """Result of configuration validation."""
    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, error: str):
        self.errors.append(error)
        self.valid = False


def validate_config(config) -> ValidationResult:
    """Validate a PricingConfiguration (or anything shaped like one)."""
    result = ValidationResult(valid=True)

    sections = (
        ('tiers', config.tiers),
        ('urgency', config.urgencies),
        ('complexity', config.complexities),
    )
    for section, entries in sections:
        if not entries:
            result.add_error(f"'{section}' must contain at least one entry")
        _check_ids(section, entries, result)

    for tier in config.tiers:
        for attr in ('base_price_per_page', 'base_price_per_word'):
            rate = getattr(tier, attr)
            if not _finite(rate) or rate < 0:
                result.add_error(f"Tier '{tier.id}' has invalid {attr}: {rate!r}")
        if tier.base_price_per_page == 0 and tier.base_price_per_word == 0:
            result.warnings.append(f"Tier '{tier.id}' prices every job at zero")

    for urgency in config.urgencies:
        _check_multiplier('urgency', urgency, result)
        if not _finite(urgency.hours) or urgency.hours <= 0:
            result.add_error(f"Urgency '{urgency.id}' must have a positive hours window")

    for complexity in config.complexities:
        _check_multiplier('complexity', complexity, result)

    percentages = {
        'executor_percentage': config.executor_percentage,
        'reviewer_percentage': config.reviewer_percentage,
        'platform_percentage': config.platform_percentage,
    }
    if all(_finite(p) for p in percentages.values()):
        for name, pct in percentages.items():
            if pct < 0:
                result.add_error(f"{name} must not be negative (got {pct})")
        total = sum(percentages.values())
        if abs(total - 100) > PERCENTAGE_TOLERANCE:
            result.add_error(f"Commission percentages must sum to 100 (got {total:g})")
    else:
        result.add_error("Commission percentages must be finite numbers")

    return result


def _check_ids(section: str, entries, result: ValidationResult):
    seen = set()
    for entry in entries:
        if not str(entry.id).strip():
            result.add_error(f"'{section}' contains an entry with a blank id")
        if entry.id in seen:
            result.add_error(f"Duplicate id '{entry.id}' in '{section}'")
        seen.add(entry.id)


def _check_multiplier(section: str, entry, result: ValidationResult):
    factor = entry.multiplier
    if not _finite(factor) or factor < 1.0:
        result.add_error(f"{section.capitalize()} '{entry.id}' multiplier must be >= 1.0 (got {factor!r})")


def _finite(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)
