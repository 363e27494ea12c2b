"""
Configuration loader - reads the pricing table from JSON.

The file is validated as it is loaded; a configuration that fails any
integrity check is rejected with ConfigurationError. Warnings about a
configuration that loads are logged here, where it goes live.
"""
import json
import logging
from pathlib import Path
from typing import Optional

from ..engine.models import ConfigurationError, PricingConfiguration
from ..engine.validation import validate_config
from .settings import get_settings

logger = logging.getLogger(__name__)


def load_pricing_config(path: Optional[Path] = None) -> PricingConfiguration:
    """Load and validate the pricing configuration from `path` (or settings)."""
    path = Path(path) if path else get_settings().pricing_config

    if not path.exists():
        raise ConfigurationError(f"Pricing configuration not found at {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Pricing configuration at {path} is not valid JSON: {e}") from e

    config = PricingConfiguration.from_dict(data)
    logger.info(
        "Loaded pricing configuration from %s (%d tiers, %d urgency, %d complexity)",
        path, len(config.tiers), len(config.urgencies), len(config.complexities),
    )
    for warning in validate_config(config).warnings:
        logger.warning("Pricing configuration %s: %s", path, warning)
    return config
