"""
Centralized settings and path configuration for the pricing engine.
"""
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional

CONFIG_ENV_VAR = 'EXPERT_PRICING_CONFIG'
LOG_LEVEL_ENV_VAR = 'EXPERT_PRICING_LOG_LEVEL'


def get_package_root() -> Path:
    """Directory of the expert_pricing package."""
    return Path(__file__).resolve().parent.parent


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Package paths
    package_root: Path

    # Pricing configuration file (tiers, multipliers, commission split)
    pricing_config: Path

    log_level: str = 'INFO'

    @classmethod
    def load(cls, package_root: Optional[Path] = None) -> 'Settings':
        """Load settings, letting environment variables override the defaults."""
        root = package_root or get_package_root()

        config_path = os.environ.get(CONFIG_ENV_VAR)
        return cls(
            package_root=root,
            pricing_config=Path(config_path) if config_path else root / 'data' / 'pricing_config.json',
            log_level=os.environ.get(LOG_LEVEL_ENV_VAR, 'INFO').upper(),
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reset_settings():
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
