import copy
import json
import logging
import os
import sys

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from expert_pricing.config import settings as settings_module
from expert_pricing.config.loader import load_pricing_config
from expert_pricing.config.settings import Settings, get_settings, reset_settings
from expert_pricing.engine import (
    ComplexityMultiplier,
    ConfigurationError,
    PricingConfiguration,
    PricingTier,
    UrgencyMultiplier,
    validate_config,
)


@pytest.fixture
def reference_data():
    with open(Settings.load().pricing_config, 'r', encoding='utf-8') as f:
        return json.load(f)


def _write(tmp_path, data):
    path = tmp_path / 'pricing.json'
    path.write_text(json.dumps(data), encoding='utf-8')
    return path


def test_reference_configuration_loads():
    config = load_pricing_config()

    assert [t.id for t in config.tiers] == ['basic', 'standard', 'premium']
    assert (config.executor_percentage, config.reviewer_percentage, config.platform_percentage) == (65, 15, 20)

    standard = config.get_tier('standard')
    assert standard.base_price_per_page == 20
    assert standard.base_price_per_word == pytest.approx(0.08)
    assert config.get_urgency('48h').multiplier == pytest.approx(1.3)
    assert config.get_complexity('hard').multiplier == pytest.approx(1.5)
    assert config.get_complexity('hard').examples


def test_lookup_miss_returns_none():
    config = load_pricing_config()

    assert config.get_tier('gold') is None
    assert config.get_urgency('') is None
    assert config.get_complexity('extreme') is None


def test_round_trip_through_dict(reference_data):
    config = PricingConfiguration.from_dict(reference_data)

    assert PricingConfiguration.from_dict(config.to_dict()) == config


def test_list_shaped_sections(reference_data):
    data = copy.deepcopy(reference_data)
    data['tiers'] = [dict(id=key, **value) for key, value in data['tiers'].items()]

    config = PricingConfiguration.from_dict(data)
    assert config.get_tier('premium').base_price_per_page == 30


def test_percentages_must_sum_to_100(tmp_path, reference_data):
    reference_data['platform_percentage'] = 25

    with pytest.raises(ConfigurationError) as exc:
        load_pricing_config(_write(tmp_path, reference_data))

    assert any('sum to 100' in err for err in exc.value.errors)


def test_direct_construction_is_validated():
    with pytest.raises(ConfigurationError):
        PricingConfiguration(
            tiers=(PricingTier('standard', 'Standard', 20, 0.08),),
            urgencies=(UrgencyMultiplier('standard', 'Standard', 168, 1.0),),
            complexities=(ComplexityMultiplier('easy', 'Easy', 1.0),),
            executor_percentage=60,
            reviewer_percentage=15,
            platform_percentage=20,
        )


@pytest.mark.parametrize("mutate,message", [
    (lambda d: d.update(tiers={}), "'tiers' must contain at least one entry"),
    (lambda d: d['urgency']['48h'].update(multiplier=0.9), "multiplier must be >= 1.0"),
    (lambda d: d['complexity']['easy'].update(multiplier=float('nan')), "multiplier must be >= 1.0"),
    (lambda d: d['tiers']['basic'].update(base_price_per_page=-1), "invalid base_price_per_page"),
    (lambda d: d['urgency']['24h'].update(hours=0), "positive hours window"),
    (lambda d: d.update(executor_percentage=90, reviewer_percentage=-10), "must not be negative"),
])
def test_integrity_errors(reference_data, mutate, message):
    mutate(reference_data)

    with pytest.raises(ConfigurationError) as exc:
        PricingConfiguration.from_dict(reference_data)

    assert any(message in err for err in exc.value.errors), exc.value.errors


def test_duplicate_ids_rejected(reference_data):
    data = copy.deepcopy(reference_data)
    data['tiers'] = [dict(id='basic', **v) for v in data['tiers'].values()]

    with pytest.raises(ConfigurationError) as exc:
        PricingConfiguration.from_dict(data)

    assert any("Duplicate id 'basic'" in err for err in exc.value.errors)


def test_missing_field_rejected(reference_data):
    del reference_data['tiers']['standard']['base_price_per_word']

    with pytest.raises(ConfigurationError, match='base_price_per_word'):
        PricingConfiguration.from_dict(reference_data)


def test_missing_section_rejected(reference_data):
    del reference_data['complexity']

    with pytest.raises(ConfigurationError, match="'complexity'"):
        PricingConfiguration.from_dict(reference_data)


def test_non_numeric_value_rejected(reference_data):
    reference_data['reviewer_percentage'] = 'fifteen'

    with pytest.raises(ConfigurationError):
        PricingConfiguration.from_dict(reference_data)


def test_zero_priced_tier_warns(reference_data):
    reference_data['tiers']['basic'].update(base_price_per_page=0, base_price_per_word=0)

    config = PricingConfiguration.from_dict(reference_data)
    report = validate_config(config)

    assert report.valid
    assert report.warnings == ["Tier 'basic' prices every job at zero"]


def test_missing_file(tmp_path):
    with pytest.raises(ConfigurationError, match='not found'):
        load_pricing_config(tmp_path / 'absent.json')


def test_malformed_json(tmp_path):
    path = tmp_path / 'broken.json'
    path.write_text('{"tiers": ', encoding='utf-8')

    with pytest.raises(ConfigurationError, match='not valid JSON'):
        load_pricing_config(path)


def test_settings_env_override(tmp_path, monkeypatch, reference_data):
    path = _write(tmp_path, reference_data)
    monkeypatch.setenv('EXPERT_PRICING_CONFIG', str(path))
    monkeypatch.setenv('EXPERT_PRICING_LOG_LEVEL', 'debug')
    reset_settings()

    try:
        settings = get_settings()
        assert settings.pricing_config == path
        assert settings.log_level == 'DEBUG'
        assert load_pricing_config().get_tier('standard') is not None
    finally:
        reset_settings()

    assert settings_module._settings is None


def test_loader_logs_zero_priced_tier(tmp_path, reference_data, caplog):
    reference_data['tiers']['basic'].update(base_price_per_page=0, base_price_per_word=0)
    path = _write(tmp_path, reference_data)

    with caplog.at_level(logging.WARNING, logger='expert_pricing.config.loader'):
        load_pricing_config(path)

    assert "Tier 'basic' prices every job at zero" in caplog.text


def test_building_a_configuration_does_not_log(reference_data, caplog):
    reference_data['tiers']['basic'].update(base_price_per_page=0, base_price_per_word=0)

    with caplog.at_level(logging.WARNING):
        PricingConfiguration.from_dict(reference_data)

    assert not caplog.records


@pytest.mark.parametrize("examples", [None, 5, 'thesis', {'a': 1}])
def test_malformed_examples_rejected(reference_data, examples):
    reference_data['complexity']['easy']['examples'] = examples

    with pytest.raises(ConfigurationError, match='examples must be a list'):
        PricingConfiguration.from_dict(reference_data)
