"""Tests for production settings parsing."""

import logging

from src.services.costing.production_settings import (
    DEFAULT_ASSEMBLY_MINUTES_BY_SIZE,
    PRODUCTION_DEFAULTS,
    parse_production_settings,
)
from src.utils.constants import (
    SETTING_ASSEMBLY_MINUTES_BY_SIZE,
    SETTING_BATTER_SHRINKAGE_FACTOR,
    SETTING_DEFAULT_UNITS,
    SETTING_LAYER_HEIGHT_INCHES,
    SETTING_LAYERS_PER_TIER,
)


class TestProductionDefaults:
    """Tests for PRODUCTION_DEFAULTS."""

    def test_default_cake_height(self):
        """Three 2.5 inch layers make a 7.5 inch cake."""
        assert PRODUCTION_DEFAULTS.total_cake_height_inches == 7.5

    def test_with_overrides_returns_copy(self):
        """Overrides never mutate the shared defaults."""
        custom = PRODUCTION_DEFAULTS.with_overrides(layers_per_tier=4)
        assert custom.layers_per_tier == 4
        assert PRODUCTION_DEFAULTS.layers_per_tier == 3


class TestParseProductionSettings:
    """Tests for parse_production_settings()."""

    def test_empty_settings_give_defaults(self):
        """No keys at all means every default."""
        assert parse_production_settings({}) == PRODUCTION_DEFAULTS

    def test_valid_values_override(self):
        """Valid strings are parsed into the right types."""
        settings = parse_production_settings(
            {
                SETTING_LAYERS_PER_TIER: "4",
                SETTING_LAYER_HEIGHT_INCHES: "2.0",
                SETTING_DEFAULT_UNITS: "ounces",
            }
        )
        assert settings.layers_per_tier == 4
        assert settings.layer_height_inches == 2.0
        assert settings.default_units == "ounces"
        assert settings.total_cake_height_inches == 8.0

    def test_invalid_values_fall_back(self):
        """Unparseable, zero, negative and NaN values take the default."""
        settings = parse_production_settings(
            {
                SETTING_LAYERS_PER_TIER: "lots",
                SETTING_LAYER_HEIGHT_INCHES: "-1",
                SETTING_BATTER_SHRINKAGE_FACTOR: "nan",
                SETTING_DEFAULT_UNITS: "stone",
            }
        )
        assert settings.layers_per_tier == PRODUCTION_DEFAULTS.layers_per_tier
        assert settings.layer_height_inches == PRODUCTION_DEFAULTS.layer_height_inches
        assert settings.batter_shrinkage_factor == PRODUCTION_DEFAULTS.batter_shrinkage_factor
        assert settings.default_units == "grams"

    def test_assembly_table_json(self):
        """The assembly table is stored as JSON keyed by diameter."""
        settings = parse_production_settings(
            {SETTING_ASSEMBLY_MINUTES_BY_SIZE: '{"6": 10, "8": 18}'}
        )
        assert settings.assembly_minutes_by_size == {6: 10, 8: 18}

    def test_invalid_assembly_table_logs_and_defaults(self, caplog):
        """Bad JSON falls back to the default table with a warning."""
        with caplog.at_level(logging.WARNING):
            settings = parse_production_settings({SETTING_ASSEMBLY_MINUTES_BY_SIZE: "{not json"})

        assert settings.assembly_minutes_by_size == DEFAULT_ASSEMBLY_MINUTES_BY_SIZE
        assert f"Invalid {SETTING_ASSEMBLY_MINUTES_BY_SIZE}" in caplog.text
