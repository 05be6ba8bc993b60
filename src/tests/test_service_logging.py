"""Tests for service layer structured logging.

These tests verify that costing and catalog operations emit structured
log entries with appropriate context information.
"""

import logging
from dataclasses import replace

from src.services import catalog_service
from src.services.costing import CostingCatalog, OrderSnapshot, calculate_cost
from src.services.logging_utils import get_service_logger, log_operation


def _records(caplog, operation):
    return [r for r in caplog.records if getattr(r, "operation", None) == operation]


class TestLoggingUtilities:
    """Tests for logging utility functions."""

    def test_get_service_logger_returns_logger(self):
        """get_service_logger returns a configured Logger instance."""
        logger = get_service_logger("test_module")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "cake_costing.services.test_module"

    def test_get_service_logger_extracts_module_name(self):
        """get_service_logger extracts module name from full path."""
        logger = get_service_logger("src.services.costing.engine")
        assert logger.name == "cake_costing.services.engine"

    def test_log_operation_logs_at_info_level(self, caplog):
        """log_operation logs at INFO level by default."""
        logger = get_service_logger("test")

        with caplog.at_level(logging.INFO):
            log_operation(
                logger,
                operation="test_op",
                outcome="success",
                entity_id=123,
            )

        assert "test_op: success" in caplog.text

    def test_log_operation_logs_at_custom_level(self, caplog):
        """log_operation respects custom log level."""
        logger = get_service_logger("test")

        with caplog.at_level(logging.DEBUG):
            log_operation(
                logger,
                operation="debug_op",
                outcome="debug_outcome",
                level=logging.DEBUG,
            )

        assert "debug_op: debug_outcome" in caplog.text

    def test_log_operation_includes_extra_context(self, caplog):
        """log_operation includes extra context in log records."""
        logger = get_service_logger("test")

        with caplog.at_level(logging.INFO):
            log_operation(
                logger,
                operation="context_test",
                outcome="success",
                recipe_id=42,
                tier_index=2,
            )

        # Check that the log record has extra attributes
        assert len(caplog.records) == 1
        record = caplog.records[0]
        assert record.operation == "context_test"
        assert record.outcome == "success"
        assert record.recipe_id == 42
        assert record.tier_index == 2


class TestCostingLogging:
    """Tests for costing engine logging."""

    def test_fallback_rate_is_logged(self, eight_inch_tier, caplog):
        """Pricing without labor roles logs the fallback rate lookup."""
        with caplog.at_level(logging.DEBUG, logger="cake_costing.services"):
            calculate_cost(OrderSnapshot(tiers=[eight_inch_tier]), CostingCatalog())

        records = _records(caplog, "resolve_labor_role")
        assert records
        assert records[0].outcome == "fallback_rate"
        assert records[0].role_name == "Baker"

    def test_missing_batter_is_warned(self, eight_inch_tier, caplog):
        """A tier with no batter recipe logs a warning naming the tier."""
        tier = replace(eight_inch_tier, tier_index=3)
        with caplog.at_level(logging.WARNING, logger="cake_costing.services"):
            calculate_cost(OrderSnapshot(tiers=[tier]), CostingCatalog())

        records = _records(caplog, "resolve_recipe")
        assert any(r.outcome == "no_recipe_of_type" and r.tier_index == 3 for r in records)
        assert all(r.levelno == logging.WARNING for r in records)


class TestCatalogLogging:
    """Tests for catalog_service logging."""

    def test_seed_logs_counts(self, test_db, caplog):
        """Seeding logs its counts at INFO."""
        with caplog.at_level(logging.INFO, logger="cake_costing.services"):
            catalog_service.seed_costing_defaults()

        assert "seed_costing_defaults: success" in caplog.text
        (record,) = _records(caplog, "seed_costing_defaults")
        assert record.roles_created == 3
        assert record.tier_sizes_created == 5

    def test_load_logs_at_debug(self, test_db, caplog):
        """Loading the catalog logs table sizes at DEBUG."""
        with caplog.at_level(logging.DEBUG, logger="cake_costing.services"):
            catalog_service.load_costing_catalog()

        (record,) = _records(caplog, "load_costing_catalog")
        assert record.recipe_count == 0
