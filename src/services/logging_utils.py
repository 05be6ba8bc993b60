"""Service layer logging utilities.

Provides structured logging functions for service operations, enabling
consistent log format and context across the costing pipeline and the
catalog services.

Usage:
    from src.services.logging_utils import get_service_logger, log_operation

    logger = get_service_logger(__name__)

    # Log a completed calculation
    log_operation(
        logger,
        operation="calculate_cost",
        outcome="success",
        tier_count=2,
        final_price="185.30",
    )

    # Log a fallback that callers may want to surface
    log_operation(
        logger,
        operation="resolve_recipe",
        outcome="no_recipe_of_type",
        level=logging.WARNING,
        tier_index=0,
        recipe_type="FILLING",
    )
"""

import logging
from typing import Any

LOGGER_PREFIX = "cake_costing.services"


def get_service_logger(name: str) -> logging.Logger:
    """
    Logger under the cake_costing.services namespace.

    Only the last dotted component of name is kept, so
    get_service_logger("src.services.costing.engine") gives
    "cake_costing.services.engine".
    """
    return logging.getLogger(f"{LOGGER_PREFIX}.{name.rsplit('.', 1)[-1]}")


def log_operation(
    logger: logging.Logger,
    operation: str,
    outcome: str,
    level: int = logging.INFO,
    **context: Any,
) -> None:
    """
    Log a service operation with structured context.

    The message is "<operation>: <outcome>"; the context is passed via the
    'extra' parameter so handlers can emit it as structured fields.

    Args:
        logger: Logger instance to use
        operation: Operation name (e.g., "calculate_cost", "load_costing_catalog")
        outcome: Outcome description (e.g., "success", "fallback_rate", "error")
        level: Log level (default: INFO). Use DEBUG for verbose/frequent logs.
        **context: Additional context fields
            Common fields:
            - tier_index: Tier being resolved
            - recipe_type: BATTER / FILLING / FROSTING
            - recipe_id: Recipe being scaled
            - role_name: Labor role a rate was looked up for
            - error: Error message if outcome is "error"
    """
    extra = {
        "operation": operation,
        "outcome": outcome,
        **context,
    }
    logger.log(level, f"{operation}: {outcome}", extra=extra)
