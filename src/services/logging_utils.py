"""Service layer logging utilities.

Provides structured logging functions for service operations, enabling
consistent log format and context across aggregation, export and
catalog operations.

Usage:
    from src.services.logging_utils import get_service_logger, log_operation

    logger = get_service_logger(__name__)

    log_operation(
        logger,
        operation="aggregate",
        outcome="success",
        selection_count=4,
        ingredient_count=11,
    )
"""

import logging
from typing import Any


def get_service_logger(name: str) -> logging.Logger:
    """
    Get a logger configured for service operations.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Logger named 'catering_logistics.services.<module>'

    Example:
        >>> logger = get_service_logger("src.services.shopping_list_service")
        >>> logger.name
        'catering_logistics.services.shopping_list_service'
    """
    if "." in name:
        name = name.split(".")[-1]
    return logging.getLogger(f"catering_logistics.services.{name}")


def log_operation(
    logger: logging.Logger,
    operation: str,
    outcome: str,
    level: int = logging.INFO,
    **context: Any,
) -> None:
    """
    Log a service operation with structured context.

    The context is passed via the 'extra' parameter for structured logging,
    so formatters and handlers can pick up individual fields.

    Args:
        logger: Logger instance to use
        operation: Operation name (e.g., "aggregate", "create_reorder")
        outcome: Outcome description (e.g., "success", "unit_mismatch")
        level: Log level (default: INFO). Use DEBUG for verbose/frequent logs.
        **context: Additional context fields (entity IDs, counts, error details)

    Example:
        >>> log_operation(
        ...     logger,
        ...     operation="aggregate",
        ...     outcome="unit_mismatch",
        ...     level=logging.WARNING,
        ...     ingredient_id=10,
        ... )
    """
    extra = {
        "operation": operation,
        "outcome": outcome,
        **context,
    }
    logger.log(level, f"{operation}: {outcome}", extra=extra)
