"""Tests for service layer structured logging.

These tests verify that aggregation and shopping list operations emit
structured log entries with appropriate context information.
"""

import logging
import pytest

from src.services.exceptions import ProductNotFound, UnitMismatch
from src.services.ingredient_aggregation_service import aggregate
from src.services.logging_utils import get_service_logger, log_operation
from src.services.selection import Selection
from src.services.shopping_list_service import aggregate_and_project


def _records(caplog, operation):
    return [r for r in caplog.records if getattr(r, "operation", None) == operation]


class TestLoggingUtilities:
    """Tests for logging utility functions."""

    def test_get_service_logger_returns_logger(self):
        """get_service_logger returns a configured Logger instance."""
        logger = get_service_logger("test_module")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "catering_logistics.services.test_module"

    def test_get_service_logger_extracts_module_name(self):
        """get_service_logger extracts module name from full path."""
        logger = get_service_logger("src.services.shopping_list_service")
        assert logger.name == "catering_logistics.services.shopping_list_service"

    def test_log_operation_logs_at_info_level(self, caplog):
        """log_operation logs at INFO level by default."""
        logger = get_service_logger("test")

        with caplog.at_level(logging.INFO):
            log_operation(logger, operation="test_op", outcome="success", entity_id=123)

        assert "test_op: success" in caplog.text

    def test_log_operation_includes_extra_context(self, caplog):
        """log_operation includes extra context in log records."""
        logger = get_service_logger("test")

        with caplog.at_level(logging.INFO):
            log_operation(
                logger,
                operation="context_test",
                outcome="success",
                event_id=42,
                ingredient_count=7,
            )

        assert len(caplog.records) == 1
        record = caplog.records[0]
        assert record.operation == "context_test"
        assert record.outcome == "success"
        assert record.event_id == 42
        assert record.ingredient_count == 7


class TestShoppingListLogging:
    """Tests for shopping_list_service logging."""

    def test_success_logs_counts(self, burger_storage, caplog):
        with caplog.at_level(logging.INFO, logger="catering_logistics.services"):
            aggregate_and_project([Selection(1, "Burger", 2)], burger_storage)

        [record] = _records(caplog, "aggregate_and_project")
        assert record.outcome == "success"
        assert record.selection_count == 1
        assert record.ingredient_count == 2
        assert record.without_packaging == 0

    def test_failure_logged_as_warning(self, burger_storage, caplog):
        with caplog.at_level(logging.WARNING, logger="catering_logistics.services"):
            with pytest.raises(ProductNotFound):
                aggregate_and_project([Selection(99, "Unbekannt", 1)], burger_storage)

        records = _records(caplog, "aggregate_and_project")
        assert records[0].levelno == logging.WARNING
        assert records[0].outcome == "failed"
        assert records[0].error_type == "ProductNotFound"


class TestAggregationLogging:
    """Tests for ingredient_aggregation_service logging."""

    def test_unit_mismatch_logged(self, burger_storage, caplog):
        burger_storage.add_product(3, "Broken Wrap", "Stück")
        burger_storage.add_recipe_line(3, 10, 1, unit="g")

        with caplog.at_level(logging.WARNING, logger="catering_logistics.services"):
            with pytest.raises(UnitMismatch):
                aggregate(
                    [Selection(1, "Burger", 1), Selection(3, "Broken Wrap", 1)], burger_storage
                )

        assert "aggregate: unit_mismatch" in caplog.text

    def test_success_logged_at_debug(self, burger_storage, caplog):
        with caplog.at_level(logging.DEBUG, logger="catering_logistics.services"):
            aggregate([Selection(2, "Wrap", 3)], burger_storage)

        assert "aggregate: success" in caplog.text
