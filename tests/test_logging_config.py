"""
tests/test_logging_config.py

Tests for structured logging and performance tracking.
"""

import logging

import pytest

from component_15_logging_config import (
    PerformanceLogger,
    StructuredLogger,
    get_logger,
)


class TestStructuredLogger:
    def test_get_logger(self):
        logger = get_logger("blockarm.test")

        assert isinstance(logger, StructuredLogger)
        assert logger.logger.name == "blockarm.test"

    def test_extra_stored_as_extra_info(self, caplog):
        logger = get_logger("blockarm.test.extra")

        with caplog.at_level(logging.INFO, logger="blockarm.test.extra"):
            logger.info("Plan found", extra={"plan_length": 3})

        record = caplog.records[-1]
        assert record.getMessage() == "Plan found"
        assert record.extra_info == {"plan_length": 3}


class TestPerformanceLogger:
    def test_measures_duration(self):
        with PerformanceLogger(logging.getLogger("blockarm.test.perf"), "noop") as perf:
            sum(range(100))

        assert perf.duration_ms >= 0.0

    def test_does_not_swallow_exceptions(self):
        with pytest.raises(RuntimeError):
            with PerformanceLogger(logging.getLogger("blockarm.test.perf"), "boom"):
                raise RuntimeError("boom")
