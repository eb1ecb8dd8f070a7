# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit tests for errors, logging and progress reporting
"""

import io
import json
import logging

from rich.console import Console

from podzol.core.errors import (
    NotFoundError,
    PodzolError,
    RegistryError,
    ValidationError,
    sanitize_error_for_user,
)
from podzol.core.logging import JSONFormatter, get_logger, get_service_logger, log_event
from podzol.services.progress import RichProgressReporter


class TestErrors:
    """Test error hierarchy"""

    def test_to_dict(self):
        error = ValidationError("Unknown loader 'x'", field="loader", accepted=["fabric", "forge"])

        data = error.to_dict()

        assert data["error"] == "ValidationError"
        assert data["message"] == "Unknown loader 'x'"
        assert data["details"] == {}
        assert error.field == "loader"
        assert error.accepted == ["fabric", "forge"]

    def test_not_found_is_registry_error(self):
        error = NotFoundError("Project", "sodium", url="https://registry.test/v2/project/sodium")

        assert isinstance(error, RegistryError)
        assert isinstance(error, PodzolError)
        assert error.status_code == 404
        assert str(error) == "Project not found: sodium"

    def test_sanitize_first_line(self):
        error = RegistryError("Registry request failed\nTraceback details")

        assert sanitize_error_for_user(error) == "RegistryError: Registry request failed"
        assert sanitize_error_for_user(error, include_type=False) == "Registry request failed"

    def test_sanitize_truncates(self):
        message = sanitize_error_for_user(PodzolError("x" * 600), include_type=False)

        assert len(message) == 503
        assert message.endswith("...")


class TestLogging:
    """Test logger setup"""

    def test_json_formatter_includes_extra_fields(self):
        record = logging.LogRecord("podzol.test", logging.INFO, __file__, 1, "Archive written", None, None)
        record.overrides = 3

        data = json.loads(JSONFormatter().format(record))

        assert data["message"] == "Archive written"
        assert data["level"] == "INFO"
        assert data["overrides"] == 3

    def test_get_logger_replaces_handlers(self):
        logger = get_logger("podzol.test.handlers", log_level="DEBUG")
        logger = get_logger("podzol.test.handlers", log_level="DEBUG")

        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG

    def test_log_event(self, caplog):
        logger = get_service_logger("test")

        with caplog.at_level(logging.WARNING, logger="podzol"):
            log_event(logger, "Override pattern matched no files", level="WARNING", pattern="x/*")

        assert caplog.records[-1].pattern == "x/*"
        assert logger.name == "podzol.service.test"


class TestRichProgressReporter:
    """Test the terminal reporter's task bookkeeping"""

    def test_item_tasks_removed_when_done(self):
        console = Console(file=io.StringIO(), force_terminal=False)
        reporter = RichProgressReporter(console=console)

        reporter.start(2)
        reporter.item_started("mods/sodium")
        reporter.item_started("shaders/complementary")
        reporter.item_done("mods/sodium")

        total = reporter.progress.tasks[0]
        assert total.completed == 1
        assert [t.description for t in reporter.progress.tasks] == [
            "Total progress",
            "Processing shaders/complementary",
        ]

        reporter.item_done("shaders/complementary")
        reporter.finish()
        assert total.completed == 2
