# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

import logging

import pytest

from aria_validator.utils.diagnostics import DiagnosticsChannel
from aria_validator.utils.logging_helper import (
    InvariantViolationError,
    ValidationRunError,
    handle_exception,
    log_exception,
    setup_logger,
)


def test_report_records_and_logs(caplog):
    channel = DiagnosticsChannel()
    violation = channel.report("owner missing", id="x")

    assert violation.message == "owner missing"
    assert violation.context == {"id": "x"}
    assert channel.violations == [violation]
    assert "Invariant violation: owner missing" in caplog.text


def test_violations_returns_a_copy():
    channel = DiagnosticsChannel()
    channel.report("a")
    channel.violations.clear()
    assert len(channel.violations) == 1
    channel.clear()
    assert channel.violations == []


def test_strict_mode_raises_after_recording():
    channel = DiagnosticsChannel(strict=True)
    with pytest.raises(InvariantViolationError, match="owner missing"):
        channel.report("owner missing")
    assert len(channel.violations) == 1


def test_log_exception_formats_type_and_message(caplog):
    logger = setup_logger("aria_validator.tests.logging")
    log_exception(logger, ValueError("bad"), "While testing", logging.WARNING, include_traceback=False)
    record = caplog.records[-1]
    assert record.levelno == logging.WARNING
    assert record.getMessage() == "While testing: ValueError - bad"
    assert record.exc_info is None


def test_handle_exception_wraps_or_returns():
    logger = setup_logger("aria_validator.tests.logging")
    error = KeyError("k")

    with pytest.raises(ValidationRunError) as excinfo:
        handle_exception(error, logger, "Failed", custom_exception=ValidationRunError)
    assert excinfo.value.__cause__ is error

    with pytest.raises(KeyError):
        handle_exception(error, logger)

    assert handle_exception(error, logger, reraise=False) == {
        "error_type": "KeyError",
        "error_message": "'k'",
    }
