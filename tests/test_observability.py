"""Unit tests for prdgate.observability diagnostics."""

from __future__ import annotations

import io
import logging

import pytest

from prdgate.observability import (
    HANDLER_NAME,
    configure_logging,
    emit_block,
    emit_internal_error,
    is_debug_enabled,
    logger,
)


@pytest.mark.parametrize("value", ["1", "true", "TRUE", "yes", "on", " on "])
def test_debug_enabled(value: str) -> None:
    assert is_debug_enabled({"PRD_GATE_DEBUG": value})


@pytest.mark.parametrize("value", ["", "0", "false", "off", "debug"])
def test_debug_disabled(value: str) -> None:
    assert not is_debug_enabled({"PRD_GATE_DEBUG": value})


def test_debug_unset() -> None:
    assert not is_debug_enabled({})


def test_emit_block_single_line() -> None:
    stream = io.StringIO()
    emit_block("BLOCKED:\n  create a PRD\tfirst", stream)
    assert stream.getvalue() == "BLOCKED: create a PRD first\n"


def test_emit_internal_error_uses_message() -> None:
    stream = io.StringIO()
    emit_internal_error(PermissionError("docs: permission denied"), stream)
    assert stream.getvalue() == "prd-gate: internal error (allowing): docs: permission denied\n"


def test_emit_internal_error_without_message() -> None:
    stream = io.StringIO()
    emit_internal_error(RuntimeError(), stream)
    assert "RuntimeError" in stream.getvalue()


def test_configure_logging_idempotent(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging(True)
    configure_logging(True)
    assert sum(h.get_name() == HANDLER_NAME for h in logger.handlers) == 1
    assert logger.level == logging.DEBUG

    logger.debug("hello from test")
    assert capsys.readouterr().err.count("hello from test") == 1


def test_configure_logging_non_debug(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging(False)
    logger.debug("hidden")
    assert capsys.readouterr().err == ""
