"""Diagnostic output for the gate.

The hook writes at most one line to stderr per invocation:
  - a block message when the PRD precondition is unmet, or
  - in debug mode, the message of a swallowed internal error.

Everything else goes through the `prdgate` logger, which is silent unless
`configure_logging()` attaches a handler.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TextIO

from . import DEBUG_ENV_VAR, TRUTHY_VALUES

logger = logging.getLogger("prdgate")

LOG_FORMAT = "[prd-gate] %(levelname)s %(message)s"


def is_debug_enabled(env: dict[str, str] | None = None) -> bool:
    """Read the debug toggle from the environment."""
    source = os.environ if env is None else env
    return source.get(DEBUG_ENV_VAR, "").strip().lower() in TRUTHY_VALUES


HANDLER_NAME = "prdgate"


def configure_logging(debug: bool) -> None:
    """Attach a stderr handler to the package logger (idempotent)."""
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    if any(h.get_name() == HANDLER_NAME for h in logger.handlers):
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False


def _single_line(message: str) -> str:
    return " ".join(message.split())


def emit_block(message: str, stream: TextIO | None = None) -> None:
    """Write the block diagnostic as exactly one line."""
    print(_single_line(message), file=stream or sys.stderr, flush=True)


def emit_internal_error(error: BaseException, stream: TextIO | None = None) -> None:
    """Write a swallowed internal error as one line (debug mode only)."""
    detail = _single_line(str(error)) or type(error).__name__
    print(
        f"prd-gate: internal error (allowing): {detail}",
        file=stream or sys.stderr,
        flush=True,
    )
