"""PRD precondition gate for specialist sub-agent invocations.

Blocks a gated sub-agent (exit 3) when the working directory has no docs/
directory, or docs/ holds no prd-*.json file. Everything else, including
malformed input and the gate's own failures, is allowed (exit 0).
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError

from . import ExitCode
from .config import GateConfig
from .observability import emit_block, emit_internal_error, logger


class InvocationDescriptor(BaseModel):
    """Pending tool invocation. Only `subagent_type` is inspected."""

    model_config = ConfigDict(extra="ignore")

    subagent_type: str | None = None


EMPTY_DESCRIPTOR = InvocationDescriptor()


def _validate(data: object) -> InvocationDescriptor:
    if not isinstance(data, dict):
        return EMPTY_DESCRIPTOR
    try:
        return InvocationDescriptor.model_validate(data)
    except ValidationError:
        logger.debug("subagent_type is not a string; treating as empty")
        return EMPTY_DESCRIPTOR


def parse_descriptor(raw_input: str | None) -> InvocationDescriptor:
    """Parse descriptor JSON. Absent or malformed input yields an empty descriptor.

    Accepts the flat form `{"subagent_type": ...}` and the PreToolUse payload
    form `{"tool_input": {"subagent_type": ...}}`; the flat field wins.
    """
    if not raw_input:
        return EMPTY_DESCRIPTOR
    try:
        data = json.loads(raw_input)
    except (json.JSONDecodeError, TypeError, ValueError):
        logger.debug("descriptor is not valid JSON; treating as empty")
        return EMPTY_DESCRIPTOR

    if isinstance(data, dict) and "subagent_type" not in data:
        return _validate(data.get("tool_input"))
    return _validate(data)


def find_prd_files(docs_dir: Path, config: GateConfig) -> list[str]:
    """Sorted names of PRD files directly inside docs_dir (non-recursive).

    Raises:
        FileNotFoundError: docs_dir does not exist.
        OSError: docs_dir cannot be listed.
    """
    return sorted(entry.name for entry in docs_dir.iterdir() if config.is_prd_name(entry.name))


@dataclass(frozen=True)
class Verdict:
    """Outcome of a precondition check."""

    exit_code: ExitCode
    message: str = ""

    @property
    def blocked(self) -> bool:
        return self.exit_code == ExitCode.BLOCK


ALLOW = Verdict(ExitCode.ALLOW)


def _missing_prd_message(subagent_type: str, config: GateConfig, reason: str) -> str:
    pattern = f"{config.docs_dir}/{config.prd_prefix}*{config.prd_suffix}"
    return (
        f"BLOCKED: {subagent_type} requires a PRD but {reason}. "
        f"Create a PRD first ({pattern}) before running this agent."
    )


def locate_prd_files(working_dir: Path, config: GateConfig) -> list[str] | None:
    """PRD names in the docs directory, or None when it does not exist.

    Raises:
        NotADirectoryError: docs path exists but is not a directory.
        OSError: docs directory cannot be listed.
    """
    try:
        return find_prd_files(working_dir / config.docs_dir, config)
    except FileNotFoundError:
        return None


def check_precondition(subagent_type: str, working_dir: Path, config: GateConfig) -> Verdict:
    """Check the docs/ PRD precondition for a gated sub-agent.

    Only the missing directory and the empty PRD set produce a block.
    Any other filesystem error propagates to the caller.
    """
    prd_files = locate_prd_files(working_dir, config)
    if prd_files is None:
        return Verdict(
            ExitCode.BLOCK,
            _missing_prd_message(subagent_type, config, f"no {config.docs_dir}/ directory exists"),
        )
    if not prd_files:
        return Verdict(
            ExitCode.BLOCK,
            _missing_prd_message(subagent_type, config, f"{config.docs_dir}/ contains no PRD files"),
        )

    logger.debug("found %d PRD file(s) for %s", len(prd_files), subagent_type)
    return ALLOW


def evaluate(raw_input: str | None, working_dir: Path, config: GateConfig) -> Verdict:
    """Decide allow/block without any error handling or output."""
    subagent_type = parse_descriptor(raw_input).subagent_type
    if subagent_type is None:
        return ALLOW
    if not config.is_gated(subagent_type):
        logger.debug("%s is not gated", subagent_type)
        return ALLOW
    return check_precondition(subagent_type, working_dir, config)


def run_gate(
    raw_input: str | None,
    working_dir: Path,
    config: GateConfig | None = None,
    *,
    debug: bool = False,
) -> ExitCode:
    """Run the gate and write its diagnostic line, if any.

    Fail-open: any unexpected error results in ExitCode.ALLOW. With `debug`
    the error message is printed; the exit code is unchanged.
    """
    try:
        if config is None:
            config = GateConfig.from_preset()
        verdict = evaluate(raw_input, working_dir, config)
    except Exception as e:
        if debug:
            emit_internal_error(e)
        return ExitCode.ALLOW

    if verdict.blocked:
        emit_block(verdict.message)
    return verdict.exit_code
