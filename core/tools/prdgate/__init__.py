"""Shared constants for the PRD gate hook.

All modules import exit codes, environment variable names and the known
allow-list presets from here.
"""

from __future__ import annotations

from enum import IntEnum

__version__ = "0.1.0"

# -- Exit Codes ---------------------------------------------------------------


class ExitCode(IntEnum):
    """Process exit status understood by the calling tool."""

    ALLOW = 0
    BLOCK = 3


EXIT_CODE_NAMES: dict[int, str] = {
    ExitCode.ALLOW: "ALLOW",
    ExitCode.BLOCK: "BLOCK",
}

# -- Environment --------------------------------------------------------------

TOOL_INPUT_ENV_VAR = "CLAUDE_TOOL_INPUT"
DEBUG_ENV_VAR = "PRD_GATE_DEBUG"
CONFIG_ENV_VAR = "PRD_GATE_CONFIG"

TRUTHY_VALUES = frozenset({"1", "true", "yes", "on"})

# -- Allow-list presets -------------------------------------------------------

LEGACY_ALIAS = "flow-iteration"

SPECIALIST_AGENTS = frozenset(
    {
        "development-agent",
        "refactor-agent",
        "quality-agent",
        "security-agent",
        "prd-update",
    }
)

# preset name -> (gated agents, legacy aliases)
PRESETS: dict[str, tuple[frozenset[str], frozenset[str]]] = {
    "default": (SPECIALIST_AGENTS, frozenset({LEGACY_ALIAS})),
    "legacy": (frozenset(), frozenset({LEGACY_ALIAS})),
}

DEFAULT_PRESET = "default"

# -- PRD layout ---------------------------------------------------------------

DEFAULT_DOCS_DIR = "docs"
DEFAULT_PRD_PREFIX = "prd-"
DEFAULT_PRD_SUFFIX = ".json"
DEFAULT_CONFIG_RELATIVE = ".claude/prd-gate.yaml"
