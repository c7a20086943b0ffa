#!/usr/bin/env -S uv run --script
# /// script
# requires-python = ">=3.11"
# dependencies = [
#   "typer>=0.9.0",
#   "rich>=13.0.0",
#   "pyyaml>=6.0",
#   "pydantic>=2.0",
# ]
# ///
"""
PreToolUse hook that blocks specialist sub-agents until a PRD exists.

Gated subagent_type values (development-agent, refactor-agent, quality-agent,
security-agent, prd-update, legacy flow-iteration) require docs/prd-*.json
in the working directory.

Input: $CLAUDE_TOOL_INPUT (JSON), or stdin with --stdin.

Exit codes:
  0 - Allow (not gated, PRD present, or hook error)
  3 - Block with one-line message to stderr

Fail-open: hook errors never block the tool call.
"""

import sys
from pathlib import Path

TOOLS_DIR = Path(__file__).resolve().parents[2] / "tools"
sys.path.insert(0, str(TOOLS_DIR))
from prdgate.cli import main  # noqa: E402


if __name__ == "__main__":
    main(["check", *sys.argv[1:]])
