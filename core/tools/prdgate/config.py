"""Gate configuration: presets, YAML file loading, validation and resolution.

Precedence: CLI overrides > config file > built-in preset.

Config file (YAML), default location `.claude/prd-gate.yaml`:

    preset: default            # or "legacy"
    gated_agents: [...]        # replaces the preset's specialist names
    legacy_aliases: [...]      # replaces the preset's aliases
    extra_agents: [...]        # added on top of gated_agents
    docs_dir: docs
    prd_prefix: prd-
    prd_suffix: .json
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, replace
from pathlib import Path

import yaml

from . import (
    CONFIG_ENV_VAR,
    DEFAULT_CONFIG_RELATIVE,
    DEFAULT_DOCS_DIR,
    DEFAULT_PRD_PREFIX,
    DEFAULT_PRD_SUFFIX,
    DEFAULT_PRESET,
    PRESETS,
)


class ConfigError(Exception):
    """Config file exists but cannot be read as a YAML mapping."""


@dataclass(frozen=True)
class GateConfig:
    """Immutable gate settings, built once per process."""

    gated_agents: frozenset[str]
    legacy_aliases: frozenset[str]
    docs_dir: str = DEFAULT_DOCS_DIR
    prd_prefix: str = DEFAULT_PRD_PREFIX
    prd_suffix: str = DEFAULT_PRD_SUFFIX

    @property
    def all_gated(self) -> frozenset[str]:
        return self.gated_agents | self.legacy_aliases

    def is_gated(self, subagent_type: str) -> bool:
        """Exact, case-sensitive membership test."""
        return subagent_type in self.all_gated

    def is_prd_name(self, name: str) -> bool:
        return name.startswith(self.prd_prefix) and name.endswith(self.prd_suffix)

    @classmethod
    def from_preset(cls, preset: str = DEFAULT_PRESET) -> GateConfig:
        """Build config from a named preset.

        Raises:
            KeyError: Unknown preset name.
        """
        agents, aliases = PRESETS[preset]
        return cls(gated_agents=agents, legacy_aliases=aliases)


# -- Validation ---------------------------------------------------------------

KNOWN_KEYS = frozenset(
    {
        "preset",
        "gated_agents",
        "legacy_aliases",
        "extra_agents",
        "docs_dir",
        "prd_prefix",
        "prd_suffix",
    }
)
LIST_KEYS = ("gated_agents", "legacy_aliases", "extra_agents")
STR_KEYS = ("docs_dir", "prd_prefix", "prd_suffix")


def _is_str_list(val: object) -> bool:
    return isinstance(val, list) and all(isinstance(v, str) and v for v in val)


def validate_gate_config(config: dict) -> list[str]:
    """Validate config structure and types.

    Returns list of warning strings. Empty list means valid.
    Warnings (not errors) for forward-compatibility with future config keys.
    """
    warnings: list[str] = []

    for key in config:
        if key not in KNOWN_KEYS:
            warnings.append(f"Unknown top-level key: '{key}' (will be ignored)")

    if "preset" in config:
        preset = config["preset"]
        if not isinstance(preset, str):
            warnings.append(f"preset must be str, got {type(preset).__name__}")
        elif preset not in PRESETS:
            warnings.append(f"preset must be one of {sorted(PRESETS)}, got '{preset}'")

    for key in LIST_KEYS:
        if key in config and not _is_str_list(config[key]):
            warnings.append(f"{key} must be list of non-empty strings")

    for key in STR_KEYS:
        if key not in config:
            continue
        val = config[key]
        if not isinstance(val, str):
            warnings.append(f"{key} must be str, got {type(val).__name__}")
        elif not val:
            warnings.append(f"{key} must be non-empty string")

    docs_dir = config.get("docs_dir")
    if isinstance(docs_dir, str) and Path(docs_dir).is_absolute():
        warnings.append("docs_dir must be relative to the working directory")

    return warnings


# -- Loading ------------------------------------------------------------------


def default_config_path(working_dir: Path) -> Path:
    """Config path from $PRD_GATE_CONFIG, else `.claude/prd-gate.yaml`."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = Path(env_path)
        return path if path.is_absolute() else working_dir / path
    return working_dir / DEFAULT_CONFIG_RELATIVE


def load_gate_config(config_path: Path, quiet: bool = False) -> dict:
    """Load and validate gate config from a YAML file.

    An empty file loads as an empty mapping. Validation warnings go to
    stderr unless `quiet`.

    Raises:
        FileNotFoundError: Config file not found.
        ConfigError: Invalid YAML, or top level is not a mapping.
    """
    if not config_path.is_file():
        raise FileNotFoundError(f"Config not found: {config_path}")

    try:
        config = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigError(
            f"{config_path} must contain a mapping, got {type(config).__name__}"
        )

    if not quiet:
        for warning in validate_gate_config(config):
            print(f"WARNING: {warning}", file=sys.stderr)

    return config


def build_gate_config(config: dict) -> GateConfig:
    """Turn a raw config mapping into a GateConfig, ignoring invalid values."""
    preset = config.get("preset", DEFAULT_PRESET)
    if not isinstance(preset, str) or preset not in PRESETS:
        preset = DEFAULT_PRESET
    gate_config = GateConfig.from_preset(preset)

    agents = gate_config.gated_agents
    aliases = gate_config.legacy_aliases
    if _is_str_list(config.get("gated_agents")):
        agents = frozenset(config["gated_agents"])
    if _is_str_list(config.get("legacy_aliases")):
        aliases = frozenset(config["legacy_aliases"])
    if _is_str_list(config.get("extra_agents")):
        agents = agents | frozenset(config["extra_agents"])

    overrides: dict[str, str] = {}
    for key in STR_KEYS:
        val = config.get(key)
        if isinstance(val, str) and val:
            overrides[key] = val
    if "docs_dir" in overrides and Path(overrides["docs_dir"]).is_absolute():
        del overrides["docs_dir"]

    return replace(gate_config, gated_agents=agents, legacy_aliases=aliases, **overrides)


def resolve_gate_config(
    working_dir: Path,
    config_path: Path | None = None,
    preset: str | None = None,
    quiet: bool = False,
) -> GateConfig:
    """Resolve the effective config for one invocation.

    A missing config file is not an error; the default preset applies.
    An explicit `preset` argument overrides the file's preset.

    Raises:
        FileNotFoundError: Explicit `config_path` does not exist.
        ConfigError: Config file exists but is unreadable.
        KeyError: Unknown `preset` argument.
    """
    path = config_path if config_path is not None else default_config_path(working_dir)

    config: dict = {}
    if path.is_file():
        config = load_gate_config(path, quiet=quiet)
    elif config_path is not None:
        raise FileNotFoundError(f"Config not found: {config_path}")

    if preset is not None:
        if preset not in PRESETS:
            raise KeyError(f"Unknown preset: {preset}")
        config = {**config, "preset": preset}

    return build_gate_config(config)
