"""
Settings for tsconfig-includes itself, and TOML-based loading of them.

Searches for `.tsconfig-includes.toml`, `tsconfig-includes.toml`, or
`pyproject.toml [tool.tsconfig-includes]` walking up from the current directory.
Settings are merged with CLI flags using three-way precedence: explicit CLI
flags > config file > built-in defaults.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, cast

from tsconfig_includes.tsconfig.types import CONFIG_FILENAME, ExtendsOrder

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]

logger = logging.getLogger(__name__)

TOOL_NAME = "tsconfig-includes"


@dataclass
class ResolverOptions:
    """Effective options for one resolution."""

    max_workers: int | None = None  # None: the executor's default
    extends_order: ExtendsOrder = ExtendsOrder.LEFT_TO_RIGHT
    config_filename: str = CONFIG_FILENAME
    extend_exclude: list[str] = field(default_factory=list)
    follow_symlinks: bool = True


@dataclass
class ToolConfig:
    """
    Parsed settings from a TOML file. Fields are `None` when not set, so the
    merge can tell "not configured" apart from "set to the default value".
    """

    max_workers: int | None = None
    extends_order: ExtendsOrder | None = None
    config_filename: str | None = None
    extend_exclude: list[str] | None = None
    follow_symlinks: bool | None = None


# Config file search order (first match wins within each directory level)
_CONFIG_FILENAMES = [f".{TOOL_NAME}.toml", f"{TOOL_NAME}.toml", "pyproject.toml"]

# Aliases accepted in TOML besides the kebab-case form of each field name
_KEY_ALIASES: dict[str, str] = {
    "jobs": "max_workers",
}

_VALID_FIELDS = {f.name for f in fields(ToolConfig)}


def find_config_file(start_dir: Path) -> Path | None:
    """
    Walk up from `start_dir` looking for a settings file. Returns the first
    found, or `None`. `pyproject.toml` only counts if it has a
    `[tool.tsconfig-includes]` table.
    """
    current = start_dir.resolve()
    while True:
        for filename in _CONFIG_FILENAMES:
            candidate = current / filename
            if candidate.is_file():
                if filename == "pyproject.toml":
                    if _pyproject_has_tool_section(candidate):
                        return candidate
                else:
                    return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def _pyproject_has_tool_section(path: Path) -> bool:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
        return TOOL_NAME in data.get("tool", {})
    except (tomllib.TOMLDecodeError, OSError):
        return False


def load_config(config_path: Path) -> ToolConfig:
    """
    Load a `ToolConfig` from a TOML file. Malformed files and values of the
    wrong type are logged and skipped rather than aborting the run.
    """
    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except (tomllib.TOMLDecodeError, OSError) as e:
        logger.warning("Ignoring unreadable settings file %s: %s", config_path, e)
        return ToolConfig()

    if config_path.name == "pyproject.toml":
        data = data.get("tool", {}).get(TOOL_NAME, {})

    return _parse_config_data(cast(dict[str, Any], data), config_path)


def _parse_config_data(data: dict[str, Any], source: Path) -> ToolConfig:
    mapped: dict[str, Any] = {}
    for key, value in data.items():
        name = _KEY_ALIASES.get(key, key.replace("-", "_"))
        if name not in _VALID_FIELDS:
            logger.warning("%s: unrecognized config key %r", source, key)
            continue
        mapped[name] = value

    try:
        if "extends_order" in mapped:
            mapped["extends_order"] = ExtendsOrder(mapped["extends_order"])
    except ValueError:
        logger.warning("%s: invalid extends-order %r", source, mapped.pop("extends_order"))

    checks: dict[str, type | tuple[type, ...]] = {
        "max_workers": int,
        "config_filename": str,
        "extend_exclude": list,
        "follow_symlinks": bool,
    }
    for name, expected in checks.items():
        if name in mapped and not isinstance(mapped[name], expected):
            logger.warning("%s: ignoring %s of wrong type", source, name)
            del mapped[name]
    if "extend_exclude" in mapped and not all(
        isinstance(p, str) for p in cast(list[Any], mapped["extend_exclude"])
    ):
        logger.warning("%s: extend-exclude must be a list of strings", source)
        del mapped["extend_exclude"]
    if isinstance(mapped.get("max_workers"), bool):
        logger.warning("%s: ignoring max_workers of wrong type", source)
        del mapped["max_workers"]
    if mapped.get("max_workers", 1) < 1:
        logger.warning("%s: max-workers must be at least 1", source)
        del mapped["max_workers"]

    return ToolConfig(**mapped)


def merge_cli_with_config(
    cli_opts: ResolverOptions,
    config: ToolConfig | None,
    explicit_flags: set[str],
) -> ResolverOptions:
    """
    Merge CLI options with settings from a file.

    Precedence: explicit CLI flags > config file > built-in defaults.
    """
    if config is None:
        return cli_opts

    for cfg_field in fields(ToolConfig):
        cfg_value = getattr(config, cfg_field.name)
        if cfg_value is None:
            continue  # Not set in config

        if cfg_field.name in explicit_flags:
            continue

        setattr(cli_opts, cfg_field.name, cfg_value)

    return cli_opts
