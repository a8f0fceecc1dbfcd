"""Tests for settings file loading and merging."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tsconfig_includes.config import (
    ResolverOptions,
    ToolConfig,
    find_config_file,
    load_config,
    merge_cli_with_config,
)
from tsconfig_includes.tsconfig import ExtendsOrder


def test_find_config_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "tsconfig-includes.toml"
    config_file.write_text("jobs = 4\n")
    assert find_config_file(tmp_path) == config_file


def test_find_config_dot_file_takes_precedence(tmp_path: Path) -> None:
    (tmp_path / "tsconfig-includes.toml").write_text("jobs = 4\n")
    dot_config = tmp_path / ".tsconfig-includes.toml"
    dot_config.write_text("jobs = 2\n")
    assert find_config_file(tmp_path) == dot_config


def test_find_config_pyproject_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "pyproject.toml"
    config_file.write_text('[tool.tsconfig-includes]\nextends-order = "right-to-left"\n')
    assert find_config_file(tmp_path) == config_file


def test_find_config_pyproject_without_section_skipped(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("[tool.ruff]\nline-length = 100\n")
    assert find_config_file(tmp_path) is None


def test_find_config_walks_up(tmp_path: Path) -> None:
    config_file = tmp_path / "tsconfig-includes.toml"
    config_file.write_text("jobs = 4\n")
    subdir = tmp_path / "packages" / "app"
    subdir.mkdir(parents=True)
    assert find_config_file(subdir) == config_file


def test_find_config_none_when_missing(tmp_path: Path) -> None:
    assert find_config_file(tmp_path) is None


def test_load_config_kebab_case(tmp_path: Path) -> None:
    config_file = tmp_path / "tsconfig-includes.toml"
    config_file.write_text(
        "max-workers = 3\n"
        'extends-order = "right-to-left"\n'
        'config-filename = "tsconfig.build.json"\n'
        'extend-exclude = ["**/*.stories.tsx"]\n'
        "follow-symlinks = false\n"
    )
    config = load_config(config_file)
    assert config.max_workers == 3
    assert config.extends_order is ExtendsOrder.RIGHT_TO_LEFT
    assert config.config_filename == "tsconfig.build.json"
    assert config.extend_exclude == ["**/*.stories.tsx"]
    assert config.follow_symlinks is False


def test_load_config_jobs_alias(tmp_path: Path) -> None:
    config_file = tmp_path / "tsconfig-includes.toml"
    config_file.write_text("jobs = 6\n")
    assert load_config(config_file).max_workers == 6


def test_load_config_pyproject_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "pyproject.toml"
    config_file.write_text(
        '[project]\nname = "x"\n\n[tool.tsconfig-includes]\nextend-exclude = ["scripts"]\n'
    )
    config = load_config(config_file)
    assert config.extend_exclude == ["scripts"]
    assert config.max_workers is None


def test_load_config_partial(tmp_path: Path) -> None:
    config_file = tmp_path / "tsconfig-includes.toml"
    config_file.write_text("follow-symlinks = true\n")
    config = load_config(config_file)
    assert config.follow_symlinks is True
    # Everything else should be None (not set)
    assert config.max_workers is None
    assert config.extends_order is None
    assert config.extend_exclude is None


def test_load_config_malformed_toml(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    """Malformed TOML should return an empty config, not crash."""
    config_file = tmp_path / "tsconfig-includes.toml"
    config_file.write_text("this is not valid toml [[[")
    with caplog.at_level(logging.WARNING):
        config = load_config(config_file)
    assert config == ToolConfig()
    assert "Ignoring unreadable settings file" in caplog.text


def test_parse_config_warns_unknown_keys(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    config_file = tmp_path / "tsconfig-includes.toml"
    config_file.write_text("unknown_key = true\njobs = 2\n")
    with caplog.at_level(logging.WARNING):
        config = load_config(config_file)
    assert config.max_workers == 2
    assert "unrecognized config key" in caplog.text


@pytest.mark.parametrize(
    "line",
    [
        'extends-order = "sideways"',
        'jobs = "four"',
        "jobs = 0",
        "jobs = true",
        'extend-exclude = "dist"',
        'extend-exclude = ["ok", 1]',
        'follow-symlinks = "no"',
    ],
)
def test_invalid_values_are_skipped(
    tmp_path: Path, caplog: pytest.LogCaptureFixture, line: str
) -> None:
    config_file = tmp_path / "tsconfig-includes.toml"
    config_file.write_text(line + "\n")
    with caplog.at_level(logging.WARNING):
        config = load_config(config_file)
    assert config == ToolConfig()
    assert caplog.records


def test_merge_no_config() -> None:
    opts = ResolverOptions(max_workers=2)
    result = merge_cli_with_config(opts, config=None, explicit_flags=set())
    assert result.max_workers == 2
    assert result.extends_order is ExtendsOrder.LEFT_TO_RIGHT


def test_merge_config_overrides_defaults() -> None:
    config = ToolConfig(max_workers=8, extends_order=ExtendsOrder.RIGHT_TO_LEFT)
    result = merge_cli_with_config(ResolverOptions(), config=config, explicit_flags=set())
    assert result.max_workers == 8
    assert result.extends_order is ExtendsOrder.RIGHT_TO_LEFT
    assert result.follow_symlinks is True


def test_merge_explicit_cli_overrides_config() -> None:
    opts = ResolverOptions(max_workers=1, extend_exclude=["a"])
    config = ToolConfig(max_workers=8, extend_exclude=["b"])
    result = merge_cli_with_config(opts, config=config, explicit_flags={"max_workers"})
    assert result.max_workers == 1
    assert result.extend_exclude == ["b"]
