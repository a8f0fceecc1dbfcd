"""Resolved projects and the result of a resolution."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

from tsconfig_includes.tsconfig.types import MergedConfig


@dataclass(frozen=True)
class ProjectNode:
    """One project of the reference graph, keyed by its canonical config path."""

    path: Path
    config: MergedConfig
    files: frozenset[Path]
    references: tuple[Path, ...]


def package_name(project_dir: Path) -> str:
    """
    Name of the package a project belongs to: the `name` in the `package.json`
    beside its config, or the directory name when there is none.
    """
    manifest = project_dir / "package.json"
    try:
        data = json.loads(manifest.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return project_dir.name
    if isinstance(data, dict):
        name = cast(dict[str, Any], data).get("name")
        if isinstance(name, str) and name:
            return name
    return project_dir.name


def _relative(path: Path, root: Path) -> str:
    return Path(os.path.relpath(path, root)).as_posix()


@dataclass(frozen=True)
class ResolutionResult:
    """
    Every input file reachable from the start projects.

    `files` is the value callers compare and hash; `nodes` keeps the per-project
    breakdown for reporting.
    """

    roots: tuple[Path, ...]
    files: frozenset[Path]
    nodes: Mapping[Path, ProjectNode]

    def sorted_files(self) -> list[Path]:
        return sorted(self.files)

    def relative_to(self, root: str | Path) -> list[str]:
        """Sorted POSIX-style paths relative to `root` (e.g. the monorepo root)."""
        root = Path(root).resolve()
        return sorted(_relative(p, root) for p in self.files)

    def files_by_project(self) -> dict[Path, list[Path]]:
        return {path: sorted(node.files) for path, node in sorted(self.nodes.items())}

    def files_by_package_name(self) -> dict[str, list[Path]]:
        """
        Files grouped by the package that owns each project. Projects of the
        same package (e.g. `tsconfig.json` and `tsconfig.test.json`) are merged.
        """
        grouped: dict[str, set[Path]] = {}
        for node in self.nodes.values():
            name = package_name(node.config.base_directory)
            grouped.setdefault(name, set()).update(node.files)
        return {name: sorted(files) for name, files in sorted(grouped.items())}
