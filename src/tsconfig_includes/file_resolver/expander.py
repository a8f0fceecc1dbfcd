"""
GlobExpander: turns a merged config into the concrete set of files it compiles.

Explicit `files` are taken as-is. Otherwise each `include` pattern is walked
from its literal root with `os.walk()`, pruning dependency directories and
excluded directories in place, and the files found are filtered by the
`exclude` patterns and the supported extensions.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from tsconfig_includes.errors import FileSystemError, MissingExplicitFileError
from tsconfig_includes.file_resolver.defaults import DEFAULT_INCLUDE, DEPENDENCY_DIRS
from tsconfig_includes.file_resolver.patterns import (
    CompiledPattern,
    PatternKind,
    compile_pattern,
    normalize,
)
from tsconfig_includes.file_resolver.types import ExpanderConfig, supported_extensions
from tsconfig_includes.tsconfig.types import MergedConfig

logger = logging.getLogger(__name__)


def _raise_walk_error(error: OSError) -> None:
    path = Path(error.filename) if error.filename else Path()
    raise FileSystemError(path, error.strerror or str(error)) from error


class GlobExpander:
    """
    Computes the input files of one project.

    Any directory that cannot be read aborts the expansion with
    `FileSystemError`: a partial file list would make a stale project look
    up to date.
    """

    def __init__(self, config: ExpanderConfig | None = None) -> None:
        self._config: ExpanderConfig = config if config is not None else ExpanderConfig()

    def expand(self, config: MergedConfig) -> frozenset[Path]:
        """Return the absolute paths of the files `config` designates as inputs."""
        if config.files:
            return self._explicit_files(config)

        base_dir = config.base_directory
        include = config.include if config.include is not None else DEFAULT_INCLUDE
        includes = [
            compile_pattern(p, base_dir, config.path, is_include=True) for p in include
        ]
        excludes = [
            compile_pattern(p, base_dir, config.path, is_include=False)
            for p in self._config.effective_exclude(config)
        ]
        options = config.compiler_options
        for out_dir in (options.out_dir, options.declaration_dir):
            if out_dir is not None:
                excludes.append(CompiledPattern(str(out_dir), PatternKind.DIRECTORY, out_dir))

        found: set[Path] = set()
        for pattern in includes:
            extensions = supported_extensions(options, names_json=pattern.names_json)
            for path in self._candidates(pattern, base_dir, excludes):
                if not path.name.endswith(extensions):
                    continue
                if any(ex.matches(path) for ex in excludes):
                    continue
                found.add(path)

        logger.debug("%s: %d files from %d include patterns", config.path, len(found), len(includes))
        return frozenset(found)

    def _explicit_files(self, config: MergedConfig) -> frozenset[Path]:
        assert config.files is not None
        result: set[Path] = set()
        for name in config.files:
            path = normalize(config.base_directory / name)
            if not path.is_file():
                raise MissingExplicitFileError(config.path, path)
            result.add(path)
        return frozenset(result)

    def _candidates(
        self, pattern: CompiledPattern, base_dir: Path, excludes: list[CompiledPattern]
    ) -> Iterable[Path]:
        if pattern.kind is PatternKind.FILE:
            if pattern.root.is_file() and not self._in_dependency_dir(pattern.root, base_dir):
                yield pattern.root
            return
        if not pattern.root.is_dir() or self._in_dependency_dir(pattern.root, base_dir):
            return
        yield from self._walk(pattern, excludes)

    def _walk(self, pattern: CompiledPattern, excludes: list[CompiledPattern]) -> Iterable[Path]:
        """
        Walk the pattern's root in sorted order, pruning dependency and excluded
        directories in place (prevents descent). Symlinked directories are
        followed once per real path.
        """
        seen_dirs: set[str] = set()
        for dirpath, dirnames, filenames in os.walk(
            pattern.root, onerror=_raise_walk_error, followlinks=self._config.follow_symlinks
        ):
            current = Path(dirpath)
            real = os.path.realpath(dirpath)
            if real in seen_dirs:
                dirnames[:] = []
                continue
            seen_dirs.add(real)

            dirnames[:] = sorted(
                d
                for d in dirnames
                if d not in DEPENDENCY_DIRS and not any(ex.matches_dir(current / d) for ex in excludes)
            )
            for filename in sorted(filenames):
                path = current / filename
                # Dangling symlinks are listed as files but are not inputs.
                if pattern.matches(path) and path.is_file():
                    yield path

    @staticmethod
    def _in_dependency_dir(path: Path, base_dir: Path) -> bool:
        try:
            parts = path.relative_to(base_dir).parts
        except ValueError:
            parts = path.parts
        return any(part in DEPENDENCY_DIRS for part in parts)
