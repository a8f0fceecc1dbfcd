"""Configuration types for glob expansion."""

from __future__ import annotations

from dataclasses import dataclass, field

from tsconfig_includes.file_resolver.defaults import (
    BUILD_OUTPUT_EXCLUDES,
    JAVASCRIPT_EXTENSIONS,
    JSON_EXTENSION,
    TYPESCRIPT_EXTENSIONS,
)
from tsconfig_includes.tsconfig.types import CompilerOptions, MergedConfig


@dataclass
class ExpanderConfig:
    """
    Settings for `GlobExpander` that apply to every project it expands.

    `extend_exclude` patterns are added to each project's own `exclude`, relative
    to that project's directory. `build_output_excludes` replaces the default
    build directories (`dist`, `build`).
    """

    extend_exclude: list[str] = field(default_factory=list)
    build_output_excludes: list[str] = field(default_factory=lambda: list(BUILD_OUTPUT_EXCLUDES))
    follow_symlinks: bool = True

    def effective_exclude(self, config: MergedConfig) -> list[str]:
        """Combined exclude patterns: the project's `exclude` + build output + `extend_exclude`."""
        own = list(config.exclude) if config.exclude is not None else []
        return own + self.build_output_excludes + self.extend_exclude


def supported_extensions(options: CompilerOptions, *, names_json: bool = False) -> tuple[str, ...]:
    """File extensions a wildcard match may return under the given compiler options."""
    extensions = list(TYPESCRIPT_EXTENSIONS)
    if options.allow_js:
        extensions += JAVASCRIPT_EXTENSIONS
    if names_json and options.resolve_json_module:
        extensions.append(JSON_EXTENSION)
    return tuple(extensions)
