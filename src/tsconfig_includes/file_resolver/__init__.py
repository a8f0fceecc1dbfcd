"""
File discovery for tsconfig projects: `include`/`exclude` globs and explicit `files`.

Usage::

    from tsconfig_includes.file_resolver import ExpanderConfig, GlobExpander
    from tsconfig_includes.tsconfig import ConfigLoader

    config = ConfigLoader().load("packages/app/tsconfig.json")
    expander = GlobExpander(ExpanderConfig(extend_exclude=["**/*.test.ts"]))
    files = expander.expand(config)
"""

from tsconfig_includes.file_resolver.defaults import (
    BUILD_OUTPUT_EXCLUDES,
    DEFAULT_INCLUDE,
    DEPENDENCY_DIRS,
)
from tsconfig_includes.file_resolver.expander import GlobExpander
from tsconfig_includes.file_resolver.patterns import CompiledPattern, compile_pattern
from tsconfig_includes.file_resolver.types import ExpanderConfig, supported_extensions

__all__ = [
    "BUILD_OUTPUT_EXCLUDES",
    "DEFAULT_INCLUDE",
    "DEPENDENCY_DIRS",
    "CompiledPattern",
    "ExpanderConfig",
    "GlobExpander",
    "compile_pattern",
    "supported_extensions",
]
