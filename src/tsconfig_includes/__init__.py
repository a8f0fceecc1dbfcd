"""
Enumerate the source files that feed the compilation of a TypeScript project,
including the projects it references, transitively.

Usage::

    from tsconfig_includes import resolve

    result = resolve(["packages/app/tsconfig.json"])
    for path in result.sorted_files():
        print(path)
"""

from tsconfig_includes.config import ResolverOptions
from tsconfig_includes.errors import (
    ConfigNotFoundError,
    ConfigParseError,
    ConfigUnreadableError,
    CyclicExtendsError,
    CyclicReferencesError,
    FileSystemError,
    InvalidPatternError,
    MissingExplicitFileError,
    MissingReferenceError,
    TsconfigIncludesError,
)
from tsconfig_includes.file_resolver import ExpanderConfig, GlobExpander
from tsconfig_includes.resolver import Resolver, VisitedSet, resolve
from tsconfig_includes.result import ProjectNode, ResolutionResult
from tsconfig_includes.tsconfig import (
    ConfigLoader,
    ExtendsOrder,
    MergedConfig,
    RawConfig,
    ReferenceGraph,
)

__all__ = [
    "ConfigLoader",
    "ConfigNotFoundError",
    "ConfigParseError",
    "ConfigUnreadableError",
    "CyclicExtendsError",
    "CyclicReferencesError",
    "ExpanderConfig",
    "ExtendsOrder",
    "FileSystemError",
    "GlobExpander",
    "InvalidPatternError",
    "MergedConfig",
    "MissingExplicitFileError",
    "MissingReferenceError",
    "ProjectNode",
    "RawConfig",
    "ReferenceGraph",
    "ResolutionResult",
    "Resolver",
    "ResolverOptions",
    "TsconfigIncludesError",
    "VisitedSet",
    "resolve",
]
