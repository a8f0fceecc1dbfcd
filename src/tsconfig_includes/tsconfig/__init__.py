"""
Reading of `tsconfig.json` files: parsing, `extends` merging and project references.
"""

from tsconfig_includes.tsconfig.loader import ConfigLoader, parse_raw_config, resolve_extends
from tsconfig_includes.tsconfig.references import ReferenceGraph
from tsconfig_includes.tsconfig.types import (
    CONFIG_FILENAME,
    CompilerOptions,
    ExtendsOrder,
    MergedConfig,
    RawConfig,
    merge_configs,
)

__all__ = [
    "CONFIG_FILENAME",
    "CompilerOptions",
    "ConfigLoader",
    "ExtendsOrder",
    "MergedConfig",
    "RawConfig",
    "ReferenceGraph",
    "merge_configs",
    "parse_raw_config",
    "resolve_extends",
]
