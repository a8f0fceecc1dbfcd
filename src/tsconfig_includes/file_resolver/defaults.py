"""
Default include patterns, supported extensions and exclusions for file discovery.

These follow what `tsc` does when a project leaves the corresponding setting out.
"""

from __future__ import annotations

# Used when a config has neither `include` nor a non-empty `files`.
DEFAULT_INCLUDE: list[str] = ["**/*"]

TYPESCRIPT_EXTENSIONS: list[str] = [".ts", ".tsx", ".mts", ".cts", ".d.ts", ".d.mts", ".d.cts"]
# Only with `allowJs`.
JAVASCRIPT_EXTENSIONS: list[str] = [".js", ".jsx", ".mjs", ".cjs"]
# Only with `resolveJsonModule`, and only for patterns that name `.json` explicitly.
JSON_EXTENSION = ".json"

# Package manager dependency directories, skipped at any depth.
DEPENDENCY_DIRS: frozenset[str] = frozenset({"node_modules", "bower_components", "jspm_packages"})

# Build output directories, relative to the project directory. A project's
# `outDir` and `declarationDir` are excluded too when set.
BUILD_OUTPUT_EXCLUDES: list[str] = ["dist", "build"]
