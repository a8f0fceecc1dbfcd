"""Configuration types for tsconfig files and their merged form."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path

CONFIG_FILENAME = "tsconfig.json"


class ExtendsOrder(str, Enum):
    """Which of several `extends` targets wins when they set the same field."""

    LEFT_TO_RIGHT = "left-to-right"  # later entries override earlier ones
    RIGHT_TO_LEFT = "right-to-left"  # earlier entries override later ones


@dataclass(frozen=True)
class CompilerOptions:
    """
    The subset of `compilerOptions` that affects which files are inputs.
    Fields are `None` when not set, so that merging can tell "not configured"
    apart from "explicitly false". Directory options are absolute, resolved
    against the config that declared them.
    """

    allow_js: bool | None = None
    resolve_json_module: bool | None = None
    out_dir: Path | None = None
    declaration_dir: Path | None = None

    def overlay(self, other: CompilerOptions) -> CompilerOptions:
        """Return these options with every field set in `other` taking precedence."""
        return CompilerOptions(
            allow_js=other.allow_js if other.allow_js is not None else self.allow_js,
            resolve_json_module=(
                other.resolve_json_module
                if other.resolve_json_module is not None
                else self.resolve_json_module
            ),
            out_dir=other.out_dir if other.out_dir is not None else self.out_dir,
            declaration_dir=(
                other.declaration_dir
                if other.declaration_dir is not None
                else self.declaration_dir
            ),
        )


@dataclass(frozen=True)
class RawConfig:
    """The literal contents of one configuration file."""

    path: Path
    extends: tuple[str, ...] = ()
    include: tuple[str, ...] | None = None
    exclude: tuple[str, ...] | None = None
    files: tuple[str, ...] | None = None
    references: tuple[str, ...] = ()
    compiler_options: CompilerOptions = field(default_factory=CompilerOptions)

    @property
    def base_directory(self) -> Path:
        return self.path.parent


@dataclass(frozen=True)
class MergedConfig:
    """
    A configuration folded together with its `extends` ancestors.

    `include`, `exclude` and `files` come from the nearest config in the chain
    that sets them. `references` belong to the concrete file only, and
    `base_directory` is always the concrete file's directory.
    """

    path: Path
    include: tuple[str, ...] | None = None
    exclude: tuple[str, ...] | None = None
    files: tuple[str, ...] | None = None
    references: tuple[str, ...] = ()
    compiler_options: CompilerOptions = field(default_factory=CompilerOptions)
    extends_chain: tuple[Path, ...] = ()

    @property
    def base_directory(self) -> Path:
        return self.path.parent


def _overlay(base: MergedConfig, raw: RawConfig) -> MergedConfig:
    return replace(
        base,
        include=raw.include if raw.include is not None else base.include,
        exclude=raw.exclude if raw.exclude is not None else base.exclude,
        files=raw.files if raw.files is not None else base.files,
        compiler_options=base.compiler_options.overlay(raw.compiler_options),
    )


def merge_configs(ancestors: Sequence[RawConfig], concrete: RawConfig) -> MergedConfig:
    """
    Fold `ancestors` (oldest first, so each entry overrides the ones before it)
    and then `concrete` into one `MergedConfig`.
    """
    merged = MergedConfig(path=concrete.path)
    for ancestor in ancestors:
        merged = _overlay(merged, ancestor)
    merged = _overlay(merged, concrete)
    return replace(
        merged,
        references=concrete.references,
        extends_chain=tuple(a.path for a in ancestors),
    )
