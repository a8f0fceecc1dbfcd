"""
Loading of `tsconfig.json` files and resolution of their `extends` chains.

Each file is parsed into an immutable `RawConfig`. A file's ancestors are
collected into an explicit list, oldest first, and folded with
`merge_configs()`, so merge precedence lives in one place and does not depend
on the order files happen to be read in.
"""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Iterator
from pathlib import Path
from typing import Any, cast

from tsconfig_includes import jsonc
from tsconfig_includes.errors import (
    ConfigNotFoundError,
    ConfigParseError,
    ConfigUnreadableError,
    CyclicExtendsError,
)
from tsconfig_includes.tsconfig.types import (
    CONFIG_FILENAME,
    CompilerOptions,
    ExtendsOrder,
    MergedConfig,
    RawConfig,
    merge_configs,
)

logger = logging.getLogger(__name__)

_RELATIVE_PREFIXES = ("./", "../", ".\\", "..\\")


def read_text(path: Path) -> str:
    """Read a configuration file, mapping failures onto the loader's error kinds."""
    if not path.exists():
        raise ConfigNotFoundError(path)
    if path.is_dir():
        raise ConfigUnreadableError(path, "is a directory")
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ConfigUnreadableError(path, f"not valid UTF-8 ({e.reason})") from e
    except FileNotFoundError as e:
        raise ConfigNotFoundError(path) from e
    except OSError as e:
        raise ConfigUnreadableError(path, e.strerror or str(e)) from e


def _string_list(data: dict[str, Any], key: str, path: Path) -> tuple[str, ...] | None:
    if key not in data or data[key] is None:
        return None
    value = data[key]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in cast(list[Any], value)):
        raise ConfigParseError(path, f"'{key}' must be a list of strings")
    return tuple(cast(list[str], value))


def _extends(data: dict[str, Any], path: Path) -> tuple[str, ...]:
    value = data.get("extends")
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(
        isinstance(v, str) and v for v in cast(list[Any], value)
    ):
        raise ConfigParseError(path, "'extends' must be a non-empty string or a list of them")
    return tuple(cast(list[str], value))


def _references(data: dict[str, Any], path: Path) -> tuple[str, ...]:
    value = data.get("references")
    if value is None:
        return ()
    if not isinstance(value, list):
        raise ConfigParseError(path, "'references' must be a list")
    refs: list[str] = []
    for entry in cast(list[Any], value):
        if isinstance(entry, dict):
            entry = cast(dict[str, Any], entry).get("path")
        if not isinstance(entry, str) or not entry:
            raise ConfigParseError(path, "each reference must be a path or {\"path\": ...}")
        refs.append(entry)
    return tuple(refs)


def _compiler_options(data: dict[str, Any], path: Path) -> CompilerOptions:
    value = data.get("compilerOptions")
    if value is None:
        return CompilerOptions()
    if not isinstance(value, dict):
        raise ConfigParseError(path, "'compilerOptions' must be an object")
    options = cast(dict[str, Any], value)

    def flag(key: str) -> bool | None:
        v = options.get(key)
        if v is not None and not isinstance(v, bool):
            raise ConfigParseError(path, f"'compilerOptions.{key}' must be a boolean")
        return v

    def directory(key: str) -> Path | None:
        v = options.get(key)
        if v is None:
            return None
        if not isinstance(v, str):
            raise ConfigParseError(path, f"'compilerOptions.{key}' must be a string")
        return (path.parent / v).resolve()

    return CompilerOptions(
        allow_js=flag("allowJs"),
        resolve_json_module=flag("resolveJsonModule"),
        out_dir=directory("outDir"),
        declaration_dir=directory("declarationDir"),
    )


def parse_raw_config(text: str, path: Path) -> RawConfig:
    """Parse the text of the config at `path`. Unrecognized fields are ignored."""
    try:
        data = jsonc.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigParseError(path, f"{e.msg} (line {e.lineno}, column {e.colno})") from e
    if not isinstance(data, dict):
        raise ConfigParseError(path, "top-level value must be an object")
    data = cast(dict[str, Any], data)

    return RawConfig(
        path=path,
        extends=_extends(data, path),
        include=_string_list(data, "include", path),
        exclude=_string_list(data, "exclude", path),
        files=_string_list(data, "files", path),
        references=_references(data, path),
        compiler_options=_compiler_options(data, path),
    )


def _json_candidates(candidate: Path) -> Iterator[Path]:
    yield candidate
    if candidate.suffix != ".json":
        yield candidate.with_name(candidate.name + ".json")


def _package_tsconfig(package_dir: Path) -> Path:
    """The config a bare `extends` naming a package directory points at."""
    manifest = package_dir / "package.json"
    if manifest.is_file():
        try:
            data = json.loads(manifest.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            data = None
        if isinstance(data, dict):
            field = cast(dict[str, Any], data).get("tsconfig")
            if isinstance(field, str):
                return package_dir / field
    return package_dir / CONFIG_FILENAME


def resolve_extends(specifier: str, config_path: Path) -> Path:
    """
    Resolve one `extends` entry of the config at `config_path` to a canonical path.

    Relative and absolute specifiers are resolved against the config's directory,
    with `.json` appended if needed. Anything else is treated as a package
    specifier and looked up in `node_modules` directories walking up from the
    config's directory.
    """
    base_dir = config_path.parent
    if specifier.startswith(_RELATIVE_PREFIXES) or Path(specifier).is_absolute():
        for candidate in _json_candidates(base_dir / specifier):
            if candidate.is_file():
                return candidate.resolve()
        raise ConfigNotFoundError(base_dir / specifier, referrer=config_path, specifier=specifier)

    for directory in (base_dir, *base_dir.parents):
        target = directory / "node_modules" / specifier
        for candidate in _json_candidates(target):
            if candidate.is_file():
                return candidate.resolve()
        if target.is_dir():
            candidate = _package_tsconfig(target)
            if candidate.is_file():
                return candidate.resolve()
    raise ConfigNotFoundError(base_dir / specifier, referrer=config_path, specifier=specifier)


class ConfigLoader:
    """
    Loads configuration files and resolves their `extends` chains.

    Parsed files are memoized for the lifetime of the loader, so a base config
    shared by many projects is read once. Safe to share between threads.
    """

    def __init__(self, extends_order: ExtendsOrder = ExtendsOrder.LEFT_TO_RIGHT) -> None:
        self._extends_order: ExtendsOrder = extends_order
        self._raw_cache: dict[Path, RawConfig] = {}
        self._lock: threading.Lock = threading.Lock()

    def load(self, path: str | Path) -> MergedConfig:
        """Load the config at `path` merged with all of its ancestors."""
        canonical = Path(path).resolve()
        raw = self.read(canonical)
        ancestors = self._ancestors(raw, (canonical,))
        merged = merge_configs(ancestors, raw)
        logger.debug("Loaded %s (extends chain: %d)", canonical, len(ancestors))
        return merged

    def read(self, path: Path) -> RawConfig:
        """Parse a single file without following `extends`, using the memo."""
        with self._lock:
            cached = self._raw_cache.get(path)
        if cached is not None:
            return cached
        raw = parse_raw_config(read_text(path), path)
        with self._lock:
            return self._raw_cache.setdefault(path, raw)

    def _ancestors(self, raw: RawConfig, stack: tuple[Path, ...]) -> list[RawConfig]:
        """
        Flatten the ancestors of `raw` into fold order, oldest first. `stack`
        holds the chain of configs currently being resolved, for cycle detection.
        """
        specifiers = list(raw.extends)
        if self._extends_order is ExtendsOrder.RIGHT_TO_LEFT:
            specifiers.reverse()

        result: list[RawConfig] = []
        for specifier in specifiers:
            parent_path = resolve_extends(specifier, raw.path)
            if parent_path in stack:
                start = stack.index(parent_path)
                raise CyclicExtendsError((*stack[start:], parent_path))
            parent = self.read(parent_path)
            result.extend(self._ancestors(parent, (*stack, parent_path)))
            result.append(parent)
        return result
