"""Exceptions raised while resolving tsconfig includes."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class TsconfigIncludesError(Exception):
    """Base exception for tsconfig-includes."""

    concurrent_errors: list[TsconfigIncludesError]

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.concurrent_errors = []


class ConfigNotFoundError(TsconfigIncludesError):
    """A configuration file (or an `extends` target) does not exist."""

    def __init__(self, path: Path, referrer: Path | None = None, specifier: str | None = None):
        self.path = path
        self.referrer = referrer
        self.specifier = specifier
        if referrer is not None and specifier is not None:
            message = f"Cannot resolve extends {specifier!r} from {referrer}"
        else:
            message = f"Configuration file not found: {path}"
        super().__init__(message)


class ConfigUnreadableError(TsconfigIncludesError):
    """A configuration file exists but cannot be read."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        super().__init__(f"Cannot read configuration file {path}: {reason}")


class ConfigParseError(TsconfigIncludesError):
    """A configuration file is not valid JSON(C) or has fields of the wrong type."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot parse configuration file {path}: {reason}")


def _format_chain(chain: Sequence[Path]) -> str:
    return " -> ".join(str(p) for p in chain)


class CyclicExtendsError(TsconfigIncludesError):
    """A configuration extends itself, directly or transitively."""

    def __init__(self, chain: Sequence[Path]):
        self.chain = tuple(chain)
        super().__init__(f"Cyclic extends: {_format_chain(self.chain)}")


class CyclicReferencesError(TsconfigIncludesError):
    """A project references itself, directly or transitively."""

    def __init__(self, chain: Sequence[Path]):
        self.chain = tuple(chain)
        super().__init__(f"Cyclic project references: {_format_chain(self.chain)}")


class MissingReferenceError(TsconfigIncludesError):
    """A project reference does not point at an existing configuration file."""

    def __init__(self, referrer: Path, target: Path):
        self.referrer = referrer
        self.target = target
        super().__init__(f"Project {referrer} references missing configuration {target}")


class MissingExplicitFileError(TsconfigIncludesError):
    """A path listed in `files` does not exist."""

    def __init__(self, config_path: Path, file_path: Path):
        self.config_path = config_path
        self.file_path = file_path
        super().__init__(f"File {file_path} listed in {config_path} does not exist")


class InvalidPatternError(TsconfigIncludesError):
    """An `include` or `exclude` pattern cannot be used."""

    def __init__(self, config_path: Path, pattern: str, reason: str):
        self.config_path = config_path
        self.pattern = pattern
        super().__init__(f"Invalid pattern {pattern!r} in {config_path}: {reason}")


class FileSystemError(TsconfigIncludesError):
    """A directory could not be walked while expanding globs."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        super().__init__(f"Cannot read directory {path}: {reason}")
