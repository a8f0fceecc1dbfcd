"""Project references: the edges of the project graph."""

from __future__ import annotations

from pathlib import Path

from tsconfig_includes.errors import MissingReferenceError
from tsconfig_includes.tsconfig.types import CONFIG_FILENAME, MergedConfig


class ReferenceGraph:
    """
    Lists the configuration files a project references.

    A reference may name a config file or a directory, in which case the
    directory's `tsconfig.json` is meant. Duplicates are kept; the resolver
    is responsible for visiting each project once.
    """

    def __init__(self, config_filename: str = CONFIG_FILENAME) -> None:
        self._config_filename: str = config_filename

    def children(self, config: MergedConfig, own_path: Path) -> tuple[Path, ...]:
        base_dir = own_path.parent
        result: list[Path] = []
        for reference in config.references:
            target = base_dir / reference
            if target.is_dir():
                target = target / self._config_filename
            if not target.is_file():
                raise MissingReferenceError(own_path, target)
            result.append(target.resolve())
        return tuple(result)
