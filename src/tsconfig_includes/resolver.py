"""
Resolver: walks the project reference graph and unions every project's inputs.

The walk is an explicit worklist. The orchestrating thread owns scheduling and
submits a project to the worker pool only after claiming it in the shared
`VisitedSet`, so each project is loaded and expanded once no matter how many
parents reference it. Reference cycles are found over the recorded edges once
the worklist drains, so detection does not depend on which worker finished
first.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping, Sequence
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from pathlib import Path

from tsconfig_includes.config import ResolverOptions
from tsconfig_includes.errors import (
    ConfigNotFoundError,
    CyclicReferencesError,
    TsconfigIncludesError,
)
from tsconfig_includes.file_resolver import ExpanderConfig, GlobExpander
from tsconfig_includes.result import ProjectNode, ResolutionResult
from tsconfig_includes.tsconfig import ConfigLoader, ReferenceGraph

logger = logging.getLogger(__name__)


class VisitedSet:
    """
    Canonical config path -> in progress, or completed with its `ProjectNode`.
    Every operation holds one lock, so check-and-insert is atomic.
    """

    def __init__(self) -> None:
        self._lock: threading.Lock = threading.Lock()
        self._entries: dict[Path, ProjectNode | None] = {}

    def claim(self, path: Path) -> bool:
        """Mark `path` in progress. Returns `False` if it was already known."""
        with self._lock:
            if path in self._entries:
                return False
            self._entries[path] = None
            return True

    def complete(self, node: ProjectNode) -> None:
        with self._lock:
            self._entries[node.path] = node

    def completed(self) -> dict[Path, ProjectNode]:
        with self._lock:
            return {p: n for p, n in self._entries.items() if n is not None}


_VISITING = 1
_DONE = 2


def find_cycle(
    edges: Mapping[Path, Sequence[Path]], starts: Iterable[Path] = ()
) -> tuple[Path, ...] | None:
    """
    Return one reference cycle as a chain that starts and ends on the same
    project, or `None`. Iterative depth-first search, visiting `starts` first
    and then the remaining nodes in sorted order, so the answer is stable.
    """
    state: dict[Path, int] = {}
    for start in (*starts, *sorted(edges)):
        if start in state:
            continue
        state[start] = _VISITING
        chain = [start]
        stack = [iter(edges.get(start, ()))]
        while stack:
            child = next(stack[-1], None)
            if child is None:
                state[chain.pop()] = _DONE
                stack.pop()
                continue
            child_state = state.get(child)
            if child_state == _VISITING:
                return (*chain[chain.index(child) :], child)
            if child_state is None:
                state[child] = _VISITING
                chain.append(child)
                stack.append(iter(edges.get(child, ())))
    return None


class Resolver:
    """
    Resolves the full input file set of one or more projects, including the
    projects they reference, transitively.

    Every error is fatal: the first failure stops scheduling, queued work is
    cancelled, and the error is raised once in-flight work has finished. Other
    errors raised by that in-flight work are attached as `concurrent_errors`.
    """

    def __init__(self, options: ResolverOptions | None = None) -> None:
        self._options: ResolverOptions = options if options is not None else ResolverOptions()
        self._loader: ConfigLoader = ConfigLoader(extends_order=self._options.extends_order)
        self._expander: GlobExpander = GlobExpander(
            ExpanderConfig(
                extend_exclude=list(self._options.extend_exclude),
                follow_symlinks=self._options.follow_symlinks,
            )
        )
        self._references: ReferenceGraph = ReferenceGraph(self._options.config_filename)

    def resolve(
        self, start_paths: Sequence[str | Path], *, cwd: str | Path | None = None
    ) -> ResolutionResult:
        base = Path(cwd) if cwd is not None else Path.cwd()
        roots = tuple(dict.fromkeys(self._canonical_start(p, base) for p in start_paths))
        visited = VisitedSet()

        errors = self._walk(roots, visited)
        if errors:
            first = errors[0]
            first.concurrent_errors = errors[1:]
            raise first

        nodes = visited.completed()
        cycle = find_cycle({p: n.references for p, n in nodes.items()}, roots)
        if cycle is not None:
            raise CyclicReferencesError(cycle)

        files = frozenset().union(*(node.files for node in nodes.values()))
        logger.info("Resolved %d files from %d projects", len(files), len(nodes))
        return ResolutionResult(roots=roots, files=files, nodes=nodes)

    def _walk(self, roots: tuple[Path, ...], visited: VisitedSet) -> list[TsconfigIncludesError]:
        errors: list[TsconfigIncludesError] = []
        executor = ThreadPoolExecutor(
            max_workers=self._options.max_workers, thread_name_prefix="TsconfigWorker"
        )
        pending: dict[Future[ProjectNode], Path] = {}
        try:
            for root in roots:
                if visited.claim(root):
                    pending[executor.submit(self._visit, root)] = root

            while pending and not errors:
                done, _ = wait(pending, return_when=FIRST_COMPLETED)
                for future in sorted(done, key=lambda f: pending[f]):
                    path = pending.pop(future)
                    try:
                        node = future.result()
                    except TsconfigIncludesError as e:
                        logger.debug("Failed to resolve %s: %s", path, e)
                        errors.append(e)
                        continue
                    visited.complete(node)
                    if errors:
                        continue
                    for child in node.references:
                        if visited.claim(child):
                            pending[executor.submit(self._visit, child)] = child
        finally:
            # Queued work is dropped; work already running finishes and is discarded.
            executor.shutdown(wait=True, cancel_futures=True)

        for future in sorted(pending, key=lambda f: pending[f]):
            if future.cancelled():
                continue
            error = future.exception()
            if isinstance(error, TsconfigIncludesError):
                errors.append(error)
        return errors

    def _visit(self, path: Path) -> ProjectNode:
        config = self._loader.load(path)
        files = self._expander.expand(config)
        children = self._references.children(config, path)
        logger.debug("%s: %d files, %d references", path, len(files), len(children))
        return ProjectNode(path=path, config=config, files=files, references=children)

    def _canonical_start(self, path: str | Path, cwd: Path) -> Path:
        candidate = Path(path)
        if not candidate.is_absolute():
            candidate = cwd / candidate
        if candidate.is_dir():
            candidate = candidate / self._options.config_filename
        if not candidate.exists():
            raise ConfigNotFoundError(candidate)
        return candidate.resolve()


def resolve(
    start_paths: Sequence[str | Path],
    *,
    cwd: str | Path | None = None,
    options: ResolverOptions | None = None,
) -> ResolutionResult:
    """
    Resolve every input file reachable from the given tsconfig files (or
    directories containing one). Relative paths are taken from `cwd`.
    """
    return Resolver(options).resolve(start_paths, cwd=cwd)
