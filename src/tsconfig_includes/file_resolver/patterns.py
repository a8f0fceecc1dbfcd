"""
Compilation of tsconfig `include`/`exclude` patterns.

Patterns are anchored to the directory of the config that uses them. The
literal leading segments of a pattern (which may climb out with `..`) become
the root of the match. A pattern without a `/` does not match at any depth.

Exclude globs are matched with a gitignore-style `pathspec` anchored to the
root, which also matches everything beneath a matching path: excluding a
directory excludes its contents.

Include globs are matched one path segment at a time, the way `tsc` matches
them: `*` and `?` stay within a segment, `**` spans zero or more segments,
and a wildcard never matches a name starting with `.` unless the pattern
segment itself starts with `.`.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import pathspec

from tsconfig_includes.errors import InvalidPatternError

# Characters that make a path segment a wildcard rather than a literal name.
_GLOB_CHARS = frozenset("*?[")


class PatternKind(Enum):
    GLOB = "glob"
    FILE = "file"  # a literal file path
    DIRECTORY = "directory"  # a literal directory, matching everything beneath it


@dataclass(frozen=True)
class SegmentMatcher:
    """One segment of an include glob other than `**`."""

    text: str
    spec: pathspec.PathSpec | None = None  # `None` for a literal name

    def matches(self, name: str) -> bool:
        if self.spec is None:
            return name == self.text
        if name.startswith(".") and not self.text.startswith("."):
            return False
        return self.spec.match_file(name)


def _match_segments(parts: Sequence[str], matchers: Sequence[SegmentMatcher | None]) -> bool:
    """Match path segments against segment matchers, where `None` stands for `**`."""
    if not matchers:
        return not parts
    head = matchers[0]
    if head is None:
        if _match_segments(parts, matchers[1:]):
            return True
        return bool(parts) and not parts[0].startswith(".") and _match_segments(parts[1:], matchers)
    return bool(parts) and head.matches(parts[0]) and _match_segments(parts[1:], matchers[1:])


@dataclass(frozen=True)
class CompiledPattern:
    """One `include` or `exclude` entry, ready to match absolute paths."""

    pattern: str
    kind: PatternKind
    root: Path
    spec: pathspec.PathSpec | None = None
    # Include globs only: one matcher per segment below the root, `None` for `**`.
    segments: tuple[SegmentMatcher | None, ...] | None = None
    names_json: bool = False

    def _relative(self, path: Path) -> str | None:
        try:
            rel = path.relative_to(self.root)
        except ValueError:
            return None
        posix = rel.as_posix()
        return None if posix == "." else posix

    def matches(self, path: Path) -> bool:
        """Check an absolute, normalized file path against this pattern."""
        if self.kind is PatternKind.FILE:
            return path == self.root
        if self.kind is PatternKind.DIRECTORY:
            return path == self.root or self.root in path.parents
        rel = self._relative(path)
        if rel is None:
            return False
        if self.segments is not None:
            return _match_segments(rel.split("/"), self.segments)
        return self.spec is not None and self.spec.match_file(rel)

    def matches_dir(self, path: Path) -> bool:
        """Check whether a whole directory is covered, so a walk can skip it."""
        if self.kind is PatternKind.FILE or self.segments is not None:
            return False
        if self.kind is PatternKind.DIRECTORY:
            return self.matches(path)
        rel = self._relative(path)
        return rel is not None and self.spec is not None and self.spec.match_file(rel + "/")


def has_glob(segment: str) -> bool:
    return any(c in segment for c in _GLOB_CHARS)


def normalize(path: Path | str) -> Path:
    """Collapse `.` and `..` segments lexically, leaving symlinks alone."""
    return Path(os.path.normpath(path))


def _compile_spec(line: str, pattern: str, config_path: Path) -> pathspec.PathSpec:
    try:
        return pathspec.PathSpec.from_lines("gitignore", [line])
    except ValueError as e:
        raise InvalidPatternError(config_path, pattern, str(e)) from e


def compile_pattern(
    pattern: str, base_dir: Path, config_path: Path, *, is_include: bool
) -> CompiledPattern:
    """
    Compile one pattern of the config at `config_path`.

    Raises `InvalidPatternError` for empty patterns, `..` after `**`, and
    anything `pathspec` refuses.
    """
    if not pattern.strip():
        raise InvalidPatternError(config_path, pattern, "empty pattern")

    text = pattern.replace("\\", "/")
    absolute = text.startswith("/")
    segments = [s for s in text.split("/") if s not in ("", ".")]
    if "**" in segments and ".." in segments[segments.index("**") :]:
        raise InvalidPatternError(config_path, pattern, "'..' cannot follow '**'")
    if is_include and segments and segments[-1] == "**":
        # `dir/**` takes every file beneath `dir`.
        segments.append("*")

    first_glob = next((i for i, s in enumerate(segments) if has_glob(s)), None)
    start = Path("/") if absolute else base_dir

    if first_glob is None:
        literal = normalize(start.joinpath(*segments))
        last = segments[-1] if segments else ""
        if literal.is_dir() or "." not in last.lstrip("."):
            # A directory: everything beneath it, subject to the extension rules.
            if not is_include:
                return CompiledPattern(pattern, PatternKind.DIRECTORY, literal)
            first_glob = len(segments)
            segments = [*segments, "**", "*"]
        else:
            return CompiledPattern(
                pattern, PatternKind.FILE, literal, names_json=last.endswith(".json")
            )

    root = normalize(start.joinpath(*segments[:first_glob]))
    remainder = segments[first_glob:]
    if not is_include:
        spec = _compile_spec("/" + "/".join(remainder), pattern, config_path)
        return CompiledPattern(pattern, PatternKind.GLOB, root, spec=spec)

    return CompiledPattern(
        pattern,
        PatternKind.GLOB,
        root,
        segments=tuple(_segment_matcher(s, pattern, config_path) for s in remainder),
        names_json=remainder[-1].endswith(".json"),
    )


def _segment_matcher(segment: str, pattern: str, config_path: Path) -> SegmentMatcher | None:
    if segment == "**":
        return None
    if not has_glob(segment):
        return SegmentMatcher(segment)
    return SegmentMatcher(segment, _compile_spec("/" + segment, pattern, config_path))
