#!/usr/bin/env python3
"""
tsconfig-includes: list the files that feed a TypeScript project's compilation

Follows `extends` and project `references` transitively, so the output covers
every internal dependency of the given projects.

Common usage:
  tsconfig-includes packages/app/tsconfig.json
  tsconfig-includes --relative-to . packages/app
  tsconfig-includes --group --json packages/app packages/cli
"""

from __future__ import annotations

import argparse
import importlib.metadata
import json
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from tsconfig_includes.config import (
    ResolverOptions,
    find_config_file,
    load_config,
    merge_cli_with_config,
)
from tsconfig_includes.errors import TsconfigIncludesError
from tsconfig_includes.resolver import resolve
from tsconfig_includes.result import ResolutionResult
from tsconfig_includes.tsconfig.types import ExtendsOrder

logger = logging.getLogger(__name__)


@dataclass
class Options:
    """Command-line options for the tsconfig-includes tool."""

    tsconfigs: list[str]
    relative_to: str | None
    group: bool
    json: bool
    verbose: bool
    version: bool
    resolver: ResolverOptions


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns `(options, explicit_flags)`, where `explicit_flags` names the
    `ResolverOptions` fields the user set on the command line (these win over
    the settings file).
    """
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    parser = argparse.ArgumentParser(
        prog="tsconfig-includes",
        description=doc_parts[0],
        epilog="\n\n".join(doc_parts[1:]),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "tsconfigs",
        nargs="*",
        metavar="TSCONFIG",
        help="tsconfig.json files, or directories containing one",
    )
    parser.add_argument(
        "--relative-to",
        metavar="DIR",
        default=None,
        help="Print paths relative to DIR (e.g. the monorepo root) instead of absolute",
    )
    parser.add_argument(
        "--group",
        action="store_true",
        help="Group files by the package.json name of the project that owns them",
    )
    parser.add_argument("--json", action="store_true", help="Print JSON instead of lines")
    parser.add_argument(
        "-j",
        "--jobs",
        type=int,
        default=None,
        metavar="N",
        help="Number of worker threads (default: Python's thread pool default)",
    )
    parser.add_argument(
        "--extends-order",
        choices=[o.value for o in ExtendsOrder],
        default=ExtendsOrder.LEFT_TO_RIGHT.value,
        help="Which of several `extends` targets wins on conflict (default: %(default)s)",
    )
    parser.add_argument(
        "--extend-exclude",
        action="append",
        default=None,
        metavar="PATTERN",
        help="Extra exclude pattern applied to every project (e.g. '**/*.test.ts'). "
        "Can be repeated",
    )
    parser.add_argument(
        "--no-follow-symlinks",
        action="store_true",
        help="Do not descend into symlinked directories while expanding globs",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")
    parser.add_argument("--version", action="store_true", help="Show version information and exit")
    opts = parser.parse_args(args)

    if opts.jobs is not None and opts.jobs < 1:
        parser.error("--jobs must be at least 1")

    # Detect which flags were actually supplied by comparing against a parse
    # with sentinel defaults.
    _SENTINEL = object()
    sentinel_parser = argparse.ArgumentParser(add_help=False)
    sentinel_parser.add_argument("-j", "--jobs", dest="max_workers", default=_SENTINEL)
    sentinel_parser.add_argument("--extends-order", dest="extends_order", default=_SENTINEL)
    sentinel_parser.add_argument("--extend-exclude", dest="extend_exclude", default=_SENTINEL)
    sentinel_parser.add_argument(
        "--no-follow-symlinks", dest="follow_symlinks", action="store_true", default=_SENTINEL
    )
    sentinel_opts, _ = sentinel_parser.parse_known_args(args if args is not None else sys.argv[1:])
    explicit_flags = {
        name for name, value in vars(sentinel_opts).items() if value is not _SENTINEL
    }

    resolver = ResolverOptions(
        max_workers=opts.jobs,
        extends_order=ExtendsOrder(opts.extends_order),
        extend_exclude=opts.extend_exclude or [],
        follow_symlinks=not opts.no_follow_symlinks,
    )
    return (
        Options(
            tsconfigs=opts.tsconfigs,
            relative_to=opts.relative_to,
            group=opts.group,
            json=opts.json,
            verbose=opts.verbose,
            version=opts.version,
            resolver=resolver,
        ),
        explicit_flags,
    )


def _render(result: ResolutionResult, options: Options) -> str:
    root = Path(options.relative_to).resolve() if options.relative_to is not None else None

    def show(path: Path) -> str:
        return str(path) if root is None else Path(os.path.relpath(path, root)).as_posix()

    if options.group:
        grouped = {
            name: [show(p) for p in files]
            for name, files in result.files_by_package_name().items()
        }
        if options.json:
            return json.dumps(grouped, indent=2)
        return "\n".join(f"{name}\t{path}" for name, paths in grouped.items() for path in paths)

    paths = result.relative_to(root) if root is not None else [str(p) for p in result.sorted_files()]
    if options.json:
        return json.dumps(paths, indent=2)
    return "\n".join(paths)


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the tsconfig-includes CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, 1 for resolution errors)
    """
    options, explicit_flags = _parse_args(args)

    if options.version:
        try:
            version = importlib.metadata.version("tsconfig-includes")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    logging.basicConfig(
        level=logging.DEBUG if options.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if not options.tsconfigs:
        print(
            "Error: No input specified. Provide one or more tsconfig.json files or"
            " directories. Use --help for more options.",
            file=sys.stderr,
        )
        return 1

    config_path = find_config_file(Path.cwd())
    if config_path:
        logger.debug("Using settings from %s", config_path)
        merge_cli_with_config(options.resolver, load_config(config_path), explicit_flags)

    try:
        result = resolve(options.tsconfigs, options=options.resolver)
    except TsconfigIncludesError as e:
        print(f"Error: {e}", file=sys.stderr)
        for other in e.concurrent_errors:
            print(f"  also: {other}", file=sys.stderr)
        return 1

    output = _render(result, options)
    if output:
        print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
