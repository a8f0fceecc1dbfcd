"""Tests for resolution results and their views."""

from __future__ import annotations

from pathlib import Path

from helpers import touch, write_json
from tsconfig_includes import resolve
from tsconfig_includes.result import package_name


def _workspace(root: Path) -> Path:
    touch(root, "packages/web/src/app.tsx", "packages/web/test/app.test.ts", "packages/shared/index.ts")
    write_json(root / "packages" / "web" / "package.json", {"name": "@acme/web"})
    write_json(root / "packages" / "web" / "tsconfig.json", {"include": ["src"]})
    write_json(
        root / "packages" / "web" / "tsconfig.test.json",
        {"include": ["test"], "references": [{"path": "./tsconfig.json"}, {"path": "../shared"}]},
    )
    write_json(root / "packages" / "shared" / "tsconfig.json", {})
    return root / "packages" / "web" / "tsconfig.test.json"


def test_relative_to_root(tmp_path: Path) -> None:
    result = resolve([_workspace(tmp_path)])
    assert result.relative_to(tmp_path) == [
        "packages/shared/index.ts",
        "packages/web/src/app.tsx",
        "packages/web/test/app.test.ts",
    ]
    assert result.relative_to(tmp_path / "packages" / "web") == [
        "../shared/index.ts",
        "src/app.tsx",
        "test/app.test.ts",
    ]


def test_sorted_files_are_absolute(tmp_path: Path) -> None:
    result = resolve([_workspace(tmp_path)])
    files = result.sorted_files()
    assert files == sorted(files)
    assert all(f.is_absolute() for f in files)


def test_files_by_package_name(tmp_path: Path) -> None:
    result = resolve([_workspace(tmp_path)])
    grouped = result.files_by_package_name()
    assert list(grouped) == ["@acme/web", "shared"]
    web = tmp_path.resolve() / "packages" / "web"
    assert grouped["@acme/web"] == [web / "src" / "app.tsx", web / "test" / "app.test.ts"]


def test_files_by_project(tmp_path: Path) -> None:
    start = _workspace(tmp_path)
    by_project = resolve([start]).files_by_project()
    assert len(by_project) == 3
    assert by_project[start.resolve()] == [start.resolve().parent / "test" / "app.test.ts"]


def test_package_name_fallbacks(tmp_path: Path) -> None:
    assert package_name(tmp_path / "missing") == "missing"
    (tmp_path / "broken").mkdir()
    (tmp_path / "broken" / "package.json").write_text("{")
    assert package_name(tmp_path / "broken") == "broken"
    write_json(tmp_path / "unnamed" / "package.json", {"version": "1.0.0"})
    assert package_name(tmp_path / "unnamed") == "unnamed"
