from pathlib import Path

from routelens.repo.ignore import expand_braces, matches_any
from routelens.repo.scanner import read_source, scan_source_files


def touch(p: Path, text: str = "") -> None:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")


def test_expand_braces():
    assert expand_braces("**/*.{js,ts}") == ["**/*.js", "**/*.ts"]
    assert expand_braces("plain/*.js") == ["plain/*.js"]


def test_matches_any_double_star_matches_zero_dirs():
    assert matches_any("app.js", ["**/*.js"])
    assert matches_any("src/a/b.ts", ["**/*.ts"])
    assert matches_any("node_modules/x/index.js", ["**/node_modules/**"])
    assert matches_any("src/users.spec.ts", ["**/*.spec.{js,ts}"])
    assert not matches_any("src/users.ts", ["**/*.spec.{js,ts}"])


def test_scan_source_files_filters_and_prunes(tmp_path: Path):
    touch(tmp_path / "app.js")
    touch(tmp_path / "src" / "cats.controller.ts")
    touch(tmp_path / "src" / "cats.controller.spec.ts")
    touch(tmp_path / "src" / "readme.md")
    touch(tmp_path / "node_modules" / "express" / "index.js")
    touch(tmp_path / "dist" / "bundle.js")

    files = scan_source_files(tmp_path)
    rel = [Path(p).relative_to(tmp_path.resolve()).as_posix() for p in files]
    assert rel == ["app.js", "src/cats.controller.ts"]


def test_scan_source_files_custom_patterns_and_limit(tmp_path: Path):
    for name in ("a.js", "b.js", "c.ts"):
        touch(tmp_path / name)

    files = scan_source_files(tmp_path, include=["**/*.js"], exclude=[])
    assert [Path(p).name for p in files] == ["a.js", "b.js"]

    assert len(scan_source_files(tmp_path, max_files=1)) == 1


def test_read_source_skips_oversized_files(tmp_path: Path):
    big = tmp_path / "big.js"
    touch(big, "x" * 50)
    assert read_source(str(big), max_bytes=10) is None
    assert read_source(str(big), max_bytes=50) == "x" * 50
