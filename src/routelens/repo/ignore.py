from __future__ import annotations

import fnmatch
import re
from pathlib import Path
from typing import Iterable

DEFAULT_IGNORES = {
    ".git",
    "node_modules",
    "dist",
    "build",
    ".next",
    "coverage",
    ".turbo",
    ".cache",
}

_BRACES = re.compile(r"\{([^{}]*)\}")


def should_ignore_dir(dir_path: Path) -> bool:
    return dir_path.name in DEFAULT_IGNORES


def expand_braces(pattern: str) -> list[str]:
    # "**/*.{js,ts}" -> ["**/*.js", "**/*.ts"]
    m = _BRACES.search(pattern)
    if m is None:
        return [pattern]
    out: list[str] = []
    for alt in m.group(1).split(","):
        out.extend(expand_braces(pattern[: m.start()] + alt + pattern[m.end():]))
    return out


def matches_any(rel_path: str, patterns: Iterable[str]) -> bool:
    """
    Glob match on a repo-relative POSIX path. `**/` also matches zero
    directories, so "**/*.js" matches "app.js".
    """
    candidate = "/" + rel_path.replace("\\", "/").lstrip("/")
    for pattern in patterns:
        for p in expand_braces(pattern):
            p = p.replace("\\", "/")
            if not p.startswith("/") and not p.startswith("**"):
                p = "/" + p
            if fnmatch.fnmatchcase(candidate, p):
                return True
    return False
