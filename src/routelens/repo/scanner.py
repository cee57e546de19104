from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Sequence

from routelens.constants import DEFAULT_EXCLUDE_PATTERNS, DEFAULT_INCLUDE_PATTERNS
from routelens.repo.ignore import matches_any, should_ignore_dir

logger = logging.getLogger(__name__)


def scan_source_files(
    repo_path: Path,
    include: Sequence[str] = DEFAULT_INCLUDE_PATTERNS,
    exclude: Sequence[str] = DEFAULT_EXCLUDE_PATTERNS,
    max_files: int | None = None,
) -> list[str]:
    """
    Return sorted absolute paths (as strings) of JS/TS files under repo_path
    that match an include glob and no exclude glob.
    """
    repo_path = repo_path.resolve()
    out: set[str] = set()
    for root, dirs, files in _walk(repo_path):
        root_p = Path(root)

        # prune ignored dirs
        dirs[:] = sorted(d for d in dirs if not should_ignore_dir(root_p / d))

        for f in sorted(files):
            full = root_p / f
            rel = full.relative_to(repo_path).as_posix()
            if not matches_any(rel, include) or matches_any(rel, exclude):
                continue
            out.add(str(full.resolve()))
            if max_files is not None and len(out) >= max_files:
                return sorted(out)
    return sorted(out)


def _walk(repo_path: Path):
    # Separate helper to make unit testing easier (can be mocked)
    return os.walk(repo_path)


def read_source(path: str, max_bytes: int = 2_000_000) -> str | None:
    try:
        with open(path, "rb") as f:
            data = f.read(max_bytes + 1)
    except OSError as e:
        logger.warning("cannot read %s: %s", path, e)
        return None
    if len(data) > max_bytes:
        logger.warning("skipping %s: larger than %d bytes", path, max_bytes)
        return None
    return data.decode("utf-8", errors="ignore")
