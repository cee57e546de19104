from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional, Sequence

from routelens.constants import DEFAULT_EXCLUDE_PATTERNS, DEFAULT_INCLUDE_PATTERNS
from routelens.domain.models import ParseOutcome, RouteDescriptor
from routelens.orchestrator.dispatch import RouteDispatcher
from routelens.repo.scanner import read_source, scan_source_files

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanResult:
    repo_path: str
    files_scanned: int
    outcomes: dict[str, ParseOutcome] = field(default_factory=dict)  # rel_path -> outcome

    @property
    def routes(self) -> list[RouteDescriptor]:
        return [r for o in self.outcomes.values() for r in o.routes]

    @property
    def failed_files(self) -> dict[str, ParseOutcome]:
        return {p: o for p, o in self.outcomes.items() if o.errors}


def scan_sources(
    sources: Iterable[tuple[str, str]],
    dispatcher: Optional[RouteDispatcher] = None,
) -> dict[str, ParseOutcome]:
    """
    Dispatch already-loaded `(content, file_path)` pairs. A file that fails
    never stops the batch; its errors stay on its own outcome.
    """
    dispatcher = dispatcher or RouteDispatcher()
    outcomes: dict[str, ParseOutcome] = {}
    for content, file_path in sources:
        if file_path in outcomes:
            continue
        outcome = dispatcher.dispatch(content, file_path)
        if outcome.errors:
            logger.warning(
                "%s: %d error(s), first: %s",
                file_path, len(outcome.errors), outcome.errors[0].message,
            )
        outcomes[file_path] = outcome
    return outcomes


def run_scan(
    repo_path: Path,
    include: Sequence[str] = DEFAULT_INCLUDE_PATTERNS,
    exclude: Sequence[str] = DEFAULT_EXCLUDE_PATTERNS,
    frameworks: Optional[Sequence[str]] = None,
    max_files: int | None = None,
) -> ScanResult:
    repo_path = repo_path.resolve()
    dispatcher = RouteDispatcher()
    if frameworks:
        dispatcher = dispatcher.only(frameworks)

    files = scan_source_files(repo_path, include=include, exclude=exclude, max_files=max_files)
    logger.info("scanning %d file(s) under %s", len(files), repo_path)

    def _load():
        for p in files:
            text = read_source(p)
            if text is None:
                continue
            yield text, Path(p).relative_to(repo_path).as_posix()

    outcomes = scan_sources(_load(), dispatcher=dispatcher)
    result = ScanResult(repo_path=str(repo_path), files_scanned=len(files), outcomes=outcomes)
    logger.info("found %d route(s), %d file(s) with errors", len(result.routes), len(result.failed_files))
    return result
