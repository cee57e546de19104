from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from routelens.domain.models import Framework, ParseError, ParseOutcome, RouteDescriptor
from routelens.extractors.base import RouteExtractor, failure_outcome
from routelens.extractors.express.router_calls import ExpressExtractor
from routelens.extractors.nestjs.controllers import NestJSExtractor
from routelens.syntax.builder import GrammarProfile, ParseFailure, build_tree

logger = logging.getLogger(__name__)


def default_extractors() -> list[RouteExtractor]:
    return [ExpressExtractor(), NestJSExtractor()]


class RouteDispatcher:
    """
    Per-file entry point for callers: classify with every registered extractor,
    parse once, run the eligible extractors and merge their results.

    Holds no per-call state, so one instance can be shared between threads.
    `dispatch` never raises for problems in the file itself.
    """

    def __init__(
        self,
        extractors: Optional[Sequence[RouteExtractor]] = None,
        profile: Optional[GrammarProfile] = None,
    ) -> None:
        self.extractors: tuple[RouteExtractor, ...] = tuple(
            extractors if extractors is not None else default_extractors()
        )
        # None: pick the grammar from each file's suffix
        self.profile = profile

    @property
    def frameworks(self) -> list[Framework]:
        return [e.framework for e in self.extractors]

    def only(self, frameworks: Iterable[str]) -> "RouteDispatcher":
        wanted = set(frameworks)
        return RouteDispatcher([e for e in self.extractors if e.framework in wanted], profile=self.profile)

    def classify(self, text: str, file_path: str) -> list[RouteExtractor]:
        return [e for e in self.extractors if e.classify(text, file_path)]

    def dispatch(self, text: str, file_path: str) -> ParseOutcome:
        eligible = self.classify(text, file_path)
        if not eligible:
            return ParseOutcome(framework="unknown")

        try:
            tree = build_tree(text, file_path, profile=self.profile)
        except ParseFailure as e:
            logger.debug("%s: %s", file_path, e)
            return failure_outcome(eligible[0].framework, str(e))

        routes: list[RouteDescriptor] = []
        errors: list[ParseError] = list(tree.errors)
        framework: Framework = eligible[0].framework
        produced = False

        for extractor in eligible:
            try:
                found = extractor.extract_tree(tree)
            except Exception as e:  # one extractor's bug must not sink the file
                logger.exception("%s: %s extractor failed", file_path, extractor.framework)
                errors.append(ParseError(message=f"{extractor.framework} extraction failed: {e}"))
                continue
            if found and not produced:
                framework = extractor.framework
                produced = True
            routes.extend(found)

        return ParseOutcome(routes=tuple(routes), framework=framework, errors=tuple(errors))


_default: Optional[RouteDispatcher] = None


def dispatch(text: str, file_path: str) -> ParseOutcome:
    """Module-level convenience over a shared default RouteDispatcher."""
    global _default
    if _default is None:
        _default = RouteDispatcher()
    return _default.dispatch(text, file_path)
