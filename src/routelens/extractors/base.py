from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from routelens.domain.models import Framework, ParseError, ParseOutcome, RouteDescriptor
from routelens.syntax.builder import ParseFailure, SyntaxTree, build_tree

logger = logging.getLogger(__name__)


@runtime_checkable
class RouteExtractor(Protocol):
    """
    One routing style. `classify` is a cheap text check, `extract_tree` does the
    real work on an already-built tree, `extract` is the standalone per-file entry.
    """

    framework: Framework

    def classify(self, text: str, file_path: str) -> bool: ...

    def extract(self, text: str, file_path: str) -> ParseOutcome: ...

    def extract_tree(self, tree: SyntaxTree) -> list[RouteDescriptor]: ...


def failure_outcome(framework: Framework, message: str) -> ParseOutcome:
    return ParseOutcome(framework=framework, errors=(ParseError(message=message, line=0, column=0),))


def extract_standalone(extractor: RouteExtractor, text: str, file_path: str) -> ParseOutcome:
    """
    Build a tree for one file and run a single extractor over it. Never raises:
    a tree that cannot be built yields one fatal error and no routes.
    """
    try:
        tree = build_tree(text, file_path)
    except ParseFailure as e:
        logger.debug("%s: %s", file_path, e)
        return failure_outcome(extractor.framework, str(e))

    routes = extractor.extract_tree(tree)
    return ParseOutcome(routes=tuple(routes), framework=extractor.framework, errors=tree.errors)
