from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import PurePath
from typing import Callable

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

from routelens.constants import MAX_SYNTAX_ERRORS
from routelens.domain.models import ParseError

logger = logging.getLogger(__name__)


class ParseFailure(Exception):
    """The source text could not be turned into a syntax tree at all."""


@dataclass(frozen=True)
class GrammarProfile:
    name: str
    suffixes: tuple[str, ...]
    loader: Callable[[], object] = field(repr=False, compare=False)


# The TSX grammar is a superset of modern JavaScript (decorators, class fields,
# optional chaining, nullish coalescing, rest/spread, async) plus JSX, so it
# doubles as the JavaScript profile. Plain .ts files need the non-JSX grammar
# because `<T>expr` casts are ambiguous with JSX.
TYPESCRIPT = GrammarProfile("typescript", (".ts", ".mts", ".cts"), tree_sitter_typescript.language_typescript)
TSX = GrammarProfile("tsx", (".tsx", ".js", ".jsx", ".mjs", ".cjs"), tree_sitter_typescript.language_tsx)

PROFILES = (TYPESCRIPT, TSX)


def profile_for_path(file_path: str) -> GrammarProfile:
    suffix = PurePath(file_path or "").suffix.lower()
    for profile in PROFILES:
        if suffix in profile.suffixes:
            return profile
    return TSX


@lru_cache(maxsize=None)
def _language(profile: GrammarProfile) -> Language:
    return Language(profile.loader())


@dataclass(frozen=True)
class SyntaxTree:
    root: Node
    source: bytes
    file_path: str
    profile: GrammarProfile
    errors: tuple[ParseError, ...] = ()


def build_tree(text: str, file_path: str = "", profile: GrammarProfile | None = None) -> SyntaxTree:
    """
    Parse JS/TS source into a tree-sitter tree.

    Malformed regions do not abort parsing: they show up as ERROR / MISSING
    nodes and are reported in `SyntaxTree.errors`, while the rest of the tree
    stays usable. Raises ParseFailure only when no tree can be produced.
    """
    profile = profile or profile_for_path(file_path)
    try:
        source = text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise ParseFailure(f"Failed to parse code: {e}") from e

    # a fresh parser per call keeps concurrent callers independent
    parser = Parser(_language(profile))
    try:
        tree = parser.parse(source)
    except (ValueError, RuntimeError) as e:
        raise ParseFailure(f"Failed to parse code: {e}") from e
    if tree is None:
        raise ParseFailure("Failed to parse code: parser returned no tree")

    errors = collect_syntax_errors(tree.root_node, source)
    if errors:
        logger.debug("%s: recovered from %d syntax error(s)", file_path or "<text>", len(errors))
    return SyntaxTree(root=tree.root_node, source=source, file_path=file_path, profile=profile, errors=errors)


def collect_syntax_errors(root: Node, source: bytes, limit: int = MAX_SYNTAX_ERRORS) -> tuple[ParseError, ...]:
    if not root.has_error:
        return ()

    out: list[ParseError] = []
    stack = [root]
    while stack and len(out) < limit:
        node = stack.pop()
        if node.is_error or node.is_missing:
            line, column = position(node, source)
            if node.is_missing:
                message = f"Missing {node.type!r}"
            else:
                snippet = (node.text or b"").decode("utf-8", errors="replace").strip().splitlines()
                message = f"Unexpected syntax near {snippet[0][:40]!r}" if snippet else "Unexpected syntax"
            out.append(ParseError(message=message, line=line, column=column))
            # only outermost error nodes
            continue
        if node.has_error:
            stack.extend(reversed(node.children))

    if not out:
        out.append(ParseError(message="Syntax error", line=1, column=0))
    return tuple(out)


def position(node: Node, source: bytes) -> tuple[int, int]:
    """(1-based line, 0-based character column) of the node's start."""
    row = node.start_point[0]
    start = node.start_byte
    line_start = source.rfind(b"\n", 0, start) + 1
    column = len(source[line_start:start].decode("utf-8", errors="replace"))
    return row + 1, column
