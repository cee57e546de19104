from __future__ import annotations

from typing import Callable, Mapping, Optional

from tree_sitter import Node

# Returned by a visitor callback to keep the walk out of that node's children.
SKIP = object()

Visitor = Callable[[Node], Optional[object]]


def walk(root: Node, visitors: Mapping[str, Visitor]) -> None:
    """
    Pre-order, left-to-right walk calling `visitors[node.type](node)` for every
    node whose kind has a callback. Iterative, so deeply nested sources do not
    hit the recursion limit.
    """
    stack = [root]
    while stack:
        node = stack.pop()
        callback = visitors.get(node.type)
        if callback is not None and callback(node) is SKIP:
            continue
        if node.child_count:
            stack.extend(reversed(node.children))


def find_all(root: Node, *node_types: str) -> list[Node]:
    found: list[Node] = []
    walk(root, {t: found.append for t in node_types})
    return found
