from __future__ import annotations

from dataclasses import dataclass
from typing import Collection, Optional

from tree_sitter import Node

from routelens.syntax.builder import SyntaxTree, position
from routelens.syntax.visitor import walk

FUNCTION_LITERALS = {"function_expression", "function", "arrow_function", "generator_function"}
_PROPERTY_NAMES = {"property_identifier", "private_property_identifier"}
_TRIVIA = {"comment"}
_SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v", "0": "\0"}
_LINE_BREAKS = {"\n", "\r", "\r\n", "\u2028", "\u2029"}


@dataclass(frozen=True)
class MethodCall:
    receiver: str
    method: str
    arguments: tuple[Node, ...]
    line: int
    column: int
    node: Node


@dataclass(frozen=True)
class DecoratorInfo:
    name: str
    arguments: tuple[Node, ...]
    is_call: bool
    node: Node


def node_text(node: Optional[Node]) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def named_children(node: Optional[Node]) -> list[Node]:
    if node is None:
        return []
    return [c for c in node.named_children if c.type not in _TRIVIA]


def literal_value(node: Optional[Node]) -> Optional[str]:
    """
    Resolve a string or template literal to text. Template substitutions become
    route placeholders: `${id}` -> ":id", anything more complex -> ":param".
    Returns None for every other kind of node.
    """
    if node is None:
        return None
    if node.type == "string":
        return _cook_string(node)
    if node.type == "template_string":
        return _reconstruct_template(node)
    return None


def _reconstruct_template(node: Node) -> str:
    raw = node.text or b""
    base = node.start_byte
    parts: list[str] = []
    # skip the opening and closing backticks
    cursor = 1
    for child in node.children:
        if child.type != "template_substitution":
            continue
        parts.append(raw[cursor : child.start_byte - base].decode("utf-8", errors="replace"))
        inner = named_children(child)
        if len(inner) == 1 and inner[0].type == "identifier":
            parts.append(f":{node_text(inner[0])}")
        else:
            parts.append(":param")
        cursor = child.end_byte - base
    parts.append(raw[cursor : max(cursor, len(raw) - 1)].decode("utf-8", errors="replace"))
    return "".join(parts)


def _cook_string(node: Node) -> str:
    """String literal value with escape sequences decoded ('/a\\/b' -> "/a/b")."""
    raw = node.text or b""
    base = node.start_byte
    parts: list[str] = []
    # skip the opening and closing quotes
    cursor = 1
    for child in node.children:
        if child.type != "escape_sequence":
            continue
        parts.append(raw[cursor : child.start_byte - base].decode("utf-8", errors="replace"))
        parts.append(_decode_escape(node_text(child)))
        cursor = child.end_byte - base
    parts.append(raw[cursor : max(cursor, len(raw) - 1)].decode("utf-8", errors="replace"))
    text = "".join(parts)
    try:
        # \ud83d\ude00 style escapes form one surrogate pair
        return text.encode("utf-16", "surrogatepass").decode("utf-16")
    except UnicodeDecodeError:
        return text


def _decode_escape(seq: str) -> str:
    body = seq[1:]
    if not body or body in _LINE_BREAKS:
        # line continuation
        return ""
    head = body[0]
    if head in _SIMPLE_ESCAPES and len(body) == 1:
        return _SIMPLE_ESCAPES[head]
    digits = None
    if head == "x" and len(body) == 3:
        digits = body[1:]
    elif head == "u":
        digits = body[2:-1] if body.startswith("u{") else body[1:]
    if digits is not None:
        try:
            return chr(int(digits, 16))
        except ValueError:
            return body
    if head in "1234567":
        # legacy octal
        try:
            return chr(int(body, 8))
        except ValueError:
            return body
    return body


def qualified_name(node: Optional[Node]) -> Optional[str]:
    """
    `a.b.c` -> "a.b.c". Returns None when the chain does not bottom out on a
    plain identifier (e.g. `this.router`, `getApp().router`, `a[b]`).
    """
    parts: list[str] = []
    current = node
    while current is not None:
        if current.type == "identifier":
            parts.append(node_text(current))
            return ".".join(reversed(parts))
        if current.type != "member_expression":
            return None
        prop = current.child_by_field_name("property")
        if prop is None or prop.type not in _PROPERTY_NAMES:
            return None
        parts.append(node_text(prop))
        current = current.child_by_field_name("object")
    return None


def is_function_literal(node: Optional[Node]) -> bool:
    return node is not None and node.type in FUNCTION_LITERALS


def handler_name(node: Optional[Node]) -> str:
    if node is None:
        return "unknown"
    if node.type == "identifier":
        return node_text(node)
    if node.type in FUNCTION_LITERALS:
        name = node.child_by_field_name("name")
        return node_text(name) if name is not None else "anonymous"
    if node.type == "member_expression":
        return qualified_name(node) or "unknown"
    return "unknown"


def call_arguments(call: Node) -> tuple[Node, ...]:
    return tuple(named_children(call.child_by_field_name("arguments")))


def find_method_calls(
    tree: SyntaxTree,
    receivers: Collection[str],
    methods: Collection[str],
) -> list[MethodCall]:
    """
    Every `receiver.method(...)` call in the tree where the receiver's
    qualified name is in `receivers` and the method name is in `methods`.
    """
    calls: list[MethodCall] = []

    def on_call(node: Node) -> None:
        callee = node.child_by_field_name("function")
        if callee is None or callee.type != "member_expression":
            return
        prop = callee.child_by_field_name("property")
        if prop is None or prop.type != "property_identifier":
            return
        method = node_text(prop)
        if method not in methods:
            return
        receiver = qualified_name(callee.child_by_field_name("object"))
        if receiver is None or receiver not in receivers:
            return
        line, column = position(node, tree.source)
        calls.append(
            MethodCall(
                receiver=receiver,
                method=method,
                arguments=call_arguments(node),
                line=line,
                column=column,
                node=node,
            )
        )

    walk(tree.root, {"call_expression": on_call})
    return calls


def parse_decorator(node: Node) -> Optional[DecoratorInfo]:
    """
    @Name / @Name(args...) -> DecoratorInfo. Other decorator shapes
    (`@ns.Name()`, `@(expr)`) are not recognized.
    """
    inner = named_children(node)
    if not inner:
        return None
    expr = inner[0]
    if expr.type == "identifier":
        return DecoratorInfo(name=node_text(expr), arguments=(), is_call=False, node=node)
    if expr.type == "call_expression":
        callee = expr.child_by_field_name("function")
        if callee is None or callee.type != "identifier":
            return None
        return DecoratorInfo(name=node_text(callee), arguments=call_arguments(expr), is_call=True, node=node)
    return None


def decorators_of(node: Node) -> list[DecoratorInfo]:
    """
    Decorators attached to a class or method, in source order.

    Depending on the grammar they are the node's own children, preceding
    siblings in the enclosing body, or children of an enclosing `export`
    statement (`@Controller() export class ...`).
    """
    found: list[Node] = []

    parent = node.parent
    if parent is not None and parent.type == "export_statement":
        found.extend(c for c in parent.children if c.type == "decorator")

    preceding: list[Node] = []
    sibling = node.prev_sibling
    while sibling is not None and sibling.type in ("decorator", "comment"):
        if sibling.type == "decorator":
            preceding.append(sibling)
        sibling = sibling.prev_sibling
    found.extend(reversed(preceding))

    found.extend(c for c in node.children if c.type == "decorator")

    out: list[DecoratorInfo] = []
    for dec in found:
        info = parse_decorator(dec)
        if info is not None:
            out.append(info)
    return out
