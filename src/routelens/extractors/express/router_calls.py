from __future__ import annotations

import logging
from typing import Optional

from tree_sitter import Node

from routelens.constants import EXPRESS_METHOD_NAMES, EXPRESS_ROUTER_OBJECTS
from routelens.domain.models import Framework, ParseOutcome, RouteDescriptor, SourceLocation
from routelens.extractors.base import extract_standalone
from routelens.repo.framework_detector import looks_like_express
from routelens.syntax.builder import SyntaxTree
from routelens.syntax.paths import normalize_path, route_params
from routelens.syntax.queries import (
    MethodCall,
    find_method_calls,
    handler_name,
    is_function_literal,
    literal_value,
    node_text,
    qualified_name,
)
from routelens.syntax.visitor import walk

logger = logging.getLogger(__name__)

_HANDLER_SHAPES = {"identifier", "member_expression"}


class ExpressExtractor:
    """
    Routes declared by calls on a router-like object:
      app.get("/users/:id", auth, getUser)
      router.post(`/items/${id}`, [validate, audit], (req, res) => { ... })

    Mounting (`app.use("/api", router)`) is not followed: routes are reported
    relative to the router they are declared on.
    """

    framework: Framework = "express"

    def classify(self, text: str, file_path: str) -> bool:
        return looks_like_express(text)

    def extract(self, text: str, file_path: str) -> ParseOutcome:
        return extract_standalone(self, text, file_path)

    def extract_tree(self, tree: SyntaxTree) -> list[RouteDescriptor]:
        routing_objects = set(EXPRESS_ROUTER_OBJECTS) | set(find_router_variables(tree))
        calls = find_method_calls(tree, routing_objects, EXPRESS_METHOD_NAMES)

        routes: list[RouteDescriptor] = []
        for call in calls:
            route = self._route_from_call(call, tree.file_path)
            if route is not None:
                routes.append(route)
        return routes

    def _route_from_call(self, call: MethodCall, file_path: str) -> Optional[RouteDescriptor]:
        args = call.arguments
        if not args:
            return None

        raw_path = literal_value(args[0])
        if raw_path is None:
            # e.g. app.get(settingName), app.get(prefix + "/x"): no path we can name
            logger.debug(
                "%s:%d: skipping %s.%s(), path is not a literal",
                file_path, call.line, call.receiver, call.method,
            )
            return None

        handler_index = find_handler_index(args)
        middleware = resolve_middleware(args[1:handler_index])
        path = normalize_path(raw_path)

        return RouteDescriptor(
            method=call.method.upper(),
            path=path,
            handler=handler_name(args[handler_index]),
            source_location=SourceLocation(file_path=file_path, line=call.line, column=call.column),
            framework=self.framework,
            middleware=tuple(middleware) if middleware else None,
            params=route_params(path),
        )


def find_router_variables(tree: SyntaxTree) -> list[str]:
    """
    Names bound to `<obj>.Router()` (or a bare `Router()`), e.g.
      const users = express.Router();
    """
    names: list[str] = []

    def on_declarator(node: Node) -> None:
        name = node.child_by_field_name("name")
        value = node.child_by_field_name("value")
        if name is None or name.type != "identifier" or value is None:
            return
        if value.type != "call_expression":
            return
        callee = value.child_by_field_name("function")
        if callee is None:
            return
        if callee.type == "member_expression":
            prop = callee.child_by_field_name("property")
            if node_text(prop) != "Router":
                return
        elif not (callee.type == "identifier" and node_text(callee) == "Router"):
            return
        names.append(node_text(name))

    walk(tree.root, {"variable_declarator": on_declarator})
    return names


def find_handler_index(args: tuple[Node, ...]) -> int:
    """
    The terminal handler is the last function literal / identifier / member
    reference after the path; falls back to the last argument.
    """
    for i in range(len(args) - 1, 0, -1):
        arg = args[i]
        if is_function_literal(arg) or arg.type in _HANDLER_SHAPES:
            return i
    return len(args) - 1


def resolve_middleware(args: tuple[Node, ...]) -> list[str]:
    out: list[str] = []
    for arg in args:
        if arg.type == "array":
            for element in arg.named_children:
                name = _middleware_name(element)
                if name:
                    out.append(name)
            continue
        name = _middleware_name(arg)
        if name:
            out.append(name)
    return out


def _middleware_name(node: Node) -> Optional[str]:
    if node.type == "identifier" or is_function_literal(node):
        return handler_name(node)
    if node.type == "member_expression":
        return qualified_name(node)
    if node.type == "call_expression":
        # passport.authenticate("jwt"), validate(schema)
        return qualified_name(node.child_by_field_name("function"))
    return None
