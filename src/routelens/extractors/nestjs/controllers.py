from __future__ import annotations

import logging
from typing import Optional

from tree_sitter import Node

from routelens.constants import NESTJS_CONTROLLER_DECORATOR, NESTJS_METHOD_DECORATORS, UNKNOWN_CONTROLLER
from routelens.domain.models import Framework, HttpMethod, ParseOutcome, RouteDescriptor, SourceLocation
from routelens.extractors.base import extract_standalone
from routelens.repo.framework_detector import looks_like_nestjs
from routelens.syntax.builder import SyntaxTree, position
from routelens.syntax.paths import combine_paths, normalize_path, route_params
from routelens.syntax.queries import DecoratorInfo, decorators_of, literal_value, named_children, node_text
from routelens.syntax.visitor import walk

logger = logging.getLogger(__name__)

_CLASS_NODES = ("class_declaration", "abstract_class_declaration")
_METHOD_NAMES = {"property_identifier", "private_property_identifier"}


def decorator_to_http_method(name: str) -> HttpMethod:
    method = NESTJS_METHOD_DECORATORS.get(name)
    if method is None:
        logger.debug("unmapped verb decorator @%s, defaulting to GET", name)
        return "GET"
    return method


def _decorator_path(dec: DecoratorInfo) -> str:
    """First decorator argument as a normalized path, "" when absent or not a literal."""
    if not dec.arguments:
        return ""
    value = literal_value(dec.arguments[0])
    if not value:
        return ""
    return normalize_path(value)


class NestJSExtractor:
    """
    Routes declared by decorators on controller classes:

      @Controller("cats")
      export class CatsController {
        @Get(":id")
        findOne() {}
      }

    -> GET /cats/:id, handler findOne, controller CatsController.
    Classes without @Controller are skipped entirely.
    """

    framework: Framework = "nestjs"

    def classify(self, text: str, file_path: str) -> bool:
        return looks_like_nestjs(text)

    def extract(self, text: str, file_path: str) -> ParseOutcome:
        return extract_standalone(self, text, file_path)

    def extract_tree(self, tree: SyntaxTree) -> list[RouteDescriptor]:
        routes: list[RouteDescriptor] = []

        def on_class(node: Node) -> None:
            routes.extend(self._parse_controller(node, tree))

        walk(tree.root, {t: on_class for t in _CLASS_NODES})
        return routes

    def _parse_controller(self, class_node: Node, tree: SyntaxTree) -> list[RouteDescriptor]:
        controller = _controller_decorator(class_node)
        if controller is None:
            return []

        prefix = _decorator_path(controller)
        name_node = class_node.child_by_field_name("name")
        controller_name = node_text(name_node) if name_node is not None else UNKNOWN_CONTROLLER

        body = class_node.child_by_field_name("body")
        routes: list[RouteDescriptor] = []
        for member in named_children(body):
            if member.type != "method_definition":
                continue
            routes.extend(self._parse_method(member, prefix, controller_name, tree))
        return routes

    def _parse_method(
        self,
        method: Node,
        prefix: str,
        controller_name: str,
        tree: SyntaxTree,
    ) -> list[RouteDescriptor]:
        decorators = decorators_of(method)
        if not decorators:
            return []

        key = method.child_by_field_name("name")
        handler = node_text(key) if key is not None and key.type in _METHOD_NAMES else "anonymous"
        line, column = position(method, tree.source)

        routes: list[RouteDescriptor] = []
        for dec in decorators:
            # verb decorators count only in call form: @Get(), not @Get
            if not dec.is_call or dec.name not in NESTJS_METHOD_DECORATORS:
                continue
            path = combine_paths(prefix, _decorator_path(dec))
            routes.append(
                RouteDescriptor(
                    method=decorator_to_http_method(dec.name),
                    path=path,
                    handler=handler,
                    source_location=SourceLocation(file_path=tree.file_path, line=line, column=column),
                    framework=self.framework,
                    params=route_params(path),
                    controller=controller_name,
                )
            )
        return routes


def _controller_decorator(class_node: Node) -> Optional[DecoratorInfo]:
    for dec in decorators_of(class_node):
        if dec.name == NESTJS_CONTROLLER_DECORATOR:
            return dec
    return None
