import textwrap

from routelens.constants import NESTJS_METHOD_DECORATORS
from routelens.extractors.nestjs.controllers import NestJSExtractor, decorator_to_http_method


def extract(src: str, file_path: str = "cats.controller.ts"):
    outcome = NestJSExtractor().extract(textwrap.dedent(src), file_path)
    assert outcome.framework == "nestjs"
    return outcome.routes


def test_controller_prefix_and_method_fragment():
    routes = extract(
        """
        import { Controller, Get, Param } from '@nestjs/common';

        @Controller('cats')
        export class CatsController {
          @Get(':id')
          findOne(@Param('id') id: string) {
            return id;
          }
        }
        """
    )
    assert len(routes) == 1
    r = routes[0]
    assert r.method == "GET"
    assert r.path == "/cats/:id"
    assert r.handler == "findOne"
    assert r.controller == "CatsController"
    assert r.framework == "nestjs"
    assert r.middleware is None
    assert [(p.name, p.kind, p.required) for p in r.params] == [("id", "path", True)]
    assert r.source_location.file_path == "cats.controller.ts"
    assert r.source_location.line >= 6


def test_bare_and_empty_controller_forms():
    routes = extract(
        """
        @Controller()
        export class RootController {
          @Get()
          index() {}

          @Post('create/')
          create() {}
        }

        @Controller
        class BareController {
          @Delete('/items/:id/')
          remove() {}
        }
        """
    )
    assert [(r.method, r.path, r.controller) for r in routes] == [
        ("GET", "/", "RootController"),
        ("POST", "/create", "RootController"),
        ("DELETE", "/items/:id", "BareController"),
    ]


def test_classes_without_controller_decorator_are_skipped():
    routes = extract(
        """
        @Injectable()
        export class CatsService {
          @Get('nope')
          find() {}
        }
        """
    )
    assert routes == ()


def test_non_verb_decorators_are_ignored_and_each_verb_yields_a_route():
    routes = extract(
        """
        @Controller('/api/')
        export class ItemsController {
          @HttpCode(204)
          @Delete(':id')
          remove() {}

          @UseGuards(AuthGuard)
          helper() {}

          @Get('all')
          @Head('all')
          list() {}

          plain() {}
        }
        """
    )
    assert [(r.method, r.path, r.handler) for r in routes] == [
        ("DELETE", "/api/:id", "remove"),
        ("GET", "/api/all", "list"),
        ("HEAD", "/api/all", "list"),
    ]


def test_optional_param_and_unresolvable_fragment():
    routes = extract(
        """
        @Controller('users')
        export class UsersController {
          @Get(':id?')
          maybe() {}

          @Put(USERS_ROUTE)
          update() {}

          @Patch(`${version}/profile`)
          profile() {}
        }
        """
    )
    assert [r.path for r in routes] == ["/users/:id?", "/users", "/users/:version/profile"]
    assert [(p.name, p.required) for p in routes[0].params] == [("id", False)]
    assert routes[1].params == ()


def test_abstract_controller_and_all_verb():
    routes = extract(
        """
        @Controller('base')
        export abstract class BaseController {
          @All('*')
          fallback() {}
        }
        """
    )
    assert [(r.method, r.path, r.controller) for r in routes] == [("ALL", "/base/*", "BaseController")]


def test_verb_mapping_table():
    values = list(NESTJS_METHOD_DECORATORS.values())
    assert len(set(values)) == len(values)
    assert {name.upper() for name in NESTJS_METHOD_DECORATORS} == set(values)
    assert decorator_to_http_method("All") == "ALL"
    assert decorator_to_http_method("Subscribe") == "GET"


def test_classify_needs_package_and_decorator():
    ex = NestJSExtractor()
    assert ex.classify("import { Get } from '@nestjs/common';\n@Get()", "a.ts")
    assert not ex.classify("@Get()", "a.ts")


def test_bare_verb_decorators_are_not_routes():
    routes = extract(
        """
        @Controller('c')
        export class C {
          @Get
          x() {}

          @Get('y')
          y() {}
        }
        """
    )
    assert [(r.method, r.path, r.handler) for r in routes] == [("GET", "/c/y", "y")]
