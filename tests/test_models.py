import pytest
from pydantic import ValidationError

from routelens.domain.models import ParseOutcome, RouteDescriptor, RouteParam, SourceLocation


def make_route(**overrides):
    fields = dict(
        method="GET",
        path="/items/:id",
        handler="getItem",
        source_location=SourceLocation(file_path="routes.js", line=3, column=0),
        framework="express",
        middleware=("auth",),
        params=(RouteParam(name="id"),),
    )
    fields.update(overrides)
    return RouteDescriptor(**fields)


def test_route_record_uses_camel_case_and_omits_absent_fields():
    assert make_route().to_record() == {
        "method": "GET",
        "path": "/items/:id",
        "handler": "getItem",
        "sourceLocation": {"filePath": "routes.js", "line": 3, "column": 0},
        "framework": "express",
        "middleware": ["auth"],
        "params": [{"name": "id", "kind": "path", "required": True}],
    }


def test_route_record_includes_controller_for_decorator_routes():
    record = make_route(framework="nestjs", middleware=None, controller="CatsController").to_record()
    assert record["controller"] == "CatsController"
    assert "middleware" not in record


def test_route_rejects_unnormalized_paths_and_unknown_methods():
    with pytest.raises(ValidationError):
        make_route(path="items")
    with pytest.raises(ValidationError):
        make_route(path="/items/")
    with pytest.raises(ValidationError):
        make_route(method="FETCH")


def test_route_is_immutable():
    r = make_route()
    with pytest.raises(ValidationError):
        r.path = "/other"


def test_parse_outcome_defaults():
    outcome = ParseOutcome()
    assert outcome.routes == ()
    assert outcome.errors == ()
    assert outcome.framework == "unknown"
    assert outcome.ok
