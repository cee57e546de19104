import pytest

from routelens.syntax.paths import combine_paths, normalize_path, route_params


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("users", "/users"),
        ("/users/", "/users"),
        ("//api///users//", "/api/users"),
        ("'/users'", "/users"),
        ('"/users/:id"', "/users/:id"),
        ("", "/"),
        ("/", "/"),
        ("///", "/"),
        ("*", "/*"),
    ],
)
def test_normalize_path(raw, expected):
    assert normalize_path(raw) == expected


@pytest.mark.parametrize(
    "raw",
    ["users", "/a//b/", "'/x/'/", "\"'a'\"", "/'", "`/tpl/:id`", ":id?", "a/b/c///", " /x/ "],
)
def test_normalize_path_is_idempotent(raw):
    once = normalize_path(raw)
    assert normalize_path(once) == once
    assert once.startswith("/")
    assert "//" not in once
    assert once == "/" or not once.endswith("/")


def test_route_params_in_order():
    params = route_params("/users/:id/posts/:postId")
    assert [(p.name, p.kind, p.required) for p in params] == [
        ("id", "path", True),
        ("postId", "path", True),
    ]


def test_route_params_optional_marker_keeps_path():
    path = normalize_path("/users/:id?")
    assert path == "/users/:id?"
    params = route_params(path)
    assert [(p.name, p.required) for p in params] == [("id", False)]


def test_route_params_repeated_names_are_not_deduplicated():
    params = route_params("/a/:id/b/:id")
    assert [p.name for p in params] == ["id", "id"]


def test_route_params_count_matches_tokens():
    path = "/orgs/:org/repos/:repo?/files/*"
    assert len(route_params(path)) == path.count(":")
    assert route_params("/static/files") == ()


@pytest.mark.parametrize(
    "prefix, fragment, expected",
    [
        ("", "", "/"),
        ("api", "", "/api"),
        ("", "users", "/users"),
        ("api/", "/users/", "/api/users"),
        ("/cats", "/:id", "/cats/:id"),
        ("/", "/", "/"),
    ],
)
def test_combine_paths(prefix, fragment, expected):
    assert combine_paths(prefix, fragment) == expected
