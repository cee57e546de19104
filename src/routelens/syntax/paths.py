from __future__ import annotations

import re

from routelens.domain.models import RouteParam

_ROUTE_PARAM = re.compile(r":([A-Za-z_][A-Za-z0-9_]*)(\?)?")
_MULTI_SLASH = re.compile(r"/{2,}")
_QUOTES = "'\"`"


def _normalize_once(p: str) -> str:
    p = p.strip(_QUOTES)
    if not p.startswith("/"):
        p = "/" + p
    p = _MULTI_SLASH.sub("/", p)
    # keep "/" as-is, otherwise strip trailing slash for stability
    if p != "/" and p.endswith("/"):
        p = p[:-1]
    return p


def normalize_path(path: str) -> str:
    """
    Normalize a route path: no surrounding quotes, exactly one leading slash,
    no runs of slashes, no trailing slash (except the root "/").

    Applied until stable, so a quote uncovered by dropping a trailing slash is
    removed too and normalize_path(normalize_path(p)) == normalize_path(p).
    """
    current = path or ""
    while True:
        nxt = _normalize_once(current)
        if nxt == current:
            return nxt
        current = nxt


def route_params(path: str) -> tuple[RouteParam, ...]:
    """
    One entry per `:name` token, left to right, repeats included.
    A trailing `?` (`:id?`) marks the parameter optional; the path itself keeps it.
    """
    return tuple(
        RouteParam(name=m.group(1), required=not m.group(2))
        for m in _ROUTE_PARAM.finditer(path or "")
    )


def combine_paths(prefix: str, fragment: str) -> str:
    """
    Join a controller prefix and a method fragment:
      ("", "")            -> "/"
      ("api", "")         -> "/api"
      ("", "users")       -> "/users"
      ("api/", "/users/") -> "/api/users"
    """
    prefix = (prefix or "").strip("/")
    fragment = (fragment or "").strip("/")
    if not prefix:
        return f"/{fragment}"
    if not fragment:
        return f"/{prefix}"
    return f"/{prefix}/{fragment}"
