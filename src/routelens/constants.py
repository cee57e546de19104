from __future__ import annotations

HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS", "HEAD", "ALL")

# Imperative style (express)
EXPRESS_ROUTER_OBJECTS = ("app", "router")
EXPRESS_METHOD_NAMES = ("get", "post", "put", "delete", "patch", "options", "head", "all")

# Decorator style (nestjs)
NESTJS_CONTROLLER_DECORATOR = "Controller"
NESTJS_METHOD_DECORATORS = {
    "Get": "GET",
    "Post": "POST",
    "Put": "PUT",
    "Delete": "DELETE",
    "Patch": "PATCH",
    "Options": "OPTIONS",
    "Head": "HEAD",
    "All": "ALL",
}
UNKNOWN_CONTROLLER = "UnknownController"

DEFAULT_INCLUDE_PATTERNS = (
    "**/*.js",
    "**/*.ts",
    "**/*.jsx",
    "**/*.tsx",
    "**/*.mjs",
    "**/*.cjs",
    "**/*.mts",
    "**/*.cts",
)

DEFAULT_EXCLUDE_PATTERNS = (
    "**/node_modules/**",
    "**/dist/**",
    "**/build/**",
    "**/.next/**",
    "**/coverage/**",
    "**/*.spec.{js,ts}",
    "**/*.test.{js,ts}",
)

# outermost syntax errors reported per file
MAX_SYNTAX_ERRORS = 20
