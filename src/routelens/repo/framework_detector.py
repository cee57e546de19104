from __future__ import annotations

import re

# Lexical heuristics only: these run on raw text to decide whether a full parse
# is worth it. False positives are fine (extraction just finds nothing); false
# negatives lose routes.

_EXPRESS_IMPORT = (
    re.compile(r"""require\s*\(\s*['"]express['"]\s*\)"""),
    re.compile(r"""from\s+['"]express['"]"""),
    re.compile(r"""import\s+['"]express['"]"""),
)
_VERB_CALL = re.compile(r"\.(get|post|put|delete|patch|options|head|all)\s*\(")
_ROUTER_BINDING = re.compile(r"\b(app|router)\s*[=:]")
_ROUTER_CALL = re.compile(r"\bRouter\s*\(\s*\)")

_NEST_PACKAGE = re.compile(r"@nestjs/")
_NEST_DECORATOR = re.compile(r"@(Controller|Get|Post|Put|Delete|Patch|Options|Head|All)\b")


def looks_like_express(text: str) -> bool:
    """
    True if the text imports express, calls a verb method while binding an
    `app`/`router` name, or calls `Router()`.
    """
    if any(p.search(text) for p in _EXPRESS_IMPORT):
        return True
    if _VERB_CALL.search(text) and _ROUTER_BINDING.search(text):
        return True
    return bool(_ROUTER_CALL.search(text))


def looks_like_nestjs(text: str) -> bool:
    # decorator syntax alone is too generic: both signals are required
    return bool(_NEST_PACKAGE.search(text)) and bool(_NEST_DECORATOR.search(text))
