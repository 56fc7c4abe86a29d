"""Heuristic check for script-bearing markup in feed content.

This only detects markup that looks executable; it never cleans it. Items
that fail the check are expected to be dropped before rendering.
"""

import re

from .models import Verdict

EVENT_HANDLERS = (
    "onclick",
    "onerror",
    "onload",
    "onmouseover",
    "onmouseout",
    "onfocus",
    "onblur",
    "onchange",
    "onsubmit",
    "onkeydown",
    "onkeypress",
    "onkeyup",
    "onabort",
    "onbeforeunload",
    "ondblclick",
    "ondrag",
    "ondragend",
    "ondragenter",
    "ondragleave",
    "ondragover",
    "ondragstart",
    "ondrop",
    "oninput",
    "oninvalid",
    "onmousedown",
    "onmousemove",
    "onmouseup",
    "onreset",
    "onresize",
    "onscroll",
    "onselect",
    "onunload",
)

# Word boundaries and case folding are ASCII-only; whitespace is the
# ECMAScript set (ASCII whitespace plus the Unicode space separators).
_FLAGS = re.IGNORECASE | re.ASCII
_SPACE = r"[\s\u00a0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000\ufeff]"

_SCRIPT_TAG_RE = re.compile(rf"<script(?:{_SPACE}|>)", _FLAGS)
_JS_SCHEME_RE = re.compile(r"javascript:", _FLAGS)
_EVENT_HANDLER_RES = tuple(
    re.compile(rf"\b{handler}{_SPACE}*=", _FLAGS) for handler in EVENT_HANDLERS
)
_CODE_CALL_RE = re.compile(rf"\b(?:eval|setTimeout|setInterval){_SPACE}*\(", _FLAGS)


def contains_javascript(content: str | None) -> bool:
    """Return True if the markup contains a known script vector.

    Values that are not strings are checked by their text form.
    """
    if not content:
        return False
    if not isinstance(content, str):
        content = str(content)

    if _SCRIPT_TAG_RE.search(content):
        return True

    if _JS_SCHEME_RE.search(content):
        return True

    if any(pattern.search(content) for pattern in _EVENT_HANDLER_RES):
        return True

    return bool(_CODE_CALL_RE.search(content))


def classify(content: str | None) -> Verdict:
    """Classify markup as safe to inject verbatim or rejected.

    Args:
        content: Markup to inspect; None and empty strings are safe

    Returns:
        Verdict.REJECTED if any script vector matches, otherwise Verdict.SAFE
    """
    if contains_javascript(content):
        return Verdict.REJECTED
    return Verdict.SAFE
