"""Selector scoping for compiled CSS.

``scope_css`` prefixes every rule selector with ``[data-tom="<id>"]`` so a
stylesheet only applies inside the element carrying that attribute:

    .btn { color: red; }       -> [data-tom="t1a2b3"] .btn { color: red; }
    :root { --x: 1; }          -> [data-tom="t1a2b3"]:root { --x: 1; }

At-rule preludes are never rewritten. Rules inside grouping at-rules
(``@media``, ``@supports``, ...) are scoped like top-level rules; keyframe
offsets (``from``, ``to``, ``50%``) and the bodies of ``@font-face`` /
``@page`` are left alone.
"""

import re
import struct

GROUPING_AT_RULES = ("@media", "@supports", "@container", "@layer", "@document")
KEYFRAMES = re.compile(r"^@(-[a-z]+-)?keyframes\b", re.IGNORECASE)

BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"

# Kinds of open blocks.
GROUP = "group"
KEYFRAME_LIST = "keyframes"
DECLARATIONS = "declarations"


def scope_attribute(scope_id: str) -> str:
    return f'[data-tom="{scope_id}"]'


def string_end(text: str, start: int) -> int:
    """Index just past the string opened by the quote at ``start``.

    A backslash escapes the next character. Unterminated strings run to the
    end of ``text``.
    """
    quote = text[start]
    i = start + 1
    n = len(text)
    while i < n:
        char = text[i]
        if char == "\\":
            i += 2
            continue
        if char == quote:
            return i + 1
        i += 1
    return n


def comment_end(text: str, start: int) -> int:
    """Index just past the ``/* ... */`` comment opened at ``start``."""
    end = text.find("*/", start + 2)
    return len(text) if end == -1 else end + 2


def split_selectors(selector_list: str) -> list[str]:
    """Split on top-level commas only.

    Commas inside ``:is(a, b)``, ``[x="a,b"]`` or ``/* a, b */`` do not split.
    """
    parts: list[str] = []
    depth = 0
    start = 0
    i = 0
    n = len(selector_list)
    while i < n:
        char = selector_list[i]
        if char in "\"'":
            i = string_end(selector_list, i)
            continue
        if selector_list.startswith("/*", i):
            i = comment_end(selector_list, i)
            continue
        if char in "([":
            depth += 1
        elif char in ")]":
            depth = max(depth - 1, 0)
        elif char == "," and depth == 0:
            parts.append(selector_list[start:i])
            start = i + 1
        i += 1
    parts.append(selector_list[start:])
    return parts


def scope_selector_list(prelude: str, scope_id: str) -> str:
    """Scope each selector of a rule prelude, keeping surrounding whitespace."""
    attr = scope_attribute(scope_id)
    body = prelude.strip()
    if not body:
        return prelude
    lead = prelude[: len(prelude) - len(prelude.lstrip())]
    trail = prelude[len(prelude.rstrip()):]

    scoped = []
    for selector in split_selectors(body):
        selector = selector.strip()
        if not selector:
            scoped.append(selector)
        elif selector.startswith(":"):
            scoped.append(f"{attr}{selector}")
        else:
            scoped.append(f"{attr} {selector}")
    return lead + ", ".join(scoped) + trail


def _at_rule_kind(prelude: str) -> str:
    name = prelude.split(None, 1)[0].lower()
    if KEYFRAMES.match(name):
        return KEYFRAME_LIST
    if name.startswith(GROUPING_AT_RULES):
        return GROUP
    return DECLARATIONS


def scope_css(css: str, scope_id: str) -> str:
    """Prefix the selectors of every rule in ``css`` with the scope attribute."""
    out: list[str] = []
    stack: list[str] = []
    buf: list[str] = []
    i = 0
    n = len(css)

    def flush(terminator: str = "") -> None:
        out.append("".join(buf) + terminator)
        buf.clear()

    while i < n:
        char = css[i]

        if css.startswith("/*", i):
            end = comment_end(css, i)
            comment = css[i:end]
            if "".join(buf).strip():
                buf.append(comment)
            else:
                flush()
                out.append(comment)
            i = end
            continue

        if char in "\"'":
            end = string_end(css, i)
            buf.append(css[i:end])
            i = end
            continue

        if char == "{":
            prelude = "".join(buf)
            buf.clear()
            parent = stack[-1] if stack else None
            if prelude.strip().startswith("@"):
                kind = _at_rule_kind(prelude.strip())
                out.append(prelude)
            elif parent in (None, GROUP):
                kind = DECLARATIONS
                out.append(scope_selector_list(prelude, scope_id))
            else:
                # keyframe offsets and nested blocks inside declarations
                kind = DECLARATIONS
                out.append(prelude)
            stack.append(kind)
            out.append("{")
        elif char == "}":
            flush("}")
            if stack:
                stack.pop()
        elif char == ";":
            flush(";")
        else:
            buf.append(char)
        i += 1

    flush()
    return "".join(out)


def generate_scope_id(text: str) -> str:
    """Deterministic short id for ``text``: ``t`` + up to 6 base-36 chars.

    A 32-bit rolling hash (``h = h * 31 + unit``) over the UTF-16 code units
    of ``text``; the absolute value is rendered in base 36.
    """
    h = 0
    for (unit,) in struct.iter_unpack("<H", text.encode("utf-16-le")):
        h = ((h << 5) - h + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return "t" + _base36(abs(h))[:6]


def _base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(BASE36[rem])
    return "".join(reversed(digits))
