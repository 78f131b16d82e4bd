"""Line-oriented parser for .tom sources.

Layout (indentation decides nesting):

    colors:                 token category (colors, sizes)
      primary #e11d48
    component primary:      reusable component (also: define primary:)
      bg primary
    button:                 style rule (button, .card, #header, input[type="text"])
      use primary
      hover:                nested block (hover, active, focus, disabled,
        bg blue-600                       @mobile, @tablet, @laptop, @desktop)

Parsing never fails: lines that fit nowhere are dropped. A ``#`` comment
that mentions "component", "style" or "token" switches the section.
"""

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from . import ast

TOKEN_HEADER = re.compile(r"^(colors|sizes):$")
COMPONENT_HEADER = re.compile(r"^(?:component|define)\s+([\w-]+):$")
SELECTOR_HEADER = re.compile(r"^[.#]?[\w-]+(\[[\w=\"'-]+\])?:$")
NESTED_HEADER = re.compile(r"^(hover|active|focus|disabled|@mobile|@tablet|@laptop|@desktop):$")
TOKEN_VALUE = re.compile(r"^([\w-]+)\s+(.+)$")

PSEUDO_CLASSES = ("hover", "active", "focus", "disabled")
BREAKPOINT_BLOCKS = ("@mobile", "@tablet", "@laptop", "@desktop")


class ParserState(Enum):
    """Which kind of root construct the parser is inside."""

    NONE = "none"
    TOKENS = "tokens"
    COMPONENTS = "components"
    STYLES = "styles"


@dataclass
class ParseContext:
    """The open constructs while scanning. At most one root pointer is set
    by a header; comments may switch ``state`` without clearing all of them."""

    state: ParserState = ParserState.NONE
    token_category: str | None = None
    component: str | None = None
    selector: str | None = None
    nested: str | None = None

    def open_root(self, state: ParserState, **pointer: str) -> None:
        self.state = state
        self.token_category = pointer.get("token_category")
        self.component = pointer.get("component")
        self.selector = pointer.get("selector")
        self.nested = None


def indentation(line: str) -> int:
    """Column of the first non-whitespace character."""
    return len(line) - len(line.lstrip())


def is_comment(content: str, indent: int) -> bool:
    """``#`` starts a comment, except ``#header:`` at column 0 (id selector)."""
    return content.startswith("#") and not (indent == 0 and SELECTOR_HEADER.match(content))


def _switch_section(ctx: ParseContext, comment: str) -> None:
    lower = comment.lower()
    if "component" in lower:
        ctx.state = ParserState.COMPONENTS
        ctx.token_category = None
        ctx.selector = None
    elif "style" in lower:
        ctx.state = ParserState.STYLES
        ctx.token_category = None
        ctx.component = None
    elif "token" in lower:
        ctx.state = ParserState.TOKENS
        ctx.selector = None
        ctx.component = None


def _open_root(ctx: ParseContext, document: ast.Document, header: str) -> bool:
    """Open a root construct for ``header``. Returns False if it is none."""
    if m := TOKEN_HEADER.match(header):
        category = m.group(1)
        document.tokens.setdefault(category, {})
        ctx.open_root(ParserState.TOKENS, token_category=category)
        return True

    if m := COMPONENT_HEADER.match(header):
        name = m.group(1)
        document.components[name] = ast.Component()
        ctx.open_root(ParserState.COMPONENTS, component=name)
        return True

    if SELECTOR_HEADER.match(header):
        selector = header[:-1]
        document.styles[selector] = ast.StyleRule()
        ctx.open_root(ParserState.STYLES, selector=selector)
        return True

    return False


def _open_nested(ctx: ParseContext, document: ast.Document, key: str) -> None:
    if ctx.state is ParserState.COMPONENTS and ctx.component:
        document.components[ctx.component].nested[key] = []
        ctx.nested = key
    elif ctx.selector:
        document.styles[ctx.selector].nested[key] = []
        ctx.nested = key


def _add_content(ctx: ParseContext, document: ast.Document, content: str) -> None:
    if ctx.state is ParserState.TOKENS and ctx.token_category:
        if m := TOKEN_VALUE.match(content):
            document.tokens[ctx.token_category][m.group(1)] = m.group(2)
        return

    if ctx.state is ParserState.COMPONENTS and ctx.component:
        target = document.components[ctx.component]
    elif ctx.state is ParserState.STYLES and ctx.selector:
        target = document.styles[ctx.selector]
    else:
        return

    if ctx.nested:
        target.nested.setdefault(ctx.nested, []).append(content)
    else:
        target.props.append(content)


def step(ctx: ParseContext, document: ast.Document, line: str) -> None:
    """Feed one source line through the state machine."""
    content = line.strip()
    if not content:
        return

    indent = indentation(line)

    if is_comment(content, indent):
        _switch_section(ctx, content)
        return

    if indent == 0:
        _open_root(ctx, document, content)
        return

    if NESTED_HEADER.match(content):
        _open_nested(ctx, document, content[:-1])
        return

    _add_content(ctx, document, content)


def parse(source: str) -> ast.Document:
    """Parse .tom source text into a Document."""
    document = ast.Document()
    ctx = ParseContext()
    for line in source.split("\n"):
        step(ctx, document, line)
    return document


def parse_file(filepath: str | Path) -> ast.Document:
    """Parse a .tom file (without resolving its imports)."""
    filepath = Path(filepath)
    return parse(filepath.read_text(encoding="utf-8"))
