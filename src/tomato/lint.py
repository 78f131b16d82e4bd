"""Advisory checks for .tom sources.

The compiler accepts anything and silently drops what it does not
understand; ``lint`` reports those places instead. It walks the source with
the parser's own state machine, so a line is judged in the same context the
compiler sees it in. Linting never changes compiled output.

CLI usage:
    tomato --lint app.tom
"""

import difflib
import re
from dataclasses import dataclass

from . import ast
from .expander import component_reference
from .imports import IMPORT_STATEMENT
from .parser import (
    BREAKPOINT_BLOCKS,
    COMPONENT_HEADER,
    NESTED_HEADER,
    PSEUDO_CLASSES,
    SELECTOR_HEADER,
    TOKEN_HEADER,
    TOKEN_VALUE,
    ParseContext,
    ParserState,
    indentation,
    is_comment,
    parse,
    step,
)
from .properties import RULES, compile_property
from .tokens import COLORS, merge_tokens

ERROR = "error"
WARNING = "warning"

BARE_NAME = re.compile(r"^[.#]?[A-Za-z][\w-]*$")
BLOCK_SHAPED = re.compile(r"^@?[\w-]+:$")
SHADE_REFERENCE = re.compile(r"(?<![\w-])([a-z]+)-(\d+)(?![\w-])")

PALETTE_HUES = {name.rsplit("-", 1)[0] for name in COLORS if "-" in name}
PALETTE_SHADES = {name.rsplit("-", 1)[1] for name in COLORS if "-" in name}
KEYWORD_LINES = sorted({kw for rule in RULES for kw in rule.keywords})
NESTED_BLOCKS = list(PSEUDO_CLASSES + BREAKPOINT_BLOCKS)


@dataclass
class Diagnostic:
    """One finding, on a 1-indexed source line."""

    line: int
    severity: str  # "error" or "warning"
    code: str
    message: str

    def __str__(self) -> str:
        return f"{self.line}: {self.severity}: {self.message} [{self.code}]"


def _suggest(word: str, candidates: list[str]) -> str:
    matches = difflib.get_close_matches(word, candidates, n=1, cutoff=0.6)
    return f" Did you mean '{matches[0]}'?" if matches else ""


def _check_root(content: str, lineno: int) -> list[Diagnostic]:
    if TOKEN_HEADER.match(content) or COMPONENT_HEADER.match(content):
        return []
    if SELECTOR_HEADER.match(content) or IMPORT_STATEMENT.match(content):
        return []
    if BARE_NAME.match(content):
        return [
            Diagnostic(
                lineno, ERROR, "missing-colon",
                f"Missing colon after selector '{content}'. Did you mean '{content}:'?",
            )
        ]
    return [Diagnostic(lineno, WARNING, "unknown-root", f"Unrecognized line '{content}' is ignored")]


def _has_target(ctx: ParseContext) -> bool:
    return bool(
        (ctx.state is ParserState.TOKENS and ctx.token_category)
        or (ctx.state is ParserState.COMPONENTS and ctx.component)
        or (ctx.state is ParserState.STYLES and ctx.selector)
    )


def _check_property(
    content: str, lineno: int, document: ast.Document, tokens: dict
) -> list[Diagnostic]:
    name = component_reference(content)
    if name is not None:
        if name not in document.components:
            return [
                Diagnostic(
                    lineno, ERROR, "unknown-component",
                    f"Component '{name}' is not defined.{_suggest(name, list(document.components))}",
                )
            ]
        return []

    diagnostics = []
    for m in SHADE_REFERENCE.finditer(content):
        hue, shade = m.groups()
        if hue in PALETTE_HUES and shade not in PALETTE_SHADES and m.group(0) not in tokens["colors"]:
            diagnostics.append(
                Diagnostic(
                    lineno, WARNING, "invalid-shade",
                    f"Invalid shade '{shade}' for color '{hue}'. "
                    f"Valid shades: {', '.join(sorted(PALETTE_SHADES, key=int))}",
                )
            )

    if compile_property(content, tokens) is None:
        diagnostics.append(
            Diagnostic(
                lineno, WARNING, "unknown-property",
                f"Unknown property '{content}' produces no CSS.{_suggest(content, KEYWORD_LINES)}",
            )
        )
    return diagnostics


def _check_content(
    ctx: ParseContext, content: str, lineno: int, document: ast.Document, tokens: dict
) -> list[Diagnostic]:
    if not _has_target(ctx):
        return [Diagnostic(lineno, WARNING, "orphan-line", f"Line '{content}' is outside any block")]

    if NESTED_HEADER.match(content):
        return []

    if BLOCK_SHAPED.match(content):
        key = content[:-1]
        kind = "media block" if key.startswith("@") else "pseudo-class"
        return [
            Diagnostic(
                lineno, WARNING, "unknown-block",
                f"Unknown {kind} '{key}' is compiled as a property.{_suggest(key, NESTED_BLOCKS)}",
            )
        ]

    if ctx.state is ParserState.TOKENS:
        if not TOKEN_VALUE.match(content):
            return [Diagnostic(lineno, WARNING, "bad-token", f"Token '{content}' has no value")]
        return []

    return _check_property(content, lineno, document, tokens)


def lint(source: str) -> list[Diagnostic]:
    """Check a .tom source and return diagnostics in line order."""
    document = parse(source)
    tokens = merge_tokens(document.tokens)
    diagnostics: list[Diagnostic] = []

    ctx = ParseContext()
    scratch = ast.Document()
    for lineno, line in enumerate(source.split("\n"), 1):
        content = line.strip()
        indent = indentation(line)
        if content and not is_comment(content, indent):
            if indent == 0:
                diagnostics.extend(_check_root(content, lineno))
            else:
                diagnostics.extend(_check_content(ctx, content, lineno, document, tokens))
        step(ctx, scratch, line)

    return diagnostics
