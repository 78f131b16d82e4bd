"""Rule emitter: turns a parsed Document into CSS text.

Selectors are emitted in source order. For each selector the base block
comes first, then its nested blocks in source order: pseudo-class blocks
become ``sel:hover`` rules, breakpoint blocks become ``@media
(max-width: ...)`` wrappers. Blocks with no declarations are omitted.
"""

import logging

from . import ast
from .expander import expand_props
from .properties import compile_property
from .tokens import TokenTables, lookup, merge_tokens

logger = logging.getLogger(__name__)

# Bare names that stay element selectors; any other bare name is a class.
HTML_ELEMENTS = frozenset(
    {
        "button", "input", "a", "p", "h1", "h2", "h3", "h4", "h5", "h6",
        "div", "span", "nav", "header", "footer", "main", "section", "article", "aside",
        "ul", "ol", "li", "table", "form", "img", "body", "html", "textarea", "select",
        "label", "fieldset", "legend", "hr", "br", "pre", "code", "blockquote",
    }
)


def format_selector(selector: str) -> str:
    """``card`` -> ``.card``; elements, ``.x``, ``#x`` and ``x[attr]`` stay."""
    if "[" in selector:
        return selector
    if selector.startswith((".", "#")):
        return selector
    if selector in HTML_ELEMENTS:
        return selector
    return f".{selector}"


def _block(selector: str, declarations: list[str], indent: str = "") -> str:
    body = "\n".join(f"{indent}  {decl}" for decl in declarations)
    return f"{indent}{selector} {{\n{body}\n{indent}}}"


class Compiler:
    """Compiles a Document into CSS."""

    def __init__(self, document: ast.Document, overrides: TokenTables | None = None):
        self.document = document
        # defaults <- caller overrides <- tokens declared in the source
        self.tokens = merge_tokens(overrides, document.tokens)

    def compile(self) -> str:
        blocks: list[str] = []
        for selector, rule in self.document.styles.items():
            blocks.extend(self.compile_rule(selector, rule))
        logger.debug("emitted %d CSS blocks for %d selectors", len(blocks), len(self.document.styles))
        return "\n\n".join(blocks).strip() + "\n"

    def compile_rule(self, selector: str, rule: ast.StyleRule) -> list[str]:
        """CSS blocks for one selector: base rule, then nested blocks."""
        css_selector = format_selector(selector)
        blocks: list[str] = []

        declarations = self.declarations(rule.props)
        if declarations:
            blocks.append(_block(css_selector, declarations))

        for key, props in rule.nested.items():
            declarations = self.declarations(props)
            if not declarations:
                continue
            if key.startswith("@"):
                name = key[1:]
                max_width = lookup(self.tokens, "breakpoints", name) or name
                inner = _block(css_selector, declarations, indent="  ")
                blocks.append(f"@media (max-width: {max_width}) {{\n{inner}\n}}")
            else:
                blocks.append(_block(f"{css_selector}:{key}", declarations))
        return blocks

    def declarations(self, props: list[str]) -> list[str]:
        """Expand component references and compile every line."""
        result: list[str] = []
        for prop in expand_props(props, self.document.components):
            compiled = compile_property(prop, self.tokens)
            if compiled:
                result.extend(compiled)
        return result


def compile_document(document: ast.Document, overrides: TokenTables | None = None) -> str:
    """Compile a Document to CSS text ending in exactly one newline."""
    return Compiler(document, overrides).compile()
