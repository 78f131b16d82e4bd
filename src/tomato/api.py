"""High-level entry points used by build tools and the CLI."""

from pathlib import Path

from pydantic import BaseModel

from . import ast
from .compiler import compile_document
from .imports import ImportResolver
from .parser import parse
from .scoping import generate_scope_id, scope_css
from .tokens import TokenTables


class CompileResult(BaseModel):
    """Output of one compile call."""

    css: str  # unscoped CSS
    scoped_css: str  # CSS with [data-tom="<scope_id>"] selectors (== css when not scoped)
    scope_id: str
    warnings: list[str] = []  # import cycles (compile_file only)
    errors: list[str] = []  # unreadable imports (compile_file only)


def parse_source(source: str) -> ast.Document:
    """Parse .tom source text into a Document."""
    return parse(source)


def compile_source(
    source: str,
    *,
    scoped: bool = True,
    scope_id: str | None = None,
    token_overrides: TokenTables | None = None,
) -> CompileResult:
    """Compile .tom source text to CSS.

    Args:
        source: Tomato source, with imports already resolved.
        scoped: Produce scoped CSS in ``scoped_css``.
        scope_id: Scope identifier; derived from ``source`` when omitted.
        token_overrides: Token tables layered over the defaults. Tokens
            declared in the source still take precedence.
    """
    document = parse(source)
    css = compile_document(document, token_overrides)
    scope_id = scope_id or generate_scope_id(source)
    scoped_css = scope_css(css, scope_id) if scoped else css
    return CompileResult(css=css, scoped_css=scoped_css, scope_id=scope_id)


def compile_file(
    path: str | Path,
    *,
    scoped: bool = True,
    scope_id: str | None = None,
    token_overrides: TokenTables | None = None,
) -> CompileResult:
    """Resolve the imports of a .tom file, then compile it.

    Raises:
        SourceReadError: If ``path`` cannot be read.
    """
    resolver = ImportResolver(path)
    source = resolver.resolve()
    result = compile_source(
        source, scoped=scoped, scope_id=scope_id, token_overrides=token_overrides
    )
    result.warnings = list(resolver.warnings)
    result.errors = list(resolver.errors)
    return result
