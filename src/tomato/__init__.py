"""Tomato: an indentation-based stylesheet language that compiles to CSS.

Pipeline: resolve imports -> parse .tom source -> compile to CSS -> scope.

Example:
    from tomato import compile_source

    result = compile_source("button:\\n  bg blue-500\\n  pad sm md\\n")
    print(result.css)
    # button {
    #   background: #3b82f6;
    #   padding: 0.5rem 1rem;
    # }
"""

__version__ = "0.1.0"

from .api import CompileResult, compile_file, compile_source, parse_source
from .ast import Component, Document, StyleRule
from .compiler import Compiler, compile_document, format_selector
from .errors import (
    CircularImportWarning,
    ImportFailedWarning,
    SourceReadError,
    TokenFileError,
    TomatoError,
    TomatoWarning,
)
from .expander import expand_props
from .imports import ImportResolver, imported_files, resolve_imports
from .lint import Diagnostic, lint
from .parser import ParseContext, ParserState, parse, parse_file
from .properties import compile_property, resolve_colors, resolve_size
from .scoping import generate_scope_id, scope_css
from .tokens import DEFAULT_TOKENS, load_token_overrides, merge_tokens

__all__ = [
    # Parse
    "parse",
    "parse_file",
    "parse_source",
    "ParserState",
    "ParseContext",
    # Model
    "Document",
    "Component",
    "StyleRule",
    # Compile
    "compile_source",
    "compile_file",
    "compile_document",
    "compile_property",
    "Compiler",
    "CompileResult",
    "expand_props",
    "format_selector",
    "resolve_colors",
    "resolve_size",
    # Tokens
    "DEFAULT_TOKENS",
    "merge_tokens",
    "load_token_overrides",
    # Imports
    "resolve_imports",
    "imported_files",
    "ImportResolver",
    # Scoping
    "scope_css",
    "generate_scope_id",
    # Lint
    "lint",
    "Diagnostic",
    # Errors
    "TomatoError",
    "SourceReadError",
    "TokenFileError",
    "TomatoWarning",
    "CircularImportWarning",
    "ImportFailedWarning",
]
