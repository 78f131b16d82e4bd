"""Document model produced by the parser.

Property lines are kept as raw strings (e.g. ``"bg blue-500"`` or
``"use primary"``) and only turned into CSS at compile time.
"""

from pydantic import BaseModel


class Component(BaseModel):
    """A reusable list of property lines, inlined with ``use <name>``."""

    props: list[str] = []
    nested: dict[str, list[str]] = {}  # block name -> raw lines (not inlined by use)


class StyleRule(BaseModel):
    """Property lines for one selector."""

    props: list[str] = []
    nested: dict[str, list[str]] = {}  # hover / active / focus / disabled / @mobile ...


class Document(BaseModel):
    """A parsed .tom source."""

    tokens: dict[str, dict[str, str]] = {}  # category -> name -> value
    components: dict[str, Component] = {}
    styles: dict[str, StyleRule] = {}  # selector -> rule, in source order
