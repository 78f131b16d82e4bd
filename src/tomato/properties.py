"""Property compiler: one DSL property line -> CSS declarations.

Each line first has its color tokens substituted, then runs through
``RULES`` in order; the first rule whose predicate accepts the line
produces the declarations. Order matters: the generic passthrough at the
end would otherwise swallow the specific shorthands.

    bg blue-500            -> background: #3b82f6;
    pad sm md              -> padding: 0.5rem 1rem;
    size xl                -> font-size: 1.25rem; line-height: 1.75rem;
    row spread             -> display: flex; flex-direction: row;
                              justify-content: space-between;
    letter-spacing 0.1em   -> letter-spacing: 0.1em;
"""

import re
from collections.abc import Callable
from dataclasses import dataclass

from .tokens import DEFAULT_TOKENS, TokenTables, lookup

Declarations = list[str]

# A "word" may contain hyphens, so "white-space" never matches "white".
PALETTE_COLOR = re.compile(r"(?<![\w-])([a-z]+-\d{2,3}|white|black|transparent)(?![\w-])")
GEOMETRY = re.compile(r"^(width|height|max-width|min-width|max-height|min-height|top|right|bottom|left)\s")


@dataclass(frozen=True)
class PropertyRule:
    """A shorthand: a predicate on the line and the handler producing CSS."""

    name: str
    matches: Callable[[str], bool]
    emit: Callable[[str, TokenTables], Declarations | None]
    keywords: tuple[str, ...] = ()  # complete lines the rule accepts on their own


# ---------------------------------------------------------------------------
# Token resolution
# ---------------------------------------------------------------------------


def resolve_colors(prop: str, tokens: TokenTables) -> str:
    """Substitute color tokens in a property line.

    Single-word names (``primary``, ``dark``) are replaced first; palette
    names such as ``blue-500`` are then looked up, and left alone if
    unknown.
    """
    colors = tokens.get("colors", {})
    for name, value in colors.items():
        if "-" in name:
            continue
        prop = re.sub(rf"(?<![\w-]){re.escape(name)}(?![\w-])", lambda _m, v=value: v, prop)

    def palette(m: re.Match) -> str:
        return lookup(tokens, "colors", m.group(0)) or m.group(0)

    return PALETTE_COLOR.sub(palette, prop)


def resolve_size(value: str, tokens: TokenTables) -> str:
    """Resolve a size token (``sm``, ``4``, ``px``), else pass it through."""
    return lookup(tokens, "sizes", value) or value


def _sizes(values: str, tokens: TokenTables) -> str:
    return " ".join(resolve_size(v, tokens) for v in values.split(" "))


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def prefix(*prefixes: str) -> Callable[[str], bool]:
    return lambda prop: prop.startswith(prefixes)


def bare_or_prefix(word: str) -> Callable[[str], bool]:
    return lambda prop: prop == word or prop.startswith(word + " ")


def _after(prop: str, word: str) -> str:
    return prop[len(word) + 1:]


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def _background(prop: str, tokens: TokenTables) -> Declarations:
    value = _after(prop, "bg")
    if value.startswith("gradient "):
        stops = value[len("gradient "):].split(" to ")
        if len(stops) == 2:
            return [f"background: linear-gradient(135deg, {stops[0]}, {stops[1]});"]
    return [f"background: {value};"]


def _spacing(css_prop: str) -> Callable[[str, TokenTables], Declarations]:
    def emit(prop: str, tokens: TokenTables) -> Declarations:
        values = prop.split(" ", 1)[1]
        return [f"{css_prop}: {_sizes(values, tokens)};"]

    return emit


def _scaled(word: str, category: str, css_prop: str, default: str):
    def emit(prop: str, tokens: TokenTables) -> Declarations:
        size = default if prop == word else _after(prop, word)
        return [f"{css_prop}: {lookup(tokens, category, size) or size};"]

    return emit


def _font_size(prop: str, tokens: TokenTables) -> Declarations:
    size = _after(prop, "size")
    value = lookup(tokens, "fontSize", size)
    if isinstance(value, (tuple, list)) and len(value) == 2:
        return [f"font-size: {value[0]};", f"line-height: {value[1]};"]
    if value:
        return [f"font-size: {value};"]
    return [f"font-size: {size};"]


def _grid(prop: str, tokens: TokenTables) -> Declarations:
    cols = _after(prop, "grid")
    return ["display: grid;", f"grid-template-columns: repeat({cols}, 1fr);"]


def _sized(word: str, css_prop: str):
    def emit(prop: str, tokens: TokenTables) -> Declarations:
        return [f"{css_prop}: {resolve_size(_after(prop, word), tokens)};"]

    return emit


def _value_of(word: str, css_prop: str, template: str = "{}"):
    def emit(prop: str, tokens: TokenTables) -> Declarations:
        return [f"{css_prop}: {template.format(_after(prop, word))};"]

    return emit


def _geometry(prop: str, tokens: TokenTables) -> Declarations:
    css_prop, *value = prop.split(" ")
    return [f"{css_prop}: {resolve_size(' '.join(value), tokens)};"]


def _passthrough(prop: str, tokens: TokenTables) -> Declarations:
    css_prop, *value = prop.split(" ")
    return [f"{css_prop}: {' '.join(value)};"]


def keywords(name: str, table: dict[str, Declarations]) -> PropertyRule:
    """A rule for fixed keyword lines."""
    return PropertyRule(
        name,
        lambda prop: prop in table,
        lambda prop, _tokens: list(table[prop]),
        keywords=tuple(table),
    )


# ---------------------------------------------------------------------------
# Rule table (first match wins)
# ---------------------------------------------------------------------------

FLEX_ROW = ["display: flex;", "flex-direction: row;"]
FLEX_COLUMN = ["display: flex;", "flex-direction: column;"]

RULES: tuple[PropertyRule, ...] = (
    PropertyRule("background", prefix("bg "), _background),
    PropertyRule("color", prefix("color "), _value_of("color", "color")),
    PropertyRule(
        "text-color",
        lambda prop: prop.startswith("text ") and not prop.startswith("text-"),
        _value_of("text", "color"),
    ),
    PropertyRule("padding", prefix("pad "), _spacing("padding")),
    PropertyRule("margin", prefix("margin ", "m "), _spacing("margin")),
    PropertyRule(
        "radius",
        bare_or_prefix("round"),
        _scaled("round", "radius", "border-radius", "lg"),
        keywords=("round",),
    ),
    PropertyRule(
        "shadow",
        bare_or_prefix("shadow"),
        _scaled("shadow", "shadows", "box-shadow", "md"),
        keywords=("shadow",),
    ),
    keywords(
        "negations",
        {
            "no border": ["border: none;"],
            "no shadow": ["box-shadow: none;"],
            "no outline": ["outline: none;"],
        },
    ),
    PropertyRule("border", prefix("border "), _value_of("border", "border")),
    keywords("cursor", {"pointer": ["cursor: pointer;"], "clickable": ["cursor: pointer;"]}),
    keywords("smooth", {"smooth": ["transition: all 0.2s ease;"]}),
    PropertyRule("transition", prefix("transition "), _value_of("transition", "transition", "all {} ease")),
    PropertyRule("opacity", prefix("opacity "), _value_of("opacity", "opacity")),
    keywords(
        "text-decoration",
        {
            "no underline": ["text-decoration: none;"],
            "underline": ["text-decoration: underline;"],
            "line-through": ["text-decoration: line-through;"],
        },
    ),
    keywords(
        "text-transform",
        {
            "uppercase": ["text-transform: uppercase;"],
            "lowercase": ["text-transform: lowercase;"],
            "capitalize": ["text-transform: capitalize;"],
        },
    ),
    keywords(
        "font-weight",
        {
            "bold": ["font-weight: bold;"],
            "semibold": ["font-weight: 600;"],
            "light": ["font-weight: 300;"],
            "normal": ["font-weight: normal;"],
        },
    ),
    PropertyRule("font-size", prefix("size "), _font_size),
    keywords(
        "flex",
        {
            "row": FLEX_ROW,
            "row spread": FLEX_ROW + ["justify-content: space-between;"],
            "row center": FLEX_ROW + ["justify-content: center;"],
            "row end": FLEX_ROW + ["justify-content: flex-end;"],
            "column": FLEX_COLUMN,
            "column center": FLEX_COLUMN + ["align-items: center;"],
            "wrap": ["flex-wrap: wrap;"],
        },
    ),
    keywords(
        "centering",
        {
            "center": ["text-align: center;"],
            "center all": ["display: flex;", "justify-content: center;", "align-items: center;"],
            "align center": ["align-items: center;"],
            "justify center": ["justify-content: center;"],
        },
    ),
    PropertyRule("grid", prefix("grid "), _grid),
    PropertyRule("gap", prefix("gap "), _sized("gap", "gap")),
    PropertyRule("width", prefix("w "), _sized("w", "width")),
    PropertyRule("height", prefix("h "), _sized("h", "height")),
    keywords(
        "full-size",
        {
            "w-full": ["width: 100%;"],
            "h-full": ["height: 100%;"],
            "w-screen": ["width: 100vw;"],
            "h-screen": ["height: 100vh;"],
        },
    ),
    keywords(
        "position",
        {p: [f"position: {p};"] for p in ("relative", "absolute", "fixed", "sticky")},
    ),
    PropertyRule("z-index", prefix("z "), _value_of("z", "z-index")),
    keywords(
        "overflow",
        {f"overflow {v}": [f"overflow: {v};"] for v in ("hidden", "scroll", "auto")},
    ),
    keywords(
        "display",
        {
            "block": ["display: block;"],
            "inline": ["display: inline;"],
            "inline-block": ["display: inline-block;"],
            "hidden": ["display: none;"],
            "invisible": ["visibility: hidden;"],
        },
    ),
    PropertyRule("geometry", lambda prop: bool(GEOMETRY.match(prop)), _geometry),
    PropertyRule("passthrough", lambda prop: " " in prop, _passthrough),
)


def match_rule(prop: str) -> PropertyRule | None:
    """The first rule accepting an already color-resolved line."""
    for rule in RULES:
        if rule.matches(prop):
            return rule
    return None


def compile_property(line: str, tokens: TokenTables | None = None) -> Declarations | None:
    """Compile one property line into CSS declarations.

    Returns None for lines that produce nothing (no space and no matching
    keyword). ``tokens`` are merged token tables; defaults are used when
    omitted.
    """
    if tokens is None:
        tokens = DEFAULT_TOKENS
    prop = resolve_colors(line, tokens)
    rule = match_rule(prop)
    if rule is None:
        return None
    return rule.emit(prop, tokens)
