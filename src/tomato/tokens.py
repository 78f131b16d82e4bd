"""Design token tables.

The built-in tables are loaded once from ``defaults.yaml`` and exposed as
read-only mappings. Compilation merges them with caller overrides and the
tokens declared in the source; the merged tables are fresh dicts per call.

Example:
    from tomato.tokens import DEFAULT_TOKENS, merge_tokens

    tokens = merge_tokens({"colors": {"primary": "#e11d48"}})
    tokens["colors"]["primary"]   # "#e11d48"
    tokens["colors"]["blue-500"]  # "#3b82f6"
"""

from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from .errors import TokenFileError

DEFAULTS_PATH = Path(__file__).parent / "defaults.yaml"

# Categories the compiler consults, in the order they are reported.
CATEGORIES = ("colors", "sizes", "fontSize", "radius", "shadows", "breakpoints")

TokenTables = Mapping[str, Mapping[str, Any]]


def _freeze_value(value: Any) -> Any:
    if isinstance(value, list):
        return tuple(str(v) for v in value)
    return str(value)


def _load_defaults(path: Path = DEFAULTS_PATH) -> Mapping[str, Mapping[str, Any]]:
    """Load the packaged defaults and freeze them."""
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    colors: dict[str, str] = {}
    shades = data["shades"]
    for hue, values in data["palette"].items():
        for shade, value in zip(shades, values):
            colors[f"{hue}-{shade}"] = str(value)
    colors.update({name: str(value) for name, value in data["colors"].items()})

    tables: dict[str, Mapping[str, Any]] = {"colors": MappingProxyType(colors)}
    for category in CATEGORIES[1:]:
        table = {str(name): _freeze_value(value) for name, value in data[category].items()}
        tables[category] = MappingProxyType(table)
    return MappingProxyType(tables)


DEFAULT_TOKENS = _load_defaults()

COLORS = DEFAULT_TOKENS["colors"]
SIZES = DEFAULT_TOKENS["sizes"]
FONT_SIZES = DEFAULT_TOKENS["fontSize"]
RADIUS = DEFAULT_TOKENS["radius"]
SHADOWS = DEFAULT_TOKENS["shadows"]
BREAKPOINTS = DEFAULT_TOKENS["breakpoints"]


def merge_tokens(*layers: TokenTables | None) -> dict[str, dict[str, Any]]:
    """Merge token layers over the defaults. Later layers win.

    Every category of every layer is kept, including ones the compiler does
    not know about.
    """
    merged: dict[str, dict[str, Any]] = {
        category: dict(table) for category, table in DEFAULT_TOKENS.items()
    }
    for layer in layers:
        if not layer:
            continue
        for category, table in layer.items():
            merged.setdefault(category, {}).update(table)
    return merged


def lookup(tokens: TokenTables, category: str, name: str) -> Any | None:
    """Find a token in ``tokens``, falling back to the built-in table."""
    value = tokens.get(category, {}).get(name)
    if value:
        return value
    default = DEFAULT_TOKENS.get(category, {}).get(name)
    return default or None


def load_token_overrides(path: str | Path) -> dict[str, dict[str, Any]]:
    """Load caller token overrides from a YAML file.

    The file maps category names to ``name: value`` tables::

        colors:
          primary: "#e11d48"
        breakpoints:
          mobile: 600px

    Raises:
        TokenFileError: If the document or one of its categories is not a
            mapping.
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise TokenFileError(f"{path}: invalid YAML: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise TokenFileError(f"{path}: expected a mapping of token categories")

    overrides: dict[str, dict[str, Any]] = {}
    for category, table in data.items():
        if not isinstance(table, dict):
            raise TokenFileError(f"{path}: category '{category}' must be a mapping")
        overrides[str(category)] = {
            str(name): _freeze_value(value) for name, value in table.items()
        }
    return overrides
