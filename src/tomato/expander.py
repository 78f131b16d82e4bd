"""Component expansion: replaces ``use <name>`` lines with component props."""

from collections.abc import Iterable, Mapping

from .ast import Component

USE_PREFIX = "use "


def component_reference(line: str) -> str | None:
    """Return the component name of a ``use <name>`` line, else None."""
    if line.startswith(USE_PREFIX):
        return line[len(USE_PREFIX):].strip()
    return None


def expand_props(
    props: Iterable[str],
    components: Mapping[str, Component],
    _active: frozenset[str] = frozenset(),
) -> list[str]:
    """Inline component references, recursively.

    Only a component's base props are inlined; its nested blocks are not.
    Unknown components disappear. A component already being expanded on the
    current path expands to nothing, so mutually recursive components
    terminate.
    """
    result: list[str] = []
    for prop in props:
        name = component_reference(prop)
        if name is None:
            result.append(prop)
            continue
        component = components.get(name)
        if component is None or name in _active:
            continue
        result.extend(expand_props(component.props, components, _active | {name}))
    return result
