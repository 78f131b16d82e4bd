"""Tests for rule emission and component expansion."""

import pytest

from tomato import Compiler, Component, compile_document, expand_props, format_selector, parse

SHADOW_LG = "0 10px 15px -3px rgb(0 0 0 / 0.1), 0 4px 6px -4px rgb(0 0 0 / 0.1)"


def compile_tom(source: str, overrides=None) -> str:
    return compile_document(parse(source), overrides)


class TestEmission:
    """Block layout of the generated CSS."""

    def test_button(self):
        css = compile_tom("button:\n  bg blue-500\n  pad sm md\n")

        assert css == "button {\n  background: #3b82f6;\n  padding: 0.5rem 1rem;\n}\n"

    def test_hover_only(self):
        css = compile_tom(".card:\n  hover:\n    shadow lg\n")

        assert css == f".card:hover {{\n  box-shadow: {SHADOW_LG};\n}}\n"

    def test_blocks_separated_by_blank_line(self):
        css = compile_tom("a:\n  underline\nnav:\n  row\n")

        assert css == (
            "a {\n  text-decoration: underline;\n}\n"
            "\n"
            "nav {\n  display: flex;\n  flex-direction: row;\n}\n"
        )

    def test_nested_blocks_follow_base_in_source_order(self):
        source = "btn:\n  bg blue-500\n  focus:\n    no outline\n  hover:\n    bg blue-600\n"
        css = compile_tom(source)

        assert css == (
            ".btn {\n  background: #3b82f6;\n}\n"
            "\n"
            ".btn:focus {\n  outline: none;\n}\n"
            "\n"
            ".btn:hover {\n  background: #2563eb;\n}\n"
        )

    def test_breakpoint_block(self):
        css = compile_tom("card:\n  pad md\n  @mobile:\n    pad sm\n")

        assert css == (
            ".card {\n  padding: 1rem;\n}\n"
            "\n"
            "@media (max-width: 640px) {\n  .card {\n    padding: 0.5rem;\n  }\n}\n"
        )

    def test_multi_declaration_inside_media(self):
        css = compile_tom("h1:\n  @desktop:\n    size xl\n")

        assert css == (
            "@media (max-width: 1280px) {\n"
            "  h1 {\n"
            "    font-size: 1.25rem;\n"
            "    line-height: 1.75rem;\n"
            "  }\n"
            "}\n"
        )

    def test_empty_document(self):
        assert compile_tom("") == "\n"

    def test_rules_without_declarations_are_omitted(self):
        css = compile_tom("ghost:\n  frobnicate\n  hover:\n    use missing\np:\n  bold\n")

        assert css == "p {\n  font-weight: bold;\n}\n"

    def test_output_ends_with_single_newline(self):
        css = compile_tom("p:\n  bold\n\n\n")

        assert css.endswith("}\n")
        assert not css.endswith("\n\n")


class TestSelectors:
    """Selector formatting."""

    @pytest.mark.parametrize(
        "selector,expected",
        [
            ("card", ".card"),
            ("nav-bar", ".nav-bar"),
            ("button", "button"),
            ("h1", "h1"),
            (".card", ".card"),
            ("#header", "#header"),
            ('input[type="text"]', 'input[type="text"]'),
            ('field[type="text"]', 'field[type="text"]'),
        ],
    )
    def test_format_selector(self, selector, expected):
        assert format_selector(selector) == expected

    def test_id_selector_compiles(self):
        css = compile_tom("#header:\n  sticky\n")

        assert css == "#header {\n  position: sticky;\n}\n"


class TestComponents:
    """``use`` expansion during compilation."""

    def test_expansion_matches_inline_props(self):
        with_component = compile_tom(
            "component primary:\n  bg blue-500\n  round\nbutton:\n  use primary\n  pad sm\n"
        )
        inline = compile_tom("button:\n  bg blue-500\n  round\n  pad sm\n")

        assert with_component == inline

    def test_forward_reference(self):
        css = compile_tom("button:\n  use primary\ndefine primary:\n  bold\n")

        assert css == "button {\n  font-weight: bold;\n}\n"

    def test_undefined_component_is_dropped(self):
        with_missing = compile_tom("button:\n  use nothing\n  pad sm\n")
        without = compile_tom("button:\n  pad sm\n")

        assert with_missing == without

    def test_use_inside_nested_block(self):
        css = compile_tom("component lift:\n  shadow lg\ncard:\n  hover:\n    use lift\n")

        assert css == f".card:hover {{\n  box-shadow: {SHADOW_LG};\n}}\n"

    def test_component_nested_blocks_are_not_propagated(self):
        css = compile_tom("component btn:\n  bold\n  hover:\n    underline\na:\n  use btn\n")

        assert css == "a {\n  font-weight: bold;\n}\n"

    def test_component_tokens_resolve_at_use_site(self):
        source = "colors:\n  brand #e11d48\ncomponent tag:\n  color brand\nspan:\n  use tag\n"

        assert compile_tom(source) == "span {\n  color: #e11d48;\n}\n"


class TestExpander:
    """expand_props on its own."""

    def test_nested_components(self):
        components = {
            "base": Component(props=["round"]),
            "primary": Component(props=["use base", "bold"]),
        }

        assert expand_props(["use primary", "pad sm"], components) == ["round", "bold", "pad sm"]

    def test_self_reference_terminates(self):
        components = {"loop": Component(props=["bold", "use loop"])}

        assert expand_props(["use loop"], components) == ["bold"]

    def test_mutual_reference_terminates(self):
        components = {
            "a": Component(props=["bold", "use b"]),
            "b": Component(props=["underline", "use a"]),
        }

        assert expand_props(["use a"], components) == ["bold", "underline"]

    def test_repeated_use_expands_each_time(self):
        components = {"x": Component(props=["bold"])}

        assert expand_props(["use x", "use x"], components) == ["bold", "bold"]


class TestTokenPrecedence:
    """defaults <- caller overrides <- document tokens."""

    def test_document_tokens_override_defaults(self):
        css = compile_tom("colors:\n  blue-500 #0000ff\np:\n  color blue-500\n")

        assert css == "p {\n  color: #0000ff;\n}\n"

    def test_document_tokens_beat_caller_overrides(self):
        overrides = {"colors": {"brand": "red"}}
        css = compile_tom("colors:\n  brand green\np:\n  color brand\n", overrides)

        assert css == "p {\n  color: green;\n}\n"

    def test_caller_overrides_apply(self):
        css = compile_tom("p:\n  color brand\n", {"colors": {"brand": "red"}})

        assert css == "p {\n  color: red;\n}\n"

    def test_breakpoint_override(self):
        overrides = {"breakpoints": {"mobile": "600px"}}
        css = compile_tom("p:\n  @mobile:\n    hidden\n", overrides)

        assert css.startswith("@media (max-width: 600px) {")

    def test_compiler_does_not_mutate_defaults(self):
        from tomato.tokens import DEFAULT_TOKENS

        Compiler(parse("colors:\n  white #fefefe\n")).compile()

        assert DEFAULT_TOKENS["colors"]["white"] == "#fff"
