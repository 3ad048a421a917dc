import pytest

from core.pretty_printer import pretty_multiline
from core.render_config import RenderConfig

YELLOW = "\x1b[33m"
RESET = "\x1b[0m"


def test_two_entry_map_expands_to_four_lines():
    assert pretty_multiline("%{a => 1, b => 2}") == ["%{", "  a => 1,", "  b => 2", "}"]


@pytest.mark.parametrize("text", [
    "%{}",
    "%{a => 1}",
    "%{..., b => 1}",
    "atom()",
    "%{a} | %{b}",
])
def test_single_line_shapes_are_untouched(text):
    assert pretty_multiline(text) == [text]


def test_nested_maps_recurse_with_key_prefix():
    lines = pretty_multiline("%{a => 1, m => %{b => 1, c => 2}, z => %{y => 0}}")

    assert lines == [
        "%{",
        "  a => 1,",
        "  m => %{",
        "    b => 1,",
        "    c => 2",
        "  },",
        "  z => %{y => 0}",
        "}",
    ]


def test_parentheses_wrap_first_and_last_lines():
    assert pretty_multiline("(%{a => 1, b => 2})") == ["(%{", "  a => 1,", "  b => 2", "})"]
    assert pretty_multiline("(atom())") == ["(atom())"]


def test_style_wrapper_is_reattached_at_the_edges():
    lines = pretty_multiline(f"{YELLOW}%{{a => 1, b => 2}}{RESET}")

    assert lines == [f"{YELLOW}%{{", "  a => 1,", "  b => 2", f"}}{RESET}"]


def test_styled_nested_value_keeps_its_wrapper():
    lines = pretty_multiline(f"%{{a => 1, m => {YELLOW}%{{b => 1, c => 2}}{RESET}}}")

    assert lines == [
        "%{",
        "  a => 1,",
        f"  m => {YELLOW}%{{",
        "    b => 1,",
        "    c => 2",
        f"  }}{RESET}",
        "}",
    ]


@pytest.mark.parametrize("text", [
    "%{a => 1, b => 2}",
    "%{a => 1, m => %{b => 1, c => %{d => 1, e => 2}}, z => [1, 2]}",
    "(%{a => %{b => 1, c => 2}, d => 3})",
])
def test_pretty_output_is_idempotent(text):
    lines = pretty_multiline(text)
    reflattened = "".join(line.strip() for line in lines)

    assert pretty_multiline(reflattened) == lines


def test_indent_width_and_depth_are_configurable():
    wide = RenderConfig(indent_width=4)
    assert pretty_multiline("%{a => 1, b => 2}", wide) == ["%{", "    a => 1,", "    b => 2", "}"]

    shallow = RenderConfig(max_depth=1)
    assert pretty_multiline("%{a => 1, m => %{b => 1, c => 2}}", shallow) == [
        "%{",
        "  a => 1,",
        "  m => %{b => 1, c => 2}",
        "}",
    ]


def test_deep_nesting_terminates():
    text = "(" * 500 + "x" + ")" * 500
    assert pretty_multiline(text) == [text]
