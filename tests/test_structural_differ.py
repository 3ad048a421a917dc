import pytest

from core.render_config import RenderConfig
from core.structural_differ import diff, diff_lines, diff_map_entries, render_diff_line
from core.tokenizer import strip_ansi
from literal.literal_diff_types import DiffKind, DiffLine, Entry

YELLOW = "\x1b[33m"
RED = "\x1b[31m"
RESET = "\x1b[0m"


def test_identical_inputs_produce_nothing():
    assert diff("%{a => 1}", "%{a => 1}") == []
    assert diff("(a) :: b", "(a) :: b") == []
    assert diff(["x", "y"], ["x", "y"]) == []
    assert diff(None, None) == []


def test_map_entry_diff_reports_only_the_changed_key():
    lines = diff("%{a => 1, b => 2, c => 3}", "%{a => 1, b => 20, c => 3}")

    assert lines == [
        DiffLine(DiffKind.DELETION, "b => 2"),
        DiffLine(DiffKind.INSERTION, "b => 20"),
    ]


def test_map_entry_diff_after_binary_normalization():
    lines = diff_lines("%{title => <<116,105,116,108,101>>}", '%{title => "other"}')

    assert lines == ['-  title => "title"', '+  title => "other"']


def test_entry_lines_keep_decoded_strings_intact():
    lines = diff_lines("%{k => <<60,60,54,53,62,62>>}", "%{k => 1}")

    assert lines == ['-  k => "<<65>>"', "+  k => 1"]


def test_map_entry_diff_single_sided_keys():
    lines = diff("%{a => 1, gone => 2}", "%{new => 3, a => 1}")

    assert lines == [
        DiffLine(DiffKind.DELETION, "gone => 2"),
        DiffLine(DiffKind.INSERTION, "new => 3"),
    ]


def test_map_entry_diff_highlights_single_sided_values():
    lines = diff("%{a => 1}", "%{a => 1, b => 2}", color=True)

    assert lines == [DiffLine(DiffKind.INSERTION, f"b => {YELLOW}2{RESET}")]


def test_diff_map_entries_directly():
    lines = diff_map_entries([Entry("k", "1")], [Entry("k", "2")])

    assert [line.kind for line in lines] == [DiffKind.DELETION, DiffKind.INSERTION]


def test_nested_map_differences_are_rendered_recursively():
    expected = [
        "(%{:items => maybe_improper_list(), :metadata => %{:count => integer(), "
        ":extras => %{:source => atom(), _ => _}}, :status => :ok, _ => _})"
    ]
    actual = [
        "(%{:items => [%{:unexpected => :entry}], :metadata => %{:count => <<_ :: 32>>, "
        ":extras => %{:source => <<_ :: 24>>}}, :status => :error, <<_ :: 48>> => %{<<_ :: 56>> => 123}})"
    ]

    lines = diff_lines(expected, actual, color=False)

    assert "-  :items => maybe_improper_list()" in lines
    assert "+  :items => [%{:unexpected => :entry}]" in lines
    assert "-  :metadata => %{:count => integer(), :extras => %{:source => atom(), _ => _}}" in lines
    assert '+  :metadata => %{:count => "<<_ :: 32>>", :extras => %{:source => "<<_ :: 24>>"}}' in lines
    assert '+  "<<_ :: 48>>" => %{"<<_ :: 56>>" => 123}' in lines
    assert "-  :status => :ok" in lines
    assert "-  _ => _" in lines


def test_nested_map_highlights_only_the_differing_field():
    lines = diff("%{m => %{a => 1, b => 2}}", "%{m => %{a => 1, b => 3}}", color=True)

    assert lines == [
        DiffLine(DiffKind.DELETION, f"m => %{{a => 1, b => {YELLOW}2{RESET}}}"),
        DiffLine(DiffKind.INSERTION, f"m => %{{a => 1, b => {YELLOW}3{RESET}}}"),
    ]


def test_nested_map_depth_is_bounded():
    config = RenderConfig(max_depth=1)
    lines = diff("%{m => %{a => 1}}", "%{m => %{a => 2}}", config=config)

    assert lines == [
        DiffLine(DiffKind.DELETION, "m => %{a => 1}"),
        DiffLine(DiffKind.INSERTION, "m => %{a => 2}"),
    ]


def test_call_signature_lines_stay_balanced(balanced):
    lines = diff_lines(
        ["([integer()]) :: integer() | nil"],
        ["(maybe_improper_list()) :: any()"],
        color=True,
    )

    assert len(lines) == 2
    deletion, insertion = (strip_ansi(line) for line in lines)
    assert "([integer()]) :: integer() | nil" in deletion
    assert "(maybe_improper_list()) :: any()" in insertion
    assert balanced(deletion)
    assert balanced(insertion)


def test_call_signature_diff_highlights_each_component():
    lines = diff("(a, b) :: atom()", "(a, c) :: binary()")

    assert lines == [
        DiffLine(DiffKind.DELETION, "(a, b) :: atom()"),
        DiffLine(DiffKind.INSERTION, "(a, c) :: binary()"),
    ]


def test_parenthesized_change_is_isolated():
    assert diff_lines("(atom())", "(binary())") == ["-  (atom())", "+  (binary())"]
    assert diff_lines("(atom())", "(binary())", color=True)[0] == f"{RED}-  ({YELLOW}atom{RESET}{RED}()){RESET}"


def test_generic_diff_compacts_nested_map_field():
    lines = diff(
        ["%{a => 1, m => %{b => 1, c => 2}}", "tail"],
        ["%{a => 1, m => %{b => 3, c => 2}}", "tail"],
    )

    assert lines == [
        DiffLine(DiffKind.DELETION, "(%{..., b => 1})"),
        DiffLine(DiffKind.INSERTION, "(%{..., b => 3})"),
    ]


def test_shape_mismatch_falls_back_to_line_diff():
    lines = diff("(a)", "%{a => 1}")

    assert [line.kind for line in lines] == [DiffKind.DELETION, DiffKind.INSERTION]
    assert lines[0].text == "(a)"
    assert lines[1].text == "%{a => 1}"


def test_generic_diff_pairs_consecutive_runs_only():
    lines = diff(["keep", "old1", "old2", "same"], ["keep", "new1", "same", "added"])

    assert [(line.kind, line.text) for line in lines] == [
        (DiffKind.DELETION, "old1"),
        (DiffKind.INSERTION, "new1"),
        (DiffKind.DELETION, "old2"),
        (DiffKind.INSERTION, "added"),
    ]


@pytest.mark.parametrize("expected, actual", [
    ("%{a => 1", "%{a => 2"),
    ("))((", "(("),
    ("\x1b[31m", "%{a => \x1b[0m"),
    ('"unterminated', "\"unterminated, b"),
    ("<<1,2", "<<1,3>>"),
])
def test_malformed_input_never_raises(expected, actual):
    lines = diff_lines(expected, actual, color=True)
    assert lines


def test_render_diff_line_expands_maps():
    line = DiffLine(DiffKind.DELETION, "%{a => 1, b => 2}")

    assert render_diff_line(line) == ["-  %{", "     a => 1,", "     b => 2", "   }"]


def test_render_diff_line_balances_single_lines():
    assert render_diff_line(DiffLine(DiffKind.INSERTION, "(%{..., b => [1")) == ["+  (%{..., b => [1]})"]


def test_render_diff_line_uses_configured_markers():
    config = RenderConfig(deletion_marker="<  ", insertion_marker=">  ")

    assert diff_lines("%{a => 1}", "%{a => 2}", config=config) == ["<  a => 1", ">  a => 2"]


def test_generic_diff_uses_a_shortest_alignment():
    lines = diff(["c", "b", "a", "c", "b"], ["a", "b", "c"])

    kinds = [line.kind for line in lines]
    assert len(lines) == 4
    assert kinds.count(DiffKind.DELETION) == 3
    assert kinds.count(DiffKind.INSERTION) == 1


def test_generic_diff_collapses_untouched_structs():
    lines = diff_lines(
        ["%User{name => 1, age => 2} | a", "x"],
        ["%User{name => 1, age => 2} | b", "x"],
    )

    assert lines == ["-  %User{...} | a", "+  %User{...} | b"]


def test_generic_diff_keeps_struct_holding_the_delta():
    lines = diff_lines(["%User{name => 1} | a", "x"], ["%User{name => 2} | b", "x"])

    assert lines == ["-  %User{name => 1} | a", "+  %User{name => 2} | b"]
