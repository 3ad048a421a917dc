"""
Structural diff of expected/actual literal text.

Strategies are tried in order and the first applicable one wins:

1. map-entry diff       both sides are a single map literal
2. call-signature diff  both sides look like `(args) :: return`
3. generic line diff    always applies

A strategy that does not apply returns None; nothing here raises.
"""

import logging
from typing import Dict, List, Optional, Sequence, Union

from core.binary_normalizer import normalize
from core.line_alignment import EQUAL, opcodes
from core.literal_parser import (
    KEY_VALUE_SEPARATOR,
    MAP_CLOSE,
    MAP_OPEN,
    classify,
    parse_map_literal,
)
from core.pretty_printer import pretty_multiline
from core.render_config import DEFAULT_CONFIG, RenderConfig
from core.segment_highlighter import compact_scope, diff_segments, highlight, shrink_structs
from core.styling import colorize
from core.tokenizer import balance_line
from literal.literal_diff_types import DiffKind, DiffLine, Entry, LiteralShape

logger = logging.getLogger(__name__)

LiteralInput = Union[str, Sequence[str], None]


def _as_lines(value: LiteralInput) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return value.splitlines()
    return list(value)


def _entry_line(key: str, value: str) -> str:
    return normalize(f"{key} {KEY_VALUE_SEPARATOR} {value}")


def _is_map(text: str) -> bool:
    return classify(text).shape is LiteralShape.MAP_LITERAL


def _pair(expected: str, actual: str) -> List[DiffLine]:
    return [DiffLine(DiffKind.DELETION, expected), DiffLine(DiffKind.INSERTION, actual)]


def _render_nested_map(own_text: str, other_text: str, side: DiffKind, color: bool,
                       config: RenderConfig, depth: int) -> str:
    """Render one side of a nested map pair, highlighting only what differs from the other side."""
    own_entries = parse_map_literal(own_text)
    other_entries = parse_map_literal(other_text)

    if own_entries is None or other_entries is None or depth >= config.max_depth:
        return _segment_side(own_text, other_text, side, color, config)

    other_values = {entry.key: entry.value for entry in other_entries}
    rendered = []
    for entry in own_entries:
        other_value = other_values.get(entry.key)
        if other_value is None:
            rendered.append(highlight(f"{entry.key} {KEY_VALUE_SEPARATOR} {entry.value}", color, config))
            continue
        if _is_map(entry.value) and _is_map(other_value):
            value = _render_nested_map(entry.value, other_value, side, color, config, depth + 1)
        else:
            value = _segment_side(entry.value, other_value, side, color, config)
        rendered.append(f"{entry.key} {KEY_VALUE_SEPARATOR} {value}")

    return MAP_OPEN + ", ".join(rendered) + MAP_CLOSE


def _segment_side(own: str, other: str, side: DiffKind, color: bool, config: RenderConfig) -> str:
    if side is DiffKind.DELETION:
        return diff_segments(own, other, color, config).expected_line
    return diff_segments(other, own, color, config).actual_line


def _diff_entry_value(key: str, expected_value: str, actual_value: str, color: bool,
                      config: RenderConfig, depth: int) -> List[DiffLine]:
    if _is_map(expected_value) and _is_map(actual_value) and depth < config.max_depth:
        expected_render = _render_nested_map(expected_value, actual_value, DiffKind.DELETION, color, config, depth + 1)
        actual_render = _render_nested_map(actual_value, expected_value, DiffKind.INSERTION, color, config, depth + 1)
    else:
        segment = diff_segments(expected_value, actual_value, color, config)
        expected_render, actual_render = segment.expected_line, segment.actual_line

    return _pair(_entry_line(key, expected_render), _entry_line(key, actual_render))


def diff_map_entries(expected_entries: List[Entry], actual_entries: List[Entry], color: bool = False,
                     config: Optional[RenderConfig] = None, depth: int = 0) -> List[DiffLine]:
    config = config or DEFAULT_CONFIG
    expected_values: Dict[str, str] = {entry.key: entry.value for entry in expected_entries}
    actual_values: Dict[str, str] = {entry.key: entry.value for entry in actual_entries}
    keys = list(expected_values) + [key for key in actual_values if key not in expected_values]

    lines: List[DiffLine] = []
    for key in keys:
        expected_value = expected_values.get(key)
        actual_value = actual_values.get(key)

        if actual_value is None:
            value = highlight(expected_value, color, config)
            lines.append(DiffLine(DiffKind.DELETION, _entry_line(key, value)))
        elif expected_value is None:
            value = highlight(actual_value, color, config)
            lines.append(DiffLine(DiffKind.INSERTION, _entry_line(key, value)))
        elif expected_value != actual_value:
            lines.extend(_diff_entry_value(key, expected_value, actual_value, color, config, depth))

    return lines


def _diff_using_map_entries(expected_lines: List[str], actual_lines: List[str], color: bool,
                            config: RenderConfig) -> Optional[List[DiffLine]]:
    if len(expected_lines) != 1 or len(actual_lines) != 1:
        return None

    expected_entries = parse_map_literal(expected_lines[0])
    actual_entries = parse_map_literal(actual_lines[0])
    if expected_entries is None or actual_entries is None:
        return None

    return diff_map_entries(expected_entries, actual_entries, color, config)


def _diff_using_call_signatures(expected_lines: List[str], actual_lines: List[str], color: bool,
                                config: RenderConfig) -> Optional[List[DiffLine]]:
    if len(expected_lines) != 1 or len(actual_lines) != 1:
        return None

    expected = classify(expected_lines[0])
    actual = classify(actual_lines[0])
    if expected.shape is not LiteralShape.CALL_SIGNATURE or actual.shape is not LiteralShape.CALL_SIGNATURE:
        return None

    if expected.args == actual.args and expected.return_type == actual.return_type:
        return []

    args = diff_segments(expected.args, actual.args, color, config)
    returns = diff_segments(expected.return_type, actual.return_type, color, config)

    return _pair(
        f"({args.expected_line}) :: {returns.expected_line}",
        f"({args.actual_line}) :: {returns.actual_line}",
    )


def inline_diff_lines(expected: str, actual: str, color: bool = False,
                      config: Optional[RenderConfig] = None) -> List[DiffLine]:
    """
    Highlight the differing segment of one paired line.

    The scope around the delta is compacted when possible; otherwise the
    full line is kept with every untouched `%Name{...}` struct collapsed.
    """
    segment = diff_segments(expected, actual, color, config)
    compacted = compact_scope(segment)
    if compacted is not None:
        return _pair(*compacted)

    prefix = shrink_structs(segment.prefix)
    return _pair(
        prefix + segment.highlighted_expected_diff + shrink_structs(segment.expected_suffix),
        prefix + segment.highlighted_actual_diff + shrink_structs(segment.actual_suffix),
    )


def _diff_using_lines(expected_lines: List[str], actual_lines: List[str], color: bool,
                      config: RenderConfig) -> List[DiffLine]:
    lines: List[DiffLine] = []

    for tag, i1, i2, j1, j2 in opcodes(expected_lines, actual_lines):
        if tag == EQUAL:
            continue

        deleted = expected_lines[i1:i2]
        inserted = actual_lines[j1:j2]
        paired = min(len(deleted), len(inserted))

        for expected, actual in zip(deleted, inserted):
            lines.extend(inline_diff_lines(expected, actual, color, config))
        lines.extend(DiffLine(DiffKind.DELETION, line) for line in deleted[paired:])
        lines.extend(DiffLine(DiffKind.INSERTION, line) for line in inserted[paired:])

    return lines


def diff(expected: LiteralInput, actual: LiteralInput, color: bool = False,
         config: Optional[RenderConfig] = None) -> List[DiffLine]:
    """
    Compute the structural delta between two literal texts.

    Args:
        expected: Expected literal text, as one string or a sequence of lines.
        actual: Actual literal text, as one string or a sequence of lines.
        color: Style the highlighted segments with ANSI escapes.
        config: Rendering settings; defaults to `RenderConfig()`.

    Returns:
        Ordered DiffLine entries; identical inputs produce an empty list.
    """
    config = config or DEFAULT_CONFIG
    expected_lines = [normalize(line) for line in _as_lines(expected)]
    actual_lines = [normalize(line) for line in _as_lines(actual)]

    for strategy in (_diff_using_map_entries, _diff_using_call_signatures):
        lines = strategy(expected_lines, actual_lines, color, config)
        if lines is not None:
            logger.debug(f"Structural diff resolved by {strategy.__name__}")
            return lines

    logger.debug("Structural diff fell back to line alignment")
    return _diff_using_lines(expected_lines, actual_lines, color, config)


def render_diff_line(line: DiffLine, color: bool = False, config: Optional[RenderConfig] = None) -> List[str]:
    """
    Turn a DiffLine into display strings.

    The first string carries the 3-character marker; continuation lines of
    an expanded map are indented by the marker width instead.
    """
    config = config or DEFAULT_CONFIG
    if line.kind is DiffKind.DELETION:
        marker, tint = config.deletion_marker, config.deletion_color
    else:
        marker, tint = config.insertion_marker, config.insertion_color

    content = pretty_multiline(line.text, config)
    if len(content) == 1:
        rendered = [balance_line(marker + content[0])]
    else:
        continuation = " " * len(marker)
        rendered = [marker + content[0]] + [continuation + part for part in content[1:]]

    return [colorize(part, tint, color) for part in rendered]


def diff_lines(expected: LiteralInput, actual: LiteralInput, color: bool = False,
               config: Optional[RenderConfig] = None) -> List[str]:
    """Ready-to-print lines for `diff(expected, actual)`, each prefixed with its marker."""
    rendered: List[str] = []
    for line in diff(expected, actual, color, config):
        rendered.extend(render_diff_line(line, color, config))
    return rendered
