"""
Inline highlighting of the differing middle of two literal texts.

`diff_segments` trims the common prefix and suffix, rebalances each side so
that `prefix + diff` is bracket-consistent, and detaches the closers both
sides agree on. `compact_scope` renders an elided `(%{..., key => delta})`
form when the delta sits inside a single map or struct field, and
`shrink_structs` collapses the structs a non-compacted line leaves untouched.
"""

import unicodedata
from typing import List, Optional, Tuple

from core.literal_parser import KEY_VALUE_SEPARATOR, MAP_OPEN, split_key_value
from core.render_config import DEFAULT_CONFIG, RenderConfig
from core.styling import colorize
from core.tokenizer import (
    DelimiterFamily,
    TokenType,
    find_matching_close,
    scan,
    split_leading_whitespace,
    split_top_level,
    unmatched_closers,
)
from literal.literal_diff_types import DiffSegment

CLOSER_CHARS = ")]}"
STRUCT_NAME_CHARS = "._!"
ZERO_WIDTH_JOINER = "\u200d"
VARIATION_SELECTORS = "\ufe0e\ufe0f"


def grapheme_clusters(text: str) -> List[str]:
    """Approximate extended grapheme clusters: base character plus marks and joiners."""
    clusters: List[str] = []
    for char in text:
        if clusters and (
            unicodedata.category(char) in ("Mn", "Mc", "Me")
            or char in VARIATION_SELECTORS
            or char == ZERO_WIDTH_JOINER
            or clusters[-1].endswith(ZERO_WIDTH_JOINER)
            or "\U0001f3fb" <= char <= "\U0001f3ff"
            or (clusters[-1] == "\r" and char == "\n")
        ):
            clusters[-1] += char
        else:
            clusters.append(char)
    return clusters


def split_common_prefix(expected: str, actual: str) -> Tuple[str, str, str]:
    index = 0
    limit = min(len(expected), len(actual))
    while index < limit and expected[index] == actual[index]:
        index += 1
    return expected[:index], expected[index:], actual[index:]


def common_suffix_length(expected: str, actual: str) -> int:
    """Length in characters of the longest common suffix made of whole graphemes."""
    length = 0
    for left, right in zip(reversed(grapheme_clusters(expected)), reversed(grapheme_clusters(actual))):
        if left != right:
            break
        length += len(left)
    return length


def _split_suffix(text: str, length: int) -> Tuple[str, str]:
    if length == 0:
        return text, ""
    return text[:-length], text[-length:]


def take_needed_closers(suffix: str, closers: List[str]) -> Tuple[str, str]:
    """Pull `closers` off the front of `suffix`, crossing only whitespace."""
    taken = ""
    remaining = suffix
    for closer in closers:
        leading, rest = split_leading_whitespace(remaining)
        if not rest.startswith(closer):
            break
        taken += leading + closer
        remaining = rest[len(closer):]
    return taken, remaining


def _pull_following_closers(diff: str, suffix: str) -> Tuple[str, str]:
    leading, rest = split_leading_whitespace(suffix)
    count = 0
    while count < len(rest) and rest[count] in CLOSER_CHARS:
        count += 1
    if count == 0:
        return diff, suffix
    return diff + leading + rest[:count], rest[count:]


def rebalance_segment(prefix: str, diff: str, suffix: str) -> Tuple[str, str]:
    closers = unmatched_closers(prefix + diff)
    if closers:
        taken, remaining = take_needed_closers(suffix, closers)
        if taken:
            diff, suffix = diff + taken, remaining
    return _pull_following_closers(diff, suffix)


def detach_shared_closers(expected_diff: str, actual_diff: str) -> Tuple[str, str, str]:
    count = 0
    while (
        count < len(expected_diff)
        and count < len(actual_diff)
        and expected_diff[-1 - count] == actual_diff[-1 - count]
        and expected_diff[-1 - count] in CLOSER_CHARS
    ):
        count += 1
    if count == 0:
        return expected_diff, actual_diff, ""
    return expected_diff[:-count], actual_diff[:-count], expected_diff[-count:]


def highlight(text: str, color: bool, config: Optional[RenderConfig] = None) -> str:
    if text == "":
        return ""
    config = config or DEFAULT_CONFIG
    return colorize(text, config.highlight_color, color)


def diff_segments(expected: str, actual: str, color: bool = False, config: Optional[RenderConfig] = None) -> DiffSegment:
    prefix, expected_rest, actual_rest = split_common_prefix(expected, actual)
    suffix_length = common_suffix_length(expected_rest, actual_rest)
    expected_diff, expected_suffix = _split_suffix(expected_rest, suffix_length)
    actual_diff, actual_suffix = _split_suffix(actual_rest, suffix_length)

    expected_diff, expected_suffix = rebalance_segment(prefix, expected_diff, expected_suffix)
    actual_diff, actual_suffix = rebalance_segment(prefix, actual_diff, actual_suffix)

    expected_diff, actual_diff, shared = detach_shared_closers(expected_diff, actual_diff)

    return DiffSegment(
        prefix=prefix,
        expected_diff=expected_diff,
        actual_diff=actual_diff,
        expected_suffix=shared + expected_suffix,
        actual_suffix=shared + actual_suffix,
        highlighted_expected_diff=highlight(expected_diff, color, config),
        highlighted_actual_diff=highlight(actual_diff, color, config),
        original_expected=expected,
        original_actual=actual,
    )


def _struct_name_before(prefix: str, open_index: int) -> Optional[str]:
    start = open_index
    while start > 0 and (prefix[start - 1].isalnum() or prefix[start - 1] in STRUCT_NAME_CHARS):
        start -= 1
    if start == open_index or start == 0 or prefix[start - 1] != "%":
        return None
    return prefix[start - 1:open_index]


def _unmatched_brace_openers(prefix: str) -> List[int]:
    stack: List[int] = []
    for token in scan(prefix):
        if token.family is not DelimiterFamily.BRACE:
            continue
        if token.type is TokenType.OPEN:
            stack.append(token.start)
        elif stack:
            stack.pop()
    return stack


def _stays_in_field(tail: str, diff: str, suffix: str) -> bool:
    """
    True when `diff` sits inside the value of the last field of a scope
    whose body so far is `tail`, and that field ends after the diff.
    """
    if _field_key(tail) is None:
        return False

    text = tail + diff + suffix
    diff_start = len(tail)
    diff_end = diff_start + len(diff)
    stack: List[DelimiterFamily] = []

    for token in scan(text):
        if token.start >= diff_start and not stack:
            leaves_scope = token.type is TokenType.COMMA or (
                token.type is TokenType.CLOSE and token.family is not DelimiterFamily.BIT
            )
            if leaves_scope:
                return token.start >= diff_end

        if token.type is TokenType.OPEN:
            stack.append(token.family)
        elif token.type is TokenType.CLOSE and stack and stack[-1] is token.family:
            stack.pop()

    return False


def _field_key(tail: str) -> Optional[str]:
    segment = split_top_level(tail, strip=False)[-1]
    key, value = split_key_value(segment)
    if value is None or not key.strip():
        return None
    return key.strip()


def _compact_at(segment: DiffSegment, open_index: int, name: str) -> Optional[Tuple[str, str]]:
    tail = segment.prefix[open_index + 1:]
    if not (_stays_in_field(tail, segment.expected_diff, segment.expected_suffix)
            and _stays_in_field(tail, segment.actual_diff, segment.actual_suffix)):
        return None

    key = _field_key(tail)
    return (
        f"({name}{{..., {key} {KEY_VALUE_SEPARATOR} {segment.highlighted_expected_diff}}})",
        f"({name}{{..., {key} {KEY_VALUE_SEPARATOR} {segment.highlighted_actual_diff}}})",
    )


def compact_scope(segment: DiffSegment) -> Optional[Tuple[str, str]]:
    """
    Elide the unchanged structure around the delta of `segment`.

    A named struct (`%Name{`) enclosing the delta wins over a plain map
    (`%{`). Returns the compacted (expected, actual) lines, or None when the
    delta does not sit inside a single field.
    """
    openers = _unmatched_brace_openers(segment.prefix)
    if not openers:
        return None

    for open_index in reversed(openers):
        name = _struct_name_before(segment.prefix, open_index)
        if name is not None:
            compacted = _compact_at(segment, open_index, name)
            if compacted is not None:
                return compacted
            break

    for open_index in reversed(openers):
        if segment.prefix[:open_index + 1].endswith(MAP_OPEN):
            return _compact_at(segment, open_index, "%")

    return None


def shrink_structs(text: str) -> str:
    """
    Collapse every complete `%Name{...}` struct in `text` to `%Name{...}`.

    Structs whose closing brace is not part of `text` are left as they are.
    """
    parts: List[str] = []
    position = 0
    for token in scan(text):
        if token.start < position or token.type is not TokenType.OPEN or token.family is not DelimiterFamily.BRACE:
            continue
        if _struct_name_before(text, token.start) is None:
            continue
        close = find_matching_close(text, token.start)
        if close is None:
            continue
        parts.append(text[position:token.start] + "{...}")
        position = close + 1

    parts.append(text[position:])
    return "".join(parts)
