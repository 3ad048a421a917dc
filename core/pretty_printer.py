"""
Expands single-line nested map literals into indented multi-line blocks.

    >>> pretty_multiline("%{a => 1, b => 2}")
    ['%{', '  a => 1,', '  b => 2', '}']
"""

from typing import List, Optional

from core.literal_parser import (
    ELISION,
    MAP_CLOSE,
    MAP_OPEN,
    classify,
    is_map_literal,
    map_inner_text,
    split_key_value,
)
from core.render_config import DEFAULT_CONFIG, RenderConfig
from core.tokenizer import extract_style_wrapper, reattach_style, split_top_level
from literal.literal_diff_types import LiteralShape


def pretty_multiline(text: str, config: Optional[RenderConfig] = None) -> List[str]:
    config = config or DEFAULT_CONFIG
    return _pretty(text, config, 0)


def _pretty(text: str, config: RenderConfig, depth: int) -> List[str]:
    wrapper = extract_style_wrapper(text.strip())
    content = wrapper.content

    if depth >= config.max_depth:
        return reattach_style([content], wrapper)

    classified = classify(content)
    if classified.shape is LiteralShape.PARENTHESIZED:
        lines = _wrap_parentheses(_pretty(classified.inner, config, depth + 1))
    elif classified.shape is LiteralShape.MAP_LITERAL:
        lines = _format_map_lines(content, 0, config, depth)
    else:
        lines = [content]

    return reattach_style(lines, wrapper)


def _format_map_lines(map_text: str, level: int, config: RenderConfig, depth: int) -> List[str]:
    indent = config.indent * level
    segments = [segment for segment in split_top_level(map_inner_text(map_text)) if segment]
    entry_count = len([segment for segment in segments if segment != ELISION])

    if entry_count <= 1 or depth >= config.max_depth:
        return [indent + map_text]

    lines = [indent + MAP_OPEN]
    last_index = len(segments) - 1
    for index, segment in enumerate(segments):
        suffix = "," if index < last_index else ""
        lines.extend(_format_map_entry(segment, level + 1, suffix, config, depth))
    lines.append(indent + MAP_CLOSE)
    return lines


def _format_map_entry(entry: str, level: int, suffix: str, config: RenderConfig, depth: int) -> List[str]:
    indent = config.indent * level
    key, value = split_key_value(entry)
    if value is None:
        return [indent + entry + suffix]

    wrapper = extract_style_wrapper(value)
    if not is_map_literal(wrapper.content):
        return [indent + entry + suffix]

    nested = _format_map_lines(wrapper.content, level, config, depth + 1)
    nested[0] = nested[0].lstrip()
    nested = reattach_style(nested, wrapper)
    nested[0] = f"{indent}{key} => {nested[0]}"
    nested[-1] = nested[-1] + suffix
    return nested


def _wrap_parentheses(lines: List[str]) -> List[str]:
    if len(lines) == 1:
        return [f"({lines[0]})"]
    return [f"({lines[0]}"] + lines[1:-1] + [f"{lines[-1]})"]
