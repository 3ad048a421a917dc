"""
Rewrites byte-list sub-literals (`<<116,105,116,108,101>>`) into readable
quoted strings and quotes bit-segment specifiers such as `<<_ :: 32>>`.
"""

import json
import re
from typing import Callable, List, Optional

from core.tokenizer import TokenType, scan

BYTE_LIST_PATTERN = re.compile(r"<<([\d,\s]+)>>")
BIT_SPEC_PATTERN = re.compile(r"<<\s*_+[^<>\"]*::[^<>\"]*>>")
NUMERIC_LIST_PATTERN = re.compile(r"<<[^<>]+>>")
DIGIT_COMMA_PATTERN = re.compile(r"(\d),(?=\d)")

PRINTABLE_CONTROLS = "\n\r\t"


def _parse_bytes(inner: str) -> Optional[List[int]]:
    values = []
    for part in inner.split(","):
        if part == "":
            continue
        segment = part.strip()
        if not (segment.isascii() and segment.isdigit()):
            return None
        value = int(segment)
        if value > 255:
            return None
        values.append(value)
    return values or None


def _printable_text(inner: str) -> Optional[str]:
    values = _parse_bytes(inner)
    if values is None:
        return None
    try:
        text = bytes(values).decode("utf-8")
    except UnicodeDecodeError:
        return None
    if all(char.isprintable() or char in PRINTABLE_CONTROLS for char in text):
        return text
    return None


def _outside_strings(text: str, rewrite: Callable[[str], str]) -> str:
    """Apply `rewrite` to every run of `text` that is not a quoted string."""
    parts = []
    pending = []
    for token in scan(text):
        if token.type is TokenType.STRING:
            parts.append(rewrite("".join(pending)))
            parts.append(token.value)
            pending = []
        else:
            pending.append(token.value)
    parts.append(rewrite("".join(pending)))
    return "".join(parts)


def replace_printable_binaries(text: str) -> str:
    def replace(match):
        decoded = _printable_text(match.group(1))
        if decoded is None:
            return match.group(0)
        return json.dumps(decoded, ensure_ascii=False)

    return _outside_strings(text, lambda run: BYTE_LIST_PATTERN.sub(replace, run))


def stringify_bit_specs(text: str) -> str:
    return _outside_strings(
        text, lambda run: BIT_SPEC_PATTERN.sub(lambda match: f'"{match.group(0).strip()}"', run)
    )


def space_byte_list_commas(text: str) -> str:
    def space(match):
        return DIGIT_COMMA_PATTERN.sub(r"\1, ", match.group(0))

    return _outside_strings(text, lambda run: NUMERIC_LIST_PATTERN.sub(space, run))


def normalize(text: str, space_commas: bool = False) -> str:
    """
    Normalize every byte-list sub-literal in `text`.

    Printable byte lists become quoted strings, placeholder bit-segment
    specifiers (`<<_ :: 32>>`) become a single quoted token and anything
    else is left exactly as it was, unless `space_commas` asks for a space
    after each comma of the remaining lists. Text inside existing quoted
    strings is never touched, so the result is stable under re-normalization.
    """
    normalized = stringify_bit_specs(replace_printable_binaries(text))
    if space_commas:
        normalized = space_byte_list_commas(normalized)
    return normalized
