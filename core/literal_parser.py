from typing import Dict, List, Optional, Tuple

from core.tokenizer import find_matching_close, split_top_level
from literal.literal_diff_types import ClassifiedLiteral, Entry, LiteralShape

MAP_OPEN = "%{"
MAP_CLOSE = "}"
KEY_VALUE_SEPARATOR = "=>"
SIGNATURE_SEPARATOR = "::"
ELISION = "..."


def is_map_literal(text: str) -> bool:
    """True when `text` opens with `%{` and the brace it opens closes the text."""
    if not text.startswith(MAP_OPEN) or not text.endswith(MAP_CLOSE):
        return False
    return find_matching_close(text, len(MAP_OPEN) - 1) == len(text) - 1


def wraps_in_parens(text: str) -> bool:
    if len(text) < 2 or not text.startswith("(") or not text.endswith(")"):
        return False
    return find_matching_close(text, 0) == len(text) - 1


def map_inner_text(map_text: str) -> str:
    return map_text[len(MAP_OPEN):len(map_text) - len(MAP_CLOSE)].strip()


def split_call_signature(text: str) -> Optional[Tuple[str, str]]:
    """Split `(args) :: return` into its argument list and return type."""
    trimmed = text.strip()
    if not trimmed.startswith("("):
        return None

    close = find_matching_close(trimmed, 0)
    if close is None:
        return None

    remainder = trimmed[close + 1:].lstrip()
    if not remainder.startswith(SIGNATURE_SEPARATOR):
        return None

    return trimmed[1:close].strip(), remainder[len(SIGNATURE_SEPARATOR):].strip()


def classify(text: str) -> ClassifiedLiteral:
    trimmed = text.strip()

    if is_map_literal(trimmed):
        return ClassifiedLiteral(LiteralShape.MAP_LITERAL, trimmed, inner=map_inner_text(trimmed))

    signature = split_call_signature(trimmed)
    if signature is not None:
        args, return_type = signature
        return ClassifiedLiteral(
            LiteralShape.CALL_SIGNATURE, trimmed, args=args, return_type=return_type
        )

    if wraps_in_parens(trimmed):
        return ClassifiedLiteral(LiteralShape.PARENTHESIZED, trimmed, inner=trimmed[1:-1].strip())

    return ClassifiedLiteral(LiteralShape.PLAIN, trimmed)


def split_key_value(entry: str) -> Tuple[str, Optional[str]]:
    key, separator, value = entry.partition(KEY_VALUE_SEPARATOR)
    if not separator:
        return entry, None
    return key.rstrip(), value.lstrip()


def map_segments(inner: str) -> List[str]:
    """Top-level entries of a map body, without empty or elision segments."""
    return [segment for segment in split_top_level(inner) if segment not in ("", ELISION)]


def parse_map_literal(text: str) -> Optional[List[Entry]]:
    """
    Parse a map literal (optionally wrapped in one pair of parentheses)
    into its entries.

    Keys keep the position of their first occurrence while a repeated key
    takes the value of its last occurrence. Returns None when the text is
    not map-shaped or an entry has no `=>` separator.
    """
    classified = classify(text)
    if classified.shape is LiteralShape.PARENTHESIZED:
        classified = classify(classified.inner)
    if classified.shape is not LiteralShape.MAP_LITERAL:
        return None

    values: Dict[str, str] = {}
    for segment in map_segments(classified.inner):
        key, value = split_key_value(segment)
        if value is None:
            return None
        values[key.strip()] = value.strip()

    return [Entry(key=key, value=value) for key, value in values.items()]
