"""
Single-pass scanner for nested literal text.

Every structural pass (splitting, balancing, classification, compaction)
consumes the token stream produced by `scan` instead of re-scanning the
text with its own pattern. Styling escapes (`ESC[...m`) and double-quoted
strings are emitted as opaque, depth-neutral tokens.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from literal.literal_diff_types import StyleWrapper

ESCAPE_START = "\x1b["
ESCAPE_END = "m"
BIT_OPEN = "<<"
BIT_CLOSE = ">>"
QUOTE = '"'
WHITESPACE = " \t\n\r"


class TokenType(Enum):
    TEXT = "TEXT"
    STRING = "STRING"
    OPEN = "OPEN"
    CLOSE = "CLOSE"
    COMMA = "COMMA"
    ESCAPE = "ESCAPE"


class DelimiterFamily(Enum):
    BRACE = "BRACE"
    BRACKET = "BRACKET"
    PAREN = "PAREN"
    BIT = "BIT"


OPENERS: Dict[str, DelimiterFamily] = {
    "{": DelimiterFamily.BRACE,
    "[": DelimiterFamily.BRACKET,
    "(": DelimiterFamily.PAREN,
}

CLOSERS: Dict[str, DelimiterFamily] = {
    "}": DelimiterFamily.BRACE,
    "]": DelimiterFamily.BRACKET,
    ")": DelimiterFamily.PAREN,
}

CLOSING_FOR: Dict[str, str] = {"(": ")", "[": "]", "{": "}"}


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str
    start: int
    family: Optional[DelimiterFamily] = None

    @property
    def end(self) -> int:
        return self.start + len(self.value)


def _string_end(text: str, start: int) -> int:
    """Index just past the closing quote of the string opened at `start`."""
    index = start + 1
    while index < len(text):
        char = text[index]
        if char == "\\":
            index += 2
            continue
        if char == QUOTE:
            return index + 1
        index += 1
    return len(text)


def scan(text: str) -> List[Token]:
    tokens: List[Token] = []
    run_start = 0
    index = 0
    length = len(text)

    def flush(upto: int) -> None:
        if upto > run_start:
            tokens.append(Token(TokenType.TEXT, text[run_start:upto], run_start))

    while index < length:
        token = None

        if text.startswith(ESCAPE_START, index):
            end = text.find(ESCAPE_END, index + len(ESCAPE_START))
            end = length if end == -1 else end + 1
            token = Token(TokenType.ESCAPE, text[index:end], index)
        elif text[index] == QUOTE:
            token = Token(TokenType.STRING, text[index:_string_end(text, index)], index)
        elif text.startswith(BIT_OPEN, index):
            token = Token(TokenType.OPEN, BIT_OPEN, index, DelimiterFamily.BIT)
        elif text.startswith(BIT_CLOSE, index):
            token = Token(TokenType.CLOSE, BIT_CLOSE, index, DelimiterFamily.BIT)
        elif text[index] in OPENERS:
            token = Token(TokenType.OPEN, text[index], index, OPENERS[text[index]])
        elif text[index] in CLOSERS:
            token = Token(TokenType.CLOSE, text[index], index, CLOSERS[text[index]])
        elif text[index] == ",":
            token = Token(TokenType.COMMA, ",", index)

        if token is None:
            index += 1
            continue

        flush(index)
        tokens.append(token)
        index = token.end
        run_start = index

    flush(length)
    return tokens


def split_top_level(text: str, strip: bool = True) -> List[str]:
    """
    Split `text` on commas that sit outside every bracket family.

    Closers only decrement a depth counter that is currently positive, so
    stray closers never push the depth negative. Empty and elision segments
    are kept; callers decide whether to drop them.
    """
    depth = {family: 0 for family in DelimiterFamily}
    segments: List[str] = []
    current: List[str] = []

    for token in scan(text):
        if token.type is TokenType.COMMA and not any(depth.values()):
            segments.append("".join(current))
            current = []
            continue
        if token.type is TokenType.OPEN:
            depth[token.family] += 1
        elif token.type is TokenType.CLOSE and depth[token.family] > 0:
            depth[token.family] -= 1
        current.append(token.value)

    segments.append("".join(current))
    if strip:
        return [segment.strip() for segment in segments]
    return segments


def strip_ansi(text: str) -> str:
    return "".join(token.value for token in scan(text) if token.type is not TokenType.ESCAPE)


def extract_style_wrapper(text: str) -> StyleWrapper:
    tokens = scan(text)
    head = 0
    while head < len(tokens) and tokens[head].type is TokenType.ESCAPE:
        head += 1
    tail = len(tokens)
    while tail > head and tokens[tail - 1].type is TokenType.ESCAPE:
        tail -= 1

    prefix = "".join(token.value for token in tokens[:head])
    suffix = "".join(token.value for token in tokens[tail:])
    content = text[len(prefix):len(text) - len(suffix)]
    return StyleWrapper(prefix=prefix, content=content, suffix=suffix)


def reattach_style(lines: List[str], wrapper: StyleWrapper) -> List[str]:
    if not lines:
        return [wrapper.prefix + wrapper.suffix]
    if len(lines) == 1:
        return [wrapper.prefix + lines[0] + wrapper.suffix]
    return [wrapper.prefix + lines[0]] + lines[1:-1] + [lines[-1] + wrapper.suffix]


def find_matching_close(text: str, open_index: int) -> Optional[int]:
    """Index of the closer matching the opener at `open_index`, within its own family."""
    family = None
    depth = 0
    for token in scan(text):
        if family is None:
            if token.start == open_index and token.type is TokenType.OPEN:
                family = token.family
                depth = 1
            continue
        if token.family is not family:
            continue
        if token.type is TokenType.OPEN:
            depth += 1
        elif token.type is TokenType.CLOSE:
            depth -= 1
            if depth == 0:
                return token.start
    return None


def unmatched_closers(text: str) -> List[str]:
    """Closers (innermost first) needed to balance the (), [] and {} opened in `text`."""
    stack: List[str] = []
    for token in scan(text):
        if token.family is DelimiterFamily.BIT or token.family is None:
            continue
        if token.type is TokenType.OPEN:
            stack.append(token.value)
        elif stack and CLOSING_FOR[stack[-1]] == token.value:
            stack.pop()
    return [CLOSING_FOR[opener] for opener in reversed(stack)]


def balance_line(line: str) -> str:
    return line + "".join(unmatched_closers(line))


def split_leading_whitespace(text: str):
    stripped = text.lstrip(WHITESPACE)
    return text[:len(text) - len(stripped)], stripped
