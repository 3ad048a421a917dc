from dataclasses import dataclass
from enum import Enum
from typing import Optional


class DiffKind(Enum):
    DELETION = "deletion"
    INSERTION = "insertion"


class LiteralShape(Enum):
    """Structural classification of a literal text."""
    MAP_LITERAL = "map_literal"
    CALL_SIGNATURE = "call_signature"
    PARENTHESIZED = "parenthesized"
    PLAIN = "plain"


@dataclass(frozen=True)
class DiffLine:
    """One delta line; `text` is the (possibly styled) content without marker."""
    kind: DiffKind
    text: str


@dataclass(frozen=True)
class Entry:
    """A single `key => value` pair parsed from a map literal."""
    key: str
    value: str


@dataclass(frozen=True)
class StyleWrapper:
    """Leading/trailing escape runs captured around structural content."""
    prefix: str
    content: str
    suffix: str


@dataclass(frozen=True)
class ClassifiedLiteral:
    shape: LiteralShape
    text: str
    inner: Optional[str] = None
    args: Optional[str] = None
    return_type: Optional[str] = None


@dataclass
class DiffSegment:
    """
    Result of splitting an expected/actual pair around their differing middle.

    `prefix + expected_diff + expected_suffix` always rebuilds the expected
    text, and likewise for actual.
    """
    prefix: str
    expected_diff: str
    actual_diff: str
    expected_suffix: str
    actual_suffix: str
    highlighted_expected_diff: str
    highlighted_actual_diff: str
    original_expected: str
    original_actual: str

    @property
    def expected_line(self) -> str:
        return self.prefix + self.highlighted_expected_diff + self.expected_suffix

    @property
    def actual_line(self) -> str:
        return self.prefix + self.highlighted_actual_diff + self.actual_suffix
