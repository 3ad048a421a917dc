import pytest
from click.testing import CliRunner

from core.tokenizer import strip_ansi


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def balanced():
    """Checker for bracket balance of a display line, ignoring styling."""
    return _is_balanced


def _is_balanced(line: str) -> bool:
    pairs = {")": "(", "]": "[", "}": "{"}
    stack = []
    for char in strip_ansi(line):
        if char in "([{":
            stack.append(char)
        elif char in pairs:
            if not stack or stack[-1] != pairs[char]:
                return False
            stack.pop()
    return not stack
