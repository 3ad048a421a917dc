from typing import Optional

from colorama import Fore, Style

RESET = Style.RESET_ALL


def is_known_color(color: str) -> bool:
    return isinstance(getattr(Fore, color.upper(), None), str)


def get_color_code(color: str) -> str:
    """Resolve a colour name (`red`, `lightblue_ex`, ...) to its colorama code."""
    return getattr(Fore, color.upper())


def colorize(text: str, color: Optional[str], enabled: bool) -> str:
    """
    Wrap `text` in `color` when `enabled`.

    The colour is re-applied after every embedded reset so that an inner
    highlight does not cancel the outer tint for the rest of the line.
    """
    if not enabled or color is None:
        return text

    color_code = get_color_code(color)
    tinted = text.replace(RESET, RESET + color_code)
    return f"{color_code}{tinted}{RESET}"
