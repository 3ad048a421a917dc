import importlib
import importlib.util
import logging
from typing import Any, Callable, List, Optional

from core.binary_normalizer import normalize
from core.render_config import DEFAULT_CONFIG, RenderConfig
from core.structural_differ import diff_lines

logger = logging.getLogger(__name__)


def _chardata_to_text(value: List[Any]) -> str:
    parts = []
    for item in value:
        if isinstance(item, (list, tuple)):
            parts.append(_chardata_to_text(list(item)))
        elif isinstance(item, int):
            parts.append(chr(item))
        elif isinstance(item, bytes):
            parts.append(item.decode("utf-8", errors="replace"))
        else:
            parts.append(str(item))
    return "".join(parts)


def _term_to_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        try:
            return _chardata_to_text(value)
        except (ValueError, OverflowError):
            return repr(value)
    return repr(value)


def _resolve_pretty_helper(helper_path: str) -> Optional[Callable[[str], Any]]:
    module_name, _, function_name = helper_path.partition(":")
    try:
        if importlib.util.find_spec(module_name) is None:
            logger.debug(f"Pretty helper module {module_name} is not available")
            return None
    except (ImportError, ValueError) as e:
        logger.debug(f"Could not probe pretty helper module {module_name}: {e}")
        return None

    module = importlib.import_module(module_name)
    helper = getattr(module, function_name, None)
    if not callable(helper):
        logger.debug(f"Pretty helper {helper_path} is not callable")
        return None
    return helper


def _apply_pretty_helper(text: str, config: RenderConfig) -> str:
    if config.pretty_helper is None:
        return text

    try:
        helper = _resolve_pretty_helper(config.pretty_helper)
        if helper is None:
            return text
        return str(helper(text))
    except Exception as e:
        logger.debug(f"Pretty helper {config.pretty_helper} failed, using raw text: {e}")
        return text


def format_term_lines(value: Any, config: Optional[RenderConfig] = None) -> List[str]:
    """
    Render an arbitrary term as trimmed, non-empty display lines.

    Strings are taken verbatim, lists are treated as character data
    (strings and code points) and anything else goes through `repr`.
    Byte-list sub-literals are normalized into readable strings.

    Args:
        value: The term to render; None yields no lines.
        config: Rendering settings, consulted for `pretty_helper` and
            `space_byte_commas`.

    Returns:
        List of lines.
    """
    if value is None:
        return []

    config = config or DEFAULT_CONFIG
    text = _apply_pretty_helper(_term_to_text(value), config)
    text = normalize(text, space_commas=config.space_byte_commas)
    return [line for line in text.strip().split("\n") if line]


def diff_terms(expected: Any, actual: Any, color: bool = False, config: Optional[RenderConfig] = None) -> List[str]:
    config = config or DEFAULT_CONFIG
    return diff_lines(
        format_term_lines(expected, config),
        format_term_lines(actual, config),
        color,
        config,
    )
