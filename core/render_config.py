import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.exceptions import RenderConfigError
from core.styling import is_known_color

logger = logging.getLogger(__name__)

MARKER_WIDTH = 3


class RenderConfig(BaseModel):
    """Presentation settings shared by the differ, pretty-printer and term formatter."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    color: bool = Field(False, description="Emit ANSI styling by default")
    indent_width: int = Field(2, ge=1, description="Spaces per nesting level in multi-line output")
    deletion_marker: str = Field("-  ", description="Marker in front of deleted lines")
    insertion_marker: str = Field("+  ", description="Marker in front of inserted lines")
    deletion_color: str = Field("red", description="Colour of deleted lines")
    insertion_color: str = Field("green", description="Colour of inserted lines")
    highlight_color: str = Field("yellow", description="Colour of the differing segment")
    max_depth: int = Field(100, ge=1, description="Deepest nesting expanded or diffed structurally")
    space_byte_commas: bool = Field(True, description="Space out remaining numeric byte lists")
    pretty_helper: Optional[str] = Field(
        None, description="Optional 'module:function' used to pre-format term text"
    )

    @field_validator("deletion_marker", "insertion_marker")
    @classmethod
    def validate_marker(cls, v):
        if len(v) != MARKER_WIDTH:
            raise ValueError(f"Diff markers must be exactly {MARKER_WIDTH} characters, got {v!r}")
        return v

    @field_validator("deletion_color", "insertion_color", "highlight_color")
    @classmethod
    def validate_color(cls, v):
        if not is_known_color(v):
            raise ValueError(f"Unknown colour name: {v}")
        return v.lower()

    @field_validator("pretty_helper")
    @classmethod
    def validate_pretty_helper(cls, v):
        if v is None:
            return v
        module_name, separator, function_name = v.partition(":")
        if not separator or not module_name or not function_name:
            raise ValueError(f"pretty_helper must look like 'module:function', got {v!r}")
        return v

    @property
    def indent(self) -> str:
        return " " * self.indent_width


DEFAULT_CONFIG = RenderConfig()


def load_render_config_from_dict(data: Optional[Dict[str, Any]], source: Optional[Union[str, Path]] = None) -> RenderConfig:
    source_str = str(source) if source else "dictionary"

    if data is None:
        return RenderConfig()
    if not isinstance(data, dict):
        raise RenderConfigError("Render configuration must be a mapping", source_str)

    try:
        return RenderConfig.model_validate(data)
    except ValidationError as e:
        raise RenderConfigError("Render configuration validation failed", source_str, e)


def load_render_config(file_path: Union[str, Path]) -> RenderConfig:
    file_path = Path(file_path)
    if not file_path.exists():
        raise RenderConfigError("Render configuration file not found", str(file_path))

    try:
        with file_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise RenderConfigError("Failed to parse YAML", str(file_path), e)

    config = load_render_config_from_dict(data, file_path)
    logger.debug(f"Loaded render configuration from {file_path}")
    return config
