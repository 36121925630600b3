"""Layout and editor settings."""

import json
import logging
import os
from dataclasses import dataclass, asdict, fields
from typing import Optional


logger = logging.getLogger(__name__)

LAYOUT_ENV_VAR = "MINDTREE_LAYOUT"


def _known_fields(cls, data: dict) -> dict:
    """Keep known fields whose values convert to the field's type.

    Unknown keys are dropped for schema evolution; a value that can't be
    converted falls back to the field default.
    """
    values = {}
    for f in fields(cls):
        if f.name not in data:
            continue
        value = data[f.name]
        kind = type(f.default)
        # bool is an int subclass, and strings would parse as numbers
        if isinstance(value, bool) or isinstance(value, str) != (kind is str):
            logger.warning("Ignoring %s.%s=%r, expected %s", cls.__name__, f.name, value, kind.__name__)
            continue
        try:
            values[f.name] = kind(value)
        except (TypeError, ValueError):
            logger.warning("Ignoring %s.%s=%r, expected %s", cls.__name__, f.name, value, kind.__name__)
    return values


@dataclass(frozen=True)
class LayoutSettings:
    """Geometry constants for layout and hit-testing."""
    min_width: float = 50.0
    max_width: float = 400.0
    min_height: float = 40.0
    horizontal_gap: float = 60.0
    vertical_spacing: float = 20.0
    hit_padding: float = 8.0
    drop_before_ratio: float = 0.3
    drop_after_ratio: float = 0.7

    def to_json(self) -> str:
        return json.dumps(asdict(self))

    @classmethod
    def from_json(cls, data: Optional[str]) -> "LayoutSettings":
        if not data:
            return cls()
        try:
            return cls(**_known_fields(cls, json.loads(data)))
        except (json.JSONDecodeError, TypeError, AttributeError):
            logger.warning("Ignoring malformed layout settings: %r", data)
            return cls()

    @classmethod
    def from_env(cls) -> "LayoutSettings":
        """Read overrides from the MINDTREE_LAYOUT environment variable."""
        return cls.from_json(os.environ.get(LAYOUT_ENV_VAR))


@dataclass(frozen=True)
class EditorSettings:
    """Settings for an editing session."""
    max_undo: int = 100
    max_redo: int = 100
    placeholder_text: str = "New Idea"

    def to_json(self) -> str:
        return json.dumps(asdict(self))

    @classmethod
    def from_json(cls, data: Optional[str]) -> "EditorSettings":
        if not data:
            return cls()
        try:
            return cls(**_known_fields(cls, json.loads(data)))
        except (json.JSONDecodeError, TypeError, AttributeError):
            logger.warning("Ignoring malformed editor settings: %r", data)
            return cls()
