"""Viewport resolutions and the ``WxH`` parser."""

from __future__ import annotations

import re
from typing import Iterable

from pydantic import BaseModel, ConfigDict, PositiveInt

_INTEGER = re.compile(r"^[+-]?\d+$")


class ResolutionError(ValueError):
    """Base class for resolution parsing errors."""


class InvalidResolutionFormat(ResolutionError):
    """The value is not shaped like ``WxH``."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(
            f'Invalid resolution format: "{value}". Use WxH (e.g., 1920x1080).'
        )


class InvalidResolutionDimensions(ResolutionError):
    """The value is shaped like ``WxH`` but a dimension is not a positive integer."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(
            f'Invalid resolution dimensions: "{value}". '
            "Width and height must be positive numbers."
        )


class Resolution(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: PositiveInt
    height: PositiveInt

    @property
    def label(self) -> str:
        return f"{self.width}x{self.height}"

    def as_viewport(self) -> dict[str, int]:
        return {"width": self.width, "height": self.height}

    def __str__(self) -> str:
        return self.label


def parse_resolution(value: str) -> Resolution:
    """Parse a ``WxH`` string (case-insensitive separator) into a Resolution."""
    parts = value.strip().lower().split("x")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise InvalidResolutionFormat(value)

    width_text, height_text = parts
    if not (_INTEGER.match(width_text) and _INTEGER.match(height_text)):
        raise InvalidResolutionDimensions(value)
    width, height = int(width_text), int(height_text)
    if width <= 0 or height <= 0:
        raise InvalidResolutionDimensions(value)
    return Resolution(width=width, height=height)


def dedupe_resolutions(resolutions: Iterable[Resolution]) -> list[Resolution]:
    """Drop repeated ``WxH`` entries, keeping the first occurrence of each."""
    seen: set[tuple[int, int]] = set()
    unique = []
    for res in resolutions:
        key = (res.width, res.height)
        if key in seen:
            continue
        seen.add(key)
        unique.append(res)
    return unique


DEFAULT_RESOLUTION = Resolution(width=1920, height=1080)

DEVICE_PRESETS: dict[str, list[Resolution]] = {
    "desktop": [Resolution(width=1920, height=1080)],
    "mobile": [Resolution(width=390, height=844)],
}
