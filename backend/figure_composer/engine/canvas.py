"""Canvas settings: background, auto-crop flag, display frame and export resolution."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from PIL import ImageColor

from figure_composer.exceptions import ValidationError

if TYPE_CHECKING:
    from figure_composer.config import Settings

# Supersampled surface budget (factor² × export pixels), one RGBA buffer.
MAX_SUPERSAMPLE_PIXELS = 16384 * 16384
# Cairo image surfaces cannot exceed this on either side.
MAX_SURFACE_SIDE = 32767

# CSS rgba() with a 0-1 alpha; Pillow reads the alpha as 0-255 only.
_CSS_RGBA = re.compile(
    r"rgba\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(0|1|0?\.\d+|1\.0*)\s*\)", re.IGNORECASE
)


@dataclass(frozen=True)
class CanvasSettings:
    background: str = "#ffffff"
    auto_crop: bool = True

    # On-screen frame, device-independent units
    width: float = 480.0
    height: float = 480.0
    # Extra room above the nominal frame when auto-crop is off
    viewport_margin: float = 200.0
    min_viewport_width: float = 200.0
    min_viewport_height: float = 200.0

    # Export
    export_width: int = 800
    export_height: int = 800
    supersample_factor: int = 16
    max_supersample_pixels: int = MAX_SUPERSAMPLE_PIXELS

    def __post_init__(self) -> None:
        object.__setattr__(self, "background", validate_color(self.background))
        if self.export_width <= 0 or self.export_height <= 0:
            raise ValidationError(
                f"Export size must be positive, got {self.export_width}x{self.export_height}"
            )
        if self.supersample_factor < 1:
            raise ValidationError(
                f"Supersample factor must be >= 1, got {self.supersample_factor}"
            )
        surface_width, surface_height = self.supersample_size
        if (
            max(surface_width, surface_height) > MAX_SURFACE_SIDE
            or surface_width * surface_height > self.max_supersample_pixels
        ):
            raise ValidationError(
                f"Supersampled surface {surface_width}x{surface_height} exceeds the "
                f"raster budget of {self.max_supersample_pixels} pixels"
            )

    @property
    def supersample_size(self) -> tuple[int, int]:
        return (
            self.export_width * self.supersample_factor,
            self.export_height * self.supersample_factor,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> CanvasSettings:
        return cls(
            background=settings.default_background,
            width=settings.canvas_width,
            height=settings.canvas_height,
            viewport_margin=settings.viewport_margin,
            min_viewport_width=settings.min_viewport_width,
            min_viewport_height=settings.min_viewport_height,
            export_width=settings.export_width,
            export_height=settings.export_height,
            supersample_factor=settings.supersample_factor,
            max_supersample_pixels=settings.max_supersample_pixels,
        )

    def updated(self, **changes: object) -> CanvasSettings:
        return replace(self, **changes)


def validate_color(value: str) -> str:
    """Parse a CSS colour and return it in a form the rasterizer paints.

    Pillow understands more notations (``hsl()``, ``#rrggbbaa``, ...) than
    CairoSVG, which silently paints unknown ones black. The parsed value is
    therefore re-spelled as ``#rrggbb``, or ``rgba(r, g, b, a)`` when it is
    translucent.

    Raises:
        ValidationError: If ``value`` is not a CSS colour.
    """
    if not isinstance(value, str) or value.strip().lower().startswith(("hsv", "hsb")):
        # Pillow extensions, not CSS
        raise ValidationError(f"Invalid background colour {value!r}")
    css_rgba = _CSS_RGBA.fullmatch(value.strip())
    if css_rgba:
        red, green, blue = (int(c) for c in css_rgba.groups()[:3])
        if max(red, green, blue) > 255:
            raise ValidationError(f"Invalid background colour {value!r}")
        return _spell(red, green, blue, float(css_rgba.group(4)))
    try:
        rgb = ImageColor.getrgb(value.strip())
    except (ValueError, TypeError, AttributeError) as e:
        raise ValidationError(f"Invalid background colour {value!r}") from e

    alpha = rgb[3] if len(rgb) == 4 else 255
    return _spell(*rgb[:3], alpha / 255)


def _spell(red: int, green: int, blue: int, opacity: float) -> str:
    opacity = round(opacity, 3)
    if opacity >= 1:
        return f"#{red:02x}{green:02x}{blue:02x}"
    return f"rgba({red}, {green}, {blue}, {opacity:g})"
