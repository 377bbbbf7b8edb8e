"""Shared test fixtures."""

from __future__ import annotations

import base64
import io

import pytest
from PIL import Image

from figure_composer.engine.canvas import CanvasSettings
from figure_composer.engine.figure import Figure
from figure_composer.engine.placement import FigureRole
from figure_composer.svg.parser import parse_figure


# Pixel-art payloads in the shape the image source serves them.

# 480×480 scene, red block in the top-left quadrant, transparent elsewhere.
BASE_SVG = '''<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg" width="480" height="480" viewBox="0 0 16 16" shape-rendering="crispEdges">
  <rect x="0" y="0" width="8" height="8" fill="#ff0000"/>
</svg>'''

# 64×64 sprite, solid green.
ACCENT_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="64" height="64" viewBox="0 0 32 32" shape-rendering="crispEdges">
  <rect x="0" y="0" width="32" height="32" fill="#00ff00"/>
</svg>'''

# No width/height: the role's default size applies.
UNSIZED_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 10 10">
  <rect width="10" height="10" fill="#000"/>
</svg>'''

# Active content and external references that must not survive embedding.
HOSTILE_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink" width="32" height="32" x="5" y="7" onload="alert(1)">
  <!-- tracking pixel -->
  <script>alert("x")</script>
  <foreignObject width="10" height="10"><div>hi</div></foreignObject>
  <defs><rect id="px" width="1" height="1" fill="#123456"/></defs>
  <use xlink:href="#px" onclick="steal()"/>
  <image href="https://example.com/beacon.png" width="1" height="1"/>
</svg>'''

NOT_SVG = "<html><body>404</body></html>"

# Quadrant colours of TILE_PNG, left to right, top to bottom.
TILE_COLOURS = ((255, 0, 0), (0, 255, 0), (0, 0, 255), (255, 255, 0))


def _tile_png() -> bytes:
    image = Image.new("RGB", (2, 2))
    image.putdata(TILE_COLOURS)
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


TILE_PNG = _tile_png()

# 480×480 scene that is one embedded 2×2 bitmap stretched over the frame.
IMAGE_BASE_SVG = f'''<svg xmlns="http://www.w3.org/2000/svg" width="480" height="480" viewBox="0 0 480 480">
  <image x="0" y="0" width="480" height="480" preserveAspectRatio="none" href="data:image/png;base64,{base64.b64encode(TILE_PNG).decode("ascii")}"/>
</svg>'''


def make_figure(role: FigureRole, identifier: int, width: float, height: float) -> Figure:
    """Figure with placeholder markup, for geometry-only tests."""
    markup = f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" />'
    return Figure(role=role, identifier=identifier, markup=markup, width=width, height=height)


@pytest.fixture
def base_figure() -> Figure:
    return parse_figure(BASE_SVG, FigureRole.BASE, 3, 480.0)


@pytest.fixture
def accent_figure() -> Figure:
    return parse_figure(ACCENT_SVG, FigureRole.ACCENT, 42, 64.0)


@pytest.fixture
def figures(base_figure: Figure, accent_figure: Figure) -> dict[FigureRole, Figure | None]:
    return {FigureRole.BASE: base_figure, FigureRole.ACCENT: accent_figure}


@pytest.fixture
def canvas() -> CanvasSettings:
    return CanvasSettings()


@pytest.fixture
def small_canvas() -> CanvasSettings:
    """Tiny export resolution so raster tests stay fast."""
    return CanvasSettings(export_width=8, export_height=8, supersample_factor=2, background="#0000ff")
