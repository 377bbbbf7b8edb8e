"""Write a composed scene out as one self-contained SVG document."""

from __future__ import annotations

import re
from xml.sax.saxutils import quoteattr

from figure_composer.engine.compositor import Scene
from figure_composer.engine.viewport import Viewport
from figure_composer.svg.sanitizer import SVG_NS, XLINK_NS

NEAREST_IMAGE_RENDERING = "optimizeSpeed"

_IMAGE_RENDERING_ATTR = re.compile(r"\bimage-rendering\s*=\s*('[^']*'|\"[^\"]*\")")
_IMAGE_RENDERING_DECL = re.compile(r"\bimage-rendering\s*:\s*[^;\"'}]*")


def serialize_scene(
    scene: Scene,
    width: int,
    height: int,
    pixel_art: bool = False,
) -> str:
    """Generate the composition document.

    ``pixel_art`` is for the raster pass only. It adds crisp-edge and
    nearest-neighbour image hints to the root and forces every image hint
    inside the figures to nearest-neighbour, since a figure's own value
    would win over the inherited one.
    """
    vp = scene.viewport
    root_attrs = {
        "xmlns": SVG_NS,
        "xmlns:xlink": XLINK_NS,
        "width": str(width),
        "height": str(height),
        "viewBox": vp.to_viewbox(),
    }
    if pixel_art:
        root_attrs["shape-rendering"] = "crispEdges"
        # The renderer maps only optimizeSpeed to nearest-neighbour filtering
        root_attrs["image-rendering"] = NEAREST_IMAGE_RENDERING

    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f"<svg {_attrs(root_attrs)}>",
        # A path rather than a <rect>: figure stylesheets may carry bare `rect {...}` rules.
        f"  <path {_attrs({'id': 'background', 'fill': scene.background, 'd': _frame_path(vp, width, height)})} />",
    ]

    for layer in scene.layers:
        group_attrs = {
            "id": f"{layer.role.value}-figure",
            "data-identifier": str(layer.figure.identifier),
            "transform": layer.placement.to_transform(),
        }
        lines.append(f"  <g {_attrs(group_attrs)}>")
        markup = _nearest_images(layer.figure.markup) if pixel_art else layer.figure.markup
        lines.append(f"    {markup}")
        lines.append("  </g>")

    lines.append("</svg>")
    return "\n".join(lines)


def visible_frame(vp: Viewport, width: float, height: float) -> Viewport:
    """User-space area shown by an xMidYMid-meet viewport, letterbox included."""
    s = min(width / vp.width, height / vp.height)
    frame_w = width / s
    frame_h = height / s
    return Viewport(
        vp.min_x - (frame_w - vp.width) / 2,
        vp.min_y - (frame_h - vp.height) / 2,
        frame_w,
        frame_h,
    )


def _frame_path(vp: Viewport, width: float, height: float) -> str:
    f = visible_frame(vp, width, height)
    return f"M{_num(f.min_x)} {_num(f.min_y)}h{_num(f.width)}v{_num(f.height)}h{_num(-f.width)}z"


def _attrs(attrs: dict[str, str]) -> str:
    return " ".join(f"{k}={quoteattr(v)}" for k, v in attrs.items())


def _num(value: float) -> str:
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def _nearest_images(markup: str) -> str:
    """Rewrite ``image-rendering`` attributes and CSS declarations to nearest-neighbour."""
    markup = _IMAGE_RENDERING_ATTR.sub(f'image-rendering="{NEAREST_IMAGE_RENDERING}"', markup)
    return _IMAGE_RENDERING_DECL.sub(f"image-rendering:{NEAREST_IMAGE_RENDERING}", markup)
