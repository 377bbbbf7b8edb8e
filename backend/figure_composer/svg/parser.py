"""SVG parser — figure payloads in, composed documents back out.

parse_figure():      raw payload from the image source → immutable Figure
parse_composition(): exported composition document → background, viewBox, placements
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from figure_composer.engine.figure import Figure
from figure_composer.engine.placement import FigureRole, Placement
from figure_composer.engine.viewport import Viewport
from figure_composer.exceptions import InvalidFigureError
from figure_composer.svg.sanitizer import (
    qualify_tree,
    sanitize_tree,
    strip_ns,
    strip_prolog,
)

logger = logging.getLogger(__name__)

_LENGTH_RE = re.compile(r"^\s*([0-9]*\.?[0-9]+(?:[eE][-+]?[0-9]+)?)\s*(px)?\s*$")
_TRANSLATE_RE = re.compile(r"translate\(\s*([-+0-9.eE]+)[\s,]+([-+0-9.eE]+)\s*\)")
_SCALE_RE = re.compile(r"scale\(\s*([-+0-9.eE]+)(?:[\s,]+([-+0-9.eE]+))?\s*\)")


def parse_figure(
    svg_text: str,
    role: FigureRole,
    identifier: int,
    default_size: float,
) -> Figure:
    """Parse and sanitize a payload into a Figure.

    Intrinsic size comes from numeric ``width``/``height`` attributes. A
    payload without them fills the host frame when nested, so the role's
    default size stands in for each missing dimension.

    Raises:
        InvalidFigureError: If the payload is not an <svg> document.
    """
    if not svg_text or not svg_text.strip():
        raise InvalidFigureError(f"Empty {role.value} payload for #{identifier}")

    try:
        root = ET.fromstring(strip_prolog(svg_text))
    except ET.ParseError as e:
        raise InvalidFigureError(f"Unparseable {role.value} payload for #{identifier}: {e}") from e

    if strip_ns(root.tag) != "svg":
        raise InvalidFigureError(
            f"{role.value} payload for #{identifier} has <{strip_ns(root.tag)}> root, expected <svg>"
        )

    qualify_tree(sanitize_tree(root))

    width = _parse_length(root.get("width")) or default_size
    height = _parse_length(root.get("height")) or default_size
    root.set("width", _fmt(width))
    root.set("height", _fmt(height))
    # Nested placement is handled by the wrapping group transform.
    for attr in ("x", "y"):
        root.attrib.pop(attr, None)

    markup = ET.tostring(root, encoding="unicode")
    logger.info("Parsed %s figure #%d: %s×%s", role.value, identifier, _fmt(width), _fmt(height))
    return Figure(role=role, identifier=identifier, markup=markup, width=width, height=height)


@dataclass
class ParsedComposition:
    """What an exported document says about the composition that produced it."""

    width: float = 0.0
    height: float = 0.0
    viewport: Viewport | None = None
    background: str | None = None
    placements: dict[FigureRole, Placement] = field(default_factory=dict)
    identifiers: dict[FigureRole, int] = field(default_factory=dict)


def parse_composition(svg_text: str) -> ParsedComposition:
    """Read back background colour, viewBox and figure transforms from an export."""
    root = ET.fromstring(strip_prolog(svg_text))
    result = ParsedComposition(
        width=_parse_length(root.get("width")) or 0.0,
        height=_parse_length(root.get("height")) or 0.0,
    )
    vb = root.get("viewBox")
    if vb:
        result.viewport = Viewport.from_viewbox(vb)

    for child in root:
        if not isinstance(child.tag, str):
            continue
        el_id = child.get("id", "")
        if el_id == "background":
            result.background = child.get("fill")
            continue
        for role in FigureRole:
            if el_id == f"{role.value}-figure":
                result.placements[role] = parse_transform(child.get("transform", ""))
                ident = child.get("data-identifier")
                if ident is not None and ident.lstrip("-").isdigit():
                    result.identifiers[role] = int(ident)
    return result


def parse_transform(value: str) -> Placement:
    """Parse ``translate(x,y) scale(s)``; missing parts default to identity."""
    x = y = 0.0
    scale = 1.0
    t = _TRANSLATE_RE.search(value)
    if t:
        x, y = float(t.group(1)), float(t.group(2))
    s = _SCALE_RE.search(value)
    if s:
        scale = float(s.group(1))
    return Placement(x=x, y=y, scale=scale)


def _parse_length(value: str | None) -> float | None:
    if value is None:
        return None
    m = _LENGTH_RE.match(value)
    if not m:
        return None
    length = float(m.group(1))
    return length if length > 0 else None


def _fmt(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:g}"
