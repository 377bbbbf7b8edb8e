"""SVG to supersampled surface to pixel-exact output.

Pixel-art figures lose their hard pixel boundaries under any smoothing, so
the document is rendered with crisp edges at ``factor ×`` the target size and
then reduced with nearest-neighbour sampling only.
"""

from __future__ import annotations

import base64
import io
import logging

from cairosvg.parser import Tree
from cairosvg.surface import PNGSurface
from PIL import Image

logger = logging.getLogger(__name__)

# Cairo ARGB32 is native-endian, premultiplied: B, G, R, A in memory on
# little-endian hosts.
_CAIRO_RAWMODE = "BGRa"


def render_supersampled(
    svg_text: str,
    width: int,
    height: int,
    factor: int,
    background: str,
) -> Image.Image:
    """Render ``svg_text`` at ``factor × (width, height)`` onto a filled background.

    CairoSVG paints ``background_color`` before drawing the document, so
    transparent regions resolve to the chosen colour. The cairo buffer is
    read directly; the surface never goes through a PNG encode and decode,
    so Pillow's decompression-bomb limit does not apply to it.
    """
    raw = svg_text.encode("utf-8") if isinstance(svg_text, str) else svg_text
    surface = PNGSurface(
        Tree(bytestring=raw),
        None,
        96,
        output_width=width * factor,
        output_height=height * factor,
        background_color=background,
    )
    try:
        target = surface.cairo
        target.flush()
        # Decoding copies the pixels out, so the surface can be released.
        image = Image.frombytes(
            "RGBA",
            (surface.width, surface.height),
            target.get_data(),
            "raw",
            _CAIRO_RAWMODE,
            target.get_stride(),
        )
    finally:
        surface.finish()
    logger.debug("Rendered supersampled surface %dx%d", *image.size)
    return image


def downsample_nearest(surface: Image.Image, width: int, height: int) -> Image.Image:
    """Reduce to the output size with nearest-neighbour sampling (no smoothing)."""
    if surface.size == (width, height):
        return surface.copy()
    return surface.resize((width, height), Image.Resampling.NEAREST)


def encode_png(image: Image.Image) -> bytes:
    """Encode deterministically: same pixels, same bytes (no metadata chunks)."""
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


def png_data_url(png_bytes: bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(png_bytes).decode("ascii")
