"""Vector document and deterministic raster image of a composed scene.

Both exports work from the Scene value alone; nothing depends on a live
display. A scene that is not available yet (``None``) is a silent no-op; a
scene with a missing figure is refused.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from figure_composer.engine.canvas import CanvasSettings
from figure_composer.engine.compositor import Scene
from figure_composer.engine.placement import FigureRole
from figure_composer.exceptions import PreconditionError
from figure_composer.svg.serializer import serialize_scene
from figure_composer.utils.rasterizer import (
    downsample_nearest,
    encode_png,
    png_data_url,
    render_supersampled,
)

logger = logging.getLogger(__name__)

SVG_MEDIA_TYPE = "image/svg+xml"
PNG_MEDIA_TYPE = "image/png"


@dataclass(frozen=True)
class ExportArtifact:
    filename: str
    media_type: str
    data: bytes
    width: int
    height: int

    @property
    def data_url(self) -> str:
        if self.media_type == PNG_MEDIA_TYPE:
            return png_data_url(self.data)
        raise ValueError(f"No data URL form for {self.media_type}")


def export_filename(scene: Scene, extension: str) -> str:
    base_id = scene.identifier(FigureRole.BASE)
    accent_id = scene.identifier(FigureRole.ACCENT)
    return f"base-{base_id}-accent-{accent_id}.{extension}"


def export_svg(scene: Scene | None, canvas: CanvasSettings) -> ExportArtifact | None:
    """Serialize the scene to a standalone SVG at the canonical export size.

    Raises:
        PreconditionError: If either figure is absent.
    """
    if scene is None:
        logger.debug("SVG export skipped: no scene")
        return None
    _require_complete(scene)

    text = serialize_scene(scene, canvas.export_width, canvas.export_height)
    artifact = ExportArtifact(
        filename=export_filename(scene, "svg"),
        media_type=SVG_MEDIA_TYPE,
        data=text.encode("utf-8"),
        width=canvas.export_width,
        height=canvas.export_height,
    )
    logger.info("Exported %s (%d bytes)", artifact.filename, len(artifact.data))
    return artifact


def export_png(scene: Scene | None, canvas: CanvasSettings) -> ExportArtifact | None:
    """Rasterize the scene: supersample on the background colour, then nearest-downsample.

    Raises:
        PreconditionError: If either figure is absent.
    """
    if scene is None:
        logger.debug("PNG export skipped: no scene")
        return None
    _require_complete(scene)

    width, height = canvas.export_width, canvas.export_height
    text = serialize_scene(scene, width, height, pixel_art=True)
    surface = render_supersampled(
        text, width, height, canvas.supersample_factor, scene.background
    )
    output = downsample_nearest(surface, width, height).convert("RGB")

    artifact = ExportArtifact(
        filename=export_filename(scene, "png"),
        media_type=PNG_MEDIA_TYPE,
        data=encode_png(output),
        width=width,
        height=height,
    )
    logger.info(
        "Exported %s (%dx%d, supersample x%d, %d bytes)",
        artifact.filename,
        width,
        height,
        canvas.supersample_factor,
        len(artifact.data),
    )
    return artifact


def _require_complete(scene: Scene) -> None:
    if not scene.is_complete:
        missing = ", ".join(role.value for role in scene.missing)
        raise PreconditionError(f"Cannot export: missing {missing} figure")
