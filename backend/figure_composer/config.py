"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    figure_composer_env: str = "development"
    figure_composer_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # On-screen canvas (device-independent units)
    canvas_width: float = 480.0
    canvas_height: float = 480.0
    viewport_margin: float = 200.0
    min_viewport_width: float = 200.0
    min_viewport_height: float = 200.0

    # Placement
    min_scale: float = 0.1
    scale_step: float = 0.1

    # Identifier ranges, inclusive. Upper bounds are the collection sizes
    # reported by the image source.
    base_id_max: int = 9999
    accent_id_max: int = 25439

    # Intrinsic size used when a payload declares no numeric width/height
    base_default_size: float = 480.0
    accent_default_size: float = 64.0

    # Quiet window before an identifier change is forwarded to the image source
    settle_delay_ms: int = 400

    # Export
    export_width: int = 800
    export_height: int = 800
    supersample_factor: int = 16
    # Upper bound on (export_width × factor) × (export_height × factor)
    max_supersample_pixels: int = 16384 * 16384
    default_background: str = "#fff"

    # Image source: <dir>/<role>/<identifier>.svg
    image_source_dir: str = ""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
