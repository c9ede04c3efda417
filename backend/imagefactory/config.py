"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    imagefactory_env: str = "development"
    imagefactory_log_level: str = "debug"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Assets
    textures_dir: str = "Textures"
    pieces_dir: str = "pieces"
    piece_count: int = 6
    mask_extensions: list[str] = [".png", ".jpg", ".jpeg", ".webp"]

    # Canvas geometry (x, y, w, h)
    canvas_width: int = 300
    canvas_height: int = 300
    mask_rect: tuple[float, float, float, float] = (0.0, 0.0, 500.0, 500.0)
    piece_rect: tuple[float, float, float, float] | None = None  # derived from canvas size

    # Randomness
    gradient_alpha: str = "aa"
    sampler_max_attempts: int = 10_000
    mask_index_policy: str = "clamp"

    # Blob storage
    storage_endpoint: str = "https://api.nft.storage/upload"
    storage_token: str = ""
    storage_timeout_s: float = 30.0

    # Latest image written to disk ("" disables)
    output_path: str = "image.png"

    request_timeout_s: float = 60.0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    def resolved_piece_rect(self) -> tuple[float, float, float, float]:
        if self.piece_rect is not None:
            return self.piece_rect
        return (self.canvas_width / 4, self.canvas_height / 16, 150.0, 250.0)


settings = Settings()
