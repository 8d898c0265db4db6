from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Loads from process env (PROMO_KIT_*), and also from a local .env file for convenience.
    model_config = SettingsConfigDict(
        env_prefix="PROMO_KIT_",
        extra="ignore",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Logging
    log_level: str = "INFO"
    log_dir: str | None = None

    # Palette extraction
    palette_default_k: int = 5
    # Upper bound for k accepted over HTTP; in-process callers are not capped.
    palette_max_k: int = 64
    palette_max_images: int = 6
    palette_sample_size: tuple[int, int] = (80, 80)
    palette_iterations: int = 8

    # Image fetching
    image_fetch_timeout_s: float = 10.0
    image_fetch_user_agent: str = "promo-kit/0.1 (+palette extractor)"
    image_max_bytes: int = 15 * 1024 * 1024


settings = Settings()
