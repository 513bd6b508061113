"""Settings loader for the try-on service."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

FREE_LIMIT = 3


def _load_env_file(path: str = ".env") -> None:
    """Populate environment variables from a .env file if present."""

    env_path = Path(path)
    if not env_path.exists():
        return

    for line in env_path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())


@dataclass(slots=True, frozen=True)
class TryOnSettings:
    """Settings required by the bot and the generation client."""

    bot_token: str = ""
    aitunnel_api_key: str = ""
    aitunnel_base_url: str = "https://api.aitunnel.ru/v1"
    image_model: str = "gemini-2.5-flash-image"
    image_size: str = "1024x1536"
    image_quality: str = "high"
    request_timeout: float = 60.0
    free_attempts: int = FREE_LIMIT
    log_level: str = "INFO"


def _build_settings() -> TryOnSettings:
    _load_env_file()
    return TryOnSettings(
        bot_token=os.getenv("TELEGRAM_BOT_TOKEN", ""),
        aitunnel_api_key=os.getenv("AITUNNEL_API_KEY", ""),
        aitunnel_base_url=os.getenv("AITUNNEL_BASE_URL", "https://api.aitunnel.ru/v1"),
        image_model=os.getenv("TRYON_IMAGE_MODEL", os.getenv("AITUNNEL_IMAGE_MODEL", "gemini-2.5-flash-image")),
        image_size=os.getenv("TRYON_IMAGE_SIZE", "1024x1536"),
        image_quality=os.getenv("TRYON_IMAGE_QUALITY", "high"),
        request_timeout=float(os.getenv("TRYON_REQUEST_TIMEOUT", "60")),
        free_attempts=int(os.getenv("TRYON_FREE_ATTEMPTS", str(FREE_LIMIT))),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )


@lru_cache(maxsize=1)
def get_settings() -> TryOnSettings:
    """Return cached settings instance."""

    return _build_settings()
