"""Process configuration, read once at startup and passed to the app."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

log = logging.getLogger(__name__)

VISION_PROVIDERS = ("openai", "anthropic")
LANGUAGES = ("sv", "en")

DEFAULT_VISION_MODELS = {
    "openai": "gpt-4o",
    "anthropic": "claude-sonnet-4-6",
}


@dataclass(frozen=True)
class Settings:
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    vision_provider: str = "openai"
    vision_model: str = DEFAULT_VISION_MODELS["openai"]
    image_model: str = "dall-e-3"
    language: str = "sv"
    max_upload_mb: int = 20
    log_level: str = "INFO"
    port: int = 5000

    @property
    def openai_configured(self) -> bool:
        return bool(self.openai_api_key)

    @property
    def vision_configured(self) -> bool:
        if self.vision_provider == "anthropic":
            return bool(self.anthropic_api_key)
        return self.openai_configured


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from the environment (``.env`` already loaded by the caller)."""
    env = os.environ if environ is None else environ

    provider = (env.get("VISION_PROVIDER") or "openai").strip().lower()
    if provider not in VISION_PROVIDERS:
        log.warning("Unknown VISION_PROVIDER %r, using openai", provider)
        provider = "openai"

    language = (env.get("APP_LANGUAGE") or "sv").strip().lower()
    if language not in LANGUAGES:
        log.warning("Unknown APP_LANGUAGE %r, using sv", language)
        language = "sv"

    settings = Settings(
        openai_api_key=env.get("OPENAI_API_KEY", ""),
        anthropic_api_key=env.get("ANTHROPIC_API_KEY", ""),
        vision_provider=provider,
        vision_model=env.get("VISION_MODEL") or DEFAULT_VISION_MODELS[provider],
        image_model=env.get("IMAGE_MODEL") or "dall-e-3",
        language=language,
        max_upload_mb=_int(env.get("MAX_UPLOAD_MB"), 20),
        log_level=env.get("LOG_LEVEL") or "INFO",
        port=_int(env.get("PORT"), 5000),
    )

    if not settings.openai_configured:
        log.warning(
            "OPENAI_API_KEY is not set. Add it to the environment (or .env for local dev)."
        )
    if provider == "anthropic" and not settings.anthropic_api_key:
        log.warning("VISION_PROVIDER is anthropic but ANTHROPIC_API_KEY is not set.")

    return settings


def _int(raw: Optional[str], default: int) -> int:
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        log.warning("Ignoring non-integer setting value %r", raw)
        return default
