"""User-facing error messages for the API, in the product languages."""

from __future__ import annotations

from typing import Dict

MESSAGES: Dict[str, Dict[str, str]] = {
    "sv": {
        "missing_api_key": (
            "OPENAI_API_KEY är inte konfigurerad. Lägg till den i miljövariablerna "
            "(eller .env lokalt) och starta om."
        ),
        "missing_vision_key": (
            "ANTHROPIC_API_KEY är inte konfigurerad men krävs för bildanalysen."
        ),
        "missing_fields": "Fil, e-post och varumärkesdata krävs",
        "unsupported_mime": (
            "Filformatet stöds inte ({mime}). Ladda upp en PNG-, JPEG-, GIF- "
            "eller WEBP-bild. Vid video extraheras en bildruta i webbläsaren."
        ),
        "invalid_brand_data": "Ogiltig varumärkesdata: {detail}",
        "invalid_styles": "Ogiltiga stilar: {detail}",
        "invalid_output_type": "Ogiltig utdatatyp: {value}",
        "invalid_aspect_ratio": "Ogiltigt format: {value}",
        "file_too_large": "Filen är för stor (max {max_mb} MB)",
        "generation_failed": "Kunde inte generera material: {detail}",
    },
    "en": {
        "missing_api_key": (
            "OPENAI_API_KEY is not configured. Add it to the environment "
            "(or .env for local dev) and restart."
        ),
        "missing_vision_key": (
            "ANTHROPIC_API_KEY is not configured but is required for image analysis."
        ),
        "missing_fields": "File, email and brand data are required",
        "unsupported_mime": (
            "Unsupported upload format ({mime}). Please upload a PNG, JPEG, GIF, "
            "or WEBP image. For video, a frame is extracted in the browser."
        ),
        "invalid_brand_data": "Invalid brand data: {detail}",
        "invalid_styles": "Invalid styles: {detail}",
        "invalid_output_type": "Invalid output type: {value}",
        "invalid_aspect_ratio": "Invalid aspect ratio: {value}",
        "file_too_large": "File is too large (max {max_mb} MB)",
        "generation_failed": "Could not generate material: {detail}",
    },
}


def message(key: str, language: str = "sv", **params: object) -> str:
    table = MESSAGES.get(language, MESSAGES["sv"])
    return table[key].format(**params)
