"""Creative Studio — Flask web application."""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from flask import Blueprint, Flask, current_app, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import RequestEntityTooLarge

load_dotenv()

import log_setup
log_setup.configure(os.environ.get("LOG_LEVEL", "INFO"))

import config
import costs
import creative_core
import styles
from messages import message

log = logging.getLogger(__name__)

EXTENSION_KEY = "creative_studio"
REQUIRED_STYLE_COUNT = 2  # enforced by the wizard, advertised via /api/options

bp = Blueprint("creative", __name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _state() -> Dict[str, Any]:
    return current_app.extensions[EXTENSION_KEY]


def _error(key: str, status: int, **params: Any):
    settings: config.Settings = _state()["settings"]
    return jsonify({"error": message(key, settings.language, **params)}), status


def _load_json(raw: str) -> Any:
    """Decode a JSON form field.  Raises ValueError on any malformed input."""
    try:
        return json.loads(raw)
    except RecursionError:
        raise ValueError("JSON is nested too deeply")


def _parse_styles(raw: Optional[str]) -> List[str]:
    """Parse the ``styles`` form field.  Raises ValueError on bad input."""
    if not raw:
        return list(styles.DEFAULT_STYLES)
    value = _load_json(raw)
    if not isinstance(value, list) or not value:
        raise ValueError("expected a non-empty JSON array")
    if not all(isinstance(k, str) for k in value):
        raise ValueError("style keys must be strings")
    unknown = [k for k in value if k not in styles.STYLES]
    if unknown:
        raise ValueError(f"unknown style(s) {', '.join(unknown)}")
    if len(set(value)) != len(value):
        raise ValueError("duplicate style keys")
    return value


# ---------------------------------------------------------------------------
# Routes — Catalogue
# ---------------------------------------------------------------------------

@bp.get("/api/options")
def api_options():
    return jsonify({
        "styles": [
            {"id": s.key, "name": s.name, "description": s.description}
            for s in styles.STYLES.values()
        ],
        "moods": [
            {"id": key, "description": phrase}
            for key, phrase in styles.MOOD_DESCRIPTIONS.items()
        ],
        "aspect_ratios": [
            {"id": key, "size": size} for key, size in creative_core.IMAGE_SIZES.items()
        ],
        "output_types": list(creative_core.OUTPUT_TYPES),
        "default_styles": styles.DEFAULT_STYLES,
        "required_style_count": REQUIRED_STYLE_COUNT,
    })


# ---------------------------------------------------------------------------
# Routes — Generation
# ---------------------------------------------------------------------------

@bp.post("/api/generate")
def api_generate():
    state = _state()
    settings: config.Settings = state["settings"]

    if not settings.openai_configured:
        log.error("Generate refused: OPENAI_API_KEY is not configured")
        return _error("missing_api_key", 500)
    if not settings.vision_configured:
        log.error("Generate refused: %s vision key is not configured", settings.vision_provider)
        return _error("missing_vision_key", 500)

    upload = request.files.get("file")
    email = (request.form.get("email") or "").strip()
    brand_raw = request.form.get("brandData")
    if upload is None or not upload.filename or not email or not brand_raw:
        log.info(
            "Rejected request: missing field(s) file=%s email=%s brandData=%s",
            bool(upload and upload.filename), bool(email), bool(brand_raw),
        )
        return _error("missing_fields", 400)

    mime = upload.mimetype or ""
    if not creative_core.is_supported_image_mime(mime):
        log.info("Rejected upload %r with MIME %r", upload.filename, mime)
        return _error("unsupported_mime", 400, mime=mime or "unknown")

    try:
        brand = creative_core.BrandContext.from_dict(_load_json(brand_raw))
    except ValueError as exc:
        log.info("Rejected brandData: %s", exc)
        return _error("invalid_brand_data", 400, detail=str(exc))

    try:
        style_keys = _parse_styles(request.form.get("styles"))
    except ValueError as exc:
        log.info("Rejected styles %r: %s", request.form.get("styles", "")[:200], exc)
        return _error("invalid_styles", 400, detail=str(exc))

    output_type = request.form.get("outputType") or "image"
    if output_type not in creative_core.OUTPUT_TYPES:
        log.info("Rejected outputType %r", output_type)
        return _error("invalid_output_type", 400, value=output_type)

    aspect_ratio = request.form.get("aspectRatio") or creative_core.DEFAULT_ASPECT_RATIO
    if aspect_ratio not in creative_core.IMAGE_SIZES:
        log.info("Rejected aspectRatio %r", aspect_ratio)
        return _error("invalid_aspect_ratio", 400, value=aspect_ratio)

    image_bytes = upload.read()
    log.info(
        "Generate: file=%r size=%d mime=%s brand=%r mood=%s styles=%s output=%s aspect=%s",
        upload.filename, len(image_bytes), mime, brand.brand_name, brand.mood,
        style_keys, output_type, aspect_ratio,
    )
    # Collected by the wizard; results are not delivered by email
    log.debug("Contact email on request: %s", email)

    tracker = costs.CostTracker()
    pipeline = creative_core.CreativePipeline(
        settings,
        state["openai_client"],
        state["anthropic_client"],
        cost_tracker=tracker,
    )
    try:
        result = pipeline.run(
            image_bytes,
            mime,
            brand,
            output_type=output_type,
            aspect_ratio=aspect_ratio,
            style_keys=style_keys,
        )
    except Exception as exc:
        log.error(
            "Generate failed: file=%r size=%d brand=%r styles=%s  error=%s",
            upload.filename, len(image_bytes), brand.brand_name, style_keys, exc,
            exc_info=True,
        )
        return _error("generation_failed", 500, detail=str(exc))

    summary = tracker.summary()
    log.info(
        "Generate complete: brand=%r  %d variants  cost=~$%.4f  %.1fs",
        brand.brand_name, len(result["results"]), summary["total"], result["duration"],
    )
    return jsonify({"results": [v.to_dict() for v in result["results"]]})


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------

def create_app(
    settings: Optional[config.Settings] = None,
    openai_client: Optional[Any] = None,
    anthropic_client: Optional[Any] = None,
) -> Flask:
    settings = settings or config.load_settings()

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = settings.max_upload_mb * 1024 * 1024
    CORS(app)

    app.extensions[EXTENSION_KEY] = {
        "settings": settings,
        "openai_client": openai_client or creative_core.build_openai_client(settings),
        "anthropic_client": anthropic_client or creative_core.build_anthropic_client(settings),
    }
    app.register_blueprint(bp)

    @app.errorhandler(RequestEntityTooLarge)
    def too_large(_exc):
        return _error("file_too_large", 413, max_mb=settings.max_upload_mb)

    log.info(
        "App ready: vision=%s/%s  image=%s  language=%s",
        settings.vision_provider, settings.vision_model,
        settings.image_model, settings.language,
    )
    return app


app = create_app()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    port = app.extensions[EXTENSION_KEY]["settings"].port
    print(f"\n  Creative Studio → http://localhost:{port}\n")
    app.run(host="0.0.0.0", port=port, debug=False, threaded=True)
