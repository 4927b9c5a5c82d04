"""Shared pytest fixtures.

The OpenAI and Anthropic clients are replaced by MagicMock doubles; no test
touches the network.
"""

from __future__ import annotations

import io
import itertools
import json
import tempfile
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict

import pytest
from unittest.mock import MagicMock

import log_setup

# Before app/creative_cli import, so their configure() calls are no-ops
log_setup.configure(logs_dir=Path(tempfile.mkdtemp(prefix="creative-studio-logs-")))

import config
from creative_core import BrandContext

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32

DESCRIPTION = "A red sneaker on a white plinth, hard side light, long shadow."


# ============================================================================
# Response builders
# ============================================================================


def chat_response(content, prompt_tokens: int = 900, completion_tokens: int = 120):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(prompt_tokens=prompt_tokens, completion_tokens=completion_tokens),
    )


def image_response(url):
    return SimpleNamespace(data=[SimpleNamespace(url=url)])


# ============================================================================
# Domain fixtures
# ============================================================================


@pytest.fixture
def settings() -> config.Settings:
    return config.Settings(openai_api_key="sk-test")


@pytest.fixture
def brand() -> BrandContext:
    return BrandContext(brand_name="Acme", colors=("#112233", "#445566"), mood="bold")


@pytest.fixture
def openai_client() -> MagicMock:
    client = MagicMock()
    client.chat.completions.create.return_value = chat_response(DESCRIPTION)
    counter = itertools.count(1)
    client.images.generate.side_effect = lambda **kw: image_response(
        f"https://images.example/{next(counter)}.png"
    )
    return client


# ============================================================================
# Flask fixtures
# ============================================================================


@pytest.fixture
def make_client(openai_client):
    """Build a Flask test client for the given settings (defaults to a configured key)."""
    from app import create_app

    def _make(settings: config.Settings = None, **clients: Any):
        settings = settings or config.Settings(openai_api_key="sk-test")
        clients.setdefault("openai_client", openai_client)
        flask_app = create_app(settings, **clients)
        flask_app.config["TESTING"] = True
        return flask_app.test_client()

    return _make


@pytest.fixture
def client(make_client):
    return make_client()


def generate_form(**overrides: Any) -> Dict[str, Any]:
    """Multipart form for /api/generate; pass field=None to drop a field."""
    data: Dict[str, Any] = {
        "file": (io.BytesIO(PNG_BYTES), "product.png", "image/png"),
        "email": "anna@example.se",
        "outputType": "image",
        "aspectRatio": "landscape",
        "styles": json.dumps(["iceCube", "liquidMetal"]),
        "brandData": json.dumps(
            {"brandName": "Acme", "colors": ["#112233", "#445566"], "mood": "bold"}
        ),
    }
    for key, value in overrides.items():
        if value is None:
            data.pop(key, None)
        else:
            data[key] = value
    return data
