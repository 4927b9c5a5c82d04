"""Tests for the vision-model image describer."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import openai
import pytest

from costs import CostTracker
from creative_core import (
    VISION_MAX_TOKENS,
    VISION_SYSTEM_PROMPT,
    BrandContext,
    ImageDescriber,
    to_data_uri,
)
from tests.conftest import DESCRIPTION, PNG_BYTES, chat_response

DATA_URI = to_data_uri(PNG_BYTES, "image/png")


def _user_content(client):
    messages = client.chat.completions.create.call_args.kwargs["messages"]
    return messages[1]["content"]


class TestOpenAIDescriber:
    def test_returns_model_text(self, openai_client, brand):
        describer = ImageDescriber(openai_client)
        assert describer.describe(DATA_URI, brand) == DESCRIPTION
        assert openai_client.chat.completions.create.call_count == 1

    def test_request_shape(self, openai_client, brand):
        ImageDescriber(openai_client, model="gpt-4o").describe(DATA_URI, brand)
        kwargs = openai_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["max_tokens"] == VISION_MAX_TOKENS
        assert kwargs["messages"][0] == {"role": "system", "content": VISION_SYSTEM_PROMPT}

        text_part, image_part = _user_content(openai_client)
        assert '"Acme"' in text_part["text"]
        assert "strong, distinctive, daring" in text_part["text"]
        assert "#112233, #445566" in text_part["text"]
        assert image_part == {"type": "image_url", "image_url": {"url": DATA_URI}}

    def test_system_prompt_names_five_facets(self):
        for facet in (
            "1. Main subject and composition",
            "2. Key visual elements",
            "3. Colors and contrasts",
            "4. What makes this image compelling",
            "5. Core essence",
        ):
            assert facet in VISION_SYSTEM_PROMPT

    def test_unknown_mood_uses_default_phrase(self, openai_client):
        brand = BrandContext(brand_name="Acme", colors=("#000000",), mood="grumpy")
        ImageDescriber(openai_client).describe(DATA_URI, brand)
        text_part, _ = _user_content(openai_client)
        assert "The brand mood is: sophisticated and premium" in text_part["text"]

    @pytest.mark.parametrize("content", [None, ""])
    def test_empty_content_is_empty_string(self, openai_client, brand, content):
        openai_client.chat.completions.create.return_value = chat_response(content)
        assert ImageDescriber(openai_client).describe(DATA_URI, brand) == ""

    def test_no_choices_is_empty_string(self, openai_client, brand):
        openai_client.chat.completions.create.return_value = SimpleNamespace(choices=[], usage=None)
        assert ImageDescriber(openai_client).describe(DATA_URI, brand) == ""

    def test_records_token_cost(self, openai_client, brand):
        tracker = CostTracker()
        ImageDescriber(openai_client, cost_tracker=tracker).describe(DATA_URI, brand)
        (item,) = tracker.items
        assert item["provider"] == "openai"
        assert item["input_tokens"] == 900
        assert item["output_tokens"] == 120

    def test_transport_error_propagates(self, openai_client, brand):
        openai_client.chat.completions.create.side_effect = openai.APIConnectionError(
            request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        )
        with pytest.raises(openai.APIConnectionError):
            ImageDescriber(openai_client).describe(DATA_URI, brand)

    def test_invalid_key_mapped_to_runtime_error(self, openai_client, brand):
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        openai_client.chat.completions.create.side_effect = openai.AuthenticationError(
            "Incorrect API key provided",
            response=httpx.Response(401, request=request),
            body=None,
        )
        with pytest.raises(RuntimeError, match="invalid or expired"):
            ImageDescriber(openai_client).describe(DATA_URI, brand)


class TestAnthropicDescriber:
    def _client(self, text="A ceramic vase."):
        client = MagicMock()
        client.messages.create.return_value = SimpleNamespace(
            content=[SimpleNamespace(type="text", text=text)],
            usage=SimpleNamespace(input_tokens=1500, output_tokens=90),
        )
        return client

    def test_sends_base64_image_block(self, brand):
        client = self._client()
        describer = ImageDescriber(client, provider="anthropic", model="claude-sonnet-4-6")
        assert describer.describe(DATA_URI, brand) == "A ceramic vase."

        kwargs = client.messages.create.call_args.kwargs
        assert kwargs["system"] == VISION_SYSTEM_PROMPT
        assert kwargs["max_tokens"] == VISION_MAX_TOKENS
        text_part, image_part = kwargs["messages"][0]["content"]
        assert '"Acme"' in text_part["text"]
        assert image_part["source"]["type"] == "base64"
        assert image_part["source"]["media_type"] == "image/png"
        assert DATA_URI.endswith(image_part["source"]["data"])

    def test_records_anthropic_cost(self, brand):
        tracker = CostTracker()
        ImageDescriber(
            self._client(), provider="anthropic", model="claude-sonnet-4-6", cost_tracker=tracker
        ).describe(DATA_URI, brand)
        assert tracker.summary()["anthropic_cost"] > 0

    def test_missing_client(self, brand):
        with pytest.raises(RuntimeError, match="ANTHROPIC_API_KEY"):
            ImageDescriber(None, provider="anthropic").describe(DATA_URI, brand)

    def test_rejects_non_data_uri(self, brand):
        with pytest.raises(ValueError):
            ImageDescriber(self._client(), provider="anthropic").describe(
                "https://example.com/a.png", brand
            )
