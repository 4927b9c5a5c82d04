"""Per-request cost tracking.

Vision-call costs are calculated from token counts.  Image costs use the
published flat per-image rate for the model, size and quality.
Nothing is written to disk; the app logs the summary of each request.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, List

log = logging.getLogger(__name__)

# ── Pricing tables ────────────────────────────────────────────────────────────
# (input $/1M tokens, output $/1M tokens)
_OPENAI_PRICING: Dict[str, tuple] = {
    "gpt-4.1-mini":   (0.40,  1.60),
    "gpt-4.1":        (2.00,  8.00),
    "gpt-4o-mini":    (0.15,  0.60),
    "gpt-4o":         (2.50, 10.00),
    "gpt-4-turbo":    (10.00, 30.00),
}
_OPENAI_DEFAULT = (2.50, 10.00)

_ANTHROPIC_PRICING: Dict[str, tuple] = {
    "claude-opus-4":    (15.00, 75.00),
    "claude-sonnet-4":  (3.00,  15.00),
    "claude-haiku-4":   (0.80,   4.00),
    "claude-3-5-sonnet":(3.00,  15.00),
}
_ANTHROPIC_DEFAULT = (3.00, 15.00)

# (model, quality) -> {size: $/image}
_IMAGE_PRICING: Dict[tuple, Dict[str, float]] = {
    ("dall-e-3", "standard"): {"1024x1024": 0.040, "1792x1024": 0.080, "1024x1792": 0.080},
    ("dall-e-3", "hd"):       {"1024x1024": 0.080, "1792x1024": 0.120, "1024x1792": 0.120},
}
_IMAGE_DEFAULT = 0.120


def _token_rate(provider: str, model: str) -> tuple:
    table, default = (
        (_ANTHROPIC_PRICING, _ANTHROPIC_DEFAULT)
        if provider == "anthropic"
        else (_OPENAI_PRICING, _OPENAI_DEFAULT)
    )
    # Longest prefix first so "gpt-4o-mini" doesn't match "gpt-4o"
    for prefix in sorted(table, key=len, reverse=True):
        if model.startswith(prefix):
            return table[prefix]
    log.debug("No %s pricing match for '%s', using default", provider, model)
    return default


def _image_rate(model: str, size: str, quality: str) -> float:
    rate = _IMAGE_PRICING.get((model, quality), {}).get(size)
    if rate is None:
        log.debug("No image pricing for %s/%s/%s, using default", model, quality, size)
        return _IMAGE_DEFAULT
    return rate


class CostTracker:
    """Accumulates cost records for a single request.  Safe across threads."""

    def __init__(self) -> None:
        self.items: List[Dict] = []
        self._lock = threading.Lock()

    def record_llm(
        self,
        stage: str,
        model: str,
        provider: str,
        input_tokens: int,
        output_tokens: int,
    ) -> float:
        in_rate, out_rate = _token_rate(provider, model)
        cost = (input_tokens * in_rate + output_tokens * out_rate) / 1_000_000
        with self._lock:
            self.items.append(
                {
                    "type": "llm",
                    "stage": stage,
                    "provider": provider,
                    "model": model,
                    "input_tokens": input_tokens,
                    "output_tokens": output_tokens,
                    "cost": cost,
                }
            )
        log.debug(
            "LLM cost [%s] %s/%s  %d in / %d out tokens  $%.6f",
            stage, provider, model, input_tokens, output_tokens, cost,
        )
        return cost

    def record_image(self, stage: str, model: str, size: str, quality: str) -> float:
        cost = _image_rate(model, size, quality)
        with self._lock:
            self.items.append(
                {
                    "type": "image",
                    "stage": stage,
                    "provider": "openai",
                    "model": model,
                    "size": size,
                    "quality": quality,
                    "cost": cost,
                }
            )
        log.debug("Image cost [%s] %s %s/%s  $%.4f", stage, model, size, quality, cost)
        return cost

    def summary(self) -> Dict:
        with self._lock:
            items = list(self.items)
        openai_cost    = sum(i["cost"] for i in items if i["provider"] == "openai")
        anthropic_cost = sum(i["cost"] for i in items if i["provider"] == "anthropic")
        return {
            "items":          items,
            "openai_cost":    openai_cost,
            "anthropic_cost": anthropic_cost,
            "image_count":    sum(1 for i in items if i["type"] == "image"),
            "total":          openai_cost + anthropic_cost,
        }
