"""Core creative generation pipeline. Used by both the web app and CLI.

describe image (vision model) → assemble one prompt per style → generate
one image per prompt in parallel (image model).
"""

from __future__ import annotations

import base64
import logging
import time
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from openai import AuthenticationError, BadRequestError, OpenAI, RateLimitError

import styles
from config import Settings
from costs import CostTracker

log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Limits and fixed generation parameters
# ---------------------------------------------------------------------------

SUPPORTED_IMAGE_MIMES = ("image/png", "image/jpeg", "image/gif", "image/webp")
OUTPUT_TYPES = ("image", "video")

# aspect ratio -> image size accepted by the image model
IMAGE_SIZES: Dict[str, str] = {
    "landscape": "1792x1024",
    "portrait": "1024x1792",
}
DEFAULT_ASPECT_RATIO = "landscape"

DESCRIPTION_LIMIT = 400
COLOR_LIMIT = 5
PROMPT_LIMIT = 3800

IMAGE_QUALITY = "hd"
IMAGE_STYLE = "natural"  # photorealistic rather than "vivid"
VISION_MAX_TOKENS = 500

VIDEO_HINT = (
    "This will be animated - design with subtle motion potential "
    "(floating particles, flowing liquid, etc)."
)


# ---------------------------------------------------------------------------
# Request-scoped data
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BrandContext:
    brand_name: str
    colors: Tuple[str, ...]
    mood: str

    @classmethod
    def from_dict(cls, data: Any) -> "BrandContext":
        """Build from the browser's ``brandData`` JSON.  Raises ValueError."""
        if not isinstance(data, Mapping):
            raise ValueError("brandData must be a JSON object")
        name = data.get("brandName")
        if not isinstance(name, str) or not name.strip():
            raise ValueError("brandName is required")
        colors = data.get("colors", [])
        if not isinstance(colors, list) or not all(isinstance(c, str) for c in colors):
            raise ValueError("colors must be a list of strings")
        mood = data.get("mood", "")
        if not isinstance(mood, str):
            raise ValueError("mood must be a string")
        return cls(brand_name=name.strip(), colors=tuple(colors), mood=mood)


@dataclass(frozen=True)
class GenerationPrompt:
    text: str
    style_name: str


@dataclass(frozen=True)
class GeneratedVariant:
    id: str
    image_url: str
    prompt: str
    style: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "id": self.id,
            "imageUrl": self.image_url,
            "prompt": self.prompt,
            "style": self.style,
        }


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def is_supported_image_mime(mime: str) -> bool:
    return mime in SUPPORTED_IMAGE_MIMES


def to_data_uri(data: bytes, mime: str) -> str:
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def _split_data_uri(data_uri: str) -> Tuple[str, str]:
    """Return (media_type, base64_payload) for a ``data:`` URI."""
    header, _, payload = data_uri.partition(",")
    media_type = header[len("data:"):].split(";")[0] if header.startswith("data:") else ""
    if not media_type or not payload:
        raise ValueError("Image must be a base64 data URI")
    return media_type, payload


def image_size(aspect_ratio: str) -> str:
    return IMAGE_SIZES["portrait"] if aspect_ratio == "portrait" else IMAGE_SIZES["landscape"]


def build_openai_client(settings: Settings) -> OpenAI:
    # A placeholder key lets the app start; requests are refused until a real key is set
    return OpenAI(api_key=settings.openai_api_key or "missing")


def build_anthropic_client(settings: Settings) -> Optional[Any]:
    if not settings.anthropic_api_key:
        return None
    import anthropic
    return anthropic.Anthropic(api_key=settings.anthropic_api_key)


def _openai_error(exc: Exception) -> RuntimeError:
    if isinstance(exc, AuthenticationError):
        return RuntimeError("OpenAI API key is invalid or expired.")
    if isinstance(exc, RateLimitError):
        msg = str(exc)
        if "insufficient_quota" in msg or "quota" in msg.lower():
            return RuntimeError(
                "OpenAI account is out of credits. "
                "Please add billing at platform.openai.com."
            )
        return RuntimeError(f"OpenAI rate limit: {exc}")
    if isinstance(exc, BadRequestError) and "content_policy" in str(exc):
        return RuntimeError("The image prompt was rejected by OpenAI's content policy.")
    return RuntimeError(str(exc))


# ---------------------------------------------------------------------------
# Image describer
# ---------------------------------------------------------------------------

VISION_SYSTEM_PROMPT = (
    "You are an expert in marketing and visual analysis. "
    "Analyze the image and describe in English:\n"
    "1. Main subject and composition\n"
    "2. Key visual elements and objects\n"
    "3. Colors and contrasts\n"
    "4. What makes this image compelling\n"
    "5. Core essence that should be preserved in a creative transformation\n\n"
    "Be concise but capture the essential visual elements. "
    "Focus on what can be transformed into advertising imagery."
)


def vision_user_text(brand: BrandContext) -> str:
    return (
        f'Analyze this image for the brand "{brand.brand_name}".\n'
        f"The brand mood is: {styles.mood_phrase(brand.mood)}\n"
        f"Brand colors: {', '.join(brand.colors)}\n\n"
        "Describe the visual essence that should be captured when "
        "transforming this into advertising material."
    )


class ImageDescriber:
    """Asks a vision-capable model to describe the uploaded image."""

    def __init__(
        self,
        client: Any,
        provider: str = "openai",
        model: str = "gpt-4o",
        cost_tracker: Optional[CostTracker] = None,
    ) -> None:
        self.client = client
        self.provider = provider
        self.model = model
        self.cost_tracker = cost_tracker

    def describe(self, image_data_uri: str, brand: BrandContext) -> str:
        t0 = time.time()
        if self.provider == "anthropic":
            text = self._describe_anthropic(image_data_uri, brand)
        else:
            text = self._describe_openai(image_data_uri, brand)
        log.info(
            "Vision call: provider=%s model=%s  %d chars  %.1fs",
            self.provider, self.model, len(text), time.time() - t0,
        )
        return text

    def _describe_openai(self, image_data_uri: str, brand: BrandContext) -> str:
        try:
            resp = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": VISION_SYSTEM_PROMPT},
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": vision_user_text(brand)},
                            {"type": "image_url", "image_url": {"url": image_data_uri}},
                        ],
                    },
                ],
                max_tokens=VISION_MAX_TOKENS,
            )
        except (AuthenticationError, RateLimitError, BadRequestError) as exc:
            raise _openai_error(exc)

        usage = getattr(resp, "usage", None)
        if usage is not None and self.cost_tracker:
            self.cost_tracker.record_llm(
                "describe", self.model, "openai",
                usage.prompt_tokens, usage.completion_tokens,
            )
        if not resp.choices:
            return ""
        return resp.choices[0].message.content or ""

    def _describe_anthropic(self, image_data_uri: str, brand: BrandContext) -> str:
        if self.client is None:
            raise RuntimeError("ANTHROPIC_API_KEY not set")
        import anthropic

        media_type, payload = _split_data_uri(image_data_uri)
        try:
            msg = self.client.messages.create(
                model=self.model,
                max_tokens=VISION_MAX_TOKENS,
                system=VISION_SYSTEM_PROMPT,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": vision_user_text(brand)},
                            {
                                "type": "image",
                                "source": {
                                    "type": "base64",
                                    "media_type": media_type,
                                    "data": payload,
                                },
                            },
                        ],
                    }
                ],
            )
        except anthropic.AuthenticationError:
            raise RuntimeError("Anthropic API key is invalid or expired.")
        except anthropic.RateLimitError as exc:
            raise RuntimeError(f"Anthropic rate limit: {exc}")

        if self.cost_tracker:
            self.cost_tracker.record_llm(
                "describe", self.model, "anthropic",
                msg.usage.input_tokens, msg.usage.output_tokens,
            )
        return "".join(
            block.text for block in msg.content if getattr(block, "type", "") == "text"
        )


# ---------------------------------------------------------------------------
# Prompt assembly
# ---------------------------------------------------------------------------

def assemble_prompts(
    brand: BrandContext,
    description: str,
    output_type: str,
    aspect_ratio: str,
    style_keys: Sequence[str],
) -> List[GenerationPrompt]:
    """One prompt per style key, in the order given."""
    colors = ", ".join(brand.colors[:COLOR_LIMIT])
    short = description[:DESCRIPTION_LIMIT]
    feeling = (
        f"\n\nThe overall feeling should be {styles.mood_phrase(brand.mood)}. "
        f"This is for {brand.brand_name}."
    )

    prompts = []
    for key in style_keys:
        style = styles.get_style(key)
        text = style.render(short, colors, aspect_ratio) + feeling
        if output_type == "video":
            text += "\n\n" + VIDEO_HINT
        prompts.append(GenerationPrompt(text=text, style_name=style.name))
    return prompts


# ---------------------------------------------------------------------------
# Generation fan-out
# ---------------------------------------------------------------------------

class GenerationOrchestrator:
    """Runs one image generation per prompt concurrently; first failure wins."""

    def __init__(
        self,
        client: Any,
        model: str = "dall-e-3",
        cost_tracker: Optional[CostTracker] = None,
    ) -> None:
        self.client = client
        self.model = model
        self.cost_tracker = cost_tracker

    def generate(
        self,
        prompts: Sequence[GenerationPrompt],
        aspect_ratio: str,
    ) -> List[GeneratedVariant]:
        if not prompts:
            return []
        size = image_size(aspect_ratio)

        executor = ThreadPoolExecutor(max_workers=len(prompts), thread_name_prefix="imagegen")
        try:
            futures = [
                executor.submit(self._generate_one, index, prompt, size)
                for index, prompt in enumerate(prompts, start=1)
            ]
            done, _ = wait(futures, return_when=FIRST_EXCEPTION)
            for future in futures:
                if future in done and future.exception() is not None:
                    raise future.exception()
            return [future.result() for future in futures]
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

    def _generate_one(self, index: int, prompt: GenerationPrompt, size: str) -> GeneratedVariant:
        text = prompt.text[:PROMPT_LIMIT]
        log.info("Generating image %d (%s) size=%s", index, prompt.style_name, size)
        t0 = time.time()
        try:
            resp = self.client.images.generate(
                model=self.model,
                prompt=text,
                n=1,
                size=size,
                quality=IMAGE_QUALITY,
                style=IMAGE_STYLE,
            )
        except (AuthenticationError, RateLimitError, BadRequestError) as exc:
            log.error("Image %d (%s) failed: %s", index, prompt.style_name, exc)
            raise _openai_error(exc)

        data = getattr(resp, "data", None) or []
        url = getattr(data[0], "url", None) if data else None
        if not url:
            log.error("Image %d (%s) returned no URL", index, prompt.style_name)
            raise RuntimeError("OpenAI did not return an image URL.")

        if self.cost_tracker:
            self.cost_tracker.record_image(
                f"variant-{index}", self.model, size, IMAGE_QUALITY
            )
        log.info(
            "Image %d (%s) generated in %.1fs",
            index, prompt.style_name, time.time() - t0,
        )
        return GeneratedVariant(
            id=f"variant-{index}",
            image_url=url,
            prompt=text,
            style=prompt.style_name,
        )


# ---------------------------------------------------------------------------
# Full pipeline
# ---------------------------------------------------------------------------

class CreativePipeline:
    """Describe → assemble → generate, for one request."""

    def __init__(
        self,
        settings: Settings,
        openai_client: Any,
        anthropic_client: Optional[Any] = None,
        cost_tracker: Optional[CostTracker] = None,
    ) -> None:
        self.settings = settings
        self.cost_tracker = cost_tracker
        vision_client = (
            anthropic_client if settings.vision_provider == "anthropic" else openai_client
        )
        self.describer = ImageDescriber(
            vision_client,
            provider=settings.vision_provider,
            model=settings.vision_model,
            cost_tracker=cost_tracker,
        )
        self.orchestrator = GenerationOrchestrator(
            openai_client,
            model=settings.image_model,
            cost_tracker=cost_tracker,
        )

    def run(
        self,
        image_bytes: bytes,
        mime: str,
        brand: BrandContext,
        output_type: str = "image",
        aspect_ratio: str = DEFAULT_ASPECT_RATIO,
        style_keys: Optional[Sequence[str]] = None,
    ) -> Dict:
        """Execute the pipeline.  Any failure propagates; nothing partial is returned."""
        start = time.time()
        style_keys = list(style_keys or styles.DEFAULT_STYLES)

        description = self.describer.describe(to_data_uri(image_bytes, mime), brand)
        log.debug("Image description: %s", description[:100])

        prompts = assemble_prompts(brand, description, output_type, aspect_ratio, style_keys)
        log.info("Prompts assembled for styles: %s", [p.style_name for p in prompts])

        variants = self.orchestrator.generate(prompts, aspect_ratio)

        duration = time.time() - start
        log.info(
            "Pipeline complete: brand=%r  %d variants  %.1fs",
            brand.brand_name, len(variants), duration,
        )
        return {
            "results": variants,
            "description": description,
            "image_size": image_size(aspect_ratio),
            "duration": duration,
        }
