#!/usr/bin/env python3
"""CLI wrapper for the creative generation pipeline.

Usage:
    python creative_cli.py --image shoe.png --brand Acme --colors "#112233,#445566" --mood bold
    python creative_cli.py --image shoe.png --brand Acme --styles neonGlow iceCube --download out/
"""

from __future__ import annotations

import argparse
import json
import mimetypes
import os
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()

import log_setup
log_setup.configure(os.environ.get("LOG_LEVEL", "WARNING"))

import requests

import config
import costs
import creative_core
import styles


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Generate DOOH creative variants from a brand image",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python creative_cli.py --image shoe.png --brand Acme --colors "#112233,#445566" --mood bold
  python creative_cli.py --image shoe.png --brand Acme --aspect-ratio portrait --output-type video
""",
    )
    parser.add_argument("--image", type=Path, help="PNG, JPEG, GIF or WEBP image to analyse")
    parser.add_argument("--brand", help="Brand name")
    parser.add_argument("--colors", default="", help="Comma-separated hex colours")
    parser.add_argument(
        "--mood",
        default="luxury",
        help=f"Brand mood ({', '.join(styles.MOOD_DESCRIPTIONS)}; default: luxury)",
    )
    parser.add_argument(
        "--styles",
        nargs="+",
        choices=styles.STYLE_KEYS,
        default=styles.DEFAULT_STYLES,
        help=f"Creative styles (default: {' '.join(styles.DEFAULT_STYLES)})",
    )
    parser.add_argument(
        "--aspect-ratio",
        choices=list(creative_core.IMAGE_SIZES),
        default=creative_core.DEFAULT_ASPECT_RATIO,
    )
    parser.add_argument("--output-type", choices=creative_core.OUTPUT_TYPES, default="image")
    parser.add_argument(
        "--vision-provider",
        choices=config.VISION_PROVIDERS,
        default=None,
        help="Override VISION_PROVIDER for this run",
    )
    parser.add_argument("--download", type=Path, default=None, help="Directory to save images into")
    parser.add_argument("--json", action="store_true", help="Print full JSON result to stdout")
    parser.add_argument("--list-styles", action="store_true", help="List styles and moods and exit")

    args = parser.parse_args(argv)

    if args.list_styles:
        _list_styles()
        return 0

    if not args.image:
        parser.error("--image is required")
    if not args.brand:
        parser.error("--brand is required")

    env = dict(os.environ)
    if args.vision_provider:
        env["VISION_PROVIDER"] = args.vision_provider
        env.pop("VISION_MODEL", None)
    settings = config.load_settings(env)

    if not settings.openai_configured:
        print("✗  OPENAI_API_KEY not set", file=sys.stderr)
        return 2
    if not settings.vision_configured:
        print("✗  ANTHROPIC_API_KEY not set (required for --vision-provider anthropic)", file=sys.stderr)
        return 2

    if not args.image.is_file():
        print(f"✗  Image not found: {args.image}", file=sys.stderr)
        return 2
    mime = mimetypes.guess_type(args.image.name)[0] or ""
    if not creative_core.is_supported_image_mime(mime):
        print(f"✗  Unsupported image format ({mime or 'unknown'})", file=sys.stderr)
        return 2

    colors = [c.strip() for c in args.colors.split(",") if c.strip()]
    brand = creative_core.BrandContext(brand_name=args.brand.strip(), colors=tuple(colors), mood=args.mood)

    _echo(f"\n  ✦ Creative Studio CLI")
    _echo(f"  Brand   : {brand.brand_name}  ({brand.mood})")
    _echo(f"  Colors  : {', '.join(colors) or '—'}")
    _echo(f"  Styles  : {', '.join(args.styles)}")
    _echo(f"  Format  : {args.aspect_ratio} ({creative_core.image_size(args.aspect_ratio)}), {args.output_type}")
    _echo(f"  Vision  : {settings.vision_provider}/{settings.vision_model}\n")

    tracker = costs.CostTracker()
    pipeline = creative_core.CreativePipeline(
        settings,
        creative_core.build_openai_client(settings),
        creative_core.build_anthropic_client(settings),
        cost_tracker=tracker,
    )
    try:
        result = pipeline.run(
            args.image.read_bytes(),
            mime,
            brand,
            output_type=args.output_type,
            aspect_ratio=args.aspect_ratio,
            style_keys=args.styles,
        )
    except Exception as exc:
        print(f"\n✗  {exc}", file=sys.stderr)
        return 1

    variants = result["results"]
    for v in variants:
        _echo(f"  ✓ {v.id}  {v.style}")
        _echo(f"    {v.image_url}")

    if args.download:
        for v in variants:
            path = _download(v, args.download)
            _echo(f"  ✓ Saved {path}" if path else f"  ✗ Could not download {v.id}")

    summary = tracker.summary()
    _echo(f"\n  Duration: {result['duration']:.1f}s")
    _echo(f"  Cost    : ~${summary['total']:.4f}\n")

    if args.json:
        print(json.dumps({
            "description": result["description"],
            "results": [v.to_dict() for v in variants],
        }, indent=2))
    return 0


def _download(variant: creative_core.GeneratedVariant, directory: Path) -> Optional[Path]:
    """Save a generated image locally; hosted URLs expire after a while."""
    try:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"{variant.id}.png"
        resp = requests.get(variant.image_url, timeout=90, stream=True)
        resp.raise_for_status()
        with open(path, "wb") as fh:
            for chunk in resp.iter_content(chunk_size=65536):
                fh.write(chunk)
        return path
    except (requests.RequestException, OSError) as exc:
        print(f"  download failed: {exc}", file=sys.stderr)
        return None


def _list_styles() -> None:
    print("\nCreative Styles")
    print("─" * 40)
    for s in styles.STYLES.values():
        print(f"  {s.key:<18} {s.name} — {s.description}")
    print("\nMoods")
    print("─" * 40)
    for key, phrase in styles.MOOD_DESCRIPTIONS.items():
        print(f"  {key:<18} {phrase}")
    print()


def _echo(msg: str) -> None:
    print(msg, flush=True)


if __name__ == "__main__":
    raise SystemExit(main())
