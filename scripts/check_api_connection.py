#!/usr/bin/env python
"""
Gemini API connection check.

Run:
    python scripts/check_api_connection.py
"""

import asyncio
import sys
from pathlib import Path

# Project root on sys.path so `src` imports resolve
sys.path.insert(0, str(Path(__file__).parent.parent))

# .env before settings are read
from dotenv import load_dotenv
load_dotenv()

from src.app.main import load_config  # noqa: E402
from src.app.providers.base import AdapterSettings  # noqa: E402
from src.app.services.adapter import GeminiAdapter  # noqa: E402
from src.app.services.workspace import parse_extracted_text  # noqa: E402
from src.domain.errors import WorkspaceError  # noqa: E402

# 1x1 white pixel PNG
TEST_IMAGE_B64 = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8/5+hHgAHggJ/PchI7wAAAABJRU5ErkJggg=="
)


async def check_text(adapter: GeminiAdapter) -> bool:
    """Text model round trip."""
    print("\n" + "=" * 60)
    print(f"🧪 Text model: {adapter.settings.text_model}")
    print("=" * 60)

    try:
        print("📤 Sending test prompt...")
        response = await adapter.generate_text("Say 'Hello, API test successful!'")
        print(f"📥 Response: {response.strip()[:200]}")
        return True
    except WorkspaceError as e:
        print(f"❌ [{e.code}] {e.message}")
        return False


async def check_vision(adapter: GeminiAdapter) -> bool:
    """Vision model extraction with a tiny image."""
    print("\n" + "=" * 60)
    print(f"🧪 Vision model: {adapter.settings.vision_model}")
    print("=" * 60)

    try:
        print("📤 Sending test image...")
        raw = await adapter.extract_text_from_image(TEST_IMAGE_B64, "image/png")
        print(f"📥 Raw response: {raw.strip()[:200]}")
        extracted = parse_extracted_text(raw)
        print(f"   raw_text: {extracted.raw_text!r}")
        return True
    except WorkspaceError as e:
        # A ParseError still proves the connection works
        print(f"⚠️ [{e.code}] {e.message}")
        return e.code.startswith("EXTRACTION_")


async def main() -> int:
    print("🚀 Gemini API connection check")

    settings = AdapterSettings.from_config(load_config())
    if not settings.configured:
        print("❌ GEMINI_API_KEY is not set.")
        print("   Put a real key in .env (see .env.example).")
        return 1

    print(f"✅ API key found: {settings.api_key[:8]}...")
    adapter = GeminiAdapter(settings)

    results = {
        "text": await check_text(adapter),
        "vision": await check_vision(adapter),
    }

    print("\n" + "=" * 60)
    print("📊 Summary")
    print("=" * 60)
    for name, passed in results.items():
        print(f"  {name}: {'✅ PASS' if passed else '❌ FAIL'}")

    return 0 if all(results.values()) else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
