"""
Text-generation capability used by the narrative layer.

GeminiTextGenerator satisfies scoring.ports.TextGenerator using google-genai.
"""

import logging

from google import genai

logger = logging.getLogger(__name__)


class GeminiTextGenerator:
    """Single-shot Gemini call with deterministic decoding and a JSON reply."""

    def __init__(self, api_key: str, model: str = "gemini-2.0-flash", timeout: float = 30.0):
        self.client = genai.Client(api_key=api_key)
        self.model = model
        self.timeout_ms = int(timeout * 1000)

    async def generate(self, prompt: str) -> str:
        response = await self.client.aio.models.generate_content(
            model=self.model,
            contents=prompt,
            config={
                "temperature": 0,
                "max_output_tokens": 512,
                "response_mime_type": "application/json",
                "http_options": {"timeout": self.timeout_ms},
            },
        )
        return response.text or ""


def build_text_generator(api_key: str | None, model: str, timeout: float) -> GeminiTextGenerator | None:
    """Gemini generator when a key is configured, otherwise None (narrative falls back)."""
    if not api_key:
        logger.info("GEMINI_API_KEY not configured - narrative will use the fallback summary")
        return None
    return GeminiTextGenerator(api_key=api_key, model=model, timeout=timeout)
