"""
Ooit Gedacht - Image Generation Client.

Wraps the OpenAI Images API. All generation calls go through here so the
prompt and outcome are logged in one place.

The wizard treats this as an opaque collaborator:
    async (preferences, prompt) -> image data URI
"""

import base64
import logging
from typing import TYPE_CHECKING
from xml.sax.saxutils import escape

from openai import AsyncOpenAI

from ooit.config import settings
from ooit.llm.prompt_logger import log_prompt

if TYPE_CHECKING:
    from intake.state import UserPreferences

logger = logging.getLogger(__name__)

# Singleton client instance
_client: AsyncOpenAI | None = None


def get_client() -> AsyncOpenAI:
    """
    Get the async OpenAI client.

    Uses singleton pattern to reuse the connection pool.
    """
    global _client

    if _client is None:
        _client = AsyncOpenAI(api_key=settings.openai_api_key)

    return _client


def to_data_uri(b64_data: str, mime_type: str = "image/png") -> str:
    """Wrap base64 image bytes as a data URI."""
    return f"data:{mime_type};base64,{b64_data}"


async def generate_dream_home(preferences: "UserPreferences", prompt: str) -> str:
    """
    Generate the final dream home visualization.

    Args:
        preferences: The completed wizard aggregate (unused by the API call
            itself, the prompt already encodes it)
        prompt: Full prompt text from intake.prompt.build_prompt

    Returns:
        Image as a data URI (or a hosted URL if the model only returns one)

    Raises:
        Any OpenAI error, or RuntimeError if the response holds no image.
        The orchestrator turns these into a user-facing failure.
    """
    client = get_client()
    model = settings.image_model
    config = {"size": settings.image_size}

    try:
        response = await client.images.generate(
            model=model,
            prompt=prompt,
            n=1,
            **config,
        )

        image = response.data[0] if response.data else None
        if image is not None and image.b64_json:
            result = to_data_uri(image.b64_json)
        elif image is not None and image.url:
            result = image.url
        else:
            raise RuntimeError("No image generated")

        log_prompt(
            node="generate_home",
            model=model,
            prompt=prompt,
            result=result,
            config=config,
        )
        return result

    except Exception as e:
        log_prompt(
            node="generate_home",
            model=model,
            prompt=prompt,
            error=str(e),
            config=config,
        )
        raise


_PLACEHOLDER_SVG = """<svg xmlns="http://www.w3.org/2000/svg" width="640" height="360" viewBox="0 0 640 360">
<rect width="640" height="360" fill="#0a1628"/>
<polygon points="200,190 320,100 440,190" fill="#3b82f6"/>
<rect x="220" y="190" width="200" height="120" fill="#e5e7eb"/>
<rect x="300" y="240" width="40" height="70" fill="#1f2937"/>
<text x="320" y="345" font-family="sans-serif" font-size="18" fill="#ffffff" text-anchor="middle">{label}</text>
</svg>"""


async def generate_placeholder_home(preferences: "UserPreferences", prompt: str) -> str:
    """
    Offline stand-in for generate_dream_home.

    Returns a small SVG sketch labelled with the primary style. Used by the
    CLI's --fake flag and by demos without an API key.
    """
    selections = preferences.style.mood_board_selections
    label = selections[0] if selections else "Droomhuis"
    svg = _PLACEHOLDER_SVG.format(label=escape(label))
    encoded = base64.b64encode(svg.encode("utf-8")).decode("ascii")
    logger.debug(f"Placeholder image generated for style {label!r}")
    return to_data_uri(encoded, "image/svg+xml")
