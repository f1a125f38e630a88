"""
Image generation module using Gemini's image generation API.

Handles poster and close-up generation with Google's Gemini 2.5 Flash Image
model. Provides the same interface as the OpenAI generator in
api/image_generator.py so services.py can switch between them.
"""

# stdlib imports
import base64
import logging
from io import BytesIO

# third-party imports
from google import genai
from google.genai import types
from PIL import Image


logger = logging.getLogger(__name__)


async def generate_image_data_url(
    prompt: str,
    product_image_bytes: bytes,
    model: str,
    api_key: str,
    aspect_ratio: str | None = None,
) -> str:
    """
    Generate an image via Gemini's image generation API.

    Makes one API call and returns the image as a base64 data URL.

    Args:
        prompt: Final image prompt text.
        product_image_bytes: Raw product image to include.
        model: Image generation model name (e.g., "gemini-2.5-flash-image").
        api_key: Google API key for Gemini.
        aspect_ratio: Requested output ratio such as "3:4"; None lets the model decide.

    Returns:
        Base64 data URL (e.g., "data:image/png;base64,...").

    Raises:
        ValueError: If the response lacks expected image data.
    """
    # Gemini expects contents=[text, image, ...]; PIL images are accepted as-is
    product_image = Image.open(BytesIO(product_image_bytes))
    contents = [prompt, product_image]

    config = types.GenerateContentConfig(
        response_modalities=["IMAGE"],
        image_config=types.ImageConfig(aspect_ratio=aspect_ratio) if aspect_ratio else None,
    )

    client = genai.Client(api_key=api_key)

    # Async client so several generations can run under one asyncio.gather
    response = await client.aio.models.generate_content(
        model=model,
        contents=contents,
        config=config,
    )

    candidates = response.candidates or []
    if not candidates or not candidates[0].content or not candidates[0].content.parts:
        raise ValueError("Image generation returned no candidates.")

    parts = candidates[0].content.parts
    logger.debug(f"Gemini response parts: {len(parts)}")

    # Each part holds text OR inline image bytes
    for part in parts:
        if part.inline_data is not None and part.inline_data.data:
            mime_type = part.inline_data.mime_type or "image/png"
            b64_image_data = base64.b64encode(part.inline_data.data).decode("utf-8")
            return f"data:{mime_type};base64,{b64_image_data}"

    raise ValueError("Image generation did not return expected image data.")
