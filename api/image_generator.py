"""
Image generation module using OpenAI's Responses API.
Handles the actual image generation with the image generation tool.
"""

# stdlib imports
import base64

# third-party imports
from openai import AsyncOpenAI

# local imports
from constants import DEFAULT_IMAGE_MIME


# The image tool only knows three canvas sizes
SIZE_BY_ASPECT_RATIO = {
    "1:1": "1024x1024",
    "3:4": "1024x1536",
    "9:16": "1024x1536",
    "4:3": "1536x1024",
    "16:9": "1536x1024",
}


async def generate_image_data_url(
    prompt: str,
    product_image_bytes: bytes,
    model: str,
    api_key: str,
    aspect_ratio: str | None = None,
    media_type: str = DEFAULT_IMAGE_MIME,
) -> str:
    """
    Generate an image using OpenAI's Responses API (image_generation tool).

    Args:
        prompt: Final image prompt text.
        product_image_bytes: Raw bytes of the product image to include.
        model: The OpenAI model driving the tool call (e.g., "gpt-4.1").
        api_key: The OpenAI API key (MY_OPENAI_API_KEY).
        aspect_ratio: Requested ratio, mapped to the closest supported size.
        media_type: MIME type of the product image.

    Returns:
        Base64 data URL (e.g., "data:image/png;base64,...").

    Raises:
        ValueError: If the API response doesn't contain expected image data.
    """
    encoded = base64.b64encode(product_image_bytes).decode("utf-8")
    content = [{
        "role": "user",
        "content": [
            {"type": "input_text", "text": prompt},
            {"type": "input_image", "image_url": f"data:{media_type};base64,{encoded}"},
        ],
    }]

    tool = {"type": "image_generation", "input_fidelity": "high"}
    if aspect_ratio in SIZE_BY_ASPECT_RATIO:
        tool["size"] = SIZE_BY_ASPECT_RATIO[aspect_ratio]

    client = AsyncOpenAI(api_key=api_key)
    resp = await client.responses.create(
        model=model,
        input=content,
        tools=[tool],
    )

    for out in getattr(resp, "output", []) or []:
        if getattr(out, "type", None) == "image_generation_call" and out.result:
            return f"data:image/png;base64,{out.result}"

    raise ValueError("Image generation did not return expected image data.")
