"""
Environment settings loader for the poster studio application.
"""
from dataclasses import dataclass
from functools import lru_cache
import os

from dotenv import load_dotenv

from constants import (
    DEFAULT_CORS_ORIGIN,
    DEFAULT_IMAGE_MODELS,
    DEFAULT_TEXT_MODELS,
    OUTPUT_IMAGES_DIR,
)


load_dotenv()


@dataclass(frozen=True, slots=True)
class Settings:
    """Immutable settings container built from environment variables."""
    openai_api_key: str | None
    gemini_api_key: str | None
    text_provider: str
    image_provider: str
    text_model: str
    image_model: str
    output_images_dir: str
    cors_origins: tuple[str, ...]

    def api_key_for(self, provider: str) -> str | None:
        """Return the configured key for a text ("gemini"/"openai") or image ("google"/"openai") provider."""
        if provider == "openai":
            return self.openai_api_key
        return self.gemini_api_key


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings built from environment variables."""
    text_provider = os.getenv("TEXT_PROVIDER", "gemini").lower()
    image_provider = os.getenv("IMAGE_PROVIDER", "google").lower()
    origins = os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGIN)

    return Settings(
        openai_api_key=os.getenv("MY_OPENAI_API_KEY"),
        gemini_api_key=os.getenv("GEMINI_API_KEY"),
        text_provider=text_provider,
        image_provider=image_provider,
        text_model=os.getenv("TEXT_MODEL") or DEFAULT_TEXT_MODELS.get(text_provider, ""),
        image_model=os.getenv("IMAGE_MODEL") or DEFAULT_IMAGE_MODELS.get(image_provider, ""),
        output_images_dir=os.getenv("OUTPUT_IMAGES_DIR", OUTPUT_IMAGES_DIR),
        cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
    )
