"""
API key gate.

The web client could only be used once the host had a model API key selected.
KeyBridge plays that role for the HTTP service: keys come from the
environment, or are selected at runtime through POST /key/select, and every
model-backed endpoint checks has_selected_api_key() first.
"""
# stdlib imports
import logging
import threading

# local imports
from constants import IMAGE_PROVIDERS, TEXT_PROVIDERS
from settings import Settings


logger = logging.getLogger(__name__)


def _key_name(provider: str) -> str:
    # Image provider "google" shares the Gemini key
    return "gemini" if provider == "google" else provider


class KeyBridge:
    """Holds the API keys that are currently selected, per provider."""

    def __init__(self, settings: Settings):
        self._lock = threading.Lock()
        self._keys: dict[str, str | None] = {
            name: settings.api_key_for(name) for name in ("gemini", "openai")
        }
        self.text_provider = settings.text_provider
        self.image_provider = settings.image_provider


    def key_for(self, provider: str) -> str | None:
        """Return the key selected for a text or image provider."""
        return self._keys.get(_key_name(provider))


    def has_selected_api_key(self, provider: str | None = None) -> bool:
        """
        Check whether a key is available.

        Args:
            provider: Provider to check; None checks every provider the
                service is configured to call.
        """
        if provider is not None:
            return bool(self.key_for(provider))
        return bool(self.key_for(self.text_provider)) and bool(self.key_for(self.image_provider))


    def select_key(self, provider: str, api_key: str) -> None:
        """
        Select a key for a provider at runtime.

        Raises:
            ValueError: If the provider is unknown or the key is blank.
        """
        if provider not in TEXT_PROVIDERS and provider not in IMAGE_PROVIDERS:
            raise ValueError(f"Unsupported provider: {provider}")
        if not api_key or not api_key.strip():
            raise ValueError("API key cannot be empty.")

        with self._lock:
            self._keys[_key_name(provider)] = api_key.strip()
        logger.info(f"API key selected for provider '{_key_name(provider)}'")
