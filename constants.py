"""
Shared constants for the poster studio.
Keeps directory names, model defaults and user-facing texts centralized.
"""

# Storage directories
OUTPUT_IMAGES_DIR = "output_images"
STATIC_ROUTE = "/static"

# File defaults
DEFAULT_IMAGE_MIME = "image/jpeg"
DEFAULT_IMAGE_EXTENSION = "png"

# Mapping returned MIME types to file extensions
MIME_EXTENSION_MAP = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/webp": "webp",
}

# Model defaults per provider
DEFAULT_TEXT_MODELS = {
    "gemini": "gemini-2.5-flash",
    "openai": "gpt-4.1",
}
DEFAULT_IMAGE_MODELS = {
    "google": "gemini-2.5-flash-image",
    "openai": "gpt-4.1",
}
TEXT_PROVIDERS = ("gemini", "openai")
IMAGE_PROVIDERS = ("google", "openai")

DEFAULT_CORS_ORIGIN = "http://localhost:3000"

# Generation limits
MAX_FOCUS_POINTS = 3
DETAIL_COUNT = 3
DETAIL_ASPECT_RATIO = "1:1"

# User-facing alerts (zh-TW, same wording as the web client)
ALERT_GENERATION_FAILED = "生成失敗，請稍後再試。"
ALERT_STYLE_SUGGESTION_FAILED = "無法自動產生風格，請檢查您的 API Key。"
ALERT_API_KEY_REQUIRED = "需要 API 金鑰"
ALERT_GENERATION_BUSY = "生成中，請稍候。"
