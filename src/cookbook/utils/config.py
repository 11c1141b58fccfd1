"""Configuration management for the CookBook suggestion engine.

Loads environment variables from system environment and .env file.
Priority order: system environment > .env file > hardcoded defaults
"""

import os

from dotenv import load_dotenv


# Load .env file (if exists, silently continues if missing)
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        # Gemini API key, sent as the x-goog-api-key header. Empty means AI features are unavailable.
        self.GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
        # Default: gemini-2.5-flash (stable alias on v1beta)
        self.GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
        # REST root for generateContent and model listing
        self.GEMINI_BASE_URL: str = os.getenv(
            "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
        ).rstrip("/")
        # Total timeout for a single HTTP round trip, in seconds. The engine itself imposes none.
        self.REQUEST_TIMEOUT_SECONDS: int = int(os.getenv("REQUEST_TIMEOUT_SECONDS", "30"))
        # Number of own and saved recipes summarized in a suggestion prompt. Default: 5
        self.MAX_CONTEXT_RECIPES: int = int(os.getenv("MAX_CONTEXT_RECIPES", "5"))
        # Upper bound on new recipes requested from the model. Default: 3
        self.MAX_SUGGESTIONS: int = int(os.getenv("MAX_SUGGESTIONS", "3"))
        # Maximum image size (in MB) accepted for instruction rewrites. Default: 5 MB
        self.MAX_IMAGE_SIZE_MB: int = int(os.getenv("MAX_IMAGE_SIZE_MB", "5"))
        # Image Compression: Enable/disable JPEG compression before the image is inlined
        self.COMPRESS_IMG: bool = _env_bool("COMPRESS_IMG", "true")
        # Image Compression Threshold: images smaller than this (in KB) are sent as-is
        self.COMPRESS_IMG_THRESHOLD_KB: int = int(os.getenv("COMPRESS_IMG_THRESHOLD_KB", "300"))

        # Caller-side retry policy (used by with_retries, never by the client or engine)
        # MAX_RETRIES: Number of attempts for a wrapped call
        self.MAX_RETRIES: int = int(os.getenv("MAX_RETRIES", "3"))
        # DELAY_BETWEEN_RETRIES: Initial delay in seconds (doubled each retry if EXPONENTIAL_BACKOFF)
        self.DELAY_BETWEEN_RETRIES: int = int(os.getenv("DELAY_BETWEEN_RETRIES", "2"))
        self.EXPONENTIAL_BACKOFF: bool = _env_bool("EXPONENTIAL_BACKOFF", "true")

    def validate(self, require_api_key: bool = False) -> None:
        """Validate configuration values.

        Args:
            require_api_key: Also fail when GEMINI_API_KEY is empty. The library
                itself reports a missing key lazily, at call time.

        Raises:
            ValueError: If a required key is missing or a value is out of range.
        """
        if require_api_key and not self.GEMINI_API_KEY:
            raise ValueError("GEMINI_API_KEY environment variable is required")
        if not self.GEMINI_BASE_URL.startswith(("http://", "https://")):
            raise ValueError(
                f"GEMINI_BASE_URL must be an http(s) URL, got: {self.GEMINI_BASE_URL}"
            )
        if self.REQUEST_TIMEOUT_SECONDS < 1:
            raise ValueError(
                f"REQUEST_TIMEOUT_SECONDS must be at least 1, got: {self.REQUEST_TIMEOUT_SECONDS}"
            )
        if self.MAX_CONTEXT_RECIPES < 0:
            raise ValueError(
                f"MAX_CONTEXT_RECIPES must not be negative, got: {self.MAX_CONTEXT_RECIPES}"
            )
        if self.MAX_SUGGESTIONS < 1:
            raise ValueError(
                f"MAX_SUGGESTIONS must be at least 1, got: {self.MAX_SUGGESTIONS}"
            )
        if self.MAX_IMAGE_SIZE_MB < 1:
            raise ValueError(
                f"MAX_IMAGE_SIZE_MB must be at least 1, got: {self.MAX_IMAGE_SIZE_MB}"
            )
        if self.MAX_RETRIES < 1:
            raise ValueError(
                f"MAX_RETRIES must be at least 1, got: {self.MAX_RETRIES}"
            )
        if self.DELAY_BETWEEN_RETRIES < 1:
            raise ValueError(
                f"DELAY_BETWEEN_RETRIES must be at least 1 second, got: {self.DELAY_BETWEEN_RETRIES}"
            )


# Module-level config instance; the API key is checked where it is used
config = Config()
config.validate()
