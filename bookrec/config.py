"""Configuration management."""
import os
from dotenv import load_dotenv

from bookrec.client import DEFAULT_BASE_URL

# Load environment variables
load_dotenv()


class Config:
    """Application configuration."""

    # Generative model API
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
    GEMINI_BASE_URL = os.getenv("GEMINI_BASE_URL", DEFAULT_BASE_URL)

    # Defaults
    DEFAULT_TIMEOUT = float(os.getenv("BOOKREC_TIMEOUT", "30"))
    LOG_LEVEL = os.getenv("BOOKREC_LOG_LEVEL", "INFO").upper()
