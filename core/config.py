# core/config.py

import os
from dotenv import load_dotenv

from core.errors import ConfigError

# Load environment variables from .env
load_dotenv()

# CoinMarketCap API
CMC_API_KEY = os.getenv("CMC_API_KEY")
CMC_BASE_URL = os.getenv("CMC_BASE_URL", "https://pro-api.coinmarketcap.com")

# Market data fetching
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", 15))  # seconds, applies to HTTP and refresh cycle
LISTING_LIMIT = int(os.getenv("LISTING_LIMIT", 100))

# Local preference store
PREFERENCES_PATH = os.getenv("PREFERENCES_PATH", "cryptofolio_prefs.json")
POSITIONS_KEY = os.getenv("POSITIONS_KEY", "portfolio_positions")

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_DIR = os.getenv("LOG_DIR", "logs")


def require_api_key() -> str:
    """Return the CoinMarketCap key, failing loudly if it was never configured."""
    if not CMC_API_KEY:
        raise ConfigError("Missing CMC_API_KEY in environment variables.")
    return CMC_API_KEY
