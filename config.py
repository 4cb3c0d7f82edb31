import logging
import os

# API Configuration
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))

# Display
CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "₹")
SHARE_RECENT_EXPENSES = int(os.getenv("SHARE_RECENT_EXPENSES", "3"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def configure_logging(level: str = LOG_LEVEL):
    """Configure root logging once for the API process"""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
