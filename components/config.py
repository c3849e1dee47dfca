import os
import logging

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "http://localhost:8080"
DEFAULT_SERVER_PORT = 7860


def _read_timeout(raw):
    """Parse optional request timeout (seconds). Empty means no timeout."""
    if raw is None or not str(raw).strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"⚠️ Ignoring invalid TAX_API_TIMEOUT: {raw!r}")
        return None
    if value <= 0:
        logger.warning(f"⚠️ Ignoring non-positive TAX_API_TIMEOUT: {raw!r}")
        return None
    return value


def _read_port(raw):
    try:
        return int(raw)
    except (TypeError, ValueError):
        logger.warning(f"⚠️ Invalid GRADIO_SERVER_PORT {raw!r}, using {DEFAULT_SERVER_PORT}")
        return DEFAULT_SERVER_PORT


TAX_API_BASE_URL = os.getenv("TAX_API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/")
TAX_API_TIMEOUT = _read_timeout(os.getenv("TAX_API_TIMEOUT"))
SERVER_NAME = os.getenv("GRADIO_SERVER_NAME", "0.0.0.0")
SERVER_PORT = _read_port(os.getenv("GRADIO_SERVER_PORT", str(DEFAULT_SERVER_PORT)))
LOG_FILE = os.getenv("TAX_CALCULATOR_LOG_FILE", "tax_calculator.log")
