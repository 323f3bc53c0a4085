"""UI strings, loaded once when the module is imported."""
import json
import logging
from pathlib import Path

from app.core.config import settings
from app.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

LOCALES_DIR = Path(__file__).resolve().parent.parent / "locales"


def load_bundle(locale: str) -> dict:
    path = LOCALES_DIR / f"{locale}.json"
    try:
        with path.open(encoding="utf-8") as fh:
            return json.load(fh)
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Cannot load locale bundle {path}: {e}") from e


messages = load_bundle(settings.LOCALE)
logger.info(f"Loaded {len(messages)} UI strings for locale {settings.LOCALE!r}")


def translate(key: str) -> str:
    return messages.get(key, key)
