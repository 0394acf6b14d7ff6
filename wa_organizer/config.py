import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

DEFAULT_API_ENDPOINT = (
    "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.0-flash-exp:generateContent"
)
DEFAULT_SETTINGS_PATH = Path.home() / ".wa_organizer" / "settings.json"
TRANSPORTS = ("rest", "sdk")


@dataclass
class AppConfig:
    api_key: str
    api_endpoint: str
    transport: str
    settings_path: Path
    log_level: str


def _lookup(key, secrets):
    # Streamlit secrets win over the environment
    if secrets:
        value = secrets.get(key)
        if value:
            return str(value)
    return os.getenv(key)


def load_config(secrets=None):
    # .env next to where `streamlit run` was started
    load_dotenv(find_dotenv(usecwd=True))

    transport = (_lookup("WA_ORGANIZER_TRANSPORT", secrets) or "rest").strip().lower()
    if transport not in TRANSPORTS:
        raise ValueError(f"WA_ORGANIZER_TRANSPORT must be one of {TRANSPORTS}, got {transport!r}")

    settings_path = _lookup("WA_ORGANIZER_SETTINGS", secrets)
    return AppConfig(
        api_key=_lookup("GEMINI_API_KEY", secrets) or "",
        api_endpoint=_lookup("GEMINI_API_ENDPOINT", secrets) or DEFAULT_API_ENDPOINT,
        transport=transport,
        settings_path=Path(settings_path).expanduser() if settings_path else DEFAULT_SETTINGS_PATH,
        log_level=(_lookup("WA_ORGANIZER_LOG_LEVEL", secrets) or "INFO").upper(),
    )


def configure_logging(level="INFO"):
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
