"""Environment-driven settings.

Values come from the process environment, optionally seeded from a .env
file by ``load_dotenv()`` in the entry points.
"""

import os
from pathlib import Path

DEFAULT_DATA_DIR = '~/.digital_dictionary'


def data_dir() -> Path:
    """Directory holding the device-local storage files."""
    return Path(os.getenv('DICTIONARY_DATA_DIR', DEFAULT_DATA_DIR)).expanduser()


def api_passphrase() -> str:
    """Server-side write passphrase. Empty means writes are open."""
    return os.getenv('API_PASSPHRASE', '').strip()


def allowed_origin() -> str:
    return os.getenv('ALLOWED_ORIGIN', '*').strip() or '*'


def cloud_override() -> tuple[str, str] | None:
    """(base URL, passphrase) from the environment, overriding stored settings."""
    base_url = os.getenv('DICTIONARY_API_BASE_URL', '').strip()
    if not base_url:
        return None
    return base_url, os.getenv('DICTIONARY_API_PASSPHRASE', '')
