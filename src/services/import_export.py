"""Import/export file handling.

The file format is the persisted schema itself: {"version": n, "entries": [...]}.
"""

import json
import logging
from pathlib import Path

from domain.model.errors import ValidationError

logger = logging.getLogger(__name__)

EXPORT_FILENAME = 'digital-dictionary-export.json'
INVALID_FILE_MESSAGE = 'Invalid file format'


def parse_import_document(text: str) -> list[dict]:
    """Validate an import document and return its entry items.

    Raises:
        ValidationError: the text is not JSON or ``entries`` is not a list
    """
    try:
        parsed = json.loads(text)
    except ValueError:
        raise ValidationError(INVALID_FILE_MESSAGE)
    if not isinstance(parsed, dict) or not isinstance(parsed.get('entries'), list):
        raise ValidationError(INVALID_FILE_MESSAGE)
    return parsed['entries']


def read_import_file(path: str | Path) -> list[dict]:
    try:
        text = Path(path).read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read import file", extra={"path": str(path), "error": str(e)})
        raise ValidationError(INVALID_FILE_MESSAGE)
    return parse_import_document(text)


def write_export_file(document: str, path: str | Path | None = None) -> Path:
    """Write an exported document, defaulting to the standard export filename."""
    target = Path(path) if path else Path(EXPORT_FILENAME)
    target.write_text(document, encoding='utf-8')
    logger.info("Entries exported", extra={"path": str(target)})
    return target
