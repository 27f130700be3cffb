"""Local Store: the versioned entry blob kept in device-local storage.

This component never fails observably. Missing, corrupt or structurally
wrong data loads as an empty schema, and write errors are logged and
dropped.
"""

import json
import logging

from domain.model.entry import SCHEMA_VERSION, DataSchema
from port.key_value_storage import KeyValueStorage

logger = logging.getLogger(__name__)

STORAGE_KEY = 'digital_dictionary_v1'


class LocalStore:
    def __init__(self, storage: KeyValueStorage, key: str = STORAGE_KEY):
        self.storage = storage
        self.key = key

    def load(self) -> DataSchema:
        """Load the persisted schema, degrading to an empty one on any problem."""
        try:
            raw = self.storage.get_item(self.key)
            if not raw:
                return DataSchema.empty()
            parsed = json.loads(raw)
        except (OSError, ValueError) as e:
            logger.warning("Failed to read local entries, starting empty", extra={"error": str(e)})
            return DataSchema.empty()

        if not isinstance(parsed, dict):
            return DataSchema.empty()
        version = parsed.get('version')
        entries = parsed.get('entries')
        # bool is an int subclass but never a valid version; 1.0 is accepted as 1
        if isinstance(version, float) and version.is_integer():
            version = int(version)
        if not isinstance(version, int) or isinstance(version, bool) or not isinstance(entries, list):
            logger.warning("Local entries have an unexpected shape, starting empty")
            return DataSchema.empty()

        while version < SCHEMA_VERSION:
            version, entries = migrate(version, entries)
        return DataSchema(version=version, entries=entries)

    def save(self, schema: DataSchema) -> None:
        """Persist the schema. Write errors (disk full, permissions) are swallowed."""
        try:
            self.storage.set_item(self.key, json.dumps(schema.to_dict(), ensure_ascii=False))
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Failed to persist local entries", extra={"error": str(e)})


def migrate(version: int, entries: list) -> tuple[int, list]:
    """Bring an older schema one step forward.

    No migrations exist yet: any older version jumps to the current one
    and its entries are dropped.
    """
    logger.warning(
        "Dropping entries from unsupported schema version",
        extra={"from_version": version, "to_version": SCHEMA_VERSION, "dropped": len(entries)},
    )
    return SCHEMA_VERSION, []
