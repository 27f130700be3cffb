"""Device-local cloud configuration slot, kept apart from the entry schema."""

import json
import logging

from domain.model.cloud_config import CloudConfig
from port.key_value_storage import KeyValueStorage
from utils.config import cloud_override

logger = logging.getLogger(__name__)

CLOUD_CONFIG_KEY = 'digital_dictionary_cloud_v1'


def load_cloud_config(storage: KeyValueStorage) -> CloudConfig | None:
    """Return the active cloud config, or None for local-only mode.

    DICTIONARY_API_BASE_URL in the environment takes precedence over the
    stored slot. An unreadable slot counts as not configured.
    """
    override = cloud_override()
    if override:
        return CloudConfig(api_base_url=override[0], passphrase=override[1])
    try:
        raw = storage.get_item(CLOUD_CONFIG_KEY)
        return CloudConfig.from_dict(json.loads(raw)) if raw else None
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable cloud config", extra={"error": str(e)})
        return None


def save_cloud_config(storage: KeyValueStorage, config: CloudConfig) -> None:
    storage.set_item(CLOUD_CONFIG_KEY, json.dumps(config.to_dict()))
    logger.info("Cloud config saved", extra={"api_base_url": config.base_url})


def clear_cloud_config(storage: KeyValueStorage) -> None:
    storage.remove_item(CLOUD_CONFIG_KEY)
    logger.info("Cloud config cleared")
