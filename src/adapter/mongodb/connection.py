"""Cached MongoDB client for the dictionary API.

The client is created lazily on first use and reused while it answers
pings. A missing MONGO_URL or a failed first connection is remembered so
that every request does not pay the server-selection timeout again.
"""

import os
import logging
from pymongo import MongoClient
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)

# Driver debug output is not useful in the application logs
logging.getLogger('pymongo').setLevel(logging.WARNING)

MONGO_URL = os.getenv('MONGO_URL')
DATABASE_NAME = os.getenv('MONGODB_DATABASE', 'dictionary')
ENTRIES_COLLECTION_NAME = 'dictionary_entries'

CLIENT_OPTIONS = {
    'serverSelectionTimeoutMS': 5000,
    'connectTimeoutMS': 5000,
    'socketTimeoutMS': 30000,
    'maxPoolSize': 10,
    'retryWrites': True,
}

_client: MongoClient | None = None
_connected_once = False
_unavailable = False


def reset_client():
    """Forget the cached client and any earlier failure."""
    global _client, _connected_once, _unavailable
    _client = None
    _connected_once = False
    _unavailable = False


def ping(client: MongoClient) -> bool:
    try:
        client.admin.command('ping')
        return True
    except PyMongoError:
        return False


def get_mongodb_client() -> MongoClient | None:
    """Return a connected client, or None when MongoDB is unavailable.

    A cached client that stops answering is replaced by a fresh one. Once a
    client has connected, later failures are retried on the next call; a
    failure before the first connection is treated as a configuration
    problem and not retried.
    """
    global _client, _connected_once, _unavailable

    if _client is not None:
        if ping(_client):
            return _client
        logger.warning("MongoDB client stopped answering, reconnecting", extra={"database": DATABASE_NAME})
        _client = None

    if _unavailable:
        return None

    if not MONGO_URL:
        logger.error("MONGO_URL is not configured")
        _unavailable = True
        return None

    try:
        client = MongoClient(MONGO_URL, **CLIENT_OPTIONS)
    except PyMongoError as e:
        logger.error("Invalid MongoDB configuration", extra={"error": str(e)[:200]})
        _unavailable = True
        return None

    if not ping(client):
        if not _connected_once:
            logger.error("Initial MongoDB connection failed", extra={"database": DATABASE_NAME})
            _unavailable = True
        return None

    if not _connected_once:
        logger.info("Connected to MongoDB", extra={"database": DATABASE_NAME})
    _connected_once = True
    _client = client
    return client
