"""Cloud implementation of EntryStore backed by the dictionary API.

Local state mirrors the server: every mutation returns the server's
canonical record. API failures are translated into domain errors.
"""

import logging

import httpx

from adapter.external.dictionary_api import ApiError, DictionaryApiClient
from domain.model.entry import Entry, EntryDraft
from domain.model.errors import (
    DomainError,
    DuplicateError,
    NetworkError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_ERRORS: dict[int, type[DomainError]] = {
    400: ValidationError,
    401: UnauthorizedError,
    404: NotFoundError,
    409: DuplicateError,
}


def to_domain_error(error: ApiError) -> DomainError:
    """Map an API failure onto the domain error taxonomy."""
    error_cls = _STATUS_ERRORS.get(error.status, NetworkError)
    return error_cls(error.message)


class RemoteEntryStore:
    def __init__(self, client: DictionaryApiClient):
        self.client = client

    @property
    def is_remote(self) -> bool:
        return True

    async def create(self, draft: EntryDraft) -> Entry:
        record = await self._call(self.client.create_entry(draft.to_payload()))
        return _parse(record)

    async def update(self, existing: Entry, draft: EntryDraft) -> Entry:
        record = await self._call(self.client.update_entry(existing.id, draft.to_payload()))
        return _parse(record)

    async def delete(self, entry_id: str) -> None:
        await self._call(self.client.delete_entry(entry_id))

    async def fetch_all(self) -> list[Entry]:
        records = await self._call(self.client.list_entries())
        return [_parse(r) for r in records]

    async def _call(self, coro):
        try:
            return await coro
        except ApiError as e:
            raise to_domain_error(e) from e
        except httpx.HTTPError as e:
            logger.warning("Dictionary API unreachable", extra={"error_type": type(e).__name__})
            raise NetworkError(str(e) or NetworkError.default_message) from e


def _parse(record: dict) -> Entry:
    try:
        return Entry.from_record(record)
    except ValidationError as e:
        raise NetworkError("Invalid response from server") from e
