"""Entry manager: owns the dictionary's entry collection.

The manager is the only writer of the in-memory collection. Each mutation
runs as: validate → store call → absorb result → persist, and a failing
phase short-circuits the rest. Where the mutation is authored (on the
device or on the remote API) is decided by the EntryStore it was given.

Public operations never raise domain errors; they return OperationResult
(or ImportResult) values for the UI to branch on.
"""

import json
import logging
from collections.abc import Iterable
from dataclasses import replace

import httpx

from adapter.external.dictionary_api import DictionaryApiClient
from adapter.external.remote_entry_store import RemoteEntryStore
from adapter.local.entry_store import LocalEntryStore
from adapter.local.local_store import LocalStore
from domain.model.cloud_config import CloudConfig
from domain.model.dictionary import (
    CloudStatus,
    ImportResult,
    ImportStrategy,
    OperationResult,
    SortOrder,
)
from domain.model.entry import DataSchema, Entry, EntryDraft, collation_key, normalize_word, now_ms
from domain.model.errors import (
    DomainError,
    DuplicateError,
    NotConfiguredError,
    NotFoundError,
    ValidationError,
)
from port.entry_store import EntryStore

logger = logging.getLogger(__name__)

EMPTY_WORD_MESSAGE = "Word cannot be empty."
DUPLICATE_WORD_MESSAGE = "This word already exists."
DUPLICATE_OTHER_MESSAGE = "Another entry already uses this word."


def select_entry_store(
    config: CloudConfig | None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> EntryStore:
    """Pick the mutation strategy once, at configuration time."""
    if config is None:
        return LocalEntryStore()
    return RemoteEntryStore(DictionaryApiClient(config, transport=transport))


class EntryManager:
    def __init__(self, local_store: LocalStore, store: EntryStore):
        self.local_store = local_store
        self.store = store
        self._entries: list[Entry] = []
        self.selected_id: str | None = None
        self.sort_order = SortOrder.ALPHABETICAL
        self.search_query = ''
        self.cloud_status = CloudStatus.DISABLED
        self.cloud_error = ''

    # ── configuration ─────────────────────────────────────

    def load(self) -> None:
        """Absorb the persisted snapshot. Called once at startup."""
        schema = self.local_store.load()
        self._entries = _unique_entries(_parse_records(schema.entries))
        logger.debug("Entries loaded from local store", extra={"entry_count": len(self._entries)})

    def use_store(self, store: EntryStore) -> None:
        """Switch between local and cloud mode after a settings change."""
        self.store = store
        if not store.is_remote:
            self.cloud_status = CloudStatus.DISABLED
            self.cloud_error = ''

    # ── views ─────────────────────────────────────────────

    @property
    def entries(self) -> list[Entry]:
        """Full collection in insertion order."""
        return list(self._entries)

    @property
    def normalized_map(self) -> dict[str, Entry]:
        return {e.normalized_word: e for e in self._entries}

    @property
    def visible_entries(self) -> list[Entry]:
        """Collection filtered by the search query and sorted by the sort order."""
        filtered = self._entries
        # Blank queries show everything; others match as typed, spaces included
        if self.search_query.strip():
            query = self.search_query.lower()
            filtered = [e for e in filtered if query in e.word.lower()]
        if self.sort_order == SortOrder.NEWEST:
            return sorted(filtered, key=lambda e: e.created_at, reverse=True)
        return sorted(filtered, key=lambda e: collation_key(e.word))

    @property
    def selected_entry(self) -> Entry | None:
        return self.get(self.selected_id) if self.selected_id else None

    def get(self, entry_id: str) -> Entry | None:
        return next((e for e in self._entries if e.id == entry_id), None)

    def select(self, entry_id: str | None) -> None:
        self.selected_id = entry_id

    # ── mutations ─────────────────────────────────────────

    async def add(
        self,
        word: str,
        definition: str,
        illustration: str,
        recording: str | None = None,
    ) -> OperationResult:
        """Create an entry. Fails on an empty or already used word."""
        draft = EntryDraft(word, definition, illustration, recording).normalized()
        try:
            if not draft.word:
                raise ValidationError(EMPTY_WORD_MESSAGE)
            if draft.normalized_word in self.normalized_map:
                raise DuplicateError(DUPLICATE_WORD_MESSAGE)
            created = await self.store.create(draft)
        except DuplicateError:
            return self._failure('add', DuplicateError(DUPLICATE_WORD_MESSAGE))
        except DomainError as e:
            return self._failure('add', e)
        except Exception:
            logger.error("Unexpected error adding entry", extra={"word": draft.word}, exc_info=True)
            return self._failure('add', DomainError("Failed to add entry."))

        self._entries.append(created)
        self.selected_id = created.id
        self._persist()
        logger.info("Entry added", extra={"entry_id": created.id, "word": created.word})
        return OperationResult.ok(created)

    async def update(
        self,
        entry_id: str,
        word: str,
        definition: str,
        illustration: str,
        recording: str | None = None,
    ) -> OperationResult:
        """Replace an entry's mutable fields. Fails if the word is taken by another entry."""
        draft = EntryDraft(word, definition, illustration, recording).normalized()
        try:
            existing = self.get(entry_id)
            if existing is None:
                raise NotFoundError("Entry not found.")
            if not draft.word:
                raise ValidationError(EMPTY_WORD_MESSAGE)
            other = self.normalized_map.get(draft.normalized_word)
            if other is not None and other.id != entry_id:
                raise DuplicateError(DUPLICATE_OTHER_MESSAGE)
            updated = await self.store.update(existing, draft)
        except DuplicateError:
            return self._failure('update', DuplicateError(DUPLICATE_OTHER_MESSAGE))
        except DomainError as e:
            return self._failure('update', e)
        except Exception:
            logger.error("Unexpected error updating entry", extra={"entry_id": entry_id}, exc_info=True)
            return self._failure('update', DomainError("Failed to update entry."))

        self._entries = [updated if e.id == entry_id else e for e in self._entries]
        self._persist()
        logger.info("Entry updated", extra={"entry_id": entry_id, "word": updated.word})
        return OperationResult.ok(updated)

    async def remove(self, entry_id: str) -> OperationResult:
        """Delete an entry. In cloud mode the local copy goes only after the server confirms."""
        try:
            await self.store.delete(entry_id)
        except DomainError as e:
            return self._failure('remove', e)
        except Exception:
            logger.error("Unexpected error deleting entry", extra={"entry_id": entry_id}, exc_info=True)
            return self._failure('remove', DomainError("Failed to delete entry."))

        removed = self.get(entry_id)
        self._entries = [e for e in self._entries if e.id != entry_id]
        if self.selected_id == entry_id:
            self.selected_id = None
        if removed is not None:
            self._persist()
            logger.info("Entry deleted", extra={"entry_id": entry_id, "word": removed.word})
        return OperationResult.ok(removed)

    def import_batch(
        self,
        items: Iterable[dict],
        strategy: ImportStrategy | str = ImportStrategy.SKIP,
    ) -> ImportResult:
        """Merge imported records into the collection (local only).

        Each item is compared against the collection as already updated by
        earlier items of the same batch. Items without a usable word are
        counted as skipped.
        """
        strategy = ImportStrategy(strategy)
        by_word = self.normalized_map
        used_ids = {e.id for e in self._entries}
        added = skipped = overwritten = 0

        for item in items:
            if not isinstance(item, dict) or not isinstance(item.get('word'), str) or not item['word'].strip():
                logger.warning("Skipping malformed import item")
                skipped += 1
                continue

            key = normalize_word(item['word'])
            existing = by_word.get(key)

            if existing is None:
                entry = _entry_from_import(item, used_ids)
            elif strategy == ImportStrategy.SKIP:
                skipped += 1
                continue
            elif strategy == ImportStrategy.OVERWRITE:
                revised = _overwrite(existing, item)
                self._entries = [revised if e.id == existing.id else e for e in self._entries]
                by_word[key] = revised
                overwritten += 1
                continue
            else:
                word = _unique_word(item['word'], by_word)
                entry = Entry.create(_import_draft(item, word))

            self._entries.append(entry)
            by_word[entry.normalized_word] = entry
            used_ids.add(entry.id)
            added += 1

        result = ImportResult(added=added, skipped=skipped, overwritten=overwritten)
        if added or overwritten:
            self._persist()
        logger.info("Entries imported", extra={
            "strategy": strategy.value,
            "added": added,
            "skipped": skipped,
            "overwritten": overwritten,
        })
        return result

    def export_snapshot(self) -> DataSchema:
        return DataSchema.from_entries(self._entries)

    def export_json(self) -> str:
        return json.dumps(self.export_snapshot().to_dict(), indent=2, ensure_ascii=False)

    async def sync_from_cloud(self) -> OperationResult:
        """Replace the whole collection with the remote list ("pull latest")."""
        if not self.store.is_remote:
            self.cloud_status = CloudStatus.DISABLED
            self.cloud_error = ''
            return self._failure('sync', NotConfiguredError())

        self.cloud_status = CloudStatus.SYNCING
        self.cloud_error = ''
        try:
            remote = await self.store.fetch_all()
        except DomainError as e:
            return self._sync_failed(e)
        except Exception:
            logger.error("Unexpected error syncing from cloud", exc_info=True)
            return self._sync_failed(DomainError("Failed to sync from cloud."))

        self._entries = _unique_entries(remote)
        if self.selected_id and self.get(self.selected_id) is None:
            self.selected_id = None
        self._persist()
        self.cloud_status = CloudStatus.READY
        logger.info("Synced from cloud", extra={"entry_count": len(self._entries)})
        return OperationResult.ok()

    # ── internals ─────────────────────────────────────────

    def _persist(self) -> None:
        self.local_store.save(self.export_snapshot())

    def _sync_failed(self, error: DomainError) -> OperationResult:
        self.cloud_status = CloudStatus.ERROR
        self.cloud_error = error.message
        return self._failure('sync', error)

    def _failure(self, operation: str, error: DomainError) -> OperationResult:
        logger.info("Entry operation rejected", extra={
            "operation": operation,
            "error_type": type(error).__name__,
            "error": error.message,
        })
        return OperationResult.fail(error)


# ── import helpers ───────────────────────────────────────


def _import_draft(item: dict, word: str) -> EntryDraft:
    return EntryDraft(
        word=word,
        definition=str(item.get('definition') or ''),
        illustration=str(item.get('illustration') or ''),
        recording=_imported_recording(item.get('recording')),
    )


def _imported_recording(value) -> str | None:
    return value if isinstance(value, str) and value else None


def _entry_from_import(item: dict, used_ids: set[str]) -> Entry:
    """New entry for an unseen word, keeping the record's own id and timestamps when usable."""
    entry = Entry.create(_import_draft(item, item['word']))
    entry_id = item.get('id')
    if not isinstance(entry_id, str) or not entry_id or entry_id in used_ids:
        return entry
    try:
        created_at = int(item['createdAt'])
        updated_at = int(item.get('updatedAt') or created_at)
    except (KeyError, TypeError, ValueError):
        return entry
    return replace(entry, id=entry_id, created_at=created_at, updated_at=updated_at)


def _overwrite(existing: Entry, item: dict) -> Entry:
    """Replace fields from an imported item; absent illustration/recording are preserved."""
    return replace(
        existing,
        word=item['word'],
        definition=str(item.get('definition') or ''),
        illustration=str(item['illustration']) if item.get('illustration') else existing.illustration,
        recording=_imported_recording(item['recording']) if 'recording' in item else existing.recording,
        updated_at=max(now_ms(), existing.updated_at + 1),
    )


def _unique_word(word: str, taken: dict[str, Entry]) -> str:
    """Suffix " (2)", " (3)", … until the word is unused."""
    suffix = 1
    candidate = word
    while normalize_word(candidate) in taken:
        suffix += 1
        candidate = f"{word} ({suffix})"
    return candidate


def _parse_records(records: list) -> list[Entry]:
    entries = []
    for record in records:
        try:
            entries.append(Entry.from_record(record))
        except ValidationError as e:
            logger.warning("Dropping malformed stored entry", extra={"error": e.message})
    return entries


def _unique_entries(entries: list[Entry]) -> list[Entry]:
    """Keep the first entry for each normalized word."""
    seen: set[str] = set()
    unique = []
    for entry in entries:
        if entry.normalized_word in seen:
            logger.warning("Dropping duplicate entry", extra={"entry_id": entry.id, "word": entry.word})
            continue
        seen.add(entry.normalized_word)
        unique.append(entry)
    return unique
