"""In-memory remote EntryStore for testing cloud-mode behaviour."""

from domain.model.entry import Entry, EntryDraft, normalize_word
from domain.model.errors import DomainError, DuplicateError, NotFoundError


class FakeRemoteEntryStore:
    """Behaves like the remote API: enforces its own uniqueness and ids.

    Set ``error`` to make the next calls fail with that domain error.
    """

    def __init__(self, entries: list[Entry] | None = None):
        self.rows: dict[str, Entry] = {e.id: e for e in entries or []}
        self.error: DomainError | None = None
        self.calls: list[tuple[str, str | None]] = []

    @property
    def is_remote(self) -> bool:
        return True

    def _check(self, operation: str, target: str | None = None) -> None:
        self.calls.append((operation, target))
        if self.error is not None:
            raise self.error

    def _taken(self, word: str, exclude_id: str | None = None) -> bool:
        key = normalize_word(word)
        return any(e.normalized_word == key and e.id != exclude_id for e in self.rows.values())

    async def create(self, draft: EntryDraft) -> Entry:
        self._check('create', draft.word)
        if self._taken(draft.word):
            raise DuplicateError("Word already exists")
        entry = Entry.create(draft)
        self.rows[entry.id] = entry
        return entry

    async def update(self, existing: Entry, draft: EntryDraft) -> Entry:
        self._check('update', existing.id)
        if existing.id not in self.rows:
            raise NotFoundError("Not found")
        if self._taken(draft.word, exclude_id=existing.id):
            raise DuplicateError("Word already exists")
        entry = self.rows[existing.id].revise(draft)
        self.rows[entry.id] = entry
        return entry

    async def delete(self, entry_id: str) -> None:
        self._check('delete', entry_id)
        if entry_id not in self.rows:
            raise NotFoundError("Not found")
        del self.rows[entry_id]

    async def fetch_all(self) -> list[Entry]:
        self._check('fetch_all')
        return sorted(self.rows.values(), key=lambda e: e.word)
