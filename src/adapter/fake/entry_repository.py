"""In-memory implementation of EntryRepository for testing."""

from domain.model.entry import Entry, EntryDraft, normalize_word
from domain.model.errors import DuplicateError


class FakeEntryRepository:
    def __init__(self):
        self.store: dict[str, Entry] = {}

    def _check_unique(self, word: str, exclude_id: str | None = None) -> None:
        key = normalize_word(word)
        for entry in self.store.values():
            if entry.normalized_word == key and entry.id != exclude_id:
                raise DuplicateError("Word already exists")

    def list_all(self) -> list[Entry]:
        return sorted(self.store.values(), key=lambda e: e.word)

    def create(self, draft: EntryDraft) -> Entry:
        self._check_unique(draft.word)
        entry = Entry.create(draft)
        self.store[entry.id] = entry
        return entry

    def update(self, entry_id: str, draft: EntryDraft) -> Entry | None:
        existing = self.store.get(entry_id)
        if existing is None:
            return None
        self._check_unique(draft.word, exclude_id=entry_id)
        entry = existing.revise(draft)
        self.store[entry_id] = entry
        return entry

    def delete(self, entry_id: str) -> bool:
        return self.store.pop(entry_id, None) is not None
