"""Local-only implementation of EntryStore.

Records are authored on the device: ids and timestamps are assigned here.
Persistence itself is handled by LocalStore after the entry manager has
absorbed the result.
"""

from domain.model.entry import Entry, EntryDraft
from domain.model.errors import NotConfiguredError


class LocalEntryStore:
    @property
    def is_remote(self) -> bool:
        return False

    async def create(self, draft: EntryDraft) -> Entry:
        return Entry.create(draft)

    async def update(self, existing: Entry, draft: EntryDraft) -> Entry:
        return existing.revise(draft)

    async def delete(self, entry_id: str) -> None:
        return None

    async def fetch_all(self) -> list[Entry]:
        raise NotConfiguredError()
