"""Port for server-side entry persistence behind the HTTP API."""

from typing import Protocol

from domain.model.entry import Entry, EntryDraft


class EntryRepository(Protocol):
    """Protocol for the API's entry table (CRUD with a unique normalized word)."""

    def list_all(self) -> list[Entry]:
        """All entries ordered by word ascending."""
        ...

    def create(self, draft: EntryDraft) -> Entry:
        """Insert a new entry. Raises DuplicateError on a normalized-word collision."""
        ...

    def update(self, entry_id: str, draft: EntryDraft) -> Entry | None:
        """Overwrite an entry's fields. Returns None if the id is unknown.

        Raises DuplicateError when the word collides with a different row.
        """
        ...

    def delete(self, entry_id: str) -> bool:
        """Delete an entry. Returns True if deleted, False if not found."""
        ...
