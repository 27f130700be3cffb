"""Port for the entry manager's mutation strategy (local or cloud)."""

from typing import Protocol

from domain.model.entry import Entry, EntryDraft


class EntryStore(Protocol):
    """Where entry mutations are authored.

    Implementations return the canonical record for the entry manager to
    absorb; they never touch the manager's collection themselves. Failures
    are raised as DomainError subclasses.
    """

    @property
    def is_remote(self) -> bool:
        """True when the store mirrors a remote API (cloud mode)."""
        ...

    async def create(self, draft: EntryDraft) -> Entry:
        """Create a new entry from an already validated draft."""
        ...

    async def update(self, existing: Entry, draft: EntryDraft) -> Entry:
        """Replace the mutable fields of ``existing``. Returns the stored record."""
        ...

    async def delete(self, entry_id: str) -> None:
        """Delete an entry. Raises NotFoundError if the store reports it missing."""
        ...

    async def fetch_all(self) -> list[Entry]:
        """Return every entry held by the store."""
        ...
