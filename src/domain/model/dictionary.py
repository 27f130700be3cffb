"""Value objects describing the state and outcomes of the entry manager."""

from dataclasses import dataclass
from enum import Enum

from domain.model.entry import Entry
from domain.model.errors import DomainError


class SortOrder(str, Enum):
    """Ordering of the visible entry list."""
    ALPHABETICAL = 'alphabetical'
    NEWEST = 'newest'


class ImportStrategy(str, Enum):
    """How an imported item whose word already exists is handled."""
    SKIP = 'skip'
    OVERWRITE = 'overwrite'
    KEEP_BOTH = 'keepBoth'


class CloudStatus(str, Enum):
    """Cloud sync status shown in the UI."""
    DISABLED = 'disabled'
    SYNCING = 'syncing'
    READY = 'ready'
    ERROR = 'error'


@dataclass(frozen=True)
class ImportResult:
    """Counters reported back to the UI after an import."""
    added: int = 0
    skipped: int = 0
    overwritten: int = 0

    @property
    def summary(self) -> str:
        return f"Imported: {self.added} added, {self.overwritten} overwritten, {self.skipped} skipped."


@dataclass(frozen=True)
class OperationResult:
    """Outcome of a mutating entry manager call.

    Callers branch on ``success`` and show ``message`` on failure.
    """
    success: bool
    error: DomainError | None = None
    entry: Entry | None = None

    @classmethod
    def ok(cls, entry: Entry | None = None) -> 'OperationResult':
        return cls(success=True, entry=entry)

    @classmethod
    def fail(cls, error: DomainError) -> 'OperationResult':
        return cls(success=False, error=error)

    @property
    def message(self) -> str | None:
        return self.error.message if self.error else None
