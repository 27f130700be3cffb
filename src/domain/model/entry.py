"""Dictionary entry domain models."""

import time
import unicodedata
import uuid
from dataclasses import dataclass, replace
from typing import Any

from domain.model.errors import ValidationError

SCHEMA_VERSION = 1


def now_ms() -> int:
    """Current time in milliseconds since epoch."""
    return int(time.time() * 1000)


def normalize_word(word: str) -> str:
    """Key used for uniqueness comparison: trimmed and lowercased."""
    return word.strip().lower()


def collation_key(word: str) -> tuple[str, str, str]:
    """Sort key comparing base letters first, ignoring accents and case.

    "Ç" folds to "c" and therefore sorts next to "C"; ties are broken
    by the case-folded word and finally the raw word for a stable order.
    """
    decomposed = unicodedata.normalize('NFKD', word)
    base = ''.join(c for c in decomposed if not unicodedata.combining(c))
    return base.casefold(), word.casefold(), word


@dataclass(frozen=True)
class EntryDraft:
    """Mutable fields of an entry as submitted by a user or an import file."""
    word: str
    definition: str
    illustration: str
    recording: str | None = None

    def normalized(self) -> 'EntryDraft':
        """Return a copy with text fields trimmed and empty recordings dropped."""
        return EntryDraft(
            word=self.word.strip(),
            definition=self.definition.strip(),
            illustration=self.illustration.strip(),
            recording=self.recording or None,
        )

    @property
    def normalized_word(self) -> str:
        return normalize_word(self.word)

    def to_payload(self) -> dict:
        return {
            'word': self.word,
            'definition': self.definition,
            'illustration': self.illustration,
            'recording': self.recording,
        }


@dataclass(frozen=True)
class Entry:
    """A single dictionary entry."""
    id: str
    word: str
    definition: str
    illustration: str
    created_at: int
    updated_at: int
    recording: str | None = None

    # ── factory ───────────────────────────────────────────

    @staticmethod
    def create(draft: EntryDraft, timestamp: int | None = None) -> 'Entry':
        """Create a new Entry with a generated id and both timestamps set."""
        ts = timestamp if timestamp is not None else now_ms()
        return Entry(
            id=str(uuid.uuid4()),
            word=draft.word,
            definition=draft.definition,
            illustration=draft.illustration,
            recording=draft.recording,
            created_at=ts,
            updated_at=ts,
        )

    # ── queries ───────────────────────────────────────────

    @property
    def normalized_word(self) -> str:
        return normalize_word(self.word)

    @property
    def has_recording(self) -> bool:
        return bool(self.recording)

    # ── transitions ───────────────────────────────────────

    def revise(self, draft: EntryDraft, timestamp: int | None = None) -> 'Entry':
        """Return a copy with the mutable fields replaced and updated_at refreshed."""
        return replace(
            self,
            word=draft.word,
            definition=draft.definition,
            illustration=draft.illustration,
            recording=draft.recording,
            updated_at=timestamp if timestamp is not None else now_ms(),
        )

    # ── serialization ─────────────────────────────────────

    def to_record(self) -> dict:
        """Serialize to the camelCase record shape used on disk and on the wire."""
        return {
            'id': self.id,
            'word': self.word,
            'definition': self.definition,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
            'illustration': self.illustration,
            'recording': self.recording,
        }

    @classmethod
    def from_record(cls, record: Any) -> 'Entry':
        """Parse a camelCase record. Raises ValidationError on a malformed record.

        Older records may lack illustration or recording; those default to
        an empty string and None respectively.
        """
        if not isinstance(record, dict):
            raise ValidationError("Entry record must be an object")
        entry_id = record.get('id')
        word = record.get('word')
        if not isinstance(entry_id, str) or not entry_id:
            raise ValidationError("Entry record is missing an id")
        if not isinstance(word, str) or not word.strip():
            raise ValidationError("Entry record is missing a word")
        try:
            created_at = int(record.get('createdAt') or 0)
            updated_at = int(record.get('updatedAt') or created_at)
        except (TypeError, ValueError):
            raise ValidationError("Entry record has invalid timestamps")
        return cls(
            id=entry_id,
            word=word,
            definition=str(record.get('definition') or ''),
            illustration=str(record.get('illustration') or ''),
            recording=record.get('recording') or None,
            created_at=created_at,
            updated_at=updated_at,
        )


@dataclass
class DataSchema:
    """Versioned snapshot of the whole collection.

    Same shape for the local persisted blob and the import/export file.
    """
    version: int
    entries: list[dict]

    @classmethod
    def empty(cls) -> 'DataSchema':
        return cls(version=SCHEMA_VERSION, entries=[])

    @classmethod
    def from_entries(cls, entries: list[Entry]) -> 'DataSchema':
        return cls(version=SCHEMA_VERSION, entries=[e.to_record() for e in entries])

    def to_dict(self) -> dict:
        return {'version': self.version, 'entries': self.entries}
