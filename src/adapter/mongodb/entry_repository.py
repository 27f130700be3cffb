"""MongoDB implementation of EntryRepository."""

from logging import getLogger

from pymongo import ASCENDING, ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from adapter.mongodb import ENTRIES_COLLECTION_NAME
from domain.model.entry import Entry, EntryDraft, now_ms
from domain.model.errors import DuplicateError

logger = getLogger(__name__)

WORD_UNIQUE_INDEX = 'idx_entries_word_normalized_unique'


class MongoEntryRepository:
    def __init__(self, db: Database):
        self.collection = db[ENTRIES_COLLECTION_NAME]

    # ── indexes ────────────────────────────────────────────────

    def ensure_indexes(self) -> bool:
        """Create the case-insensitive uniqueness index and the listing index."""
        try:
            self.collection.create_index(
                [('word_normalized', ASCENDING)], name=WORD_UNIQUE_INDEX, unique=True,
            )
            self.collection.create_index([('word', ASCENDING)], name='idx_entries_word')
            return True
        except PyMongoError as e:
            logger.error("Failed to create dictionary_entries indexes", extra={"error": str(e)})
            return False

    # ── mapping ───────────────────────────────────────────────

    def _to_domain(self, doc: dict) -> Entry:
        return Entry(
            id=doc['_id'],
            word=doc['word'],
            definition=doc['definition'],
            illustration=doc.get('illustration') or '',
            recording=doc.get('recording'),
            created_at=int(doc['created_at']),
            updated_at=int(doc['updated_at']),
        )

    def _fields(self, draft: EntryDraft) -> dict:
        return {
            'word': draft.word,
            'word_normalized': draft.normalized_word,
            'definition': draft.definition,
            'illustration': draft.illustration,
            'recording': draft.recording,
        }

    # ── CRUD ──────────────────────────────────────────────────

    def list_all(self) -> list[Entry]:
        docs = self.collection.find().sort('word', ASCENDING)
        return [self._to_domain(doc) for doc in docs]

    def create(self, draft: EntryDraft) -> Entry:
        entry = Entry.create(draft)
        doc = {
            '_id': entry.id,
            **self._fields(draft),
            'created_at': entry.created_at,
            'updated_at': entry.updated_at,
        }
        try:
            self.collection.insert_one(doc)
        except DuplicateKeyError:
            raise DuplicateError("Word already exists")
        logger.info("Entry saved", extra={"entryId": entry.id, "word": entry.word})
        return entry

    def update(self, entry_id: str, draft: EntryDraft) -> Entry | None:
        try:
            doc = self.collection.find_one_and_update(
                {'_id': entry_id},
                {'$set': {**self._fields(draft), 'updated_at': now_ms()}},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            raise DuplicateError("Word already exists")
        return self._to_domain(doc) if doc else None

    def delete(self, entry_id: str) -> bool:
        result = self.collection.delete_one({'_id': entry_id})
        return result.deleted_count > 0
