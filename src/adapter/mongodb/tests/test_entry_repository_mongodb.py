"""Tests for MongoEntryRepository with a mocked collection."""

import unittest
from unittest.mock import MagicMock
import sys
from pathlib import Path
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from adapter.mongodb import ENTRIES_COLLECTION_NAME
from adapter.mongodb.entry_repository import MongoEntryRepository, WORD_UNIQUE_INDEX
from domain.model.entry import EntryDraft
from domain.model.errors import DuplicateError


def make_doc(**overrides) -> dict:
    doc = {
        '_id': 'e1',
        'word': 'Mace',
        'word_normalized': 'mace',
        'definition': 'animal',
        'illustration': 'Macja po fle.',
        'recording': None,
        'created_at': 1000,
        'updated_at': 2000,
    }
    doc.update(overrides)
    return doc


class TestMongoEntryRepository(unittest.TestCase):

    def setUp(self):
        self.collection = MagicMock()
        self.db = MagicMock()
        self.db.__getitem__.return_value = self.collection
        self.repo = MongoEntryRepository(self.db)

    def test_uses_entries_collection(self):
        self.db.__getitem__.assert_called_once_with(ENTRIES_COLLECTION_NAME)

    def test_ensure_indexes_creates_unique_word_index(self):
        self.assertTrue(self.repo.ensure_indexes())
        first_call = self.collection.create_index.call_args_list[0]
        self.assertEqual(first_call.args[0], [('word_normalized', 1)])
        self.assertEqual(first_call.kwargs['name'], WORD_UNIQUE_INDEX)
        self.assertTrue(first_call.kwargs['unique'])

    def test_ensure_indexes_failure(self):
        self.collection.create_index.side_effect = PyMongoError("boom")
        self.assertFalse(self.repo.ensure_indexes())

    def test_list_all_maps_documents(self):
        self.collection.find.return_value.sort.return_value = [make_doc(), make_doc(_id='e2', illustration=None)]

        entries = self.repo.list_all()

        self.collection.find.return_value.sort.assert_called_once_with('word', 1)
        self.assertEqual([e.id for e in entries], ['e1', 'e2'])
        self.assertEqual(entries[0].created_at, 1000)
        self.assertEqual(entries[1].illustration, '')

    def test_create_stores_normalized_word(self):
        entry = self.repo.create(EntryDraft('Mace', 'animal', 'x'))

        doc = self.collection.insert_one.call_args.args[0]
        self.assertEqual(doc['_id'], entry.id)
        self.assertEqual(doc['word'], 'Mace')
        self.assertEqual(doc['word_normalized'], 'mace')
        self.assertEqual(doc['created_at'], doc['updated_at'])

    def test_create_duplicate(self):
        self.collection.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key")
        with self.assertRaises(DuplicateError):
            self.repo.create(EntryDraft('mace', 'animal', 'x'))

    def test_update_returns_updated_entry(self):
        self.collection.find_one_and_update.return_value = make_doc(definition='cat')

        entry = self.repo.update('e1', EntryDraft('Mace', 'cat', 'x'))

        self.assertEqual(entry.definition, 'cat')
        args, kwargs = self.collection.find_one_and_update.call_args
        self.assertEqual(args[0], {'_id': 'e1'})
        self.assertEqual(args[1]['$set']['word_normalized'], 'mace')
        self.assertIn('updated_at', args[1]['$set'])
        self.assertNotIn('created_at', args[1]['$set'])
        self.assertEqual(kwargs['return_document'], ReturnDocument.AFTER)

    def test_update_missing(self):
        self.collection.find_one_and_update.return_value = None
        self.assertIsNone(self.repo.update('missing', EntryDraft('mace', 'animal', 'x')))

    def test_update_duplicate(self):
        self.collection.find_one_and_update.side_effect = DuplicateKeyError("E11000 duplicate key")
        with self.assertRaises(DuplicateError):
            self.repo.update('e1', EntryDraft('qen', 'dog', 'x'))

    def test_delete(self):
        self.collection.delete_one.return_value.deleted_count = 1
        self.assertTrue(self.repo.delete('e1'))
        self.collection.delete_one.return_value.deleted_count = 0
        self.assertFalse(self.repo.delete('e1'))


if __name__ == '__main__':
    unittest.main()
