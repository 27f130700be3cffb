"""Unit tests for LocalStore and FileKeyValueStorage.

LocalStore must never fail observably: every malformed blob loads as an
empty schema and write errors are dropped.
"""

import json
import tempfile
import unittest
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from adapter.fake.key_value_storage import FakeKeyValueStorage
from adapter.local.entry_store import LocalEntryStore
from adapter.local.key_value_storage import FileKeyValueStorage
from adapter.local.local_store import STORAGE_KEY, LocalStore
from domain.model.entry import DataSchema, Entry, EntryDraft
from domain.model.errors import NotConfiguredError


def record(word='mace') -> dict:
    return Entry.create(EntryDraft(word, 'animal', 'x'), timestamp=1).to_record()


class TestLocalStoreLoad(unittest.TestCase):

    def load_raw(self, raw) -> DataSchema:
        storage = FakeKeyValueStorage({STORAGE_KEY: raw} if raw is not None else {})
        return LocalStore(storage).load()

    def test_missing_blob_is_empty(self):
        self.assertEqual(self.load_raw(None), DataSchema.empty())

    def test_valid_blob(self):
        schema = self.load_raw(json.dumps({'version': 1, 'entries': [record()]}))
        self.assertEqual(schema.version, 1)
        self.assertEqual(schema.entries[0]['word'], 'mace')

    def test_malformed_blobs_degrade_to_empty(self):
        cases = [
            '{broken',
            '[]',
            json.dumps({'entries': []}),
            json.dumps({'version': '1', 'entries': []}),
            json.dumps({'version': True, 'entries': []}),
            json.dumps({'version': 1, 'entries': {}}),
            json.dumps({'version': 1}),
        ]
        for raw in cases:
            with self.subTest(raw=raw):
                self.assertEqual(self.load_raw(raw), DataSchema.empty())

    def test_integral_float_version_is_accepted(self):
        schema = self.load_raw(json.dumps({'version': 1.0, 'entries': [record()]}))
        self.assertEqual(schema.version, 1)
        self.assertEqual(len(schema.entries), 1)

    def test_older_version_collapses_to_empty_current(self):
        schema = self.load_raw(json.dumps({'version': 0, 'entries': [record()]}))
        self.assertEqual(schema, DataSchema.empty())


class TestLocalStoreSave(unittest.TestCase):

    def test_save_then_load(self):
        storage = FakeKeyValueStorage()
        store = LocalStore(storage)
        schema = DataSchema(version=1, entries=[record('çaj')])

        store.save(schema)

        self.assertEqual(store.load(), schema)

    def test_write_failure_is_swallowed(self):
        storage = FakeKeyValueStorage()
        storage.fail_writes = True
        LocalStore(storage).save(DataSchema.empty())
        self.assertEqual(storage.items, {})


class TestFileKeyValueStorage(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.storage = FileKeyValueStorage(Path(self.tmp.name) / 'data')

    def tearDown(self):
        self.tmp.cleanup()

    def test_missing_key(self):
        self.assertIsNone(self.storage.get_item(STORAGE_KEY))

    def test_set_get_remove(self):
        self.storage.set_item(STORAGE_KEY, '{"version": 1}')
        self.assertEqual(self.storage.get_item(STORAGE_KEY), '{"version": 1}')
        self.assertTrue((self.storage.directory / f"{STORAGE_KEY}.json").exists())

        self.storage.remove_item(STORAGE_KEY)
        self.assertIsNone(self.storage.get_item(STORAGE_KEY))

    def test_rejects_path_like_keys(self):
        with self.assertRaises(ValueError):
            self.storage.get_item('../outside')


class TestLocalEntryStore(unittest.IsolatedAsyncioTestCase):

    async def test_create_and_update_assign_timestamps(self):
        store = LocalEntryStore()
        created = await store.create(EntryDraft('mace', 'animal', 'x'))
        updated = await store.update(created, EntryDraft('mace', 'cat', 'y'))

        self.assertFalse(store.is_remote)
        self.assertEqual(updated.id, created.id)
        self.assertEqual(updated.created_at, created.created_at)
        self.assertEqual(updated.definition, 'cat')

    async def test_fetch_all_is_not_configured(self):
        with self.assertRaises(NotConfiguredError):
            await LocalEntryStore().fetch_all()


if __name__ == '__main__':
    unittest.main()
