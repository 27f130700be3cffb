"""Unit tests for /api/entries routes."""

import os
import unittest
from unittest.mock import patch, MagicMock
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from fastapi.testclient import TestClient
from api.main import app
from api.dependencies import get_entry_repo
from adapter.fake.entry_repository import FakeEntryRepository
from domain.model.entry import EntryDraft

ENTRY_BODY = {"word": "mace", "definition": "animal", "illustration": "Macja po fle."}


class _RoutesTestCase(unittest.TestCase):

    def setUp(self):
        """Set up test client with an in-memory repository and open writes."""
        self.client = TestClient(app)
        self.repo = FakeEntryRepository()
        app.dependency_overrides[get_entry_repo] = lambda: self.repo
        self.env = patch.dict(os.environ, {"API_PASSPHRASE": "", "ALLOWED_ORIGIN": "*"})
        self.env.start()

    def tearDown(self):
        """Clean up dependency overrides."""
        app.dependency_overrides.clear()
        self.env.stop()


class TestListEntries(_RoutesTestCase):

    def test_empty(self):
        response = self.client.get("/api/entries")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"entries": []})

    def test_ordered_by_word_with_camel_case_timestamps(self):
        self.repo.create(EntryDraft("qen", "dog", "Qeni leh."))
        self.repo.create(EntryDraft("mace", "animal", "Macja po fle."))

        data = self.client.get("/api/entries").json()

        self.assertEqual([e["word"] for e in data["entries"]], ["mace", "qen"])
        entry = data["entries"][0]
        self.assertIn("createdAt", entry)
        self.assertIn("updatedAt", entry)
        self.assertNotIn("created_at", entry)
        self.assertIsNone(entry["recording"])


class TestCreateEntry(_RoutesTestCase):

    def test_create(self):
        response = self.client.post("/api/entries", json={**ENTRY_BODY, "word": "  mace "})

        self.assertEqual(response.status_code, 201)
        entry = response.json()["entry"]
        self.assertEqual(entry["word"], "mace")
        self.assertEqual(entry["createdAt"], entry["updatedAt"])
        self.assertIn(entry["id"], self.repo.store)

    def test_duplicate_word_case_insensitive(self):
        self.client.post("/api/entries", json=ENTRY_BODY)
        response = self.client.post("/api/entries", json={**ENTRY_BODY, "word": "MACE"})

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json(), {"error": "Word already exists"})

    def test_missing_fields(self):
        for body in ({"word": "mace"}, {**ENTRY_BODY, "illustration": "   "}, {}):
            with self.subTest(body=body):
                response = self.client.post("/api/entries", json=body)
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json(), {"error": "Missing required fields"})

    def test_no_body(self):
        response = self.client.post("/api/entries")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Missing required fields"})

    def test_wrong_field_type(self):
        response = self.client.post("/api/entries", json={**ENTRY_BODY, "word": 5})
        self.assertEqual(response.status_code, 400)
        self.assertIn("error", response.json())


class TestUpdateEntry(_RoutesTestCase):

    def setUp(self):
        super().setUp()
        self.mace = self.repo.create(EntryDraft("mace", "animal", "Macja po fle."))
        self.qen = self.repo.create(EntryDraft("qen", "dog", "Qeni leh."))

    def test_update(self):
        response = self.client.put(
            "/api/entries", params={"id": self.mace.id}, json={**ENTRY_BODY, "definition": "cat"},
        )

        self.assertEqual(response.status_code, 200)
        entry = response.json()["entry"]
        self.assertEqual(entry["definition"], "cat")
        self.assertEqual(entry["createdAt"], self.mace.created_at)

    def test_missing_id(self):
        response = self.client.put("/api/entries", json=ENTRY_BODY)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Missing id"})

    def test_unknown_id(self):
        response = self.client.put("/api/entries", params={"id": "missing"}, json=ENTRY_BODY)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"error": "Not found"})

    def test_word_taken_by_another_entry(self):
        response = self.client.put(
            "/api/entries", params={"id": self.qen.id}, json={**ENTRY_BODY, "word": "Mace"},
        )
        self.assertEqual(response.status_code, 409)
        self.assertEqual(self.repo.store[self.qen.id], self.qen)


class TestDeleteEntry(_RoutesTestCase):

    def test_delete(self):
        entry = self.repo.create(EntryDraft("mace", "animal", "x"))
        response = self.client.delete("/api/entries", params={"id": entry.id})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"ok": True})
        self.assertEqual(self.repo.store, {})

    def test_delete_unknown(self):
        response = self.client.delete("/api/entries", params={"id": "missing"})
        self.assertEqual(response.status_code, 404)

    def test_missing_id(self):
        response = self.client.delete("/api/entries")
        self.assertEqual(response.status_code, 400)


class TestPassphrase(_RoutesTestCase):

    def setUp(self):
        super().setUp()
        os.environ["API_PASSPHRASE"] = "secret"

    def test_write_without_passphrase_is_unauthorized(self):
        response = self.client.post("/api/entries", json=ENTRY_BODY)
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Unauthorized"})
        self.assertEqual(self.repo.store, {})

    def test_wrong_passphrase(self):
        response = self.client.delete(
            "/api/entries", params={"id": "x"}, headers={"X-Passphrase": "guess"},
        )
        self.assertEqual(response.status_code, 401)

    def test_correct_passphrase(self):
        response = self.client.post("/api/entries", json=ENTRY_BODY, headers={"X-Passphrase": "secret"})
        self.assertEqual(response.status_code, 201)

    def test_reads_are_open(self):
        response = self.client.get("/api/entries")
        self.assertEqual(response.status_code, 200)


class TestCORS(_RoutesTestCase):

    def test_preflight(self):
        response = self.client.options(
            "/api/entries",
            headers={"Origin": "https://app.example.com", "Access-Control-Request-Method": "POST"},
        )
        self.assertEqual(response.status_code, 204)
        self.assertEqual(response.headers["access-control-allow-origin"], "*")
        self.assertIn("X-Passphrase", response.headers["access-control-allow-headers"])
        self.assertIn("DELETE", response.headers["access-control-allow-methods"])

    def test_configured_origin_on_regular_response(self):
        os.environ["ALLOWED_ORIGIN"] = "https://app.example.com"
        response = self.client.get("/api/entries", headers={"Origin": "https://app.example.com"})
        self.assertEqual(response.headers["access-control-allow-origin"], "https://app.example.com")


class TestErrors(_RoutesTestCase):

    def test_unhandled_error_is_500_with_error_body(self):
        broken = MagicMock()
        broken.list_all.side_effect = RuntimeError("database exploded")
        app.dependency_overrides[get_entry_repo] = lambda: broken
        client = TestClient(app, raise_server_exceptions=False)

        response = client.get("/api/entries", headers={"Origin": "https://app.example.com"})

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "database exploded"})
        self.assertEqual(response.headers["access-control-allow-origin"], "*")

    def test_unsupported_method(self):
        response = self.client.patch("/api/entries", json=ENTRY_BODY)
        self.assertEqual(response.status_code, 405)
        self.assertIn("error", response.json())

    @patch('api.dependencies.get_mongodb_client', return_value=None)
    def test_database_unavailable(self, _mock_client):
        app.dependency_overrides.clear()
        response = self.client.get("/api/entries")
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json(), {"error": "Database unavailable"})


class TestServiceEndpoints(unittest.TestCase):

    def setUp(self):
        self.client = TestClient(app)

    def test_root(self):
        data = self.client.get("/").json()
        self.assertEqual(data["status"], "running")
        self.assertIn("version", data)

    @patch('api.routes.health.get_mongodb_client')
    def test_health_ok(self, mock_get_client):
        mock_get_client.return_value = MagicMock()
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["services"]["mongodb"]["status"], "healthy")

    @patch('api.routes.health.get_mongodb_client', return_value=None)
    def test_health_degraded(self, _mock_client):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["status"], "degraded")


if __name__ == '__main__':
    unittest.main()
