"""
Tests for the HTTP API endpoints.
"""

import unittest
from fastapi.testclient import TestClient

from dex_mcp.dependencies import get_discovery_tools, get_history_tools
from dex_mcp.dex.client import DexAPIError, DexConnectionError
from dex_mcp.main import app
from dex_mcp.services.discovery import ContactDiscoveryTools
from dex_mcp.services.history import RelationshipHistoryTools
from dex_mcp.tests.fakes import (
    FakeDexClient,
    sample_contacts,
    sample_notes,
    sample_reminders,
)


class APITestCase(unittest.TestCase):
    """Base class wiring the app to services backed by a fake client."""

    def setUp(self):
        """Set up test client."""
        self.dex = FakeDexClient(sample_contacts(), sample_notes(), sample_reminders())
        self.discovery = ContactDiscoveryTools(self.dex)
        self.history = RelationshipHistoryTools(self.dex)
        app.dependency_overrides[get_discovery_tools] = lambda: self.discovery
        app.dependency_overrides[get_history_tools] = lambda: self.history
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()


class TestRootAPI(APITestCase):
    """Test service endpoints."""

    def test_root(self):
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "running")

    def test_health(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "healthy"})


class TestContactsAPI(APITestCase):
    """Test contact endpoints."""

    def test_find_contact_by_email(self):
        response = self.client.post("/api/contacts/find", json={"email": "jane.doe@example.com"})

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data[0]["contact"]["id"], "c1")
        self.assertEqual(data[0]["confidence"], 100)

    def test_find_contact_requires_parameters(self):
        response = self.client.post("/api/contacts/find", json={"company": "Acme"})

        self.assertEqual(response.status_code, 400)
        self.assertIn("At least one search parameter", response.json()["detail"])

    def test_find_contact_dex_unreachable(self):
        async def down(limit=100, offset=0):
            raise DexConnectionError("No response received from Dex API")

        self.dex.list_contacts = down
        response = self.client.post("/api/contacts/find", json={"name": "Jane"})
        self.assertEqual(response.status_code, 503)

    def test_get_contact(self):
        response = self.client.get("/api/contacts/c3")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["last_name"], "StClaire")

    def test_get_contact_not_found(self):
        response = self.client.get("/api/contacts/unknown")
        self.assertEqual(response.status_code, 404)

    def test_history(self):
        response = self.client.get(
            "/api/contacts/c2/history", params={"include_reminders": "false"}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual([item["id"] for item in response.json()], ["n3", "n2"])

    def test_notes(self):
        response = self.client.get("/api/contacts/c2/notes", params={"limit": 1})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()), 1)

    def test_reminders_status(self):
        response = self.client.get("/api/contacts/c3/reminders", params={"status": "active"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), [])

        response = self.client.get("/api/contacts/c3/reminders", params={"status": "bogus"})
        self.assertEqual(response.status_code, 422)


class TestSearchAPI(APITestCase):
    """Test full-text search endpoints."""

    def test_search(self):
        response = self.client.post("/api/search", json={"query": "Anthropic"})

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data[0]["contact"]["id"], "c3")
        self.assertIn("**", data[0]["match_context"][0]["snippet"])

    def test_empty_query(self):
        response = self.client.post("/api/search", json={"query": "   "})
        self.assertEqual(response.status_code, 400)

    def test_invalid_document_type(self):
        response = self.client.post(
            "/api/search", json={"query": "x y", "document_types": ["email"]}
        )
        self.assertEqual(response.status_code, 422)

    def test_dex_error(self):
        async def broken(contact_id=None):
            raise DexAPIError("Dex API error: 500 - boom", status_code=500)

        self.dex.get_notes = broken
        response = self.client.post("/api/search", json={"query": "robotics"})
        self.assertEqual(response.status_code, 502)

    def test_stats(self):
        self.client.post("/api/search", json={"query": "robotics"})
        response = self.client.get("/api/search/stats")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["contact_count"], 3)


if __name__ == "__main__":
    unittest.main()
