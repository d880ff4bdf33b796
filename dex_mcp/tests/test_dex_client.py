"""
Unit tests for the Dex API client.

Note: These tests mock aiohttp and don't require a Dex account.
"""

import asyncio
import unittest
from unittest.mock import AsyncMock, patch
import aiohttp

from dex_mcp.dex.client import (
    API_KEY_HEADER,
    DexAPIError,
    DexClient,
    DexConnectionError,
    DexNotFoundError,
    fetch_all_contacts,
)
from dex_mcp.tests.fakes import FakeDexClient
from dex_mcp.models import DexContact

BASE_URL = "https://api.example.test/api/rest"


def json_response(payload, status=200):
    """Build a mock aiohttp response returning payload as JSON."""
    mock_response = AsyncMock()
    mock_response.status = status
    mock_response.json = AsyncMock(return_value=payload)
    mock_response.text = AsyncMock(return_value="" if payload is None else str(payload))
    return mock_response


class TestDexClientInit(unittest.TestCase):
    """Test client construction."""

    def test_missing_api_key(self):
        with self.assertRaises(ValueError):
            DexClient(api_key="", base_url=BASE_URL, timeout=5)

    def test_base_url_trailing_slash(self):
        client = DexClient(api_key="key", base_url=BASE_URL + "/", timeout=5)
        self.assertEqual(client.base_url, BASE_URL)
        self.assertIsNone(client.session)


class TestDexClient(unittest.IsolatedAsyncioTestCase):
    """Test DexClient requests."""

    async def asyncSetUp(self):
        """Set up test fixtures."""
        self.client = DexClient(api_key="test-key", base_url=BASE_URL, timeout=5)

    async def asyncTearDown(self):
        """Clean up after tests."""
        await self.client.close()

    async def test_session_has_api_key_header(self):
        await self.client._ensure_session()
        self.assertIsInstance(self.client.session, aiohttp.ClientSession)
        self.assertEqual(self.client.session.headers[API_KEY_HEADER], "test-key")

    async def test_context_manager(self):
        async with DexClient(api_key="k", base_url=BASE_URL, timeout=5) as client:
            self.assertIsNotNone(client.session)
        self.assertTrue(client.session.closed)

    @patch("aiohttp.ClientSession.request")
    async def test_list_contacts(self, mock_request):
        mock_request.return_value.__aenter__.return_value = json_response({
            "contacts": [
                {"id": "c1", "first_name": "Jane", "last_name": "Doe", "emails": None},
                {"id": "c2", "first_name": "John", "last_name": "Smith", "custom": 1},
            ]
        })

        contacts = await self.client.list_contacts(limit=2, offset=10)

        self.assertEqual([c.id for c in contacts], ["c1", "c2"])
        self.assertEqual(contacts[0].emails, [])
        args, kwargs = mock_request.call_args
        self.assertEqual(args, ("GET", f"{BASE_URL}/contacts"))
        self.assertEqual(kwargs["params"], {"limit": "2", "offset": "10"})

    @patch("aiohttp.ClientSession.request")
    async def test_list_contacts_null_email_and_phone(self, mock_request):
        mock_request.return_value.__aenter__.return_value = json_response({
            "contacts": [{
                "id": "a",
                "first_name": "Ann",
                "emails": [{"email": None}],
                "phones": [{"phone_number": None}],
            }]
        })

        contacts = await self.client.list_contacts()

        self.assertEqual(contacts[0].emails[0].email, "")
        self.assertEqual(contacts[0].phones[0].phone_number, "")

    @patch("aiohttp.ClientSession.request")
    async def test_get_contact_not_found(self, mock_request):
        mock_request.return_value.__aenter__.return_value = json_response(
            {"error": "not found"}, status=404
        )

        with self.assertRaises(DexNotFoundError) as ctx:
            await self.client.get_contact("missing")
        self.assertEqual(ctx.exception.status_code, 404)

    @patch("aiohttp.ClientSession.request")
    async def test_get_contact_wrapped(self, mock_request):
        mock_request.return_value.__aenter__.return_value = json_response(
            {"contacts": [{"id": "c1", "first_name": "Jane"}]}
        )

        contact = await self.client.get_contact("c1")
        self.assertEqual(contact.first_name, "Jane")

    @patch("aiohttp.ClientSession.request")
    async def test_server_error(self, mock_request):
        mock_request.return_value.__aenter__.return_value = json_response(
            {"message": "boom"}, status=500
        )

        with self.assertRaises(DexAPIError) as ctx:
            await self.client.get_notes()
        self.assertEqual(ctx.exception.status_code, 500)
        self.assertIn("Dex API error: 500", str(ctx.exception))
        self.assertNotIsInstance(ctx.exception, DexNotFoundError)

    @patch("aiohttp.ClientSession.request")
    async def test_connection_error(self, mock_request):
        mock_request.side_effect = aiohttp.ClientConnectionError("Connection refused")

        with self.assertRaises(DexConnectionError):
            await self.client.list_contacts()

    @patch("aiohttp.ClientSession.request")
    async def test_timeout(self, mock_request):
        mock_request.side_effect = asyncio.TimeoutError()

        with self.assertRaises(DexConnectionError):
            await self.client.get_reminders()

    @patch("aiohttp.ClientSession.request")
    async def test_check_connection(self, mock_request):
        mock_request.return_value.__aenter__.return_value = json_response({"contacts": []})
        self.assertTrue(await self.client.check_connection())

        mock_request.side_effect = aiohttp.ClientConnectionError("down")
        self.assertFalse(await self.client.check_connection())

    @patch("aiohttp.ClientSession.request")
    async def test_search_contact_by_email(self, mock_request):
        mock_request.return_value.__aenter__.return_value = json_response({
            "search_contacts_by_exact_email": [{"id": "c1", "first_name": "Jane"}]
        })

        contacts = await self.client.search_contact_by_email("jane@example.com")

        self.assertEqual(contacts[0].id, "c1")
        self.assertEqual(mock_request.call_args.kwargs["params"], {"email": "jane@example.com"})

    @patch("aiohttp.ClientSession.request")
    async def test_get_notes_for_contact(self, mock_request):
        mock_request.return_value.__aenter__.return_value = json_response({
            "timeline_items": [
                {"id": "n1", "note": "<p>Hi</p>", "event_time": "2024-01-01T00:00:00Z",
                 "contacts": [{"contact_id": "c1"}]},
            ]
        })

        notes = await self.client.get_notes("c1")

        self.assertEqual(notes[0].contact_id_list, ["c1"])
        self.assertEqual(mock_request.call_args.args[1], f"{BASE_URL}/timeline_items/contacts/c1")

    @patch("aiohttp.ClientSession.request")
    async def test_get_reminders_filters_by_contact(self, mock_request):
        mock_request.return_value.__aenter__.return_value = json_response({
            "reminders": [
                {"id": "r1", "body": "A", "contact_ids": [{"contact_id": "c1"}]},
                {"id": "r2", "body": "B", "contact_ids": [{"contact_id": "c2"}]},
                {"id": "r3", "body": "C", "is_complete": None, "contact_ids": None},
            ]
        })

        reminders = await self.client.get_reminders("c2")
        self.assertEqual([r.id for r in reminders], ["r2"])

    @patch("aiohttp.ClientSession.request")
    async def test_create_note(self, mock_request):
        mock_request.return_value.__aenter__.return_value = json_response({
            "insert_timeline_items_one": {
                "id": "n9",
                "note": "Met for coffee",
                "event_time": "2024-05-01T10:00:00Z",
                "meeting_type": "note",
                "timeline_items_contacts": [{"contact": {"id": "c1"}}],
            }
        })

        note = await self.client.create_note("Met for coffee", ["c1"], event_time="2024-05-01T10:00:00Z")

        self.assertEqual(note.id, "n9")
        self.assertEqual(note.contact_id_list, ["c1"])
        body = mock_request.call_args.kwargs["json"]["timeline_event"]
        self.assertEqual(body["meeting_type"], "note")
        self.assertEqual(body["timeline_items_contacts"]["data"], [{"contact_id": "c1"}])

    @patch("aiohttp.ClientSession.request")
    async def test_create_note_defaults_event_time(self, mock_request):
        mock_request.return_value.__aenter__.return_value = json_response({
            "insert_timeline_items_one": {"id": "n1"}
        })

        note = await self.client.create_note("Hello", ["c1"])

        sent_time = mock_request.call_args.kwargs["json"]["timeline_event"]["event_time"]
        self.assertTrue(sent_time)
        self.assertEqual(note.event_time, sent_time)
        self.assertEqual(note.note, "Hello")

    @patch("aiohttp.ClientSession.request")
    async def test_create_reminder_uses_text_field(self, mock_request):
        mock_request.return_value.__aenter__.return_value = json_response({
            "insert_reminders_one": {"id": "r5", "text": "Call back", "due_at_date": "2024-06-01"}
        })

        reminder = await self.client.create_reminder("Call back", "2024-06-01", ["c1"])

        self.assertEqual(reminder.body, "Call back")
        self.assertFalse(reminder.is_complete)
        sent = mock_request.call_args.kwargs["json"]["reminder"]
        self.assertEqual(sent["text"], "Call back")
        self.assertEqual(sent["reminders_contacts"]["data"], [{"contact_id": "c1"}])

    @patch("aiohttp.ClientSession.request")
    async def test_update_reminder_sends_only_changes(self, mock_request):
        mock_request.return_value.__aenter__.return_value = json_response({
            "update_reminders_by_pk": {"id": "r1", "body": "Done", "is_complete": True}
        })

        reminder = await self.client.update_reminder("r1", is_complete=True)

        self.assertTrue(reminder.is_complete)
        self.assertEqual(
            mock_request.call_args.kwargs["json"],
            {"changes": {"is_complete": True}, "update_contacts": False},
        )

    @patch("aiohttp.ClientSession.request")
    async def test_delete_empty_body(self, mock_request):
        mock_request.return_value.__aenter__.return_value = json_response(None, status=204)

        await self.client.delete_note("n1")
        self.assertEqual(mock_request.call_args.args[0], "DELETE")


class TestFetchAllContacts(unittest.IsolatedAsyncioTestCase):
    """Test contact pagination."""

    async def test_stops_on_short_page(self):
        client = FakeDexClient([DexContact(id=str(i)) for i in range(205)])

        contacts = await fetch_all_contacts(client)

        self.assertEqual(len(contacts), 205)
        self.assertEqual(client.calls["list_contacts"], 3)

    async def test_exact_multiple_needs_extra_page(self):
        client = FakeDexClient([DexContact(id=str(i)) for i in range(200)])

        contacts = await fetch_all_contacts(client)

        self.assertEqual(len(contacts), 200)
        self.assertEqual(client.calls["list_contacts"], 3)


if __name__ == "__main__":
    unittest.main()
