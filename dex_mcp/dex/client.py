"""
Async client for the Dex CRM REST API.

Wraps the contact, timeline note and reminder endpoints of
https://api.getdex.com/api/rest and converts responses into the models in
dex_mcp.models. Requests are never retried; failures raise DexAPIError or
one of its subclasses.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Optional
import aiohttp

from dex_mcp.models.contact import DexContact, DexNote, DexReminder

logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-hasura-dex-api-key"
DEFAULT_PAGE_SIZE = 100


class DexAPIError(Exception):
    """Raised when the Dex API returns an error response."""

    def __init__(self, message: str, status_code: Optional[int] = None, detail: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class DexNotFoundError(DexAPIError):
    """Raised when a contact, note or reminder does not exist."""


class DexConnectionError(DexAPIError):
    """Raised when the Dex API cannot be reached or times out."""


class DexClient:
    """
    Client for the Dex REST API.

    Holds a single aiohttp session that is created on first use. Use as an
    async context manager or call close() when done.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize the Dex API client.

        Args:
            api_key: Dex API key. If None, uses DEX_API_KEY from settings.
            base_url: API base URL. If None, uses DEX_API_BASE_URL from settings.
            timeout: Request timeout in seconds. If None, uses settings.

        Raises:
            ValueError: If no API key is configured.
        """
        if api_key is None or base_url is None or timeout is None:
            from dex_mcp.config.settings import get_settings
            settings = get_settings()
            api_key = api_key if api_key is not None else settings.dex_api_key
            base_url = base_url if base_url is not None else settings.dex_api_base_url
            timeout = timeout if timeout is not None else settings.request_timeout_seconds

        if not api_key:
            raise ValueError("DEX_API_KEY environment variable is required")

        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session: Optional[aiohttp.ClientSession] = None
        logger.info(f"Initialized DexClient with base URL: {self.base_url}")

    async def _ensure_session(self):
        """Ensure aiohttp session exists."""
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                headers={
                    API_KEY_HEADER: self.api_key,
                    "Content-Type": "application/json",
                },
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )

    async def close(self):
        """Close the HTTP session."""
        if self.session and not self.session.closed:
            await self.session.close()

    async def __aenter__(self):
        """Async context manager entry."""
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """
        Send a request and return the decoded JSON body.

        Returns an empty dict for responses without a body.

        Raises:
            DexNotFoundError: On HTTP 404.
            DexAPIError: On any other non-2xx status.
            DexConnectionError: If no response was received.
        """
        await self._ensure_session()
        url = f"{self.base_url}{path}"
        if params:
            params = {k: str(v) for k, v in params.items() if v is not None}

        logger.debug(f"{method} {url} params={params}")
        try:
            async with self.session.request(method, url, params=params, json=json) as response:
                if response.status >= 400:
                    try:
                        detail = await response.json(content_type=None)
                    except (aiohttp.ContentTypeError, ValueError):
                        detail = await response.text()
                    message = f"Dex API error: {response.status} - {detail}"
                    if response.status == 404:
                        logger.info(f"{method} {path} not found")
                        raise DexNotFoundError(message, status_code=404, detail=detail)
                    logger.warning(message)
                    raise DexAPIError(message, status_code=response.status, detail=detail)

                if response.status == 204:
                    return {}
                text = await response.text()
                if not text.strip():
                    return {}
                return await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Request to {url} failed: {e}")
            raise DexConnectionError(f"No response received from Dex API: {e}") from e

    async def check_connection(self) -> bool:
        """
        Check if the Dex API is reachable with the configured key.

        Returns:
            True if a minimal contacts request succeeds, False otherwise
        """
        try:
            await self._request("GET", "/contacts", params={"limit": 1, "offset": 0})
            return True
        except DexAPIError as e:
            logger.debug(f"Connection check failed: {e}")
            return False

    # ------------------------------------------------------------------
    # Contacts
    # ------------------------------------------------------------------

    async def list_contacts(self, limit: int = DEFAULT_PAGE_SIZE, offset: int = 0) -> list[DexContact]:
        """Get one page of contacts."""
        data = await self._request("GET", "/contacts", params={"limit": limit, "offset": offset})
        return [DexContact.model_validate(c) for c in data.get("contacts") or []]

    async def get_contact(self, contact_id: str) -> DexContact:
        """
        Get a single contact by ID.

        Raises:
            DexNotFoundError: If the contact does not exist.
        """
        data = await self._request("GET", f"/contacts/{contact_id}")
        # Accept either a bare contact or a {"contacts": [...]} wrapper
        contacts = data.get("contacts") if isinstance(data, dict) else None
        if isinstance(contacts, list):
            if not contacts:
                raise DexNotFoundError(f"Contact {contact_id} not found", status_code=404)
            return DexContact.model_validate(contacts[0])
        return DexContact.model_validate(data)

    async def search_contact_by_email(self, email: str) -> list[DexContact]:
        """Find contacts whose email exactly matches via the search endpoint."""
        data = await self._request("GET", "/search/contacts", params={"email": email})
        return [
            DexContact.model_validate(c)
            for c in data.get("search_contacts_by_exact_email") or []
        ]

    async def create_contact(self, contact: dict[str, Any]) -> DexContact:
        data = await self._request("POST", "/contacts", json=contact)
        return DexContact.model_validate(data)

    async def update_contact(self, contact_id: str, updates: dict[str, Any]) -> DexContact:
        """
        Apply field updates to a contact.

        Args:
            contact_id: Contact to update
            updates: Field values to write

        Returns:
            The contact as returned by Dex after the update
        """
        data = await self._request("PUT", f"/contacts/{contact_id}", json=updates)
        updated = data
        if "id" not in updated:
            updated = {"id": contact_id, **updates}
        return DexContact.model_validate(updated)

    async def delete_contact(self, contact_id: str) -> None:
        await self._request("DELETE", f"/contacts/{contact_id}")

    # ------------------------------------------------------------------
    # Notes (timeline items)
    # ------------------------------------------------------------------

    async def get_notes(self, contact_id: Optional[str] = None) -> list[DexNote]:
        """
        Get timeline notes, optionally for one contact.

        Args:
            contact_id: If given, only notes attached to this contact
        """
        if contact_id:
            path = f"/timeline_items/contacts/{contact_id}"
        else:
            path = "/timeline_items"
        data = await self._request("GET", path)
        return [DexNote.model_validate(n) for n in data.get("timeline_items") or []]

    async def get_note(self, note_id: str) -> DexNote:
        data = await self._request("GET", f"/notes/{note_id}")
        return DexNote.model_validate(data.get("timeline_item") or data)

    async def create_note(
        self,
        note: str,
        contact_ids: list[str],
        event_time: Optional[str] = None,
    ) -> DexNote:
        """
        Create a timeline note attached to contacts.

        Args:
            note: Note body (plain text or HTML)
            contact_ids: Contacts the note belongs to
            event_time: ISO 8601 timestamp of the event, defaults to now
        """
        payload = {
            "timeline_event": {
                "note": note,
                "event_time": event_time or datetime.now(timezone.utc).isoformat(),
                "meeting_type": "note",
                "timeline_items_contacts": {
                    "data": [{"contact_id": cid} for cid in contact_ids],
                },
            }
        }
        data = await self._request("POST", "/timeline_items", json=payload)
        created = data.get("insert_timeline_items_one") or data

        return DexNote(
            id=str(created.get("id", "")),
            note=created.get("note", note),
            event_time=created.get("event_time", payload["timeline_event"]["event_time"]),
            contacts=[
                {"contact_id": item["contact"]["id"]}
                for item in created.get("timeline_items_contacts") or []
                if item.get("contact")
            ] or [{"contact_id": cid} for cid in contact_ids],
            source=created.get("meeting_type"),
        )

    async def update_note(self, note_id: str, updates: dict[str, Any]) -> DexNote:
        data = await self._request("PUT", f"/notes/{note_id}", json=updates)
        updated = data
        if "id" not in updated:
            updated = {"id": note_id, **updates}
        return DexNote.model_validate(updated)

    async def delete_note(self, note_id: str) -> None:
        await self._request("DELETE", f"/notes/{note_id}")

    # ------------------------------------------------------------------
    # Reminders
    # ------------------------------------------------------------------

    async def get_reminders(self, contact_id: Optional[str] = None) -> list[DexReminder]:
        """
        Get reminders, optionally only those attached to one contact.

        The reminders endpoint has no contact filter, so filtering happens
        client-side.
        """
        data = await self._request("GET", "/reminders")
        reminders = [DexReminder.model_validate(r) for r in data.get("reminders") or []]
        if contact_id:
            reminders = [r for r in reminders if contact_id in r.contact_id_list]
        return reminders

    async def get_reminder(self, reminder_id: str) -> DexReminder:
        data = await self._request("GET", f"/reminders/{reminder_id}")
        return DexReminder.model_validate(data.get("reminder") or data)

    async def create_reminder(
        self,
        body: str,
        due_at_date: str,
        contact_ids: list[str],
        is_complete: bool = False,
    ) -> DexReminder:
        """
        Create a reminder attached to contacts.

        Args:
            body: Reminder text
            due_at_date: ISO 8601 due date
            contact_ids: Contacts the reminder belongs to
            is_complete: Initial completion state
        """
        payload = {
            "reminder": {
                "text": body,
                "is_complete": is_complete,
                "due_at_date": due_at_date,
                "reminders_contacts": {
                    "data": [{"contact_id": cid} for cid in contact_ids],
                },
            }
        }
        data = await self._request("POST", "/reminders", json=payload)
        created = data.get("insert_reminders_one") or data

        return DexReminder(
            id=str(created.get("id", "")),
            body=created.get("body") or created.get("text") or body,
            is_complete=created.get("is_complete", is_complete),
            due_at_date=created.get("due_at_date", due_at_date),
            due_at_time=created.get("due_at_time"),
            contact_ids=[{"contact_id": cid} for cid in contact_ids],
        )

    async def update_reminder(
        self,
        reminder_id: str,
        body: Optional[str] = None,
        is_complete: Optional[bool] = None,
        due_at_date: Optional[str] = None,
        due_at_time: Optional[str] = None,
    ) -> DexReminder:
        """Update reminder fields. Fields left as None are not sent."""
        changes = {
            "text": body,
            "is_complete": is_complete,
            "due_at_date": due_at_date,
            "due_at_time": due_at_time,
        }
        changes = {k: v for k, v in changes.items() if v is not None}
        data = await self._request(
            "PUT",
            f"/reminders/{reminder_id}",
            json={"changes": changes, "update_contacts": False},
        )
        updated = data.get("update_reminders_by_pk") or data
        return DexReminder(
            id=str(updated.get("id", reminder_id)),
            body=updated.get("body") or updated.get("text") or body or "",
            is_complete=updated.get("is_complete", is_complete),
            due_at_date=updated.get("due_at_date", due_at_date),
            due_at_time=updated.get("due_at_time", due_at_time),
            contact_ids=updated.get("contact_ids") or [],
        )

    async def delete_reminder(self, reminder_id: str) -> None:
        await self._request("DELETE", f"/reminders/{reminder_id}")


async def fetch_all_contacts(client, page_size: int = DEFAULT_PAGE_SIZE) -> list[DexContact]:
    """
    Load every contact by paging through list_contacts.

    Stops at the first page shorter than page_size.

    Args:
        client: Anything with an async list_contacts(limit, offset)
        page_size: Contacts per request
    """
    all_contacts: list[DexContact] = []
    offset = 0

    while True:
        page = await client.list_contacts(limit=page_size, offset=offset)
        all_contacts.extend(page)

        # If we got fewer contacts than the limit, we've reached the end
        if len(page) < page_size:
            break
        offset += page_size

    logger.info(f"Retrieved {len(all_contacts)} contacts from Dex")
    return all_contacts
