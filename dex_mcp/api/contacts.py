"""
Contact API endpoints: matching, details and relationship history.
"""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from typing import List, Literal, Optional

from dex_mcp.api.errors import to_http_exception
from dex_mcp.dependencies import get_discovery_tools, get_history_tools
from dex_mcp.dex.client import DexAPIError
from dex_mcp.models import ContactMatch, DexContact, DexNote, DexReminder, TimelineItem
from dex_mcp.services.discovery import ContactDiscoveryTools
from dex_mcp.services.history import RelationshipHistoryTools

router = APIRouter()


class FindContactRequest(BaseModel):
    """Identifying information for contact matching."""
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    social_url: Optional[str] = None
    company: Optional[str] = None


@router.post("/contacts/find", response_model=List[ContactMatch])
async def find_contact(
    request: FindContactRequest,
    discovery: ContactDiscoveryTools = Depends(get_discovery_tools),
):
    """
    Find contacts by name, email, phone or social profile.

    Returns:
        Up to 5 matches with confidence scores.

    Raises:
        HTTPException: 400 if no identifying field was given.
    """
    try:
        return await discovery.find_contact(**request.model_dump())
    except (ValueError, DexAPIError) as e:
        raise to_http_exception(e)


@router.get("/contacts/{contact_id}", response_model=DexContact)
async def get_contact(
    contact_id: str,
    discovery: ContactDiscoveryTools = Depends(get_discovery_tools),
):
    """Get complete contact details."""
    try:
        return await discovery.get_contact_details(contact_id)
    except DexAPIError as e:
        raise to_http_exception(e)


@router.get("/contacts/{contact_id}/history", response_model=List[TimelineItem])
async def get_contact_history(
    contact_id: str,
    include_notes: bool = True,
    include_reminders: bool = True,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    history: RelationshipHistoryTools = Depends(get_history_tools),
):
    """Get the contact's notes and reminders as one timeline, most recent first."""
    try:
        return await history.get_contact_history(
            contact_id,
            include_notes=include_notes,
            include_reminders=include_reminders,
            date_from=date_from,
            date_to=date_to,
        )
    except DexAPIError as e:
        raise to_http_exception(e)


@router.get("/contacts/{contact_id}/notes", response_model=List[DexNote])
async def get_contact_notes(
    contact_id: str,
    limit: Optional[int] = Query(None, ge=1),
    date_from: Optional[str] = None,
    history: RelationshipHistoryTools = Depends(get_history_tools),
):
    """Get the contact's notes, most recent first."""
    try:
        return await history.get_contact_notes(contact_id, limit=limit, date_from=date_from)
    except DexAPIError as e:
        raise to_http_exception(e)


@router.get("/contacts/{contact_id}/reminders", response_model=List[DexReminder])
async def get_contact_reminders(
    contact_id: str,
    status: Literal["active", "completed", "all"] = "all",
    date_from: Optional[str] = None,
    history: RelationshipHistoryTools = Depends(get_history_tools),
):
    """Get the contact's reminders filtered by status."""
    try:
        return await history.get_contact_reminders(contact_id, status=status, date_from=date_from)
    except DexAPIError as e:
        raise to_http_exception(e)
