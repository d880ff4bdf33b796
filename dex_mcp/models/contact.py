"""
Data models for Dex CRM records (contacts, notes, reminders).

Dex returns many optional fields as null, so list fields coerce None to an
empty list and unknown attributes are kept on the model.
"""

from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


SOCIAL_FIELDS = ("linkedin", "facebook", "twitter", "instagram", "telegram")


class EmailAddress(BaseModel):
    """An email address attached to a contact."""

    model_config = ConfigDict(extra="allow")

    email: str = Field(default="", description="Email address as stored in Dex")

    @field_validator("email", mode="before")
    @classmethod
    def none_to_blank(cls, v):
        return "" if v is None else v


class PhoneNumber(BaseModel):
    """A phone number attached to a contact."""

    model_config = ConfigDict(extra="allow")

    phone_number: str = Field(default="", description="Phone number as stored in Dex")
    label: Optional[str] = Field(None, description="Label such as 'mobile' or 'work'")

    @field_validator("phone_number", mode="before")
    @classmethod
    def none_to_blank(cls, v):
        return "" if v is None else v


class ContactRef(BaseModel):
    """Reference from a note or reminder to a contact."""

    model_config = ConfigDict(extra="allow")

    contact_id: str = Field(..., description="Referenced contact ID")


class DexContact(BaseModel):
    """A person in the Dex CRM."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., description="Dex contact ID")
    first_name: Optional[str] = Field(None, description="First name")
    last_name: Optional[str] = Field(None, description="Last name")
    job_title: Optional[str] = Field(None, description="Job title, may include company")
    description: Optional[str] = Field(None, description="Free-form description")
    emails: list[EmailAddress] = Field(default_factory=list, description="Email addresses")
    phones: list[PhoneNumber] = Field(default_factory=list, description="Phone numbers")

    linkedin: Optional[str] = None
    facebook: Optional[str] = None
    twitter: Optional[str] = None
    instagram: Optional[str] = None
    telegram: Optional[str] = None
    website: Optional[str] = None
    image_url: Optional[str] = None

    birthday: Optional[str] = None
    last_seen_at: Optional[str] = None
    next_reminder_at: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @field_validator("emails", "phones", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return [] if v is None else v

    @property
    def full_name(self) -> str:
        """First and last name joined by a space, trimmed."""
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    def social_values(self) -> list[str]:
        """Non-empty social profile values in a fixed field order."""
        values = []
        for field_name in SOCIAL_FIELDS:
            value = getattr(self, field_name)
            if value:
                values.append(value)
        return values


class DexNote(BaseModel):
    """A timeline note attached to one or more contacts."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., description="Note ID")
    note: str = Field(default="", description="Note body, may contain HTML")
    event_time: Optional[str] = Field(None, description="ISO 8601 event timestamp")
    contacts: list[ContactRef] = Field(default_factory=list, description="Associated contacts")
    source: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @field_validator("note", mode="before")
    @classmethod
    def none_to_blank(cls, v):
        return "" if v is None else v

    @field_validator("contacts", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return [] if v is None else v

    @property
    def contact_id_list(self) -> list[str]:
        return [ref.contact_id for ref in self.contacts]


class DexReminder(BaseModel):
    """A reminder attached to one or more contacts."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., description="Reminder ID")
    body: str = Field(default="", description="Reminder text")
    is_complete: bool = Field(default=False, description="Whether the reminder is done")
    due_at_date: Optional[str] = Field(None, description="Due date (ISO 8601)")
    due_at_time: Optional[str] = Field(None, description="Due time (ISO 8601)")
    contact_ids: list[ContactRef] = Field(default_factory=list, description="Associated contacts")
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @field_validator("body", mode="before")
    @classmethod
    def none_to_blank(cls, v):
        return "" if v is None else v

    @field_validator("is_complete", mode="before")
    @classmethod
    def none_to_false(cls, v):
        return False if v is None else v

    @field_validator("contact_ids", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return [] if v is None else v

    @property
    def contact_id_list(self) -> list[str]:
        return [ref.contact_id for ref in self.contact_ids]


class ContactMatch(BaseModel):
    """A contact matched against identifying information."""

    contact: DexContact = Field(..., description="Matched contact")
    confidence: int = Field(..., ge=0, le=100, description="Match confidence 0-100")
    match_reason: str = Field(..., description="Human-readable reason for the match")


class TimelineItem(BaseModel):
    """A note or reminder in a contact's relationship history."""

    type: Literal["note", "reminder"] = Field(..., description="Item type")
    date: str = Field(default="", description="Event time for notes, due date for reminders")
    content: str = Field(default="", description="Note or reminder text")
    id: str = Field(..., description="Note or reminder ID")
    tags: Optional[list[str]] = Field(None, description="Status tags for reminders")
