"""
Conversion of Dex records into searchable documents.

Each document carries the text the fuzzy index matches against and belongs
to exactly one contact. Notes and reminders linked to several contacts
produce one document per contact.
"""

import re

from dex_mcp.models.contact import DexContact, DexNote, DexReminder
from dex_mcp.models.search import DocumentMetadata, SearchableDocument

_LINE_BREAK = re.compile(r"<br\s*/?>", re.IGNORECASE)
_PARAGRAPH_END = re.compile(r"</p>", re.IGNORECASE)
_TAG = re.compile(r"<[^>]+>")
_WHITESPACE = re.compile(r"\s+")


def strip_html(html: str) -> str:
    """
    Remove HTML markup and collapse whitespace.

    <br> and </p> become line breaks before collapsing, so adjacent
    paragraphs stay separated by a space.
    """
    text = _LINE_BREAK.sub("\n", html)
    text = _PARAGRAPH_END.sub("\n", text)
    text = _TAG.sub(" ", text)
    text = _WHITESPACE.sub(" ", text)
    return text.strip()


def _contact_document(contact: DexContact, text: str, field: str) -> SearchableDocument:
    return SearchableDocument(
        contact_id=contact.id,
        document_type="contact",
        document_id=contact.id,
        searchable_text=text,
        metadata=DocumentMetadata(field=field),
    )


def extract_contact_documents(contact: DexContact) -> list[SearchableDocument]:
    """
    Build documents for the searchable fields of a contact.

    Produces one document each for the name, job title and description
    (when present), and one per email address and phone number.
    """
    docs = []

    if contact.first_name or contact.last_name:
        docs.append(_contact_document(contact, contact.full_name, "name"))

    if contact.job_title:
        docs.append(_contact_document(contact, contact.job_title, "job_title"))

    if contact.description:
        docs.append(_contact_document(contact, contact.description, "description"))

    for email in contact.emails:
        if email.email:
            docs.append(_contact_document(contact, email.email, "email"))

    for phone in contact.phones:
        if not phone.phone_number:
            continue
        text = f"{phone.phone_number} {phone.label or ''}".strip()
        docs.append(_contact_document(contact, text, "phone"))

    return docs


def extract_note_documents(note: DexNote) -> list[SearchableDocument]:
    """Build one plain-text document per contact the note is attached to."""
    plain_text = strip_html(note.note)

    return [
        SearchableDocument(
            contact_id=contact_id,
            document_type="note",
            document_id=note.id,
            searchable_text=plain_text,
            metadata=DocumentMetadata(date=note.event_time, raw_content=note.note),
        )
        for contact_id in note.contact_id_list
    ]


def extract_reminder_documents(reminder: DexReminder) -> list[SearchableDocument]:
    """Build one document per contact, with the completion status appended."""
    status = "completed" if reminder.is_complete else "pending"

    return [
        SearchableDocument(
            contact_id=contact_id,
            document_type="reminder",
            document_id=reminder.id,
            searchable_text=f"{reminder.body} {status}",
            metadata=DocumentMetadata(date=reminder.due_at_date, raw_content=reminder.body),
        )
        for contact_id in reminder.contact_id_list
    ]
