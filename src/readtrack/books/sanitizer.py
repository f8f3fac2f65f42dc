# ABOUTME: Turns typed book patches into the exact field map written to the record store.
# ABOUTME: Drops unchanged fields, holds back local cover references, enforces lending rules.

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any

from readtrack.books.covers import is_remote_uri
from readtrack.books.mapping import LENDING_FIELDS, record_field
from readtrack.books.types import CLEAR, BookPatch, CoverSlot, NewBook

_COVER_SLOTS = {slot.attribute: slot for slot in CoverSlot}


@dataclass
class SanitizedPatch:
    """What a mutation writes now, and which covers still need uploading."""

    fields: dict[str, Any] = field(default_factory=dict)
    pending_covers: dict[CoverSlot, str] = field(default_factory=dict)


def sanitize_patch(
    patch: BookPatch,
    *,
    timestamp: str,
    was_lent: bool = False,
) -> SanitizedPatch:
    """Convert a BookPatch into record fields.

    UNCHANGED fields are omitted so persisted values survive; CLEAR becomes an
    explicit None. A cover set to a local reference is never written: it is
    returned in ``pending_covers`` for the upload step.

    Lending rules: ``is_lent`` false (or cleared) nulls lentTo, lentAt and
    expectedReturnAt whatever else the patch says. ``is_lent`` true stamps
    lentAt with ``timestamp`` when the book was not already lent and the patch
    does not supply one. A patch that leaves ``is_lent`` alone may only set
    lending fields on a book that is already lent; otherwise they are nulled.

    Args:
        patch: The caller's requested changes.
        timestamp: The mutation timestamp, used for lentAt stamping.
        was_lent: Whether the stored book is currently lent.
    """
    result = SanitizedPatch()

    for attribute, change in patch.changes().items():
        name = record_field(attribute)
        if change is CLEAR:
            result.fields[name] = None
            continue

        value = change.value
        slot = _COVER_SLOTS.get(attribute)
        if slot is not None and not is_remote_uri(value):
            result.pending_covers[slot] = value
            continue

        result.fields[name] = value.value if isinstance(value, Enum) else value

    _apply_lending_rules(result.fields, timestamp=timestamp, was_lent=was_lent)
    return result


def sanitize_new_book(book: NewBook, *, timestamp: str) -> SanitizedPatch:
    """Sanitize the input of an add: same rules as a patch, absent fields omitted."""
    values = {
        f.name: getattr(book, f.name)
        for f in fields(book)
        if getattr(book, f.name) is not None
    }
    result = sanitize_patch(BookPatch.of(**values), timestamp=timestamp)
    result.fields = {name: value for name, value in result.fields.items() if value is not None}
    return result


def _apply_lending_rules(record: dict[str, Any], *, timestamp: str, was_lent: bool) -> None:
    # Without isLent in the patch the stored flag decides.
    if "isLent" not in record:
        if not was_lent:
            for name in LENDING_FIELDS:
                if name in record:
                    record[name] = None
        return

    if not record["isLent"]:
        record["isLent"] = False
        for name in LENDING_FIELDS:
            record[name] = None
        return

    if record.get("lentAt") is None and not was_lent:
        record["lentAt"] = timestamp
