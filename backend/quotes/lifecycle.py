"""
Quotation status lifecycle.

    Draft ──► Submitted ──► Booking Completed
      │           │                │
      └──► Cancelled ◄─┘           └──► Submitted   (booking deleted)

Users may submit or cancel. ``Booking Completed`` is only ever set by booking
creation and only ever left when the booking is deleted; ``Cancelled`` is
terminal.
"""

from __future__ import annotations

from typing import Optional

from core.exceptions import TransitionError
from records.entities import Quotation, QuotationStatus

S = QuotationStatus

USER_TRANSITIONS = {
    S.DRAFT: frozenset({S.SUBMITTED, S.CANCELLED}),
    S.SUBMITTED: frozenset({S.CANCELLED}),
    S.BOOKING_COMPLETED: frozenset(),
    S.CANCELLED: frozenset(),
}

SYSTEM_TRANSITIONS = {
    "booking_created": (S.SUBMITTED, S.BOOKING_COMPLETED),
    "booking_deleted": (S.BOOKING_COMPLETED, S.SUBMITTED),
}

CREATION_STATUSES = (S.DRAFT, S.SUBMITTED)


def can_transition(current: Optional[str], requested: str) -> bool:
    """Whether a user may move a quotation from ``current`` to ``requested``.

    ``current`` is None for a quotation that does not exist yet. Keeping the
    same status is always allowed.
    """
    if current is None:
        return requested in CREATION_STATUSES
    if current == requested:
        return True
    return requested in USER_TRANSITIONS.get(current, ())


def check_transition(current: Optional[str], requested: str) -> None:
    if not can_transition(current, requested):
        raise TransitionError("Quotation", current or "new", requested)


def can_delete(quotation: Quotation) -> bool:
    return quotation.status != S.BOOKING_COMPLETED


def can_book(quotation: Quotation) -> bool:
    """Only a submitted (accepted) quotation can be turned into a booking."""
    return quotation.status == SYSTEM_TRANSITIONS["booking_created"][0]
