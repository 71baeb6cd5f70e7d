"""
Booking status lifecycle: Booked ──► Shipped ──► Delivered, with Booked and
Shipped also allowed to go to Cancelled. Delivered and Cancelled are final.
"""

from __future__ import annotations

from typing import Optional

from core.exceptions import TransitionError
from records.entities import BookingStatus

S = BookingStatus

TRANSITIONS = {
    S.BOOKED: frozenset({S.SHIPPED, S.CANCELLED}),
    S.SHIPPED: frozenset({S.DELIVERED, S.CANCELLED}),
    S.DELIVERED: frozenset(),
    S.CANCELLED: frozenset(),
}

CREATION_STATUSES = (S.BOOKED,)


def can_transition(current: Optional[str], requested: str) -> bool:
    if current is None:
        return requested in CREATION_STATUSES
    if current == requested:
        return True
    return requested in TRANSITIONS.get(current, ())


def check_transition(current: Optional[str], requested: str) -> None:
    if not can_transition(current, requested):
        raise TransitionError("Booking", current or "new", requested)
