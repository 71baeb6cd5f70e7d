"""
Direct booking edits outside the wizard.
"""

from __future__ import annotations

from typing import Any, Dict

from core.exceptions import NotFoundError
from records.entities import Booking

from . import lifecycle


async def update_booking(store, booking_id: str, changes: Dict[str, Any]) -> Booking:
    current = await store.bookings.get(booking_id)
    if current is None:
        raise NotFoundError("Booking", booking_id)
    changes = dict(changes)
    if "status" in changes:
        lifecycle.check_transition(current.status, changes["status"])
    if "buy_rate" in changes and current.selected_carrier_rate_id and changes["buy_rate"] != current.buy_rate:
        changes["selected_carrier_rate_id"] = None
    record = await store.bookings.update(booking_id, changes)
    if record is None:
        raise NotFoundError("Booking", booking_id)
    return record
