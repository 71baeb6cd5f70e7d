"""
Booking create/delete as ordered steps with compensation.

The record store has no transactions, so each operation that touches both a
booking and its quotation runs as a small saga:

create:  create_booking ──► mark_quotation_booked
         (mark fails: the new booking is deleted again)

delete:  delete_booking ──► revert_quotation (retried)
         (revert still fails: the deleted booking is restored)

When compensation itself fails the store is left as described by the
``CompensationError`` (``completed_steps``, ``restored=False``) and the
failure is logged at ERROR.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from django.conf import settings
from tenacity import AsyncRetrying, retry_if_not_exception_type, stop_after_attempt, wait_exponential

from core.exceptions import CompensationError, NotFoundError, ValidationError
from quotes import lifecycle as quotation_lifecycle
from records.entities import Booking, QuotationStatus

logger = logging.getLogger(__name__)

CREATE_BOOKING = "create_booking"
MARK_QUOTATION_BOOKED = "mark_quotation_booked"
DELETE_BOOKING = "delete_booking"
REVERT_QUOTATION = "revert_quotation"


class CreateBookingSaga:
    def __init__(self, store):
        self.store = store
        self.completed_steps: List[str] = []

    async def run(self, data: Mapping[str, Any]) -> Booking:
        quotation_id = data.get("quotation_id") or ""
        quotation = await self.store.quotations.get(quotation_id)
        if quotation is None:
            raise NotFoundError("Quotation", quotation_id)
        if not quotation_lifecycle.can_book(quotation):
            raise ValidationError({
                "quotation_id": [f"Quotation {quotation_id} is '{quotation.status}'; only Submitted quotations can be booked."]
            })

        booking = await self.store.bookings.create(data)
        self.completed_steps.append(CREATE_BOOKING)

        try:
            updated = await self.store.quotations.update(quotation_id, {"status": QuotationStatus.BOOKING_COMPLETED})
            if updated is None:
                raise NotFoundError("Quotation", quotation_id)
        except Exception as e:
            logger.error("Marking quotation %s booked failed, removing booking %s: %s", quotation_id, booking.id, e)
            restored = await self._remove(booking.id)
            raise CompensationError(
                f"Booking was not created: quotation {quotation_id} could not be marked as booked.",
                completed_steps=self.completed_steps,
                restored=restored,
            ) from e
        self.completed_steps.append(MARK_QUOTATION_BOOKED)
        logger.info("Booking %s created from quotation %s", booking.id, quotation_id)
        return booking

    async def _remove(self, booking_id: str) -> bool:
        try:
            removed = await self.store.bookings.delete(booking_id)
        except Exception:
            logger.exception("Compensation failed: booking %s could not be removed", booking_id)
            return False
        if not removed:
            logger.error("Compensation failed: booking %s was already gone", booking_id)
        return removed


class DeleteBookingSaga:
    def __init__(self, store, attempts: Optional[int] = None):
        self.store = store
        self.attempts = attempts or settings.BOOKING_REVERT_ATTEMPTS
        self.completed_steps: List[str] = []

    async def run(self, booking_id: str) -> Booking:
        booking = await self.store.bookings.get(booking_id)
        if booking is None or not await self.store.bookings.delete(booking_id):
            raise NotFoundError("Booking", booking_id)
        self.completed_steps.append(DELETE_BOOKING)

        try:
            reverted = await self._revert_quotation(booking.quotation_id)
        except Exception as e:
            logger.error(
                "Reverting quotation %s failed after %d attempts, restoring booking %s: %s",
                booking.quotation_id, self.attempts, booking_id, e,
            )
            restored = await self._restore(booking)
            raise CompensationError(
                f"Booking {booking_id} was not deleted: quotation {booking.quotation_id} could not be reverted to Submitted."
                if restored else
                f"Booking {booking_id} was deleted but quotation {booking.quotation_id} is still marked as booked.",
                completed_steps=self.completed_steps,
                restored=restored,
            ) from e
        if reverted:
            self.completed_steps.append(REVERT_QUOTATION)
        logger.info("Booking %s deleted (quotation %s reverted=%s)", booking_id, booking.quotation_id, reverted)
        return booking

    async def _revert_quotation(self, quotation_id: str) -> bool:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.attempts),
            wait=wait_exponential(multiplier=0.05, max=1),
            retry=retry_if_not_exception_type(ValidationError),
            reraise=True,
        ):
            with attempt:
                return await self._revert_once(quotation_id)
        return False

    async def _revert_once(self, quotation_id: str) -> bool:
        quotation = await self.store.quotations.get(quotation_id)
        if quotation is None:
            logger.warning("Quotation %s of the deleted booking no longer exists", quotation_id)
            return False
        if quotation.status != QuotationStatus.BOOKING_COMPLETED:
            logger.info("Quotation %s is '%s'; nothing to revert", quotation_id, quotation.status)
            return False
        updated = await self.store.quotations.update(quotation_id, {"status": QuotationStatus.SUBMITTED})
        if updated is None:
            raise NotFoundError("Quotation", quotation_id)
        return True

    async def _restore(self, booking: Booking) -> bool:
        try:
            await self.store.bookings.restore(booking)
        except Exception:
            logger.exception("Compensation failed: booking %s could not be restored", booking.id)
            return False
        return True
