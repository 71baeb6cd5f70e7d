"""
Booking pricing wizard.

    SELECTING_QUOTATION ──► QUOTATION_SUMMARY ──► SELECTING_CARRIER_RATE ──► REVIEW_AND_SUBMIT

A booking always starts from a submitted quotation: picking one copies its
customer, route, equipment, type and sell rate into the draft (a one-off copy,
later edits to the quotation do not follow). The buy rate is sourced again
for the booking, either from a carrier rate found by an on-demand search or
entered by hand. Deselecting a carrier rate resets the buy rate to 0.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

from core.exceptions import NotFoundError, ValidationError
from core.utils import ZERO, profit_and_loss
from pricing.selection import DeselectPolicy, RateSelectionStep
from pricing.wizard import StepMachine, Wizard, WizardState, require_fields
from quotes import lifecycle as quotation_lifecycle
from records.entities import Booking, BookingStatus, Quotation, ScheduleRate

from . import lifecycle
from .saga import CreateBookingSaga

logger = logging.getLogger(__name__)


class BookingStep:
    SELECTING_QUOTATION = "selecting_quotation"
    QUOTATION_SUMMARY = "quotation_summary"
    SELECTING_CARRIER_RATE = "selecting_carrier_rate"
    REVIEW_AND_SUBMIT = "review_and_submit"

    ORDER = (SELECTING_QUOTATION, QUOTATION_SUMMARY, SELECTING_CARRIER_RATE, REVIEW_AND_SUBMIT)


COPIED_FIELDS = ("customer_name", "pol", "pod", "equipment", "type")

MACHINE = StepMachine(
    steps=BookingStep.ORDER,
    gates={BookingStep.SELECTING_QUOTATION: require_fields("quotation_id")},
)

RATE_SELECTION = RateSelectionStep(
    policy=DeselectPolicy.RESET_TO_ZERO,
    id_field="selected_carrier_rate_id",
)


def can_advance(step: str, draft: "BookingDraft") -> bool:
    return MACHINE.can_advance(step, draft)


@dataclass
class BookingDraft:
    quotation_id: str = ""
    customer_name: str = ""
    pol: str = ""
    pod: str = ""
    equipment: str = ""
    type: str = ""
    sell_rate: Decimal = ZERO
    buy_rate: Optional[Decimal] = None
    selected_carrier_rate_id: Optional[str] = None
    status: str = BookingStatus.BOOKED
    notes: Optional[str] = None

    @property
    def profit_and_loss(self) -> Decimal:
        return profit_and_loss(self.sell_rate, self.buy_rate)

    @classmethod
    def from_record(cls, booking: Booking) -> "BookingDraft":
        return cls(**{f.name: getattr(booking, f.name) for f in fields(cls)})

    def as_record(self) -> Dict[str, Any]:
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        if values["buy_rate"] is None:
            values["buy_rate"] = ZERO
        return values


@dataclass
class BookingWizardState(WizardState):
    step: str = BookingStep.SELECTING_QUOTATION
    draft: BookingDraft = field(default_factory=BookingDraft)
    candidates: List[ScheduleRate] = field(default_factory=list)
    quotation_results: List[Quotation] = field(default_factory=list)
    quotation: Optional[Quotation] = None
    original_status: Optional[str] = None


class BookingWorkflow(Wizard):
    name = "booking"
    machine = MACHINE

    state: BookingWizardState

    @classmethod
    async def start(cls, store, booking_id: Optional[str] = None) -> "BookingWorkflow":
        state = BookingWizardState()
        if booking_id:
            booking = await store.bookings.get(booking_id)
            if booking is None:
                raise NotFoundError("Booking", booking_id)
            state.record_id = booking.id
            state.original_status = booking.status
            state.draft = BookingDraft.from_record(booking)
            state.quotation = await store.quotations.get(booking.quotation_id)
        return cls(store, state)

    # ---- step 1: quotation ----

    async def search_quotations(self, term: str) -> List[Quotation]:
        self.require_step(BookingStep.SELECTING_QUOTATION)
        results = await self.store.quotations.search_by_text(term)
        self.state.quotation_results = results
        if not results and (term or "").strip():
            self.notify(f"No quotations match '{term.strip()}'.")
        return results

    async def select_quotation(self, quotation_id: str) -> Quotation:
        self.require_step(BookingStep.SELECTING_QUOTATION)
        draft = self.draft
        if self.state.editing and quotation_id != draft.quotation_id:
            raise self.fail({"quotation_id": ["The quotation of an existing booking cannot be changed."]})
        quotation = await self.store.quotations.get(quotation_id)
        if quotation is None:
            raise NotFoundError("Quotation", quotation_id)
        if self.state.editing:
            self.state.quotation = quotation
            return quotation
        if not quotation_lifecycle.can_book(quotation):
            raise self.fail({
                "quotation_id": [f"Quotation {quotation.id} is '{quotation.status}'; only Submitted quotations can be booked."]
            })
        draft.quotation_id = quotation.id
        for name in COPIED_FIELDS:
            setattr(draft, name, getattr(quotation, name))
        draft.sell_rate = quotation.sell_rate if quotation.sell_rate is not None else ZERO
        # a different route invalidates any carrier rate picked before
        if draft.selected_carrier_rate_id:
            RATE_SELECTION.deselect(draft)
        self.state.candidates = []
        self.state.quotation = quotation
        self.state.errors = {}
        return quotation

    # ---- step 3: carrier rate ----

    async def search_rates(self) -> List[ScheduleRate]:
        self.require_step(BookingStep.SELECTING_CARRIER_RATE)
        draft = self.draft
        candidates = await RATE_SELECTION.search(self.store, draft.pol, draft.pod)
        self.state.candidates = candidates
        if RATE_SELECTION.reconcile(draft, candidates):
            self.notify("The previously selected carrier rate is no longer offered; buy rate reset to 0.")
        if not candidates:
            self.notify(f"No carrier rates found for {draft.pol} to {draft.pod}. Enter a buy rate manually.")
        return candidates

    def select_rate(self, rate_id: str) -> ScheduleRate:
        self.require_step(BookingStep.SELECTING_CARRIER_RATE)
        try:
            rate = RATE_SELECTION.select(self.draft, self.state.candidates, rate_id)
        except ValidationError as e:
            raise self.fail(e.errors)
        self.state.errors = {}
        return rate

    def deselect_rate(self) -> None:
        self.require_step(BookingStep.SELECTING_CARRIER_RATE)
        RATE_SELECTION.deselect(self.draft)
        self.state.errors = {}

    def set_buy_rate(self, value) -> None:
        self.require_step(BookingStep.SELECTING_CARRIER_RATE, BookingStep.REVIEW_AND_SUBMIT)
        try:
            RATE_SELECTION.set_manual_buy_rate(self.draft, value)
        except ValidationError as e:
            raise self.fail(e.errors)
        self.state.errors = {}

    # ---- free fields ----

    def set_fields(self, values: Mapping[str, Any]) -> None:
        """Apply field edits all at once; nothing changes when any of them is refused."""
        draft = self.draft
        status = values.get("status") or None
        if status and not lifecycle.can_transition(self.state.original_status, status):
            current = self.state.original_status or "new"
            raise self.fail({"status": [f"Booking cannot move from '{current}' to '{status}'."]})
        if "buy_rate" in values:
            # assigns only once the value is accepted
            self.set_buy_rate(values["buy_rate"])
        if status:
            draft.status = status
        if "notes" in values:
            draft.notes = values["notes"] or None
        self.state.errors = {}

    # ---- finalize ----

    async def submit(self) -> Booking:
        self.require_step(BookingStep.REVIEW_AND_SUBMIT)
        draft = self.draft
        blocking_step, errors = MACHINE.blockers_before(BookingStep.REVIEW_AND_SUBMIT, draft)
        if blocking_step is not None:
            raise self.fail(errors, step=blocking_step)
        if draft.buy_rate is None:
            draft.buy_rate = ZERO

        if self.state.editing:
            current = await self.store.bookings.get(self.state.record_id)
            if current is None:
                raise NotFoundError("Booking", self.state.record_id)
            if not lifecycle.can_transition(current.status, draft.status):
                raise self.fail({"status": [f"Booking cannot move from '{current.status}' to '{draft.status}'."]})
            try:
                record = await self.store.bookings.update(self.state.record_id, draft.as_record())
            except ValidationError as e:
                raise self.fail(e.errors)
            if record is None:
                raise NotFoundError("Booking", self.state.record_id)
        else:
            try:
                record = await CreateBookingSaga(self.store).run(draft.as_record())
            except ValidationError as e:
                raise self.fail(e.errors)
            self.state.record_id = record.id
        self.state.errors = {}
        logger.info("Booking %s submitted from wizard", record.id)
        return record
