"""
Quotation pricing wizard.

    COLLECTING_ROUTE ──► SELECTING_RATE ──► REVIEW_AND_SUBMIT

Leaving COLLECTING_ROUTE needs customer, route, equipment, type and status.
Entering SELECTING_RATE searches schedule rates for pol/pod. Selecting a
candidate mirrors its buy rate and clears the sell rate; deselecting clears
both. Nothing touches the record store until ``submit``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

from asgiref.sync import sync_to_async

from core.exceptions import ExternalServiceError, NotFoundError, ValidationError
from core.utils import money_or_none, profit_and_loss
from pricing.selection import DeselectPolicy, RateSelectionStep
from pricing.wizard import StepMachine, Wizard, WizardState, require_fields
from records.entities import SHIPMENT_TYPES, Quotation, QuotationStatus, ScheduleRate
from summaries.services import generate_summary

from . import lifecycle

logger = logging.getLogger(__name__)


class QuotationStep:
    COLLECTING_ROUTE = "collecting_route"
    SELECTING_RATE = "selecting_rate"
    REVIEW_AND_SUBMIT = "review_and_submit"

    ORDER = (COLLECTING_ROUTE, SELECTING_RATE, REVIEW_AND_SUBMIT)


ROUTE_FIELDS = ("customer_name", "pol", "pod", "equipment", "type", "status")

MACHINE = StepMachine(
    steps=QuotationStep.ORDER,
    gates={QuotationStep.COLLECTING_ROUTE: require_fields(*ROUTE_FIELDS)},
)

RATE_SELECTION = RateSelectionStep(
    policy=DeselectPolicy.CLEAR_TO_UNDEFINED,
    id_field="selected_rate_id",
    clear_sell_on_select=True,
)


def can_advance(step: str, draft: "QuotationDraft") -> bool:
    return MACHINE.can_advance(step, draft)


@dataclass
class QuotationDraft:
    customer_name: str = ""
    pol: str = ""
    pod: str = ""
    equipment: str = ""
    type: str = "Export"
    status: str = QuotationStatus.DRAFT
    buy_rate: Optional[Decimal] = None
    sell_rate: Optional[Decimal] = None
    selected_rate_id: Optional[str] = None
    notes: Optional[str] = None
    # only feeds the summary prompt; not stored on the quotation
    volume: Optional[str] = None

    @property
    def profit_and_loss(self) -> Decimal:
        return profit_and_loss(self.sell_rate, self.buy_rate)

    @classmethod
    def from_record(cls, quotation: Quotation) -> "QuotationDraft":
        names = {f.name for f in fields(cls)}
        return cls(**{name: getattr(quotation, name) for name in names if hasattr(quotation, name)})

    def as_record(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name != "volume"}


@dataclass
class QuotationWizardState(WizardState):
    step: str = QuotationStep.COLLECTING_ROUTE
    draft: QuotationDraft = field(default_factory=QuotationDraft)
    candidates: List[ScheduleRate] = field(default_factory=list)
    searched: bool = False
    # status of the stored quotation when editing started
    original_status: Optional[str] = None


class QuotationWorkflow(Wizard):
    name = "quotation"
    machine = MACHINE

    state: QuotationWizardState

    @classmethod
    async def start(cls, store, quotation_id: Optional[str] = None) -> "QuotationWorkflow":
        state = QuotationWizardState()
        if quotation_id:
            quotation = await store.quotations.get(quotation_id)
            if quotation is None:
                raise NotFoundError("Quotation", quotation_id)
            state.record_id = quotation.id
            state.original_status = quotation.status
            state.draft = QuotationDraft.from_record(quotation)
        return cls(store, state)

    # ---- field edits ----

    def set_fields(self, values: Mapping[str, Any]) -> None:
        """Apply field edits from the client (already shape-checked by the serializer)."""
        draft = self.draft
        errors: Dict[str, List[str]] = {}
        changes: Dict[str, Any] = {}
        for name, val in values.items():
            if name in ("buy_rate", "sell_rate"):
                try:
                    amount = money_or_none(val)
                except ValueError as e:
                    errors[name] = [str(e)]
                    continue
                if amount is not None and amount < 0:
                    errors[name] = ["Must not be negative."]
                    continue
                changes[name] = amount
            elif name in ("notes", "volume"):
                changes[name] = val if val else None
            else:
                changes[name] = "" if val is None else str(val).strip()
        if changes.get("type") and changes["type"] not in SHIPMENT_TYPES:
            errors["type"] = [f"Must be one of: {', '.join(SHIPMENT_TYPES)}."]
        if changes.get("status"):
            current = self.state.original_status
            if not lifecycle.can_transition(current, changes["status"]):
                errors["status"] = [f"Quotation cannot move from '{current or 'new'}' to '{changes['status']}'."]
        if "buy_rate" in changes and draft.selected_rate_id and changes["buy_rate"] != draft.buy_rate:
            errors["buy_rate"] = ["Buy rate comes from the selected rate; deselect it to enter one manually."]
        if errors:
            raise self.fail(errors)

        route_changed = any(name in changes and changes[name] != getattr(draft, name) for name in ("pol", "pod"))
        for name, val in changes.items():
            setattr(draft, name, val)
        if route_changed:
            self.state.candidates = []
            self.state.searched = False
            if draft.selected_rate_id:
                RATE_SELECTION.deselect(draft)
                self.notify("Route changed; the selected rate was cleared.")
        self.state.errors = {}

    # ---- rate selection ----

    async def on_enter(self, step: str) -> None:
        if step == QuotationStep.SELECTING_RATE and self.draft.pol and self.draft.pod:
            await self._search()

    async def search_rates(self) -> List[ScheduleRate]:
        draft = self.draft
        if not draft.pol or not draft.pod:
            self.notify("Select Port of Loading and Port of Discharge first.")
            raise self.fail(require_fields("pol", "pod")(draft), step=QuotationStep.COLLECTING_ROUTE)
        return await self._search()

    async def _search(self) -> List[ScheduleRate]:
        draft = self.draft
        candidates = await RATE_SELECTION.search(self.store, draft.pol, draft.pod)
        self.state.candidates = candidates
        self.state.searched = True
        if RATE_SELECTION.reconcile(draft, candidates):
            self.notify("The previously selected rate is no longer offered; rates were cleared.")
        if not candidates:
            self.notify(
                f"No direct schedule rates found for {draft.pol} to {draft.pod}. "
                "Enter rates manually or check the route."
            )
        return candidates

    def select_rate(self, rate_id: str) -> ScheduleRate:
        self.require_step(QuotationStep.SELECTING_RATE)
        try:
            rate = RATE_SELECTION.select(self.draft, self.state.candidates, rate_id)
        except ValidationError as e:
            raise self.fail(e.errors)
        self.state.errors = {}
        return rate

    def deselect_rate(self) -> None:
        self.require_step(QuotationStep.SELECTING_RATE)
        RATE_SELECTION.deselect(self.draft)
        self.state.errors = {}

    # ---- summary ----

    async def generate_summary(self, provider=None) -> str:
        """Write a generated summary into ``notes``; on failure ``notes`` is left alone."""
        draft = self.draft
        payload = {
            "customer_name": draft.customer_name,
            "pol": draft.pol,
            "pod": draft.pod,
            "equipment": draft.equipment,
            "volume": draft.volume,
            "type": draft.type,
        }
        try:
            summary = await sync_to_async(generate_summary)(payload, provider)
        except ValidationError as e:
            self.notify(str(e))
            raise self.fail(e.errors)
        except ExternalServiceError as e:
            self.notify(str(e))
            raise
        draft.notes = summary
        return summary

    # ---- finalize ----

    def _rate_errors(self) -> Dict[str, List[str]]:
        draft = self.draft
        if draft.status != QuotationStatus.DRAFT and (draft.buy_rate is None or draft.sell_rate is None):
            message = "Buy and sell rates are required unless the quotation is a Draft."
            return {"buy_rate": [message], "sell_rate": [message]}
        return {}

    async def submit(self) -> Quotation:
        self.require_step(QuotationStep.REVIEW_AND_SUBMIT)
        draft = self.draft
        blocking_step, errors = MACHINE.blockers_before(QuotationStep.REVIEW_AND_SUBMIT, draft)
        if blocking_step is not None:
            raise self.fail(errors, step=blocking_step)
        errors = self._rate_errors()
        if errors:
            raise self.fail(errors, step=QuotationStep.SELECTING_RATE)

        if self.state.editing:
            current = await self.store.quotations.get(self.state.record_id)
            if current is None:
                raise NotFoundError("Quotation", self.state.record_id)
            if not lifecycle.can_transition(current.status, draft.status):
                raise self.fail({"status": [f"Quotation cannot move from '{current.status}' to '{draft.status}'."]})
            try:
                record = await self.store.quotations.update(self.state.record_id, draft.as_record())
            except ValidationError as e:
                raise self.fail(e.errors)
            if record is None:
                raise NotFoundError("Quotation", self.state.record_id)
        else:
            if not lifecycle.can_transition(None, draft.status):
                raise self.fail({"status": [f"A new quotation cannot start as '{draft.status}'."]})
            try:
                record = await self.store.quotations.create(draft.as_record())
            except ValidationError as e:
                raise self.fail(e.errors)
            self.state.record_id = record.id
        self.state.errors = {}
        logger.info("Quotation %s submitted from wizard (status %s)", record.id, record.status)
        return record
