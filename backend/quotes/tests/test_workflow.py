from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from core.exceptions import ExternalServiceError, NotFoundError, ValidationError
from quotes.workflow import MACHINE, QuotationDraft, QuotationStep, QuotationWorkflow, can_advance
from records.entities import QuotationStatus

pytestmark = pytest.mark.asyncio

ROUTE = {
    "customer_name": "Acme",
    "pol": "Singapore",
    "pod": "Rotterdam",
    "equipment": "40ft Dry",
    "type": "Export",
}


async def _on_rates(store, **fields):
    workflow = await QuotationWorkflow.start(store)
    workflow.set_fields({**ROUTE, **fields})
    await workflow.advance()
    return workflow


async def test_route_gate():
    draft = QuotationDraft(customer_name="Acme", pol="SGSIN")
    assert not can_advance(QuotationStep.COLLECTING_ROUTE, draft)
    assert set(MACHINE.blockers(QuotationStep.COLLECTING_ROUTE, draft)) == {"pod", "equipment"}


async def test_entering_rate_step_searches_automatically(store):
    workflow = await _on_rates(store)

    assert workflow.step == QuotationStep.SELECTING_RATE
    assert {r.carrier for r in workflow.state.candidates} == {"MAEU", "ONEY"}
    assert workflow.state.searched


async def test_no_rates_is_a_notice_not_an_error(store):
    workflow = await _on_rates(store, pol="Atlantis")

    assert workflow.state.candidates == []
    assert workflow.state.errors == {}
    assert any("No direct schedule rates" in n for n in workflow.state.notices)


async def test_select_then_deselect(store):
    workflow = await _on_rates(store, sell_rate="1300")
    rate = workflow.state.candidates[0]

    workflow.select_rate(rate.id)
    assert workflow.draft.buy_rate == rate.buy_rate
    assert workflow.draft.sell_rate is None
    assert workflow.draft.selected_rate_id == rate.id

    workflow.deselect_rate()
    assert workflow.draft.buy_rate is None
    assert workflow.draft.sell_rate is None
    assert workflow.draft.selected_rate_id is None


async def test_manual_buy_rate_refused_while_rate_selected(store):
    workflow = await _on_rates(store)
    workflow.select_rate(workflow.state.candidates[0].id)

    with pytest.raises(ValidationError):
        workflow.set_fields({"buy_rate": "1"})
    assert "buy_rate" in workflow.state.errors


async def test_route_change_clears_selection(store):
    workflow = await _on_rates(store)
    workflow.select_rate(workflow.state.candidates[0].id)
    workflow.back()

    workflow.set_fields({"pod": "Hamburg"})

    assert workflow.draft.selected_rate_id is None
    assert workflow.state.candidates == []


async def test_manual_search_without_route_snaps_back(store):
    workflow = await _on_rates(store)
    workflow.draft.pod = ""

    with pytest.raises(ValidationError):
        await workflow.search_rates()
    assert workflow.step == QuotationStep.COLLECTING_ROUTE
    assert "pod" in workflow.state.errors


async def test_submit_draft_without_rates(store):
    workflow = await _on_rates(store)
    await workflow.advance()

    record = await workflow.submit()

    assert record.id == "QTN-001013"
    assert record.status == QuotationStatus.DRAFT
    assert record.buy_rate is None
    assert await store.quotations.get(record.id) == record


async def test_submit_non_draft_without_sell_rate_snaps_back(store):
    workflow = await _on_rates(store, status="Submitted")
    workflow.select_rate(workflow.state.candidates[0].id)
    await workflow.advance()

    with pytest.raises(ValidationError) as exc:
        await workflow.submit()

    assert set(exc.value.errors) == {"buy_rate", "sell_rate"}
    assert workflow.step == QuotationStep.SELECTING_RATE
    assert len(store.quotations) == 12


async def test_submit_with_selected_rate_computes_pnl(store):
    workflow = await _on_rates(store, status="Submitted")
    rate = next(r for r in workflow.state.candidates if r.carrier == "MAEU")
    workflow.select_rate(rate.id)
    workflow.set_fields({"sell_rate": "1300"})
    await workflow.advance()

    record = await workflow.submit()

    assert record.selected_rate_id == rate.id
    assert record.profit_and_loss == Decimal("1300.00") - rate.buy_rate


async def test_submit_only_from_review_step(store):
    workflow = await _on_rates(store)
    with pytest.raises(ValidationError):
        await workflow.submit()


async def test_new_quotation_cannot_start_cancelled(store):
    workflow = await QuotationWorkflow.start(store)
    with pytest.raises(ValidationError) as exc:
        workflow.set_fields({"status": "Cancelled"})
    assert "status" in exc.value.errors


async def test_edit_existing_quotation(store):
    workflow = await QuotationWorkflow.start(store, "QTN-001003")
    assert workflow.state.editing
    assert workflow.draft.customer_name == "ABC Limited"

    workflow.set_fields({"notes": "Call before shipping", "status": "Submitted"})
    await workflow.goto(QuotationStep.REVIEW_AND_SUBMIT)
    record = await workflow.submit()

    assert record.id == "QTN-001003"
    assert record.status == QuotationStatus.SUBMITTED
    assert record.notes == "Call before shipping"
    assert len(store.quotations) == 12


async def test_edit_cannot_leave_booking_completed(store):
    workflow = await QuotationWorkflow.start(store, "QTN-001001")
    with pytest.raises(ValidationError):
        workflow.set_fields({"status": "Submitted"})


async def test_edit_missing_quotation(store):
    with pytest.raises(NotFoundError):
        await QuotationWorkflow.start(store, "QTN-404404")


async def test_generate_summary_writes_notes(store):
    workflow = await QuotationWorkflow.start(store)
    workflow.set_fields(ROUTE)
    provider = MagicMock()
    provider.summarize.return_value = "  Export of 1x40ft Dry for Acme.  "

    await workflow.generate_summary(provider)

    assert workflow.draft.notes == "Export of 1x40ft Dry for Acme."
    request = provider.summarize.call_args.args[0]
    assert request.volume == "1x40ft Dry"


async def test_generate_summary_failure_keeps_notes(store):
    workflow = await QuotationWorkflow.start(store)
    workflow.set_fields({**ROUTE, "notes": "original"})
    provider = MagicMock()
    provider.summarize.side_effect = ExternalServiceError("down")

    with pytest.raises(ExternalServiceError):
        await workflow.generate_summary(provider)
    assert workflow.draft.notes == "original"
    assert workflow.state.notices == ["down"]


async def test_generate_summary_requires_route(store):
    workflow = await QuotationWorkflow.start(store)
    workflow.set_fields({"customer_name": "Acme"})

    with pytest.raises(ValidationError) as exc:
        await workflow.generate_summary(MagicMock())
    assert set(exc.value.errors) == {"pol", "pod", "equipment"}
