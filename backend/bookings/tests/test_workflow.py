from decimal import Decimal

import pytest

from bookings.workflow import BookingDraft, BookingStep, BookingWorkflow, can_advance
from core.exceptions import NotFoundError, ValidationError
from quotes.services import update_quotation
from records.entities import BookingStatus, QuotationStatus

pytestmark = pytest.mark.asyncio


async def _on_carrier_step(store, quotation_id="QTN-001002"):
    workflow = await BookingWorkflow.start(store)
    await workflow.select_quotation(quotation_id)
    await workflow.advance()
    await workflow.advance()
    return workflow


async def test_quotation_gate():
    assert not can_advance(BookingStep.SELECTING_QUOTATION, BookingDraft())
    assert can_advance(BookingStep.SELECTING_QUOTATION, BookingDraft(quotation_id="QTN-001002"))


async def test_search_quotations(store):
    workflow = await BookingWorkflow.start(store)

    results = await workflow.search_quotations("abc")

    assert {q.id for q in results} == {"QTN-001001", "QTN-001002", "QTN-001003"}
    assert workflow.state.quotation_results == results


async def test_search_quotations_without_matches_notifies(store):
    workflow = await BookingWorkflow.start(store)
    assert await workflow.search_quotations("zzz") == []
    assert workflow.state.notices


async def test_select_quotation_copies_fields(store):
    workflow = await BookingWorkflow.start(store)

    await workflow.select_quotation("QTN-001002")

    draft = workflow.draft
    assert (draft.customer_name, draft.pol, draft.pod, draft.equipment) == ("ABC Limited", "INMAA", "USLGB", "40GP")
    assert draft.sell_rate == Decimal("1200.00")
    assert draft.buy_rate is None
    assert workflow.state.quotation.id == "QTN-001002"


async def test_only_submitted_quotations_can_be_booked(store):
    workflow = await BookingWorkflow.start(store)

    with pytest.raises(ValidationError) as exc:
        await workflow.select_quotation("QTN-001003")

    assert "quotation_id" in exc.value.errors
    assert workflow.draft.quotation_id == ""


async def test_unknown_quotation(store):
    workflow = await BookingWorkflow.start(store)
    with pytest.raises(NotFoundError):
        await workflow.select_quotation("QTN-777777")


async def test_rates_are_searched_on_demand(store):
    workflow = await _on_carrier_step(store)
    assert workflow.step == BookingStep.SELECTING_CARRIER_RATE
    assert workflow.state.candidates == []

    candidates = await workflow.search_rates()

    assert {r.carrier for r in candidates} == {"ONEY", "MAEU", "HLCU"}


async def test_select_and_deselect_carrier_rate(store):
    workflow = await _on_carrier_step(store)
    await workflow.search_rates()
    rate = next(r for r in workflow.state.candidates if r.carrier == "MAEU")

    workflow.select_rate(rate.id)
    assert workflow.draft.buy_rate == Decimal("1100.00")
    assert workflow.draft.sell_rate == Decimal("1200.00")
    assert workflow.draft.profit_and_loss == Decimal("100.00")

    workflow.deselect_rate()
    assert workflow.draft.selected_carrier_rate_id is None
    assert workflow.draft.buy_rate == Decimal("0")
    assert workflow.draft.sell_rate == Decimal("1200.00")


async def test_manual_buy_rate_blocked_while_selected(store):
    workflow = await _on_carrier_step(store)
    await workflow.search_rates()
    workflow.select_rate(workflow.state.candidates[0].id)

    with pytest.raises(ValidationError):
        workflow.set_buy_rate("500")

    workflow.deselect_rate()
    workflow.set_buy_rate("500")
    assert workflow.draft.buy_rate == Decimal("500.00")


async def test_rate_actions_only_on_carrier_step(store):
    workflow = await BookingWorkflow.start(store)
    with pytest.raises(ValidationError):
        await workflow.search_rates()


async def test_submit_creates_booking_and_completes_quotation(store):
    workflow = await _on_carrier_step(store)
    await workflow.search_rates()
    rate = next(r for r in workflow.state.candidates if r.carrier == "HLCU")
    workflow.select_rate(rate.id)
    await workflow.advance()

    booking = await workflow.submit()

    assert booking.id == "BKNG-002006"
    assert booking.selected_carrier_rate_id == rate.id
    assert booking.profit_and_loss == Decimal("300.00")
    assert workflow.state.record_id == booking.id
    assert (await store.quotations.get("QTN-001002")).status == QuotationStatus.BOOKING_COMPLETED


async def test_submit_without_buy_rate_books_at_zero(store):
    workflow = await _on_carrier_step(store)
    await workflow.advance()

    booking = await workflow.submit()

    assert booking.buy_rate == Decimal("0")
    assert booking.profit_and_loss == Decimal("1200.00")


async def test_quotation_booked_meanwhile(store):
    workflow = await _on_carrier_step(store)
    await workflow.advance()
    await store.quotations.update("QTN-001002", {"status": QuotationStatus.CANCELLED})

    with pytest.raises(ValidationError) as exc:
        await workflow.submit()

    assert "quotation_id" in exc.value.errors
    assert len(store.bookings) == 4


async def test_edit_keeps_quotation_and_moves_status(store):
    workflow = await BookingWorkflow.start(store, "BKNG-002001")
    assert workflow.state.editing
    assert workflow.draft.quotation_id == "QTN-001001"

    with pytest.raises(ValidationError):
        await workflow.select_quotation("QTN-001002")

    workflow.set_fields({"status": BookingStatus.SHIPPED, "notes": "Loaded"})
    await workflow.goto(BookingStep.REVIEW_AND_SUBMIT)
    booking = await workflow.submit()

    assert booking.id == "BKNG-002001"
    assert booking.status == BookingStatus.SHIPPED
    assert booking.notes == "Loaded"
    assert len(store.bookings) == 4


async def test_edit_rejects_illegal_status(store):
    workflow = await BookingWorkflow.start(store, "BKNG-002001")
    with pytest.raises(ValidationError) as exc:
        workflow.set_fields({"status": BookingStatus.DELIVERED})
    assert "status" in exc.value.errors


async def test_start_unknown_booking(store):
    with pytest.raises(NotFoundError):
        await BookingWorkflow.start(store, "BKNG-000001")


async def test_booking_keeps_its_copy_after_quotation_edits(store):
    workflow = await _on_carrier_step(store)
    workflow.set_buy_rate("1000")
    await workflow.advance()
    booking = await workflow.submit()

    await update_quotation(store, "QTN-001002", {"customer_name": "ABC Holdings", "sell_rate": Decimal("1500.00")})

    stored = await store.bookings.get(booking.id)
    assert stored.customer_name == "ABC Limited"
    assert stored.sell_rate == Decimal("1200.00")
    assert stored.profit_and_loss == Decimal("200.00")
    assert (await store.quotations.get("QTN-001002")).customer_name == "ABC Holdings"


async def test_refused_field_edit_changes_nothing(store):
    workflow = await BookingWorkflow.start(store)
    await workflow.select_quotation("QTN-001002")

    with pytest.raises(ValidationError):
        workflow.set_fields({"status": BookingStatus.BOOKED, "notes": "rush", "buy_rate": "900"})

    assert workflow.draft.notes is None
    assert workflow.draft.buy_rate is None


async def test_non_finite_manual_buy_rate(store):
    workflow = await _on_carrier_step(store)

    with pytest.raises(ValidationError) as exc:
        workflow.set_buy_rate("NaN")

    assert "buy_rate" in exc.value.errors
    assert workflow.draft.buy_rate is None
