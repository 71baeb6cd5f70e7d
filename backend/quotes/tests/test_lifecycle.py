import pytest

from core.exceptions import TransitionError
from quotes import lifecycle
from records.entities import Quotation, QuotationStatus as S


@pytest.mark.parametrize(
    "current, requested, allowed",
    [
        (None, S.DRAFT, True),
        (None, S.SUBMITTED, True),
        (None, S.BOOKING_COMPLETED, False),
        (None, S.CANCELLED, False),
        (S.DRAFT, S.SUBMITTED, True),
        (S.DRAFT, S.CANCELLED, True),
        (S.SUBMITTED, S.CANCELLED, True),
        (S.SUBMITTED, S.DRAFT, False),
        (S.SUBMITTED, S.BOOKING_COMPLETED, False),
        (S.BOOKING_COMPLETED, S.SUBMITTED, False),
        (S.BOOKING_COMPLETED, S.BOOKING_COMPLETED, True),
        (S.CANCELLED, S.DRAFT, False),
    ],
)
def test_user_transitions(current, requested, allowed):
    assert lifecycle.can_transition(current, requested) is allowed


def test_check_transition_raises_with_status_error():
    with pytest.raises(TransitionError) as exc:
        lifecycle.check_transition(S.CANCELLED, S.SUBMITTED)
    assert exc.value.errors["status"] == ["Quotation cannot move from 'Cancelled' to 'Submitted'."]


def _quotation(status):
    return Quotation(id="QTN-1", customer_name="A", pol="X", pod="Y", equipment="20GP", type="Export", status=status)


def test_only_booking_completed_is_protected_from_delete():
    assert not lifecycle.can_delete(_quotation(S.BOOKING_COMPLETED))
    assert lifecycle.can_delete(_quotation(S.CANCELLED))


def test_only_submitted_can_be_booked():
    assert lifecycle.can_book(_quotation(S.SUBMITTED))
    assert not lifecycle.can_book(_quotation(S.DRAFT))
