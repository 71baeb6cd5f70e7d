import pytest

from bookings import lifecycle
from core.exceptions import TransitionError
from records.entities import BookingStatus as S


@pytest.mark.parametrize(
    "current, requested, allowed",
    [
        (None, S.BOOKED, True),
        (None, S.SHIPPED, False),
        (S.BOOKED, S.SHIPPED, True),
        (S.BOOKED, S.CANCELLED, True),
        (S.BOOKED, S.DELIVERED, False),
        (S.SHIPPED, S.DELIVERED, True),
        (S.SHIPPED, S.BOOKED, False),
        (S.DELIVERED, S.CANCELLED, False),
        (S.CANCELLED, S.BOOKED, False),
        (S.SHIPPED, S.SHIPPED, True),
    ],
)
def test_transitions(current, requested, allowed):
    assert lifecycle.can_transition(current, requested) is allowed


def test_check_transition():
    lifecycle.check_transition(S.BOOKED, S.SHIPPED)
    with pytest.raises(TransitionError) as exc:
        lifecycle.check_transition(S.DELIVERED, S.BOOKED)
    assert exc.value.current == S.DELIVERED
    assert "status" in exc.value.errors
