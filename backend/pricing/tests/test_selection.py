from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

import pytest

from core.exceptions import ValidationError
from pricing.selection import DeselectPolicy, RateSelectionStep
from records.entities import ScheduleRate

CANDIDATES = [
    ScheduleRate(id="SRATE-1", carrier="MAEU", origin="SGSIN", destination="NLRTM",
                 voyage_details="M5", buy_rate=Decimal("1000.00"), allocation=3),
    ScheduleRate(id="SRATE-2", carrier="ONEY", origin="SGSIN", destination="NLRTM",
                 voyage_details="O5", buy_rate=Decimal("950.00"), allocation=2),
]


@dataclass
class Draft:
    buy_rate: Optional[Decimal] = None
    sell_rate: Optional[Decimal] = None
    selected_rate_id: Optional[str] = None


QUOTATION_STYLE = RateSelectionStep(DeselectPolicy.CLEAR_TO_UNDEFINED, clear_sell_on_select=True)
BOOKING_STYLE = RateSelectionStep(DeselectPolicy.RESET_TO_ZERO)


class TestSelect:
    def test_select_mirrors_buy_and_clears_sell(self):
        draft = Draft(sell_rate=Decimal("1300.00"))
        QUOTATION_STYLE.select(draft, CANDIDATES, "SRATE-2")
        assert draft.selected_rate_id == "SRATE-2"
        assert draft.buy_rate == Decimal("950.00")
        assert draft.sell_rate is None

    def test_select_keeps_sell_when_not_asked_to_clear(self):
        draft = Draft(sell_rate=Decimal("1300.00"))
        BOOKING_STYLE.select(draft, CANDIDATES, "SRATE-1")
        assert draft.sell_rate == Decimal("1300.00")

    def test_unknown_candidate(self):
        with pytest.raises(ValidationError) as exc:
            QUOTATION_STYLE.select(Draft(), CANDIDATES, "SRATE-9")
        assert "selected_rate_id" in exc.value.errors


class TestDeselect:
    def test_clear_to_undefined(self):
        draft = Draft()
        QUOTATION_STYLE.select(draft, CANDIDATES, "SRATE-1")
        draft.sell_rate = Decimal("1200.00")
        QUOTATION_STYLE.deselect(draft)
        assert draft == Draft()

    def test_reset_to_zero(self):
        draft = Draft(sell_rate=Decimal("1200.00"))
        BOOKING_STYLE.select(draft, CANDIDATES, "SRATE-1")
        BOOKING_STYLE.deselect(draft)
        assert draft.selected_rate_id is None
        assert draft.buy_rate == Decimal("0.00")
        assert draft.sell_rate == Decimal("1200.00")


class TestReconcile:
    def test_drops_selection_missing_from_candidates(self):
        draft = Draft()
        QUOTATION_STYLE.select(draft, CANDIDATES, "SRATE-1")
        assert QUOTATION_STYLE.reconcile(draft, CANDIDATES[1:]) is True
        assert draft.selected_rate_id is None

    def test_keeps_manual_rates(self):
        draft = Draft(buy_rate=Decimal("10.00"), sell_rate=Decimal("20.00"))
        assert QUOTATION_STYLE.reconcile(draft, []) is False
        assert draft.buy_rate == Decimal("10.00")


class TestManualBuyRate:
    def test_manual_entry(self):
        draft = Draft()
        BOOKING_STYLE.set_manual_buy_rate(draft, "812.5")
        assert draft.buy_rate == Decimal("812.50")

    def test_refused_while_selected(self):
        draft = Draft()
        BOOKING_STYLE.select(draft, CANDIDATES, "SRATE-1")
        with pytest.raises(ValidationError):
            BOOKING_STYLE.set_manual_buy_rate(draft, "5")

    @pytest.mark.parametrize("value", ["-1", "abc"])
    def test_invalid(self, value):
        with pytest.raises(ValidationError) as exc:
            BOOKING_STYLE.set_manual_buy_rate(Draft(), value)
        assert "buy_rate" in exc.value.errors
