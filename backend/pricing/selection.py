"""
Rate selection step used by both pricing wizards.

The user either picks one candidate ScheduleRate (its buy rate is mirrored
into the draft) or leaves the selection empty and keys the rates in by hand.
What happens to the draft's rates when a selection is dropped is the caller's
choice, expressed as a ``DeselectPolicy``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from core.exceptions import ValidationError
from core.utils import ZERO, money_or_none
from records.entities import ScheduleRate

logger = logging.getLogger(__name__)


class DeselectPolicy(Enum):
    # selection id, buy rate and sell rate all go back to undefined
    CLEAR_TO_UNDEFINED = "clear_to_undefined"
    # selection id cleared, buy rate becomes 0, sell rate kept
    RESET_TO_ZERO = "reset_to_zero"


@dataclass(frozen=True)
class RateSelectionStep:
    policy: DeselectPolicy
    id_field: str = "selected_rate_id"
    clear_sell_on_select: bool = False

    def selected_id(self, draft) -> Optional[str]:
        return getattr(draft, self.id_field)

    async def search(self, store, origin: str, destination: str) -> List[ScheduleRate]:
        return await store.search_rates(origin=origin, destination=destination)

    def select(self, draft, candidates: Sequence[ScheduleRate], rate_id: str) -> ScheduleRate:
        rate = next((c for c in candidates if c.id == rate_id), None)
        if rate is None:
            raise ValidationError({self.id_field: [f"Rate '{rate_id}' is not among the current search results."]})
        setattr(draft, self.id_field, rate.id)
        draft.buy_rate = rate.buy_rate
        if self.clear_sell_on_select:
            draft.sell_rate = None
        logger.debug("Selected rate %s (buy %s)", rate.id, rate.buy_rate)
        return rate

    def deselect(self, draft) -> None:
        setattr(draft, self.id_field, None)
        if self.policy is DeselectPolicy.CLEAR_TO_UNDEFINED:
            draft.buy_rate = None
            draft.sell_rate = None
        else:
            draft.buy_rate = ZERO

    def reconcile(self, draft, candidates: Sequence[ScheduleRate]) -> bool:
        """Drop a selection that is no longer among ``candidates``; True when one was dropped."""
        selected = self.selected_id(draft)
        if selected and all(c.id != selected for c in candidates):
            self.deselect(draft)
            return True
        return False

    def set_manual_buy_rate(self, draft, value) -> None:
        if self.selected_id(draft):
            raise ValidationError({"buy_rate": ["Buy rate comes from the selected rate; deselect it to enter one manually."]})
        try:
            amount = money_or_none(value)
        except ValueError as e:
            raise ValidationError({"buy_rate": [str(e)]})
        if amount is not None and amount < 0:
            raise ValidationError({"buy_rate": ["Must not be negative."]})
        draft.buy_rate = amount
