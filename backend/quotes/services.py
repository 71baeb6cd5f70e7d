"""
Direct quotation edits outside the wizard (list screen actions).
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from core.exceptions import NotFoundError, ValidationError
from records.entities import Quotation

from . import lifecycle

logger = logging.getLogger(__name__)


async def update_quotation(store, quotation_id: str, changes: Dict[str, Any]) -> Quotation:
    current = await store.quotations.get(quotation_id)
    if current is None:
        raise NotFoundError("Quotation", quotation_id)
    changes = dict(changes)
    if "status" in changes:
        lifecycle.check_transition(current.status, changes["status"])
    # a hand-edited buy rate no longer mirrors the selected schedule rate
    if "buy_rate" in changes and current.selected_rate_id and changes["buy_rate"] != current.buy_rate:
        changes["selected_rate_id"] = None
    record = await store.quotations.update(quotation_id, changes)
    if record is None:
        raise NotFoundError("Quotation", quotation_id)
    return record


async def delete_quotation(store, quotation_id: str) -> None:
    current = await store.quotations.get(quotation_id)
    if current is None:
        raise NotFoundError("Quotation", quotation_id)
    if not lifecycle.can_delete(current):
        raise ValidationError(
            {"status": ["A quotation with a completed booking cannot be deleted."]},
            message=f"Quotation {quotation_id} has a completed booking",
        )
    if not await store.quotations.delete(quotation_id):
        raise NotFoundError("Quotation", quotation_id)
    logger.info("Quotation %s deleted", quotation_id)
