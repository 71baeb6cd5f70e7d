from __future__ import annotations

from collections import Counter
from datetime import date
from typing import Dict, List, Optional

from django.utils import timezone

from records.entities import QuotationStatus

STATUS_KEYS = {
    QuotationStatus.DRAFT: "draft",
    QuotationStatus.SUBMITTED: "submitted",
    QuotationStatus.BOOKING_COMPLETED: "completed",
    QuotationStatus.CANCELLED: "cancelled",
}


async def quotation_status_summary(store) -> Dict[str, int]:
    summary = {key: 0 for key in STATUS_KEYS.values()}
    for quotation in await store.quotations.all():
        key = STATUS_KEYS.get(quotation.status)
        if key:
            summary[key] += 1
    return summary


def _last_months(today: date, months: int) -> List[date]:
    year, month = today.year, today.month
    firsts = []
    for _ in range(months):
        firsts.append(date(year, month, 1))
        year, month = (year, month - 1) if month > 1 else (year - 1, 12)
    return list(reversed(firsts))


async def bookings_by_month(store, months: int = 6, today: Optional[date] = None) -> List[Dict[str, object]]:
    """Booking counts per calendar month (by creation date), oldest month first."""
    today = today or timezone.localdate()
    counts = Counter()
    for booking in await store.bookings.all():
        if booking.created_at is not None:
            created = timezone.localtime(booking.created_at).date()
            counts[(created.year, created.month)] += 1
    return [
        {"month": first.strftime("%b %Y"), "count": counts[(first.year, first.month)]}
        for first in _last_months(today, months)
    ]
