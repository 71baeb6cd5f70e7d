from __future__ import annotations

from . import SummaryRequest


class StaticProvider:
    """Offline provider: a templated note, no network access."""

    def summarize(self, request: SummaryRequest) -> str:
        return (
            f"{request.type} quotation for {request.customer_name}: {request.volume} "
            f"({request.equipment}) from {request.pol} to {request.pod}."
        )
