from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from django.conf import settings

from core.exceptions import ExternalServiceError, ValidationError

from .providers import SummaryRequest, load

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("customer_name", "pol", "pod", "equipment", "type")


def missing_fields(data: Mapping[str, Any]) -> List[str]:
    return [name for name in REQUIRED_FIELDS if not str(data.get(name) or "").strip()]


def build_request(data: Mapping[str, Any]) -> SummaryRequest:
    missing = missing_fields(data)
    if missing:
        raise ValidationError(
            {name: ["Required to generate a summary."] for name in missing},
            message=f"Please fill in {', '.join(missing)} before generating summary.",
        )
    equipment = str(data["equipment"]).strip()
    return SummaryRequest(
        customer_name=str(data["customer_name"]).strip(),
        pol=str(data["pol"]).strip(),
        pod=str(data["pod"]).strip(),
        equipment=equipment,
        volume=str(data.get("volume") or "").strip() or f"1x{equipment}",
        type=str(data["type"]).strip(),
    )


def generate_summary(data: Mapping[str, Any], provider: Optional[Any] = None) -> str:
    """Summary note for a quotation; raises ExternalServiceError when the provider fails."""
    request = build_request(data)
    provider = provider or load(settings.SUMMARY_PROVIDER)
    summary = (provider.summarize(request) or "").strip()
    if not summary:
        raise ExternalServiceError("The summary provider returned an empty summary.")
    logger.info("Generated summary for %s (%s-%s)", request.customer_name, request.pol, request.pod)
    return summary
