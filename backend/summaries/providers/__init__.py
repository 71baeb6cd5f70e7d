from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SummaryRequest:
    customer_name: str
    pol: str
    pod: str
    equipment: str
    volume: str
    type: str


PROMPT = """You are a helpful freight logistics assistant. Based on the following quotation details, \
please generate a concise and professional summary note. This note is for internal records and should \
be suitable to be placed in a notes field.

Quotation Details:
- Customer: {customer_name}
- Port of Loading (POL): {pol}
- Port of Discharge (POD): {pod}
- Equipment: {equipment}
- Volume: {volume}
- Type: {type}

Generate a summary note."""


def build_prompt(request: SummaryRequest) -> str:
    return PROMPT.format(**request.__dict__)


def load(name: Optional[str]):
    """
    Lazy-load a summary provider by name.
    - 'anthropic', 'claude' -> AnthropicProvider (configured from settings)
    - 'static', 'offline' -> StaticProvider (no network)
    """
    key = (name or "anthropic").strip().lower()
    if key in {"anthropic", "claude"}:
        from .anthropic_api import AnthropicProvider  # local import to avoid circulars
        return AnthropicProvider.from_settings()
    if key in {"static", "offline"}:
        from .static import StaticProvider
        return StaticProvider()
    logger.warning("Unknown summary provider %r, using the static provider", name)
    from .static import StaticProvider
    return StaticProvider()
