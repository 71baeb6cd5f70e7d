"""
Wizard sessions kept in Django's cache.

A session is the pickled wizard state plus the id of the user who started it;
it expires ``WIZARD_TTL_SECONDS`` after its last write. Abandoning a session
(DELETE or expiry) never touches the record store.
"""

from __future__ import annotations

import logging
import uuid
from typing import Optional

from django.conf import settings
from django.core.cache import cache

from core.exceptions import NotFoundError

from .wizard import WizardState

logger = logging.getLogger(__name__)


class WizardSessions:
    def __init__(self, kind: str):
        self.kind = kind

    def _key(self, session_id: str) -> str:
        return f"wizard:{self.kind}:{session_id}"

    def create(self, user_id: Optional[int], state: WizardState) -> str:
        session_id = uuid.uuid4().hex
        self.save(session_id, user_id, state)
        logger.debug("Started %s wizard session %s", self.kind, session_id)
        return session_id

    def save(self, session_id: str, user_id: Optional[int], state: WizardState) -> None:
        cache.set(self._key(session_id), (user_id, state), timeout=settings.WIZARD_TTL_SECONDS)

    def load(self, session_id: str, user_id: Optional[int]) -> WizardState:
        entry = cache.get(self._key(session_id))
        if entry is None or entry[0] != user_id:
            raise NotFoundError(f"{self.kind.capitalize()} wizard session", session_id)
        return entry[1]

    def discard(self, session_id: str) -> None:
        cache.delete(self._key(session_id))
        logger.debug("Discarded %s wizard session %s", self.kind, session_id)
