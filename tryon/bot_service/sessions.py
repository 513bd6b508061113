"""In-memory registry of per-user try-on workflows."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from tryon.entitlement import EntitlementGate
from tryon.imggen import GenerationClient
from tryon.workflow import TryOnWorkflow, WorkflowObserver

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TryOnSession:
    """Workflow and entitlement of a single Telegram user."""

    user_id: int
    workflow: TryOnWorkflow
    gate: EntitlementGate


class SessionRegistry:
    """Creates sessions lazily and keeps them for the lifetime of the process."""

    def __init__(self, client: GenerationClient, free_limit: int) -> None:
        self._client = client
        self._free_limit = free_limit
        self._sessions: dict[int, TryOnSession] = {}

    def get(self, user_id: int, observer_factory: Callable[[], WorkflowObserver]) -> TryOnSession:
        """Return the user's session, creating it with a fresh observer if needed."""

        session = self._sessions.get(user_id)
        if session is None:
            gate = EntitlementGate(self._free_limit)
            workflow = TryOnWorkflow(self._client, gate, observer_factory())
            session = TryOnSession(user_id=user_id, workflow=workflow, gate=gate)
            self._sessions[user_id] = session
            logger.info("Created try-on session for user %s.", user_id)
        return session

    def __len__(self) -> int:
        return len(self._sessions)
