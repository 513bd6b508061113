"""Shared fakes for workflow tests."""

from __future__ import annotations

import asyncio

import pytest

from tryon.entitlement import EntitlementGate, EntitlementState
from tryon.workflow import TryOnWorkflow, WorkflowObserver, WorkflowState


class FakeGenerationClient:
    """Stands in for the generation service.

    In ``manual`` mode every call parks on a future the test resolves itself.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[bytes, bytes]] = []
        self.pending: list[asyncio.Future[bytes]] = []
        self.result = b"C"
        self.error: BaseException | None = None
        self.manual = False

    async def generate(self, subject_image: bytes, garment_image: bytes) -> bytes:
        self.calls.append((subject_image, garment_image))
        if self.manual:
            future: asyncio.Future[bytes] = asyncio.get_running_loop().create_future()
            self.pending.append(future)
            return await future
        if self.error is not None:
            raise self.error
        return self.result


class RecordingObserver(WorkflowObserver):
    def __init__(self) -> None:
        self.states: list[WorkflowState] = []
        self.quota_events: list[EntitlementState] = []

    async def state_changed(self, state: WorkflowState, entitlement: EntitlementState) -> None:
        self.states.append(state)

    async def quota_exceeded(self, entitlement: EntitlementState) -> None:
        self.quota_events.append(entitlement)


@pytest.fixture
def fake_client() -> FakeGenerationClient:
    return FakeGenerationClient()


@pytest.fixture
def gate() -> EntitlementGate:
    return EntitlementGate(3)


@pytest.fixture
def observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
def workflow(fake_client: FakeGenerationClient, gate: EntitlementGate, observer: RecordingObserver) -> TryOnWorkflow:
    return TryOnWorkflow(fake_client, gate, observer)
