"""Step-by-step try-on workflow orchestration."""

from .state_machine import (
    IncompleteInputError,
    QuotaExceededError,
    TryOnWorkflow,
    WorkflowError,
    WorkflowObserver,
    WorkflowState,
    WorkflowStep,
)

__all__ = [
    "IncompleteInputError",
    "QuotaExceededError",
    "TryOnWorkflow",
    "WorkflowError",
    "WorkflowObserver",
    "WorkflowState",
    "WorkflowStep",
]
