"""Audit orchestration engine: stage scheduler and progress synchronizer."""

from .scheduler import NEXT_PHASE, AuditScheduler, InvalidTransitionError
from .synchronizer import CompletionGate, PhaseTiming, ProgressSynchronizer, next_progress

__all__ = [
    "AuditScheduler",
    "InvalidTransitionError",
    "NEXT_PHASE",
    "CompletionGate",
    "PhaseTiming",
    "ProgressSynchronizer",
    "next_progress",
]
