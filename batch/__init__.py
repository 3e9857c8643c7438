"""Batch generation module."""
from batch.models import BatchOutcome, RunStatus
from batch.orchestrator import BatchOrchestrator, BatchRunState, ResultCollection

__all__ = [
    "BatchOutcome",
    "RunStatus",
    "BatchOrchestrator",
    "BatchRunState",
    "ResultCollection"
]
