"""Bulk client operations."""

from fitconnect.batch.executor import BatchExecutor, summary_message
from fitconnect.batch.types import (
    BatchOperationPayload,
    BatchOperationResult,
    BatchOperationSummary,
    BatchOperationType,
)

__all__ = [
    "BatchExecutor",
    "BatchOperationPayload",
    "BatchOperationResult",
    "BatchOperationSummary",
    "BatchOperationType",
    "summary_message",
]
