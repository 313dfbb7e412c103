"""Workflow module."""

from aiflow.workflow.models import BookChatResult, Operation, WorkflowResult
from aiflow.workflow.normalizers import normalize_category, normalize_emotion

__all__ = [
    "BookChatResult",
    "Operation",
    "WorkflowResult",
    "normalize_category",
    "normalize_emotion",
]
