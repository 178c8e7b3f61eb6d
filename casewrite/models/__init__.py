"""Submission, request and workflow result models."""

from .submission import ALLOWED_MIME_TYPES, DocumentSubmission, FileData
from .workflow import WorkflowResult

__all__ = [
    'ALLOWED_MIME_TYPES',
    'DocumentSubmission',
    'FileData',
    'WorkflowResult',
]
