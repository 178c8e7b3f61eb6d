"""Utility modules for configuration, logging, errors, and AWS integration."""

from .config import Config
from .errors import (
    CasewriteError,
    EncodingError,
    MissingCredentialError,
    RemoteError,
    SchemaError,
    SubmissionBusyError,
    ValidationError,
)

__all__ = [
    'Config',
    'CasewriteError',
    'EncodingError',
    'MissingCredentialError',
    'RemoteError',
    'SchemaError',
    'SubmissionBusyError',
    'ValidationError',
]
