"""
Shared error handling package.

Centralizes error-to-recovery mapping so that sync errors
are consistently translated into something a UI can act on.
"""

from storage_sync.shared.errors.classification import (
    ErrorCategory,
    ErrorClassification,
    RecoveryAction,
    classify_error,
)

__all__ = [
    "ErrorCategory",
    "ErrorClassification",
    "RecoveryAction",
    "classify_error",
]
