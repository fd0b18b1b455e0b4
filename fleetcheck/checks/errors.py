"""
Custom exceptions for node property checks.

Provides specific error types for different failure modes.
"""

from __future__ import annotations

from typing import Any


class CheckError(Exception):
    """Base exception for all check-related errors."""

    pass


class ClassificationError(CheckError):
    """A property value could not be interpreted as a classification."""

    def __init__(self, message: str, key: str, value: Any):
        super().__init__(message)
        self.key = key
        self.value = value


class LifecycleViolationError(CheckError):
    """A cycle operation was called out of order."""

    def __init__(self, message: str, operation: str, state: str):
        super().__init__(message)
        self.operation = operation
        self.state = state


class SinkFailureError(CheckError):
    """The metric sink rejected a gauge update."""

    def __init__(self, message: str, label: str, value: float):
        super().__init__(message)
        self.label = label
        self.value = value
