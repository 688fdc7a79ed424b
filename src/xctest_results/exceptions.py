"""
Custom exceptions for XCTest results.
"""

from typing import Any


class XCTestResultsError(Exception):
    """Base exception for XCTest results errors."""

    pass


class InvalidInputError(XCTestResultsError):
    """Raised when a raw token from the test runner cannot be parsed."""

    def __init__(self, field_name: str, value: Any, reason: str):
        self.field_name = field_name
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid value for {field_name}: {value!r} ({reason})")


class UnknownStatusError(XCTestResultsError):
    """Raised when a status token or status code is not recognised."""

    def __init__(self, status: Any):
        self.status = status
        super().__init__(f"Unknown test status: {status!r}")


class EventSequenceError(XCTestResultsError):
    """Raised when a lifecycle callback arrives out of order."""

    def __init__(self, event: str, reason: str):
        self.event = event
        self.reason = reason
        super().__init__(f"Unexpected '{event}' event: {reason}")
