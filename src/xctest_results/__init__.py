"""
Summaries of XCTest suite results and the lifecycle callbacks that produce them.
"""

from .collector import ResultCollector
from .exceptions import (
    EventSequenceError,
    InvalidInputError,
    UnknownStatusError,
    XCTestResultsError,
)
from .models import ResultSummary, TestPlanReport, TestReportStatus
from .results import aggregate_summaries

__all__ = [
    "EventSequenceError",
    "InvalidInputError",
    "ResultCollector",
    "ResultSummary",
    "TestPlanReport",
    "TestReportStatus",
    "UnknownStatusError",
    "XCTestResultsError",
    "aggregate_summaries",
]
