"""
Data models for XCTest results.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Optional, Union

from .exceptions import UnknownStatusError
from .parsing import parse_count, parse_duration, parse_finish_time

logger = logging.getLogger(__name__)


class TestReportStatus(Enum):
    """Status of a test case or suite as reported by the test manager."""

    UNKNOWN = 0
    PASSED = 1
    FAILED = 2


_STATUS_BY_STRING = MappingProxyType(
    {
        "unknown": TestReportStatus.UNKNOWN,
        "passed": TestReportStatus.PASSED,
        "failed": TestReportStatus.FAILED,
    }
)

_STRING_BY_STATUS = MappingProxyType({status: text for text, status in _STATUS_BY_STRING.items()})


@dataclass(frozen=True)
class ResultSummary:
    """A summary of the results of one finished test suite."""

    test_suite: str
    finish_time: datetime
    run_count: int
    failure_count: int
    unexpected: int
    test_duration: float
    total_duration: float

    @classmethod
    def from_test_suite(
        cls,
        test_suite: str,
        finishing_at: Any,
        run_count: Any,
        failures: Any,
        unexpected: Any,
        test_duration: Any,
        total_duration: Any,
        formats: Iterable[str] = (),
    ) -> "ResultSummary":
        """
        Construct a summary from the raw arguments of a suite-finished callback.

        Args:
            test_suite: Name of the suite
            finishing_at: Finish-time token, e.g. "2016-05-19 11:30:12 +0000"
            run_count: Number of test cases run
            failures: Number of failed test cases
            unexpected: Number of unexpected failures
            test_duration: Seconds spent running the tests
            total_duration: Seconds spent on the whole suite
            formats: Extra ``strptime`` formats accepted for ``finishing_at``

        Returns:
            ResultSummary with typed fields

        Raises:
            InvalidInputError: If any token cannot be parsed
        """
        return cls(
            test_suite=test_suite,
            finish_time=parse_finish_time(finishing_at, formats),
            run_count=parse_count("run_count", run_count),
            failure_count=parse_count("failure_count", failures),
            unexpected=parse_count("unexpected", unexpected),
            test_duration=parse_duration("test_duration", test_duration),
            total_duration=parse_duration("total_duration", total_duration),
        )

    @property
    def success(self) -> bool:
        """Return True if the suite had no failures of either kind."""
        return self.failure_count == 0 and self.unexpected == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "test_suite": self.test_suite,
            "finish_time": self.finish_time.isoformat(),
            "run_count": self.run_count,
            "failure_count": self.failure_count,
            "unexpected": self.unexpected,
            "test_duration": self.test_duration,
            "total_duration": self.total_duration,
        }

    @staticmethod
    def status_for_status_string(status_string: str, strict: bool = False) -> TestReportStatus:
        """
        Return the status enum value for the given status string.

        Matching ignores case and surrounding whitespace. Unrecognised
        strings map to ``TestReportStatus.UNKNOWN`` unless ``strict`` is set.

        Args:
            status_string: The status string, e.g. "passed"
            strict: Raise instead of returning UNKNOWN for unrecognised strings

        Returns:
            The status enum value

        Raises:
            UnknownStatusError: If ``strict`` is set and the string is not recognised
        """
        key = status_string.strip().lower() if isinstance(status_string, str) else None
        status = _STATUS_BY_STRING.get(key) if key is not None else None
        if status is not None:
            return status

        if strict:
            raise UnknownStatusError(status_string)
        logger.warning("Unrecognised test status %r, treating as unknown", status_string)
        return TestReportStatus.UNKNOWN

    @staticmethod
    def status_string_for_status(status: Union[TestReportStatus, int]) -> str:
        """
        Return the status string for the given status enum value.

        Args:
            status: The status enum value, or its integer code

        Returns:
            The canonical status string

        Raises:
            UnknownStatusError: If ``status`` is not a known status code
        """
        if isinstance(status, bool):
            raise UnknownStatusError(status)
        if not isinstance(status, TestReportStatus):
            try:
                status = TestReportStatus(status)
            except ValueError:
                raise UnknownStatusError(status)
        return _STRING_BY_STATUS[status]


@dataclass
class TestCaseFailure:
    """A failure recorded against a test case."""

    message: str
    file: Optional[str] = None
    line: int = 0


@dataclass
class TestCaseResult:
    """Result of a single test case."""

    test_class: str
    method: str
    status: TestReportStatus = TestReportStatus.UNKNOWN
    duration: float = 0.0
    failures: List[TestCaseFailure] = field(default_factory=list)

    @property
    def name(self) -> str:
        return f"{self.test_class}.{self.method}"


@dataclass
class TestSuiteReport:
    """Test cases and final summary of one suite."""

    name: str
    started_at: Optional[datetime] = None
    test_cases: List[TestCaseResult] = field(default_factory=list)
    summary: Optional[ResultSummary] = None
    parent: Optional["TestSuiteReport"] = field(default=None, repr=False, compare=False)

    @property
    def finished(self) -> bool:
        return self.summary is not None

    def has_finished_ancestor(self) -> bool:
        """Return True if an enclosing suite already reported a summary."""
        parent = self.parent
        while parent is not None:
            if parent.summary is not None:
                return True
            parent = parent.parent
        return False


@dataclass
class TestPlanReport:
    """Everything collected while a test plan executed."""

    suites: List[TestSuiteReport] = field(default_factory=list)
    finished: bool = False

    @property
    def summaries(self) -> List[ResultSummary]:
        return [s.summary for s in self.suites if s.summary is not None]

    @property
    def root_summaries(self) -> List[ResultSummary]:
        """
        Summaries that are not already counted by an enclosing suite.

        Outer suites report totals that include their nested suites, so
        plan-wide totals must only add up these.
        """
        return [
            s.summary
            for s in self.suites
            if s.summary is not None and not s.has_finished_ancestor()
        ]


@dataclass
class AggregateSummary:
    """Totals across several suite summaries."""

    suite_count: int
    run_count: int
    failure_count: int
    unexpected: int
    test_duration: float
    total_duration: float
    finish_time: Optional[datetime] = None

    @property
    def success(self) -> bool:
        """Return True if no suite reported failures."""
        return self.failure_count == 0 and self.unexpected == 0
