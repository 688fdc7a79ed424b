"""
Collection of test lifecycle callbacks into a structured report.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from .exceptions import EventSequenceError
from .models import (
    ResultSummary,
    TestCaseFailure,
    TestCaseResult,
    TestPlanReport,
    TestReportStatus,
    TestSuiteReport,
)
from .parsing import parse_count, parse_duration, parse_finish_time
from .results import summarize_test_cases

logger = logging.getLogger(__name__)


class ResultCollector:
    """
    Builds a TestPlanReport from the callbacks of a test manager.

    Suites may nest. Case events go to the innermost suite that has
    started and not yet received a summary.
    """

    def __init__(self, strict_status: bool = False, finish_time_formats: Iterable[str] = ()):
        self.strict_status = strict_status
        self.finish_time_formats = tuple(finish_time_formats)
        self._report = TestPlanReport()
        self._open_suites: List[TestSuiteReport] = []
        self._pending_failures: Dict[Tuple[str, str], List[TestCaseFailure]] = {}

    def report(self) -> TestPlanReport:
        """Return the report collected so far."""
        return self._report

    def _check_not_finished(self, event: str) -> None:
        if self._report.finished:
            raise EventSequenceError(event, "test plan has already finished")

    def _current_suite(self, event: str) -> TestSuiteReport:
        self._check_not_finished(event)
        if not self._open_suites:
            raise EventSequenceError(event, "no test suite is running")
        return self._open_suites[-1]

    def did_begin_executing_test_plan(self) -> None:
        self._check_not_finished("begin_test_plan")
        logger.debug("Test plan started")

    def test_suite_did_start(self, test_suite: str, started_at: Any = None) -> None:
        self._check_not_finished("suite_started")
        started = None
        if started_at is not None:
            started = parse_finish_time(started_at, self.finish_time_formats, "started_at")

        parent = self._open_suites[-1] if self._open_suites else None
        suite = TestSuiteReport(name=test_suite, started_at=started, parent=parent)
        self._report.suites.append(suite)
        self._open_suites.append(suite)
        logger.debug("Test suite '%s' started", test_suite)

    def test_case_did_start(self, test_class: str, method: str) -> None:
        self._current_suite("case_started")
        self._pending_failures[(test_class, method)] = []
        logger.debug("Test case %s.%s started", test_class, method)

    def test_case_did_fail(
        self,
        test_class: str,
        method: str,
        message: str,
        file: Optional[str] = None,
        line: Any = 0,
    ) -> None:
        self._current_suite("case_failed")
        failure = TestCaseFailure(message=message, file=file, line=parse_count("line", line))
        self._pending_failures.setdefault((test_class, method), []).append(failure)
        logger.debug("Test case %s.%s failed: %s", test_class, method, message)

    def test_case_did_finish(
        self,
        test_class: str,
        method: str,
        status: Union[TestReportStatus, str],
        duration: Any,
    ) -> None:
        suite = self._current_suite("case_finished")
        if not isinstance(status, TestReportStatus):
            status = ResultSummary.status_for_status_string(status, strict=self.strict_status)

        result = TestCaseResult(
            test_class=test_class,
            method=method,
            status=status,
            duration=parse_duration("duration", duration),
            failures=self._pending_failures.pop((test_class, method), []),
        )
        suite.test_cases.append(result)
        logger.debug(
            "Test case %s finished with status %s in %.3fs",
            result.name,
            ResultSummary.status_string_for_status(status),
            result.duration,
        )

    def finished_with_summary(self, summary: ResultSummary) -> None:
        """Close the innermost running suite with the given summary."""
        self._current_suite("suite_finished")

        suite = next(
            (s for s in reversed(self._open_suites) if s.name == summary.test_suite),
            self._open_suites[-1],
        )
        if suite.name != summary.test_suite:
            logger.warning(
                "Summary for '%s' does not match running suite '%s'",
                summary.test_suite,
                suite.name,
            )

        suite.summary = summary
        self._open_suites.remove(suite)
        logger.info(
            "Test suite '%s' finished: %d run, %d failed, %d unexpected in %.3fs",
            summary.test_suite,
            summary.run_count,
            summary.failure_count,
            summary.unexpected,
            summary.total_duration,
        )

    def did_finish_executing_test_plan(self, finished_at: Any = None) -> None:
        """
        Mark the plan finished.

        Suites still running get a summary derived from their test cases
        and the suites nested in them. ``finished_at`` may be a datetime or
        a timestamp token; naive values are taken as UTC.
        """
        self._check_not_finished("end_test_plan")
        if finished_at is None:
            finish_time = datetime.now(timezone.utc)
        else:
            finish_time = parse_finish_time(finished_at, self.finish_time_formats, "finished_at")

        # Innermost first, so nested suites are summarised before their parents
        for suite in reversed(self._open_suites):
            logger.warning("Test suite '%s' ended without a summary", suite.name)
            children = [
                s.summary for s in self._report.suites if s.parent is suite and s.summary is not None
            ]
            suite.summary = summarize_test_cases(
                suite.name, suite.test_cases, finish_time, children=children
            )
        self._open_suites.clear()

        if self._pending_failures:
            logger.warning(
                "Dropping failures for %d test cases that never finished",
                len(self._pending_failures),
            )
            self._pending_failures.clear()

        self._report.finished = True
        logger.debug("Test plan finished")
