"""
Result aggregation and utilities.
"""

from datetime import datetime
from typing import Iterable, List, Optional

from .models import AggregateSummary, ResultSummary, TestCaseResult, TestReportStatus


def aggregate_summaries(summaries: Iterable[ResultSummary]) -> AggregateSummary:
    """
    Aggregate suite summaries into plan-wide totals.

    Args:
        summaries: ResultSummary objects, one per finished suite

    Returns:
        AggregateSummary with summed counts and durations
    """
    summaries = list(summaries)

    finish_times = [s.finish_time for s in summaries]

    return AggregateSummary(
        suite_count=len(summaries),
        run_count=sum(s.run_count for s in summaries),
        failure_count=sum(s.failure_count for s in summaries),
        unexpected=sum(s.unexpected for s in summaries),
        test_duration=sum(s.test_duration for s in summaries),
        total_duration=sum(s.total_duration for s in summaries),
        finish_time=max(finish_times) if finish_times else None,
    )


def summarize_test_cases(
    test_suite: str,
    cases: List[TestCaseResult],
    finish_time: datetime,
    total_duration: Optional[float] = None,
    children: Iterable[ResultSummary] = (),
) -> ResultSummary:
    """
    Build a summary from individual test case results.

    Used when a suite ends without the test manager reporting its own
    summary. Unexpected failures cannot be told apart at case level, so
    only those reported by nested suites are counted.

    Args:
        test_suite: Name of the suite
        cases: Results of the cases run directly in the suite
        finish_time: When the suite finished
        total_duration: Wall time of the suite, defaults to the case and
            nested suite durations
        children: Summaries of the suites nested in this one

    Returns:
        ResultSummary for the suite
    """
    nested = aggregate_summaries(children)
    case_duration = sum(c.duration for c in cases)
    if total_duration is None:
        total_duration = case_duration + nested.total_duration

    return ResultSummary(
        test_suite=test_suite,
        finish_time=finish_time,
        run_count=len(cases) + nested.run_count,
        failure_count=sum(1 for c in cases if c.status == TestReportStatus.FAILED)
        + nested.failure_count,
        unexpected=nested.unexpected,
        test_duration=case_duration + nested.test_duration,
        total_duration=total_duration,
    )
