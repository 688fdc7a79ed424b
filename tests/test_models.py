"""Tests for data models."""

import dataclasses
import logging
from datetime import datetime, timedelta, timezone

import pytest

from src.xctest_results.exceptions import InvalidInputError, UnknownStatusError
from src.xctest_results.models import (
    ResultSummary,
    TestCaseResult,
    TestPlanReport,
    TestReportStatus,
    TestSuiteReport,
)

FINISH_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _summary(**overrides):
    fields = dict(
        test_suite="AppTests",
        finish_time=FINISH_TIME,
        run_count=10,
        failure_count=2,
        unexpected=1,
        test_duration=3.5,
        total_duration=4.0,
    )
    fields.update(overrides)
    return ResultSummary(**fields)


class TestTestReportStatus:
    """Tests for TestReportStatus enum."""

    def test_values(self):
        assert TestReportStatus.UNKNOWN.value == 0
        assert TestReportStatus.PASSED.value == 1
        assert TestReportStatus.FAILED.value == 2

    def test_all_statuses(self):
        assert len(TestReportStatus) == 3


class TestResultSummaryConstruction:
    """Tests for the direct constructor."""

    def test_fields_stored_verbatim(self):
        summary = _summary()
        assert summary.test_suite == "AppTests"
        assert summary.finish_time is FINISH_TIME
        assert summary.run_count == 10
        assert summary.failure_count == 2
        assert summary.unexpected == 1
        assert summary.test_duration == 3.5
        assert summary.total_duration == 4.0

    def test_no_cross_field_validation(self):
        summary = _summary(failure_count=0, unexpected=3, test_duration=5.0, total_duration=1.0)
        assert summary.unexpected == 3
        assert summary.total_duration < summary.test_duration

    def test_immutable(self):
        summary = _summary()
        with pytest.raises(dataclasses.FrozenInstanceError):
            summary.run_count = 11
        assert summary.run_count == 10

    def test_equal_inputs_compare_equal(self):
        assert _summary() == _summary()
        assert _summary() != _summary(run_count=9)

    def test_success(self):
        assert _summary(failure_count=0, unexpected=0).success is True
        assert _summary(failure_count=1, unexpected=0).success is False
        assert _summary(failure_count=0, unexpected=1).success is False

    def test_to_dict(self):
        data = _summary().to_dict()
        assert data["test_suite"] == "AppTests"
        assert data["finish_time"] == "2024-01-01T00:00:00+00:00"
        assert data["run_count"] == 10
        assert data["total_duration"] == 4.0


class TestFromTestSuite:
    """Tests for the token-parsing constructor."""

    def test_iso_timestamp(self):
        summary = ResultSummary.from_test_suite(
            "AppTests", "2024-01-01T00:00:00Z", 10, 2, 1, 3.5, 4.0
        )
        assert summary == _summary()

    def test_xctest_timestamp(self):
        summary = ResultSummary.from_test_suite(
            "AppTests", "2016-05-19 11:30:12 +0000", 1, 0, 0, 0.1, 0.2
        )
        assert summary.finish_time == datetime(2016, 5, 19, 11, 30, 12, tzinfo=timezone.utc)

    def test_offset_preserved(self):
        summary = ResultSummary.from_test_suite(
            "AppTests", "2016-05-19 13:30:12 +0200", 1, 0, 0, 0.1, 0.2
        )
        assert summary.finish_time.utcoffset() == timedelta(hours=2)
        assert summary.finish_time == datetime(2016, 5, 19, 11, 30, 12, tzinfo=timezone.utc)

    def test_string_tokens(self):
        summary = ResultSummary.from_test_suite(
            "AppTests", "2024-01-01T00:00:00Z", "10", "2", "1", "3.5", "4"
        )
        assert summary.run_count == 10
        assert summary.failure_count == 2
        assert summary.unexpected == 1
        assert summary.test_duration == 3.5
        assert summary.total_duration == 4.0
        assert isinstance(summary.total_duration, float)

    def test_extra_formats(self):
        summary = ResultSummary.from_test_suite(
            "AppTests", "19/05/2016 11:30", 1, 0, 0, 0.1, 0.2, formats=["%d/%m/%Y %H:%M"]
        )
        assert summary.finish_time == datetime(2016, 5, 19, 11, 30, tzinfo=timezone.utc)

    def test_malformed_timestamp_rejected(self):
        with pytest.raises(InvalidInputError) as exc_info:
            ResultSummary.from_test_suite("AppTests", "not-a-date", 10, 2, 1, 3.5, 4.0)
        assert exc_info.value.field_name == "finish_time"

    def test_malformed_count_rejected(self):
        with pytest.raises(InvalidInputError) as exc_info:
            ResultSummary.from_test_suite("AppTests", "2024-01-01T00:00:00Z", "ten", 2, 1, 3.5, 4.0)
        assert exc_info.value.field_name == "run_count"

    def test_negative_duration_rejected(self):
        with pytest.raises(InvalidInputError) as exc_info:
            ResultSummary.from_test_suite("AppTests", "2024-01-01T00:00:00Z", 1, 0, 0, -1, 4.0)
        assert exc_info.value.field_name == "test_duration"


class TestStatusMapping:
    """Tests for the status string helpers."""

    @pytest.mark.parametrize("status", list(TestReportStatus))
    def test_code_to_text_to_code(self, status):
        text = ResultSummary.status_string_for_status(status)
        assert ResultSummary.status_for_status_string(text) is status

    @pytest.mark.parametrize("text", ["unknown", "passed", "failed"])
    def test_text_to_code_to_text(self, text):
        status = ResultSummary.status_for_status_string(text, strict=True)
        assert ResultSummary.status_string_for_status(status) == text

    def test_canonicalises_case_and_whitespace(self):
        assert ResultSummary.status_for_status_string(" Passed\n") is TestReportStatus.PASSED
        assert ResultSummary.status_for_status_string("FAILED") is TestReportStatus.FAILED

    def test_unrecognised_maps_to_unknown(self, caplog):
        with caplog.at_level(logging.WARNING):
            status = ResultSummary.status_for_status_string("bogus-status")
        assert status is TestReportStatus.UNKNOWN
        assert "bogus-status" in caplog.text

    def test_unrecognised_strict_raises(self):
        with pytest.raises(UnknownStatusError) as exc_info:
            ResultSummary.status_for_status_string("bogus-status", strict=True)
        assert exc_info.value.status == "bogus-status"

    def test_non_string_maps_to_unknown(self):
        assert ResultSummary.status_for_status_string(None) is TestReportStatus.UNKNOWN

    def test_integer_code_accepted(self):
        assert ResultSummary.status_string_for_status(2) == "failed"

    @pytest.mark.parametrize("code", [99, -1, "passed", True])
    def test_invalid_code_raises(self, code):
        with pytest.raises(UnknownStatusError):
            ResultSummary.status_string_for_status(code)


class TestReportModels:
    """Tests for the case, suite and plan dataclasses."""

    def test_case_name(self):
        case = TestCaseResult("AppTests", "testLaunch")
        assert case.name == "AppTests.testLaunch"
        assert case.status is TestReportStatus.UNKNOWN
        assert case.failures == []

    def test_failures_not_shared_across_instances(self):
        c1 = TestCaseResult("A", "t1")
        c2 = TestCaseResult("A", "t2")
        c1.failures.append("boom")
        assert c2.failures == []

    def test_suite_finished(self):
        suite = TestSuiteReport(name="AppTests")
        assert suite.finished is False
        suite.summary = _summary()
        assert suite.finished is True

    def test_plan_summaries_skip_running_suites(self):
        plan = TestPlanReport(
            suites=[
                TestSuiteReport(name="AppTests", summary=_summary()),
                TestSuiteReport(name="Running"),
            ]
        )
        assert plan.summaries == [_summary()]

    def test_root_summaries_skip_nested_suites(self):
        outer = TestSuiteReport(name="All tests", summary=_summary(test_suite="All tests"))
        inner = TestSuiteReport(name="AppTests", summary=_summary(), parent=outer)
        deeper = TestSuiteReport(name="LoginTests", summary=_summary(), parent=inner)
        plan = TestPlanReport(suites=[outer, inner, deeper])
        assert len(plan.summaries) == 3
        assert plan.root_summaries == [outer.summary]

    def test_root_summaries_keep_children_of_running_suite(self):
        outer = TestSuiteReport(name="All tests")
        inner = TestSuiteReport(name="AppTests", summary=_summary(), parent=outer)
        plan = TestPlanReport(suites=[outer, inner])
        assert inner.has_finished_ancestor() is False
        assert plan.root_summaries == [inner.summary]
