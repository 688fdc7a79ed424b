"""
Console reporter for test results.
"""

import os
import sys

from ..models import ResultSummary, TestPlanReport, TestReportStatus
from ..results import aggregate_summaries
from .base import ReportGenerator


def _supports_color() -> bool:
    """Return True if the output stream likely supports ANSI colours."""
    # Explicit opt-in / opt-out via environment variable
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("FORCE_COLOR"):
        return True
    # Non-TTY output (e.g. piped to a file) should not use colour
    if not hasattr(sys.stdout, "isatty") or not sys.stdout.isatty():
        return False
    return True


class ConsoleReporter(ReportGenerator):
    """Generate colored console output for test results."""

    def __init__(self) -> None:
        color = _supports_color()
        self.GREEN = "\033[92m" if color else ""
        self.RED = "\033[91m" if color else ""
        self.YELLOW = "\033[93m" if color else ""
        self.RESET = "\033[0m" if color else ""
        self.BOLD = "\033[1m" if color else ""

    def _symbol(self, status: TestReportStatus) -> str:
        if status == TestReportStatus.PASSED:
            return f"{self.GREEN}✓{self.RESET}"
        if status == TestReportStatus.FAILED:
            return f"{self.RED}✗{self.RESET}"
        return f"{self.YELLOW}?{self.RESET}"

    def generate(self, report: TestPlanReport) -> str:
        """Generate console report."""
        lines = []
        totals = aggregate_summaries(report.root_summaries)

        # Header
        lines.append(f"\n{self.BOLD}XCTest Results{self.RESET}")
        lines.append("=" * 60)

        # Summary statistics
        lines.append(f"\n{self.BOLD}Summary:{self.RESET}")
        lines.append(f"  Suites: {totals.suite_count}")
        lines.append(f"  Tests Run: {totals.run_count}")
        lines.append(f"  {self.RED}Failures: {totals.failure_count}{self.RESET}")
        lines.append(f"  {self.RED}Unexpected: {totals.unexpected}{self.RESET}")
        lines.append(f"  Test Duration: {totals.test_duration:.2f}s")
        lines.append(f"  Total Duration: {totals.total_duration:.2f}s")

        if not report.finished:
            lines.append(f"\n{self.YELLOW}Test plan did not finish{self.RESET}")

        # Overall status
        if totals.success:
            lines.append(f"\n{self.GREEN}{self.BOLD}✓ ALL TESTS PASSED{self.RESET}")
        else:
            lines.append(f"\n{self.RED}{self.BOLD}✗ TESTS FAILED{self.RESET}")

        # Per-suite results
        for suite in report.suites:
            summary = suite.summary
            lines.append(f"\n{self.BOLD}{suite.name}{self.RESET}")
            if summary is None:
                lines.append(f"  {self.YELLOW}(running){self.RESET}")
            else:
                lines.append(f"  {self._format_summary(summary)}")

            for case in suite.test_cases:
                lines.append(f"  {self._symbol(case.status)} {case.name} ({case.duration:.3f}s)")
                for failure in case.failures:
                    location = f"{failure.file}:{failure.line}" if failure.file else "unknown location"
                    lines.append(f"      {failure.message} [{location}]")

        lines.append("")  # Empty line at end
        return "\n".join(lines)

    @staticmethod
    def _format_summary(summary: ResultSummary) -> str:
        return (
            f"{summary.run_count} run, {summary.failure_count} failed, "
            f"{summary.unexpected} unexpected in {summary.total_duration:.2f}s "
            f"(finished {summary.finish_time.isoformat()})"
        )
