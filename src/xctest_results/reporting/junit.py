"""
JUnit XML reporter for test results.
"""

import xml.etree.ElementTree as ET

from ..models import TestPlanReport, TestReportStatus
from ..results import aggregate_summaries
from .base import ReportGenerator


class JUnitReporter(ReportGenerator):
    """Generate JUnit XML format for CI/CD integration."""

    def generate(self, report: TestPlanReport) -> str:
        """Generate JUnit XML report."""
        totals = aggregate_summaries(report.root_summaries)

        testsuites = ET.Element("testsuites")
        testsuites.set("name", "XCTest Results")
        testsuites.set("tests", str(totals.run_count))
        testsuites.set("failures", str(totals.failure_count))
        testsuites.set("errors", str(totals.unexpected))
        testsuites.set("time", f"{totals.total_duration:.3f}")

        for suite in report.suites:
            summary = suite.summary
            testsuite = ET.SubElement(testsuites, "testsuite")
            testsuite.set("name", suite.name)
            if summary is not None:
                testsuite.set("tests", str(summary.run_count))
                testsuite.set("failures", str(summary.failure_count))
                testsuite.set("errors", str(summary.unexpected))
                testsuite.set("time", f"{summary.total_duration:.3f}")
                testsuite.set("timestamp", summary.finish_time.isoformat())
            else:
                # Suite still running: count what has been seen so far
                failed = [c for c in suite.test_cases if c.status == TestReportStatus.FAILED]
                testsuite.set("tests", str(len(suite.test_cases)))
                testsuite.set("failures", str(len(failed)))
                testsuite.set("errors", "0")
                testsuite.set("time", f"{sum(c.duration for c in suite.test_cases):.3f}")

            for case in suite.test_cases:
                testcase = ET.SubElement(testsuite, "testcase")
                testcase.set("classname", case.test_class)
                testcase.set("name", case.method)
                testcase.set("time", f"{case.duration:.3f}")

                if case.status == TestReportStatus.FAILED:
                    messages = [f.message for f in case.failures] or ["Test failed"]
                    failure = ET.SubElement(testcase, "failure")
                    failure.set("message", messages[0])
                    failure.text = "\n".join(
                        f"{f.file}:{f.line}: {f.message}" if f.file else f.message
                        for f in case.failures
                    )
                elif case.status == TestReportStatus.UNKNOWN:
                    skipped = ET.SubElement(testcase, "skipped")
                    skipped.set("message", "Unknown test status")

        ET.indent(testsuites, space="  ")
        return ET.tostring(testsuites, encoding="unicode", xml_declaration=True)
