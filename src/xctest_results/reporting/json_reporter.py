"""
JSON reporter for test results.
"""

import json

from ..models import ResultSummary, TestPlanReport
from ..results import aggregate_summaries
from .base import ReportGenerator


class JSONReporter(ReportGenerator):
    """Generate JSON format for programmatic analysis."""

    def generate(self, report: TestPlanReport) -> str:
        """Generate JSON report."""
        totals = aggregate_summaries(report.root_summaries)
        status_string = ResultSummary.status_string_for_status

        document = {
            "summary": {
                "suite_count": totals.suite_count,
                "run_count": totals.run_count,
                "failure_count": totals.failure_count,
                "unexpected": totals.unexpected,
                "test_duration": totals.test_duration,
                "total_duration": totals.total_duration,
                "finish_time": totals.finish_time.isoformat() if totals.finish_time else None,
                "success": totals.success,
                "finished": report.finished,
            },
            "suites": [
                {
                    "name": suite.name,
                    "parent": suite.parent.name if suite.parent else None,
                    "started_at": suite.started_at.isoformat() if suite.started_at else None,
                    "summary": suite.summary.to_dict() if suite.summary else None,
                    "test_cases": [
                        {
                            "test_class": case.test_class,
                            "method": case.method,
                            "status": status_string(case.status),
                            "duration": case.duration,
                            "failures": [
                                {"message": f.message, "file": f.file, "line": f.line}
                                for f in case.failures
                            ],
                        }
                        for case in suite.test_cases
                    ],
                }
                for suite in report.suites
            ],
        }

        return json.dumps(document, indent=2)
