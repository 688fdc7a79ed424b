"""
Base class for report generators.
"""

from abc import ABC, abstractmethod

from ..models import TestPlanReport


class ReportGenerator(ABC):
    """Base class for generating test reports."""

    @abstractmethod
    def generate(self, report: TestPlanReport) -> str:
        """
        Generate a report from collected test results.

        Args:
            report: TestPlanReport with suites and their summaries

        Returns:
            Report as a string
        """
        pass
