"""
Reporting modules for XCTest results.
"""

from .base import ReportGenerator
from .console import ConsoleReporter
from .json_reporter import JSONReporter
from .junit import JUnitReporter

__all__ = ["ReportGenerator", "ConsoleReporter", "JSONReporter", "JUnitReporter"]
