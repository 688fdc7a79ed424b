"""
Command-line interface for XCTest results.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from .collector import ResultCollector
from .config import ConfigurationError, load_config, validate_config
from .events import read_events, replay_events
from .exceptions import XCTestResultsError
from .reporting import ConsoleReporter, JSONReporter, JUnitReporter
from .results import aggregate_summaries

logger = logging.getLogger(__name__)


@click.command()
@click.option(
    "--events",
    "events_path",
    type=click.Path(exists=True, dir_okay=False, allow_dash=True),
    required=True,
    help="JSON-lines event log recorded from the test manager ('-' for stdin)",
)
@click.option(
    "--config",
    type=click.Path(exists=True),
    help="Path to configuration file (YAML)",
)
@click.option(
    "--report-format",
    type=click.Choice(["console", "junit", "json"]),
    help="Report format (overrides config)",
)
@click.option(
    "--output",
    type=click.Path(),
    help="Output file for report (default: stdout)",
)
@click.option(
    "--strict-status",
    is_flag=True,
    default=False,
    help="Fail on unrecognised test status strings instead of treating them as unknown",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level (overrides config)",
)
def main(
    events_path: str,
    config: Optional[str],
    report_format: Optional[str],
    output: Optional[str],
    strict_status: bool,
    log_level: Optional[str],
) -> None:
    """
    XCTest Results - Summarise recorded XCTest lifecycle events.

    Examples:

      # Print a console summary
      xctest-results --events events.jsonl

      # CI mode with JUnit output
      xctest-results --events events.jsonl --report-format junit --output results.xml
    """
    # Configure logging before loading config so its messages are emitted
    logging.basicConfig(
        level=getattr(logging, log_level or "INFO"),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

    try:
        reporter_config = load_config(config)
    except (ConfigurationError, FileNotFoundError) as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)

    if report_format:
        reporter_config.report_format = report_format
    if strict_status:
        reporter_config.strict_status = True
    if log_level:
        reporter_config.log_level = log_level

    errors = validate_config(reporter_config)
    if errors:
        click.echo("Configuration errors:", err=True)
        for error in errors:
            click.echo(f"  - {error}", err=True)
        sys.exit(1)

    # Level from config or environment when not given on the command line
    if not log_level:
        logging.getLogger().setLevel(reporter_config.log_level)

    try:
        collector = ResultCollector(
            strict_status=reporter_config.strict_status,
            finish_time_formats=reporter_config.finish_time_formats,
        )

        logger.info("Reading events from %s", events_path)
        with click.open_file(events_path, "rb") as stream:
            replay_events(read_events(stream), collector)
        report = collector.report()

        # Generate report
        if reporter_config.report_format == "junit":
            reporter = JUnitReporter()
        elif reporter_config.report_format == "json":
            reporter = JSONReporter()
        else:
            reporter = ConsoleReporter()

        rendered = reporter.generate(report)

        # Output report
        if output:
            output_path = Path(output)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(rendered)
            click.echo(f"Report written to: {output}")
            # Also print summary to console
            if reporter_config.report_format != "console":
                click.echo(ConsoleReporter().generate(report))
        else:
            click.echo(rendered)

        totals = aggregate_summaries(report.root_summaries)
        logger.info(
            "Results: %d suites, %d run, %d failed, %d unexpected",
            totals.suite_count,
            totals.run_count,
            totals.failure_count,
            totals.unexpected,
        )

        sys.exit(0 if totals.success else 1)

    except XCTestResultsError as e:
        logger.error("Invalid event log: %s", e)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except OSError as e:
        logger.error("I/O error: %s", e)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
