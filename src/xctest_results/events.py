"""
Reading and replaying recorded lifecycle callbacks.

An event log is a JSON-lines file with one callback per line::

    {"event": "suite_started", "test_suite": "AppTests", "started_at": "2016-05-19 11:30:00 +0000"}
    {"event": "case_finished", "test_class": "AppTests", "method": "testLaunch", "status": "passed", "duration": 0.4}
    {"event": "suite_finished", "testSuite": "AppTests", "finishingAt": "2016-05-19 11:30:12 +0000",
     "runCount": 1, "failures": 0, "unexpected": 0, "testDuration": 0.4, "totalDuration": 0.5}

``suite_finished`` records keep the argument names of the test manager
delegate callback.
"""

import json
import logging
from typing import IO, Any, Callable, Dict, Iterable, Iterator, Tuple

from .collector import ResultCollector
from .exceptions import InvalidInputError
from .models import ResultSummary

logger = logging.getLogger(__name__)

Event = Dict[str, Any]


def _numbered_lines(stream: IO) -> Iterator[Tuple[int, str]]:
    lines = iter(stream)
    line_number = 0
    while True:
        try:
            line = next(lines)
        except StopIteration:
            return
        except UnicodeDecodeError as e:
            # Text streams decode ahead in chunks, so the line is approximate
            raise InvalidInputError(
                f"line {line_number + 1}", e.object[e.start : e.end], "not valid UTF-8"
            )
        line_number += 1
        if isinstance(line, bytes):
            try:
                line = line.decode("utf-8")
            except UnicodeDecodeError:
                raise InvalidInputError(f"line {line_number}", line, "not valid UTF-8")
        yield line_number, line


def read_events(stream: IO) -> Iterator[Event]:
    """
    Read lifecycle events from a JSON-lines stream.

    Args:
        stream: Binary (UTF-8) or text stream with one JSON object per line

    Yields:
        Event dictionaries

    Raises:
        InvalidInputError: If a line is not UTF-8, or not a JSON object with
            an "event" key
    """
    for line_number, line in _numbered_lines(stream):
        line = line.strip()
        if not line:
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError as e:
            raise InvalidInputError(f"line {line_number}", line, f"invalid JSON: {e.msg}")
        if not isinstance(record, dict) or "event" not in record:
            raise InvalidInputError(f"line {line_number}", line, "expected an object with 'event'")
        yield record


def _require(event: Event, key: str) -> Any:
    if key not in event:
        raise InvalidInputError(key, None, f"missing from '{event['event']}' event")
    return event[key]


def _begin_test_plan(event: Event, collector: ResultCollector) -> None:
    collector.did_begin_executing_test_plan()


def _suite_started(event: Event, collector: ResultCollector) -> None:
    collector.test_suite_did_start(_require(event, "test_suite"), event.get("started_at"))


def _case_started(event: Event, collector: ResultCollector) -> None:
    collector.test_case_did_start(_require(event, "test_class"), _require(event, "method"))


def _case_failed(event: Event, collector: ResultCollector) -> None:
    collector.test_case_did_fail(
        _require(event, "test_class"),
        _require(event, "method"),
        _require(event, "message"),
        event.get("file"),
        event.get("line", 0),
    )


def _case_finished(event: Event, collector: ResultCollector) -> None:
    collector.test_case_did_finish(
        _require(event, "test_class"),
        _require(event, "method"),
        _require(event, "status"),
        _require(event, "duration"),
    )


def _suite_finished(event: Event, collector: ResultCollector) -> None:
    summary = ResultSummary.from_test_suite(
        _require(event, "testSuite"),
        _require(event, "finishingAt"),
        _require(event, "runCount"),
        _require(event, "failures"),
        _require(event, "unexpected"),
        _require(event, "testDuration"),
        _require(event, "totalDuration"),
        formats=collector.finish_time_formats,
    )
    collector.finished_with_summary(summary)


def _end_test_plan(event: Event, collector: ResultCollector) -> None:
    collector.did_finish_executing_test_plan(event.get("finished_at"))


EVENT_HANDLERS: Dict[str, Callable[[Event, ResultCollector], None]] = {
    "begin_test_plan": _begin_test_plan,
    "suite_started": _suite_started,
    "case_started": _case_started,
    "case_failed": _case_failed,
    "case_finished": _case_finished,
    "suite_finished": _suite_finished,
    "end_test_plan": _end_test_plan,
}


def replay_events(events: Iterable[Event], collector: ResultCollector) -> ResultCollector:
    """
    Feed recorded events into a collector.

    Args:
        events: Event dictionaries, e.g. from read_events()
        collector: ResultCollector receiving the callbacks

    Returns:
        The same collector, for chaining

    Raises:
        InvalidInputError: If an event is unknown or has malformed arguments
        EventSequenceError: If events arrive out of order
    """
    count = 0
    for event in events:
        name = event.get("event")
        handler = EVENT_HANDLERS.get(name) if isinstance(name, str) else None
        if handler is None:
            raise InvalidInputError("event", name, f"must be one of {sorted(EVENT_HANDLERS)}")
        handler(event, collector)
        count += 1

    logger.info("Replayed %d events", count)
    return collector
