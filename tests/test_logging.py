from __future__ import annotations

import json
import logging

import pytest

from conduit import InvalidPipeError, Pipeline
from conduit.logging import _JsonFormatter, get_logger, log_event


def increment(payload, next):
    return next(payload + 1)


def test_json_formatter_includes_dispatch_context() -> None:
    record = logging.LogRecord("conduit.pipeline", logging.INFO, __file__, 1, "Dispatching pipe", None, None)
    record.pipe = "increment"
    record.position = 0
    record.method = "handle"

    data = json.loads(_JsonFormatter().format(record))
    assert data["msg"] == "Dispatching pipe"
    assert data["level"] == "INFO"
    assert data["pipe"] == "increment"
    assert data["position"] == 0
    assert data["method"] == "handle"


def test_get_logger_is_namespaced() -> None:
    assert get_logger("pipeline").name == "conduit.pipeline"
    assert get_logger().name == "conduit"


def test_log_event_attaches_payload(caplog: pytest.LogCaptureFixture) -> None:
    logger = get_logger("tests")
    with caplog.at_level(logging.INFO, logger="conduit.tests"):
        log_event(logger, "sample", {"count": 1})

    record = caplog.records[-1]
    assert record.event == "sample"
    assert record.payload == {"count": 1}


def test_trace_logs_every_dispatch(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="conduit.pipeline"):
        Pipeline.send(1, trace=True).run_sync([increment, increment])

    dispatches = [r for r in caplog.records if r.getMessage() == "Dispatching pipe"]
    assert [r.position for r in dispatches] == [0, 1]
    assert any(getattr(r, "event", None) == "pipeline_settled" for r in caplog.records)


def test_rejected_pipe_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="conduit.pipeline"):
        with pytest.raises(InvalidPipeError):
            Pipeline.send(1).run_sync([increment, "oops"])

    rejected = [r for r in caplog.records if getattr(r, "event", None) == "pipe_rejected"]
    assert rejected and rejected[0].payload["position"] == 1


def test_json_formatter_includes_event_payload() -> None:
    record = logging.LogRecord("conduit.pipeline", logging.DEBUG, __file__, 1, "event=pipeline_settled", None, None)
    record.event = "pipeline_settled"
    record.payload = {"pipes": 2}

    data = json.loads(_JsonFormatter().format(record))
    assert data["event"] == "pipeline_settled"
    assert data["payload"] == {"pipes": 2}
    assert "pipe" not in data
