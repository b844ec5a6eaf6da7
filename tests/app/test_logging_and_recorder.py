# tests/app/test_logging_and_recorder.py
import io
import json
import logging

from em_route.io.business_events import RouteNotFoundBiz
from em_route.io.engine_logging import EngineLogging, _JsonFormatter
from em_route.io.recorder import JsonlSink, MemorySink, Recorder
from em_route.sim.clock import ManualClock


def _hooks(recorder=None, debug=False):
    return EngineLogging(
        run_id="r-1",
        clock=ManualClock(),
        debug=debug,
        logger=logging.getLogger("tests.em_route"),
        recorder=recorder,
    )


def test_structured_extra_is_attached(caplog):
    with caplog.at_level(logging.INFO, logger="tests.em_route"):
        _hooks().network_built(nodes=3, edges=4, ms=1.23456, reason="cold")
    (rec,) = caplog.records
    assert rec.getMessage() == "network_built"
    assert rec.extra["run_id"] == "r-1"
    assert rec.extra["wall"] == "2025-01-01T00:00:00+00:00"
    assert rec.extra["ms"] == 1.235


def test_route_details_only_logged_in_debug(caplog):
    kw = dict(source="A", target="C", distance_km=2.0, time_min=2.0, expanded=2, ms=0.1)
    with caplog.at_level(logging.DEBUG, logger="tests.em_route"):
        _hooks().route_found(**kw)
        assert caplog.records == []
        _hooks(debug=True).route_found(**kw)
    assert [r.getMessage() for r in caplog.records] == ["route_found"]


def test_refresh_error_is_logged_at_error(caplog):
    with caplog.at_level(logging.INFO, logger="tests.em_route"):
        _hooks().refresh_error(tick=3, exc=RuntimeError("feed down"))
    (rec,) = caplog.records
    assert rec.levelno == logging.ERROR
    assert "feed down" in rec.extra["error"]


def test_json_formatter():
    rec = logging.LogRecord("em_route", logging.INFO, __file__, 1, "hello", None, None)
    rec.extra = {"run_id": "r-1", "nodes": 3}
    out = json.loads(_JsonFormatter().format(rec))
    assert out == {"level": "INFO", "msg": "hello", "logger": "em_route", "run_id": "r-1", "nodes": 3}


def test_business_events_reach_sinks():
    sink = MemorySink()
    _hooks(recorder=Recorder(sink)).route_not_found(source="A", target="C")
    (ev,) = sink.events
    assert isinstance(ev, RouteNotFoundBiz)
    assert (ev.name, ev.source, ev.target) == ("RouteNotFound", "A", "C")


def test_jsonl_sink_writes_one_line_per_event():
    buf = io.StringIO()
    Recorder(JsonlSink(buf)).emit(RouteNotFoundBiz(run_id="r", at="t", name="RouteNotFound", source="A", target="C"))
    assert json.loads(buf.getvalue()) == {
        "run_id": "r",
        "at": "t",
        "name": "RouteNotFound",
        "source": "A",
        "target": "C",
    }


def test_failing_sink_does_not_break_the_others(caplog):
    class Broken:
        def write(self, ev):
            raise OSError("disk full")

    good = MemorySink()
    ev = RouteNotFoundBiz(run_id="r", at="t", name="RouteNotFound", source="A", target="C")
    rec = Recorder(Broken(), good)
    rec.emit(ev)
    assert good.events == [ev]
    assert good.named("RouteNotFound") == [ev]
    assert rec.failures == 1
    assert any("Broken" in r.getMessage() for r in caplog.records)
