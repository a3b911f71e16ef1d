from linecfg import metrics
from linecfg.eventbus import EventBus, emit, subscribe
from linecfg.events import on, reset_listeners_for_tests
from linecfg.events import subscribe as subscribe_any


def test_eventbus_basic_dispatch():
    got = []
    unsub = subscribe("TestEvent", lambda p: got.append(p["value"]))
    subscribe("TestEvent", lambda p: got.append(p["value"] * 2))
    emit("TestEvent", {"value": 3})
    assert sorted(got) == [3, 6]
    unsub()
    emit("TestEvent", {"value": 1})
    assert sorted(got) == [2, 3, 6]
    snap = metrics.snapshot()["counters"]
    assert snap["events_emitted_total{event=TestEvent}"] == 2


def test_eventbus_handler_isolation():
    bus = EventBus()
    got = []

    def boom(_):
        raise RuntimeError("handler bug")

    bus.subscribe("E", boom)
    bus.subscribe("E", lambda p: got.append(p))
    bus.emit("E", {"x": 1})
    assert got and got[0]["x"] == 1 and "ts" in got[0]
    assert metrics.counter("handler_exceptions_total", {"event": "E"}) == 1


def test_registry_events_flow(registry, store_path):
    seen = []
    on(lambda name, payload: seen.append((name, payload)))
    registry.read()  # missing file
    registry.set_int(0, 500)
    registry.write()
    registry.read()
    registry.default()
    names = [n for n, _ in seen]
    assert names == [
        "ConfigReadFailed",
        "ValueClamped",
        "ConfigWritten",
        "ConfigRead",
        "ValuesReset",
    ]
    failed = seen[0][1]
    assert failed["error_type"] == "file-not-found"
    clamped = seen[1][1]
    assert clamped["requested"] == 500 and clamped["stored"] == 10
    assert clamped["name"] == "number_a"
    read = seen[3][1]
    assert read["lines"] == 7 and read["matched"] == 4
    assert seen[4][1]["count"] == 4
    reset_listeners_for_tests()


def test_in_range_set_emits_no_clamp_event(registry):
    seen = []
    unsub = subscribe_any(lambda name, payload: seen.append(name))
    registry.set_int(0, 5)
    registry.set_string(0, "short")
    registry.set_int(0, 10)
    assert seen == []
    unsub()


def test_metrics_from_read_and_write(registry, store_path):
    registry.write()
    registry.read()
    counters = metrics.snapshot()["counters"]
    assert counters["config_write_total{status=ok}"] == 1
    assert counters["config_read_total{status=ok}"] == 1
    assert counters["config_lines_read_total"] == 7
    assert counters["config_lines_matched_total{kind=int}"] == 2
    assert counters["config_lines_matched_total{kind=str}"] == 2
    hist = metrics.snapshot()["histograms"]
    assert hist["config_read_latency_ms"]["count"] == 1


def test_clamp_metric(registry):
    registry.set_string(0, "x" * 100)
    registry.set_int(1, 0)
    assert metrics.counter("value_clamped_total", {"kind": "str"}) == 1
    assert metrics.counter("value_clamped_total", {"kind": "int"}) == 1


def test_snapshot_label_formatting():
    metrics.inc("demo_total", {"b": 2, "a": 1}, value=3)
    metrics.observe("demo_ms", 5)
    metrics.observe("demo_ms", 1)
    snap = metrics.snapshot()
    assert snap["counters"]["demo_total{a=1,b=2}"] == 3
    assert snap["histograms"]["demo_ms"]["min"] == 1
    assert snap["histograms"]["demo_ms"]["last"] == 1


def test_eventbus_handler_failure_logged_with_error_type(caplog):
    bus = EventBus()

    def boom(_):
        raise RuntimeError("handler bug")

    bus.subscribe("E", boom)
    with caplog.at_level("ERROR", logger="linecfg.eventbus"):
        bus.emit("E", {})
    assert "error_type=event-handler-error" in caplog.text
