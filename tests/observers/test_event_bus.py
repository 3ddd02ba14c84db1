import json
from pathlib import Path

from gpinstall.observers.dispatcher import EventBus
from gpinstall.observers import events
from gpinstall.observers.events import HostProbed, StepStarted, new_ctx, stamp
from gpinstall.observers.jsonfile import JsonFileObserver


class Capture:
    def __init__(self): self.events = []
    def notify(self, ev): self.events.append(ev)


class Broken:
    def notify(self, ev): raise RuntimeError("boom")


def test_broken_observer_does_not_stop_delivery():
    cap = Capture()
    bus = EventBus([Broken(), cap])
    ev = StepStarted(step="gpssh-exkeys", **new_ctx(master="m1"))
    bus.emit(ev)
    assert cap.events == [ev]


def test_json_file_observer_appends_lines(tmp_path: Path):
    path = tmp_path / "logs" / "run.jsonl"
    ctx = new_ctx(master="m1", run_id="r-1")
    bus = EventBus([JsonFileObserver(path)])
    bus.emit(HostProbed(host="s1", port=22, reachable=True, **ctx))
    bus.emit(HostProbed(host="s2", port=22, reachable=False, **ctx))

    rows = [json.loads(ln) for ln in path.read_text().splitlines()]
    assert [r["type"] for r in rows] == ["HostProbed", "HostProbed"]
    assert [r["host"] for r in rows] == ["s1", "s2"]
    assert rows[1]["reachable"] is False
    assert all(r["run_id"] == "r-1" and r["master"] == "m1" for r in rows)
    assert rows[0]["ts"].endswith("Z")


def test_stamp_refreshes_timestamp_per_event(monkeypatch):
    ticks = iter(["2026-01-01T00:00:00Z", "2026-01-01T00:00:05Z", "2026-01-01T00:00:09Z"])
    monkeypatch.setattr(events, "_now", lambda: next(ticks))

    ctx = new_ctx(master="m1", run_id="r-1")
    first = StepStarted(step="a", **stamp(ctx))
    second = StepStarted(step="b", **stamp(ctx))

    assert ctx["ts"] == "2026-01-01T00:00:00Z"
    assert first.ts == "2026-01-01T00:00:05Z"
    assert second.ts == "2026-01-01T00:00:09Z"
    assert first.run_id == second.run_id == "r-1"
