"""
Tests for event emission, run recording and the viewer API.
"""

import json

import pytest
from royale.web import EventEmitter, RunRecorder
from royale.web.viewer_server import ViewerServer


@pytest.fixture
def recorder(tmp_path):
    recorder = RunRecorder(runs_dir=str(tmp_path / "runs"))
    recorder.create_run("match_test")
    return recorder


def test_events_written_as_jsonl(recorder):
    emitter = EventEmitter(recorder)
    emitter.emit_countdown(5)
    emitter.emit_elimination("p1", "zone", 4, remaining=3)

    lines = (recorder.get_run_path() / "events.jsonl").read_text().splitlines()
    events = [json.loads(line) for line in lines]
    assert [e["event_type"] for e in events] == ["countdown", "elimination"]
    assert [e["sequence"] for e in events] == [0, 1]
    assert events[1]["data"]["killer_id"] is None
    assert events[1]["data"]["assister_ids"] == []
    assert recorder.event_count == 2


def test_listeners(recorder):
    """Test listeners get every event and a failing listener is isolated."""
    received = []

    def broken(event_type, data):
        raise RuntimeError("listener down")

    emitter = EventEmitter(recorder)
    emitter.register_listener(broken)
    emitter.register_listener(lambda event_type, data: received.append((event_type, data)))

    emitter.emit_deathmatch(["p1", "p2"], "zone")
    assert received == [("deathmatch", {"alive": ["p1", "p2"], "reason": "zone"})]

    emitter.unregister_listener(broken)
    emitter.emit_countdown(1)
    assert len(received) == 2


def test_emitter_without_recorder():
    received = []
    emitter = EventEmitter()
    emitter.register_listener(lambda event_type, data: received.append(event_type))
    emitter.emit_match_over("p1", "last_standing", [])
    assert received == ["match_over"]


def test_list_runs(recorder):
    recorder.save_metadata({"match_id": "abc"})
    EventEmitter(recorder).emit_match_over("p7", "last_standing", [])

    runs = recorder.list_runs()
    assert len(runs) == 1
    assert runs[0]["name"] == "match_test"
    assert runs[0]["metadata"] == {"match_id": "abc"}
    assert runs[0]["event_count"] == 1
    assert runs[0]["match_outcome"] == "Winner: p7"


def test_read_events_since(recorder):
    emitter = EventEmitter(recorder)
    for seconds in (3, 2, 1):
        emitter.emit_countdown(seconds)

    events = recorder.read_events("match_test", since=1)
    assert [e["data"]["seconds"] for e in events] == [2, 1]


def test_viewer_api(recorder, tmp_path):
    """Test the viewer endpoints over a recorded run."""
    recorder.save_metadata({"match_id": "abc"})
    emitter = EventEmitter(recorder)
    emitter.emit_countdown(2)
    emitter.emit_countdown(1)

    server = ViewerServer(runs_dir=str(tmp_path / "runs"))
    client = server.app.test_client()

    assert client.get("/").status_code == 200

    runs = client.get("/api/runs").get_json()
    assert [r["name"] for r in runs] == ["match_test"]

    events = client.get("/api/runs/match_test/events").get_json()
    assert len(events) == 2

    metadata = client.get("/api/runs/match_test/metadata").get_json()
    assert metadata["match_id"] == "abc"

    stream = client.get("/api/runs/match_test/events/stream?last_position=1").get_json()
    assert [e["data"]["seconds"] for e in stream["events"]] == [1]
    assert stream["position"] == 2

    assert client.get("/api/runs/missing/events").status_code == 404
    assert client.get("/api/runs/missing/metadata").status_code == 404
