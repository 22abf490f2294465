"""HTTP and WebSocket API tests."""

import json

import opentimelineio as otio
import pytest
from conftest import FakeTranscoder, InMemoryArtifactStore
from fastapi.testclient import TestClient

from reelcut.api import main
from reelcut.api.dependencies import export_event_bus, export_service, session_registry
from reelcut.api.main import app
from reelcut.editor.session import SessionRegistry
from reelcut.mongodb.client import MongoDBClient
from reelcut.pipeline.config import TranscodeConfig
from reelcut.pipeline.event_bus import ExportEventBus
from reelcut.pipeline.service import ExportService

LINES = [
    {
        "line_id": "line-1",
        "text": "hello world",
        "video_url": "https://cdn.example.com/line-1.mp4",
        "audio_url": "https://cdn.example.com/line-1.mp3",
        "duration": 4.0,
    },
    {"line_id": "line-2", "text": "goodbye", "video_url": "https://cdn.example.com/line-2.mp4"},
]


@pytest.fixture
def bus() -> ExportEventBus:
    return ExportEventBus()


@pytest.fixture
def client(tmp_path, bus):
    def build(allow_mock_export: bool = True) -> TestClient:
        config = TranscodeConfig(scratch_dir=str(tmp_path), allow_mock_export=allow_mock_export)
        service = ExportService(config, FakeTranscoder(available=False), InMemoryArtifactStore(), bus)
        registry = SessionRegistry()
        app.dependency_overrides[session_registry] = lambda: registry
        app.dependency_overrides[export_service] = lambda: service
        app.dependency_overrides[export_event_bus] = lambda: bus
        return TestClient(app)

    yield build
    app.dependency_overrides.clear()


def _open_session(client: TestClient, **body) -> dict:
    response = client.post("/api/sessions", json={"lines": LINES, **body})
    assert response.status_code == 200
    return response.json()


class TestHealth:
    def test_mongodb_disabled_without_connection_string(self, client, monkeypatch):
        monkeypatch.delenv("MONGODB_CONNECTION_STRING", raising=False)

        assert client().get("/health").json() == {"status": "healthy", "mongodb": "disabled"}

    @pytest.mark.parametrize(
        "reachable, expected",
        [
            (True, {"status": "healthy", "mongodb": "connected"}),
            (False, {"status": "degraded", "mongodb": "unreachable"}),
        ],
    )
    def test_reports_mongodb_reachability(self, client, monkeypatch, reachable, expected):
        async def ping(self) -> bool:
            return reachable

        monkeypatch.setenv("MONGODB_CONNECTION_STRING", "mongodb://localhost:27017")
        monkeypatch.setattr(MongoDBClient, "ping", ping)

        assert client().get("/health").json() == expected

    def test_shutdown_closes_mongodb(self, tmp_path, bus, monkeypatch):
        closed = []

        async def close(self) -> None:
            closed.append(True)

        service = ExportService(
            TranscodeConfig(scratch_dir=str(tmp_path)), FakeTranscoder(available=False), InMemoryArtifactStore(), bus
        )
        monkeypatch.setenv("MONGODB_CONNECTION_STRING", "mongodb://localhost:27017")
        monkeypatch.setattr(MongoDBClient, "close", close)
        monkeypatch.setattr(main, "export_service", lambda: service)

        with TestClient(app):
            assert closed == []

        assert closed == [True]


class TestSessions:
    def test_create_from_lines(self, client):
        body = _open_session(client())
        state = body["state"]

        video, audio = state["tracks"]
        assert [c["duration"] for c in video["clips"]] == [4.0, 5.0]
        assert [c["start_time"] for c in video["clips"]] == [0.0, 4.0]
        assert len(audio["clips"]) == 1
        assert [s["text"] for s in state["subtitles"]] == ["hello world", "goodbye"]
        assert state["duration"] == 9.0
        assert "history" not in state
        assert body["can_undo"] is False

    def test_unknown_session_is_404(self, client):
        api = client()
        assert api.get("/api/sessions/nope").status_code == 404
        assert api.post("/api/sessions/nope/undo").status_code == 404

    def test_actions_undo_and_redo(self, client):
        api = client()
        session_id = _open_session(api)["session_id"]
        clip_id = _open_session_clip(api, session_id)

        split = api.post(
            f"/api/sessions/{session_id}/actions",
            json={"type": "split_clip", "clip_id": clip_id, "split_point": 1.0},
        ).json()
        assert len(split["state"]["tracks"][0]["clips"]) == 3
        assert split["can_undo"] is True

        undone = api.post(f"/api/sessions/{session_id}/undo").json()
        assert len(undone["state"]["tracks"][0]["clips"]) == 2
        assert undone["can_redo"] is True

        redone = api.post(f"/api/sessions/{session_id}/redo").json()
        assert len(redone["state"]["tracks"][0]["clips"]) == 3

    def test_invalid_action_is_422(self, client):
        api = client()
        session_id = _open_session(api)["session_id"]

        response = api.post(f"/api/sessions/{session_id}/actions", json={"type": "explode"})

        assert response.status_code == 422

    def test_close_session(self, client):
        api = client()
        session_id = _open_session(api)["session_id"]

        assert api.delete(f"/api/sessions/{session_id}").json()["status"] == "closed"
        assert api.get(f"/api/sessions/{session_id}").status_code == 404

    def test_preview(self, client):
        api = client()
        session_id = _open_session(api)["session_id"]

        frame = api.get(f"/api/sessions/{session_id}/preview", params={"time": 3.0}).json()

        assert frame["video"]["source_url"] == "https://cdn.example.com/line-1.mp4"
        assert frame["video"]["media_time"] == 3.0
        assert [a["source_url"] for a in frame["audio"]] == ["https://cdn.example.com/line-1.mp3"]
        assert frame["active_words"] == ["world"]

    def test_otio_download(self, client):
        api = client()
        session_id = _open_session(api)["session_id"]

        response = api.get(f"/api/sessions/{session_id}/timeline.otio")

        assert response.status_code == 200
        timeline = otio.adapters.read_from_string(response.text, "otio_json")
        assert len(timeline.video_tracks()) == 1
        assert len(timeline.tracks.markers) == 2
        assert json.loads(response.text)["OTIO_SCHEMA"].startswith("Timeline")


def _open_session_clip(api: TestClient, session_id: str) -> str:
    state = api.get(f"/api/sessions/{session_id}").json()["state"]
    return state["tracks"][0]["clips"][0]["id"]


class TestExports:
    def test_session_export_completes_as_mock(self, client, bus):
        api = client()
        session_id = _open_session(api)["session_id"]

        ack = api.post(
            f"/api/sessions/{session_id}/exports", json={"subtitles": {"enabled": True}, "audio_mix": 0.5}
        ).json()

        assert ack["status"] == "completed"
        assert ack["is_mock"] is True
        assert ack["url"] == "https://cdn.example.com/line-1.mp4"

        status = api.get(f"/api/exports/{ack['export_id']}").json()
        assert status["status"] == "completed"
        assert status["percent"] == 100.0

        with api.websocket_connect(f"/ws/exports/{ack['export_id']}") as websocket:
            event = websocket.receive_json()
        assert event["topic"] == "completed"
        assert event["url"] == ack["url"]

    def test_empty_session_cannot_export(self, client):
        api = client()
        session_id = api.post("/api/sessions", json={}).json()["session_id"]

        response = api.post(f"/api/sessions/{session_id}/exports", json={})

        assert response.status_code == 400
        assert "No clips with video" in response.json()["detail"]

    def test_export_disabled_without_transcoder(self, client):
        api = client(allow_mock_export=False)
        session_id = _open_session(api)["session_id"]

        response = api.post(f"/api/sessions/{session_id}/exports", json={})

        assert response.status_code == 503

    def test_direct_export_submission(self, client):
        api = client()
        body = {"clips": [{"line_id": "line-1", "video_url": "https://cdn.example.com/a.mp4", "duration": 3.0}]}

        ack = api.post("/api/exports", json=body).json()

        assert ack["is_mock"] is True

    def test_unknown_export(self, client):
        api = client()
        assert api.get("/api/exports/missing").status_code == 404
        assert api.post("/api/exports/missing/cancel").status_code == 400
