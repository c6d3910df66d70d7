"""
tests/test_api.py
─────────────────────────────────────────────────────────────────────────────
Tests for exposure.api — ExposureAPI class and the FastAPI app.

Coverage:
  - analyse_payload: bare result vs envelope, odd shapes
  - analyse_bytes: invalid JSON rejected
  - analyse_file: input validation (missing, directory, wrong suffix)
  - HTTP: /analyse, /analyse/file, /config, /health (TestClient, needs httpx)

All tests build a synthetic export in tmp_path — no real chat history needed.
"""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from exposure import __version__
from exposure.api import ExposureAPI, _build_app
from exposure.config import CONFIG_FILENAME, DEFAULT_CONFIG
from exposure.parsers.export_parser import INVALID_EXPORT_MESSAGE, InvalidExportError


# ── HELPERS ──────────────────────────────────────────────────────────────────

SAMPLE_EXPORT = {
    "title": "Synthetic",
    "mapping": {
        "n1": {"message": {
            "author":      {"role": "user"},
            "content":     {"parts": ["My wife Emma is lovely."]},
            "create_time": 1700000000,
        }},
        "n2": {"message": {
            "author":      {"role": "assistant"},
            "content":     {"parts": ["Glad to hear it."]},
            "create_time": 1700000060,
        }},
    },
}


def _write_export(tmp_path: Path, name: str = "conversations.json") -> Path:
    path = tmp_path / name
    path.write_text(json.dumps(SAMPLE_EXPORT), encoding="utf-8")
    return path


def _api(tmp_path: Path) -> ExposureAPI:
    return ExposureAPI(config=dict(DEFAULT_CONFIG), project_root=tmp_path)


@pytest.fixture
def client(tmp_path):
    api = _api(tmp_path)
    return TestClient(_build_app(api)), api


# ═══════════════════════════════════════════════════════════════════════════
# ExposureAPI
# ═══════════════════════════════════════════════════════════════════════════

class TestAnalysePayload:
    def test_returns_bare_result(self, tmp_path):
        result = _api(tmp_path).analyse_payload(SAMPLE_EXPORT)
        assert result["privacyScore"] == 8
        assert result["stats"]["totalMessages"] == 2

    def test_envelope(self, tmp_path):
        result = _api(tmp_path).analyse_payload(SAMPLE_EXPORT, envelope=True, source="x.json")
        assert result["report_metadata"]["source"] == "x.json"
        assert result["result"]["privacyScore"] == 8

    def test_odd_shape_gives_empty_result(self, tmp_path):
        result = _api(tmp_path).analyse_payload({"unexpected": True})
        assert result["privacyScore"] == 0
        assert result["stats"]["timeSpan"] == "0 days"


class TestAnalyseBytes:
    def test_valid_bytes(self, tmp_path):
        raw = json.dumps([SAMPLE_EXPORT]).encode("utf-8")
        assert _api(tmp_path).analyse_bytes(raw)["privacyScore"] == 8

    def test_invalid_json_raises(self, tmp_path):
        with pytest.raises(InvalidExportError):
            _api(tmp_path).analyse_bytes(b"<html>")


class TestAnalyseFileValidation:
    def test_raises_on_missing_file(self, tmp_path):
        with pytest.raises(ValueError, match="does not exist"):
            _api(tmp_path).analyse_file(tmp_path / "nope.json")

    def test_raises_on_directory(self, tmp_path):
        folder = tmp_path / "export.json"
        folder.mkdir()
        with pytest.raises(ValueError, match="not a file"):
            _api(tmp_path).analyse_file(folder)

    def test_raises_on_wrong_suffix(self, tmp_path):
        path = _write_export(tmp_path, "conversations.txt")
        with pytest.raises(ValueError, match="JSON"):
            _api(tmp_path).analyse_file(path)

    def test_analyses_file(self, tmp_path):
        result = _api(tmp_path).analyse_file(_write_export(tmp_path), envelope=True)
        assert result["report_metadata"]["source"] == "conversations.json"
        assert result["result"]["findings"]["personalInfo"]["names"][0]["name"] == "Emma"


# ═══════════════════════════════════════════════════════════════════════════
# HTTP
# ═══════════════════════════════════════════════════════════════════════════

class TestAnalyseEndpoint:
    def test_upload(self, client):
        http, _ = client
        resp = http.post("/analyse", json=SAMPLE_EXPORT)
        assert resp.status_code == 200
        assert resp.json()["privacyScore"] == 8

    def test_upload_envelope(self, client):
        http, _ = client
        resp = http.post("/analyse?envelope=true", json=[SAMPLE_EXPORT])
        assert resp.status_code == 200
        assert resp.json()["report_metadata"]["source"] == "upload"

    def test_invalid_json_is_400(self, client):
        http, _ = client
        resp = http.post("/analyse", content=b"{not json",
                         headers={"Content-Type": "application/json"})
        assert resp.status_code == 400
        assert resp.json()["detail"] == INVALID_EXPORT_MESSAGE

    def test_deeply_nested_json_is_400(self, client):
        http, _ = client
        resp = http.post("/analyse", content=b"[" * 200000 + b"]" * 200000,
                         headers={"Content-Type": "application/json"})
        assert resp.status_code == 400
        assert resp.json()["detail"] == INVALID_EXPORT_MESSAGE

    def test_analysis_runs_in_threadpool(self, client):
        http, api = client
        offloaded = []

        async def _recording(func, *args, **kwargs):
            offloaded.append(func)
            return func(*args, **kwargs)

        with patch("exposure.api.run_in_threadpool", _recording):
            resp = http.post("/analyse", json=SAMPLE_EXPORT)
        assert resp.status_code == 200
        assert offloaded == [api.analyse_bytes]

    def test_unexpected_failure_is_500(self, client):
        http, _ = client
        with patch("exposure.api.analyse_chat_history", side_effect=RuntimeError("boom")):
            resp = http.post("/analyse", json=SAMPLE_EXPORT)
        assert resp.status_code == 500


class TestAnalyseFileEndpoint:
    def test_explicit_path(self, client, tmp_path):
        http, _ = client
        path = _write_export(tmp_path)
        resp = http.post("/analyse/file", json={"path": str(path)})
        assert resp.status_code == 200
        assert resp.json()["privacyScore"] == 8

    def test_path_from_config(self, client, tmp_path):
        http, api = client
        api.config["export_path"] = str(_write_export(tmp_path))
        resp = http.post("/analyse/file", json={})
        assert resp.status_code == 200

    def test_no_path_is_400(self, client):
        http, _ = client
        with patch("exposure.api.auto_detect_export", return_value=None):
            resp = http.post("/analyse/file", json={})
        assert resp.status_code == 400

    def test_missing_file_is_400(self, client, tmp_path):
        http, _ = client
        resp = http.post("/analyse/file", json={"path": str(tmp_path / "gone.json")})
        assert resp.status_code == 400


class TestConfigEndpoints:
    def test_get_config(self, client):
        http, _ = client
        with patch("exposure.api.auto_detect_export", return_value=None):
            body = http.get("/config").json()
        assert body["config"]["api_port"] == 8765
        assert body["auto_detected_export"] is None

    def test_post_config_persists(self, client, tmp_path):
        http, api = client
        resp = http.post("/config", json={"output_path": "out.json"})
        assert resp.status_code == 200
        assert api.config["output_path"] == "out.json"
        saved = json.loads((tmp_path / CONFIG_FILENAME).read_text(encoding="utf-8"))
        assert saved["output_path"] == "out.json"


class TestHealth:
    def test_health(self, client):
        http, _ = client
        assert http.get("/health").json() == {"status": "ok", "version": __version__}
