import logging

import pytest

from notes_api.core.exceptions import UpstreamError
from notes_api.db.outcome import Outcome, RemoteError


class TestRemoteErrorClassification:
    @pytest.mark.parametrize("code", ["23505", "23503", "22P02", "22001", "PGRST116"])
    def test_client_fixable_codes(self, code):
        assert RemoteError("x", code=code).is_client_error

    @pytest.mark.parametrize("code", [None, "", "XX000", "42501", "PGRST301", "57014"])
    def test_server_side_codes(self, code):
        assert not RemoteError("x", code=code).is_client_error


class TestOutcome:
    def test_map_skips_failures(self):
        failed = Outcome.failure(RemoteError("boom"))

        assert Outcome.success(2).map(lambda v: v * 2).value == 4
        assert failed.map(lambda v: v * 2).error == failed.error

    def test_unwrap_raises_named_step(self):
        outcome = Outcome.failure(RemoteError("duplicate key", code="23505"))

        with pytest.raises(UpstreamError) as exc_info:
            outcome.unwrap("create tag")

        err = exc_info.value
        assert err.status_code == 400
        assert err.to_body() == {"error": "Failed to create tag: duplicate key", "step": "create tag"}

    def test_unwrap_server_failure_is_500(self):
        with pytest.raises(UpstreamError) as exc_info:
            Outcome.failure(RemoteError("timeout")).unwrap("retrieve notes")

        assert exc_info.value.status_code == 500


class TestHttpSurface:
    def test_health(self, anonymous_client):
        resp = anonymous_client.get("/api/health")

        assert resp.status_code == 200
        assert resp.json()["status"] == "healthy"
        assert resp.headers["x-content-type-options"] == "nosniff"

    def test_unknown_route_uses_error_body(self, anonymous_client):
        resp = anonymous_client.get("/api/nothing-here")

        assert resp.status_code == 404
        assert resp.json() == {"error": "Not Found"}

    def test_unexpected_exception_is_generic_500(self, client, store, monkeypatch):
        async def explode(*args, **kwargs):
            raise RuntimeError("secret internals")

        monkeypatch.setattr("fakes.FakeNoteRepository.list", explode)

        resp = client.get("/api/notes")

        assert resp.status_code == 500
        assert resp.json() == {"error": "Unexpected error"}

    def test_unexpected_exception_gets_an_access_log_line(self, client, monkeypatch, caplog):
        async def explode(*args, **kwargs):
            raise RuntimeError("secret internals")

        monkeypatch.setattr("fakes.FakeNoteRepository.list", explode)
        caplog.set_level(logging.INFO, logger="notes_api.access")

        client.get("/api/notes")

        access = [r for r in caplog.records if r.name == "notes_api.access"]
        assert [(r.levelno, r.status, r.path) for r in access] == [(logging.ERROR, 500, "/api/notes")]
