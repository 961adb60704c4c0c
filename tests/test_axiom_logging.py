"""Axiom 요청 로깅 미들웨어 테스트 — 마스킹, 이벤트 구성, 전송 실패 격리."""

from fastapi import FastAPI, HTTPException
from httpx import ASGITransport, AsyncClient

from store_rating.middleware.axiom_logging import AxiomLoggingMiddleware, mask_sensitive


class _RecordingClient:
    """ingest_events 호출을 기록하는 Axiom 클라이언트 대역."""

    def __init__(self, fail: bool = False) -> None:
        self.events: list[dict] = []
        self.fail = fail

    def ingest_events(self, dataset: str, events: list[dict]) -> None:
        if self.fail:
            raise RuntimeError("axiom unavailable")
        self.events.extend(events)


def _build_app(client: _RecordingClient) -> FastAPI:
    app = FastAPI()
    app.add_middleware(AxiomLoggingMiddleware, client=client)

    @app.post("/api/auth/login")
    async def login(payload: dict) -> dict:
        return {"ok": True}

    @app.get("/api/stores/{store_id}")
    async def missing(store_id: str) -> dict:
        raise HTTPException(status_code=404, detail="Store not found")

    @app.get("/api/health")
    async def health() -> dict:
        return {"status": "OK"}

    return app


class TestMaskSensitive:
    """민감 필드 마스킹 테스트."""

    def test_masks_nested_secrets(self):
        data = {"email": "a@b.com", "password": "x", "nested": {"accessToken": "t"}, "items": [{"apiKey": "k"}]}
        assert mask_sensitive(data) == {
            "email": "a@b.com",
            "password": "***",
            "nested": {"accessToken": "***"},
            "items": [{"apiKey": "***"}],
        }

    def test_truncates_long_strings(self):
        assert mask_sensitive("x" * 3000).endswith("...(truncated)")


class TestAxiomMiddleware:
    """미들웨어 이벤트 전송 테스트."""

    async def test_request_body_is_masked(self):
        recorder = _RecordingClient()
        transport = ASGITransport(app=_build_app(recorder))
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            res = await ac.post("/api/auth/login", json={"email": "a@b.com", "password": "Secret@123"})
        assert res.status_code == 200

        [event] = recorder.events
        assert event["method"] == "POST"
        assert event["status_code"] == 200
        assert event["request_body"] == {"email": "a@b.com", "password": "***"}
        assert "Secret@123" not in str(event)

    async def test_error_reason_is_captured(self):
        recorder = _RecordingClient()
        transport = ASGITransport(app=_build_app(recorder))
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            res = await ac.get("/api/stores/abc")
        assert res.status_code == 404
        assert res.json() == {"detail": "Store not found"}

        [event] = recorder.events
        assert event["error"] == "Store not found"
        assert event["status_code"] == 404

    async def test_health_is_not_logged(self):
        recorder = _RecordingClient()
        transport = ASGITransport(app=_build_app(recorder))
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            await ac.get("/api/health")
        assert recorder.events == []

    async def test_ingest_failure_does_not_break_response(self):
        transport = ASGITransport(app=_build_app(_RecordingClient(fail=True)))
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            res = await ac.post("/api/auth/login", json={"email": "a@b.com", "password": "p"})
        assert res.status_code == 200
