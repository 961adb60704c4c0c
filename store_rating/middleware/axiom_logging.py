"""Axiom 요청 로깅 미들웨어.

Axiom request logging middleware.
Ships one structured event per API request: method, path, masked
params/body, status, duration, client address and the error reason for
failed requests. Disabled when AXIOM_API_TOKEN or AXIOM_DATASET is empty.
"""

import json
import logging
import re
import time
from typing import Any

from axiom_py import Client as AxiomClient
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from store_rating.config import settings

logger = logging.getLogger(__name__)

# 마스킹 대상 필드 패턴 — Keys whose values never leave the process
_SENSITIVE_KEYS = re.compile(
    r"(password|passwd|secret|token|authorization|api_key|apikey|credential)",
    re.IGNORECASE,
)

# 로깅 제외 경로 — Health probes and API docs are not logged
_SKIP_PATHS = {"/api/health", "/docs", "/redoc", "/openapi.json"}

_MAX_BODY_CHARS: int = 2000
_MAX_ERROR_CHARS: int = 500


def mask_sensitive(data: Any, depth: int = 0) -> Any:
    """민감 필드를 재귀적으로 마스킹합니다."""
    if depth > 5:
        return "..."
    if isinstance(data, dict):
        return {
            key: "***" if _SENSITIVE_KEYS.search(str(key)) else mask_sensitive(value, depth + 1)
            for key, value in data.items()
        }
    if isinstance(data, list):
        return [mask_sensitive(item, depth + 1) for item in data[:20]]
    if isinstance(data, str) and len(data) > _MAX_BODY_CHARS:
        return data[:_MAX_BODY_CHARS] + "...(truncated)"
    return data


async def _read_json_body(request: Request) -> Any:
    body: bytes = await request.body()
    if not body:
        return None
    try:
        return mask_sensitive(json.loads(body))
    except (json.JSONDecodeError, UnicodeDecodeError):
        return "(non-json body)"


def _error_detail(body: bytes) -> str:
    try:
        data = json.loads(body)
        detail = data.get("detail", data) if isinstance(data, dict) else data
    except (json.JSONDecodeError, UnicodeDecodeError):
        detail = body.decode("utf-8", errors="replace")
    return str(detail)[:_MAX_ERROR_CHARS]


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """API 요청/응답을 Axiom에 기록하는 미들웨어.

    Middleware that sends one event per request to the configured Axiom
    dataset. Ingest failures are logged locally and never affect the response.
    """

    def __init__(self, app: Any, client: AxiomClient | None = None) -> None:
        super().__init__(app)
        self._dataset: str = settings.AXIOM_DATASET
        self._client: AxiomClient | None = client
        if self._client is None and settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
            self._client = AxiomClient(token=settings.AXIOM_API_TOKEN)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if self._client is None or request.url.path in _SKIP_PATHS:
            return await call_next(request)

        started: float = time.perf_counter()
        event: dict[str, Any] = {
            "method": request.method,
            "path": request.url.path,
            "client_ip": request.client.host if request.client else None,
            "user_agent": request.headers.get("user-agent"),
        }
        if request.query_params:
            event["query_params"] = mask_sensitive(dict(request.query_params))
        if request.method in ("POST", "PUT", "PATCH"):
            body = await _read_json_body(request)
            if body is not None:
                event["request_body"] = body

        status_code: int = 500
        try:
            response: Response = await call_next(request)
            status_code = response.status_code
            if status_code >= 400:
                # 오류 본문을 읽은 뒤 같은 내용으로 응답을 다시 구성
                content = b"".join(
                    [chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")
                     async for chunk in response.body_iterator]
                )
                event["error"] = _error_detail(content)
                response = Response(
                    content=content,
                    status_code=status_code,
                    headers=dict(response.headers),
                    media_type=response.media_type,
                )
            return response
        except Exception as exc:
            event["error"] = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            event["status_code"] = status_code
            event["duration_ms"] = round((time.perf_counter() - started) * 1000, 2)
            if request.path_params:
                event["path_params"] = dict(request.path_params)
            self._ingest(event)

    def _ingest(self, event: dict[str, Any]) -> None:
        try:
            self._client.ingest_events(self._dataset, [event])
        except Exception:
            logger.warning("Failed to ship request log to Axiom", exc_info=True)
