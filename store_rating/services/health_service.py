"""헬스 체크 서비스 — DB 연결 확인 및 셀프 핑 루프.

Health Service — Database reachability check and the optional self-ping
loop that keeps a sleeping free-tier instance awake.
"""

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Any

import httpx
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from store_rating.config import settings

logger = logging.getLogger(__name__)

# 프로세스 시작 시각 — Reference point for the reported uptime
_STARTED_AT: float = time.monotonic()

PING_TIMEOUT_SECONDS: float = 10.0


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class HealthService:
    """서버 및 데이터베이스 상태를 확인하는 서비스."""

    async def check(self, db: AsyncSession) -> tuple[bool, dict[str, Any]]:
        """`SELECT 1`로 데이터베이스 연결을 확인합니다.

        Returns:
            tuple[bool, dict]: (정상 여부, 응답 본문). 실패 시 본문에 내부 오류 내용은 포함하지 않음.
        """
        try:
            await db.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError):
            logger.exception("Health check failed")
            return False, {
                "status": "ERROR",
                "message": "Database connection failed",
                "database": "disconnected",
                "timestamp": _timestamp(),
            }
        return True, {
            "status": "OK",
            "message": "Server and database are running",
            "database": "connected",
            "timestamp": _timestamp(),
            "uptime": round(time.monotonic() - _STARTED_AT, 3),
        }

    async def ping_once(self, client: httpx.AsyncClient, url: str) -> int | None:
        """헬스 URL을 한 번 호출합니다. 실패는 로그만 남김.

        Returns:
            int | None: 응답 상태 코드, 실패 시 None
        """
        try:
            response: httpx.Response = await client.get(url, timeout=PING_TIMEOUT_SECONDS)
        except httpx.HTTPError as exc:
            logger.warning("Self-ping to %s failed: %s", url, exc)
            return None
        logger.info("Self-ping: health check responded %s", response.status_code)
        return response.status_code

    async def self_ping_loop(
        self,
        url: str,
        interval: float | None = None,
        initial_delay: float | None = None,
    ) -> None:
        """취소될 때까지 주기적으로 헬스 URL을 호출합니다.

        Ping the URL after the initial delay, then every interval, until the
        task is cancelled at shutdown.
        """
        interval = settings.SELF_PING_INTERVAL_SECONDS if interval is None else interval
        initial_delay = settings.SELF_PING_INITIAL_DELAY_SECONDS if initial_delay is None else initial_delay
        logger.info("Self-pinging enabled: %s every %s seconds", url, interval)

        await asyncio.sleep(initial_delay)
        async with httpx.AsyncClient() as client:
            while True:
                await self.ping_once(client, url)
                await asyncio.sleep(interval)


# 싱글턴 인스턴스 — Singleton instance
health_service: HealthService = HealthService()
