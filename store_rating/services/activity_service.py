"""활동 로그 서비스 — 활동 기록 및 조회 비즈니스 로직.

Activity Service — Records user activity and serves the admin log views.

Recording runs after the caller's primary commit and commits on its own.
A failure while writing a log row is rolled back and logged; it never
changes the outcome of the request that triggered it.
"""

import logging
from datetime import datetime, timedelta, timezone
from uuid import UUID

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from store_rating.models.activity_log import ActivityLog
from store_rating.repositories.activity_log_repository import (
    activity_log_repository,
    clamp_limit,
)
from store_rating.schemas.activity import (
    ActivityLogListResponse,
    ActivityLogResponse,
    ActivityStats,
    ActivityStatsResponse,
    RecentActivitiesResponse,
)
from store_rating.utils.pagination import ListParams, Pagination

logger = logging.getLogger(__name__)

# 동작 코드 — Action codes written to activity_logs.action
ACTION_REGISTER: str = "register"
ACTION_LOGIN: str = "login"
ACTION_PROFILE_UPDATED: str = "profile_updated"
ACTION_USER_CREATED: str = "user_created"
ACTION_USER_UPDATED: str = "user_updated"
ACTION_USER_DELETED: str = "user_deleted"
ACTION_STORE_CREATED: str = "store_created"
ACTION_STORE_UPDATED: str = "store_updated"
ACTION_STORE_DELETED: str = "store_deleted"
ACTION_RATING_SUBMITTED: str = "rating_submitted"
ACTION_RATING_DELETED: str = "rating_deleted"

STATS_WINDOW_DAYS: int = 30
USER_AGENT_MAX_LENGTH: int = 500


def _client_ip(request: Request | None) -> str | None:
    if request is None:
        return None
    forwarded: str | None = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()[:45]
    return request.client.host if request.client else None


def _user_agent(request: Request | None) -> str | None:
    if request is None:
        return None
    agent: str | None = request.headers.get("user-agent")
    return agent[:USER_AGENT_MAX_LENGTH] if agent else None


class ActivityService:
    """활동 로그 관련 비즈니스 로직을 처리하는 서비스."""

    def _to_response(self, row) -> ActivityLogResponse:
        log: ActivityLog = row[0]
        return ActivityLogResponse(
            id=str(log.id),
            user_id=str(log.user_id) if log.user_id else None,
            action=log.action,
            description=log.description,
            ip_address=log.ip_address,
            user_agent=log.user_agent,
            created_at=log.created_at,
            user_name=row.user_name,
            user_email=row.user_email,
            user_role=row.user_role,
        )

    async def record(
        self,
        db: AsyncSession,
        request: Request | None,
        user_id: UUID | None,
        action: str,
        description: str | None = None,
    ) -> None:
        """활동을 기록합니다. 실패해도 예외를 전파하지 않음.

        Append an activity row and commit it. Database failures are rolled
        back and logged so the already-committed primary operation stands.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            request: 요청 객체, IP/User-Agent 추출용 (Request for IP and user agent)
            user_id: 행위자 ID (Acting user, None for anonymous)
            action: 동작 코드 (Action code)
            description: 설명 (Human-readable description)
        """
        try:
            await activity_log_repository.create(
                db,
                {
                    "user_id": user_id,
                    "action": action,
                    "description": description,
                    "ip_address": _client_ip(request),
                    "user_agent": _user_agent(request),
                },
            )
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            logger.exception("Failed to record activity %s for user %s", action, user_id)

    async def list_logs(
        self,
        db: AsyncSession,
        params: ListParams,
        user_id: UUID | None = None,
        action: str | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> ActivityLogListResponse:
        """필터가 적용된 활동 로그 목록을 반환합니다. limit은 1~1000으로 제한."""
        params.limit = clamp_limit(params.limit)
        rows = await activity_log_repository.list_logs(
            db, params, user_id=user_id, action=action, start_date=start_date, end_date=end_date
        )
        return ActivityLogListResponse(
            logs=[self._to_response(row) for row in rows],
            pagination=Pagination(limit=params.limit, offset=max(params.offset or 0, 0)),
        )

    async def recent(self, db: AsyncSession, limit: int | None) -> RecentActivitiesResponse:
        rows = await activity_log_repository.recent(db, limit)
        return RecentActivitiesResponse(activities=[self._to_response(row) for row in rows])

    async def stats(self, db: AsyncSession) -> ActivityStatsResponse:
        """최근 30일 활동 통계를 반환합니다."""
        since: datetime = datetime.now(timezone.utc) - timedelta(days=STATS_WINDOW_DAYS)
        data = await activity_log_repository.stats(db, since)
        return ActivityStatsResponse(stats=ActivityStats(**data))


# 싱글턴 인스턴스 — Singleton instance
activity_service: ActivityService = ActivityService()
