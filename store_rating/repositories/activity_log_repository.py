"""활동 로그 레포지토리 — 활동 로그 기록 및 조회 쿼리.

Activity Log Repository — Append and query operations for activity logs.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import Row, Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from store_rating.models.activity_log import ActivityLog
from store_rating.models.user import User
from store_rating.repositories.base import BaseRepository
from store_rating.utils.pagination import ListParams, apply_list_params

# 조회 상한 — Hard bounds on how many log rows one request may read
MAX_LOG_LIMIT: int = 1000
DEFAULT_LOG_LIMIT: int = 50

ACTIVITY_SORT_COLUMNS: dict[str, Any] = {
    "id": ActivityLog.id,
    "user_id": ActivityLog.user_id,
    "action": ActivityLog.action,
    "description": ActivityLog.description,
    "created_at": ActivityLog.created_at,
}


def clamp_limit(limit: int | None, default: int = DEFAULT_LOG_LIMIT) -> int:
    """limit 값을 1~1000 범위로 제한합니다."""
    if limit is None:
        return default
    return min(max(limit, 1), MAX_LOG_LIMIT)


def _with_user() -> Select:
    """행위자 이름/이메일/역할을 포함한 기본 로그 쿼리."""
    return select(
        ActivityLog,
        User.name.label("user_name"),
        User.email.label("user_email"),
        User.role.label("user_role"),
    ).outerjoin(User, ActivityLog.user_id == User.id)


class ActivityLogRepository(BaseRepository[ActivityLog]):
    """활동 로그 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리."""

    def __init__(self) -> None:
        super().__init__(ActivityLog)

    async def list_logs(
        self,
        db: AsyncSession,
        params: ListParams,
        user_id: UUID | None = None,
        action: str | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> list[Row]:
        """필터/정렬/페이지네이션이 적용된 활동 로그를 조회합니다.

        Returns:
            list[Row]: (ActivityLog, user_name, user_email, user_role) 행 목록
        """
        query: Select = _with_user()
        if user_id is not None:
            query = query.where(ActivityLog.user_id == user_id)
        if action:
            query = query.where(ActivityLog.action == action)
        if start_date is not None:
            query = query.where(ActivityLog.created_at >= start_date)
        if end_date is not None:
            query = query.where(ActivityLog.created_at <= end_date)

        query = apply_list_params(query, params, ACTIVITY_SORT_COLUMNS, "created_at")
        result = await db.execute(query)
        return list(result.all())

    async def recent(self, db: AsyncSession, limit: int | None = None) -> list[Row]:
        """최근 활동 로그를 조회합니다."""
        query: Select = (
            _with_user()
            .order_by(ActivityLog.created_at.desc())
            .limit(clamp_limit(limit))
        )
        result = await db.execute(query)
        return list(result.all())

    async def stats(self, db: AsyncSession, since: datetime) -> dict[str, Any]:
        """주어진 시각 이후의 활동 통계를 반환합니다.

        Return total activity count, distinct active users and per-action
        counts (most frequent first) since the given time.
        """
        totals = (
            await db.execute(
                select(
                    func.count(ActivityLog.id).label("total"),
                    func.count(func.distinct(ActivityLog.user_id)).label("active_users"),
                ).where(ActivityLog.created_at >= since)
            )
        ).one()

        action_count = func.count(ActivityLog.id).label("count")
        by_action = await db.execute(
            select(ActivityLog.action, action_count)
            .where(ActivityLog.created_at >= since)
            .group_by(ActivityLog.action)
            .order_by(action_count.desc())
        )
        return {
            "total_activities": totals.total or 0,
            "active_users": totals.active_users or 0,
            "by_action": [
                {"action": action, "count": count} for action, count in by_action.all()
            ],
        }


# 싱글턴 인스턴스 — Singleton instance
activity_log_repository: ActivityLogRepository = ActivityLogRepository()
