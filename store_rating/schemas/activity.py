"""활동 로그 Pydantic 응답 스키마 정의.

Activity log Pydantic response schema definitions.
"""

from datetime import datetime

from pydantic import BaseModel

from store_rating.utils.pagination import Pagination


class ActivityLogResponse(BaseModel):
    """활동 로그 응답 — 행위자 정보 포함 (사용자 삭제 시 None)."""

    id: str
    user_id: str | None
    action: str
    description: str | None
    ip_address: str | None
    user_agent: str | None
    created_at: datetime
    user_name: str | None = None
    user_email: str | None = None
    user_role: str | None = None


class ActivityLogListResponse(BaseModel):
    logs: list[ActivityLogResponse]
    pagination: Pagination


class RecentActivitiesResponse(BaseModel):
    activities: list[ActivityLogResponse]


class ActionCount(BaseModel):
    action: str
    count: int


class ActivityStats(BaseModel):
    """최근 30일 활동 통계."""

    total_activities: int
    active_users: int
    by_action: list[ActionCount]


class ActivityStatsResponse(BaseModel):
    stats: ActivityStats
