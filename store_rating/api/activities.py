"""활동 로그 라우터 — 관리자용 활동 로그 조회 엔드포인트.

Activity Router — Admin-only views over the activity log.
"""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from store_rating.api.deps import AdminUser, DbSession, paged_list_params
from store_rating.repositories.activity_log_repository import DEFAULT_LOG_LIMIT
from store_rating.schemas.activity import (
    ActivityLogListResponse,
    ActivityStatsResponse,
    RecentActivitiesResponse,
)
from store_rating.services.activity_service import activity_service
from store_rating.utils.pagination import ListParams

router: APIRouter = APIRouter()


@router.get("", response_model=ActivityLogListResponse)
async def list_activity_logs(
    db: DbSession,
    current_user: AdminUser,
    params: Annotated[ListParams, Depends(paged_list_params(DEFAULT_LOG_LIMIT))],
    user_id: Annotated[UUID | None, Query(description="행위자 ID 필터")] = None,
    action: Annotated[str | None, Query(description="동작 코드 필터")] = None,
    start_date: Annotated[datetime | None, Query(description="시작 일시 (포함)")] = None,
    end_date: Annotated[datetime | None, Query(description="종료 일시 (포함)")] = None,
) -> ActivityLogListResponse:
    """활동 로그를 필터/정렬/페이지네이션으로 조회합니다. limit은 최대 1000."""
    return await activity_service.list_logs(
        db, params, user_id=user_id, action=action, start_date=start_date, end_date=end_date
    )


@router.get("/recent", response_model=RecentActivitiesResponse)
async def recent_activities(
    db: DbSession,
    current_user: AdminUser,
    limit: int = DEFAULT_LOG_LIMIT,
) -> RecentActivitiesResponse:
    return await activity_service.recent(db, limit)


@router.get("/stats", response_model=ActivityStatsResponse)
async def activity_stats(db: DbSession, current_user: AdminUser) -> ActivityStatsResponse:
    """최근 30일 활동 통계를 조회합니다."""
    return await activity_service.stats(db)
