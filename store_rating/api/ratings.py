"""평점 라우터 — 평점 제출, 조회, 삭제, 통계 엔드포인트.

Rating Router — Submit, list, delete and summarize ratings.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Request

from store_rating.api.deps import AdminUser, CurrentUser, DbSession, list_params
from store_rating.schemas.common import MessageResponse
from store_rating.schemas.rating import (
    MyRatingResponse,
    RatingSubmit,
    RatingSubmitResponse,
    StoreRatingListResponse,
    StoreRatingStatsResponse,
    UserRatingListResponse,
)
from store_rating.services.activity_service import (
    ACTION_RATING_DELETED,
    ACTION_RATING_SUBMITTED,
    activity_service,
)
from store_rating.services.rating_service import rating_service
from store_rating.utils.pagination import ListParams

router: APIRouter = APIRouter()


@router.post("", response_model=RatingSubmitResponse)
async def submit_rating(
    data: RatingSubmit,
    request: Request,
    db: DbSession,
    current_user: CurrentUser,
) -> RatingSubmitResponse:
    """평점을 제출하거나 기존 평점을 덮어씁니다."""
    result: RatingSubmitResponse = await rating_service.submit(db, current_user, data)
    await db.commit()
    await activity_service.record(
        db,
        request,
        current_user.id,
        ACTION_RATING_SUBMITTED,
        f"Rated store {data.store_id}: {data.rating}",
    )
    return result


@router.get("/stats")
async def overall_stats(db: DbSession, current_user: AdminUser) -> dict[str, dict]:
    return await rating_service.overall_stats(db)


@router.get("/user", response_model=UserRatingListResponse)
async def my_ratings(
    db: DbSession,
    current_user: CurrentUser,
    params: Annotated[ListParams, Depends(list_params)],
) -> UserRatingListResponse:
    """내가 작성한 평점 목록을 조회합니다."""
    return await rating_service.list_for_user(db, current_user, params)


@router.get("/user/{store_id}", response_model=MyRatingResponse)
async def my_rating_for_store(
    store_id: UUID,
    db: DbSession,
    current_user: CurrentUser,
) -> MyRatingResponse:
    return await rating_service.get_for_store(db, current_user, store_id)


@router.get("/store/{store_id}", response_model=StoreRatingListResponse)
async def store_ratings(
    store_id: UUID,
    db: DbSession,
    current_user: CurrentUser,
    params: Annotated[ListParams, Depends(list_params)],
) -> StoreRatingListResponse:
    """매장의 평점 목록과 통계를 조회합니다."""
    return await rating_service.list_for_store(db, store_id, params)


@router.get("/store/{store_id}/stats", response_model=StoreRatingStatsResponse)
async def store_rating_stats(
    store_id: UUID,
    db: DbSession,
    current_user: CurrentUser,
) -> StoreRatingStatsResponse:
    """매장 평점 통계를 조회합니다. 관리자 또는 소유자만 가능."""
    return await rating_service.store_stats(db, current_user, store_id)


@router.delete("/{store_id}", response_model=MessageResponse)
async def delete_my_rating(
    store_id: UUID,
    request: Request,
    db: DbSession,
    current_user: CurrentUser,
) -> MessageResponse:
    """해당 매장에 대한 내 평점을 삭제합니다."""
    await rating_service.delete_own(db, current_user, store_id)
    await db.commit()
    await activity_service.record(
        db, request, current_user.id, ACTION_RATING_DELETED, f"Deleted rating for store {store_id}"
    )
    return MessageResponse(message="Rating deleted successfully")
