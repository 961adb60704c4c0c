"""평점 관련 Pydantic 요청/응답 스키마 정의.

Rating Pydantic request/response schema definitions.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, StrictInt

from store_rating.utils.pagination import Pagination


class RatingSubmit(BaseModel):
    """평점 제출 요청 스키마.

    Rating submission. The 1..5 range is checked by the rating service so the
    error message is the same for every out-of-range value. Booleans and
    floats are rejected rather than coerced.
    """

    store_id: UUID
    rating: StrictInt


class RatingResponse(BaseModel):
    """평점 응답 스키마."""

    id: str
    user_id: str
    store_id: str
    rating: int
    created_at: datetime
    updated_at: datetime


class StoreRatingResponse(RatingResponse):
    """매장 기준 평점 응답 — 작성자 정보 포함."""

    user_name: str
    user_email: str


class UserRatingResponse(RatingResponse):
    """사용자 기준 평점 응답 — 매장 정보 포함."""

    store_name: str
    store_email: str
    store_address: str | None


class RatingStatistics(BaseModel):
    """매장 평점 통계."""

    total_ratings: int
    average_rating: float
    min_rating: int | None = None
    max_rating: int | None = None
    distribution: dict[str, int]


class SubmittedRating(BaseModel):
    store_id: str
    rating: int
    user_id: str


class RatingSubmitResponse(BaseModel):
    """평점 제출 응답 — 갱신된 매장 통계 포함."""

    message: str
    rating: SubmittedRating
    store_stats: dict[str, float | int | None]


class MyRatingResponse(BaseModel):
    """특정 매장에 대한 내 평점 응답. 평점이 없으면 rating=None."""

    rating: RatingResponse | None
    message: str | None = None


class UserRatingListResponse(BaseModel):
    """내 평점 목록 응답."""

    ratings: list[UserRatingResponse]
    pagination: Pagination


class StoreSummary(BaseModel):
    id: str
    name: str
    average_rating: float = 0.0
    total_ratings: int = 0


class StoreRatingListResponse(BaseModel):
    """매장 평점 목록 응답 — 매장 요약, 평점, 통계, 페이지네이션."""

    store: StoreSummary
    ratings: list[StoreRatingResponse]
    statistics: RatingStatistics
    pagination: Pagination


class StoreRatingStatsResponse(BaseModel):
    """매장 평점 통계 응답 (관리자/소유자)."""

    store: StoreSummary
    statistics: RatingStatistics
