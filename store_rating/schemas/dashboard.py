"""역할별 대시보드 Pydantic 응답 스키마 정의.

Role-specific dashboard response schema definitions.
"""

from pydantic import BaseModel

from store_rating.schemas.rating import RatingStatistics, StoreRatingResponse, UserRatingResponse
from store_rating.schemas.store import StoreResponse
from store_rating.schemas.user import UserResponse


# === 관리자 (Admin) ===

class AdminStatistics(BaseModel):
    total_users: int
    total_stores: int
    total_ratings: int
    average_rating: float
    users_by_role: dict[str, int]


class RecentActivity(BaseModel):
    """최근 가입 사용자와 최근 생성 매장 (각 5개)."""

    users: list[UserResponse]
    stores: list[StoreResponse]


class AdminDashboard(BaseModel):
    """관리자 대시보드 — 전체 통계, 최근 활동, 평점 상위 매장."""

    statistics: AdminStatistics
    recent_activity: RecentActivity
    top_rated_stores: list[StoreResponse]


# === 매장 소유자 (Store owner) ===

class OwnerOverview(BaseModel):
    total_stores: int
    total_ratings: int
    average_rating: float


class OwnedStore(StoreResponse):
    """소유 매장 — 통계, 분포, 최근 평점 5개 포함."""

    statistics: RatingStatistics
    recent_ratings: list[StoreRatingResponse]


class StoreOwnerDashboard(BaseModel):
    overview: OwnerOverview
    stores: list[OwnedStore]


# === 일반 사용자 (Normal user) ===

class MyRatings(BaseModel):
    total_ratings: int
    ratings: list[UserRatingResponse]


class Discover(BaseModel):
    """아직 평가하지 않은 인기 매장."""

    popular_stores: list[StoreResponse]


class UserDashboard(BaseModel):
    my_ratings: MyRatings
    discover: Discover
