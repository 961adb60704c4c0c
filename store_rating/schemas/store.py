"""매장 관련 Pydantic 요청/응답 스키마 정의.

Store Pydantic request/response schema definitions.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from store_rating.schemas.rating import StoreRatingResponse
from store_rating.schemas.user import Address, Email, UserResponse
from store_rating.utils.pagination import Pagination


class StoreCreate(BaseModel):
    """매장 생성 요청 스키마 (관리자용).

    Attributes:
        name: 매장명 (Store name, required)
        email: 매장 이메일, 전역 고유 (Store email, required and unique)
        address: 주소 (Address, optional)
        owner_id: 소유자 UUID, store_owner 역할이어야 함 (Owner, must be a store_owner)
    """

    name: str = Field(min_length=1, max_length=255)
    email: Email
    address: Address | None = None
    owner_id: UUID | None = None


class StoreUpdate(BaseModel):
    """매장 수정 요청 스키마 (부분 업데이트). owner_id 변경은 관리자만 가능."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: Email | None = None
    address: Address | None = None
    owner_id: UUID | None = None


class StoreResponse(BaseModel):
    """매장 응답 스키마 — 소유자 정보와 평점 집계 포함.

    Store response with owner info and rating aggregates.
    """

    id: str
    name: str
    email: str
    address: str | None
    owner_id: str | None
    owner_name: str | None = None
    owner_email: str | None = None
    average_rating: float = 0.0
    total_ratings: int = 0
    created_at: datetime


class StoreDetailResponse(StoreResponse):
    """매장 상세 응답 — 평점 목록 포함."""

    ratings: list[StoreRatingResponse]


class StoreEnvelope(BaseModel):
    """단일 매장 응답 래퍼 — {"message"?, "store"}."""

    message: str | None = None
    store: StoreResponse


class StoreDetailEnvelope(BaseModel):
    """매장 상세 응답 래퍼."""

    store: StoreDetailResponse


class StoreListResponse(BaseModel):
    """매장 목록 응답 — {"stores", "pagination"}."""

    stores: list[StoreResponse]
    pagination: Pagination


class StoreCollection(BaseModel):
    """페이지네이션 없는 매장 목록 응답 — {"stores"}."""

    stores: list[StoreResponse]


class StoreOwnerCreatedResponse(BaseModel):
    """매장 소유자 + 매장 동시 생성 응답."""

    message: str
    user: UserResponse
    store: StoreResponse
