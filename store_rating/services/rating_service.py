"""평점 서비스 — 평점 제출, 조회, 삭제, 통계 비즈니스 로직.

Rating Service — Business logic for submitting, listing, deleting and
summarizing ratings. A user holds at most one rating per store; submitting
again replaces the previous value.
"""

from uuid import UUID

from sqlalchemy import Row
from sqlalchemy.ext.asyncio import AsyncSession

from store_rating.models.rating import MAX_RATING, MIN_RATING, Rating
from store_rating.models.store import Store
from store_rating.models.user import User
from store_rating.repositories.rating_repository import rating_repository
from store_rating.repositories.store_repository import store_repository
from store_rating.schemas.rating import (
    MyRatingResponse,
    RatingResponse,
    RatingStatistics,
    RatingSubmit,
    RatingSubmitResponse,
    StoreRatingListResponse,
    StoreRatingStatsResponse,
    StoreSummary,
    SubmittedRating,
    UserRatingListResponse,
    UserRatingResponse,
)
from store_rating.services.permission_service import ensure, rating_policy, store_policy
from store_rating.services.store_service import to_store_rating_response
from store_rating.utils.exceptions import BadRequestError, NotFoundError
from store_rating.utils.pagination import ListParams


def _to_rating_response(rating: Rating) -> RatingResponse:
    return RatingResponse(
        id=str(rating.id),
        user_id=str(rating.user_id),
        store_id=str(rating.store_id),
        rating=rating.rating,
        created_at=rating.created_at,
        updated_at=rating.updated_at,
    )


def to_user_rating_response(row: Row) -> UserRatingResponse:
    """(Rating, store_name, store_email, store_address) 행을 응답 스키마로 변환합니다."""
    rating: Rating = row[0]
    return UserRatingResponse(
        **_to_rating_response(rating).model_dump(),
        store_name=row.store_name,
        store_email=row.store_email,
        store_address=row.store_address,
    )


class RatingService:
    """평점 관련 비즈니스 로직을 처리하는 서비스.

    Service handling rating business logic.
    """

    async def _get_store(self, db: AsyncSession, store_id: UUID) -> Store:
        store: Store | None = await store_repository.get_by_id(db, store_id)
        if store is None:
            raise NotFoundError("Store not found")
        return store

    async def _statistics(self, db: AsyncSession, store_id: UUID) -> RatingStatistics:
        stats: dict = await rating_repository.store_stats(db, store_id)
        distribution: dict[str, int] = await rating_repository.distribution(db, store_id)
        return RatingStatistics(**stats, distribution=distribution)

    def _summary(self, store: Store, statistics: RatingStatistics) -> StoreSummary:
        return StoreSummary(
            id=str(store.id),
            name=store.name,
            average_rating=statistics.average_rating,
            total_ratings=statistics.total_ratings,
        )

    async def submit(
        self,
        db: AsyncSession,
        current_user: User,
        data: RatingSubmit,
    ) -> RatingSubmitResponse:
        """평점을 제출하거나 기존 평점을 덮어씁니다.

        Submit a rating, replacing the caller's previous rating for the store.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            current_user: 평가자 (Rating author)
            data: 매장 ID와 평점 (Store and rating value)

        Returns:
            RatingSubmitResponse: 제출 결과와 갱신된 매장 통계

        Raises:
            BadRequestError: 평점이 1~5 범위를 벗어날 때
            NotFoundError: 매장이 없을 때
        """
        if not MIN_RATING <= data.rating <= MAX_RATING:
            raise BadRequestError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")
        await self._get_store(db, data.store_id)

        await rating_repository.upsert(db, current_user.id, data.store_id, data.rating)
        stats: dict = await rating_repository.store_stats(db, data.store_id)
        return RatingSubmitResponse(
            message="Rating submitted successfully",
            rating=SubmittedRating(
                store_id=str(data.store_id),
                rating=data.rating,
                user_id=str(current_user.id),
            ),
            store_stats=stats,
        )

    async def overall_stats(self, db: AsyncSession) -> dict[str, dict]:
        return {"stats": await rating_repository.overall_stats(db)}

    async def list_for_user(
        self,
        db: AsyncSession,
        current_user: User,
        params: ListParams,
    ) -> UserRatingListResponse:
        """내가 작성한 평점 목록을 매장 정보와 함께 반환합니다."""
        rows = await rating_repository.list_by_user(db, current_user.id, params)
        return UserRatingListResponse(
            ratings=[to_user_rating_response(row) for row in rows],
            pagination=params.pagination,
        )

    async def get_for_store(
        self,
        db: AsyncSession,
        current_user: User,
        store_id: UUID,
    ) -> MyRatingResponse:
        """특정 매장에 대한 내 평점을 반환합니다. 없으면 rating=None."""
        rating: Rating | None = await rating_repository.get_by_user_and_store(
            db, current_user.id, store_id
        )
        if rating is None:
            return MyRatingResponse(rating=None, message="No rating found for this store")
        return MyRatingResponse(rating=_to_rating_response(rating))

    async def list_for_store(
        self,
        db: AsyncSession,
        store_id: UUID,
        params: ListParams,
    ) -> StoreRatingListResponse:
        """매장의 평점 목록, 통계, 분포를 반환합니다.

        Raises:
            NotFoundError: 매장이 없을 때
        """
        store: Store = await self._get_store(db, store_id)
        rows = await rating_repository.list_by_store(db, store_id, params)
        statistics: RatingStatistics = await self._statistics(db, store_id)
        return StoreRatingListResponse(
            store=self._summary(store, statistics),
            ratings=[to_store_rating_response(row) for row in rows],
            statistics=statistics,
            pagination=params.pagination,
        )

    async def store_stats(
        self,
        db: AsyncSession,
        current_user: User,
        store_id: UUID,
    ) -> StoreRatingStatsResponse:
        """매장 평점 통계를 반환합니다. 관리자 또는 소유자만 조회 가능."""
        store: Store = await self._get_store(db, store_id)
        ensure(store_policy(current_user, store, "view_stats"), "You can only view stats for your own stores")
        statistics: RatingStatistics = await self._statistics(db, store_id)
        return StoreRatingStatsResponse(store=self._summary(store, statistics), statistics=statistics)

    async def delete_own(self, db: AsyncSession, current_user: User, store_id: UUID) -> None:
        """내 평점을 삭제합니다.

        Raises:
            NotFoundError: 해당 매장에 대한 내 평점이 없을 때
        """
        rating: Rating | None = await rating_repository.get_by_user_and_store(
            db, current_user.id, store_id
        )
        if rating is None:
            raise NotFoundError("Rating not found")
        ensure(rating_policy(current_user, rating, "delete"), "You can only delete your own ratings")
        await rating_repository.delete_by_user_and_store(db, current_user.id, store_id)


# 싱글턴 인스턴스 — Singleton instance
rating_service: RatingService = RatingService()
