"""평점 레포지토리 — 평점 업서트, 조회, 통계 쿼리.

Rating Repository — Upsert, listing and statistics queries for ratings.
"""

import uuid
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy import Float, Row, Select, cast, delete, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from store_rating.models.rating import MAX_RATING, MIN_RATING, Rating
from store_rating.models.store import Store
from store_rating.models.user import User
from store_rating.repositories.base import BaseRepository
from store_rating.utils.pagination import ListParams, apply_list_params

# 정렬 허용 목록 — Sortable columns (anything else falls back to created_at)
RATING_SORT_COLUMNS: dict[str, Any] = {
    "id": Rating.id,
    "rating": Rating.rating,
    "created_at": Rating.created_at,
    "updated_at": Rating.updated_at,
}


class RatingRepository(BaseRepository[Rating]):
    """평점 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the ratings table.
    """

    def __init__(self) -> None:
        super().__init__(Rating)

    async def upsert(
        self,
        db: AsyncSession,
        user_id: UUID,
        store_id: UUID,
        rating: int,
    ) -> None:
        """평점을 삽입하거나 기존 평점을 덮어씁니다.

        Insert a rating or, when the (user_id, store_id) pair already exists,
        overwrite its value and refresh updated_at. Conflict resolution
        happens inside the single INSERT ... ON CONFLICT statement.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 평가자 ID (Rating author)
            store_id: 매장 ID (Rated store)
            rating: 평점 값 (Rating value, already range-checked)
        """
        now: datetime = datetime.now(timezone.utc)
        dialect: str = db.get_bind().dialect.name
        insert = sqlite_insert if dialect == "sqlite" else pg_insert

        stmt = insert(Rating).values(
            id=uuid.uuid4(),
            user_id=user_id,
            store_id=store_id,
            rating=rating,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[Rating.user_id, Rating.store_id],
            set_={"rating": stmt.excluded.rating, "updated_at": now},
        )
        await db.execute(stmt)

    async def get_by_user_and_store(
        self,
        db: AsyncSession,
        user_id: UUID,
        store_id: UUID,
    ) -> Rating | None:
        """사용자의 특정 매장 평점을 조회합니다."""
        query: Select = (
            select(Rating)
            .where(Rating.user_id == user_id, Rating.store_id == store_id)
            # 업서트는 ORM을 거치지 않으므로 identity map 값을 갱신
            .execution_options(populate_existing=True)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def list_by_store(
        self,
        db: AsyncSession,
        store_id: UUID,
        params: ListParams,
    ) -> list[Row]:
        """매장의 평점 목록을 작성자 정보와 함께 조회합니다.

        Returns:
            list[Row]: (Rating, user_name, user_email) 행 목록
        """
        query: Select = (
            select(Rating, User.name.label("user_name"), User.email.label("user_email"))
            .join(User, Rating.user_id == User.id)
            .where(Rating.store_id == store_id)
            .execution_options(populate_existing=True)
        )
        query = apply_list_params(query, params, RATING_SORT_COLUMNS, "created_at")
        result = await db.execute(query)
        return list(result.all())

    async def list_by_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        params: ListParams,
    ) -> list[Row]:
        """사용자의 평점 목록을 매장 정보와 함께 조회합니다.

        Returns:
            list[Row]: (Rating, store_name, store_email, store_address) 행 목록
        """
        query: Select = (
            select(
                Rating,
                Store.name.label("store_name"),
                Store.email.label("store_email"),
                Store.address.label("store_address"),
            )
            .join(Store, Rating.store_id == Store.id)
            .where(Rating.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        query = apply_list_params(query, params, RATING_SORT_COLUMNS, "created_at")
        result = await db.execute(query)
        return list(result.all())

    async def delete_by_user_and_store(
        self,
        db: AsyncSession,
        user_id: UUID,
        store_id: UUID,
    ) -> bool:
        """사용자의 특정 매장 평점을 삭제합니다.

        Returns:
            bool: 삭제된 행이 있으면 True (True when a row was deleted)
        """
        result = await db.execute(
            delete(Rating).where(Rating.user_id == user_id, Rating.store_id == store_id)
        )
        return (result.rowcount or 0) > 0

    async def store_stats(self, db: AsyncSession, store_id: UUID) -> dict[str, Any]:
        """매장의 평점 통계를 반환합니다.

        Return total, average, min and max rating for a store.
        """
        result = await db.execute(
            select(
                func.count(Rating.id).label("total_ratings"),
                func.avg(cast(Rating.rating, Float)).label("average_rating"),
                func.min(Rating.rating).label("min_rating"),
                func.max(Rating.rating).label("max_rating"),
            ).where(Rating.store_id == store_id)
        )
        row = result.one()
        return {
            "total_ratings": row.total_ratings or 0,
            "average_rating": float(row.average_rating or 0),
            "min_rating": row.min_rating,
            "max_rating": row.max_rating,
        }

    async def distribution(self, db: AsyncSession, store_id: UUID) -> dict[str, int]:
        """매장의 평점 분포(1~5)를 반환합니다.

        Return {"1": n, ..., "5": n}; values with no ratings are zero.
        """
        result = await db.execute(
            select(Rating.rating, func.count(Rating.id))
            .where(Rating.store_id == store_id)
            .group_by(Rating.rating)
        )
        counts: dict[str, int] = {str(value): 0 for value in range(MIN_RATING, MAX_RATING + 1)}
        for value, count in result.all():
            counts[str(value)] = count
        return counts

    async def rated_store_ids(self, db: AsyncSession, user_id: UUID) -> set[UUID]:
        """사용자가 평가한 모든 매장 ID를 반환합니다."""
        result = await db.execute(select(Rating.store_id).where(Rating.user_id == user_id))
        return set(result.scalars().all())

    async def overall_stats(self, db: AsyncSession) -> dict[str, Any]:
        """전체 평점 통계를 반환합니다."""
        result = await db.execute(
            select(
                func.count(Rating.id).label("total_ratings"),
                func.avg(cast(Rating.rating, Float)).label("average_rating"),
            )
        )
        row = result.one()
        return {
            "total_ratings": row.total_ratings or 0,
            "average_rating": float(row.average_rating or 0),
        }


# 싱글턴 인스턴스 — Singleton instance
rating_repository: RatingRepository = RatingRepository()
