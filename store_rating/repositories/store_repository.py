"""매장 레포지토리 — 매장 CRUD 및 평점 집계 쿼리.

Store Repository — CRUD and rating-aggregate queries for stores.
List queries join the owner and aggregate ratings so each row carries
owner_name, owner_email, average_rating and total_ratings.
"""

from typing import Any
from uuid import UUID

from sqlalchemy import Float, Row, Select, cast, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from store_rating.models.rating import Rating
from store_rating.models.store import Store
from store_rating.models.user import User
from store_rating.repositories.base import BaseRepository
from store_rating.utils.pagination import ListParams, apply_list_params

# 집계 컬럼 — Aggregate columns shared by every store listing
average_rating_col = func.coalesce(func.avg(cast(Rating.rating, Float)), 0).label("average_rating")
total_ratings_col = func.count(Rating.id).label("total_ratings")

# 정렬 허용 목록 — Sortable columns (anything else falls back to created_at)
STORE_SORT_COLUMNS: dict[str, Any] = {
    "id": Store.id,
    "name": Store.name,
    "email": Store.email,
    "address": Store.address,
    "created_at": Store.created_at,
    "average_rating": average_rating_col,
}


def _aggregate_query() -> Select:
    """소유자 정보와 평점 집계를 포함한 기본 매장 쿼리."""
    return (
        select(
            Store,
            User.name.label("owner_name"),
            User.email.label("owner_email"),
            average_rating_col,
            total_ratings_col,
        )
        .outerjoin(User, Store.owner_id == User.id)
        .outerjoin(Rating, Rating.store_id == Store.id)
        .group_by(Store.id, User.id, User.name, User.email)
    )


class StoreRepository(BaseRepository[Store]):
    """매장 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the stores table.
    """

    def __init__(self) -> None:
        super().__init__(Store)

    async def get_aggregated(self, db: AsyncSession, store_id: UUID) -> Row | None:
        """단일 매장을 소유자 정보 및 평점 집계와 함께 조회합니다.

        Returns:
            Row | None: (Store, owner_name, owner_email, average_rating, total_ratings) 또는 None
        """
        result = await db.execute(_aggregate_query().where(Store.id == store_id))
        return result.one_or_none()

    async def list_stores(
        self,
        db: AsyncSession,
        params: ListParams,
        name: str | None = None,
        email: str | None = None,
        address: str | None = None,
        owner_id: UUID | None = None,
    ) -> list[Row]:
        """필터/정렬/페이지네이션이 적용된 매장 목록을 평점 집계와 함께 조회합니다.

        List stores with owner info and rating aggregates.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            params: 정렬 및 limit/offset (Sort and window parameters)
            name: 매장명 부분 일치 (Substring filter on name)
            email: 이메일 부분 일치 (Substring filter on email)
            address: 주소 부분 일치 (Substring filter on address)
            owner_id: 소유자 일치 (Exact owner filter)

        Returns:
            list[Row]: (Store, owner_name, owner_email, average_rating, total_ratings) 행 목록
        """
        query: Select = _aggregate_query()
        if owner_id is not None:
            query = query.where(Store.owner_id == owner_id)
        if name:
            query = query.where(Store.name.ilike(f"%{name}%"))
        if email:
            query = query.where(Store.email.ilike(f"%{email}%"))
        if address:
            query = query.where(Store.address.ilike(f"%{address}%"))

        query = apply_list_params(query, params, STORE_SORT_COLUMNS, "created_at")
        result = await db.execute(query)
        return list(result.all())

    async def list_by_owner(self, db: AsyncSession, owner_id: UUID) -> list[Row]:
        """소유자가 가진 매장 목록을 평점 집계와 함께 조회합니다."""
        return await self.list_stores(
            db, ListParams(sort_by="created_at", sort_order="asc"), owner_id=owner_id
        )


# 싱글턴 인스턴스 — Singleton instance
store_repository: StoreRepository = StoreRepository()
