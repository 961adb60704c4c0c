"""대시보드 서비스 — 역할별 대시보드 데이터 집계.

Dashboard Service — Aggregates the admin, store owner and normal user
dashboards. Every figure is read fresh from the database per request.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from store_rating.models.user import ROLE_ADMIN, ROLE_STORE_OWNER, User
from store_rating.repositories.rating_repository import rating_repository
from store_rating.repositories.store_repository import store_repository
from store_rating.repositories.user_repository import user_repository
from store_rating.schemas.dashboard import (
    AdminDashboard,
    AdminStatistics,
    Discover,
    MyRatings,
    OwnedStore,
    OwnerOverview,
    RecentActivity,
    StoreOwnerDashboard,
    UserDashboard,
)
from store_rating.schemas.rating import RatingStatistics
from store_rating.schemas.store import StoreResponse
from store_rating.services.rating_service import to_user_rating_response
from store_rating.services.store_service import to_store_rating_response, to_store_response
from store_rating.services.user_service import to_user_response
from store_rating.utils.pagination import ListParams

RECENT_LIMIT: int = 5
TOP_RATED_LIMIT: int = 5
MY_RATINGS_LIMIT: int = 10

_RECENT_FIRST = ListParams(sort_by="created_at", sort_order="desc", limit=RECENT_LIMIT)
_TOP_RATED = ListParams(sort_by="average_rating", sort_order="desc", limit=TOP_RATED_LIMIT)


class DashboardService:
    """역할별 대시보드를 구성하는 서비스."""

    async def _top_rated(self, db: AsyncSession) -> list[StoreResponse]:
        rows = await store_repository.list_stores(db, _TOP_RATED)
        return [to_store_response(row) for row in rows]

    async def admin(self, db: AsyncSession) -> AdminDashboard:
        """관리자 대시보드 — 전체 통계, 최근 사용자/매장, 평점 상위 매장."""
        by_role: dict[str, int] = await user_repository.count_by_role(db)
        ratings: dict = await rating_repository.overall_stats(db)

        recent_users: list[User] = await user_repository.recent(db, RECENT_LIMIT)
        recent_stores = await store_repository.list_stores(db, _RECENT_FIRST)

        return AdminDashboard(
            statistics=AdminStatistics(
                total_users=sum(by_role.values()),
                total_stores=await store_repository.count_total(db),
                total_ratings=ratings["total_ratings"],
                average_rating=round(ratings["average_rating"], 2),
                users_by_role=by_role,
            ),
            recent_activity=RecentActivity(
                users=[to_user_response(user) for user in recent_users],
                stores=[to_store_response(row) for row in recent_stores],
            ),
            top_rated_stores=await self._top_rated(db),
        )

    async def store_owner(self, db: AsyncSession, current_user: User) -> StoreOwnerDashboard:
        """매장 소유자 대시보드 — 소유 매장별 통계, 분포, 최근 평점.

        The overview average is the mean of the per-store averages.
        """
        stores: list[OwnedStore] = []
        for row in await store_repository.list_by_owner(db, current_user.id):
            summary: StoreResponse = to_store_response(row)
            store_id = row[0].id
            stats: dict = await rating_repository.store_stats(db, store_id)
            distribution: dict[str, int] = await rating_repository.distribution(db, store_id)
            recent = await rating_repository.list_by_store(db, store_id, _RECENT_FIRST)
            stores.append(
                OwnedStore(
                    **summary.model_dump(),
                    statistics=RatingStatistics(**stats, distribution=distribution),
                    recent_ratings=[to_store_rating_response(r) for r in recent],
                )
            )

        average: float = (
            sum(store.average_rating for store in stores) / len(stores) if stores else 0.0
        )
        return StoreOwnerDashboard(
            overview=OwnerOverview(
                total_stores=len(stores),
                total_ratings=sum(store.total_ratings for store in stores),
                average_rating=round(average, 2),
            ),
            stores=stores,
        )

    async def user(self, db: AsyncSession, current_user: User) -> UserDashboard:
        """일반 사용자 대시보드 — 내 최근 평점과 아직 평가하지 않은 인기 매장."""
        rows = await rating_repository.list_by_user(
            db,
            current_user.id,
            ListParams(sort_by="created_at", sort_order="desc", limit=MY_RATINGS_LIMIT),
        )
        my_ratings = [to_user_rating_response(row) for row in rows]
        # 최근 목록이 아닌 전체 평점 기준으로 제외
        rated_ids: set[str] = {
            str(store_id) for store_id in await rating_repository.rated_store_ids(db, current_user.id)
        }

        popular: list[StoreResponse] = [
            store for store in await self._top_rated(db) if store.id not in rated_ids
        ]
        return UserDashboard(
            my_ratings=MyRatings(total_ratings=len(rated_ids), ratings=my_ratings),
            discover=Discover(popular_stores=popular),
        )

    async def for_user(
        self,
        db: AsyncSession,
        current_user: User,
    ) -> AdminDashboard | StoreOwnerDashboard | UserDashboard:
        """사용자 역할에 맞는 대시보드를 반환합니다."""
        if current_user.role == ROLE_ADMIN:
            return await self.admin(db)
        if current_user.role == ROLE_STORE_OWNER:
            return await self.store_owner(db, current_user)
        return await self.user(db, current_user)


# 싱글턴 인스턴스 — Singleton instance
dashboard_service: DashboardService = DashboardService()
