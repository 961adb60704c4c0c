"""매장 서비스 — 매장 CRUD 및 조회 비즈니스 로직.

Store Service — Business logic for store CRUD, listing and owner views.
Ownership and admin checks go through the store policy; owner assignment
is validated before anything is written.
"""

from uuid import UUID

from sqlalchemy import Row
from sqlalchemy.ext.asyncio import AsyncSession

from store_rating.models.store import Store
from store_rating.models.user import ROLE_STORE_OWNER, User
from store_rating.repositories.rating_repository import rating_repository
from store_rating.repositories.store_repository import store_repository
from store_rating.repositories.user_repository import user_repository
from store_rating.schemas.rating import StoreRatingResponse
from store_rating.schemas.store import (
    StoreCollection,
    StoreCreate,
    StoreDetailEnvelope,
    StoreDetailResponse,
    StoreEnvelope,
    StoreListResponse,
    StoreResponse,
    StoreUpdate,
)
from store_rating.services.permission_service import ensure, store_policy
from store_rating.utils.exceptions import BadRequestError, DuplicateError, NotFoundError
from store_rating.utils.pagination import ListParams


def to_store_response(row: Row) -> StoreResponse:
    """집계 행을 매장 응답 스키마로 변환합니다.

    Convert a (Store, owner_name, owner_email, average_rating, total_ratings)
    row into a StoreResponse.
    """
    store: Store = row[0]
    return StoreResponse(
        id=str(store.id),
        name=store.name,
        email=store.email,
        address=store.address,
        owner_id=str(store.owner_id) if store.owner_id else None,
        owner_name=row.owner_name,
        owner_email=row.owner_email,
        average_rating=round(float(row.average_rating or 0), 2),
        total_ratings=row.total_ratings or 0,
        created_at=store.created_at,
    )


def to_store_rating_response(row: Row) -> StoreRatingResponse:
    """(Rating, user_name, user_email) 행을 응답 스키마로 변환합니다."""
    rating = row[0]
    return StoreRatingResponse(
        id=str(rating.id),
        user_id=str(rating.user_id),
        store_id=str(rating.store_id),
        rating=rating.rating,
        created_at=rating.created_at,
        updated_at=rating.updated_at,
        user_name=row.user_name,
        user_email=row.user_email,
    )


class StoreService:
    """매장 관련 비즈니스 로직을 처리하는 서비스.

    Service handling store business logic.
    """

    async def _get_store(self, db: AsyncSession, store_id: UUID) -> Store:
        store: Store | None = await store_repository.get_by_id(db, store_id)
        if store is None:
            raise NotFoundError("Store not found")
        return store

    async def _validate_owner(self, db: AsyncSession, owner_id: UUID) -> None:
        """소유자 후보가 존재하고 store_owner 역할인지 확인합니다.

        Raises:
            BadRequestError: 존재하지 않거나 store_owner가 아닐 때
        """
        owner: User | None = await user_repository.get_by_id(db, owner_id)
        if owner is None or owner.role != ROLE_STORE_OWNER:
            raise BadRequestError("Owner must be an existing store owner")

    async def get_response(self, db: AsyncSession, store_id: UUID) -> StoreResponse:
        """매장 응답(소유자 정보, 평점 집계 포함)을 반환합니다.

        Raises:
            NotFoundError: 매장이 없을 때 (Store not found)
        """
        row: Row | None = await store_repository.get_aggregated(db, store_id)
        if row is None:
            raise NotFoundError("Store not found")
        return to_store_response(row)

    async def list_stores(
        self,
        db: AsyncSession,
        params: ListParams,
        name: str | None = None,
        email: str | None = None,
        address: str | None = None,
    ) -> StoreListResponse:
        """필터/정렬/페이지네이션이 적용된 매장 목록을 반환합니다."""
        rows = await store_repository.list_stores(db, params, name=name, email=email, address=address)
        return StoreListResponse(
            stores=[to_store_response(row) for row in rows],
            pagination=params.pagination,
        )

    async def stats(self, db: AsyncSession) -> dict[str, dict[str, int]]:
        return {"stats": {"total_stores": await store_repository.count_total(db)}}

    async def list_by_owner(self, db: AsyncSession, owner_id: UUID) -> StoreCollection:
        """소유자의 매장 목록을 평점 집계와 함께 반환합니다."""
        rows = await store_repository.list_by_owner(db, owner_id)
        return StoreCollection(stores=[to_store_response(row) for row in rows])

    async def get_store(self, db: AsyncSession, store_id: UUID) -> StoreEnvelope:
        return StoreEnvelope(store=await self.get_response(db, store_id))

    async def get_details(
        self,
        db: AsyncSession,
        store_id: UUID,
        current_user: User,
    ) -> StoreDetailEnvelope:
        """매장 상세(평점 목록 포함)를 반환합니다. 관리자 또는 소유자만 조회 가능.

        Raises:
            NotFoundError: 매장이 없을 때
            ForbiddenError: 관리자도 소유자도 아닐 때
        """
        store: Store = await self._get_store(db, store_id)
        ensure(store_policy(current_user, store, "view_details"), "You can only view your own stores")

        summary: StoreResponse = await self.get_response(db, store_id)
        rows = await rating_repository.list_by_store(
            db, store_id, ListParams(sort_by="created_at", sort_order="desc")
        )
        return StoreDetailEnvelope(
            store=StoreDetailResponse(
                **summary.model_dump(),
                ratings=[to_store_rating_response(row) for row in rows],
            )
        )

    async def create_store(self, db: AsyncSession, data: StoreCreate) -> Store:
        """새 매장을 생성합니다 (관리자 전용).

        Raises:
            DuplicateError: 이메일 중복 (Store email already exists)
            BadRequestError: 소유자가 store_owner가 아닐 때 (Invalid owner)
        """
        if await store_repository.exists(db, {"email": data.email}):
            raise DuplicateError("Store with this email already exists")
        if data.owner_id is not None:
            await self._validate_owner(db, data.owner_id)

        return await store_repository.create(db, data.model_dump())

    async def update_store(
        self,
        db: AsyncSession,
        store_id: UUID,
        data: StoreUpdate,
        current_user: User,
    ) -> Store:
        """매장 정보를 수정합니다. 소유자 변경은 관리자만 가능.

        Raises:
            NotFoundError: 매장이 없을 때
            ForbiddenError: 권한이 없을 때
            DuplicateError: 다른 매장이 같은 이메일을 사용 중일 때
            BadRequestError: 변경할 필드가 없거나 소유자가 유효하지 않을 때
        """
        store: Store = await self._get_store(db, store_id)
        ensure(store_policy(current_user, store, "update"), "You can only update your own stores")

        update_data: dict = data.model_dump(exclude_unset=True)
        for field in ("name", "email"):
            if update_data.get(field) is None:
                update_data.pop(field, None)

        if "owner_id" in update_data:
            ensure(store_policy(current_user, store, "change_owner"), "Only admins can change the store owner")
            if update_data["owner_id"] is not None:
                await self._validate_owner(db, update_data["owner_id"])

        if not update_data:
            raise BadRequestError("No fields to update")

        new_email: str | None = update_data.get("email")
        if new_email is not None and new_email != store.email:
            if await store_repository.exists(db, {"email": new_email}):
                raise DuplicateError("Store with this email already exists")

        updated: Store | None = await store_repository.update(db, store_id, update_data)
        return updated or store

    async def delete_store(self, db: AsyncSession, store_id: UUID, current_user: User) -> Store:
        """매장을 삭제합니다. 평점은 CASCADE로 함께 삭제됨.

        Raises:
            NotFoundError: 매장이 없을 때
            ForbiddenError: 관리자도 소유자도 아닐 때
        """
        store: Store = await self._get_store(db, store_id)
        ensure(store_policy(current_user, store, "delete"), "You can only delete your own stores")
        await store_repository.delete(db, store_id)
        return store


# 싱글턴 인스턴스 — Singleton instance
store_service: StoreService = StoreService()
