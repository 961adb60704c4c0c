"""매장 라우터 — 매장 조회, 생성, 수정, 삭제 엔드포인트.

Store Router — Store listing, detail, CRUD and owner views.
Static paths are declared before "/{store_id}" so they are matched first.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from store_rating.api.deps import AdminUser, CurrentUser, DbSession, list_params, require_store_owner
from store_rating.models.store import Store
from store_rating.models.user import User
from store_rating.schemas.common import MessageResponse
from store_rating.schemas.store import (
    StoreCollection,
    StoreCreate,
    StoreDetailEnvelope,
    StoreEnvelope,
    StoreListResponse,
    StoreUpdate,
)
from store_rating.services.activity_service import (
    ACTION_STORE_CREATED,
    ACTION_STORE_DELETED,
    ACTION_STORE_UPDATED,
    activity_service,
)
from store_rating.services.store_service import store_service
from store_rating.utils.pagination import ListParams

router: APIRouter = APIRouter()


@router.get("", response_model=StoreListResponse)
async def list_stores(
    db: DbSession,
    current_user: CurrentUser,
    params: Annotated[ListParams, Depends(list_params)],
    name: Annotated[str | None, Query(description="매장명 부분 일치 필터")] = None,
    email: Annotated[str | None, Query(description="이메일 부분 일치 필터")] = None,
    address: Annotated[str | None, Query(description="주소 부분 일치 필터")] = None,
) -> StoreListResponse:
    """매장 목록을 평점 집계와 함께 조회합니다."""
    return await store_service.list_stores(db, params, name=name, email=email, address=address)


@router.get("/stats")
async def store_stats(db: DbSession, current_user: AdminUser) -> dict[str, dict[str, int]]:
    return await store_service.stats(db)


@router.get("/my-stores", response_model=StoreCollection)
async def my_stores(
    db: DbSession,
    current_user: Annotated[User, Depends(require_store_owner)],
) -> StoreCollection:
    """내가 소유한 매장 목록을 조회합니다 (매장 소유자 전용)."""
    return await store_service.list_by_owner(db, current_user.id)


@router.get("/owner/{owner_id}", response_model=StoreCollection)
async def stores_by_owner(owner_id: UUID, db: DbSession, current_user: AdminUser) -> StoreCollection:
    return await store_service.list_by_owner(db, owner_id)


@router.get("/{store_id}", response_model=StoreEnvelope)
async def get_store(store_id: UUID, db: DbSession, current_user: CurrentUser) -> StoreEnvelope:
    return await store_service.get_store(db, store_id)


@router.get("/{store_id}/details", response_model=StoreDetailEnvelope)
async def get_store_details(
    store_id: UUID,
    db: DbSession,
    current_user: CurrentUser,
) -> StoreDetailEnvelope:
    """매장 상세와 평점 목록을 조회합니다. 관리자 또는 소유자만 가능."""
    return await store_service.get_details(db, store_id, current_user)


@router.post("", response_model=StoreEnvelope, status_code=201)
async def create_store(
    data: StoreCreate,
    request: Request,
    db: DbSession,
    current_user: AdminUser,
) -> StoreEnvelope:
    """새 매장을 생성합니다 (관리자 전용)."""
    store: Store = await store_service.create_store(db, data)
    await db.commit()
    result = StoreEnvelope(
        message="Store created successfully",
        store=await store_service.get_response(db, store.id),
    )
    await activity_service.record(
        db, request, current_user.id, ACTION_STORE_CREATED, f"Created store: {store.name}"
    )
    return result


@router.put("/{store_id}", response_model=StoreEnvelope)
async def update_store(
    store_id: UUID,
    data: StoreUpdate,
    request: Request,
    db: DbSession,
    current_user: CurrentUser,
) -> StoreEnvelope:
    """매장 정보를 수정합니다. 관리자 또는 소유자, 소유자 변경은 관리자만."""
    store: Store = await store_service.update_store(db, store_id, data, current_user)
    await db.commit()
    result = StoreEnvelope(
        message="Store updated successfully",
        store=await store_service.get_response(db, store.id),
    )
    await activity_service.record(
        db, request, current_user.id, ACTION_STORE_UPDATED, f"Updated store: {store.name}"
    )
    return result


@router.delete("/{store_id}", response_model=MessageResponse)
async def delete_store(
    store_id: UUID,
    request: Request,
    db: DbSession,
    current_user: CurrentUser,
) -> MessageResponse:
    """매장을 삭제합니다. 관리자 또는 소유자만 가능."""
    store: Store = await store_service.delete_store(db, store_id, current_user)
    name: str = store.name
    await db.commit()
    await activity_service.record(
        db, request, current_user.id, ACTION_STORE_DELETED, f"Deleted store: {name}"
    )
    return MessageResponse(message="Store deleted successfully")
