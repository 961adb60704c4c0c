"""사용자 라우터 — 사용자 관리, 통계, 분석 엔드포인트.

User Router — User management, statistics and analytics endpoints.
Static paths are declared before "/{user_id}" so they are matched first.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from store_rating.api.deps import AdminUser, CurrentUser, DbSession, paged_list_params
from store_rating.models.user import ROLE_ADMIN, ROLE_NORMAL_USER, User
from store_rating.schemas.common import MessageResponse
from store_rating.schemas.store import StoreOwnerCreatedResponse
from store_rating.schemas.user import (
    StoreOwnerCreate,
    UserAnalyticsResponse,
    UserCreate,
    UserCreateFixedRole,
    UserEnvelope,
    UserListResponse,
    UserStatsResponse,
    UserUpdate,
)
from store_rating.services.activity_service import (
    ACTION_USER_CREATED,
    ACTION_USER_DELETED,
    ACTION_USER_UPDATED,
    activity_service,
)
from store_rating.services.user_service import to_user_response, user_service
from store_rating.utils.pagination import ListParams

router: APIRouter = APIRouter()

DEFAULT_USER_PAGE_SIZE: int = 10


@router.get("", response_model=UserListResponse)
async def list_users(
    db: DbSession,
    current_user: AdminUser,
    params: Annotated[ListParams, Depends(paged_list_params(DEFAULT_USER_PAGE_SIZE))],
    role: Annotated[str | None, Query(description="역할 일치 필터")] = None,
    name: Annotated[str | None, Query(description="이름 부분 일치 필터")] = None,
    email: Annotated[str | None, Query(description="이메일 부분 일치 필터")] = None,
) -> UserListResponse:
    """사용자 목록을 필터/정렬/페이지네이션으로 조회합니다 (관리자 전용)."""
    return await user_service.list_users(db, params, role=role, name=name, email=email)


@router.get("/stats", response_model=UserStatsResponse)
async def user_stats(db: DbSession, current_user: AdminUser) -> UserStatsResponse:
    return await user_service.stats(db)


@router.get("/analytics", response_model=UserAnalyticsResponse)
async def user_analytics(db: DbSession, current_user: AdminUser) -> UserAnalyticsResponse:
    """가입 추이와 역할 분포 등 사용자 분석 지표를 조회합니다."""
    return await user_service.analytics(db)


@router.get("/{user_id}", response_model=UserEnvelope)
async def get_user(user_id: UUID, db: DbSession, current_user: CurrentUser) -> UserEnvelope:
    """사용자를 조회합니다. 관리자 또는 본인만 가능."""
    return await user_service.get_user(db, user_id, current_user)


@router.post("", response_model=UserEnvelope, status_code=201)
async def create_user(
    data: UserCreate,
    request: Request,
    db: DbSession,
    current_user: AdminUser,
) -> UserEnvelope:
    """요청한 역할로 사용자를 생성합니다 (기본 normal_user)."""
    user: User = await user_service.create_user(db, data)
    await db.commit()
    result = UserEnvelope(message="User created successfully", user=to_user_response(user))
    await activity_service.record(
        db, request, current_user.id, ACTION_USER_CREATED, f"Created {user.role} user: {user.email}"
    )
    return result


async def _create_fixed_role(
    data: UserCreateFixedRole,
    role: str,
    request: Request,
    db: DbSession,
    current_user: User,
) -> UserEnvelope:
    user, message = await user_service.create_with_role(db, data, role)
    await db.commit()
    result = UserEnvelope(message=message, user=to_user_response(user))
    await activity_service.record(
        db, request, current_user.id, ACTION_USER_CREATED, f"Created {role} user: {user.email}"
    )
    return result


@router.post("/normal", response_model=UserEnvelope, status_code=201)
async def create_normal_user(
    data: UserCreateFixedRole,
    request: Request,
    db: DbSession,
    current_user: AdminUser,
) -> UserEnvelope:
    return await _create_fixed_role(data, ROLE_NORMAL_USER, request, db, current_user)


@router.post("/admin", response_model=UserEnvelope, status_code=201)
async def create_admin_user(
    data: UserCreateFixedRole,
    request: Request,
    db: DbSession,
    current_user: AdminUser,
) -> UserEnvelope:
    return await _create_fixed_role(data, ROLE_ADMIN, request, db, current_user)


@router.post("/store-owner", response_model=StoreOwnerCreatedResponse, status_code=201)
async def create_store_owner(
    data: StoreOwnerCreate,
    request: Request,
    db: DbSession,
    current_user: AdminUser,
) -> StoreOwnerCreatedResponse:
    """매장 소유자와 매장을 하나의 트랜잭션으로 생성합니다."""
    user, store, result = await user_service.create_store_owner(db, data)
    await db.commit()
    await activity_service.record(
        db,
        request,
        current_user.id,
        ACTION_USER_CREATED,
        f"Created store owner {user.email} with store {store.name}",
    )
    return result


@router.put("/{user_id}", response_model=UserEnvelope)
async def update_user(
    user_id: UUID,
    data: UserUpdate,
    request: Request,
    db: DbSession,
    current_user: CurrentUser,
) -> UserEnvelope:
    """사용자 정보를 수정합니다. 관리자 또는 본인, 역할 변경은 관리자만."""
    user: User = await user_service.update_user(db, user_id, data, current_user)
    await db.commit()
    result = UserEnvelope(message="User updated successfully", user=to_user_response(user))
    await activity_service.record(
        db, request, current_user.id, ACTION_USER_UPDATED, f"Updated user: {user.email}"
    )
    return result


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: UUID,
    request: Request,
    db: DbSession,
    current_user: CurrentUser,
) -> MessageResponse:
    """사용자를 삭제합니다. 관리자 역할의 사용자는 삭제할 수 없음."""
    actor_id: UUID = current_user.id
    user: User = await user_service.delete_user(db, user_id, current_user)
    email: str = user.email
    await db.commit()
    # 본인 삭제 시 행위자 행이 없으므로 user_id 없이 기록
    await activity_service.record(
        db,
        request,
        None if actor_id == user_id else actor_id,
        ACTION_USER_DELETED,
        f"Deleted user: {email}",
    )
    return MessageResponse(message="User deleted successfully")
