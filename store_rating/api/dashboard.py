"""대시보드 라우터 — 역할별 대시보드 엔드포인트.

Dashboard Router — "" dispatches on the caller's role; the other paths
are the role-gated variants.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from store_rating.api.deps import AdminUser, CurrentUser, DbSession, require_normal_user, require_store_owner
from store_rating.models.user import User
from store_rating.schemas.dashboard import AdminDashboard, StoreOwnerDashboard, UserDashboard
from store_rating.services.dashboard_service import dashboard_service

router: APIRouter = APIRouter()


@router.get("", response_model=AdminDashboard | StoreOwnerDashboard | UserDashboard)
async def get_dashboard(
    db: DbSession,
    current_user: CurrentUser,
) -> AdminDashboard | StoreOwnerDashboard | UserDashboard:
    """사용자 역할에 맞는 대시보드를 반환합니다."""
    return await dashboard_service.for_user(db, current_user)


@router.get("/admin", response_model=AdminDashboard)
async def admin_dashboard(db: DbSession, current_user: AdminUser) -> AdminDashboard:
    return await dashboard_service.admin(db)


@router.get("/store-owner", response_model=StoreOwnerDashboard)
async def store_owner_dashboard(
    db: DbSession,
    current_user: Annotated[User, Depends(require_store_owner)],
) -> StoreOwnerDashboard:
    return await dashboard_service.store_owner(db, current_user)


@router.get("/user", response_model=UserDashboard)
async def user_dashboard(
    db: DbSession,
    current_user: Annotated[User, Depends(require_normal_user)],
) -> UserDashboard:
    return await dashboard_service.user(db, current_user)
