"""사용자 서비스 — 사용자 CRUD, 통계, 분석 비즈니스 로직.

User Service — Business logic for user management, statistics and
analytics. Also creates a store owner together with their store.
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from store_rating.models.store import Store
from store_rating.models.user import ROLE_ADMIN, ROLE_NORMAL_USER, ROLE_STORE_OWNER, User
from store_rating.repositories.store_repository import store_repository
from store_rating.repositories.user_repository import user_repository
from store_rating.schemas.store import StoreOwnerCreatedResponse
from store_rating.schemas.user import (
    StoreOwnerCreate,
    UserAnalytics,
    UserAnalyticsResponse,
    UserCreate,
    UserCreateFixedRole,
    UserEnvelope,
    UserListResponse,
    UserResponse,
    UserStats,
    UserStatsResponse,
    UserUpdate,
)
from store_rating.services.permission_service import ensure, user_policy
from store_rating.services.store_service import store_service
from store_rating.utils.exceptions import BadRequestError, DuplicateError, NotFoundError
from store_rating.utils.pagination import ListParams
from store_rating.utils.password import hash_password

ANALYTICS_WINDOW_DAYS: int = 30
RECENT_REGISTRATIONS_LIMIT: int = 10

# 생성 경로별 응답 메시지 — Creation message per fixed role
_CREATED_MESSAGES: dict[str, str] = {
    ROLE_NORMAL_USER: "Normal user created successfully",
    ROLE_ADMIN: "Admin user created successfully",
}


def to_user_response(user: User) -> UserResponse:
    """사용자 모델을 응답 스키마로 변환합니다. 비밀번호 해시 제외.

    Convert a User model instance to a UserResponse.
    """
    return UserResponse(
        id=str(user.id),
        name=user.name,
        email=user.email,
        address=user.address,
        role=user.role,
        created_at=user.created_at,
    )


class UserService:
    """사용자 관련 비즈니스 로직을 처리하는 서비스.

    Service handling user business logic.
    """

    async def _get_user(self, db: AsyncSession, user_id: UUID) -> User:
        user: User | None = await user_repository.get_by_id(db, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def _ensure_email_free(self, db: AsyncSession, email: str) -> None:
        if await user_repository.get_by_email(db, email) is not None:
            raise DuplicateError("User with this email already exists")

    async def _insert(
        self,
        db: AsyncSession,
        data: UserCreate | UserCreateFixedRole | StoreOwnerCreate,
        role: str,
    ) -> User:
        return await user_repository.create(
            db,
            {
                "name": data.name,
                "email": data.email,
                "address": data.address,
                "password_hash": hash_password(data.password),
                "role": role,
            },
        )

    async def list_users(
        self,
        db: AsyncSession,
        params: ListParams,
        role: str | None = None,
        name: str | None = None,
        email: str | None = None,
    ) -> UserListResponse:
        """필터/정렬/페이지네이션이 적용된 사용자 목록을 반환합니다."""
        users: list[User] = await user_repository.list_users(db, params, role=role, name=name, email=email)
        return UserListResponse(
            users=[to_user_response(user) for user in users],
            pagination=params.pagination,
        )

    async def stats(self, db: AsyncSession) -> UserStatsResponse:
        """전체 사용자 수와 역할별 사용자 수를 반환합니다."""
        by_role: dict[str, int] = await user_repository.count_by_role(db)
        return UserStatsResponse(stats=UserStats(total_users=sum(by_role.values()), by_role=by_role))

    async def analytics(self, db: AsyncSession) -> UserAnalyticsResponse:
        """사용자 분석 지표를 반환합니다.

        Active users are those created within the last 30 days; the daily
        average is taken over the same window.
        """
        now: datetime = datetime.now(timezone.utc)
        window_start: datetime = now - timedelta(days=ANALYTICS_WINDOW_DAYS)
        month_start: datetime = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

        by_role: dict[str, int] = await user_repository.count_by_role(db)
        active: int = await user_repository.count_created_since(db, window_start)
        new_this_month: int = await user_repository.count_created_since(db, month_start)
        recent: list[User] = await user_repository.recent(db, RECENT_REGISTRATIONS_LIMIT)

        return UserAnalyticsResponse(
            analytics=UserAnalytics(
                total_users=sum(by_role.values()),
                active_users=active,
                new_users_this_month=new_this_month,
                average_users_per_day=round(active / ANALYTICS_WINDOW_DAYS, 2),
                role_distribution=by_role,
                recent_registrations=[to_user_response(user) for user in recent],
            )
        )

    async def get_user(self, db: AsyncSession, user_id: UUID, current_user: User) -> UserEnvelope:
        """사용자를 조회합니다. 관리자 또는 본인만 가능.

        Raises:
            NotFoundError: 사용자가 없을 때
            ForbiddenError: 관리자도 본인도 아닐 때
        """
        user: User = await self._get_user(db, user_id)
        ensure(user_policy(current_user, user, "view"), "You can only view your own profile")
        return UserEnvelope(user=to_user_response(user))

    async def create_user(self, db: AsyncSession, data: UserCreate) -> User:
        """요청의 역할로 사용자를 생성합니다 (관리자 전용).

        Raises:
            DuplicateError: 이메일 중복
        """
        await self._ensure_email_free(db, data.email)
        return await self._insert(db, data, data.role)

    async def create_with_role(
        self,
        db: AsyncSession,
        data: UserCreateFixedRole,
        role: str,
    ) -> tuple[User, str]:
        """엔드포인트가 정한 역할로 사용자를 생성합니다 (/normal, /admin).

        Returns:
            tuple[User, str]: 생성된 사용자와 응답 메시지
        """
        await self._ensure_email_free(db, data.email)
        user: User = await self._insert(db, data, role)
        return user, _CREATED_MESSAGES.get(role, "User created successfully")

    async def create_store_owner(
        self,
        db: AsyncSession,
        data: StoreOwnerCreate,
    ) -> tuple[User, Store, StoreOwnerCreatedResponse]:
        """store_owner 사용자와 매장을 함께 생성합니다.

        Both rows are flushed in the caller's session; the router commits
        once, so either both exist afterwards or neither does.

        Raises:
            DuplicateError: 사용자 이메일 또는 매장 이메일 중복
        """
        await self._ensure_email_free(db, data.email)
        if await store_repository.exists(db, {"email": data.store_email}):
            raise DuplicateError("Store with this email already exists")

        user: User = await self._insert(db, data, ROLE_STORE_OWNER)
        store: Store = await store_repository.create(
            db,
            {
                "name": data.store_name,
                "email": data.store_email,
                "address": data.store_address,
                "owner_id": user.id,
            },
        )
        return user, store, StoreOwnerCreatedResponse(
            message="Store owner and store created successfully",
            user=to_user_response(user),
            store=await store_service.get_response(db, store.id),
        )

    async def update_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        data: UserUpdate,
        current_user: User,
    ) -> User:
        """사용자 정보를 수정합니다. 역할 변경은 관리자만 가능.

        Raises:
            NotFoundError: 사용자가 없을 때
            ForbiddenError: 권한이 없거나 비관리자가 역할을 변경하려 할 때
            DuplicateError: 다른 사용자가 같은 이메일을 사용 중일 때
            BadRequestError: 변경할 필드가 없을 때
        """
        user: User = await self._get_user(db, user_id)
        ensure(user_policy(current_user, user, "update"), "You can only update your own profile")

        update_data: dict = data.model_dump(exclude_unset=True, exclude_none=True)
        if "role" in update_data:
            ensure(user_policy(current_user, user, "change_role"), "Only admins can change roles")
        if not update_data:
            raise BadRequestError("No fields to update")

        new_email: str | None = update_data.get("email")
        if new_email is not None and new_email != user.email:
            await self._ensure_email_free(db, new_email)

        updated: User | None = await user_repository.update(db, user_id, update_data)
        return updated or user

    async def delete_user(self, db: AsyncSession, user_id: UUID, current_user: User) -> User:
        """사용자를 삭제합니다. 관리자 역할의 사용자는 삭제할 수 없음.

        Owned stores keep existing with no owner; the user's ratings are
        removed by the foreign key cascade.

        Raises:
            NotFoundError: 사용자가 없을 때
            ForbiddenError: 대상이 관리자이거나 권한이 없을 때
        """
        user: User = await self._get_user(db, user_id)
        if user.role == ROLE_ADMIN:
            ensure(False, "Cannot delete admin users")
        ensure(user_policy(current_user, user, "delete"), "You can only delete your own account")
        await user_repository.delete(db, user_id)
        return user


# 싱글턴 인스턴스 — Singleton instance
user_service: UserService = UserService()
