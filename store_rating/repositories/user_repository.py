"""사용자 레포지토리 — 사용자 CRUD 및 집계 쿼리.

User Repository — CRUD, filtered listing and aggregate queries for users.
"""

from datetime import datetime

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from store_rating.models.user import User
from store_rating.repositories.base import BaseRepository
from store_rating.utils.pagination import ListParams, apply_list_params

# 정렬 허용 목록 — Sortable columns (anything else falls back to created_at)
USER_SORT_COLUMNS = {
    "id": User.id,
    "name": User.name,
    "email": User.email,
    "role": User.role,
    "created_at": User.created_at,
}


class UserRepository(BaseRepository[User]):
    """사용자 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the users table.
    """

    def __init__(self) -> None:
        super().__init__(User)

    async def get_by_email(
        self,
        db: AsyncSession,
        email: str,
    ) -> User | None:
        """이메일로 사용자를 조회합니다.

        Retrieve a user by email (the login identifier).
        """
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def list_users(
        self,
        db: AsyncSession,
        params: ListParams,
        role: str | None = None,
        name: str | None = None,
        email: str | None = None,
    ) -> list[User]:
        """필터/정렬/페이지네이션이 적용된 사용자 목록을 조회합니다.

        List users with optional filters.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            params: 정렬 및 limit/offset (Sort and window parameters)
            role: 역할 일치 필터 (Exact role filter)
            name: 이름 부분 일치 필터 (Substring filter on name)
            email: 이메일 부분 일치 필터 (Substring filter on email)

        Returns:
            list[User]: 사용자 목록 (List of users)
        """
        query: Select = select(User)
        if role:
            query = query.where(User.role == role)
        if name:
            query = query.where(User.name.ilike(f"%{name}%"))
        if email:
            query = query.where(User.email.ilike(f"%{email}%"))

        query = apply_list_params(query, params, USER_SORT_COLUMNS, "created_at")
        result = await db.execute(query)
        return list(result.scalars().all())

    async def count_by_role(self, db: AsyncSession) -> dict[str, int]:
        """역할별 사용자 수를 반환합니다.

        Return {role: count} for every role that has at least one user.
        """
        result = await db.execute(
            select(User.role, func.count(User.id)).group_by(User.role)
        )
        return {role: count for role, count in result.all()}

    async def count_created_since(self, db: AsyncSession, since: datetime) -> int:
        """주어진 시각 이후 생성된 사용자 수를 반환합니다."""
        result = await db.execute(
            select(func.count(User.id)).where(User.created_at >= since)
        )
        return result.scalar() or 0

    async def recent(self, db: AsyncSession, limit: int) -> list[User]:
        """최근 가입한 사용자 목록을 반환합니다."""
        result = await db.execute(
            select(User).order_by(User.created_at.desc()).limit(limit)
        )
        return list(result.scalars().all())


# 싱글턴 인스턴스 — Singleton instance
user_repository: UserRepository = UserRepository()
