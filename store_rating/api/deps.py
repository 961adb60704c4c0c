"""FastAPI 의존성 주입 모듈 — 인증 및 권한 검사.

FastAPI dependency injection module — Authentication and authorization.

Authentication Flow:
    1. 클라이언트가 Authorization: Bearer <token> 헤더를 전송
       (Client sends Authorization: Bearer <token> header)
    2. decode_token()이 서명과 만료를 검증 (Signature and expiry are verified)
    3. 페이로드의 "sub"로 DB에서 사용자를 조회 (User loaded by the "sub" claim)

Authorization Flow (require_roles):
    인증된 사용자의 역할이 허용 목록에 없으면 403을 반환
    (Returns 403 when the authenticated user's role is not allowed)
"""

from typing import Annotated, Awaitable, Callable
from uuid import UUID

import jwt
from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from store_rating.database import get_db
from store_rating.models.user import ROLE_ADMIN, ROLE_STORE_OWNER, ROLE_NORMAL_USER, User
from store_rating.repositories.user_repository import user_repository
from store_rating.utils.exceptions import ForbiddenError, UnauthorizedError
from store_rating.utils.jwt import decode_token
from store_rating.utils.pagination import ListParams

# HTTP Bearer 토큰 추출기 — 헤더가 없으면 None을 전달해 401로 처리
# (auto_error=False so a missing header becomes 401 instead of 403)
security: HTTPBearer = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """JWT 토큰에서 현재 인증된 사용자를 추출합니다.

    Decode the bearer token and return the user it names.

    Raises:
        UnauthorizedError: 토큰 누락, 유효하지 않음, 만료, 또는 사용자 없음
                           (Missing, invalid or expired token, or unknown user)
    """
    if credentials is None:
        raise UnauthorizedError("Access token required")

    try:
        payload: dict = decode_token(credentials.credentials)
        # 토큰 타입 검증 — Only access tokens authenticate requests
        if payload.get("type") != "access":
            raise UnauthorizedError("Invalid token type")
        user_id = UUID(str(payload["sub"]))
    except UnauthorizedError:
        raise
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token has expired")
    except (jwt.InvalidTokenError, KeyError, ValueError):
        raise UnauthorizedError("Invalid token")

    user: User | None = await user_repository.get_by_id(db, user_id)
    if user is None:
        raise UnauthorizedError("User not found")
    return user


def require_roles(*roles: str) -> Callable[..., Awaitable[User]]:
    """역할 기반 권한 검사 의존성 팩토리.

    Dependency factory that only lets the given roles through.

    Args:
        roles: 허용되는 역할 목록 (Allowed role names)

    Returns:
        FastAPI 의존성 함수 — 인증된 사용자 반환 또는 403 발생
        (Dependency returning the user or raising 403)
    """
    allowed: frozenset[str] = frozenset(roles)

    async def _check(
        current_user: Annotated[User, Depends(get_current_user)],
    ) -> User:
        if current_user.role not in allowed:
            raise ForbiddenError("Insufficient permissions")
        return current_user
    return _check


# 편의 의존성 — Pre-configured role dependencies
require_admin = require_roles(ROLE_ADMIN)
require_store_owner = require_roles(ROLE_STORE_OWNER)
require_normal_user = require_roles(ROLE_NORMAL_USER)


def list_params(
    sort_by: Annotated[str | None, Query(alias="sortBy")] = None,
    sort_order: Annotated[str | None, Query(alias="sortOrder")] = None,
    limit: int | None = None,
    offset: int | None = None,
) -> ListParams:
    """정렬/페이지네이션 쿼리 파라미터 의존성 (기본값 없음)."""
    return ListParams(sort_by=sort_by, sort_order=sort_order, limit=limit, offset=offset)


def paged_list_params(default_limit: int) -> Callable[..., ListParams]:
    """기본 limit이 있는 정렬/페이지네이션 의존성 팩토리."""

    def _params(
        sort_by: Annotated[str | None, Query(alias="sortBy")] = None,
        sort_order: Annotated[str | None, Query(alias="sortOrder")] = None,
        limit: int = default_limit,
        offset: int = 0,
    ) -> ListParams:
        return ListParams(sort_by=sort_by, sort_order=sort_order, limit=limit, offset=offset)
    return _params


# 타입 별칭 — Shared annotated dependencies
DbSession = Annotated[AsyncSession, Depends(get_db)]
CurrentUser = Annotated[User, Depends(get_current_user)]
AdminUser = Annotated[User, Depends(require_admin)]
