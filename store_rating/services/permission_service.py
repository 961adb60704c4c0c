"""권한 정책 서비스 — 리소스별 접근 정책 함수.

Permission Service — Per-resource access policies.
Every check is a pure function of (actor, resource, action) so routers and
services share one definition of who may do what.

Usage:
    from store_rating.services.permission_service import ensure, store_policy
    ensure(store_policy(current_user, store, "update"), "You can only update your own stores")
"""

from store_rating.models.rating import Rating
from store_rating.models.store import Store
from store_rating.models.user import ROLE_ADMIN, User
from store_rating.utils.exceptions import ForbiddenError

# 정책 동작 — Actions understood by each policy
USER_ACTIONS: tuple[str, ...] = ("view", "update", "delete", "change_role")
STORE_ACTIONS: tuple[str, ...] = ("view_details", "update", "delete", "view_stats", "change_owner")
RATING_ACTIONS: tuple[str, ...] = ("delete",)


def is_admin(actor: User) -> bool:
    return actor.role == ROLE_ADMIN


def user_policy(actor: User, target: User, action: str) -> bool:
    """사용자 리소스 정책.

    - view / update: 관리자 또는 본인 (admin or self)
    - delete: 대상이 관리자이면 항상 거부, 그 외 관리자 또는 본인
              (never for an admin target, otherwise admin or self)
    - change_role: 관리자만 (admin only)
    """
    is_self: bool = actor.id == target.id
    if action in ("view", "update"):
        return is_admin(actor) or is_self
    if action == "delete":
        if target.role == ROLE_ADMIN:
            return False
        return is_admin(actor) or is_self
    if action == "change_role":
        return is_admin(actor)
    raise ValueError(f"Unknown user action: {action}")


def store_policy(actor: User, store: Store, action: str) -> bool:
    """매장 리소스 정책.

    - view_details / update / delete / view_stats: 관리자 또는 매장 소유자
    - change_owner: 관리자만
    """
    if action in ("view_details", "update", "delete", "view_stats"):
        return is_admin(actor) or (store.owner_id is not None and store.owner_id == actor.id)
    if action == "change_owner":
        return is_admin(actor)
    raise ValueError(f"Unknown store action: {action}")


def rating_policy(actor: User, rating: Rating, action: str) -> bool:
    """평점 리소스 정책 — 삭제는 작성자 본인만."""
    if action == "delete":
        return rating.user_id == actor.id
    raise ValueError(f"Unknown rating action: {action}")


def ensure(allowed: bool, detail: str = "Insufficient permissions") -> None:
    """정책 결과가 거부이면 403을 발생시킵니다.

    Raises:
        ForbiddenError: allowed가 False일 때 (When the policy denies the action)
    """
    if not allowed:
        raise ForbiddenError(detail)
