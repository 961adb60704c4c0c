"""사용자 및 프로필 관련 Pydantic 요청/응답 스키마 정의.

User and profile Pydantic request/response schema definitions.
Field rules (name length, address length, password strength, email shape)
are declared once as annotated types and reused by every schema that
accepts those fields.
"""

import re
from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, AliasChoices, BaseModel, Field

from store_rating.models.user import ROLES, ROLE_NORMAL_USER
from store_rating.utils.pagination import Pagination

NAME_MIN_LENGTH: int = 20
NAME_MAX_LENGTH: int = 60
ADDRESS_MAX_LENGTH: int = 400

# 8~16자, 대문자 1개 이상, 특수문자(!@#$%^&*) 1개 이상
_PASSWORD_RE = re.compile(r"^(?=.*[A-Z])(?=.*[!@#$%^&*])[A-Za-z\d!@#$%^&*]{8,16}$")
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _check_name(value: str) -> str:
    if not NAME_MIN_LENGTH <= len(value) <= NAME_MAX_LENGTH:
        raise ValueError(f"Name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters")
    return value


def _check_address(value: str) -> str:
    if len(value) > ADDRESS_MAX_LENGTH:
        raise ValueError(f"Address must not exceed {ADDRESS_MAX_LENGTH} characters")
    return value


def _check_password(value: str) -> str:
    if not _PASSWORD_RE.match(value):
        raise ValueError(
            "Password must be 8-16 characters with at least one uppercase letter and one special character"
        )
    return value


def _check_email(value: str) -> str:
    if not _EMAIL_RE.match(value):
        raise ValueError("Please provide a valid email address")
    return value


def _check_role(value: str) -> str:
    if value not in ROLES:
        raise ValueError(f"Invalid role. Must be one of: {', '.join(ROLES)}")
    return value


# 재사용 가능한 검증 타입 — Reusable validated field types
Name = Annotated[str, AfterValidator(_check_name)]
Address = Annotated[str, AfterValidator(_check_address)]
Password = Annotated[str, AfterValidator(_check_password)]
Email = Annotated[str, AfterValidator(_check_email)]
Role = Annotated[str, AfterValidator(_check_role)]


# === 요청 (Request) 스키마 ===

class UserCreate(BaseModel):
    """사용자 생성 요청 스키마 (관리자용).

    User creation request schema (admin only). Role defaults to normal_user.
    """

    name: Name
    email: Email
    address: Address | None = None
    password: Password
    role: Role = ROLE_NORMAL_USER


class UserCreateFixedRole(BaseModel):
    """역할이 엔드포인트로 결정되는 사용자 생성 스키마 (/normal, /admin)."""

    name: Name
    email: Email
    address: Address | None = None
    password: Password


class StoreOwnerCreate(BaseModel):
    """매장 소유자 + 매장 동시 생성 요청 스키마.

    Creates a store_owner user and the store they own in one transaction.

    Attributes:
        store_name: 매장명 (Store name)
        store_email: 매장 이메일, 전역 고유 (Store email, unique)
        store_address: 매장 주소 (Store address, optional)
    """

    name: Name
    email: Email
    address: Address | None = None
    password: Password
    store_name: str = Field(min_length=1, validation_alias=AliasChoices("store_name", "storeName"))
    store_email: Email = Field(validation_alias=AliasChoices("store_email", "storeEmail"))
    store_address: Address | None = Field(
        default=None, validation_alias=AliasChoices("store_address", "storeAddress")
    )


class UserUpdate(BaseModel):
    """사용자 수정 요청 스키마 (부분 업데이트). role 변경은 관리자만 가능."""

    name: Name | None = None
    email: Email | None = None
    address: Address | None = None
    role: Role | None = None


class ProfileUpdate(BaseModel):
    """내 프로필 수정 요청 스키마. 이메일과 역할은 변경 불가."""

    name: Name | None = None
    address: Address | None = None
    password: Password | None = None


# === 응답 (Response) 스키마 ===

class UserSummary(BaseModel):
    """인증 응답에 포함되는 최소 사용자 정보."""

    id: str
    name: str
    email: str
    role: str


class UserResponse(BaseModel):
    """사용자 응답 스키마. 비밀번호 해시는 절대 포함하지 않음.

    User response schema. The password hash is never part of it.
    """

    id: str
    name: str
    email: str
    address: str | None
    role: str
    created_at: datetime


class UserEnvelope(BaseModel):
    """단일 사용자 응답 래퍼 — {"message"?, "user"}."""

    message: str | None = None
    user: UserResponse


class UserListResponse(BaseModel):
    """사용자 목록 응답 — {"users", "pagination"}."""

    users: list[UserResponse]
    pagination: Pagination


class UserStats(BaseModel):
    """사용자 통계 — 전체 수와 역할별 수."""

    total_users: int
    by_role: dict[str, int]


class UserStatsResponse(BaseModel):
    stats: UserStats


class UserAnalytics(BaseModel):
    """사용자 분석 지표.

    Attributes:
        total_users: 전체 사용자 수 (All users)
        active_users: 최근 30일 가입자 수 (Users created in the last 30 days)
        new_users_this_month: 이번 달 가입자 수 (Users created this calendar month, UTC)
        average_users_per_day: 최근 30일 일평균 가입자 수 (Mean daily sign-ups over 30 days)
        role_distribution: 역할별 사용자 수 (Users per role)
        recent_registrations: 최근 가입자 10명 (Ten most recent sign-ups)
    """

    total_users: int
    active_users: int
    new_users_this_month: int
    average_users_per_day: float
    role_distribution: dict[str, int]
    recent_registrations: list[UserResponse]


class UserAnalyticsResponse(BaseModel):
    analytics: UserAnalytics
