"""사용자 SQLAlchemy ORM 모델 정의.

User SQLAlchemy ORM model definition.
Access control is role based with three fixed roles.

Tables:
    - users: 사용자 계정 (User accounts)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from store_rating.database import Base

# 역할 상수 — Role identifiers stored in users.role
ROLE_ADMIN: str = "admin"
ROLE_STORE_OWNER: str = "store_owner"
ROLE_NORMAL_USER: str = "normal_user"
ROLES: tuple[str, ...] = (ROLE_ADMIN, ROLE_STORE_OWNER, ROLE_NORMAL_USER)


class User(Base):
    """사용자 모델 — 시스템 사용자 계정 정보.

    User model — System user account information.
    Email is globally unique and is the login identifier.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        name: 이름, 20~60자 (Display name, 20-60 chars)
        email: 이메일, 로그인 아이디 (Email, unique login identifier)
        address: 주소, 최대 400자 (Address, up to 400 chars)
        password_hash: bcrypt 해시된 비밀번호 (bcrypt-hashed password)
        role: 역할 (admin | store_owner | normal_user)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)

    Relationships:
        stores: 소유한 매장 목록 (Stores owned by this user)
        ratings: 작성한 평점 목록 (Ratings submitted by this user)
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(60), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    address: Mapped[str | None] = mapped_column(String(400), nullable=True)
    # 비밀번호 해시 — 평문 저장 금지 (never store plaintext, never serialized)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=ROLE_NORMAL_USER, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # 관계 — Relationships
    stores = relationship("Store", back_populates="owner", passive_deletes=True)
    ratings = relationship("Rating", back_populates="user", passive_deletes=True)
