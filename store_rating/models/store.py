"""매장 SQLAlchemy ORM 모델 정의.

Store SQLAlchemy ORM model definition.

Tables:
    - stores: 평가 대상 매장 (Stores that users rate)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from store_rating.database import Base


class Store(Base):
    """매장 모델.

    Store model. owner_id should point at a store_owner user; the service
    layer checks this on create, the schema does not.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        name: 매장명 (Store name)
        email: 매장 이메일, 전역 고유 (Store email, globally unique)
        address: 주소 (Address, optional)
        owner_id: 소유자 FK, 소유자 삭제 시 NULL (Owner FK, SET NULL on delete)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)
    """

    __tablename__ = "stores"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    address: Mapped[str | None] = mapped_column(String(400), nullable=True)
    owner_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # 관계 — Relationships
    owner = relationship("User", back_populates="stores")
    ratings = relationship("Rating", back_populates="store", passive_deletes=True)
