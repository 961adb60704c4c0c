"""활동 로그 SQLAlchemy ORM 모델 정의.

Activity log SQLAlchemy ORM model definition.
Rows are append-only: written as a side effect of other operations and
never updated or deleted through the API.
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, DateTime, Text, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from store_rating.database import Base


class ActivityLog(Base):
    """활동 로그 모델.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        user_id: 행위자 FK, 사용자 삭제 시 NULL (Acting user, SET NULL on delete)
        action: 동작 코드 (Action code, e.g. "login", "rating_submitted")
        description: 설명 (Human-readable description)
        ip_address: 요청 IP (Client IP address)
        user_agent: 요청 User-Agent (Client user agent)
        created_at: 생성 일시 UTC (Creation timestamp)
    """

    __tablename__ = "activity_logs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    action: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), index=True)
