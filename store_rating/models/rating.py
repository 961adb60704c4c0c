"""평점 SQLAlchemy ORM 모델 정의.

Rating SQLAlchemy ORM model definition.

Tables:
    - ratings: 사용자별 매장 평점 (One rating per user/store pair)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import CheckConstraint, Integer, DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from store_rating.database import Base

# 평점 범위 — Allowed rating bounds (enforced by the rating service)
MIN_RATING: int = 1
MAX_RATING: int = 5


class Rating(Base):
    """평점 모델.

    Rating model. The (user_id, store_id) unique constraint is the conflict
    target of the rating upsert.

    Constraints:
        uq_rating_user_store: 사용자-매장 쌍 고유 (One rating per user/store)
        ck_ratings_rating_range: 1~5 범위 (Rating within 1..5)
    """

    __tablename__ = "ratings"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    store_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, index=True)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("user_id", "store_id", name="uq_rating_user_store"),
        CheckConstraint(f"rating BETWEEN {MIN_RATING} AND {MAX_RATING}", name="ck_ratings_rating_range"),
    )

    # 관계 — Relationships
    user = relationship("User", back_populates="ratings")
    store = relationship("Store", back_populates="ratings")
