"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for Alembic migrations and
relationship resolution.

Modules:
    user: 사용자 및 역할 상수 (User and role constants)
    store: 매장 (Stores)
    rating: 평점 (Ratings, one per user/store pair)
    activity_log: 활동 로그 (Append-only activity log)
"""

from store_rating.models.user import User
from store_rating.models.store import Store
from store_rating.models.rating import Rating
from store_rating.models.activity_log import ActivityLog

__all__ = ["User", "Store", "Rating", "ActivityLog"]
