"""기본 CRUD 레포지토리 — 모든 레포지토리의 부모 클래스.

Base CRUD Repository — Shared by the user, store, rating and activity log
repositories. Methods only flush; the router that owns the request commits.

Usage:
    class StoreRepository(BaseRepository[Store]):
        def __init__(self) -> None:
            super().__init__(Store)
"""

from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from store_rating.database import Base

# SQLAlchemy 모델 타입 변수 — Model handled by a concrete repository
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """제네릭 CRUD 레포지토리.

    Attributes:
        model: 관리 대상 SQLAlchemy 모델 클래스 (Managed model class)
    """

    def __init__(self, model: type[ModelType]) -> None:
        self.model: type[ModelType] = model

    async def get_by_id(self, db: AsyncSession, record_id: UUID) -> ModelType | None:
        """UUID로 단일 레코드를 조회합니다. 없으면 None."""
        result = await db.execute(select(self.model).where(self.model.id == record_id))
        return result.scalar_one_or_none()

    async def create(self, db: AsyncSession, obj_data: dict[str, Any]) -> ModelType:
        """레코드를 추가하고 flush 후 DB 기본값이 채워진 객체를 반환합니다.

        Add a record, flush it and refresh it so generated values
        (id, created_at) are populated.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            obj_data: 컬럼명 → 값 딕셔너리 (Column values for the new row)

        Returns:
            ModelType: 생성된 레코드 (The created record)
        """
        db_obj: ModelType = self.model(**obj_data)
        db.add(db_obj)
        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    async def update(
        self,
        db: AsyncSession,
        record_id: UUID,
        update_data: dict[str, Any],
    ) -> ModelType | None:
        """전달된 필드만 변경합니다 (부분 업데이트).

        Apply a partial update. Keys that are not model attributes are
        ignored; None values are written as NULL.

        Returns:
            ModelType | None: 변경된 레코드, 없으면 None (Updated record or None)
        """
        db_obj: ModelType | None = await self.get_by_id(db, record_id)
        if db_obj is None:
            return None

        for field, value in update_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    async def delete(self, db: AsyncSession, record_id: UUID) -> bool:
        """레코드를 삭제합니다. 연관 행은 FK의 ON DELETE 규칙을 따름.

        Returns:
            bool: 삭제했으면 True, 레코드가 없었으면 False
        """
        db_obj: ModelType | None = await self.get_by_id(db, record_id)
        if db_obj is None:
            return False

        await db.delete(db_obj)
        await db.flush()
        return True

    async def exists(self, db: AsyncSession, filters: dict[str, Any]) -> bool:
        """컬럼 일치 조건을 만족하는 레코드가 있는지 확인합니다.

        Args:
            filters: 컬럼명 → 값, 모델에 없는 컬럼은 무시
                     (Column equality filters; unknown columns are skipped)
        """
        conditions = [
            getattr(self.model, column) == value
            for column, value in filters.items()
            if hasattr(self.model, column)
        ]
        result = await db.execute(select(exists().where(*conditions)))
        return bool(result.scalar())

    async def count_total(self, db: AsyncSession) -> int:
        """전체 레코드 수를 반환합니다."""
        result = await db.execute(select(func.count()).select_from(self.model))
        return result.scalar() or 0
