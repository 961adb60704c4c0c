"""초기 데이터 시드 스크립트 — 테이블 및 기본 관리자 계정 생성.

Seed script — Creates the tables and the default admin account.

Usage:
    python -m store_rating.seed

Creates:
    - 1개 관리자 계정: admin@storerating.com (1 admin user)

Idempotent: 관리자 계정이 이미 있으면 건너뜁니다 (Skips when the admin exists).
"""

import asyncio
import logging
import os

from store_rating.database import Base, async_session, engine
from store_rating.models import User
from store_rating.models.user import ROLE_ADMIN
from store_rating.repositories.user_repository import user_repository
from store_rating.utils.password import hash_password

logger = logging.getLogger(__name__)

ADMIN_EMAIL: str = "admin@storerating.com"
ADMIN_NAME: str = "System Administrator Account"
# 운영 환경에서는 SEED_ADMIN_PASSWORD로 반드시 변경 (override in production)
DEFAULT_ADMIN_PASSWORD: str = "Admin@123"


async def seed() -> None:
    """데이터베이스를 초기 데이터로 시드합니다."""
    # 테이블 생성 — Create all tables from ORM metadata
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        await _create_admin()
    finally:
        await engine.dispose()


async def _create_admin() -> None:
    async with async_session() as db:
        if await user_repository.get_by_email(db, ADMIN_EMAIL) is not None:
            logger.info("Admin %s already exists. Skipping.", ADMIN_EMAIL)
            return

        admin: User = await user_repository.create(
            db,
            {
                "name": ADMIN_NAME,
                "email": ADMIN_EMAIL,
                "address": None,
                "password_hash": hash_password(os.environ.get("SEED_ADMIN_PASSWORD", DEFAULT_ADMIN_PASSWORD)),
                "role": ROLE_ADMIN,
            },
        )
        await db.commit()
        logger.info("Seeded admin user %s (%s)", admin.email, admin.id)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(seed())
