"""데이터베이스 엔진 및 세션 설정 모듈.

Database engine and session configuration module.
Sets up the process-wide async SQLAlchemy engine (connection pool), the
session factory, and the ORM base class.
"""

import ssl
from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from store_rating.config import settings


def _connect_args() -> dict[str, Any]:
    """드라이버 연결 인자를 구성합니다.

    Build driver connect arguments. A CA bundle path turns on TLS with
    certificate verification against that bundle.
    """
    # Supavisor 등 트랜잭션 모드 풀러 대비 prepared statement 캐시 비활성화
    args: dict[str, Any] = {"statement_cache_size": 0}
    if settings.DB_SSL_CA:
        args["ssl"] = ssl.create_default_context(cafile=settings.DB_SSL_CA)
    return args


# 비동기 데이터베이스 엔진 — 프로세스 전역 커넥션 풀 (Process-wide connection pool)
# pool_pre_ping=True: 커넥션 풀에서 꺼낸 연결의 유효성을 사전 확인 (Validates connections before use)
engine: AsyncEngine = create_async_engine(
    settings.database_url,
    echo=settings.DEBUG,
    pool_pre_ping=True,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=0,
    connect_args=_connect_args(),
)

# 비동기 세션 팩토리 — Async session factory
# expire_on_commit=False: 커밋 후에도 객체 속성 접근 가능 (Allows attribute access after commit without refresh)
async_session: async_sessionmaker[AsyncSession] = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """SQLAlchemy 선언적 베이스 클래스.

    Declarative base class for all ORM models.
    """

    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """비동기 데이터베이스 세션을 생성하고 요청 종료 시 닫습니다.

    FastAPI dependency that yields an async database session.
    Routers commit explicitly; anything not committed when the request ends
    is rolled back when the session closes, so one request is one unit of work.

    Yields:
        AsyncSession: SQLAlchemy 비동기 세션 인스턴스 (Async session instance)
    """
    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()
