"""테스트 인프라 — 인메모리 SQLite DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — In-memory SQLite database, session and httpx client
fixtures. Every test gets a fresh schema; each request gets its own session
from the same factory, as it would in production.
"""

import os

# 앱 임포트 전에 설정 — bcrypt 비용을 낮춰 테스트 속도 확보
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from store_rating.database import Base, get_db
from store_rating.main import app
from store_rating.models import Rating, Store, User
from store_rating.models.user import ROLE_ADMIN, ROLE_NORMAL_USER, ROLE_STORE_OWNER
from store_rating.utils.jwt import create_access_token
from store_rating.utils.password import hash_password

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# 공통 테스트 비밀번호 — Satisfies the password rules (length, uppercase, special)
PASSWORD = "Secret@123"


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진. 테스트마다 스키마를 새로 생성합니다."""
    eng = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # SQLite는 외래 키 제약(CASCADE / SET NULL)이 기본 비활성
    @event.listens_for(eng.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """픽스처 데이터 생성 및 검증용 세션."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — 요청마다 새 세션을 주입합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
async def make_user(
    db: AsyncSession,
    email: str,
    role: str,
    name: str = "Test User With Long Name",
    address: str | None = "1 Test Street",
) -> User:
    """사용자를 생성하고 커밋합니다."""
    user = User(
        name=name,
        email=email,
        address=address,
        password_hash=hash_password(PASSWORD),
        role=role,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def make_store(
    db: AsyncSession,
    name: str,
    email: str,
    owner: User | None = None,
    address: str | None = "10 Market Road",
) -> Store:
    """매장을 생성하고 커밋합니다."""
    store = Store(name=name, email=email, address=address, owner_id=owner.id if owner else None)
    db.add(store)
    await db.commit()
    await db.refresh(store)
    return store


async def make_rating(db: AsyncSession, user: User, store: Store, value: int) -> Rating:
    rating = Rating(user_id=user.id, store_id=store.id, rating=value)
    db.add(rating)
    await db.commit()
    await db.refresh(rating)
    return rating


@pytest_asyncio.fixture
async def admin_user(db: AsyncSession) -> User:
    return await make_user(db, "admin@test.com", ROLE_ADMIN, name="System Administrator Account")


@pytest_asyncio.fixture
async def owner_user(db: AsyncSession) -> User:
    return await make_user(db, "owner@test.com", ROLE_STORE_OWNER, name="Store Owner Person Name")


@pytest_asyncio.fixture
async def other_owner(db: AsyncSession) -> User:
    return await make_user(db, "owner2@test.com", ROLE_STORE_OWNER, name="Another Store Owner Name")


@pytest_asyncio.fixture
async def normal_user(db: AsyncSession) -> User:
    return await make_user(db, "user@test.com", ROLE_NORMAL_USER, name="Normal Test User Full Name")


@pytest_asyncio.fixture
async def store(db: AsyncSession, owner_user: User) -> Store:
    """owner_user가 소유한 테스트 매장."""
    return await make_store(db, "Test Store", "store@test.com", owner=owner_user)


def make_token(user: User) -> str:
    """테스트용 JWT 액세스 토큰을 생성합니다."""
    return create_access_token({"sub": str(user.id), "email": user.email, "role": user.role})


@pytest.fixture
def admin_token(admin_user) -> str:
    return make_token(admin_user)


@pytest.fixture
def owner_token(owner_user) -> str:
    return make_token(owner_user)


@pytest.fixture
def other_owner_token(other_owner) -> str:
    return make_token(other_owner)


@pytest.fixture
def user_token(normal_user) -> str:
    return make_token(normal_user)


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
