"""사용자 관리 API 테스트.

User management API tests — listing, statistics, creation paths, update
and deletion rules.
"""

import uuid

from httpx import AsyncClient
from sqlalchemy import event, select

from store_rating.models import Store, User
from tests.conftest import PASSWORD, auth_header, make_store, make_user

URL = "/api/users"

NEW_USER = {
    "name": "Created By Admin Person",
    "email": "created@test.com",
    "address": "5 Admin Way",
    "password": "Create@123",
}


class TestUserList:
    """사용자 목록 조회 테스트."""

    async def test_list_users(self, client: AsyncClient, admin_token, normal_user, owner_user):
        res = await client.get(URL, headers=auth_header(admin_token))
        assert res.status_code == 200
        data = res.json()
        assert len(data["users"]) == 3
        assert data["pagination"] == {"limit": 10, "offset": 0}
        assert all("password_hash" not in user for user in data["users"])

    async def test_filter_by_role_with_limit(self, client: AsyncClient, db, admin_token):
        """role=store_owner&limit=2 → 최대 2명, 모두 store_owner."""
        for index in range(3):
            await make_user(db, f"so{index}@test.com", "store_owner", name=f"Store Owner Number {index:04d}")
        await make_user(db, "plain@test.com", "normal_user")

        res = await client.get(
            URL, params={"role": "store_owner", "limit": 2, "offset": 0}, headers=auth_header(admin_token)
        )
        assert res.status_code == 200
        users = res.json()["users"]
        assert 0 < len(users) <= 2
        assert all(user["role"] == "store_owner" for user in users)

    async def test_filter_by_name_substring(self, client: AsyncClient, admin_token, normal_user, owner_user):
        res = await client.get(URL, params={"name": "Owner Person"}, headers=auth_header(admin_token))
        assert [user["email"] for user in res.json()["users"]] == [owner_user.email]

    async def test_text_filters_ignore_case(
        self, client: AsyncClient, engine, admin_token, normal_user, owner_user
    ):
        """이름/이메일 필터는 대소문자 무시 (ILIKE)."""
        statements: list[str] = []

        @event.listens_for(engine.sync_engine, "before_cursor_execute")
        def _capture(_conn, _cursor, statement, *_args) -> None:
            statements.append(statement)

        res = await client.get(
            URL, params={"name": "owner PERSON", "email": "OWNER@"}, headers=auth_header(admin_token)
        )
        assert [user["email"] for user in res.json()["users"]] == [owner_user.email]
        assert any("lower(users.name) LIKE lower(" in sql for sql in statements)
        assert any("lower(users.email) LIKE lower(" in sql for sql in statements)

    async def test_sort_by_email_ascending(self, client: AsyncClient, admin_token, normal_user, owner_user):
        res = await client.get(
            URL, params={"sortBy": "email", "sortOrder": "asc"}, headers=auth_header(admin_token)
        )
        emails = [user["email"] for user in res.json()["users"]]
        assert emails == sorted(emails)

    async def test_unknown_sort_column_falls_back(self, client: AsyncClient, admin_token, normal_user):
        """허용되지 않은 sortBy는 기본 정렬로 대체 (오류 아님)."""
        res = await client.get(
            URL, params={"sortBy": "password_hash; DROP TABLE users"}, headers=auth_header(admin_token)
        )
        assert res.status_code == 200
        assert len(res.json()["users"]) == 2

    async def test_list_requires_admin(self, client: AsyncClient, user_token):
        res = await client.get(URL, headers=auth_header(user_token))
        assert res.status_code == 403


class TestUserStats:
    """사용자 통계/분석 테스트."""

    async def test_stats(self, client: AsyncClient, admin_token, normal_user, owner_user):
        res = await client.get(f"{URL}/stats", headers=auth_header(admin_token))
        assert res.status_code == 200
        stats = res.json()["stats"]
        assert stats["total_users"] == 3
        assert stats["by_role"] == {"admin": 1, "store_owner": 1, "normal_user": 1}

    async def test_analytics(self, client: AsyncClient, admin_token, normal_user):
        res = await client.get(f"{URL}/analytics", headers=auth_header(admin_token))
        assert res.status_code == 200
        analytics = res.json()["analytics"]
        assert analytics["total_users"] == 2
        assert analytics["active_users"] == 2
        assert analytics["role_distribution"]["normal_user"] == 1
        assert len(analytics["recent_registrations"]) == 2

    async def test_stats_requires_admin(self, client: AsyncClient, owner_token):
        res = await client.get(f"{URL}/stats", headers=auth_header(owner_token))
        assert res.status_code == 403


class TestUserRead:
    """사용자 단건 조회 테스트."""

    async def test_get_self(self, client: AsyncClient, normal_user, user_token):
        res = await client.get(f"{URL}/{normal_user.id}", headers=auth_header(user_token))
        assert res.status_code == 200
        assert res.json()["user"]["email"] == normal_user.email

    async def test_admin_gets_any(self, client: AsyncClient, normal_user, admin_token):
        res = await client.get(f"{URL}/{normal_user.id}", headers=auth_header(admin_token))
        assert res.status_code == 200

    async def test_other_user_forbidden(self, client: AsyncClient, owner_user, user_token):
        res = await client.get(f"{URL}/{owner_user.id}", headers=auth_header(user_token))
        assert res.status_code == 403

    async def test_missing_user(self, client: AsyncClient, admin_token):
        res = await client.get(f"{URL}/{uuid.uuid4()}", headers=auth_header(admin_token))
        assert res.status_code == 404
        assert res.json()["detail"] == "User not found"

    async def test_malformed_id(self, client: AsyncClient, admin_token):
        res = await client.get(f"{URL}/not-a-uuid", headers=auth_header(admin_token))
        assert res.status_code == 400


class TestUserCreate:
    """관리자 사용자 생성 테스트."""

    async def test_create_default_role(self, client: AsyncClient, admin_token):
        res = await client.post(URL, json=NEW_USER, headers=auth_header(admin_token))
        assert res.status_code == 201
        data = res.json()
        assert data["message"] == "User created successfully"
        assert data["user"]["role"] == "normal_user"

    async def test_create_with_role(self, client: AsyncClient, admin_token):
        res = await client.post(URL, json={**NEW_USER, "role": "store_owner"}, headers=auth_header(admin_token))
        assert res.status_code == 201
        assert res.json()["user"]["role"] == "store_owner"

    async def test_create_invalid_role(self, client: AsyncClient, admin_token):
        res = await client.post(URL, json={**NEW_USER, "role": "superuser"}, headers=auth_header(admin_token))
        assert res.status_code == 400
        assert res.json()["detail"].startswith("Invalid role")

    async def test_create_duplicate_email(self, client: AsyncClient, admin_token, normal_user):
        res = await client.post(URL, json={**NEW_USER, "email": normal_user.email}, headers=auth_header(admin_token))
        assert res.status_code == 400

    async def test_create_requires_admin(self, client: AsyncClient, user_token):
        res = await client.post(URL, json=NEW_USER, headers=auth_header(user_token))
        assert res.status_code == 403

    async def test_create_normal(self, client: AsyncClient, admin_token):
        res = await client.post(f"{URL}/normal", json=NEW_USER, headers=auth_header(admin_token))
        assert res.status_code == 201
        data = res.json()
        assert data["message"] == "Normal user created successfully"
        assert data["user"]["role"] == "normal_user"

    async def test_create_admin(self, client: AsyncClient, admin_token):
        res = await client.post(f"{URL}/admin", json=NEW_USER, headers=auth_header(admin_token))
        assert res.status_code == 201
        assert res.json()["user"]["role"] == "admin"

    async def test_created_user_can_login(self, client: AsyncClient, admin_token):
        await client.post(f"{URL}/normal", json=NEW_USER, headers=auth_header(admin_token))
        res = await client.post("/api/auth/login", json={
            "email": NEW_USER["email"], "password": NEW_USER["password"],
        })
        assert res.status_code == 200


class TestStoreOwnerCreate:
    """매장 소유자 + 매장 동시 생성 테스트."""

    async def test_create_store_owner_with_store(self, client: AsyncClient, admin_token):
        res = await client.post(f"{URL}/store-owner", json={
            **NEW_USER,
            "store_name": "Owner's Bakery",
            "store_email": "bakery@test.com",
            "store_address": "7 Bread Lane",
        }, headers=auth_header(admin_token))
        assert res.status_code == 201
        data = res.json()
        assert data["user"]["role"] == "store_owner"
        assert data["store"]["name"] == "Owner's Bakery"
        assert data["store"]["owner_id"] == data["user"]["id"]
        assert data["store"]["owner_email"] == NEW_USER["email"]

    async def test_accepts_camel_case_store_fields(self, client: AsyncClient, admin_token):
        res = await client.post(f"{URL}/store-owner", json={
            **NEW_USER,
            "storeName": "Camel Store",
            "storeEmail": "camel@test.com",
        }, headers=auth_header(admin_token))
        assert res.status_code == 201
        assert res.json()["store"]["email"] == "camel@test.com"

    async def test_duplicate_store_email_creates_nothing(
        self, client: AsyncClient, db, admin_token, store
    ):
        """매장 이메일 중복 시 사용자도 생성되지 않음."""
        res = await client.post(f"{URL}/store-owner", json={
            **NEW_USER,
            "store_name": "Clash",
            "store_email": store.email,
        }, headers=auth_header(admin_token))
        assert res.status_code == 400
        assert res.json()["detail"] == "Store with this email already exists"

        result = await db.execute(select(User).where(User.email == NEW_USER["email"]))
        assert result.scalar_one_or_none() is None

    async def test_duplicate_user_email(self, client: AsyncClient, admin_token, normal_user):
        res = await client.post(f"{URL}/store-owner", json={
            **NEW_USER,
            "email": normal_user.email,
            "store_name": "Fresh",
            "store_email": "fresh@test.com",
        }, headers=auth_header(admin_token))
        assert res.status_code == 400

        result = await client.get("/api/stores", headers=auth_header(admin_token))
        assert result.json()["stores"] == []


class TestUserUpdate:
    """사용자 수정 테스트."""

    async def test_self_update(self, client: AsyncClient, normal_user, user_token):
        res = await client.put(f"{URL}/{normal_user.id}", json={
            "address": "Updated Address 12",
        }, headers=auth_header(user_token))
        assert res.status_code == 200
        assert res.json()["user"]["address"] == "Updated Address 12"

    async def test_update_other_forbidden(self, client: AsyncClient, owner_user, user_token):
        res = await client.put(f"{URL}/{owner_user.id}", json={"address": "x"}, headers=auth_header(user_token))
        assert res.status_code == 403

    async def test_non_admin_role_change_forbidden(self, client: AsyncClient, normal_user, user_token):
        res = await client.put(f"{URL}/{normal_user.id}", json={"role": "admin"}, headers=auth_header(user_token))
        assert res.status_code == 403

    async def test_admin_changes_role(self, client: AsyncClient, normal_user, admin_token):
        res = await client.put(
            f"{URL}/{normal_user.id}", json={"role": "store_owner"}, headers=auth_header(admin_token)
        )
        assert res.status_code == 200
        assert res.json()["user"]["role"] == "store_owner"

    async def test_duplicate_email(self, client: AsyncClient, normal_user, owner_user, admin_token):
        res = await client.put(
            f"{URL}/{normal_user.id}", json={"email": owner_user.email}, headers=auth_header(admin_token)
        )
        assert res.status_code == 400

    async def test_empty_update(self, client: AsyncClient, normal_user, admin_token):
        res = await client.put(f"{URL}/{normal_user.id}", json={}, headers=auth_header(admin_token))
        assert res.status_code == 400
        assert res.json()["detail"] == "No fields to update"

    async def test_update_missing_user(self, client: AsyncClient, admin_token):
        res = await client.put(f"{URL}/{uuid.uuid4()}", json={"address": "x"}, headers=auth_header(admin_token))
        assert res.status_code == 404


class TestUserDelete:
    """사용자 삭제 테스트."""

    async def test_admin_deletes_user(self, client: AsyncClient, normal_user, admin_token):
        res = await client.delete(f"{URL}/{normal_user.id}", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.json()["message"] == "User deleted successfully"

        res = await client.get(f"{URL}/{normal_user.id}", headers=auth_header(admin_token))
        assert res.status_code == 404

    async def test_cannot_delete_admin(self, client: AsyncClient, db, admin_user, admin_token):
        """관리자 역할 사용자는 누가 요청해도 삭제 불가."""
        other_admin = await make_user(db, "admin2@test.com", "admin", name="Second Administrator User")
        res = await client.delete(f"{URL}/{other_admin.id}", headers=auth_header(admin_token))
        assert res.status_code == 403

        res = await client.delete(f"{URL}/{admin_user.id}", headers=auth_header(admin_token))
        assert res.status_code == 403

    async def test_non_admin_cannot_delete_admin(self, client: AsyncClient, admin_user, user_token):
        res = await client.delete(f"{URL}/{admin_user.id}", headers=auth_header(user_token))
        assert res.status_code == 403

    async def test_user_deletes_self(self, client: AsyncClient, normal_user, user_token):
        res = await client.delete(f"{URL}/{normal_user.id}", headers=auth_header(user_token))
        assert res.status_code == 200

    async def test_user_cannot_delete_other(self, client: AsyncClient, owner_user, user_token):
        res = await client.delete(f"{URL}/{owner_user.id}", headers=auth_header(user_token))
        assert res.status_code == 403

    async def test_delete_missing_user(self, client: AsyncClient, admin_token):
        res = await client.delete(f"{URL}/{uuid.uuid4()}", headers=auth_header(admin_token))
        assert res.status_code == 404

    async def test_deleting_owner_keeps_store(self, client: AsyncClient, session_factory, owner_user, store, admin_token):
        """소유자 삭제 시 매장은 남고 owner_id는 NULL."""
        res = await client.delete(f"{URL}/{owner_user.id}", headers=auth_header(admin_token))
        assert res.status_code == 200

        async with session_factory() as fresh:
            remaining = (await fresh.execute(select(Store).where(Store.id == store.id))).scalar_one()
            assert remaining.owner_id is None

    async def test_deleted_user_cannot_login(self, client: AsyncClient, normal_user, admin_token):
        await client.delete(f"{URL}/{normal_user.id}", headers=auth_header(admin_token))
        res = await client.post("/api/auth/login", json={"email": normal_user.email, "password": PASSWORD})
        assert res.status_code == 401
