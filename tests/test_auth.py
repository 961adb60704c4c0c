"""인증 API 테스트 — 회원가입, 로그인, 프로필, 토큰 검증.

Auth API tests — Registration, login, profile and bearer token handling.
"""

from datetime import datetime, timedelta, timezone

import jwt
from httpx import AsyncClient

from store_rating.config import settings
from tests.conftest import PASSWORD, auth_header

AUTH = "/api/auth"

VALID_REGISTRATION = {
    "name": "Registered Person Full Name",
    "email": "new@test.com",
    "address": "22 Baker Street",
    "password": "Valid@Pass1",
}


class TestRegister:
    """회원가입 테스트."""

    async def test_register_success(self, client: AsyncClient):
        res = await client.post(f"{AUTH}/register", json=VALID_REGISTRATION)
        assert res.status_code == 201
        data = res.json()
        assert data["message"] == "User registered successfully"
        assert data["user"]["email"] == "new@test.com"
        assert data["user"]["role"] == "normal_user"
        assert data["token"]
        assert "password" not in data["user"]
        assert "password_hash" not in data["user"]

    async def test_register_then_login(self, client: AsyncClient):
        """가입한 계정으로 로그인 성공."""
        await client.post(f"{AUTH}/register", json=VALID_REGISTRATION)
        res = await client.post(f"{AUTH}/login", json={
            "email": VALID_REGISTRATION["email"],
            "password": VALID_REGISTRATION["password"],
        })
        assert res.status_code == 200
        assert res.json()["user"]["name"] == VALID_REGISTRATION["name"]

    async def test_register_ignores_requested_role(self, client: AsyncClient):
        """회원가입 시 role 필드는 무시되고 normal_user로 생성."""
        res = await client.post(f"{AUTH}/register", json={**VALID_REGISTRATION, "role": "admin"})
        assert res.status_code == 201
        assert res.json()["user"]["role"] == "normal_user"

    async def test_register_duplicate_email(self, client: AsyncClient, normal_user):
        res = await client.post(f"{AUTH}/register", json={**VALID_REGISTRATION, "email": normal_user.email})
        assert res.status_code == 400
        assert res.json()["detail"] == "User with this email already exists"

    async def test_register_short_name(self, client: AsyncClient):
        res = await client.post(f"{AUTH}/register", json={**VALID_REGISTRATION, "name": "Too Short"})
        assert res.status_code == 400
        assert res.json()["detail"] == "Name must be between 20 and 60 characters"

    async def test_register_long_name(self, client: AsyncClient):
        res = await client.post(f"{AUTH}/register", json={**VALID_REGISTRATION, "name": "x" * 61})
        assert res.status_code == 400

    async def test_register_long_address(self, client: AsyncClient):
        res = await client.post(f"{AUTH}/register", json={**VALID_REGISTRATION, "address": "a" * 401})
        assert res.status_code == 400
        assert res.json()["detail"] == "Address must not exceed 400 characters"

    async def test_register_invalid_email(self, client: AsyncClient):
        res = await client.post(f"{AUTH}/register", json={**VALID_REGISTRATION, "email": "not-an-email"})
        assert res.status_code == 400
        assert res.json()["detail"] == "Please provide a valid email address"

    async def test_register_weak_passwords(self, client: AsyncClient):
        """대문자, 특수문자, 길이 규칙 위반 시 400."""
        for password in ("valid@pass1", "ValidPass1", "V@1", "Valid@Password12345"):
            res = await client.post(f"{AUTH}/register", json={**VALID_REGISTRATION, "password": password})
            assert res.status_code == 400, password

    async def test_register_missing_field(self, client: AsyncClient):
        payload = {k: v for k, v in VALID_REGISTRATION.items() if k != "password"}
        res = await client.post(f"{AUTH}/register", json=payload)
        assert res.status_code == 400
        assert "detail" in res.json()


class TestLogin:
    """로그인 테스트."""

    async def test_login_success(self, client: AsyncClient, normal_user):
        res = await client.post(f"{AUTH}/login", json={"email": normal_user.email, "password": PASSWORD})
        assert res.status_code == 200
        data = res.json()
        assert data["message"] == "Login successful"
        payload = jwt.decode(data["token"], settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        assert payload["sub"] == str(normal_user.id)
        assert payload["role"] == "normal_user"
        assert payload["type"] == "access"

    async def test_login_wrong_password(self, client: AsyncClient, normal_user):
        res = await client.post(f"{AUTH}/login", json={"email": normal_user.email, "password": "Wrong@123"})
        assert res.status_code == 401
        assert res.json()["detail"] == "Invalid email or password"

    async def test_login_unknown_email(self, client: AsyncClient):
        res = await client.post(f"{AUTH}/login", json={"email": "ghost@test.com", "password": PASSWORD})
        assert res.status_code == 401
        assert res.json()["detail"] == "Invalid email or password"


class TestToken:
    """토큰 검증 테스트."""

    async def test_missing_token(self, client: AsyncClient):
        res = await client.get(f"{AUTH}/profile")
        assert res.status_code == 401

    async def test_invalid_token(self, client: AsyncClient):
        res = await client.get(f"{AUTH}/profile", headers=auth_header("not-a-jwt"))
        assert res.status_code == 401

    async def test_expired_token(self, client: AsyncClient, normal_user):
        token = jwt.encode(
            {
                "sub": str(normal_user.id),
                "type": "access",
                "exp": datetime.now(timezone.utc) - timedelta(minutes=1),
            },
            settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
        )
        res = await client.get(f"{AUTH}/profile", headers=auth_header(token))
        assert res.status_code == 401
        assert res.json()["detail"] == "Token has expired"

    async def test_wrong_token_type(self, client: AsyncClient, normal_user):
        token = jwt.encode(
            {
                "sub": str(normal_user.id),
                "type": "refresh",
                "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
            },
            settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
        )
        res = await client.get(f"{AUTH}/profile", headers=auth_header(token))
        assert res.status_code == 401

    async def test_token_for_deleted_user(self, client: AsyncClient, normal_user, user_token, admin_token):
        await client.delete(f"/api/users/{normal_user.id}", headers=auth_header(admin_token))
        res = await client.get(f"{AUTH}/profile", headers=auth_header(user_token))
        assert res.status_code == 401


class TestProfile:
    """내 프로필 조회/수정 테스트."""

    async def test_get_profile(self, client: AsyncClient, normal_user, user_token):
        res = await client.get(f"{AUTH}/profile", headers=auth_header(user_token))
        assert res.status_code == 200
        user = res.json()["user"]
        assert user["id"] == str(normal_user.id)
        assert user["address"] == normal_user.address
        assert "password_hash" not in user

    async def test_update_profile(self, client: AsyncClient, normal_user, user_token):
        res = await client.put(f"{AUTH}/profile", json={
            "name": "Renamed Normal User Person",
            "address": "99 New Avenue",
        }, headers=auth_header(user_token))
        assert res.status_code == 200
        data = res.json()
        assert data["message"] == "Profile updated successfully"
        assert data["user"]["name"] == "Renamed Normal User Person"
        assert data["user"]["address"] == "99 New Avenue"

    async def test_update_password_then_login(self, client: AsyncClient, normal_user, user_token):
        res = await client.put(f"{AUTH}/profile", json={"password": "Changed#99"}, headers=auth_header(user_token))
        assert res.status_code == 200

        old = await client.post(f"{AUTH}/login", json={"email": normal_user.email, "password": PASSWORD})
        assert old.status_code == 401
        new = await client.post(f"{AUTH}/login", json={"email": normal_user.email, "password": "Changed#99"})
        assert new.status_code == 200

    async def test_update_profile_empty(self, client: AsyncClient, user_token):
        res = await client.put(f"{AUTH}/profile", json={}, headers=auth_header(user_token))
        assert res.status_code == 400
        assert res.json()["detail"] == "No fields to update"

    async def test_update_profile_invalid_name(self, client: AsyncClient, user_token):
        res = await client.put(f"{AUTH}/profile", json={"name": "short"}, headers=auth_header(user_token))
        assert res.status_code == 400
