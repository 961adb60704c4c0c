"""인증 라우터 — 회원가입, 로그인, 내 프로필 엔드포인트.

Auth Router — Registration, login and the caller's own profile.
"""

from fastapi import APIRouter, Request

from store_rating.api.deps import CurrentUser, DbSession
from store_rating.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from store_rating.schemas.user import ProfileUpdate, UserEnvelope
from store_rating.services.activity_service import (
    ACTION_LOGIN,
    ACTION_PROFILE_UPDATED,
    ACTION_REGISTER,
    activity_service,
)
from store_rating.services.auth_service import auth_service

router: APIRouter = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(data: RegisterRequest, request: Request, db: DbSession) -> AuthResponse:
    """일반 사용자로 회원가입하고 토큰을 발급합니다.

    Register a normal_user account and return an access token.
    """
    user, result = await auth_service.register(db, data)
    await db.commit()
    await activity_service.record(db, request, user.id, ACTION_REGISTER, f"User registered: {user.email}")
    return result


@router.post("/login", response_model=AuthResponse)
async def login(data: LoginRequest, request: Request, db: DbSession) -> AuthResponse:
    """이메일/비밀번호로 로그인합니다."""
    user, result = await auth_service.login(db, data)
    await activity_service.record(db, request, user.id, ACTION_LOGIN, f"User logged in: {user.email}")
    return result


@router.get("/profile", response_model=UserEnvelope)
async def get_profile(current_user: CurrentUser) -> UserEnvelope:
    return auth_service.get_profile(current_user)


@router.put("/profile", response_model=UserEnvelope)
async def update_profile(
    data: ProfileUpdate,
    request: Request,
    db: DbSession,
    current_user: CurrentUser,
) -> UserEnvelope:
    """내 프로필(이름, 주소, 비밀번호)을 수정합니다."""
    result: UserEnvelope = await auth_service.update_profile(db, current_user, data)
    await db.commit()
    await activity_service.record(db, request, current_user.id, ACTION_PROFILE_UPDATED, "Profile updated")
    return result
