"""인증 서비스 — 회원가입, 로그인, 프로필 비즈니스 로직.

Auth Service — Business logic for registration, login and the caller's
own profile. Issues one access token per successful register/login.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from store_rating.models.user import ROLE_NORMAL_USER, User
from store_rating.repositories.user_repository import user_repository
from store_rating.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from store_rating.schemas.user import ProfileUpdate, UserEnvelope, UserSummary
from store_rating.services.user_service import to_user_response
from store_rating.utils.exceptions import BadRequestError, DuplicateError, UnauthorizedError
from store_rating.utils.jwt import create_access_token
from store_rating.utils.password import hash_password, verify_password


class AuthService:
    """인증 관련 비즈니스 로직을 처리하는 서비스.

    Service handling authentication business logic.
    """

    def _build_jwt_payload(self, user: User) -> dict[str, str]:
        """JWT 토큰 페이로드를 생성합니다.

        Build the JWT payload: subject, email and role at issue time.
        """
        return {
            "sub": str(user.id),
            "email": user.email,
            "role": user.role,
        }

    def _to_summary(self, user: User) -> UserSummary:
        return UserSummary(id=str(user.id), name=user.name, email=user.email, role=user.role)

    async def register(self, db: AsyncSession, data: RegisterRequest) -> tuple[User, AuthResponse]:
        """일반 사용자로 회원가입하고 토큰을 발급합니다.

        Register a normal_user account and issue an access token.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 회원가입 요청 (Validated registration data)

        Returns:
            tuple[User, AuthResponse]: 생성된 사용자와 응답 (Created user and response body)

        Raises:
            DuplicateError: 이미 사용 중인 이메일 (Email already registered)
        """
        if await user_repository.get_by_email(db, data.email) is not None:
            raise DuplicateError("User with this email already exists")

        user: User = await user_repository.create(
            db,
            {
                "name": data.name,
                "email": data.email,
                "address": data.address,
                "password_hash": hash_password(data.password),
                "role": ROLE_NORMAL_USER,
            },
        )
        token: str = create_access_token(self._build_jwt_payload(user))
        return user, AuthResponse(
            message="User registered successfully",
            user=self._to_summary(user),
            token=token,
        )

    async def login(self, db: AsyncSession, data: LoginRequest) -> tuple[User, AuthResponse]:
        """이메일/비밀번호로 로그인합니다.

        Verify credentials and issue an access token. Unknown email and wrong
        password produce the same 401 message.

        Raises:
            UnauthorizedError: 자격 증명 불일치 (Invalid credentials)
        """
        user: User | None = await user_repository.get_by_email(db, data.email)
        if user is None or not verify_password(data.password, user.password_hash):
            raise UnauthorizedError("Invalid email or password")

        token: str = create_access_token(self._build_jwt_payload(user))
        return user, AuthResponse(
            message="Login successful",
            user=self._to_summary(user),
            token=token,
        )

    def get_profile(self, user: User) -> UserEnvelope:
        return UserEnvelope(user=to_user_response(user))

    async def update_profile(
        self,
        db: AsyncSession,
        user: User,
        data: ProfileUpdate,
    ) -> UserEnvelope:
        """내 프로필(이름, 주소, 비밀번호)을 수정합니다.

        Raises:
            BadRequestError: 변경할 필드가 없을 때 ("No fields to update")
        """
        update_data: dict = data.model_dump(exclude_unset=True, exclude_none=True)
        if not update_data:
            raise BadRequestError("No fields to update")

        password: str | None = update_data.pop("password", None)
        if password is not None:
            update_data["password_hash"] = hash_password(password)

        updated: User | None = await user_repository.update(db, user.id, update_data)
        return UserEnvelope(
            message="Profile updated successfully",
            user=to_user_response(updated or user),
        )


# 싱글턴 인스턴스 — Singleton instance
auth_service: AuthService = AuthService()
