"""인증 관련 Pydantic 요청/응답 스키마 정의.

Authentication-related Pydantic request/response schema definitions.
Covers registration, login and the issued bearer token.
"""

from pydantic import BaseModel

from store_rating.schemas.user import Address, Email, Name, Password, UserSummary


class RegisterRequest(BaseModel):
    """회원가입 요청 스키마.

    Self-registration request schema. New accounts are always normal_user.

    Attributes:
        name: 이름, 20~60자 (Display name, 20-60 chars)
        email: 이메일 (Email, unique login identifier)
        address: 주소, 최대 400자 (Address, optional, up to 400 chars)
        password: 비밀번호, 8~16자 + 대문자 + 특수문자
                  (8-16 chars with an uppercase letter and a special character)
    """

    name: Name
    email: Email
    address: Address | None = None
    password: Password


class LoginRequest(BaseModel):
    """로그인 요청 스키마.

    Login request schema. Fields are only checked for presence; wrong
    credentials are reported uniformly as 401.
    """

    email: str
    password: str


class AuthResponse(BaseModel):
    """회원가입/로그인 응답 스키마.

    Attributes:
        message: 결과 메시지 (Result message)
        user: 최소 사용자 정보 (Minimal user record)
        token: JWT 액세스 토큰 (Bearer token for the Authorization header)
    """

    message: str
    user: UserSummary
    token: str
