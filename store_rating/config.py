"""애플리케이션 환경 설정 모듈.

Application configuration module using pydantic-settings.
All settings can be overridden via environment variables or a .env file.
"""

from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL

# .env 파일 절대 경로 — CWD와 무관하게 항상 프로젝트 루트의 .env를 참조
# Absolute path to .env file — ensures correct loading regardless of CWD
_ENV_FILE: Path = Path(__file__).resolve().parent.parent / ".env"


class Settings(BaseSettings):
    """애플리케이션 전역 설정 — 환경 변수 기반 구성.

    Global application settings loaded from environment variables.
    Uses pydantic-settings for automatic env var parsing and .env file support.

    Attributes:
        DATABASE_URL: 전체 DB 연결 문자열, 비어 있으면 DB_* 값으로 조립
                      (Full connection URL; built from DB_* parts when empty)
        DB_SSL_CA: TLS CA 인증서 경로 (Optional CA bundle path for TLS connections)
        JWT_SECRET_KEY: JWT 서명 비밀키 (JWT signing secret key)
        JWT_ACCESS_TOKEN_EXPIRE_MINUTES: 토큰 만료 시간(분), 기본 7일 (Token TTL, default 7 days)
        SELF_PING_URL: 주기적 헬스 체크 대상 URL, 비어 있으면 비활성
                       (Health URL pinged periodically; disabled when empty)
    """

    # 데이터베이스 — PostgreSQL async 연결 설정 (asyncpg 드라이버 사용)
    DATABASE_URL: str = ""
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "postgres"
    DB_NAME: str = "store_rating_db"
    DB_SSL_CA: str = ""
    DB_POOL_SIZE: int = 10  # 동시 연결 상한 (Bounded concurrency)

    # JWT 인증 설정 — JSON Web Token authentication settings
    JWT_SECRET_KEY: str = "change-this-secret-key-in-production"  # 운영 환경에서 반드시 변경 (MUST change in production)
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # 비밀번호 해시 비용 — bcrypt cost factor
    BCRYPT_ROUNDS: int = 12

    # 서버 설정 — Listening port and CORS origins
    PORT: int = 5000
    CORS_ORIGINS: List[str] = ["*"]

    # 셀프 핑 — Keeps free-tier instances awake by calling the health endpoint
    SELF_PING_URL: str = ""
    SELF_PING_INTERVAL_SECONDS: int = 180
    SELF_PING_INITIAL_DELAY_SECONDS: int = 30

    # 앱 메타데이터 — Application metadata
    APP_NAME: str = "Store Rating API"
    DEBUG: bool = False  # True이면 SQLAlchemy SQL 로그 출력 (Enables SQL echo when True)
    LOG_LEVEL: str = "INFO"

    # Axiom 로깅 설정 — Axiom observability platform settings
    AXIOM_API_TOKEN: str = ""
    AXIOM_DATASET: str = ""

    model_config = {"env_file": _ENV_FILE, "env_file_encoding": "utf-8"}

    @property
    def database_url(self) -> str:
        """실제 사용할 DB URL을 반환합니다.

        Return DATABASE_URL when provided, otherwise assemble an asyncpg URL
        from the individual DB_* settings.
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return URL.create(
            "postgresql+asyncpg",
            username=self.DB_USER,
            password=self.DB_PASSWORD,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
        ).render_as_string(hide_password=False)


# 전역 설정 싱글턴 인스턴스 — Global settings singleton instance
settings: Settings = Settings()
