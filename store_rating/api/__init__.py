"""API 라우터 패키지 — 모든 엔드포인트 통합.

API Router package — Aggregates every endpoint into a single router that
the application mounts under /api.

Included routers:
    - auth: 회원가입, 로그인, 내 프로필 (Registration, login, profile)
    - users: 사용자 관리 (User management, admin)
    - stores: 매장 관리 및 조회 (Store management and browsing)
    - ratings: 평점 제출 및 조회 (Rating submission and listing)
    - dashboard: 역할별 대시보드 (Role-specific dashboards)
    - activities: 활동 로그 (Activity log, admin)
    - health: 헬스 체크 (Health check)
"""

from fastapi import APIRouter

from store_rating.api.activities import router as activities_router
from store_rating.api.auth import router as auth_router
from store_rating.api.dashboard import router as dashboard_router
from store_rating.api.health import router as health_router
from store_rating.api.ratings import router as ratings_router
from store_rating.api.stores import router as stores_router
from store_rating.api.users import router as users_router

api_router: APIRouter = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Auth"])
api_router.include_router(users_router, prefix="/users", tags=["Users"])
api_router.include_router(stores_router, prefix="/stores", tags=["Stores"])
api_router.include_router(ratings_router, prefix="/ratings", tags=["Ratings"])
api_router.include_router(dashboard_router, prefix="/dashboard", tags=["Dashboard"])
api_router.include_router(activities_router, prefix="/activities", tags=["Activities"])
api_router.include_router(health_router, prefix="/health", tags=["Health"])
