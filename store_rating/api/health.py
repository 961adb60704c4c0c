"""헬스 체크 라우터.

Health Router — Reports server and database status for load balancers,
monitoring and the self-ping loop.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from store_rating.api.deps import DbSession
from store_rating.services.health_service import health_service

router: APIRouter = APIRouter()


@router.get("")
async def health_check(db: DbSession) -> JSONResponse:
    """서버 및 데이터베이스 상태를 확인합니다. DB 연결 실패 시 500."""
    healthy, body = await health_service.check(db)
    return JSONResponse(status_code=200 if healthy else 500, content=body)
