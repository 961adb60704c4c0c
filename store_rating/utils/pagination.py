"""정렬/페이지네이션 유틸리티 모듈.

Sorting and pagination helpers for SQLAlchemy list queries.

Sort columns are resolved only through an explicit allow-list mapping of
public names to column expressions, so user input never becomes an SQL
identifier. LIMIT/OFFSET values are bound parameters; a missing limit means
no LIMIT clause at all.
"""

from dataclasses import dataclass
from typing import Any, Mapping

from pydantic import BaseModel
from sqlalchemy import Select

SORT_ASC: str = "asc"


class Pagination(BaseModel):
    """목록 응답의 페이지네이션 메타데이터.

    Pagination envelope attached to every list response.

    Attributes:
        limit: 페이지 크기, None이면 제한 없음 (Page size, None means unlimited)
        offset: 건너뛴 항목 수 (Number of skipped items)
    """

    limit: int | None = None
    offset: int = 0


@dataclass
class ListParams:
    """목록 조회 파라미터 — 정렬 컬럼, 방향, limit/offset.

    List query parameters as received from the client. Values are validated
    when applied, not here.
    """

    sort_by: str | None = None
    sort_order: str | None = None
    limit: int | None = None
    offset: int | None = None

    @property
    def pagination(self) -> Pagination:
        """실제 적용되는 limit/offset을 응답용 모델로 반환합니다."""
        limit, offset = normalize_window(self.limit, self.offset)
        return Pagination(limit=limit, offset=offset)


def normalize_window(limit: int | None, offset: int | None) -> tuple[int | None, int]:
    """limit/offset을 정규화합니다.

    Non-positive limits become "no limit"; missing or negative offsets become 0.
    """
    safe_limit: int | None = limit if limit is not None and limit > 0 else None
    safe_offset: int = offset if offset is not None and offset > 0 else 0
    return safe_limit, safe_offset


def apply_sorting(
    query: Select[Any],
    allowed: Mapping[str, Any],
    default: str,
    sort_by: str | None,
    sort_order: str | None,
) -> Select[Any]:
    """허용 목록 기반으로 ORDER BY를 적용합니다.

    Apply ORDER BY using only columns from the allow-list.

    Args:
        query: 기본 SELECT 쿼리 (Base query)
        allowed: 공개 이름 → 컬럼 표현식 매핑 (Public sort name → column expression)
        default: 허용되지 않은 값일 때 사용할 기본 키 (Fallback key for unknown values)
        sort_by: 클라이언트가 요청한 정렬 키 (Requested sort key)
        sort_order: "asc" 또는 "desc", 그 외는 desc (asc/desc, anything else is desc)

    Returns:
        Select: 정렬이 적용된 쿼리 (Query with ORDER BY applied)
    """
    column = allowed.get(sort_by or "", allowed[default])
    if (sort_order or "").lower() == SORT_ASC:
        return query.order_by(column.asc())
    return query.order_by(column.desc())


def apply_pagination(
    query: Select[Any],
    limit: int | None,
    offset: int | None,
) -> Select[Any]:
    """LIMIT/OFFSET을 바인딩 파라미터로 적용합니다.

    Apply LIMIT/OFFSET as bound parameters. No limit means no LIMIT clause,
    also when only an offset is given.
    """
    safe_limit, safe_offset = normalize_window(limit, offset)
    if safe_limit is not None:
        query = query.limit(safe_limit)
    if safe_offset:
        query = query.offset(safe_offset)
    return query


def apply_list_params(
    query: Select[Any],
    params: ListParams,
    allowed: Mapping[str, Any],
    default: str,
) -> Select[Any]:
    """정렬과 페이지네이션을 한 번에 적용합니다."""
    query = apply_sorting(query, allowed, default, params.sort_by, params.sort_order)
    return apply_pagination(query, params.limit, params.offset)
