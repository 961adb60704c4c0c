"""정렬/페이지네이션 유틸리티 단위 테스트."""

from sqlalchemy import select
from sqlalchemy.dialects import postgresql

from store_rating.models import User
from store_rating.repositories.user_repository import USER_SORT_COLUMNS
from store_rating.utils.pagination import (
    ListParams,
    apply_list_params,
    apply_pagination,
    apply_sorting,
    normalize_window,
)


def _sql(query) -> str:
    return str(query.compile(dialect=postgresql.dialect()))


class TestApplySorting:
    """허용 목록 기반 ORDER BY 테스트."""

    def test_allowed_column_ascending(self):
        sql = _sql(apply_sorting(select(User), USER_SORT_COLUMNS, "created_at", "name", "asc"))
        assert "ORDER BY users.name ASC" in sql

    def test_order_is_case_insensitive(self):
        sql = _sql(apply_sorting(select(User), USER_SORT_COLUMNS, "created_at", "email", "ASC"))
        assert "ORDER BY users.email ASC" in sql

    def test_unknown_order_means_descending(self):
        sql = _sql(apply_sorting(select(User), USER_SORT_COLUMNS, "created_at", "name", "sideways"))
        assert "ORDER BY users.name DESC" in sql

    def test_unknown_column_falls_back_to_default(self):
        sql = _sql(apply_sorting(
            select(User), USER_SORT_COLUMNS, "created_at", "name; DROP TABLE users", "asc"
        ))
        assert "ORDER BY users.created_at ASC" in sql
        assert "DROP" not in sql

    def test_missing_sort_uses_default_descending(self):
        sql = _sql(apply_sorting(select(User), USER_SORT_COLUMNS, "created_at", None, None))
        assert "ORDER BY users.created_at DESC" in sql


class TestApplyPagination:
    """LIMIT/OFFSET 바인딩 테스트."""

    def test_limit_and_offset_are_bound(self):
        query = apply_pagination(select(User), 10, 20)
        sql = _sql(query)
        assert "LIMIT %(param_1)s" in sql
        assert "OFFSET %(param_2)s" in sql
        params = query.compile(dialect=postgresql.dialect()).params
        assert sorted(params.values()) == [10, 20]

    def test_no_limit_means_no_limit_clause(self):
        sql = _sql(apply_pagination(select(User), None, 5))
        assert "LIMIT" not in sql
        assert "OFFSET" in sql

    def test_non_positive_values_are_ignored(self):
        sql = _sql(apply_pagination(select(User), 0, -3))
        assert "LIMIT" not in sql
        assert "OFFSET" not in sql


class TestListParams:
    """ListParams 및 정규화 테스트."""

    def test_normalize_window(self):
        assert normalize_window(None, None) == (None, 0)
        assert normalize_window(-1, -1) == (None, 0)
        assert normalize_window(25, 50) == (25, 50)

    def test_pagination_reports_effective_values(self):
        params = ListParams(limit=-5, offset=None)
        assert params.pagination.model_dump() == {"limit": None, "offset": 0}

    def test_apply_list_params(self):
        params = ListParams(sort_by="role", sort_order="asc", limit=3, offset=0)
        sql = _sql(apply_list_params(select(User), params, USER_SORT_COLUMNS, "created_at"))
        assert "ORDER BY users.role ASC" in sql
        assert "LIMIT" in sql
        assert "OFFSET" not in sql
