"""Tests for SQLAlchemy predicate translation."""

from __future__ import annotations

from typing import Any

import pytest
from sqlalchemy import select
from sqlalchemy.sql.elements import True_

from dynamic_filters import (
    Between,
    Contains,
    Equals,
    FieldNotFoundError,
    GreaterOrEqual,
    LessOrEqual,
    PredicateOperator,
)
from dynamic_filters.sqlalchemy import (
    SQLAlchemyOperator,
    SQLAlchemyPredicateTranslator,
    build_default_sqla_registry,
)

from conftest import UserRecord


def _sql(expr: Any) -> str:
    stmt = select(UserRecord.id).where(expr)
    return str(stmt.compile(compile_kwargs={"literal_binds": True}))


@pytest.fixture
def translator():
    return SQLAlchemyPredicateTranslator(UserRecord)


def test_empty_translates_to_true(translator):
    assert isinstance(translator.translate([]), True_)


def test_equals(translator):
    assert "users.count = 3" in _sql(translator.translate([Equals("count", 3)]))


def test_contains_is_case_insensitive_by_default(translator):
    sql = _sql(translator.translate([Contains("name", "Jo")]))
    assert "lower(users.name) LIKE" in sql


def test_contains_case_sensitive_registry():
    translator = SQLAlchemyPredicateTranslator(
        UserRecord, build_default_sqla_registry(case_insensitive_contains=False)
    )
    sql = _sql(translator.translate([Contains("name", "Jo")]))
    assert "users.name LIKE" in sql
    assert "lower(" not in sql


def test_contains_escapes_wildcards(translator):
    sql = _sql(translator.translate([Contains("name", "50%")]))
    assert "ESCAPE '/'" in sql


def test_range_operators(translator):
    sql = _sql(
        translator.translate(
            [
                Between("count", 1, 5),
                GreaterOrEqual("account_id", 1),
                LessOrEqual("id", 9),
            ]
        )
    )
    assert "users.count BETWEEN 1 AND 5" in sql
    assert "users.account_id >= 1" in sql
    assert "users.id <= 9" in sql
    assert sql.count(" AND ") >= 3


def test_unknown_field_raises_with_suggestion(translator):
    with pytest.raises(FieldNotFoundError) as exc_info:
        translator.translate([Equals("nmae", "x")])
    assert exc_info.value.suggestions == ["name"]
    assert exc_info.value.model == "UserRecord"


def test_non_column_attribute_is_rejected(translator):
    with pytest.raises(FieldNotFoundError):
        translator.column("metadata")


def test_custom_operator_registration():
    class NotEqualOperator(SQLAlchemyOperator):
        name = PredicateOperator.EQ

        def apply(self, column: Any, value: Any) -> Any:
            return column != value

    registry = build_default_sqla_registry()
    registry.register(NotEqualOperator())
    translator = SQLAlchemyPredicateTranslator(UserRecord, registry)
    assert "users.count != 3" in _sql(translator.translate([Equals("count", 3)]))


def test_unregistered_operator_raises():
    registry = build_default_sqla_registry()
    with pytest.raises(ValueError, match="Unsupported operator"):
        registry.apply(PredicateOperator.AND, UserRecord.id, 1)
