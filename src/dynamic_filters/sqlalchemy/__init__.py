"""SQLAlchemy backend: operator strategies, translator and executor."""

from .executor import SQLAlchemyQueryExecutor
from .fields import fields_from_model
from .operators import DEFAULT_SQLA_REGISTRY, build_default_sqla_registry
from .strategy import SQLAlchemyOperator, SQLAlchemyOperatorRegistry
from .translator import SQLAlchemyPredicateTranslator

__all__ = [
    "DEFAULT_SQLA_REGISTRY",
    "SQLAlchemyOperator",
    "SQLAlchemyOperatorRegistry",
    "SQLAlchemyPredicateTranslator",
    "SQLAlchemyQueryExecutor",
    "build_default_sqla_registry",
    "fields_from_model",
]
