"""
dynamic_filters: translate declarative filter objects into paginated
queries.

Filter types declare their fields once; the criteria builder turns a
filter instance plus optional range bounds into backend-neutral
predicates, which the SQLAlchemy or in-memory executor runs as a
consistent count + fetch pair.
"""

from .builder import Criteria, CriteriaBuilder, Diagnostic
from .classifier import FieldClassification, classify
from .config import EngineConfig, configure
from .engine import FilterEngine, GenericFilter
from .exceptions import (
    BackendExecutionError,
    ConfigurationError,
    FieldAccessError,
    FieldNotFoundError,
    FilterError,
    UnknownRangeFieldError,
)
from .fields import (
    FieldDescriptor,
    FieldTable,
    FieldType,
    FilterableId,
    Identifier,
    field_table_of,
    register_filter,
)
from .memory import MemoryQueryExecutor
from .metadata import (
    FieldClassificationInfo,
    QueryParameter,
    build_parameters,
    describe_fields,
    schema_for,
)
from .predicates import (
    AtomicPredicate,
    Between,
    Contains,
    Equals,
    GreaterOrEqual,
    LessOrEqual,
    PredicateOperator,
)
from .query_params import parse_query_params
from .ranges import Range, RangeTable
from .request import FilterRequest, FilterSpec, Page, PaginationSpec, SortDirection

__all__ = [
    "AtomicPredicate",
    "BackendExecutionError",
    "Between",
    "ConfigurationError",
    "Contains",
    "Criteria",
    "CriteriaBuilder",
    "Diagnostic",
    "EngineConfig",
    "Equals",
    "FieldAccessError",
    "FieldClassification",
    "FieldClassificationInfo",
    "FieldDescriptor",
    "FieldNotFoundError",
    "FieldTable",
    "FieldType",
    "FilterEngine",
    "FilterError",
    "FilterRequest",
    "FilterSpec",
    "FilterableId",
    "GenericFilter",
    "GreaterOrEqual",
    "Identifier",
    "LessOrEqual",
    "MemoryQueryExecutor",
    "Page",
    "PaginationSpec",
    "PredicateOperator",
    "QueryParameter",
    "Range",
    "RangeTable",
    "SortDirection",
    "UnknownRangeFieldError",
    "build_parameters",
    "classify",
    "configure",
    "describe_fields",
    "field_table_of",
    "parse_query_params",
    "register_filter",
    "schema_for",
]
