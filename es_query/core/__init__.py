"""Core interfaces, models and errors for the query builder."""

from es_query.core.errors import (
    QueryBuilderError,
    InvalidAggregationSpec,
    MissingAggregationField,
    DuplicateAggregationField,
    UnknownAggregationOption,
    UnsupportedOrderValue,
    UnsupportedConditionType,
    UnknownRecordClass,
    RehydrationError,
)
from es_query.core.interfaces import (
    IClassResolver,
    ISearchClient,
)
from es_query.core.models import (
    Range,
    AggregationTerm,
    AggregationNode,
    SearchRequest,
    SearchRecord,
    RehydratedResult,
)

__all__ = [
    "QueryBuilderError",
    "InvalidAggregationSpec",
    "MissingAggregationField",
    "DuplicateAggregationField",
    "UnknownAggregationOption",
    "UnsupportedOrderValue",
    "UnsupportedConditionType",
    "UnknownRecordClass",
    "RehydrationError",
    "IClassResolver",
    "ISearchClient",
    "Range",
    "AggregationTerm",
    "AggregationNode",
    "SearchRequest",
    "SearchRecord",
    "RehydratedResult",
]
