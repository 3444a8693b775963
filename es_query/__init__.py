"""
es_query - Elasticsearch query builder.

Compiles keyword filters into Elasticsearch search requests and rehydrates
search hits into typed records.
"""

from es_query.core import (
    QueryBuilderError,
    InvalidAggregationSpec,
    UnsupportedConditionType,
    RehydrationError,
    Range,
    SearchRecord,
    SearchRequest,
)
from es_query.query import SearchRequestBuilder, build_search_request, QueryString, Aggregations
from es_query.execution import ClassRegistry, SearchResponse, ESSearchExecutor, rehydrate
from es_query.orchestrator import SearchOrchestrator

__all__ = [
    "QueryBuilderError",
    "InvalidAggregationSpec",
    "UnsupportedConditionType",
    "RehydrationError",
    "Range",
    "SearchRecord",
    "SearchRequest",
    "SearchRequestBuilder",
    "build_search_request",
    "QueryString",
    "Aggregations",
    "ClassRegistry",
    "SearchResponse",
    "ESSearchExecutor",
    "rehydrate",
    "SearchOrchestrator",
]
