"""Query building and translation components."""

from es_query.query.helpers import flatten_with_key_paths, partition_conditions
from es_query.query.match_condition import MatchCondition, MatchAll, MatchAny, match_terms
from es_query.query.query_string import QueryString
from es_query.query.aggregations import Aggregations, build_term, normalize_order
from es_query.query.builder import SearchRequestBuilder, build_search_request

__all__ = [
    "flatten_with_key_paths",
    "partition_conditions",
    "MatchCondition",
    "MatchAll",
    "MatchAny",
    "match_terms",
    "QueryString",
    "Aggregations",
    "build_term",
    "normalize_order",
    "SearchRequestBuilder",
    "build_search_request",
]
