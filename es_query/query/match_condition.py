"""
Structured query clauses for individual conditions.

Converts ``(path, value)`` pairs into Elasticsearch DSL clauses:
phrase matches, missing-field checks, ranges and bool groups.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Dict, Iterable, List, Tuple

from es_query.core.models import Range
from es_query.query.helpers import (
    as_range,
    check_scalar,
    flatten_with_key_paths,
    is_list_condition,
    partition_conditions,
    to_utc,
)

Clause = Dict[str, Any]

MINIMUM_SHOULD_MATCH = 1


class MatchCondition:
    """
    Builds one clause per condition.

    ``None`` means the field must be missing, a ``Range`` becomes a range
    clause, a mapping becomes a ``bool.must`` group over its flattened
    paths, a list becomes a ``bool.should`` group and anything else an
    exact phrase match.
    """

    @classmethod
    def term_for(cls, key: str, value: Any) -> Clause:
        value = as_range(value)

        if value is None:
            return cls.missing_field(key)
        if isinstance(value, Range):
            return cls.range_condition(key, value)
        if isinstance(value, Mapping):
            return {"bool": {"must": match_terms({key: value}, flatten=True)}}
        if is_list_condition(value):
            return MatchAny.term_for(key, value)
        return {"match_phrase": {key: check_scalar(value)}}

    @staticmethod
    def query_string(query: Any) -> Clause:
        return {"query_string": {"query": query}}

    @staticmethod
    def missing_field(key: str) -> Clause:
        return {"bool": {"must_not": {"exists": {"field": key}}}}

    @classmethod
    def range_condition(cls, key: str, value: Range) -> Clause:
        bounds: Dict[str, Any] = {}
        if value.min is not None:
            bounds["gte"] = cls.format_range_value(value.min)
        if value.max is not None:
            less_than_key = "lt" if value.exclusive_end else "lte"
            bounds[less_than_key] = cls.format_range_value(value.max)
        return {"range": {key: bounds}}

    @staticmethod
    def format_range_value(range_value: Any) -> Any:
        # Seconds precision, e.g. 2018-12-27T20:05:00Z
        if isinstance(range_value, datetime):
            return to_utc(range_value).strftime("%Y-%m-%dT%H:%M:%SZ")
        return range_value


class MatchAll:
    """AND conditions: one clause per entry."""

    @staticmethod
    def terms_for(params: Any, flatten: bool = False) -> List[Clause]:
        if isinstance(params, Mapping):
            items: Iterable[Tuple[str, Any]] = (
                flatten_with_key_paths(params) if flatten else params
            ).items()
        else:
            items = params
        return [MatchCondition.term_for(key, value) for key, value in items]


class MatchAny:
    """OR conditions: one ``bool.should`` group per list-valued entry."""

    @staticmethod
    def term_for(key: str, values: Iterable[Any]) -> Clause:
        return {
            "bool": {
                "should": [MatchCondition.term_for(key, item) for item in values],
                "minimum_should_match": MINIMUM_SHOULD_MATCH,
            }
        }

    @classmethod
    def terms_for(cls, params: Any) -> List[Clause]:
        items = params.items() if isinstance(params, Mapping) else params
        return [cls.term_for(key, values) for key, values in items]


def match_terms(params: Mapping[str, Any], flatten: bool = False) -> List[Clause]:
    """
    Compile a condition mapping into the clauses of a ``bool.must`` list.

    AND conditions come first in key order, then one should-group per
    list-valued condition.

    Args:
        params: Condition mapping, flat unless ``flatten`` is set
        flatten: Flatten nested mappings into key paths first

    Returns:
        List of clauses, empty when ``params`` is empty
    """
    if flatten:
        params = flatten_with_key_paths(params)
    and_conditions, or_conditions = partition_conditions(params)
    return [*MatchAll.terms_for(and_conditions), *MatchAny.terms_for(or_conditions)]
