"""
Search request builder.

Combines field conditions, free-text search, sorting, pagination and
aggregations into one ``SearchRequest``.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from es_query.core.models import AggregationNode, SearchRequest
from es_query.query.aggregations import Aggregations
from es_query.query.helpers import flatten_with_key_paths, is_list_condition
from es_query.query.match_condition import Clause, MatchCondition, match_terms
from es_query.query.query_string import QueryString

logger = logging.getLogger(__name__)

# Control keys are stripped from the parameters before field conditions
# are compiled.
RESERVED_KEYS = (
    "_indices",
    "_q",
    "_aggs",
    "_size",
    "_from",
    "_sort_by",
    "_ignore_unavailable",
)


class SearchRequestBuilder:
    """
    Builds a search request from keyword filters.

    Every keyword that is not a reserved control key is a field condition:

    - scalar: exact phrase match
    - ``None``: the field must be missing
    - ``Range`` or ``range(...)``: range clause
    - nested mapping: one condition per flattened key path
    - list: at least one element must match

    Control keys:
        _indices: Index name or list of index names
        _q: Free-text condition searched across whole documents
        _aggs: Terms aggregation specification
        _size: Page size
        _from: Page offset
        _sort_by: Sort spec or list of sort specs
        _ignore_unavailable: Ignore missing indices
    """

    def __init__(self, **params: Any):
        control = {key: params.pop(key, None) for key in RESERVED_KEYS}

        self.indices = _as_list(control["_indices"])
        self.q = control["_q"]
        self.aggs = control["_aggs"]
        self.size = control["_size"]
        self.from_ = control["_from"]
        self.sort_by = control["_sort_by"]
        self.ignore_unavailable = control["_ignore_unavailable"]

        self.params = params

    def search_request(self) -> SearchRequest:
        """
        Assemble the request envelope.

        Raises:
            InvalidAggregationSpec: If the aggregation spec is invalid
            UnsupportedConditionType: If a condition value has an unknown type
        """
        request = SearchRequest(
            indices=self.indices,
            size=self.size,
            from_=self.from_,
            ignore_unavailable=self.ignore_unavailable,
            sort=self._sort(),
            query=self._query(),
            aggregations=self._aggregations(),
        )
        logger.debug("Built search request for indices %s", self.indices)
        return request

    def search_params(self) -> Dict[str, Any]:
        return self.search_request().to_search_params()

    def _query(self) -> Optional[Clause]:
        terms = self._match_terms()
        if not terms:
            return None
        return {"bool": {"must": terms}}

    def _match_terms(self) -> List[Clause]:
        terms = []
        search_query = QueryString.term_for(self.q)
        if search_query is not None:
            terms.append(MatchCondition.query_string(search_query))
        terms.extend(match_terms(flatten_with_key_paths(self.params)))
        return terms

    def _sort(self) -> Optional[List[Any]]:
        return _as_list(self.sort_by)

    def _aggregations(self) -> Optional[Dict[str, AggregationNode]]:
        if self.aggs is None or isinstance(self.aggs, (str, list, tuple, dict)) and not self.aggs:
            return None
        return Aggregations.compile(self.aggs) or None


def build_search_request(params: Mapping[str, Any]) -> SearchRequest:
    """Build a ``SearchRequest`` from a mapping of filters and control keys."""
    return SearchRequestBuilder(**{str(k): v for k, v in params.items()}).search_request()


def _as_list(value: Any) -> Optional[List[Any]]:
    if value is None:
        return None
    values = list(value) if is_list_condition(value) else [value]
    return values or None
