"""
Terms aggregation compiler.

Builds a (possibly multi-level) terms aggregation tree from a string,
list or mapping specification.
"""

from collections.abc import Mapping
from typing import Any, Dict, Iterator, List, Optional

from pydantic import ValidationError

from es_query.core.errors import (
    DuplicateAggregationField,
    InvalidAggregationSpec,
    MissingAggregationField,
    UnknownAggregationOption,
    UnsupportedConditionType,
    UnsupportedOrderValue,
)
from es_query.core.models import AggregationNode, AggregationTerm
from es_query.query.helpers import is_list_condition

DEFAULT_ORDER_DIRECTION = "desc"

TERM_OPTIONS = ("field", "size", "order", "partition", "num_partitions")
SUB_AGGREGATIONS_KEY = "aggs"
OPTION_ALIASES = {"numPartitions": "num_partitions"}


def normalize_order(order: Any) -> Optional[List[Dict[str, Any]]]:
    """
    Normalize an order option into a list of ``{key: direction}`` pairs.

    A bare string orders by that key with the default direction, a mapping
    is kept as given, and a list is normalized element by element. Blank
    entries are dropped; ``None`` is returned when nothing is left so that
    the cluster's own default ordering applies.

    Example:
        >>> normalize_order(["_key", {"_count": "asc"}])
        [{'_key': 'desc'}, {'_count': 'asc'}]
    """
    terms = [_order_term(term) for term in _flatten(order)]
    terms = [term for term in terms if term]
    return terms or None


def _flatten(order: Any) -> Iterator[Any]:
    if is_list_condition(order):
        for item in order:
            yield from _flatten(item)
    else:
        yield order


def _order_term(order: Any) -> Optional[Dict[str, Any]]:
    if order is None or isinstance(order, str) and not order:
        return None
    if isinstance(order, str):
        return {order: DEFAULT_ORDER_DIRECTION}
    if isinstance(order, Mapping):
        return dict(order)
    raise UnsupportedOrderValue(order)


def build_term(
    field: Any = None,
    size: Optional[int] = None,
    order: Any = None,
    partition: Optional[int] = None,
    num_partitions: Optional[int] = None,
) -> AggregationTerm:
    """
    Validate options and build an ``AggregationTerm``.

    ``partition`` and ``num_partitions`` are passed through as given; the
    cluster rejects a one-sided partition spec.

    Raises:
        MissingAggregationField: If ``field`` is missing or blank
        UnsupportedOrderValue: If ``order`` cannot be normalized
        InvalidAggregationSpec: If any other option has the wrong type
    """
    if field is None or isinstance(field, str) and not field.strip():
        raise MissingAggregationField("field must be provided")
    if not isinstance(field, str):
        raise InvalidAggregationSpec(f"field must be a string: got {field!r}")

    try:
        return AggregationTerm(
            field=field,
            size=size,
            order=normalize_order(order),
            partition=partition,
            num_partitions=num_partitions,
        )
    except ValidationError as e:
        raise InvalidAggregationSpec(f"invalid options for aggregation on {field!r}: {e}") from e


class Aggregations:
    """
    Compiles aggregation specifications.

    - ``"field"``: one terms aggregation on ``field``
    - ``[spec, ...]``: sibling aggregations, one per element
    - ``{"field": ..., "size": ..., "order": ..., "partition": ...,
      "num_partitions": ..., "aggs": spec}``: one aggregation with options
      and nested sub-aggregations
    """

    @classmethod
    def terms_for(cls, spec: Any) -> Dict[str, Any]:
        """Return the ``{"aggs": {...}}`` body section for ``spec``."""
        return {
            SUB_AGGREGATIONS_KEY: {
                name: node.to_dsl() for name, node in cls.compile(spec).items()
            }
        }

    @classmethod
    def compile(cls, spec: Any) -> Dict[str, AggregationNode]:
        if isinstance(spec, str):
            return cls._compile_string(spec)
        if is_list_condition(spec):
            return cls._compile_list(spec)
        if isinstance(spec, Mapping):
            return cls._compile_mapping(spec)
        raise UnsupportedConditionType(spec)

    @staticmethod
    def _compile_string(field: str) -> Dict[str, AggregationNode]:
        term = build_term(field=field)
        return {term.field: AggregationNode(term=term)}

    @classmethod
    def _compile_list(cls, specs: Any) -> Dict[str, AggregationNode]:
        aggs: Dict[str, AggregationNode] = {}
        for spec in specs:
            for field, node in cls.compile(spec).items():
                if field in aggs:
                    raise DuplicateAggregationField(field)
                aggs[field] = node
        return aggs

    @classmethod
    def _compile_mapping(cls, spec: Mapping) -> Dict[str, AggregationNode]:
        options = {OPTION_ALIASES.get(key, key): value for key, value in spec.items()}
        sub_spec = options.pop(SUB_AGGREGATIONS_KEY, None)

        unknown = [key for key in options if key not in TERM_OPTIONS]
        if unknown:
            raise UnknownAggregationOption(
                f"unknown aggregation option(s): {', '.join(map(str, unknown))}"
            )
        if "field" not in options:
            raise MissingAggregationField("missing aggregation option: field")

        term = build_term(**options)
        sub_aggregations = cls.compile(sub_spec) if sub_spec is not None else None
        return {
            term.field: AggregationNode(term=term, sub_aggregations=sub_aggregations or None)
        }
