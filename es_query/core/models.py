"""
Shared data models for the query builder.

Everything here is a value object: built once per translation call,
never mutated afterwards.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from es_query.core.errors import RehydrationError, UnsupportedConditionType


@dataclass(frozen=True)
class Range:
    """
    Bounded interval condition.

    The lower bound is always inclusive. The upper bound is inclusive unless
    ``exclusive_end`` is set. Either bound may be ``None`` for an open side.
    A reversed range is accepted: the structured query still emits it, the
    query-string grammar suppresses it.
    """

    min: Any
    max: Any
    exclusive_end: bool = False

    def __post_init__(self):
        if self.min is not None and self.max is not None:
            try:
                self.min < self.max
            except TypeError as e:
                raise ValueError(
                    f"range bounds are not comparable: {self.min!r}, {self.max!r}"
                ) from e

    @classmethod
    def from_builtin(cls, value: range) -> "Range":
        """Convert ``range(start, stop)`` into an end-exclusive Range."""
        if value.step != 1:
            raise UnsupportedConditionType(value)
        return cls(value.start, value.stop, exclusive_end=True)

    def is_empty(self) -> bool:
        if self.min is None or self.max is None:
            return False
        if self.exclusive_end:
            return not self.min < self.max
        return self.min > self.max

    def inclusive_max(self) -> Any:
        """
        Last member of the range for discrete bound types.

        Integers and calendar dates step back by one unit when the end is
        exclusive. Continuous types have no last member and return ``max``.
        """
        if not self.exclusive_end or self.max is None:
            return self.max
        if isinstance(self.max, int) and not isinstance(self.max, bool):
            return self.max - 1
        if isinstance(self.max, date) and not isinstance(self.max, datetime):
            return self.max - timedelta(days=1)
        return self.max

    def is_discrete(self) -> bool:
        bound = self.max
        if isinstance(bound, bool):
            return False
        return isinstance(bound, int) or (
            isinstance(bound, date) and not isinstance(bound, datetime)
        )


class AggregationTerm(BaseModel):
    """A single terms aggregation over one field."""

    model_config = ConfigDict(frozen=True)

    field: str = Field(min_length=1)
    size: Optional[int] = Field(default=None, ge=0)
    order: Optional[List[Dict[str, Any]]] = None
    partition: Optional[int] = Field(default=None, ge=0)
    num_partitions: Optional[int] = Field(default=None, ge=0)

    def include(self) -> Optional[Dict[str, int]]:
        include = {
            "partition": self.partition,
            "num_partitions": self.num_partitions,
        }
        include = {k: v for k, v in include.items() if v is not None}
        return include or None

    def to_dsl(self) -> Dict[str, Any]:
        terms = {
            "field": self.field,
            "size": self.size,
            "order": self.order,
            "include": self.include(),
        }
        return {k: v for k, v in terms.items() if v is not None}


class AggregationNode(BaseModel):
    """A terms aggregation plus the aggregations nested under its buckets."""

    model_config = ConfigDict(frozen=True)

    term: AggregationTerm
    sub_aggregations: Optional[Dict[str, "AggregationNode"]] = None

    def to_dsl(self) -> Dict[str, Any]:
        node: Dict[str, Any] = {"terms": self.term.to_dsl()}
        if self.sub_aggregations:
            node["aggs"] = {
                name: sub.to_dsl() for name, sub in self.sub_aggregations.items()
            }
        return node


class SearchRequest(BaseModel):
    """
    Request envelope handed to the transport layer.

    Sections that contribute nothing stay ``None`` and are left out of the
    serialized parameters entirely.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    indices: Optional[List[str]] = None
    size: Optional[int] = None
    from_: Optional[int] = Field(default=None, alias="from")
    ignore_unavailable: Optional[bool] = None
    sort: Optional[List[Any]] = None
    query: Optional[Dict[str, Any]] = None
    aggregations: Optional[Dict[str, AggregationNode]] = None

    def body(self) -> Optional[Dict[str, Any]]:
        body: Dict[str, Any] = {}
        if self.query:
            body["query"] = self.query
        if self.sort:
            body["sort"] = self.sort
        if self.aggregations:
            body["aggs"] = {
                name: node.to_dsl() for name, node in self.aggregations.items()
            }
        return body or None

    def to_search_params(self) -> Dict[str, Any]:
        """
        Serialize to ``{index, size, from, ignore_unavailable, body}``.

        Returns:
            Search parameters with every absent section omitted
        """
        params = {
            "index": self.indices,
            "size": self.size,
            "from": self.from_,
            "ignore_unavailable": self.ignore_unavailable,
            "body": self.body(),
        }
        return {k: v for k, v in params.items() if v is not None}


class SearchRecord(BaseModel):
    """
    Base class for records rehydrated from search hits.

    The hit metadata (``_id``, ``_index``, ``_type``) is copied next to the
    ``_source`` fields before validation.
    """

    model_config = ConfigDict(populate_by_name=True)

    METADATA_FIELDS: ClassVar[Tuple[str, ...]] = ("_id", "_index", "_type")

    id: Optional[str] = Field(default=None, alias="_id")
    index: Optional[str] = Field(default=None, alias="_index")
    doc_type: Optional[str] = Field(default=None, alias="_type")
    rehydration_class: Optional[str] = None

    @classmethod
    def from_hit(cls, hit: Mapping[str, Any]) -> "SearchRecord":
        source = dict(hit.get("_source") or {})
        for field in cls.METADATA_FIELDS:
            source[field] = hit.get(field)
        return cls.model_validate(source)


class RehydratedResult(BaseModel):
    """Records and per-hit errors produced from one raw search response."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    records: List[Any] = Field(default_factory=list)
    errors: List[RehydrationError] = Field(default_factory=list)
    aggregations: Optional[Dict[str, Any]] = None
