"""
Exception hierarchy for the query builder.

Translation errors are raised synchronously and abort the call that hit them.
Rehydration errors are collected per hit by the response parser instead.
"""

from typing import Any, Mapping, Optional


class QueryBuilderError(Exception):
    """Base class for every error raised by es_query."""


class InvalidAggregationSpec(QueryBuilderError, ValueError):
    """An aggregation specification cannot be compiled."""


class MissingAggregationField(InvalidAggregationSpec):
    """An aggregation term was given without a usable field."""


class DuplicateAggregationField(InvalidAggregationSpec):
    """Two aggregations at the same level target the same field."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"duplicate field aggregation provided for {field!r}")


class UnknownAggregationOption(InvalidAggregationSpec):
    """An aggregation mapping carries a key the compiler does not know."""


class UnsupportedOrderValue(InvalidAggregationSpec):
    """An aggregation order is neither a string, a mapping nor a list of those."""

    def __init__(self, order: Any):
        self.order = order
        super().__init__(f"unexpected value for order: got {order!r}")


class UnsupportedConditionType(QueryBuilderError, TypeError):
    """A condition value has a runtime type no compiler understands."""

    def __init__(self, value: Any):
        self.value_type = type(value)
        super().__init__(
            f"{self.value_type.__name__} is not a supported search condition type"
        )


class UnknownRecordClass(QueryBuilderError, LookupError):
    """A rehydration discriminator names no registered record type."""

    def __init__(self, name: Optional[str]):
        self.name = name
        super().__init__(f"no record class registered for {name!r}")


class RehydrationError(QueryBuilderError):
    """
    A single search hit could not be turned into a record.

    Never raised by the response parser; instances are collected next to the
    records that did rehydrate.
    """

    def __init__(self, hit: Mapping[str, Any], original_exception: BaseException):
        self.hit = hit
        self.original_exception = original_exception
        super().__init__(
            f"Error rehydrating model from query response hit. Hit: {hit}."
        )
