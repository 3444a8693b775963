"""
Parameter tree helpers shared by the query compilers.

Flattens nested condition mappings into dot-joined key paths and splits
the result into AND and OR conditions.
"""

from collections.abc import Mapping
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Tuple
from uuid import UUID

from es_query.core.errors import UnsupportedConditionType
from es_query.core.models import Range

SCALAR_TYPES = (str, int, float, Decimal, bool, Enum, UUID, date)


def flatten_with_key_paths(params: Mapping) -> Dict[str, Any]:
    """
    Flatten nested mappings into a single level keyed by full key path.

    Only mapping values are descended. Lists and ranges are leaves, even
    when a list holds mappings.

    Args:
        params: Possibly nested condition mapping

    Returns:
        Mapping of dot-joined key path to leaf value, in first-seen order

    Example:
        >>> flatten_with_key_paths({"a": {"b": 1, "c": {"d": 2}}, "e": 3})
        {'a.b': 1, 'a.c.d': 2, 'e': 3}
    """
    flattened: Dict[str, Any] = {}
    for outer_key, outer_value in params.items():
        if isinstance(outer_value, Mapping):
            for inner_key, inner_value in flatten_with_key_paths(outer_value).items():
                flattened[f"{outer_key}.{inner_key}"] = inner_value
        else:
            flattened[str(outer_key)] = outer_value
    return flattened


def is_list_condition(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def partition_conditions(
    params: Mapping[str, Any],
) -> Tuple[List[Tuple[str, Any]], List[Tuple[str, Any]]]:
    """
    Split flat parameters into AND conditions and OR conditions.

    List values are OR conditions; every other value is an AND condition.

    Returns:
        ``(and_conditions, or_conditions)`` as lists of ``(path, value)``
    """
    and_conditions: List[Tuple[str, Any]] = []
    or_conditions: List[Tuple[str, Any]] = []
    for path, value in params.items():
        if is_list_condition(value):
            or_conditions.append((path, value))
        else:
            and_conditions.append((path, value))
    return and_conditions, or_conditions


def as_range(value: Any) -> Any:
    """Return ``value`` as a Range when it is a builtin ``range``."""
    if isinstance(value, range):
        return Range.from_builtin(value)
    return value


def to_utc(value: datetime) -> datetime:
    """Normalize a datetime to UTC. Naive datetimes are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def check_scalar(value: Any) -> Any:
    """
    Validate a scalar leaf and unwrap enum members.

    Raises:
        UnsupportedConditionType: If ``value`` is not a recognized scalar
    """
    if not isinstance(value, SCALAR_TYPES):
        raise UnsupportedConditionType(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, UUID):
        return str(value)
    return value
