"""
Lucene query-string compiler.

Turns a free-text search condition into the query-string mini-language
used by the ``query_string`` clause to search whole documents.
"""

import re
from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional, Union

from es_query.core.errors import UnsupportedConditionType
from es_query.core.models import Range
from es_query.query.helpers import (
    as_range,
    flatten_with_key_paths,
    is_list_condition,
    to_utc,
)

SPECIAL_CHARACTERS = '& | ! ( ) { } [ ] ^ " ~ * ?'.split()
SPECIAL_CHARACTERS_REGEX = re.compile(
    "([" + "".join(re.escape(c) for c in SPECIAL_CHARACTERS) + "])"
)

QueryTerm = Optional[Union[str, int, float, Decimal]]


class QueryString:
    """
    Compiles conditions to query-string text.

    Strings become substring matches with every word required, mappings
    become ``path:term`` pairs joined by ``AND``, lists become ``OR`` groups
    and ranges become ``[min TO max]``. ``None`` is returned when a
    condition produces no text at all.
    """

    @classmethod
    def term_for(cls, condition: Any) -> QueryTerm:
        condition = as_range(condition)

        if condition is None:
            return None
        if isinstance(condition, str):
            return cls._term_for_string(condition)
        if isinstance(condition, (int, float, Decimal)) and not isinstance(condition, bool):
            return condition
        if isinstance(condition, Mapping):
            return cls._term_for_mapping(condition)
        if is_list_condition(condition):
            return cls._term_for_list(condition)
        if isinstance(condition, Range):
            return cls._term_for_range(condition)
        raise UnsupportedConditionType(condition)

    @classmethod
    def _term_for_string(cls, string: str) -> Optional[str]:
        tokens = string.split()
        if not tokens:
            return None
        return f"(*{cls.format_string(tokens)}*)"

    @classmethod
    def _term_for_mapping(cls, mapping: Mapping) -> Optional[str]:
        terms = []
        for key, and_condition in flatten_with_key_paths(mapping).items():
            term = cls.term_for(and_condition)
            if _is_blank(term):
                continue
            terms.append(f"{key}:{term}")
        return " AND ".join(terms) or None

    @classmethod
    def _term_for_list(cls, conditions: Any) -> Optional[str]:
        terms = [cls.term_for(or_condition) for or_condition in conditions]
        terms = [str(term) for term in terms if not _is_blank(term)]
        if not terms:
            return None
        return f"({' OR '.join(terms)})"

    @classmethod
    def _term_for_range(cls, value: Range) -> Optional[str]:
        if value.is_empty():
            return None
        min_value = cls.format_range_value(value.min)
        max_value = cls.format_range_value(value.inclusive_max())
        if _is_blank(min_value) or _is_blank(max_value):
            return None
        # Continuous types have no last member, use Lucene's half-open form.
        closing = "}" if value.exclusive_end and not value.is_discrete() else "]"
        return f"[{min_value} TO {max_value}{closing}"

    @staticmethod
    def format_range_value(range_value: Any) -> Any:
        if isinstance(range_value, datetime):
            return to_utc(range_value).isoformat(timespec="milliseconds").replace("+00:00", "Z")
        if isinstance(range_value, date):
            return range_value.isoformat()
        return range_value

    @staticmethod
    def format_string(tokens: Any) -> str:
        escaped = (SPECIAL_CHARACTERS_REGEX.sub(r"\\\1", token) for token in tokens)
        return " AND ".join(escaped)


def _is_blank(term: Any) -> bool:
    return term is None or term == ""
