"""
Search response rehydration.

Turns a raw search response into typed records, collecting one error per
hit that fails instead of aborting the whole batch.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from es_query.core.errors import RehydrationError
from es_query.core.models import RehydratedResult, SearchRecord
from es_query.execution.registry import as_resolver

logger = logging.getLogger(__name__)

DEFAULT_REHYDRATION_FIELD = "rehydration_class"


class SearchResponse:
    """
    Parsed search response.

    Attributes:
        raw_response: The response envelope exactly as received
        records: Rehydrated records, in hit order
        errors: One ``RehydrationError`` per hit that could not be rehydrated
        aggregations: The raw ``aggregations`` section, uninterpreted
    """

    def __init__(
        self,
        raw_response: Mapping[str, Any],
        class_resolver: Any,
        rehydration_field: str = DEFAULT_REHYDRATION_FIELD,
    ):
        """
        Parse a raw response.

        Args:
            raw_response: Search response envelope
            class_resolver: ``ClassRegistry``, mapping or callable resolving a
                discriminator to a record type
            rehydration_field: ``_source`` field holding the discriminator
        """
        self.raw_response = raw_response
        self.aggregations: Optional[Dict[str, Any]] = raw_response.get("aggregations")
        self.rehydration_field = rehydration_field
        self._resolve = as_resolver(class_resolver)
        self.records, self.errors = self._parse_raw_response()

    @property
    def total_hits(self) -> int:
        total = (self.raw_response.get("hits") or {}).get("total", 0)
        if isinstance(total, Mapping):
            return total.get("value", 0)
        return total or 0

    def to_result(self) -> RehydratedResult:
        return RehydratedResult(
            records=self.records,
            errors=self.errors,
            aggregations=self.aggregations,
        )

    def _parse_raw_response(self) -> Tuple[List[Any], List[RehydrationError]]:
        records: List[Any] = []
        errors: List[RehydrationError] = []

        hits = (self.raw_response.get("hits") or {}).get("hits") or []
        for hit in hits:
            try:
                records.append(self._parse_hit(hit))
            except Exception as e:
                hit_id = hit.get("_id") if isinstance(hit, Mapping) else None
                logger.warning("Could not rehydrate hit %s: %s", hit_id, e)
                errors.append(RehydrationError(hit, e))

        return records, errors

    def _parse_hit(self, hit: Mapping[str, Any]) -> Any:
        record_type = self._resolve(hit["_source"][self.rehydration_field])
        from_hit = getattr(record_type, "from_hit", None)
        if callable(from_hit):
            return from_hit(hit)

        fields = dict(hit["_source"])
        for field in SearchRecord.METADATA_FIELDS:
            fields[field] = hit.get(field)
        return record_type(**fields)


def rehydrate(
    raw_response: Mapping[str, Any],
    class_resolver: Any,
    rehydration_field: str = DEFAULT_REHYDRATION_FIELD,
) -> RehydratedResult:
    """
    Rehydrate every hit of ``raw_response``.

    Each hit ends up in exactly one of ``records`` or ``errors``.
    """
    return SearchResponse(raw_response, class_resolver, rehydration_field).to_result()
