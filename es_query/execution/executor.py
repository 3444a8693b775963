"""
Elasticsearch search executor.

Submits search requests through an Elasticsearch client and rehydrates
the responses.
"""

import logging
from typing import Any, Dict, Optional

from elasticsearch import Elasticsearch

from es_query.core.interfaces import ISearchClient
from es_query.core.models import SearchRequest
from es_query.execution.response import DEFAULT_REHYDRATION_FIELD, SearchResponse

logger = logging.getLogger(__name__)


class ESSearchExecutor:
    """
    Executes search requests against Elasticsearch.

    Transport errors raised by the client propagate to the caller
    unchanged. There are no retries at this level.
    """

    def __init__(
        self,
        es_client: Optional[ISearchClient] = None,
        es_host: Optional[str] = None,
        rehydration_field: str = DEFAULT_REHYDRATION_FIELD,
    ):
        """
        Initialize the executor.

        Args:
            es_client: Client used to submit searches
            es_host: Elasticsearch host URL, used when no client is given
            rehydration_field: ``_source`` field holding the record discriminator
        """
        if es_client is None:
            if not es_host:
                raise ValueError("Either es_client or es_host must be provided")
            es_client = Elasticsearch(hosts=[es_host])
        self.es_client = es_client
        self.rehydration_field = rehydration_field

    def execute_raw(self, request: SearchRequest) -> Dict[str, Any]:
        """
        Submit ``request`` and return the raw response envelope.

        Args:
            request: Search request built by ``SearchRequestBuilder``

        Returns:
            Raw response body
        """
        kwargs = self.search_kwargs(request)
        try:
            response = self.es_client.search(**kwargs)
        except Exception:
            logger.error("Search failed for indices %s", request.indices)
            raise
        return getattr(response, "body", response)

    def execute(self, request: SearchRequest, class_resolver: Any) -> SearchResponse:
        """
        Submit ``request`` and rehydrate the hits.

        Args:
            request: Search request built by ``SearchRequestBuilder``
            class_resolver: Resolver passed to ``SearchResponse``

        Returns:
            Parsed response with records, errors and raw aggregations
        """
        raw_response = self.execute_raw(request)
        return SearchResponse(raw_response, class_resolver, self.rehydration_field)

    @staticmethod
    def search_kwargs(request: SearchRequest) -> Dict[str, Any]:
        """
        Map the request envelope onto ``Elasticsearch.search`` keyword arguments.

        Body sections are passed as top-level keywords and ``from`` becomes
        ``from_``.
        """
        params = request.to_search_params()
        body = params.pop("body", None) or {}
        if "from" in params:
            params["from_"] = params.pop("from")
        return {**params, **body}
