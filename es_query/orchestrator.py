"""
Search orchestrator - main entry point.

Coordinates request building, execution and rehydration behind one
``where(**filters)`` call.
"""

from typing import Any, Dict, Optional

from es_query.config import EngineSettings
from es_query.core.models import SearchRequest
from es_query.execution.executor import ESSearchExecutor
from es_query.execution.registry import ClassRegistry
from es_query.execution.response import SearchResponse
from es_query.query.builder import SearchRequestBuilder


class SearchOrchestrator:
    """
    Main orchestrator for keyword-filter searches.

    Builds the request from keyword filters, submits it through the
    executor and rehydrates the hits with the registry.
    """

    def __init__(
        self,
        executor: ESSearchExecutor,
        registry: Optional[ClassRegistry] = None,
        index_name: Optional[str] = None,
        ignore_unavailable: Optional[bool] = None,
    ):
        """
        Initialize search orchestrator.

        Args:
            executor: Executor submitting requests to the cluster
            registry: Record types available for rehydration
            index_name: Index searched when a call gives no ``_indices``
            ignore_unavailable: Default for ``_ignore_unavailable``
        """
        self.executor = executor
        self.registry = registry if registry is not None else ClassRegistry()
        self.index_name = index_name
        self.ignore_unavailable = ignore_unavailable

    @classmethod
    def from_elasticsearch(
        cls,
        es_host: str,
        index_name: Optional[str] = None,
        registry: Optional[ClassRegistry] = None,
        rehydration_field: Optional[str] = None,
    ) -> "SearchOrchestrator":
        """
        Create orchestrator for an Elasticsearch host.

        Args:
            es_host: Elasticsearch host URL
            index_name: Default index name
            registry: Record types available for rehydration
            rehydration_field: ``_source`` field holding the record discriminator

        Returns:
            Configured SearchOrchestrator
        """
        executor_options: Dict[str, Any] = {"es_host": es_host}
        if rehydration_field:
            executor_options["rehydration_field"] = rehydration_field
        return cls(
            executor=ESSearchExecutor(**executor_options),
            registry=registry,
            index_name=index_name,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Optional[EngineSettings] = None,
        registry: Optional[ClassRegistry] = None,
    ) -> "SearchOrchestrator":
        """Create orchestrator from ``EngineSettings`` (read from the environment by default)."""
        settings = settings or EngineSettings.from_env()
        orchestrator = cls.from_elasticsearch(
            es_host=settings.es_host,
            index_name=settings.index_name,
            registry=registry,
            rehydration_field=settings.rehydration_field,
        )
        orchestrator.ignore_unavailable = settings.ignore_unavailable
        return orchestrator

    def build(self, **params: Any) -> SearchRequest:
        """
        Build a search request, filling in the default index and options.

        Args:
            **params: Field filters and reserved control keys

        Returns:
            Search request ready for the executor
        """
        if params.get("_indices") is None and self.index_name:
            params["_indices"] = self.index_name
        if params.get("_ignore_unavailable") is None and self.ignore_unavailable is not None:
            params["_ignore_unavailable"] = self.ignore_unavailable
        return SearchRequestBuilder(**params).search_request()

    def where(self, **params: Any) -> SearchResponse:
        """
        Search with keyword filters and rehydrate the results.

        Args:
            **params: Field filters and reserved control keys

        Returns:
            Parsed response with records and per-hit errors
        """
        request = self.build(**params)
        return self.executor.execute(request, self.registry)
