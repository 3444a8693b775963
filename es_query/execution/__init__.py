"""Search execution and response rehydration."""

from es_query.execution.registry import ClassRegistry, as_resolver
from es_query.execution.response import SearchResponse, rehydrate
from es_query.execution.executor import ESSearchExecutor

__all__ = ["ClassRegistry", "as_resolver", "SearchResponse", "rehydrate", "ESSearchExecutor"]
