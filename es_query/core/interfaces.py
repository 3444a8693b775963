"""
Abstract interfaces for the collaborators around the query builder.

These protocols define the contract that the record layer and the
transport client must satisfy to plug into request building and
response rehydration.
"""

from typing import Any, Mapping, Protocol


class IClassResolver(Protocol):
    """
    Resolve a rehydration discriminator to a record type.

    ``ClassRegistry`` implements this protocol; any plain callable taking a
    name and returning a type works as well.
    """

    def __call__(self, name: str) -> type:
        """
        Return the record type registered under ``name``.

        Args:
            name: Discriminator value read from the hit's ``_source``

        Returns:
            A record type, usually a ``SearchRecord`` subclass

        Raises:
            UnknownRecordClass: If nothing is registered under ``name``
        """
        ...


class ISearchClient(Protocol):
    """
    Submit a search request to the cluster.

    ``elasticsearch.Elasticsearch`` satisfies this protocol.
    """

    def search(self, **kwargs: Any) -> Mapping[str, Any]:
        """
        Execute a search.

        Args:
            **kwargs: ``index``, ``size``, ``from_``, ``ignore_unavailable``
                and the body sections (``query``, ``sort``, ``aggs``)

        Returns:
            Raw response envelope with format:
            {
                "hits": {"total": ..., "hits": [...]},
                "aggregations": {...},  # Optional
            }
        """
        ...
