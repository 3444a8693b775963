"""
Record class registry.

Maps rehydration discriminators to record types.
"""

from collections.abc import Mapping
from typing import Any, Dict, Iterable, Optional

from es_query.core.errors import UnknownRecordClass
from es_query.core.interfaces import IClassResolver


class ClassRegistry:
    """Explicit name -> record type lookup used during rehydration."""

    def __init__(self, record_types: Optional[Iterable[type]] = None):
        self._types: Dict[str, type] = {}
        for record_type in record_types or ():
            self.register(record_type)

    def register(self, record_type: type, name: Optional[str] = None) -> type:
        """
        Register ``record_type`` under ``name`` (its class name by default).

        Returns the type so the method can be used as a class decorator.
        """
        self._types[name or record_type.__name__] = record_type
        return record_type

    def resolve(self, name: str) -> type:
        try:
            return self._types[name]
        except (KeyError, TypeError) as e:
            raise UnknownRecordClass(name) from e

    def __call__(self, name: str) -> type:
        return self.resolve(name)

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __len__(self) -> int:
        return len(self._types)


def as_resolver(resolver: Any) -> IClassResolver:
    """
    Coerce a registry, mapping or callable into a resolver function.

    Raises:
        TypeError: If ``resolver`` cannot resolve names
    """
    if isinstance(resolver, Mapping):
        registry = ClassRegistry()
        for name, record_type in resolver.items():
            registry.register(record_type, name=name)
        return registry.resolve
    if callable(resolver):
        return resolver
    resolve = getattr(resolver, "resolve", None)
    if callable(resolve):
        return resolve
    raise TypeError(f"{type(resolver).__name__} cannot be used as a class resolver")
