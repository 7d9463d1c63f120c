"""Read-through cache of identity-keyed entities.

Keys are normalized (lower-cased) by the manager before they reach ``ResourceCache``;
the mapping itself stores keys verbatim.
"""
import logging
from typing import Any, Callable, Generic, Iterable, Iterator, TypeVar

from managers.resolver import DataResolver
from utils.errors import ResolutionError
from utils.logging import get_logger

T = TypeVar("T")


class ResourceCache(Generic[T]):
    """Owned mapping of normalized id -> entity. ``set`` inserts or overwrites."""

    def __init__(self):
        self._items: dict[str, T] = {}

    def get(self, key: str) -> T | None:
        return self._items.get(key)

    def set(self, key: str, value: T) -> T:
        self._items[key] = value
        return value

    def delete(self, key: str) -> bool:
        return self._items.pop(key, None) is not None

    def clear(self) -> None:
        self._items.clear()

    def values(self) -> list[T]:
        return list(self._items.values())

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)


class CachedManager(Generic[T]):
    """Base class for managers that hand out cached entities of type ``holds``."""

    def __init__(
        self,
        client,
        holds: Callable[..., T],
        iterable: Iterable[dict[str, Any]] | None = None,
        logger: logging.Logger | None = None,
    ):
        self.client = client
        self.holds = holds
        self.cache: ResourceCache[T] = ResourceCache()
        self.resolver = DataResolver()
        self.logger = logger or get_logger(__name__)
        for data in iterable or ():
            self._add(data, id=self.resolve_key(data.get("id")))

    def resolve_key(self, value: Any) -> str:
        ident = self.resolver.resolve_id(value)
        if ident is None:
            raise ResolutionError(value)
        return ident.lower()

    def _add(self, data: dict[str, Any], cache: bool = True, *, id: str | None = None, extras: Iterable[Any] = ()) -> T:
        key = id if id is not None else self.resolve_key(data.get("id"))
        entity = self.holds(self.client, data, *extras)
        if cache:
            self.cache.set(key, entity)
        return entity
