"""
Read-through caching for the slow-changing REST reads.

A `CachingResource` wraps an `SObjectResource` and serves describe,
metadata, version, resource list, SOQL and SOSL results from a key/value
store, calling through to the REST API only on a miss. Entries are JSON
written by pydantic and never expire or get invalidated here; eviction is
left to the store.
"""

import inspect
import logging
import threading
from functools import lru_cache, wraps
from typing import Any, Callable, Optional, Protocol, TypeVar, runtime_checkable

import redis
from pydantic import TypeAdapter

from .adapter import RestResponse
from .config import settings
from .resource import SObjectResource

logger = logging.getLogger(__name__)

R = TypeVar("R")


@runtime_checkable
class CacheStore(Protocol):
    """The three calls the cache wrapper makes on its backend."""

    def exists(self, key: str) -> bool: ...

    def read(self, key: str) -> bytes: ...

    def write(self, key: str, value: bytes) -> None: ...


class MemoryCacheStore:
    """Process-local store backed by a dict."""

    def __init__(self) -> None:
        self._entries: dict[str, bytes] = {}
        self._lock = threading.Lock()

    def exists(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def read(self, key: str) -> bytes:
        with self._lock:
            return self._entries[key]

    def write(self, key: str, value: bytes) -> None:
        with self._lock:
            self._entries[key] = value

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class RedisCacheStore:
    """Store backed by a `redis.Redis` client. Keys are written without a TTL."""

    def __init__(self, client: redis.Redis, key_prefix: str = ""):
        self.client = client
        self.key_prefix = key_prefix

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    def exists(self, key: str) -> bool:
        return bool(self.client.exists(self._key(key)))

    def read(self, key: str) -> bytes:
        value = self.client.get(self._key(key))
        if value is None:
            raise KeyError(key)
        return value

    def write(self, key: str, value: bytes) -> None:
        self.client.set(self._key(key), value)


@lru_cache
def get_cache_store() -> CacheStore:
    """
    Returns the cache store selected by ``settings.CACHE.BACKEND``.

    Cached, so every wrapper built from settings shares one store.
    """
    backend = settings.CACHE.BACKEND.lower()
    if backend == "redis":
        client = redis.Redis.from_url(settings.CACHE.REDIS_URL)
        logger.info(f"Using Redis cache store at {settings.CACHE.REDIS_URL}")
        return RedisCacheStore(client, key_prefix=settings.CACHE.KEY_PREFIX)
    if backend == "memory":
        logger.info("Using in-memory cache store")
        return MemoryCacheStore()
    raise ValueError(f"Unknown cache backend: {settings.CACHE.BACKEND}")


def build_cache_key(type_name: str, operation: str, *args: Any) -> str:
    """
    ``Account/describe`` for plain reads, ``Account/run_soql?<query>`` when
    the operation takes arguments.
    """
    key = f"{type_name}/{operation}"
    if args:
        key += "?" + "&".join(str(arg) for arg in args)
    return key


def read_through(
    operation: str, result_type: Any
) -> Callable[[Callable[..., R]], Callable[..., R]]:
    """
    A decorator factory for caching a read on a `CachingResource`.

    The wrapped method:
    1. Binds the arguments to the signature of the method, so positional
       and keyword calls share a key, and builds the key from the resource
       type, `operation` and the bound values.
    2. On a hit, decodes the stored JSON into `result_type` and returns it.
    3. On a miss, calls through, stores the JSON of the result and returns
       the result itself.

    Exceptions from the call are not cached. Concurrent misses on one key
    each call through and each overwrite the entry.

    Args:
        operation: The operation segment of the cache key.
        result_type: The type the stored JSON is decoded into.
    """
    type_adapter: TypeAdapter[Any] = TypeAdapter(result_type)

    def decorator(func: Callable[..., R]) -> Callable[..., R]:
        signature = inspect.signature(func)

        @wraps(func)
        def wrapper(self: "CachingResource", *args: Any, **kwargs: Any) -> R:
            bound = signature.bind(self, *args, **kwargs)
            bound.apply_defaults()
            # First bound value is self
            key_args = list(bound.arguments.values())[1:]
            key = build_cache_key(self.type_name, operation, *key_args)
            if self.store.exists(key):
                logger.debug(f"Cache hit: {key}")
                return type_adapter.validate_json(self.store.read(key))

            logger.debug(f"Cache miss: {key}")
            result = func(*bound.args, **bound.kwargs)
            self.store.write(key, type_adapter.dump_json(result))
            return result

        return wrapper

    return decorator


class CachingResource:
    """
    Cached reads over an `SObjectResource`.

    Writes and path helpers are passed straight to the wrapped resource.
    """

    def __init__(self, resource: SObjectResource, store: Optional[CacheStore] = None):
        self.resource = resource
        self.store = store if store is not None else get_cache_store()

    def __repr__(self) -> str:
        return f"CachingResource({self.type_name!r})"

    @property
    def type_name(self) -> str:
        return self.resource.type_name

    def element_path(self, id: str, query_options: Optional[Any] = None) -> str:
        return self.resource.element_path(id, query_options)

    def collection_path(self, query_options: Optional[Any] = None) -> str:
        return self.resource.collection_path(query_options)

    def save(self, attributes: Any) -> RestResponse:
        return self.resource.save(attributes)

    def delete(self, id: str) -> RestResponse:
        return self.resource.delete(id)

    def update(self, id: str, serialized_json: Any) -> RestResponse:
        return self.resource.update(id, serialized_json)

    @read_through("describe", str)
    def get_detail_info(self) -> str:
        return self.resource.get_detail_info()

    @read_through("meta_data", RestResponse)
    def get_meta_data(self) -> RestResponse:
        return self.resource.get_meta_data()

    @read_through("describe_global", RestResponse)
    def describe_global(self) -> RestResponse:
        return self.resource.describe_global()

    @read_through("list_available_resources", RestResponse)
    def list_available_resources(self) -> RestResponse:
        return self.resource.list_available_resources()

    @read_through("get_version", RestResponse)
    def get_version(self) -> RestResponse:
        return self.resource.get_version()

    @read_through("run_soql", RestResponse)
    def run_soql(self, query: str) -> RestResponse:
        return self.resource.run_soql(query)

    @read_through("run_sosl", RestResponse)
    def run_sosl(self, search: str) -> RestResponse:
        return self.resource.run_sosl(search)

    @read_through("find", RestResponse)
    def find(self, id: str) -> RestResponse:
        return self.resource.find(id)
