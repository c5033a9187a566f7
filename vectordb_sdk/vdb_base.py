# vectordb_sdk/vdb_base.py
# SPDX-License-Identifier: Apache-2.0
"""
VectorDB SDK - client contract

Purpose
-------
A typed, async client for a remote vector-search service that manages
databases, collections, aliases, indexes and documents over JSON/HTTP.

Every call is one round trip:

    Request:
        <METHOD> <base_url><path>
        Authorization: Bearer account=<account>&api_key=<key>
        Content-Type: application/json
        Sdk-Version: <SDK_VERSION>
        User-Agent: <SDK_ID>

        { "database": "...", "collection": "...", ... }

    Response (success):
        { "code": 0, "msg": "", ...operation payload... }

    Response (service failure):
        { "code": <non-zero int>, "msg": "<human readable>" }

This file provides:

- The normalized error taxonomy shared by every layer
- Transport configuration (`ClientOption`) and its default resolution
- The `SdkClient` protocol the scoped handles dispatch through
- Capability protocols per scope and the kind-gating decorator

Design Philosophy
-----------------
- Scope-carrying handles: root -> database -> collection; callers never repeat
  database/collection names.
- Local handles: obtaining a handle never touches the network.
- Single attempt: no retries or backoff; the caller owns resilience.
- Kind gating is local: an operation meant for an ordinary database fails on an
  AI database before anything is sent.

Deliberate Non-Goals
--------------------
- No interpretation of vectors, filters or embedding model settings
- No query planning or client-side ranking
- No retry, circuit breaking or caching
"""

from __future__ import annotations

import enum
import functools
import logging
from dataclasses import dataclass, replace
from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Callable,
    Dict,
    List,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    Type,
    TypeVar,
    runtime_checkable,
)

from vectordb_sdk.core.error_context import attach_context

if TYPE_CHECKING:  # pragma: no cover - typing only
    import httpx

    from vectordb_sdk.api import CommonResponse, WireRequest
    from vectordb_sdk.entity import (
        AICollectionInfo,
        AliasInfo,
        CollectionInfo,
        CreateAICollectionOption,
        CreateCollectionOption,
        DeleteAIDocumentOption,
        DeleteDocumentOption,
        Document,
        Indexes,
        MutationResult,
        QueryAIDocumentOption,
        QueryDocumentOption,
        QueryDocumentResult,
        RebuildIndexOption,
        RebuildIndexResult,
        SearchAIDocumentOption,
        SearchDocumentOption,
        UpdateDocumentOption,
        UpsertDocumentOption,
    )

SDK_VERSION = "1.0.0"
SDK_ID = "vectordb-sdk-python/1.0"
LOG = logging.getLogger(__name__)

R = TypeVar("R", bound="CommonResponse")
F = TypeVar("F", bound=Callable[..., Awaitable[Any]])

# =============================================================================
# Enumerations
# =============================================================================


class ReadConsistency(str, enum.Enum):
    """Read consistency requested for query and search calls."""

    EVENTUAL = "eventualConsistency"
    STRONG = "strongConsistency"


class DatabaseKind(str, enum.Enum):
    """
    Kind of a database scope.

    ORDINARY databases hold collections whose fields and vectors are defined by
    the caller. AI databases hold collections whose embeddings are produced by
    the service's own pipeline. The two capability sets do not overlap.
    """

    ORDINARY = "ordinary"
    AI = "ai"


# =============================================================================
# Normalized Errors
# =============================================================================


class VectorDBError(Exception):
    """
    Base exception for all SDK errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (UPPER_SNAKE_CASE)
        details: Additional JSON-serializable context (never credentials)
    """

    def __init__(
        self,
        message: str = "",
        *,
        code: Optional[str] = None,
        details: Optional[Mapping[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = dict(details or {})

    def asdict(self) -> Dict[str, Any]:
        """Convert error to dictionary for serialization and logging."""
        return {
            "error": type(self).__name__,
            "message": self.message,
            "code": self.code,
            "details": {k: self.details[k] for k in sorted(self.details)},
        }


# Subclasses set default `code` in UPPER_SNAKE_CASE where not explicitly provided.


class BadConfig(VectorDBError):
    """Client construction rejected: bad URL shape or missing credentials."""

    def __init__(self, message: str, **kwargs: Any):
        kwargs.setdefault("code", "BAD_CONFIG")
        super().__init__(message, **kwargs)


class TransportError(VectorDBError):
    """
    The HTTP exchange itself failed: connection error, timeout, or a status
    outside 200..299.

    Attributes:
        status: HTTP status code, None when no response was received
        body: Raw response body, None when no response was received
    """

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        body: Optional[str] = None,
        **kwargs: Any,
    ):
        kwargs.setdefault("code", "TRANSPORT_ERROR")
        super().__init__(message, **kwargs)
        self.status = status
        self.body = body


class RequestTimeout(TransportError):
    """The request did not complete within the configured timeout."""

    def __init__(self, message: str, **kwargs: Any):
        kwargs.setdefault("code", "DEADLINE_EXCEEDED")
        super().__init__(message, **kwargs)


class MalformedResponse(VectorDBError):
    """Response body is not valid JSON or does not fit the expected shape."""

    def __init__(self, message: str, **kwargs: Any):
        kwargs.setdefault("code", "MALFORMED_RESPONSE")
        super().__init__(message, **kwargs)


class ServiceError(VectorDBError):
    """
    The service answered with a non-zero envelope code.

    Attributes:
        service_code: The envelope `code`, verbatim
        message: The envelope `msg`, verbatim
    """

    def __init__(self, message: str, *, service_code: int, **kwargs: Any):
        kwargs.setdefault("code", "SERVICE_ERROR")
        details = dict(kwargs.pop("details", None) or {})
        details.setdefault("service_code", service_code)
        super().__init__(message, details=details, **kwargs)
        self.service_code = service_code

    def __str__(self) -> str:
        return f"code: {self.service_code}, message: {self.message}"


class CapabilityMismatch(VectorDBError):
    """An operation was invoked on a handle of the wrong database kind."""

    def __init__(
        self,
        message: str,
        *,
        required: DatabaseKind,
        actual: DatabaseKind,
        **kwargs: Any,
    ):
        kwargs.setdefault("code", "CAPABILITY_MISMATCH")
        details = dict(kwargs.pop("details", None) or {})
        details.setdefault("required", required.value)
        details.setdefault("actual", actual.value)
        super().__init__(message, details=details, **kwargs)
        self.required = required
        self.actual = actual


def is_not_exist_error(err: BaseException) -> bool:
    """
    True when `err` is the service's way of saying the target does not exist.

    The service reports this through the envelope message only, so the match
    is on the message text.
    """
    return isinstance(err, ServiceError) and "not exist" in (err.message or "").lower()


# =============================================================================
# Transport Configuration
# =============================================================================


@dataclass(frozen=True)
class ClientOption:
    """
    Transport options for a client. `None` (or zero) means "use the default".

    Attributes:
        timeout: Per-request timeout in seconds (default 5)
        max_idle_conns_per_host: Idle keep-alive connections kept in the pool (default 2)
        idle_conn_timeout: Seconds an idle connection is kept before recycling (default 60)
        read_consistency: Default consistency for query/search calls (default EVENTUAL)
        transport: Custom httpx transport; replaces the pooled default transport
    """

    timeout: Optional[float] = None
    max_idle_conns_per_host: Optional[int] = None
    idle_conn_timeout: Optional[float] = None
    read_consistency: Optional[ReadConsistency] = None
    transport: Optional["httpx.AsyncBaseTransport"] = None


DEFAULT_OPTION = ClientOption(
    timeout=5.0,
    max_idle_conns_per_host=2,
    idle_conn_timeout=60.0,
    read_consistency=ReadConsistency.EVENTUAL,
)


def resolve_option(option: Optional[ClientOption] = None) -> ClientOption:
    """
    Fill every unset field of `option` from `DEFAULT_OPTION`.

    Pure and total; resolving an already resolved option returns an equal value.
    """
    if option is None:
        return DEFAULT_OPTION
    return replace(
        option,
        timeout=option.timeout or DEFAULT_OPTION.timeout,
        max_idle_conns_per_host=option.max_idle_conns_per_host or DEFAULT_OPTION.max_idle_conns_per_host,
        idle_conn_timeout=option.idle_conn_timeout or DEFAULT_OPTION.idle_conn_timeout,
        read_consistency=option.read_consistency or DEFAULT_OPTION.read_consistency,
    )


# =============================================================================
# Metrics Interface (low-cardinality)
# =============================================================================


class MetricsSink(Protocol):
    """
    Protocol for metrics collection implementations.

    `op` is the operation kind (e.g. "document.upsert"); database and
    collection names are never reported.
    """

    def observe(
        self,
        *,
        component: str,
        op: str,
        ms: float,
        ok: bool,
        code: str = "OK",
        extra: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Record operation timing and status."""
        ...


class NoopMetrics:
    """No-operation metrics sink for testing or when metrics are disabled."""

    def observe(self, **_: Any) -> None: ...


# =============================================================================
# Dispatcher protocol
# =============================================================================


@runtime_checkable
class SdkClient(Protocol):
    """
    What scoped handles need from a dispatcher.

    `request` performs one round trip and returns the decoded response, or
    raises TransportError / MalformedResponse / ServiceError.
    """

    @property
    def options(self) -> ClientOption: ...

    async def request(self, req: "WireRequest", res_type: Type[R]) -> R: ...

    def set_timeout(self, seconds: Optional[float]) -> None: ...

    def set_debug(self, enabled: bool) -> None: ...

    async def close(self) -> None: ...


# =============================================================================
# Capability sets (one protocol per scope concern)
# =============================================================================


@runtime_checkable
class DatabaseOps(Protocol):
    """Root-scope database management."""

    async def create_database(self, name: str) -> "MutationResult": ...

    async def drop_database(self, name: str) -> "MutationResult": ...

    async def create_ai_database(self, name: str) -> "MutationResult": ...

    async def drop_ai_database(self, name: str) -> "MutationResult": ...

    async def list_databases(self) -> List[Any]: ...

    def database(self, name: str) -> Any: ...

    def ai_database(self, name: str) -> Any: ...


@runtime_checkable
class CollectionOps(Protocol):
    """Database-scope management of ordinary collections."""

    async def create_collection(
        self,
        name: str,
        shard_num: int,
        replica_num: int,
        description: str,
        indexes: "Indexes",
        option: Optional["CreateCollectionOption"] = None,
    ) -> "MutationResult": ...

    async def drop_collection(self, name: str) -> "MutationResult": ...

    async def truncate_collection(self, name: str) -> "MutationResult": ...

    async def list_collections(self) -> List["CollectionInfo"]: ...

    async def describe_collection(self, name: str) -> "CollectionInfo": ...

    def collection(self, name: str) -> Any: ...


@runtime_checkable
class AliasOps(Protocol):
    """Database-scope alias management (ordinary databases only)."""

    async def set_alias(self, collection: str, alias: str) -> "MutationResult": ...

    async def delete_alias(self, alias: str) -> "MutationResult": ...

    async def list_aliases(self) -> List["AliasInfo"]: ...

    async def describe_alias(self, alias: str) -> "AliasInfo": ...


@runtime_checkable
class IndexOps(Protocol):
    """Database-scope index maintenance (ordinary databases only)."""

    async def rebuild_index(
        self, collection: str, option: Optional["RebuildIndexOption"] = None
    ) -> "RebuildIndexResult": ...


@runtime_checkable
class AICollectionOps(Protocol):
    """Database-scope management of AI-managed collections."""

    async def create_ai_collection(
        self,
        name: str,
        description: str = "",
        option: Optional["CreateAICollectionOption"] = None,
    ) -> "MutationResult": ...

    async def drop_ai_collection(self, name: str) -> "MutationResult": ...

    async def truncate_ai_collection(self, name: str) -> "MutationResult": ...

    async def list_ai_collections(self) -> List["AICollectionInfo"]: ...

    async def describe_ai_collection(self, name: str) -> "AICollectionInfo": ...

    def ai_collection(self, name: str) -> Any: ...


@runtime_checkable
class DocumentOps(Protocol):
    """Collection-scope document operations (ordinary collections)."""

    async def upsert(
        self, documents: Sequence["Document"], option: Optional["UpsertDocumentOption"] = None
    ) -> "MutationResult": ...

    async def query(
        self, document_ids: Sequence[str], option: Optional["QueryDocumentOption"] = None
    ) -> "QueryDocumentResult": ...

    async def search(
        self, vectors: Sequence[Sequence[float]], option: Optional["SearchDocumentOption"] = None
    ) -> List[List["Document"]]: ...

    async def search_by_id(
        self, document_ids: Sequence[str], option: Optional["SearchDocumentOption"] = None
    ) -> List[List["Document"]]: ...

    async def search_by_text(
        self, texts: Sequence[str], option: Optional["SearchDocumentOption"] = None
    ) -> List[List["Document"]]: ...

    async def update(
        self, fields: Mapping[str, Any], option: Optional["UpdateDocumentOption"] = None
    ) -> "MutationResult": ...

    async def delete(
        self,
        document_ids: Optional[Sequence[str]] = None,
        option: Optional["DeleteDocumentOption"] = None,
    ) -> "MutationResult": ...


@runtime_checkable
class AIDocumentOps(Protocol):
    """Collection-scope document operations (AI collections)."""

    async def query(
        self,
        document_set_ids: Optional[Sequence[str]] = None,
        option: Optional["QueryAIDocumentOption"] = None,
    ) -> List[Dict[str, Any]]: ...

    async def search(
        self, content: str, option: Optional["SearchAIDocumentOption"] = None
    ) -> List[Dict[str, Any]]: ...

    async def delete(
        self,
        document_set_ids: Optional[Sequence[str]] = None,
        option: Optional["DeleteAIDocumentOption"] = None,
    ) -> "MutationResult": ...


# =============================================================================
# Capability gating
# =============================================================================


def requires_kind(kind: DatabaseKind) -> Callable[[F], F]:
    """
    Gate an async scope method on the database kind of its handle.

    The decorated method's instance must expose `_scope.kind` and
    `_scope.database`. On mismatch `CapabilityMismatch` is raised before the
    wrapped coroutine starts, so nothing reaches the dispatcher.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
            scope = self._scope
            if scope.kind is not kind:
                err = CapabilityMismatch(
                    f"{func.__name__} requires a {kind.value} database; "
                    f"database '{scope.database}' is {scope.kind.value}",
                    required=kind,
                    actual=scope.kind,
                    details={"operation": func.__name__},
                )
                attach_context(err, operation=func.__name__, database=scope.database, kind=scope.kind.value)
                raise err
            return await func(self, *args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator


async def scoped_request(
    sdk: SdkClient,
    req: "WireRequest",
    res_type: Type[R],
    *,
    operation: str,
    **scope: Any,
) -> R:
    """
    Dispatch `req` on behalf of a handle.

    SDK errors leave with the handle's scope (operation, database, collection)
    attached; see `vectordb_sdk.core.error_context`.
    """
    try:
        return await sdk.request(req, res_type)
    except VectorDBError as exc:
        attach_context(exc, operation=operation, **scope)
        raise


__all__ = [
    "SDK_VERSION",
    "SDK_ID",
    "ReadConsistency",
    "DatabaseKind",
    "VectorDBError",
    "BadConfig",
    "TransportError",
    "RequestTimeout",
    "MalformedResponse",
    "ServiceError",
    "CapabilityMismatch",
    "is_not_exist_error",
    "ClientOption",
    "DEFAULT_OPTION",
    "resolve_option",
    "MetricsSink",
    "NoopMetrics",
    "SdkClient",
    "DatabaseOps",
    "CollectionOps",
    "AliasOps",
    "IndexOps",
    "AICollectionOps",
    "DocumentOps",
    "AIDocumentOps",
    "requires_kind",
    "scoped_request",
]
