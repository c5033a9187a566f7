# vectordb_sdk/client.py
# SPDX-License-Identifier: Apache-2.0
"""
HTTP dispatcher and root client.

`HttpDispatcher` owns the pooled `httpx.AsyncClient` and performs exactly one
round trip per call:

    typed request -> (method, path) from the route table -> JSON body
        -> HTTP -> status check -> JSON envelope -> code check -> typed response

Classification, in order:

    1. no response (connect error, timeout)  -> TransportError / RequestTimeout
    2. status outside 200..299               -> TransportError(status, body)
    3. body not a JSON object / envelope     -> MalformedResponse
    4. envelope code != 0                    -> ServiceError (payload not decoded)
    5. payload does not fit the result model -> MalformedResponse

`VectorDBClient` is the root handle. It owns the dispatcher; database and
collection handles derived from it share the dispatcher and never close it.
"""

from __future__ import annotations

import json
import logging
import os
import time
from dataclasses import replace
from typing import Any, List, Optional, Type

import httpx
from pydantic import ValidationError

from vectordb_sdk.api import (
    AffectedResponse,
    AIDatabaseCreateReq,
    AIDatabaseDropReq,
    CommonResponse,
    DatabaseCreateReq,
    DatabaseDropReq,
    DatabaseListReq,
    DatabaseListRes,
    WireRequest,
    route,
)
from vectordb_sdk.database import Database
from vectordb_sdk.entity import CreateDatabaseResult, MutationResult
from vectordb_sdk.vdb_base import (
    DEFAULT_OPTION,
    SDK_ID,
    SDK_VERSION,
    BadConfig,
    ClientOption,
    DatabaseKind,
    MalformedResponse,
    MetricsSink,
    NoopMetrics,
    R,
    RequestTimeout,
    SdkClient,
    ServiceError,
    TransportError,
    VectorDBError,
    is_not_exist_error,
    resolve_option,
    scoped_request,
)

LOG = logging.getLogger(__name__)

# dbType values the service uses for AI-managed databases
_AI_DB_TYPES = frozenset({"AI_DB", "AI_DOC"})


def _kind_of(db_type: Optional[str]) -> DatabaseKind:
    return DatabaseKind.AI if (db_type or "").upper() in _AI_DB_TYPES else DatabaseKind.ORDINARY


# =============================================================================
# Dispatcher
# =============================================================================


class HttpDispatcher:
    """
    Pooled JSON/HTTP dispatcher; implements `SdkClient`.

    Args:
        url: Service base URL; must start with "http"
        account: Account name used in the Authorization header
        api_key: API key used in the Authorization header
        option: Transport options; unset fields take defaults
        metrics: Metrics sink, `NoopMetrics` when omitted
    """

    _component = "vectordb_http"

    def __init__(
        self,
        url: str,
        account: str,
        api_key: str,
        option: Optional[ClientOption] = None,
        *,
        metrics: Optional[MetricsSink] = None,
    ) -> None:
        if not url or not url.startswith("http"):
            raise BadConfig(f"invalid url param with: {url!r}", details={"field": "url"})
        if not account:
            raise BadConfig("account param must not be empty", details={"field": "account"})
        if not api_key:
            raise BadConfig("api_key param must not be empty", details={"field": "api_key"})

        self._option = resolve_option(option)
        if self._option.timeout < 0:
            raise BadConfig(
                f"timeout must be positive, got {self._option.timeout!r}",
                details={"field": "timeout"},
            )
        self._metrics: MetricsSink = metrics or NoopMetrics()
        self._debug = False

        transport = self._option.transport or httpx.AsyncHTTPTransport(
            limits=httpx.Limits(
                max_keepalive_connections=self._option.max_idle_conns_per_host,
                keepalive_expiry=self._option.idle_conn_timeout,
            ),
        )
        self._client = httpx.AsyncClient(
            base_url=url.rstrip("/"),
            headers={
                "Authorization": f"Bearer account={account}&api_key={api_key}",
                "Content-Type": "application/json",
                "Sdk-Version": SDK_VERSION,
                "User-Agent": SDK_ID,
            },
            timeout=httpx.Timeout(self._option.timeout),
            transport=transport,
        )

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    @property
    def options(self) -> ClientOption:
        return self._option

    def set_timeout(self, seconds: Optional[float]) -> None:
        """
        Reconfigure the per-request timeout; applies to subsequent calls.

        Zero or None restores the default, as in `resolve_option`.
        """
        timeout = seconds or DEFAULT_OPTION.timeout
        if timeout < 0:
            raise BadConfig(f"timeout must be positive, got {seconds!r}", details={"field": "timeout"})
        self._option = replace(self._option, timeout=timeout)
        self._client.timeout = httpx.Timeout(timeout)

    def set_debug(self, enabled: bool) -> None:
        """Toggle request/response tracing at INFO on this module's logger."""
        self._debug = bool(enabled)

    async def close(self) -> None:
        """Release pooled connections."""
        await self._client.aclose()

    # ------------------------------------------------------------------ #
    # Round trip
    # ------------------------------------------------------------------ #

    def _record(self, op: str, t0: float, ok: bool, *, code: str = "OK") -> None:
        try:
            self._metrics.observe(
                component=self._component,
                op=op,
                ms=(time.monotonic() - t0) * 1000.0,
                ok=ok,
                code=code,
            )
        except Exception:  # noqa: BLE001
            LOG.debug("metrics sink failed for %s", op, exc_info=True)

    async def request(self, req: WireRequest, res_type: Type[R]) -> R:
        t0 = time.monotonic()
        op = req.op.value
        try:
            result = await self._round_trip(req, res_type)
        except VectorDBError as e:
            self._record(op, t0, False, code=e.code or type(e).__name__)
            raise
        self._record(op, t0, True)
        return result

    async def _round_trip(self, req: WireRequest, res_type: Type[R]) -> R:
        method, path = route(req.op)
        payload = req.to_wire()
        content = json.dumps(payload, ensure_ascii=False) if payload or method != "GET" else None

        if self._debug:
            LOG.info("vectordb request: %s %s %s", method, path, content or "")

        try:
            resp = await self._client.request(
                method,
                path,
                content=content.encode("utf-8") if content is not None else None,
            )
        except httpx.TimeoutException as e:
            raise RequestTimeout(
                f"{method} {path} timed out after {self._option.timeout}s",
                details={"path": path},
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {path} failed: {e}", details={"path": path}) from e

        body = resp.text
        if self._debug:
            LOG.info("vectordb response: %s %s -> %d %s", method, path, resp.status_code, body)

        if not 200 <= resp.status_code < 300:
            raise TransportError(
                f"response code is {resp.status_code}, {body}",
                status=resp.status_code,
                body=body,
                details={"path": path, "status": resp.status_code},
            )

        try:
            data = json.loads(body)
        except ValueError as e:
            raise MalformedResponse(
                f"response content is not json: {body!r}",
                details={"path": path},
            ) from e
        if not isinstance(data, dict):
            raise MalformedResponse(
                f"response content is not a json object: {body!r}",
                details={"path": path},
            )

        try:
            envelope = CommonResponse.model_validate(data)
        except ValidationError as e:
            raise MalformedResponse(f"response envelope is invalid: {e}", details={"path": path}) from e

        if envelope.code != 0:
            raise ServiceError(envelope.msg, service_code=envelope.code, details={"path": path})

        try:
            return res_type.model_validate(data)
        except ValidationError as e:
            raise MalformedResponse(
                f"response does not match {res_type.__name__}: {e}",
                details={"path": path},
            ) from e


# =============================================================================
# Root client
# =============================================================================


class VectorDBClient:
    """
    Root handle: database management plus the dispatcher lifecycle.

    Example:
        async with VectorDBClient("http://host:8100", "root", "key") as client:
            await client.create_database("dbtest1")
            db = client.database("dbtest1")
    """

    def __init__(
        self,
        url: str,
        account: str,
        api_key: str,
        option: Optional[ClientOption] = None,
        *,
        metrics: Optional[MetricsSink] = None,
    ) -> None:
        self._sdk: SdkClient = HttpDispatcher(url, account, api_key, option, metrics=metrics)

    @classmethod
    def from_sdk_client(cls, sdk: SdkClient) -> "VectorDBClient":
        """Build a root client on top of any `SdkClient` implementation."""
        if not isinstance(sdk, SdkClient):
            raise BadConfig(f"{type(sdk).__name__} does not implement SdkClient")
        client = cls.__new__(cls)
        client._sdk = sdk
        return client

    @classmethod
    def from_env(cls, option: Optional[ClientOption] = None, **kwargs: Any) -> "VectorDBClient":
        """
        Build a client from VECTORDB_URL, VECTORDB_ACCOUNT, VECTORDB_API_KEY and,
        optionally, VECTORDB_TIMEOUT (seconds). `option.timeout` takes precedence.
        """
        raw_timeout = os.getenv("VECTORDB_TIMEOUT")
        if raw_timeout and (option is None or not option.timeout):
            try:
                timeout = float(raw_timeout)
            except ValueError:
                raise BadConfig(
                    f"VECTORDB_TIMEOUT must be a number of seconds, got {raw_timeout!r}",
                    details={"field": "VECTORDB_TIMEOUT"},
                ) from None
            option = replace(option or ClientOption(), timeout=timeout)

        return cls(
            os.getenv("VECTORDB_URL") or "",
            os.getenv("VECTORDB_ACCOUNT") or "",
            os.getenv("VECTORDB_API_KEY") or "",
            option,
            **kwargs,
        )

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    @property
    def options(self) -> ClientOption:
        return self._sdk.options

    def set_timeout(self, seconds: Optional[float]) -> None:
        self._sdk.set_timeout(seconds)

    def set_debug(self, enabled: bool) -> None:
        self._sdk.set_debug(enabled)

    async def close(self) -> None:
        await self._sdk.close()

    async def __aenter__(self) -> "VectorDBClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ------------------------------------------------------------------ #
    # Handles
    # ------------------------------------------------------------------ #

    def database(self, name: str) -> Database:
        """Local handle for an ordinary database; no network call."""
        return Database(self._sdk, name, DatabaseKind.ORDINARY)

    def ai_database(self, name: str) -> Database:
        """Local handle for an AI database; no network call."""
        return Database(self._sdk, name, DatabaseKind.AI)

    # ------------------------------------------------------------------ #
    # DatabaseOps
    # ------------------------------------------------------------------ #

    async def _call(self, req: WireRequest, res_type: Type[R], *, operation: str, **scope: Any) -> R:
        return await scoped_request(self._sdk, req, res_type, operation=operation, **scope)

    async def _drop(self, req: WireRequest, *, operation: str, database: str) -> MutationResult:
        try:
            res = await self._call(req, AffectedResponse, operation=operation, database=database)
        except ServiceError as e:
            if not is_not_exist_error(e):
                raise
            LOG.debug("%s: database %r does not exist, nothing to drop", operation, database)
            return MutationResult(affected_count=0)
        return MutationResult(affected_count=res.affected_count)

    async def create_database(self, name: str) -> CreateDatabaseResult:
        res = await self._call(
            DatabaseCreateReq(database=name),
            AffectedResponse,
            operation="create_database",
            database=name,
        )
        return CreateDatabaseResult(affected_count=res.affected_count, database=self.database(name))

    async def drop_database(self, name: str) -> MutationResult:
        return await self._drop(DatabaseDropReq(database=name), operation="drop_database", database=name)

    async def create_ai_database(self, name: str) -> CreateDatabaseResult:
        res = await self._call(
            AIDatabaseCreateReq(database=name),
            AffectedResponse,
            operation="create_ai_database",
            database=name,
        )
        return CreateDatabaseResult(affected_count=res.affected_count, database=self.ai_database(name))

    async def drop_ai_database(self, name: str) -> MutationResult:
        return await self._drop(AIDatabaseDropReq(database=name), operation="drop_ai_database", database=name)

    async def list_databases(self) -> List[Database]:
        """All databases, in service order, each tagged with its kind."""
        res = await self._call(DatabaseListReq(), DatabaseListRes, operation="list_databases")
        handles: List[Database] = []
        for name in res.databases:
            info = res.info.get(name)
            handles.append(Database(self._sdk, name, _kind_of(info.db_type if info else None)))
        return handles


__all__ = [
    "HttpDispatcher",
    "VectorDBClient",
]
