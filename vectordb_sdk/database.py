# vectordb_sdk/database.py
# SPDX-License-Identifier: Apache-2.0
"""
Database handle.

A `Database` is composed of one implementor per capability set:

    Database
      ├── collections     (CollectionOps,   ordinary databases)
      ├── aliases         (AliasOps,        ordinary databases)
      ├── indexes         (IndexOps,        ordinary databases)
      └── ai_collections  (AICollectionOps, AI databases)

All four share one frozen `DatabaseScope`. Each gated method checks the scope's
kind before it builds a request, so calling, say, `set_alias` on an AI database
raises `CapabilityMismatch` without any network traffic. The `Database` class
forwards the flat method surface to the implementors.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from vectordb_sdk.api import (
    AffectedResponse,
    AICollectionCreateReq,
    AICollectionDescribeReq,
    AICollectionDescribeRes,
    AICollectionDropReq,
    AICollectionListReq,
    AICollectionListRes,
    AICollectionTruncateReq,
    AliasDeleteReq,
    AliasDescribeReq,
    AliasDescribeRes,
    AliasListReq,
    AliasListRes,
    AliasSetReq,
    CollectionCreateReq,
    CollectionDescribeReq,
    CollectionDescribeRes,
    CollectionDropReq,
    CollectionListReq,
    CollectionListRes,
    CollectionTruncateReq,
    IndexRebuildReq,
    IndexRebuildRes,
    WireRequest,
)
from vectordb_sdk.collection import AICollection, Collection, CollectionScope
from vectordb_sdk.entity import (
    AICollectionInfo,
    AliasInfo,
    CollectionInfo,
    CreateAICollectionOption,
    CreateCollectionOption,
    CreateCollectionResult,
    Indexes,
    MutationResult,
    RebuildIndexOption,
    RebuildIndexResult,
)
from vectordb_sdk.vdb_base import (
    AICollectionOps,
    AliasOps,
    CollectionOps,
    DatabaseKind,
    IndexOps,
    SdkClient,
    ServiceError,
    is_not_exist_error,
    requires_kind,
    scoped_request,
)

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class DatabaseScope:
    """Dispatcher plus the database identity every request is stamped with."""

    sdk: SdkClient
    database: str
    kind: DatabaseKind


class _ScopedOps:
    def __init__(self, scope: DatabaseScope) -> None:
        self._scope = scope

    async def _call(self, req: WireRequest, res_type: type, *, operation: str, collection: Optional[str] = None) -> Any:
        scope = {"database": self._scope.database}
        if collection is not None:
            scope["collection"] = collection
        return await scoped_request(self._scope.sdk, req, res_type, operation=operation, **scope)

    async def _drop(self, req: WireRequest, *, operation: str, collection: Optional[str] = None) -> MutationResult:
        try:
            res = await self._call(req, AffectedResponse, operation=operation, collection=collection)
        except ServiceError as e:
            if not is_not_exist_error(e):
                raise
            LOG.debug("%s: target in %s does not exist, nothing to remove", operation, self._scope.database)
            return MutationResult(affected_count=0)
        return MutationResult(affected_count=res.affected_count)

    def _collection_scope(self, name: str) -> CollectionScope:
        return CollectionScope(
            sdk=self._scope.sdk,
            database=self._scope.database,
            collection=name,
            kind=self._scope.kind,
        )


# =============================================================================
# Capability implementors
# =============================================================================


class _CollectionOps(_ScopedOps):
    @requires_kind(DatabaseKind.ORDINARY)
    async def create_collection(
        self,
        name: str,
        shard_num: int,
        replica_num: int,
        description: str,
        indexes: Indexes,
        option: Optional[CreateCollectionOption] = None,
    ) -> CreateCollectionResult:
        option = option or CreateCollectionOption()
        req = CollectionCreateReq(
            database=self._scope.database,
            collection=name,
            shard_num=shard_num,
            replica_num=replica_num,
            description=description,
            indexes=indexes.to_wire(),
            embedding=option.embedding,
        )
        res = await self._call(req, AffectedResponse, operation="create_collection", collection=name)
        return CreateCollectionResult(
            affected_count=res.affected_count,
            collection=Collection(self._collection_scope(name)),
        )

    @requires_kind(DatabaseKind.ORDINARY)
    async def drop_collection(self, name: str) -> MutationResult:
        req = CollectionDropReq(database=self._scope.database, collection=name)
        return await self._drop(req, operation="drop_collection", collection=name)

    @requires_kind(DatabaseKind.ORDINARY)
    async def truncate_collection(self, name: str) -> MutationResult:
        req = CollectionTruncateReq(database=self._scope.database, collection=name)
        res = await self._call(req, AffectedResponse, operation="truncate_collection", collection=name)
        return MutationResult(affected_count=res.affected_count)

    @requires_kind(DatabaseKind.ORDINARY)
    async def list_collections(self) -> List[CollectionInfo]:
        req = CollectionListReq(database=self._scope.database)
        res: CollectionListRes = await self._call(req, CollectionListRes, operation="list_collections")
        return list(res.collections)

    @requires_kind(DatabaseKind.ORDINARY)
    async def describe_collection(self, name: str) -> CollectionInfo:
        req = CollectionDescribeReq(database=self._scope.database, collection=name)
        res: CollectionDescribeRes = await self._call(
            req, CollectionDescribeRes, operation="describe_collection", collection=name
        )
        return res.collection

    def collection(self, name: str) -> Collection:
        return Collection(self._collection_scope(name))


class _AliasOps(_ScopedOps):
    @requires_kind(DatabaseKind.ORDINARY)
    async def set_alias(self, collection: str, alias: str) -> MutationResult:
        req = AliasSetReq(database=self._scope.database, collection=collection, alias=alias)
        res = await self._call(req, AffectedResponse, operation="set_alias", collection=collection)
        return MutationResult(affected_count=res.affected_count)

    @requires_kind(DatabaseKind.ORDINARY)
    async def delete_alias(self, alias: str) -> MutationResult:
        req = AliasDeleteReq(database=self._scope.database, alias=alias)
        return await self._drop(req, operation="delete_alias")

    @requires_kind(DatabaseKind.ORDINARY)
    async def list_aliases(self) -> List[AliasInfo]:
        req = AliasListReq(database=self._scope.database)
        res: AliasListRes = await self._call(req, AliasListRes, operation="list_aliases")
        return list(res.aliases)

    @requires_kind(DatabaseKind.ORDINARY)
    async def describe_alias(self, alias: str) -> AliasInfo:
        req = AliasDescribeReq(database=self._scope.database, alias=alias)
        res: AliasDescribeRes = await self._call(req, AliasDescribeRes, operation="describe_alias")
        return res.alias


class _IndexOps(_ScopedOps):
    @requires_kind(DatabaseKind.ORDINARY)
    async def rebuild_index(self, collection: str, option: Optional[RebuildIndexOption] = None) -> RebuildIndexResult:
        option = option or RebuildIndexOption()
        req = IndexRebuildReq(
            database=self._scope.database,
            collection=collection,
            drop_before_rebuild=option.drop_before_rebuild,
            throttle=option.throttle,
        )
        res: IndexRebuildRes = await self._call(req, IndexRebuildRes, operation="rebuild_index", collection=collection)
        return RebuildIndexResult(affected_count=len(res.task_ids), task_ids=list(res.task_ids))


class _AICollectionOps(_ScopedOps):
    @requires_kind(DatabaseKind.AI)
    async def create_ai_collection(
        self,
        name: str,
        description: str = "",
        option: Optional[CreateAICollectionOption] = None,
    ) -> CreateCollectionResult:
        option = option or CreateAICollectionOption()
        indexes = None
        if option.indexes:
            indexes = [
                index.model_dump(by_alias=True, exclude_none=True, mode="json") for index in option.indexes
            ]
        req = AICollectionCreateReq(
            database=self._scope.database,
            collection=name,
            description=description,
            expected_file_num=option.expected_file_num,
            average_file_size=option.average_file_size,
            language=option.language,
            indexes=indexes,
        )
        res = await self._call(req, AffectedResponse, operation="create_ai_collection", collection=name)
        return CreateCollectionResult(
            affected_count=res.affected_count,
            collection=AICollection(self._collection_scope(name)),
        )

    @requires_kind(DatabaseKind.AI)
    async def drop_ai_collection(self, name: str) -> MutationResult:
        req = AICollectionDropReq(database=self._scope.database, collection=name)
        return await self._drop(req, operation="drop_ai_collection", collection=name)

    @requires_kind(DatabaseKind.AI)
    async def truncate_ai_collection(self, name: str) -> MutationResult:
        req = AICollectionTruncateReq(database=self._scope.database, collection=name)
        res = await self._call(req, AffectedResponse, operation="truncate_ai_collection", collection=name)
        return MutationResult(affected_count=res.affected_count)

    @requires_kind(DatabaseKind.AI)
    async def list_ai_collections(self) -> List[AICollectionInfo]:
        req = AICollectionListReq(database=self._scope.database)
        res: AICollectionListRes = await self._call(req, AICollectionListRes, operation="list_ai_collections")
        return list(res.collections)

    @requires_kind(DatabaseKind.AI)
    async def describe_ai_collection(self, name: str) -> AICollectionInfo:
        req = AICollectionDescribeReq(database=self._scope.database, collection=name)
        res: AICollectionDescribeRes = await self._call(
            req, AICollectionDescribeRes, operation="describe_ai_collection", collection=name
        )
        return res.collection

    def ai_collection(self, name: str) -> AICollection:
        return AICollection(self._collection_scope(name))


# =============================================================================
# Database handle
# =============================================================================


class Database:
    """
    Handle for one database. Construction is local; the database's existence
    is only checked by the service when an operation is dispatched.
    """

    def __init__(self, sdk: SdkClient, name: str, kind: DatabaseKind = DatabaseKind.ORDINARY) -> None:
        self._scope = DatabaseScope(sdk=sdk, database=name, kind=kind)
        self.collections: CollectionOps = _CollectionOps(self._scope)
        self.aliases: AliasOps = _AliasOps(self._scope)
        self.indexes: IndexOps = _IndexOps(self._scope)
        self.ai_collections: AICollectionOps = _AICollectionOps(self._scope)

    @property
    def name(self) -> str:
        return self._scope.database

    @property
    def kind(self) -> DatabaseKind:
        return self._scope.kind

    @property
    def is_ai(self) -> bool:
        return self._scope.kind is DatabaseKind.AI

    def __repr__(self) -> str:
        return f"Database(name={self.name!r}, kind={self.kind.value})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Database):
            return NotImplemented
        return (other.name, other.kind) == (self.name, self.kind)

    def __hash__(self) -> int:
        return hash((self.name, self.kind))

    # --- CollectionOps -------------------------------------------------------

    async def create_collection(
        self,
        name: str,
        shard_num: int,
        replica_num: int,
        description: str,
        indexes: Indexes,
        option: Optional[CreateCollectionOption] = None,
    ) -> CreateCollectionResult:
        return await self.collections.create_collection(name, shard_num, replica_num, description, indexes, option)

    async def drop_collection(self, name: str) -> MutationResult:
        return await self.collections.drop_collection(name)

    async def truncate_collection(self, name: str) -> MutationResult:
        return await self.collections.truncate_collection(name)

    async def list_collections(self) -> List[CollectionInfo]:
        return await self.collections.list_collections()

    async def describe_collection(self, name: str) -> CollectionInfo:
        return await self.collections.describe_collection(name)

    def collection(self, name: str) -> Collection:
        return self.collections.collection(name)

    # --- AliasOps ------------------------------------------------------------

    async def set_alias(self, collection: str, alias: str) -> MutationResult:
        return await self.aliases.set_alias(collection, alias)

    async def delete_alias(self, alias: str) -> MutationResult:
        return await self.aliases.delete_alias(alias)

    async def list_aliases(self) -> List[AliasInfo]:
        return await self.aliases.list_aliases()

    async def describe_alias(self, alias: str) -> AliasInfo:
        return await self.aliases.describe_alias(alias)

    # --- IndexOps ------------------------------------------------------------

    async def rebuild_index(self, collection: str, option: Optional[RebuildIndexOption] = None) -> RebuildIndexResult:
        return await self.indexes.rebuild_index(collection, option)

    # --- AICollectionOps -----------------------------------------------------

    async def create_ai_collection(
        self,
        name: str,
        description: str = "",
        option: Optional[CreateAICollectionOption] = None,
    ) -> CreateCollectionResult:
        return await self.ai_collections.create_ai_collection(name, description, option)

    async def drop_ai_collection(self, name: str) -> MutationResult:
        return await self.ai_collections.drop_ai_collection(name)

    async def truncate_ai_collection(self, name: str) -> MutationResult:
        return await self.ai_collections.truncate_ai_collection(name)

    async def list_ai_collections(self) -> List[AICollectionInfo]:
        return await self.ai_collections.list_ai_collections()

    async def describe_ai_collection(self, name: str) -> AICollectionInfo:
        return await self.ai_collections.describe_ai_collection(name)

    def ai_collection(self, name: str) -> AICollection:
        return self.ai_collections.ai_collection(name)


__all__ = [
    "Database",
    "DatabaseScope",
]
