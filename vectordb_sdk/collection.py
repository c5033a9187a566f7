# vectordb_sdk/collection.py
# SPDX-License-Identifier: Apache-2.0
"""
Collection handles: document operations for ordinary collections
(`Collection`) and AI-managed collections (`AICollection`).

Handles are local values. They stamp `database` / `collection` on every
request and inherit the database kind from the handle that created them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from vectordb_sdk.api import (
    AffectedResponse,
    AIDocumentDeleteReq,
    AIDocumentQueryReq,
    AIDocumentQueryRes,
    AIDocumentSearchReq,
    AIDocumentSearchRes,
    AIQueryCond,
    AISearchCond,
    DocumentDeleteReq,
    DocumentQueryReq,
    DocumentQueryRes,
    DocumentSearchReq,
    DocumentSearchRes,
    DocumentUpdateReq,
    DocumentUpsertReq,
    QueryCond,
    SearchCond,
    SearchParams,
    WireRequest,
)
from vectordb_sdk.entity import (
    DeleteAIDocumentOption,
    DeleteDocumentOption,
    Document,
    MutationResult,
    QueryAIDocumentOption,
    QueryDocumentOption,
    QueryDocumentResult,
    SearchAIDocumentOption,
    SearchDocumentOption,
    UpdateDocumentOption,
    UpsertDocumentOption,
    filter_cond,
)
from vectordb_sdk.vdb_base import (
    DatabaseKind,
    ReadConsistency,
    SdkClient,
    requires_kind,
    scoped_request,
)


@dataclass(frozen=True)
class CollectionScope:
    sdk: SdkClient
    database: str
    collection: str
    kind: DatabaseKind


def _ids(values: Optional[Sequence[str]]) -> Optional[List[str]]:
    return [str(v) for v in values] if values else None


def _fields(values: Optional[Sequence[str]]) -> Optional[List[str]]:
    return list(values) if values else None


class _CollectionHandle:
    def __init__(self, scope: CollectionScope) -> None:
        self._scope = scope

    @property
    def name(self) -> str:
        return self._scope.collection

    @property
    def database_name(self) -> str:
        return self._scope.database

    @property
    def kind(self) -> DatabaseKind:
        return self._scope.kind

    def __repr__(self) -> str:
        return f"{type(self).__name__}(database={self.database_name!r}, name={self.name!r})"

    async def _call(self, req: WireRequest, res_type: type, *, operation: str) -> Any:
        return await scoped_request(
            self._scope.sdk,
            req,
            res_type,
            operation=operation,
            database=self._scope.database,
            collection=self._scope.collection,
        )


# =============================================================================
# Ordinary collection
# =============================================================================


class Collection(_CollectionHandle):
    """Document operations on an ordinary collection."""

    def _consistency(self, override: Optional[ReadConsistency]) -> Optional[ReadConsistency]:
        return override or self._scope.sdk.options.read_consistency

    @requires_kind(DatabaseKind.ORDINARY)
    async def upsert(
        self, documents: Sequence[Document], option: Optional[UpsertDocumentOption] = None
    ) -> MutationResult:
        """Insert or replace `documents` (matched by id)."""
        option = option or UpsertDocumentOption()
        req = DocumentUpsertReq(
            database=self._scope.database,
            collection=self._scope.collection,
            build_index=option.build_index,
            documents=[doc.to_wire() for doc in documents],
        )
        res = await self._call(req, AffectedResponse, operation="upsert")
        return MutationResult(affected_count=res.affected_count)

    @requires_kind(DatabaseKind.ORDINARY)
    async def query(
        self, document_ids: Sequence[str], option: Optional[QueryDocumentOption] = None
    ) -> QueryDocumentResult:
        """
        Fetch documents by id, optionally narrowed by a filter.

        Ids that do not exist are simply absent from the result.
        """
        option = option or QueryDocumentOption()
        req = DocumentQueryReq(
            database=self._scope.database,
            collection=self._scope.collection,
            read_consistency=self._consistency(option.read_consistency),
            query=QueryCond(
                document_ids=_ids(document_ids),
                filter=filter_cond(option.filter),
                retrieve_vector=option.retrieve_vector,
                output_fields=_fields(option.output_fields),
                offset=option.offset,
                limit=option.limit,
            ),
        )
        res: DocumentQueryRes = await self._call(req, DocumentQueryRes, operation="query")
        return QueryDocumentResult(
            documents=[Document.from_wire(raw) for raw in res.documents],
            total=res.count,
        )

    async def _search(
        self,
        operation: str,
        option: Optional[SearchDocumentOption],
        **target: Any,
    ) -> List[List[Document]]:
        option = option or SearchDocumentOption()
        params = None
        if option.ef is not None or option.nprobe is not None or option.radius is not None:
            params = SearchParams(ef=option.ef, nprobe=option.nprobe, radius=option.radius)
        req = DocumentSearchReq(
            database=self._scope.database,
            collection=self._scope.collection,
            read_consistency=self._consistency(option.read_consistency),
            search=SearchCond(
                filter=filter_cond(option.filter),
                params=params,
                retrieve_vector=option.retrieve_vector,
                output_fields=_fields(option.output_fields),
                limit=option.limit,
                **target,
            ),
        )
        res: DocumentSearchRes = await self._call(req, DocumentSearchRes, operation=operation)
        return [[Document.from_wire(raw) for raw in hits] for hits in res.documents]

    @requires_kind(DatabaseKind.ORDINARY)
    async def search(
        self, vectors: Sequence[Sequence[float]], option: Optional[SearchDocumentOption] = None
    ) -> List[List[Document]]:
        """Nearest-neighbour search; one result list per query vector."""
        return await self._search(
            "search",
            option,
            vectors=[[float(x) for x in vector] for vector in vectors],
        )

    @requires_kind(DatabaseKind.ORDINARY)
    async def search_by_id(
        self, document_ids: Sequence[str], option: Optional[SearchDocumentOption] = None
    ) -> List[List[Document]]:
        """Search with the stored vectors of `document_ids` as queries."""
        return await self._search("search_by_id", option, document_ids=_ids(document_ids))

    @requires_kind(DatabaseKind.ORDINARY)
    async def search_by_text(
        self, texts: Sequence[str], option: Optional[SearchDocumentOption] = None
    ) -> List[List[Document]]:
        """Search with texts embedded by the collection's embedding model."""
        return await self._search("search_by_text", option, embedding_items=list(texts))

    @requires_kind(DatabaseKind.ORDINARY)
    async def update(
        self, fields: Mapping[str, Any], option: Optional[UpdateDocumentOption] = None
    ) -> MutationResult:
        """Set `fields` on the documents selected by `option` (ids and/or filter)."""
        option = option or UpdateDocumentOption()
        update: Dict[str, Any] = dict(fields)
        req = DocumentUpdateReq(
            database=self._scope.database,
            collection=self._scope.collection,
            query=QueryCond(
                document_ids=_ids(option.document_ids),
                filter=filter_cond(option.filter),
            ),
            update=update,
        )
        res = await self._call(req, AffectedResponse, operation="update")
        return MutationResult(affected_count=res.affected_count)

    @requires_kind(DatabaseKind.ORDINARY)
    async def delete(
        self,
        document_ids: Optional[Sequence[str]] = None,
        option: Optional[DeleteDocumentOption] = None,
    ) -> MutationResult:
        """Delete by id, by filter, or both. Missing ids are not an error."""
        option = option or DeleteDocumentOption()
        req = DocumentDeleteReq(
            database=self._scope.database,
            collection=self._scope.collection,
            query=QueryCond(
                document_ids=_ids(document_ids),
                filter=filter_cond(option.filter),
            ),
        )
        res = await self._call(req, AffectedResponse, operation="delete")
        return MutationResult(affected_count=res.affected_count)


# =============================================================================
# AI-managed collection
# =============================================================================


class AICollection(_CollectionHandle):
    """Document-set operations on an AI-managed collection."""

    @requires_kind(DatabaseKind.AI)
    async def query(
        self,
        document_set_ids: Optional[Sequence[str]] = None,
        option: Optional[QueryAIDocumentOption] = None,
    ) -> List[Dict[str, Any]]:
        option = option or QueryAIDocumentOption()
        req = AIDocumentQueryReq(
            database=self._scope.database,
            collection=self._scope.collection,
            query=AIQueryCond(
                document_set_id=_ids(document_set_ids),
                document_set_name=_fields(option.document_set_names),
                filter=filter_cond(option.filter),
                output_fields=_fields(option.output_fields),
                offset=option.offset,
                limit=option.limit,
            ),
        )
        res: AIDocumentQueryRes = await self._call(req, AIDocumentQueryRes, operation="ai_query")
        return list(res.documents)

    @requires_kind(DatabaseKind.AI)
    async def search(
        self, content: str, option: Optional[SearchAIDocumentOption] = None
    ) -> List[Dict[str, Any]]:
        """Semantic search over the collection's chunks; returns matching chunks."""
        option = option or SearchAIDocumentOption()
        options = {"chunkExpand": list(option.chunk_expand)} if option.chunk_expand else None
        req = AIDocumentSearchReq(
            database=self._scope.database,
            collection=self._scope.collection,
            search=AISearchCond(
                content=content,
                document_set_name=_fields(option.document_set_names),
                filter=filter_cond(option.filter),
                limit=option.limit,
                options=options,
            ),
        )
        res: AIDocumentSearchRes = await self._call(req, AIDocumentSearchRes, operation="ai_search")
        return list(res.documents)

    @requires_kind(DatabaseKind.AI)
    async def delete(
        self,
        document_set_ids: Optional[Sequence[str]] = None,
        option: Optional[DeleteAIDocumentOption] = None,
    ) -> MutationResult:
        option = option or DeleteAIDocumentOption()
        req = AIDocumentDeleteReq(
            database=self._scope.database,
            collection=self._scope.collection,
            query=AIQueryCond(
                document_set_id=_ids(document_set_ids),
                document_set_name=_fields(option.document_set_names),
                filter=filter_cond(option.filter),
            ),
        )
        res = await self._call(req, AffectedResponse, operation="ai_delete")
        return MutationResult(affected_count=res.affected_count)


__all__ = [
    "AICollection",
    "Collection",
    "CollectionScope",
]
