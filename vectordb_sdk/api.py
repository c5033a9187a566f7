# vectordb_sdk/api.py
# SPDX-License-Identifier: Apache-2.0
"""
Wire-level contract: operation routing table and request/response models.

Every request model declares the operation it performs (`op`). `route(op)`
maps that operation to a fixed `(method, path)` pair through a static table;
routing never looks at request data.

Every response model extends `CommonResponse`, the `{code, msg}` envelope the
service wraps around each payload. Keys are camelCase on the wire and
snake_case in Python.
"""

from __future__ import annotations

import enum
from types import MappingProxyType
from typing import Any, ClassVar, Dict, List, Mapping, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from vectordb_sdk.vdb_base import ReadConsistency

# =============================================================================
# Operation routing
# =============================================================================


class Op(str, enum.Enum):
    """Closed set of operations the service exposes."""

    DATABASE_CREATE = "database.create"
    DATABASE_DROP = "database.drop"
    DATABASE_LIST = "database.list"
    AI_DATABASE_CREATE = "ai_database.create"
    AI_DATABASE_DROP = "ai_database.drop"

    COLLECTION_CREATE = "collection.create"
    COLLECTION_DROP = "collection.drop"
    COLLECTION_LIST = "collection.list"
    COLLECTION_DESCRIBE = "collection.describe"
    COLLECTION_TRUNCATE = "collection.truncate"

    AI_COLLECTION_CREATE = "ai_collection.create"
    AI_COLLECTION_DROP = "ai_collection.drop"
    AI_COLLECTION_LIST = "ai_collection.list"
    AI_COLLECTION_DESCRIBE = "ai_collection.describe"
    AI_COLLECTION_TRUNCATE = "ai_collection.truncate"

    ALIAS_SET = "alias.set"
    ALIAS_DELETE = "alias.delete"
    ALIAS_LIST = "alias.list"
    ALIAS_DESCRIBE = "alias.describe"

    INDEX_REBUILD = "index.rebuild"

    DOCUMENT_UPSERT = "document.upsert"
    DOCUMENT_QUERY = "document.query"
    DOCUMENT_SEARCH = "document.search"
    DOCUMENT_UPDATE = "document.update"
    DOCUMENT_DELETE = "document.delete"

    AI_DOCUMENT_QUERY = "ai_document.query"
    AI_DOCUMENT_SEARCH = "ai_document.search"
    AI_DOCUMENT_DELETE = "ai_document.delete"


class Route(NamedTuple):
    method: str
    path: str


ROUTES: Mapping[Op, Route] = MappingProxyType({
    Op.DATABASE_CREATE: Route("POST", "/database/create"),
    Op.DATABASE_DROP: Route("POST", "/database/drop"),
    Op.DATABASE_LIST: Route("GET", "/database/list"),
    Op.AI_DATABASE_CREATE: Route("POST", "/ai/database/create"),
    Op.AI_DATABASE_DROP: Route("POST", "/ai/database/drop"),

    Op.COLLECTION_CREATE: Route("POST", "/collection/create"),
    Op.COLLECTION_DROP: Route("POST", "/collection/drop"),
    Op.COLLECTION_LIST: Route("POST", "/collection/list"),
    Op.COLLECTION_DESCRIBE: Route("POST", "/collection/describe"),
    Op.COLLECTION_TRUNCATE: Route("POST", "/collection/truncate"),

    Op.AI_COLLECTION_CREATE: Route("POST", "/ai/collection/create"),
    Op.AI_COLLECTION_DROP: Route("POST", "/ai/collection/drop"),
    Op.AI_COLLECTION_LIST: Route("POST", "/ai/collection/list"),
    Op.AI_COLLECTION_DESCRIBE: Route("POST", "/ai/collection/describe"),
    Op.AI_COLLECTION_TRUNCATE: Route("POST", "/ai/collection/truncate"),

    Op.ALIAS_SET: Route("POST", "/alias/set"),
    Op.ALIAS_DELETE: Route("POST", "/alias/delete"),
    Op.ALIAS_LIST: Route("POST", "/alias/list"),
    Op.ALIAS_DESCRIBE: Route("POST", "/alias/describe"),

    Op.INDEX_REBUILD: Route("POST", "/index/rebuild"),

    Op.DOCUMENT_UPSERT: Route("POST", "/document/upsert"),
    Op.DOCUMENT_QUERY: Route("POST", "/document/query"),
    Op.DOCUMENT_SEARCH: Route("POST", "/document/search"),
    Op.DOCUMENT_UPDATE: Route("POST", "/document/update"),
    Op.DOCUMENT_DELETE: Route("POST", "/document/delete"),

    Op.AI_DOCUMENT_QUERY: Route("POST", "/ai/document/query"),
    Op.AI_DOCUMENT_SEARCH: Route("POST", "/ai/document/search"),
    Op.AI_DOCUMENT_DELETE: Route("POST", "/ai/document/delete"),
})


def route(op: Op) -> Route:
    """Return the fixed (method, path) pair for `op`."""
    return ROUTES[op]


# =============================================================================
# Base models
# =============================================================================


class WireModel(BaseModel):
    """
    camelCase on the wire, snake_case in Python; unknown keys ignored.

    An explicit JSON `null` decodes to the field's default, so a `null`
    list, map, string or count reads the same as a missing key. Required
    fields still reject `null`.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @field_validator("*", mode="before")
    @classmethod
    def null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is not None or info.field_name is None:
            return value
        field = cls.model_fields[info.field_name]
        if field.is_required():
            return value
        return field.get_default(call_default_factory=True)


class WireRequest(WireModel):
    """A request body bound to one operation."""

    op: ClassVar[Op]

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class CommonResponse(WireModel):
    """
    Envelope every response carries.

    Attributes:
        code: 0 means success, anything else is a failure; `null` reads as 0
        msg: Human-readable cause on failure; `null` reads as ""
    """

    code: int = 0
    msg: str = ""


class AffectedResponse(CommonResponse):
    affected_count: int = 0


# =============================================================================
# Index and metadata shapes
# =============================================================================


class FieldType(str, enum.Enum):
    UINT64 = "uint64"
    STRING = "string"
    ARRAY = "array"
    VECTOR = "vector"


class IndexType(str, enum.Enum):
    FLAT = "flat"
    HNSW = "hnsw"
    IVF_FLAT = "ivf_flat"
    PRIMARY = "primaryKey"
    FILTER = "filter"


class MetricType(str, enum.Enum):
    L2 = "L2"
    IP = "IP"
    COSINE = "COSINE"


class HNSWParam(WireModel):
    """HNSW build parameters."""

    m: Optional[int] = Field(default=None, alias="M")
    ef_construction: Optional[int] = None


class FilterIndex(WireModel):
    """A scalar field the service indexes for filtering (or the primary key)."""

    field_name: str
    field_type: FieldType
    index_type: IndexType


class VectorIndex(FilterIndex):
    """The vector field of a collection."""

    field_type: FieldType = FieldType.VECTOR
    dimension: int
    metric_type: MetricType
    params: Optional[HNSWParam] = None


class IndexField(WireModel):
    """An index entry as reported by describe/list; every key optional."""

    field_name: str = ""
    field_type: Optional[str] = None
    index_type: Optional[str] = None
    dimension: Optional[int] = None
    metric_type: Optional[str] = None
    params: Optional[HNSWParam] = None
    indexed_count: Optional[int] = None


class Embedding(WireModel):
    """
    Server-side embedding of a text field into the vector field.

    Attributes:
        field: Source text field
        vector_field: Vector field the embedding is written to
        model: Model identifier, passed through verbatim
        status: "enabled" / "disabled"
    """

    field: str
    vector_field: str
    model: str
    status: Optional[str] = "enabled"


class IndexStatus(WireModel):
    status: str = ""
    start_time: Optional[str] = None


class CollectionInfo(WireModel):
    """Metadata of an ordinary collection."""

    database: str = ""
    collection: str = ""
    replica_num: Optional[int] = None
    shard_num: Optional[int] = None
    description: str = ""
    indexes: List[IndexField] = Field(default_factory=list)
    create_time: Optional[str] = None
    document_count: Optional[int] = None
    alias: List[str] = Field(default_factory=list)
    embedding: Optional[Embedding] = None
    index_status: Optional[IndexStatus] = None

    @property
    def vector_indexes(self) -> List[IndexField]:
        return [i for i in self.indexes if i.field_type == FieldType.VECTOR.value]

    @property
    def filter_indexes(self) -> List[IndexField]:
        return [i for i in self.indexes if i.field_type != FieldType.VECTOR.value]

    @property
    def dimension(self) -> Optional[int]:
        """Dimension of the (first) vector index, None if there is none."""
        vectors = self.vector_indexes
        return vectors[0].dimension if vectors else None


class AICollectionInfo(WireModel):
    """Metadata of an AI-managed collection."""

    database: str = ""
    collection: str = ""
    description: str = ""
    expected_file_num: Optional[int] = None
    average_file_size: Optional[int] = None
    language: Optional[str] = None
    document_count: Optional[int] = None
    create_time: Optional[str] = None
    alias: List[str] = Field(default_factory=list)
    indexes: List[IndexField] = Field(default_factory=list)


class AliasInfo(WireModel):
    alias: str
    collection: str


class DatabaseInfo(WireModel):
    create_time: Optional[str] = None
    db_type: Optional[str] = None


# =============================================================================
# Database
# =============================================================================


class DatabaseCreateReq(WireRequest):
    op: ClassVar[Op] = Op.DATABASE_CREATE
    database: str


class DatabaseDropReq(WireRequest):
    op: ClassVar[Op] = Op.DATABASE_DROP
    database: str


class DatabaseListReq(WireRequest):
    op: ClassVar[Op] = Op.DATABASE_LIST


class AIDatabaseCreateReq(WireRequest):
    op: ClassVar[Op] = Op.AI_DATABASE_CREATE
    database: str


class AIDatabaseDropReq(WireRequest):
    op: ClassVar[Op] = Op.AI_DATABASE_DROP
    database: str


class DatabaseListRes(CommonResponse):
    databases: List[str] = Field(default_factory=list)
    info: Dict[str, DatabaseInfo] = Field(default_factory=dict)


# =============================================================================
# Collection (ordinary and AI)
# =============================================================================


class CollectionCreateReq(WireRequest):
    op: ClassVar[Op] = Op.COLLECTION_CREATE
    database: str
    collection: str
    replica_num: int
    shard_num: int
    description: str = ""
    indexes: List[Dict[str, Any]] = Field(default_factory=list)
    embedding: Optional[Embedding] = None


class CollectionDropReq(WireRequest):
    op: ClassVar[Op] = Op.COLLECTION_DROP
    database: str
    collection: str


class CollectionTruncateReq(WireRequest):
    op: ClassVar[Op] = Op.COLLECTION_TRUNCATE
    database: str
    collection: str


class CollectionDescribeReq(WireRequest):
    op: ClassVar[Op] = Op.COLLECTION_DESCRIBE
    database: str
    collection: str


class CollectionListReq(WireRequest):
    op: ClassVar[Op] = Op.COLLECTION_LIST
    database: str


class CollectionDescribeRes(CommonResponse):
    collection: CollectionInfo


class CollectionListRes(CommonResponse):
    collections: List[CollectionInfo] = Field(default_factory=list)


class AICollectionCreateReq(WireRequest):
    op: ClassVar[Op] = Op.AI_COLLECTION_CREATE
    database: str
    collection: str
    description: str = ""
    expected_file_num: Optional[int] = None
    average_file_size: Optional[int] = None
    language: Optional[str] = None
    indexes: Optional[List[Dict[str, Any]]] = None


class AICollectionDropReq(WireRequest):
    op: ClassVar[Op] = Op.AI_COLLECTION_DROP
    database: str
    collection: str


class AICollectionTruncateReq(WireRequest):
    op: ClassVar[Op] = Op.AI_COLLECTION_TRUNCATE
    database: str
    collection: str


class AICollectionDescribeReq(WireRequest):
    op: ClassVar[Op] = Op.AI_COLLECTION_DESCRIBE
    database: str
    collection: str


class AICollectionListReq(WireRequest):
    op: ClassVar[Op] = Op.AI_COLLECTION_LIST
    database: str


class AICollectionDescribeRes(CommonResponse):
    collection: AICollectionInfo


class AICollectionListRes(CommonResponse):
    collections: List[AICollectionInfo] = Field(default_factory=list)


# =============================================================================
# Alias and index
# =============================================================================


class AliasSetReq(WireRequest):
    op: ClassVar[Op] = Op.ALIAS_SET
    database: str
    collection: str
    alias: str


class AliasDeleteReq(WireRequest):
    op: ClassVar[Op] = Op.ALIAS_DELETE
    database: str
    alias: str


class AliasListReq(WireRequest):
    op: ClassVar[Op] = Op.ALIAS_LIST
    database: str


class AliasDescribeReq(WireRequest):
    op: ClassVar[Op] = Op.ALIAS_DESCRIBE
    database: str
    alias: str


class AliasListRes(CommonResponse):
    aliases: List[AliasInfo] = Field(default_factory=list)


class AliasDescribeRes(CommonResponse):
    alias: AliasInfo


class IndexRebuildReq(WireRequest):
    op: ClassVar[Op] = Op.INDEX_REBUILD
    database: str
    collection: str
    drop_before_rebuild: Optional[bool] = None
    throttle: Optional[int] = None


class IndexRebuildRes(CommonResponse):
    task_ids: List[str] = Field(default_factory=list)


# =============================================================================
# Documents
# =============================================================================


class QueryCond(WireModel):
    document_ids: Optional[List[str]] = None
    filter: Optional[str] = None
    retrieve_vector: Optional[bool] = None
    output_fields: Optional[List[str]] = None
    offset: Optional[int] = None
    limit: Optional[int] = None


class SearchParams(WireModel):
    ef: Optional[int] = None
    nprobe: Optional[int] = None
    radius: Optional[float] = None


class SearchCond(WireModel):
    vectors: Optional[List[List[float]]] = None
    document_ids: Optional[List[str]] = None
    embedding_items: Optional[List[str]] = None
    filter: Optional[str] = None
    params: Optional[SearchParams] = None
    retrieve_vector: Optional[bool] = None
    output_fields: Optional[List[str]] = None
    limit: Optional[int] = None


class DocumentUpsertReq(WireRequest):
    op: ClassVar[Op] = Op.DOCUMENT_UPSERT
    database: str
    collection: str
    build_index: Optional[bool] = None
    documents: List[Dict[str, Any]]


class DocumentQueryReq(WireRequest):
    op: ClassVar[Op] = Op.DOCUMENT_QUERY
    database: str
    collection: str
    read_consistency: Optional[ReadConsistency] = None
    query: QueryCond


class DocumentQueryRes(CommonResponse):
    count: int = 0
    documents: List[Dict[str, Any]] = Field(default_factory=list)


class DocumentSearchReq(WireRequest):
    op: ClassVar[Op] = Op.DOCUMENT_SEARCH
    database: str
    collection: str
    read_consistency: Optional[ReadConsistency] = None
    search: SearchCond


class DocumentSearchRes(CommonResponse):
    documents: List[List[Dict[str, Any]]] = Field(default_factory=list)


class DocumentUpdateReq(WireRequest):
    op: ClassVar[Op] = Op.DOCUMENT_UPDATE
    database: str
    collection: str
    query: QueryCond
    update: Dict[str, Any]


class DocumentDeleteReq(WireRequest):
    op: ClassVar[Op] = Op.DOCUMENT_DELETE
    database: str
    collection: str
    query: QueryCond


class AIQueryCond(WireModel):
    document_set_id: Optional[List[str]] = None
    document_set_name: Optional[List[str]] = None
    filter: Optional[str] = None
    output_fields: Optional[List[str]] = None
    offset: Optional[int] = None
    limit: Optional[int] = None


class AISearchCond(WireModel):
    content: str
    document_set_name: Optional[List[str]] = None
    filter: Optional[str] = None
    limit: Optional[int] = None
    options: Optional[Dict[str, Any]] = None


class AIDocumentQueryReq(WireRequest):
    op: ClassVar[Op] = Op.AI_DOCUMENT_QUERY
    database: str
    collection: str
    query: AIQueryCond


class AIDocumentQueryRes(CommonResponse):
    count: int = 0
    documents: List[Dict[str, Any]] = Field(default_factory=list)


class AIDocumentSearchReq(WireRequest):
    op: ClassVar[Op] = Op.AI_DOCUMENT_SEARCH
    database: str
    collection: str
    search: AISearchCond


class AIDocumentSearchRes(CommonResponse):
    documents: List[Dict[str, Any]] = Field(default_factory=list)


class AIDocumentDeleteReq(WireRequest):
    op: ClassVar[Op] = Op.AI_DOCUMENT_DELETE
    database: str
    collection: str
    query: AIQueryCond
