# vectordb_sdk/__init__.py
# SPDX-License-Identifier: Apache-2.0

"""
VectorDB SDK - Public API

Async client for a remote vector-search service. All public types and
handles are re-exported here for clean imports.
"""

from vectordb_sdk.vdb_base import (
    # Version
    SDK_VERSION,
    SDK_ID,

    # Enumerations
    ReadConsistency,
    DatabaseKind,

    # Error types
    VectorDBError,
    BadConfig,
    TransportError,
    RequestTimeout,
    MalformedResponse,
    ServiceError,
    CapabilityMismatch,
    is_not_exist_error,

    # Configuration
    ClientOption,
    DEFAULT_OPTION,
    resolve_option,

    # Metrics
    MetricsSink,
    NoopMetrics,

    # Protocols
    SdkClient,
    DatabaseOps,
    CollectionOps,
    AliasOps,
    IndexOps,
    AICollectionOps,
    DocumentOps,
    AIDocumentOps,
)
from vectordb_sdk.entity import (
    # Index definitions
    FieldType,
    IndexType,
    MetricType,
    HNSWParam,
    FilterIndex,
    VectorIndex,
    Embedding,
    Indexes,

    # Metadata
    CollectionInfo,
    AICollectionInfo,
    AliasInfo,

    # Documents and filters
    Document,
    Filter,

    # Options
    CreateCollectionOption,
    UpsertDocumentOption,
    QueryDocumentOption,
    SearchDocumentOption,
    UpdateDocumentOption,
    DeleteDocumentOption,
    RebuildIndexOption,
    CreateAICollectionOption,
    QueryAIDocumentOption,
    SearchAIDocumentOption,
    DeleteAIDocumentOption,

    # Results
    MutationResult,
    CreateDatabaseResult,
    CreateCollectionResult,
    RebuildIndexResult,
    QueryDocumentResult,
)
from vectordb_sdk.collection import AICollection, Collection
from vectordb_sdk.database import Database
from vectordb_sdk.client import HttpDispatcher, VectorDBClient

__version__ = SDK_VERSION

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
    "FieldType",
    "IndexType",
    "MetricType",
    "HNSWParam",
    "FilterIndex",
    "VectorIndex",
    "Embedding",
    "Indexes",
    "CollectionInfo",
    "AICollectionInfo",
    "AliasInfo",
    "Document",
    "Filter",
    "CreateCollectionOption",
    "UpsertDocumentOption",
    "QueryDocumentOption",
    "SearchDocumentOption",
    "UpdateDocumentOption",
    "DeleteDocumentOption",
    "RebuildIndexOption",
    "CreateAICollectionOption",
    "QueryAIDocumentOption",
    "SearchAIDocumentOption",
    "DeleteAIDocumentOption",
    "MutationResult",
    "CreateDatabaseResult",
    "CreateCollectionResult",
    "RebuildIndexResult",
    "QueryDocumentResult",
    "AICollection",
    "Collection",
    "Database",
    "HttpDispatcher",
    "VectorDBClient",
    "__version__",
]
