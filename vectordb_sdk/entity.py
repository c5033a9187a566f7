# vectordb_sdk/entity.py
# SPDX-License-Identifier: Apache-2.0
"""
Public value types: index definitions, documents, the filter builder,
per-operation option structs and operation results.

Option structs enumerate every option an operation accepts. Each field
defaults to None, meaning "not set": the field is left out of the request and
the service default applies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from vectordb_sdk.api import (
    AICollectionInfo,
    AliasInfo,
    CollectionInfo,
    Embedding,
    FieldType,
    FilterIndex,
    HNSWParam,
    IndexField,
    IndexType,
    MetricType,
    VectorIndex,
)
from vectordb_sdk.vdb_base import ReadConsistency

# =============================================================================
# Index definitions
# =============================================================================


@dataclass
class Indexes:
    """
    Index layout of a new collection.

    Attributes:
        vector_index: Vector fields (normally exactly one)
        filter_index: Scalar fields, including the primary key field `id`
    """

    vector_index: List[VectorIndex] = field(default_factory=list)
    filter_index: List[FilterIndex] = field(default_factory=list)

    def to_wire(self) -> List[Dict[str, Any]]:
        return [
            index.model_dump(by_alias=True, exclude_none=True, mode="json")
            for index in [*self.vector_index, *self.filter_index]
        ]


# =============================================================================
# Documents
# =============================================================================


@dataclass
class Document:
    """
    A stored document.

    Attributes:
        id: Primary key
        vector: Embedding; None when not requested or not yet computed
        score: Similarity score, only set on search results
        fields: Scalar fields, keyed by field name
    """

    id: str
    vector: Optional[List[float]] = None
    score: Optional[float] = None
    fields: Dict[str, Any] = field(default_factory=dict)

    def to_wire(self) -> Dict[str, Any]:
        body: Dict[str, Any] = dict(self.fields)
        body["id"] = self.id
        if self.vector is not None:
            body["vector"] = [float(x) for x in self.vector]
        return body

    @classmethod
    def from_wire(cls, raw: Mapping[str, Any]) -> "Document":
        body = dict(raw)
        vector = body.pop("vector", None)
        score = body.pop("score", None)
        return cls(
            id=str(body.pop("id", "")),
            vector=list(vector) if vector is not None else None,
            score=float(score) if score is not None else None,
            fields=body,
        )


def _quote(value: Any) -> str:
    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return str(value)


class Filter:
    """
    Builder for the service's filter expressions.

    The expression is passed through verbatim; the client never parses it.

        Filter("page > 22").and_(Filter.in_("author", ["max", "sam"]))
        # page > 22 and author in ("max","sam")

    Builders return new instances.
    """

    def __init__(self, cond: str = "") -> None:
        self._cond = cond.strip()

    @property
    def cond(self) -> str:
        return self._cond

    def _join(self, op: str, other: Union[str, "Filter"]) -> "Filter":
        rhs = str(other).strip()
        if not rhs:
            return Filter(self._cond)
        if not self._cond:
            return Filter(rhs if op in ("and", "or") else f"not {rhs}")
        return Filter(f"{self._cond} {op} {rhs}")

    def and_(self, cond: Union[str, "Filter"]) -> "Filter":
        return self._join("and", cond)

    def or_(self, cond: Union[str, "Filter"]) -> "Filter":
        return self._join("or", cond)

    def and_not(self, cond: Union[str, "Filter"]) -> "Filter":
        return self._join("and not", cond)

    def or_not(self, cond: Union[str, "Filter"]) -> "Filter":
        return self._join("or not", cond)

    @staticmethod
    def in_(key: str, values: Sequence[Any]) -> str:
        return f"{key} in ({','.join(_quote(v) for v in values)})"

    @staticmethod
    def exclude(key: str, values: Sequence[Any]) -> str:
        return f"{key} exclude ({','.join(_quote(v) for v in values)})"

    def __str__(self) -> str:
        return self._cond

    def __repr__(self) -> str:
        return f"Filter({self._cond!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Filter) and other._cond == self._cond

    def __hash__(self) -> int:
        return hash(self._cond)


FilterLike = Union[str, Filter]


def filter_cond(flt: Optional[FilterLike]) -> Optional[str]:
    """Render a filter for the wire; empty filters are left out."""
    if flt is None:
        return None
    cond = str(flt).strip()
    return cond or None


# =============================================================================
# Per-operation options
# =============================================================================


@dataclass(frozen=True)
class CreateCollectionOption:
    """
    Attributes:
        embedding: Let the service embed a text field into the vector field
    """

    embedding: Optional[Embedding] = None


@dataclass(frozen=True)
class UpsertDocumentOption:
    """
    Attributes:
        build_index: Index the documents as part of the upsert (service default: True)
    """

    build_index: Optional[bool] = None


@dataclass(frozen=True)
class QueryDocumentOption:
    """
    Attributes:
        filter: Filter expression applied on top of the ids
        retrieve_vector: Return stored vectors
        output_fields: Restrict returned scalar fields
        offset: Skip this many matches
        limit: Return at most this many documents
        read_consistency: Overrides the client default
    """

    filter: Optional[FilterLike] = None
    retrieve_vector: Optional[bool] = None
    output_fields: Optional[Sequence[str]] = None
    offset: Optional[int] = None
    limit: Optional[int] = None
    read_consistency: Optional[ReadConsistency] = None


@dataclass(frozen=True)
class SearchDocumentOption:
    """
    Attributes:
        filter: Filter expression applied before ranking
        ef: HNSW search breadth
        nprobe: IVF probe count
        radius: Distance cut-off
        retrieve_vector: Return stored vectors
        output_fields: Restrict returned scalar fields
        limit: Top-k per query vector
        read_consistency: Overrides the client default
    """

    filter: Optional[FilterLike] = None
    ef: Optional[int] = None
    nprobe: Optional[int] = None
    radius: Optional[float] = None
    retrieve_vector: Optional[bool] = None
    output_fields: Optional[Sequence[str]] = None
    limit: Optional[int] = None
    read_consistency: Optional[ReadConsistency] = None


@dataclass(frozen=True)
class UpdateDocumentOption:
    """Selects the documents an update applies to: by id, by filter, or both."""

    document_ids: Optional[Sequence[str]] = None
    filter: Optional[FilterLike] = None


@dataclass(frozen=True)
class DeleteDocumentOption:
    filter: Optional[FilterLike] = None


@dataclass(frozen=True)
class RebuildIndexOption:
    """
    Attributes:
        drop_before_rebuild: Drop the existing index first (queries fail until rebuilt)
        throttle: Per-node CPU cores the rebuild may use
    """

    drop_before_rebuild: Optional[bool] = None
    throttle: Optional[int] = None


@dataclass(frozen=True)
class CreateAICollectionOption:
    expected_file_num: Optional[int] = None
    average_file_size: Optional[int] = None
    language: Optional[str] = None
    indexes: Optional[Sequence[FilterIndex]] = None


@dataclass(frozen=True)
class QueryAIDocumentOption:
    document_set_names: Optional[Sequence[str]] = None
    filter: Optional[FilterLike] = None
    output_fields: Optional[Sequence[str]] = None
    offset: Optional[int] = None
    limit: Optional[int] = None


@dataclass(frozen=True)
class SearchAIDocumentOption:
    """
    Attributes:
        document_set_names: Restrict the search to these document sets
        filter: Filter expression on document set metadata
        limit: Number of chunks returned
        chunk_expand: Neighbouring chunks to include, as [before, after]
    """

    document_set_names: Optional[Sequence[str]] = None
    filter: Optional[FilterLike] = None
    limit: Optional[int] = None
    chunk_expand: Optional[Sequence[int]] = None


@dataclass(frozen=True)
class DeleteAIDocumentOption:
    document_set_names: Optional[Sequence[str]] = None
    filter: Optional[FilterLike] = None


# =============================================================================
# Operation Results
# =============================================================================


@dataclass
class MutationResult:
    """
    Result of any mutating operation.

    Attributes:
        affected_count: Entities actually changed; 0 when nothing changed
    """

    affected_count: int = 0


@dataclass
class CreateDatabaseResult(MutationResult):
    """Carries a handle for the new database (a `Database`)."""

    database: Any = None


@dataclass
class CreateCollectionResult(MutationResult):
    """Carries a handle for the new collection (`Collection` or `AICollection`)."""

    collection: Any = None


@dataclass
class RebuildIndexResult(MutationResult):
    """
    Attributes:
        task_ids: Rebuild tasks started by the service; affected_count is their number
    """

    task_ids: List[str] = field(default_factory=list)


@dataclass
class QueryDocumentResult:
    """
    Attributes:
        documents: Matching documents, in service order
        total: Total matches reported by the service (before offset/limit)
    """

    documents: List[Document] = field(default_factory=list)
    total: int = 0


__all__ = [
    "AICollectionInfo",
    "AliasInfo",
    "CollectionInfo",
    "Embedding",
    "FieldType",
    "FilterIndex",
    "HNSWParam",
    "IndexField",
    "IndexType",
    "MetricType",
    "VectorIndex",
    "Indexes",
    "Document",
    "Filter",
    "FilterLike",
    "filter_cond",
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
]
