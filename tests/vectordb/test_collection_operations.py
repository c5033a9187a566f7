# SPDX-License-Identifier: Apache-2.0
"""
VectorDB SDK - Collection management on a database handle.

Covers:
  • create / describe / list / truncate / drop of ordinary collections
  • index definitions and embedding configuration on the wire
  • scope stamping and error context
"""

import pytest

from tests.conftest import COLLECTION_NAME, DB_NAME, make_documents
from vectordb_sdk import (
    Collection,
    CollectionInfo,
    CreateCollectionOption,
    CreateCollectionResult,
    Embedding,
    FieldType,
    FilterIndex,
    HNSWParam,
    Indexes,
    IndexType,
    MetricType,
    ServiceError,
    VectorIndex,
)
from vectordb_sdk.core.error_context import get_context

pytestmark = pytest.mark.asyncio


def _indexes(dimension: int = 3) -> Indexes:
    return Indexes(
        vector_index=[
            VectorIndex(
                field_name="vector",
                dimension=dimension,
                index_type=IndexType.HNSW,
                metric_type=MetricType.COSINE,
                params=HNSWParam(m=16, ef_construction=200),
            )
        ],
        filter_index=[
            FilterIndex(field_name="id", field_type=FieldType.STRING, index_type=IndexType.PRIMARY),
            FilterIndex(field_name="page", field_type=FieldType.UINT64, index_type=IndexType.FILTER),
        ],
    )


async def test_create_then_describe_collection(database):
    """Verify describe reports the dimension and filter fields a collection was created with."""
    res = await database.create_collection(COLLECTION_NAME, 1, 0, "test collection", _indexes())

    assert isinstance(res, CreateCollectionResult)
    assert res.affected_count == 1
    assert isinstance(res.collection, Collection)
    assert res.collection.name == COLLECTION_NAME

    info = await database.describe_collection(COLLECTION_NAME)

    assert isinstance(info, CollectionInfo)
    assert info.database == DB_NAME
    assert info.collection == COLLECTION_NAME
    assert info.dimension == 3
    assert len(info.filter_indexes) == 2
    assert info.shard_num == 1
    assert info.replica_num == 0
    assert info.description == "test collection"


async def test_create_collection_wire_body(database, server):
    """Verify the create request carries scope, counts and camelCase index definitions."""
    await database.create_collection(COLLECTION_NAME, 2, 1, "desc", _indexes(dimension=768))

    body = server.calls[-1].body
    assert body["database"] == DB_NAME
    assert body["collection"] == COLLECTION_NAME
    assert body["shardNum"] == 2
    assert body["replicaNum"] == 1
    assert body["indexes"][0] == {
        "fieldName": "vector",
        "fieldType": "vector",
        "indexType": "hnsw",
        "dimension": 768,
        "metricType": "COSINE",
        "params": {"M": 16, "efConstruction": 200},
    }
    assert body["indexes"][1] == {"fieldName": "id", "fieldType": "string", "indexType": "primaryKey"}
    assert "embedding" not in body


async def test_create_collection_with_embedding(database, server):
    """Verify the embedding option is sent and echoed back by describe."""
    option = CreateCollectionOption(
        embedding=Embedding(field="text", vector_field="vector", model="bge-base-zh")
    )
    await database.create_collection(COLLECTION_NAME, 1, 0, "", _indexes(), option)

    assert server.calls[-1].body["embedding"] == {
        "field": "text",
        "vectorField": "vector",
        "model": "bge-base-zh",
        "status": "enabled",
    }
    info = await database.describe_collection(COLLECTION_NAME)
    assert info.embedding is not None
    assert info.embedding.model == "bge-base-zh"


async def test_create_collection_in_missing_database_fails(client):
    """Verify creating in a database the service does not know raises ServiceError."""
    with pytest.raises(ServiceError) as exc_info:
        await client.database("nope").create_collection(COLLECTION_NAME, 1, 0, "", _indexes())

    assert "not exist" in exc_info.value.message


async def test_list_collections(database):
    """Verify list returns every collection of the database."""
    assert await database.list_collections() == []

    await database.create_collection("c1", 1, 0, "", _indexes())
    await database.create_collection("c2", 1, 0, "", _indexes())

    infos = await database.list_collections()
    assert [i.collection for i in infos] == ["c1", "c2"]
    assert all(i.dimension == 3 for i in infos)


async def test_truncate_collection_removes_documents(database, collection):
    """Verify truncate reports the removed document count and leaves the collection empty."""
    await collection.upsert(make_documents())

    res = await database.truncate_collection(COLLECTION_NAME)

    assert res.affected_count == 3
    assert (await collection.query(["0001", "0002", "0003"])).documents == []
    assert (await database.describe_collection(COLLECTION_NAME)).document_count == 0


async def test_drop_collection_is_idempotent(database, collection):
    """Verify dropping twice yields one then zero affected, never an error."""
    first = await database.drop_collection(COLLECTION_NAME)
    second = await database.drop_collection(COLLECTION_NAME)

    assert first.affected_count == 1
    assert second.affected_count == 0
    assert await database.list_collections() == []


async def test_describe_missing_collection_carries_context(database):
    """Verify errors from handle operations name the operation and scope."""
    with pytest.raises(ServiceError) as exc_info:
        await database.describe_collection("nope")

    err = exc_info.value
    assert err.message == "collection not exist"
    ctx = get_context(err)
    assert ctx["operation"] == "describe_collection"
    assert ctx["database"] == DB_NAME
    assert ctx["collection"] == "nope"


async def test_describe_reports_aliases_and_document_count(database, collection):
    """Verify describe exposes alias names and the current document count."""
    await collection.upsert(make_documents())
    await database.set_alias(COLLECTION_NAME, "books")

    info = await database.describe_collection(COLLECTION_NAME)

    assert info.alias == ["books"]
    assert info.document_count == 3
    assert info.index_status is not None
    assert info.index_status.status == "ready"
