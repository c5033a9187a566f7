# SPDX-License-Identifier: Apache-2.0
"""
Shared fixtures for the vectordb_sdk test suite.

Every client built here talks to `MockVectorDBServer` through
`httpx.MockTransport`; no sockets are opened. Fixtures that return handles
(`database`, `collection`, `ai_database`) pre-create the remote state the
way the service would after the corresponding create calls.
"""

from __future__ import annotations

from typing import List

import pytest

from tests.mock.mock_vectordb_server import (
    ACCOUNT,
    API_KEY,
    BASE_URL,
    MockVectorDBServer,
    _AICollection,
    _Collection,
    _Database,
)
from vectordb_sdk import (
    ClientOption,
    Database,
    Document,
    VectorDBClient,
)

DB_NAME = "dbtest1"
COLLECTION_NAME = "col1"
AI_DB_NAME = "aidb1"
AI_COLLECTION_NAME = "aicol1"

VECTOR_INDEX = {
    "fieldName": "vector",
    "fieldType": "vector",
    "indexType": "hnsw",
    "dimension": 3,
    "metricType": "COSINE",
    "params": {"M": 16, "efConstruction": 200},
}
FILTER_INDEXES = [
    {"fieldName": "id", "fieldType": "string", "indexType": "primaryKey"},
    {"fieldName": "page", "fieldType": "uint64", "indexType": "filter"},
]


class RecordingMetrics:
    """MetricsSink that keeps every observation."""

    def __init__(self) -> None:
        self.observations: List[dict] = []

    def observe(self, **kwargs) -> None:
        self.observations.append(kwargs)


def make_documents() -> List[Document]:
    return [
        Document(id="0001", vector=[0.2123, 0.21, 0.213], fields={"author": "max", "page": 21, "section": "I"}),
        Document(id="0002", vector=[0.2123, 0.22, 0.213], fields={"author": "sam", "page": 22, "section": "II"}),
        Document(id="0003", vector=[0.2123, 0.23, 0.213], fields={"author": "max", "page": 23, "section": "III"}),
    ]


@pytest.fixture
def server() -> MockVectorDBServer:
    return MockVectorDBServer()


@pytest.fixture
def metrics() -> RecordingMetrics:
    return RecordingMetrics()


@pytest.fixture
def client(server: MockVectorDBServer, metrics: RecordingMetrics) -> VectorDBClient:
    return VectorDBClient(
        BASE_URL,
        ACCOUNT,
        API_KEY,
        ClientOption(transport=server.transport()),
        metrics=metrics,
    )


@pytest.fixture
def database(server: MockVectorDBServer, client: VectorDBClient) -> Database:
    server.databases[DB_NAME] = _Database(db_type="BASE_DB")
    return client.database(DB_NAME)


@pytest.fixture
def collection(server: MockVectorDBServer, database: Database):
    server.databases[DB_NAME].collections[COLLECTION_NAME] = _Collection(
        info={
            "database": DB_NAME,
            "collection": COLLECTION_NAME,
            "shardNum": 1,
            "replicaNum": 0,
            "description": "test collection",
            "indexes": [VECTOR_INDEX, *FILTER_INDEXES],
            "createTime": "2024-01-01 00:00:00",
        }
    )
    return database.collection(COLLECTION_NAME)


@pytest.fixture
def ai_database(server: MockVectorDBServer, client: VectorDBClient) -> Database:
    server.databases[AI_DB_NAME] = _Database(db_type="AI_DB")
    return client.ai_database(AI_DB_NAME)


@pytest.fixture
def ai_collection(server: MockVectorDBServer, ai_database: Database):
    server.databases[AI_DB_NAME].ai_collections[AI_COLLECTION_NAME] = _AICollection(
        info={
            "database": AI_DB_NAME,
            "collection": AI_COLLECTION_NAME,
            "description": "test ai collection",
            "createTime": "2024-01-01 00:00:00",
        }
    )
    return ai_database.ai_collection(AI_COLLECTION_NAME)


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    markers = [
        "dispatcher: HTTP dispatcher and envelope classification tests",
        "handles: database / collection handle tests",
        "gating: database-kind capability gating tests",
        "documents: document operation tests",
        "ai: AI database and AI collection tests",
    ]

    for marker in markers:
        config.addinivalue_line("markers", marker)
