# SPDX-License-Identifier: Apache-2.0
"""
VectorDB SDK Tests

Unit and scenario tests for vectordb_sdk, run against an in-memory fake of the
vector-search service (tests/mock/mock_vectordb_server.py).
"""
