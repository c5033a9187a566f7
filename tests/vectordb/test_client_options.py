# SPDX-License-Identifier: Apache-2.0
"""
VectorDB SDK - Transport configuration and client construction.

Covers:
  • resolve_option defaults and idempotence
  • construction-time validation (BadConfig, no network)
  • environment-based construction
  • lifecycle setters
"""

import pytest

from tests.mock.mock_vectordb_server import ACCOUNT, API_KEY, BASE_URL
from vectordb_sdk import (
    DEFAULT_OPTION,
    BadConfig,
    ClientOption,
    ReadConsistency,
    VectorDBClient,
    resolve_option,
)

pytestmark = pytest.mark.asyncio


async def test_resolve_option_fills_every_unset_field():
    """Verify an empty option resolves to the documented defaults."""
    opt = resolve_option(ClientOption())

    assert opt.timeout == 5.0
    assert opt.max_idle_conns_per_host == 2
    assert opt.idle_conn_timeout == 60.0
    assert opt.read_consistency is ReadConsistency.EVENTUAL
    assert opt.transport is None


async def test_resolve_option_none_returns_defaults():
    """Verify resolving None yields DEFAULT_OPTION."""
    assert resolve_option(None) == DEFAULT_OPTION
    assert resolve_option() == DEFAULT_OPTION


async def test_resolve_option_treats_zero_as_unset():
    """Verify zero values are replaced by defaults."""
    opt = resolve_option(ClientOption(timeout=0, max_idle_conns_per_host=0, idle_conn_timeout=0))

    assert opt.timeout == 5.0
    assert opt.max_idle_conns_per_host == 2
    assert opt.idle_conn_timeout == 60.0


async def test_resolve_option_keeps_explicit_values():
    """Verify explicitly set fields survive resolution."""
    opt = resolve_option(
        ClientOption(
            timeout=1.5,
            max_idle_conns_per_host=8,
            idle_conn_timeout=10.0,
            read_consistency=ReadConsistency.STRONG,
        )
    )

    assert opt.timeout == 1.5
    assert opt.max_idle_conns_per_host == 8
    assert opt.idle_conn_timeout == 10.0
    assert opt.read_consistency is ReadConsistency.STRONG


@pytest.mark.parametrize(
    "option",
    [
        None,
        ClientOption(),
        ClientOption(timeout=2.0),
        ClientOption(read_consistency=ReadConsistency.STRONG, max_idle_conns_per_host=4),
    ],
)
async def test_resolve_option_is_idempotent(option):
    """Verify resolving an already resolved option is a no-op."""
    once = resolve_option(option)
    assert resolve_option(once) == once


async def test_resolve_option_does_not_mutate_input():
    """Verify the caller's option value is left untouched."""
    original = ClientOption(timeout=3.0)
    resolve_option(original)
    assert original.max_idle_conns_per_host is None


@pytest.mark.parametrize(
    "url, account, api_key, field",
    [
        ("host:8100", ACCOUNT, API_KEY, "url"),
        ("", ACCOUNT, API_KEY, "url"),
        ("ftp://host", ACCOUNT, API_KEY, "url"),
        (BASE_URL, "", API_KEY, "account"),
        (BASE_URL, ACCOUNT, "", "api_key"),
    ],
)
async def test_construction_rejects_bad_config(url, account, api_key, field):
    """Verify bad URL or empty credentials fail with BadConfig."""
    with pytest.raises(BadConfig) as exc_info:
        VectorDBClient(url, account, api_key)

    err = exc_info.value
    assert err.code == "BAD_CONFIG"
    assert err.details["field"] == field


async def test_construction_applies_resolved_options(server):
    """Verify the client exposes the resolved transport options."""
    client = VectorDBClient(
        BASE_URL, ACCOUNT, API_KEY, ClientOption(timeout=2.5, transport=server.transport())
    )

    assert client.options.timeout == 2.5
    assert client.options.max_idle_conns_per_host == 2
    assert client.options.read_consistency is ReadConsistency.EVENTUAL
    assert server.call_count == 0


async def test_https_url_is_accepted():
    """Verify an https base URL passes validation."""
    client = VectorDBClient("https://host:8100", ACCOUNT, API_KEY)
    assert client.options == DEFAULT_OPTION
    await client.close()


async def test_set_timeout_updates_options(client, server):
    """Verify set_timeout reconfigures without a network call."""
    client.set_timeout(0.75)

    assert client.options.timeout == 0.75
    assert server.call_count == 0


@pytest.mark.parametrize("seconds", [0, 0.0, None])
async def test_set_timeout_unset_restores_default(client, seconds):
    """Verify zero or None falls back to the default timeout instead of disabling it."""
    client.set_timeout(0.75)
    client.set_timeout(seconds)

    assert client.options.timeout == DEFAULT_OPTION.timeout


async def test_set_timeout_rejects_negative(client):
    """Verify a negative timeout is refused and the previous one is kept."""
    client.set_timeout(0.75)

    with pytest.raises(BadConfig) as exc_info:
        client.set_timeout(-1)

    assert exc_info.value.details["field"] == "timeout"
    assert client.options.timeout == 0.75


async def test_construction_rejects_negative_timeout(server):
    """Verify a negative configured timeout fails construction with BadConfig."""
    with pytest.raises(BadConfig) as exc_info:
        VectorDBClient(BASE_URL, ACCOUNT, API_KEY, ClientOption(timeout=-2, transport=server.transport()))

    assert exc_info.value.details["field"] == "timeout"


async def test_from_env_reads_environment(monkeypatch, server):
    """Verify from_env builds a client from VECTORDB_* variables."""
    monkeypatch.setenv("VECTORDB_URL", BASE_URL)
    monkeypatch.setenv("VECTORDB_ACCOUNT", ACCOUNT)
    monkeypatch.setenv("VECTORDB_API_KEY", API_KEY)
    monkeypatch.setenv("VECTORDB_TIMEOUT", "7.5")

    client = VectorDBClient.from_env(ClientOption(transport=server.transport()))
    assert client.options.timeout == 7.5

    await client.list_databases()
    assert server.calls[-1].headers["authorization"] == f"Bearer account={ACCOUNT}&api_key={API_KEY}"


async def test_from_env_explicit_timeout_wins(monkeypatch):
    """Verify an explicit option timeout takes precedence over VECTORDB_TIMEOUT."""
    monkeypatch.setenv("VECTORDB_URL", BASE_URL)
    monkeypatch.setenv("VECTORDB_ACCOUNT", ACCOUNT)
    monkeypatch.setenv("VECTORDB_API_KEY", API_KEY)
    monkeypatch.setenv("VECTORDB_TIMEOUT", "7.5")

    client = VectorDBClient.from_env(ClientOption(timeout=1.0))
    assert client.options.timeout == 1.0
    await client.close()


async def test_from_env_rejects_bad_timeout(monkeypatch):
    """Verify a non-numeric VECTORDB_TIMEOUT is a BadConfig."""
    monkeypatch.setenv("VECTORDB_URL", BASE_URL)
    monkeypatch.setenv("VECTORDB_ACCOUNT", ACCOUNT)
    monkeypatch.setenv("VECTORDB_API_KEY", API_KEY)
    monkeypatch.setenv("VECTORDB_TIMEOUT", "soon")

    with pytest.raises(BadConfig):
        VectorDBClient.from_env()


async def test_from_env_requires_url(monkeypatch):
    """Verify a missing VECTORDB_URL is a BadConfig."""
    monkeypatch.delenv("VECTORDB_URL", raising=False)
    monkeypatch.setenv("VECTORDB_ACCOUNT", ACCOUNT)
    monkeypatch.setenv("VECTORDB_API_KEY", API_KEY)

    with pytest.raises(BadConfig):
        VectorDBClient.from_env()


async def test_async_context_manager_closes_client(server):
    """Verify `async with` yields the client and closes it on exit."""
    async with VectorDBClient(
        BASE_URL, ACCOUNT, API_KEY, ClientOption(transport=server.transport())
    ) as client:
        assert await client.list_databases() == []
