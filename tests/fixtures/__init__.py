"""
Test fixtures package for repository tests.

Provides row builders shaped like asyncpg records and mock store clients.
"""

import uuid
from typing import Any
from unittest.mock import AsyncMock, MagicMock

WBTC_ADDRESS = "0x2260FAC5E5542a773Aa44fBCfeDf7C193bc2C599"
USDT_ADDRESS = "0xdAC17F958D2ee523a2206206994597C13D831ec7"


def create_asset_row(
    symbol: str = "WBTC",
    name: str = "Wrapped BTC",
    address: str = WBTC_ADDRESS,
    decimals: str | int = "8",
    blockchain: str | None = "Ethereum",
    asset_id: uuid.UUID | None = None,
) -> dict[str, Any]:
    """Create a row of the asset base projection. Decimals are stored as text."""
    row: dict[str, Any] = {
        "symbol": symbol,
        "name": name,
        "address": address,
        "decimals": decimals,
    }
    if blockchain is not None:
        row["blockchain"] = blockchain
    if asset_id is not None:
        row["asset_id"] = asset_id
    return row


def create_mock_db() -> MagicMock:
    """Mock database adapter with asyncpg-shaped coroutine methods."""
    db = MagicMock()
    db.execute = AsyncMock(return_value="INSERT 0 1")
    db.fetch = AsyncMock(return_value=[])
    db.fetchrow = AsyncMock(return_value=None)
    db.fetchval = AsyncMock(return_value=None)
    db.connect = AsyncMock()
    db.disconnect = AsyncMock()
    return db


def create_mock_redis() -> MagicMock:
    """Mock redis.asyncio client backed by a dict."""
    store: dict[str, str] = {}
    client = MagicMock()

    async def _get(key):
        return store.get(key)

    async def _set(key, value, *args, **kwargs):
        store[key] = value
        return True

    async def _scan_iter(match=None, **kwargs):
        prefix = (match or "*").rstrip("*")
        for key in list(store):
            if key.startswith(prefix):
                yield key

    client.get = AsyncMock(side_effect=_get)
    client.set = AsyncMock(side_effect=_set)
    client.scan_iter = MagicMock(side_effect=_scan_iter)
    client.ping = AsyncMock(return_value=True)
    client.aclose = AsyncMock()
    client.store = store
    return client


def normalized_sql(query: str) -> str:
    """Collapse whitespace so assertions don't depend on query formatting."""
    return " ".join(query.split())


__all__ = [
    "WBTC_ADDRESS",
    "USDT_ADDRESS",
    "create_asset_row",
    "create_mock_db",
    "create_mock_redis",
    "normalized_sql",
]
