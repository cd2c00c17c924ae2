"""
Root conftest: shared fixtures for the repository and client tests.
"""

import logging
import sys
from pathlib import Path

import pytest

# Ensure src on path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from asset_catalog.infrastructure.cache.client import RedisCacheClient  # noqa: E402
from asset_catalog.storage.memo import MemoCache  # noqa: E402
from asset_catalog.storage.repositories import (  # noqa: E402
    AssetRepository,
    CacheRepository,
)
from asset_catalog.storage.schemas.relational import Asset  # noqa: E402
from tests.fixtures import (  # noqa: E402
    WBTC_ADDRESS,
    create_mock_db,
    create_mock_redis,
)

logger = logging.getLogger(__name__)


@pytest.fixture
def mock_db():
    return create_mock_db()


@pytest.fixture
def mock_redis():
    return create_mock_redis()


@pytest.fixture
def cache_client(mock_redis):
    return RedisCacheClient(client=mock_redis)


@pytest.fixture
def asset_repo(mock_db):
    return AssetRepository(mock_db, memo=MemoCache(max_size=100, ttl_seconds=60), page_size=3)


@pytest.fixture
def cache_repo(cache_client, asset_repo):
    return CacheRepository(cache_client, asset_repo)


@pytest.fixture
def wbtc():
    return Asset(
        symbol="WBTC",
        name="Wrapped BTC",
        address=WBTC_ADDRESS,
        decimals=8,
        blockchain="Ethereum",
    )
