"""Cache repository for hot assets and exchange pairs.

Key namespaces:
  asset:<asset_id>                       -> Asset as JSON
  exchangepair:<exchange>_<foreignname>  -> ExchangePair as JSON

Entries never expire; they persist until evicted or overwritten.
"""

import logging

from asset_catalog.exceptions import CacheMissError
from asset_catalog.infrastructure.cache.client import RedisCacheClient
from asset_catalog.storage.repositories.asset import AssetRepository
from asset_catalog.storage.schemas.relational import Asset, ExchangePair
from asset_catalog.storage.schemas.tables import (
    KEY_ASSET_CACHE,
    KEY_EXCHANGEPAIR_CACHE,
)

logger = logging.getLogger(__name__)


def exchange_pair_key(exchange: str, foreign_name: str) -> str:
    return f"{KEY_EXCHANGEPAIR_CACHE}{exchange}_{foreign_name}"


class CacheRepository:
    """Read-through/write-through caching of catalog entities."""

    def __init__(self, cache: RedisCacheClient, assets: AssetRepository):
        """Initialize cache repository.

        Args:
            cache: Redis cache client
            assets: Asset repository, used to derive asset keys
        """
        self.cache = cache
        self.assets = assets
        logger.info("CacheRepository initialized")

    async def set_asset_cache(self, asset: Asset) -> None:
        """Cache ``asset`` under its asset_id.

        Raises:
            NotFoundError: If the asset is not stored relationally
        """
        key = await self.assets.get_key_asset(asset)
        await self.cache.set(key, asset.model_dump_json())
        logger.debug(f"Cached asset {asset.symbol} with key {key}")

    async def get_asset_cache(self, asset_id: str) -> Asset:
        """Return the cached asset with ``asset_id``.

        Raises:
            CacheMissError: If the asset is not cached
        """
        try:
            raw = await self.cache.get(KEY_ASSET_CACHE + asset_id)
        except CacheMissError:
            raise
        except Exception as e:
            logger.error(f"Error: {e} on get_asset_cache with asset_id {asset_id}")
            raise
        return Asset.model_validate_json(raw)

    async def count_cache(self) -> int:
        """Number of cached assets. Scans the whole keyspace."""
        return await self.cache.count_keys(KEY_ASSET_CACHE)

    async def set_exchange_pair_cache(self, exchange: str, pair: ExchangePair) -> None:
        await self.cache.set(
            exchange_pair_key(exchange, pair.foreign_name), pair.model_dump_json()
        )

    async def get_exchange_pair_cache(
        self, exchange: str, foreign_name: str
    ) -> ExchangePair:
        """Return the cached pair ``foreign_name`` on ``exchange``.

        Raises:
            CacheMissError: If the pair is not cached
        """
        try:
            raw = await self.cache.get(exchange_pair_key(exchange, foreign_name))
        except CacheMissError:
            raise
        except Exception as e:
            logger.error(
                f"get_exchange_pair_cache on {exchange} with foreign name {foreign_name}: {e}"
            )
            raise
        return ExchangePair.model_validate_json(raw)
