"""
Asset catalog aggregate.

Owns the relational store adapter, the optional time-series adapter and the
cache client, and wires every repository onto them. All repositories share
the same pool; none owns a private connection.

Usage:
    >>> async with AssetCatalog.from_config(get_config()) as catalog:
    ...     await catalog.assets.create_asset(asset)
    ...     asset_id = await catalog.assets.get_asset_id(asset)
"""

from asset_catalog.config.state import ConfigState
from asset_catalog.infrastructure.cache.client import RedisCacheClient
from asset_catalog.infrastructure.database.ports import DatabaseAdapter, IDatabaseAdapter
from asset_catalog.infrastructure.observability import get_storage_logger, setup_logging
from asset_catalog.storage.memo import MemoCache
from asset_catalog.storage.repositories import (
    AssetRepository,
    BlockchainRepository,
    CacheRepository,
    ExchangePairRepository,
    ExchangeSymbolRepository,
    VolumeRepository,
)
from asset_catalog.storage.schemas.relational import Asset

log = get_storage_logger("asset-catalog")


class AssetCatalog:
    """Entry point bundling the catalog repositories."""

    def __init__(
        self,
        db: IDatabaseAdapter,
        cache: RedisCacheClient,
        timeseries: IDatabaseAdapter | None = None,
        memo: MemoCache[Asset] | None = None,
        page_size: int = 32,
        filters_table: str = "filters",
        volume_filter: str = "VOL120",
    ):
        self.db = db
        self.cache_client = cache
        self.timeseries = timeseries

        self.assets = AssetRepository(db, memo=memo, page_size=page_size)
        self.cache = CacheRepository(cache, self.assets)
        self.exchange_symbols = ExchangeSymbolRepository(db)
        self.exchange_pairs = ExchangePairRepository(db, self.assets, cache=self.cache)
        self.blockchains = BlockchainRepository(db)
        self.volumes = VolumeRepository(
            db,
            timeseries=timeseries,
            filters_table=filters_table,
            volume_filter=volume_filter,
        )

    @classmethod
    def from_config(
        cls, config: ConfigState, configure_logging: bool = True
    ) -> "AssetCatalog":
        """Build a catalog with pools and clients described by ``config``.

        Args:
            config: Loaded configuration state
            configure_logging: Apply ``config.logging`` through setup_logging.
                Pass False when the host application owns logging.
        """
        if configure_logging:
            setup_logging(level=config.logging.level, json_logs=config.logging.json_logs)
        db = DatabaseAdapter(
            config.database.url,
            min_size=config.database.min_pool_size,
            max_size=config.database.max_pool_size,
            command_timeout=config.database.command_timeout,
        )
        timeseries = None
        if config.timeseries.url and config.timeseries.url != config.database.url:
            timeseries = DatabaseAdapter(
                config.timeseries.url,
                min_size=1,
                max_size=config.database.max_pool_size,
                command_timeout=config.database.command_timeout,
                name="timeseries",
            )
        return cls(
            db=db,
            cache=RedisCacheClient(config.redis.redis_url),
            timeseries=timeseries,
            memo=MemoCache(
                max_size=config.catalog.memo_cache_size,
                ttl_seconds=config.catalog.memo_cache_ttl,
            ),
            page_size=config.catalog.page_size,
            filters_table=config.timeseries.filters_table,
            volume_filter=config.timeseries.volume_filter,
        )

    async def connect(self) -> None:
        await self.db.connect()
        if self.timeseries is not None:
            await self.timeseries.connect()
        log.info("catalog_connected", timeseries=self.timeseries is not None)

    async def close(self) -> None:
        await self.db.disconnect()
        if self.timeseries is not None:
            await self.timeseries.disconnect()
        await self.cache_client.close()
        log.info("catalog_closed")

    async def __aenter__(self) -> "AssetCatalog":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
