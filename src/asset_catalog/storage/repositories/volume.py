"""Volume repository for 24h trading volumes.

The relational store keeps only the latest 24h volume per asset; history
lives in the time-series filters table.

Table Schemas:
  assetvolume:
    - asset_id: UUID PRIMARY KEY REFERENCES asset(asset_id)
    - volume: NUMERIC

  filters (hypertable, time-series store):
    - time: TIMESTAMPTZ NOT NULL
    - filter: TEXT NOT NULL
    - exchange: TEXT NOT NULL DEFAULT ''
    - address: TEXT
    - blockchain: TEXT
    - value: DOUBLE PRECISION
"""

import logging
from datetime import UTC, datetime

import asyncpg

from asset_catalog.exceptions import NoRecentVolumeDataError, NotFoundError
from asset_catalog.infrastructure.database.ports import IDatabaseAdapter
from asset_catalog.storage.query import build_conjunction, identity_criteria, like_prefix
from asset_catalog.storage.repositories.asset import row_to_asset
from asset_catalog.storage.schemas.relational import Asset
from asset_catalog.storage.schemas.tables import (
    ASSET_TABLE,
    ASSETVOLUME_TABLE,
    FILTERS_TABLE,
    VOLUME_FILTER,
)

logger = logging.getLogger(__name__)


def ensure_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


class VolumeRepository:
    """Repository for asset volumes.

    Handles the latest 24h volume (relational) and the discovery of assets
    quoted recently (time-series).
    """

    def __init__(
        self,
        db: IDatabaseAdapter,
        timeseries: IDatabaseAdapter | None = None,
        filters_table: str = FILTERS_TABLE,
        volume_filter: str = VOLUME_FILTER,
    ):
        """Initialize volume repository.

        Args:
            db: Relational store adapter
            timeseries: Time-series store adapter (defaults to ``db``)
            filters_table: Table holding filter values in the time-series store
            volume_filter: Name of the volume filter series
        """
        self.db = db
        self.timeseries = timeseries if timeseries is not None else db
        self.filters_table = filters_table
        self.volume_filter = volume_filter
        logger.info("VolumeRepository initialized")

    async def set_asset_volume_24h(self, asset: Asset, volume: float) -> None:
        """Store ``volume`` as the latest 24h volume of ``asset``, replacing any previous one.

        Fiat currencies are resolved by symbol, other assets by address.

        Raises:
            NotFoundError: If the asset is not in the asset table
        """
        predicate, args = build_conjunction(identity_criteria(asset))
        query = f"""
            INSERT INTO {ASSETVOLUME_TABLE} (asset_id, volume)
            VALUES (
                (SELECT asset_id FROM {ASSET_TABLE} WHERE {predicate}),
                ${len(args) + 1}
            )
            ON CONFLICT (asset_id) DO UPDATE SET volume = EXCLUDED.volume
        """
        try:
            await self.db.execute(query, *args, volume)
        except asyncpg.exceptions.NotNullViolationError as e:
            raise NotFoundError(
                f"no asset {asset.symbol!r} at {asset.address!r} on {asset.blockchain!r}",
                table=ASSET_TABLE,
            ) from e
        except Exception as e:
            logger.error(f"❌ Failed to set volume of {asset.symbol}: {e}")
            raise

    async def get_asset_volume_24h(self, asset: Asset) -> float:
        """Return the latest 24h volume of ``asset``.

        Raises:
            NotFoundError: If no volume is stored for the asset
        """
        predicate, args = build_conjunction(identity_criteria(asset))
        query = f"""
            SELECT volume FROM {ASSETVOLUME_TABLE}
            INNER JOIN {ASSET_TABLE}
                ON {ASSETVOLUME_TABLE}.asset_id = {ASSET_TABLE}.asset_id
            WHERE {predicate}
        """
        row = await self.db.fetchrow(query, *args)
        if row is None:
            raise NotFoundError(
                f"no volume for {asset.address!r} on {asset.blockchain!r}",
                table=ASSETVOLUME_TABLE,
            )
        return float(row["volume"])

    async def get_top_asset_by_volume(self, symbol: str) -> list[Asset]:
        """Return assets with ticker ``symbol`` ordered by 24h volume, highest first."""
        query = f"""
            SELECT symbol, name, address, decimals, blockchain
            FROM {ASSET_TABLE}
            INNER JOIN {ASSETVOLUME_TABLE}
                ON {ASSET_TABLE}.asset_id = {ASSETVOLUME_TABLE}.asset_id
            WHERE symbol=$1
            ORDER BY volume DESC
        """
        rows = await self.db.fetch(query, symbol)
        return [row_to_asset(row) for row in rows]

    async def get_assets_with_vol(
        self, num_assets: int = 0, substring: str = ""
    ) -> list[Asset]:
        """Return assets with a stored volume, sorted by volume descending.

        Args:
            num_assets: Maximum number of assets, 0 for all
            substring: Keep only symbols starting with it (case-insensitive)
        """
        query = f"""
            SELECT symbol, name, address, decimals, blockchain
            FROM {ASSET_TABLE}
            INNER JOIN {ASSETVOLUME_TABLE}
                ON ({ASSET_TABLE}.asset_id = {ASSETVOLUME_TABLE}.asset_id)
        """
        args: list = []
        if substring:
            args.append(like_prefix(substring))
            query += f" WHERE symbol ILIKE ${len(args)}"
        query += f" ORDER BY {ASSETVOLUME_TABLE}.volume DESC"
        if num_assets:
            args.append(num_assets)
            query += f" LIMIT ${len(args)}"

        rows = await self.db.fetch(query, *args)
        return [row_to_asset(row) for row in rows]

    async def get_assets_with_vol_timeseries(self, time_init: datetime) -> list[Asset]:
        """Return the assets with a volume filter value since ``time_init``.

        Only address and blockchain are populated. Duplicates are dropped,
        keeping first-seen order; rows missing either field are skipped.

        Raises:
            NoRecentVolumeDataError: If the series has no value in the window
        """
        query = f"""
            SELECT address, blockchain, value FROM {self.filters_table}
            WHERE filter=$1 AND exchange='' AND time > $2 AND time < now()
            ORDER BY time ASC
        """
        rows = await self.timeseries.fetch(query, self.volume_filter, ensure_utc(time_init))
        if not rows:
            raise NoRecentVolumeDataError(
                f"no recent assets with volume since {time_init.isoformat()}",
                table=self.filters_table,
            )

        seen: set[tuple[str, str]] = set()
        quoted_assets = []
        for row in rows:
            address, blockchain = row["address"], row["blockchain"]
            if address is None or blockchain is None:
                continue
            if (address, blockchain) in seen:
                continue
            seen.add((address, blockchain))
            quoted_assets.append(Asset(address=address, blockchain=blockchain))

        logger.debug(f"Found {len(quoted_assets)} assets quoted since {time_init}")
        return quoted_assets
