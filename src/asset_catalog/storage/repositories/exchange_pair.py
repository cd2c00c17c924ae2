"""Exchange pair repository.

Maps trading-pair strings reported by a venue to their base/quote assets.

Table Schema:
  exchangepair:
    - exchangepair_id: UUID PRIMARY KEY
    - symbol: TEXT NOT NULL
    - foreignname: TEXT NOT NULL
    - exchange: TEXT NOT NULL
    - verified: BOOLEAN NOT NULL DEFAULT false
    - id_basetoken: UUID REFERENCES asset(asset_id)
    - id_quotetoken: UUID REFERENCES asset(asset_id)
    - UNIQUE (symbol, foreignname, exchange)

Link updates address rows by (foreignname, exchange).
"""

import logging

from asset_catalog.exceptions import AssetCatalogError, NotFoundError
from asset_catalog.infrastructure.database.ports import IDatabaseAdapter
from asset_catalog.storage.repositories.asset import AssetRepository
from asset_catalog.storage.repositories.cache import CacheRepository
from asset_catalog.storage.schemas.relational import (
    Asset,
    ExchangePair,
    Pair,
    PairLinkResult,
)
from asset_catalog.storage.schemas.tables import EXCHANGEPAIR_TABLE

logger = logging.getLogger(__name__)


class ExchangePairRepository:
    """Repository for venue-reported trading pairs."""

    def __init__(
        self,
        db: IDatabaseAdapter,
        assets: AssetRepository,
        cache: CacheRepository | None = None,
    ):
        """Initialize exchange pair repository.

        Args:
            db: Database adapter for SQL execution
            assets: Asset repository used to resolve base/quote tokens
            cache: Cache repository for write-through (optional)
        """
        self.db = db
        self.assets = assets
        self.cache = cache
        logger.info("ExchangePairRepository initialized")

    async def get_exchange_pair(self, exchange: str, foreign_name: str) -> ExchangePair:
        """Return the pair ``foreign_name`` on ``exchange`` with its underlying assets.

        Unlinked tokens are returned as zero-value assets.

        Raises:
            NotFoundError: If the pair, or one of its linked assets, is missing
        """
        query = f"""
            SELECT symbol, verified, id_quotetoken, id_basetoken
            FROM {EXCHANGEPAIR_TABLE}
            WHERE exchange=$1 AND foreignname=$2
        """
        row = await self.db.fetchrow(query, exchange, foreign_name)
        if row is None:
            raise NotFoundError(
                f"no pair {foreign_name} on {exchange}", table=EXCHANGEPAIR_TABLE
            )

        quote_token = Asset()
        if row["id_quotetoken"] is not None:
            quote_token = await self.assets.get_asset_by_id(str(row["id_quotetoken"]))

        base_token = Asset()
        if row["id_basetoken"] is not None:
            base_token = await self.assets.get_asset_by_id(str(row["id_basetoken"]))

        return ExchangePair(
            symbol=row["symbol"],
            foreign_name=foreign_name,
            exchange=exchange,
            verified=bool(row["verified"]),
            underlying_pair=Pair(base_token=base_token, quote_token=quote_token),
        )

    async def get_exchange_pair_symbols(self, exchange: str) -> list[ExchangePair]:
        """Return (symbol, foreign_name) of every pair on ``exchange``."""
        query = f"SELECT symbol, foreignname FROM {EXCHANGEPAIR_TABLE} WHERE exchange=$1"
        rows = await self.db.fetch(query, exchange)
        return [
            ExchangePair(
                symbol=row["symbol"], foreign_name=row["foreignname"], exchange=exchange
            )
            for row in rows
        ]

    async def set_exchange_pair(
        self, exchange: str, pair: ExchangePair, cache: bool = False
    ) -> PairLinkResult:
        """Store ``pair`` on ``exchange`` and link it to its underlying assets.

        The (symbol, foreignname, exchange) row is inserted if absent. The
        base and quote links are only written for tokens found in the asset
        table; lookup failures are logged and reported in the result, not
        raised. With ``cache`` set the pair is also written to the cache,
        and a cache failure is likewise reported rather than raised.

        Raises:
            StoreConnectionError: If one of the statements fails in transport
        """
        result = PairLinkResult(exchange=exchange, foreign_name=pair.foreign_name)

        insert = f"""
            INSERT INTO {EXCHANGEPAIR_TABLE} (symbol, foreignname, exchange)
            SELECT $1, $2, $3
            WHERE NOT EXISTS (
                SELECT 1 FROM {EXCHANGEPAIR_TABLE}
                WHERE symbol=$1 AND foreignname=$2 AND exchange=$3
            )
        """
        try:
            await self.db.execute(insert, pair.symbol, pair.foreign_name, exchange)
        except Exception as e:
            logger.error(f"❌ Failed to insert pair {pair.foreign_name} on {exchange}: {e}")
            raise

        base_id = await self._resolve_token(pair.underlying_pair.base_token, "base", result)
        quote_id = await self._resolve_token(pair.underlying_pair.quote_token, "quote", result)

        if base_id:
            await self._update_link("id_basetoken", base_id, pair.foreign_name, exchange)
            result.base_linked = True
        if quote_id:
            await self._update_link("id_quotetoken", quote_id, pair.foreign_name, exchange)
            result.quote_linked = True

        await self._update_link("verified", pair.verified, pair.foreign_name, exchange)

        if cache:
            if self.cache is None:
                result.errors.append("cache: no cache configured")
                logger.error(f"Cannot cache pair {pair.foreign_name}: no cache configured")
            else:
                try:
                    await self.cache.set_exchange_pair_cache(exchange, pair)
                    result.cached = True
                except AssetCatalogError as e:
                    result.errors.append(f"cache: {e}")
                    logger.error(
                        f"setting pair {pair.foreign_name} to redis for exchange {exchange}: {e}"
                    )

        if result.errors:
            logger.warning(
                f"Pair {pair.foreign_name} on {exchange} partially stored: {result.errors}"
            )
        return result

    async def _resolve_token(
        self, token: Asset, role: str, result: PairLinkResult
    ) -> str | None:
        try:
            return await self.assets.get_asset_id(token)
        except AssetCatalogError as e:
            result.errors.append(f"{role}: {e}")
            logger.error(f"Cannot resolve {role} token of {result.foreign_name}: {e}")
            return None

    async def _update_link(
        self, column: str, value: object, foreign_name: str, exchange: str
    ) -> None:
        query = f"UPDATE {EXCHANGEPAIR_TABLE} SET {column}=$1 WHERE foreignname=$2 AND exchange=$3"
        await self.db.execute(query, value, foreign_name, exchange)
