"""Exchange symbol repository.

Maps raw tickers reported by a venue to verified assets.

Table Schema:
  exchangesymbol:
    - exchangesymbol_id: UUID PRIMARY KEY
    - symbol: TEXT NOT NULL
    - exchange: TEXT NOT NULL
    - verified: BOOLEAN NOT NULL DEFAULT false
    - asset_id: UUID REFERENCES asset(asset_id)
    - UNIQUE (symbol, exchange)

A symbol is inserted unverified when first observed and becomes verified
once it is linked to an asset. Verification is never undone here.
"""

import logging

from asset_catalog.exceptions import NotFoundError
from asset_catalog.infrastructure.database.ports import IDatabaseAdapter, affected_rows
from asset_catalog.storage.query import like_prefix
from asset_catalog.storage.schemas.tables import ASSET_TABLE, EXCHANGESYMBOL_TABLE

logger = logging.getLogger(__name__)


class ExchangeSymbolRepository:
    """Repository for venue-reported tickers."""

    def __init__(self, db: IDatabaseAdapter):
        """Initialize exchange symbol repository.

        Args:
            db: Database adapter for SQL execution
        """
        self.db = db
        logger.info("ExchangeSymbolRepository initialized")

    async def set_exchange_symbol(self, exchange: str, symbol: str) -> None:
        """Store (symbol, exchange) unless it is already present."""
        query = f"""
            INSERT INTO {EXCHANGESYMBOL_TABLE} (symbol, exchange)
            SELECT $1, $2
            WHERE NOT EXISTS (
                SELECT 1 FROM {EXCHANGESYMBOL_TABLE} WHERE symbol=$1 AND exchange=$2
            )
        """
        try:
            await self.db.execute(query, symbol, exchange)
        except Exception as e:
            logger.error(f"❌ Failed to set symbol {symbol} on {exchange}: {e}")
            raise

    async def get_unverified_exchange_symbols(self, exchange: str) -> list[str]:
        """Return symbols on ``exchange`` awaiting verification, ascending."""
        query = f"""
            SELECT symbol FROM {EXCHANGESYMBOL_TABLE}
            WHERE exchange=$1 AND verified=false
            ORDER BY symbol ASC
        """
        rows = await self.db.fetch(query, exchange)
        return [row["symbol"] for row in rows]

    async def get_exchange_symbols(self, exchange: str, substring: str) -> list[str]:
        """Return symbols traded on ``exchange``.

        An empty ``exchange`` returns symbols of all exchanges. A non-empty
        ``substring`` keeps only symbols starting with it, case-insensitive.
        """
        if exchange:
            if substring:
                query = f"SELECT symbol FROM {EXCHANGESYMBOL_TABLE} WHERE exchange=$1 AND symbol ILIKE $2"
                args = [exchange, like_prefix(substring)]
            else:
                query = f"SELECT symbol FROM {EXCHANGESYMBOL_TABLE} WHERE exchange=$1"
                args = [exchange]
        else:
            if substring:
                query = f"SELECT symbol FROM {EXCHANGESYMBOL_TABLE} WHERE symbol ILIKE $1"
                args = [like_prefix(substring)]
            else:
                query = f"SELECT symbol FROM {EXCHANGESYMBOL_TABLE}"
                args = []

        rows = await self.db.fetch(query, *args)
        return [row["symbol"] for row in rows]

    async def verify_exchange_symbol(
        self, exchange: str, symbol: str, asset_id: str
    ) -> bool:
        """Mark ``symbol`` on ``exchange`` verified and link it to ``asset_id``.

        Returns:
            True if the (symbol, exchange) row existed and was updated
        """
        query = f"""
            UPDATE {EXCHANGESYMBOL_TABLE} SET verified=true, asset_id=$1
            WHERE symbol=$2 AND exchange=$3
        """
        try:
            status = await self.db.execute(query, asset_id, symbol, exchange)
        except Exception as e:
            logger.error(f"❌ Failed to verify {symbol} on {exchange}: {e}")
            raise

        updated = affected_rows(status) > 0
        if updated:
            logger.debug(f"✅ Verified {symbol} on {exchange} as {asset_id}")
        return updated

    async def get_exchange_symbol_asset_id(
        self, exchange: str, symbol: str
    ) -> tuple[str, bool]:
        """Return (asset_id, verified) of ``symbol`` on ``exchange``.

        asset_id is the empty string while the symbol is not linked.

        Raises:
            NotFoundError: If the symbol was never stored for ``exchange``
        """
        query = f"SELECT asset_id, verified FROM {EXCHANGESYMBOL_TABLE} WHERE symbol=$1 AND exchange=$2"
        row = await self.db.fetchrow(query, symbol, exchange)
        if row is None:
            raise NotFoundError(
                f"no symbol {symbol} on {exchange}", table=EXCHANGESYMBOL_TABLE
            )
        asset_id = row["asset_id"]
        return (str(asset_id) if asset_id is not None else "", bool(row["verified"]))

    async def get_asset_exchange(self, symbol: str) -> list[str]:
        """Return the exchanges on which ``symbol`` is linked to an asset."""
        query = f"""
            SELECT exchange FROM {EXCHANGESYMBOL_TABLE}
            INNER JOIN {ASSET_TABLE}
                ON {ASSET_TABLE}.asset_id = {EXCHANGESYMBOL_TABLE}.asset_id
            WHERE {EXCHANGESYMBOL_TABLE}.symbol = $1
        """
        rows = await self.db.fetch(query, symbol)
        return [row["exchange"] for row in rows]
