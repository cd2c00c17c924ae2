"""Asset repository for token and fiat reference data.

Provides creation, identification and listing queries over the asset table.

Table Schema:
  asset:
    - asset_id: UUID PRIMARY KEY DEFAULT gen_random_uuid()
    - symbol: TEXT NOT NULL
    - name: TEXT NOT NULL
    - address: TEXT NOT NULL
    - decimals: TEXT NOT NULL
    - blockchain: TEXT NOT NULL
    - UNIQUE (address, blockchain)

Fiat currencies are stored with blockchain = 'Fiat' and their ISO 4217 code as
address; they are identified by (symbol, blockchain).
"""

import logging
from typing import Any

from asset_catalog.exceptions import DecimalsParseError, NotFoundError
from asset_catalog.infrastructure.database.ports import IDatabaseAdapter
from asset_catalog.storage.memo import MemoCache
from asset_catalog.storage.query import (
    ASSET_COLUMNS,
    build_conjunction,
    identity_criteria,
    normalize_address,
    parse_decimals,
)
from asset_catalog.storage.schemas.relational import Asset, AssetFilter
from asset_catalog.storage.schemas.tables import (
    ASSET_TABLE,
    EXCHANGESYMBOL_TABLE,
    FIAT_BLOCKCHAIN,
    KEY_ASSET_CACHE,
    MEMO_ASSET_PREFIX,
)

logger = logging.getLogger(__name__)


def row_to_asset(row: Any, blockchain: str | None = None) -> Asset:
    """Map a row of the base projection to an Asset.

    Raises:
        DecimalsParseError: If the decimals column is malformed
    """
    return Asset(
        symbol=row["symbol"],
        name=row["name"],
        address=row["address"],
        decimals=parse_decimals(row["decimals"]),
        blockchain=blockchain if blockchain is not None else row["blockchain"],
    )


class AssetRepository:
    """Repository for assets.

    Externally, assets are addressed by (address, blockchain); internally by
    the generated asset_id that every other table links to.
    """

    def __init__(
        self,
        db: IDatabaseAdapter,
        memo: MemoCache[Asset] | None = None,
        page_size: int = 32,
    ):
        """Initialize asset repository.

        Args:
            db: Database adapter for SQL execution
            memo: Process-local cache for get_asset (a default one if None)
            page_size: Number of assets per page in get_page
        """
        self.db = db
        self.memo = memo if memo is not None else MemoCache()
        self.page_size = page_size
        logger.info("AssetRepository initialized")

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create_asset(self, asset: Asset) -> None:
        """Insert a new asset.

        Raises:
            DuplicateKeyError: If (address, blockchain) already exists
            StoreConnectionError: On transport failure
        """
        query = f"""
            INSERT INTO {ASSET_TABLE} (symbol, name, address, decimals, blockchain)
            VALUES ($1, $2, $3, $4, $5)
        """
        try:
            await self.db.execute(
                query,
                asset.symbol,
                asset.name,
                asset.address,
                str(asset.decimals),
                asset.blockchain,
            )
            logger.debug(f"✅ Created asset: {asset.symbol} on {asset.blockchain}")
        except Exception as e:
            logger.error(f"❌ Failed to create asset {asset.symbol}: {e}")
            raise

    set_asset = create_asset

    # ------------------------------------------------------------------
    # Single-row lookups
    # ------------------------------------------------------------------

    async def get_asset_id(self, asset: Asset) -> str:
        """Return the asset_id of ``asset``.

        Looked up by (address, blockchain), or by (symbol, blockchain) for
        fiat currencies.

        Raises:
            NotFoundError: If no such asset exists
        """
        predicate, args = build_conjunction(identity_criteria(asset))
        query = f"SELECT asset_id FROM {ASSET_TABLE} WHERE {predicate}"
        asset_id = await self.db.fetchval(query, *args)
        if asset_id is None:
            raise NotFoundError(
                f"no asset {asset.symbol!r} at {asset.address!r} on {asset.blockchain!r}",
                table=ASSET_TABLE,
            )
        return str(asset_id)

    async def get_key_asset(self, asset: Asset) -> str:
        """Return the cache key of ``asset``, derived from its asset_id."""
        return KEY_ASSET_CACHE + await self.get_asset_id(asset)

    async def get_asset(self, address: str, blockchain: str) -> Asset:
        """Return the asset at (address, blockchain).

        Successful lookups are memoized; misses and errors are not.

        Raises:
            NotFoundError: If no such asset exists
            DecimalsParseError: If the stored decimals are malformed
        """
        memo_key = f"{MEMO_ASSET_PREFIX}{address}_{blockchain}"
        cached = self.memo.get(memo_key)
        if cached is not None:
            return cached.model_copy()

        query = f"SELECT {ASSET_COLUMNS} FROM {ASSET_TABLE} WHERE address=$1 AND blockchain=$2"
        row = await self.db.fetchrow(query, address, blockchain)
        if row is None:
            raise NotFoundError(
                f"no asset with address {address!r} on {blockchain!r}",
                table=ASSET_TABLE,
            )
        asset = row_to_asset(row)
        self.memo.set(memo_key, asset.model_copy())
        return asset

    async def get_asset_by_id(self, asset_id: str) -> Asset:
        """Return the asset with primary key ``asset_id``."""
        query = f"SELECT {ASSET_COLUMNS} FROM {ASSET_TABLE} WHERE asset_id=$1"
        row = await self.db.fetchrow(query, asset_id)
        if row is None:
            raise NotFoundError(f"no asset with id {asset_id}", table=ASSET_TABLE)
        return row_to_asset(row)

    async def get_fiat_asset_by_symbol(self, symbol: str) -> Asset:
        """Return a fiat currency, unique by its symbol."""
        query = f"""
            SELECT name, address, decimals FROM {ASSET_TABLE}
            WHERE symbol=$1 AND blockchain=$2
        """
        row = await self.db.fetchrow(query, symbol, FIAT_BLOCKCHAIN)
        if row is None:
            raise NotFoundError(f"no fiat asset {symbol}", table=ASSET_TABLE)
        return Asset(
            symbol=symbol,
            name=row["name"],
            address=row["address"],
            decimals=parse_decimals(row["decimals"]),
            blockchain=FIAT_BLOCKCHAIN,
        )

    # ------------------------------------------------------------------
    # Multi-row lookups
    # ------------------------------------------------------------------

    async def get_all_assets(self, blockchain: str) -> list[Asset]:
        """Return every asset on ``blockchain``. Not paginated.

        Rows with malformed decimals are skipped.
        """
        query = f"SELECT symbol, name, address, decimals FROM {ASSET_TABLE} WHERE blockchain=$1"
        rows = await self.db.fetch(query, blockchain)

        assets = []
        for row in rows:
            try:
                assets.append(row_to_asset(row, blockchain=blockchain))
            except DecimalsParseError as e:
                logger.warning(f"Skipping {row['symbol']} on {blockchain}: {e}")
        logger.debug(f"Found {len(assets)} assets on {blockchain}")
        return assets

    async def get_assets(self, symbol: str) -> list[Asset]:
        """Return all assets which share the ticker ``symbol``."""
        query = f"SELECT {ASSET_COLUMNS} FROM {ASSET_TABLE} WHERE symbol=$1"
        rows = await self.db.fetch(query, symbol)
        return [row_to_asset(row) for row in rows]

    async def get_assets_by_symbol_name(self, symbol: str, name: str) -> list[Asset]:
        """Return assets matching ``symbol`` and ``name``.

        An empty ``symbol`` matches by name only, an empty ``name`` by symbol
        only. Both empty matches every asset.
        """
        predicate, args = build_conjunction(
            {"symbol": symbol or None, "name": name or None}
        )
        query = f"SELECT {ASSET_COLUMNS} FROM {ASSET_TABLE}"
        if predicate:
            query += f" WHERE {predicate}"
        rows = await self.db.fetch(query, *args)
        return [row_to_asset(row) for row in rows]

    async def identify_asset(self, candidate: Asset | AssetFilter) -> list[Asset]:
        """Return all assets matching the set fields of ``candidate``.

        For an ``Asset``, fields holding their default value are ignored;
        decimals=0 in particular is treated as unset. Pass an ``AssetFilter``
        to search for zero-decimal assets. The address is compared in its
        checksum form. A candidate with no field set matches every asset.
        """
        criteria = (
            candidate
            if isinstance(candidate, AssetFilter)
            else AssetFilter.from_asset(candidate)
        )
        if criteria.is_empty():
            logger.warning("identify_asset without criteria scans the whole asset table")
        predicate, args = build_conjunction(
            {
                "symbol": criteria.symbol,
                "name": criteria.name,
                "address": (
                    normalize_address(criteria.address)
                    if criteria.address is not None
                    else None
                ),
                "decimals": (
                    str(criteria.decimals) if criteria.decimals is not None else None
                ),
                "blockchain": criteria.blockchain,
            }
        )
        query = f"SELECT {ASSET_COLUMNS} FROM {ASSET_TABLE}"
        if predicate:
            query += f" WHERE {predicate}"

        rows = await self.db.fetch(query, *args)
        assets = []
        for row in rows:
            try:
                assets.append(row_to_asset(row))
            except DecimalsParseError:
                logger.error("error parsing decimals string")
        return assets

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    async def get_page(self, page_number: int) -> tuple[list[Asset], bool]:
        """Return the assets on page ``page_number`` and whether a next page exists.

        A short page is the last one. For a full page, a probe query at
        offset + 1 decides whether anything follows.

        Raises:
            ValueError: If ``page_number`` is negative
        """
        if page_number < 0:
            raise ValueError(f"page_number must be >= 0, got {page_number}")
        skip = self.page_size * page_number
        query = f"SELECT {ASSET_COLUMNS} FROM {ASSET_TABLE} LIMIT $1 OFFSET $2"

        rows = await self.db.fetch(query, self.page_size, skip)
        assets = [row_to_asset(row) for row in rows]
        if len(rows) < self.page_size:
            return assets, False

        next_rows = await self.db.fetch(query, self.page_size, skip + 1)
        return assets, len(next_rows) > 0

    async def get_by_limit(self, limit: int, skip: int) -> tuple[list[Asset], list[str]]:
        """Return up to ``limit`` assets after ``skip`` together with their ids."""
        query = f"""
            SELECT asset_id, {ASSET_COLUMNS} FROM {ASSET_TABLE}
            LIMIT $1 OFFSET $2
        """
        rows = await self.db.fetch(query, limit, skip)
        return [row_to_asset(row) for row in rows], [str(row["asset_id"]) for row in rows]

    async def get_active_asset(
        self, limit: int, skip: int
    ) -> tuple[list[Asset], list[str]]:
        """Return assets linked to an exchange symbol, newest identifier first."""
        query = f"""
            SELECT {ASSET_TABLE}.asset_id, {ASSET_TABLE}.symbol, name, address,
                   decimals, blockchain
            FROM {ASSET_TABLE}
            INNER JOIN {EXCHANGESYMBOL_TABLE}
                ON {ASSET_TABLE}.asset_id = {EXCHANGESYMBOL_TABLE}.asset_id
            ORDER BY {EXCHANGESYMBOL_TABLE}.asset_id DESC
            LIMIT $1 OFFSET $2
        """
        try:
            rows = await self.db.fetch(query, limit, skip)
        except Exception as e:
            logger.error(f"❌ Failed to fetch active assets: {e}")
            raise
        return [row_to_asset(row) for row in rows], [str(row["asset_id"]) for row in rows]

    async def get_active_asset_count(self) -> int:
        """Number of (asset, exchange symbol) links."""
        query = f"""
            SELECT count(*) FROM {ASSET_TABLE}
            INNER JOIN {EXCHANGESYMBOL_TABLE}
                ON {ASSET_TABLE}.asset_id = {EXCHANGESYMBOL_TABLE}.asset_id
        """
        return int(await self.db.fetchval(query))

    async def count(self) -> int:
        """Total number of assets."""
        return int(await self.db.fetchval(f"SELECT count(*) FROM {ASSET_TABLE}"))
