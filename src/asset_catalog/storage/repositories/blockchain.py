"""Blockchain repository for chain-level metadata.

Table Schema:
  blockchain:
    - blockchain_id: UUID PRIMARY KEY
    - name: TEXT NOT NULL UNIQUE
    - genesisdate: TIMESTAMP
    - nativetoken_id: UUID REFERENCES asset(asset_id)
    - verificationmechanism: TEXT
    - chain_id: TEXT
"""

import logging

from asset_catalog.exceptions import NotFoundError
from asset_catalog.infrastructure.database.ports import IDatabaseAdapter
from asset_catalog.storage.schemas.relational import Asset, Blockchain
from asset_catalog.storage.schemas.tables import ASSET_TABLE, BLOCKCHAIN_TABLE

logger = logging.getLogger(__name__)


class BlockchainRepository:
    """Repository for blockchains."""

    def __init__(self, db: IDatabaseAdapter):
        self.db = db
        logger.info("BlockchainRepository initialized")

    async def set_blockchain(self, chain: Blockchain) -> None:
        """Insert ``chain`` or update the row with the same name.

        The native token is resolved by its address on this chain; if it is
        not in the asset table the link is stored as NULL. An empty chain id
        is stored as NULL.
        """
        native_token = (
            f"(SELECT asset_id FROM {ASSET_TABLE} WHERE address=$3 AND blockchain=$1)"
        )
        query = f"""
            INSERT INTO {BLOCKCHAIN_TABLE}
            (name, genesisdate, nativetoken_id, verificationmechanism, chain_id)
            VALUES ($1, $2, {native_token}, $4, NULLIF($5, ''))
            ON CONFLICT (name) DO UPDATE SET
                genesisdate = $2,
                verificationmechanism = $4,
                chain_id = NULLIF($5, ''),
                nativetoken_id = {native_token}
        """
        try:
            await self.db.execute(
                query,
                chain.name,
                chain.genesis_date,
                chain.native_token.address,
                chain.verification_mechanism,
                chain.chain_id or "",
            )
            logger.debug(f"✅ Stored blockchain {chain.name}")
        except Exception as e:
            logger.error(f"❌ Failed to store blockchain {chain.name}: {e}")
            raise

    async def get_blockchain(self, name: str) -> Blockchain:
        """Return the blockchain ``name`` with its native token's address and symbol.

        Raises:
            NotFoundError: If the chain, or its native token link, is missing
        """
        query = f"""
            SELECT genesisdate, verificationmechanism, chain_id, address, symbol
            FROM {BLOCKCHAIN_TABLE}
            INNER JOIN {ASSET_TABLE}
                ON {BLOCKCHAIN_TABLE}.nativetoken_id = {ASSET_TABLE}.asset_id
            WHERE {BLOCKCHAIN_TABLE}.name = $1
        """
        row = await self.db.fetchrow(query, name)
        if row is None:
            raise NotFoundError(f"no blockchain {name}", table=BLOCKCHAIN_TABLE)
        return Blockchain(
            name=name,
            genesis_date=row["genesisdate"],
            verification_mechanism=row["verificationmechanism"] or "",
            chain_id=row["chain_id"],
            native_token=Asset(address=row["address"], symbol=row["symbol"]),
        )

    async def get_all_blockchains(self) -> list[str]:
        """Return the names of all blockchains present in the asset table, ascending."""
        query = f"SELECT DISTINCT blockchain FROM {ASSET_TABLE} ORDER BY blockchain ASC"
        rows = await self.db.fetch(query)
        return [row["blockchain"] for row in rows]
