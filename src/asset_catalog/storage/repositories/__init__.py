"""Repository module for the asset catalog data access layer.

Concrete repositories for:
- Assets: creation, identification, listings
- Exchange symbols and exchange pairs: venue-reported names and their links
- Blockchains: chain metadata
- Volumes: latest 24h volume and recent quoted assets
- Cache: read-through/write-through of assets and pairs

All repositories are async and share one database adapter.
"""

from .asset import AssetRepository
from .blockchain import BlockchainRepository
from .cache import CacheRepository
from .exchange_pair import ExchangePairRepository
from .exchange_symbol import ExchangeSymbolRepository
from .volume import VolumeRepository

__all__ = [
    "AssetRepository",
    "BlockchainRepository",
    "CacheRepository",
    "ExchangePairRepository",
    "ExchangeSymbolRepository",
    "VolumeRepository",
]
