"""
asset-catalog: relational access layer for token and fiat metadata,
exchange symbol/pair mappings, blockchain metadata and trading volumes,
with a Redis read-through/write-through cache.
"""

from asset_catalog.catalog import AssetCatalog
from asset_catalog.exceptions import (
    AssetCatalogError,
    CacheConnectionError,
    CacheMissError,
    DecimalsParseError,
    DuplicateKeyError,
    NoRecentVolumeDataError,
    NotFoundError,
    StoreConnectionError,
)
from asset_catalog.storage.schemas import (
    Asset,
    AssetClass,
    AssetFilter,
    Blockchain,
    ExchangePair,
    Pair,
    PairLinkResult,
)

__version__ = "0.1.0"

__all__ = [
    "AssetCatalog",
    "Asset",
    "AssetClass",
    "AssetFilter",
    "Blockchain",
    "ExchangePair",
    "Pair",
    "PairLinkResult",
    "AssetCatalogError",
    "CacheConnectionError",
    "CacheMissError",
    "DecimalsParseError",
    "DuplicateKeyError",
    "NoRecentVolumeDataError",
    "NotFoundError",
    "StoreConnectionError",
]
