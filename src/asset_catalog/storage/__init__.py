"""Storage layer for the asset catalog.

Architecture:

    ┌─────────────────────────────────────┐
    │ Callers (services, APIs, scrapers)  │
    └──────────────┬──────────────────────┘
                   │
    ┌──────────────▼──────────────────────┐
    │ Storage Layer (THIS MODULE)         │
    │                                     │
    │  Repositories:                      │
    │  - AssetRepository                  │
    │  - ExchangeSymbolRepository         │
    │  - ExchangePairRepository           │
    │  - BlockchainRepository             │
    │  - VolumeRepository                 │
    │  - CacheRepository                  │
    └──────────────┬──────────────────────┘
                   │
    ┌──────────────▼──────────────────────┐
    │ Infrastructure Layer                │
    │ - PostgreSQL/TimescaleDB (asyncpg)  │
    │ - Redis (redis-py asyncio)          │
    └─────────────────────────────────────┘
"""

from .memo import MemoCache
from .repositories import (
    AssetRepository,
    BlockchainRepository,
    CacheRepository,
    ExchangePairRepository,
    ExchangeSymbolRepository,
    VolumeRepository,
)

__all__ = [
    "MemoCache",
    "AssetRepository",
    "BlockchainRepository",
    "CacheRepository",
    "ExchangePairRepository",
    "ExchangeSymbolRepository",
    "VolumeRepository",
]
