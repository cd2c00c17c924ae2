"""Storage schemas for the asset catalog.

This module exports the relational models and the table/cache constants.
All models use Pydantic for validation and JSON serialization.
"""

from .relational import (
    Asset,
    AssetClass,
    AssetFilter,
    Blockchain,
    ExchangePair,
    Pair,
    PairLinkResult,
)

__all__ = [
    "Asset",
    "AssetClass",
    "AssetFilter",
    "Blockchain",
    "ExchangePair",
    "Pair",
    "PairLinkResult",
]
