"""Relational models for the asset catalog.

Models for reference data stored in the relational store:
- Asset: Token or fiat currency, unique by (address, blockchain)
- ExchangePair: Trading pair reported by a venue, linked to base/quote assets
- Blockchain: Chain-level metadata with its native token

Zero-value instances (e.g. ``Asset()``) stand for "no linked row" when
assembling nested values such as the underlying pair of an exchange pair.
"""

import enum
from datetime import datetime

from pydantic import BaseModel, Field

from asset_catalog.storage.schemas.tables import FIAT_BLOCKCHAIN


class AssetClass(str, enum.Enum):
    """Distinguishes on-chain tokens from fiat currencies."""

    ONCHAIN = "onchain"
    FIAT = "fiat"


class Asset(BaseModel):
    """Token or fiat currency.

    Stored in: asset (relational table), keyed internally by asset_id and
    externally by (address, blockchain). Fiat currencies live on the
    ``Fiat`` blockchain, are unique by symbol and use it as their address.
    """

    symbol: str = Field("", description="Ticker (not globally unique)")
    name: str = Field("", description="Full name (e.g., 'Wrapped BTC')")
    address: str = Field(
        "", description="On-chain address, the ISO 4217 code for fiat currencies"
    )
    decimals: int = Field(
        0, ge=0, le=255, description="Decimal precision, zero is a valid value"
    )
    blockchain: str = Field("", description="Blockchain name (e.g., 'Ethereum')")

    @classmethod
    def fiat(
        cls,
        symbol: str,
        name: str = "",
        decimals: int = 0,
        address: str | None = None,
    ) -> "Asset":
        """Build a fiat currency asset.

        The address defaults to the ISO 4217 code, so every currency has its
        own (address, blockchain) key.
        """
        return cls(
            symbol=symbol,
            name=name,
            address=symbol if address is None else address,
            decimals=decimals,
            blockchain=FIAT_BLOCKCHAIN,
        )

    @property
    def asset_class(self) -> AssetClass:
        if self.blockchain == FIAT_BLOCKCHAIN:
            return AssetClass.FIAT
        return AssetClass.ONCHAIN

    @property
    def is_fiat(self) -> bool:
        return self.asset_class is AssetClass.FIAT


class AssetFilter(BaseModel):
    """Optional criteria for identifying assets.

    Unlike ``Asset``, every criterion is nullable, so ``decimals=0`` filters
    on zero-decimal assets instead of meaning "not specified".
    """

    symbol: str | None = None
    name: str | None = None
    address: str | None = None
    decimals: int | None = Field(None, ge=0, le=255)
    blockchain: str | None = None

    @classmethod
    def from_asset(cls, asset: Asset) -> "AssetFilter":
        """Translate default-valued fields of ``asset`` into unset criteria.

        Decimals of zero cannot be told apart from "unset" on an ``Asset``,
        so they are never used as a criterion here.
        """
        return cls(
            symbol=asset.symbol or None,
            name=asset.name or None,
            address=asset.address or None,
            decimals=asset.decimals or None,
            blockchain=asset.blockchain or None,
        )

    def is_empty(self) -> bool:
        return all(value is None for value in self.model_dump().values())


class Pair(BaseModel):
    """Underlying base/quote assets of a trading pair."""

    base_token: Asset = Field(default_factory=Asset)
    quote_token: Asset = Field(default_factory=Asset)


class ExchangePair(BaseModel):
    """Trading pair as reported by a venue.

    Stored in: exchangepair (relational table). Rows are addressed by
    (foreign_name, exchange) for link updates.
    """

    symbol: str = Field("", description="Base ticker as reported (e.g., 'BTC')")
    foreign_name: str = Field(
        "", description="Pair string as reported by the venue (e.g., 'BTC-USDT')"
    )
    exchange: str = Field("", description="Venue name")
    verified: bool = False
    underlying_pair: Pair = Field(default_factory=Pair)


class Blockchain(BaseModel):
    """Chain-level metadata.

    Stored in: blockchain (relational table), keyed by name. The native
    token is resolved by (address, name) at write time.
    """

    name: str = Field(..., min_length=1, description="Blockchain name")
    genesis_date: datetime | None = Field(None, description="Genesis block date")
    verification_mechanism: str = Field(
        "", description="Consensus description (e.g., 'proof-of-stake')"
    )
    chain_id: str | None = Field(None, description="Chain id, None if unknown")
    native_token: Asset = Field(default_factory=Asset)

    class Config:
        """Pydantic configuration."""

        json_encoders = {
            datetime: lambda v: v.isoformat() if v else None,
        }


class PairLinkResult(BaseModel):
    """Outcome of the best-effort steps of storing an exchange pair.

    The conditional insert and the update statements either succeed or
    raise; the asset-id lookups and the cache write-through are allowed to
    fail, and those failures are collected in ``errors`` instead.
    """

    exchange: str
    foreign_name: str
    base_linked: bool = False
    quote_linked: bool = False
    cached: bool = False
    errors: list[str] = Field(default_factory=list)

    @property
    def fully_linked(self) -> bool:
        return self.base_linked and self.quote_linked
