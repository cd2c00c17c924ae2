"""
Asset Catalog Exception Hierarchy

Provides specific exception types for the failure modes of the relational
store, the cache and the time-series store, so callers can branch on the
condition instead of parsing driver messages.
"""


class AssetCatalogError(Exception):
    """Base exception for all asset catalog errors."""

    def __init__(self, message: str, table: str | None = None):
        super().__init__(message)
        self.table = table


class NotFoundError(AssetCatalogError):
    """Row absent for the requested key."""

    pass


class DuplicateKeyError(AssetCatalogError):
    """Unique constraint violated on insert."""

    def __init__(self, message: str, constraint: str | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.constraint = constraint


class StoreConnectionError(AssetCatalogError):
    """Transport failure talking to the relational or time-series store."""

    pass


class CacheConnectionError(AssetCatalogError):
    """Transport failure talking to the cache."""

    pass


class CacheMissError(AssetCatalogError):
    """Key not present in the cache."""

    def __init__(self, key: str):
        super().__init__(f"cache miss for key {key}")
        self.key = key


class DecimalsParseError(AssetCatalogError):
    """Decimals column could not be parsed into a non-negative integer."""

    def __init__(self, raw_value: object):
        super().__init__(f"cannot parse decimals value {raw_value!r}")
        self.raw_value = raw_value


class NoRecentVolumeDataError(AssetCatalogError):
    """Time-series store returned no volume rows for the requested window."""

    pass
