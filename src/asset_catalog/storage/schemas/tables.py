"""Table names and cache key namespaces shared by the repositories."""

ASSET_TABLE = "asset"
EXCHANGESYMBOL_TABLE = "exchangesymbol"
EXCHANGEPAIR_TABLE = "exchangepair"
BLOCKCHAIN_TABLE = "blockchain"
ASSETVOLUME_TABLE = "assetvolume"

# Time-series store
FILTERS_TABLE = "filters"
VOLUME_FILTER = "VOL120"

# Cache namespaces
KEY_ASSET_CACHE = "asset:"
KEY_EXCHANGEPAIR_CACHE = "exchangepair:"

# Memo cache key prefix for address/blockchain lookups
MEMO_ASSET_PREFIX = "GetAsset_"

FIAT_BLOCKCHAIN = "Fiat"
