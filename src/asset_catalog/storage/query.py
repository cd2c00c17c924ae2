"""SQL building helpers shared by the repositories.

Dynamic filters are assembled from a column -> value mapping into
``$n`` placeholders; values never reach the statement text.
"""

from collections.abc import Mapping
from typing import Any

from eth_utils import is_hex_address, to_checksum_address

from asset_catalog.exceptions import DecimalsParseError
from asset_catalog.storage.schemas.relational import Asset
from asset_catalog.storage.schemas.tables import FIAT_BLOCKCHAIN

ASSET_COLUMNS = "symbol,name,address,decimals,blockchain"

MAX_DECIMALS = 255


def build_conjunction(
    criteria: Mapping[str, Any], start: int = 1
) -> tuple[str, list[Any]]:
    """
    Build an AND-joined predicate over the non-None entries of ``criteria``.

    Args:
        criteria: Column name -> value. Column names are trusted identifiers.
        start: Index of the first placeholder

    Returns:
        (predicate, args). The predicate is empty when no criterion is set.

    >>> build_conjunction({"symbol": "BTC", "name": None, "blockchain": "Bitcoin"})
    ('symbol=$1 AND blockchain=$2', ['BTC', 'Bitcoin'])
    """
    clauses: list[str] = []
    args: list[Any] = []
    for column, value in criteria.items():
        if value is None:
            continue
        args.append(value)
        clauses.append(f"{column}=${start + len(args) - 1}")
    return " AND ".join(clauses), args


def identity_criteria(asset: Asset) -> dict[str, str]:
    """
    Columns identifying ``asset`` in the asset table.

    Fiat currencies are unique by symbol on the Fiat blockchain, every other
    asset by (address, blockchain).
    """
    if asset.is_fiat:
        return {"symbol": asset.symbol, "blockchain": FIAT_BLOCKCHAIN}
    return {"address": asset.address, "blockchain": asset.blockchain}


def like_prefix(substring: str) -> str:
    """Escape LIKE wildcards in ``substring`` and append ``%`` for prefix matching."""
    escaped = (
        substring.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    )
    return f"{escaped}%"


def normalize_address(address: str) -> str:
    """
    Return the EIP-55 checksum form of a 20-byte hex address.

    Addresses of other shapes (non-EVM chains, fiat) are returned unchanged.
    """
    if is_hex_address(address):
        return to_checksum_address(address)
    return address


def parse_decimals(raw: Any) -> int:
    """Parse the decimals column, stored as text, into an int in [0, 255]."""
    if isinstance(raw, bool):
        raise DecimalsParseError(raw)
    if isinstance(raw, int):
        value = raw
    else:
        try:
            value = int(str(raw).strip())
        except (TypeError, ValueError) as e:
            raise DecimalsParseError(raw) from e
    if not 0 <= value <= MAX_DECIMALS:
        raise DecimalsParseError(raw)
    return value
