"""Mapping of logical asset identifiers to exchange ticker symbols."""

from __future__ import annotations

# Crypto assets supported by the exchange adapter
SYMBOL_MAP: dict[str, str] = {
    "bitcoin": "BTC",
    "ethereum": "ETH",
    "dogecoin": "DOGE",
}


def is_crypto(asset: str) -> bool:
    """Return True if ``asset`` is one of the supported crypto identifiers."""
    return asset.lower() in SYMBOL_MAP


def resolve_symbol(asset: str) -> str:
    """Resolve a logical asset identifier to its canonical series key.

    Crypto identifiers map to their exchange ticker; anything else is treated
    as a fiat currency code and upper-cased. Resolving an already resolved
    value returns it unchanged.

    :param asset: Asset identifier such as ``"bitcoin"`` or ``"eur"``.
    :returns: Ticker symbol or upper-cased currency code.
    """
    return SYMBOL_MAP.get(asset.lower(), asset.upper())


__all__ = ["SYMBOL_MAP", "is_crypto", "resolve_symbol"]
