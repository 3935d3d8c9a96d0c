"""Input handling for the track command."""

from __future__ import annotations

import math
from datetime import date

from ratechart.commands.compare import parse_date
from ratechart.exceptions import ConfigError, InputError


def parse_purchase(asset: str, purchase_date: str, quantity: str) -> tuple[str, date, float]:
    """Parse the fields of a purchase form.

    :param asset: Crypto asset identifier.
    :param purchase_date: Purchase day as ``YYYY-MM-DD``.
    :param quantity: Units purchased.
    :returns: ``(asset, purchase_date, quantity)``.
    :raises InputError: If a field is missing or malformed.
    """
    if not asset or not purchase_date or not quantity:
        raise InputError("Asset, purchase date and quantity are required")

    try:
        day = parse_date(purchase_date)
    except ConfigError as e:
        raise InputError(str(e)) from e

    try:
        amount = float(quantity)
    except ValueError as e:
        raise InputError(f"Invalid quantity: {quantity}") from e
    if not math.isfinite(amount) or amount <= 0:
        raise InputError(f"Quantity must be a positive number, got {quantity}")

    return asset.lower(), day, amount
