"""
Validation du prix d'un projet (pas de réseau, pas de Stripe).
"""
import math
from typing import Any


class InvalidPriceError(ValueError):
    def __init__(self, message: str = "Invalid project price"):
        super().__init__(message)
        self.message = message


def parse_price(raw: Any) -> float:
    """
    Convertit un prix brut (str|int|float) en float strictement positif.
    - "49.99" -> 49.99
    - Soulève InvalidPriceError pour None, "", "abc", booléens, NaN/inf, <= 0
    """
    if raw is None or isinstance(raw, bool):
        raise InvalidPriceError()
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            raise InvalidPriceError()
    try:
        price = float(raw)
    except (TypeError, ValueError):
        raise InvalidPriceError()
    if not math.isfinite(price) or price <= 0:
        raise InvalidPriceError()
    return price

