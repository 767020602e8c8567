"""
Utility helpers shared across services and controllers.
"""

import re
import secrets
import time
from datetime import datetime, timezone
from typing import Optional

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"
_NON_DIGITS = re.compile(r"\D")


def to_base36(value: int) -> str:
    """Encode a non-negative integer in base 36."""
    if value < 0:
        raise ValueError("value must be non-negative")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def generate_id() -> str:
    """
    Build a record id from the current time plus a random suffix.

    No collision detection is performed; two ids generated in the same
    millisecond differ only by their random suffix.
    """
    timestamp = to_base36(int(time.time() * 1000))
    suffix = "".join(secrets.choice(_BASE36) for _ in range(11))
    return f"{timestamp}{suffix}"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(moment: datetime) -> datetime:
    """Read a naive timestamp (older stored records) as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def only_digits(value: Optional[str]) -> str:
    """Strip every non-digit character."""
    return _NON_DIGITS.sub("", value or "")


def format_tax_id(value: str) -> str:
    """Format a CNPJ as 00.000.000/0000-00 when it has 14 digits."""
    digits = only_digits(value)
    if len(digits) != 14:
        return value
    return f"{digits[:2]}.{digits[2:5]}.{digits[5:8]}/{digits[8:12]}-{digits[12:]}"


def format_postal_code(value: str) -> str:
    """Format a CEP as 00000-000 when it has 8 digits."""
    digits = only_digits(value)
    if len(digits) != 8:
        return value
    return f"{digits[:5]}-{digits[5:]}"


def format_price(value: float) -> str:
    """Render a price in Brazilian reais (R$ 1.234,56)."""
    text = f"{value:,.2f}"
    return "R$ " + text.replace(",", "_").replace(".", ",").replace("_", ".")
