"""
Utility functions for the application.
"""
from typing import Any, Dict, Union
from decimal import Decimal, ROUND_HALF_UP, localcontext
import random
import string
import time

Number = Union[int, float, Decimal]

_ID_ALPHABET = string.digits + string.ascii_lowercase


def round_currency(value: Number) -> Decimal:
    """Round to the nearest whole currency unit, halves away from zero."""
    if not isinstance(value, Decimal):
        # str() keeps 1234.5 from turning into 1234.4999... for floats
        value = Decimal(str(value))
    with localcontext() as ctx:
        # quantize needs room for every integer digit
        ctx.prec = max(ctx.prec, value.adjusted() + 2)
        return value.quantize(Decimal(1), rounding=ROUND_HALF_UP)


def format_currency(value: Number) -> str:
    """Format an amount as a thousands-grouped whole number, e.g. -1234.5 -> '-1,235'."""
    rounded = int(round_currency(value))
    return f"{rounded:,}"


def generate_id() -> str:
    """
    Generate a unique identifier of the form '<epoch millis>-<random suffix>'.
    The prefix stays parseable as an int so ids sort roughly by creation time.
    """
    timestamp = int(time.time() * 1000)
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"{timestamp}-{suffix}"


def format_error(message: str, details: Any = None) -> Dict[str, Any]:
    """Format error response."""
    response = {"error": message}
    if details:
        response["details"] = details
    return response
