# utils/formatting.py

from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Union


def format_price(amount: Union[Decimal, int, float, str], language: str = "en") -> str:
    """
    Canadian dollar formatting with exactly two decimals.
    Example: 1234.5 -> "$1,234.50" (en), "1 234,50 $" (fr)
    """
    value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    text = f"{value:,.2f}"

    if language == "fr":
        text = text.replace(",", " ").replace(".", ",")
        return f"{text} $"

    if text.startswith("-"):
        return f"-${text[1:]}"
    return f"${text}"


def format_datetime(value: Union[str, datetime]) -> str:
    """
    "2025-03-07T14:05:00+00:00" -> "2025/03/07 at 02:05 PM"
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return value.strftime("%Y/%m/%d at %I:%M %p")
