from datetime import datetime
from typing import Optional
from tzscraps.config import Config

DATETIME_FORMAT = "%d/%m/%y %I:%M %p"
LONG_DATETIME_FORMAT = "%d/%m/%Y %I:%M %p"
DATE_FORMAT = "%d %b %Y"


def format_currency(value: Optional[float], symbol: Optional[str] = None) -> str:
    """Currency glyph prefix, exactly two decimals, no thousands separator."""
    symbol = Config.CURRENCY_SYMBOL if symbol is None else symbol
    return f"{symbol}{(value or 0.0):.2f}"


def format_decimal(value: Optional[float]) -> str:
    return f"{(value or 0.0):.2f}"


def format_item_count(value: Optional[float]) -> str:
    """12.00 -> '12', 12.5 -> '12.50'."""
    text = format_decimal(value)
    if text.endswith(".00"):
        return text[:-3]
    return text


def format_quantity(value: Optional[float], unit: Optional[str] = None) -> str:
    """Quantity as stored (no padding) followed by its unit."""
    if value is None:
        quantity = "0"
    elif float(value).is_integer():
        quantity = str(int(value))
    else:
        quantity = f"{value:g}"
    return f"{quantity} {unit or 'unit'}"


def format_datetime(value: Optional[datetime], fmt: str = DATETIME_FORMAT) -> str:
    if value is None:
        return ""
    return value.strftime(fmt)


def format_date(value: Optional[datetime]) -> str:
    return format_datetime(value, DATE_FORMAT)
