"""
Display formatting helpers for USD values, balances, addresses and times
"""

import re
from datetime import datetime, timezone
from typing import Optional

_TRAILING_ZEROS = re.compile(r'\.?0+$')


def format_usd(value: float, decimals: int = 2) -> str:
    if value >= 1_000_000:
        return f"${value / 1_000_000:.2f}M"
    if value >= 1_000:
        return f"${value / 1_000:.2f}K"
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.{decimals}f}"


def format_percent(value: float, decimals: int = 2) -> str:
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.{decimals}f}%"


def format_balance(balance: str, max_decimals: int = 6) -> str:
    try:
        num = float(balance)
    except (TypeError, ValueError):
        return "0"
    if num != num or num == 0:  # NaN or zero
        return "0"
    if num < 0.000001:
        return "<0.000001"
    if num < 1:
        return _TRAILING_ZEROS.sub('', f"{num:.{max_decimals}f}")
    if num < 1000:
        return _TRAILING_ZEROS.sub('', f"{num:.4f}")
    return _TRAILING_ZEROS.sub('', f"{num:,.2f}")


def truncate_address(address: str, chars: int = 4) -> str:
    """0x1234567890abcdef... -> 0x1234...cdef"""
    if not address:
        return ""
    return f"{address[:chars + 2]}...{address[-chars:]}"


def format_timestamp(timestamp: str, now: Optional[datetime] = None) -> str:
    """Relative age for recent timestamps, calendar date for older ones"""
    date = datetime.fromtimestamp(int(timestamp), tz=timezone.utc)
    now = now or datetime.now(timezone.utc)
    diff_seconds = (now - date).total_seconds()
    diff_days = int(diff_seconds // 86400)

    if diff_days == 0:
        diff_hours = int(diff_seconds // 3600)
        if diff_hours == 0:
            return f"{int(diff_seconds // 60)}m ago"
        return f"{diff_hours}h ago"
    if diff_days < 7:
        return f"{diff_days}d ago"

    return f"{date.strftime('%b')} {date.day}, {date.year}"
