"""Currency display helpers.

Monetary amounts are stored as integer minor units (paise). Every display path
goes through ``format_inr`` so the divide-by-100 convention lives in one place.
"""

from typing import Optional

MINOR_UNITS_PER_RUPEE = 100


def _group_indian(digits: str) -> str:
    # Last three digits, then groups of two: 12,34,56,789
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups) + "," + tail


def format_inr(minor_units: Optional[int], symbol: str = "₹") -> str:
    """Format minor units as rupees with en-IN digit grouping.

    Args:
        minor_units: Amount in paise. ``None`` renders as "Not specified".
        symbol: Currency symbol prefix.

    Returns:
        e.g. ``format_inr(500000) == "₹5,000.00"``.
    """
    if minor_units is None:
        return "Not specified"

    sign = "-" if minor_units < 0 else ""
    whole, fraction = divmod(abs(int(minor_units)), MINOR_UNITS_PER_RUPEE)
    return f"{sign}{symbol}{_group_indian(str(whole))}.{fraction:02d}"
