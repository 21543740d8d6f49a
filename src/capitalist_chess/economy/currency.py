"""Currency units.

All amounts are integer pennies.  A doubloon is the costing unit used by the
price tables and equals ten pennies.
"""

from __future__ import annotations

PENNY = 1
DOUBLOON = 10 * PENNY


def doubloons(amount: int | float) -> int:
    """Convert a doubloon amount to whole pennies."""
    return int(round(amount * DOUBLOON))


def format_currency(pennies: int) -> str:
    """``90`` → ``'90¢'``."""
    return f"{pennies}¢"
