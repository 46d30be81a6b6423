from __future__ import annotations

import sys
from typing import Iterable, TextIO

from domain.ledger import AccountSnapshot

from .formatting import format_amount, format_flag

HEADER = ("client", "available", "held", "total", "locked")
SEPARATOR = ", "


def account_row(snapshot: AccountSnapshot) -> str:
    return SEPARATOR.join(
        (
            str(snapshot.id),
            format_amount(snapshot.available),
            format_amount(snapshot.held),
            format_amount(snapshot.total),
            format_flag(snapshot.locked),
        )
    )


def render_accounts(snapshots: Iterable[AccountSnapshot], stream: TextIO | None = None) -> None:
    """Write the header row then one row per account, amounts to 4 places."""
    out = stream if stream is not None else sys.stdout
    lines = [SEPARATOR.join(HEADER)]
    lines.extend(account_row(snapshot) for snapshot in snapshots)
    out.write("\n".join(lines) + "\n")
