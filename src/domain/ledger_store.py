from __future__ import annotations

from decimal import Decimal

from .ledger import TxId


class LedgerStore:
    """Signed amounts and dispute flags of applied transactions, keyed by tx id.

    Amount sign convention:
    - Positive amount was credited by a deposit.
    - Negative amount was debited by a withdrawal.

    The store has no policy: ``record`` overwrites and every lookup is total.
    """

    def __init__(self) -> None:
        self._amounts: dict[TxId, Decimal] = {}
        self._disputed: set[TxId] = set()

    def record(self, tx_id: TxId, amount: Decimal) -> None:
        self._amounts[tx_id] = amount

    def amount_of(self, tx_id: TxId) -> Decimal | None:
        return self._amounts.get(tx_id)

    def mark_disputed(self, tx_id: TxId, disputed: bool) -> None:
        if disputed:
            self._disputed.add(tx_id)
        else:
            self._disputed.discard(tx_id)

    def is_disputed(self, tx_id: TxId) -> bool:
        return tx_id in self._disputed

    def __contains__(self, tx_id: object) -> bool:
        return tx_id in self._amounts

    def __len__(self) -> int:
        return len(self._amounts)
