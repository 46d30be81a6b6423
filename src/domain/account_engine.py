from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from .ledger import (
    AccountId,
    AccountSnapshot,
    Chargeback,
    Deposit,
    Dispute,
    Event,
    Resolve,
    TxId,
    Withdrawal,
)
from .ledger_store import LedgerStore

logger = logging.getLogger(__name__)


@dataclass
class Account:
    """Mutable balances of one account.

    ``total`` is stored, not derived; every mutator keeps ``total == available + held``.
    """

    id: AccountId
    available: Decimal = Decimal(0)
    held: Decimal = Decimal(0)
    total: Decimal = Decimal(0)
    locked: bool = False

    def credit(self, amount: Decimal) -> None:
        self.available += amount
        self.total += amount

    def hold(self, amount: Decimal) -> None:
        self.available -= amount
        self.held += amount

    def release(self, amount: Decimal) -> None:
        self.available += amount
        self.held -= amount

    def charge_back(self, amount: Decimal) -> None:
        self.held -= amount
        self.total -= amount
        self.locked = True

    def snapshot(self) -> AccountSnapshot:
        return AccountSnapshot(
            id=self.id,
            available=self.available,
            held=self.held,
            total=self.total,
            locked=self.locked,
        )


class AccountEngine:
    """Apply deposit, withdrawal and dispute-path events to per-account balances.

    Events must be supplied in arrival order. An event whose preconditions do not hold
    is dropped: no state changes and it is never retried.
    """

    def __init__(self, *, reject_duplicate_tx_ids: bool = False, lock_blocks_disputes: bool = False) -> None:
        self._accounts: dict[AccountId, Account] = {}
        self._ledger = LedgerStore()
        self._reject_duplicate_tx_ids = reject_duplicate_tx_ids
        self._lock_blocks_disputes = lock_blocks_disputes

    @property
    def ledger(self) -> LedgerStore:
        return self._ledger

    def account(self, account_id: AccountId) -> Account | None:
        return self._accounts.get(account_id)

    def apply_all(self, events: Iterable[Event]) -> None:
        for event in events:
            self.apply(event)

    def apply(self, event: Event) -> None:
        if isinstance(event, Deposit):
            self._apply_transfer(event.account_id, event.tx_id, event.amount)
        elif isinstance(event, Withdrawal):
            self._apply_transfer(event.account_id, event.tx_id, -event.amount)
        elif isinstance(event, Dispute):
            self._dispute(event.account_id, event.tx_id)
        elif isinstance(event, Resolve):
            self._resolve(event.account_id, event.tx_id)
        elif isinstance(event, Chargeback):
            self._chargeback(event.account_id, event.tx_id)
        else:
            raise TypeError(f"Unsupported event: {event!r}")

    def snapshot(self) -> list[AccountSnapshot]:
        return [self._accounts[account_id].snapshot() for account_id in sorted(self._accounts)]

    def _apply_transfer(self, account_id: AccountId, tx_id: TxId, amount: Decimal) -> None:
        """Apply a signed amount: positive for deposits, negative for withdrawals.

        No insufficient-funds check is made, so ``available`` may go negative.
        """
        if self._reject_duplicate_tx_ids and tx_id in self._ledger:
            logger.debug("Ignoring reused tx=%s for account=%s", tx_id, account_id)
            return

        account = self._accounts.get(account_id)
        if account is None:
            account = Account(id=account_id)
            self._accounts[account_id] = account
        elif account.locked:
            logger.debug("Ignoring tx=%s for locked account=%s", tx_id, account_id)
            return

        account.credit(amount)
        self._ledger.record(tx_id, amount)

    def _disputable(self, account_id: AccountId, tx_id: TxId) -> tuple[Account, Decimal] | None:
        account = self._accounts.get(account_id)
        if account is None:
            logger.debug("Ignoring dispute-path event for unknown account=%s tx=%s", account_id, tx_id)
            return None
        if account.locked and self._lock_blocks_disputes:
            logger.debug("Ignoring dispute-path event for locked account=%s tx=%s", account_id, tx_id)
            return None
        amount = self._ledger.amount_of(tx_id)
        if amount is None:
            logger.debug("Ignoring dispute-path event for unknown tx=%s account=%s", tx_id, account_id)
            return None
        return account, amount

    def _dispute(self, account_id: AccountId, tx_id: TxId) -> None:
        target = self._disputable(account_id, tx_id)
        if target is None:
            return
        if self._ledger.is_disputed(tx_id):
            logger.debug("Ignoring dispute of already disputed tx=%s", tx_id)
            return

        account, amount = target
        account.hold(amount)
        self._ledger.mark_disputed(tx_id, True)

    def _resolve(self, account_id: AccountId, tx_id: TxId) -> None:
        target = self._disputable(account_id, tx_id)
        if target is None:
            return
        if not self._ledger.is_disputed(tx_id):
            logger.debug("Ignoring resolve of undisputed tx=%s", tx_id)
            return

        account, amount = target
        account.release(amount)
        self._ledger.mark_disputed(tx_id, False)

    def _chargeback(self, account_id: AccountId, tx_id: TxId) -> None:
        target = self._disputable(account_id, tx_id)
        if target is None:
            return
        if not self._ledger.is_disputed(tx_id):
            logger.debug("Ignoring chargeback of undisputed tx=%s", tx_id)
            return

        account, amount = target
        account.charge_back(amount)
        self._ledger.mark_disputed(tx_id, False)
