from __future__ import annotations

from decimal import Decimal
from enum import StrEnum
from typing import Annotated, Literal, NewType, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

AccountId = NewType("AccountId", int)
TxId = NewType("TxId", int)

MAX_ACCOUNT_ID = 2**16 - 1
MAX_TX_ID = 2**32 - 1
# Amounts stay below 10**MAX_AMOUNT_DIGITS so 4-place balances fit the default 28-digit context.
MAX_AMOUNT_DIGITS = 20


class EventType(StrEnum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


class _BaseEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    account_id: AccountId = Field(ge=0, le=MAX_ACCOUNT_ID)
    tx_id: TxId = Field(ge=0, le=MAX_TX_ID)


class _AmountEvent(_BaseEvent):
    amount: Decimal

    @field_validator("amount")
    @classmethod
    def _validate_amount(cls, value: Decimal) -> Decimal:
        if not value.is_finite():
            raise ValueError("amount must be a finite number")
        if value <= 0:
            raise ValueError("amount must be > 0")
        if value.adjusted() >= MAX_AMOUNT_DIGITS:
            raise ValueError(f"amount must be below 1e{MAX_AMOUNT_DIGITS}")
        return value


class Deposit(_AmountEvent):
    type: Literal["deposit"] = "deposit"


class Withdrawal(_AmountEvent):
    type: Literal["withdrawal"] = "withdrawal"


class Dispute(_BaseEvent):
    type: Literal["dispute"] = "dispute"


class Resolve(_BaseEvent):
    type: Literal["resolve"] = "resolve"


class Chargeback(_BaseEvent):
    type: Literal["chargeback"] = "chargeback"


Event = Annotated[
    Union[Deposit, Withdrawal, Dispute, Resolve, Chargeback],
    Field(discriminator="type"),
]

EVENT_ADAPTER: TypeAdapter[Event] = TypeAdapter(Event)


class AccountSnapshot(BaseModel):
    """Final state of one account, as reported after a run."""

    model_config = ConfigDict(frozen=True)

    id: AccountId
    available: Decimal
    held: Decimal
    total: Decimal
    locked: bool
