"""Request and response models for the Nova REST API.

Field names are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

Amount = Union[str, int, float, Decimal]


class NovaModel(BaseModel):
    """Base model: camelCase aliases, unknown fields ignored."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_json(self) -> str:
        """Compact wire JSON. Unset optional fields are left out."""
        return self.model_dump_json(by_alias=True, exclude_none=True)


def amount_to_str(value: Amount) -> str:
    """Validate an amount is a positive decimal and return its string form."""
    try:
        decimal_val = Decimal(str(value))
    except (ValueError, TypeError, ArithmeticError) as e:
        raise ValueError(f"Invalid amount: {value}") from e
    if not decimal_val.is_finite() or decimal_val <= 0:
        raise ValueError(f"Amount must be positive: {value}")
    return format(decimal_val, "f")


# ---------- enums ----------
class OrderSideType(str, Enum):
    BUY = "buy"
    SELL = "sell"


class ExchangeOrderStateType(str, Enum):
    NEW = "New"
    PARTIALLY_FILLED = "PartiallyFilled"
    FILLED = "Filled"
    CANCELLED = "Cancelled"
    REJECTED = "Rejected"


class SelfTradingPrevention(str, Enum):
    DO_NOTHING = "DoNothing"
    CANCEL_OLD = "CancelOld"
    CANCEL_NEW = "CancelNew"
    CANCEL_BOTH = "CancelBoth"


class TransactionGroupKind(str, Enum):
    DEPOSIT = "Deposit"
    WITHDRAW = "Withdraw"
    TRANSFER = "Transfer"
    EXCHANGE = "Exchange"


class TransactionOrderBy(str, Enum):
    CREATED_AT_ASC = "createdAtAsc"
    CREATED_AT_DESC = "createdAtDesc"


class TransactionState(str, Enum):
    NEW = "new"
    PENDING = "pending"
    DONE = "done"
    ERROR = "error"


class TransactionKind(str, Enum):
    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"
    TRANSFER = "transfer"
    EXCHANGE = "exchange"
    FEE = "fee"


class TransactionDirection(str, Enum):
    SEND = "send"
    RECEIVE = "receive"


# ---------- request payloads ----------
class StaticAddressRenewInput(NovaModel):
    currency: str
    address_type: str
    user_address: str
    workspace_id: str | None = None


class WorkspaceBalanceInput(NovaModel):
    workspace_id: str


class UserAccountInput(NovaModel):
    user_address: str
    address_type: str
    workspace_id: str | None = None


class SearchTransactionsInput(NovaModel):
    user_address: str
    address_type: str
    workspace_id: str | None = None
    group_kind: TransactionGroupKind | None = None
    order_by: TransactionOrderBy | None = None
    from_: int | None = Field(default=None, alias="from")
    to: int | None = None
    currency: str | None = None
    state: TransactionState | None = None
    count: int | None = Field(default=None, ge=0, le=500)
    offset: int | None = Field(default=None, ge=0)
    kind: TransactionKind | None = None
    direction: TransactionDirection | None = None
    transaction_id: str | None = None


class ExchangeSearchInput(NovaModel):
    id: str | None = None
    user_address: str
    address_type: str
    workspace_id: str | None = None
    base: str | None = None
    counter: str | None = None
    order_side: OrderSideType | None = None
    state: ExchangeOrderStateType | None = None
    is_alive: bool | None = None
    offset: int | None = Field(default=None, ge=0)
    limit: int | None = Field(default=None, ge=0, le=500)
    from_: int | None = Field(default=None, alias="from")
    to: int | None = None


class ExchangeLimitInput(NovaModel):
    id: str
    user_address: str
    address_type: str
    workspace_id: str | None = None
    from_: str = Field(alias="from")
    to: str
    from_value: str
    to_value: str
    application_id: str | None = None
    self_trading_prevention: SelfTradingPrevention | None = None

    @field_validator("from_value", "to_value", mode="before")
    @classmethod
    def validate_values(cls, v: Any) -> str:
        return amount_to_str(v)


class ExchangeOrderBookInput(NovaModel):
    workspace_id: str | None = None
    base: str
    counter: str


class InternalTransactionInput(NovaModel):
    id: str
    value: str
    currency: str
    from_user_address: str
    from_address_type: str
    from_workspace_id: str | None = None
    to_user_address: str
    to_address_type: str
    to_workspace_id: str | None = None
    application_id: str | None = None

    @field_validator("value", mode="before")
    @classmethod
    def validate_value(cls, v: Any) -> str:
        return amount_to_str(v)


class WithdrawInput(NovaModel):
    id: str
    value: str
    currency: str
    user_address: str
    address_type: str
    workspace_id: str | None = None
    blockchain_address: str
    application_id: str | None = None

    @field_validator("value", mode="before")
    @classmethod
    def validate_value(cls, v: Any) -> str:
        return amount_to_str(v)


class WithdrawValidate(NovaModel):
    blockchain_address: str
    currency: str


# ---------- responses ----------
class StaticAddress(NovaModel):
    blockchain_address: str
    currency: str
    user_address: str | None = None
    address_type: str | None = None
    workspace_id: str | None = None


class AccountBalance(NovaModel):
    currency: str
    total: str
    frozen: str = "0"
    available: str


class WorkspaceBalance(NovaModel):
    user_address: str
    address_type: str
    workspace_id: str | None = None
    currency: str
    total: str
    frozen: str = "0"
    available: str


class CurrenciesPairMeta(NovaModel):
    base: str
    counter: str
    min_order_value: str | None = None
    price_precision: int | None = None


class DepositMeta(NovaModel):
    currency: str
    min_deposit_amount: str | None = None
    confirmations: int | None = None


class Transaction(NovaModel):
    transaction_id: str
    kind: str
    direction: str | None = None
    state: str
    currency: str
    value: str
    fee: str | None = None
    blockchain_address: str | None = None
    created_at: int | None = None
    updated_at: int | None = None


class Exchange(NovaModel):
    id: str
    user_address: str | None = None
    address_type: str | None = None
    workspace_id: str | None = None
    base: str
    counter: str
    order_side: str
    state: str
    base_value: str | None = None
    counter_value: str | None = None
    is_alive: bool | None = None
    created_at: int | None = None
    updated_at: int | None = None


class ExchangeTransactionId(NovaModel):
    transaction_id: str


class OrderBookLevel(NovaModel):
    rate: str
    base_value: str
    counter_value: str


class ExchangeOrderBook(NovaModel):
    buy: list[OrderBookLevel] = Field(default_factory=list)
    sell: list[OrderBookLevel] = Field(default_factory=list)


class InternalTransaction(NovaModel):
    transaction_id: str
    value: str | None = None
    currency: str | None = None
    state: str | None = None


class WithdrawTransactionId(NovaModel):
    transaction_id: str
