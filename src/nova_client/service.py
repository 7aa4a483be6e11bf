"""Nova API operations.

Every operation returns the decoded value on success, and ``None`` (or
``False`` for :meth:`NovaApiService.cancel_order`) on any failure. Failures
are logged, never raised.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, TypeVar

from pydantic import ValidationError

from .client import NovaClient
from .errors import NovaNetworkError, Result, Success
from .models import (
    AccountBalance,
    Amount,
    CurrenciesPairMeta,
    DepositMeta,
    Exchange,
    ExchangeLimitInput,
    ExchangeOrderBook,
    ExchangeOrderBookInput,
    ExchangeOrderStateType,
    ExchangeSearchInput,
    ExchangeTransactionId,
    InternalTransaction,
    InternalTransactionInput,
    NovaModel,
    OrderSideType,
    SearchTransactionsInput,
    SelfTradingPrevention,
    StaticAddress,
    StaticAddressRenewInput,
    Transaction,
    TransactionDirection,
    TransactionGroupKind,
    TransactionKind,
    TransactionOrderBy,
    TransactionState,
    UserAccountInput,
    WithdrawInput,
    WithdrawTransactionId,
    WithdrawValidate,
    WorkspaceBalance,
    WorkspaceBalanceInput,
)
from .unfold import cast_each, is_success_status, unfold_response

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=NovaModel)

STATIC_ADDRESS_RENEW_PATH = "/v1/static_addresses/renew"
USERS_BALANCES_PATH = "/v1/users/balances"
USER_BALANCE_PATH = "/v1/users/balance"
USER_TRANSACTIONS_PATH = "/v1/users/transactions"
USER_EXCHANGES_PATH = "/v1/users/exchanges"
CURRENCIES_PAIRS_PATH = "/v1/meta/currencies_pairs"
DEPOSIT_CURRENCIES_PATH = "/v1/meta/deposit_currencies"
EXCHANGE_LIMIT_PATH = "/v1/exchange/limit"
EXCHANGE_CANCEL_PATH = "/v1/exchange/{transaction_id}"
ORDER_BOOK_PATH = "/v1/exchange/order_book"
TRANSFER_PATH = "/v1/transfer"
WITHDRAW_PATH = "/v1/withdraw"
WITHDRAW_VALIDATE_PATH = "/v1/withdraw/validate"


class NovaApiService(NovaClient):
    """Nova REST API: one method per endpoint."""

    # ---------- plumbing ----------
    @staticmethod
    def _build(model: type[M], **fields: Any) -> M | None:
        try:
            return model(**fields)
        except ValidationError:
            logger.exception("Invalid %s parameters: %r", model.__name__, fields)
            return None

    @staticmethod
    def _resolve(result: Result[T], source: NovaModel | None = None) -> T | None:
        if isinstance(result, Success):
            return result.value
        if source is not None:
            logger.error("%s\nSource request data:\n%s", result.error, source.to_json())
        else:
            logger.error("%s", result.error)
        return None

    def _post(self, path: str, payload: NovaModel | None, expected: type[T], *, log_source: bool = False) -> T | None:
        if payload is None:
            return None
        try:
            response = self.signed_post(path, payload.to_json())
        except NovaNetworkError:
            logger.exception("Nova API request to %s failed", path)
            return None
        return self._resolve(unfold_response(response, expected), payload if log_source else None)

    def _post_list(self, path: str, payload: NovaModel | None, model: type[M]) -> list[M] | None:
        items = self._post(path, payload, list)
        return None if items is None else cast_each(items, model)

    def _get_list(self, path: str, model: type[M], *, with_key: bool = True) -> list[M] | None:
        try:
            response = self.get(path, with_key=with_key)
        except NovaNetworkError:
            logger.exception("Nova API request to %s failed", path)
            return None
        items = self._resolve(unfold_response(response, list))
        return None if items is None else cast_each(items, model)

    # ---------- addresses & balances ----------
    def get_static_address_by_user(
        self,
        currency: str,
        user_address: str,
        address_type: str,
        workspace_id: str | None = None,
    ) -> StaticAddress | None:
        """Get the static deposit address of a user, generating one if needed."""
        payload = self._build(
            StaticAddressRenewInput,
            currency=currency,
            address_type=address_type,
            user_address=user_address,
            workspace_id=workspace_id,
        )
        return self._post(STATIC_ADDRESS_RENEW_PATH, payload, StaticAddress)

    def get_workspace_users_balances(self, workspace_id: str) -> list[WorkspaceBalance] | None:
        payload = self._build(WorkspaceBalanceInput, workspace_id=workspace_id)
        return self._post_list(USERS_BALANCES_PATH, payload, WorkspaceBalance)

    def get_specific_user_balance(
        self,
        user_address: str,
        address_type: str,
        workspace_id: str | None = None,
    ) -> list[AccountBalance] | None:
        payload = self._build(
            UserAccountInput,
            user_address=user_address,
            address_type=address_type,
            workspace_id=workspace_id,
        )
        return self._post_list(USER_BALANCE_PATH, payload, AccountBalance)

    # ---------- metadata ----------
    def get_currencies_pairs(self) -> list[CurrenciesPairMeta] | None:
        """Trading pairs available for exchange."""
        return self._get_list(CURRENCIES_PAIRS_PATH, CurrenciesPairMeta)

    def get_deposit_currencies(self) -> list[DepositMeta] | None:
        return self._get_list(DEPOSIT_CURRENCIES_PATH, DepositMeta, with_key=False)

    # ---------- history ----------
    def get_specific_user_transactions(
        self,
        user_address: str,
        address_type: str,
        workspace_id: str | None = None,
        group_kind: TransactionGroupKind | None = None,
        order_by: TransactionOrderBy | None = None,
        from_timestamp: int | None = None,
        to_timestamp: int | None = None,
        currency: str | None = None,
        state: TransactionState | None = None,
        count: int | None = None,
        offset: int | None = None,
        kind: TransactionKind | None = None,
        direction: TransactionDirection | None = None,
        transaction_id: str | None = None,
    ) -> list[Transaction] | None:
        """
        Search the transactions of a user.

        ``from_timestamp``/``to_timestamp`` are unix timestamps, ``count`` is
        capped at 500 by the server. Unset filters are not sent.
        """
        payload = self._build(
            SearchTransactionsInput,
            user_address=user_address,
            address_type=address_type,
            workspace_id=workspace_id,
            group_kind=group_kind,
            order_by=order_by,
            from_=from_timestamp,
            to=to_timestamp,
            currency=currency,
            state=state,
            count=count,
            offset=offset,
            kind=kind,
            direction=direction,
            transaction_id=transaction_id,
        )
        return self._post_list(USER_TRANSACTIONS_PATH, payload, Transaction)

    def get_specific_user_orders(
        self,
        user_address: str,
        address_type: str,
        id: str | None = None,
        workspace_id: str | None = None,
        base: str | None = None,
        counter: str | None = None,
        order_side: OrderSideType | None = None,
        state: ExchangeOrderStateType | None = None,
        is_alive: bool | None = None,
        offset: int | None = None,
        limit: int | None = None,
        from_timestamp: int | None = None,
        to_timestamp: int | None = None,
    ) -> list[Exchange] | None:
        """
        Search the exchange orders of a user.

        ``is_alive=True`` selects open orders. Timestamps are in milliseconds.
        """
        payload = self._build(
            ExchangeSearchInput,
            id=id,
            user_address=user_address,
            address_type=address_type,
            workspace_id=workspace_id,
            base=base,
            counter=counter,
            order_side=order_side,
            state=state,
            is_alive=is_alive,
            offset=offset,
            limit=limit,
            from_=from_timestamp,
            to=to_timestamp,
        )
        return self._post_list(USER_EXCHANGES_PATH, payload, Exchange)

    # ---------- exchange ----------
    def create_limit_order(
        self,
        id: str,
        user_address: str,
        address_type: str,
        from_currency: str,
        to_currency: str,
        from_value: Amount,
        to_value: Amount,
        workspace_id: str | None = None,
        application_id: str | None = None,
        self_trading_prevention: SelfTradingPrevention | None = SelfTradingPrevention.DO_NOTHING,
    ) -> ExchangeTransactionId | None:
        """Place a limit order selling ``from_value`` of ``from_currency`` for ``to_value`` of ``to_currency``."""
        payload = self._build(
            ExchangeLimitInput,
            id=id,
            user_address=user_address,
            address_type=address_type,
            workspace_id=workspace_id,
            from_=from_currency,
            to=to_currency,
            from_value=from_value,
            to_value=to_value,
            application_id=application_id,
            self_trading_prevention=self_trading_prevention,
        )
        return self._post(EXCHANGE_LIMIT_PATH, payload, ExchangeTransactionId, log_source=True)

    def cancel_order(self, transaction_id: str) -> bool:
        """True when the server accepted the cancellation (2xx); the body is ignored."""
        path = EXCHANGE_CANCEL_PATH.format(transaction_id=transaction_id)
        try:
            response = self.delete(path)
        except NovaNetworkError:
            logger.exception("Nova API request to %s failed", path)
            return False
        if not is_success_status(response.status_code):
            logger.error("Cancel of order %s failed: HTTP %d %s", transaction_id, response.status_code, response.text)
            return False
        return True

    def get_order_book(
        self,
        base: str,
        counter: str,
        workspace_id: str | None = None,
    ) -> ExchangeOrderBook | None:
        payload = self._build(ExchangeOrderBookInput, workspace_id=workspace_id, base=base, counter=counter)
        return self._post(ORDER_BOOK_PATH, payload, ExchangeOrderBook)

    # ---------- transfers ----------
    def transfer(
        self,
        value: Amount,
        currency: str,
        from_user_address: str,
        from_address_type: str,
        from_workspace_id: str | None,
        to_user_address: str,
        to_address_type: str,
        to_workspace_id: str | None,
        application_id: str | None = None,
    ) -> InternalTransaction | None:
        """Move funds between two Nova accounts. A fresh transaction id is generated per call."""
        payload = self._build(
            InternalTransactionInput,
            id=str(uuid.uuid4()),
            value=value,
            currency=currency,
            from_user_address=from_user_address,
            from_address_type=from_address_type,
            from_workspace_id=from_workspace_id,
            to_user_address=to_user_address,
            to_address_type=to_address_type,
            to_workspace_id=to_workspace_id,
            application_id=application_id,
        )
        return self._post(TRANSFER_PATH, payload, InternalTransaction)

    # ---------- withdrawals ----------
    def withdraw(
        self,
        value: Amount,
        currency: str,
        user_address: str,
        address_type: str,
        blockchain_address: str,
        workspace_id: str | None = None,
        application_id: str | None = None,
        id: str | None = None,
    ) -> WithdrawTransactionId | None:
        """Withdraw from the user's balance to ``blockchain_address``; ``id`` defaults to a new UUID4."""
        payload = self._build(
            WithdrawInput,
            id=id or str(uuid.uuid4()),
            value=value,
            currency=currency,
            user_address=user_address,
            address_type=address_type,
            workspace_id=workspace_id,
            blockchain_address=blockchain_address,
            application_id=application_id,
        )
        return self._post(WITHDRAW_PATH, payload, WithdrawTransactionId)

    def validate_blockchain_address(self, blockchain_address: str, currency: str) -> bool | None:
        """
        Ask the server whether ``blockchain_address`` is valid for ``currency``.

        The endpoint answers with a bare ``true``/``false`` body. Anything
        else, including a non-2xx status, gives ``None``.
        """
        payload = self._build(WithdrawValidate, blockchain_address=blockchain_address, currency=currency)
        if payload is None:
            return None
        try:
            response = self.signed_post(WITHDRAW_VALIDATE_PATH, payload.to_json())
        except NovaNetworkError:
            logger.exception("Nova API request to %s failed", WITHDRAW_VALIDATE_PATH)
            return None

        if is_success_status(response.status_code) and response.content:
            text = response.text.strip().strip('"').lower()
            if text in ("true", "false"):
                return text == "true"
            logger.error("Unexpected address validation response: %r", response.text)
            return None

        if response.content:
            logger.error("%s", response.text)
        else:
            logger.error(
                "Unknown error while validating blockchain address. Error code: %d. Message: %s",
                response.status_code,
                response.reason,
            )
        return None
