import logging

import pytest

from nova_client.errors import NO_RESPONSE_CODE, Failure, Success
from nova_client.models import AccountBalance, ExchangeOrderBook, ExchangeTransactionId
from nova_client.unfold import cast_each, unfold_response


class FakeResponse:
    def __init__(self, status_code=200, content=b"", reason=None):
        self.status_code = status_code
        self.content = content
        self.reason = reason

    @property
    def text(self):
        return self.content.decode("utf-8")


@pytest.mark.parametrize(
    "status_code, message",
    [
        (400, "Request error"),
        (404, "Request error"),
        (499, "Request error"),
        (500, "Server error"),
        (503, "Server error"),
        (599, "Server error"),
        (204, "Unknown error"),
        (302, "Unknown error"),
    ],
)
def test_empty_body_without_reason_uses_status_band(status_code, message):
    out = unfold_response(FakeResponse(status_code=status_code), ExchangeTransactionId)

    assert isinstance(out, Failure)
    assert out.error.message == message
    assert out.error.code == str(status_code)


def test_empty_body_with_reason_uses_reason():
    out = unfold_response(FakeResponse(status_code=401, reason="Unauthorized"), ExchangeTransactionId)

    assert isinstance(out, Failure)
    assert out.error.message == "Unauthorized"
    assert out.error.code == "401"


def test_success_body_is_decoded():
    out = unfold_response(FakeResponse(content=b'{"transactionId":"tx-1"}'), ExchangeTransactionId)

    assert isinstance(out, Success)
    assert out.value == ExchangeTransactionId(transaction_id="tx-1")


def test_success_nested_body_is_decoded():
    body = b'{"buy":[{"rate":"2","baseValue":"1","counterValue":"2"}],"sell":[]}'

    out = unfold_response(FakeResponse(content=body), ExchangeOrderBook)

    assert isinstance(out, Success)
    assert out.value.buy[0].rate == "2"
    assert out.value.sell == []


def test_success_body_with_wrong_shape_is_failure():
    out = unfold_response(FakeResponse(content=b'{"unexpected":1}'), ExchangeTransactionId)

    assert isinstance(out, Failure)
    assert out.error.code == "200"
    assert "Traceback" in out.error.message


def test_success_body_with_invalid_json_is_failure():
    out = unfold_response(FakeResponse(content=b"not json"), ExchangeTransactionId)

    assert isinstance(out, Failure)
    assert out.error.code == "200"


def test_object_body_for_list_is_failure():
    out = unfold_response(FakeResponse(content=b'{"a":1}'), list)

    assert isinstance(out, Failure)


def test_error_body_is_returned_verbatim():
    body = '{"error":"insufficient funds", "code": 17}'

    out = unfold_response(FakeResponse(status_code=422, content=body.encode("utf-8"), reason="Unprocessable"), ExchangeTransactionId)

    assert isinstance(out, Failure)
    assert out.error.message == body
    assert out.error.code == "422"


def test_missing_response_gives_sentinel_code():
    out = unfold_response(None, ExchangeTransactionId)

    assert isinstance(out, Failure)
    assert out.error.code == NO_RESPONSE_CODE


def test_cast_each_drops_malformed_elements_and_keeps_order(caplog):
    items = [
        {"currency": "BTC", "total": "1", "available": "1"},
        {"currency": "ETH", "total": "2", "available": "2"},
        {"currency": "XRP"},
        {"currency": "TON", "total": "4", "available": "4"},
        {"currency": "USDT", "total": "5", "frozen": "1", "available": "4"},
    ]

    with caplog.at_level(logging.ERROR, logger="nova_client.unfold"):
        out = cast_each(items, AccountBalance)

    assert [b.currency for b in out] == ["BTC", "ETH", "TON", "USDT"]
    assert all(isinstance(b, AccountBalance) for b in out)
    assert "XRP" in caplog.text
    assert "AccountBalance" in caplog.text


def test_cast_each_skips_non_objects():
    out = cast_each([None, "x", {"transactionId": "t"}], ExchangeTransactionId)

    assert out == [ExchangeTransactionId(transaction_id="t")]
