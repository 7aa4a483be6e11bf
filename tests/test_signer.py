import pytest

from nova_client.errors import NovaConfigError
from nova_client.signer import NovaSigner

FIXED_TIME = 1700000000.0  # 1700000000000 ms


def test_known_signature_vector():
    signer = NovaSigner("secret", time_provider=lambda: FIXED_TIME)

    envelope = signer.sign("/v1/withdraw", "{}")

    # base64(HMAC-SHA256("secret", "1700000000000/v1/withdraw{}"))
    assert envelope.nonce == 1700000000000
    assert envelope.signature == "hC4EZoFRniIVm/hRcvYP+sFyxK6qKzNHA1+h6vD7dng="


def test_signing_is_deterministic_for_fixed_nonce():
    s1 = NovaSigner("secret").signature_for(1700000000000, "/v1/transfer", '{"a":1}')
    s2 = NovaSigner("secret").signature_for(1700000000000, "/v1/transfer", '{"a":1}')
    assert s1 == s2


def test_signature_changes_with_path_body_and_secret():
    nonce = 1700000000000
    base = NovaSigner("secret").signature_for(nonce, "/v1/transfer", '{"a":1}')

    variants = {
        NovaSigner("secret").signature_for(nonce, "/v1/withdraw", '{"a":1}'),
        NovaSigner("secret").signature_for(nonce, "/v1/transfer", '{"a":2}'),
        NovaSigner("other").signature_for(nonce, "/v1/transfer", '{"a":1}'),
        NovaSigner("secret").signature_for(nonce + 1, "/v1/transfer", '{"a":1}'),
    }
    assert base not in variants
    assert len(variants) == 4


def test_nonce_is_not_reused_within_same_millisecond():
    signer = NovaSigner("secret", time_provider=lambda: FIXED_TIME)

    first = signer.sign("/v1/withdraw", "{}")
    second = signer.sign("/v1/withdraw", "{}")

    assert second.nonce == first.nonce + 1
    assert second.signature != first.signature


def test_nonce_follows_the_clock():
    now = {"t": FIXED_TIME}
    signer = NovaSigner("secret", time_provider=lambda: now["t"])

    assert signer.generate_nonce() == 1700000000000
    now["t"] += 2.5
    assert signer.generate_nonce() == 1700000002500


def test_missing_secret_is_rejected():
    with pytest.raises(NovaConfigError):
        NovaSigner("")
