import pytest
from covergen.billing.signatures import (
    WebhookVerifier, Verdict, sign_payload, verify_signature, is_fresh,
)

SECRET = "whsec_unit"
BODY = b'{"type":"subscription.created","data":{"id":"sub_1"}}'


@pytest.mark.parametrize("body", [b"", b"{}", BODY, "café ☃".encode("utf-8")])
def test_valid_signature_verifies(body):
    assert verify_signature(body, sign_payload(body, SECRET), SECRET) is True


def test_prefixed_signature_verifies():
    assert verify_signature(BODY, "sha256=" + sign_payload(BODY, SECRET), SECRET) is True


def test_str_and_bytes_payloads_sign_the_same():
    assert sign_payload(BODY.decode("utf-8"), SECRET) == sign_payload(BODY, SECRET)


def test_tampered_payload_rejected():
    sig = sign_payload(BODY, SECRET)
    tampered = BODY.replace(b"sub_1", b"sub_2")
    assert verify_signature(tampered, sig, SECRET) is False


def test_wrong_secret_rejected():
    assert verify_signature(BODY, sign_payload(BODY, "other"), SECRET) is False


@pytest.mark.parametrize("signature,secret", [
    (None, SECRET),
    ("", SECRET),
    ("sha256=abc", None),
    ("sha256=abc", ""),
])
def test_missing_inputs_return_false(signature, secret):
    assert verify_signature(BODY, signature, secret) is False


@pytest.mark.parametrize("signature", ["not-hex", "sha256=zz", "sha256=" + "ab" * 10])
def test_undecodable_or_short_signature_returns_false(signature):
    assert verify_signature(BODY, signature, SECRET) is False


def test_freshness_window_is_inclusive():
    now = 1_700_000_000
    assert is_fresh(str(now - 299), now) is True
    assert is_fresh(str(now - 300), now) is True
    assert is_fresh(str(now - 301), now) is False
    # future timestamps count the same way
    assert is_fresh(str(now + 300), now) is True
    assert is_fresh(str(now + 301), now) is False


def test_missing_timestamp_is_fresh_and_garbage_is_not():
    assert is_fresh(None, 1_700_000_000) is True
    assert is_fresh("", 1_700_000_000) is True
    assert is_fresh("yesterday", 1_700_000_000) is False


def test_fractional_timestamp_is_truncated():
    now = 1_700_000_000
    assert is_fresh(f"{now}.5", now) is True
    assert is_fresh(f"{now - 300}.9", now) is True
    assert is_fresh(f"{now - 301}.5", now) is False
    assert is_fresh("inf", now) is False
    assert is_fresh("nan", now) is False


def test_verifier_verdicts():
    now = 1_700_000_000
    v = WebhookVerifier(SECRET, tolerance=300, clock=lambda: now)
    sig = sign_payload(BODY, SECRET)
    assert v.configured is True
    assert v.verify(BODY, sig) is Verdict.OK
    assert v.verify(BODY, sig, str(now - 299)) is Verdict.OK
    assert v.verify(BODY, None) is Verdict.MISSING_SIGNATURE
    assert v.verify(BODY, "sha256=" + "0" * 64) is Verdict.INVALID_SIGNATURE
    assert v.verify(BODY, sig, str(now - 301)) is Verdict.STALE_TIMESTAMP


def test_stale_timestamp_rejected_even_with_valid_signature():
    now = 1_700_000_000
    v = WebhookVerifier(SECRET, clock=lambda: now)
    verdict = v.verify(BODY, sign_payload(BODY, SECRET), str(now - 3600))
    assert verdict is Verdict.STALE_TIMESTAMP
    assert not verdict.ok


def test_unconfigured_verifier_never_accepts():
    v = WebhookVerifier(None)
    assert v.configured is False
    assert v.verify(BODY, sign_payload(BODY, SECRET)) is Verdict.INVALID_SIGNATURE
