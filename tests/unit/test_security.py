"""Tests for X-Hub-Signature-256 verification."""

import hashlib
import hmac
from unittest.mock import patch

import pytest

from wa_webhook.exceptions import SignatureInvalid
from wa_webhook.security import check_signature, check_signature_header, compute_signature, verify_signature

SECRET = "app-secret"
BODY = b'{"object":"whatsapp_business_account","entry":[]}'


def header_for(body: bytes, secret: str = SECRET) -> str:
    return "sha256=" + hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()


def test_compute_signature_matches_hmac_sha256():
    assert compute_signature(BODY, SECRET) == hmac.new(SECRET.encode(), BODY, hashlib.sha256).hexdigest()


@pytest.mark.parametrize(
    "body",
    [b"", b"{}", BODY, "héllo wörld".encode("utf-8"), bytes(range(256))],
)
def test_valid_signature_is_accepted(body):
    assert verify_signature(body, header_for(body), SECRET) is True


def test_signature_over_different_bytes_is_rejected():
    # Same JSON, different whitespace: the bytes differ, so the signature must not match
    reserialized = b'{"object": "whatsapp_business_account", "entry": []}'
    assert verify_signature(reserialized, header_for(BODY), SECRET) is False


def test_flipped_body_bit_is_rejected():
    tampered = bytes([BODY[0] ^ 0x01]) + BODY[1:]
    assert verify_signature(tampered, header_for(BODY), SECRET) is False


def test_flipped_signature_bit_is_rejected():
    digest = bytearray(bytes.fromhex(compute_signature(BODY, SECRET)))
    digest[-1] ^= 0x01
    assert verify_signature(BODY, "sha256=" + digest.hex(), SECRET) is False


def test_wrong_secret_is_rejected():
    assert verify_signature(BODY, header_for(BODY, "other-secret"), SECRET) is False


@pytest.mark.parametrize("header", [None, ""])
def test_missing_header(header):
    with pytest.raises(SignatureInvalid) as exc_info:
        check_signature(BODY, header, SECRET)
    assert exc_info.value.reason == SignatureInvalid.MISSING_HEADER


@pytest.mark.parametrize(
    "header",
    [
        compute_signature(BODY, SECRET),  # no prefix
        "sha1=" + compute_signature(BODY, SECRET),
        "SHA256=" + compute_signature(BODY, SECRET),
    ],
)
def test_malformed_header(header):
    with pytest.raises(SignatureInvalid) as exc_info:
        check_signature(BODY, header, SECRET)
    assert exc_info.value.reason == SignatureInvalid.MALFORMED_HEADER


@pytest.mark.parametrize(
    "hex_part",
    [
        "not-hex",
        "abc",  # odd length
        compute_signature(BODY, SECRET)[:-2],  # truncated
        compute_signature(BODY, SECRET) + "00",  # too long
        " " + compute_signature(BODY, SECRET),
        "",
    ],
)
def test_malformed_signature(hex_part):
    with pytest.raises(SignatureInvalid) as exc_info:
        check_signature(BODY, "sha256=" + hex_part, SECRET)
    assert exc_info.value.reason == SignatureInvalid.MALFORMED_SIGNATURE


def test_signature_mismatch_reason():
    with pytest.raises(SignatureInvalid) as exc_info:
        check_signature(BODY, "sha256=" + "0" * 64, SECRET)
    assert exc_info.value.reason == SignatureInvalid.SIGNATURE_MISMATCH


def test_uppercase_hex_digest_is_accepted():
    assert verify_signature(BODY, "sha256=" + compute_signature(BODY, SECRET).upper(), SECRET) is True


def test_comparison_uses_constant_time_compare_digest():
    with patch("wa_webhook.security.hmac.compare_digest", wraps=hmac.compare_digest) as compare:
        assert verify_signature(BODY, "sha256=" + "0" * 64, SECRET) is False
        assert verify_signature(BODY, header_for(BODY), SECRET) is True

    assert compare.call_count == 2
    # Binary digests are compared, not their hex strings
    received, computed = compare.call_args.args
    assert isinstance(received, bytes) and isinstance(computed, bytes)
    assert len(received) == len(computed) == 32


def test_compare_digest_is_not_reached_for_length_mismatch():
    with patch("wa_webhook.security.hmac.compare_digest") as compare:
        assert verify_signature(BODY, "sha256=abcd", SECRET) is False
    compare.assert_not_called()


def test_secret_is_never_logged(caplog):
    caplog.set_level("DEBUG", logger="wa_webhook.security")
    verify_signature(BODY, "sha256=" + "0" * 64, SECRET)
    verify_signature(BODY, header_for(BODY), SECRET)
    assert SECRET not in caplog.text


def test_check_signature_header_returns_hex_part():
    assert check_signature_header("sha256=abc123") == "abc123"


@pytest.mark.parametrize(
    "header,reason",
    [(None, SignatureInvalid.MISSING_HEADER), ("", SignatureInvalid.MISSING_HEADER), ("sha1=abc", SignatureInvalid.MALFORMED_HEADER)],
)
def test_check_signature_header_needs_no_secret(header, reason):
    with pytest.raises(SignatureInvalid) as exc_info:
        check_signature_header(header)
    assert exc_info.value.reason == reason
