"""
Unit tests for the session token codec.
"""

import base64
import time
from unittest.mock import patch

import pytest

from audioserve_auth.modules.auth.token import (
    TOKEN_SIZE,
    Expired,
    InvalidEncoding,
    InvalidSize,
    RandomSourceUnavailable,
    SignatureMismatch,
    Token,
    decode_token,
    encode_token,
    verify_token,
    create_token,
)

SECRET = b"my big secret"


@pytest.fixture
def token():
    """Fresh token valid for 24 hours."""
    return Token.create(24, SECRET)


def test_token_round_trip(token):
    """Test that a token survives encode/decode unchanged."""
    encoded = token.encode()

    assert len(encoded) >= TOKEN_SIZE
    decoded = Token.decode(encoded)
    assert decoded == token
    assert decoded.verify(SECRET)


def test_token_field_sizes(token):
    """Test the fixed binary layout."""
    assert len(token.random) == 32
    assert len(token.validity) == 8
    assert len(token.signature) == 32
    assert len(token.to_bytes()) == TOKEN_SIZE


def test_encoding_is_url_safe(token):
    """Test encoded token has no characters that break headers or cookies."""
    encoded = token.encode()

    assert len(encoded) == 96
    for char in "+/=;, ":
        assert char not in encoded


def test_fresh_token_validity_window():
    """Test expiry is at most validity_hours in the future."""
    before = int(time.time())
    token = Token.create(24, SECRET)

    assert token.verify(SECRET)
    assert 0 < token.expires_at - int(time.time()) <= 24 * 3600
    assert token.expires_at >= before + 24 * 3600


def test_validity_is_big_endian():
    """Test validity field encodes the expiry as big-endian."""
    token = Token.create(1, SECRET, now=1_000_000)

    assert token.validity == (1_000_000 + 3600).to_bytes(8, "big")
    assert token.expires_at == 1_003_600


def test_wrong_secret_rejected(token):
    """Test token signed with one secret fails under another."""
    assert not token.verify(b"wrong secret")
    with pytest.raises(SignatureMismatch):
        token.check(b"wrong secret")


@pytest.mark.parametrize("region,start,end", [
    ("random", 0, 32),
    ("validity", 32, 40),
    ("signature", 40, 72),
])
def test_bit_flip_rejected(token, region, start, end):
    """Test flipping a bit anywhere in a region invalidates the token."""
    raw = token.to_bytes()
    for position in range(start, end):
        tampered = bytearray(raw)
        tampered[position] ^= 0x01
        encoded = base64.urlsafe_b64encode(bytes(tampered)).decode()

        assert not Token.decode(encoded).verify(SECRET), f"{region} byte {position}"


def test_expired_token_rejected():
    """Test correctly signed token with past validity fails."""
    token = Token.create(1, SECRET, now=int(time.time()) - 2 * 3600)

    assert not token.verify(SECRET)
    with pytest.raises(Expired):
        token.check(SECRET)


def test_token_invalid_at_exact_expiry():
    """Test validity must be strictly in the future."""
    token = Token.create(1, SECRET, now=5000)

    assert token.verify(SECRET, now=token.expires_at - 1)
    assert not token.verify(SECRET, now=token.expires_at)


def test_signature_checked_before_expiry():
    """Test a forged expired token reports signature mismatch, not expiry."""
    token = Token.create(1, SECRET, now=0)

    with pytest.raises(SignatureMismatch):
        token.check(b"other", now=10**9)


@pytest.mark.parametrize("text", [
    "not base64 at all!",
    "abc",
    "####",
    "é" * 96,
])
def test_decode_invalid_encoding(text):
    """Test non-base64 input raises InvalidEncoding."""
    with pytest.raises(InvalidEncoding):
        Token.decode(text)


def test_decode_rejects_standard_alphabet(token):
    """Test "+" and "/" from the standard alphabet are not accepted."""
    encoded = token.encode()
    tampered = "+" + encoded[1:]

    with pytest.raises(InvalidEncoding):
        Token.decode(tampered)


@pytest.mark.parametrize("size", [0, 71, 73, 144])
def test_decode_invalid_size(size):
    """Test valid base64 with the wrong length raises InvalidSize."""
    text = base64.urlsafe_b64encode(b"x" * size).decode()

    with pytest.raises(InvalidSize) as exc_info:
        Token.decode(text)
    assert exc_info.value.size == size


def test_decode_does_not_verify():
    """Test decode accepts well-formed but unsigned data."""
    text = base64.urlsafe_b64encode(bytes(TOKEN_SIZE)).decode()

    token = Token.decode(text)
    assert token.expires_at == 0
    assert not token.verify(SECRET)


def test_random_source_unavailable():
    """Test minting fails loudly when secure randomness is missing."""
    with patch(
        "audioserve_auth.modules.auth.token.secrets.token_bytes",
        side_effect=NotImplementedError("no urandom"),
    ):
        with pytest.raises(RandomSourceUnavailable):
            Token.create(24, SECRET)


def test_tokens_are_unique():
    """Test two tokens minted at once differ."""
    assert Token.create(24, SECRET).random != Token.create(24, SECRET).random


def test_function_helpers():
    """Test the plain function interface."""
    token = create_token(2, SECRET)
    encoded = encode_token(token)

    assert decode_token(encoded) == token
    assert verify_token(token, SECRET)
    assert not verify_token(token, b"nope")
