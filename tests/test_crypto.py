from __future__ import annotations

import pytest

from app.core.exceptions import DecryptionError
from app.infrastructure.security import crypto


def test_hash_secret_round_trip():
    hashed = crypto.hash_secret("123456")

    assert hashed != "123456"
    assert hashed.startswith("$argon2id$")
    assert crypto.verify_secret("123456", hashed)
    assert not crypto.verify_secret("654321", hashed)


def test_hash_secret_is_salted():
    assert crypto.hash_secret("000000") != crypto.hash_secret("000000")


@pytest.mark.parametrize("bad_hash", ["", "not-a-hash", "$argon2id$v=19$broken"])
def test_verify_secret_malformed_hash_is_false(bad_hash):
    assert crypto.verify_secret("123456", bad_hash) is False


def test_encrypt_round_trip_and_envelope_shape():
    envelope = crypto.encrypt("smtp-password")

    iv_b64, cipher_b64 = envelope.split(":")
    assert iv_b64 and cipher_b64
    assert "smtp-password" not in envelope
    assert crypto.decrypt(envelope) == "smtp-password"


def test_encrypt_uses_fresh_iv():
    assert crypto.encrypt("same") != crypto.encrypt("same")


def test_decrypt_with_other_key_fails():
    other = crypto.derive_key("another-passphrase", iterations=1000)
    envelope = crypto.encrypt("secret")

    with pytest.raises(DecryptionError):
        crypto.decrypt(envelope, key=other)


def test_single_character_tampering_never_yields_other_plaintext():
    envelope = crypto.encrypt("p@ssw0rd")

    for i, ch in enumerate(envelope):
        mutated = envelope[:i] + ("A" if ch != "A" else "B") + envelope[i + 1:]
        try:
            result = crypto.decrypt(mutated)
        except DecryptionError:
            continue
        # Solo bits de relleno de base64 pueden cambiar sin alterar los bytes
        assert result == "p@ssw0rd"


@pytest.mark.parametrize(
    "envelope",
    ["", "sin-separador", "a:b:c", ":abc", "abc:", "@@@:###", "AAAA:AAAAAAAAAAAAAAAAAAAAAAAAAAAA"],
)
def test_decrypt_malformed_envelope(envelope):
    with pytest.raises(DecryptionError):
        crypto.decrypt(envelope)


def test_derive_key_is_deterministic():
    assert crypto.derive_key("x", iterations=1000) == crypto.derive_key("x", iterations=1000)
    assert len(crypto.derive_key("x", iterations=1000)) == 32


@pytest.mark.parametrize("bad_key", [b"short-key", b"x" * 31, b"x" * 33])
def test_decrypt_with_invalid_key_length(bad_key):
    envelope = crypto.encrypt("secret")

    with pytest.raises(DecryptionError):
        crypto.decrypt(envelope, key=bad_key)
