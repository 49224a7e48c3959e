from __future__ import annotations

import pytest
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.hazmat.primitives.asymmetric import rsa as crypto_rsa

from sigdemo import rsa
from sigdemo.adapters import RSASignature
from sigdemo.bigint import gcd, int_to_bytes, mod_pow
from sigdemo.config import Settings
from sigdemo.errors import ExponentNotCoprimeError, KeyTooShortError
from sigdemo.hashing import digest


def test_generated_key_structure(rsa_keys):
    public, private = rsa_keys
    assert public.e == 65537
    assert public.n == private.n == private.p * private.q
    assert private.p != private.q
    assert private.p.bit_length() == 512 and private.q.bit_length() == 512
    assert public.n.bit_length() in (1023, 1024)
    phi = (private.p - 1) * (private.q - 1)
    assert (public.e * private.d) % phi == 1


def test_rsa_inverse_property(rsa_keys):
    public, private = rsa_keys
    for x in (2, 3, 65536, 2**200 + 7, public.n - 2):
        if gcd(x, public.n) != 1:
            continue
        assert mod_pow(mod_pow(x, public.e, public.n), private.d, public.n) == x % public.n


def test_pkcs1_padding_layout():
    h = digest(b"abc")
    padded = int_to_bytes(rsa.pkcs1_v15_pad(h, 128), 128)
    assert padded[:2] == b"\x00\x01"
    ps_len = 128 - 3 - 19 - 32
    assert padded[2:2 + ps_len] == b"\xff" * ps_len
    assert padded[2 + ps_len] == 0
    assert padded[3 + ps_len:3 + ps_len + 19] == bytes.fromhex("3031300d060960864801650304020105000420")
    assert padded[-32:] == h


def test_pkcs1_padding_requires_eight_ff_bytes():
    h = digest(b"abc")
    # 19-byte DigestInfo + 32-byte digest + 3 framing bytes + 8 padding = 62
    assert rsa.pkcs1_v15_pad(h, 62) > 0
    with pytest.raises(KeyTooShortError):
        rsa.pkcs1_v15_pad(h, 61)


def test_sign_verify_round_trip(rsa_keys):
    public, private = rsa_keys
    signature = rsa.sign("hello world", private)
    assert rsa.verify("hello world", signature, public)
    assert not rsa.verify("hello worle", signature, public)


def test_any_flipped_message_byte_breaks_signature(rsa_keys):
    public, private = rsa_keys
    message = b"attack at dawn, bring snacks"
    signature = rsa.sign(message, private)
    for i in range(len(message)):
        tampered = bytearray(message)
        tampered[i] ^= 0x01
        assert not rsa.verify(bytes(tampered), signature, public)


def test_signature_verifies_with_cryptography(rsa_keys):
    public, private = rsa_keys
    message = b"interop check"
    signature = int_to_bytes(rsa.sign(message, private), public.byte_length)
    key = crypto_rsa.RSAPublicNumbers(public.e, public.n).public_key()
    key.verify(signature, message, padding.PKCS1v15(), hashes.SHA256())
    with pytest.raises(InvalidSignature):
        key.verify(signature, b"interop check!", padding.PKCS1v15(), hashes.SHA256())


def test_cryptography_signature_verifies_here(rsa_keys):
    public, private = rsa_keys
    numbers = crypto_rsa.RSAPrivateNumbers(
        p=private.p,
        q=private.q,
        d=private.d,
        dmp1=crypto_rsa.rsa_crt_dmp1(private.d, private.p),
        dmq1=crypto_rsa.rsa_crt_dmq1(private.d, private.q),
        iqmp=crypto_rsa.rsa_crt_iqmp(private.p, private.q),
        public_numbers=crypto_rsa.RSAPublicNumbers(public.e, public.n),
    )
    message = b"signed elsewhere"
    signature = numbers.private_key().sign(message, padding.PKCS1v15(), hashes.SHA512())
    assert rsa.verify(message, int.from_bytes(signature, "big"), public, "sha512")
    assert not rsa.verify(message, int.from_bytes(signature, "big"), public, "sha256")


def test_exponent_not_coprime_is_reported(monkeypatch):
    candidates = iter([7, 11])
    monkeypatch.setattr(rsa, "generate_prime", lambda bits, **kwargs: next(candidates))
    # phi = 6 * 10 = 60 shares the factor 3 with e
    with pytest.raises(ExponentNotCoprimeError):
        rsa.generate_keys(4, exponent=3)


def test_equal_primes_are_redrawn(monkeypatch):
    candidates = iter([11, 11, 13])
    monkeypatch.setattr(rsa, "generate_prime", lambda bits, **kwargs: next(candidates))
    public, private = rsa.generate_keys(4, exponent=7)
    assert {private.p, private.q} == {11, 13}
    assert public.n == 143


def test_small_modulus_cannot_sign():
    public, private = rsa.generate_keys(128)
    with pytest.raises(KeyTooShortError):
        rsa.sign("hello", private)


# ---------------- scheme adapter ----------------

@pytest.fixture(scope="module")
def scheme():
    return RSASignature(Settings())


@pytest.fixture(scope="module")
def keypair(scheme):
    return scheme.generate_keypair()


def test_keypair_record_labels_reduced_security(scheme, keypair):
    assert keypair.algorithm == "RSA-1024"
    assert "demonstration" in keypair.security_level.lower()
    assert keypair.public_key_size == len(keypair.public_key)
    assert keypair.secret_key_size == len(keypair.private_key)
    assert keypair.generation_ms >= 0
    assert keypair.created_at.endswith("+00:00")


def test_end_to_end_hello_world(scheme, keypair):
    sig = scheme.sign("hello world", keypair.private_key)
    assert sig.message == "hello world"
    assert sig.algorithm == "RSA-1024"
    assert sig.signature_size == len(sig.signature)

    ok = scheme.verify("hello world", sig.signature, keypair.public_key)
    assert ok.is_valid
    assert ok.confidence == "Signature valid - 100%"
    assert ok.hash_algorithm == "SHA-256 with PKCS#1 v1.5"
    assert ok.diagnostic is None

    tampered = scheme.verify("hello worle", sig.signature, keypair.public_key)
    assert not tampered.is_valid
    assert tampered.confidence == "Signature invalid"
    assert tampered.diagnostic is None


def test_verify_reports_malformed_blobs_without_raising(scheme, keypair):
    sig = scheme.sign("hello world", keypair.private_key)
    bad_key = scheme.verify("hello world", sig.signature, "{not json")
    assert not bad_key.is_valid
    assert bad_key.confidence == "Verification error"
    assert bad_key.diagnostic.startswith("BlobDecodeError")

    bad_sig = scheme.verify("hello world", '{"s":"zz"}', keypair.public_key)
    assert not bad_sig.is_valid
    assert "BlobDecodeError" in bad_sig.diagnostic


def test_sign_with_malformed_private_key_raises(scheme):
    from sigdemo.errors import BlobDecodeError

    with pytest.raises(BlobDecodeError):
        scheme.sign("hello", '{"n":"ff"}')


def test_prime_size_follows_environment(monkeypatch):
    monkeypatch.setenv("SIGDEMO_RSA_PRIME_BITS", "256")
    small = RSASignature()
    assert small.algorithm == "RSA-512"
    assert "512-bit" in small.security_level
    keys = small.generate_keypair()
    sig = small.sign("short key", keys.private_key)
    assert small.verify("short key", sig.signature, keys.public_key).is_valid


def test_sha512_needs_larger_modulus(monkeypatch):
    monkeypatch.setenv("SIGDEMO_RSA_PRIME_BITS", "256")
    monkeypatch.setenv("SIGDEMO_RSA_HASH", "sha512")
    scheme = RSASignature()
    keys = scheme.generate_keypair()
    # 64-byte modulus cannot hold 19 + 64 digest bytes plus padding
    with pytest.raises(KeyTooShortError):
        scheme.sign("too long digest", keys.private_key)
