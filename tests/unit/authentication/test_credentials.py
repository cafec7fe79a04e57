"""
Unit tests for admin credential verification.
"""
import pytest

from authentication.domain.credentials import (
    CredentialVerifier,
    generate_api_secret,
    hash_secret,
    is_hardened_digest,
    make_admin_digest,
    verify_admin_secret,
)

ABC_SHA256 = "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"


class TestHashSecret:
    """Tests for hash_secret."""

    def test_known_vector(self):
        """SHA-256 of 'abc' is the published test vector."""
        assert hash_secret("abc") == ABC_SHA256

    def test_deterministic_lowercase_hex(self):
        """Same input, same 64-char lowercase digest."""
        digest = hash_secret("s3cret")
        assert digest == hash_secret("s3cret")
        assert len(digest) == 64
        assert digest == digest.lower()


class TestVerifyAdminSecret:
    """Tests for verify_admin_secret."""

    def test_matching_secret(self):
        """The original secret verifies against its digest."""
        assert verify_admin_secret("abc", ABC_SHA256) is True

    def test_wrong_secret(self):
        """A different secret does not verify."""
        assert verify_admin_secret("abd", ABC_SHA256) is False

    def test_uppercase_digest_is_accepted(self):
        """Digests are compared as bytes, so hex case does not matter."""
        assert verify_admin_secret("abc", ABC_SHA256.upper()) is True

    @pytest.mark.parametrize("stored", ["", "zz" * 32, "abc", None])
    def test_malformed_digest_returns_false(self, stored):
        """Malformed or empty stored digests never match and never raise."""
        assert verify_admin_secret("abc", stored) is False

    @pytest.mark.parametrize("candidate", [None, 123, b"abc"])
    def test_non_string_candidate_returns_false(self, candidate):
        """Non-string candidates are rejected."""
        assert verify_admin_secret(candidate, ABC_SHA256) is False


class TestHardenedDigest:
    """Tests for the salted hasher format."""

    def test_hardened_digest_round_trip(self):
        """A hardened digest verifies the password and rejects others."""
        digest = make_admin_digest("correct horse", hardened=True)
        assert is_hardened_digest(digest) is True
        assert verify_admin_secret("correct horse", digest) is True
        assert verify_admin_secret("wrong horse", digest) is False

    def test_hardened_digest_is_salted(self):
        """Two hardened digests of one password differ."""
        assert make_admin_digest("pw", hardened=True) != make_admin_digest("pw", hardened=True)

    def test_plain_digest_is_not_hardened(self):
        """Legacy SHA-256 digests are recognized as such."""
        assert make_admin_digest("abc") == ABC_SHA256
        assert is_hardened_digest(ABC_SHA256) is False
        assert is_hardened_digest("unknown$format") is False


class TestCredentialVerifier:
    """Tests for CredentialVerifier."""

    def test_verify(self):
        """Verifier wraps the configured digest."""
        verifier = CredentialVerifier(ABC_SHA256)
        assert verifier.is_hardened is False
        assert verifier.verify("abc") is True
        assert verifier.verify("") is False


def test_generate_api_secret():
    """API secrets are 32 random bytes, hex encoded."""
    first = generate_api_secret()
    second = generate_api_secret()
    assert len(first) == 64
    assert bytes.fromhex(first)
    assert first != second
