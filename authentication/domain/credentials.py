"""
Admin credential primitives.

The admin secret travels in clear text on each admin call and is compared
against a stored digest. Two stored formats are accepted:

- a bare SHA-256 hex digest (unsalted, the legacy format), and
- a Django password-hasher encoding such as ``pbkdf2_sha256$...``, which is
  salted and slow. Switching to it changes the stored credential format, so
  it is opt-in via ``generate_credentials --hardened``.
"""
import hashlib
import hmac
import logging
import secrets

from django.contrib.auth.hashers import check_password, identify_hasher, make_password

logger = logging.getLogger(__name__)


def hash_secret(secret: str) -> str:
    """
    Compute the SHA-256 hex digest of a UTF-8 string.

    Args:
        secret: Plain-text secret

    Returns:
        Lowercase hex digest
    """
    return hashlib.sha256(secret.encode("utf-8")).hexdigest()


def is_hardened_digest(stored_digest: str) -> bool:
    """Return True if the stored digest is a Django hasher encoding."""
    if not isinstance(stored_digest, str) or "$" not in stored_digest:
        return False
    try:
        identify_hasher(stored_digest)
    except ValueError:
        return False
    return True


def verify_admin_secret(candidate: str, stored_digest: str) -> bool:
    """
    Check a candidate admin secret against the stored digest.

    Comparison is constant-time for both formats. Any failure (malformed
    hex, wrong types, empty digest) returns False.

    Args:
        candidate: Plain-text secret supplied by the caller
        stored_digest: Stored SHA-256 hex digest or hasher encoding

    Returns:
        True if the secret matches
    """
    try:
        if not isinstance(candidate, str) or not stored_digest:
            return False
        if is_hardened_digest(stored_digest):
            return check_password(candidate, stored_digest)
        expected = bytes.fromhex(stored_digest)
        provided = bytes.fromhex(hash_secret(candidate))
        return hmac.compare_digest(expected, provided)
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.error("Error verifying admin secret: %s", type(e).__name__)
        return False


def make_admin_digest(password: str, hardened: bool = False) -> str:
    """
    Produce a storable digest for an admin password.

    Args:
        password: New admin password
        hardened: Use a salted KDF encoding instead of bare SHA-256

    Returns:
        Digest string for ADMIN_PASSWORD_HASH
    """
    if hardened:
        return make_password(password)
    return hash_secret(password)


def generate_api_secret() -> str:
    """Generate a random 32-byte signing secret, hex encoded."""
    return secrets.token_hex(32)


class CredentialVerifier:
    """Verifies admin secrets against one configured digest."""

    def __init__(self, stored_digest: str):
        """Initialize verifier with the stored admin digest."""
        self._stored_digest = stored_digest

    @property
    def is_hardened(self) -> bool:
        """Whether the configured digest uses a salted KDF."""
        return is_hardened_digest(self._stored_digest)

    def verify(self, candidate: str) -> bool:
        """Return True if candidate matches the configured digest."""
        return verify_admin_secret(candidate, self._stored_digest)
