"""Webhook signature validation."""

import hashlib
import hmac

SIGNATURE_PREFIX = "sha256="


def compute_signature(secret: bytes, payload: bytes) -> str:
    """Return the ``sha256=<hex>`` signature GitHub sends for ``payload``."""
    return SIGNATURE_PREFIX + hmac.new(secret, payload, hashlib.sha256).hexdigest()


def verify_webhook_signature(secret: bytes | None, payload: bytes, signature: str | None) -> bool:
    """Verify the HMAC-SHA256 signature of a webhook payload.

    Never raises: a missing or malformed header is a failed verification.
    Without a secret there is nothing to verify against and the result is
    False; callers in open mode do not consult it.

    Args:
        secret: The shared webhook secret, or None in open mode.
        payload: The raw request body bytes.
        signature: The X-Hub-Signature-256 header value.

    Returns:
        True if the signature matches the payload.
    """
    if not secret or not signature:
        return False

    if not signature.startswith(SIGNATURE_PREFIX):
        return False

    expected = compute_signature(secret, payload)

    # compare_digest rejects non-ASCII str, so compare bytes
    return hmac.compare_digest(
        expected.encode("ascii"),
        signature.encode("utf-8", errors="replace"),
    )
