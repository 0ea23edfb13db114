"""Unit tests for webhook signature verification."""

import hashlib
import hmac

import pytest

from deployhook.webhook.validators import compute_signature, verify_webhook_signature

SECRET = b"test-secret"
PAYLOAD = b'{"ref": "refs/heads/main"}'


def _sign(secret: bytes, payload: bytes) -> str:
    return "sha256=" + hmac.new(secret, payload, hashlib.sha256).hexdigest()


class TestVerifyWebhookSignature:
    """Tests for webhook signature verification."""

    def test_valid_signature(self) -> None:
        """Test that a correctly computed signature is accepted."""
        assert verify_webhook_signature(SECRET, PAYLOAD, _sign(SECRET, PAYLOAD)) is True

    def test_invalid_signature(self) -> None:
        """Test that a garbage signature is rejected."""
        assert verify_webhook_signature(SECRET, PAYLOAD, "sha256=invalid") is False

    def test_missing_prefix(self) -> None:
        """Test that a signature without the sha256= prefix is rejected."""
        signature = hmac.new(SECRET, PAYLOAD, hashlib.sha256).hexdigest()

        assert verify_webhook_signature(SECRET, PAYLOAD, signature) is False

    @pytest.mark.parametrize("signature", [None, ""])
    def test_missing_signature(self, signature: str | None) -> None:
        """Test that an absent or empty header is rejected."""
        assert verify_webhook_signature(SECRET, PAYLOAD, signature) is False

    def test_wrong_secret(self) -> None:
        """Test that a signature made with another secret is rejected."""
        signature = _sign(b"other-secret", PAYLOAD)

        assert verify_webhook_signature(SECRET, PAYLOAD, signature) is False

    def test_non_ascii_signature_does_not_raise(self) -> None:
        """Test that a malformed non-ASCII header is a plain failure."""
        assert verify_webhook_signature(SECRET, PAYLOAD, "sha256=ééé") is False

    def test_no_secret_is_never_valid(self) -> None:
        """Test that open mode has nothing to verify against."""
        assert verify_webhook_signature(None, PAYLOAD, _sign(SECRET, PAYLOAD)) is False

    def test_deterministic(self) -> None:
        """Test that the same inputs always give the same answer."""
        signature = _sign(SECRET, PAYLOAD)
        results = {verify_webhook_signature(SECRET, PAYLOAD, signature) for _ in range(5)}

        assert results == {True}

    def test_every_single_byte_corruption_fails(self) -> None:
        """Test that flipping any one byte of the body breaks the signature."""
        signature = _sign(SECRET, PAYLOAD)

        for index in range(len(PAYLOAD)):
            corrupted = bytearray(PAYLOAD)
            corrupted[index] ^= 0x01
            assert verify_webhook_signature(SECRET, bytes(corrupted), signature) is False


class TestComputeSignature:
    """Tests for signature computation."""

    def test_matches_github_format(self) -> None:
        """Test that the signature is sha256= followed by the hex digest."""
        signature = compute_signature(SECRET, PAYLOAD)

        assert signature == _sign(SECRET, PAYLOAD)
        assert len(signature) == len("sha256=") + 64
