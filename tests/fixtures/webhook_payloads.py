"""Sample webhook payloads and request helpers for testing."""

import json
from typing import Any

from deployhook.webhook.validators import compute_signature


def create_push_payload(
    ref: str | None = "refs/heads/main",
    repository: str = "owner/repo",
    after: str = "a" * 40,
    pusher: str = "testuser",
) -> dict[str, Any]:
    """Create a push webhook payload.

    Args:
        ref: The pushed ref, or None to leave it out.
        repository: Full repository name.
        after: SHA of the new head commit.
        pusher: Login of the user who pushed.

    Returns:
        Push event payload.
    """
    payload: dict[str, Any] = {
        "before": "0" * 40,
        "after": after,
        "repository": {
            "id": 987654321,
            "full_name": repository,
            "default_branch": "main",
        },
        "pusher": {"name": pusher},
        "sender": {"login": pusher, "id": 12345},
        "head_commit": {"id": after, "message": "Update"},
    }
    if ref is not None:
        payload["ref"] = ref
    return payload


def create_ping_payload() -> dict[str, Any]:
    """Create a ping webhook payload."""
    return {
        "zen": "Responsive is better than fast.",
        "hook_id": 123456,
        "hook": {"type": "Repository", "id": 789012},
    }


def create_headers(
    event_type: str,
    body: bytes,
    secret: bytes | None = None,
    signature: str | None = None,
) -> dict[str, str]:
    """Create webhook request headers.

    Args:
        event_type: The X-GitHub-Event value.
        body: The exact body bytes that will be sent.
        secret: Secret to sign ``body`` with, if any.
        signature: Explicit signature header, overriding ``secret``.

    Returns:
        Header dictionary.
    """
    headers = {
        "X-GitHub-Event": event_type,
        "X-GitHub-Delivery": "test-delivery-123",
        "Content-Type": "application/json",
    }
    if signature is None and secret is not None:
        signature = compute_signature(secret, body)
    if signature is not None:
        headers["X-Hub-Signature-256"] = signature
    return headers


def encode(payload: dict[str, Any]) -> bytes:
    """Serialize a payload the way it is sent on the wire."""
    return json.dumps(payload).encode()
