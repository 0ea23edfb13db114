"""Inbound webhook event model."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from urllib.parse import parse_qs

if TYPE_CHECKING:
    from collections.abc import Mapping

EVENT_HEADER = "x-github-event"
SIGNATURE_HEADER = "x-hub-signature-256"
DELIVERY_HEADER = "x-github-delivery"

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def parse_body(raw_body: bytes, content_type: str = "") -> dict[str, Any]:
    """Parse a webhook body into a payload dictionary.

    Form-encoded bodies are read as fields; GitHub's form content type wraps
    the JSON document in a ``payload`` field. Everything else is read as JSON.
    Bodies that cannot be decoded into an object produce an empty payload.

    Args:
        raw_body: The raw request body bytes.
        content_type: The Content-Type header value.

    Returns:
        Parsed payload.
    """
    text = raw_body.decode("utf-8", errors="replace")

    if content_type.split(";")[0].strip().lower() == FORM_CONTENT_TYPE:
        fields = {key: values[-1] for key, values in parse_qs(text).items()}
        if "payload" not in fields:
            return fields
        text = fields["payload"]

    if not text.strip():
        return {}

    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        return {}

    return payload if isinstance(payload, dict) else {}


@dataclass(frozen=True)
class InboundEvent:
    """A webhook request as seen by the dispatcher."""

    event_type: str
    ref: str | None
    raw_body: bytes = field(repr=False)
    signature: str | None = None
    delivery_id: str | None = None

    @property
    def branch(self) -> str:
        """Last path segment of the ref (``refs/heads/main`` -> ``main``)."""
        if not self.ref:
            return ""
        return self.ref.rsplit("/", 1)[-1]

    @classmethod
    def from_request(cls, headers: Mapping[str, str], raw_body: bytes) -> InboundEvent:
        """Create an event from request headers and the raw body.

        Args:
            headers: Request headers (case-insensitive lookup is done here).
            raw_body: The raw request body bytes.

        Returns:
            InboundEvent instance.
        """
        lowered = {k.lower(): v for k, v in headers.items()}
        payload = parse_body(raw_body, lowered.get("content-type", ""))
        ref = payload.get("ref")

        return cls(
            event_type=lowered.get(EVENT_HEADER, ""),
            ref=ref if isinstance(ref, str) else None,
            raw_body=raw_body,
            signature=lowered.get(SIGNATURE_HEADER),
            delivery_id=lowered.get(DELIVERY_HEADER),
        )
