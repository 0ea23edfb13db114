"""Webhook dispatcher: verifies push notifications and starts deployments."""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.background import BackgroundTask
from starlette.responses import PlainTextResponse

from deployhook.models.event import InboundEvent
from deployhook.models.target import DeploymentInvocation
from deployhook.webhook.validators import verify_webhook_signature

if TYPE_CHECKING:
    from starlette.requests import Request

    from deployhook.context import DeployContext

PUSH_EVENT = "push"


class WebhookDispatcher:
    """Handles ``POST /handler`` requests.

    The response code depends only on signature validity. Everything after
    the 202 response runs as a background task, so the webhook sender never
    waits for a deployment.
    """

    def __init__(self, context: DeployContext) -> None:
        self._context = context
        self._logger = context.logger

    async def handle(self, request: Request) -> PlainTextResponse:
        """Verify the request and schedule processing after the response.

        Args:
            request: The incoming webhook request.

        Returns:
            401 for a bad signature when a secret is configured, otherwise 202.
        """
        body = await request.body()
        event = InboundEvent.from_request(request.headers, body)

        is_valid = verify_webhook_signature(self._context.secret, event.raw_body, event.signature)

        if self._context.verifies_signatures and not is_valid:
            self._logger.error(
                "The signature is not valid.",
                extra={"event_type": event.event_type, "delivery_id": event.delivery_id},
            )
            return PlainTextResponse("Unauthorized", status_code=401)

        return PlainTextResponse(
            "Accepted",
            status_code=202,
            background=BackgroundTask(self._process_safely, event),
        )

    async def _process_safely(self, event: InboundEvent) -> None:
        # Runs after the response is sent; failures stay with this request
        try:
            self.process(event)
        except Exception:
            self._logger.exception(
                "Failed to process webhook event",
                extra={"event_type": event.event_type, "delivery_id": event.delivery_id},
            )

    def process(self, event: InboundEvent) -> DeploymentInvocation | None:
        """Route an accepted event to its deployment target.

        Args:
            event: An event whose signature was accepted.

        Returns:
            The started deployment, or None if the event was skipped.
        """
        if event.event_type != PUSH_EVENT:
            return None

        branch = event.branch
        if not branch:
            self._logger.error("Branch is undefined.", extra={"ref": event.ref})
            return None

        registry = self._context.registry
        if branch not in registry.branch_to_script:
            self._logger.info("PUSH event skipped.", extra={"branch": branch})
            return None

        target = registry.target_for(branch)

        self._logger.info(
            "Starting the deployment",
            extra={
                "target": target.name,
                "branch": branch,
                "delivery_id": event.delivery_id,
            },
        )
        self._context.launcher.launch(registry.branch_to_script[branch])

        return DeploymentInvocation(target=target, branch=branch)
