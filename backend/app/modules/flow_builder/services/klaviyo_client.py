"""
Klaviyo Client Service
Low-level API wrapper for the Klaviyo REST API (JSON:API style payloads).

API Documentation: https://developers.klaviyo.com/en/reference/api_overview

Handles:
- Authentication via "Klaviyo-API-Key <private key>"
- The 'revision' header required on every call
- Create flow / flow action / template
- Link a template to a flow action (PATCH on the action's relationships)

Failure Handling:
- Non-2xx responses, transport faults (connect errors, timeouts) and 2xx
  bodies without a resource id all raise KlaviyoAPIError
- Nothing is retried: every method maps to exactly one HTTP request
"""
import logging
from contextlib import asynccontextmanager
from typing import Dict, Any, Optional, AsyncIterator

import httpx

from app.shared.core.config import settings
from app.shared.core.constants import (
    KLAVIYO_AUTH_SCHEME,
    KLAVIYO_FLOWS_PATH,
    KLAVIYO_FLOW_ACTIONS_PATH,
    KLAVIYO_TEMPLATES_PATH,
    TIMEOUT_KLAVIYO_CONNECT,
)
from app.shared.utils.exceptions import KlaviyoAPIError
from app.modules.flow_builder.constants import (
    ActionStatus,
    ActionType,
    FlowStatus,
    TriggerType,
)
from app.modules.flow_builder.models.sequence_result import ActionRef, FlowRef, TemplateRef

logger = logging.getLogger("klaviyo_client")


class KlaviyoClient:
    """
    Klaviyo API client for building flows.

    One instance serves one assembly: it holds that request's credential
    and an httpx.AsyncClient opened for that request only.
    """

    def __init__(self, api_key: str, http_client: httpx.AsyncClient, revision: Optional[str] = None):
        self.api_key = api_key
        self.http_client = http_client
        self.revision = revision or settings.KLAVIYO_API_REVISION

    def _get_headers(self) -> Dict[str, str]:
        """Get common headers for Klaviyo API requests."""
        return {
            "Authorization": f"{KLAVIYO_AUTH_SCHEME} {self.api_key}",
            "revision": self.revision,
            "Content-Type": "application/json",
            "Accept": "application/json"
        }

    async def _send(self, method: str, path: str, payload: Dict[str, Any]) -> httpx.Response:
        """
        Issue one request and return the response if it succeeded.
        Raises KlaviyoAPIError otherwise.
        """
        try:
            response = await self.http_client.request(
                method,
                path,
                headers=self._get_headers(),
                json=payload
            )
        except httpx.HTTPError as e:
            detail = str(e) or e.__class__.__name__
            logger.error(f"{method} {path} transport error: {detail}")
            raise KlaviyoAPIError(None, detail) from e

        if not response.is_success:
            logger.error(f"{method} {path} failed: {response.status_code} - {response.text}")
            raise KlaviyoAPIError(response.status_code, response.text)

        return response

    @staticmethod
    def _extract_id(response: httpx.Response) -> str:
        """Pull data.id out of a JSON:API response body."""
        try:
            resource_id = response.json()["data"]["id"]
        except (ValueError, KeyError, TypeError):
            raise KlaviyoAPIError(response.status_code, response.text)

        if not resource_id:
            raise KlaviyoAPIError(response.status_code, response.text)
        return str(resource_id)

    # ============================================
    # FLOW OPERATIONS
    # ============================================

    async def create_flow(
        self,
        name: str,
        status: FlowStatus = FlowStatus.DRAFT,
        trigger_type: TriggerType = TriggerType.LIST
    ) -> FlowRef:
        """Create an empty flow."""
        payload = {
            "data": {
                "type": "flow",
                "attributes": {
                    "name": name,
                    "status": status.value,
                    "trigger_type": trigger_type.value,
                }
            }
        }
        response = await self._send("POST", KLAVIYO_FLOWS_PATH, payload)
        flow = FlowRef(id=self._extract_id(response))
        logger.info(f"Flow created: {flow.id} ({name})")
        return flow

    async def create_flow_action(
        self,
        flow_id: str,
        action_type: ActionType,
        status: ActionStatus,
        action_settings: Dict[str, Any],
        tracking_options: Optional[Dict[str, bool]] = None
    ) -> ActionRef:
        """
        Create a flow action owned by flow_id.

        Args:
            flow_id: Flow the action belongs to
            action_type: EMAIL or TIME_DELAY
            status: Explicit status; email actions are DRAFT, delays are LIVE
            action_settings: Variant-specific settings (subject/sender or delay/unit)
            tracking_options: Open/click tracking flags (email actions only)
        """
        attributes: Dict[str, Any] = {
            "action_type": action_type.value,
            "status": status.value,
            "settings": action_settings,
        }
        if tracking_options is not None:
            attributes["tracking_options"] = tracking_options

        payload = {
            "data": {
                "type": "flow-action",
                "attributes": attributes,
                "relationships": {
                    "flow": {
                        "data": {"type": "flow", "id": flow_id}
                    }
                }
            }
        }
        response = await self._send("POST", KLAVIYO_FLOW_ACTIONS_PATH, payload)
        action = ActionRef(id=self._extract_id(response))
        logger.debug(f"Flow action created: {action.id} ({action_type.value}) in flow {flow_id}")
        return action

    async def link_template_to_action(self, action_id: str, template_id: str) -> None:
        """
        Point an email action's flow-messages relationship at a template.
        Klaviyo cannot create an action with its message in one call.
        """
        payload = {
            "data": {
                "type": "flow-action",
                "id": action_id,
                "relationships": {
                    "flow-messages": {
                        "data": [{"type": "flow-message", "id": template_id}]
                    }
                }
            }
        }
        await self._send("PATCH", f"{KLAVIYO_FLOW_ACTIONS_PATH}{action_id}/", payload)
        logger.debug(f"Template {template_id} linked to action {action_id}")

    # ============================================
    # TEMPLATE OPERATIONS
    # ============================================

    async def create_template(self, name: str, html: str, text: str) -> TemplateRef:
        """Create a message template with HTML and plain-text bodies."""
        payload = {
            "data": {
                "type": "template",
                "attributes": {
                    "name": name,
                    "html": html,
                    "text": text,
                }
            }
        }
        response = await self._send("POST", KLAVIYO_TEMPLATES_PATH, payload)
        template = TemplateRef(id=self._extract_id(response))
        logger.debug(f"Template created: {template.id} ({name})")
        return template


def build_http_client(timeout: Optional[float] = None) -> httpx.AsyncClient:
    """Create an AsyncClient pointed at the configured Klaviyo base URL."""
    return httpx.AsyncClient(
        base_url=settings.KLAVIYO_API_BASE_URL.rstrip("/"),
        timeout=httpx.Timeout(
            timeout=timeout or settings.KLAVIYO_TIMEOUT_SECONDS,
            connect=TIMEOUT_KLAVIYO_CONNECT
        )
    )


@asynccontextmanager
async def open_klaviyo_client(api_key: str) -> AsyncIterator[KlaviyoClient]:
    """
    Yield a KlaviyoClient backed by its own AsyncClient.

    Each assembly opens one of these, so concurrent requests share no
    connections, credentials or ids.

    Usage:
        async with open_klaviyo_client(api_key) as client:
            flow = await client.create_flow("Welcome")
    """
    async with build_http_client() as http_client:
        yield KlaviyoClient(api_key, http_client)
