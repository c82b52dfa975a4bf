"""
Flow Assembly Service
Turns an ordered list of email steps into a Klaviyo flow.

Call order for one request (strictly sequential, nothing runs in parallel):
    create flow
    for each step:
        create email action -> create template -> link template -> [create delay]

Failure Policy:
- Flow creation failure is fatal (FlowCreationError)
- Any later failure is recorded on that step and the loop moves on
- A failed email action skips the template, link and delay for that step
- Nothing is retried
"""
import logging
from typing import Any, Dict, Optional

from app.shared.utils.exceptions import (
    FlowBuilderError,
    FlowCreationError,
    KlaviyoAPIError,
    UnexpectedError,
    ValidationError,
)
from app.shared.utils.html_utils import strip_html_tags
from app.shared.core.constants import (
    DEFAULT_FROM_EMAIL,
    DEFAULT_FROM_LABEL,
    DEFAULT_TRACK_CLICKS,
    DEFAULT_TRACK_OPENS,
)
from app.modules.flow_builder.constants import (
    ActionStatus,
    ActionType,
    DelayUnit,
    FailureStage,
    FlowStatus,
    TriggerType,
    summary_message,
    template_name_for_step,
)
from app.modules.flow_builder.models.sequence_result import SequenceResult, StepOutcome
from app.modules.flow_builder.schemas.flow_schemas import CreateSequenceRequest, EmailStep
from app.modules.flow_builder.services.klaviyo_client import KlaviyoClient, open_klaviyo_client

logger = logging.getLogger("flow_assembly_service")


class FlowAssemblyService:
    """
    Builds one Klaviyo flow per call to assemble().

    Holds no state between calls, so a single instance can serve
    concurrent requests.
    """

    # ============================================
    # ENTRY POINT
    # ============================================

    async def assemble(
        self,
        request: CreateSequenceRequest,
        client: Optional[KlaviyoClient] = None
    ) -> SequenceResult:
        """
        Create the flow, its email actions, templates and delays.

        Args:
            request: Sequence to build
            client: Client to use; when omitted a fresh one is opened with
                the request's API key and closed afterwards

        Returns:
            SequenceResult (also when some steps failed)

        Raises:
            ValidationError: Required fields missing; no remote call made
            FlowCreationError: The flow itself could not be created
            UnexpectedError: Anything else that went wrong
        """
        self._validate(request)

        try:
            if client is not None:
                return await self._build_flow(client, request)

            async with open_klaviyo_client(request.api_key) as own_client:
                return await self._build_flow(own_client, request)

        except FlowBuilderError:
            raise
        except Exception as e:
            logger.exception(f"Unexpected error assembling flow '{request.flow_name}'")
            raise UnexpectedError(str(e) or "Unknown error occurred") from e

    @staticmethod
    def _validate(request: CreateSequenceRequest) -> None:
        if not (request.api_key or "").strip():
            raise ValidationError()
        if not (request.flow_name or "").strip():
            raise ValidationError()
        if not request.email_steps:
            raise ValidationError()

    # ============================================
    # ASSEMBLY
    # ============================================

    async def _build_flow(self, client: KlaviyoClient, request: CreateSequenceRequest) -> SequenceResult:
        flow_name = request.flow_name
        steps = request.email_steps
        logger.info(f"Assembling flow '{flow_name}' with {len(steps)} email(s)")

        try:
            flow = await client.create_flow(flow_name, FlowStatus.DRAFT, TriggerType.LIST)
        except KlaviyoAPIError as e:
            logger.error(f"Failed to create flow '{flow_name}': {e.status_code} - {e.body}")
            raise FlowCreationError(e.status_code, e.body) from e

        result = SequenceResult(flow_id=flow.id)
        for index, step in enumerate(steps):
            result.steps.append(await self._build_step(client, flow.id, flow_name, index, step))

        result.message = summary_message(flow_name, len(steps))

        if result.is_partial:
            logger.warning(
                f"Flow {flow.id} built with failures: {len(result.action_ids)}/{len(steps)} "
                f"email actions created, {len(result.failures)} failed call(s)"
            )
        else:
            logger.info(f"Flow {flow.id} built: {len(result.action_ids)} email action(s)")

        return result

    async def _build_step(
        self,
        client: KlaviyoClient,
        flow_id: str,
        flow_name: str,
        index: int,
        step: EmailStep
    ) -> StepOutcome:
        """Run one step's calls. Never raises KlaviyoAPIError."""
        outcome = StepOutcome(step=index)

        try:
            action = await client.create_flow_action(
                flow_id,
                ActionType.EMAIL,
                ActionStatus.DRAFT,
                self._email_settings(step),
                tracking_options=self._tracking_options()
            )
        except KlaviyoAPIError as e:
            logger.error(f"Failed to create action {index + 1}: {e.body}")
            outcome.fail(FailureStage.ACTION, e.status_code, e.body)
            return outcome

        outcome.action_id = action.id

        await self._attach_template(client, flow_name, index, step, outcome)

        if index > 0 and step.delay_days > 0:
            await self._add_delay(client, flow_id, index, step, outcome)

        return outcome

    async def _attach_template(
        self,
        client: KlaviyoClient,
        flow_name: str,
        index: int,
        step: EmailStep,
        outcome: StepOutcome
    ) -> None:
        """
        Create the step's template, then link it to the email action.
        Either failure leaves the action in place without content.
        """
        try:
            template = await client.create_template(
                template_name_for_step(flow_name, index),
                step.content,
                strip_html_tags(step.content)
            )
        except KlaviyoAPIError as e:
            logger.error(f"Failed to create template for email {index + 1}: {e.body}")
            outcome.fail(FailureStage.TEMPLATE, e.status_code, e.body)
            return

        outcome.template_id = template.id

        try:
            await client.link_template_to_action(outcome.action_id, template.id)
        except KlaviyoAPIError as e:
            # Action id stays in the result; only the link is reported
            logger.error(f"Failed to link template {template.id} to action {outcome.action_id}: {e.body}")
            outcome.fail(FailureStage.LINK, e.status_code, e.body)
            return

        outcome.linked = True

    async def _add_delay(
        self,
        client: KlaviyoClient,
        flow_id: str,
        index: int,
        step: EmailStep,
        outcome: StepOutcome
    ) -> None:
        try:
            delay = await client.create_flow_action(
                flow_id,
                ActionType.TIME_DELAY,
                ActionStatus.LIVE,
                {"delay": step.delay_days, "delay_unit": DelayUnit.DAYS.value}
            )
        except KlaviyoAPIError as e:
            logger.error(f"Failed to create {step.delay_days}-day delay before email {index + 1}: {e.body}")
            outcome.fail(FailureStage.DELAY, e.status_code, e.body)
            return

        outcome.delay_action_id = delay.id

    # ============================================
    # PAYLOAD HELPERS
    # ============================================

    @staticmethod
    def _email_settings(step: EmailStep) -> Dict[str, Any]:
        return {
            "subject": step.subject,
            "from_email": DEFAULT_FROM_EMAIL,
            "from_label": DEFAULT_FROM_LABEL,
        }

    @staticmethod
    def _tracking_options() -> Dict[str, bool]:
        return {
            "is_tracking_opens": DEFAULT_TRACK_OPENS,
            "is_tracking_clicks": DEFAULT_TRACK_CLICKS,
        }


def to_response_payload(result: SequenceResult, list_id: Optional[str] = None) -> Dict[str, Any]:
    """Shape a SequenceResult the way the API and CLI report it."""
    return {
        "success": True,
        "flowId": result.flow_id,
        "actionIds": result.action_ids,
        "message": result.message,
        "failures": [f.to_dict() for f in result.failures],
        "listId": list_id,
    }


flow_assembly_service = FlowAssemblyService()
