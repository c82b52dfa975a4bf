"""
Flow Builder API Endpoints
Builds Klaviyo flows from submitted email sequences.
"""
import logging
from fastapi import APIRouter, HTTPException

from app.shared.core.config import settings
from app.shared.utils.exceptions import FlowBuilderError
from app.modules.flow_builder.services.flow_assembly_service import (
    flow_assembly_service,
    to_response_payload,
)
from app.modules.flow_builder.schemas.flow_schemas import (
    CreateSequenceRequest,
    SequenceResponse,
    ConfigStatusResponse,
)

router = APIRouter()
logger = logging.getLogger("flow_api")


# ============================================
# CONFIGURATION ENDPOINT
# ============================================

@router.get("/config", response_model=ConfigStatusResponse, summary="Show Klaviyo connection settings")
async def get_config_status():
    """
    Report which Klaviyo endpoint and API revision requests are sent to.

    No credential is involved: every request brings its own API key.
    """
    return ConfigStatusResponse(
        api_base_url=settings.KLAVIYO_API_BASE_URL,
        api_revision=settings.KLAVIYO_API_REVISION,
        timeout_seconds=settings.KLAVIYO_TIMEOUT_SECONDS
    )


# ============================================
# SEQUENCE ENDPOINT
# ============================================

@router.post("/sequences", response_model=SequenceResponse, summary="Create a Klaviyo flow from an email sequence")
async def create_sequence(request: CreateSequenceRequest):
    """
    Create a draft flow with one email per step and delays between them.

    Responses:
    - 200: Flow created. Individual steps may still have failed: compare
      actionIds with the number of submitted emails, or read failures.
    - 400: apiKey, flowName or emailSteps missing/empty
    - 4xx/5xx from Klaviyo (502 if unreachable): the flow itself was not created
    - 500: Unexpected error
    """
    try:
        result = await flow_assembly_service.assemble(request)
    except FlowBuilderError as e:
        logger.error(f"Sequence '{request.flow_name}' rejected: {e.status_code} - {e.message}")
        raise HTTPException(status_code=e.status_code, detail=e.message)

    return SequenceResponse.model_validate(to_response_payload(result, request.list_id))
