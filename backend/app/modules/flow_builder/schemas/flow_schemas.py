"""
Flow Builder - Pydantic Schemas
Request and Response models for API endpoints.

The wire format uses camelCase (apiKey, flowName, emailSteps, delayDays);
snake_case field names are accepted as well.
"""
from typing import Optional, List
from pydantic import BaseModel, Field


# ============================================
# REQUEST MODELS
# ============================================

class EmailStep(BaseModel):
    """One email in the sequence"""
    subject: str = Field(
        default="",
        description="Email subject line"
    )
    content: str = Field(
        default="",
        description="Email body as HTML"
    )
    delay_days: int = Field(
        default=0,
        ge=0,
        alias="delayDays",
        description="Days to wait after the previous email (ignored for the first email)"
    )

    class Config:
        populate_by_name = True


class CreateSequenceRequest(BaseModel):
    """
    Request to build a Klaviyo flow from an ordered list of emails.

    Required fields are deliberately not enforced here: missing or empty
    values are rejected by the service with a 400 before any remote call.
    """
    api_key: Optional[str] = Field(
        default=None,
        alias="apiKey",
        description="Klaviyo private API key (used for this request only, never stored)"
    )
    list_id: Optional[str] = Field(
        default=None,
        alias="listId",
        description="Optional Klaviyo list the flow is meant for"
    )
    flow_name: Optional[str] = Field(
        default=None,
        alias="flowName",
        description="Name of the flow to create"
    )
    email_steps: Optional[List[EmailStep]] = Field(
        default=None,
        alias="emailSteps",
        description="Emails in send order"
    )

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "apiKey": "pk_your_private_key",
                "listId": "XyZ123",
                "flowName": "Welcome Series",
                "emailSteps": [
                    {"subject": "Welcome!", "content": "<h1>Welcome!</h1><p>Thanks for joining.</p>", "delayDays": 0},
                    {"subject": "Getting started", "content": "<p>Here is how to begin.</p>", "delayDays": 2}
                ]
            }
        }


# ============================================
# RESPONSE MODELS
# ============================================

class StepFailureItem(BaseModel):
    """A remote call that failed within one step"""
    step: int = Field(..., description="0-based step index")
    stage: str = Field(..., description="action, template, link or delay")
    status: Optional[int] = Field(default=None, description="Upstream HTTP status (null for transport errors)")
    error: str = Field(..., description="Upstream response body or fault message")


class SequenceResponse(BaseModel):
    """
    Response for a built flow.

    success is true even when some steps failed; message always counts the
    requested emails. Compare len(actionIds) to the request, or check
    failures, to detect a partial result.
    """
    success: bool = True
    flow_id: str = Field(..., alias="flowId")
    action_ids: List[str] = Field(default_factory=list, alias="actionIds")
    message: str
    failures: List[StepFailureItem] = Field(default_factory=list)
    list_id: Optional[str] = Field(default=None, alias="listId")

    class Config:
        populate_by_name = True


class ConfigStatusResponse(BaseModel):
    """Klaviyo connection settings currently in effect"""
    api_base_url: str
    api_revision: str
    timeout_seconds: float
