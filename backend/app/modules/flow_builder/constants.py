"""
Flow Builder Constants
Enums for the values Klaviyo expects on flows and flow actions.

Inheriting from str lets the members go straight into JSON payloads
without .value conversion.
"""
from enum import Enum


class FlowStatus(str, Enum):
    """Status a flow is created with. Flows are never activated here."""
    DRAFT = "draft"


class TriggerType(str, Enum):
    """How a flow is triggered."""
    LIST = "List"  # Profile added to a list


class ActionType(str, Enum):
    """Flow action variants this service creates."""
    EMAIL = "email"
    TIME_DELAY = "time_delay"


class ActionStatus(str, Enum):
    """
    Status a flow action is created with.

    Email actions are created as DRAFT like the flow itself, but Klaviyo
    requires time-delay actions to be LIVE. Always pass this explicitly.
    """
    DRAFT = "draft"
    LIVE = "live"


class DelayUnit(str, Enum):
    """Unit for time-delay actions."""
    DAYS = "days"


class FailureStage(str, Enum):
    """Which remote call of a step failed."""
    ACTION = "action"      # Email action creation (step excluded from action ids)
    TEMPLATE = "template"  # Template creation (email left without content)
    LINK = "link"          # Template -> action association
    DELAY = "delay"        # Time-delay action creation


def template_name_for_step(flow_name: str, step_index: int) -> str:
    """Template name shown in Klaviyo, numbered from 1."""
    return f"{flow_name} - Email {step_index + 1}"


def summary_message(flow_name: str, requested_steps: int) -> str:
    """Summary returned to the caller; always counts the requested steps."""
    return f'Flow "{flow_name}" created successfully with {requested_steps} email(s)'
