"""
Flow Builder Module

Builds Klaviyo automation flows from an ordered list of emails.
Key features:
- One draft flow per submitted sequence
- One email action plus template per step
- Time-delay actions between emails
- Best-effort: failed steps are reported, not retried
"""

from .services.flow_assembly_service import FlowAssemblyService, flow_assembly_service
from .models.sequence_result import SequenceResult, StepFailure, StepOutcome

__all__ = [
    "FlowAssemblyService",
    "flow_assembly_service",
    "SequenceResult",
    "StepFailure",
    "StepOutcome",
]
