"""
Shared Utility Functions
"""
from app.shared.utils.html_utils import strip_html_tags
from app.shared.utils.exceptions import (
    FlowBuilderError,
    ValidationError,
    FlowCreationError,
    UnexpectedError,
    KlaviyoAPIError,
)

__all__ = [
    "strip_html_tags",
    "FlowBuilderError",
    "ValidationError",
    "FlowCreationError",
    "UnexpectedError",
    "KlaviyoAPIError",
]
