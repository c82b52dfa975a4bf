"""
Flow Builder Services

Klaviyo client and the flow assembly logic built on top of it.
"""

from .klaviyo_client import KlaviyoClient, open_klaviyo_client
from .flow_assembly_service import FlowAssemblyService, flow_assembly_service

__all__ = [
    "KlaviyoClient",
    "open_klaviyo_client",
    "FlowAssemblyService",
    "flow_assembly_service",
]
