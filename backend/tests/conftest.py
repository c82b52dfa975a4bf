# backend/tests/conftest.py
"""
Shared fixtures for all test modules.
Async code is driven with asyncio.run() inside plain tests, so there are
no async fixtures here.
"""

import itertools

import pytest
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient

from app.main import app
from app.shared.utils.exceptions import KlaviyoAPIError
from app.modules.flow_builder.constants import ActionType
from app.modules.flow_builder.models.sequence_result import ActionRef, FlowRef, TemplateRef
from app.modules.flow_builder.schemas.flow_schemas import CreateSequenceRequest

# Failure value meaning a fault with no HTTP status (connection refused, timeout, ...)
TRANSPORT = "transport"


# --- TEST CLIENT FIXTURE ---
@pytest.fixture(scope="module")
def test_client():
    """Create a FastAPI test client."""
    return TestClient(app)


# --- FAKE KLAVIYO CLIENT ---
class FakeKlaviyo:
    """
    Stand-in for KlaviyoClient whose methods are AsyncMocks.

    Every call is recorded in self.calls as (operation, step index) in the
    order it was made. Failures are configured per (stage, step):

        FakeKlaviyo(fail={("action", 1): 500, ("delay", 2): TRANSPORT})

    flow_error makes create_flow fail with that status (or TRANSPORT).
    """

    def __init__(self, fail=None, flow_error=None):
        self.fail = fail or {}
        self.flow_error = flow_error
        self.calls = []
        self._ids = itertools.count(1)
        self._step = -1

        self.create_flow = AsyncMock(side_effect=self._create_flow)
        self.create_flow_action = AsyncMock(side_effect=self._create_flow_action)
        self.create_template = AsyncMock(side_effect=self._create_template)
        self.link_template_to_action = AsyncMock(side_effect=self._link_template_to_action)

    @staticmethod
    def _error(status, stage):
        if status == TRANSPORT:
            return KlaviyoAPIError(None, "ConnectError")
        return KlaviyoAPIError(status, f'{{"errors": [{{"detail": "{stage} rejected"}}]}}')

    def _maybe_fail(self, stage):
        status = self.fail.get((stage, self._step))
        if status is not None:
            raise self._error(status, stage)

    def _create_flow(self, name, status, trigger_type):
        self.calls.append(("flow", None))
        if self.flow_error is not None:
            raise self._error(self.flow_error, "flow")
        return FlowRef(id=f"FLOW{next(self._ids)}")

    def _create_flow_action(self, flow_id, action_type, status, action_settings, tracking_options=None):
        if action_type == ActionType.EMAIL:
            self._step += 1
            self.calls.append(("email", self._step))
            self._maybe_fail("action")
            return ActionRef(id=f"ACT{next(self._ids)}")

        self.calls.append(("delay", self._step))
        self._maybe_fail("delay")
        return ActionRef(id=f"DLY{next(self._ids)}")

    def _create_template(self, name, html, text):
        self.calls.append(("template", self._step))
        self._maybe_fail("template")
        return TemplateRef(id=f"TPL{next(self._ids)}")

    def _link_template_to_action(self, action_id, template_id):
        self.calls.append(("link", self._step))
        self._maybe_fail("link")

    def operations(self, name):
        return [step for op, step in self.calls if op == name]


@pytest.fixture
def fake_klaviyo():
    """Factory for FakeKlaviyo instances."""
    return FakeKlaviyo


# --- SAMPLE REQUEST FIXTURES ---
def _make_request(steps, flow_name="Welcome", api_key="pk_test_123", list_id=None):
    return CreateSequenceRequest(
        api_key=api_key,
        list_id=list_id,
        flow_name=flow_name,
        email_steps=[
            {"subject": subject, "content": content, "delay_days": delay}
            for subject, content, delay in steps
        ]
    )


@pytest.fixture
def make_sequence_request():
    """Build a request from (subject, content, delay_days) tuples."""
    return _make_request


@pytest.fixture
def three_step_request():
    """Welcome series: the first email's delay is ignored, then 2 and 0 days."""
    return _make_request([
        ("Welcome!", "<h1>Welcome!</h1><p>Thanks</p>", 3),
        ("Getting started", "<p>Step one</p>", 2),
        ("Same day tip", "<p>Tip</p>", 0),
    ])
