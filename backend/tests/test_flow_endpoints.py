# backend/tests/test_flow_endpoints.py
from unittest.mock import AsyncMock, patch

from app.shared.utils.exceptions import FlowCreationError, UnexpectedError
from app.modules.flow_builder.constants import FailureStage
from app.modules.flow_builder.models.sequence_result import SequenceResult, StepOutcome

SEQUENCE_URL = "/api/v1/flows/sequences"
ASSEMBLE_PATH = "app.modules.flow_builder.api.flow_endpoints.flow_assembly_service.assemble"

VALID_BODY = {
    "apiKey": "pk_test_123",
    "listId": "LIST1",
    "flowName": "Welcome",
    "emailSteps": [
        {"subject": "Hi", "content": "<p>Hi</p>", "delayDays": 0},
        {"subject": "Again", "content": "<p>Again</p>", "delayDays": 2},
    ],
}


def partial_result():
    second = StepOutcome(step=1)
    second.fail(FailureStage.ACTION, 500, "server error")
    return SequenceResult(
        flow_id="FLOW1",
        message='Flow "Welcome" created successfully with 2 email(s)',
        steps=[StepOutcome(step=0, action_id="ACT1", template_id="TPL1", linked=True), second],
    )


def test_root(test_client):
    response = test_client.get("/")
    assert response.status_code == 200


def test_config_endpoint(test_client):
    response = test_client.get("/api/v1/flows/config")

    assert response.status_code == 200
    data = response.json()
    assert data["api_base_url"] == "https://a.klaviyo.com"
    assert data["api_revision"] == "2024-10-15"


def test_create_sequence_success_reports_partial_result(test_client):
    with patch(ASSEMBLE_PATH, AsyncMock(return_value=partial_result())) as mock_assemble:
        response = test_client.post(SEQUENCE_URL, json=VALID_BODY)

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["flowId"] == "FLOW1"
    assert data["actionIds"] == ["ACT1"]
    assert data["message"] == 'Flow "Welcome" created successfully with 2 email(s)'
    assert data["failures"] == [{"step": 1, "stage": "action", "status": 500, "error": "server error"}]
    assert data["listId"] == "LIST1"

    request = mock_assemble.call_args.args[0]
    assert request.api_key == "pk_test_123"
    assert request.email_steps[1].delay_days == 2


def test_missing_fields_returns_400_without_remote_calls(test_client):
    body = dict(VALID_BODY, emailSteps=[])

    with patch("app.modules.flow_builder.services.flow_assembly_service.open_klaviyo_client") as mock_open:
        response = test_client.post(SEQUENCE_URL, json=body)

    assert response.status_code == 400
    assert response.json() == {"detail": "Missing required fields"}
    mock_open.assert_not_called()


def test_missing_api_key_returns_400(test_client):
    body = {k: v for k, v in VALID_BODY.items() if k != "apiKey"}

    response = test_client.post(SEQUENCE_URL, json=body)

    assert response.status_code == 400


def test_flow_creation_error_uses_upstream_status(test_client):
    error = FlowCreationError(401, '{"errors": [{"detail": "bad key"}]}')

    with patch(ASSEMBLE_PATH, AsyncMock(side_effect=error)):
        response = test_client.post(SEQUENCE_URL, json=VALID_BODY)

    assert response.status_code == 401
    assert response.json()["detail"] == 'Failed to create flow: {"errors": [{"detail": "bad key"}]}'


def test_unexpected_error_returns_500(test_client):
    with patch(ASSEMBLE_PATH, AsyncMock(side_effect=UnexpectedError("boom"))):
        response = test_client.post(SEQUENCE_URL, json=VALID_BODY)

    assert response.status_code == 500
    assert response.json() == {"detail": "boom"}


def test_negative_delay_is_rejected_by_schema(test_client):
    body = dict(VALID_BODY, emailSteps=[{"subject": "Hi", "content": "x", "delayDays": -1}])

    response = test_client.post(SEQUENCE_URL, json=body)

    assert response.status_code == 422


def test_request_id_is_echoed(test_client):
    response = test_client.get("/", headers={"X-Request-ID": "req-abc12345"})

    assert response.headers["X-Request-ID"] == "req-abc12345"


def test_request_id_is_generated(test_client):
    response = test_client.get("/")

    assert response.headers["X-Request-ID"].startswith("req-")
