import logging

import pytest

from app.shared.utils.exceptions import FlowCreationError, KlaviyoAPIError, ValidationError
from app.shared.utils.html_utils import strip_html_tags
from app.shared.core.logging import (
    CredentialMaskingFilter,
    mask_credentials,
    set_correlation_id,
    get_correlation_id,
)


# --- HTML TO TEXT ---

def test_strip_html_tags_removes_every_tag():
    assert strip_html_tags("<h1>Welcome!</h1><p>Thanks</p>") == "Welcome!Thanks"


def test_strip_html_tags_keeps_entities_and_whitespace():
    assert strip_html_tags("<p>Tom &amp; Jerry</p>\n  <br/>bye") == "Tom &amp; Jerry\n  bye"


def test_strip_html_tags_keeps_script_text():
    assert strip_html_tags("<script>alert(1)</script>") == "alert(1)"


def test_strip_html_tags_plain_text_unchanged():
    assert strip_html_tags("no markup here") == "no markup here"


def test_strip_html_tags_unclosed_bracket_is_kept():
    assert strip_html_tags("a < b") == "a < b"


# --- CREDENTIAL MASKING ---

def test_mask_authorization_value():
    assert mask_credentials("Authorization: Klaviyo-API-Key pk_abc123") == "Authorization: Klaviyo-API-Key ***"


def test_mask_bare_private_key():
    assert mask_credentials("key was pk_abc123.") == "key was ***."


def test_masking_filter_rewrites_record():
    record = logging.LogRecord("test", logging.ERROR, __file__, 1, "sent %s", ("pk_secret99",), None)

    assert CredentialMaskingFilter().filter(record) is True
    assert record.getMessage() == "sent ***"


# --- CORRELATION ID ---

def test_set_correlation_id_generates_when_missing():
    correlation_id = set_correlation_id()

    assert correlation_id.startswith("req-")
    assert get_correlation_id() == correlation_id


# --- EXCEPTIONS ---

def test_flow_builder_error_str_is_the_message():
    assert str(FlowCreationError(401, "bad key")) == "Failed to create flow: bad key"
    assert str(ValidationError()) == "Missing required fields"
    assert str(KlaviyoAPIError(None, "timed out")) == "Klaviyo API error (transport error): timed out"


@pytest.mark.parametrize("upstream_status, expected", [
    (401, 401),
    (429, 429),
    (500, 500),
    (None, 502),
    (200, 502),
    (201, 502),
])
def test_flow_creation_error_status(upstream_status, expected):
    error = FlowCreationError(upstream_status, "body")

    assert error.status_code == expected
    assert error.upstream_status == upstream_status
