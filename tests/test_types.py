"""Tests for integration record types and their wire form."""

import pytest

from gateway_integrations.errors import ValidationError
from gateway_integrations.types import AuthPluginSpec, IntegrationRecord


def test_to_dict_uses_wire_names_and_order():
    record = IntegrationRecord(
        name="slack",
        destination="https://slack.com",
        in_rate_limit=10,
        out_rate_limit=20,
        incoming_auth=[AuthPluginSpec("slack_signature", {"secrets": ["env:S"]})],
        outgoing_auth=[AuthPluginSpec("token", {"secrets": ["env:T"], "header": "Authorization"})],
    )
    data = record.to_dict()

    assert list(data) == [
        "name",
        "destination",
        "in_rate_limit",
        "out_rate_limit",
        "incoming_auth",
        "outgoing_auth",
    ]
    assert data["incoming_auth"] == [{"type": "slack_signature", "params": {"secrets": ["env:S"]}}]


def test_allowlist_written_only_when_non_empty():
    record = IntegrationRecord(name="x", destination="https://x")
    assert "allowlist" not in record.to_dict()

    record.allowed_callers = [{"id": "caller-1"}]
    assert record.to_dict()["allowlist"] == [{"id": "caller-1"}]


def test_from_dict_preserves_unknown_keys():
    raw = {
        "name": "jira",
        "destination": "https://api.atlassian.com",
        "in_rate_limit": 5,
        "out_rate_limit": 6,
        "incoming_auth": [],
        "outgoing_auth": [{"type": "basic", "params": {"secrets": ["env:J"]}}],
        "allowlist": [{"id": "c"}],
        "rate_limit_window": "1m",
    }
    record = IntegrationRecord.from_dict(raw)

    assert record.allowed_callers == [{"id": "c"}]
    assert record.extras == {"rate_limit_window": "1m"}
    assert record.to_dict() == raw


def test_from_dict_defaults_missing_optional_fields():
    record = IntegrationRecord.from_dict({"name": "bare"})
    assert record.destination == ""
    assert record.in_rate_limit == 0
    assert record.incoming_auth == []
    assert record.outgoing_auth == []


def test_auth_spec_without_params_gets_empty_mapping():
    spec = AuthPluginSpec.from_dict({"type": "passthrough"})
    assert spec.params == {}
    assert spec.to_dict() == {"type": "passthrough", "params": {}}


@pytest.mark.parametrize(
    "raw",
    [
        {"name": ""},
        {"destination": "https://x"},
        {"name": "x", "in_rate_limit": -1},
        {"name": "x", "out_rate_limit": "10"},
        {"name": "x", "out_rate_limit": True},
        {"name": "x", "incoming_auth": {"type": "token"}},
        {"name": "x", "outgoing_auth": [{"params": {}}]},
        {"name": "x", "outgoing_auth": [{"type": "token", "params": ["a"]}]},
        {"name": "x", "allowlist": "everyone"},
        "not-a-mapping",
    ],
)
def test_from_dict_rejects_invalid_records(raw):
    with pytest.raises(ValidationError):
        IntegrationRecord.from_dict(raw)


def test_key_is_lowercase_name():
    assert IntegrationRecord(name="GitHub").key == "github"
