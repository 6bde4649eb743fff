"""Tests for the provider catalog and the generic provider builder."""

import pytest

from gateway_integrations.errors import ValidationError
from gateway_integrations.providers import PROVIDERS, ProviderBuilder, normalize_domain
from gateway_integrations.types import AuthPluginSpec, IntegrationRecord

CATALOG = {descriptor.name: descriptor for descriptor in PROVIDERS}


def _build(provider, *args):
    return ProviderBuilder(CATALOG[provider])(list(args))


def _complete_args(descriptor):
    args = []
    for flag in descriptor.flags:
        if not flag.required:
            continue
        value = "example.com" if flag.name == "domain" else f"env:{flag.dest.upper()}"
        args += [f"-{flag.name}", value]
    return args


def _token(secret, header="Authorization", prefix="Bearer "):
    params = {"secrets": [secret], "header": header}
    if prefix is not None:
        params["prefix"] = prefix
    return AuthPluginSpec("token", params)


def _bearer(name, destination, secret="env:T"):
    return IntegrationRecord(
        name=name,
        destination=destination,
        in_rate_limit=100,
        out_rate_limit=100,
        outgoing_auth=[_token(secret)],
    )


def _record(name, destination, outgoing, incoming=()):
    return IntegrationRecord(
        name=name,
        destination=destination,
        in_rate_limit=100,
        out_rate_limit=100,
        incoming_auth=list(incoming),
        outgoing_auth=list(outgoing),
    )


GOLDEN = [
    (
        "slack",
        ["-token", "env:SLACK_TOKEN", "-signing-secret", "env:SLACK_SIGNING"],
        _record(
            "slack",
            "https://slack.com/api",
            [_token("env:SLACK_TOKEN")],
            [AuthPluginSpec("slack_signature", {"secrets": ["env:SLACK_SIGNING"]})],
        ),
    ),
    (
        "github",
        ["-name", "gh", "-token", "env:GH", "-webhook-secret", "env:HOOK"],
        _record(
            "gh",
            "https://api.github.com",
            [_token("env:GH", prefix="token ")],
            [AuthPluginSpec("github_signature", {"secrets": ["env:HOOK"]})],
        ),
    ),
    (
        "ghe",
        ["-domain", "github.example.com/", "-token", "env:GH", "-webhook-secret", "env:HOOK"],
        _record(
            "ghe",
            "https://github.example.com/api/v3",
            [_token("env:GH", prefix="token ")],
            [AuthPluginSpec("github_signature", {"secrets": ["env:HOOK"]})],
        ),
    ),
    ("jira", ["-token", "env:T"], _bearer("jira", "https://api.atlassian.com")),
    ("confluence", ["-token", "env:T"], _bearer("confluence", "https://api.atlassian.com")),
    ("linear", ["-token", "env:T"], _bearer("linear", "https://api.linear.app")),
    (
        "gitlab",
        ["-token", "env:GL"],
        _record(
            "gitlab",
            "https://gitlab.com/api/v4",
            [_token("env:GL", header="PRIVATE-TOKEN", prefix=None)],
        ),
    ),
    ("asana", ["-token", "env:T"], _bearer("asana", "https://app.asana.com/api/1.0")),
    ("zendesk", ["-token", "env:T"], _bearer("zendesk", "https://api.zendesk.com")),
    ("servicenow", ["-token", "env:T"], _bearer("servicenow", "https://api.servicenow.com")),
    ("sendgrid", ["-token", "env:T"], _bearer("sendgrid", "https://api.sendgrid.com")),
    (
        "twilio",
        ["-token", "env:TW"],
        _record(
            "twilio",
            "https://api.twilio.com",
            [AuthPluginSpec("basic", {"secrets": ["env:TW"]})],
        ),
    ),
    ("stripe", ["-token", "env:T"], _bearer("stripe", "https://api.stripe.com")),
    (
        "monday",
        ["-token", "env:MON"],
        _record("monday", "https://api.monday.com/v2", [_token("env:MON", prefix=None)]),
    ),
    (
        "okta",
        ["-domain", "myorg.okta.com", "-token", "env:OKTA"],
        _record("okta", "https://myorg.okta.com/api/v1", [_token("env:OKTA", prefix="SSWS ")]),
    ),
    (
        "workday",
        ["-domain", "https://myorg.workday.com/", "-token", "env:T"],
        _bearer("workday", "https://myorg.workday.com/api"),
    ),
    (
        "datadog",
        ["-api-key", "env:DD_API", "-app-key", "env:DD_APP"],
        _record(
            "datadog",
            "https://api.datadoghq.com",
            [
                _token("env:DD_API", header="DD-API-KEY", prefix=None),
                _token("env:DD_APP", header="DD-APPLICATION-KEY", prefix=None),
            ],
        ),
    ),
    (
        "pagerduty",
        ["-token", "env:PD"],
        _record(
            "pagerduty", "https://api.pagerduty.com", [_token("env:PD", prefix="Token token=")]
        ),
    ),
    ("openai", ["-token", "env:T"], _bearer("openai", "https://api.openai.com")),
    ("trufflehog", ["-token", "env:T"], _bearer("trufflehog", "https://trufflehog.cloud/api")),
    (
        "gdrive",
        [],
        _record(
            "gdrive",
            "https://www.googleapis.com/drive/v3",
            [AuthPluginSpec("gcp_token", {})],
        ),
    ),
]


def test_catalog_has_unique_lowercase_names():
    names = [descriptor.name for descriptor in PROVIDERS]
    assert len(names) == len(set(names))
    assert all(name == name.lower() for name in names)


def test_every_catalog_entry_has_a_golden_record():
    assert sorted(provider for provider, _, _ in GOLDEN) == sorted(CATALOG)


@pytest.mark.parametrize("provider, args, expected", GOLDEN, ids=[g[0] for g in GOLDEN])
def test_golden_record(provider, args, expected):
    assert _build(provider, *args) == expected


def test_confluence_domain_override_is_normalized():
    record = _build("confluence", "-token", "env:T", "-domain", "myorg.atlassian.net/")
    assert record.destination == "https://myorg.atlassian.net"


def test_blank_optional_domain_uses_default():
    record = _build("confluence", "-token", "env:T", "-domain", "  ")
    assert record.destination == "https://api.atlassian.com"


def test_okta_keeps_explicit_http_scheme():
    record = _build("okta", "-domain", "http://myorg.okta.com", "-token", "env:OKTA")
    assert record.destination == "http://myorg.okta.com/api/v1"


def test_zendesk_and_servicenow_need_only_token():
    for provider in ["zendesk", "servicenow"]:
        assert CATALOG[provider].required_flags == ["token"]


def test_gdrive_needs_no_flags():
    assert CATALOG["gdrive"].required_flags == []
    assert _build("gdrive", "-name", "Drive").name == "Drive"


def test_value_starting_with_dash_is_accepted():
    record = _build("jira", "-token", "-abc")
    assert record.outgoing_auth[0].params["secrets"] == ["-abc"]

    record = _build("slack", "--signing-secret", "--x", "-token", "-t")
    assert record.incoming_auth[0].params["secrets"] == ["--x"]
    assert record.outgoing_auth[0].params["secrets"] == ["-t"]


@pytest.mark.parametrize("descriptor", PROVIDERS, ids=lambda d: d.name)
def test_every_provider_builds_with_required_flags(descriptor):
    record = ProviderBuilder(descriptor)(_complete_args(descriptor))
    assert record.name == descriptor.name
    assert record.destination.startswith("https://")
    assert record.outgoing_auth
    record.validate()


@pytest.mark.parametrize("descriptor", PROVIDERS, ids=lambda d: d.name)
def test_every_provider_rejects_each_missing_required_flag(descriptor):
    args = _complete_args(descriptor)
    builder = ProviderBuilder(descriptor)
    for index in range(0, len(args), 2):
        partial = args[:index] + args[index + 2 :]
        with pytest.raises(ValidationError, match=args[index]):
            builder(partial)


def test_blank_required_flag_is_rejected():
    with pytest.raises(ValidationError, match="missing required flag"):
        _build("jira", "-token", "   ")


def test_blank_name_is_rejected():
    with pytest.raises(ValidationError, match="-name"):
        _build("jira", "-name", "", "-token", "env:J")


def test_unknown_flag_is_rejected():
    with pytest.raises(ValidationError, match="unrecognized arguments"):
        _build("jira", "-token", "env:J", "-bogus", "x")


def test_stray_positional_is_rejected():
    with pytest.raises(ValidationError, match="unrecognized arguments"):
        _build("jira", "-token", "env:J", "extra")


def test_flag_without_value_is_rejected():
    with pytest.raises(ValidationError, match="expected one argument"):
        _build("jira", "-token")


def test_accepts_double_dash_and_equals_forms():
    record = _build("slack", "--token=env:A", "-signing-secret=env:B", "--name", "S2")
    assert record.name == "S2"
    assert record.outgoing_auth[0].params["secrets"] == ["env:A"]
    assert record.incoming_auth[0].params["secrets"] == ["env:B"]


def test_builder_returns_independent_records():
    first = _build("jira", "-token", "env:ONE")
    first.outgoing_auth[0].params["secrets"].append("tampered")
    second = _build("jira", "-token", "env:TWO")
    assert second.outgoing_auth[0].params["secrets"] == ["env:TWO"]
    assert CATALOG["jira"].outgoing_auth[0]["params"]["secrets"] == ["{token}"]


def test_usage_lists_required_and_optional_flags():
    usage = ProviderBuilder(CATALOG["confluence"]).usage()
    assert usage == "confluence [-name NAME] -token TOKEN [-domain DOMAIN]"
    assert "-api-key API_KEY -app-key APP_KEY" in ProviderBuilder(CATALOG["datadog"]).usage()


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("example.com", "https://example.com"),
        ("example.com/", "https://example.com"),
        ("https://example.com//", "https://example.com"),
        ("http://example.com", "http://example.com"),
        ("  example.com  ", "https://example.com"),
        ("", ""),
        ("https://", ""),
    ],
)
def test_normalize_domain(raw, expected):
    assert normalize_domain(raw) == expected


@pytest.mark.parametrize(
    "raw", ["example.com", "https://example.com/", "http://a.b/c/", "https://", "HTTPS://X.io"]
)
def test_normalize_domain_is_idempotent(raw):
    once = normalize_domain(raw)
    assert normalize_domain(once) == once
