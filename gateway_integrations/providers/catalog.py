"""
Provider catalog.

One ProviderDescriptor per supported third-party API. Entries are plain
data: flag sets, destination template, default rate limits and the auth
plugin templates attached to each direction. Secret flags carry secret
references (e.g. "env:SLACK_TOKEN"), never secret values.
"""

from __future__ import annotations

from .base import FlagSpec, ProviderDescriptor

TOKEN = FlagSpec("token", "secret reference for API token")
SIGNING_SECRET = FlagSpec("signing-secret", "secret reference for signing secret")
WEBHOOK_SECRET = FlagSpec("webhook-secret", "secret reference for webhook secret")


def _domain(example: str) -> FlagSpec:
    return FlagSpec("domain", f"instance domain, e.g. {example}")


def _token_auth(header="Authorization", prefix: str | None = "Bearer ", secret="{token}"):
    params = {"secrets": [secret], "header": header}
    # None leaves the prefix key out entirely
    if prefix is not None:
        params["prefix"] = prefix
    return {"type": "token", "params": params}


def _signature_auth(kind: str, secret: str):
    return {"type": kind, "params": {"secrets": [secret]}}


def _bearer(name: str, destination: str) -> ProviderDescriptor:
    return ProviderDescriptor(
        name=name, destination=destination, flags=(TOKEN,), outgoing_auth=(_token_auth(),)
    )


PROVIDERS: tuple[ProviderDescriptor, ...] = (
    ProviderDescriptor(
        name="slack",
        destination="https://slack.com/api",
        flags=(TOKEN, SIGNING_SECRET),
        incoming_auth=(_signature_auth("slack_signature", "{signing_secret}"),),
        outgoing_auth=(_token_auth(),),
    ),
    ProviderDescriptor(
        name="github",
        destination="https://api.github.com",
        flags=(TOKEN, WEBHOOK_SECRET),
        incoming_auth=(_signature_auth("github_signature", "{webhook_secret}"),),
        outgoing_auth=(_token_auth(prefix="token "),),
    ),
    ProviderDescriptor(
        name="ghe",
        destination="{domain}/api/v3",
        flags=(_domain("github.example.com"), TOKEN, WEBHOOK_SECRET),
        incoming_auth=(_signature_auth("github_signature", "{webhook_secret}"),),
        outgoing_auth=(_token_auth(prefix="token "),),
    ),
    _bearer("jira", "https://api.atlassian.com"),
    ProviderDescriptor(
        name="confluence",
        destination="{domain}",
        flags=(
            TOKEN,
            FlagSpec(
                "domain", "confluence domain", default="api.atlassian.com", required=False
            ),
        ),
        outgoing_auth=(_token_auth(),),
    ),
    _bearer("linear", "https://api.linear.app"),
    ProviderDescriptor(
        name="gitlab",
        destination="https://gitlab.com/api/v4",
        flags=(TOKEN,),
        outgoing_auth=(_token_auth(header="PRIVATE-TOKEN", prefix=None),),
    ),
    _bearer("asana", "https://app.asana.com/api/1.0"),
    _bearer("zendesk", "https://api.zendesk.com"),
    _bearer("servicenow", "https://api.servicenow.com"),
    _bearer("sendgrid", "https://api.sendgrid.com"),
    ProviderDescriptor(
        name="twilio",
        destination="https://api.twilio.com",
        flags=(TOKEN,),
        outgoing_auth=({"type": "basic", "params": {"secrets": ["{token}"]}},),
    ),
    _bearer("stripe", "https://api.stripe.com"),
    ProviderDescriptor(
        name="monday",
        destination="https://api.monday.com/v2",
        flags=(TOKEN,),
        outgoing_auth=(_token_auth(prefix=None),),
    ),
    ProviderDescriptor(
        name="okta",
        destination="{domain}/api/v1",
        flags=(_domain("myorg.okta.com"), TOKEN),
        outgoing_auth=(_token_auth(prefix="SSWS "),),
    ),
    ProviderDescriptor(
        name="workday",
        destination="{domain}/api",
        flags=(_domain("myorg.workday.com"), TOKEN),
        outgoing_auth=(_token_auth(),),
    ),
    ProviderDescriptor(
        name="datadog",
        destination="https://api.datadoghq.com",
        flags=(
            FlagSpec("api-key", "secret reference for API key"),
            FlagSpec("app-key", "secret reference for application key"),
        ),
        outgoing_auth=(
            _token_auth(header="DD-API-KEY", prefix=None, secret="{api_key}"),
            _token_auth(header="DD-APPLICATION-KEY", prefix=None, secret="{app_key}"),
        ),
    ),
    ProviderDescriptor(
        name="pagerduty",
        destination="https://api.pagerduty.com",
        flags=(TOKEN,),
        outgoing_auth=(_token_auth(prefix="Token token="),),
    ),
    _bearer("openai", "https://api.openai.com"),
    _bearer("trufflehog", "https://trufflehog.cloud/api"),
    ProviderDescriptor(
        name="gdrive",
        destination="https://www.googleapis.com/drive/v3",
        outgoing_auth=({"type": "gcp_token", "params": {}},),
    ),
)
