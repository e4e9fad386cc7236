# cloudtrail.py
"""
CloudTrail lookups that turn a credential reference into an identity.

- lookup_event demands exactly one matching event.
- get_role_and_user reads userIdentity.arn / userIdentity.userName from the event payload.
- get_user reads the top-level Username of the event found by role ARN.
- resolve_identity chains these; every failure is a RecoverableError.
"""

import json
import logging
from typing import Any, Dict, Tuple

from botocore.exceptions import BotoCoreError, ClientError

from errors import IdentityParseError, LookupEventError
from models import AccessKey, CredentialReference, ResolvedIdentity

RESOURCE_NAME_KEY = "ResourceName"


def lookup_event(client, key: str, value: str) -> Dict[str, Any]:
    """
    Return the single CloudTrail event whose attribute `key` equals `value`.
    """
    try:
        resp = client.lookup_events(
            LookupAttributes=[{"AttributeKey": key, "AttributeValue": value}],
            MaxResults=1,
        )
    except (ClientError, BotoCoreError) as e:
        raise LookupEventError(
            f"LookupEvents failed with attribute key {key!r} and attribute value {value!r}: {e}"
        ) from e
    events = resp.get("Events", []) or []
    if len(events) != 1:
        raise LookupEventError(
            f"expected exactly one event for {key} {value}, got {len(events)}"
        )
    return events[0]


def get_role_and_user(client, ref: CredentialReference) -> Tuple[str, str]:
    event = lookup_event(client, ref.attribute_key, ref.value)

    # CloudTrailEvent is a JSON document of unknown shape
    try:
        data = json.loads(event.get("CloudTrailEvent") or "")
    except ValueError as e:
        raise IdentityParseError(f"unable to parse CloudTrail event JSON: {e}") from e
    identity = data.get("userIdentity") if isinstance(data, dict) else None
    if not isinstance(identity, dict):
        raise IdentityParseError("could not retrieve userIdentity from CloudTrail event")
    role_arn = identity.get("arn")
    if not isinstance(role_arn, str) or not role_arn:
        raise IdentityParseError("could not retrieve arn from userIdentity")
    username = identity.get("userName")
    if not isinstance(username, str):
        username = ""
    return role_arn, username


def get_user(client, role_arn: str) -> str:
    event = lookup_event(client, RESOURCE_NAME_KEY, role_arn)
    return event.get("Username") or ""


def resolve_identity(client, ref: CredentialReference, logger: logging.Logger) -> ResolvedIdentity:
    """
    Resolve a credential reference to an assumed-role ARN and username.

    Events found via an access key often lack userName; in that case a second
    lookup by role ARN supplies it.
    """
    logger.debug("Looking up CloudTrail event for %s %s", ref.attribute_key, ref.value)
    role_arn, username = get_role_and_user(client, ref)
    if isinstance(ref, AccessKey) and not username:
        logger.debug("No username on event, looking up by role ARN %s", role_arn)
        username = get_user(client, role_arn)
    return ResolvedIdentity(assumed_role_arn=role_arn, username=username)
