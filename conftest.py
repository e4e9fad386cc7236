# conftest.py
"""
Shared fixtures.

- Fake AWS credentials so boto3/moto never touch a real account.
- Stubbed GuardDuty and CloudTrail clients (botocore Stubber) for the calls moto
  does not implement.
- A propagating logger so caplog can see what the finder logs.
"""

import json
import logging

import boto3
import pytest
from botocore.stub import Stubber

REGION = "us-west-2"


@pytest.fixture(autouse=True)
def aws_credentials(monkeypatch):
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", REGION)
    for name in ("AWS_GUARDDUTY_PARTITION", "AWS_GUARDDUTY_REGION", "ARCHIVED",
                 "OUTPUT", "DEBUG_LOGGING"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def logger():
    log = logging.getLogger("tests.find_guardduty_user")
    log.setLevel(logging.DEBUG)
    return log


@pytest.fixture
def guardduty_stub():
    client = boto3.client("guardduty", region_name=REGION)
    with Stubber(client) as stubber:
        yield client, stubber


@pytest.fixture
def cloudtrail_stub():
    client = boto3.client("cloudtrail", region_name=REGION)
    with Stubber(client) as stubber:
        yield client, stubber


def make_finding(finding_id="f-1", access_key_id=None, principal_id=None,
                 with_access_details=True, with_service=True):
    """
    A GetFindings record with every member the response model requires.
    """
    resource = {"ResourceType": "AccessKey"}
    if with_access_details:
        details = {"UserType": "AssumedRole"}
        if access_key_id is not None:
            details["AccessKeyId"] = access_key_id
        if principal_id is not None:
            details["PrincipalId"] = principal_id
        resource["AccessKeyDetails"] = details
    finding = {
        "AccountId": "111111111111",
        "Arn": f"arn:aws:guardduty:{REGION}:111111111111:detector/det-1/finding/{finding_id}",
        "CreatedAt": "2020-06-15T18:02:11.000Z",
        "Id": finding_id,
        "Region": REGION,
        "Resource": resource,
        "SchemaVersion": "2.0",
        "Severity": 5.0,
        "Type": "UnauthorizedAccess:IAMUser/ConsoleLogin",
        "UpdatedAt": "2020-06-15T18:02:11.000Z",
    }
    if with_service:
        finding["Service"] = {
            "Action": {
                "ActionType": "AWS_API_CALL",
                "AwsApiCallAction": {
                    "Api": "ListBuckets",
                    "ServiceName": "s3.amazonaws.com",
                    "RemoteIpDetails": {
                        "IpAddressV4": "198.51.100.7",
                        "City": {"CityName": "Portland"},
                        "Country": {"CountryName": "United States"},
                    },
                },
            },
        }
    return finding


def make_event(arn=None, user_name=None, username=None, payload=None):
    """
    A LookupEvents event. `user_name` lands in the JSON payload, `username` at top level.
    """
    if payload is None:
        identity = {"type": "AssumedRole"}
        if arn is not None:
            identity["arn"] = arn
        if user_name is not None:
            identity["userName"] = user_name
        payload = json.dumps({"eventName": "ListBuckets", "userIdentity": identity})
    event = {"EventId": "e-1", "EventName": "ListBuckets", "CloudTrailEvent": payload}
    if username is not None:
        event["Username"] = username
    return event


def lookup_params(key, value):
    return {"LookupAttributes": [{"AttributeKey": key, "AttributeValue": value}], "MaxResults": 1}
