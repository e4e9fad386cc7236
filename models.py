# models.py
"""
Data models used by the finder.

- FindingDetail is the per-finding record that gets printed.
- CredentialReference (AccessKey | PrincipalId) is what we search CloudTrail with.
- ResolvedIdentity is the outcome of a successful CloudTrail correlation.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Union

from config import GENERATED_ACCESS_KEY_ID, GENERATED_PRINCIPAL_ID


@dataclass(frozen=True)
class AccessKey:
    value: str
    attribute_key = "AccessKeyId"


@dataclass(frozen=True)
class PrincipalId:
    value: str
    attribute_key = "ResourceName"


CredentialReference = Union[AccessKey, PrincipalId]


@dataclass(frozen=True)
class ResolvedIdentity:
    assumed_role_arn: str
    username: str = ""


@dataclass(frozen=True)
class FindingDetail:
    """
    Represents a single GuardDuty finding with its resolved identity.

    Fields:
    - id, created_at: straight from the finding
    - access_key_id / principal_id: credential reference from Resource.AccessKeyDetails
    - assumed_role_arn / username: filled in once CloudTrail resolution succeeds
    - ip_address, service_name, api, city, country: AwsApiCallAction context, if any
    """
    id: str
    created_at: str
    access_key_id: Optional[str] = None
    principal_id: Optional[str] = None
    assumed_role_arn: Optional[str] = None
    username: Optional[str] = None
    ip_address: Optional[str] = None
    service_name: Optional[str] = None
    api: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None

    def credential_reference(self) -> Optional[CredentialReference]:
        """
        Access key first, then principal id. Empty and sample-finding values are ignored.
        """
        if self.access_key_id and self.access_key_id != GENERATED_ACCESS_KEY_ID:
            return AccessKey(self.access_key_id)
        if self.principal_id and self.principal_id != GENERATED_PRINCIPAL_ID:
            return PrincipalId(self.principal_id)
        return None

    def with_identity(self, identity: ResolvedIdentity) -> "FindingDetail":
        return replace(self, assumed_role_arn=identity.assumed_role_arn, username=identity.username)


def _dig(data: Optional[Dict[str, Any]], *keys: str) -> Any:
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def finding_detail_from_dict(finding: Dict[str, Any]) -> Optional[FindingDetail]:
    """
    Convert a GetFindings record into a FindingDetail.
    Returns None for findings without AccessKeyDetails (not caused by a user).
    """
    access = _dig(finding, "Resource", "AccessKeyDetails")
    if not access:
        return None

    call = _dig(finding, "Service", "Action", "AwsApiCallAction")
    remote = _dig(call, "RemoteIpDetails")
    return FindingDetail(
        id=finding.get("Id", ""),
        created_at=finding.get("CreatedAt", ""),
        access_key_id=access.get("AccessKeyId"),
        principal_id=access.get("PrincipalId"),
        ip_address=_dig(remote, "IpAddressV4"),
        service_name=_dig(call, "ServiceName"),
        api=_dig(call, "Api"),
        city=_dig(remote, "City", "CityName"),
        country=_dig(remote, "Country", "CountryName"),
    )
