"""
Cloudsmith API payload types.

Plain data classes for the request and response bodies the resource
adapters exchange with the API, decoupled from the HTTP transport.
"""

from dataclasses import dataclass, field
from typing import Any


class SamlRole:
    """Roles a SAML group-sync mapping can grant within a team."""
    MEMBER = "Member"
    MANAGER = "Manager"

    ALL = (MEMBER, MANAGER)


@dataclass
class GeoIpRules:
    """
    Geo/IP rule set for a repository.

    The API always takes and returns all four lists; an empty list means
    "no rule" for that category.

    Attributes:
        cidr_allow: IP ranges (CIDR notation) allowed access
        cidr_deny: IP ranges (CIDR notation) denied access
        country_code_allow: ISO 3166-1 country codes allowed access
        country_code_deny: ISO 3166-1 country codes denied access
    """
    cidr_allow: list[str] = field(default_factory=list)
    cidr_deny: list[str] = field(default_factory=list)
    country_code_allow: list[str] = field(default_factory=list)
    country_code_deny: list[str] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "GeoIpRules":
        return cls()

    def to_dict(self) -> dict[str, Any]:
        """Convert to the nested API body."""
        return {
            "cidr": {
                "allow": list(self.cidr_allow),
                "deny": list(self.cidr_deny),
            },
            "country_code": {
                "allow": list(self.country_code_allow),
                "deny": list(self.country_code_deny),
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GeoIpRules":
        """Create GeoIpRules from an API body. Missing sections read as empty."""
        cidr = data.get("cidr") or {}
        country_code = data.get("country_code") or {}
        return cls(
            cidr_allow=list(cidr.get("allow") or []),
            cidr_deny=list(cidr.get("deny") or []),
            country_code_allow=list(country_code.get("allow") or []),
            country_code_deny=list(country_code.get("deny") or []),
        )


@dataclass
class SamlGroupSyncRequest:
    """Body for creating a SAML group-sync mapping."""
    idp_key: str
    idp_value: str
    team: str
    organization: str
    role: str | None = None

    def to_dict(self) -> dict[str, Any]:
        body = {
            "idp_key": self.idp_key,
            "idp_value": self.idp_value,
            "team": self.team,
            "organization": self.organization,
        }
        # Omitted role falls back to the server default (Member)
        if self.role:
            body["role"] = self.role
        return body


@dataclass
class SamlGroupSync:
    """
    SAML group-sync mapping as returned by the API.

    The list endpoint does not echo the owning organization back.
    """
    slug_perm: str
    idp_key: str = ""
    idp_value: str = ""
    role: str = SamlRole.MEMBER
    team: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SamlGroupSync":
        return cls(
            slug_perm=data.get("slug_perm", ""),
            idp_key=data.get("idp_key", ""),
            idp_value=data.get("idp_value", ""),
            role=data.get("role") or SamlRole.MEMBER,
            team=data.get("team", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "slug_perm": self.slug_perm,
            "idp_key": self.idp_key,
            "idp_value": self.idp_value,
            "role": self.role,
            "team": self.team,
        }
