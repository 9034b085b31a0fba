"""Certificate digest and analysis result models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from cryptography import x509
from cryptography.x509.oid import NameOID

NOT_AVAILABLE = "(not available)"


class Marker(str, Enum):
    """Display judgment attached to a certificate property."""

    OK = "ok"
    WARNING = "warning"
    CRITICAL = "critical"


class ChainStatus(Enum):
    """How the peer chain presents itself, in precedence order."""

    SELF_SIGNED = ("selfsigned", Marker.CRITICAL)
    TRUST_FORCED = ("trust forced", Marker.WARNING)
    INCOMPLETE = ("incomplete", Marker.CRITICAL)
    SENT_BY_PEER = ("sent by peer", Marker.OK)

    def __init__(self, label: str, marker: Marker) -> None:
        self.label = label
        self.marker = marker


def _name_values(name: x509.Name, oid: x509.ObjectIdentifier) -> list[str]:
    return [str(attr.value) for attr in name.get_attributes_for_oid(oid)]


def _joined(name: x509.Name, oid: x509.ObjectIdentifier, default: str = "") -> str:
    values = _name_values(name, oid)
    return ", ".join(values) if values else default


def _dns_names(cert: x509.Certificate) -> list[str]:
    try:
        ext = cert.extensions.get_extension_for_class(x509.SubjectAlternativeName)
    except x509.ExtensionNotFound:
        return []
    return list(ext.value.get_values_for_type(x509.DNSName))


def _is_ca(cert: x509.Certificate) -> bool:
    try:
        ext = cert.extensions.get_extension_for_class(x509.BasicConstraints)
    except x509.ExtensionNotFound:
        return False
    return bool(ext.value.ca)


@dataclass
class CertDigest:
    """Display-oriented summary of one certificate.

    ``common_name`` is trimmed and lowercased for comparisons;
    ``raw_common_name`` keeps the original spelling.
    """

    raw_common_name: str
    common_name: str
    subject_alt_names: list[str] = field(default_factory=list)
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    organization: str = NOT_AVAILABLE
    organization_units: str = ""
    country: str = ""
    is_ca: bool = False
    issuer_name: str = ""
    issuer_org: str = NOT_AVAILABLE
    issuer_ou: str = ""
    issuer_country: str = ""

    @classmethod
    def from_certificate(cls, cert: x509.Certificate) -> CertDigest:
        raw_cn = _joined(cert.subject, NameOID.COMMON_NAME)
        return cls(
            raw_common_name=raw_cn,
            common_name=raw_cn.strip().lower(),
            subject_alt_names=_dns_names(cert),
            valid_from=cert.not_valid_before_utc,
            valid_until=cert.not_valid_after_utc,
            organization=_joined(cert.subject, NameOID.ORGANIZATION_NAME, NOT_AVAILABLE),
            organization_units=_joined(cert.subject, NameOID.ORGANIZATIONAL_UNIT_NAME),
            country=_joined(cert.subject, NameOID.COUNTRY_NAME),
            is_ca=_is_ca(cert),
            issuer_name=_joined(cert.issuer, NameOID.COMMON_NAME),
            issuer_org=_joined(cert.issuer, NameOID.ORGANIZATION_NAME, NOT_AVAILABLE),
            issuer_ou=_joined(cert.issuer, NameOID.ORGANIZATIONAL_UNIT_NAME),
            issuer_country=_joined(cert.issuer, NameOID.COUNTRY_NAME),
        )


@dataclass
class ChainEntry:
    """One certificate of a displayed chain."""

    common_name: str
    organization: str


@dataclass
class CertificateReport:
    """Judgment of a leaf certificate against the requested host."""

    server_name: str
    leaf: CertDigest
    name_matched: bool
    cn_matched: bool
    matched_sans: list[str]
    identity_marker: Marker
    days_remaining: float
    validity_marker: Marker
    chain_status: ChainStatus
    peer_chain: list[ChainEntry] = field(default_factory=list)
    verified_chains: list[list[ChainEntry]] = field(default_factory=list)
