"""Certificate analysis: identity, validity and chain classification.

All functions are pure: the same TLS state and reference time always give
the same report.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from cryptography import x509

from ..probe.models import TLSState
from .matching import find_matches, match_name, normalize_name
from .models import CertDigest, CertificateReport, ChainEntry, ChainStatus, Marker

EXPIRY_WARNING_DAYS = 30


def days_until(valid_until: datetime, now: Optional[datetime] = None) -> float:
    """Return the days left until ``valid_until`` (negative when expired)."""
    if now is None:
        now = datetime.now(timezone.utc)
    if valid_until.tzinfo is None:
        valid_until = valid_until.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return (valid_until - now).total_seconds() / 86400


def classify_validity(valid_until: datetime, now: Optional[datetime] = None) -> Marker:
    """Expired -> CRITICAL, less than 30 days left -> WARNING, otherwise OK."""
    remaining = days_until(valid_until, now)
    if remaining < 0:
        return Marker.CRITICAL
    if remaining < EXPIRY_WARNING_DAYS:
        return Marker.WARNING
    return Marker.OK


def classify_chain(
    peer_count: int,
    trust_forced: bool,
    leaf_is_ca: bool,
) -> ChainStatus:
    """Classify the peer chain: self-signed > trust forced > incomplete > sent by peer."""
    if leaf_is_ca:
        return ChainStatus.SELF_SIGNED
    if trust_forced:
        return ChainStatus.TRUST_FORCED
    if peer_count < 2:
        return ChainStatus.INCOMPLETE
    return ChainStatus.SENT_BY_PEER


def chain_entries(chain: list[x509.Certificate]) -> list[ChainEntry]:
    """Summarize a chain for display, stopping at the first unnamed certificate."""
    entries: list[ChainEntry] = []
    for index, cert in enumerate(chain):
        digest = CertDigest.from_certificate(cert)
        if index > 0 and not digest.raw_common_name:
            break
        entries.append(ChainEntry(
            common_name=digest.common_name if index == 0 else digest.raw_common_name,
            organization=digest.organization,
        ))
    return entries


def analyze_tls(
    tls: Optional[TLSState],
    trust_forced: bool = False,
    now: Optional[datetime] = None,
) -> Optional[CertificateReport]:
    """Judge the leaf certificate of a connection against its server name.

    Returns None when there is no TLS state or no peer certificate (plain
    HTTP), which callers show as "(None)".
    """
    if tls is None or not tls.peer_certificates:
        return None

    leaf = CertDigest.from_certificate(tls.peer_certificates[0])
    server_name = normalize_name(tls.server_name)

    cn_matched = match_name(leaf.common_name, server_name)
    matched_sans = find_matches(leaf.subject_alt_names, server_name)
    name_matched = cn_matched or bool(matched_sans)

    days = days_until(leaf.valid_until, now) if leaf.valid_until else 0.0
    validity = classify_validity(leaf.valid_until, now) if leaf.valid_until else Marker.CRITICAL

    return CertificateReport(
        server_name=server_name,
        leaf=leaf,
        name_matched=name_matched,
        cn_matched=cn_matched,
        matched_sans=matched_sans,
        identity_marker=Marker.OK if name_matched else Marker.WARNING,
        days_remaining=days,
        validity_marker=validity,
        chain_status=classify_chain(len(tls.peer_certificates), trust_forced, leaf.is_ca),
        peer_chain=chain_entries(tls.peer_certificates),
        verified_chains=[chain_entries(chain) for chain in tls.verified_chains if chain],
    )
