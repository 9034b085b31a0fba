"""Certificate analysis."""

from .models import CertDigest, CertificateReport, ChainEntry, ChainStatus, Marker
from .matching import find_matches, match_name
from .analyzer import analyze_tls, classify_chain, classify_validity, days_until

__all__ = [
    "CertDigest",
    "CertificateReport",
    "ChainEntry",
    "ChainStatus",
    "Marker",
    "find_matches",
    "match_name",
    "analyze_tls",
    "classify_chain",
    "classify_validity",
    "days_until",
]
