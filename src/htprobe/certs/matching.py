"""Host name matching against certificate names."""

from __future__ import annotations

WILDCARD = "*"


def normalize_name(name: str) -> str:
    """Trim, lowercase and drop a trailing root dot."""
    return name.strip().lower().rstrip(".")


def match_name(pattern: str, host: str) -> bool:
    """Check if a certificate name matches a host name.

    Comparison is case-insensitive and ignores surrounding whitespace. A
    ``*`` label matches exactly one non-empty label of the host at the same
    position; at most one wildcard label is allowed.

    Examples:
        match_name("www.example.com", "WWW.example.com") -> True
        match_name("*.example.com", "foo.example.com") -> True
        match_name("*.example.com", "foo.bar.example.com") -> False
        match_name("*.example.com", "example.com") -> False
    """
    pattern = normalize_name(pattern)
    host = normalize_name(host)
    if not pattern or not host:
        return False

    if pattern == host:
        return True

    pattern_labels = pattern.split(".")
    host_labels = host.split(".")
    if pattern_labels.count(WILDCARD) != 1 or len(pattern_labels) != len(host_labels):
        return False

    for want, got in zip(pattern_labels, host_labels):
        if want == WILDCARD:
            if not got:
                return False
        elif want != got:
            return False
    return True


def find_matches(names: list[str], host: str) -> list[str]:
    """Return the entries of ``names`` that match ``host``."""
    return [name for name in names if match_name(name, host)]
