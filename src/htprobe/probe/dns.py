"""Host name resolution for the ``--resolve`` display."""

from __future__ import annotations

import socket

from ..errors import ResolveFailedError


def resolve_host(host: str) -> str:
    """Return the addresses of ``host`` joined with ', ', in lookup order.

    Raises:
        ResolveFailedError: If the lookup fails
    """
    try:
        infos = socket.getaddrinfo(host, None, proto=socket.IPPROTO_TCP)
    except (socket.gaierror, UnicodeError) as e:
        raise ResolveFailedError(f"Cannot resolve host: {e}", host) from e

    addresses: list[str] = []
    for info in infos:
        address = str(info[4][0])
        if address not in addresses:
            addresses.append(address)
    return ", ".join(addresses)
