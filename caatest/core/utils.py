from __future__ import annotations

import ipaddress
import time
from dataclasses import dataclass
from typing import List, Tuple

from .errors import InvalidDomainError, ResolverConfigError

DEFAULT_PORT = 53


def now_ms() -> int:
    return int(time.time() * 1000)


def is_ip(s: str) -> bool:
    try:
        ipaddress.ip_address(s)
        return True
    except ValueError:
        return False


def _port(server: str, port: str) -> int:
    if not port:
        return DEFAULT_PORT
    if not port.isdigit() or not 0 < int(port) < 65536:
        raise ResolverConfigError(f"Invalid port in resolver address {server!r}")
    return int(port)


def split_server(server: str) -> Tuple[str, int]:
    """Split ``host:port`` (``[v6]:port`` for IPv6) into its parts.

    A bare address, v4 or v6, gets port 53.
    """
    s = server.strip()
    if s.startswith("["):
        host, _, rest = s[1:].partition("]")
        return host, _port(server, rest[1:] if rest.startswith(":") else "")
    if is_ip(s):
        return s, DEFAULT_PORT
    host, sep, port = s.rpartition(":")
    if not sep:
        return s, DEFAULT_PORT
    if not host:
        raise ResolverConfigError(f"Missing host in resolver address {server!r}")
    return host, _port(server, port)


def join_server(host: str, port: int) -> str:
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def label_chain(domain: str) -> List[str]:
    """Names to query for ``domain``, most specific first.

    ``a.b.example.com`` -> ``a.b.example.com``, ``b.example.com``, ``example.com``
    """
    name = domain.strip().rstrip(".")
    if not name:
        raise InvalidDomainError("No domain name provided")
    labels = name.split(".")
    if any(not label for label in labels):
        raise InvalidDomainError(f"Domain name {domain!r} contains an empty label")
    return [".".join(labels[i:]) for i in range(len(labels))]


@dataclass
class QueryMeta:
    server: str
    qname: str
    qtype: str
    tcp: bool
    rcode: str
    elapsed_ms: int
    truncated: bool = False
    redirects: int = 0
    canonical_name: str = ""
