from __future__ import annotations

import logging
import random
from typing import Optional

import dns.resolver

from .errors import ResolverConfigError
from .utils import join_server

logger = logging.getLogger(__name__)

RESOLV_CONF = "/etc/resolv.conf"


def system_resolver(path: str = RESOLV_CONF, rng: Optional[random.Random] = None) -> str:
    """Pick one nameserver from ``path`` and return it as ``host:port``.

    When several nameservers are configured one is chosen at random.
    """
    try:
        conf = dns.resolver.Resolver(filename=path, configure=True)
    except dns.resolver.NoResolverConfiguration as e:
        raise ResolverConfigError(f"Failed to read nameservers from {path}: {e}") from e

    servers = [str(ns) for ns in conf.nameservers]
    if not servers:
        raise ResolverConfigError(f"{path} contains no nameservers")

    choice = (rng or random).choice(servers)
    upstream = join_server(choice, conf.port)
    logger.debug("Using nameserver %s from %s (%d configured)", upstream, path, len(servers))
    return upstream
