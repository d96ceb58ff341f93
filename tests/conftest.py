from __future__ import annotations

from typing import Dict, List, Union

import dns.rrset
import pytest

from caatest.core.resolver import Answer
from caatest.core.utils import QueryMeta


def caa_rrset(name: str, *rdatas: str, ttl: int = 300) -> dns.rrset.RRset:
    return dns.rrset.from_text(name.rstrip(".") + ".", ttl, "IN", "CAA", *rdatas)


class FakeResolver:
    """Answers CAA queries from a dict of name -> CAA rdata texts (or an exception)."""

    def __init__(self, zones: Dict[str, Union[List[str], Exception]]):
        self.zones = zones
        self.calls: List[str] = []

    def query(self, qname: str, qtype: str, server: str, depth: int = 0) -> Answer:
        self.calls.append(qname)
        entry = self.zones.get(qname, [])
        if isinstance(entry, Exception):
            raise entry
        rrsets = [caa_rrset(qname, *entry)] if entry else []
        return Answer(
            qname=qname,
            answers=[item.to_text() for rrset in rrsets for item in rrset],
            rrsets=rrsets,
            meta=QueryMeta(
                server=server,
                qname=qname,
                qtype=qtype,
                tcp=False,
                rcode="NOERROR",
                elapsed_ms=1,
                canonical_name=qname,
            ),
        )


@pytest.fixture
def fake_resolver():
    return FakeResolver
