from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple

import dns.exception
import dns.flags
import dns.message
import dns.name
import dns.query
import dns.rcode
import dns.rdatatype
import dns.rrset

from .errors import AliasLoopFailure, MalformedAnswerFailure, ResolutionFailure
from .utils import QueryMeta, now_ms, split_server

logger = logging.getLogger(__name__)

MAX_ALIAS_REDIRECTS = 10
ALIAS_TYPES = (dns.rdatatype.CNAME, dns.rdatatype.DNAME)

_TRANSPORT_ERRORS = (dns.exception.DNSException, OSError, ValueError)


@dataclass
class Answer:
    qname: str
    answers: List[str]
    rrsets: List[dns.rrset.RRset]
    meta: QueryMeta

    def __len__(self) -> int:
        return len(self.answers)


class DNSResolver:
    """Sends recursive queries to one upstream server and follows aliases.

    ``max_alias_redirects`` bounds the number of CNAME/DNAME hops taken for a
    single lookup; the bound is checked before each query is sent. Every
    query is one UDP send, re-sent over TCP only when the reply is truncated.
    """

    def __init__(
        self,
        timeout: float = 2.0,
        udp_payload: int = 1232,
        max_alias_redirects: int = MAX_ALIAS_REDIRECTS,
        use_tcp_fallback: bool = True,
    ):
        self.timeout = timeout
        self.udp_payload = udp_payload
        self.max_alias_redirects = max_alias_redirects
        self.use_tcp_fallback = use_tcp_fallback

    def query(self, qname: str, qtype: str, server: str, depth: int = 0) -> Answer:
        qtype = qtype.upper()
        rdtype = dns.rdatatype.from_text(qtype)
        name = qname

        while True:
            if depth >= self.max_alias_redirects:
                raise AliasLoopFailure(
                    f"Stuck in alias loop ({depth} redirects)", domain=qname, server=server
                )

            resp, meta = self._exchange(name, qtype, server, domain=qname)
            if resp.rcode() != dns.rcode.NOERROR:
                raise ResolutionFailure(
                    f"Non-zero RCODE in response ({meta.rcode})", domain=qname, server=server
                )

            records = [(rrset, item) for rrset in resp.answer for item in rrset]
            if len(records) == 1:
                rrset, item = records[0]
                type_text = dns.rdatatype.to_text(rrset.rdtype)
                if rrset.rdtype in ALIAS_TYPES:
                    target = getattr(item, "target", None)
                    if not isinstance(target, dns.name.Name):
                        raise MalformedAnswerFailure(
                            f"Answer contains malformed {type_text!r} record", domain=qname, server=server
                        )
                    depth += 1
                    logger.debug("%s %s at %s redirected by %s to %s", qname, qtype, name, type_text, target)
                    name = target.to_text()
                    continue
                if rrset.rdtype != rdtype:
                    raise MalformedAnswerFailure(
                        f"Answer contains unexpected {type_text!r} record", domain=qname, server=server
                    )

            meta.redirects = depth
            meta.qname = qname
            meta.canonical_name = name
            return self._build_answer(resp, meta)

    def _exchange(self, qname: str, qtype: str, server: str, domain: str) -> Tuple[dns.message.Message, QueryMeta]:
        host, port = split_server(server)
        q = dns.message.make_query(qname, qtype, use_edns=True, payload=self.udp_payload)
        q.flags |= dns.flags.RD

        # one send per query; a failed send is never retried
        t0 = now_ms()
        try:
            r = dns.query.udp(q, host, timeout=self.timeout, port=port)
            tcp = False
            if r.flags & dns.flags.TC and self.use_tcp_fallback:
                logger.debug("UDP answer for %s %s truncated, re-sending over TCP", qname, qtype)
                r = dns.query.tcp(q, host, timeout=self.timeout, port=port)
                tcp = True
        except _TRANSPORT_ERRORS as e:
            logger.debug("%s %s to %s failed: %s", qname, qtype, server, e)
            raise ResolutionFailure(str(e) or "DNS query failed", domain=domain, server=server) from e
        elapsed = now_ms() - t0

        logger.debug("%s %s via %s: %s in %dms", qname, qtype, server, dns.rcode.to_text(r.rcode()), elapsed)
        return r, QueryMeta(
            server=server,
            qname=qname,
            qtype=qtype,
            tcp=tcp,
            rcode=dns.rcode.to_text(r.rcode()),
            elapsed_ms=elapsed,
            truncated=bool(r.flags & dns.flags.TC),
        )

    @staticmethod
    def _build_answer(resp: dns.message.Message, meta: QueryMeta) -> Answer:
        answers: List[str] = []
        for rrset in resp.answer:
            for item in rrset:
                answers.append(item.to_text())
        return Answer(qname=meta.qname, answers=answers, rrsets=list(resp.answer), meta=meta)
