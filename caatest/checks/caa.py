"""CAA discovery: walk a name towards the root until a CAA set decides."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..core.errors import LookupFailure
from ..core.resolver import DNSResolver
from ..core.utils import label_chain
from .authorization import Decision, evaluate
from .records import ClassifiedRecordSet, classify

logger = logging.getLogger(__name__)

WILDCARD_PREFIX = "*."

LEVEL_EMPTY = "empty"
LEVEL_ERROR = "error"


class Outcome(str, Enum):
    AUTHORIZED = "authorized"
    UNAUTHORIZED = "unauthorized"
    CRITICAL_UNKNOWN = "critical_unknown"
    ERROR = "error"
    NO_CAA = "no_caa"
    DISCOVERED = "discovered"


SUCCESS_OUTCOMES = (Outcome.AUTHORIZED, Outcome.NO_CAA, Outcome.DISCOVERED)

_DECIDED = {
    Decision.AUTHORIZED: Outcome.AUTHORIZED,
    Decision.UNAUTHORIZED: Outcome.UNAUTHORIZED,
    Decision.CRITICAL_UNKNOWN: Outcome.CRITICAL_UNKNOWN,
}


@dataclass
class LevelReport:
    domain: str
    status: str
    decision: Optional[Decision] = None
    records: Optional[ClassifiedRecordSet] = None
    canonical_name: str = ""
    redirects: int = 0


@dataclass
class CAAResult:
    domain: str
    issuer: Optional[str]
    wildcard: bool
    server: str
    outcome: Outcome
    decided_at: Optional[str] = None
    error: Optional[str] = None
    levels: List[LevelReport] = field(default_factory=list)

    @property
    def queries(self) -> int:
        return len(self.levels)

    @property
    def ok(self) -> bool:
        return self.outcome in SUCCESS_OUTCOMES


def check_caa(
    domain: str,
    resolver: DNSResolver,
    server: str,
    issuer: Optional[str] = None,
    wildcard: bool = False,
) -> CAAResult:
    """Find the relevant CAA set for ``domain`` and decide on ``issuer``.

    A leading ``*.`` label switches to wildcard mode and is not queried.
    Without an issuer every level of the chain is reported (discovery mode),
    stopping early only on a critical unknown tag or a lookup failure.

    Lookup failures do not propagate: they end the walk with
    ``Outcome.ERROR`` and the level that failed in ``decided_at``.
    """
    if domain.startswith(WILDCARD_PREFIX):
        wildcard = True
        domain = domain[len(WILDCARD_PREFIX):]
    issuer = issuer or None

    result = CAAResult(domain=domain, issuer=issuer, wildcard=wildcard, server=server, outcome=Outcome.NO_CAA)

    for name in label_chain(domain):
        try:
            ans = resolver.query(name, "CAA", server=server)
        except LookupFailure as e:
            logger.debug("[%s] CAA lookup via %s failed: %s", name, server, e)
            result.levels.append(LevelReport(domain=name, status=LEVEL_ERROR))
            result.outcome = Outcome.ERROR
            result.decided_at = e.domain or name
            result.error = str(e)
            return result

        level = LevelReport(
            domain=name,
            status=LEVEL_EMPTY,
            canonical_name=ans.meta.canonical_name,
            redirects=ans.meta.redirects,
        )
        result.levels.append(level)
        if not ans.answers:
            logger.debug("[%s] empty response", name)
            continue

        level.records = classify(ans.rrsets)
        ev = evaluate(name, level.records, issuer=issuer, wildcard=wildcard)
        level.status = ev.reason
        level.decision = ev.decision
        logger.debug("[%s] %d CAA records, %s (%s)", name, len(level.records), ev.decision.value, ev.reason)

        if ev.terminal:
            result.outcome = _DECIDED[ev.decision]
            result.decided_at = name
            return result

    result.outcome = Outcome.NO_CAA if issuer else Outcome.DISCOVERED
    return result
