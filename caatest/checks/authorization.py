from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .records import CAARecord, ClassifiedRecordSet


class Decision(str, Enum):
    AUTHORIZED = "authorized"
    UNAUTHORIZED = "unauthorized"
    INCONCLUSIVE = "inconclusive"
    CRITICAL_UNKNOWN = "critical_unknown"


# Why a level was decided the way it was; drives the per-level report lines.
REASON_CRITICAL_UNKNOWN = "critical_unknown"
REASON_NO_RELEVANT_RECORDS = "no_relevant_records"
REASON_DISCOVERY = "discovery"
REASON_NO_ISSUEWILD = "no_issuewild"
REASON_ISSUEWILD_PRESENT = "issuewild_present"
REASON_NO_ISSUE = "no_issue"
REASON_ISSUER_MATCHED = "issuer_matched"
REASON_ISSUER_NOT_PRESENT = "issuer_not_present"


@dataclass
class Evaluation:
    domain: str
    decision: Decision
    reason: str
    matched: Optional[CAARecord] = None

    @property
    def terminal(self) -> bool:
        return self.decision is not Decision.INCONCLUSIVE


def issuer_domain(value: str) -> str:
    """Issuer part of an issue/issuewild value, parameters dropped."""
    v = value.strip()
    if ";" in v:
        v = v.split(";", 1)[0].strip()
    return v


def matches_issuer(record: CAARecord, issuer: str) -> bool:
    # exact, case-sensitive; no suffix matching
    return issuer_domain(record.value) == issuer


def evaluate(
    domain: str,
    records: ClassifiedRecordSet,
    issuer: Optional[str] = None,
    wildcard: bool = False,
) -> Evaluation:
    """Decide what the CAA set found at ``domain`` means for ``issuer``.

    An empty ``issuer`` selects discovery mode, where every useful set is
    inconclusive so the whole chain gets reported.

    In wildcard mode a level without ``issuewild`` records is skipped rather
    than falling back to ``issue``, and any ``issuewild`` record authorizes
    without comparing its value. Neither follows strict RFC 8659 matching.
    """
    if records.has_critical_unknown():
        return Evaluation(domain, Decision.CRITICAL_UNKNOWN, REASON_CRITICAL_UNKNOWN)
    if not records.is_useful():
        return Evaluation(domain, Decision.INCONCLUSIVE, REASON_NO_RELEVANT_RECORDS)
    if not issuer:
        return Evaluation(domain, Decision.INCONCLUSIVE, REASON_DISCOVERY)

    if wildcard:
        if not records.issuewild:
            return Evaluation(domain, Decision.INCONCLUSIVE, REASON_NO_ISSUEWILD)
        return Evaluation(domain, Decision.AUTHORIZED, REASON_ISSUEWILD_PRESENT, matched=records.issuewild[0])

    if not records.issue:
        return Evaluation(domain, Decision.INCONCLUSIVE, REASON_NO_ISSUE)
    for rr in records.issue:
        if matches_issuer(rr, issuer):
            return Evaluation(domain, Decision.AUTHORIZED, REASON_ISSUER_MATCHED, matched=rr)
    return Evaluation(domain, Decision.UNAUTHORIZED, REASON_ISSUER_NOT_PRESENT)
