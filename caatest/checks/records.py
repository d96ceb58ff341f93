"""Classification of CAA record sets by tag (RFC 6844 §5)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional

import dns.rdatatype
import dns.rrset

CRITICAL_FLAG = 128

TAG_ISSUE = "issue"
TAG_ISSUEWILD = "issuewild"
TAG_IODEF = "iodef"
KNOWN_TAGS = (TAG_ISSUE, TAG_ISSUEWILD, TAG_IODEF)


@dataclass(frozen=True)
class CAARecord:
    flags: int
    tag: str
    value: str
    owner: str = ""
    ttl: Optional[int] = None

    @classmethod
    def from_rdata(cls, rdata, owner: str = "", ttl: Optional[int] = None) -> "CAARecord":
        return cls(
            flags=int(rdata.flags),
            tag=rdata.tag.decode("ascii", errors="replace"),
            value=rdata.value.decode("utf-8", errors="replace"),
            owner=owner,
            ttl=ttl,
        )

    @property
    def critical(self) -> bool:
        return bool(self.flags & CRITICAL_FLAG)

    def to_text(self) -> str:
        return f'{self.flags} {self.tag} "{self.value}"'

    def __str__(self) -> str:
        if not self.owner:
            return self.to_text()
        return f"{self.owner}\t{self.ttl if self.ttl is not None else ''}\tIN\tCAA\t{self.to_text()}"


@dataclass
class ClassifiedRecordSet:
    issue: List[CAARecord] = field(default_factory=list)
    issuewild: List[CAARecord] = field(default_factory=list)
    iodef: List[CAARecord] = field(default_factory=list)
    unknown: List[CAARecord] = field(default_factory=list)

    def has_critical_unknown(self) -> bool:
        return any(rr.critical for rr in self.unknown)

    def is_useful(self) -> bool:
        return bool(self.issue or self.issuewild)

    def __iter__(self) -> Iterator[CAARecord]:
        for section in (self.issue, self.issuewild, self.iodef, self.unknown):
            yield from section

    def __len__(self) -> int:
        return len(self.issue) + len(self.issuewild) + len(self.iodef) + len(self.unknown)

    def add(self, record: CAARecord) -> None:
        tag = record.tag.lower()
        if tag == TAG_ISSUE:
            self.issue.append(record)
        elif tag == TAG_ISSUEWILD:
            self.issuewild.append(record)
        elif tag == TAG_IODEF:
            self.iodef.append(record)
        else:
            self.unknown.append(record)


def classify(rrsets: Iterable[dns.rrset.RRset]) -> ClassifiedRecordSet:
    """Sort the CAA records of an answer section into tag buckets.

    Records of any other type (e.g. the CNAME heading an aliased answer) are
    skipped.
    """
    out = ClassifiedRecordSet()
    for rrset in rrsets:
        if rrset.rdtype != dns.rdatatype.CAA:
            continue
        owner = rrset.name.to_text()
        for item in rrset:
            if item.rdtype != dns.rdatatype.CAA:
                continue
            out.add(CAARecord.from_rdata(item, owner=owner, ttl=rrset.ttl))
    return out
