from caatest.checks.authorization import (
    REASON_DISCOVERY,
    REASON_ISSUER_NOT_PRESENT,
    REASON_NO_ISSUE,
    REASON_NO_ISSUEWILD,
    REASON_NO_RELEVANT_RECORDS,
    Decision,
    evaluate,
    issuer_domain,
    matches_issuer,
)
from caatest.checks.records import CAARecord, classify

from conftest import caa_rrset


def _rr(value: str) -> CAARecord:
    return CAARecord(flags=0, tag="issue", value=value)


def _set(*rdatas: str):
    return classify([caa_rrset("example.com", *rdatas)])


def test_issuer_matching():
    assert matches_issuer(_rr("  ca.example.com ; account=1234"), "ca.example.com")
    assert matches_issuer(_rr("ca.example.com"), "ca.example.com")
    assert not matches_issuer(_rr("ca.example.com"), "sub.ca.example.com")
    assert not matches_issuer(_rr("sub.ca.example.com"), "ca.example.com")
    assert not matches_issuer(_rr("CA.example.com"), "ca.example.com")
    assert not matches_issuer(_rr(";"), "ca.example.com")


def test_issuer_domain_idempotent():
    v = "  ca.example.com ; account=1234"
    assert issuer_domain(v) == "ca.example.com"
    assert issuer_domain(issuer_domain(v)) == issuer_domain(v)


def test_critical_unknown_wins_over_match():
    ev = evaluate("example.com", _set('0 issue "ca.example"', '128 tbs "x"'), issuer="ca.example")
    assert ev.decision == Decision.CRITICAL_UNKNOWN
    assert ev.terminal


def test_not_useful_is_inconclusive():
    ev = evaluate("example.com", _set('0 iodef "mailto:a@example.com"'), issuer="ca.example")
    assert ev.decision == Decision.INCONCLUSIVE
    assert ev.reason == REASON_NO_RELEVANT_RECORDS


def test_discovery_mode_is_inconclusive():
    ev = evaluate("example.com", _set('0 issue "ca.example"'), issuer=None)
    assert ev.decision == Decision.INCONCLUSIVE
    assert ev.reason == REASON_DISCOVERY
    assert not ev.terminal


def test_issue_match_and_mismatch():
    s = _set('0 issue "other.example"', '0 issue "ca.example; validationmethods=dns-01"')
    ev = evaluate("example.com", s, issuer="ca.example")
    assert ev.decision == Decision.AUTHORIZED
    assert ev.matched is s.issue[1]

    ev = evaluate("example.com", _set('0 issue "other.example"'), issuer="ca.example")
    assert ev.decision == Decision.UNAUTHORIZED
    assert ev.reason == REASON_ISSUER_NOT_PRESENT


def test_no_issue_records_continue():
    ev = evaluate("example.com", _set('0 issuewild "ca.example"'), issuer="ca.example")
    assert ev.decision == Decision.INCONCLUSIVE
    assert ev.reason == REASON_NO_ISSUE


def test_wildcard_mode():
    ev = evaluate("example.com", _set('0 issue "ca.example"'), issuer="ca.example", wildcard=True)
    assert ev.decision == Decision.INCONCLUSIVE
    assert ev.reason == REASON_NO_ISSUEWILD

    # any issuewild entry authorizes, whatever its value
    ev = evaluate("example.com", _set('0 issuewild "other.example"'), issuer="ca.example", wildcard=True)
    assert ev.decision == Decision.AUTHORIZED
    assert ev.matched.value == "other.example"
