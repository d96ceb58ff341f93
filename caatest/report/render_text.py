from __future__ import annotations

import sys
from dataclasses import asdict
from typing import Any, Dict, Optional, TextIO

from ..checks import authorization as authz
from ..checks.caa import LEVEL_EMPTY, LEVEL_ERROR, CAAResult, LevelReport, Outcome
from ..checks.records import ClassifiedRecordSet


def _print_set(records: Optional[ClassifiedRecordSet], out: TextIO) -> None:
    if not records:
        return
    for rr in records:
        print(f"\t{rr}", file=out)


def _render_level(
    result: CAAResult,
    level: LevelReport,
    verbose: bool,
    out: TextIO,
    err: TextIO,
) -> None:
    n = level.domain
    chatty = verbose or not result.issuer
    show_set = verbose

    if level.status == LEVEL_ERROR:
        print(f'[{n}] Failed to send CAA query to "{result.server}": {result.error}', file=err)
        return
    if level.status == LEVEL_EMPTY:
        if chatty:
            print(f"[{n}] Empty response", file=out)
        return

    if level.status == authz.REASON_CRITICAL_UNKNOWN:
        print(f"[{n}] CAA set contains a unknown record with critical bit set", file=err)
    elif level.status == authz.REASON_NO_RELEVANT_RECORDS:
        if not chatty:
            return
        print(f"[{n}] CAA set contains no relevant records", file=out)
    elif level.status == authz.REASON_DISCOVERY:
        print(f"[{n}] CAA set contains following records", file=out)
        show_set = True
    elif level.status == authz.REASON_NO_ISSUEWILD:
        if not verbose:
            return
        print(f"[{n}] No issuewild tag records in set", file=out)
    elif level.status == authz.REASON_ISSUEWILD_PRESENT:
        print(f"[{n}] Valid issuewild tag record found in set", file=out)
    elif level.status == authz.REASON_NO_ISSUE:
        if not verbose:
            return
        print(f"[{n}] No issue tag records in set", file=out)
    elif level.status == authz.REASON_ISSUER_MATCHED:
        print(f'[{n}] Valid issue tag record found for "{result.issuer}" in set', file=out)
    elif level.status == authz.REASON_ISSUER_NOT_PRESENT:
        print(f'[{n}] Issuer "{result.issuer}" not present in CAA issue tag set', file=err)

    if show_set:
        _print_set(level.records, out)


def render_result(
    result: CAAResult,
    verbose: bool = False,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> None:
    """Write the per-level report for ``result``.

    Failures and negative decisions go to ``err``, everything else to ``out``.
    Without an issuer (discovery mode) every level is reported.
    """
    out = out or sys.stdout
    err = err or sys.stderr
    for level in result.levels:
        _render_level(result, level, verbose, out, err)

    if result.outcome == Outcome.NO_CAA and verbose:
        print(f'[{result.domain}] No CAA record set restricts issuance by "{result.issuer}"', file=out)


def build_report(result: CAAResult) -> Dict[str, Any]:
    report = asdict(result)
    report["queries"] = result.queries
    report["ok"] = result.ok
    return report
