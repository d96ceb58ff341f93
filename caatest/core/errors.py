"""Exception hierarchy for caatest."""

from __future__ import annotations

from typing import Optional


class CAATestError(Exception):
    """Base exception for all caatest errors."""


# ── Lookup failures ────────────────────────────────────────────────────────────

class LookupFailure(CAATestError):
    """A CAA query could not produce a usable answer.

    ``domain`` is the hierarchy level being queried when the failure happened,
    which may differ from the name actually sent if aliases were followed.
    """

    def __init__(self, message: str, domain: str = "", server: Optional[str] = None):
        super().__init__(message)
        self.domain = domain
        self.server = server


class ResolutionFailure(LookupFailure):
    """Transport error or non-NOERROR response code."""


class AliasLoopFailure(LookupFailure):
    """Too many CNAME/DNAME redirects."""


class MalformedAnswerFailure(LookupFailure):
    """Single-record answer that is neither the requested type nor a usable alias."""


# ── Invocation errors ──────────────────────────────────────────────────────────

class ResolverConfigError(CAATestError):
    """No upstream resolver could be taken from the system configuration."""


class InvalidDomainError(CAATestError):
    """The provided domain name is invalid."""
