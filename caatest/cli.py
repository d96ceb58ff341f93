from __future__ import annotations

import argparse
import json
import sys
from typing import List, Optional

from .checks.caa import check_caa
from .core.errors import InvalidDomainError, ResolverConfigError
from .core.logging_config import LEVEL_NAMES, init_logging
from .core.resolv_conf import RESOLV_CONF, system_resolver
from .core.resolver import MAX_ALIAS_REDIRECTS, DNSResolver
from .core.utils import split_server
from .report.render_text import build_report, render_result


def cmd_check(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    if not args.domain:
        print("No domain name provided", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1

    try:
        upstream = args.resolver or system_resolver(args.resolv_conf)
        split_server(upstream)
    except ResolverConfigError as e:
        print(e, file=sys.stderr)
        return 1

    resolver = DNSResolver(
        timeout=args.timeout,
        max_alias_redirects=args.max_redirects,
    )
    try:
        result = check_caa(
            args.domain,
            resolver,
            server=upstream,
            issuer=args.issuer,
            wildcard=args.wildcard,
        )
    except InvalidDomainError as e:
        print(e, file=sys.stderr)
        return 1

    if args.json:
        out = build_report(result)
        if args.json == "-":
            print(json.dumps(out, indent=2))
        else:
            with open(args.json, "w", encoding="utf-8") as f:
                json.dump(out, f, indent=2)
    else:
        render_result(result, verbose=args.verbose)

    return 0 if result.ok else 1


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="caatest",
        description="caatest: check whether a CA may issue for a domain (RFC 6844 CAA discovery)",
    )
    p.add_argument("--version", action="version", version="caatest 0.1.0")
    p.add_argument("domain", nargs="?", default="", help="Domain name to check (prefix with '*.' for a wildcard)")
    p.add_argument(
        "--issuer",
        default="",
        help="Name of issuer to test against (if empty the full chain is displayed)",
    )
    p.add_argument(
        "--resolver",
        default="",
        help="DNS server and port to send questions to (defaults to a nameserver from --resolv-conf)",
    )
    p.add_argument("--resolv-conf", default=RESOLV_CONF, help=f"Resolver configuration file (default: {RESOLV_CONF})")
    p.add_argument("--verbose", action="store_true", help="Print extra information about the CAA sets that are returned")
    p.add_argument("--wildcard", action="store_true", help="Check authorization for a wildcard certificate")
    p.add_argument("--timeout", type=float, default=2.0)
    p.add_argument(
        "--max-redirects",
        type=int,
        default=MAX_ALIAS_REDIRECTS,
        help=f"CNAME/DNAME redirects to follow per query (default: {MAX_ALIAS_REDIRECTS})",
    )
    p.add_argument("--json", help="Write JSON output to file (or '-' for stdout)")
    p.add_argument("--log-level", default="warning", choices=LEVEL_NAMES)
    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    init_logging(args.log_level)
    return int(cmd_check(args, parser))


if __name__ == "__main__":
    raise SystemExit(main())
