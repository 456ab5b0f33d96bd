from __future__ import annotations

import argparse
import asyncio
import json
import logging
from dataclasses import asdict, replace
from typing import Any, Awaitable, Callable

from .client import DripsClient
from .config import Settings
from .models import RafflableNFTsOptions, RaffleQueryOptions, StatusFilter
from .project_constants import SUPPORTED_NETWORKS


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _emit(result: Any) -> None:
    print(json.dumps(asdict(result) if result is not None else None, indent=2))


def positive_int(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return n


def _query_options(args: argparse.Namespace) -> RaffleQueryOptions:
    return RaffleQueryOptions(
        limit=args.limit,
        cursor=args.cursor,
        include_details=not args.no_details,
        status=StatusFilter(args.status),
    )


def _run(
    args: argparse.Namespace, action: Callable[[DripsClient], Awaitable[Any]]
) -> int:
    settings = Settings.from_env(network=args.network, rpc_url_override=args.rpc_url)
    settings = replace(settings, timeout_s=args.timeout)
    log = logging.getLogger("drips")
    log.info("Network : %s", settings.network)
    log.info("Package : %s", settings.package_id)

    async def go() -> Any:
        async with DripsClient.from_settings(settings) as client:
            return await action(client)

    _emit(asyncio.run(go()))
    return 0


def cmd_raffle(args: argparse.Namespace) -> int:
    return _run(args, lambda c: c.get_raffle_details(args.raffle_id))


def cmd_raffles(args: argparse.Namespace) -> int:
    return _run(args, lambda c: c.query_raffles(_query_options(args)))


def cmd_creator(args: argparse.Namespace) -> int:
    return _run(
        args, lambda c: c.get_raffles_by_creator(args.address, _query_options(args))
    )


def cmd_search(args: argparse.Namespace) -> int:
    return _run(args, lambda c: c.search_raffles(args.term, _query_options(args)))


def cmd_nfts(args: argparse.Namespace) -> int:
    options = RafflableNFTsOptions(
        include_metadata=not args.no_metadata,
        only_compatible=not args.all,
        limit=args.limit,
        cursor=args.cursor,
    )
    return _run(args, lambda c: c.get_rafflable_nfts(args.address, options))


def _add_query_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--limit", type=positive_int, default=10, help="Page size.")
    p.add_argument("--cursor", default=None, help="Last raffle id of the previous page.")
    p.add_argument(
        "--status",
        choices=[s.value for s in StatusFilter],
        default=StatusFilter.ALL.value,
        help="Filter by derived status.",
    )
    p.add_argument(
        "--no-details", action="store_true", help="Return raffle ids only (faster)."
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="drips-raffle",
        description="Discover and inspect Drips raffles on Sui.",
    )
    p.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    p.add_argument(
        "--network",
        choices=SUPPORTED_NETWORKS,
        default=None,
        help="Network (else DRIPS_NETWORK or testnet).",
    )
    p.add_argument("--rpc-url", default=None, help="Override RPC URL (else use env).")
    p.add_argument("--timeout", type=float, default=60.0, help="RPC timeout seconds.")

    sub = p.add_subparsers(dest="cmd", required=True)

    r = sub.add_parser("raffle", help="Show one raffle with its derived status.")
    r.add_argument("raffle_id", help="Raffle object id.")
    r.set_defaults(func=cmd_raffle)

    q = sub.add_parser("raffles", help="Discover raffles.")
    _add_query_args(q)
    q.set_defaults(func=cmd_raffles)

    c = sub.add_parser("creator", help="Raffles whose operator cap an address holds.")
    c.add_argument("address", help="Creator address.")
    _add_query_args(c)
    c.set_defaults(func=cmd_creator)

    s = sub.add_parser("search", help="Search raffles by prize name/description.")
    s.add_argument("term", help="Case-insensitive search term.")
    _add_query_args(s)
    s.set_defaults(func=cmd_search)

    n = sub.add_parser("nfts", help="List an address's rafflable NFTs.")
    n.add_argument("address", help="Owner address.")
    n.add_argument("--limit", type=positive_int, default=20, help="Owned objects per page.")
    n.add_argument("--cursor", default=None, help="Ledger cursor from a previous page.")
    n.add_argument(
        "--all", action="store_true", help="Include incompatible objects."
    )
    n.add_argument(
        "--no-metadata", action="store_true", help="Skip per-object metadata fetch."
    )
    n.set_defaults(func=cmd_nfts)

    return p


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()
    setup_logging(args.verbose)
    raise SystemExit(args.func(args))
