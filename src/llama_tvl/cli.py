#!/usr/bin/env python3
"""
llama-tvl command line

Query DeFi Llama and print results as JSON:
    llama-tvl protocols --limit 3
    llama-tvl protocol aave --formatted
    llama-tvl tvl uniswap
    llama-tvl chains
    llama-tvl chain-history Ethereum --formatted

Usage:
    python -m llama_tvl.cli --log-level DEBUG protocol aave
"""

import argparse
import asyncio
import json
import sys
from typing import Any

import structlog
from pydantic import BaseModel

from llama_tvl.config import settings
from llama_tvl.exceptions import LlamaTVLError
from llama_tvl.ingestion.defillama import DeFiLlamaClient
from llama_tvl.logging_config import configure_logging

logger = structlog.get_logger()


def _to_jsonable(result: Any) -> Any:
    if isinstance(result, BaseModel):
        return result.model_dump(mode="json", by_alias=True)
    if isinstance(result, list):
        return [_to_jsonable(item) for item in result]
    return result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="llama-tvl",
        description="Fetch and analyze DeFi Llama TVL data.",
    )
    parser.add_argument(
        "--base-url",
        default=None,
        help=f"API base URL (default: {settings.base_url})",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help="Log level for stderr output (default: %(default)s)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    protocols = commands.add_parser("protocols", help="List all protocols")
    protocols.add_argument("--limit", type=int, default=None, help="Print only the first N")

    protocol = commands.add_parser("protocol", help="Protocol TVL history")
    protocol.add_argument("protocol", help="Protocol slug, e.g. aave")
    protocol.add_argument("--formatted", action="store_true", help="Print the formatted analysis")

    tvl = commands.add_parser("tvl", help="Current protocol TVL")
    tvl.add_argument("protocol", help="Protocol slug, e.g. uniswap")

    chains = commands.add_parser("chains", help="List all chains")
    chains.add_argument("--limit", type=int, default=None, help="Print only the first N")

    history = commands.add_parser("chain-history", help="Historical chain TVL")
    history.add_argument("chain", nargs="?", default=None, help="Chain name; omit for all chains")
    history.add_argument("--formatted", action="store_true", help="Print the formatted analysis")

    return parser


async def run(args: argparse.Namespace) -> Any:
    """Execute the parsed command and return its JSON-ready result."""
    async with DeFiLlamaClient(base_url=args.base_url) as client:
        if args.command == "protocols":
            result = (await client.get_protocols())[: args.limit]
        elif args.command == "protocol":
            result = await client.get_protocol_tvl(args.protocol, formatted=args.formatted)
        elif args.command == "tvl":
            result = await client.get_current_protocol_tvl(args.protocol)
        elif args.command == "chains":
            result = (await client.get_chains())[: args.limit]
        else:
            result = await client.get_historical_chain_tvl(args.chain, formatted=args.formatted)
    return _to_jsonable(result)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        result = asyncio.run(run(args))
    except LlamaTVLError as e:
        logger.error("Command failed", command=args.command, error=str(e))
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
