"""Command-line entry point: ``python -m mvn_repository_mcp [stdio|http]``."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from .server import SERVER_NAME, run


def _port(value: str) -> int:
    try:
        port = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError("port must be a number between 1 and 65535")
    if not 1 <= port <= 65535:
        raise argparse.ArgumentTypeError("port must be a number between 1 and 65535")
    return port


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=SERVER_NAME,
        description="Maven Repository MCP server - search mvnrepository.com artifacts",
    )
    parser.add_argument(
        "transport",
        nargs="?",
        choices=("stdio", "http"),
        default=None,
        help="transport to serve on (default: TRANSPORT setting, stdio)",
    )
    parser.add_argument("--host", default=None, help="bind address for the http transport")
    parser.add_argument("-p", "--port", type=_port, default=None, help="port for the http transport")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:  # pragma: no cover
    args = build_parser().parse_args(argv)
    run(transport=args.transport, host=args.host, port=args.port)


if __name__ == "__main__":  # pragma: no cover
    main()
