"""
Command line access to a cluster.

    python -m elastinest --hosts localhost:9200 info
    python -m elastinest ping
    python -m elastinest get-template my-template
"""

import argparse
import asyncio
import sys

from dotenv import load_dotenv

from .client import ElasticClient
from .exceptions import ElastiNestError
from .requests import GetIndexTemplateRequest
from .responses import Response
from .serialization import JsonSerializer
from .settings import ConnectionSettings
from .utils.logging import configure_logging, get_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="elastinest",
        description="Typed Elasticsearch client",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--hosts",
        default=None,
        help="Comma separated node addresses (defaults to ELASTINEST_HOSTS)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("info", help="Show root node info")
    commands.add_parser("ping", help="Check that the cluster answers")
    template = commands.add_parser("get-template", help="Show an index template")
    template.add_argument("name", help="Template name or comma separated names")
    return parser


async def run(args: argparse.Namespace) -> Response:
    settings = ConnectionSettings(hosts=args.hosts) if args.hosts else ConnectionSettings()
    async with ElasticClient(settings) as client:
        if args.command == "info":
            return await client.root_node_info()
        if args.command == "ping":
            return await client.ping()
        return await client.get_index_template(GetIndexTemplateRequest(args.name))


def main(argv: list[str] | None = None) -> int:
    """Run one command and print its response as JSON; non-zero exit when the call is invalid."""
    load_dotenv()
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose)
    logger = get_logger(__name__)

    try:
        response = asyncio.run(run(args))
    except ElastiNestError as e:
        logger.error("Command failed", extra={"command": args.command, "error": e.to_dict()})
        return 2

    if args.command == "ping":
        print(JsonSerializer().serialize({"valid": response.is_valid}, pretty=True).decode("utf-8"))
    else:
        print(JsonSerializer().serialize(response, pretty=True).decode("utf-8"))

    if not response.is_valid:
        logger.warning(
            "Call was not valid",
            extra={"command": args.command, "debug_information": response.debug_information},
        )
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
