"""CLI commands for the SatNOGS DB client."""

import argparse
import json
import logging
import sys

from .client import SatnogsClient
from .errors import SatnogsError
from .settings import get_settings

logger = logging.getLogger(__name__)

def _configure_logging(verbose):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    if not verbose:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)


def _page_count(value):
    count = int(value)
    if count < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {count}")
    return count


def _parse_params(raw):
    params = []
    for p in raw:
        k, sep, v = p.partition("=")
        if not sep:
            raise SystemExit(f"Invalid --param {p!r}, expected KEY=VALUE")
        params.append((k, v))
    return params


def _telemetry(client, args):
    pages = None if args.all else args.pages
    records = []
    page_count = 0
    for page in client.iter_telemetry_pages(args.satellite_id, max_pages=pages):
        page_count += 1
        logger.debug("Page %d: %d records, next=%s", page_count, len(page.results), page.next)
        records.extend(t.model_dump(mode="json") for t in page.results)
    json.dump(records, sys.stdout, indent=2)
    sys.stdout.write("\n")
    logger.info("Fetched %s records across %d pages", f"{len(records):,}", page_count)


def _api(client, args):
    resp = client.get(args.endpoint, _parse_params(args.param))
    try:
        logger.info("HTTP %d %s", resp.status_code, resp.request.url)
        try:
            json.dump(resp.json(), sys.stdout, indent=2)
            sys.stdout.write("\n")
        except ValueError:
            sys.stdout.write(resp.text)
    finally:
        resp.close()


def build_parser():
    parser = argparse.ArgumentParser(
        description="Read telemetry from the SatNOGS DB API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--api-key",
        default=None,
        help="API token (default: SATNOGS_API_KEY from environment or .env)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log HTTP requests",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # telemetry subcommand
    telemetry_parser = subparsers.add_parser(
        "telemetry",
        help="Fetch telemetry frames for a satellite",
    )
    telemetry_parser.add_argument(
        "satellite_id",
        help="Satellite identifier (e.g., 43770 or a SatNOGS sat_id)",
    )
    pages_group = telemetry_parser.add_mutually_exclusive_group()
    pages_group.add_argument(
        "--pages",
        type=_page_count,
        default=1,
        help="Number of pages to follow (default: 1)",
    )
    pages_group.add_argument(
        "--all",
        action="store_true",
        help="Follow next links until the last page",
    )

    # api subcommand
    api_parser = subparsers.add_parser(
        "api",
        help="Make a raw GET call against the API",
    )
    api_parser.add_argument(
        "endpoint",
        help="API endpoint path (e.g., /satellites/)",
    )
    api_parser.add_argument(
        "--param",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Query parameter (repeatable, e.g., --param format=json)",
    )
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    _configure_logging(args.verbose)
    api_key = args.api_key if args.api_key is not None else get_settings().satnogs_api_key

    with SatnogsClient(api_key=api_key) as client:
        try:
            if args.command == "telemetry":
                _telemetry(client, args)
            elif args.command == "api":
                _api(client, args)
        except SatnogsError as e:
            logger.error("%s", e)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
