"""Command line interface: ``orgperms -t TOKEN -o ORG``."""

import argparse
import asyncio
import locale
import logging
import sys

from orgperms.config import DEFAULT_MAX_REQUESTS, OUTPUT_FORMATS, QueryConfig
from orgperms.exceptions import OrgPermsError
from orgperms.format import write_records
from orgperms.logging import configure_logging, get_logger
from orgperms.orchestrator import PermissionReport, run
from orgperms.sorting import SortColumn
from orgperms.transport import DEFAULT_TIMEOUT

logger = get_logger("cli")

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_PARTIAL = 2

ADMIN_PERMISSION = "ADMIN"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="orgperms",
        usage="%(prog)s -t token -o organization",
        description="List collaborator permissions for every repository in a GitHub organization.",
    )
    parser.add_argument(
        "-t", "--token",
        help="GH PAT with repo,admin:org,read:user (default: $ORGPERMS_TOKEN or $GITHUB_TOKEN)",
    )
    parser.add_argument(
        "-o", "--org", dest="organization",
        help="Organization name (default: $ORGPERMS_ORG)",
    )
    parser.add_argument(
        "-p", "--prettify", action="store_true",
        help="Set to prettify the output",
    )
    parser.add_argument(
        "-a", "--all-pages", dest="paginate", default=True,
        action=argparse.BooleanOptionalAction,
        help="Automatically follow pages",
    )
    parser.add_argument(
        "-u", "--all-users", action="store_true",
        help="Show all users instead of just ADMIN",
    )
    parser.add_argument(
        "-f", "--format", dest="output_format", choices=OUTPUT_FORMATS, default="json",
        help="The format used for results",
    )
    parser.add_argument(
        "-s", "--sort", dest="sort_by", choices=[c.value for c in SortColumn],
        default=SortColumn.REPOSITORY.value,
        help="The column to use for sorting results",
    )
    parser.add_argument(
        "--max-requests", type=int, default=DEFAULT_MAX_REQUESTS,
        help="Stop after this many queries",
    )
    parser.add_argument(
        "--timeout", type=float, default=DEFAULT_TIMEOUT,
        help="Per-request timeout in seconds",
    )
    parser.add_argument(
        "--run-timeout", type=float, default=None,
        help="Stop issuing queries after this many seconds",
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0,
        help="Log progress (-v) or every request (-vv) to stderr",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> QueryConfig:
    return QueryConfig.from_env(
        token=args.token,
        organization=args.organization,
        paginate=args.paginate,
        sort_by=args.sort_by,
        output_format=args.output_format,
        indent=2 if args.prettify else 0,
        all_users=args.all_users,
        timeout=args.timeout,
        max_requests=args.max_requests,
        run_timeout=args.run_timeout,
    )


async def execute(config: QueryConfig) -> PermissionReport:
    return await run(
        config.token,
        config.organization,
        config.paginate,
        config.sort_by,
        base_url=config.base_url,
        timeout=config.timeout,
        max_requests=config.max_requests,
        run_timeout=config.run_timeout,
    )


def use_system_collation() -> None:
    """Sort names the way the user's locale orders them."""
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        logger.warning("Unsupported locale, sorting by code point: %s", e)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        configure_logging(
            level=logging.INFO,
            http_level=logging.DEBUG if args.verbose > 1 else logging.INFO,
            pagination_level=logging.DEBUG if args.verbose > 1 else logging.INFO,
        )
    else:
        configure_logging(level=logging.WARNING)
    use_system_collation()

    try:
        config = config_from_args(args)
        report = asyncio.run(execute(config))
    except OrgPermsError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_ERROR

    records = list(report)
    if not config.all_users:
        records = [r for r in records if r.permission == ADMIN_PERMISSION]

    write_records(records, config.output_format, config.indent)

    if not report.complete:
        print(
            f"warning: {len(report.failures)} page(s) could not be retrieved; "
            "results are incomplete",
            file=sys.stderr,
        )
        for failure in report.failures:
            print(f"  {failure.error}", file=sys.stderr)
        return EXIT_PARTIAL

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
