"""CLI entry point: diff, version, help."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional, Sequence

from scripts.repartee.client import get_clever_client
from scripts.repartee.config import (
    ApiConfig,
    BuildInfo,
    load_api_config,
    load_build_info,
    load_credentials,
    load_mail_config,
)
from scripts.repartee.diff import (
    find_missing_schools,
    find_missing_students,
    find_missing_teachers,
)
from scripts.repartee.errors import ConfigError, DeliveryError, ReparteeError
from scripts.repartee.logging_config import configure_logging
from scripts.repartee.mail import SUBJECT, mail
from scripts.repartee.report import MissingReport, render_summary_html, write_report_json
from scripts.repartee.roster import get_roster
from scripts.repartee.transport import RetryingTransport

logger = logging.getLogger("repartee.cli")

EXIT_SUCCESS = 0
EXIT_FAIL = 1

COMMAND_SUMMARIES = {
    "diff": "Compare a district's roster via two different Clever apps",
    "version": "Shows Version",
    "help": "List available commands",
}


def build_report(
    district_id: str,
    api: Optional[ApiConfig] = None,
    transport: Optional[RetryingTransport] = None,
) -> MissingReport:
    """Fetch both rosters and diff them. Any config, auth or fetch error aborts."""
    api = api or load_api_config()
    # Both credential pairs are checked before the first request
    accelerator_creds = load_credentials(growth=False)
    growth_creds = load_credentials(growth=True)

    own_transport = transport is None
    transport = transport or RetryingTransport(
        max_attempts=api.max_attempts, timeout_s=api.timeout_s
    )
    try:
        accelerator_client = get_clever_client(transport, district_id, accelerator_creds, api)
        accelerator = get_roster(accelerator_client, api.page_limit)

        growth_client = get_clever_client(transport, district_id, growth_creds, api)
        growth = get_roster(growth_client, api.page_limit)
    finally:
        if own_transport:
            transport.close()

    return MissingReport(
        district_name=accelerator.district_name or "",
        district_clever_id=district_id,
        missing_student_clever_ids=find_missing_students(growth, accelerator),
        missing_teacher_clever_ids=find_missing_teachers(growth, accelerator),
        missing_school_clever_ids=find_missing_schools(growth, accelerator),
    )


def deliver_report(report: MissingReport) -> bool:
    """Email the summary. Failures are logged, never raised."""
    try:
        mail(load_mail_config(), SUBJECT, render_summary_html(report))
    except (ConfigError, DeliveryError) as exc:
        logger.error(
            "Unable to send summary email message: %s",
            exc,
            extra={"district_id": report.district_clever_id},
        )
        return False
    return True


def cmd_diff(args: argparse.Namespace) -> None:
    """Diff the accelerator and growth rosters for one district."""
    district_id = args.district
    logger.info(
        "Processing district with clever ID %s",
        district_id,
        extra={"district_id": district_id},
    )

    report = build_report(district_id)
    if report.is_empty:
        logger.info("Rosters match, nothing missing", extra={"district_id": district_id})
    else:
        logger.info(
            "Missing: %d students, %d teachers, %d schools",
            len(report.missing_student_clever_ids),
            len(report.missing_teacher_clever_ids),
            len(report.missing_school_clever_ids),
            extra={"district_id": district_id},
        )
    deliver_report(report)

    # Transient files are lost when run as a cluster job; local debugging only
    if args.json:
        write_report_json(report)


def cmd_version(args: argparse.Namespace) -> None:
    build_info: BuildInfo = args.build_info
    print(f"version {build_info.human_version}")


def cmd_help(args: argparse.Namespace) -> None:
    print("repartee - Tool for interacting with the Clever API. Available Commands:")
    for name, summary in COMMAND_SUMMARIES.items():
        print(f"  {name} - {summary}")


def build_parser(build_info: BuildInfo) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repartee",
        description="Clever roster discrepancy reports",
    )
    subparsers = parser.add_subparsers(dest="command")

    diff_parser = subparsers.add_parser("diff", help=COMMAND_SUMMARIES["diff"])
    diff_parser.add_argument(
        "--district", "-district",
        required=True,
        help="District Clever ID",
    )
    diff_parser.add_argument(
        "--json", "-json",
        action="store_true",
        help="Write the report to <district>.json on local disk",
    )
    diff_parser.set_defaults(func=cmd_diff)

    version_parser = subparsers.add_parser("version", help=COMMAND_SUMMARIES["version"])
    version_parser.set_defaults(func=cmd_version, build_info=build_info)

    help_parser = subparsers.add_parser("help", help=COMMAND_SUMMARIES["help"])
    help_parser.set_defaults(func=cmd_help)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point. Returns the process exit status."""
    configure_logging(os.environ.get("LOG_LEVEL", "INFO"))
    build_info = load_build_info()

    parser = build_parser(build_info)
    args = parser.parse_args(argv)
    if args.command is None:
        cmd_help(args)
        return EXIT_SUCCESS

    try:
        args.func(args)
    except (ReparteeError, OSError) as exc:
        logger.error("%s", exc, exc_info=logger.isEnabledFor(logging.DEBUG))
        return EXIT_FAIL

    logger.info("Successful completion")
    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
