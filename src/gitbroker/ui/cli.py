# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from gitbroker.app import list_instances, reconcile_repository
from gitbroker.config import ConfigurationError, configure_logging, get_repository_config
from gitbroker.config.reconcile import ReconcileConfig, get_reconcile_config
from gitbroker.domain.listing import InstanceFilter, ListingProfile
from gitbroker.domain.model import StatusValue
from gitbroker.domain.ports import PersistenceError
from gitbroker.ui.report import OutputFormat, print_listing

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_bool(value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in {"true", "yes", "1"}:
        return True
    if normalized in {"false", "no", "0"}:
        return False
    raise argparse.ArgumentTypeError(f"Invalid boolean: {value}")


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Reconcile service instances stored in a git repository"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    reconcile = subparsers.add_parser(
        "reconcile", help="Apply Terraform for every binding and record the outcome"
    )
    reconcile.add_argument(
        "repo",
        nargs="?",
        help="Path to the repository working tree (defaults to GITBROKER_REPOSITORY_PATH or .)",
    )
    reconcile.add_argument(
        "--local",
        action="store_true",
        help="Work on the directory as-is: no pull, commit or push",
    )
    reconcile.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of instances reconciled in parallel (defaults to config)",
    )

    listing = subparsers.add_parser("list", help="List service instances and their status")
    listing.add_argument("repo", nargs="?", help="Path to the repository working tree")
    listing.add_argument(
        "-p",
        "--profile",
        choices=[profile.value for profile in ListingProfile],
        help="Include context columns of the given platform profile (ignored for json)",
    )
    listing.add_argument(
        "-o",
        "--output-format",
        choices=[output.value for output in OutputFormat],
        default=OutputFormat.TEXT.value,
        help="Output format (default: %(default)s)",
    )
    listing.add_argument(
        "--status",
        choices=[status.value for status in StatusValue],
        help="Filter by status; EMPTY selects instances without a status file",
    )
    listing.add_argument(
        "--deleted",
        type=_parse_bool,
        help="Filter by deletion flag (true or false)",
    )

    return parser.parse_args(list(argv))


def _reconcile_config(args: argparse.Namespace) -> ReconcileConfig:
    if args.workers is None:
        return get_reconcile_config()
    if args.workers < 1:
        raise ValueError("--workers must be at least 1")
    return ReconcileConfig(max_workers=args.workers)


def _run_reconcile(args: argparse.Namespace) -> None:
    reconcile_config = _reconcile_config(args)
    repository_config = get_repository_config(path=args.repo)
    report = reconcile_repository(
        repository_config=repository_config,
        reconcile_config=reconcile_config,
        use_git=not args.local,
    )
    for labels in report.labels():
        for label in labels:
            print(label)
    for error in report.errors:
        log.warning("Excluded %s", error)


def _run_list(args: argparse.Namespace) -> None:
    instance_filter = InstanceFilter(
        status=StatusValue(args.status) if args.status else None,
        deleted=args.deleted,
    )
    instances = list_instances(args.repo, instance_filter=instance_filter)
    print_listing(
        instances,
        output_format=OutputFormat(args.output_format),
        profile=ListingProfile(args.profile) if args.profile else None,
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)

    try:
        if parsed_args.command == "reconcile":
            _run_reconcile(parsed_args)
        elif parsed_args.command == "list":
            _run_list(parsed_args)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except (ValueError, ConfigurationError):
        log.exception("Invalid invocation")
        sys.exit(2)
    except PersistenceError:
        log.exception("Could not persist reconciliation results")
        sys.exit(1)
    except Exception:
        log.exception("Fatal error during reconciliation")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
