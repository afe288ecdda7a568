"""Main application entry point for Disk Harvester.

Parses arguments, merges them with saved settings, configures logging and
runs a harvest.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from disk_harvester import __version__
from disk_harvester.config.paths import TOKEN_CONTAINER, get_log_file_path
from disk_harvester.config.settings import AppSettings, SettingsManager
from disk_harvester.exceptions import HarvestError
from disk_harvester.local.selection import make_selection
from disk_harvester.local.volumes import get_fixed_volumes
from disk_harvester.pipeline.runner import RunResult, run_harvest
from disk_harvester.utils.logging import setup_logging
from disk_harvester.utils.validators import (
    validate_account,
    validate_blob_name,
    validate_timeout,
)


def build_parser() -> argparse.ArgumentParser:
    """Command-line parser."""
    parser = argparse.ArgumentParser(
        prog="disk-harvester",
        description="Upload files from local fixed disks to Azure Blob Storage.",
    )
    parser.add_argument("--account", help="storage account name or https URL")
    parser.add_argument("--token-blob", help="blob holding the access token")
    parser.add_argument(
        "--token-container",
        help=f"container holding token blobs (default: {TOKEN_CONTAINER})",
    )
    parser.add_argument(
        "--include",
        action="append",
        metavar="PATH",
        help="path prefix to upload; repeat for several (e.g. --include C:\\Users\\x\\Downloads)",
    )
    parser.add_argument(
        "--all-disks",
        action="store_true",
        default=None,
        help="upload every file on every fixed disk; inclusions are ignored",
    )
    parser.add_argument("--verbose", "-v", action="store_true", default=None, help="print progress")
    parser.add_argument("--timeout", type=int, help="HTTP timeout in seconds")
    parser.add_argument("--settings", type=Path, help="settings file (default: app data directory)")
    parser.add_argument("--save-settings", action="store_true", help="store the effective options as defaults")
    parser.add_argument("--reset-settings", action="store_true", help="delete the saved settings and exit")
    parser.add_argument("--list-disks", action="store_true", help="list fixed disks and exit")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def merge_settings(settings: AppSettings, args: argparse.Namespace) -> AppSettings:
    """
    Overlay command-line options on saved settings.

    Args:
        settings: Saved settings (modified in place)
        args: Parsed arguments; None values keep the saved setting

    Returns:
        The merged settings
    """
    if args.account is not None:
        settings.account = args.account
    if args.token_blob is not None:
        settings.token_blob = args.token_blob
    if args.token_container is not None:
        settings.token_container = args.token_container
    if args.include is not None:
        settings.inclusions = list(args.include)
    if args.all_disks is not None:
        settings.include_all = args.all_disks
    if args.verbose is not None:
        settings.verbose = args.verbose
    if args.timeout is not None:
        settings.timeout = args.timeout
    return settings


def validate_settings(settings: AppSettings) -> List[str]:
    """Return a list of problems preventing a run."""
    errors = []
    for is_valid, error in (
        validate_account(settings.account),
        validate_blob_name(settings.token_blob),
        validate_timeout(settings.timeout),
    ):
        if not is_valid:
            errors.append(error)
    return errors


def print_disks(settings: AppSettings) -> None:
    """Human-readable volume list for --list-disks."""
    selection = make_selection(settings.include_all, settings.inclusions)
    volumes = get_fixed_volumes()
    print(f"{'VOLUME':<24} {'NAME':<12} {'SIZE(GB)':>10} {'STATUS':<10} LABEL")
    for v in volumes:
        status = "selected" if selection.matches(v) else "skipped"
        print(f"{v.identifier:<24} {v.name:<12} {v.total_bytes / (1024**3):>10.1f} {status:<10} {v.label}")
    if not volumes:
        print("No fixed disks found.")


def print_summary(result: RunResult) -> None:
    """Final run summary."""
    print(
        f"Run {result.timestamp} complete: {result.files_uploaded}/{result.files_attempted} "
        f"files uploaded to container '{result.container_name}'"
    )
    if result.files_failed:
        print(f"{result.files_failed} file(s) failed; see {result.log_blob}")
    if not result.metadata_uploaded:
        print(f"Metadata upload failed; see {result.log_blob}")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Application entry point.

    Returns:
        Exit code (0 for a completed run, 1 for an aborted run)
    """
    args = build_parser().parse_args(argv)

    settings_manager = SettingsManager(args.settings)
    settings = merge_settings(settings_manager.load(), args)

    logger = setup_logging(
        level=logging.INFO if settings.verbose else logging.WARNING,
        log_file=get_log_file_path(),
    )

    if args.reset_settings:
        settings_manager.reset()
        print(f"Removed saved settings {settings_manager.config_path}")
        return 0

    if args.list_disks:
        print_disks(settings)
        return 0

    errors = validate_settings(settings)
    if errors:
        for error in errors:
            print(f"Error: {error}", file=sys.stderr)
        return 2

    if args.save_settings:
        settings_manager.save(settings)
        logger.info(f"Saved settings to {settings_manager.config_path}")

    try:
        result = run_harvest(settings)
    except KeyboardInterrupt:
        print("\nInterrupted by user.", file=sys.stderr)
        return 130
    except HarvestError as e:
        logger.error(f"Run aborted: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        return 1

    print_summary(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
