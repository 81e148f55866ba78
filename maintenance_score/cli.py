"""
Command-line interface for the maintenance score tool.
"""

import argparse
import logging
import math
import sys
from pathlib import Path
from typing import List, Optional

from .auditor import MaintenanceAuditor
from .config import (
    DEFAULT_REGISTRY_URL,
    DEFAULT_TIMEOUT,
    MIN_REQUEST_DELAY,
    AuditSettings,
)
from .errors import ManifestError
from .manifest import CargoMetadataReader, default_manifest_path
from .models import FetchOutcome, MaintenanceAssessment
from .registry import CratesIoClient
from .reporting import (
    export_report_csv,
    export_report_worksheet,
    format_report_table,
    format_summary,
    save_report_json,
)


SUBCOMMAND = "maintenance-score"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cargo",
        description="Cargo subcommands provided by cargo-maintenance-score"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    audit = subparsers.add_parser(
        SUBCOMMAND,
        help="Detect unmaintained and risky Rust dependencies",
        description="Detect unmaintained and risky Rust dependencies"
    )

    audit.add_argument(
        "-m", "--manifest-path",
        type=Path,
        default=None,
        help="Path to Cargo.toml. Default: ./Cargo.toml"
    )

    audit.add_argument(
        "--no-deps",
        action="store_true",
        help="Only audit dependencies declared by workspace members"
    )

    audit.add_argument(
        "--registry-url",
        default=DEFAULT_REGISTRY_URL,
        help=f"Registry base URL. Default: {DEFAULT_REGISTRY_URL}"
    )

    audit.add_argument(
        "--delay",
        type=float,
        default=MIN_REQUEST_DELAY,
        help=f"Seconds between registry requests (minimum {MIN_REQUEST_DELAY}). Default: {MIN_REQUEST_DELAY}"
    )

    audit.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help=f"Per-request timeout in seconds. Default: {DEFAULT_TIMEOUT:g}"
    )

    audit.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for exported reports"
    )

    audit.add_argument("--json", action="store_true", help="Export the report as JSON")
    audit.add_argument("--csv", action="store_true", help="Export the report as CSV")
    audit.add_argument("--xlsx", action="store_true", help="Export the report as an Excel workbook")

    audit.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )

    return parser


def _print_fetch_start(index: int, total: int, name: str) -> None:
    print(f"{index:>4}/{total:<4} Fetching {name}...", end="", flush=True)


def _print_progress(index: int, total: int, name: str, outcome: FetchOutcome) -> None:
    if isinstance(outcome, MaintenanceAssessment):
        print(" ok")
    else:
        print(" failed")
        print(f"         {outcome.message}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Validate arguments
    if not math.isfinite(args.delay) or args.delay < MIN_REQUEST_DELAY:
        parser.error(f"--delay must be a number of at least {MIN_REQUEST_DELAY}")
    if not math.isfinite(args.timeout) or args.timeout <= 0:
        parser.error("--timeout must be a positive number")
    exports = [fmt for fmt in ("json", "csv", "xlsx") if getattr(args, fmt)]
    if exports and args.output_dir is None:
        parser.error("--json, --csv and --xlsx require --output-dir")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    manifest_path = args.manifest_path or default_manifest_path()
    settings = AuditSettings(
        registry_url=args.registry_url,
        request_delay=args.delay,
        timeout=args.timeout,
        no_deps=args.no_deps,
    )
    reader = CargoMetadataReader(timeout=settings.cargo_timeout, no_deps=settings.no_deps)

    with CratesIoClient(settings) as client:
        auditor = MaintenanceAuditor(
            reader, client, on_fetch_start=_print_fetch_start, progress=_print_progress
        )
        try:
            names = auditor.collect_names(manifest_path)
        except ManifestError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

        if not names:
            print("No dependencies found.")
            return 0

        print(f"Found {len(names)} unique dependency crates")
        print("Fetching maintenance data...\n")
        report = auditor.audit_names(names)

    print("\nMaintenance Health Report (Riskiest First)")
    print(format_report_table(report))
    print()
    print(format_summary(report))

    if exports:
        stem = Path(manifest_path).resolve().parent.name or "project"
        writers = {
            "json": save_report_json,
            "csv": export_report_csv,
            "xlsx": export_report_worksheet,
        }
        for fmt in exports:
            path = writers[fmt](report, args.output_dir, stem)
            print(f"Report saved to: {path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
