from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import find_dotenv, load_dotenv

from scprov.adapters.price_file import CsvServiceCodeSource, DataSourceError
from scprov.app import provision_service_codes
from scprov.config import ConfigurationError, configure_logging, get_provisioning_config

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from scprov.config import ProvisioningConfig

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Provision service codes from a price file")
    subparsers = parser.add_subparsers(dest="command", required=True)

    provision = subparsers.add_parser(
        "provision",
        help="Create parts, line items and service codes, then price them",
    )
    provision.add_argument("file", type=Path, help="CSV file with 'number' and 'cost' columns")
    provision.add_argument(
        "--provider",
        type=str,
        help="Service provider name (defaults to SCPROV_PROVIDER or Asurion)",
    )
    provision.add_argument(
        "--service-code-type",
        type=str,
        help="Service code type name (defaults to SCPROV_SERVICE_CODE_TYPE or Payroll)",
    )
    provision.add_argument(
        "--kind",
        type=str,
        help="Part/line item type for rows without a 'type' column value",
    )
    provision.add_argument(
        "--pay-grade-type",
        type=str,
        help="Pay grade type whose latest version is extended (defaults to --kind)",
    )
    provision.add_argument(
        "--verbose-names",
        action="store_true",
        help="Decorate created names with their entity kind",
    )
    provision.add_argument(
        "--debug",
        action="store_true",
        help="Trace every lookup and creation at DEBUG level",
    )
    provision.add_argument(
        "--no-pricing",
        action="store_true",
        help="Skip creating a new pay grade version",
    )
    provision.add_argument(
        "--stop-on-error",
        action="store_true",
        help="Abort on the first record that cannot be created",
    )
    provision.add_argument(
        "--rehearse",
        action="store_true",
        help="Roll every created row back once the run finishes",
    )
    provision.add_argument(
        "--rollback-on-error",
        action="store_true",
        help="Roll the run back if any record failed",
    )

    return parser.parse_args(list(argv))


def _build_config(args: argparse.Namespace) -> ProvisioningConfig:
    base = get_provisioning_config()
    return base.with_overrides(
        provider_name=args.provider,
        service_code_type=args.service_code_type,
        default_kind=args.kind,
        pay_grade_type=args.pay_grade_type,
        verbose_names=True if args.verbose_names else None,
        debug=True if args.debug else None,
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        config = _build_config(parsed_args)
        if config.debug:
            configure_logging(level=logging.DEBUG, force=True)
        records = CsvServiceCodeSource(parsed_args.file).records()
    except (DataSourceError, ConfigurationError, ValueError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        summary = provision_service_codes(
            records,
            config=config,
            price=not parsed_args.no_pricing,
            stop_on_error=parsed_args.stop_on_error,
            rehearse=parsed_args.rehearse,
            rollback_on_error=parsed_args.rollback_on_error,
        )
    except Exception:
        log.exception("Fatal error during provisioning")
        sys.exit(1)

    log.info(
        "Provisioning finished: processed=%s, failed=%s, created=%s, version=%s",
        summary.processed,
        summary.failed,
        summary.created,
        summary.effective_date,
    )
    if summary.rolled_back is not None:
        log.info(
            "Rolled back %s rows (%s failures)", summary.rolled_back, summary.rollback_failures
        )
    if summary.failed:
        log.warning("%s records could not be provisioned", summary.failed)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run(argv: Sequence[str] | None = None) -> None:
    """Console-script entry point: read `.env` from the working directory, then run."""
    load_dotenv(find_dotenv(usecwd=True))
    signal(SIGINT, sigint_handler)
    main(argv)


if __name__ == "__main__":
    run()
