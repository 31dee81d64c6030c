#!/usr/bin/env python3
"""
Operator CLI for the Proof360 E2E suite

The browser scenarios themselves run under pytest (pytest -m e2e). This
script covers the out-of-browser chores around them.

Usage:
    python run.py --check-env                       # Report missing variables
    python run.py --send-alert ub trex              # Seed alerts through the ingestion API
    python run.py --parse-report reports/daily.xlsx # Parse and validate a dispatch report
    python run.py --cleanup-artifacts --days 7      # Prune old failure artifacts
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List

import yaml

from src.shared.settings import load_environment

# Load environment variables from .env (and ENV_FILE overrides)
load_environment()

from src.shared.constants import DIAGNOSTICS
from src.shared.diagnostics import cleanup_artifacts
from src.shared.errors import MissingConfigError, ReportParseError, SeedingError, UnknownAlertTypeError
from src.shared.event_publisher import EventPublisher, validate_api_config
from src.shared.logging_config import setup_logging
from src.shared.report_parser import parse_report
from src.shared.report_validation import validate_dispatch_report
from src.shared.sentry_integration import flush, init_sentry
from src.shared.settings import ADMIN, ENVIRONMENTS_FILE, missing_env


def validate_config_on_startup(config_path: str = str(ENVIRONMENTS_FILE)) -> List[str]:
    """Validate environments.yaml before doing any work.

    Returns:
        List of validation errors (empty if config is valid)
    """
    errors = []

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f)
    except FileNotFoundError:
        return [f"Configuration file not found: {config_path}"]
    except yaml.YAMLError as e:
        return [f"Invalid YAML syntax in config file: {e}"]

    if not config:
        return ["Configuration file is empty"]

    if not isinstance(config, dict):
        return ["Configuration must be a dictionary"]

    environments = config.get('environments')
    if environments is None:
        errors.append("Missing required 'environments' section")
        return errors
    if not isinstance(environments, dict):
        errors.append("'environments' must be a dictionary")
        return errors

    for name, environment in environments.items():
        prefix = f"Environment '{name}'"
        if not isinstance(environment, dict):
            errors.append(f"{prefix}: configuration must be a dictionary")
            continue
        base_url = environment.get('base_url')
        if not base_url:
            errors.append(f"{prefix}: missing required field 'base_url'")
        elif not str(base_url).startswith(('http://', 'https://')):
            errors.append(f"{prefix}: base_url must start with http:// or https://")

    default = config.get('default_environment')
    if default and default not in environments:
        errors.append(f"default_environment '{default}' is not a configured environment")

    return errors


def check_env() -> int:
    """Print missing login and seeding variables; 0 when nothing is missing."""
    missing = missing_env(ADMIN) + validate_api_config()
    if not missing:
        print("Environment OK")
        return 0
    print("Missing environment variables:")
    for name in missing:
        print(f"  - {name}")
    return 1


def send_alerts(alert_types: List[str], skip_missing: bool = False) -> int:
    """Seed alerts and print one line per result."""
    publisher = EventPublisher(skip_missing=skip_missing)
    try:
        results = publisher.send_multiple_alerts(alert_types)
    finally:
        publisher.close()

    for result in results:
        status = "skipped" if result.skipped else result.status
        print(f"{result.alert_type.value}: {status}")
    return 0 if all(r.ok or r.skipped for r in results) else 1


def parse_report_file(path: str) -> int:
    """Parse a downloaded dispatch report and print its validation summary."""
    report = parse_report(path)
    print(f"Report: {Path(path).name}")
    print(f"Columns ({len(report.headers)}): {', '.join(report.headers)}")
    print(f"Rows: {report.row_count}")

    result = validate_dispatch_report(report)
    for warning in result.warnings:
        print(f"  warning: {warning}")
    if result.is_valid:
        print("Validation passed")
        return 0

    print(f"Validation failed with {len(result.errors)} error(s):")
    for error in result.errors:
        print(f"  - {error}")
    return 1


def setup_parser() -> argparse.ArgumentParser:
    """Build the argument parser"""
    parser = argparse.ArgumentParser(
        description='Proof360 E2E suite operator CLI',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    action = parser.add_mutually_exclusive_group(required=True)
    action.add_argument(
        '--check-env',
        action='store_true',
        help='Report login and seeding variables that are not set'
    )
    action.add_argument(
        '--send-alert',
        nargs='+',
        metavar='TYPE',
        help='Seed one or more alerts (trex, trex_private, ub, lpr)'
    )
    action.add_argument(
        '--parse-report',
        metavar='FILE',
        help='Parse and validate a downloaded dispatch report (.xlsx, .xlsm or .csv)'
    )
    action.add_argument(
        '--cleanup-artifacts',
        action='store_true',
        help='Delete failure artifact directories older than --days'
    )

    parser.add_argument(
        '--days',
        type=int,
        default=DIAGNOSTICS.RETENTION_DAYS,
        help=f'Artifact retention in days (default: {DIAGNOSTICS.RETENTION_DAYS})'
    )
    parser.add_argument(
        '--artifacts-dir',
        default=DIAGNOSTICS.ROOT_DIR,
        help=f'Failure artifact root (default: {DIAGNOSTICS.ROOT_DIR})'
    )
    parser.add_argument(
        '--skip-missing',
        action='store_true',
        help='With --send-alert, skip alert types whose endpoint is not configured'
    )
    parser.add_argument(
        '--log-file',
        default='logs/proof360.log',
        help='Log file path (default: logs/proof360.log)'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    return parser


def main():
    """Main entry point"""
    parser = setup_parser()
    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.INFO
    setup_logging(args.log_file)
    logging.getLogger().setLevel(log_level)

    if args.days < 0:
        print("Error: --days must be zero or greater")
        return 1

    config_errors = validate_config_on_startup()
    if config_errors:
        print("Configuration errors found:")
        for error in config_errors:
            print(f"  - {error}")
        return 1

    init_sentry()

    try:
        if args.check_env:
            return check_env()

        if args.send_alert:
            return send_alerts(args.send_alert, skip_missing=args.skip_missing)

        if args.parse_report:
            return parse_report_file(args.parse_report)

        removed = cleanup_artifacts(args.artifacts_dir, older_than_days=args.days)
        print(f"Removed {len(removed)} artifact director{'y' if len(removed) == 1 else 'ies'}")
        return 0

    except KeyboardInterrupt:
        logging.info("Interrupted by user")
        return 130
    except (MissingConfigError, UnknownAlertTypeError, SeedingError, ReportParseError) as e:
        logging.error(str(e))
        print(f"Error: {e}")
        return 1
    except Exception as e:
        logging.error(f"Command failed: {e}")
        return 1
    finally:
        flush()


if __name__ == '__main__':
    sys.exit(main())
