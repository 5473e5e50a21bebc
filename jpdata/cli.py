"""Command-line entrypoint: dataset checks, export validation and migration.

Usage:
    python -m jpdata.cli datasets
    python -m jpdata.cli datasets path/to/dataset-root
    python -m jpdata.cli check claude-tests-1736956876332.json
    python -m jpdata.cli check export.json --lenient
    python -m jpdata.cli migrate legacy.json converted.json
"""

import argparse
import json
import logging
import sys
from typing import Optional

from jpdata.config import get_settings
from jpdata.datasets import summarize, validate_all
from jpdata.errors import ExportSchemaError
from jpdata.schema import import_export, validate_export
from jpdata.utils import read_json, setup_logging, write_json

logger = logging.getLogger(__name__)


def run_datasets(root: str) -> int:
    """Validate every dataset under root and print a report.

    Returns:
        0 when there are no errors (warnings allowed), 1 otherwise
    """
    print(f"Validating Japanese learning datasets in {root}\n")
    report = validate_all(root)

    for line in report.passed:
        print(f"PASS  {line}")
    for line in report.errors:
        print(f"ERROR {line}")
    for line in report.warnings:
        print(f"WARN  {line}")

    summary = summarize(report)
    print("\nValidation Summary:")
    print(f"   Errors: {summary['errors']}")
    print(f"   Warnings: {summary['warnings']}")

    if not report.ok:
        print("\nValidation failed")
        return 1
    if report.warnings:
        print("\nValidation passed with warnings")
    else:
        print("\nAll validations passed")
    return 0


def _load_document(path: str):
    try:
        return read_json(path)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Could not read {path}: {e}")
        print(f"ERROR {path}: could not read JSON ({e})")
        return None


def run_check(path: str, strict_references: bool) -> int:
    """Validate one export file and print the outcome."""
    data = _load_document(path)
    if data is None:
        return 1

    result = validate_export(data, strict_references=strict_references)
    for warning in result.warnings:
        print(f"WARN  {path}: {warning}")

    if not result.is_valid:
        print(f"FAIL  {path}: {result.reason}: {result.errors[0]}")
        return 1

    print(f"PASS  {path}: valid export (version {result.version})")
    return 0


def run_migrate(source_path: str, output_path: str, strict_references: bool) -> int:
    """Import an export file of either version and write it in the current format."""
    data = _load_document(source_path)
    if data is None:
        return 1

    try:
        document = import_export(data, strict_references=strict_references)
    except ExportSchemaError as e:
        print(f"FAIL  {source_path}: {e.reason}: {e}")
        return 1

    write_json(document, output_path)
    print(
        f"PASS  {source_path} -> {output_path} "
        f"({len(document['tests'])} tests, {len(document['attempts'])} attempts)"
    )
    return 0


def build_parser(default_root: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate Japanese learning datasets and export documents"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Log level (default: JPDATA_LOG_LEVEL or WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    datasets = subparsers.add_parser("datasets", help="Validate kana, kanji and vocabulary files")
    datasets.add_argument(
        "root",
        nargs="?",
        default=default_root,
        help=f"Dataset root directory (default: {default_root})",
    )

    check = subparsers.add_parser("check", help="Validate an export file")
    check.add_argument("file", help="Export JSON file")
    check.add_argument(
        "--lenient",
        action="store_true",
        help="Report dangling attempt references as warnings instead of errors",
    )

    migrate = subparsers.add_parser("migrate", help="Convert an export file to the current format")
    migrate.add_argument("source", help="Input export JSON file (version 1.0.0 or 1.0)")
    migrate.add_argument("output", help="Output JSON file")
    migrate.add_argument(
        "--lenient",
        action="store_true",
        help="Accept dangling attempt references",
    )

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entrypoint."""
    settings = get_settings()
    args = build_parser(settings.dataset_root).parse_args(argv)

    # Reports go to stdout, logs to stderr
    level = args.log_level or settings.log_level
    setup_logging(level=level, json_format=settings.log_json)

    if args.command == "datasets":
        return run_datasets(args.root)

    strict = settings.strict_references and not args.lenient
    if args.command == "check":
        return run_check(args.file, strict)
    return run_migrate(args.source, args.output, strict)


if __name__ == "__main__":
    sys.exit(main())
