"""
Command-Line Interface for the SICORE converter.

This module provides the command-line interface for converting a
withholdings spreadsheet into a SICORE fixed-width text file.

Usage:
    sicore-convert --input retenciones.xlsx
    sicore-convert --input retenciones.xlsx --output sicore.txt --preview
    sicore-convert --input retenciones.xlsx --column cuit=I --start-number 500
    sicore-convert --input retenciones.xlsx --dry-run --explain
"""

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from sicore_converter import __version__
from sicore_converter.config import Config, create_default_config, merge_configs
from sicore_converter.exceptions import ConfigError
from sicore_converter.logging_config import setup_logging
from sicore_converter.main import ConversionPipeline, PipelineResult
from sicore_converter.record import explain_line
from sicore_converter.writer import DEFAULT_OUTPUT_NAME, DEFAULT_PREVIEW_LINES, preview


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="sicore-convert",
        description="Convert a withholdings Excel workbook into a SICORE fixed-width text file.",
        epilog="For more information, see the project documentation.",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    # Input/Output
    parser.add_argument(
        "-i", "--input",
        type=Path,
        required=True,
        help="Excel workbook to convert (.xlsx)",
        metavar="FILE",
    )

    parser.add_argument(
        "-o", "--output",
        type=Path,
        help=f"Output text file or directory (default: {DEFAULT_OUTPUT_NAME})",
        metavar="FILE",
    )

    parser.add_argument(
        "-c", "--config",
        type=Path,
        help="Configuration file (JSON)",
        metavar="FILE",
    )

    parser.add_argument(
        "--sheet",
        help="Worksheet to read (default: the first one)",
        metavar="NAME",
    )

    # Record options
    parser.add_argument(
        "--start-number",
        type=int,
        help="Certificate number of the first data row (default: 191)",
        metavar="N",
    )

    parser.add_argument(
        "--column",
        action="append",
        help="Override a source column, e.g. cuit=I or neto=5 (can be specified multiple times)",
        metavar="FIELD=COL",
    )

    # Run modes
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=None,
        help="Convert but don't write the output file",
    )

    parser.add_argument(
        "--no-overwrite",
        action="store_true",
        default=None,
        help="Fail instead of replacing an existing output file",
    )

    parser.add_argument(
        "--preview",
        type=int,
        nargs="?",
        const=DEFAULT_PREVIEW_LINES,
        help=f"Print the first N lines of the result (default: {DEFAULT_PREVIEW_LINES})",
        metavar="N",
    )

    parser.add_argument(
        "--explain",
        action="store_true",
        help="Print the first line split into its record positions",
    )

    # Output options
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=None,
        help="Enable verbose output",
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=None,
        help="Suppress normal output",
    )

    parser.add_argument(
        "--encoding",
        help="Output file encoding (default: utf-8)",
    )

    parser.add_argument(
        "--log-file",
        type=Path,
        help="Also write log messages to this file",
        metavar="FILE",
    )

    parser.add_argument(
        "--warnings-file",
        type=Path,
        help="Write the skipped rows, with their certificate numbers, to this file",
        metavar="FILE",
    )

    return parser


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = create_parser()
    return parser.parse_args(args)


def parse_column_overrides(values: List[str]) -> Dict[str, str]:
    """
    Parse FIELD=COL column overrides.

    Raises:
        ConfigError: If an entry is not of the form FIELD=COL
    """
    overrides = {}
    for item in values:
        name, sep, ref = item.partition("=")
        if not sep or not name.strip() or not ref.strip():
            raise ConfigError(f"Invalid column override '{item}' (expected FIELD=COL)")
        overrides[name.strip().lower()] = ref.strip()
    return overrides


# Argument name -> Config attribute, for options copied as given
ARG_TO_SETTING = {
    "input": "input_file",
    "output": "output_file",
    "sheet": "sheet_name",
    "start_number": "start_number",
    "preview": "preview_lines",
    "encoding": "encoding",
    "dry_run": "dry_run",
    "verbose": "verbose",
    "quiet": "quiet",
    "log_file": "log_file",
    "warnings_file": "warnings_file",
}


def explicit_settings(args: argparse.Namespace) -> Dict[str, Any]:
    """Collect the settings actually given on the command line."""
    settings = {}
    for arg, setting in ARG_TO_SETTING.items():
        value = getattr(args, arg)
        if value is not None:
            settings[setting] = value

    if args.column:
        settings["columns"] = parse_column_overrides(args.column)
    if args.no_overwrite:
        settings["overwrite"] = False
    if args.verbose:
        settings["log_level"] = "DEBUG"
    return settings


def args_to_config(args: argparse.Namespace) -> Config:
    """
    Convert parsed arguments to Config object.

    Options given on the command line override the configuration file,
    whatever their value; options left out keep the file's values.
    """
    if args.config:
        if not args.config.is_file():
            raise ConfigError(f"Configuration file does not exist: {args.config}")
        base = Config.load_from_file(args.config)
    else:
        base = create_default_config()

    return merge_configs(base, explicit_settings(args))


def report_result(result: PipelineResult, config: Config, args: argparse.Namespace) -> None:
    """Print the outcome of a successful run."""
    conversion = result.conversion
    if conversion is None:
        return

    if not config.quiet:
        print(f"Read {result.rows_read} rows from {config.input_file}")
        print(f"Converted {conversion.line_count} lines")
        if conversion.skipped_rows:
            print(f"Skipped {len(conversion.skipped_rows)} empty rows")
        if result.warnings:
            print(f"\nWarnings ({len(result.warnings)}):")
            for warning in result.warnings[:10]:  # Limit to first 10
                print(f"  {warning}")
            if len(result.warnings) > 10:
                print(f"  ... and {len(result.warnings) - 10} more")
            if config.warnings_file:
                print(f"  Full list in {config.warnings_file}")
        if result.output_file:
            print(f"\nSaved to {result.output_file}")
        else:
            print("\nDry run: no file written")
        print(f"Completed in {result.processing_time:.2f} seconds")

    if args.explain and conversion.lines:
        print()
        print(explain_line(conversion.lines[0]))

    if args.preview is not None:
        print()
        print(preview(conversion.text, config.preview_lines))


def main(args: Optional[List[str]] = None) -> int:
    """
    Main entry point for CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code
    """
    parsed = parse_args(args)
    try:
        config = args_to_config(parsed)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    errors = config.validate()
    if errors:
        for error in errors:
            print(f"Configuration error: {error}", file=sys.stderr)
        return 1

    setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        verbose=config.verbose,
    )

    if not config.quiet:
        print(f"SICORE Converter v{__version__}")
        print(f"Input: {config.input_file}")
        print()

    def on_progress(percentage: int, message: str) -> None:
        if config.verbose:
            print(f"[{percentage:3d}%] {message}")

    pipeline = ConversionPipeline(config)
    result = pipeline.run(on_progress=on_progress)

    if not result.success:
        for error in result.errors:
            print(f"Error: {error}", file=sys.stderr)
        return 1

    report_result(result, config, parsed)
    return 0


if __name__ == "__main__":
    sys.exit(main())
