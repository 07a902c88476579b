#!/usr/bin/env python3
"""
dedupscan CLI — Command line interface for duplicate file detection.
Finds files with identical size and content digest, optionally keeping one
canonical copy of each duplicate set plus a list of where the others live.
Never modifies or deletes the scanned files.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import sys
import os
import time
import logging
from typing import List, Optional, NoReturn

LOG_FORMAT = "%(levelname)-8s | %(name)-25s | %(message)s"

# === EARLY DEPENDENCY VALIDATION ===
_MISSING_DEPS = []
try:
    import xxhash
except ImportError:
    _MISSING_DEPS.append("xxhash")

if _MISSING_DEPS:
    print("❌ Missing required dependencies:", file=sys.stderr)
    print(f"   pip install {' '.join(_MISSING_DEPS)}", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from dedupscan.core.errors import DedupScanError
from dedupscan.core.filter import compile_patterns
from dedupscan.core.models import ScanParams, ScanResult, ExtractionOutcome, HashAlgorithmName
from dedupscan.commands import ScanCommand
from dedupscan.services.report_service import ReportService
from dedupscan.utils.convert_utils import ConvertUtils
from dedupscan.aliases import ALGORITHM_ALIASES, ALGORITHM_CHOICES, ALGORITHM_HELP_TEXT, EPILOG_TEXT


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="dedupscan",
            description="dedupscan — find duplicate files by size and content digest",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "--path", "-p",
            default=".",
            type=str,
            help="Directory to scan. Default: current directory"
        )

        # Filtering options
        parser.add_argument(
            "--max-size", "-M",
            default="0",
            type=str,
            metavar='',
            help="Skip files larger than this (e.g., 500MB, 2G). Default: 0 (no limit)"
        )
        parser.add_argument(
            "--maxmb",
            default=None,
            type=int,
            metavar='',
            help="Same as --max-size, in megabytes"
        )
        parser.add_argument(
            "--regex", "-r",
            action="append",
            default=[],
            type=str,
            metavar='',
            dest="regex",
            help="Regular expression matched against file names (repeatable, any match counts)"
        )

        # Scan options
        parser.add_argument(
            "--max-queue-length", "-q",
            default=5,
            type=int,
            metavar='',
            dest="max_queue_length",
            help="Maximum number of files hashed concurrently. Default: 5"
        )
        parser.add_argument(
            "--algorithm", "-a",
            choices=ALGORITHM_CHOICES,
            default="xxhash",
            type=str,
            help=ALGORITHM_HELP_TEXT
        )
        parser.add_argument(
            "--detail",
            default=77,
            type=int,
            metavar='',
            help="Report progress every N files (0 disables). Default: 77"
        )
        parser.add_argument(
            "--precount",
            action="store_true",
            help="Count files before scanning so progress can be shown as a percentage"
        )

        # Outputs
        parser.add_argument(
            "--json",
            default=None,
            type=str,
            metavar='FILE',
            help="Save the scan results in JSON format"
        )
        parser.add_argument(
            "--uniq-files-path", "-u",
            default=None,
            type=str,
            metavar='DIR',
            dest="uniq_files_path",
            help="Directory to save one copy of each set of duplicates,\n"
                 "plus a <name>-dup-list.txt listing the other copies"
        )
        parser.add_argument(
            "--quiet",
            action="store_true",
            help="Suppress the text report"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show progress and detailed statistics"
        )

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        if args.quiet and args.verbose:
            self.error_exit("--quiet and --verbose cannot be used together")

        if not os.path.exists(args.path):
            self.error_exit(f"Directory not found: {args.path}")
        if not os.path.isdir(args.path):
            self.error_exit(f"Path is not a directory: {args.path}")

        if args.max_queue_length < 1:
            self.error_exit("--max-queue-length must be a positive integer")

        if args.detail < 0:
            self.error_exit("--detail cannot be negative")

        if args.maxmb is not None and args.maxmb < 0:
            self.error_exit("--maxmb cannot be negative")

        try:
            ConvertUtils.human_to_bytes(args.max_size)
        except ValueError as e:
            self.error_exit(f"Invalid size format: {e}")

        try:
            compile_patterns(args.regex)
        except ValueError as e:
            self.error_exit(f"Error compiling regex: {e}")

    def create_params(self, args: argparse.Namespace) -> ScanParams:
        """Create ScanParams from CLI arguments."""
        try:
            if args.maxmb is not None:
                max_size_bytes = ConvertUtils.megabytes_to_bytes(args.maxmb)
            else:
                max_size_bytes = ConvertUtils.human_to_bytes(args.max_size)

            algorithm = ALGORITHM_ALIASES.get(args.algorithm, HashAlgorithmName.XXHASH)

            return ScanParams(
                root_dir=args.path,
                max_queue_length=args.max_queue_length,
                max_size_bytes=max_size_bytes,
                patterns=list(args.regex),
                unique_files_path=args.uniq_files_path,
                detail=args.detail,
                precount=args.precount,
                algorithm=algorithm,
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if stage == 'counting':
            print(f"Total number of files to scan: {current}")
            return

        if not self.verbose:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(
                f"\r  [{stage}] {current}/{total} ({percent:.1f}%)"
            )
        else:
            sys.stderr.write(f"\r  [{stage}] {current} files processed...")
        sys.stderr.flush()

    def run_scan(self, params: ScanParams) -> tuple[ScanResult, List[ExtractionOutcome]]:
        """Execute the scan workflow."""
        command = ScanCommand()
        try:
            result, extractions = command.execute(params, progress_callback=self.progress_callback)
        except (DedupScanError, ValueError) as e:
            self.error_exit(str(e))

        if self.verbose:
            sys.stderr.write("\n")
            print(result.stats.print_summary())

        return result, extractions

    def output_results(self, result: ScanResult, extractions: List[ExtractionOutcome]) -> None:
        """Print the plain-text report."""
        if self.quiet:
            return
        for line in ReportService.render_text(result, extractions):
            print(line)

    def write_json(self, result: ScanResult, output_path: str, max_size_bytes: int) -> None:
        try:
            ReportService.write_json(result, output_path, max_size_bytes)
        except RuntimeError as e:
            self.error_exit(str(e))
        if self.verbose:
            print(f"Scan results saved to {output_path}")

    @staticmethod
    def configure_logging(verbose: bool, quiet: bool) -> None:
        if verbose:
            level = logging.INFO
        elif quiet:
            level = logging.ERROR
        else:
            level = logging.WARNING
        logging.basicConfig(level=level, format=LOG_FORMAT, force=True)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv: Optional[List[str]] = None) -> None:
        """Main entry point."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet
        self.configure_logging(self.verbose, self.quiet)

        self.validate_args(args)
        params = self.create_params(args)

        if self.verbose:
            print(f"Scanning directory: {params.root_dir}")
            print(f"Digest: {params.algorithm.display_name}, up to {params.max_queue_length} files at a time")
            if params.max_size_bytes > 0:
                print(f"Size limit: {ConvertUtils.bytes_to_human(params.max_size_bytes)}")

        result, extractions = self.run_scan(params)

        if args.json:
            self.write_json(result, args.json, params.max_size_bytes)

        self.output_results(result, extractions)

        if not self.quiet:
            elapsed = time.time() - self.start_time
            print(f"Total run time: {ConvertUtils.seconds_to_human(elapsed)}")


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)")
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
