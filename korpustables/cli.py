"""Command-line interface for the corpus table pipeline."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .config import ALL_STAGES, Config
from .errors import KorpusTablesError
from .pipeline import CorpusPipeline
from .validation import validate_outputs


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_stages(value: str) -> list[str]:
    """Parse a comma-separated stage list."""
    stages = [name.strip() for name in value.split(",") if name.strip()]
    unknown = [name for name in stages if name not in ALL_STAGES]
    if unknown:
        raise argparse.ArgumentTypeError(
            f"Unknown stage(s): {', '.join(unknown)} (choose from {', '.join(ALL_STAGES)})"
        )
    return stages


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Build dictionary-encoded tables from a tagged corpus",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Using a config file
  korpustables --config config.yaml

  # Direct arguments, four worker processes
  korpustables --input data/corpus --output data/tables --workers 4

  # Only rebuild the derived tables, reusing existing ones
  korpustables --output data/tables --stages dictionaries,bigrams

  # Check referential integrity of existing tables
  korpustables check --output data/tables
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    run_parser = subparsers.add_parser("run", help="Run pipeline stages")
    setup_run_parser(run_parser)

    check_parser = subparsers.add_parser("check", help="Validate existing tables")
    setup_check_parser(check_parser)

    # If no command specified, treat as run command
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv or argv[0] not in ("run", "check", "-h", "--help"):
        argv.insert(0, "run")

    return parser.parse_args(argv)


def setup_common_arguments(parser: argparse.ArgumentParser) -> None:
    """Arguments shared by every command."""
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Output directory for tables",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )


def setup_run_parser(parser: argparse.ArgumentParser) -> None:
    """Setup arguments for run command."""
    setup_common_arguments(parser)
    parser.add_argument(
        "--input",
        type=Path,
        help="Corpus directory",
    )
    parser.add_argument(
        "--pattern",
        type=str,
        help="Glob pattern for corpus files (default: *)",
    )
    parser.add_argument(
        "--stages",
        type=parse_stages,
        help=f"Comma-separated stages to run (default: {','.join(ALL_STAGES)})",
    )
    parser.add_argument(
        "--workers",
        type=int,
        help="Number of parallel workers (default: 1, use e.g. 8 for multi-core)",
    )
    parser.add_argument(
        "--skip-existing",
        action="store_true",
        help="Skip stages whose output tables already exist",
    )
    parser.add_argument(
        "--work-dir",
        type=Path,
        help="Directory for per-file fragments (default: <output>/.work)",
    )
    parser.add_argument(
        "--keep-work-dir",
        action="store_true",
        help="Keep per-file fragments after the run",
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Check table consistency after the run",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable progress bars",
    )


def setup_check_parser(parser: argparse.ArgumentParser) -> None:
    """Setup arguments for check command."""
    setup_common_arguments(parser)


def build_config(args: argparse.Namespace) -> Config:
    """Build configuration from arguments."""
    # Start with config file if provided
    if getattr(args, "config", None):
        config = Config.from_yaml(args.config)
    else:
        config = Config()

    # Override with command-line arguments
    if getattr(args, "input", None):
        config.input.corpus_dir = args.input
    if getattr(args, "pattern", None):
        config.input.pattern = args.pattern
    if getattr(args, "output", None):
        config.output.output_dir = args.output

    # Processing overrides
    if getattr(args, "stages", None):
        config.processing.stages = args.stages
    if getattr(args, "workers", None) is not None:
        if args.workers < 1:
            raise ValueError("--workers must be at least 1")
        config.processing.workers = args.workers
    if getattr(args, "skip_existing", False):
        config.processing.skip_existing = True
    if getattr(args, "work_dir", None):
        config.processing.work_dir = args.work_dir
    if getattr(args, "keep_work_dir", False):
        config.processing.keep_work_dir = True
    if getattr(args, "validate", False):
        config.processing.validate_tables = True
    if getattr(args, "no_progress", False):
        config.processing.show_progress = False

    return config


def handle_run(args: argparse.Namespace) -> int:
    """Handle run command."""
    try:
        config = build_config(args)
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        pipeline = CorpusPipeline(config)
        results = pipeline.run()
    except KorpusTablesError as e:
        logging.debug("Pipeline failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except FileNotFoundError as e:
        print(f"Error: File not found - {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logging.exception("Pipeline failed")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for result in results.values():
        print(f"{result.stage:<14} {result.status:<10} {result.rows:>10} rows  {result.elapsed:8.2f}s")
    return 0


def handle_check(args: argparse.Namespace) -> int:
    """Handle check command."""
    try:
        config = build_config(args)
        checks = validate_outputs(config)
    except KorpusTablesError as e:
        logging.debug("Validation failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not checks:
        print(f"No tables found in {config.output.output_dir}")
        return 1
    print(f"OK: {', '.join(checks)}")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.verbose if hasattr(args, "verbose") else False)

    if args.command == "check":
        return handle_check(args)
    return handle_run(args)


if __name__ == "__main__":
    sys.exit(main())
