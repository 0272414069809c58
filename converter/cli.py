import argparse
import logging
import sys

from converter import __version__
from converter.config import load_config
from converter.errors import ConfigurationError, ConversionError
from converter.input_file import SEPARATORS, get_file_data, is_valid_file
from converter.pipeline import run_conversion

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="convert",
        description="convert is a CLI tool to convert different data formats to the desired and supported formats",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    subparsers = parser.add_subparsers(dest="command")

    csv_parser = subparsers.add_parser(
        "csv",
        aliases=["CSV"],
        help="convert CSV file",
        description="Convert a CSV file into a JSON array written next to it.",
    )
    csv_parser.add_argument(
        "filepath", nargs="?", default=None, help="Path to the input CSV file."
    )
    csv_parser.add_argument(
        "--pretty",
        "-p",
        action="store_true",
        default=None,
        help="Make the JSON pretty (indented, one key per line).",
    )
    csv_parser.add_argument(
        "--separator",
        "-s",
        type=str,
        default=None,
        help=f"Field separator of the CSV file: {' or '.join(SEPARATORS)} (default: comma)",
    )
    csv_parser.add_argument(
        "--indent",
        type=int,
        default=None,
        help="Indent width used in pretty mode (default: 3)",
    )
    csv_parser.add_argument(
        "--progress",
        action="store_true",
        help="Show a progress bar with the number of converted rows.",
    )
    csv_parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to a JSON config file with default options.",
    )
    csv_parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging."
    )
    return parser


def run_csv(args) -> int:
    """Run the csv sub-command. Returns the process exit status."""
    try:
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.INFO,
            format="%(asctime)s - %(levelname)s - %(message)s",
        )

        config = load_config(args.config)
        if not args.verbose:
            logging.getLogger().setLevel(config["log_level"])

        separator = args.separator if args.separator is not None else config["separator"]
        pretty = args.pretty if args.pretty is not None else config["pretty"]
        indent = args.indent if args.indent is not None else config["indent"]
        if indent < 0:
            raise ConfigurationError(f"indent must be a non-negative integer, got {indent}")

        input_file = get_file_data(args.filepath, pretty, separator)
        is_valid_file(input_file.filepath)

        stats = run_conversion(
            input_file,
            indent=indent,
            encoding=config["encoding"],
            progress=args.progress,
            progress_interval=config["progress_interval"],
        )
    except ConversionError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        logger.warning("Processing interrupted by user")
        return 130

    logger.info("=" * 60)
    logger.info(f"Rows read: {stats.rows_read}")
    logger.info(f"Rows written: {stats.rows_written}")
    logger.info(f"Rows skipped: {stats.rows_skipped}")
    logger.info(f"Output: {stats.output_path}")
    logger.info("=" * 60)
    return 0


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return run_csv(args)


if __name__ == "__main__":
    sys.exit(main())
