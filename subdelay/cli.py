"""Command-line interface for subdelay.

Usage
-----
::

    subdelay movie.srt 2000                 # subtitles 2 s later, in place
    subdelay movie.ass -1500                # subtitles 1.5 s earlier
    subdelay movie.srt 500 --output fixed.srt
    subdelay season/*.srt 250 --backup --dry-run
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import load_config
from .processor import TRANSFORMERS, SubtitleShifter
from .utils import signed_ms


# ------------------------------------------------------------------
# Logging setup (single, authoritative call)
# ------------------------------------------------------------------

def setup_logging(verbosity: int = 0, log_file: Optional[Path] = None) -> None:
    """Configure the root logger.

    Args:
        verbosity: -1 = WARNING only, 0 = INFO (default), 1 = DEBUG.
        log_file:  Optional path; when given, output goes to both file and stderr.
    """
    level = {-1: logging.WARNING, 0: logging.INFO, 1: logging.DEBUG}.get(
        verbosity, logging.INFO
    )

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    fmt = "%(asctime)s - %(levelname)s - %(message)s" if log_file else "%(message)s"
    formatter = logging.Formatter(fmt)

    if log_file:
        fh = logging.FileHandler(log_file)
        fh.setFormatter(formatter)
        root.addHandler(fh)

    ch = logging.StreamHandler()
    ch.setFormatter(formatter)
    root.addHandler(ch)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="subdelay",
        description=(
            "Shift every timestamp in SRT or ASS subtitle files.\n\n"
            "A positive delay makes subtitles appear later, a negative delay\n"
            "earlier. Times that would become negative are clamped to zero."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Config file: create ~/.subdelay.yaml with default settings.",
    )
    parser.add_argument("files", metavar="FILE", type=Path, nargs="+",
                        help="Subtitle file(s) to shift (.srt, .ass)")
    parser.add_argument("delay", metavar="DELAY_MS", type=signed_ms,
                        help="Signed offset in milliseconds")

    parser.add_argument("--output", "-o", metavar="PATH", type=Path,
                        help="Write the shifted subtitle here instead of in place "
                             "(single FILE only)")
    parser.add_argument("--encoding", metavar="NAME",
                        help="Text encoding of the subtitle files (default: utf-8)")
    parser.add_argument("--backup", action="store_true",
                        help="Keep a copy of each original as FILE.bak")
    parser.add_argument("--dry-run", action="store_true",
                        help="Report what would change without writing files")
    parser.add_argument("--log-file", type=Path,
                        help="Save log output to a file (in addition to stderr)")

    verbosity_group = parser.add_mutually_exclusive_group()
    verbosity_group.add_argument("-v", "--verbose", action="store_true",
                                 help="Enable debug-level output")
    verbosity_group.add_argument("-q", "--quiet", action="store_true",
                                 help="Suppress informational messages (warnings and errors only)")
    return parser


# ------------------------------------------------------------------
# Entry point
# ------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> None:
    """Parse arguments, validate inputs, and shift the subtitle files."""
    parser = build_parser()
    args = parser.parse_args(argv)

    verbosity = 1 if args.verbose else (-1 if args.quiet else 0)
    setup_logging(verbosity=verbosity, log_file=args.log_file)

    # --- pre-flight checks ---------------------------------------------------

    if args.output and len(args.files) > 1:
        print("Error: --output can only be used with a single FILE", file=sys.stderr)
        sys.exit(1)

    missing = [path for path in args.files if not path.exists()]
    if missing:
        for path in missing:
            print(f"Error: file '{path}' not found", file=sys.stderr)
        sys.exit(1)

    unsupported = [path for path in args.files if path.suffix.lower() not in TRANSFORMERS]
    if unsupported:
        for path in unsupported:
            print(
                f"Error: Unsupported file format '{path.suffix.lower()}' ({path}). "
                f"Only .srt and .ass files are supported.",
                file=sys.stderr,
            )
        sys.exit(1)

    # --- merge config --------------------------------------------------------

    config = load_config()
    encoding = args.encoding or config.get("encoding", "utf-8")
    backup = args.backup or config.get("backup", False)
    dry_run = args.dry_run or config.get("dry_run", False)

    # --- shift ---------------------------------------------------------------

    shifter = SubtitleShifter(
        offset_ms=args.delay,
        encoding=encoding,
        backup=backup,
        dry_run=dry_run,
        log_file=args.log_file,
    )
    shifter.process_files(args.files, output=args.output)

    for entry in shifter.shift_log:
        if entry["status"] == "shifted":
            location = f" -> {entry['output']}" if entry["output"] else ""
            print(
                f"Successfully shifted subtitles in '{entry['file']}' "
                f"by {args.delay} ms{location}"
            )
        elif entry["status"] == "dry_run":
            print(
                f"[DRY-RUN] Would shift {entry['shifted']} timestamp(s) in "
                f"'{entry['file']}' by {args.delay} ms"
            )

    if len(args.files) > 1:
        logging.info("")
        shifter.print_summary()

    sys.exit(1 if shifter.failed else 0)


if __name__ == "__main__":
    main()
