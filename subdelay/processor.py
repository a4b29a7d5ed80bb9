"""File-level subtitle shifting: dispatch by extension, read, rewrite, report."""

import logging
import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .ass import shift_ass
from .srt import shift_srt
from .timing import ShiftResult

try:
    from rich.progress import (
        BarColumn,
        Progress,
        SpinnerColumn,
        TaskProgressColumn,
        TextColumn,
        TimeRemainingColumn,
    )
    HAS_RICH = True
except ImportError:
    HAS_RICH = False


Transformer = Callable[[str, int], ShiftResult]

# File suffix (lower-case) → whole-text transformer.
TRANSFORMERS: Dict[str, Transformer] = {
    ".srt": shift_srt,
    ".ass": shift_ass,
}

BACKUP_SUFFIX = ".bak"


class SubdelayError(Exception):
    """Base class for errors raised while shifting subtitle files."""


class UnsupportedFormatError(SubdelayError):
    """The file extension does not map to a known subtitle dialect."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.extension = path.suffix.lower()
        supported = ", ".join(sorted(TRANSFORMERS))
        super().__init__(
            f"Unsupported file format '{self.extension}'. Only {supported} files are supported."
        )


class ProcessingError(SubdelayError):
    """Reading or writing a subtitle file failed."""

    def __init__(self, path: Path, cause: Exception) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to process {path}: {cause}")


def get_transformer(path: Path) -> Transformer:
    """Return the transformer for *path*'s extension."""
    try:
        return TRANSFORMERS[path.suffix.lower()]
    except KeyError:
        raise UnsupportedFormatError(path) from None


def _read_text(path: Path, encoding: str) -> str:
    # newline="" keeps CRLF/CR line endings exactly as stored.
    with open(path, encoding=encoding, newline="") as fh:
        return fh.read()


def _write_text_atomic(path: Path, text: str, encoding: str) -> None:
    """Write *text* to a temporary sibling of *path*, then replace *path*.

    Symlinks are followed so the file they point to is rewritten, and an
    existing file keeps its permission bits.
    """
    target = path.resolve()
    fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as fh:
            fh.write(text)
        if target.exists():
            shutil.copymode(target, tmp_path)
        tmp_path.replace(target)
    finally:
        if tmp_path.exists():
            try:
                tmp_path.unlink()
            except OSError:
                pass


def shift_file(
    path: Path,
    offset_ms: int,
    output: Optional[Path] = None,
    encoding: str = "utf-8",
    backup: bool = False,
    dry_run: bool = False,
) -> ShiftResult:
    """Shift every timestamp in the subtitle file at *path* by *offset_ms*.

    The file is read whole, transformed in memory and written whole, so a
    failure never leaves a half-shifted file behind.

    Args:
        path:      Subtitle file (``.srt`` or ``.ass``).
        offset_ms: Signed offset in milliseconds.
        output:    Write here instead of overwriting *path*.
        encoding:  Text encoding used for both reading and writing.
        backup:    Copy the original to ``<path>.bak`` before an in-place write.
        dry_run:   Compute the result but write nothing.

    Raises:
        UnsupportedFormatError: for extensions other than ``.srt``/``.ass``.
        ProcessingError: when the file cannot be read, decoded or written.
    """
    transformer = get_transformer(path)
    target = output or path

    try:
        text = _read_text(path, encoding)
    except (OSError, UnicodeError, LookupError) as exc:
        raise ProcessingError(path, exc) from exc

    result = transformer(text, offset_ms)
    logging.debug(
        f"{path}: {result.shifted} timestamp(s) shifted, {len(result.warnings)} warning(s)"
    )

    if dry_run:
        return result

    try:
        if backup and output is None:
            shutil.copy2(path, path.with_name(path.name + BACKUP_SUFFIX))
        _write_text_atomic(target, result.text, encoding)
    except (OSError, UnicodeError, LookupError) as exc:
        raise ProcessingError(target, exc) from exc

    return result


class SubtitleShifter:
    """Apply one offset to a batch of subtitle files and keep statistics."""

    def __init__(
        self,
        offset_ms: int,
        encoding: str = "utf-8",
        backup: bool = False,
        dry_run: bool = False,
        log_file: Optional[Path] = None,
    ) -> None:
        self.offset_ms = offset_ms
        self.encoding = encoding
        self.backup = backup
        self.dry_run = dry_run

        self.stats: Dict[str, int] = {
            "processed": 0,
            "shifted": 0,
            "skipped": 0,
            "errors": 0,
        }
        self.shift_log: List[Dict] = []

        self.start_time: Optional[datetime] = None
        self.end_time: Optional[datetime] = None

        # Rich progress bar is disabled when logging to file (output clash).
        self.use_rich: bool = HAS_RICH and not log_file
        self.progress_bar: Optional[Progress] = None
        self.progress_task: Optional[object] = None

    # ------------------------------------------------------------------
    # Progress bar
    # ------------------------------------------------------------------

    def _init_progress_bar(self, total: int) -> None:
        """Initialise the rich progress bar if available."""
        if not self.use_rich:
            return
        try:
            self.progress_bar = Progress(
                SpinnerColumn(),
                TextColumn("[bold blue]{task.description}"),
                BarColumn(),
                TaskProgressColumn(),
                TextColumn("•"),
                TimeRemainingColumn(),
            )
            self.progress_task = self.progress_bar.add_task("Shifting subtitles", total=total)
        except Exception as exc:
            logging.debug(f"Failed to initialise progress bar: {exc}")
            self.use_rich = False

    def _advance_progress(self) -> None:
        if self.use_rich and self.progress_bar and self.progress_task is not None:
            self.progress_bar.advance(self.progress_task)

    # ------------------------------------------------------------------
    # Processing
    # ------------------------------------------------------------------

    def process_file(self, path: Path, output: Optional[Path] = None) -> Dict:
        """Shift one file; return a result dict for the shift log."""
        entry: Dict = {
            "file": str(path),
            "output": str(output) if output else None,
            "status": "shifted",
            "shifted": 0,
            "warnings": [],
        }

        try:
            result = shift_file(
                path,
                self.offset_ms,
                output=output,
                encoding=self.encoding,
                backup=self.backup,
                dry_run=self.dry_run,
            )
        except UnsupportedFormatError as exc:
            logging.error(f"Error: {exc}")
            self.stats["skipped"] += 1
            entry["status"] = "unsupported"
            entry["error"] = str(exc)
            return entry
        except ProcessingError as exc:
            logging.error(f"Error processing file: {exc}")
            self.stats["errors"] += 1
            entry["status"] = "error"
            entry["error"] = str(exc)
            return entry

        self.stats["processed"] += 1
        self.stats["shifted"] += result.shifted
        entry["shifted"] = result.shifted
        entry["warnings"] = result.warnings

        if self.dry_run:
            entry["status"] = "dry_run"
            logging.debug(
                f"[DRY-RUN] Would shift {result.shifted} timestamp(s) in '{path}' "
                f"by {self.offset_ms} ms"
            )
        else:
            logging.debug(f"Shifted {result.shifted} timestamp(s) in '{path}'")
        return entry

    def process_files(self, paths: List[Path], output: Optional[Path] = None) -> None:
        """Shift every file in *paths*; *output* only applies to a single file."""
        if output is not None and len(paths) != 1:
            raise ValueError("output can only be used with a single input file")

        self.start_time = datetime.now()
        if self.dry_run:
            logging.info("[DRY-RUN MODE] No files will be modified\n")

        self._init_progress_bar(len(paths))

        if self.use_rich and self.progress_bar:
            with self.progress_bar:
                self._process_sequential(paths, output)
        else:
            self._process_sequential(paths, output)

        self.end_time = datetime.now()

    def _process_sequential(self, paths: List[Path], output: Optional[Path]) -> None:
        for path in paths:
            self.shift_log.append(self.process_file(path, output))
            self._advance_progress()

    @property
    def failed(self) -> bool:
        """True when at least one file could not be shifted."""
        return bool(self.stats["errors"] or self.stats["skipped"])

    # ------------------------------------------------------------------
    # Summary
    # ------------------------------------------------------------------

    def print_summary(self) -> None:
        """Print a human-readable summary of the batch."""
        warning_count = sum(len(entry.get("warnings", [])) for entry in self.shift_log)

        logging.info("=" * 50)
        logging.info("SUMMARY")
        logging.info("=" * 50)
        logging.info(f"Offset:               {self.offset_ms} ms")
        logging.info(f"Files processed:      {self.stats['processed']}")
        logging.info(f"Timestamps shifted:   {self.stats['shifted']}")
        logging.info(f"Lines left unchanged: {warning_count}")
        logging.info(f"Files skipped:        {self.stats['skipped']}")
        logging.info(f"Errors encountered:   {self.stats['errors']}")

        if self.start_time and self.end_time:
            duration = self.end_time - self.start_time
            logging.info("")
            logging.info(f"Started:              {self.start_time.strftime('%Y-%m-%d %H:%M:%S')}")
            logging.info(f"Finished:             {self.end_time.strftime('%Y-%m-%d %H:%M:%S')}")
            logging.info(f"Duration:             {duration.total_seconds():.2f}s")
