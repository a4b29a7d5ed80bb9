"""Advanced SubStation (.ass) timestamp shifting.

Only ``Dialogue:`` event lines carry timing.  Their fields are::

    Dialogue: Layer,Start,End,Style,Name,MarginL,MarginR,MarginV,Effect,Text

Start and end sit at fixed positions 1 and 2, ahead of the free-form Text
field, which may itself contain commas.  The line is therefore split on every
comma and rejoined after replacing those two fields; a generic CSV parser
would not round-trip the text field.  A comma inside an earlier field (never
produced by real ASS writers) would shift the positions and is not handled.
"""

import logging
import re
from typing import Iterable, List, NamedTuple, Optional

from .timing import MS_PER_HOUR, MS_PER_MINUTE, MS_PER_SECOND, ShiftResult, shift_ms, split_ms

logger = logging.getLogger(__name__)

DIALOGUE_MARKER = "Dialogue:"

# Marker field, start, end, and at least one field after them.
MIN_DIALOGUE_FIELDS = 4

START_FIELD = 1
END_FIELD = 2

ASS_TIME_RE = re.compile(r"(\d+):(\d{2}):(\d{2})\.(\d{2})", re.ASCII)


class LineResult(NamedTuple):
    """Outcome of shifting one line of an ASS file."""

    text: str
    shifted: bool = False
    warning: Optional[str] = None


def parse_ass_time(text: str) -> int:
    """Convert ``H:MM:SS.cc`` to milliseconds.

    Raises:
        ValueError: when the text does not have exactly the ``h:m:s.cc``
            shape with ASCII digits (two each for minutes, seconds and
            centiseconds).
    """
    match = ASS_TIME_RE.fullmatch(text)
    if match is None:
        raise ValueError(f"not an ASS timestamp: {text!r}")
    hours, minutes, seconds, centis = match.groups()
    return (
        int(hours) * MS_PER_HOUR
        + int(minutes) * MS_PER_MINUTE
        + int(seconds) * MS_PER_SECOND
        + int(centis) * 10
    )


def format_ass_time(ms: int) -> str:
    """Render *ms* as ``H:MM:SS.cc``; sub-centisecond remainders are truncated."""
    hours, minutes, seconds, millis = split_ms(max(0, ms))
    return f"{hours}:{minutes:02d}:{seconds:02d}.{millis // 10:02d}"


def shift_dialogue_line(line: str, offset_ms: int) -> LineResult:
    """Shift the start/end fields of *line* if it is a dialogue record.

    Non-dialogue lines come back untouched.  Dialogue lines that cannot be
    parsed come back untouched together with a warning message.
    """
    if not line.startswith(DIALOGUE_MARKER):
        return LineResult(line)

    fields = line.split(",")
    if len(fields) < MIN_DIALOGUE_FIELDS:
        return LineResult(line, warning=f"Could not process line (too few fields): {line}")

    try:
        start = shift_ms(parse_ass_time(fields[START_FIELD]), offset_ms)
        end = shift_ms(parse_ass_time(fields[END_FIELD]), offset_ms)
    except ValueError:
        return LineResult(line, warning=f"Could not process line: {line}")

    fields[START_FIELD] = format_ass_time(start)
    fields[END_FIELD] = format_ass_time(end)
    return LineResult(",".join(fields), shifted=True)


def shift_ass_lines(lines: Iterable[str], offset_ms: int) -> List[LineResult]:
    """Shift every line in *lines*, keeping order and count."""
    return [shift_dialogue_line(line, offset_ms) for line in lines]


def shift_ass(text: str, offset_ms: int) -> ShiftResult:
    """Shift all dialogue timestamps in *text* by *offset_ms*.

    Lines are split on ``\\n`` only, so CRLF files keep their ``\\r``.  Each
    malformed dialogue record is logged and kept as-is; it never aborts the
    rest of the file.
    """
    results = shift_ass_lines(text.split("\n"), offset_ms)

    warnings: List[str] = []
    for result in results:
        if result.warning:
            logger.warning("Warning: %s", result.warning)
            warnings.append(result.warning)

    return ShiftResult(
        text="\n".join(result.text for result in results),
        shifted=sum(1 for result in results if result.shifted),
        warnings=warnings,
    )


def shift_ass_text(text: str, offset_ms: int) -> str:
    return shift_ass(text, offset_ms).text
