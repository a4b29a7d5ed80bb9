"""SubRip (.srt) timestamp shifting.

SRT cues carry their timing on a single line::

    00:00:10,500 --> 00:00:12,000

Every such range in the text is rewritten in one pass; everything else
(cue numbers, text, blank lines, a leading BOM) is left exactly as it was.
"""

import re

from .timing import MS_PER_HOUR, MS_PER_MINUTE, MS_PER_SECOND, ShiftResult, shift_ms, split_ms

TIME_RANGE_RE = re.compile(
    r"(\d{2}):(\d{2}):(\d{2}),(\d{3}) --> (\d{2}):(\d{2}):(\d{2}),(\d{3})",
    re.ASCII,
)


def parse_srt_time(hours: str, minutes: str, seconds: str, millis: str) -> int:
    """Convert the captured digit groups of one timestamp to milliseconds."""
    return (
        int(hours) * MS_PER_HOUR
        + int(minutes) * MS_PER_MINUTE
        + int(seconds) * MS_PER_SECOND
        + int(millis)
    )


def format_srt_time(ms: int) -> str:
    """Render *ms* as ``HH:MM:SS,mmm``; negative values render as zero."""
    hours, minutes, seconds, millis = split_ms(max(0, ms))
    return f"{hours:02d}:{minutes:02d}:{seconds:02d},{millis:03d}"


def shift_srt(text: str, offset_ms: int) -> ShiftResult:
    """Shift every ``start --> end`` range in *text* by *offset_ms*.

    Start and end are clamped independently, so a large negative offset can
    collapse a cue to ``00:00:00,000 --> 00:00:00,000``.  Text without any
    range comes back unchanged with ``shifted == 0``.
    """
    count = 0

    def _replace(match: "re.Match[str]") -> str:
        nonlocal count
        count += 1
        start = shift_ms(parse_srt_time(*match.group(1, 2, 3, 4)), offset_ms)
        end = shift_ms(parse_srt_time(*match.group(5, 6, 7, 8)), offset_ms)
        return f"{format_srt_time(start)} --> {format_srt_time(end)}"

    shifted_text = TIME_RANGE_RE.sub(_replace, text)
    return ShiftResult(text=shifted_text, shifted=count)


def shift_srt_text(text: str, offset_ms: int) -> str:
    return shift_srt(text, offset_ms).text
