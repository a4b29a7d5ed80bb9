"""Time arithmetic shared by both subtitle dialects."""

from dataclasses import dataclass, field
from typing import List, Tuple

MS_PER_HOUR = 3_600_000
MS_PER_MINUTE = 60_000
MS_PER_SECOND = 1_000


def shift_ms(ms: int, offset_ms: int) -> int:
    """Add *offset_ms* to *ms*, clamping negative results to zero."""
    return max(0, ms + offset_ms)


def split_ms(ms: int) -> Tuple[int, int, int, int]:
    """Return ``(hours, minutes, seconds, millis)`` for a non-negative *ms*."""
    hours, rem = divmod(ms, MS_PER_HOUR)
    minutes, rem = divmod(rem, MS_PER_MINUTE)
    seconds, millis = divmod(rem, MS_PER_SECOND)
    return hours, minutes, seconds, millis


@dataclass
class ShiftResult:
    """Outcome of shifting one whole subtitle text.

    ``shifted`` counts the timestamp ranges (SRT) or dialogue records (ASS)
    that were rewritten.  ``warnings`` holds one message per record that was
    left unchanged because it could not be parsed.
    """

    text: str
    shifted: int = 0
    warnings: List[str] = field(default_factory=list)
