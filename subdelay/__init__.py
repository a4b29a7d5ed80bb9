"""subdelay: shift every timestamp in an SRT or ASS subtitle file."""

from .ass import shift_ass, shift_ass_text
from .processor import (
    ProcessingError,
    SubdelayError,
    SubtitleShifter,
    UnsupportedFormatError,
    shift_file,
)
from .srt import shift_srt, shift_srt_text
from .timing import ShiftResult, shift_ms

__version__ = "1.0.0"
__all__ = [
    "ShiftResult",
    "ProcessingError",
    "SubdelayError",
    "SubtitleShifter",
    "UnsupportedFormatError",
    "shift_ass",
    "shift_ass_text",
    "shift_file",
    "shift_ms",
    "shift_srt",
    "shift_srt_text",
]
