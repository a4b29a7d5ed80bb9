"""Shared utility helpers."""

import argparse
import re

_OFFSET_RE = re.compile(r"[+-]?[0-9]+")


def signed_ms(value: str) -> int:
    """argparse type validator: signed integer number of milliseconds."""
    if not _OFFSET_RE.fullmatch(value.strip()):
        raise argparse.ArgumentTypeError(
            f"delay must be a number in milliseconds, got '{value}'"
        )
    return int(value)
