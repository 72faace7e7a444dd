"""
Pace Index Calculator - Time Normalizer
Spreadsheet time cells and user input to canonical seconds
"""
import logging
import math
import re
from typing import Optional, Union

import pandas as pd

from ..config import CENTISECOND_THRESHOLD, SECONDS_PER_DAY

logger = logging.getLogger(__name__)

MS_CS = "ms_cs"
HMS = "hms"
GRAMMARS = (MS_CS, HMS)

_TIME_INPUT_PATTERN = re.compile(r"^\d+:\d+(:\d+)?$")


def _clean(raw) -> Optional[str]:
    if raw is None:
        return None
    if not isinstance(raw, str) and pd.isna(raw):
        return None
    text = str(raw).strip().replace("：", ":")
    return text or None


def normalize_time(raw: Union[str, float, int, None], grammar: str = MS_CS,
                   rescale: bool = False) -> Optional[float]:
    """Convert a raw cell value to seconds (unrounded)

    The same text means different things in different columns ("18:05" is
    mm:ss in a split column but could be h:mm elsewhere), so the caller picks
    the grammar for the column being read.

    Args:
        raw: cell value (string, number, None or NaN)
        grammar: "ms_cs" for mm:ss / mm:ss:cc, "hms" for h:mm:ss / mm:ss
        rescale: apply the centisecond post-pass for short split/pace fields

    Returns:
        seconds as float, or None when the value is absent or malformed
    """
    if grammar not in GRAMMARS:
        raise ValueError(f"unknown time grammar: {grammar!r}")

    text = _clean(raw)
    if text is None:
        return None

    if ":" in text:
        try:
            nums = [float(part.strip()) for part in text.split(":")]
        except ValueError:
            logger.debug("Malformed time value %r", raw)
            return None

        if len(nums) == 2:
            seconds = nums[0] * 60 + nums[1]
        elif len(nums) == 3 and grammar == HMS:
            seconds = nums[0] * 3600 + nums[1] * 60 + nums[2]
        elif len(nums) == 3:
            seconds = nums[0] * 60 + nums[1] + nums[2] / 100
        else:
            logger.debug("Unexpected part count in time value %r", raw)
            return None
    else:
        try:
            value = float(text)
        except ValueError:
            logger.debug("Malformed time value %r", raw)
            return None

        if not math.isfinite(value) or value < 0:
            logger.debug("Out of range time value %r", raw)
            return None

        if 0 < value < 1:
            # Excel day fraction
            seconds = value * SECONDS_PER_DAY
        else:
            # decimal minutes
            seconds = value * 60

    if not math.isfinite(seconds) or seconds < 0:
        logger.debug("Out of range time value %r", raw)
        return None

    if rescale and seconds > CENTISECOND_THRESHOLD:
        seconds = seconds / 100

    return seconds


def whole(seconds: Optional[float]) -> Optional[int]:
    """Round to the nearest whole second (halves round up)"""
    if seconds is None:
        return None
    return int(math.floor(seconds + 0.5))


def parse_ms_cs(raw, rescale: bool = False) -> Optional[int]:
    """mm:ss / mm:ss:cc cell to whole seconds"""
    return whole(normalize_time(raw, MS_CS, rescale))


def parse_hms(raw, rescale: bool = False) -> Optional[int]:
    """h:mm:ss cell to whole seconds"""
    return whole(normalize_time(raw, HMS, rescale))


def parse_time_input(time_str: Optional[str]) -> Optional[int]:
    """Parse a user-entered race time

    Only "mm:ss" or "h:mm:ss" with digits in every field is accepted.

    Args:
        time_str: time string (e.g. "16:45", "1:25:30")

    Returns:
        seconds, or None when the text is not a valid time
    """
    text = _clean(time_str)
    if text is None:
        return None
    if not _TIME_INPUT_PATTERN.match(text):
        return None

    parts = [int(p) for p in text.split(":")]
    if len(parts) == 3:
        return parts[0] * 3600 + parts[1] * 60 + parts[2]
    return parts[0] * 60 + parts[1]


def parse_pace_index_input(text: Optional[str]) -> Optional[float]:
    """Parse a user-entered pace index; None when not a finite number"""
    cleaned = _clean(text)
    if cleaned is None:
        return None
    try:
        value = float(cleaned)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def seconds_to_time(seconds: Optional[float], include_hours: bool = False) -> str:
    """Format seconds as m:ss or h:mm:ss

    Args:
        seconds: seconds
        include_hours: always include the hour field

    Returns:
        time string (e.g. "1:05:53" or "5:30")
    """
    if seconds is None:
        return "N/A"

    total = max(0, whole(seconds))
    hours = total // 3600
    minutes = (total % 3600) // 60
    secs = total % 60

    if include_hours or hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    else:
        return f"{minutes}:{secs:02d}"


def format_pace(seconds: Optional[float]) -> str:
    """Format a per-mile pace as m:ss (minutes may exceed 59)"""
    if seconds is None:
        return "N/A"

    total = max(0, whole(seconds))
    return f"{total // 60}:{total % 60:02d}"
