"""
Pace Index Calculator - Training Paces
Training paces derived from a resolved pace row
"""
from typing import List, Optional, Tuple

from ..config import (
    METERS_PER_MILE,
    RIEGEL_EXPONENT,
    RECOVERY_OFFSET,
    STEADY_OFFSET_LOW,
    STEADY_OFFSET_HIGH,
    POWER_RUN_OFFSET,
    THRESHOLD_SPLITS,
    RACE_DISTANCES,
    RACE_LABELS,
    CV_REPEATS,
    FIVEK_REPEATS,
    TWO_MILE_REPEATS,
)
from .normalizer import whole, seconds_to_time, format_pace


# =============================================
# Pace rules
# =============================================
def recovery_pace(k5_pace: int) -> int:
    return k5_pace + RECOVERY_OFFSET


def steady_range(k5_pace: int) -> Tuple[int, int]:
    return k5_pace + STEADY_OFFSET_LOW, k5_pace + STEADY_OFFSET_HIGH


def power_run_pace(two_mile_pace: int) -> int:
    return two_mile_pace + POWER_RUN_OFFSET


def split_from_mile_pace(sec_per_mile: float, meters: float) -> float:
    """Time for a repeat of `meters` run at a per-mile pace (unrounded)"""
    return sec_per_mile / METERS_PER_MILE * meters


def pace_per_mile(race_seconds: float, meters: float) -> float:
    """Average per-mile pace of a race of `meters` run in `race_seconds`"""
    return race_seconds / (meters / METERS_PER_MILE)


def predict_10k(k5_seconds: float) -> float:
    """Riegel projection of a 10k time from a 5k time"""
    return k5_seconds * 2 ** RIEGEL_EXPONENT


def threshold_pace(row) -> Optional[int]:
    """Stored threshold pace, falling back to mile race pace"""
    if row.threshold_pace is not None:
        return row.threshold_pace
    return row.race_pace.get("mile")


def threshold_splits(pace: Optional[int]) -> List[dict]:
    if pace is None:
        return []
    return [_entry(meters, whole(split_from_mile_pace(pace, meters))) for meters in THRESHOLD_SPLITS]


def _entry(meters, seconds: Optional[int]) -> dict:
    return {"meters": meters, "seconds": seconds, "display": seconds_to_time(seconds)}


def _pace(seconds: Optional[int]) -> dict:
    return {"seconds": seconds, "display": format_pace(seconds)}


# =============================================
# Pace card
# =============================================
def calculate_training_paces(row) -> dict:
    """Derive every training pace for a pace row

    Args:
        row: resolved PaceRow (tabulated or blended)

    Returns:
        dict: {
            "pace_index": pace index of the row,
            "paces": {name: {seconds, display}},
            "race_predictions": [{distance, label, seconds, display, pace, pace_display}],
            "critical_velocity": [{meters, seconds, display}],
            "fivek_repeats": [{meters, seconds, display}],
            "two_mile_repeats": [{meters, seconds, display}],
            "calculation_log": how the paces were derived
        }
    """
    k5_pace = row.race_pace.get("5k")
    two_mile_pace = row.race_pace.get("2mile")
    thr = threshold_pace(row)

    paces = {}
    log_lines = []

    if k5_pace is not None:
        low, high = steady_range(k5_pace)
        paces["recovery"] = _pace(recovery_pace(k5_pace))
        paces["steady_low"] = _pace(low)
        paces["steady_high"] = _pace(high)
        paces["steady"] = {
            "display": f"{format_pace(low)}–{format_pace(high)}",
            "min": paces["steady_low"],
            "max": paces["steady_high"],
        }
        log_lines.append(f"  Recovery: 5k pace {k5_pace}s + {RECOVERY_OFFSET}s = {recovery_pace(k5_pace)}s")
        log_lines.append(
            f"  Steady: 5k pace {k5_pace}s + {STEADY_OFFSET_LOW}-{STEADY_OFFSET_HIGH}s = {low}-{high}s"
        )

    if thr is not None:
        source = "chart" if row.threshold_pace is not None else "mile race pace"
        paces["threshold"] = _pace(thr)
        for split in threshold_splits(thr):
            paces[f"threshold_{split['meters']}"] = {"seconds": split["seconds"], "display": split["display"]}
        log_lines.append(f"  Threshold: {thr}s/mi ({source})")

    if two_mile_pace is not None:
        paces["power_run"] = _pace(power_run_pace(two_mile_pace))
        log_lines.append(
            f"  Power run: 2 mile pace {two_mile_pace}s + {POWER_RUN_OFFSET}s = {power_run_pace(two_mile_pace)}s"
        )

    race_predictions = []
    for distance, meters in RACE_DISTANCES.items():
        seconds = row.prediction(distance)
        race_predictions.append({
            "distance": distance,
            "label": RACE_LABELS[distance],
            "seconds": whole(seconds),
            "display": seconds_to_time(seconds),
            "pace": whole(pace_per_mile(seconds, meters)) if seconds is not None else None,
            "pace_display": format_pace(pace_per_mile(seconds, meters)) if seconds is not None else "N/A",
        })

    critical_velocity = [_entry(m, row.cv_rep(m)) for m in CV_REPEATS]
    fivek_repeats = [_entry(m, row.fivek_rep(m)) for m in FIVEK_REPEATS]
    two_mile_repeats = [_entry(m, row.two_mile_rep(m)) for m in TWO_MILE_REPEATS]

    header = f"[Pace calculation] {row.label}"
    if row.is_synthetic:
        header += " (blended between table rows)"

    return {
        "pace_index": row.pace_index,
        "paces": paces,
        "race_predictions": race_predictions,
        "critical_velocity": critical_velocity,
        "fivek_repeats": fivek_repeats,
        "two_mile_repeats": two_mile_repeats,
        "calculation_log": "\n".join([header] + log_lines),
    }
