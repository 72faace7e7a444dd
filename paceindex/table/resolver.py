"""
Pace Index Calculator - Row Resolver
Find (or blend) the table row matching a race time or pace index
"""
import math
from dataclasses import dataclass
from typing import Optional, Sequence

from ..config import CV_REPEATS, FIVEK_REPEATS, TWO_MILE_REPEATS, RACE_PACES, STORED_PREDICTIONS
from .models import PaceRow, SYNTHETIC_ID
from .normalizer import parse_pace_index_input, parse_time_input, whole
from .paces import calculate_training_paces

# Accepted spellings of each race distance
DISTANCE_ALIASES = {
    "800": "800",
    "800m": "800",
    "mile": "mile",
    "1mile": "mile",
    "1mi": "mile",
    "2mile": "2mile",
    "2mi": "2mile",
    "5k": "5k",
    "5km": "5k",
    "5000m": "5k",
    "10k": "10k",
    "10km": "10k",
    "10000m": "10k",
    "half": "half",
    "halfmarathon": "half",
    "marathon": "marathon",
    "full": "marathon",
}


def canonical_distance(distance: str) -> Optional[str]:
    key = "".join(str(distance).lower().split()).replace("_", "").replace("-", "")
    return DISTANCE_ALIASES.get(key)


def prediction_seconds(row: PaceRow, distance: str) -> Optional[float]:
    """Predicted race time of a row for a distance (None when unknown)"""
    key = canonical_distance(distance)
    if key is None:
        return None
    value = row.prediction(key)
    if value is None or not math.isfinite(value):
        return None
    return value


# =============================================
# Pace index mode
# =============================================
def find_row_by_pace_index(rows: Sequence[PaceRow], pace_index: float) -> Optional[PaceRow]:
    """Exact pace index match, else the nearest one (first wins on ties)"""
    if not rows:
        return None

    for row in rows:
        if row.pace_index == pace_index:
            return row

    best = rows[0]
    best_diff = abs(best.pace_index - pace_index)
    for row in rows:
        diff = abs(row.pace_index - pace_index)
        if diff < best_diff:
            best = row
            best_diff = diff
    return best


# =============================================
# Race time mode
# =============================================
def find_closest_row_by_time(rows: Sequence[PaceRow], distance: str, seconds: float) -> Optional[PaceRow]:
    """Row whose predicted time for `distance` is closest to `seconds`

    Ties go to the row met first. Falls back to the first row when no row
    has a prediction for the distance.
    """
    if not rows:
        return None

    best = None
    best_diff = None
    for row in rows:
        t = prediction_seconds(row, distance)
        if t is None:
            continue
        diff = abs(t - seconds)
        if best_diff is None or diff < best_diff:
            best = row
            best_diff = diff

    return best if best is not None else rows[0]


def _lerp(a: Optional[float], b: Optional[float], t: float) -> Optional[int]:
    if a is None or b is None:
        return None
    return whole(a + (b - a) * t)


def _lerp_map(a: Optional[dict], b: Optional[dict], keys, t: float) -> dict:
    a = a or {}
    b = b or {}
    return {k: _lerp(a.get(k), b.get(k), t) for k in keys}


def blend_rows(a: PaceRow, b: PaceRow, t: float) -> PaceRow:
    """Blend every numeric field of two rows at parameter t (0 -> a, 1 -> b)

    Each field is rounded on its own, so the result can disagree slightly
    with the pace rules applied to its own base paces.
    """
    fivek = None
    if a.fivek_repeats is not None and b.fivek_repeats is not None:
        fivek = _lerp_map(a.fivek_repeats, b.fivek_repeats, FIVEK_REPEATS, t)

    return PaceRow(
        id=SYNTHETIC_ID,
        pace_index=_lerp(a.pace_index, b.pace_index, t),
        predicted_time=_lerp_map(a.predicted_time, b.predicted_time, STORED_PREDICTIONS, t),
        race_pace=_lerp_map(a.race_pace, b.race_pace, RACE_PACES, t),
        threshold_pace=_lerp(a.threshold_pace, b.threshold_pace, t),
        critical_velocity_reps=_lerp_map(a.critical_velocity_reps, b.critical_velocity_reps, CV_REPEATS, t),
        fivek_repeats=fivek,
        two_mile_repeats=_lerp_map(a.two_mile_repeats, b.two_mile_repeats, TWO_MILE_REPEATS, t),
    )


def interpolate_row_by_time(rows: Sequence[PaceRow], distance: str, seconds: float) -> Optional[PaceRow]:
    """Blend the two rows bracketing `seconds` for `distance`

    Queries outside the table are extrapolated from the two fastest (or two
    slowest) rows. A query equal to a tabulated time returns that row.
    """
    if not rows:
        return None

    candidates = [(prediction_seconds(r, distance), r) for r in rows]
    candidates = sorted([c for c in candidates if c[0] is not None], key=lambda c: c[0])

    if not candidates:
        return rows[0]
    if len(candidates) == 1:
        return candidates[0][1]

    for t, row in candidates:
        if t == seconds:
            return row

    if seconds <= candidates[0][0]:
        a, b = candidates[0], candidates[1]
    elif seconds >= candidates[-1][0]:
        a, b = candidates[-2], candidates[-1]
    else:
        a, b = candidates[0], candidates[1]
        for i in range(len(candidates) - 1):
            if candidates[i][0] <= seconds <= candidates[i + 1][0]:
                a, b = candidates[i], candidates[i + 1]
                break

    (time_a, row_a), (time_b, row_b) = a, b
    if time_b == time_a:
        return row_a

    t = (seconds - time_a) / (time_b - time_a)
    return blend_rows(row_a, row_b, t)


# =============================================
# Query boundary
# =============================================
@dataclass(frozen=True)
class PaceQuery:
    """A calculator query as entered by the user

    mode: "time" (distance + time_text) or "pi" (pace_index_text)
    policy: "nearest" or "interpolate" (time mode only)
    """
    mode: str = "time"
    distance: str = "5k"
    time_text: str = ""
    pace_index_text: str = ""
    policy: str = "nearest"


@dataclass(frozen=True)
class Resolution:
    row: PaceRow
    paces: dict


def resolve_row(rows: Sequence[PaceRow], query: PaceQuery) -> Optional[PaceRow]:
    """Resolve a query to one row; None when the input parses to nothing"""
    if query.mode == "pi":
        pace_index = parse_pace_index_input(query.pace_index_text)
        if pace_index is None:
            return None
        return find_row_by_pace_index(rows, pace_index)

    if canonical_distance(query.distance) is None:
        return None

    seconds = parse_time_input(query.time_text)
    if seconds is None:
        return None

    if query.policy == "interpolate":
        return interpolate_row_by_time(rows, query.distance, seconds)
    return find_closest_row_by_time(rows, query.distance, seconds)


def resolve_query(rows: Sequence[PaceRow], query: PaceQuery) -> Optional[Resolution]:
    """Resolve a query and derive the training paces of the matched row"""
    row = resolve_row(rows, query)
    if row is None:
        return None
    return Resolution(row=row, paces=calculate_training_paces(row))
