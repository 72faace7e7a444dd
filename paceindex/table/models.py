"""
Pace Index Calculator - Table Model
One row of the pace index table and its JSON form
"""
from dataclasses import dataclass, field
from typing import Dict, Optional

from ..config import CV_REPEATS, FIVEK_REPEATS, TWO_MILE_REPEATS
from .normalizer import whole
from .paces import predict_10k, split_from_mile_pace

# id of a blended row produced by interpolation; never persisted
SYNTHETIC_ID = -1


@dataclass(frozen=True)
class PaceRow:
    """One pace index entry

    Optional stored values (threshold pace, 100m/1600m CV reps, 5k repeats)
    are kept as stored; the read accessors fill gaps by derivation without
    touching the stored value.
    """
    id: int
    pace_index: int
    predicted_time: Dict[str, Optional[int]]
    race_pace: Dict[str, Optional[int]]
    threshold_pace: Optional[int] = None
    critical_velocity_reps: Dict[int, Optional[int]] = field(default_factory=dict)
    fivek_repeats: Optional[Dict[int, Optional[int]]] = None
    two_mile_repeats: Dict[int, Optional[int]] = field(default_factory=dict)

    @property
    def label(self) -> str:
        return f"PI {self.pace_index}"

    @property
    def is_synthetic(self) -> bool:
        return self.id == SYNTHETIC_ID

    def prediction(self, distance: str) -> Optional[float]:
        """Predicted race time in seconds; 10k is projected from 5k"""
        if distance == "10k":
            k5 = self.predicted_time.get("5k")
            return predict_10k(k5) if k5 is not None else None
        return self.predicted_time.get(distance)

    def cv_rep(self, meters: int) -> Optional[int]:
        stored = self.critical_velocity_reps.get(meters)
        if stored is not None:
            return stored

        if meters == 100:
            m400 = self.critical_velocity_reps.get(400)
            return whole(m400 / 4) if m400 is not None else None
        if meters == 1600:
            m1200 = self.critical_velocity_reps.get(1200)
            return whole(m1200 * 1600 / 1200) if m1200 is not None else None
        return None

    def fivek_rep(self, meters: int) -> Optional[int]:
        if self.fivek_repeats is not None and self.fivek_repeats.get(meters) is not None:
            return self.fivek_repeats[meters]

        k5_pace = self.race_pace.get("5k")
        if k5_pace is None:
            return None
        return whole(split_from_mile_pace(k5_pace, meters))

    def two_mile_rep(self, meters: int) -> Optional[int]:
        return self.two_mile_repeats.get(meters)

    # =============================================
    # JSON
    # =============================================
    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "paceIndex": self.pace_index,
            "label": self.label,
            "predictedTime": dict(self.predicted_time),
            "racePace": dict(self.race_pace),
            "thresholdPace": self.threshold_pace,
            "criticalVelocityReps": _str_keys(self.critical_velocity_reps),
            "fivekRepeats": _str_keys(self.fivek_repeats) if self.fivek_repeats is not None else None,
            "twoMileRepeats": _str_keys(self.two_mile_repeats),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PaceRow":
        fivek = data.get("fivekRepeats")
        return cls(
            id=int(data.get("id", 0)),
            pace_index=int(data["paceIndex"]),
            predicted_time=dict(data.get("predictedTime") or {}),
            race_pace=dict(data.get("racePace") or {}),
            threshold_pace=data.get("thresholdPace"),
            critical_velocity_reps=_int_keys(data.get("criticalVelocityReps"), CV_REPEATS),
            fivek_repeats=_int_keys(fivek, FIVEK_REPEATS) if fivek is not None else None,
            two_mile_repeats=_int_keys(data.get("twoMileRepeats"), TWO_MILE_REPEATS),
        )


def _str_keys(reps: Dict[int, Optional[int]]) -> Dict[str, Optional[int]]:
    return {str(meters): seconds for meters, seconds in reps.items()}


def _int_keys(reps: Optional[dict], distances) -> Dict[int, Optional[int]]:
    reps = reps or {}
    return {meters: reps.get(str(meters), reps.get(meters)) for meters in distances}
