"""
Pace Index Calculator - Shared test fixtures
"""
import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from paceindex.table.models import PaceRow


def make_row(pace_index, k5_pred, k5_pace, row_id=None, threshold=None, fivek=None, cv=None):
    """Pace row with plausible values scaled from the 5k prediction and pace"""
    return PaceRow(
        id=pace_index if row_id is None else row_id,
        pace_index=pace_index,
        predicted_time={
            "800": round(k5_pred * 0.13),
            "mile": round(k5_pred * 0.28),
            "2mile": round(k5_pred * 0.6),
            "5k": k5_pred,
            "half": round(k5_pred * 4.6),
            "marathon": round(k5_pred * 9.6),
        },
        race_pace={"mile": k5_pace - 40, "2mile": k5_pace - 20, "5k": k5_pace},
        threshold_pace=threshold,
        critical_velocity_reps=cv if cv is not None else {
            100: None, 400: 85, 800: 172, 1000: 216, 1200: 262, 1600: None,
        },
        fivek_repeats=fivek,
        two_mile_repeats={100: 20, 200: 40, 300: 61, 400: 82, 600: 124},
    )


@pytest.fixture
def row_factory():
    return make_row


@pytest.fixture
def sample_rows():
    """PI 50-55; 5k prediction 1500s -> 1350s, 5k pace 360s -> 340s"""
    return [make_row(pi, 1500 - (pi - 50) * 30, 360 - (pi - 50) * 4) for pi in range(50, 56)]
