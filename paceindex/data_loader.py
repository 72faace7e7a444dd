"""
Pace Index Calculator - Data Loader
Loading and checking the generated pace table
"""
import os
from typing import List, Optional, Tuple

import streamlit as st

from .config import PACE_TABLE_PATH
from .table import PaceRow, load_table


@st.cache_data
def load_pace_table(path: Optional[str] = None) -> Tuple[Optional[List[PaceRow]], dict]:
    """Load the pace table and build a verification log

    Returns:
        Tuple[rows, verification_log]
    """
    verification_log = {
        "success": False,
        "errors": [],
        "warnings": [],
        "pace_index_range": {"min": None, "max": None},
    }

    path = path or PACE_TABLE_PATH

    if not os.path.exists(path):
        verification_log["errors"].append(
            f"Pace table not found: {path} (run `paceindex build` first)"
        )
        return None, verification_log

    try:
        rows = load_table(path)
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
        verification_log["errors"].append(f"Could not read pace table: {str(e)}")
        return None, verification_log

    if not rows:
        verification_log["errors"].append(f"Pace table is empty: {path}")
        return None, verification_log

    missing_threshold = sum(1 for r in rows if r.threshold_pace is None)
    if missing_threshold:
        verification_log["warnings"].append(
            f"{missing_threshold} rows have no threshold pace; mile race pace is used instead"
        )

    verification_log["pace_index_range"]["min"] = rows[0].pace_index
    verification_log["pace_index_range"]["max"] = rows[-1].pace_index
    verification_log["success"] = True
    return rows, verification_log
