"""
Pace Index Calculator - Table Builder
Spreadsheet export to pace table, driven by a column map
"""
import json
import logging
import math
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import pandas as pd
import yaml

from ..config import (
    COLUMN_MAP_FILE,
    STORED_PREDICTIONS,
    RACE_PACES,
    CV_REPEATS,
    FIVEK_REPEATS,
    TWO_MILE_REPEATS,
)
from .models import PaceRow
from .normalizer import HMS, MS_CS, normalize_time, whole

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColumnMap:
    """Where each field lives in one spreadsheet layout"""
    name: str
    columns: Dict[str, int]
    skip_rows: int = 0
    title: str = ""
    hms_fields: List[str] = field(default_factory=list)
    rescale_fields: List[str] = field(default_factory=list)
    pace_index_range: Optional[Tuple[int, int]] = None

    @classmethod
    def from_dict(cls, name: str, data: dict) -> "ColumnMap":
        columns = data.get("columns") or {}
        if "pace_index" not in columns:
            raise ValueError(f"column map '{name}' has no pace_index column")

        pi_range = data.get("pace_index_range")
        return cls(
            name=name,
            columns={str(k): int(v) for k, v in columns.items()},
            skip_rows=int(data.get("skip_rows", 0)),
            title=data.get("title", name),
            hms_fields=list(data.get("hms_fields") or []),
            rescale_fields=list(data.get("rescale_fields") or []),
            pace_index_range=(int(pi_range[0]), int(pi_range[1])) if pi_range else None,
        )


def load_column_maps(path: Optional[str] = None) -> Dict[str, ColumnMap]:
    """Load every column map from a YAML file

    Args:
        path: YAML file (defaults to the packaged column_maps.yaml)

    Returns:
        {layout name: ColumnMap}
    """
    path = path or COLUMN_MAP_FILE
    if not os.path.exists(path):
        raise FileNotFoundError(f"Column map file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return {name: ColumnMap.from_dict(name, data) for name, data in raw.items()}


def get_column_map(name: str, path: Optional[str] = None) -> ColumnMap:
    maps = load_column_maps(path)
    if name not in maps:
        raise KeyError(f"Unknown layout '{name}' (known: {', '.join(sorted(maps))})")
    return maps[name]


def read_source_csv(path: str, column_map: ColumnMap) -> pd.DataFrame:
    """Read a header-less spreadsheet export as strings

    Header rows are skipped and rows with a blank pace index cell dropped.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Source CSV not found: {path}")

    # fixed width: short rows are padded, cells past the last mapped column dropped
    width = max(column_map.columns.values()) + 1
    df = pd.read_csv(
        path,
        header=None,
        names=list(range(width)),
        index_col=False,
        engine="python",
        on_bad_lines=lambda line: line[:width],
        skiprows=column_map.skip_rows,
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=False,
    )

    blank = df[column_map.columns["pace_index"]].fillna("").astype(str).str.strip() == ""
    return df[~blank].reset_index(drop=True)


# =============================================
# Row parsing
# =============================================
def _cell(values: list, column_map: ColumnMap, field_name: str):
    col = column_map.columns.get(field_name)
    if col is None or col >= len(values):
        return None
    return values[col]


def _seconds(values: list, column_map: ColumnMap, field_name: str) -> Optional[int]:
    grammar = HMS if field_name in column_map.hms_fields else MS_CS
    rescale = field_name in column_map.rescale_fields
    return whole(normalize_time(_cell(values, column_map, field_name), grammar, rescale))


def _parse_pace_index(raw) -> Optional[int]:
    try:
        value = float(str(raw).strip())
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value) or not value.is_integer():
        return None
    return int(value)


def parse_row(values: list, column_map: ColumnMap, row_id: int) -> Optional[PaceRow]:
    """Parse one spreadsheet row; None when the pace index is unreadable"""
    pace_index = _parse_pace_index(_cell(values, column_map, "pace_index"))
    if pace_index is None:
        return None

    predicted = {d: _seconds(values, column_map, f"pred_{d}") for d in STORED_PREDICTIONS}
    race_pace = {d: _seconds(values, column_map, f"pace_{d}") for d in RACE_PACES}
    cv = {m: _seconds(values, column_map, f"cv_{m}") for m in CV_REPEATS}
    two_mile = {m: _seconds(values, column_map, f"two_mile_{m}") for m in TWO_MILE_REPEATS}

    fivek = None
    if any(f"fivek_{m}" in column_map.columns for m in FIVEK_REPEATS):
        fivek = {m: _seconds(values, column_map, f"fivek_{m}") for m in FIVEK_REPEATS}

    return PaceRow(
        id=row_id,
        pace_index=pace_index,
        predicted_time=predicted,
        race_pace=race_pace,
        threshold_pace=_seconds(values, column_map, "threshold"),
        critical_velocity_reps=cv,
        fivek_repeats=fivek,
        two_mile_repeats=two_mile,
    )


def build_rows(df: pd.DataFrame, column_map: ColumnMap) -> Tuple[List[PaceRow], dict]:
    """Build the pace table from a source frame

    Args:
        df: frame from read_source_csv (positional columns)
        column_map: layout of the frame

    Returns:
        Tuple[rows sorted by pace index, build_log]
    """
    build_log = {
        "success": False,
        "layout": column_map.name,
        "source_rows": len(df),
        "rows": 0,
        "dropped": [],
        "duplicates": [],
        "out_of_range": [],
        "warnings": [],
    }

    by_index = {}
    for i, values in enumerate(df.itertuples(index=False, name=None)):
        values = list(values)
        row = parse_row(values, column_map, i)

        if row is None:
            logger.info("Row %d: unreadable pace index %r, dropped", i, _cell(values, column_map, "pace_index"))
            build_log["dropped"].append(i)
            continue

        # 5k prediction and 5k race pace are the only mandatory fields
        if row.predicted_time.get("5k") is None or row.race_pace.get("5k") is None:
            logger.info("Row %d (%s): missing 5k prediction or 5k pace, dropped", i, row.label)
            build_log["dropped"].append(i)
            continue

        if column_map.pace_index_range is not None:
            low, high = column_map.pace_index_range
            if not low <= row.pace_index <= high:
                build_log["out_of_range"].append(row.pace_index)
                continue

        if row.pace_index in by_index:
            logger.warning("Row %d: duplicate %s, keeping row %d", i, row.label, by_index[row.pace_index].id)
            build_log["duplicates"].append(row.pace_index)
            continue

        by_index[row.pace_index] = row

    rows = [by_index[pi] for pi in sorted(by_index)]

    if not rows:
        build_log["warnings"].append("No rows survived the build")
    if build_log["dropped"]:
        build_log["warnings"].append(f"{len(build_log['dropped'])} rows dropped (missing 5k data or pace index)")

    build_log["rows"] = len(rows)
    build_log["success"] = bool(rows)
    logger.info(
        "Built %d rows from %d source rows (layout %s, %d dropped, %d duplicates, %d out of range)",
        len(rows), len(df), column_map.name, len(build_log["dropped"]),
        len(build_log["duplicates"]), len(build_log["out_of_range"]),
    )
    return rows, build_log


def build_table(csv_path: str, column_map: ColumnMap) -> Tuple[List[PaceRow], dict]:
    return build_rows(read_source_csv(csv_path, column_map), column_map)


# =============================================
# JSON artifact
# =============================================
def write_table(rows: List[PaceRow], path: str) -> None:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump([row.to_dict() for row in rows], f, indent=2)
    logger.info("Wrote %d rows to %s", len(rows), path)


def load_table(path: str) -> List[PaceRow]:
    """Load a JSON pace table, sorted by pace index"""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    rows = [PaceRow.from_dict(item) for item in data]
    return sorted(rows, key=lambda r: r.pace_index)
