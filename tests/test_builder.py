"""
Pace Index Calculator - Table Builder Tests
"""
import json
import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from paceindex.table.builder import (
    ColumnMap,
    load_column_maps,
    get_column_map,
    read_source_csv,
    build_table,
    write_table,
    load_table,
)

OVERVIEW_WIDTH = 37


def overview_line(pace_index, cells=None):
    """One data line in the Pace Overview layout"""
    values = [""] * OVERVIEW_WIDTH
    values[0] = str(pace_index)
    defaults = {
        1: "2:58:40",     # 800 prediction (mm:ss:cc)
        2: "6:12:10",     # mile prediction
        3: "13:05:00",    # 2 mile prediction
        4: "20:54:30",    # 5k prediction
        5: "1:36:02",     # half (h:mm:ss)
        6: "3:19:56",     # marathon (h:mm:ss)
        7: "6:12",        # mile pace
        8: "6:32",        # 2 mile pace
        9: "6:43:50",     # 5k pace
        19: "7:05",       # threshold
        21: "1:37", 22: "3:18", 23: "4:09", 24: "5:00", 25: "6:40",
        26: "6:44", 27: "5:03", 28: "4:11", 29: "3:21", 30: "1:40", 31: "0:25",
        32: "2:27", 33: "1:37", 34: "1:13", 35: "0:48", 36: "0:24",
    }
    defaults.update(cells or {})
    for col, value in defaults.items():
        values[col] = value
    return ",".join(values)


@pytest.fixture
def overview_csv(tmp_path):
    lines = [
        ",".join([""] * OVERVIEW_WIDTH),
        ",".join(["Race Predictions"] + [""] * (OVERVIEW_WIDTH - 1)),
        ",".join(["INDEX"] + [f"h{i}" for i in range(1, OVERVIEW_WIDTH)]),
        overview_line(51, {4: "20:30:00", 9: "6:36"}),
        overview_line(50),
        ",".join([""] * OVERVIEW_WIDTH),
        overview_line(52, {9: ""}),
        overview_line(29),
        overview_line(50, {4: "21:00:00"}),
        overview_line("abc"),
    ]
    path = tmp_path / "overview.csv"
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return str(path)


class TestColumnMaps:
    """Column map loading tests"""

    def test_packaged_layouts(self):
        maps = load_column_maps()
        assert set(maps) >= {"pace_overview", "vdot_export"}

    def test_pace_overview(self):
        column_map = get_column_map("pace_overview")
        assert column_map.skip_rows == 3
        assert column_map.columns["pace_index"] == 0
        assert column_map.columns["threshold"] == 19
        assert column_map.pace_index_range == (30, 73)
        assert "pred_marathon" in column_map.hms_fields

    def test_vdot_export(self):
        column_map = get_column_map("vdot_export")
        assert column_map.columns["pace_index"] == 11
        assert "threshold" not in column_map.columns
        assert "pace_5k" in column_map.rescale_fields

    def test_unknown_layout(self):
        with pytest.raises(KeyError):
            get_column_map("nope")

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_column_maps(str(tmp_path / "missing.yaml"))

    def test_custom_file(self, tmp_path):
        path = tmp_path / "maps.yaml"
        path.write_text(
            "mini:\n  skip_rows: 1\n  columns:\n    pace_index: 2\n    pred_5k: 0\n    pace_5k: 1\n",
            encoding="utf-8",
        )
        column_map = get_column_map("mini", str(path))
        assert column_map.columns == {"pace_index": 2, "pred_5k": 0, "pace_5k": 1}
        assert column_map.pace_index_range is None
        assert column_map.hms_fields == []

    def test_pace_index_column_required(self):
        with pytest.raises(ValueError):
            ColumnMap.from_dict("bad", {"columns": {"pred_5k": 0}})


class TestBuildPaceOverview:
    """Pace Overview layout build tests"""

    def test_read_skips_headers_and_blank_rows(self, overview_csv):
        df = read_source_csv(overview_csv, get_column_map("pace_overview"))
        assert list(df[0]) == ["51", "50", "52", "29", "50", "abc"]

    def test_build_log(self, overview_csv):
        rows, build_log = build_table(overview_csv, get_column_map("pace_overview"))

        assert build_log["success"] is True
        assert build_log["rows"] == 2
        assert build_log["duplicates"] == [50]
        assert build_log["out_of_range"] == [29]
        assert len(build_log["dropped"]) == 2  # missing 5k pace, unreadable index

    def test_sorted_by_pace_index(self, overview_csv):
        rows, _ = build_table(overview_csv, get_column_map("pace_overview"))
        assert [r.pace_index for r in rows] == [50, 51]
        assert [r.id for r in rows] == [1, 0]

    def test_first_duplicate_wins(self, overview_csv):
        rows, _ = build_table(overview_csv, get_column_map("pace_overview"))
        assert rows[0].predicted_time["5k"] == 1254

    def test_row_values(self, overview_csv):
        rows, _ = build_table(overview_csv, get_column_map("pace_overview"))
        row = rows[0]

        assert row.label == "PI 50"
        assert row.predicted_time == {
            "800": 178, "mile": 372, "2mile": 785, "5k": 1254, "half": 5762, "marathon": 11996,
        }
        assert row.race_pace == {"mile": 372, "2mile": 392, "5k": 404}
        assert row.threshold_pace == 425
        assert row.critical_velocity_reps == {100: None, 400: 97, 800: 198, 1000: 249, 1200: 300, 1600: 400}
        assert row.fivek_repeats == {100: 25, 400: 100, 800: 201, 1000: 251, 1200: 303, 1600: 404}
        assert row.two_mile_repeats == {100: 24, 200: 48, 300: 73, 400: 97, 600: 147}
        assert row.cv_rep(100) == 24

    def test_stored_times_are_whole_seconds(self, overview_csv):
        rows, _ = build_table(overview_csv, get_column_map("pace_overview"))
        for row in rows:
            for value in list(row.predicted_time.values()) + list(row.race_pace.values()):
                assert isinstance(value, int)
                assert value >= 0

    def test_missing_source(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            build_table(str(tmp_path / "missing.csv"), get_column_map("pace_overview"))

    def test_nothing_survives(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("a\nb\nc\n" + overview_line(52, {4: ""}) + "\n", encoding="utf-8")
        rows, build_log = build_table(str(path), get_column_map("pace_overview"))
        assert rows == []
        assert build_log["success"] is False
        assert build_log["warnings"]


class TestBuildVdotExport:
    """Raw VDOT export layout build tests"""

    @pytest.fixture
    def export_csv(self, tmp_path):
        def line(pace_index, pace_5k):
            values = [
                "2:58:40", "6:12:10", "13:05:00", "20:54:30", "1:36:02", "3:19:56",
                "6:12", "6:32", pace_5k, "", "", str(pace_index),
                "1:37", "3:18", "4:09", "5:00",
                "2:27", "1:37", "1:13", "0:48", "0:24",
            ]
            return ",".join(values)

        path = tmp_path / "vdot.csv"
        header = ",".join(f"c{i}" for i in range(21))
        path.write_text("\n".join([header, line(50, "671:40"), line(49, "6:50")]) + "\n", encoding="utf-8")
        return str(path)

    def test_centiseconds_rescaled(self, export_csv):
        rows, build_log = build_table(export_csv, get_column_map("vdot_export"))

        assert build_log["rows"] == 2
        by_index = {r.pace_index: r for r in rows}
        assert by_index[50].race_pace["5k"] == 403
        assert by_index[49].race_pace["5k"] == 410

    def test_ragged_rows(self, tmp_path):
        """Rows trimmed of trailing blanks, or carrying extra cells, still build"""
        full = [
            "2:58:40", "6:12:10", "13:05:00", "20:54:30", "1:36:02", "3:19:56",
            "6:12", "6:32", "6:43", "", "", "50",
            "1:37", "3:18", "4:09", "5:00",
            "2:27", "1:37", "1:13", "0:48", "0:24",
        ]
        short = full[:11] + ["49"]
        long = full[:11] + ["51"] + full[12:] + ["x", "y", "z"]
        path = tmp_path / "ragged.csv"
        path.write_text(
            "\n".join(["header", ",".join(short), ",".join(full), ",".join(long)]) + "\n",
            encoding="utf-8",
        )

        rows, build_log = build_table(str(path), get_column_map("vdot_export"))

        assert build_log["rows"] == 3
        assert [r.pace_index for r in rows] == [49, 50, 51]
        assert rows[0].critical_velocity_reps[400] is None
        assert rows[0].two_mile_repeats[600] is None
        assert rows[2].two_mile_repeats[100] == 24

    def test_no_stored_threshold_or_fivek(self, export_csv):
        rows, _ = build_table(export_csv, get_column_map("vdot_export"))
        row = rows[0]

        assert row.threshold_pace is None
        assert row.fivek_repeats is None
        assert row.cv_rep(1600) == 400  # derived from 1200m
        assert row.fivek_rep(400) == 102  # 410 / 1609.344 * 400


class TestTableArtifact:
    """JSON write/load tests"""

    def test_round_trip(self, overview_csv, tmp_path):
        rows, _ = build_table(overview_csv, get_column_map("pace_overview"))
        out = str(tmp_path / "data" / "paces.json")

        write_table(rows, out)
        assert load_table(out) == rows

    def test_json_field_names(self, overview_csv, tmp_path):
        rows, _ = build_table(overview_csv, get_column_map("pace_overview"))
        out = str(tmp_path / "paces.json")
        write_table(rows, out)

        with open(out, encoding="utf-8") as f:
            data = json.load(f)

        assert isinstance(data, list)
        assert set(data[0]) == {
            "id", "paceIndex", "label", "predictedTime", "racePace", "thresholdPace",
            "criticalVelocityReps", "fivekRepeats", "twoMileRepeats",
        }
        assert data[0]["predictedTime"]["5k"] == 1254
        assert data[0]["criticalVelocityReps"]["400"] == 97
        assert data[0]["criticalVelocityReps"]["100"] is None

    def test_load_sorts(self, tmp_path, row_factory):
        rows = [row_factory(55, 1350, 340), row_factory(50, 1500, 360)]
        out = str(tmp_path / "paces.json")
        write_table(rows, out)
        assert [r.pace_index for r in load_table(out)] == [50, 55]
