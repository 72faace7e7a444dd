"""
Pace Index Calculator - Table Package
Time normalization, table building and row resolution
"""
from .normalizer import (
    normalize_time,
    parse_ms_cs,
    parse_hms,
    parse_time_input,
    parse_pace_index_input,
    seconds_to_time,
    format_pace,
    whole,
)
from .models import PaceRow, SYNTHETIC_ID
from .builder import (
    ColumnMap,
    load_column_maps,
    get_column_map,
    read_source_csv,
    build_rows,
    build_table,
    write_table,
    load_table,
)
from .resolver import (
    PaceQuery,
    Resolution,
    find_row_by_pace_index,
    find_closest_row_by_time,
    interpolate_row_by_time,
    prediction_seconds,
    resolve_query,
)
from .paces import calculate_training_paces, predict_10k
