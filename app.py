"""
Pace Index Calculator - Streamlit App
Race time or pace index to training paces

Run: streamlit run app.py
"""

import streamlit as st

from paceindex.config import (
    APP_NAME,
    APP_VERSION,
    BRAND_TITLES,
    DEFAULT_BRAND,
    DEFAULT_DISTANCE,
    DEFAULT_PACE_INDEX,
    RACE_DISTANCES,
    RACE_LABELS,
)
from paceindex.data_loader import load_pace_table
from paceindex.table import PaceQuery, resolve_query
from paceindex.ui.components import (
    build_pace_card_markdown,
    create_md_download,
    input_label,
    load_css,
    render_header,
    render_pace_cards,
    render_result_header,
)

# =============================================
# Page setup
# =============================================
st.set_page_config(
    page_title=f"{APP_NAME} v{APP_VERSION}",
    page_icon="🏃",
    layout="wide",
    initial_sidebar_state="collapsed"
)


def init_session_state():
    """Initialize session state"""
    if "brand" not in st.session_state:
        st.session_state.brand = DEFAULT_BRAND


# =============================================
# Main UI
# =============================================
def main():
    init_session_state()
    load_css()

    brands = list(BRAND_TITLES)
    st.session_state.brand = st.radio(
        "Mode", brands, index=brands.index(st.session_state.brand), horizontal=True
    )
    brand = st.session_state.brand
    render_header(brand)

    rows, verification_log = load_pace_table()

    if not verification_log["success"]:
        st.error("Could not load the pace table.")
        for error in verification_log["errors"]:
            st.error(error)
        return

    for warning in verification_log["warnings"]:
        st.caption(warning)

    pi_min = verification_log["pace_index_range"]["min"]
    pi_max = verification_log["pace_index_range"]["max"]

    col1, col2, col3 = st.columns(3)
    with col1:
        mode = st.selectbox(
            "Input Type", ["time", "pi"],
            format_func=lambda m: "From Race Time" if m == "time" else "From Pace Index",
        )

    distance = DEFAULT_DISTANCE
    time_text = ""
    pi_text = str(DEFAULT_PACE_INDEX)
    policy = "nearest"

    if mode == "time":
        distances = list(RACE_DISTANCES)
        with col2:
            distance = st.selectbox(
                "Input Distance", distances,
                index=distances.index(DEFAULT_DISTANCE),
                format_func=lambda d: RACE_LABELS[d],
            )
        with col3:
            time_text = st.text_input("Time (mm:ss or h:mm:ss)", placeholder="e.g., 16:45")
        interpolate = st.checkbox("Interpolate between table rows", value=False)
        policy = "interpolate" if interpolate else "nearest"
    else:
        with col2:
            pi_text = st.text_input(
                "Pace Index", value=str(DEFAULT_PACE_INDEX), placeholder=f"e.g., {DEFAULT_PACE_INDEX}"
            )

    query = PaceQuery(
        mode=mode,
        distance=distance,
        time_text=time_text,
        pace_index_text=pi_text,
        policy=policy,
    )
    resolution = resolve_query(rows, query)

    st.markdown("---")

    if resolution is None:
        if mode == "time":
            st.info("Enter a distance and time to see your paces.")
        else:
            st.info(f"Enter a Pace Index ({pi_min}–{pi_max}).")
        return

    label = input_label(mode, distance, time_text, resolution.row.pace_index)
    render_result_header(brand, resolution, label)
    render_pace_cards(resolution)

    markdown = build_pace_card_markdown(brand, resolution, label)
    st.download_button(
        label="Download pace card",
        data=create_md_download(markdown),
        file_name=f"{brand}-PaceIndex-{resolution.row.pace_index}.md",
        mime="text/markdown",
    )


if __name__ == "__main__":
    main()
