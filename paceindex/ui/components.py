"""
Pace Index Calculator - UI Components
Reusable Streamlit rendering helpers
"""
import os
from typing import List

import streamlit as st

from ..config import APP_NAME, APP_VERSION, BRAND_TITLES, RACE_LABELS
from ..table import Resolution


def load_css() -> None:
    """Apply styles.css if present, else a minimal inline style"""
    css_path = os.path.join(os.path.dirname(__file__), "styles.css")

    if os.path.exists(css_path):
        with open(css_path, "r", encoding="utf-8") as f:
            css_content = f.read()
        st.markdown(f"<style>{css_content}</style>", unsafe_allow_html=True)
    else:
        st.markdown("""
        <style>
            .main-header { font-size: 1.8rem; margin: 0; }
            .version-tag { font-size: 0.8rem; color: #888; }
            .pace-card { border: 1px solid #cfcfcf; border-radius: 14px; padding: 12px; background: white; margin-bottom: 10px; }
            .pace-card-title { font-weight: 900; margin-bottom: 8px; }
            .pace-card-note { font-size: 12px; color: #555; }
        </style>
        """, unsafe_allow_html=True)


def render_header(brand: str) -> None:
    title = BRAND_TITLES.get(brand, APP_NAME)
    st.markdown(f'<h1 class="main-header">{title}</h1>', unsafe_allow_html=True)
    st.markdown(f'<p class="version-tag">{APP_NAME} v{APP_VERSION}</p>', unsafe_allow_html=True)


def _card(title: str, lines: List[str], note: str = "") -> str:
    body = "".join(f"<div>{line}</div>" for line in lines)
    note_html = f'<div class="pace-card-note">{note}</div>' if note else ""
    return (
        f'<div class="pace-card"><div class="pace-card-title">{title}</div>'
        f'{body}{note_html}</div>'
    )


def render_result_header(brand: str, resolution: Resolution, input_label: str) -> None:
    row = resolution.row
    suffix = " (interpolated)" if row.is_synthetic else ""
    st.markdown(f"**{brand} • Pace Index {row.pace_index}{suffix}**")
    st.caption(f"Input: {input_label}")


def render_pace_cards(resolution: Resolution) -> None:
    """Render the race prediction, training pace and repeat cards

    Args:
        resolution: resolved row and its derived paces
    """
    result = resolution.paces
    paces = result["paces"]

    predictions = [
        f"{p['label']}: <b>{p['display']}</b> ({p['pace_display']}/mi)"
        for p in result["race_predictions"]
    ]

    training = []
    if "recovery" in paces:
        training.append(f"Recovery: <b>{paces['recovery']['display']}</b>/mi")
    if "steady" in paces:
        training.append(f"Steady: <b>{paces['steady']['display']}</b>/mi")

    threshold = []
    if "threshold" in paces:
        threshold.append(f"Pace: <b>{paces['threshold']['display']}</b>/mi")
        for key in ("threshold_400", "threshold_100"):
            if key in paces:
                threshold.append(f"{key.split('_')[1]}: <b>{paces[key]['display']}</b>")

    power = []
    if "power_run" in paces:
        power.append(f"Pace: <b>{paces['power_run']['display']}</b>/mi")

    left, right = st.columns(2)
    with left:
        st.markdown(_card("Race Predictions", predictions), unsafe_allow_html=True)
        st.markdown(_card("Training Paces", training), unsafe_allow_html=True)
        st.markdown(_card("Threshold", threshold), unsafe_allow_html=True)
        st.markdown(_card("Power Run", power, "(2 mile race pace + :30)"), unsafe_allow_html=True)
    with right:
        for title, key, unit in (("Critical Velocity Repeats", "critical_velocity", ""),
                                 ("5k Pace Repeats", "fivek_repeats", "m"),
                                 ("2mi Repeats", "two_mile_repeats", "")):
            lines = [f"{r['meters']}{unit}: <b>{r['display']}</b>" for r in result[key]]
            st.markdown(_card(title, lines), unsafe_allow_html=True)

    with st.expander("Calculation details", expanded=False):
        st.text(result["calculation_log"])


def build_pace_card_markdown(brand: str, resolution: Resolution, input_label: str) -> str:
    """Markdown version of the pace card for download"""
    result = resolution.paces
    paces = result["paces"]
    row = resolution.row

    lines = [f"# {BRAND_TITLES.get(brand, APP_NAME)} - Pace Index {row.pace_index}", ""]
    lines.append(f"Input: {input_label}")
    lines.append("")

    lines.append("## Race Predictions")
    for p in result["race_predictions"]:
        lines.append(f"- {p['label']}: {p['display']} ({p['pace_display']}/mi)")
    lines.append("")

    lines.append("## Training Paces")
    for key, label in (("recovery", "Recovery"), ("steady", "Steady"),
                       ("threshold", "Threshold"), ("power_run", "Power Run")):
        if key in paces:
            lines.append(f"- {label}: {paces[key]['display']}/mi")
    for key in ("threshold_400", "threshold_100"):
        if key in paces:
            lines.append(f"- Threshold {key.split('_')[1]}: {paces[key]['display']}")
    lines.append("")

    for title, key in (("Critical Velocity Repeats", "critical_velocity"),
                       ("5k Pace Repeats", "fivek_repeats"),
                       ("2mi Repeats", "two_mile_repeats")):
        lines.append(f"## {title}")
        for r in result[key]:
            lines.append(f"- {r['meters']}m: {r['display']}")
        lines.append("")

    return "\n".join(lines)


def create_md_download(content: str) -> bytes:
    """Encode Markdown for download (UTF-8 with BOM for mobile viewers)"""
    bom = b'\xef\xbb\xbf'
    return bom + content.encode('utf-8')


def input_label(mode: str, distance: str, time_text: str, pace_index: int) -> str:
    if mode == "time":
        return f"{RACE_LABELS.get(distance, distance)} {time_text.strip()}"
    return f"Pace Index {pace_index}"
