import calendar
import datetime as dt
import logging
from typing import Any, Dict

import streamlit as st

from peak_progress import calendar_view as cv
from peak_progress.config import load_settings, setup_logging
from peak_progress.controller import UpdateController
from peak_progress.day_state import DayState
from peak_progress.stores import open_store

st.set_page_config(page_title="Peak Progress", layout="centered")
logger = logging.getLogger("peak_progress.app")
COL = cv.COL


def theme() -> None:
    st.markdown(
        f"""
        <style>
        @import url('https://fonts.googleapis.com/css2?family=Outfit:wght@400;600;700;800&display=swap');
        .stApp {{
            font-family: "Outfit", sans-serif; color:{COL["text"]};
            background: radial-gradient(900px 420px at 92% -6%, rgba(92,255,157,.12), transparent 58%),
                        radial-gradient(800px 400px at -8% 3%, rgba(88,168,255,.10), transparent 58%),
                        linear-gradient(145deg,#060915,#0b1327);
        }}
        .stMarkdown p, .stMarkdown li, label {{color:{COL['text']} !important;}}
        .block-container {{padding-top:1.2rem; padding-bottom:.75rem;}}
        [data-testid="stHeader"] {{background:rgba(0,0,0,0);}}
        div[data-testid="stVerticalBlockBorderWrapper"] {{background:linear-gradient(180deg,rgba(15,21,40,.88),rgba(9,13,28,.92)); border:1px solid {COL["line"]} !important; border-radius:14px; padding:.5rem .62rem; box-shadow:0 8px 20px rgba(0,0,0,.25);}}
        .stButton > button {{background:rgba(18,26,48,.95); color:{COL["text"]}; border:1px solid rgba(125,150,180,.4); border-radius:10px; font-weight:600;}}
        .stButton > button:hover {{border-color:rgba(92,255,157,.65); color:#fff;}}
        .kpi {{border:1px solid {COL["line"]}; border-radius:14px; padding:.56rem .66rem; min-height:120px; display:flex; flex-direction:column; justify-content:space-between;}}
        .k1 {{background:linear-gradient(145deg,rgba(32,71,52,.56),rgba(12,27,24,.72));}}
        .k2 {{background:linear-gradient(145deg,rgba(24,69,86,.56),rgba(12,25,35,.74));}}
        .kh {{font-size:.9rem; font-weight:700; margin:0;}}
        .kv {{font-size:2.28rem; font-weight:800; margin:.16rem 0 .04rem 0; line-height:1;}}
        .ks {{font-size:.8rem; color:{COL["muted"]}; margin:0;}}
        .hero {{text-align:center; margin:0 0 1.1rem 0;}}
        .hero-t {{font-size:2.6rem; font-weight:800; color:{COL["total"]}; margin:0;}}
        .hero-s {{font-size:1rem; color:{COL["muted"]}; margin:.3rem 0 0 0;}}
        .pt {{font-size:1.05rem; font-weight:700; margin:0; text-align:center;}}
        </style>
        """,
        unsafe_allow_html=True,
    )


def read_secrets() -> Dict[str, Any]:
    try:
        return dict(st.secrets)
    except Exception as ex:
        # No secrets.toml: run with defaults and local storage.
        logger.info("No Streamlit secrets available (%s: %s)", type(ex).__name__, ex)
        return {}


def long_date(d: dt.date) -> str:
    return f"{calendar.month_name[d.month]} {d.day}, {d.year}"


def kpi(cls: str, title: str, value: str, caption: str) -> None:
    st.markdown(
        f"<div class='kpi {cls}'><p class='kh'>{title}</p><p class='kv'>{value}</p><p class='ks'>{caption}</p></div>",
        unsafe_allow_html=True,
    )


def open_decision_dialog(ctl: UpdateController, d: dt.date) -> None:
    @st.dialog(f"Log for {long_date(d)}")
    def _decision() -> None:
        st.markdown("Did the family conquer the mountain on this day?")
        c1, c2 = st.columns(2)
        if c1.button("⛰️ Yes, we climbed!", type="primary", use_container_width=True):
            ctl.confirm(True)
            st.rerun()
        if c2.button("👎 No, not this time.", use_container_width=True):
            ctl.confirm(False)
            st.rerun()
        if st.button("Cancel", use_container_width=True):
            ctl.cancel()
            st.rerun()

    _decision()


def set_month(delta: int) -> None:
    cur = st.session_state["view_month"]
    st.session_state["view_month"] = cv.month_start(dt.date.today()) if delta == 0 else cv.shift_month(cur, delta)
    st.session_state["cal_nonce"] += 1


theme()
secrets = read_secrets()
settings = load_settings(secrets)
setup_logging(settings.log_level)

if "controller" not in st.session_state:
    store, setup_error = open_store(settings, secrets, st.session_state)
    st.session_state["controller"] = UpdateController.hydrate(store, settings.storage_key)
    st.session_state["setup_error"] = setup_error
    st.session_state["view_month"] = cv.month_start(dt.date.today())
    st.session_state["cal_nonce"] = 0

ctl: UpdateController = st.session_state["controller"]
today = dt.date.today()
# Dialog buttons rerun only the dialog, so a full rerun with a pending day means it was dismissed.
ctl.cancel()

st.markdown(
    "<div class='hero'><p class='hero-t'>Peak Progress</p>"
    "<p class='hero-s'>Our family's daily mountain climb challenge. Mark each day to watch our progress grow.</p></div>",
    unsafe_allow_html=True,
)

stats = ctl.stats(today)
k = st.columns(2, gap="small")
with k[0]:
    kpi("k1", "Current Streak", f"{stats.current_streak} days", "Consecutive climbs.")
with k[1]:
    kpi("k2", "Total Climbs", f"{stats.total_completed}", "Summits reached.")

if not ctl.last_save_ok:
    st.warning("The last entry could not be saved. It is kept for this session only.")

view_month = st.session_state["view_month"]
with st.container(border=True):
    n1, n2, n3, n4 = st.columns([1, 3, 1.3, 1], gap="small")
    n1.button("‹", on_click=set_month, args=(-1,), use_container_width=True, key="prev_month")
    with n2:
        st.markdown(f"<p class='pt'>{cv.month_title(view_month)}</p>", unsafe_allow_html=True)
    n3.button("This Month", on_click=set_month, args=(0,), use_container_width=True, key="this_month")
    n4.button("›", on_click=set_month, args=(1,), use_container_width=True, key="next_month")

    frame = cv.month_frame(view_month, ctl.log, today)
    event = st.plotly_chart(
        cv.month_figure(frame),
        use_container_width=True,
        config=cv.CHART_CFG,
        key=f"calendar-{st.session_state['cal_nonce']}",
        on_select="rerun",
        selection_mode="points",
    )
    swatches = [DayState.COMPLETED, DayState.MISSED, DayState.UNRECORDED_PAST, DayState.UNRECORDED_FUTURE]
    legend_html = "".join(
        [
            f"<span style='display:inline-flex;align-items:center;margin:.05rem .6rem .05rem 0;font-size:.78rem;color:{COL['muted']};'>"
            f"<span style='display:inline-block;width:10px;height:10px;border-radius:2px;background:{cv.INDICATORS[s].color};margin-right:.28rem;border:1px solid rgba(255,255,255,.14);'></span>{cv.INDICATORS[s].label}</span>"
            for s in swatches
        ]
    )
    st.markdown(f"<div>{legend_html}</div>", unsafe_allow_html=True)

if st.session_state["setup_error"]:
    st.caption(f"Saving to {settings.local_store_path} because sheet setup failed ({st.session_state['setup_error']}).")

clicked = cv.clicked_day(event.selection.points, today) if event else None
if clicked is not None and ctl.select(clicked, today):
    # Fresh chart key so the old selection is not replayed on the next rerun.
    st.session_state["cal_nonce"] += 1
    open_decision_dialog(ctl, clicked)
