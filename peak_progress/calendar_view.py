"""Month grid rendering: day classifications to a clickable plotly calendar."""
import calendar
import datetime as dt
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Optional

import pandas as pd
import plotly.graph_objects as go

from peak_progress.climb_log import ClimbLog, day_key, parse_day_key
from peak_progress.day_state import DayState, classify, is_selectable

COL = {
    "line": "rgba(125,150,180,.26)",
    "text": "#e8eef8",
    "muted": "#9db0cc",
    "total": "#5CFF9D",
}
CHART_CFG = {"displayModeBar": False}
# Sunday-first, like the month pickers the app replaces.
FIRST_WEEKDAY = calendar.SUNDAY
WEEKDAY_LABELS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


class Indicator(NamedTuple):
    glyph: str
    color: str
    label: str


INDICATORS: Dict[DayState, Indicator] = {
    DayState.COMPLETED: Indicator("✓", "#16a34a", "Climbed"),
    DayState.MISSED: Indicator("✗", "#b91c1c", "Not climbed"),
    # Drawn like a miss; only the label tells them apart.
    DayState.UNRECORDED_PAST: Indicator("✗", "#7f1d1d", "Not logged"),
    DayState.UNRECORDED_FUTURE: Indicator("", "#1f2430", "Upcoming"),
    DayState.OUTSIDE_VISIBLE_MONTH: Indicator("", "rgba(0,0,0,0)", ""),
}


def fig_style(fig: go.Figure, h: int) -> go.Figure:
    fig.update_layout(
        height=h,
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(8,12,24,.46)",
        margin=dict(l=0, r=0, t=8, b=0),
        font=dict(family="Outfit, sans-serif", size=13, color=COL["text"]),
        xaxis=dict(showgrid=False, zeroline=False, tickfont=dict(color=COL["muted"])),
        yaxis=dict(showgrid=False, zeroline=False, showticklabels=False),
        showlegend=False,
        dragmode=False,
    )
    return fig


def month_start(d: dt.date) -> dt.date:
    return d.replace(day=1)


def shift_month(view_month: dt.date, delta: int) -> dt.date:
    idx = view_month.year * 12 + (view_month.month - 1) + delta
    return dt.date(idx // 12, idx % 12 + 1, 1)


def month_title(view_month: dt.date) -> str:
    return f"{calendar.month_name[view_month.month]} {view_month.year}"


def month_frame(view_month: dt.date, log: ClimbLog, today: dt.date) -> pd.DataFrame:
    cal = calendar.Calendar(firstweekday=FIRST_WEEKDAY)
    rows: List[Dict[str, Any]] = []
    for week, days in enumerate(cal.monthdatescalendar(view_month.year, view_month.month)):
        for wd, d in enumerate(days):
            rows.append(
                {
                    "Date": d,
                    "key": day_key(d),
                    "day": d.day,
                    "week": week,
                    "wd": wd,
                    "state": classify(d, log, today, view_month),
                    "selectable": is_selectable(d, today),
                }
            )
    return pd.DataFrame(rows)


def month_figure(frame: pd.DataFrame) -> go.Figure:
    weeks = int(frame["week"].max()) + 1 if not frame.empty else 0
    x = frame.loc[frame["state"] != DayState.OUTSIDE_VISIBLE_MONTH].copy()
    fig = go.Figure()
    if not x.empty:
        ind = [INDICATORS[s] for s in x["state"]]
        x["color"] = [i.color for i in ind]
        x["cell"] = [f"{d}<br>{i.glyph}" if i.glyph else str(d) for d, i in zip(x["day"], ind)]
        x["hover"] = [
            f"{calendar.month_abbr[d.month]} {d.day}, {d.year}<br>{i.label}" for d, i in zip(x["Date"], ind)
        ]
        fig.add_trace(
            go.Scatter(
                x=x["wd"],
                y=x["week"],
                mode="markers+text",
                text=x["cell"],
                textposition="middle center",
                textfont=dict(color=COL["text"], size=13),
                customdata=x[["key"]],
                hovertext=x["hover"],
                hovertemplate="%{hovertext}<extra></extra>",
                marker=dict(
                    size=46,
                    symbol="square",
                    color=x["color"],
                    opacity=[1.0 if s else 0.45 for s in x["selectable"]],
                    line=dict(color=COL["line"], width=1),
                ),
            )
        )
    fig.update_xaxes(tickmode="array", tickvals=list(range(7)), ticktext=WEEKDAY_LABELS, side="top", range=[-0.6, 6.6])
    fig.update_yaxes(autorange="reversed")
    return fig_style(fig, 40 + 58 * max(weeks, 1))


def clicked_day(points: Iterable[Mapping[str, Any]], today: dt.date) -> Optional[dt.date]:
    """Turn plotly selection points into the clicked day; future days never come through."""
    for p in points:
        cd = p.get("customdata")
        if not cd:
            continue
        raw = cd[0] if isinstance(cd, (list, tuple)) else cd
        try:
            d = parse_day_key(str(raw))
        except ValueError:
            continue
        if is_selectable(d, today):
            return d
    return None
