from __future__ import annotations

import math
from pathlib import Path
from typing import List, Optional, Tuple

import plotly.graph_objects as go
from plotly.subplots import make_subplots

from retrograde_sim.analysis.cursor import display_state, format_number, snap_to_grid
from retrograde_sim.physics.apparent import observer_target_distance_au
from retrograde_sim.physics.orbit import OrbitalElements, orbit_state_at, orbital_period_days
from retrograde_sim.simulation.engine import RetrogradeSeries
from retrograde_sim.visualization.sky_view import (
    ZODIAC_SIGN_WIDTH_DEG,
    project_to_sky_view,
    zodiac_label_positions,
)


def _orbit_track(elements: OrbitalElements, t0_day: float, n_points: int = 360) -> Tuple[List[float], List[float]]:
    # One full period of the ellipse, closed
    period = orbital_period_days(elements.a_au)
    if not math.isfinite(period):
        return [], []
    xs = []
    ys = []
    for i in range(n_points + 1):
        st = orbit_state_at(elements, t0_day + period * i / n_points, t0_day)
        xs.append(st.x_au)
        ys.append(st.y_au)
    return xs, ys


def build_longitude_figure(series: RetrogradeSeries) -> go.Figure:
    """
    Two stacked panels sharing the day axis:
      - unwrapped apparent longitude (deg)
      - dλ/dt (deg/day)
    Retrograde intervals are shaded and stationary days marked.
    """
    fig = make_subplots(rows=2, cols=1, shared_xaxes=True, vertical_spacing=0.06)

    fig.add_trace(go.Scatter(
        x=series.times_day, y=series.lambda_unwrapped_deg,
        mode="lines",
        name="λ unwrapped",
    ), row=1, col=1)

    fig.add_trace(go.Scatter(
        x=series.times_day, y=series.dlambda_dt_deg_per_day,
        mode="lines",
        name="dλ/dt",
    ), row=2, col=1)

    for iv in series.retrograde_intervals:
        fig.add_vrect(
            x0=iv.start_day, x1=iv.end_day,
            fillcolor="crimson", opacity=0.15, line_width=0,
        )

    for t in series.stationary_days:
        fig.add_vline(x=t, line_dash="dot", line_color="gray")

    fig.add_hline(y=0.0, line_color="black", line_width=1, row=2, col=1)

    fig.update_layout(
        title=f"Apparent motion of {series.target} seen from {series.observer}",
        margin=dict(l=40, r=20, t=50, b=40),
        legend=dict(orientation="h"),
    )
    fig.update_yaxes(title_text="λ (deg)", row=1, col=1)
    fig.update_yaxes(title_text="dλ/dt (deg/day)", row=2, col=1)
    fig.update_xaxes(title_text="Model day", row=2, col=1)
    return fig


def build_orbit_figure(series: RetrogradeSeries, cursor_day: Optional[float] = None) -> go.Figure:
    """
    Top-down heliocentric view: both orbits, both bodies at the cursor day,
    the observer -> target line of sight, and a zodiac ring for reference.
    """
    day = snap_to_grid(series, series.window_start_day if cursor_day is None else cursor_day)

    fig = go.Figure()
    fig.add_trace(go.Scatter(x=[0.0], y=[0.0], mode="markers", name="Sun",
                             marker=dict(size=12, color="gold")))

    bodies = [(series.observer, series.observer_elements), (series.target, series.target_elements)]
    states = []
    for name, elements in bodies:
        xs, ys = _orbit_track(elements, series.t0_day)
        fig.add_trace(go.Scatter(x=xs, y=ys, mode="lines", name=f"{name} orbit"))

        st = orbit_state_at(elements, day, series.t0_day)
        states.append(st)
        fig.add_trace(go.Scatter(x=[st.x_au], y=[st.y_au], mode="markers", name=name,
                                 marker=dict(size=8)))

    obs, tgt = states
    distance = observer_target_distance_au(obs, tgt)
    fig.add_trace(go.Scatter(x=[obs.x_au, tgt.x_au], y=[obs.y_au, tgt.y_au], mode="lines",
                             name=f"line of sight ({format_number(distance, 2)} AU)",
                             line=dict(dash="dash")))

    aphelia = [el.a_au * (1.0 + el.e) for _, el in bodies if el.is_valid()]
    if aphelia:
        for lab in zodiac_label_positions(1.15 * max(aphelia), 0.0, 0.0, y_axis_down=False):
            fig.add_annotation(x=lab.x, y=lab.y, text=lab.label, showarrow=False,
                               font=dict(color="gray"))

    fig.update_layout(
        title=f"Orbit view at day {format_number(day, 1)}",
        xaxis=dict(title="x (AU)"),
        yaxis=dict(title="y (AU)", scaleanchor="x", scaleratio=1),
        margin=dict(l=40, r=20, t=50, b=40),
        legend=dict(orientation="h"),
    )
    return fig


def _break_at_seam(
    times_day: List[float],
    lambda_wrapped_deg: List[float],
) -> Tuple[List[Optional[float]], List[Optional[float]]]:
    # None gaps keep plotly from drawing a streak across the strip at 0/360
    xs: List[Optional[float]] = []
    ys: List[Optional[float]] = []
    prev = math.nan
    for t, lam in zip(times_day, lambda_wrapped_deg):
        if math.isfinite(lam) and math.isfinite(prev) and abs(lam - prev) > 180.0:
            xs.append(None)
            ys.append(None)
        xs.append(lam if math.isfinite(lam) else None)
        ys.append(t)
        prev = lam
    return xs, ys


def build_sky_strip_figure(series: RetrogradeSeries, cursor_day: Optional[float] = None) -> go.Figure:
    """
    The target's track against the zodiac as seen from the observer:
    wrapped longitude (deg) across, model day down. Retrograde loops show
    up as the track doubling back.
    """
    day = snap_to_grid(series, series.window_start_day if cursor_day is None else cursor_day)

    xs, ys = _break_at_seam(series.times_day, series.lambda_wrapped_deg)

    fig = go.Figure()
    fig.add_trace(go.Scatter(x=xs, y=ys, mode="lines", name=f"{series.target} track"))

    ds = display_state(series, day)
    fig.add_trace(go.Scatter(
        x=[ds.lambda_deg if math.isfinite(ds.lambda_deg) else None],
        y=[ds.cursor_day if math.isfinite(ds.cursor_day) else None],
        mode="markers", name=f"{series.target} at cursor", marker=dict(size=10),
    ))

    for k in range(13):
        fig.add_vline(x=k * ZODIAC_SIGN_WIDTH_DEG, line_color="lightgray", line_width=1)
    for lab in zodiac_label_positions(1.0, 0.0, 0.0):
        fig.add_annotation(x=project_to_sky_view(lab.angle_deg, 1.0), xref="x domain",
                           y=1.02, yref="paper", text=lab.label, showarrow=False)

    fig.update_layout(
        title=f"{series.target} seen from {series.observer}: sky strip",
        xaxis=dict(title="Apparent longitude (deg)", range=[0.0, 360.0]),
        yaxis=dict(title="Model day", autorange="reversed"),
        margin=dict(l=40, r=20, t=70, b=40),
        legend=dict(orientation="h"),
    )
    return fig


def render_longitude_plot(series: RetrogradeSeries, out_html: str = "out/retrograde_longitude.html") -> str:
    fig = build_longitude_figure(series)
    Path(out_html).parent.mkdir(parents=True, exist_ok=True)
    fig.write_html(out_html, auto_open=False)
    return out_html


def render_orbit_view(
    series: RetrogradeSeries,
    cursor_day: Optional[float] = None,
    out_html: str = "out/retrograde_orbits.html",
) -> str:
    fig = build_orbit_figure(series, cursor_day)
    Path(out_html).parent.mkdir(parents=True, exist_ok=True)
    fig.write_html(out_html, auto_open=False)
    return out_html


def render_sky_strip(
    series: RetrogradeSeries,
    cursor_day: Optional[float] = None,
    out_html: str = "out/retrograde_sky.html",
) -> str:
    fig = build_sky_strip_figure(series, cursor_day)
    Path(out_html).parent.mkdir(parents=True, exist_ok=True)
    fig.write_html(out_html, auto_open=False)
    return out_html
