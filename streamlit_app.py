from __future__ import annotations

import math
import time
from typing import cast

import numpy as np
import plotly.graph_objects as go
import streamlit as st

from bodies.body import Body, Light
from bodies.colors import parse_hex_color
from bodies.errors import PlanetError
from bodies.palettes import preset
from planetsmith.editor import (
    EditorState,
    NewSeed,
    RegenerationThrottle,
    Reposition,
    RepositionFromClick,
    SetLight,
    SetOptions,
    SetPalette,
    SetResolution,
)
from planetsmith.logs import configure_logging
from planetsmith.settings import get_settings
from ui.styles import inject_global_styles
from viz.render import GeneratedPlanet
from worldgen.terrain import STRATEGIES, TIE_BREAKS, TerrainOptions

st.set_page_config(page_title="Planetsmith", page_icon="*", layout="wide")
inject_global_styles()

ORBIT_EXTENT = 1.3
ORBIT_MARKERS = 72

settings = get_settings()
configure_logging(settings.log_level, settings.log_format)


def _editor() -> EditorState:
    if "editor" not in st.session_state:
        state = EditorState(
            body=Body.orbiting(
                angle=settings.angle_rad,
                distance=settings.distance_km,
                radius=settings.radius_km,
                palette=preset(settings.palette),
            ),
            resolution=int(settings.resolution),
            light=Light(sols=settings.sols),
            options=TerrainOptions(
                strategy=settings.strategy,
                tie_break=settings.tie_break,
                octaves=settings.octaves,
            ),
            throttle=RegenerationThrottle(interval=float(settings.debounce_s)),
        )
        state.regenerate()
        st.session_state["editor"] = state
        st.session_state["palette_name"] = settings.palette
    return cast(EditorState, st.session_state["editor"])


def _stats_figure(planet: GeneratedPlanet) -> go.Figure:
    named = planet.named_stats()
    names = list(named)
    counts = list(named.values())
    fig = go.Figure(go.Bar(x=names, y=counts, marker_color="#38bdf8"))
    fig.update_layout(
        height=280,
        margin=dict(l=10, r=10, t=30, b=10),
        title="Pixels per category",
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
    )
    return fig


def _orbit_figure(state: EditorState) -> go.Figure:
    """Sun at the center, clickable orbit ring, body marker. Screen y points down."""
    t = np.linspace(-math.pi, math.pi, ORBIT_MARKERS, endpoint=False)
    angle = state.body.angle
    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=np.cos(t), y=np.sin(t), mode="markers", hoverinfo="none",
            marker=dict(size=10, color="rgba(148,163,184,0.35)"),
        )
    )
    fig.add_trace(go.Scatter(x=[0.0], y=[0.0], mode="markers", hoverinfo="skip", marker=dict(size=18, color="#facc15")))
    fig.add_trace(
        go.Scatter(
            x=[math.cos(angle)], y=[math.sin(angle)], mode="markers", hoverinfo="skip",
            marker=dict(size=14, color="#38bdf8"),
        )
    )
    fig.update_layout(
        height=240,
        showlegend=False,
        clickmode="event+select",
        margin=dict(l=0, r=0, t=0, b=0),
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        xaxis=dict(visible=False, range=[-ORBIT_EXTENT, ORBIT_EXTENT]),
        yaxis=dict(visible=False, range=[ORBIT_EXTENT, -ORBIT_EXTENT], scaleanchor="x"),
    )
    return fig


state = _editor()
now = time.monotonic()

with st.sidebar:
    st.header("Body")
    palette_name = st.selectbox(
        "Palette",
        ["earthlike", "sunlike"],
        index=["earthlike", "sunlike"].index(st.session_state["palette_name"]),
    )
    if palette_name != st.session_state["palette_name"]:
        st.session_state["palette_name"] = palette_name
        state.dispatch(SetPalette(preset(palette_name)), now)

    orbit = st.plotly_chart(
        _orbit_figure(state),
        key="orbit",
        on_select="rerun",
        selection_mode="points",
        use_container_width=True,
    )
    # Only the orbit ring (trace 0) moves the body.
    points = [p for p in (orbit.selection.points if orbit else []) if p.get("curve_number") == 0]
    if not points:
        st.session_state.pop("orbit_click", None)
    else:
        click = (float(points[0]["x"]), float(points[0]["y"]))
        # The selection persists across reruns; act on each new click once.
        if click != st.session_state.get("orbit_click"):
            st.session_state["orbit_click"] = click
            state.dispatch(RepositionFromClick.from_plot(click[0], click[1], ORBIT_EXTENT), now)

    angle = st.slider(
        "Angle around the sun (rad)",
        min_value=-3.14159,
        max_value=3.14159,
        value=float(round(state.body.angle, 3)),
        step=0.01,
    )
    if abs(angle - state.body.angle) > 5e-3:
        state.dispatch(Reposition(angle), now)

    resolution = st.select_slider("Resolution", options=[32, 64, 128, 256, 512], value=state.resolution)
    if resolution != state.resolution:
        state.dispatch(SetResolution(int(resolution)), now)

    st.header("Terrain")
    strategy = st.radio("Elevation source", list(STRATEGIES), index=list(STRATEGIES).index(state.options.strategy))
    tie_break = st.radio("Band tie-break", list(TIE_BREAKS), index=list(TIE_BREAKS).index(state.options.tie_break))
    if strategy != state.options.strategy or tie_break != state.options.tie_break:
        state.dispatch(
            SetOptions(TerrainOptions(strategy=strategy, tie_break=tie_break, octaves=state.options.octaves)),
            now,
        )

    st.header("Sun")
    lit = st.toggle("Simulate sunlight", value=state.light is not None)
    sun_hex = st.color_picker("Sun color", value="#FFFFFF", disabled=not lit)
    sols = st.slider("Intensity (sols)", 0.0, 3.0, value=float(settings.sols), step=0.05, disabled=not lit)
    try:
        light = Light(color=parse_hex_color(sun_hex), sols=sols) if lit else None
    except PlanetError as exc:
        st.error(str(exc))
        light = state.light
    if light != state.light:
        state.dispatch(SetLight(light), now)

    if st.button("Randomize Seed", use_container_width=True):
        state.dispatch(NewSeed(), now)

# A newer widget event reruns the script and cancels this wait, so rapid
# changes collapse into one render.
if state.throttle.pending:
    time.sleep(state.throttle.remaining(time.monotonic()))
    try:
        state.poll(time.monotonic())
    except PlanetError as exc:
        st.error(str(exc))

st.title("Planetsmith")
planet = state.planet
if planet is not None:
    left, right = st.columns([3, 2])
    with left:
        st.image(planet.png_bytes(), use_container_width=True)
        st.markdown(f"<div class='seed-label'>seed {state.body.seed}</div>", unsafe_allow_html=True)
    with right:
        st.plotly_chart(_stats_figure(planet), use_container_width=True)
        st.download_button(
            "Download PNG",
            data=planet.png_bytes(),
            file_name=f"planet-{state.body.seed}.png",
            mime="image/png",
        )
