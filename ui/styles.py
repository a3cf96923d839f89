from __future__ import annotations

import streamlit as st

APP_CSS = r"""
@import url('https://fonts.googleapis.com/css2?family=IBM+Plex+Sans:wght@400;500;600&family=Space+Grotesk:wght@500;600;700&display=swap');

html, body, [class*="st-"] {
  font-family: "IBM Plex Sans", ui-sans-serif, system-ui, sans-serif;
}

h1, h2, h3 {
  font-family: "Space Grotesk", ui-sans-serif, system-ui, sans-serif;
  letter-spacing: -0.02em;
}

/* Night sky behind the body */
[data-testid="stAppViewContainer"] {
  background:
    radial-gradient(900px 700px at 15% 10%, rgba(250, 204, 21, 0.10), rgba(0,0,0,0) 55%),
    linear-gradient(180deg, #0b1020 0%, #111827 100%);
  color: #e5e7eb;
}

[data-testid="stSidebar"] {
  border-right: 1px solid rgba(229, 231, 235, 0.08);
}

/* Keep pixel art crisp when the browser upscales it */
[data-testid="stImage"] img {
  image-rendering: pixelated;
}

.seed-label {
  font-family: ui-monospace, SFMono-Regular, Menlo, monospace;
  font-size: 0.85rem;
  opacity: 0.75;
}
"""


def inject_global_styles() -> None:
    st.markdown(f"<style>{APP_CSS}</style>", unsafe_allow_html=True)
