import streamlit as st
from streamlit.components.v1 import html

from core.config import configure_logging
from core.presets import DISCLAIMER
from core.state import get_client, get_workflow, init_state
from ui.decision import render_decision
from ui.foir_calculator import render_foir_calculator
from ui.intake import render_intake
from ui.sidebar import render_application_sidebar
from ui.topbar import render_topbar


def _persist_scroll():
    """Store and restore scroll position without forcing reruns."""

    html(
        """
        <script>
        const pos = sessionStorage.getItem('scrollPos');
        if (pos) window.scrollTo(0, parseInt(pos));
        window.addEventListener('scroll', () => {
            sessionStorage.setItem('scrollPos', window.scrollY);
        });
        </script>
        """,
        height=0,
    )


st.set_page_config(page_title="LENDWISE AFFORDABILITY & UNDERWRITING", layout="wide")
_persist_scroll()
init_state()
configure_logging(st.session_state["settings"].log_level)

if "theme" not in st.session_state:
    st.session_state.theme = "light"
dark_on = st.sidebar.toggle("Dark mode", value=st.session_state.theme == "dark")
st.session_state.theme = "dark" if dark_on else "light"
if st.session_state.theme == "dark":
    st.markdown(
        """
        <style>
        [data-testid=\"stAppViewContainer\"]{background-color:#0e1117;color:#fafafa;}
        </style>
        """,
        unsafe_allow_html=True,
    )

view = render_topbar()
context = render_application_sidebar()

st.title("LOAN AFFORDABILITY & UNDERWRITING")
st.caption("Employment-aware intake • FOIR bands • Risk-tiered pricing • Sanction export")

if view == "intake":
    render_intake(get_workflow(context))
elif view == "calculator":
    render_foir_calculator(get_client())
elif view == "decision":
    render_decision(context, get_client())

st.caption(DISCLAIMER)
