import streamlit as st
from core.version import __version__

VIEWS = {
    "intake": "Applicant intake",
    "calculator": "FOIR calculator",
    "decision": "Officer decision",
}


def render_topbar():
    """Render the sticky top bar and return the selected view."""
    st.markdown(
        """
        <style>
        .lendwise-topbar {position:sticky; top:0; background-color:white; z-index:100; padding:4px 8px; border-bottom:1px solid #ddd;}
        .lendwise-topbar div[data-testid="stHorizontalBlock"] {align-items:center;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    with st.container():
        st.markdown('<div class="lendwise-topbar">', unsafe_allow_html=True)
        left, right = st.columns([1, 3])
        with left:
            st.markdown(f"**LENDWISE v{__version__}**")
        with right:
            view_mode = st.radio(
                "View", list(VIEWS), format_func=VIEWS.get, horizontal=True, key="view_mode",
                label_visibility="collapsed",
            )
        st.markdown("</div>", unsafe_allow_html=True)
    return view_mode
