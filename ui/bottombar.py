import streamlit as st

from core.utils import format_inr

STATUS_BADGE = {
    "EXCELLENT": "🟢 Excellent",
    "GOOD": "🔵 Good",
    "ACCEPTABLE": "🟡 Acceptable",
    "HIGH_RISK": "🔴 High risk",
}


def render_foir_summary(quote, title: str = "Affordability (FOIR)"):
    """Metrics row for an ``AffordabilityQuote``; advisory only."""
    res = quote.result
    st.markdown(
        """
        <style>
        .lendwise-bottombar {border-top:1px solid #ddd; padding:4px 8px; margin-top:8px;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    with st.container():
        st.markdown('<div class="lendwise-bottombar">', unsafe_allow_html=True)
        st.markdown(f"**{title}**")
        cols = st.columns(5)
        cols[0].metric("Monthly Income", format_inr(res.monthly_income))
        cols[1].metric("Total Obligations", format_inr(res.total_obligations))
        cols[2].metric("Disposable Income", format_inr(res.disposable_income))
        cols[3].metric("FOIR", f"{res.foir_percentage:.2f}%", delta="PASS" if res.acceptable else "CHECK")
        cols[4].metric("Band", STATUS_BADGE.get(res.status.value, res.status.value))
        st.caption(res.message)
        if quote.offline:
            st.caption("Offline estimate. The server calculation prevails once available.")
        if quote.notice:
            st.warning(quote.notice)
        st.markdown("</div>", unsafe_allow_html=True)
