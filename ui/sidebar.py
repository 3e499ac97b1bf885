import pandas as pd
import streamlit as st

from core.presets import CATEGORY_LABELS, LOAN_PRODUCTS
from core.state import get_catalog, resolve_context
from core.utils import format_inr


def eligibility_frame(lookup) -> pd.DataFrame:
    rows = [
        {
            "Employment": CATEGORY_LABELS.get(c.employment_category.value, c.employment_category.value),
            "Eligible": "✓" if c.eligible else "✗",
            "Min. months": c.minimum_duration_months,
            "Reason": c.reason,
        }
        for c in lookup.criteria
    ]
    return pd.DataFrame(rows, columns=["Employment", "Eligible", "Min. months", "Reason"])


def render_application_sidebar():
    """Sidebar with the application being worked on and its product eligibility."""
    st.sidebar.header("Application")
    st.sidebar.text_input(
        "Application ID", key="application_id", help="Leave blank to work without a saved application."
    )
    st.sidebar.selectbox(
        "Loan Type", list(LOAN_PRODUCTS), format_func=lambda k: LOAN_PRODUCTS[k]["label"], key="loan_type"
    )
    st.sidebar.number_input("Requested Amount", min_value=0.0, step=10000.0, key="requested_amount")
    st.sidebar.number_input("Tenure (months)", min_value=1, step=6, key="requested_tenure")

    ctx = resolve_context()
    notice = st.session_state.get("context_notice")
    if notice:
        st.sidebar.warning(notice)

    lookup = get_catalog().lookup(ctx.loan_type)
    st.sidebar.subheader("Eligibility")
    if lookup.notice:
        st.sidebar.warning(lookup.notice)
    if lookup.degraded and st.sidebar.button("Retry eligibility service", key="eligibility_retry"):
        get_catalog().clear()
        st.rerun()
    st.sidebar.dataframe(eligibility_frame(lookup), hide_index=True)
    if lookup.minimum_income:
        st.sidebar.caption(f"Minimum monthly income: {format_inr(lookup.minimum_income)}")
    if st.session_state["settings"].offline:
        st.sidebar.caption("Offline mode: using the built-in product rules.")
    return ctx
