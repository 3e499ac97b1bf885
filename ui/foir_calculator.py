import streamlit as st

from core.calculators import indicative_emi, product_rate, resolve_foir
from core.presets import FOIR_BANDS, LOAN_PRODUCTS
from core.utils import format_inr
from ui.bottombar import render_foir_summary


def render_foir_calculator(client=None):
    """Standalone what-if FOIR calculator, independent of any application."""
    st.subheader("FOIR Calculator")
    st.caption("Check how a new loan EMI would affect the applicant's obligation ratio.")

    c1, c2, c3 = st.columns(3)
    income = c1.number_input("Monthly Income", min_value=0.0, value=50000.0, step=1000.0, key="calc_income")
    existing = c2.number_input("Existing Obligations", min_value=0.0, value=0.0, step=500.0, key="calc_existing")
    derive = st.checkbox("Derive the new EMI from a loan", key="calc_derive")
    if derive:
        d1, d2, d3 = st.columns(3)
        loan_type = d1.selectbox(
            "Loan Type", list(LOAN_PRODUCTS), format_func=lambda k: LOAN_PRODUCTS[k]["label"], key="calc_loan_type"
        )
        amount = d2.number_input("Loan Amount", min_value=0.0, value=500000.0, step=10000.0, key="calc_amount")
        tenure = d3.number_input("Tenure (months)", min_value=1, value=60, step=6, key="calc_tenure")
        new_emi = indicative_emi(loan_type, amount, tenure)
        c3.metric("New EMI", format_inr(new_emi))
        st.caption(f"At the indicative {product_rate(loan_type):.2f}% p.a. for {LOAN_PRODUCTS[loan_type]['label']}.")
    else:
        new_emi = c3.number_input("New EMI", min_value=0.0, value=0.0, step=500.0, key="calc_new_emi")

    quote = resolve_foir(income, existing, new_emi, client=client)
    st.session_state["foir_calc"] = quote.result.model_dump(mode="json")
    render_foir_summary(quote)

    with st.expander("How FOIR bands are read"):
        lower = 0.0
        for upper, status, message in FOIR_BANDS:
            st.markdown(f"- **{lower:g}–{upper:g}%** {status.title()}: {message}")
            lower = upper
        st.markdown(f"- **Above {lower:g}%** High risk")
