"""Labelled form controls driven by ``FieldSpec`` metadata."""
import re
from datetime import date
from typing import Any, Optional

import streamlit as st

from core.intake import FieldSpec

# Guidance shown under each field title, keyed by field name.
FIELD_GUIDANCE = {
    "company_name": "Registered name of the employer or your own business.",
    "job_title": "Designation as printed on the appointment letter or salary slip.",
    "employment_start_date": "Date you joined this employer or started the business.",
    "company_address": "Office address where you work.",
    "company_pincode": "6-digit PIN code.",
    "work_phone": "10-digit number without country code.",
    "registration_number": "Membership or licence number issued by your professional body.",
    "registration_authority": "e.g. Medical Council of India, Bar Council, ICAI.",
    "freelance_since": "Month you started freelancing full time.",
    "primary_clients": "Main clients or platforms you work with.",
    "average_monthly_income": "Used as the starting monthly income on the next step.",
    "monthly_pension_amount": "Net pension credited each month; copied to monthly income.",
    "ppo_number": "Pension Payment Order number, if any.",
    "guardian_monthly_income": "The guardian's income is assessed as the repayment source.",
    "guardian_contact": "10-digit mobile number.",
    "monthly_income": "Net monthly take-home.",
    "additional_income": "Rent, interest or other regular income.",
    "ifsc_code": "11 characters, e.g. SBIN0001234.",
    "account_balance": "Current balance of this account.",
    "monthly_expenses": "Household running costs excluding loan EMIs.",
    "existing_loan_emi": "Total EMIs you pay on other loans; counts toward FOIR.",
    "credit_card_outstanding": "Outstanding card balance today.",
}


def pretty_label(label: str) -> str:
    """Convert field keys to more readable labels."""

    label = re.sub(r"(_|-)+", " ", label)
    return re.sub(r"(?<!^)(?=[A-Z])", " ", label).strip()


def _title(spec: FieldSpec, error: Optional[str]) -> None:
    disp = spec.label or pretty_label(spec.name)
    star = " *" if spec.required else ""
    st.markdown(f"<span title='{disp}'><strong>{disp}{star}</strong></span>", unsafe_allow_html=True)
    help = FIELD_GUIDANCE.get(spec.name, "")
    if help:
        st.caption(help)


def render_field(spec: FieldSpec, value: Any, key: str, error: Optional[str] = None, disabled: bool = False):
    """Draw one control for ``spec`` and return the entered value.

    ``error`` is shown below the control; callers pass it only for touched fields.
    """

    _title(spec, error)
    disabled = disabled or spec.read_only
    if spec.kind == "select":
        options = [""] + list(spec.options)
        current = getattr(value, "value", value) or ""
        index = options.index(current) if current in options else 0
        val = st.selectbox(
            spec.label, options, index=index, key=key, label_visibility="collapsed", disabled=disabled,
            format_func=lambda o: pretty_label(o.title()) if o else "Select...",
        )
        val = val or None
    elif spec.kind == "date":
        val = st.date_input(
            spec.label, value=value if isinstance(value, date) else None, key=key,
            min_value=date(1950, 1, 1), max_value=date.today(), label_visibility="collapsed", disabled=disabled,
        )
    elif spec.kind == "number":
        val = st.number_input(
            spec.label, value=None if value is None else float(value), min_value=0.0, step=1000.0,
            key=key, label_visibility="collapsed", disabled=disabled,
        )
    elif spec.kind == "integer":
        val = st.number_input(
            spec.label, value=None if value is None else int(value), step=1,
            key=key, label_visibility="collapsed", disabled=disabled,
        )
    else:
        val = st.text_input(spec.label, value=value or "", key=key, label_visibility="collapsed", disabled=disabled)
    if error:
        st.error(error)
    return val
