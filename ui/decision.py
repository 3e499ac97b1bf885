"""Loan officer decision panel: recommendation, proposal checks and sanction export."""
import logging

import streamlit as st

from core.audit import AuditLog
from core.calculators import amortization_schedule
from core.integrations import IntegrationError
from core.models import ApplicationFacts, RiskLevel, UnderwritingProposal, VerificationSignals
from core.state import WORKFLOW_KEY
from core.underwriting import evaluate_proposal, proposal_rules, recommend_rate
from core.utils import format_inr, nz
from export.pdf_export import build_sanction_pdf, summary_rows

logger = logging.getLogger(__name__)


def _fetched_signals(ctx, client):
    ss = st.session_state
    cache = ss.setdefault("verification_cache", {})
    if ctx.application_id in cache:
        return cache[ctx.application_id]
    try:
        signals = client.get_verification(ctx.application_id)
    except IntegrationError as exc:
        logger.warning("Verification for %s unavailable: %s", ctx.application_id, exc)
        st.warning("External verification is unavailable; enter the signals manually.")
        return None
    cache[ctx.application_id] = signals
    return signals


def _signals_input(ctx, client) -> VerificationSignals:
    if client is not None and ctx.application_id != "LOCAL":
        signals = _fetched_signals(ctx, client)
        if signals is not None:
            st.caption("Signals from external verification.")
            return signals
    c1, c2, c3, c4 = st.columns(4)
    score = c1.number_input("Credit Score", min_value=300, max_value=900, value=720, step=10, key="uw_score")
    risk = c2.selectbox("Risk Level", [r.value for r in RiskLevel], index=1, key="uw_risk")
    defaults = c3.checkbox("Default history", key="uw_defaults")
    fraud = c4.number_input("Active fraud cases", min_value=0, value=0, step=1, key="uw_fraud")
    return VerificationSignals(credit_score=score, risk_level=risk, has_defaults=defaults, active_fraud_cases=fraud)


def _declared_income() -> float:
    wf = st.session_state.get(WORKFLOW_KEY)
    if wf is None:
        return 50000.0
    income = nz(wf.draft.income.get("monthly_income")) + nz(wf.draft.income.get("additional_income"))
    return income or 50000.0


def render_decision(ctx, client=None):
    st.subheader("Underwriting Decision")
    st.markdown("**Risk signals**")
    signals = _signals_input(ctx, client)
    rec = recommend_rate(signals.credit_score, signals.risk_level, signals.has_defaults, signals.active_fraud_cases)

    st.markdown("**Applicant finances**")
    f1, f2 = st.columns(2)
    income = f1.number_input("Monthly Income", min_value=0.0, value=_declared_income(), step=1000.0, key="uw_income")
    existing = f2.number_input("Existing Obligations", min_value=0.0, value=0.0, step=500.0, key="uw_existing")
    facts = ApplicationFacts(monthly_income=income, existing_obligations=existing, signals=signals)

    st.markdown("**Proposed terms**")
    p1, p2, p3 = st.columns(3)
    amount = p1.number_input(
        "Approved Amount", min_value=0.0, value=float(ctx.requested_amount), step=10000.0, key="uw_amount"
    )
    tenure = p2.number_input(
        "Approved Tenure (months)", min_value=0, value=int(ctx.requested_tenure_months), step=6, key="uw_tenure"
    )
    rate = p3.number_input("Interest Rate (% p.a.)", min_value=0.0, value=rec, step=0.25, key="uw_rate")
    proposal = UnderwritingProposal(
        requested_amount=ctx.requested_amount,
        requested_tenure_months=ctx.requested_tenure_months,
        proposed_amount=amount,
        proposed_tenure_months=tenure,
        proposed_rate=rate,
    )
    result = evaluate_proposal(proposal, facts)
    rules = proposal_rules(proposal, facts)
    st.session_state["decision_result"] = result.model_dump(mode="json")

    st.info(f"Recommended rate {result.recommended_rate:.2f}% p.a. {result.rationale}")
    m1, m2, m3, m4 = st.columns(4)
    if result.monthly_emi is not None:
        m1.metric("Monthly EMI", format_inr(result.monthly_emi))
        m2.metric("Total Interest", format_inr(result.total_interest))
        m3.metric("Total Repayment", format_inr(result.total_repayment))
        m4.metric("FOIR", f"{result.foir_ratio:.2f}%", delta=result.foir_status.value.replace("_", " ").title())
    for w in result.warnings:
        st.warning(w)

    schedule = amortization_schedule(amount, rate, tenure) if tenure > 0 else None
    if schedule is not None:
        with st.expander("Repayment schedule"):
            st.dataframe(schedule, hide_index=True)

    _render_export(ctx, proposal, result, rules, schedule)


def _render_export(ctx, proposal, result, rules, schedule):
    ss = st.session_state
    audit = ss.setdefault("decision_audit", AuditLog())
    if rules:
        st.text_area("Override reason", key="override_reason", help="Recorded with the export while warnings remain.")
    reason = ss.get("override_reason", "") if rules else ""
    data = {
        "rows": summary_rows(ctx, proposal, result),
        "rationale": result.rationale,
        "warnings": [r.model_dump() for r in rules],
        "override_reason": reason,
        "schedule": schedule,
        "checklist": ss.get("doc_checklist", []),
    }
    pdf = build_sanction_pdf(data)
    if st.download_button("Download sanction summary (PDF)", pdf, file_name=f"sanction_{ctx.application_id}.pdf",
                          mime="application/pdf"):
        if rules and reason.strip():
            audit.record_override(ss.get("officer", "loan_officer"), result.warnings, reason)
