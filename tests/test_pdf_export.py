import pytest

from core.calculators import amortization_schedule
from core.models import ApplicationContext, ApplicationFacts, UnderwritingProposal, VerificationSignals
from core.underwriting import evaluate_proposal, proposal_rules
from export.pdf_export import build_sanction_pdf, summary_rows


def _decision(rate=10.5, tenure=60):
    ctx = ApplicationContext(
        application_id="A-17", loan_type="PERSONAL_LOAN", requested_amount=500000, requested_tenure_months=60
    )
    proposal = UnderwritingProposal(
        requested_amount=500000,
        requested_tenure_months=60,
        proposed_amount=500000,
        proposed_tenure_months=tenure,
        proposed_rate=rate,
    )
    facts = ApplicationFacts(monthly_income=90000, signals=VerificationSignals(credit_score=770, risk_level="LOW"))
    return ctx, proposal, evaluate_proposal(proposal, facts), proposal_rules(proposal, facts)


def test_summary_rows_describe_terms():
    ctx, proposal, result, _ = _decision()
    rows = dict(summary_rows(ctx, proposal, result))
    assert rows["Loan Type"] == "Personal Loan"
    assert rows["Monthly EMI"].startswith("Rs. ")
    assert rows["FOIR"].endswith("(EXCELLENT)")


def test_summary_rows_without_emi():
    ctx, proposal, result, _ = _decision(tenure=0)
    labels = [r[0] for r in summary_rows(ctx, proposal, result)]
    assert "Monthly EMI" not in labels
    assert "FOIR" not in labels


def test_clean_decision_exports():
    ctx, proposal, result, rules = _decision()
    assert rules == []
    pdf = build_sanction_pdf({
        "rows": summary_rows(ctx, proposal, result),
        "rationale": result.rationale,
        "warnings": [],
        "schedule": amortization_schedule(500000, 10.5, 60),
        "checklist": [{"label": "PAN Card", "checked": True}, {"label": "Salary Slips", "checked": False}],
    })
    assert pdf.startswith(b"%PDF")


def test_warn_level_findings_export_without_reason():
    ctx, proposal, result, rules = _decision(rate=14.0)
    assert rules and all(r.severity == "warn" for r in rules)
    data = {
        "rows": summary_rows(ctx, proposal, result),
        "warnings": [r.model_dump() for r in rules],
    }
    assert build_sanction_pdf(data).startswith(b"%PDF")
    data["override_reason"] = "Pricing approved by credit committee <ref 42>"
    assert build_sanction_pdf(data).startswith(b"%PDF")


def test_critical_findings_require_override_reason():
    ctx, proposal, result, _ = _decision()
    data = {
        "rows": summary_rows(ctx, proposal, result),
        "warnings": [{"code": "FRAUD_FLAG", "severity": "critical", "message": "Active fraud case on file"}],
        "override_reason": "   ",
    }
    with pytest.raises(ValueError, match="override_reason"):
        build_sanction_pdf(data)
    data["override_reason"] = "Case closed by investigations"
    assert build_sanction_pdf(data).startswith(b"%PDF")
