import pytest

from core.calculators import compute_foir
from core.models import ApplicationFacts, FOIRStatus, UnderwritingProposal, VerificationSignals
from core.underwriting import evaluate_proposal, explain_recommendation, recommend_rate, validate_proposal


@pytest.mark.parametrize(
    "score,risk,expected",
    [
        (760, "LOW", 10.5),
        (750, "LOW", 10.5),
        (799, "MEDIUM", 11.5),
        (720, "LOW", 11.5),
        (700, "MEDIUM", 11.5),
        (660, "MEDIUM", 12.5),
        (690, "LOW", 13.5),
        (760, "HIGH", 13.5),
        (560, "LOW", 14.5),
        (505, "MEDIUM", 15.5),
        (499, "LOW", 16.5),
        (None, "LOW", 16.5),
    ],
)
def test_rate_tiers_first_match_wins(score, risk, expected):
    assert recommend_rate(score, risk, False, 0) == expected


def test_fraud_and_defaults_do_not_move_the_rate():
    assert recommend_rate(480, "HIGH", True, 1) == 16.5
    assert recommend_rate(760, "LOW", True, 3) == 10.5


def test_low_risk_borderline_beats_medium_with_higher_score():
    assert recommend_rate(750, "LOW") < recommend_rate(799, "MEDIUM")


def test_rationale_priority_cascade():
    fraud = VerificationSignals(credit_score=480, risk_level="HIGH", has_defaults=True, active_fraud_cases=1)
    text = explain_recommendation(fraud)
    assert "fraud" in text.lower()
    assert "default" not in text.lower()

    defaults = VerificationSignals(credit_score=780, risk_level="LOW", has_defaults=True)
    assert "default history" in explain_recommendation(defaults)

    clean = VerificationSignals(credit_score=780, risk_level="LOW")
    assert explain_recommendation(clean).startswith("Approval recommended")

    unknown = VerificationSignals()
    assert "insufficient data" in explain_recommendation(unknown)


def _proposal(**kw):
    base = dict(
        requested_amount=500000,
        requested_tenure_months=60,
        proposed_amount=500000,
        proposed_tenure_months=60,
        proposed_rate=10.5,
    )
    base.update(kw)
    return UnderwritingProposal(**base)


def _facts(income=100000, existing=0, score=760, risk="LOW"):
    return ApplicationFacts(
        monthly_income=income,
        existing_obligations=existing,
        signals=VerificationSignals(credit_score=score, risk_level=risk),
    )


def test_clean_proposal_has_no_warnings():
    assert validate_proposal(_proposal(), _facts()) == []


def test_all_checks_fire_together():
    warnings = validate_proposal(
        _proposal(proposed_amount=900000, proposed_tenure_months=84, proposed_rate=15.0), _facts(income=30000)
    )
    assert len(warnings) == 4
    text = " ".join(warnings)
    assert "exceeds the requested" in text
    assert "84 months" in text
    assert "FOIR" in text
    assert "points above" in text


def test_rate_deviation_tolerance_is_exclusive():
    assert validate_proposal(_proposal(proposed_rate=12.5), _facts()) == []
    assert validate_proposal(_proposal(proposed_rate=8.5), _facts()) == []
    assert len(validate_proposal(_proposal(proposed_rate=8.4), _facts())) == 1


def test_undefined_emi_is_a_warning_not_an_exception():
    result = evaluate_proposal(_proposal(proposed_tenure_months=0), _facts())
    assert result.monthly_emi is None
    assert result.foir_status is None
    assert any("undefined" in w for w in result.warnings)


def test_evaluate_proposal_figures():
    facts = _facts(income=80000, existing=10000)
    result = evaluate_proposal(_proposal(), facts)
    assert result.recommended_rate == 10.5
    assert abs(result.monthly_emi * 60 - result.total_repayment) <= 1
    expected = compute_foir(80000, 10000, result.monthly_emi)
    assert result.foir_ratio == expected.foir_percentage
    assert result.foir_status == FOIRStatus.EXCELLENT
    assert result.rationale.startswith("Approval recommended")


def test_only_high_risk_triggers_rejection_clause():
    assert explain_recommendation(VerificationSignals(credit_score=700, risk_level="HIGH")).startswith(
        "Immediate rejection"
    )
    very_high = explain_recommendation(VerificationSignals(credit_score=700, risk_level="VERY_HIGH"))
    assert very_high.startswith("Manual review required: good credit score 700")
    assert "insufficient data" in explain_recommendation(VerificationSignals(risk_level="CRITICAL"))


def test_extreme_tenure_degrades_instead_of_raising():
    result = evaluate_proposal(_proposal(proposed_tenure_months=100000), _facts())
    assert result.monthly_emi is not None
    assert result.monthly_emi == pytest.approx(500000 * 10.5 / 1200, abs=0.01)
