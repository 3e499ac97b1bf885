"""Risk-based rate recommendation and proposal checks for loan officers."""
from __future__ import annotations

import logging
from typing import List, Optional

from core.calculators import CalculationError, compute_emi, compute_foir
from core.models import (
    ApplicationFacts,
    RiskLevel,
    UnderwritingProposal,
    UnderwritingResult,
    VerificationSignals,
)
from core.presets import FLOOR_RATE, RATE_TIERS
from core.rules import RuleResult, evaluate_proposal_rules

logger = logging.getLogger(__name__)


def _risk_key(risk_level) -> str:
    if risk_level is None:
        return RiskLevel.UNKNOWN.value
    return getattr(risk_level, "value", str(risk_level)).upper()


def recommend_rate(credit_score: Optional[int], risk_level, has_defaults: bool = False, active_fraud_cases: int = 0) -> float:
    """Annual rate from the tier table, evaluated top-down, first match wins.

    Default and fraud flags never move the rate; they only change the
    rationale.  A missing credit score lands on the floor rate.
    """

    if credit_score is None:
        return FLOOR_RATE
    risk = _risk_key(risk_level)
    for min_score, risks, rate in RATE_TIERS:
        if credit_score >= min_score and (risks is None or risk in risks):
            return rate
    return FLOOR_RATE


def explain_recommendation(signals: VerificationSignals) -> str:
    """One rationale clause, picked by priority: fraud, then defaults, then score and risk."""
    if signals.active_fraud_cases > 0:
        return (
            f"Immediate rejection recommended: {signals.active_fraud_cases} active fraud case(s) detected."
        )
    if signals.has_defaults:
        return "Flag for compliance review: loan default history found."

    risk = _risk_key(signals.risk_level)
    score = signals.credit_score
    if risk == "HIGH":
        return "Immediate rejection recommended: high risk profile."
    if score is not None:
        if score < 400:
            return f"Immediate rejection recommended: credit score {score} is too low."
        if score < 550:
            return f"Flag for compliance review: credit score {score} is below the minimum threshold."
        if score >= 750 and risk == "LOW":
            return f"Approval recommended: excellent credit profile (score {score}, low risk)."
        if score >= 650:
            return f"Manual review required: good credit score {score}, verify other factors."
        return f"Manual review required: fair credit score {score}."
    if risk == "MEDIUM":
        return "Manual review required: medium risk profile."
    if risk in ("LOW", "VERY_LOW"):
        return "Approval recommended: low risk profile."
    return "Manual review required: insufficient data for an automated decision."


def _emi_or_none(proposal: UnderwritingProposal):
    try:
        return compute_emi(proposal.proposed_amount, proposal.proposed_rate, proposal.proposed_tenure_months)
    except CalculationError as exc:
        logger.info("EMI undefined for proposal: %s", exc)
        return None


def proposal_rules(proposal: UnderwritingProposal, facts: ApplicationFacts) -> List[RuleResult]:
    s = facts.signals
    rate = recommend_rate(s.credit_score, s.risk_level, s.has_defaults, s.active_fraud_cases)
    return evaluate_proposal_rules(proposal, facts, rate, _emi_or_none(proposal))


def validate_proposal(proposal: UnderwritingProposal, facts: ApplicationFacts) -> List[str]:
    """Advisory warning strings; an empty list means the proposal raised no concerns."""
    return [r.message for r in proposal_rules(proposal, facts)]


def evaluate_proposal(proposal: UnderwritingProposal, facts: ApplicationFacts) -> UnderwritingResult:
    s = facts.signals
    rate = recommend_rate(s.credit_score, s.risk_level, s.has_defaults, s.active_fraud_cases)
    emi = _emi_or_none(proposal)
    rules = evaluate_proposal_rules(proposal, facts, rate, emi)
    result = UnderwritingResult(
        warnings=[r.message for r in rules],
        recommended_rate=rate,
        rationale=explain_recommendation(s),
    )
    if emi is None:
        return result
    foir = compute_foir(facts.monthly_income, facts.existing_obligations, emi.monthly_emi)
    return result.model_copy(
        update={
            "monthly_emi": emi.monthly_emi,
            "total_interest": emi.total_interest,
            "total_repayment": emi.total_repayment,
            "foir_ratio": foir.foir_percentage,
            "foir_status": foir.status,
        }
    )
