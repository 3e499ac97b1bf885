from __future__ import annotations
from typing import Literal, List, Dict, Any, Optional
from pydantic import BaseModel, Field

from core.calculators import compute_foir
from core.models import ApplicationFacts, EmiBreakdown, FOIRStatus, UnderwritingProposal
from core.presets import FOIR_BANDS, RATE_DEVIATION_TOLERANCE
from core.utils import format_inr


class RuleResult(BaseModel):
    code: str
    severity: Literal["info", "warn", "critical"]
    message: str
    context: Dict[str, Any] = Field(default_factory=dict)


def evaluate_proposal_rules(
    proposal: UnderwritingProposal,
    facts: ApplicationFacts,
    recommended_rate: float,
    emi: Optional[EmiBreakdown],
) -> List[RuleResult]:
    """Advisory checks on an officer's proposed terms.

    Every check runs regardless of the others and none of them blocks a
    decision; the officer may override all of them.
    """

    res: List[RuleResult] = []

    if proposal.proposed_amount > proposal.requested_amount:
        res.append(
            RuleResult(
                code="AMOUNT_ABOVE_REQUESTED",
                severity="warn",
                message=(
                    f"Proposed amount {format_inr(proposal.proposed_amount)} exceeds the requested "
                    f"{format_inr(proposal.requested_amount)}."
                ),
                context={"proposed": proposal.proposed_amount, "requested": proposal.requested_amount},
            )
        )

    if proposal.proposed_tenure_months > proposal.requested_tenure_months:
        res.append(
            RuleResult(
                code="TENURE_ABOVE_REQUESTED",
                severity="warn",
                message=(
                    f"Proposed tenure of {proposal.proposed_tenure_months} months exceeds the requested "
                    f"{proposal.requested_tenure_months} months."
                ),
                context={
                    "proposed": proposal.proposed_tenure_months,
                    "requested": proposal.requested_tenure_months,
                },
            )
        )

    if emi is None:
        res.append(
            RuleResult(
                code="EMI_UNDEFINED",
                severity="warn",
                message=f"EMI is undefined for a tenure of {proposal.proposed_tenure_months} months.",
                context={"tenure_months": proposal.proposed_tenure_months},
            )
        )
    else:
        # EMI against income alone; existing obligations feed the result's FOIR, not this check
        foir = compute_foir(facts.monthly_income, 0.0, emi.monthly_emi)
        band_limit = FOIR_BANDS[0][0]
        if foir.status != FOIRStatus.EXCELLENT:
            if foir.monthly_income == 0:
                message = foir.message
            else:
                message = (
                    f"Proposed EMI is {foir.foir_percentage:.2f}% of monthly income ({foir.status.value} FOIR band), "
                    f"above the {band_limit:g}% band."
                )
            res.append(
                RuleResult(
                    code="FOIR_ABOVE_BAND",
                    severity="warn",
                    message=message,
                    context={"actual": foir.foir_percentage, "limit": band_limit},
                )
            )

    deviation = proposal.proposed_rate - recommended_rate
    if abs(deviation) > RATE_DEVIATION_TOLERANCE:
        direction = "above" if deviation > 0 else "below"
        res.append(
            RuleResult(
                code="RATE_DEVIATION",
                severity="warn",
                message=(
                    f"Proposed rate {proposal.proposed_rate:.2f}% is {abs(deviation):.2f} points {direction} "
                    f"the recommended {recommended_rate:.2f}%."
                ),
                context={"proposed": proposal.proposed_rate, "recommended": recommended_rate},
            )
        )

    return res
