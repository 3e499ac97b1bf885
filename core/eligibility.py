"""Employment-category eligibility per loan product."""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from core.integrations import IntegrationError
from core.models import EligibilityCriterion, EligibilityLookup, EmploymentCategory
from core.presets import (
    DEFAULT_MIN_INCOME,
    ELIGIBILITY_MATRIX,
    MIN_EMPLOYMENT_MONTHS,
    MIN_INCOME_BY_LOAN,
)

logger = logging.getLogger(__name__)

FALLBACK_NOTICE = (
    "Eligibility service is unavailable. All employment categories are shown; "
    "eligibility will be confirmed during review."
)


def _loan_key(loan_type) -> str:
    return getattr(loan_type, "value", str(loan_type))


def eligibility_reason(loan_type: str, category: str, eligible: bool) -> str:
    if eligible:
        if loan_type == "EDUCATION_LOAN":
            return "Eligible with mandatory co-applicant (parent/guardian)"
        if loan_type == "GOLD_LOAN":
            return "Eligible - No income verification required"
        if loan_type == "TWO_WHEELER_LOAN":
            return "Eligible with co-applicant" if category == "STUDENT" else "Eligible - Standard verification"
        if loan_type in ("BUSINESS_LOAN", "WORKING_CAPITAL_LOAN"):
            return "Eligible - Business financials required"
        return "Eligible for this loan type"

    if loan_type == "SALARY_ADVANCE":
        return "Only available for salaried employees"
    if loan_type in ("BUSINESS_LOAN", "WORKING_CAPITAL_LOAN"):
        return "Only available for business owners and self-employed"
    if loan_type == "EDUCATION_LOAN":
        return "Only available for students (with co-applicant)"
    if loan_type in ("CROP_LOAN", "FARM_EQUIPMENT_LOAN"):
        return "Only available for farmers and agricultural workers"
    if loan_type == "COMMERCIAL_VEHICLE_LOAN":
        return "Only available for business purposes"
    if category == "UNEMPLOYED":
        return "Not eligible - Requires stable income source"
    if category == "STUDENT":
        return "Not eligible - Requires co-applicant or choose student-specific loans"
    return "Not eligible for this loan type"


def offline_criteria(loan_type) -> List[EligibilityCriterion]:
    """Criteria from the built-in product matrix, one per employment category.

    Loan types missing from the matrix accept every category.
    """

    key = _loan_key(loan_type)
    allowed = ELIGIBILITY_MATRIX.get(key)
    minimum_income = MIN_INCOME_BY_LOAN.get(key, DEFAULT_MIN_INCOME)
    durations = MIN_EMPLOYMENT_MONTHS.get(key, {})
    criteria = []
    for category in EmploymentCategory:
        eligible = allowed is None or category.value in allowed
        criteria.append(
            EligibilityCriterion(
                loan_type=key,
                employment_category=category,
                eligible=eligible,
                reason=eligibility_reason(key, category.value, eligible),
                minimum_duration_months=durations.get(category.value),
                minimum_income=minimum_income,
            )
        )
    return criteria


class EligibilityCatalog:
    """Per-session eligibility lookups, memoized by loan type.

    With no client the built-in matrix is served.  When a configured client
    fails, every category is offered unvalidated with a notice instead of
    blocking the intake.  The fallback is memoized like any other result, so a
    hung service costs one timeout per loan type; :meth:`clear` retries it.
    """

    def __init__(self, client=None) -> None:
        self.client = client
        self._cache: Dict[str, EligibilityLookup] = {}

    def lookup(self, loan_type) -> EligibilityLookup:
        key = _loan_key(loan_type)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Eligibility cache hit for %s", key)
            return cached

        if self.client is None:
            result = EligibilityLookup(
                loan_type=key,
                criteria=offline_criteria(key),
                minimum_income=MIN_INCOME_BY_LOAN.get(key, DEFAULT_MIN_INCOME),
                source="offline",
            )
        else:
            try:
                payload = self.client.get_eligibility(key)
            except IntegrationError as exc:
                logger.warning("Eligibility lookup for %s failed, showing all categories: %s", key, exc)
                result = self._fallback(key)
            else:
                result = self._from_payload(key, payload)

        self._cache[key] = result
        return result

    def _from_payload(self, key: str, payload) -> EligibilityLookup:
        seen = set()
        criteria = []
        for item in payload.employment_types:
            if item.employment_type in seen:
                continue
            seen.add(item.employment_type)
            criteria.append(
                EligibilityCriterion(
                    loan_type=key,
                    employment_category=item.employment_type,
                    eligible=item.eligible,
                    reason=item.reason,
                    minimum_duration_months=item.minimum_duration_months or None,
                    minimum_income=payload.minimum_income,
                )
            )
        return EligibilityLookup(
            loan_type=key, criteria=criteria, minimum_income=payload.minimum_income, source="server"
        )

    def _fallback(self, key: str) -> EligibilityLookup:
        criteria = [
            EligibilityCriterion(
                loan_type=key,
                employment_category=category,
                eligible=True,
                reason="Eligibility not verified",
                minimum_income=0.0,
                pre_validated=False,
            )
            for category in EmploymentCategory
        ]
        return EligibilityLookup(
            loan_type=key, criteria=criteria, minimum_income=0.0, source="fallback", notice=FALLBACK_NOTICE
        )

    def get_eligible_categories(self, loan_type) -> List[EligibilityCriterion]:
        return list(self.lookup(loan_type).criteria)

    def selectable_categories(self, loan_type) -> List[EmploymentCategory]:
        """Categories the intake may offer at step 1; ineligible ones never appear."""
        return [c.employment_category for c in self.lookup(loan_type).criteria if c.eligible]

    def notice(self, loan_type) -> Optional[str]:
        return self.lookup(loan_type).notice

    def clear(self) -> None:
        self._cache.clear()
