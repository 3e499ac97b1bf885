from __future__ import annotations

import logging

import pandas as pd

from core.integrations import IntegrationError
from core.models import AffordabilityQuote, EmiBreakdown, FOIRResult, FOIRStatus
from core.presets import (
    DEFAULT_PRODUCT_RATE,
    FOIR_BANDS,
    HIGH_RISK_MESSAGE,
    LOAN_PRODUCTS,
    MAX_ACCEPTABLE_FOIR,
    ZERO_INCOME_MESSAGE,
)
from core.utils import nz, round2

logger = logging.getLogger(__name__)

OFFLINE_NOTICE = "Affordability service unavailable; showing an offline estimate."


class CalculationError(ValueError):
    """Raised when an amortization input makes the result undefined."""


def classify_foir(foir_percentage):
    """Return ``(status, message)`` for a FOIR percentage.

    Bands are inclusive upper bounds evaluated in order, so 40.0 is still
    EXCELLENT and 70.0 is still ACCEPTABLE.
    """

    for upper, status, message in FOIR_BANDS:
        if foir_percentage <= upper:
            return FOIRStatus(status), message
    return FOIRStatus.HIGH_RISK, HIGH_RISK_MESSAGE


def compute_foir(monthly_income, existing_obligations=0.0, new_emi=0.0) -> FOIRResult:
    """Fixed obligation to income ratio for one applicant.

    ``monthly_income`` must be non-negative.  A zero income returns a defined
    HIGH_RISK result with ``foir_percentage == 0`` instead of dividing by zero.
    Disposable income is allowed to go negative.
    """

    income = nz(monthly_income)
    existing = nz(existing_obligations)
    emi = nz(new_emi)
    if income < 0:
        raise ValueError("monthly_income must be non-negative")
    total = existing + emi
    disposable = income - total
    if income == 0:
        return FOIRResult(
            monthly_income=0.0,
            existing_obligations=round2(existing),
            new_emi=round2(emi),
            total_obligations=round2(total),
            disposable_income=round2(disposable),
            foir_percentage=0.0,
            acceptable=False,
            status=FOIRStatus.HIGH_RISK,
            message=ZERO_INCOME_MESSAGE,
        )
    ratio = total / income * 100
    status, message = classify_foir(ratio)
    return FOIRResult(
        monthly_income=round2(income),
        existing_obligations=round2(existing),
        new_emi=round2(emi),
        total_obligations=round2(total),
        disposable_income=round2(disposable),
        foir_percentage=round2(ratio),
        acceptable=ratio <= MAX_ACCEPTABLE_FOIR,
        status=status,
        message=message,
    )


def _emi(principal, r, n):
    if n <= 0:
        raise CalculationError("tenure_months must be positive")
    if abs(r) < 1e-12:
        return principal / n
    try:
        growth = (1 + r) ** n
    except OverflowError:
        # growth / (growth - 1) tends to 1 over very long tenures
        return principal * r
    return principal * r * growth / (growth - 1)


def compute_emi(principal, annual_rate_pct, tenure_months) -> EmiBreakdown:
    """Equated monthly installment with interest and repayment totals.

    Raises ``CalculationError`` when ``tenure_months <= 0``.  A zero rate
    falls back to straight-line division.  ``total_repayment`` is derived from
    the rounded EMI so that ``monthly_emi * tenure_months`` reconciles.
    """

    P = nz(principal)
    rate = nz(annual_rate_pct)
    n = int(nz(tenure_months))
    emi = round2(_emi(P, rate / 12 / 100, n))
    total = round2(emi * n)
    return EmiBreakdown(
        principal=round2(P),
        annual_rate=rate,
        tenure_months=n,
        monthly_emi=emi,
        total_interest=round2(total - P),
        total_repayment=total,
    )


def product_rate(loan_type) -> float:
    key = getattr(loan_type, "value", loan_type)
    return LOAN_PRODUCTS.get(key, {}).get("rate", DEFAULT_PRODUCT_RATE)


def indicative_emi(loan_type, amount, tenure_months) -> float:
    """EMI of a requested loan at the product's indicative rate, 0 when not yet known."""
    if nz(amount) <= 0 or int(nz(tenure_months)) <= 0:
        return 0.0
    return compute_emi(amount, product_rate(loan_type), tenure_months).monthly_emi


def amortization_schedule(principal, annual_rate_pct, tenure_months) -> pd.DataFrame:
    """Month-by-month split of each installment into principal and interest.

    The final row absorbs rounding so the closing balance is exactly zero.
    """

    P = nz(principal)
    n = int(nz(tenure_months))
    r = nz(annual_rate_pct) / 12 / 100
    emi = round2(_emi(P, r, n))
    rows = []
    balance = P
    for month in range(1, n + 1):
        interest = round2(balance * r)
        if month == n:
            principal_part = round2(balance)
            payment = round2(principal_part + interest)
        else:
            payment = emi
            principal_part = round2(payment - interest)
        balance = round2(balance - principal_part)
        rows.append(
            {
                "Month": month,
                "Payment": payment,
                "Principal": principal_part,
                "Interest": interest,
                "Balance": max(balance, 0.0),
            }
        )
    return pd.DataFrame(rows, columns=["Month", "Payment", "Principal", "Interest", "Balance"])


def resolve_foir(monthly_income, existing_obligations=0.0, new_emi=0.0, client=None) -> AffordabilityQuote:
    """Prefer the server-side FOIR calculation and fall back to the local one.

    Without a client the local result is returned as an offline estimate.  A
    failing client is logged and reported through ``notice``; it never raises.
    """

    if client is not None:
        try:
            result = client.calculate_foir(monthly_income, existing_obligations, new_emi)
            return AffordabilityQuote(result=result, offline=False)
        except IntegrationError as exc:
            logger.warning("FOIR service failed, using offline estimate: %s", exc)
            return AffordabilityQuote(
                result=compute_foir(monthly_income, existing_obligations, new_emi),
                offline=True,
                notice=OFFLINE_NOTICE,
            )
    return AffordabilityQuote(
        result=compute_foir(monthly_income, existing_obligations, new_emi),
        offline=True,
    )
