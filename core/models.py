from __future__ import annotations

import uuid
from datetime import date
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from core.presets import (
    EMAIL_PATTERN,
    IFSC_PATTERN,
    MAX_ACCEPTABLE_FOIR,
    PHONE_PATTERN,
    PINCODE_PATTERN,
)


class EmploymentCategory(str, Enum):
    SALARIED = "SALARIED"
    SELF_EMPLOYED = "SELF_EMPLOYED"
    BUSINESS_OWNER = "BUSINESS_OWNER"
    PROFESSIONAL = "PROFESSIONAL"
    FREELANCER = "FREELANCER"
    RETIRED = "RETIRED"
    STUDENT = "STUDENT"
    UNEMPLOYED = "UNEMPLOYED"


class LoanType(str, Enum):
    PERSONAL_LOAN = "PERSONAL_LOAN"
    SALARY_ADVANCE = "SALARY_ADVANCE"
    HOME_LOAN = "HOME_LOAN"
    PROPERTY_LOAN = "PROPERTY_LOAN"
    LOAN_AGAINST_PROPERTY = "LOAN_AGAINST_PROPERTY"
    CAR_LOAN = "CAR_LOAN"
    TWO_WHEELER_LOAN = "TWO_WHEELER_LOAN"
    COMMERCIAL_VEHICLE_LOAN = "COMMERCIAL_VEHICLE_LOAN"
    BUSINESS_LOAN = "BUSINESS_LOAN"
    WORKING_CAPITAL_LOAN = "WORKING_CAPITAL_LOAN"
    EQUIPMENT_FINANCE = "EQUIPMENT_FINANCE"
    CROP_LOAN = "CROP_LOAN"
    FARM_EQUIPMENT_LOAN = "FARM_EQUIPMENT_LOAN"
    EDUCATION_LOAN = "EDUCATION_LOAN"
    PROFESSIONAL_COURSE_LOAN = "PROFESSIONAL_COURSE_LOAN"
    GOLD_LOAN = "GOLD_LOAN"
    CREDIT_CARD = "CREDIT_CARD"
    OVERDRAFT_FACILITY = "OVERDRAFT_FACILITY"


class RiskLevel(str, Enum):
    VERY_LOW = "VERY_LOW"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    VERY_HIGH = "VERY_HIGH"
    CRITICAL = "CRITICAL"
    INVALID = "INVALID"
    UNKNOWN = "UNKNOWN"


class IncomeType(str, Enum):
    SALARY = "SALARY"
    BUSINESS = "BUSINESS"
    FREELANCE = "FREELANCE"
    PENSION = "PENSION"
    RENTAL = "RENTAL"
    INVESTMENT = "INVESTMENT"
    OTHER = "OTHER"


class FOIRStatus(str, Enum):
    EXCELLENT = "EXCELLENT"
    GOOD = "GOOD"
    ACCEPTABLE = "ACCEPTABLE"
    HIGH_RISK = "HIGH_RISK"


class WireModel(BaseModel):
    """Base for records exchanged with the portal backend (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Eligibility
# ---------------------------------------------------------------------------


class CategoryEligibility(WireModel):
    employment_type: EmploymentCategory
    eligible: bool
    reason: str = ""
    minimum_duration_months: Optional[int] = None


class EligibilityPayload(WireModel):
    loan_type: LoanType
    employment_types: List[CategoryEligibility]
    minimum_income: float = 0.0
    max_foir: float = Field(MAX_ACCEPTABLE_FOIR, alias="maxFOIR")


class EligibilityCriterion(BaseModel):
    model_config = ConfigDict(frozen=True)

    loan_type: str
    employment_category: EmploymentCategory
    eligible: bool
    reason: str = ""
    minimum_duration_months: Optional[int] = None
    minimum_income: float = 0.0
    pre_validated: bool = True


class EligibilityLookup(BaseModel):
    model_config = ConfigDict(frozen=True)

    loan_type: str
    criteria: List[EligibilityCriterion]
    minimum_income: float = 0.0
    source: Literal["server", "offline", "fallback"] = "offline"
    notice: Optional[str] = None

    @property
    def degraded(self) -> bool:
        return self.source == "fallback"


# ---------------------------------------------------------------------------
# Affordability and EMI
# ---------------------------------------------------------------------------


class FOIRResult(WireModel):
    model_config = ConfigDict(frozen=True)

    monthly_income: float
    existing_obligations: float
    new_emi: float
    total_obligations: float
    disposable_income: float
    foir_percentage: float
    acceptable: bool
    status: FOIRStatus
    message: str


class AffordabilityQuote(BaseModel):
    result: FOIRResult
    offline: bool = False
    notice: Optional[str] = None


class EmiBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    principal: float
    annual_rate: float
    tenure_months: int
    monthly_emi: float
    total_interest: float
    total_repayment: float


# ---------------------------------------------------------------------------
# Underwriting
# ---------------------------------------------------------------------------


class VerificationSignals(WireModel):
    credit_score: Optional[int] = None
    risk_level: RiskLevel = Field(RiskLevel.UNKNOWN, alias="riskType")
    has_defaults: bool = False
    active_fraud_cases: int = 0
    total_missed_payments: int = 0
    data_found: bool = True

    @field_validator("risk_level", mode="before")
    @classmethod
    def _known_risk_level(cls, v):
        if isinstance(v, RiskLevel):
            return v
        try:
            return RiskLevel(str(v).upper())
        except ValueError:
            return RiskLevel.UNKNOWN

    @field_validator("has_defaults", "data_found", mode="before")
    @classmethod
    def _null_flag(cls, v):
        return False if v is None else v

    @field_validator("active_fraud_cases", "total_missed_payments", mode="before")
    @classmethod
    def _null_count(cls, v):
        return 0 if v is None else v


class ApplicationContext(WireModel):
    application_id: str = Field(alias="id")
    loan_type: LoanType
    requested_amount: float = 0.0
    requested_tenure_months: int = Field(0, alias="tenureMonths")

    @field_validator("application_id", mode="before")
    @classmethod
    def _as_text(cls, v):
        return str(v)


class ApplicationFacts(BaseModel):
    monthly_income: float
    existing_obligations: float = 0.0
    signals: VerificationSignals = Field(default_factory=VerificationSignals)


class UnderwritingProposal(BaseModel):
    requested_amount: float
    requested_tenure_months: int
    proposed_amount: float
    proposed_tenure_months: int
    proposed_rate: float
    decision_reason: str = ""


class UnderwritingResult(BaseModel):
    monthly_emi: Optional[float] = None
    total_interest: Optional[float] = None
    total_repayment: Optional[float] = None
    foir_ratio: Optional[float] = None
    foir_status: Optional[FOIRStatus] = None
    warnings: List[str] = Field(default_factory=list)
    recommended_rate: float
    rationale: str


# ---------------------------------------------------------------------------
# Intake sections. Each category's step-2 schema is one or more of the
# detail models below; steps 3-5 share one model each.
# ---------------------------------------------------------------------------


class SectionModel(WireModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    @model_validator(mode="before")
    @classmethod
    def _blank_to_none(cls, data):
        if isinstance(data, dict):
            return {k: (None if isinstance(v, str) and not v.strip() else v) for k, v in data.items()}
        return data


def _not_future(v: Optional[date]) -> Optional[date]:
    if v is not None and v > date.today():
        raise ValueError("Date cannot be in the future")
    return v


class CompanyDetails(SectionModel):
    company_name: str = Field(..., max_length=200, description="Company Name")
    job_title: str = Field(..., max_length=100, description="Job Title")
    employment_start_date: date = Field(..., description="Employment Start Date")
    company_address: str = Field(..., max_length=200, description="Company Address")
    company_city: Optional[str] = Field(None, max_length=100, description="City")
    company_state: Optional[str] = Field(None, max_length=50, description="State")
    company_pincode: Optional[str] = Field(None, pattern=PINCODE_PATTERN, description="PIN Code")
    work_phone: Optional[str] = Field(None, pattern=PHONE_PATTERN, description="Work Phone")
    work_email: Optional[str] = Field(None, pattern=EMAIL_PATTERN, description="Work Email")

    @field_validator("employment_start_date")
    @classmethod
    def _start_not_future(cls, v):
        return _not_future(v)


class ProfessionalDetails(SectionModel):
    profession_type: Literal[
        "DOCTOR", "LAWYER", "CHARTERED_ACCOUNTANT", "ARCHITECT", "ENGINEER", "CONSULTANT", "OTHER"
    ] = Field(..., description="Profession Type")
    registration_number: str = Field(..., max_length=100, description="Registration Number")
    registration_authority: str = Field(..., max_length=200, description="Registration Authority")
    professional_qualification: str = Field(..., max_length=150, description="Qualification")
    university: Optional[str] = Field(None, max_length=200, description="University")
    year_of_qualification: Optional[int] = Field(None, ge=1950, description="Year of Qualification")
    practice_area: Optional[str] = Field(None, max_length=200, description="Practice Area")


class FreelancerDetails(SectionModel):
    freelance_type: str = Field(..., max_length=150, description="Freelance Type")
    freelance_since: date = Field(..., description="Freelancing Since")
    primary_clients: str = Field(..., description="Primary Clients")
    average_monthly_income: Optional[float] = Field(None, ge=0, description="Average Monthly Income")
    freelance_platform: Optional[str] = Field(None, max_length=200, description="Platform")
    portfolio_url: Optional[str] = Field(None, max_length=255, description="Portfolio URL")

    @field_validator("freelance_since")
    @classmethod
    def _since_not_future(cls, v):
        return _not_future(v)


class RetiredDetails(SectionModel):
    pension_type: Literal["GOVERNMENT", "PRIVATE", "PPF", "MILITARY", "OTHER"] = Field(
        ..., description="Pension Type"
    )
    pension_provider: str = Field(..., max_length=200, description="Pension Provider")
    monthly_pension_amount: float = Field(..., ge=0, description="Monthly Pension Amount")
    retirement_date: date = Field(..., description="Retirement Date")
    previous_employer: str = Field(..., max_length=200, description="Previous Employer")
    previous_designation: str = Field(..., max_length=100, description="Previous Designation")
    years_of_service: Optional[int] = Field(None, ge=0, description="Years of Service")
    ppo_number: Optional[str] = Field(None, max_length=100, description="PPO Number")

    @field_validator("retirement_date")
    @classmethod
    def _retired_not_future(cls, v):
        return _not_future(v)


class StudentDetails(SectionModel):
    institution_name: str = Field(..., max_length=200, description="Institution")
    course_name: str = Field(..., max_length=150, description="Course")
    year_of_study: int = Field(..., ge=1, le=10, description="Year of Study")
    total_course_duration: int = Field(..., ge=1, le=10, description="Course Duration (years)")
    expected_graduation_year: int = Field(..., ge=1950, description="Graduation Year")
    guardian_name: str = Field(..., max_length=150, description="Guardian Name")
    guardian_relation: Literal["FATHER", "MOTHER", "LEGAL_GUARDIAN", "SPOUSE"] = Field(
        ..., description="Guardian Relation"
    )
    guardian_occupation: str = Field(..., max_length=150, description="Guardian Occupation")
    guardian_employer: str = Field(..., max_length=200, description="Guardian Employer")
    guardian_monthly_income: float = Field(..., ge=0, description="Guardian Monthly Income")
    guardian_contact: str = Field(..., pattern=PHONE_PATTERN, description="Guardian Contact")

    @field_validator("total_course_duration")
    @classmethod
    def _year_within_course(cls, v, info):
        year = info.data.get("year_of_study")
        if year is not None and year > v:
            raise ValueError("Year of study cannot exceed course duration")
        return v


class UnemployedDetails(SectionModel):
    unemployment_reason: str = Field(..., max_length=500, description="Reason for Unemployment")
    current_income_source: str = Field(..., max_length=200, description="Current Income Source")


class IncomeDetails(SectionModel):
    income_type: IncomeType = Field(..., description="Income Type")
    monthly_income: float = Field(..., ge=0, description="Monthly Income")
    additional_income: float = Field(0.0, ge=0, description="Additional Income")


class BankDetails(SectionModel):
    bank_name: str = Field(..., max_length=150, description="Bank Name")
    account_number: str = Field(..., max_length=30, description="Account Number")
    ifsc_code: str = Field(..., pattern=IFSC_PATTERN, description="IFSC Code")
    account_type: Literal["SAVINGS", "CURRENT", "SALARY"] = Field(..., description="Account Type")
    branch_name: str = Field(..., max_length=150, description="Branch")
    account_balance: float = Field(..., ge=0, alias="bankAccountBalance", description="Account Balance")

    @field_validator("ifsc_code", mode="before")
    @classmethod
    def _upper(cls, v):
        return v.strip().upper() if isinstance(v, str) else v


class FinancialObligations(SectionModel):
    monthly_expenses: float = Field(..., ge=0, description="Monthly Expenses")
    existing_loan_emi: float = Field(0.0, ge=0, description="Existing Loan EMI")
    credit_card_outstanding: float = Field(0.0, ge=0, description="Credit Card Outstanding")


class IntakeDraft(BaseModel):
    """One application-in-progress. Transitions return a new draft."""

    model_config = ConfigDict(frozen=True)

    draft_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    context: Optional[ApplicationContext] = None
    step: int = 1
    category: Optional[EmploymentCategory] = None
    details: Dict[str, Any] = Field(default_factory=dict)
    income: Dict[str, Any] = Field(default_factory=dict)
    bank: Dict[str, Any] = Field(default_factory=dict)
    obligations: Dict[str, Any] = Field(default_factory=dict)
    touched: FrozenSet[str] = frozenset()
