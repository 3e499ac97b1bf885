"""Five-step applicant intake whose step-2 schema depends on the employment category.

Every transition takes an :class:`IntakeDraft` and returns a new one; nothing
is mutated in place.  :class:`IntakeWorkflow` wraps the pure functions with the
per-session pieces: eligibility gating, the audit trail, response tickets and
submission.
"""
from __future__ import annotations

import logging
import typing
from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Type

from pydantic import BaseModel, ValidationError

from core.audit import AuditLog
from core.calculators import indicative_emi, resolve_foir
from core.eligibility import EligibilityCatalog
from core.integrations import IntegrationError
from core.models import (
    AffordabilityQuote,
    ApplicationContext,
    BankDetails,
    CompanyDetails,
    EmploymentCategory,
    FinancialObligations,
    FreelancerDetails,
    IncomeDetails,
    IntakeDraft,
    ProfessionalDetails,
    RetiredDetails,
    StudentDetails,
    UnemployedDetails,
)
from core.presets import (
    DEFAULT_INCOME_TYPES,
    FORCED_INCOME_TYPES,
    INCOME_FLOORS,
)
from core.utils import format_inr, nz

logger = logging.getLogger(__name__)

TOTAL_STEPS = 5
STEP_TITLES = {
    1: "Employment Type",
    2: "Employment Details",
    3: "Income Details",
    4: "Banking Details",
    5: "Financial Obligations",
}

# Step-2 schema per category: (payload key, model).  ``None`` puts the fields
# at the top level of the submission.
DETAIL_SCHEMAS: Dict[EmploymentCategory, List[Tuple[Optional[str], Type[BaseModel]]]] = {
    EmploymentCategory.SALARIED: [(None, CompanyDetails)],
    EmploymentCategory.SELF_EMPLOYED: [(None, CompanyDetails)],
    EmploymentCategory.BUSINESS_OWNER: [(None, CompanyDetails)],
    EmploymentCategory.PROFESSIONAL: [(None, CompanyDetails), ("professionalDetails", ProfessionalDetails)],
    EmploymentCategory.FREELANCER: [("freelancerDetails", FreelancerDetails)],
    EmploymentCategory.RETIRED: [("retiredDetails", RetiredDetails)],
    EmploymentCategory.STUDENT: [("studentDetails", StudentDetails)],
    EmploymentCategory.UNEMPLOYED: [("unemployedDetails", UnemployedDetails)],
}

STEP_SECTIONS: Dict[int, Tuple[str, Type[BaseModel]]] = {
    3: ("income", IncomeDetails),
    4: ("bank", BankDetails),
    5: ("obligations", FinancialObligations),
}
SECTIONS = ("details", "income", "bank", "obligations")

# Step-2 field whose value seeds the monthly income on the way to step 3.
INCOME_SOURCES = {
    EmploymentCategory.STUDENT: "guardian_monthly_income",
    EmploymentCategory.RETIRED: "monthly_pension_amount",
    EmploymentCategory.FREELANCER: "average_monthly_income",
}


class SubmissionError(Exception):
    """The draft could not be submitted; it is left on the workflow for a retry."""

    def __init__(self, message: str, errors: Optional[Dict[str, str]] = None) -> None:
        super().__init__(message)
        self.errors = errors or {}


@dataclass(frozen=True)
class FieldSpec:
    name: str
    label: str
    kind: str
    required: bool
    section: str
    options: Tuple[str, ...] = ()
    read_only: bool = False

    @property
    def key(self) -> str:
        return f"{self.section}.{self.name}"


@dataclass(frozen=True)
class StepTransition:
    draft: IntakeDraft
    moved: bool
    errors: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ResponseTicket:
    draft_id: str
    step: int


def _unwrap_optional(annotation):
    if typing.get_origin(annotation) is typing.Union:
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _kind(annotation) -> Tuple[str, Tuple[str, ...]]:
    ann = _unwrap_optional(annotation)
    if typing.get_origin(ann) is typing.Literal:
        return "select", tuple(typing.get_args(ann))
    if isinstance(ann, type) and issubclass(ann, Enum):
        return "select", tuple(m.value for m in ann)
    if ann is date:
        return "date", ()
    if ann is int:
        return "integer", ()
    if ann is float:
        return "number", ()
    return "text", ()


def _specs(model: Type[BaseModel], section: str) -> List[FieldSpec]:
    specs = []
    for name, info in model.model_fields.items():
        kind, options = _kind(info.annotation)
        specs.append(
            FieldSpec(
                name=name,
                label=info.description or name.replace("_", " ").title(),
                kind=kind,
                required=info.is_required(),
                section=section,
                options=options,
            )
        )
    return specs


def _category(value) -> Optional[EmploymentCategory]:
    if value is None or value == "":
        return None
    return EmploymentCategory(value)


def fields_for_category(category) -> List[FieldSpec]:
    """Every step-2 field for ``category``, required ones first within each model."""
    cat = _category(category)
    if cat is None:
        return []
    specs: List[FieldSpec] = []
    for _, model in DETAIL_SCHEMAS[cat]:
        specs.extend(_specs(model, "details"))
    return specs


def required_fields_for(category) -> List[FieldSpec]:
    return [s for s in fields_for_category(category) if s.required]


def fields_for_step(step: int, category=None) -> List[FieldSpec]:
    if step == 2:
        return fields_for_category(category)
    if step in STEP_SECTIONS:
        section, model = STEP_SECTIONS[step]
        specs = _specs(model, section)
        cat = _category(category)
        if step == 3 and cat is not None and cat.value in FORCED_INCOME_TYPES:
            specs = [
                replace(s, read_only=True) if s.name == "income_type" else s
                for s in specs
            ]
        return specs
    return []


def start_draft(context: Optional[ApplicationContext] = None) -> IntakeDraft:
    return IntakeDraft(context=context)


def select_category(draft: IntakeDraft, category, allowed: Optional[Sequence] = None) -> IntakeDraft:
    """Install ``category``'s step-2 schema.

    Re-selecting the current category is a no-op.  Switching wipes every
    step-2 value and touched flag so no field of the old category can keep
    step 2 invalid, and resets the income type to the new category's default.
    A monthly income still equal to the value seeded from the old category's
    details is dropped with them; an income the applicant typed is kept.
    """

    cat = _category(category)
    if cat is None:
        raise ValueError("An employment category is required")
    if allowed is not None and cat not in [_category(a) for a in allowed]:
        raise ValueError(f"{cat.value} is not eligible for this loan")
    if draft.category == cat:
        return draft
    income = dict(draft.income)
    seeded = _seeded_income(draft)
    if seeded is not None and income.get("monthly_income") == seeded:
        income.pop("monthly_income")
    income["income_type"] = DEFAULT_INCOME_TYPES[cat.value]
    touched = frozenset(t for t in draft.touched if not t.startswith("details."))
    logger.info("Employment category set to %s (was %s)", cat.value, getattr(draft.category, "value", None))
    return draft.model_copy(update={"category": cat, "details": {}, "income": income, "touched": touched})


def update_field(draft: IntakeDraft, section: str, name: str, value: Any) -> IntakeDraft:
    if section not in SECTIONS:
        raise KeyError(f"Unknown section {section!r}")
    if section == "details":
        if name not in {s.name for s in fields_for_category(draft.category)}:
            raise KeyError(f"{name!r} is not a field of {getattr(draft.category, 'value', 'no category')}")
    if section == "income" and name == "income_type" and draft.category is not None:
        forced = FORCED_INCOME_TYPES.get(draft.category.value)
        if forced is not None and value != forced:
            raise ValueError(f"Income type is fixed to {forced} for {draft.category.value}")
    values = dict(getattr(draft, section))
    values[name] = value
    return draft.model_copy(update={section: values, "touched": draft.touched | {f"{section}.{name}"}})


def _seeded_income(draft: IntakeDraft) -> Optional[float]:
    """Monthly income implied by the current step-2 data, if the category implies one."""
    cat = draft.category
    if cat == EmploymentCategory.UNEMPLOYED:
        return 0.0
    if cat in INCOME_SOURCES:
        source = draft.details.get(INCOME_SOURCES[cat])
        if source is None or source == "":
            return None
        return nz(source)
    return None


def autopopulate_income(draft: IntakeDraft) -> IntakeDraft:
    """Seed monthly income from step-2 data; safe to call repeatedly."""
    amount = _seeded_income(draft)
    if amount is None or draft.income.get("monthly_income") == amount:
        return draft
    return draft.model_copy(update={"income": {**draft.income, "monthly_income": amount}})


def _friendly(err: dict, labels: Dict[str, str], field_name: str) -> str:
    label = labels.get(field_name, field_name.replace("_", " ").title())
    kind = err.get("type", "")
    if kind == "missing" or err.get("input") is None:
        return f"{label} is required"
    if kind == "string_pattern_mismatch":
        return f"Enter a valid {label}"
    if kind == "greater_than_equal" and err.get("ctx", {}).get("ge") == 0:
        return f"{label} cannot be negative"
    if kind == "value_error":
        return str(err.get("ctx", {}).get("error") or err["msg"])
    return f"{label}: {err['msg']}"


def _validate_models(models: Sequence[Type[BaseModel]], data: Dict[str, Any]) -> Tuple[List[BaseModel], Dict[str, str]]:
    instances: List[BaseModel] = []
    errors: Dict[str, str] = {}
    for model in models:
        labels = {n: (i.description or n) for n, i in model.model_fields.items()}
        try:
            instances.append(model.model_validate(data))
        except ValidationError as exc:
            for err in exc.errors():
                loc = err.get("loc") or ()
                name = str(loc[0]) if loc else "__all__"
                if name in model.model_fields:
                    errors.setdefault(name, _friendly(err, labels, name))
                else:
                    errors.setdefault(name, str(err.get("ctx", {}).get("error") or err["msg"]))
    return instances, errors


def validate_step(draft: IntakeDraft, step: Optional[int] = None) -> Dict[str, str]:
    """Map of field name to message for ``step`` (default: the current step)."""
    step = draft.step if step is None else step
    if step == 1:
        return {} if draft.category is not None else {"category": "Select an employment type"}
    if draft.category is None:
        return {"category": "Select an employment type"}
    if step == 2:
        models = [m for _, m in DETAIL_SCHEMAS[draft.category]]
        return _validate_models(models, draft.details)[1]
    if step in STEP_SECTIONS:
        section, model = STEP_SECTIONS[step]
        errors = _validate_models([model], getattr(draft, section))[1]
        if step == 3 and "monthly_income" not in errors:
            floor = INCOME_FLOORS.get(draft.category.value, 0.0)
            if nz(draft.income.get("monthly_income")) < floor:
                errors["monthly_income"] = f"Minimum monthly income is {format_inr(floor)}"
        if step == 3 and "income_type" not in errors:
            forced = FORCED_INCOME_TYPES.get(draft.category.value)
            current = draft.income.get("income_type")
            if forced is not None and getattr(current, "value", current) != forced:
                errors["income_type"] = f"Income type must be {forced}"
        return errors
    raise ValueError(f"Step must be between 1 and {TOTAL_STEPS}")


def is_step_valid(draft: IntakeDraft, step: Optional[int] = None) -> bool:
    return not validate_step(draft, step)


def advance(draft: IntakeDraft) -> StepTransition:
    """Move forward one step when the current step validates.

    A failed attempt marks the step's fields touched so the form can show
    their errors.  Leaving step 2 runs :func:`autopopulate_income` once.
    """

    errors = validate_step(draft)
    if errors:
        names = {s.key for s in fields_for_step(draft.step, draft.category)}
        if draft.step == 1:
            names = {"category"}
        return StepTransition(draft.model_copy(update={"touched": draft.touched | names}), False, errors)
    if draft.step >= TOTAL_STEPS:
        return StepTransition(draft, False, {})
    moved = draft.model_copy(update={"step": draft.step + 1})
    if draft.step == 2:
        moved = autopopulate_income(moved)
    logger.info("Intake %s moved to step %d", draft.draft_id, moved.step)
    return StepTransition(moved, True, {})


def retreat(draft: IntakeDraft) -> IntakeDraft:
    if draft.step <= 1:
        return draft
    return draft.model_copy(update={"step": draft.step - 1})


def foir_preview(draft: IntakeDraft, client=None) -> AffordabilityQuote:
    """Live affordability preview from the income and obligations entered so far.

    Existing obligations are the declared loan EMIs; the new EMI is that of the
    requested loan at the product's indicative rate.  Advisory only.
    """

    income = nz(draft.income.get("monthly_income")) + nz(draft.income.get("additional_income"))
    existing = nz(draft.obligations.get("existing_loan_emi"))
    new_emi = 0.0
    if draft.context is not None:
        ctx = draft.context
        new_emi = indicative_emi(ctx.loan_type, ctx.requested_amount, ctx.requested_tenure_months)
    return resolve_foir(max(income, 0.0), existing, new_emi, client=client)


def progress_percentage(draft: IntakeDraft) -> int:
    return round(draft.step / TOTAL_STEPS * 100)


def build_submission(draft: IntakeDraft) -> Dict[str, Any]:
    """Normalized camelCase payload for the application service.

    Raises :class:`SubmissionError` listing the first incomplete step's errors.
    """

    for step in range(1, TOTAL_STEPS + 1):
        errors = validate_step(draft, step)
        if errors:
            raise SubmissionError(f"{STEP_TITLES[step]} is incomplete", errors)

    payload: Dict[str, Any] = {"employmentType": draft.category.value}
    for key, model in DETAIL_SCHEMAS[draft.category]:
        dumped = model.model_validate(draft.details).model_dump(mode="json", by_alias=True, exclude_none=True)
        if key is None:
            payload.update(dumped)
        else:
            payload[key] = dumped
    for _, (section, model) in sorted(STEP_SECTIONS.items()):
        payload.update(
            model.model_validate(getattr(draft, section)).model_dump(mode="json", by_alias=True, exclude_none=True)
        )
    return payload


def draft_from_submission(payload: Dict[str, Any], context: Optional[ApplicationContext] = None) -> IntakeDraft:
    """Rebuild an editable draft from a submitted payload.

    Only the submitted category's fields are restored; keys belonging to other
    categories are ignored.
    """

    cat = EmploymentCategory(payload["employmentType"])
    details: Dict[str, Any] = {}
    for key, model in DETAIL_SCHEMAS[cat]:
        source = payload if key is None else payload.get(key) or {}
        details.update(model.model_validate(source).model_dump(exclude_none=True))
    sections = {
        section: model.model_validate(payload).model_dump(exclude_none=True)
        for section, model in STEP_SECTIONS.values()
    }
    income = sections["income"]
    income["income_type"] = getattr(income.get("income_type"), "value", income.get("income_type"))
    return IntakeDraft(
        context=context,
        category=cat,
        details=details,
        income=income,
        bank=sections["bank"],
        obligations=sections["obligations"],
    )


class IntakeWorkflow:
    """One applicant's intake session."""

    def __init__(self, context: Optional[ApplicationContext] = None, catalog: Optional[EligibilityCatalog] = None,
                 client=None, user: str = "applicant", draft: Optional[IntakeDraft] = None) -> None:
        self.client = client
        self.catalog = catalog if catalog is not None else EligibilityCatalog(client)
        self.user = user
        self.audit = AuditLog()
        self.draft = draft if draft is not None else start_draft(context)
        self.submitted = False
        self.discarded = False

    @property
    def context(self) -> Optional[ApplicationContext]:
        return self.draft.context

    def _ensure_open(self) -> None:
        if self.discarded:
            raise RuntimeError("This intake has been discarded")
        if self.submitted:
            raise RuntimeError("This intake has already been submitted")

    def selectable_categories(self) -> List[EmploymentCategory]:
        if self.context is None:
            return list(EmploymentCategory)
        return self.catalog.selectable_categories(self.context.loan_type)

    def eligibility_notice(self) -> Optional[str]:
        if self.context is None:
            return None
        return self.catalog.notice(self.context.loan_type)

    def select_category(self, category) -> IntakeDraft:
        self._ensure_open()
        old = self.draft.category
        self.draft = select_category(self.draft, category, allowed=self.selectable_categories())
        if self.draft.category != old:
            self.audit.record(
                self.user, "employment_category", getattr(old, "value", None), self.draft.category.value,
                action="category_switch",
            )
        return self.draft

    def update_field(self, section: str, name: str, value: Any) -> IntakeDraft:
        self._ensure_open()
        old = getattr(self.draft, section, {}).get(name)
        self.draft = update_field(self.draft, section, name, value)
        if old != value:
            self.audit.record(self.user, f"{section}.{name}", old, value)
        return self.draft

    def errors(self) -> Dict[str, str]:
        return validate_step(self.draft)

    def next_step(self) -> StepTransition:
        self._ensure_open()
        transition = advance(self.draft)
        self.draft = transition.draft
        return transition

    def previous_step(self) -> IntakeDraft:
        self._ensure_open()
        self.draft = retreat(self.draft)
        return self.draft

    def preview(self) -> AffordabilityQuote:
        return foir_preview(self.draft, self.client)

    def progress(self) -> int:
        return progress_percentage(self.draft)

    def issue_ticket(self) -> ResponseTicket:
        """Stamp an outgoing request with the draft and step it was made for."""
        return ResponseTicket(self.draft.draft_id, self.draft.step)

    def deliver(self, ticket: ResponseTicket, apply: Callable[[IntakeDraft], IntakeDraft]) -> bool:
        """Apply a late response only if its draft is still live and on the same step."""
        if self.discarded or ticket.draft_id != self.draft.draft_id or ticket.step != self.draft.step:
            logger.debug("Dropping stale response for draft %s step %d", ticket.draft_id, ticket.step)
            return False
        self.draft = apply(self.draft)
        return True

    def submit(self) -> Any:
        self._ensure_open()
        payload = build_submission(self.draft)
        if self.context is None:
            raise SubmissionError("No loan application is attached to this intake")
        if self.client is None:
            raise SubmissionError("Application service is not configured; the draft has been kept")
        try:
            response = self.client.save_financial_details(self.context.application_id, payload)
        except IntegrationError as exc:
            logger.warning("Submission for application %s failed: %s", self.context.application_id, exc)
            raise SubmissionError(str(exc)) from exc
        self.submitted = True
        logger.info("Application %s financial details submitted", self.context.application_id)
        return response

    def discard(self) -> None:
        self.discarded = True
        logger.info("Intake %s discarded", self.draft.draft_id)
