import pytest

from core.eligibility import EligibilityCatalog, offline_criteria
from core.integrations import IntegrationError
from core.models import EligibilityPayload, EmploymentCategory
from core.presets import LOAN_PRODUCTS


@pytest.mark.parametrize("loan_type", list(LOAN_PRODUCTS))
def test_one_criterion_per_category(loan_type):
    criteria = offline_criteria(loan_type)
    assert len(criteria) == 8
    assert {c.employment_category for c in criteria} == set(EmploymentCategory)


def test_salary_advance_only_salaried():
    criteria = {c.employment_category: c for c in offline_criteria("SALARY_ADVANCE")}
    assert criteria[EmploymentCategory.SALARIED].eligible
    assert not criteria[EmploymentCategory.STUDENT].eligible
    assert criteria[EmploymentCategory.STUDENT].reason == "Only available for salaried employees"


def test_unknown_loan_type_accepts_everyone():
    criteria = offline_criteria("MYSTERY_LOAN")
    assert all(c.eligible for c in criteria)
    assert all(c.minimum_income == 25000 for c in criteria)


def test_minimums_and_reasons():
    gold = offline_criteria("GOLD_LOAN")
    assert all(c.minimum_income == 0 for c in gold)
    assert gold[0].reason == "Eligible - No income verification required"
    home = {c.employment_category: c for c in offline_criteria("HOME_LOAN")}
    assert home[EmploymentCategory.SALARIED].minimum_duration_months == 24
    assert home[EmploymentCategory.UNEMPLOYED].reason == "Not eligible - Requires stable income source"
    edu = {c.employment_category: c for c in offline_criteria("EDUCATION_LOAN")}
    assert edu[EmploymentCategory.STUDENT].reason.startswith("Eligible with mandatory co-applicant")


def test_selectable_never_includes_ineligible():
    catalog = EligibilityCatalog()
    for loan_type in LOAN_PRODUCTS:
        selectable = catalog.selectable_categories(loan_type)
        ineligible = {c.employment_category for c in catalog.get_eligible_categories(loan_type) if not c.eligible}
        assert not ineligible & set(selectable)
    assert catalog.selectable_categories("EDUCATION_LOAN") == [EmploymentCategory.STUDENT]


class _StubClient:
    def __init__(self, fail=False):
        self.fail = fail
        self.calls = 0

    def get_eligibility(self, loan_type):
        self.calls += 1
        if self.fail:
            raise IntegrationError("connection refused")
        return EligibilityPayload.model_validate(
            {
                "loanType": loan_type,
                "employmentTypes": [
                    {"employmentType": "SALARIED", "eligible": True, "reason": "ok", "minimumDurationMonths": 12},
                    {"employmentType": "STUDENT", "eligible": False, "reason": "no"},
                    {"employmentType": "STUDENT", "eligible": True, "reason": "duplicate"},
                ],
                "minimumIncome": 30000,
                "maxFOIR": 70,
            }
        )


def test_server_lookup_is_memoized_per_loan_type():
    client = _StubClient()
    catalog = EligibilityCatalog(client)
    first = catalog.lookup("PERSONAL_LOAN")
    again = catalog.lookup("PERSONAL_LOAN")
    assert first is again
    assert client.calls == 1
    catalog.lookup("HOME_LOAN")
    assert client.calls == 2
    catalog.clear()
    catalog.lookup("PERSONAL_LOAN")
    assert client.calls == 3


def test_server_criteria_mapping():
    catalog = EligibilityCatalog(_StubClient())
    lookup = catalog.lookup("PERSONAL_LOAN")
    assert lookup.source == "server"
    assert len(lookup.criteria) == 2
    assert lookup.criteria[0].minimum_duration_months == 12
    assert lookup.criteria[0].minimum_income == 30000
    assert catalog.selectable_categories("PERSONAL_LOAN") == [EmploymentCategory.SALARIED]


def test_failure_degrades_to_show_all():
    client = _StubClient(fail=True)
    catalog = EligibilityCatalog(client)
    lookup = catalog.lookup("PERSONAL_LOAN")
    assert lookup.degraded
    assert lookup.notice
    assert len(lookup.criteria) == 8
    assert all(c.eligible and not c.pre_validated for c in lookup.criteria)
    assert catalog.selectable_categories("PERSONAL_LOAN") == list(EmploymentCategory)


def test_failed_service_is_called_once_until_cleared():
    client = _StubClient(fail=True)
    catalog = EligibilityCatalog(client)
    for _ in range(3):
        catalog.lookup("PERSONAL_LOAN")
        catalog.notice("PERSONAL_LOAN")
        catalog.selectable_categories("PERSONAL_LOAN")
        catalog.get_eligible_categories("PERSONAL_LOAN")
    assert client.calls == 1

    client.fail = False
    catalog.clear()
    assert catalog.lookup("PERSONAL_LOAN").source == "server"
    assert client.calls == 2
