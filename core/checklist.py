"""Document checklist helpers."""
from __future__ import annotations
from typing import Dict, Iterable, List

# Required of every applicant regardless of employment
BASE_DOCUMENTS: List[str] = ["Aadhaar Card", "PAN Card", "Photograph", "Utility Bill"]

DOCS_BY_CATEGORY: Dict[str, List[str]] = {
    "SALARIED": ["Salary Slips", "Appointment Letter", "Bank Statement"],
    "SELF_EMPLOYED": ["Business Registration", "Income Tax Returns", "Business Bank Statement"],
    "BUSINESS_OWNER": [
        "Business Registration",
        "GST Certificate",
        "Company ITR",
        "Financial Statements",
        "Business Bank Statement",
    ],
    "PROFESSIONAL": ["Professional License/Certificate", "Income Tax Returns", "Bank Statement"],
    "FREELANCER": ["Bank Statement"],
    "RETIRED": ["Pension Certificate", "Pension Slips", "Bank Statement"],
    "STUDENT": ["Student ID/Enrollment Certificate", "Guardian Income Proof"],
    "UNEMPLOYED": [],
}


def documents_for_category(category) -> List[str]:
    key = getattr(category, "value", category)
    return list(DOCS_BY_CATEGORY.get(key, []))


def build_document_checklist(categories: Iterable) -> List[str]:
    """Return a de-duplicated list of required documents, identity and address first."""
    docs: List[str] = list(BASE_DOCUMENTS)
    for category in categories:
        if category is None:
            continue
        for doc in documents_for_category(category):
            if doc not in docs:
                docs.append(doc)
    return docs
