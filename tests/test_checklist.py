from core.checklist import BASE_DOCUMENTS, build_document_checklist, documents_for_category
from core.models import EmploymentCategory


def test_build_document_checklist():
    docs = build_document_checklist(["SELF_EMPLOYED", EmploymentCategory.BUSINESS_OWNER])
    assert docs[:4] == BASE_DOCUMENTS
    assert "GST Certificate" in docs
    assert docs.count("Business Registration") == 1
    assert docs.count("Business Bank Statement") == 1
    assert len(docs) == len(set(docs))


def test_unemployed_needs_only_base_documents():
    assert build_document_checklist(["UNEMPLOYED"]) == BASE_DOCUMENTS
    assert build_document_checklist([None]) == BASE_DOCUMENTS


def test_documents_for_category_returns_copy():
    docs = documents_for_category("STUDENT")
    docs.append("Extra")
    assert documents_for_category("STUDENT") == ["Student ID/Enrollment Certificate", "Guardian Income Proof"]
