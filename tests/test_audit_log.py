import pytest

from core.audit import AuditLog


def test_audit_log_records_user_field_and_timestamp():
    log = AuditLog()
    log.record("priya", "income.monthly_income", 40000, 45000)
    assert len(log.entries) == 1
    entry = log.entries[0]
    assert entry.user == "priya"
    assert entry.field == "income.monthly_income"
    assert entry.old_value == 40000
    assert entry.new_value == 45000
    assert entry.action == "edit"
    assert entry.timestamp.tzinfo is not None


def test_override_requires_reason():
    log = AuditLog()
    with pytest.raises(ValueError):
        log.record_override("officer", ["FOIR high"], "   ")
    log.record_override("officer", ["FOIR high"], " Collateral offered ")
    (row,) = log.as_dict()
    assert row["action"] == "override"
    assert row["old"] == ["FOIR high"]
    assert row["new"] == "Collateral offered"


def test_for_field_filters_entries():
    log = AuditLog()
    log.record("a", "bank.ifsc_code", None, "SBIN0001234")
    log.record("a", "bank.bank_name", None, "SBI")
    log.record("a", "bank.ifsc_code", "SBIN0001234", "HDFC0000001")
    assert [e.new_value for e in log.for_field("bank.ifsc_code")] == ["SBIN0001234", "HDFC0000001"]
