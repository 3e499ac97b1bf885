import json

import pytest
import requests

from core.config import Settings
from core.integrations import IntegrationError, LendwiseClient
from core.models import EmploymentCategory, FOIRStatus, RiskLevel


class FakeResponse:
    def __init__(self, status_code=200, body=None, raw=None):
        self.status_code = status_code
        self.url = "http://portal.test/x"
        if raw is not None:
            self.content = raw.encode()
        elif body is not None:
            self.content = json.dumps(body).encode()
        else:
            self.content = b""

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        return json.loads(self.content.decode())


@pytest.fixture
def calls(monkeypatch):
    recorded = []
    replies = []

    def fake_request(self, method, url, **kwargs):
        recorded.append({"method": method, "url": url, **kwargs})
        reply = replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    monkeypatch.setattr(requests.Session, "request", fake_request)
    return recorded, replies


def _client():
    return LendwiseClient("http://portal.test/api/", token="t0k", timeout=2.5)


def test_eligibility_request_and_parse(calls):
    recorded, replies = calls
    replies.append(FakeResponse(body={
        "loanType": "HOME_LOAN",
        "employmentTypes": [{"employmentType": "SALARIED", "eligible": True, "reason": "ok"}],
        "minimumIncome": 40000,
        "maxFOIR": 60,
    }))
    payload = _client().get_eligibility("HOME_LOAN")
    assert payload.employment_types[0].employment_type == EmploymentCategory.SALARIED
    assert payload.max_foir == 60
    call = recorded[0]
    assert call["method"] == "GET"
    assert call["url"] == "http://portal.test/api/applicant/eligibility/employment-types"
    assert call["params"] == {"loanType": "HOME_LOAN"}
    assert call["timeout"] == 2.5


def test_foir_calculation_posts_query_params(calls):
    recorded, replies = calls
    replies.append(FakeResponse(body={
        "monthlyIncome": 80000, "existingObligations": 10000, "newEmi": 16000, "totalObligations": 26000,
        "disposableIncome": 54000, "foirPercentage": 32.5, "acceptable": True, "status": "EXCELLENT",
        "message": "Excellent",
    }))
    result = _client().calculate_foir(80000, 10000, 16000)
    assert result.status == FOIRStatus.EXCELLENT
    assert recorded[0]["method"] == "POST"
    assert recorded[0]["params"]["newEmi"] == 16000


def test_verification_normalizes_unknown_risk(calls):
    _, replies = calls
    replies.append(FakeResponse(body={"creditScore": 710, "riskType": "weird", "hasDefaults": None}))
    signals = _client().get_verification("9")
    assert signals.credit_score == 710
    assert signals.risk_level == RiskLevel.UNKNOWN
    assert signals.has_defaults is False


def test_application_id_coerced_to_text(calls):
    _, replies = calls
    replies.append(FakeResponse(body={"id": 9, "loanType": "CAR_LOAN", "requestedAmount": 600000, "tenureMonths": 48}))
    ctx = _client().get_application("9")
    assert ctx.application_id == "9"
    assert ctx.requested_tenure_months == 48


def test_transport_error_becomes_integration_error(calls):
    _, replies = calls
    replies.append(requests.Timeout("read timed out"))
    with pytest.raises(IntegrationError):
        _client().get_eligibility("HOME_LOAN")


def test_server_error_message_and_status(calls):
    _, replies = calls
    replies.append(FakeResponse(status_code=503, body={"message": "maintenance"}))
    with pytest.raises(IntegrationError) as exc:
        _client().calculate_foir(1, 0, 0)
    assert str(exc.value) == "maintenance"
    assert exc.value.status_code == 503


def test_malformed_bodies_rejected(calls):
    _, replies = calls
    replies.append(FakeResponse(raw="<html>oops</html>"))
    replies.append(FakeResponse(body={"loanType": "HOME_LOAN"}))
    client = _client()
    with pytest.raises(IntegrationError):
        client.get_eligibility("HOME_LOAN")
    with pytest.raises(IntegrationError):
        client.get_eligibility("HOME_LOAN")


def test_submission_sends_json(calls):
    recorded, replies = calls
    replies.append(FakeResponse(status_code=204))
    assert _client().save_financial_details("5", {"employmentType": "SALARIED"}) is None
    assert recorded[0]["method"] == "PUT"
    assert recorded[0]["url"].endswith("/loan-applications/5/financial-details")
    assert recorded[0]["json"] == {"employmentType": "SALARIED"}


def test_auth_header_and_settings():
    client = _client()
    assert client.session.headers["Authorization"] == "Bearer t0k"
    assert LendwiseClient.from_settings(Settings()) is None
    built = LendwiseClient.from_settings(Settings(api_url="http://x", timeout_seconds=9))
    assert built.timeout == 9
