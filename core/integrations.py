"""HTTP client for the loan portal backend."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests
from pydantic import ValidationError

from core.models import ApplicationContext, EligibilityPayload, FOIRResult, VerificationSignals

logger = logging.getLogger(__name__)


class IntegrationError(Exception):
    """A backend call failed: transport error, non-2xx status or a malformed body."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class LendwiseClient:
    """Thin wrapper around the portal's REST endpoints.

    Every public method either returns a validated model or raises
    ``IntegrationError``.
    """

    def __init__(self, base_url: str, token: Optional[str] = None, timeout: float = 5.0, session=None) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.setdefault("Accept", "application/json")
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    @classmethod
    def from_settings(cls, settings) -> Optional["LendwiseClient"]:
        if not settings.api_url:
            return None
        return cls(settings.api_url, token=settings.api_token, timeout=settings.timeout_seconds)

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise IntegrationError(f"{method} {path} failed: {exc}") from exc
        if not resp.ok:
            raise IntegrationError(_error_message(resp), status_code=resp.status_code)
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise IntegrationError(f"{method} {path} returned a non-JSON body") from exc

    def _parse(self, model, data):
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise IntegrationError(f"Unexpected {model.__name__} payload: {exc.error_count()} error(s)") from exc

    def get_eligibility(self, loan_type: str) -> EligibilityPayload:
        logger.info("Fetching employment eligibility for %s", loan_type)
        data = self._request(
            "GET", "/applicant/eligibility/employment-types", params={"loanType": loan_type}
        )
        return self._parse(EligibilityPayload, data)

    def calculate_foir(self, monthly_income, existing_obligations, new_emi) -> FOIRResult:
        logger.info("Requesting FOIR calculation")
        data = self._request(
            "POST",
            "/applicant/eligibility/foir/calculate",
            params={
                "monthlyIncome": monthly_income,
                "existingObligations": existing_obligations,
                "newEmi": new_emi,
            },
        )
        return self._parse(FOIRResult, data)

    def get_application(self, application_id: str) -> ApplicationContext:
        logger.info("Loading application %s", application_id)
        data = self._request("GET", f"/loan-applications/{application_id}")
        return self._parse(ApplicationContext, data)

    def save_financial_details(self, application_id: str, payload: Dict[str, Any]) -> Any:
        logger.info("Submitting financial details for application %s", application_id)
        return self._request("PUT", f"/loan-applications/{application_id}/financial-details", json=payload)

    def get_verification(self, application_id: str) -> VerificationSignals:
        logger.info("Fetching external verification for application %s", application_id)
        data = self._request("GET", f"/loan-officer/applications/{application_id}/external-verification")
        return self._parse(VerificationSignals, data)


def _error_message(resp) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            if body.get(key):
                return str(body[key])
    return f"HTTP {resp.status_code} from {resp.url}"
