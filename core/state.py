"""Per-session wiring of settings, backend client, catalog and the live intake.

Nothing here is written to disk; closing the session discards the draft.
"""
import logging
from typing import Optional

import streamlit as st

from core.config import Settings
from core.eligibility import EligibilityCatalog
from core.integrations import IntegrationError, LendwiseClient
from core.intake import IntakeWorkflow
from core.models import ApplicationContext

logger = logging.getLogger(__name__)

WORKFLOW_KEY = "intake_workflow"


def init_state(settings: Optional[Settings] = None) -> None:
    ss = st.session_state
    if "settings" not in ss:
        ss["settings"] = settings or Settings.from_env()
    ss.setdefault("view_mode", "intake")
    ss.setdefault("application_id", "")
    ss.setdefault("loan_type", "PERSONAL_LOAN")
    ss.setdefault("requested_amount", 500000.0)
    ss.setdefault("requested_tenure", 60)
    ss.setdefault("override_reason", "")


def get_client() -> Optional[LendwiseClient]:
    ss = st.session_state
    if "client" not in ss:
        ss["client"] = LendwiseClient.from_settings(ss["settings"])
    return ss["client"]


def get_catalog() -> EligibilityCatalog:
    ss = st.session_state
    if "catalog" not in ss:
        ss["catalog"] = EligibilityCatalog(get_client())
    return ss["catalog"]


def resolve_context() -> ApplicationContext:
    """Load the selected application, or describe a local one from the sidebar inputs."""
    ss = st.session_state
    client = get_client()
    app_id = str(ss.get("application_id") or "").strip()
    if client is not None and app_id:
        cached = ss.get("loaded_context")
        if cached is not None and cached.application_id == app_id:
            return cached
        try:
            ctx = client.get_application(app_id)
        except IntegrationError as exc:
            logger.warning("Could not load application %s: %s", app_id, exc)
            ss["context_notice"] = f"Application {app_id} could not be loaded; using the values entered here."
        else:
            ss["loaded_context"] = ctx
            ss.pop("context_notice", None)
            return ctx
    return ApplicationContext(
        application_id=app_id or "LOCAL",
        loan_type=ss["loan_type"],
        requested_amount=float(ss["requested_amount"]),
        requested_tenure_months=int(ss["requested_tenure"]),
    )


def get_workflow(context: Optional[ApplicationContext] = None) -> IntakeWorkflow:
    """Return the live intake.

    A different application or loan type starts a fresh intake; a change of
    requested amount or tenure only refreshes the draft's context.
    """
    ss = st.session_state
    wf = ss.get(WORKFLOW_KEY)
    stale = wf is None or wf.discarded or wf.submitted
    if not stale and context is not None and wf.context != context:
        current = wf.context
        if current is None or (current.application_id, current.loan_type) != (context.application_id, context.loan_type):
            stale = True
        else:
            wf.draft = wf.draft.model_copy(update={"context": context})
    if stale:
        wf = IntakeWorkflow(context=context, catalog=get_catalog(), client=get_client())
        ss[WORKFLOW_KEY] = wf
    return wf


def discard_workflow() -> None:
    wf = st.session_state.pop(WORKFLOW_KEY, None)
    if wf is not None:
        wf.discard()
