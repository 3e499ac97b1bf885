import streamlit as st
from core import state
from core.config import Settings
from core.integrations import IntegrationError


def _fresh():
    st.session_state.clear()
    state.init_state(Settings())


def test_init_state_defaults_and_offline_client():
    _fresh()
    assert st.session_state["view_mode"] == "intake"
    assert st.session_state["loan_type"] == "PERSONAL_LOAN"
    assert state.get_client() is None
    assert state.get_catalog() is state.get_catalog()


def test_local_context_from_inputs():
    _fresh()
    st.session_state["requested_tenure"] = 36
    ctx = state.resolve_context()
    assert ctx.application_id == "LOCAL"
    assert ctx.loan_type.value == "PERSONAL_LOAN"
    assert ctx.requested_tenure_months == 36


def test_workflow_survives_amount_change_but_not_loan_change():
    _fresh()
    ctx = state.resolve_context()
    wf = state.get_workflow(ctx)
    wf.select_category("SALARIED")

    st.session_state["requested_amount"] = 750000.0
    same = state.get_workflow(state.resolve_context())
    assert same is wf
    assert same.context.requested_amount == 750000.0
    assert same.draft.category.value == "SALARIED"

    st.session_state["loan_type"] = "HOME_LOAN"
    other = state.get_workflow(state.resolve_context())
    assert other is not wf
    assert other.draft.category is None


def test_discarded_workflow_is_replaced():
    _fresh()
    ctx = state.resolve_context()
    wf = state.get_workflow(ctx)
    state.discard_workflow()
    assert wf.discarded
    assert state.get_workflow(ctx) is not wf


class _DownClient:
    def get_application(self, application_id):
        raise IntegrationError("not found", status_code=404)


def test_unloadable_application_falls_back_to_inputs():
    _fresh()
    st.session_state["client"] = _DownClient()
    st.session_state["application_id"] = "77"
    ctx = state.resolve_context()
    assert ctx.application_id == "77"
    assert "could not be loaded" in st.session_state["context_notice"]
