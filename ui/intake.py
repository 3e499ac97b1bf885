import streamlit as st

from core.intake import STEP_TITLES, TOTAL_STEPS, SubmissionError, fields_for_step
from core.presets import CATEGORY_LABELS, INCOME_SOURCE_LABELS
from core.state import discard_workflow
from ui.bottombar import render_foir_summary
from ui.components import render_field
from ui.documents import render_document_checklist


def _same(a, b) -> bool:
    if a in (None, "") and b in (None, ""):
        return True
    return getattr(a, "value", a) == getattr(b, "value", b)


def _render_category_step(wf):
    draft = wf.draft
    notice = wf.eligibility_notice()
    if notice:
        st.warning(notice)
    options = [c.value for c in wf.selectable_categories()]
    if not options:
        st.error("No employment type is eligible for this loan product.")
        return
    reasons = {}
    if wf.context is not None:
        for c in wf.catalog.get_eligible_categories(wf.context.loan_type):
            reasons[c.employment_category.value] = c.reason
    current = getattr(draft.category, "value", None)
    choice = st.radio(
        "Employment Type",
        options,
        index=options.index(current) if current in options else None,
        format_func=lambda v: CATEGORY_LABELS.get(v, v),
        captions=[reasons.get(o, "") for o in options],
        key=f"{draft.draft_id}:category",
    )
    if draft.details:
        st.caption("Changing the employment type clears the employment details already entered.")
    if choice is not None and choice != current:
        wf.select_category(choice)
    if "category" in draft.touched and draft.category is None:
        st.error("Select an employment type")


def _render_section_step(wf):
    draft = wf.draft
    specs = fields_for_step(draft.step, draft.category)
    errors = wf.errors()
    if draft.step == 3 and draft.category is not None:
        st.caption(f"Income source: {INCOME_SOURCE_LABELS.get(draft.category.value, '')}")
    cols = st.columns(2)
    for i, spec in enumerate(specs):
        values = getattr(wf.draft, spec.section)
        current = values.get(spec.name)
        err = errors.get(spec.name) if spec.key in wf.draft.touched else None
        with cols[i % 2]:
            val = render_field(
                spec, current, key=f"{draft.draft_id}:{draft.category.value}:{spec.key}", error=err
            )
        if not spec.read_only and not _same(val, current):
            wf.update_field(spec.section, spec.name, val)
    model_error = errors.get("__all__")
    if model_error:
        st.error(model_error)


def _render_navigation(wf):
    draft = wf.draft
    c1, c2, c3 = st.columns([1, 1, 2])
    if draft.step > 1 and c1.button("Back", key="intake_back"):
        wf.previous_step()
        st.rerun()
    if draft.step < TOTAL_STEPS:
        if c2.button("Next", key="intake_next", type="primary"):
            transition = wf.next_step()
            if not transition.moved:
                st.session_state["intake_flash"] = "Please complete the highlighted fields."
            st.rerun()
    elif c2.button("Submit", key="intake_submit", type="primary"):
        try:
            wf.submit()
        except SubmissionError as exc:
            st.session_state["intake_flash"] = f"Submission failed: {exc}"
        else:
            st.session_state["intake_success"] = "Financial details submitted."
        st.rerun()
    if c3.button("Discard application", key="intake_discard"):
        discard_workflow()
        st.rerun()


def render_intake(wf):
    """Five-step financial details wizard for one application."""
    draft = wf.draft
    st.subheader("Financial Details")
    st.progress(wf.progress() / 100, text=f"Step {draft.step} of {TOTAL_STEPS}: {STEP_TITLES[draft.step]}")
    success = st.session_state.pop("intake_success", None)
    if success:
        st.success(success)
    flash = st.session_state.pop("intake_flash", None)
    if flash:
        st.error(flash)

    if draft.step == 1:
        _render_category_step(wf)
    else:
        _render_section_step(wf)

    if wf.draft.step >= 3:
        render_foir_summary(wf.preview(), title="Live FOIR preview")
    if wf.draft.category is not None:
        render_document_checklist([wf.draft.category])
    _render_navigation(wf)
