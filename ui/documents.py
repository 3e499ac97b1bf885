"""UI helpers for documentation checklist."""
from __future__ import annotations
import re
import streamlit as st
from core.checklist import build_document_checklist


def _slug(label: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", label.lower()).strip("_")


def render_document_checklist(categories):
    """Render the required documents for the given employment categories."""
    docs = build_document_checklist(categories)
    st.session_state.setdefault("doc_checklist_state", {})
    with st.expander("Documents you will need"):
        for doc in docs:
            checked = st.session_state["doc_checklist_state"].get(doc, False)
            st.session_state["doc_checklist_state"][doc] = st.checkbox(doc, value=checked, key=f"doc_{_slug(doc)}")
    st.session_state["doc_checklist"] = [
        {"label": doc, "checked": st.session_state["doc_checklist_state"].get(doc, False)}
        for doc in docs
    ]
    ready = sum(1 for d in st.session_state["doc_checklist"] if d["checked"])
    st.caption(f"{ready} of {len(docs)} documents ready")
    return st.session_state["doc_checklist"]
