"""Sanction summary PDF for an underwriting decision."""
from __future__ import annotations
import io
from xml.sax.saxutils import escape
from typing import Any, Dict, List

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from core.presets import DISCLAIMER, LOAN_PRODUCTS
from core.utils import format_inr


def _money(value) -> str:
    # base-14 PDF fonts have no rupee glyph
    return format_inr(value, symbol="Rs. ")


_GRID = TableStyle(
    [
        ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
        ("BOX", (0, 0), (-1, -1), 1, colors.black),
        ("INNERGRID", (0, 0), (-1, -1), 0.5, colors.grey),
    ]
)


def summary_rows(context, proposal, result) -> List[List[str]]:
    """Label/value rows describing the approved terms and their affordability."""
    loan_type = getattr(context.loan_type, "value", context.loan_type)
    rows = [
        ["Application", str(context.application_id)],
        ["Loan Type", LOAN_PRODUCTS.get(loan_type, {}).get("label", loan_type)],
        ["Requested", f"{_money(proposal.requested_amount)} over {proposal.requested_tenure_months} months"],
        ["Approved", f"{_money(proposal.proposed_amount)} over {proposal.proposed_tenure_months} months"],
        ["Interest Rate", f"{proposal.proposed_rate:.2f}% p.a. (recommended {result.recommended_rate:.2f}%)"],
    ]
    if result.monthly_emi is not None:
        rows += [
            ["Monthly EMI", _money(result.monthly_emi)],
            ["Total Interest", _money(result.total_interest)],
            ["Total Repayment", _money(result.total_repayment)],
        ]
    if result.foir_ratio is not None:
        status = getattr(result.foir_status, "value", result.foir_status)
        rows.append(["FOIR", f"{result.foir_ratio:.2f}% ({status})"])
    return rows


def build_sanction_pdf(data: Dict[str, Any]) -> bytes:
    """Render the decision summary and return the PDF bytes.

    ``data`` carries ``rows`` (from :func:`summary_rows`), ``rationale``,
    ``warnings`` (dicts with code/severity/message), an optional ``schedule``
    DataFrame, ``checklist`` and ``override_reason``.  Critical warnings require an
    override reason; when given it is printed for audit purposes.
    """

    warnings = data.get("warnings", [])
    override_reason = (data.get("override_reason") or "").strip()
    if any(w.get("severity") == "critical" for w in warnings) and not override_reason:
        raise ValueError("override_reason required when critical warnings exist")

    styles = getSampleStyleSheet()
    buf = io.BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=A4, leftMargin=36, rightMargin=36, topMargin=36, bottomMargin=36)
    story = [Paragraph(f"<b>{data.get('title', 'Loan Sanction Summary')}</b>", styles["Title"]), Spacer(1, 12)]

    rows = data.get("rows", [])
    if rows:
        t = Table([["Decision", ""]] + rows, hAlign="LEFT", colWidths=[160, 360])
        t.setStyle(_GRID)
        story += [t, Spacer(1, 12)]

    if data.get("rationale"):
        story += [Paragraph("<b>Recommendation</b>", styles["Heading3"]), Paragraph(escape(data["rationale"]), styles["Normal"]), Spacer(1, 12)]

    if warnings:
        w_rows = [["Code", "Severity", "Message"]] + [
            [w.get("code", ""), w.get("severity", ""), Paragraph(escape(w.get("message", "")), styles["Normal"])]
            for w in warnings
        ]
        t = Table(w_rows, hAlign="LEFT", colWidths=[130, 60, 330])
        t.setStyle(_GRID)
        story += [Paragraph("<b>Warnings</b>", styles["Heading3"]), Spacer(1, 6), t, Spacer(1, 6)]
        if override_reason:
            story += [Paragraph(f"Override Reason: {escape(override_reason)}", styles["Normal"]), Spacer(1, 12)]

    schedule = data.get("schedule")
    if schedule is not None and not schedule.empty:
        head = schedule.head(12)
        s_rows = [list(head.columns)] + [
            [int(r["Month"])] + [_money(r[c]) for c in head.columns[1:]] for _, r in head.iterrows()
        ]
        t = Table(s_rows, hAlign="LEFT")
        t.setStyle(_GRID)
        title = "Repayment Schedule (first 12 months)" if len(schedule) > 12 else "Repayment Schedule"
        story += [Paragraph(f"<b>{title}</b>", styles["Heading3"]), Spacer(1, 6), t, Spacer(1, 12)]

    checklist = data.get("checklist", [])
    if checklist:
        c_rows = [["Required Document", "Status"]] + [
            [c["label"], "Received" if c.get("checked") else "Pending"] for c in checklist
        ]
        t = Table(c_rows, hAlign="LEFT", colWidths=[360, 160])
        t.setStyle(_GRID)
        story += [Paragraph("<b>Documentation Checklist</b>", styles["Heading3"]), Spacer(1, 6), t, Spacer(1, 12)]

    story += [Spacer(1, 12), Paragraph(f"<font size=8>{DISCLAIMER}</font>", styles["Normal"])]
    doc.build(story)
    return buf.getvalue()
