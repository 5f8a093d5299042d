"""
PDF audit report renderer (reportlab platypus).

Layout: title block and client/summary sections on the first page, then the
detailed control responses starting on a new page.
"""
import io
from xml.sax.saxutils import escape

from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import PageBreak, Paragraph, SimpleDocTemplate, Spacer

from securauditz.services.report_data import AuditReport, ControlEntry


def _styles() -> dict[str, ParagraphStyle]:
    base = getSampleStyleSheet()
    return {
        "title": ParagraphStyle("ReportTitle", parent=base["Title"], fontSize=22, leading=26),
        "section": ParagraphStyle("Section", parent=base["Heading2"], fontSize=15),
        "control": ParagraphStyle("ControlHeading", parent=base["Heading3"], fontSize=12),
        "body": ParagraphStyle("Body", parent=base["Normal"], fontSize=11, leading=14),
        "small": ParagraphStyle("Small", parent=base["Normal"], fontSize=9, leading=12),
        "indent": ParagraphStyle("Indent", parent=base["Normal"], fontSize=9, leading=12, leftIndent=14),
        "center": ParagraphStyle("Centered", parent=base["Normal"], fontSize=11, alignment=1),
    }


def _p(text: str, style: ParagraphStyle) -> Paragraph:
    return Paragraph(escape(str(text)), style)


def _control_block(control: ControlEntry, st: dict[str, ParagraphStyle]) -> list:
    story = [
        _p(f"{control.id}: {control.objective}", st["control"]),
        _p(f"Description: {control.description}", st["small"]),
        _p(f"Compliance Status: {control.compliance_status}", st["small"]),
        _p(f"Maturity Level: {control.maturity_level}", st["small"]),
        _p(f"Justification: {control.justification}", st["small"]),
    ]
    if control.evidence_link:
        story.append(_p(f"Evidence: {control.evidence_filename} ({control.evidence_link})", st["small"]))
    if control.ai_recommendation:
        story.append(_p(f"AI Recommendation: {control.ai_recommendation}", st["small"]))
    if control.answers:
        story.append(Spacer(1, 4))
        story.append(_p("Questionnaire Answers:", st["small"]))
        for idx, answer in enumerate(control.answers, 1):
            story.append(_p(f"Q{idx}: {answer.question_text}", st["indent"]))
            story.append(_p(f"Selected Option: {answer.selected_option}", st["indent"]))
    story.append(Spacer(1, 12))
    return story


def render_audit_pdf(report: AuditReport) -> bytes:
    st = _styles()
    summary = report.summary
    tally = summary.tally

    story = [
        _p(f"Audit Report: {report.title}", st["title"]),
        Spacer(1, 12),
        _p(f"Client: {report.client['company_name']}", st["body"]),
        _p(f"Framework: {report.domain_type}", st["body"]),
        _p(f"Status: {report.overall_status}", st["body"]),
        _p(f"Score: {report.overall_score}%", st["body"]),
        _p(f"Created: {report.created_at}    Last updated: {report.updated_at}", st["body"]),
        Spacer(1, 12),
        _p("Client Details", st["section"]),
        _p(f"Company Name: {report.client['company_name']}", st["body"]),
        _p(f"SPOC Name: {report.client['spoc_name']}", st["body"]),
        _p(f"SPOC Email: {report.client['spoc_email']}", st["body"]),
        _p(f"SPOC Phone: {report.client['spoc_phone']}", st["body"]),
        Spacer(1, 12),
        _p("Audit Summary", st["section"]),
        _p(f"Total Controls: {summary.total}", st["body"]),
        _p(f"Completed Controls: {summary.completed}", st["body"]),
        _p(f"Overall Score: {summary.score}%", st["body"]),
        _p(
            f"Compliance Breakdown: Yes ({tally['Yes']}), Partial ({tally['Partial']}), "
            f"No ({tally['No']}), N/A ({tally['Not Applicable']}), "
            f"Not Answered ({tally['Not Answered']})",
            st["body"],
        ),
        PageBreak(),
        _p("Detailed Control Responses", st["section"]),
        Spacer(1, 8),
    ]

    if not report.controls:
        story.append(_p("No control responses to display for this audit.", st["center"]))
    for control in report.controls:
        story.extend(_control_block(control, st))

    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf, pagesize=A4,
        leftMargin=0.8 * inch, rightMargin=0.8 * inch,
        topMargin=0.8 * inch, bottomMargin=0.8 * inch,
        title=f"Audit Report {report.audit_id}",
    )
    doc.build(story)
    return buf.getvalue()
