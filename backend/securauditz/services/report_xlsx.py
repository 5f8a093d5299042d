"""
Excel checklist renderer: one row per question per control.
Control-level columns are filled only on each control's first row.
"""
import io

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from securauditz.services.report_data import AuditReport

CHECKLIST_COLUMNS: list[tuple[str, int]] = [
    ("Control ID", 15),
    ("Control Objective", 40),
    ("Question", 60),
    ("Selected Option", 25),
    ("Compliance Status", 20),
    ("Justification", 50),
    ("Maturity Level", 15),
    ("AI Recommendation", 60),
    ("Evidence Filename", 30),
    ("Evidence Link", 50),
]

# Excel caps sheet titles at 31 characters and forbids a few symbols
_SHEET_TITLE_FORBIDDEN = str.maketrans({c: " " for c in "[]:*?/\\"})


def _styled_header(ws, row, headers):
    """Apply styled headers to a worksheet row."""
    header_font = Font(bold=True, color="FFFFFF", size=11)
    header_fill = PatternFill(start_color="4F46E5", end_color="4F46E5", fill_type="solid")
    header_align = Alignment(horizontal="center", vertical="center", wrap_text=True)
    thin_border = Border(
        left=Side(style="thin"), right=Side(style="thin"),
        top=Side(style="thin"), bottom=Side(style="thin"),
    )
    for col_idx, header in enumerate(headers, 1):
        cell = ws.cell(row=row, column=col_idx, value=header)
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = header_align
        cell.border = thin_border
    return thin_border


def checklist_rows(report: AuditReport) -> list[list[str] | None]:
    """Data rows of the checklist; ``None`` marks a blank separator row."""
    if not report.controls:
        return [[
            "N/A", "No controls found for the frameworks associated with this audit.",
            "", "", "", "", "", "", "", "",
        ]]

    rows: list[list[str] | None] = []
    with_questions = [c for c in report.controls if c.answers]
    for idx, control in enumerate(with_questions):
        for q_idx, answer in enumerate(control.answers):
            first = q_idx == 0
            rows.append([
                control.id if first else "",
                control.objective if first else "",
                answer.question_text,
                answer.selected_option,
                control.compliance_status if first else "",
                control.justification if first else "",
                control.maturity_level if first else "",
                (control.ai_recommendation or "None") if first else "",
                control.evidence_filename if first else "",
                (control.evidence_link or "N/A") if first else "",
            ])
        if idx < len(with_questions) - 1:
            rows.append(None)
    return rows


def render_checklist_xlsx(report: AuditReport) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = f"Audit Checklist - {report.title}".translate(_SHEET_TITLE_FORBIDDEN)[:31]

    border = _styled_header(ws, 1, [name for name, _ in CHECKLIST_COLUMNS])
    for col_idx, (_, width) in enumerate(CHECKLIST_COLUMNS, 1):
        ws.column_dimensions[ws.cell(row=1, column=col_idx).column_letter].width = width

    wrap = Alignment(vertical="top", wrap_text=True)
    for row_idx, values in enumerate(checklist_rows(report), 2):
        if values is None:
            continue
        for col_idx, val in enumerate(values, 1):
            cell = ws.cell(row=row_idx, column=col_idx, value=val)
            cell.border = border
            cell.alignment = wrap

    ws.freeze_panes = "A2"
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()
