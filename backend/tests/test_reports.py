"""Audit report downloads: PDF report and Excel checklist."""
import io
from datetime import datetime

import pytest
from httpx import AsyncClient
from openpyxl import load_workbook

from securauditz.models import Audit, AuditResponse, Control
from securauditz.services.report_data import build_audit_report
from securauditz.services.report_pdf import render_audit_pdf
from securauditz.services.report_xlsx import CHECKLIST_COLUMNS, checklist_rows

from conftest import answered, make_questions


def make_audit(**overrides) -> Audit:
    fields = dict(
        id=7, title="Cloud review", domain_type="Cloud", user_id="user-1",
        frameworks_audited=["csa-ccm"], total_controls_in_audit=0, completed_controls_in_audit=0,
        overall_score=0, overall_status="Not Started", client_company_name="Acme Corp",
        created_at=datetime(2026, 3, 1), updated_at=datetime(2026, 3, 2),
    )
    fields.update(overrides)
    return Audit(**fields)


# ═══ Report assembly ═══

def test_report_defaults_for_missing_response():
    control = Control(id="C-1", framework_id="csa-ccm", questionnaires=make_questions(2))
    report = build_audit_report(make_audit(total_controls_in_audit=1), [control], {})

    entry = report.controls[0]
    assert entry.compliance_status == "Not Answered"
    assert entry.objective == "N/A"
    assert entry.justification == "None provided"
    assert entry.evidence_link is None
    assert [a.selected_option for a in entry.answers] == ["Not Answered", "Not Answered"]
    assert report.client["spoc_email"] == "N/A"
    assert report.created_at == "2026-03-01"


def test_report_evidence_link_and_tally():
    controls = [
        Control(id="C-2", framework_id="csa-ccm", questionnaires=make_questions(1)),
        Control(id="C-1", framework_id="csa-ccm", questionnaires=make_questions(1)),
    ]
    responses = {
        "C-1": AuditResponse(control_id="C-1", question_responses=answered(1), compliance_status="Yes",
                             evidence_path="/uploads/evidenceFile-abc.pdf", evidence_filename="policy.pdf"),
        "C-2": AuditResponse(control_id="C-2", question_responses=[], compliance_status="No"),
    }
    report = build_audit_report(make_audit(), controls, responses, base_url="http://audit.test/")

    assert [c.id for c in report.controls] == ["C-1", "C-2"]
    assert report.controls[0].evidence_link == "http://audit.test/uploads/evidenceFile-abc.pdf"
    assert report.controls[0].answers[0].selected_option == "Fully"
    assert report.summary.tally["Yes"] == 1
    assert report.summary.tally["No"] == 1
    assert report.summary.tally["Partial"] == 0


def test_checklist_rows_without_controls():
    rows = checklist_rows(build_audit_report(make_audit(), [], {}))
    assert len(rows) == 1
    assert rows[0][0] == "N/A"
    assert len(rows[0]) == len(CHECKLIST_COLUMNS)


def test_checklist_rows_skip_controls_without_questions():
    controls = [
        Control(id="C-1", framework_id="csa-ccm", questionnaires=make_questions(2)),
        Control(id="C-2", framework_id="csa-ccm", questionnaires=[]),
        Control(id="C-3", framework_id="csa-ccm", questionnaires=make_questions(1)),
    ]
    rows = checklist_rows(build_audit_report(make_audit(), controls, {}))

    assert [r[0] if r else None for r in rows] == ["C-1", "", None, "C-3"]
    # evidence link, like every control-level column, only on the first row
    assert rows[0][9] == "N/A"
    assert rows[1][9] == ""


def test_pdf_without_controls():
    content = render_audit_pdf(build_audit_report(make_audit(), [], {}))
    assert content.startswith(b"%PDF")


# ═══ Endpoints ═══

@pytest.mark.asyncio
async def test_pdf_report(client: AsyncClient, seed_audit):
    await client.put(f"/api/audits/{seed_audit}/responses", json={
        "control_id": "A.5.1",
        "question_responses": answered(2),
        "compliance_status": "Yes",
        "justification_text": "Approved <policy> & signed",
        "ai_recommendation": "No remediation needed.",
    })
    r = await client.get(f"/api/audits/{seed_audit}/report/pdf")
    assert r.status_code == 200
    assert r.headers["content-type"] == "application/pdf"
    assert f"audit_report_{seed_audit}.pdf" in r.headers["content-disposition"]
    assert r.content.startswith(b"%PDF")


@pytest.mark.asyncio
async def test_xlsx_checklist(client: AsyncClient, seed_audit):
    await client.put(f"/api/audits/{seed_audit}/responses", json={
        "control_id": "A.5.1",
        "question_responses": answered(2),
        "compliance_status": "Partial",
        "evidence_path": "/uploads/evidenceFile-1.pdf",
        "evidence_filename": "minutes.pdf",
    })
    r = await client.get(f"/api/audits/{seed_audit}/checklist/xlsx")
    assert r.status_code == 200
    assert f"audit_checklist_{seed_audit}.xlsx" in r.headers["content-disposition"]

    ws = load_workbook(io.BytesIO(r.content)).active
    assert ws.title.startswith("Audit Checklist - ISMS")
    assert len(ws.title) <= 31
    assert [c.value for c in ws[1]] == [name for name, _ in CHECKLIST_COLUMNS]

    first, second, separator, other = ws[2], ws[3], ws[4], ws[5]
    assert first[0].value == "A.5.1"
    assert first[2].value == "Question 1?"
    assert first[3].value == "Fully"
    assert first[4].value == "Partial"
    assert first[8].value == "minutes.pdf"
    assert first[9].value == "http://test/uploads/evidenceFile-1.pdf"
    assert second[0].value in ("", None)
    assert second[2].value == "Question 2?"
    assert second[9].value in ("", None)
    assert all(c.value is None for c in separator)
    assert other[0].value == "P.7.2"
    assert other[3].value == "Not Answered"
    assert other[7].value == "None"
    assert ws.max_row == 5


@pytest.mark.asyncio
async def test_report_unknown_audit(client: AsyncClient, seed_catalog):
    r = await client.get("/api/audits/999/checklist/xlsx")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_report_reconciles_before_rendering(client: AsyncClient, seed_audit, db):
    audit = await db.get(Audit, seed_audit)
    audit.overall_score = 42
    audit.overall_status = "In Progress"
    await db.commit()

    await client.get(f"/api/audits/{seed_audit}/report/pdf")

    await db.refresh(audit)
    assert audit.overall_score == 0
    assert audit.overall_status == "Not Started"
