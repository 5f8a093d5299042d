"""
Audit report assembly.

Builds the renderer-independent report structure from an audit, its catalog
controls and its responses. PDF and spreadsheet renderers consume the result.
"""
from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime

from securauditz.models.audit import COMPLIANCE_STATUSES, Audit, AuditResponse
from securauditz.models.framework import Control

NOT_ANSWERED = "Not Answered"


@dataclass
class QuestionAnswer:
    question_text: str
    selected_option: str


@dataclass
class ControlEntry:
    id: str
    objective: str
    description: str
    compliance_status: str
    maturity_level: str
    justification: str
    evidence_filename: str
    evidence_link: str | None
    ai_recommendation: str | None
    answers: list[QuestionAnswer] = field(default_factory=list)


@dataclass
class ReportSummary:
    total: int
    completed: int
    score: int
    status: str
    tally: dict[str, int]


@dataclass
class AuditReport:
    audit_id: int
    title: str
    domain_type: str
    overall_status: str
    overall_score: int
    created_at: str
    updated_at: str
    client: dict[str, str]
    controls: list[ControlEntry]
    summary: ReportSummary


def _date(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d") if value else "N/A"


def _answer_text(question_response: dict | None) -> str:
    if not question_response:
        return NOT_ANSWERED
    return question_response.get("option_text") or question_response.get("selected_option") or NOT_ANSWERED


def _control_entry(control: Control, response: AuditResponse | None, base_url: str) -> ControlEntry:
    stored = (response.question_responses if response else None) or []
    answers = [
        QuestionAnswer(
            question_text=q.get("question_text") or "",
            selected_option=_answer_text(stored[i] if i < len(stored) else None),
        )
        for i, q in enumerate(control.questionnaires or [])
    ]
    evidence_path = response.evidence_path if response else None
    return ControlEntry(
        id=control.id,
        objective=control.control_objective or "N/A",
        description=control.control_description or "N/A",
        compliance_status=(response.compliance_status if response else None) or NOT_ANSWERED,
        maturity_level=(response.maturity_level_selected if response else None) or "N/A",
        justification=(response.justification_text if response else None) or "None provided",
        evidence_filename=(response.evidence_filename if response else None) or "N/A",
        evidence_link=f"{base_url.rstrip('/')}{evidence_path}" if evidence_path else None,
        ai_recommendation=(response.ai_recommendation if response else None) or None,
        answers=answers,
    )


def build_audit_report(
    audit: Audit,
    controls: list[Control],
    responses: Mapping[str, AuditResponse],
    base_url: str = "",
) -> AuditReport:
    """Assemble the report; controls are listed by id, evidence links made absolute."""
    tally = Counter(r.compliance_status for r in responses.values())
    return AuditReport(
        audit_id=audit.id,
        title=audit.title,
        domain_type=audit.domain_type,
        overall_status=audit.overall_status,
        overall_score=audit.overall_score,
        created_at=_date(audit.created_at),
        updated_at=_date(audit.updated_at),
        client={
            "company_name": audit.client_company_name or "N/A",
            "spoc_name": audit.client_spoc_name or "N/A",
            "spoc_email": audit.client_spoc_email or "N/A",
            "spoc_phone": audit.client_spoc_phone or "N/A",
        },
        controls=[
            _control_entry(c, responses.get(c.id), base_url)
            for c in sorted(controls, key=lambda c: c.id)
        ],
        summary=ReportSummary(
            total=audit.total_controls_in_audit,
            completed=audit.completed_controls_in_audit,
            score=audit.overall_score,
            status=audit.overall_status,
            tally={status: tally.get(status, 0) for status in COMPLIANCE_STATUSES},
        ),
    )
