"""
Response store accessor: the per-audit answers, one row per control.
"""
import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from securauditz.errors import store_call
from securauditz.models.audit import Audit, AuditResponse
from securauditz.models.framework import Control

logger = logging.getLogger(__name__)

UNANSWERED = "Not Answered"

_WRITABLE_FIELDS = (
    "question_responses",
    "compliance_status",
    "justification_text",
    "maturity_level_selected",
    "evidence_path",
    "evidence_filename",
    "ai_recommendation",
)


def placeholder_question_responses(control: Control | None) -> list[dict]:
    """One unanswered entry per question of ``control``, in questionnaire order."""
    questions = (control.questionnaires if control else None) or []
    return [
        {
            "question_index": index,
            "question_text": q.get("question_text"),
            "selected_option": None,
            "option_text": None,
        }
        for index, q in enumerate(questions)
    ]


def placeholder_response(control_id: str, control: Control | None) -> dict:
    """Shape returned for a control that has no stored response yet."""
    return {
        "control_id": control_id,
        "question_responses": placeholder_question_responses(control),
        "compliance_status": UNANSWERED,
        "justification_text": None,
        "maturity_level_selected": None,
        "evidence_path": None,
        "evidence_filename": None,
        "ai_recommendation": None,
        "response_date": None,
    }


class ResponseStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    @store_call
    async def get_response(self, audit_id: int, control_id: str) -> AuditResponse | None:
        q = select(AuditResponse).where(
            AuditResponse.audit_id == audit_id,
            AuditResponse.control_id == control_id,
        )
        return (await self.session.execute(q)).scalar_one_or_none()

    @store_call
    async def list_responses(self, audit_id: int) -> dict[str, AuditResponse]:
        q = (
            select(AuditResponse)
            .where(AuditResponse.audit_id == audit_id)
            .order_by(AuditResponse.control_id)
        )
        rows = (await self.session.execute(q)).scalars().all()
        return {r.control_id: r for r in rows}

    def initialize_responses(self, audit: Audit, controls: list[Control]) -> None:
        """Stage one placeholder response per control.

        Nothing is committed here; the caller commits the audit and its
        placeholders together.
        """
        for control in controls:
            placeholder = placeholder_response(control.id, control)
            placeholder.pop("control_id")
            self.session.add(AuditResponse(audit_id=audit.id, control_id=control.id, **placeholder))
        logger.debug("Staged %d placeholder responses for audit %s", len(controls), audit.id)

    @store_call
    async def upsert_response(self, audit_id: int, control_id: str, fields: dict) -> AuditResponse:
        """Create the response or merge ``fields`` into it, then commit.

        Keys absent from ``fields`` keep their stored value. A key mapped to
        ``None`` clears the value; a cleared compliance status reverts to
        "Not Answered".
        """
        unknown = set(fields) - set(_WRITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Not writable response fields: {sorted(unknown)}")

        response = await self.get_response(audit_id, control_id)
        if response is None:
            response = AuditResponse(
                audit_id=audit_id,
                control_id=control_id,
                question_responses=[],
                compliance_status=UNANSWERED,
            )
            self.session.add(response)

        for key, value in fields.items():
            if key == "compliance_status" and value is None:
                value = UNANSWERED
            elif key == "question_responses" and value is None:
                value = []
            setattr(response, key, value)
        response.response_date = datetime.utcnow()

        await self.session.commit()
        await self.session.refresh(response)
        return response
