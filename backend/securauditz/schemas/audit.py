"""Pydantic schemas for audits and per-control responses."""
from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ComplianceStatus = Literal["Not Answered", "Yes", "Partial", "No", "Not Applicable"]
AuditStatus = Literal["Not Started", "In Progress", "Completed"]


# ═══ Question responses ═══

class QuestionResponse(BaseModel):
    question_index: int
    question_text: str | None = None
    selected_option: str | None = None
    option_text: str | None = None


# ═══ Responses ═══

class ResponseOut(BaseModel):
    control_id: str
    question_responses: list[QuestionResponse] = []
    compliance_status: ComplianceStatus = "Not Answered"
    justification_text: str | None = None
    maturity_level_selected: str | None = None
    evidence_path: str | None = None
    evidence_filename: str | None = None
    ai_recommendation: str | None = None
    response_date: datetime | None = None
    model_config = {"from_attributes": True}


class ResponseUpdate(BaseModel):
    """Answer submission for one control.

    Only the fields present in the payload are written; a field sent as
    ``null`` clears the stored value.
    """
    control_id: str = Field(..., min_length=1, max_length=100)
    question_responses: list[QuestionResponse]
    compliance_status: ComplianceStatus | None = None
    justification_text: str | None = None
    maturity_level_selected: str | None = Field(None, max_length=50)
    evidence_path: str | None = Field(None, max_length=500)
    evidence_filename: str | None = Field(None, max_length=500)
    ai_recommendation: str | None = None


class ResponseUpdateResult(BaseModel):
    message: str
    newOverallProgress: int
    newOverallStatus: AuditStatus
    completedControls: int


# ═══ Audits ═══

class AuditCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    domain_type: str = Field(..., min_length=1, max_length=50)
    user_id: str = Field(..., alias="userId", min_length=1, max_length=128)
    client_company_name: str = Field(..., min_length=1, max_length=255)
    client_spoc_name: str | None = Field(None, max_length=255)
    client_spoc_email: str | None = Field(None, max_length=255)
    client_spoc_phone: str | None = Field(None, max_length=50)


class AuditOut(BaseModel):
    id: int
    title: str
    description: str = ""
    user_id: str
    domain_type: str
    frameworks_audited: list[str] = []
    overall_status: AuditStatus
    overall_score: int
    total_controls_in_audit: int
    completed_controls_in_audit: int
    client_company_name: str
    client_spoc_name: str | None = None
    client_spoc_email: str | None = None
    client_spoc_phone: str | None = None
    created_at: datetime
    updated_at: datetime
    model_config = {"from_attributes": True}


class AuditDetailOut(AuditOut):
    responses: list[ResponseOut] = []
