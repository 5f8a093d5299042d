"""
Audit models: one audit per assessment, one response per control per audit.

Tables: audits, audit_responses
"""
from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base

AUDIT_STATUSES = ("Not Started", "In Progress", "Completed")
COMPLIANCE_STATUSES = ("Not Answered", "Yes", "Partial", "No", "Not Applicable")


class Audit(Base):
    __tablename__ = "audits"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    domain_type: Mapped[str] = mapped_column(String(50), nullable=False)

    # Snapshot taken at creation; never recomputed
    frameworks_audited: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    total_controls_in_audit: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Summary fields, written only by the progress reconciler
    overall_score: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    overall_status: Mapped[str] = mapped_column(String(20), default="Not Started", nullable=False)
    completed_controls_in_audit: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    client_company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    client_spoc_name: Mapped[str | None] = mapped_column(String(255))
    client_spoc_email: Mapped[str | None] = mapped_column(String(255))
    client_spoc_phone: Mapped[str | None] = mapped_column(String(50))

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)


class AuditResponse(Base):
    """Recorded answer state for one control within one audit."""
    __tablename__ = "audit_responses"
    __table_args__ = (
        UniqueConstraint("audit_id", "control_id", name="uq_audit_response_control"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    audit_id: Mapped[int] = mapped_column(ForeignKey("audits.id", ondelete="CASCADE"), nullable=False, index=True)
    control_id: Mapped[str] = mapped_column(String(100), nullable=False)

    question_responses: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    compliance_status: Mapped[str] = mapped_column(String(20), default="Not Answered", nullable=False)
    justification_text: Mapped[str | None] = mapped_column(Text)
    maturity_level_selected: Mapped[str | None] = mapped_column(String(50))
    evidence_path: Mapped[str | None] = mapped_column(String(500))
    evidence_filename: Mapped[str | None] = mapped_column(String(500))
    ai_recommendation: Mapped[str | None] = mapped_column(Text)
    response_date: Mapped[datetime | None] = mapped_column(DateTime)
