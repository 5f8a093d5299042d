"""
Control catalog models: reference data seeded ahead of any audit.

Tables: frameworks, controls
"""
from datetime import datetime

from sqlalchemy import JSON, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class Framework(Base):
    """A named catalog of controls (ISO 27001, CSA CCM, NIST AI RMF, ...)."""
    __tablename__ = "frameworks"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    name: Mapped[str | None] = mapped_column(String(500))
    type: Mapped[str] = mapped_column(
        String(50), nullable=False, index=True,
        comment="Domain tag used to scope audits: Cloud, ISMS, AI, ...",
    )
    description: Mapped[str | None] = mapped_column(Text)
    version: Mapped[str | None] = mapped_column(String(50))

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)


class Control(Base):
    """Single compliance requirement with an ordered questionnaire.

    ``questionnaires`` is a list of ``{"question_text": str, "options": {key: label}}``.
    Seeded attributes with no dedicated column are kept in ``attributes``.
    """
    __tablename__ = "controls"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    # No FK: controls may be seeded before their framework document exists.
    framework_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    control_objective: Mapped[str | None] = mapped_column(Text)
    control_description: Mapped[str | None] = mapped_column(Text)
    questionnaires: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    attributes: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
