"""
Audit progress reconciliation.

Completion state of an audit is derived from the control catalog and the
audit's full response snapshot, never updated incrementally. The pure
functions below compute the summary; ``ProgressReconciler`` loads the
snapshots, compares against the persisted summary and writes only on change.

A control is complete when every one of its questions has a selected option
and the compliance status is one of the four verdicts. A control without
questions never completes.
"""
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from securauditz.errors import NotFoundError, store_call
from securauditz.models.audit import Audit
from securauditz.services.catalog import ControlCatalog
from securauditz.services.responses import ResponseStore

logger = logging.getLogger(__name__)

COMPLIANCE_VERDICTS = frozenset({"Yes", "Partial", "No", "Not Applicable"})

STATUS_NOT_STARTED = "Not Started"
STATUS_IN_PROGRESS = "In Progress"
STATUS_COMPLETED = "Completed"


@dataclass(frozen=True)
class AuditSummary:
    overall_score: int
    overall_status: str
    completed_controls_in_audit: int

    @classmethod
    def of(cls, audit: Audit) -> "AuditSummary":
        return cls(
            overall_score=audit.overall_score,
            overall_status=audit.overall_status,
            completed_controls_in_audit=audit.completed_controls_in_audit,
        )


@dataclass(frozen=True)
class SummaryUpdate:
    """Outcome of a reconciliation: the fresh summary and whether it differs."""
    summary: AuditSummary
    changed: bool


def _is_answered(question_response: Any) -> bool:
    if isinstance(question_response, Mapping):
        selected = question_response.get("selected_option")
    else:
        selected = getattr(question_response, "selected_option", None)
    return selected is not None and selected != ""


def is_control_complete(question_count: int, response: Any | None) -> bool:
    """Completeness predicate for one control and its response (or None)."""
    if response is None or question_count <= 0:
        return False
    answered = sum(1 for qr in (response.question_responses or []) if _is_answered(qr))
    return answered == question_count and response.compliance_status in COMPLIANCE_VERDICTS


def count_completed(controls: Mapping[str, Any], responses: Mapping[str, Any]) -> int:
    """Count responses whose control is known and complete.

    ``controls`` maps control id to an object with ``questionnaires``.
    Responses for control ids missing from ``controls`` are ignored.
    """
    completed = 0
    for control_id, response in responses.items():
        control = controls.get(control_id)
        if control is None:
            logger.debug("Ignoring response for control %s not in catalog", control_id)
            continue
        if is_control_complete(len(control.questionnaires or []), response):
            completed += 1
    return completed


def progress_percentage(completed: int, total: int) -> int:
    """100 * completed / total rounded half away from zero, capped at 100."""
    if total <= 0:
        return 0
    # Integer form of floor(100 * completed / total + 0.5)
    return min((200 * completed + total) // (2 * total), 100)


def status_for_progress(progress: int) -> str:
    if progress >= 100:
        return STATUS_COMPLETED
    if progress > 0:
        return STATUS_IN_PROGRESS
    return STATUS_NOT_STARTED


def compute_summary(
    controls: Mapping[str, Any],
    responses: Mapping[str, Any],
    total_expected: int,
) -> AuditSummary:
    completed = count_completed(controls, responses)
    progress = progress_percentage(completed, total_expected)
    return AuditSummary(
        overall_score=progress,
        overall_status=status_for_progress(progress),
        completed_controls_in_audit=completed,
    )


def plan_summary_update(
    current: AuditSummary,
    controls: Mapping[str, Any],
    responses: Mapping[str, Any],
    total_expected: int,
) -> SummaryUpdate:
    """Recompute the summary from snapshots and compare with ``current``."""
    fresh = compute_summary(controls, responses, total_expected)
    return SummaryUpdate(summary=fresh, changed=fresh != current)


class ProgressReconciler:
    """Recompute an audit's summary fields and persist them when they drift."""

    def __init__(self, session: AsyncSession, catalog: ControlCatalog, responses: ResponseStore):
        self.session = session
        self.catalog = catalog
        self.responses = responses

    async def reconcile(self, audit_id: int) -> SummaryUpdate:
        audit = await self._get_audit(audit_id)
        if audit is None:
            raise NotFoundError(f"Audit {audit_id} not found")
        return await self.reconcile_audit(audit)

    async def reconcile_audit(self, audit: Audit) -> SummaryUpdate:
        controls = await self.catalog.list_controls(audit.frameworks_audited or [])
        responses = await self.responses.list_responses(audit.id)

        update = plan_summary_update(
            AuditSummary.of(audit),
            {c.id: c for c in controls},
            responses,
            audit.total_controls_in_audit or 0,
        )
        if update.changed:
            await self._write_summary(audit, update.summary)
            logger.info(
                "Audit %s summary reconciled: %s%% (%s), %d/%d controls complete",
                audit.id, update.summary.overall_score, update.summary.overall_status,
                update.summary.completed_controls_in_audit, audit.total_controls_in_audit,
            )
        return update

    @store_call
    async def _get_audit(self, audit_id: int) -> Audit | None:
        return await self.session.get(Audit, audit_id)

    @store_call
    async def _write_summary(self, audit: Audit, summary: AuditSummary) -> None:
        audit.overall_score = summary.overall_score
        audit.overall_status = summary.overall_status
        audit.completed_controls_in_audit = summary.completed_controls_in_audit
        audit.updated_at = datetime.utcnow()
        await self.session.commit()
