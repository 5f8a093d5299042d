"""
Audits and per-control responses: /api/audits
"""
import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from securauditz.database import get_session
from securauditz.deps import get_catalog, get_reconciler, get_response_store
from securauditz.errors import NotFoundError, store_call
from securauditz.models.audit import Audit
from securauditz.schemas.audit import (
    AuditCreate,
    AuditDetailOut,
    AuditOut,
    ResponseOut,
    ResponseUpdate,
    ResponseUpdateResult,
)
from securauditz.services.catalog import ControlCatalog
from securauditz.services.progress import STATUS_NOT_STARTED, ProgressReconciler
from securauditz.services.responses import ResponseStore, placeholder_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/audits", tags=["Audits"])


@store_call
async def _create_audit(s: AsyncSession, responses: ResponseStore, audit: Audit, controls) -> Audit:
    s.add(audit)
    await s.flush()
    responses.initialize_responses(audit, controls)
    await s.commit()
    await s.refresh(audit)
    return audit


@store_call
async def _list_user_audits(s: AsyncSession, user_id: str) -> list[Audit]:
    q = select(Audit).where(Audit.user_id == user_id).order_by(Audit.created_at.desc(), Audit.id.desc())
    return list((await s.execute(q)).scalars().all())


@store_call
async def _get_audit(s: AsyncSession, audit_id: int) -> Audit | None:
    return await s.get(Audit, audit_id)


@router.post("", response_model=AuditOut, status_code=201, summary="New audit")
async def create_audit(
    body: AuditCreate,
    s: AsyncSession = Depends(get_session),
    catalog: ControlCatalog = Depends(get_catalog),
    responses: ResponseStore = Depends(get_response_store),
):
    framework_ids = await catalog.framework_ids_for_type(body.domain_type)
    if not framework_ids:
        raise NotFoundError(
            f"No frameworks found for domain type: {body.domain_type}. Cannot create audit."
        )
    controls = await catalog.list_controls(framework_ids)

    audit = Audit(
        title=body.title,
        description=body.description or "",
        user_id=body.user_id,
        domain_type=body.domain_type,
        frameworks_audited=framework_ids,
        total_controls_in_audit=len(controls),
        overall_status=STATUS_NOT_STARTED,
        overall_score=0,
        completed_controls_in_audit=0,
        client_company_name=body.client_company_name,
        client_spoc_name=body.client_spoc_name or None,
        client_spoc_email=body.client_spoc_email or None,
        client_spoc_phone=body.client_spoc_phone or None,
    )
    audit = await _create_audit(s, responses, audit, controls)
    logger.info(
        "Created audit %s (%s) with %d controls across %d frameworks",
        audit.id, audit.domain_type, len(controls), len(framework_ids),
    )
    return audit


@router.get("", response_model=list[AuditOut], summary="Audits of a user")
async def list_audits(
    user_id: str = Query(..., alias="userId", min_length=1),
    s: AsyncSession = Depends(get_session),
):
    return await _list_user_audits(s, user_id)


@router.get("/{audit_id}", response_model=AuditDetailOut, summary="Audit with responses")
async def get_audit(
    audit_id: int,
    s: AsyncSession = Depends(get_session),
    reconciler: ProgressReconciler = Depends(get_reconciler),
    responses: ResponseStore = Depends(get_response_store),
):
    await reconciler.reconcile(audit_id)
    audit = await _get_audit(s, audit_id)
    snapshot = await responses.list_responses(audit_id)
    out = AuditDetailOut.model_validate(audit)
    out.responses = [ResponseOut.model_validate(r) for r in snapshot.values()]
    return out


@router.get("/{audit_id}/responses/{control_id}", response_model=ResponseOut, summary="Response for one control")
async def get_control_response(
    audit_id: int,
    control_id: str,
    catalog: ControlCatalog = Depends(get_catalog),
    responses: ResponseStore = Depends(get_response_store),
):
    response = await responses.get_response(audit_id, control_id)
    if response is None:
        logger.debug("No response for audit %s control %s, returning placeholder", audit_id, control_id)
        control = await catalog.get_control(control_id)
        return placeholder_response(control_id, control)
    return response


@router.put("/{audit_id}/responses", response_model=ResponseUpdateResult, summary="Submit control response")
async def update_control_response(
    audit_id: int,
    body: ResponseUpdate,
    s: AsyncSession = Depends(get_session),
    catalog: ControlCatalog = Depends(get_catalog),
    responses: ResponseStore = Depends(get_response_store),
    reconciler: ProgressReconciler = Depends(get_reconciler),
):
    audit = await _get_audit(s, audit_id)
    if audit is None:
        raise NotFoundError("Audit not found.")
    control = await catalog.get_control(body.control_id)
    if control is None:
        raise NotFoundError(f"Control {body.control_id} not found.")
    if control.framework_id not in (audit.frameworks_audited or []):
        raise NotFoundError(f"Control {body.control_id} is not part of audit {audit_id}.")

    fields = body.model_dump(exclude_unset=True, exclude={"control_id"})
    await responses.upsert_response(audit_id, body.control_id, fields)
    update = await reconciler.reconcile(audit_id)

    return ResponseUpdateResult(
        message="Audit response and overall progress updated successfully",
        newOverallProgress=update.summary.overall_score,
        newOverallStatus=update.summary.overall_status,
        completedControls=update.summary.completed_controls_in_audit,
    )
