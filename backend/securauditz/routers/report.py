"""
Audit reports: /api/audits/{audit_id}/report/pdf, /api/audits/{audit_id}/checklist/xlsx
"""
import io
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from securauditz.database import get_session
from securauditz.deps import get_catalog, get_reconciler, get_response_store
from securauditz.errors import NotFoundError
from securauditz.models.audit import Audit
from securauditz.services.catalog import ControlCatalog
from securauditz.services.progress import ProgressReconciler
from securauditz.services.report_data import AuditReport, build_audit_report
from securauditz.services.report_pdf import render_audit_pdf
from securauditz.services.report_xlsx import render_checklist_xlsx
from securauditz.services.responses import ResponseStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/audits", tags=["Reports"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


async def _load_report(
    audit_id: int,
    request: Request,
    s: AsyncSession,
    catalog: ControlCatalog,
    responses: ResponseStore,
    reconciler: ProgressReconciler,
) -> AuditReport:
    await reconciler.reconcile(audit_id)
    audit = await s.get(Audit, audit_id)
    if audit is None:
        raise NotFoundError("Audit not found.")
    controls = await catalog.list_controls(audit.frameworks_audited or [])
    snapshot = await responses.list_responses(audit_id)
    logger.debug(
        "Report for audit %s: %d controls, %d responses", audit_id, len(controls), len(snapshot),
    )
    return build_audit_report(audit, controls, snapshot, base_url=str(request.base_url))


def _download(content: bytes, media_type: str, filename: str) -> StreamingResponse:
    return StreamingResponse(
        io.BytesIO(content),
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get("/{audit_id}/report/pdf", summary="Audit report (PDF)")
async def report_pdf(
    audit_id: int,
    request: Request,
    s: AsyncSession = Depends(get_session),
    catalog: ControlCatalog = Depends(get_catalog),
    responses: ResponseStore = Depends(get_response_store),
    reconciler: ProgressReconciler = Depends(get_reconciler),
):
    report = await _load_report(audit_id, request, s, catalog, responses, reconciler)
    content = render_audit_pdf(report)
    logger.info("Generated PDF report for audit %s (%d bytes)", audit_id, len(content))
    return _download(content, "application/pdf", f"audit_report_{audit_id}.pdf")


@router.get("/{audit_id}/checklist/xlsx", summary="Audit checklist (Excel)")
async def checklist_xlsx(
    audit_id: int,
    request: Request,
    s: AsyncSession = Depends(get_session),
    catalog: ControlCatalog = Depends(get_catalog),
    responses: ResponseStore = Depends(get_response_store),
    reconciler: ProgressReconciler = Depends(get_reconciler),
):
    report = await _load_report(audit_id, request, s, catalog, responses, reconciler)
    content = render_checklist_xlsx(report)
    logger.info("Generated Excel checklist for audit %s (%d bytes)", audit_id, len(content))
    return _download(content, XLSX_MEDIA_TYPE, f"audit_checklist_{audit_id}.xlsx")
