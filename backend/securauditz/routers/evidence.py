"""
Evidence uploads: /api/upload-evidence
Files are stored on local disk and served back under /uploads.
"""
import logging
import os
import uuid

from fastapi import APIRouter, File, UploadFile

from securauditz.config import settings
from securauditz.errors import ValidationError
from securauditz.schemas.evidence import EvidenceUploadOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Evidence"])


@router.post("/upload-evidence", response_model=EvidenceUploadOut, summary="Upload evidence file")
async def upload_evidence(evidenceFile: UploadFile = File(...)):
    if not evidenceFile.filename:
        raise ValidationError("No file uploaded.")

    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    ext = os.path.splitext(evidenceFile.filename)[1]
    stored_name = f"evidenceFile-{uuid.uuid4().hex}{ext}"
    path = os.path.join(settings.UPLOAD_DIR, stored_name)

    content = await evidenceFile.read()
    with open(path, "wb") as f:
        f.write(content)
    logger.info("Stored evidence %s as %s (%d bytes)", evidenceFile.filename, stored_name, len(content))

    return EvidenceUploadOut(
        message="File uploaded successfully",
        evidence_path=f"/uploads/{stored_name}",
        evidence_filename=evidenceFile.filename,
    )
