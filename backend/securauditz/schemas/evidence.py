from pydantic import BaseModel


class EvidenceUploadOut(BaseModel):
    message: str
    evidence_path: str
    evidence_filename: str
