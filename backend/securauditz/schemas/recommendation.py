from pydantic import BaseModel, Field


class RecommendationRequest(BaseModel):
    control_objective: str = Field(..., min_length=1)
    audit_question: str = Field(..., min_length=1)
    compliance_status: str = Field(..., min_length=1)
    justification_text: str | None = None


class RecommendationOut(BaseModel):
    recommendation: str
    model: str | None = None
