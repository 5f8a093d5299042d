"""
AI remediation recommendations: /api/generate-recommendation
"""
from fastapi import APIRouter, Depends

from securauditz.deps import get_ai_service
from securauditz.schemas.recommendation import RecommendationOut, RecommendationRequest
from securauditz.services.ai_service import AIService

router = APIRouter(prefix="/api", tags=["AI"])


@router.post("/generate-recommendation", response_model=RecommendationOut, summary="AI remediation recommendation")
async def generate_recommendation(
    body: RecommendationRequest,
    ai: AIService = Depends(get_ai_service),
):
    result = await ai.generate_recommendation(
        control_objective=body.control_objective,
        audit_question=body.audit_question,
        compliance_status=body.compliance_status,
        justification_text=body.justification_text,
    )
    return RecommendationOut(recommendation=result.text, model=result.model or None)
