"""
FastAPI dependency providers.

Store accessors are built per request around the request's session; the AI
adapter is built once at startup and kept on ``app.state``.
"""
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from securauditz.config import settings
from securauditz.database import get_session
from securauditz.services.ai_adapters import AIAdapter
from securauditz.services.ai_service import AIService
from securauditz.services.catalog import ControlCatalog
from securauditz.services.progress import ProgressReconciler
from securauditz.services.responses import ResponseStore


def get_catalog(s: AsyncSession = Depends(get_session)) -> ControlCatalog:
    return ControlCatalog(s)


def get_response_store(s: AsyncSession = Depends(get_session)) -> ResponseStore:
    return ResponseStore(s)


def get_reconciler(
    s: AsyncSession = Depends(get_session),
    catalog: ControlCatalog = Depends(get_catalog),
    responses: ResponseStore = Depends(get_response_store),
) -> ProgressReconciler:
    return ProgressReconciler(s, catalog, responses)


def get_ai_adapter(request: Request) -> AIAdapter | None:
    return getattr(request.app.state, "ai_adapter", None)


def get_ai_service(adapter: AIAdapter | None = Depends(get_ai_adapter)) -> AIService:
    return AIService(
        adapter,
        max_tokens=settings.AI_MAX_TOKENS,
        temperature=settings.AI_TEMPERATURE,
        timeout=settings.AI_TIMEOUT,
    )
