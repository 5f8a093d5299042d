"""
Control catalog: /api/frameworks, /api/seed-controls
"""
import logging

from fastapi import APIRouter, Depends

from securauditz.deps import get_catalog
from securauditz.errors import NotFoundError, ValidationError
from securauditz.schemas.framework import ControlOut, ControlSeed, FrameworkOut, SeedResult
from securauditz.services.catalog import ControlCatalog

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Frameworks"])


@router.get("/frameworks", response_model=list[FrameworkOut], summary="List frameworks")
async def list_frameworks(catalog: ControlCatalog = Depends(get_catalog)):
    return await catalog.list_frameworks()


# Declared before /frameworks/{framework_type}/controls so "control" is never read as a type
@router.get("/frameworks/control/{control_id}", response_model=ControlOut, summary="Control definition")
async def get_control(control_id: str, catalog: ControlCatalog = Depends(get_catalog)):
    control = await catalog.get_control(control_id)
    if not control:
        raise NotFoundError("Control not found.")
    logger.debug(
        "Control %s: %d questions", control.id, len(control.questionnaires or []),
    )
    return control


@router.get(
    "/frameworks/{framework_type}/controls",
    response_model=list[ControlOut],
    summary="Controls for a framework type",
)
async def list_controls_for_type(framework_type: str, catalog: ControlCatalog = Depends(get_catalog)):
    framework_ids = await catalog.framework_ids_for_type(framework_type)
    if not framework_ids:
        logger.info("No frameworks found for type %s", framework_type)
        return []
    return await catalog.list_controls(framework_ids)


@router.post("/seed-controls", response_model=SeedResult, status_code=201, summary="Bulk seed controls")
async def seed_controls(body: list[ControlSeed], catalog: ControlCatalog = Depends(get_catalog)):
    if not body:
        raise ValidationError("Request body must be a non-empty array of control objects.")
    entries = [c.model_dump(mode="json") for c in body]
    seeded = await catalog.seed_controls(entries)
    return SeedResult(
        message=f"Successfully seeded {seeded} controls.",
        seededCount=seeded,
    )
