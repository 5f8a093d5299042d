"""
Control catalog accessor: frameworks and their control definitions.

Membership queries on ``controls.framework_id`` are capped at
MEMBERSHIP_QUERY_LIMIT values per round trip, so callers asking for many
frameworks get several queries merged into one list.
"""
import logging
from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from securauditz.errors import store_call
from securauditz.models.framework import Control, Framework

logger = logging.getLogger(__name__)

MEMBERSHIP_QUERY_LIMIT = 10

_CONTROL_COLUMNS = ("framework_id", "control_objective", "control_description", "questionnaires")


def chunked(values: list, size: int = MEMBERSHIP_QUERY_LIMIT) -> list[list]:
    """Split ``values`` into consecutive chunks of at most ``size`` items."""
    return [values[i:i + size] for i in range(0, len(values), size)]


class ControlCatalog:
    """Read access to frameworks/controls plus the bulk seeding write."""

    def __init__(self, session: AsyncSession):
        self.session = session

    @store_call
    async def list_frameworks(self) -> list[Framework]:
        q = select(Framework).order_by(Framework.id)
        return list((await self.session.execute(q)).scalars().all())

    @store_call
    async def framework_ids_for_type(self, framework_type: str) -> list[str]:
        q = select(Framework.id).where(Framework.type == framework_type).order_by(Framework.id)
        return list((await self.session.execute(q)).scalars().all())

    @store_call
    async def list_controls(self, framework_ids: Iterable[str]) -> list[Control]:
        """Union of controls belonging to any of ``framework_ids``."""
        ids = sorted(set(framework_ids))
        if not ids:
            return []

        chunks = chunked(ids)
        controls: list[Control] = []
        for chunk in chunks:
            q = select(Control).where(Control.framework_id.in_(chunk))
            controls.extend((await self.session.execute(q)).scalars().all())
        logger.debug(
            "Loaded %d controls for %d frameworks in %d queries",
            len(controls), len(ids), len(chunks),
        )
        return controls

    @store_call
    async def get_control(self, control_id: str) -> Control | None:
        return await self.session.get(Control, control_id)

    @store_call
    async def seed_controls(self, entries: list[dict]) -> int:
        """Insert or fully replace controls by id in one transaction.

        Entries without an ``id`` are skipped. Returns the number written.
        """
        now = datetime.utcnow()
        written = 0
        for entry in entries:
            control_id = entry.get("id")
            if not control_id:
                logger.warning("Skipping control with no id: %s", entry)
                continue

            attributes = {
                k: v for k, v in entry.items()
                if k != "id" and k not in _CONTROL_COLUMNS
            }
            control = await self.session.get(Control, control_id)
            if control is None:
                control = Control(id=control_id, created_at=now)
                self.session.add(control)
            control.framework_id = entry["framework_id"]
            control.control_objective = entry.get("control_objective")
            control.control_description = entry.get("control_description")
            control.questionnaires = entry.get("questionnaires") or []
            control.attributes = attributes
            control.updated_at = now
            written += 1

        await self.session.commit()
        logger.info("Seeded %d controls", written)
        return written
