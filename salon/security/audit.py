"""Audit log subscriber: persists every SystemEvent to the audit_log table.

Registered as a global subscriber (receives ALL events). Failures are
logged and never propagate to the event system.
"""

from __future__ import annotations

import logging

from salon.db.engine import async_session_factory
from salon.models.audit import AuditLog
from salon.schemas.events import SystemEvent

logger = logging.getLogger(__name__)


async def audit_on_event(event: SystemEvent) -> None:
    """Write a SystemEvent to the audit_log table."""
    try:
        async with async_session_factory() as db:
            db.add(
                AuditLog(
                    event_type=event.event_type.value,
                    tenant_id=event.tenant_id,
                    actor_id=event.actor_id,
                    data=event.data,
                )
            )
            await db.commit()
    except Exception:
        logger.exception(
            "Failed to persist audit event: %s (tenant=%s)",
            event.event_type.value,
            event.tenant_id,
        )
