"""Optimistic batch updates for kanban moves.

The board shows the moved cards in their new lanes before any write
reaches the data store. All writes of a batch run concurrently; if any
of them fails the board is put back exactly as it was and the caller
gets a single BoardRollbackError.

A batch is a tiny state machine:

    IDLE --apply--> APPLYING --commit--> COMMITTED
                             --rollback--> ROLLED_BACK
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Awaitable, Callable, Iterable
from enum import Enum

from salon.admin.events import emit
from salon.errors import BoardRollbackError
from salon.schemas.board import AppointmentChange, ResolvedAppointment
from salon.schemas.events import EventType, SystemEvent
from salon.scheduling.board import apply_change

logger = logging.getLogger(__name__)

WriteFn = Callable[[AppointmentChange], Awaitable[object]]

ROLLBACK_MESSAGE = "Não foi possível salvar as alterações. As mudanças foram revertidas."


class BatchState(str, Enum):
    IDLE = "idle"
    APPLYING = "applying"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


TRANSITIONS: dict[BatchState, dict[str, BatchState]] = {
    BatchState.IDLE: {"apply": BatchState.APPLYING},
    BatchState.APPLYING: {
        "commit": BatchState.COMMITTED,
        "rollback": BatchState.ROLLED_BACK,
    },
    BatchState.COMMITTED: {},
    BatchState.ROLLED_BACK: {},
}


class AppointmentBoard:
    """In-memory list of resolved appointments backing both views."""

    def __init__(self, appointments: Iterable[ResolvedAppointment] = ()) -> None:
        self._appointments: tuple[ResolvedAppointment, ...] = tuple(appointments)

    @property
    def appointments(self) -> tuple[ResolvedAppointment, ...]:
        return self._appointments

    def snapshot(self) -> tuple[ResolvedAppointment, ...]:
        # Records are frozen, so the tuple itself is the snapshot.
        return self._appointments

    def restore(self, snapshot: tuple[ResolvedAppointment, ...]) -> None:
        self._appointments = snapshot

    def project(self, changes: Iterable[AppointmentChange]) -> None:
        """Apply planned writes locally, before they are persisted."""
        by_id = {c.appointment_id: c for c in changes}
        self._appointments = tuple(
            apply_change(apt, by_id[apt.id]) if apt.id in by_id else apt for apt in self._appointments
        )


class OptimisticBatch:
    """One all-or-nothing set of board writes."""

    def __init__(
        self,
        board: AppointmentBoard,
        changes: Iterable[AppointmentChange],
        tenant_id: uuid.UUID | None = None,
    ) -> None:
        self.board = board
        self.changes = list(changes)
        self.tenant_id = tenant_id
        self.state = BatchState.IDLE
        self.snapshot: tuple[ResolvedAppointment, ...] | None = None

    def _transition(self, trigger: str) -> None:
        allowed = TRANSITIONS[self.state]
        if trigger not in allowed:
            msg = f"Invalid transition: {self.state.value} --{trigger}--> ??? (valid: {list(allowed.keys())})"
            raise ValueError(msg)
        old = self.state
        self.state = allowed[trigger]
        logger.info("Batch transition: %s --%s--> %s (%d writes)", old.value, trigger, self.state.value, len(self.changes))

    async def run(self, write: WriteFn) -> tuple[ResolvedAppointment, ...]:
        """Project locally, persist every change concurrently, commit or roll back.

        Raises:
            BoardRollbackError: At least one write failed; the board was restored.
            ValueError: The batch was already run.
        """
        self._transition("apply")
        self.snapshot = self.board.snapshot()
        self.board.project(self.changes)

        results = await asyncio.gather(*(write(c) for c in self.changes), return_exceptions=True)
        failures = [r for r in results if isinstance(r, BaseException)]

        if failures:
            self.board.restore(self.snapshot)
            self._transition("rollback")
            logger.error("Board batch failed (%d of %d writes): %s", len(failures), len(self.changes), failures[0])
            await emit(SystemEvent(
                event_type=EventType.BOARD_MOVES_ROLLED_BACK,
                tenant_id=self.tenant_id,
                data={
                    "appointment_ids": [str(c.appointment_id) for c in self.changes],
                    "failures": len(failures),
                },
                source_module="scheduling.optimistic",
            ))
            raise BoardRollbackError(ROLLBACK_MESSAGE) from failures[0]

        self._transition("commit")
        if self.changes:
            await emit(SystemEvent(
                event_type=EventType.BOARD_MOVES_COMMITTED,
                tenant_id=self.tenant_id,
                data={
                    "moves": [
                        {"appointment_id": str(c.appointment_id), "status": c.status.value} for c in self.changes
                    ],
                },
                source_module="scheduling.optimistic",
            ))
        return self.board.appointments
