"""Tests for optimistic board batches.

Covers:
- Local projection before any write
- Commit path and emitted event
- Rollback restores the exact snapshot when any write fails
- Batch state machine
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from salon.errors import BoardRollbackError, PersistenceError
from salon.models.enums import AppointmentStatus
from salon.schemas.board import CardMove
from salon.schemas.events import EventType
from salon.scheduling.board import plan_moves, resolve_all
from salon.scheduling.optimistic import AppointmentBoard, BatchState, OptimisticBatch
from tests.factories import make_appointment, make_client, make_professional, make_service

CLIENT = make_client()
PRO = make_professional()
SERVICE = make_service()


def _board(n: int = 3) -> AppointmentBoard:
    appointments = [make_appointment(CLIENT, PRO, SERVICE, start_time=f"{9 + i:02d}:00") for i in range(n)]
    return AppointmentBoard(resolve_all(appointments, [CLIENT], [SERVICE], [PRO]))


def _changes(board: AppointmentBoard, column: str = "concluido"):
    return plan_moves(board.appointments, [CardMove(card_id=a.id, column_id=column) for a in board.appointments])


# ── Commit ───────────────────────────────────────────────────────────


class TestCommit:
    @pytest.mark.asyncio()
    async def test_all_writes_succeed(self):
        board = _board()
        write = AsyncMock()
        batch = OptimisticBatch(board, _changes(board))

        with patch("salon.scheduling.optimistic.emit", new_callable=AsyncMock) as mock_emit:
            result = await batch.run(write)

        assert batch.state == BatchState.COMMITTED
        assert write.await_count == 3
        assert all(a.status == AppointmentStatus.CONCLUIDO for a in result)
        event = mock_emit.call_args.args[0]
        assert event.event_type == EventType.BOARD_MOVES_COMMITTED
        assert len(event.data["moves"]) == 3

    @pytest.mark.asyncio()
    async def test_projection_happens_before_writes(self):
        board = _board(1)
        seen = []

        async def write(change):
            seen.append(board.appointments[0].status)

        with patch("salon.scheduling.optimistic.emit", new_callable=AsyncMock):
            await OptimisticBatch(board, _changes(board)).run(write)

        assert seen == [AppointmentStatus.CONCLUIDO]

    @pytest.mark.asyncio()
    async def test_writes_run_concurrently(self):
        board = _board()
        in_flight = 0
        peak = 0

        async def write(change):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0)
            in_flight -= 1

        with patch("salon.scheduling.optimistic.emit", new_callable=AsyncMock):
            await OptimisticBatch(board, _changes(board)).run(write)

        assert peak == 3


# ── Rollback ─────────────────────────────────────────────────────────


class TestRollback:
    @pytest.mark.asyncio()
    @pytest.mark.parametrize("failing", [0, 1, 2])
    async def test_any_failure_restores_snapshot(self, failing):
        board = _board()
        before = board.snapshot()
        changes = _changes(board)
        failing_id = changes[failing].appointment_id

        async def write(change):
            if change.appointment_id == failing_id:
                raise PersistenceError("timeout")

        batch = OptimisticBatch(board, changes)
        with patch("salon.scheduling.optimistic.emit", new_callable=AsyncMock) as mock_emit:
            with pytest.raises(BoardRollbackError, match="revertidas"):
                await batch.run(write)

        assert board.appointments == before
        assert batch.state == BatchState.ROLLED_BACK
        assert batch.snapshot == before
        assert mock_emit.call_args.args[0].event_type == EventType.BOARD_MOVES_ROLLED_BACK

    @pytest.mark.asyncio()
    async def test_rollback_error_is_a_persistence_error(self):
        board = _board(1)

        with patch("salon.scheduling.optimistic.emit", new_callable=AsyncMock):
            with pytest.raises(PersistenceError):
                await OptimisticBatch(board, _changes(board)).run(AsyncMock(side_effect=RuntimeError("boom")))


# ── State machine ────────────────────────────────────────────────────


class TestStateMachine:
    @pytest.mark.asyncio()
    async def test_batch_runs_once(self):
        board = _board(1)
        batch = OptimisticBatch(board, _changes(board))
        with patch("salon.scheduling.optimistic.emit", new_callable=AsyncMock):
            await batch.run(AsyncMock())
            with pytest.raises(ValueError, match="Invalid transition"):
                await batch.run(AsyncMock())

    def test_starts_idle(self):
        assert OptimisticBatch(_board(0), []).state == BatchState.IDLE
