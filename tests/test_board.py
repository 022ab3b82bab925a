"""Tests for the calendar and kanban projections.

Covers:
- Resolution and the drop policy for dangling references / unknown statuses
- Card ordering by start minutes
- Shared filters and kanban date presets
- Calendar month grouping
- Move planning (only changed cards, directive handling)
"""

from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal

import pydantic
import pytest

from salon.errors import ValidationError
from salon.models.enums import AppointmentStatus, DatePreset
from salon.schemas.board import AppointmentFilter, CardMove
from salon.scheduling.board import (
    apply_change,
    calendar_month,
    kanban_cards,
    matches_filter,
    plan_moves,
    resolve_all,
)
from tests.factories import (
    DAY,
    make_appointment,
    make_client,
    make_professional,
    make_service,
    resolved_for,
)

ANA = make_client("Ana Souza")
BIA = make_client("Beatriz Rocha")
CARLA = make_professional("Carla Lima", color="#ec4899")
DANI = make_professional("Daniela Reis")
CORTE = make_service("Corte feminino", duration=60, price="80.00")
ESCOVA = make_service("Escova", duration=45, price="50.00")

CATALOGS = ([ANA, BIA], [CORTE, ESCOVA], [CARLA, DANI])


def _resolve(*appointments):
    return resolve_all(appointments, *CATALOGS)


def _whole_month(**kwargs) -> AppointmentFilter:
    return AppointmentFilter(kanban_month=DAY, **kwargs)


# ── Resolution ───────────────────────────────────────────────────────


class TestResolve:
    def test_joins_catalogs_and_derives_times(self):
        apt = make_appointment(ANA, CARLA, CORTE, start_time="14:30", notes="Prefere franja")
        (item,) = _resolve(apt)
        assert item.client_name == "Ana Souza"
        assert item.professional_color == "#ec4899"
        assert item.service_name == "Corte feminino"
        assert item.end_time == "15:30"
        assert item.total_amount == Decimal("80.00")
        assert item.visible_notes == "Prefere franja"

    def test_legacy_status_normalized(self):
        (item,) = _resolve(make_appointment(ANA, CARLA, CORTE, status="completed"))
        assert item.status == AppointmentStatus.CONCLUIDO

    def test_dangling_client_dropped(self):
        ghost = make_client("Fantasma")
        assert _resolve(make_appointment(ghost, CARLA, CORTE)) == []

    def test_dangling_service_dropped(self):
        ghost = make_service("Removido")
        assert _resolve(make_appointment(ANA, CARLA, ghost)) == []

    def test_dangling_professional_dropped(self):
        ghost = make_professional("Ex-funcionária")
        assert _resolve(make_appointment(ANA, ghost, CORTE)) == []

    def test_unknown_status_dropped(self):
        assert _resolve(make_appointment(ANA, CARLA, CORTE, status="pending")) == []

    def test_unreadable_start_time_dropped(self):
        assert _resolve(make_appointment(ANA, CARLA, CORTE, start_time="9h")) == []

    def test_multiple_services_summed(self):
        apt = make_appointment(ANA, CARLA, CORTE).model_copy(update={"service_ids": (CORTE.id, ESCOVA.id)})
        (item,) = _resolve(apt)
        assert item.duration_minutes == 105
        assert item.end_time == "10:45"
        assert item.total_amount == Decimal("130.00")
        assert item.service_name == "Corte feminino"


# ── Filters ──────────────────────────────────────────────────────────


class TestFilters:
    def test_professional_set(self):
        item = resolved_for(make_appointment(ANA, CARLA, CORTE), ANA, CARLA, CORTE)
        assert matches_filter(item, AppointmentFilter())
        assert matches_filter(item, AppointmentFilter(professional_ids=[CARLA.id, DANI.id]))
        assert not matches_filter(item, AppointmentFilter(professional_ids=[DANI.id]))

    def test_status_normalized_on_both_sides(self):
        item = resolved_for(make_appointment(ANA, CARLA, CORTE, status="scheduled"), ANA, CARLA, CORTE)
        assert matches_filter(item, AppointmentFilter(status="agendado"))
        assert matches_filter(item, AppointmentFilter(status="scheduled"))
        assert not matches_filter(item, AppointmentFilter(status="confirmado"))

    def test_client_search_case_insensitive(self):
        item = resolved_for(make_appointment(ANA, CARLA, CORTE), ANA, CARLA, CORTE)
        assert matches_filter(item, AppointmentFilter(client_search="SOUZ"))
        assert not matches_filter(item, AppointmentFilter(client_search="rocha"))

    def test_presets_only_apply_to_board(self):
        far = resolved_for(make_appointment(ANA, CARLA, CORTE, day=date(2026, 12, 1)), ANA, CARLA, CORTE)
        flt = AppointmentFilter(preset=DatePreset.TODAY)
        assert matches_filter(far, flt)
        assert not matches_filter(far, flt, kanban=True, reference=DAY)

    def test_next_week_preset(self):
        item = resolved_for(make_appointment(ANA, CARLA, CORTE, day=date(2026, 10, 27)), ANA, CARLA, CORTE)
        assert matches_filter(item, AppointmentFilter(preset=DatePreset.NEXT_WEEK), kanban=True, reference=DAY)
        assert not matches_filter(item, AppointmentFilter(preset=DatePreset.THIS_WEEK), kanban=True, reference=DAY)


# ── Kanban cards ─────────────────────────────────────────────────────


class TestKanbanCards:
    def test_ordered_by_start_minutes(self):
        resolved = _resolve(
            make_appointment(ANA, CARLA, CORTE, start_time="10:00"),
            make_appointment(BIA, DANI, ESCOVA, start_time="9:00"),
            make_appointment(ANA, DANI, ESCOVA, start_time="13:15"),
        )
        cards = kanban_cards(resolved, _whole_month(), reference=DAY)
        assert [c.start_time for c in cards] == ["9:00", "10:00", "13:15"]
        assert [c.order for c in cards] == [0, 1, 2]

    def test_order_is_index_after_filtering(self):
        resolved = _resolve(
            make_appointment(ANA, CARLA, CORTE, start_time="08:00"),
            make_appointment(BIA, DANI, ESCOVA, start_time="09:00"),
        )
        cards = kanban_cards(resolved, _whole_month(professional_ids=[DANI.id]), reference=DAY)
        assert len(cards) == 1
        assert cards[0].order == 0

    def test_default_column_from_status(self):
        resolved = _resolve(make_appointment(ANA, CARLA, CORTE, status="no-show"))
        (card,) = kanban_cards(resolved, _whole_month(), reference=DAY)
        assert card.column_id == "nao_compareceu"

    def test_directive_overrides_column(self, extra_columns):
        resolved = _resolve(make_appointment(ANA, CARLA, CORTE, notes="kanbanColumnId:em-contato"))
        (card,) = kanban_cards(resolved, _whole_month(), reference=DAY)
        assert card.column_id == "em-contato"
        assert card.status == AppointmentStatus.AGENDADO

    def test_month_cursor_is_independent(self):
        resolved = _resolve(make_appointment(ANA, CARLA, CORTE, day=date(2026, 11, 3)))
        assert kanban_cards(resolved, _whole_month(), reference=DAY) == []
        cards = kanban_cards(resolved, AppointmentFilter(kanban_month=date(2026, 11, 1)), reference=DAY)
        assert len(cards) == 1


# ── Calendar ─────────────────────────────────────────────────────────


class TestCalendarMonth:
    def test_grouped_by_day_and_sorted(self):
        resolved = _resolve(
            make_appointment(ANA, CARLA, CORTE, day=date(2026, 10, 20), start_time="15:00"),
            make_appointment(BIA, DANI, ESCOVA, day=date(2026, 10, 20), start_time="9:30"),
            make_appointment(ANA, CARLA, ESCOVA, day=date(2026, 10, 2), start_time="11:00"),
            make_appointment(BIA, CARLA, CORTE, day=date(2026, 11, 2), start_time="11:00"),
        )
        days = calendar_month(resolved, AppointmentFilter(), date(2026, 10, 1))
        assert [d.day for d in days] == [date(2026, 10, 2), date(2026, 10, 20)]
        assert [e.start_time for e in days[1].entries] == ["9:30", "15:00"]
        assert days[1].entries[0].duration_label == "45min"

    def test_entries_hide_directive(self, extra_columns):
        resolved = _resolve(make_appointment(ANA, CARLA, CORTE, notes="Retorno kanbanColumnId:em-contato"))
        (day,) = calendar_month(resolved, AppointmentFilter(), DAY)
        assert day.entries[0].notes == "Retorno"


# ── Move planning ────────────────────────────────────────────────────


class TestPlanMoves:
    def test_only_changed_cards(self):
        a = make_appointment(ANA, CARLA, CORTE, start_time="09:00")
        b = make_appointment(BIA, DANI, ESCOVA, start_time="10:00", status="confirmado")
        resolved = _resolve(a, b)
        changes = plan_moves(
            resolved,
            [CardMove(card_id=a.id, column_id="confirmado"), CardMove(card_id=b.id, column_id="confirmado")],
        )
        assert [c.appointment_id for c in changes] == [a.id]
        assert changes[0].status == AppointmentStatus.CONFIRMADO
        assert changes[0].notes == ""

    def test_move_to_extra_column_writes_directive(self, extra_columns):
        a = make_appointment(ANA, CARLA, CORTE, status="confirmado", notes="Ligar antes")
        (change,) = plan_moves(_resolve(a), [CardMove(card_id=a.id, column_id="em-contato")])
        assert change.status == AppointmentStatus.AGENDADO
        assert change.notes == "Ligar antes kanbanColumnId:em-contato"

    def test_override_then_status_change(self, extra_columns):
        a = make_appointment(ANA, CARLA, CORTE, notes="kanbanColumnId:em-contato")
        (change,) = plan_moves(_resolve(a), [CardMove(card_id=a.id, column_id="concluido")])
        assert change.status == AppointmentStatus.CONCLUIDO
        assert "kanbanColumnId" not in change.notes

    def test_unknown_card_ignored(self):
        assert plan_moves(_resolve(), [CardMove(card_id=uuid.uuid4(), column_id="concluido")]) == []

    def test_apply_change_projects_locally(self, extra_columns):
        a = make_appointment(ANA, CARLA, CORTE)
        (item,) = _resolve(a)
        (change,) = plan_moves([item], [CardMove(card_id=a.id, column_id="em-contato")])
        moved = apply_change(item, change)
        assert moved.column_override == "em-contato"
        assert moved.visible_notes == ""
        assert item.column_override is None

    def test_unknown_lane_rejected(self):
        a = make_appointment(ANA, CARLA, CORTE, status="confirmado", notes="Ligar antes")
        with pytest.raises(ValidationError, match="lixo"):
            plan_moves(_resolve(a), [CardMove(card_id=a.id, column_id="lixo")])

    def test_extra_lane_only_when_configured(self):
        a = make_appointment(ANA, CARLA, CORTE)
        with pytest.raises(ValidationError):
            plan_moves(_resolve(a), [CardMove(card_id=a.id, column_id="em-contato")])

    def test_no_show_lane_accepted(self):
        a = make_appointment(ANA, CARLA, CORTE)
        (change,) = plan_moves(_resolve(a), [CardMove(card_id=a.id, column_id="nao_compareceu")])
        assert change.status == AppointmentStatus.NAO_COMPARECEU
        assert change.notes == ""

    @pytest.mark.parametrize("column_id", ["em_contato", "Confirmado", "lane 2"])
    def test_lane_id_outside_directive_alphabet(self, column_id):
        with pytest.raises(pydantic.ValidationError):
            CardMove(card_id=uuid.uuid4(), column_id=column_id)
