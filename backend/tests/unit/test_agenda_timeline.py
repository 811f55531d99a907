"""
Unit tests for the agenda timeline controller.

Covers day bucketing, drag-and-drop reordering (pointer and keyboard),
the ephemeral nature of the order, and form submission.
"""

import pytest
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from backend.src.services.agenda_timeline import AgendaTimeline, array_move
from backend.src.services.exceptions import NotFoundError, ValidationError


@dataclass
class FakeSession:
    guid: str
    start_time: datetime
    title: str = 'Session'
    room: Optional[str] = None


class FakeGateway:
    """Records calls; raises ``error`` when set."""

    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def create_session(self, event_guid, **fields):
        self.calls.append(('create', event_guid, fields))
        if self.error:
            raise self.error
        return FakeSession(guid='ses_new', start_time=fields['start_time'], title=fields['title'])

    def update_session(self, guid, **fields):
        self.calls.append(('update', guid, fields))
        if self.error:
            raise self.error
        return FakeSession(guid=guid, start_time=datetime(2026, 5, 12, 9), **fields)


@pytest.fixture
def sessions():
    return [
        FakeSession('ses_a', datetime(2026, 5, 12, 9, 0), title='Keynote', room='Main'),
        FakeSession('ses_b', datetime(2026, 5, 12, 11, 0)),
        FakeSession('ses_c', datetime(2026, 5, 13, 9, 0)),
        FakeSession('ses_d', datetime(2026, 5, 13, 14, 0)),
    ]


@pytest.fixture
def timeline(sessions):
    return AgendaTimeline('evt_1', sessions)


class TestArrayMove:
    """Tests for array_move."""

    def test_move_forward(self):
        assert array_move(['a', 'b', 'c', 'd'], 0, 2) == ['b', 'c', 'a', 'd']

    def test_move_backward(self):
        assert array_move(['a', 'b', 'c', 'd'], 3, 1) == ['a', 'd', 'b', 'c']

    def test_does_not_mutate_input(self):
        items = ['a', 'b']
        array_move(items, 0, 1)
        assert items == ['a', 'b']


class TestDays:
    """Tests for day bucketing."""

    def test_groups_by_start_date(self, timeline):
        days = timeline.days()

        assert [day.isoformat() for day, _ in days] == ['2026-05-12', '2026-05-13']
        assert [s.guid for s in days[0][1]] == ['ses_a', 'ses_b']
        assert [s.guid for s in days[1][1]] == ['ses_c', 'ses_d']

    def test_empty_timeline(self):
        assert AgendaTimeline('evt_1').days() == []


class TestDragAndDrop:
    """Tests for the reorder gesture."""

    def test_drop_moves_to_target_index(self, timeline):
        timeline.start_drag('ses_d')
        assert timeline.is_dragging
        assert timeline.overlay.guid == 'ses_d'

        assert timeline.drop('ses_b') is True

        assert timeline.order == ['ses_a', 'ses_d', 'ses_b', 'ses_c']
        assert not timeline.is_dragging

    def test_cross_day_move_keeps_date(self, timeline):
        """Moving a card across a day boundary changes order, not its date."""
        timeline.start_drag('ses_d')
        timeline.drop('ses_a')

        assert timeline.order[0] == 'ses_d'
        days = dict(timeline.days())
        assert [s.guid for s in days[datetime(2026, 5, 13).date()]] == ['ses_d', 'ses_c']

    def test_drop_on_itself_is_noop(self, timeline):
        timeline.start_drag('ses_b')
        assert timeline.drop('ses_b') is False
        assert timeline.order == ['ses_a', 'ses_b', 'ses_c', 'ses_d']

    def test_drop_without_target_is_noop(self, timeline):
        timeline.start_drag('ses_b')
        timeline.drag_over(None)
        assert timeline.drop() is False
        assert timeline.order == ['ses_a', 'ses_b', 'ses_c', 'ses_d']

    def test_drop_without_drag_is_noop(self, timeline):
        assert timeline.drop('ses_a') is False

    def test_drag_over_then_drop(self, timeline):
        timeline.start_drag('ses_a')
        timeline.drag_over('ses_c')
        assert timeline.drop() is True
        assert timeline.order == ['ses_b', 'ses_c', 'ses_a', 'ses_d']

    def test_cancel_drag(self, timeline):
        timeline.start_drag('ses_a')
        timeline.drag_over('ses_d')
        timeline.cancel_drag()

        assert timeline.overlay is None
        assert timeline.order == ['ses_a', 'ses_b', 'ses_c', 'ses_d']

    def test_keyboard_nudge_is_clamped(self, timeline):
        timeline.start_drag('ses_b')
        timeline.nudge(1)
        timeline.nudge(5)
        assert timeline.drag.over_guid == 'ses_d'

        timeline.nudge(-10)
        assert timeline.drag.over_guid == 'ses_a'

        assert timeline.drop() is True
        assert timeline.order == ['ses_b', 'ses_a', 'ses_c', 'ses_d']

    def test_start_drag_unknown_session(self, timeline):
        with pytest.raises(NotFoundError):
            timeline.start_drag('ses_zzz')

    def test_reload_restores_time_order(self, timeline, sessions):
        timeline.start_drag('ses_d')
        timeline.drop('ses_a')

        timeline.reload(sessions)

        assert timeline.order == ['ses_a', 'ses_b', 'ses_c', 'ses_d']


class TestForm:
    """Tests for the create/edit form."""

    def test_edit_form_prefilled(self, timeline):
        form = timeline.open_edit_form('ses_a')

        assert form.is_edit
        assert form.initial['title'] == 'Keynote'
        assert form.initial['room'] == 'Main'
        assert form.initial['start_time'] == datetime(2026, 5, 12, 9, 0)
        assert form.initial['speaker_guid'] is None

    def test_edit_form_unknown_session(self, timeline):
        with pytest.raises(NotFoundError):
            timeline.open_edit_form('ses_zzz')

    def test_submit_create_closes_form_without_splicing(self, timeline):
        gateway = FakeGateway()
        timeline.open_create_form()

        result = timeline.submit_form(
            {'title': 'Lunch', 'start_time': datetime(2026, 5, 12, 13, 0)}, gateway
        )

        assert result.success is True
        assert result.session.guid == 'ses_new'
        assert timeline.form is None
        assert 'ses_new' not in timeline.order
        assert gateway.calls[0][:2] == ('create', 'evt_1')

    def test_submit_edit_uses_update(self, timeline):
        gateway = FakeGateway()
        timeline.open_edit_form('ses_b')

        result = timeline.submit_form({'title': 'Renamed'}, gateway)

        assert result.success is True
        assert result.message == 'Session updated'
        assert gateway.calls == [('update', 'ses_b', {'title': 'Renamed'})]

    def test_submit_failure_keeps_form_open(self, timeline):
        gateway = FakeGateway(error=ValidationError('Title must be at least 3 characters', field='title'))
        timeline.open_create_form()

        result = timeline.submit_form({'title': 'ab', 'start_time': datetime(2026, 5, 12)}, gateway)

        assert result.success is False
        assert result.errors == {'title': ['Title must be at least 3 characters']}
        assert timeline.form is not None
        assert timeline.form.message == 'Title must be at least 3 characters'

    def test_submit_without_open_form(self, timeline):
        with pytest.raises(ValidationError):
            timeline.submit_form({}, FakeGateway())
