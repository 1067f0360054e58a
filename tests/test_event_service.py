"""Unit tests for EventService and the hint visibility filter."""
import uuid

import pytest

from app.exceptions import EventClosed, NotFound
from app.services.hint_service import visible_hints, visible_levels


class TestValidateCode:

    @pytest.mark.asyncio
    async def test_case_insensitive(self, event_service, event):
        found = await event_service.validate_code("  kople ")
        assert found is event

    @pytest.mark.asyncio
    async def test_unknown_code(self, event_service, event):
        with pytest.raises(NotFound):
            await event_service.validate_code("NOPE")

    @pytest.mark.asyncio
    async def test_ended_event(self, event_service, store):
        store.add_event(code="PAST", status="ended")
        with pytest.raises(EventClosed):
            await event_service.validate_code("past")


class TestLookups:

    @pytest.mark.asyncio
    async def test_rounds_sorted_by_order(self, event_service, store, event):
        store.add_round(event.id, "Final", ["H1", "H2", "H3"], order=3)
        store.add_round(event.id, "Opening", ["H1"], order=1)
        store.add_round(event.id, "Middle", ["H1", "H2"], order=2)

        rounds = await event_service.list_rounds(event.id)

        assert [r.name for r in rounds] == ["Opening", "Middle", "Final"]

    @pytest.mark.asyncio
    async def test_participants_scoped_to_event(self, event_service, store, event, make_participants):
        make_participants(3)
        other = store.add_event(code="ELSEWHERE")
        store.add_participant(other.id, "Stranger")

        participants = await event_service.list_participants(event.id)

        assert len(participants) == 3
        assert all(p.event_id == event.id for p in participants)

    @pytest.mark.asyncio
    async def test_unknown_event(self, event_service):
        with pytest.raises(NotFound):
            await event_service.get_event(uuid.uuid4())
        with pytest.raises(NotFound):
            await event_service.list_rounds(uuid.uuid4())


class TestHintVisibility:

    def test_filters_by_active_round_levels(self, store, event, make_participants):
        (p,) = make_participants(1)
        hints = [
            store.add_hint(p, "H3", {"languages": ["ko"]}),
            store.add_hint(p, "H1", {"chronotype": "evening"}),
            store.add_hint(p, "H5", {"phoneCase": "clear"}),
        ]
        rnd = store.add_round(event.id, "Round 3", ["H1", "H2", "H3"], is_active=True)

        assert [h.level for h in visible_hints(hints, rnd)] == ["H3", "H1"]

    def test_no_round(self, store, make_participants):
        (p,) = make_participants(1)
        hints = [store.add_hint(p, "H1", {"taste": "sweet"})]
        assert visible_hints(hints, None) == []
        assert visible_levels(None) == set()
