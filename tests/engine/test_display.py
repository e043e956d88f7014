from datetime import timedelta

from tests.fakes import TUTOR, TZ, local
from tutorbook.engine.display import format_label, render_slots, selection_summary
from tutorbook.engine.expander import SlotInstance
from tutorbook.engine.selection import SelectionSet
from tutorbook.schemas.slots import SlotState


def slot(hour: int, booked: bool = False) -> SlotInstance:
    start = local(2026, 10, 19, hour)
    return SlotInstance(tutor_id=TUTOR, start=start, end=start + timedelta(hours=1), is_booked=booked)


def test__format_label() -> None:
    assert format_label(local(2026, 10, 19, 9), TZ) == "Oct 19, 09:00 AM"
    assert format_label(local(2026, 11, 2, 15, 30), TZ) == "Nov 2, 03:30 PM"


def test__render_slots_states() -> None:
    slots = [slot(9), slot(10, booked=True), slot(11)]
    selection = SelectionSet.of([slots[2]])

    rendered = render_slots(slots, selection, TZ)

    assert [s.state for s in rendered] == [SlotState.AVAILABLE, SlotState.BOOKED, SlotState.SELECTED]
    assert [s.title for s in rendered] == ["Available", "Booked", "Selected"]
    assert rendered[0].id == rendered[0].start == "2026-10-19T07:00:00.000Z"
    assert rendered[0].end == "2026-10-19T08:00:00.000Z"
    assert rendered[0].background_color == "#43a547"
    assert rendered[1].background_color == "#ccc"
    assert rendered[2].background_color == "#2e7d2e"


def test__selection_summary() -> None:
    summary = selection_summary(SelectionSet.of([slot(11), slot(9)]), TZ)

    assert summary.count == 2
    assert [(entry.index, entry.label) for entry in summary.slots] == [(0, "Oct 19, 11:00 AM"), (1, "Oct 19, 09:00 AM")]
