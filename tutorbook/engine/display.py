from datetime import datetime, tzinfo
from typing import Iterable

from tutorbook.engine.expander import SlotInstance
from tutorbook.engine.selection import SelectionSet
from tutorbook.schemas.slots import DisplaySlot, SelectionEntry, SelectionSummary, SlotState
from tutorbook.utils.utc import iso_instant, local_timezone


# background, border, text
COLORS: dict[SlotState, tuple[str, str, str]] = {
    SlotState.AVAILABLE: ("#43a547", "#2e7d2e", "white"),
    SlotState.SELECTED: ("#2e7d2e", "#1a4d1a", "white"),
    SlotState.BOOKED: ("#ccc", "#999", "#666"),
}

TITLES: dict[SlotState, str] = {
    SlotState.AVAILABLE: "Available",
    SlotState.SELECTED: "Selected",
    SlotState.BOOKED: "Booked",
}


def format_label(dt: datetime, tz: tzinfo | None = None) -> str:
    dt = dt.astimezone(tz or local_timezone())
    return f"{dt:%b} {dt.day}, {dt:%I:%M %p}"


def slot_state(slot: SlotInstance, selection: SelectionSet) -> SlotState:
    if slot.is_booked:
        return SlotState.BOOKED
    if slot in selection:
        return SlotState.SELECTED
    return SlotState.AVAILABLE


def render_slots(
    slots: Iterable[SlotInstance], selection: SelectionSet = SelectionSet(), tz: tzinfo | None = None
) -> list[DisplaySlot]:
    out = []
    for slot in slots:
        state = slot_state(slot, selection)
        background, border, text = COLORS[state]
        out.append(
            DisplaySlot(
                id=slot.key,
                title=TITLES[state],
                label=format_label(slot.start, tz),
                start=slot.key,
                end=iso_instant(slot.end),
                state=state,
                background_color=background,
                border_color=border,
                text_color=text,
            )
        )
    return out


def selection_summary(selection: SelectionSet, tz: tzinfo | None = None) -> SelectionSummary:
    return SelectionSummary(
        count=len(selection),
        slots=[
            SelectionEntry(index=i, label=format_label(item.start, tz), start=item.key, end=iso_instant(item.end))
            for i, item in enumerate(selection)
        ],
    )
