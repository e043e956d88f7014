from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Iterator

from tutorbook.engine.expander import SlotInstance
from tutorbook.exceptions.bookings import SlotAlreadyBookedException
from tutorbook.utils.utc import iso_instant


@dataclass(frozen=True)
class SelectedSlot:
    start: datetime
    end: datetime

    @property
    def key(self) -> str:
        return iso_instant(self.start)


class ToggleOutcome(enum.Enum):
    ADDED = "added"
    REMOVED = "removed"
    REJECTED = "rejected"


@dataclass(frozen=True)
class ToggleResult:
    selection: SelectionSet
    outcome: ToggleOutcome
    notice: str | None = None


@dataclass(frozen=True)
class SelectionSet:
    """The slots a student picked but has not submitted yet. Every operation returns a new set."""

    items: tuple[SelectedSlot, ...] = ()

    @classmethod
    def of(cls, slots: Iterable[SelectedSlot | SlotInstance]) -> SelectionSet:
        selection = cls()
        for slot in slots:
            if slot not in selection:
                selection = selection.toggle(slot).selection
        return selection

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[SelectedSlot]:
        return iter(self.items)

    def __contains__(self, slot: object) -> bool:
        return self.index_of(slot) is not None

    def index_of(self, slot: object) -> int | None:
        if isinstance(slot, datetime):
            key = iso_instant(slot)
        elif isinstance(slot, str):
            key = slot
        elif isinstance(slot, (SelectedSlot, SlotInstance)):
            key = slot.key
        else:
            return None
        return next((i for i, item in enumerate(self.items) if item.key == key), None)

    def toggle(self, slot: SelectedSlot | SlotInstance) -> ToggleResult:
        if isinstance(slot, SlotInstance) and slot.is_booked:
            return ToggleResult(self, ToggleOutcome.REJECTED, SlotAlreadyBookedException.detail)

        if (index := self.index_of(slot)) is not None:
            return ToggleResult(self.remove(index), ToggleOutcome.REMOVED)

        item = SelectedSlot(start=slot.start, end=slot.end)
        return ToggleResult(SelectionSet((*self.items, item)), ToggleOutcome.ADDED)

    def remove(self, index: int) -> SelectionSet:
        if not -len(self.items) <= index < len(self.items):
            raise IndexError(f"selection index out of range: {index}")
        items = list(self.items)
        del items[index]
        return SelectionSet(tuple(items))

    def clear(self) -> SelectionSet:
        return SelectionSet()

    def sorted(self) -> list[SelectedSlot]:
        return sorted(self.items, key=lambda item: item.start)
