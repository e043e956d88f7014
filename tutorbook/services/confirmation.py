from typing import Iterable

from tutorbook import models
from tutorbook.engine.display import format_label
from tutorbook.engine.selection import SelectedSlot
from tutorbook.engine.submitter import BookingResult
from tutorbook.utils.email import BOOKING_CONFIRMED


async def send_confirmation(
    tutor: models.Tutor, student_name: str, result: BookingResult, slots: Iterable[SelectedSlot]
) -> bool:
    sessions = "\n".join(f"- {format_label(slot.start)}" for slot in sorted(slots, key=lambda slot: slot.start))
    return await BOOKING_CONFIRMED.send(
        result.recipient, count=result.count, tutor=tutor.name, name=student_name.strip(), sessions=sessions
    )
