"""Websocket endpoints that keep calendars in sync with bookings made by other students."""

from typing import Any

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from tutorbook.database import db_wrapper
from tutorbook.dependencies import get_realtime, get_store
from tutorbook.engine.display import render_slots, selection_summary
from tutorbook.engine.realtime import RealtimeSync
from tutorbook.engine.session import BookingSession
from tutorbook.exceptions.api_exception import APIException
from tutorbook.exceptions.bookings import BookingSubmissionException, BookingValidationException
from tutorbook.exceptions.tutors import TutorNotFoundException
from tutorbook.logger import get_logger
from tutorbook.schemas.bookings import BookingCreated
from tutorbook.schemas.session import SessionCommand
from tutorbook.services.confirmation import send_confirmation
from tutorbook.services.store import DatabaseStore
from tutorbook.settings import settings
from tutorbook.utils.utc import ensure_utc


router = APIRouter()

logger = get_logger(__name__)


@router.websocket("/tutors/{tutor_id}/events")
async def booking_events(
    websocket: WebSocket, tutor_id: str, realtime: RealtimeSync = Depends(get_realtime)
) -> None:
    """Stream a notification for every new booking of the tutor."""

    await websocket.accept()

    async def forward(event: BookingCreated) -> None:
        await websocket.send_text(event.model_dump_json())

    subscription = await realtime.subscribe(tutor_id, forward)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.debug("Viewer of tutor %s disconnected", tutor_id)
    finally:
        await subscription.cancel()


class SessionHandler:
    """Drive a BookingSession from the commands of one websocket client."""

    def __init__(self, websocket: WebSocket, store: DatabaseStore, realtime: RealtimeSync) -> None:
        self.websocket = websocket
        self.store = store
        self.realtime = realtime
        self.session = BookingSession(store, horizon_days=settings.horizon_days)

    async def send(self, type_: str, **data: Any) -> None:
        await self.websocket.send_json({"type": type_, **data})

    async def push_state(self) -> None:
        await self.send(
            "state",
            tutor_id=self.session.tutor_id,
            slots=[
                slot.model_dump(mode="json")
                for slot in render_slots(self.session.visible_slots(), self.session.selection)
            ],
            selection=selection_summary(self.session.selection).model_dump(mode="json"),
        )

    async def notice(self, message: str, **data: Any) -> None:
        await self.send("notice", level="error", message=message, **data)

    @db_wrapper
    async def on_booking(self, event: BookingCreated) -> None:
        await self.session.on_booking_created(event)
        await self.push_state()

    @db_wrapper
    async def handle(self, command: SessionCommand) -> None:
        session = self.session
        if command.action == "select_tutor":
            if not command.tutor_id or not await self.store.get_tutor(command.tutor_id):
                raise TutorNotFoundException
            await session.select_tutor(command.tutor_id)
            await self.realtime.switch(command.tutor_id, self.on_booking)
        elif command.action == "window":
            if command.start is None or command.end is None:
                raise BookingValidationException("A window needs a start and an end")
            await session.change_window(ensure_utc(command.start), ensure_utc(command.end))
        elif command.action == "toggle":
            if not command.slot or not (slot := session.find_slot(command.slot)):
                raise BookingValidationException("Unknown slot")
            result = session.toggle(slot)
            if result.notice:
                await self.notice(result.notice)
        elif command.action == "remove":
            if command.index is None or not 0 <= command.index < len(session.selection):
                raise BookingValidationException("Unknown slot")
            session.remove(command.index)
        elif command.action == "clear":
            session.clear()
        elif command.action == "submit":
            await self.submit(command)

        await self.push_state()

    async def submit(self, command: SessionCommand) -> None:
        session = self.session
        selection = session.selection
        try:
            result = await session.submit(command.student_name, command.student_email)
        except BookingSubmissionException:
            # show the slots taken in the meantime as booked
            await session.refresh()
            raise

        if tutor := await self.store.get_tutor(session.tutor_id or ""):
            await send_confirmation(tutor, command.student_name, result, selection)
        await self.send(
            "booked",
            booking_ids=result.booking_ids,
            count=result.count,
            recipient=result.recipient,
            message=result.message,
        )

    async def run(self) -> None:
        try:
            while True:
                raw = await self.websocket.receive_text()
                try:
                    await self.handle(SessionCommand.model_validate_json(raw))
                except ValidationError:
                    await self.notice("Invalid command")
                except BookingSubmissionException as exc:
                    await self.notice(exc.detail, committed=exc.committed)
                    await self.push_state()
                except APIException as exc:
                    await self.notice(exc.detail)
        except WebSocketDisconnect:
            logger.debug("Booking session of tutor %s closed", self.session.tutor_id)
        finally:
            await self.realtime.close()


@router.websocket("/session")
async def booking_session(
    websocket: WebSocket,
    store: DatabaseStore = Depends(get_store),
    realtime: RealtimeSync = Depends(get_realtime),
) -> None:
    """
    Interactive booking session.

    The client sends json commands (`select_tutor`, `window`, `toggle`, `remove`, `clear`, `submit`) and receives
    the rendered slots and the selection after each of them, as well as whenever another student books a slot
    of the selected tutor.
    """

    await websocket.accept()
    await SessionHandler(websocket, store, realtime).run()
