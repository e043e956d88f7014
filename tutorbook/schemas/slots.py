import enum
from datetime import datetime

from pydantic import BaseModel, Field


class SlotState(enum.Enum):
    AVAILABLE = "available"
    BOOKED = "booked"
    SELECTED = "selected"


class DisplaySlot(BaseModel):
    id: str = Field(description="Slot ID (ISO-8601 instant of the start)")
    title: str = Field(description="Short caption of the slot")
    label: str = Field(description="Human readable start of the slot")
    start: str = Field(description="Start of the slot (ISO-8601)")
    end: str = Field(description="End of the slot (ISO-8601)")
    state: SlotState = Field(description="Whether the slot is available, booked or selected")
    background_color: str
    border_color: str
    text_color: str


class SlotTime(BaseModel):
    start: datetime = Field(description="Start of the slot")
    end: datetime = Field(description="End of the slot")


class SelectionEntry(BaseModel):
    index: int = Field(description="Position in the selection, used for removal")
    label: str = Field(description="Human readable start of the slot")
    start: str = Field(description="Start of the slot (ISO-8601)")
    end: str = Field(description="End of the slot (ISO-8601)")


class SelectionSummary(BaseModel):
    count: int = Field(description="Number of selected slots")
    slots: list[SelectionEntry] = Field(description="Selected slots in selection order")


class ToggleSlot(BaseModel):
    selection: list[SlotTime] = Field(default_factory=list, description="The current selection")
    slot: SlotTime = Field(description="The clicked slot")


class ToggleResponse(BaseModel):
    outcome: str = Field(description="added or removed")
    selection: list[SlotTime] = Field(description="The updated selection")
    summary: SelectionSummary
