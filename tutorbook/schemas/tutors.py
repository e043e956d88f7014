from pydantic import BaseModel, Field


class Tutor(BaseModel):
    id: str = Field(description="Tutor ID")
    name: str = Field(description="Name of the tutor")
    subject: str = Field(description="Subject taught by the tutor")


class AvailabilityRule(BaseModel):
    id: str = Field(description="Availability rule ID")
    day_of_week: int = Field(ge=0, le=6, description="Weekday of the rule (0=Sunday, 1=Monday, ...)")
    start_time: str = Field(description="Start of the weekly window (HH:MM)")
    end_time: str = Field(description="End of the weekly window (HH:MM)")
