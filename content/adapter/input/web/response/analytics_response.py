from pydantic import BaseModel, Field


class DailyVisits(BaseModel):
    day: str = Field(description="UTC date, YYYY-MM-DD")
    visits: int = Field(ge=0)


class HalfHourVisits(BaseModel):
    bucket: str = Field(description="UTC half hour start, YYYY-MM-DDTHH:00 or YYYY-MM-DDTHH:30")
    visits: int = Field(ge=0)


class AnalyticsResponse(BaseModel):
    per_day: list[DailyVisits] = Field(default_factory=list)
    per_30_min: list[HalfHourVisits] = Field(default_factory=list)
