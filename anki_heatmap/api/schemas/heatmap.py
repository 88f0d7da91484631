from datetime import date

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class GridCell(BaseModel):
    """Single day cell; `day` is empty for padding cells past the window."""

    day: date | None
    count: int
    level: int
    colour: str


class GridColumn(BaseModel):
    """One week column, Sunday first."""

    cells: list[GridCell]


class WidgetPayload(BaseModel):
    """Widget grid payload or the error shown in its place."""

    title: str = "Anki Review Graph"
    background: str
    text_colour: str
    colour_scheme: str | None = None
    weeks: int = 0
    day_of_week: int | None = None
    total: int = 0
    columns: list[GridColumn] = Field(default_factory=list)
    error: str | None = None


class CalendarDay(BaseModel):
    date: date
    count: int
    level: int


class CalendarResponse(BaseModel):
    """Dense review calendar over a trailing window."""

    model_config = ConfigDict(populate_by_name=True)

    from_date: date = Field(alias="from")
    to_date: date = Field(alias="to")
    total: int
    days: list[CalendarDay]


class AnkiConnectConfig(BaseModel):
    url: str = Field(min_length=1, max_length=2048)


class AnkiConnectStatus(BaseModel):
    configured: bool
