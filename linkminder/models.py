from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class SortCriterion(str, Enum):
    DATE_ADDED_ASC = "dateAdded_asc"
    DATE_ADDED_DESC = "dateAdded_desc"
    TEXT_ASC = "text_asc"
    TEXT_DESC = "text_desc"
    SCHEDULED_TIME_ASC = "scheduledTime_asc"
    SCHEDULED_TIME_DESC = "scheduledTime_desc"


class Link(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str
    url: str
    date_added: int = Field(default=0, alias="dateAdded")
    scheduled_time_display: Optional[str] = Field(default=None, alias="scheduledTimeDisplay")
    scheduled_date_time_actual: Optional[str] = Field(default=None, alias="scheduledDateTimeActual")

    def key(self) -> tuple[str, str]:
        return (self.url, self.text)

    def to_record(self) -> Dict[str, Any]:
        """Persisted shape: camelCase keys, absent optional fields omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class AddLinkRequest(BaseModel):
    text: str
    url: str


class SetReminderRequest(BaseModel):
    url: str
    text: str
    # None (or blank) clears the reminder
    reminder: Optional[str] = None
    at: Optional[datetime] = None


class RemoveLinkRequest(BaseModel):
    url: str
    text: str


class SortIn(BaseModel):
    criterion: str
