from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import Deadline, TodoStatus


def _normalize_due_date(value: Union[date, str, None]) -> Union[date, str, None]:
    """
    Internal helper for due_date input.
    - A date is serialized to YYYY-MM-DD.
    - A string is stripped and kept as given; its format is not checked.
    """
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        return value.strip()
    return value


# PUBLIC_INTERFACE
class TodoCreate(BaseModel):
    """
    Schema for creating a new Todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "content": "Buy groceries",
                "due_date": "2030-04-01",
            }
        }
    )

    content: str = Field(..., description="What needs doing", min_length=1, max_length=255)
    due_date: str = Field(..., description="Due date, normally YYYY-MM-DD", min_length=1, max_length=32)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        """
        Strip whitespace and reject blank content.
        """
        s = v.strip()
        if not s:
            raise ValueError("content must not be blank")
        return s

    @field_validator("due_date", mode="before")
    @classmethod
    def normalize_due_date(cls, v: Union[date, str, None]) -> Union[date, str, None]:
        return _normalize_due_date(v)


# PUBLIC_INTERFACE
class StatusUpdate(BaseModel):
    """
    Schema for changing the completion status of a Todo.
    """

    model_config = ConfigDict(json_schema_extra={"example": {"status": 1}})

    status: TodoStatus = Field(..., description="0 = incomplete, 1 = complete")

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, v):
        # Form-style clients send "0" / "1"
        if isinstance(v, str) and v.strip().isdigit():
            return int(v.strip())
        return v


# PUBLIC_INTERFACE
class UserOut(BaseModel):
    """Public view of a user."""

    id: int
    nickname: str
    name: str
    avatar_url: Optional[str] = None


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 123,
                "user_id": 1,
                "content": "Buy groceries",
                "due_date": "2030-04-01",
                "status": 0,
                "created_at": "2025-01-25T10:15:30.123456",
                "updated_at": "2025-01-26T09:00:00.000001",
            }
        }
    )

    id: int = Field(..., description="Unique identifier of the todo item")
    user_id: int = Field(..., description="Owning user id")
    content: str = Field(..., description="What needs doing")
    due_date: str = Field(..., description="Due date as submitted")
    status: TodoStatus = Field(..., description="0 = incomplete, 1 = complete")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")


# PUBLIC_INTERFACE
class TodoDetail(BaseModel):
    """A Todo together with its deadline classification for the detail page."""

    todo: TodoOut
    deadline: Deadline = Field(..., description="within or overdue, relative to today")
    message: str = Field(..., description="Deadline notice shown on the page")
    share_url: Optional[str] = Field(
        default=None, description="Tweet intent link, present only when overdue"
    )
    ogp_image_url: str = Field(..., description="Social preview image for this Todo")


# PUBLIC_INTERFACE
class ProfilePage(BaseModel):
    """
    Envelope for a user's Todo listing.
    """

    user: UserOut
    items: List[TodoOut] = Field(..., description="List of Todo items")
    total: int = Field(..., description="Total number of items matching the query")
    limit: int = Field(..., description="Limit applied to the query")
    offset: int = Field(..., description="Offset applied to the query")


# PUBLIC_INTERFACE
class Link(BaseModel):
    label: str
    href: str


# PUBLIC_INTERFACE
class HomePage(BaseModel):
    """Dashboard payload."""

    title: str
    user: Optional[UserOut] = None
    links: List[Link]
    near_due_count: int = 0
    near_due_message: Optional[str] = None
