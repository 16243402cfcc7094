from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item. Fields serialize in camelCase
    (dateCreated, dateCompleted, isComplete).
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "3f0c1c52-5d59-4c3e-9a55-1f6f5a8e2b10",
                "title": "Buy milk",
                "dateCreated": "2025-01-25T10:15:30.123456",
                "dateCompleted": None,
                "isComplete": False,
            }
        },
    )

    id: str = Field(..., description="Unique identifier of the todo item")
    title: str = Field(..., description="Title of the todo item")
    date_created: datetime = Field(..., description="Creation timestamp (server local time)")
    date_completed: Optional[datetime] = Field(default=None, description="Completion timestamp")
    is_complete: bool = Field(default=False, description="Completion status flag")


# PUBLIC_INTERFACE
class ProblemDetails(BaseModel):
    """
    Problem description returned for rejected writes and storage failures.
    """

    type: Optional[str] = Field(default=None, description="Error type identifier")
    title: str = Field(..., description="Short human-readable summary of the problem")
    status: int = Field(..., description="HTTP status code")
    detail: Optional[str] = Field(default=None, description="Error detail, when available")
