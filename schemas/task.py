from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class TaskCreate(BaseModel):
    """Body of POST /api/tasks. A missing title is rejected by the use case."""
    title: Optional[str] = None
    description: Optional[str] = None


class TaskUpdate(BaseModel):
    """Body of PUT /api/tasks/{id}.

    `completed` is None when the client left it out, in which case the
    stored value is kept.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    completed: Optional[bool] = None


class TaskResponse(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str
    title: str
    description: str
    completed: bool
    created_at: datetime
    updated_at: datetime


class MessageResponse(BaseModel):
    message: str
    error: Optional[str] = None
