import re
import uuid
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from domain.errors import StoreError, ValidationError

TITLE_REQUIRED = "Title is required"

_TASK_ID_RE = re.compile(r"^[0-9a-f]{24}$")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_task_id() -> str:
    return uuid.uuid4().hex[:24]


def parse_task_id(raw: str) -> str:
    """Return the canonical form of a task identifier or raise StoreError."""
    if not isinstance(raw, str) or not _TASK_ID_RE.match(raw.lower()):
        raise StoreError(f"Invalid task identifier: {raw!r}")
    return raw.lower()


@dataclass
class Task:
    title: Optional[str]
    description: Optional[str] = ""
    completed: bool = False
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def validate(self) -> None:
        if self.title is None or not self.title.strip():
            raise ValidationError(TITLE_REQUIRED)

    def normalize(self) -> None:
        self.title = self.title.strip()
        self.description = (self.description or "").strip()
        self.completed = bool(self.completed)

    def touch(self, now: Optional[datetime] = None) -> None:
        """Stamp the task for a save.

        created_at is assigned only once. updated_at always moves forward,
        by a microsecond if the clock has not advanced since the last save.
        """
        now = now or utcnow()
        if self.created_at is None:
            self.created_at = now
            self.updated_at = now
            return
        floor = (self.updated_at or self.created_at) + timedelta(microseconds=1)
        self.updated_at = max(now, floor)

    def to_dict(self) -> dict:
        return asdict(self)
