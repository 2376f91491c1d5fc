import asyncio
import logging
from typing import List

from domain.entities import TITLE_REQUIRED, Task
from domain.errors import NotFoundError, ValidationError
from infrastructure.database import Database
from schemas.task import TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)


def _require_title(title) -> str:
    if title is None or not title.strip():
        raise ValidationError(TITLE_REQUIRED)
    return title.strip()


class TaskUseCases:
    """Task operations over an injected store.

    Store calls run in a worker thread, so each await is a point where other
    requests may interleave. Update, toggle and delete read the task and
    then write it back without any version check; concurrent writers to the
    same task can overwrite each other.
    """

    def __init__(self, db: Database):
        self.db = db

    async def _fetch(self, task_id: str) -> Task:
        task = await asyncio.to_thread(self.db.find_by_id, task_id)
        if task is None:
            raise NotFoundError(f"Task {task_id} not found")
        return task

    async def list_tasks(self) -> List[Task]:
        return await asyncio.to_thread(self.db.find_all)

    async def get_task(self, task_id: str) -> Task:
        return await self._fetch(task_id)

    async def create_task(self, data: TaskCreate) -> Task:
        task = Task(
            title=_require_title(data.title),
            description=(data.description or "").strip(),
            completed=False,
        )
        created = await asyncio.to_thread(self.db.save, task)
        logger.info("Created task %s", created.id)
        return created

    async def update_task(self, task_id: str, data: TaskUpdate) -> Task:
        task = await self._fetch(task_id)
        task.title = _require_title(data.title)
        task.description = (data.description or "").strip()
        if data.completed is not None:
            task.completed = data.completed
        updated = await asyncio.to_thread(self.db.save, task)
        logger.info("Updated task %s", updated.id)
        return updated

    async def toggle_task(self, task_id: str) -> Task:
        task = await self._fetch(task_id)
        logger.debug("Toggling task %s: current completed = %s", task_id, task.completed)
        task.completed = not task.completed
        return await asyncio.to_thread(self.db.save, task)

    async def delete_task(self, task_id: str) -> None:
        await self._fetch(task_id)
        await asyncio.to_thread(self.db.delete_by_id, task_id)
        logger.info("Deleted task %s", task_id)
