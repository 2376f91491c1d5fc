# interfaces/api.py
import logging
from contextlib import contextmanager
from typing import List, Optional, Type

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel
from pydantic import ValidationError as BodyValidationError

from application.use_cases import TaskUseCases
from domain.errors import NotFoundError, StoreError, ValidationError
from schemas.task import MessageResponse, TaskCreate, TaskResponse, TaskUpdate

logger = logging.getLogger(__name__)

TASK_NOT_FOUND = "Task not found"

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


class APIError(HTTPException):
    """HTTP error rendered as {"message": ..., "error": ...}."""

    def __init__(self, status_code: int, message: str, error: Optional[str] = None):
        super().__init__(status_code=status_code, detail=message)
        self.message = message
        self.error = error

    def payload(self) -> dict:
        body = {"message": self.message}
        if self.error is not None:
            body["error"] = self.error
        return body


def get_use_cases(request: Request) -> TaskUseCases:
    return request.app.state.use_cases


FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def task_body(model: Type[BaseModel]):
    """Dependency reading a JSON or form-encoded body into `model`.

    An empty body counts as an object with no fields. A body that is not
    valid JSON is left to the app-wide error handler.
    """

    async def read(request: Request) -> BaseModel:
        if request.headers.get("content-type", "").startswith(FORM_CONTENT_TYPE):
            data = dict(await request.form())
        elif await request.body():
            data = await request.json()
        else:
            data = None
        try:
            return model.model_validate(data if data is not None else {})
        except BodyValidationError as e:
            raise RequestValidationError(
                [{**err, "loc": ("body",) + tuple(err["loc"])} for err in e.errors()]
            ) from e

    return read


@contextmanager
def _task_errors(failure: str):
    """Translate domain errors raised by an operation into API errors."""
    try:
        yield
    except ValidationError as e:
        raise APIError(status.HTTP_400_BAD_REQUEST, str(e)) from e
    except NotFoundError as e:
        raise APIError(status.HTTP_404_NOT_FOUND, TASK_NOT_FOUND) from e
    except StoreError as e:
        logger.error("%s: %s", failure, e)
        raise APIError(status.HTTP_500_INTERNAL_SERVER_ERROR, failure, error=str(e)) from e
    except Exception as e:
        logger.exception(failure)
        raise APIError(status.HTTP_500_INTERNAL_SERVER_ERROR, failure, error=str(e)) from e


@router.get("", response_model=List[TaskResponse])
@router.get("/", response_model=List[TaskResponse], include_in_schema=False)
async def list_tasks(use_cases: TaskUseCases = Depends(get_use_cases)):
    with _task_errors("Error fetching tasks"):
        tasks = await use_cases.list_tasks()
    return [TaskResponse.model_validate(task) for task in tasks]


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(task_id: str, use_cases: TaskUseCases = Depends(get_use_cases)):
    with _task_errors("Error fetching task"):
        task = await use_cases.get_task(task_id)
    return TaskResponse.model_validate(task)


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=TaskResponse, status_code=status.HTTP_201_CREATED, include_in_schema=False)
async def create_task(
    task: TaskCreate = Depends(task_body(TaskCreate)),
    use_cases: TaskUseCases = Depends(get_use_cases),
):
    with _task_errors("Error creating task"):
        created_task = await use_cases.create_task(task)
    return TaskResponse.model_validate(created_task)


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: str,
    task: TaskUpdate = Depends(task_body(TaskUpdate)),
    use_cases: TaskUseCases = Depends(get_use_cases),
):
    with _task_errors("Error updating task"):
        updated_task = await use_cases.update_task(task_id, task)
    return TaskResponse.model_validate(updated_task)


@router.patch("/{task_id}/toggle", response_model=TaskResponse)
async def toggle_task_completion(task_id: str, use_cases: TaskUseCases = Depends(get_use_cases)):
    with _task_errors("Error toggling task"):
        updated_task = await use_cases.toggle_task(task_id)
    logger.info("Task %s toggled to completed = %s", task_id, updated_task.completed)
    return TaskResponse.model_validate(updated_task)


@router.delete("/{task_id}", response_model=MessageResponse, response_model_exclude_none=True)
async def delete_task(task_id: str, use_cases: TaskUseCases = Depends(get_use_cases)):
    with _task_errors("Error deleting task"):
        await use_cases.delete_task(task_id)
    return MessageResponse(message="Task deleted successfully")
