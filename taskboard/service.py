"""HTTP API for the local task tracker."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Dict, List, NoReturn, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Response, status
from pydantic import BaseModel, ConfigDict, Field

from .config import Settings, load_settings
from .models import Session, Task
from .preferences import Theme, load_theme, save_theme
from .queries import calculate_task_stats, filter_tasks, sort_tasks
from .repository import TaskRepository, find_task, replace_task
from .results import Result, TaskboardError
from .sessions import SessionStore
from .storage import KeyValueStore, SQLiteKeyValueStore
from .tasks import create_task, toggle_task, update_task, validate_task

logger = logging.getLogger("taskboard.service")

_ERROR_STATUS = {
    "validation": status.HTTP_400_BAD_REQUEST,
    "conflict": status.HTTP_409_CONFLICT,
    "authentication": status.HTTP_401_UNAUTHORIZED,
}


class RegisterRequest(BaseModel):
    email: str = ""
    password: str = ""
    confirm_password: str = ""


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class SessionView(BaseModel):
    id: str
    email: str


class TaskCreateRequest(BaseModel):
    title: str = ""
    description: str = ""


class TaskUpdateRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    completed: Optional[bool] = None


class TaskView(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    description: str
    completed: bool
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")


class TaskStatsView(BaseModel):
    total: int
    pending: int
    completed: int


class TaskListResponse(BaseModel):
    tasks: List[TaskView]
    stats: TaskStatsView


class ThemeView(BaseModel):
    theme: Theme = Field(..., description="Display theme for the interface")


def _session_to_view(session: Session) -> SessionView:
    return SessionView(id=session.id, email=session.email)


def _task_to_view(task: Task) -> TaskView:
    return TaskView(
        id=task.id,
        title=task.title,
        description=task.description,
        completed=task.completed,
        created_at=task.created_at,
        updated_at=task.updated_at,
    )


def _stats_view(tasks: List[Task]) -> TaskStatsView:
    stats = calculate_task_stats(tasks)
    return TaskStatsView(total=stats.total, pending=stats.pending, completed=stats.completed)


def _raise_for_error(error: TaskboardError) -> NoReturn:
    detail: Dict[str, object] = {"error": error.kind, "message": error.message}
    fields = getattr(error, "fields", None)
    if fields:
        detail["fields"] = dict(fields)
    raise HTTPException(
        status_code=_ERROR_STATUS.get(error.kind, status.HTTP_400_BAD_REQUEST),
        detail=detail,
    )


def _unwrap_session(result: Result[Session]) -> Session:
    if result.error is not None:
        _raise_for_error(result.error)
    assert result.value is not None
    return result.value


def _build_session_dependency(sessions: SessionStore) -> Callable[[], Session]:
    def dependency() -> Session:
        session = sessions.current_session()
        if session is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Not logged in",
            )
        return session

    return dependency


def register_auth_routes(app: FastAPI, sessions: SessionStore) -> None:
    """Expose registration, login and logout."""

    current_session = _build_session_dependency(sessions)

    @app.post("/v1/auth/register", status_code=status.HTTP_201_CREATED, response_model=SessionView)
    async def register(request: RegisterRequest) -> SessionView:
        result = sessions.register(request.email, request.password, request.confirm_password)
        return _session_to_view(_unwrap_session(result))

    @app.post("/v1/auth/login", response_model=SessionView)
    async def login(request: LoginRequest) -> SessionView:
        result = sessions.login(request.email, request.password)
        return _session_to_view(_unwrap_session(result))

    @app.post("/v1/auth/logout", status_code=status.HTTP_204_NO_CONTENT)
    async def logout() -> Response:
        sessions.logout()
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.get("/v1/auth/session", response_model=SessionView)
    async def get_session(session: Session = Depends(current_session)) -> SessionView:
        return _session_to_view(session)


def register_task_routes(
    app: FastAPI,
    repository: TaskRepository,
    *,
    current_session: Callable[[], Session],
) -> None:
    """Expose the task collection of the logged-in user."""

    def _load_or_404(user_id: str, task_id: str) -> tuple[List[Task], Task]:
        tasks = repository.load(user_id)
        task = find_task(tasks, task_id)
        if task is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
        return tasks, task

    @app.get("/v1/tasks", response_model=TaskListResponse)
    async def list_tasks(
        status_filter: str = Query("all", alias="status"),
        search: str = "",
        sort: Optional[str] = None,
        order: str = "desc",
        session: Session = Depends(current_session),
    ) -> TaskListResponse:
        tasks = repository.load(session.id)
        visible = filter_tasks(tasks, status_filter, search)
        if sort:
            visible = sort_tasks(visible, sort, order)
        return TaskListResponse(
            tasks=[_task_to_view(task) for task in visible],
            stats=_stats_view(tasks),
        )

    @app.get("/v1/tasks/stats", response_model=TaskStatsView)
    async def task_stats(session: Session = Depends(current_session)) -> TaskStatsView:
        return _stats_view(repository.load(session.id))

    @app.post("/v1/tasks", status_code=status.HTTP_201_CREATED, response_model=TaskView)
    async def add_task(
        request: TaskCreateRequest,
        session: Session = Depends(current_session),
    ) -> TaskView:
        validation = validate_task({"title": request.title, "description": request.description})
        if not validation.is_valid:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"error": "validation", "fields": validation.errors},
            )

        task = create_task(request.title, request.description)
        tasks = repository.load(session.id)
        tasks.append(task)
        repository.save(session.id, tasks)
        logger.info("User %s added task %s", session.id, task.id)
        return _task_to_view(task)

    @app.get("/v1/tasks/{task_id}", response_model=TaskView)
    async def get_task(task_id: str, session: Session = Depends(current_session)) -> TaskView:
        _, task = _load_or_404(session.id, task_id)
        return _task_to_view(task)

    @app.patch("/v1/tasks/{task_id}", response_model=TaskView)
    async def edit_task(
        task_id: str,
        request: TaskUpdateRequest,
        session: Session = Depends(current_session),
    ) -> TaskView:
        tasks, task = _load_or_404(session.id, task_id)

        updates: Dict[str, object] = {}
        if request.title is not None:
            updates["title"] = request.title.strip()
        if request.description is not None:
            updates["description"] = request.description.strip()
        if request.completed is not None:
            updates["completed"] = request.completed

        validation = validate_task(
            {
                "title": updates.get("title", task.title),
                "description": updates.get("description", task.description),
            }
        )
        if not validation.is_valid:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"error": "validation", "fields": validation.errors},
            )

        updated = update_task(task, updates)
        repository.save(session.id, replace_task(tasks, updated))
        return _task_to_view(updated)

    @app.post("/v1/tasks/{task_id}/toggle", response_model=TaskView)
    async def toggle(task_id: str, session: Session = Depends(current_session)) -> TaskView:
        tasks, task = _load_or_404(session.id, task_id)
        updated = toggle_task(task)
        repository.save(session.id, replace_task(tasks, updated))
        return _task_to_view(updated)

    @app.delete("/v1/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_task(task_id: str, session: Session = Depends(current_session)) -> Response:
        tasks = repository.load(session.id)
        repository.save(session.id, repository.remove_task(tasks, task_id))
        logger.info("User %s deleted task %s", session.id, task_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)


def register_preference_routes(app: FastAPI, storage: KeyValueStore, *, default_theme: Theme) -> None:
    @app.get("/v1/preferences/theme", response_model=ThemeView)
    async def get_theme() -> ThemeView:
        return ThemeView(theme=load_theme(storage, default_theme))

    @app.put("/v1/preferences/theme", response_model=ThemeView)
    async def put_theme(request: ThemeView) -> ThemeView:
        save_theme(storage, request.theme)
        return ThemeView(theme=request.theme)


def create_app(
    *,
    storage: KeyValueStore | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Instantiate the FastAPI application for the task tracker."""

    app_settings = settings or load_settings()
    if storage is None:
        sqlite_store = SQLiteKeyValueStore(app_settings.storage_path)
        sqlite_store.initialize()
        storage = sqlite_store

    sessions = SessionStore(storage)
    repository = TaskRepository(storage)

    app = FastAPI(
        title="Taskboard",
        version="0.1.0",
        description="Personal task tracker with local persistence.",
    )
    app.state.settings = app_settings
    app.state.storage = storage
    app.state.sessions = sessions
    app.state.repository = repository

    @app.get("/healthz")
    async def healthcheck() -> Dict[str, str]:
        return {"status": "ok"}

    register_auth_routes(app, sessions)
    register_task_routes(app, repository, current_session=_build_session_dependency(sessions))
    register_preference_routes(app, storage, default_theme=app_settings.default_theme)

    return app


__all__ = ["create_app"]
