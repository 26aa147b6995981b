"""Page and task endpoints. Every response body is HTML for htmx to swap."""

from fastapi import APIRouter, Cookie, Depends, Form, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import HTMLResponse

from todo_server.core.parsing import parse_bool
from todo_server.services.todo_service import TodoService
from todo_server.services.view_state import (
    VIEW_COOKIE_NAME,
    ResolvedView,
    persist_view,
    resolve_view,
    select_view,
)

# /todos/show/{view} accepts any method
SHOW_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]

router = APIRouter()


def get_todo_service(request: Request) -> TodoService:
    """Todo service created at startup."""
    return request.app.state.todo_service


def current_view(view: str | None = Cookie(default=None, alias=VIEW_COOKIE_NAME)) -> ResolvedView:
    return resolve_view(view)


def _html(body: str, view: ResolvedView) -> HTMLResponse:
    response = HTMLResponse(body)
    persist_view(response, view)
    return response


@router.get("/", response_class=HTMLResponse)
async def index(
    service: TodoService = Depends(get_todo_service),
    view: ResolvedView = Depends(current_view),
) -> HTMLResponse:
    """Full page under the current view."""
    body = await run_in_threadpool(service.page, view)
    return _html(body, view)


@router.post("/todos", response_class=HTMLResponse)
async def create_task(
    task: str = Form(default=""),
    service: TodoService = Depends(get_todo_service),
    view: ResolvedView = Depends(current_view),
) -> HTMLResponse:
    """Add a task; answers with the new item plus out-of-band swaps."""
    body = await run_in_threadpool(service.create, task, view)
    return _html(body, view)


@router.api_route("/todos/show/{view_name}", methods=SHOW_METHODS, response_class=HTMLResponse)
async def show_view(
    view_name: str,
    service: TodoService = Depends(get_todo_service),
) -> HTMLResponse:
    """Switch the list view and remember it in the view cookie."""
    view = select_view(view_name)
    body = await run_in_threadpool(service.show, view)
    return _html(body, view)


@router.patch("/todos/{task_id}", response_class=HTMLResponse)
async def patch_task(
    task_id: str,
    completed: str | None = Query(default=None),
    service: TodoService = Depends(get_todo_service),
    view: ResolvedView = Depends(current_view),
) -> HTMLResponse:
    """Set the completion flag from ``?completed=``; unparseable values mean false."""
    body = await run_in_threadpool(service.toggle, task_id, parse_bool(completed), view)
    return _html(body, view)


@router.delete("/todos/{task_id}", response_class=HTMLResponse)
async def delete_task(
    task_id: str,
    service: TodoService = Depends(get_todo_service),
    view: ResolvedView = Depends(current_view),
) -> HTMLResponse:
    body = await run_in_threadpool(service.delete, task_id, view)
    return _html(body, view)
