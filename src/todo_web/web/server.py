"""
FastAPI web server for Todo Web.

Serves the HTML interface for managing todo lists and a small read-only
JSON API. Every mutating form posts and then redirects, carrying a flash
message in the session.
"""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, Form, HTTPException, Request, status
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse, Response
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.middleware.sessions import SessionMiddleware
import uvicorn

from todo_web import __version__
from todo_web.config import CONFIG_ENV_VAR, STORAGE_ENV_VAR, ConfigModel, get_config
from todo_web.ordering import sort_lists, sort_todos
from todo_web.storage import ListStore, SessionStore, get_database_store
from todo_web.todo_list import TodoList
from todo_web.utils.validation import ValidationError, validate_list_name, validate_todo_name
from todo_web.web.models import HealthResponse, ListResponse


logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Get paths
BASE_DIR = Path(__file__).parent
STATIC_DIR = BASE_DIR / "static"
TEMPLATES_DIR = BASE_DIR / "templates"

# Initialize templates
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

LIST_NOT_FOUND = "The specified list was not found."
TODO_NOT_FOUND = "The specified todo was not found."

router = APIRouter()


class ListNotFoundError(Exception):
    """Raised when a request names a list that does not exist."""

    def __init__(self, list_id: int):
        self.list_id = list_id
        super().__init__(f"List {list_id} not found")


# ============================================================================
# Dependencies
# ============================================================================

def get_app_config(request: Request) -> ConfigModel:
    """Get the configuration the running app was created with."""
    return request.app.state.config


def get_store(request: Request, config: ConfigModel = Depends(get_app_config)) -> ListStore:
    """Get the list store for the configured backend."""
    if config.storage == "database":
        return get_database_store(config.database_path)
    return SessionStore(request.session)


def load_list(list_id: int, store: ListStore = Depends(get_store)) -> TodoList:
    """Load the list named in the path or raise ListNotFoundError."""
    todo_list = store.find_list(list_id)
    if todo_list is None:
        raise ListNotFoundError(list_id)
    return todo_list


# ============================================================================
# Helpers
# ============================================================================

def flash(request: Request, kind: str, message: str):
    """Store a one-shot message shown on the next rendered page."""
    request.session[kind] = message


def redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=status.HTTP_302_FOUND)


def render(request: Request, template: str, context: Optional[dict] = None,
           status_code: int = status.HTTP_200_OK):
    """Render a template, consuming any pending flash messages."""
    page = {
        "app_name": request.app.state.config.app_name,
        "success": request.session.pop("success", None),
        "error": request.session.pop("error", None),
    }
    page.update(context or {})
    return templates.TemplateResponse(request, template, page, status_code=status_code)


def is_xhr(request: Request) -> bool:
    return request.headers.get("x-requested-with") == "XMLHttpRequest"


# ============================================================================
# List Routes
# ============================================================================

@router.get("/")
async def index():
    """Root redirect to the lists page"""
    return redirect("/lists")


@router.get("/lists", response_class=HTMLResponse)
async def lists_page(request: Request, store: ListStore = Depends(get_store)):
    """View all lists, incomplete lists first"""
    return render(request, "lists.html", {"lists": sort_lists(store.all_lists())})


@router.get("/lists/new", response_class=HTMLResponse)
async def new_list_page(request: Request):
    """Render the new list form"""
    return render(request, "new_list.html", {"list_name": ""})


@router.post("/lists")
async def create_list(
    request: Request,
    list_name: str = Form(""),
    store: ListStore = Depends(get_store),
):
    """Create a new list"""
    try:
        list_name = validate_list_name(list_name, store.all_lists())
    except ValidationError as e:
        return render(
            request,
            "new_list.html",
            {"error": str(e), "list_name": e.value},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    store.create_list(list_name)
    flash(request, "success", "The list has been created.")
    return redirect("/lists")


@router.get("/lists/{list_id}", response_class=HTMLResponse)
async def list_page(request: Request, todo_list: TodoList = Depends(load_list)):
    """Single list with its todos, incomplete todos first"""
    return render(request, "list.html", {
        "list": todo_list,
        "todos": sort_todos(todo_list.todos),
    })


@router.get("/lists/{list_id}/edit", response_class=HTMLResponse)
async def edit_list_page(request: Request, todo_list: TodoList = Depends(load_list)):
    """Render the rename form for an existing list"""
    return render(request, "edit_list.html", {
        "list": todo_list,
        "list_name": todo_list.name,
    })


@router.post("/lists/{list_id}")
async def update_list(
    request: Request,
    list_name: str = Form(""),
    todo_list: TodoList = Depends(load_list),
    store: ListStore = Depends(get_store),
):
    """Rename an existing list"""
    try:
        list_name = validate_list_name(list_name, store.all_lists())
    except ValidationError as e:
        return render(
            request,
            "edit_list.html",
            {"error": str(e), "list": todo_list, "list_name": e.value},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    store.update_list_name(todo_list.id, list_name)
    flash(request, "success", "The list has been updated.")
    return redirect(f"/lists/{todo_list.id}")


@router.post("/lists/{list_id}/destroy")
async def delete_list(
    request: Request,
    todo_list: TodoList = Depends(load_list),
    store: ListStore = Depends(get_store),
):
    """Delete a list and its todos"""
    store.delete_list(todo_list.id)
    flash(request, "success", "The list has been deleted.")

    if is_xhr(request):
        return PlainTextResponse("/lists")
    return redirect("/lists")


# ============================================================================
# Todo Routes
# ============================================================================

@router.post("/lists/{list_id}/todos")
async def create_todo(
    request: Request,
    todo: str = Form(""),
    todo_list: TodoList = Depends(load_list),
    store: ListStore = Depends(get_store),
):
    """Add a todo to a list"""
    try:
        text = validate_todo_name(todo)
    except ValidationError as e:
        return render(
            request,
            "list.html",
            {
                "error": str(e),
                "list": todo_list,
                "todos": sort_todos(todo_list.todos),
                "todo": e.value,
            },
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    store.create_todo(todo_list.id, text)
    flash(request, "success", "The todo was added.")
    return redirect(f"/lists/{todo_list.id}")


@router.post("/lists/{list_id}/todos/{todo_id}/destroy")
async def delete_todo(
    request: Request,
    todo_id: int,
    todo_list: TodoList = Depends(load_list),
    store: ListStore = Depends(get_store),
):
    """Delete a todo from a list"""
    if not store.delete_todo(todo_list.id, todo_id):
        if is_xhr(request):
            return PlainTextResponse(TODO_NOT_FOUND, status_code=status.HTTP_404_NOT_FOUND)
        flash(request, "error", TODO_NOT_FOUND)
        return redirect(f"/lists/{todo_list.id}")

    if is_xhr(request):
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    flash(request, "success", "The todo has been deleted.")
    return redirect(f"/lists/{todo_list.id}")


@router.post("/lists/{list_id}/todos/{todo_id}")
async def update_todo_status(
    request: Request,
    todo_id: int,
    completed: str = Form("false"),
    todo_list: TodoList = Depends(load_list),
    store: ListStore = Depends(get_store),
):
    """Mark a todo complete or incomplete"""
    is_completed = completed.strip().lower() == "true"

    if store.update_todo_status(todo_list.id, todo_id, is_completed):
        flash(request, "success", "The todo has been updated.")
    else:
        flash(request, "error", TODO_NOT_FOUND)
    return redirect(f"/lists/{todo_list.id}")


@router.post("/lists/{list_id}/complete_all")
async def complete_all_todos(
    request: Request,
    todo_list: TodoList = Depends(load_list),
    store: ListStore = Depends(get_store),
):
    """Mark every todo in a list as completed"""
    store.mark_all_todos_completed(todo_list.id)
    flash(request, "success", "All todos have been completed.")
    return redirect(f"/lists/{todo_list.id}")


# ============================================================================
# API Routes
# ============================================================================

@router.get("/api/lists", response_model=List[ListResponse])
async def api_get_lists(store: ListStore = Depends(get_store)):
    """All lists in display order"""
    return [ListResponse.from_list(todo_list) for todo_list in sort_lists(store.all_lists())]


@router.get("/api/lists/{list_id}", response_model=ListResponse)
async def api_get_list(list_id: int, store: ListStore = Depends(get_store)):
    """Single list with todos in display order"""
    todo_list = store.find_list(list_id)
    if todo_list is None:
        raise HTTPException(status_code=404, detail="List not found")
    return ListResponse.from_list(todo_list)


@router.get("/health", response_model=HealthResponse)
async def health_check(
    config: ConfigModel = Depends(get_app_config),
    store: ListStore = Depends(get_store),
):
    """Health check endpoint"""
    return HealthResponse(
        version=__version__,
        storage=config.storage,
        total_lists=len(store.all_lists()),
    )


# ============================================================================
# Error Handlers
# ============================================================================

async def list_not_found_handler(request: Request, exc: ListNotFoundError):
    """Redirect to the lists page with an error message"""
    logger.info(f"Request for missing list {exc.list_id}: {request.url.path}")
    if is_xhr(request):
        return PlainTextResponse(LIST_NOT_FOUND, status_code=status.HTTP_404_NOT_FOUND)
    flash(request, "error", LIST_NOT_FOUND)
    return redirect("/lists")


async def server_error_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return templates.TemplateResponse(
        request,
        "error.html",
        {
            "app_name": request.app.state.config.app_name,
            "error_code": 500,
            "error_message": "Internal server error",
        },
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


# ============================================================================
# Application
# ============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    config = app.state.config
    logger.info(f"Starting {config.app_name} with {config.storage} storage")
    if config.storage == "database":
        store = get_database_store(config.database_path)
        logger.info(f"Database initialized at {store.db_path}")

    yield

    logger.info(f"Shutting down {config.app_name}")


def configure_logging(level: str):
    """Configure root logging for the server process."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def create_app(config: Optional[ConfigModel] = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        config: Configuration to use, defaults to the global configuration

    Returns:
        Configured FastAPI app
    """
    config = config or get_config()
    configure_logging(config.log_level)

    app = FastAPI(
        title="Todo Web",
        description="Todo list manager",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config

    # Flash messages, and the lists themselves for session storage
    app.add_middleware(SessionMiddleware, secret_key=config.session_secret)

    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    app.include_router(router)
    app.add_exception_handler(ListNotFoundError, list_not_found_handler)
    app.add_exception_handler(Exception, server_error_handler)

    return app


def start_server(config: ConfigModel, host: Optional[str] = None,
                 port: Optional[int] = None, debug: Optional[bool] = None,
                 config_path: Optional[Path] = None):
    """Start the web server.

    In debug mode uvicorn imports the app factory in a reloading worker,
    so the config path and storage backend are handed over through
    environment variables.
    """
    host = host or config.host
    port = port or config.port
    debug = config.debug if debug is None else debug

    if debug:
        if config_path is not None:
            os.environ[CONFIG_ENV_VAR] = str(config_path)
        os.environ[STORAGE_ENV_VAR] = config.storage

        uvicorn.run(
            "todo_web.web.server:create_app",
            factory=True,
            host=host,
            port=port,
            reload=True,
            reload_dirs=[str(BASE_DIR.parent)],
            log_level=config.log_level,
        )
    else:
        uvicorn.run(create_app(config), host=host, port=port, log_level=config.log_level)
