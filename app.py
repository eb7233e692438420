import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Form, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse
from jinja2 import TemplateError
from sqlalchemy.engine import Engine
from starlette.exceptions import HTTPException as StarletteHTTPException

import store
from auth import LoginRequired, attempt_login, require_login
from config import Settings
from db import init_db, make_engine
from render import Renderer
from static import PublicFiles
from store import DatabaseError

logger = logging.getLogger(__name__)

SERVER_ERROR_PAGE = "<!DOCTYPE html><title>Error</title><h1>Internal Server Error</h1>"


def get_engine(request: Request) -> Engine:
    return request.app.state.engine


def get_renderer(request: Request) -> Renderer:
    return request.app.state.renderer


def redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=303)


public = APIRouter()
protected = APIRouter(dependencies=[Depends(require_login)])


@public.get("/health")
def health():
    """Health check endpoint for monitoring and CI"""
    return {"status": "ok"}


@public.get("/login", response_class=HTMLResponse)
def login_form(request: Request, renderer: Renderer = Depends(get_renderer)):
    return renderer.render(request, "login.html")


@public.post("/login")
def login(request: Request, password: str = Form("")):
    return attempt_login(password, request.app.state.settings.password)


@protected.get("/", response_class=HTMLResponse)
def view_tasks(
    request: Request,
    engine: Engine = Depends(get_engine),
    renderer: Renderer = Depends(get_renderer),
):
    return renderer.render(request, "tasks.html", {"tasks": store.list_tasks(engine)})


@protected.post("/tasks")
def new_task(name: str = Form(""), engine: Engine = Depends(get_engine)):
    name = name.strip()
    if name:
        store.create_task(engine, name)
    return redirect("/")


@protected.post("/tasks/{task_id:int}/delete")
def remove_task(task_id: int, engine: Engine = Depends(get_engine)):
    store.delete_task_by_id(engine, task_id)
    return redirect("/")


@protected.get("/tasks/{task_id:int}", response_class=HTMLResponse)
def view_task(
    request: Request,
    task_id: int,
    engine: Engine = Depends(get_engine),
    renderer: Renderer = Depends(get_renderer),
):
    task = store.get_task_name(engine, task_id)
    if not task:
        return renderer.render(request, "404.html", status_code=404)

    return renderer.render(
        request,
        "task.html",
        {"task": task[0], "entries": store.list_task_entries(engine, task_id)},
    )


@protected.post("/tasks/{task_id:int}/entries")
def new_task_entry(task_id: int, details: str = Form(""), engine: Engine = Depends(get_engine)):
    details = details.strip()
    if details:
        store.create_task_entry(engine, task_id, details)
    return redirect(f"/tasks/{task_id}")


@protected.post("/tasks/{task_id:int}/entries/{entry_id:int}/delete")
def remove_task_entry(task_id: int, entry_id: int, engine: Engine = Depends(get_engine)):
    store.delete_task_entry(engine, entry_id)
    return redirect(f"/tasks/{task_id}")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create tables on startup when asked to"""
        if settings.create_schema:
            init_db(app.state.engine)
        if not settings.password:
            logger.warning("PASSWORD is not set; every login attempt will be rejected")
        yield
        app.state.engine.dispose()

    app = FastAPI(title="Task List", lifespan=lifespan, docs_url=None, redoc_url=None, openapi_url=None)
    app.state.settings = settings
    app.state.engine = make_engine(settings.database_url)
    app.state.renderer = Renderer(settings.views_dir)

    app.include_router(public)
    app.include_router(protected)
    app.mount("/public", PublicFiles(directory=str(settings.public_dir)), name="public")

    @app.exception_handler(LoginRequired)
    async def _login_required(request: Request, exc: LoginRequired):
        return redirect("/login")

    @app.exception_handler(StarletteHTTPException)
    async def _http_exception(request: Request, exc: StarletteHTTPException):
        # Unknown paths and known paths with the wrong method look the same
        if exc.status_code in (404, 405):
            return app.state.renderer.render(request, "404.html", status_code=404)
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code)

    @app.exception_handler(DatabaseError)
    async def _database_error(request: Request, exc: DatabaseError):
        logger.error("Database error on %s %s: %s", request.method, request.url.path, exc)
        return HTMLResponse(SERVER_ERROR_PAGE, status_code=500)

    @app.exception_handler(TemplateError)
    async def _template_error(request: Request, exc: TemplateError):
        logger.exception("Template error on %s %s", request.method, request.url.path)
        return HTMLResponse(SERVER_ERROR_PAGE, status_code=500)

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return PlainTextResponse("Internal Server Error", status_code=500)

    return app


def main():
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
