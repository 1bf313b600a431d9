import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import PlainTextResponse, RedirectResponse
from prometheus_fastapi_instrumentator import Instrumentator
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import get_settings
from .database import init_db
from .dependencies import LoginRequired, get_session_user
from .logging_middleware import add_audit_middleware
from .rate_limit import apply_rate_limiter
from .routers import admin, auth, reservations, rooms

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    if settings.run_db_migrations:
        init_db()
    yield


def _http_error(_: Request, exc: StarletteHTTPException) -> PlainTextResponse:
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=getattr(exc, "headers", None))


def _login_required(_: Request, __: LoginRequired) -> RedirectResponse:
    return RedirectResponse("/login", status_code=status.HTTP_303_SEE_OTHER)


def _store_error(request: Request, exc: SQLAlchemyError) -> PlainTextResponse:
    logger.error("Store failure on %s %s", request.method, request.url.path, exc_info=exc)
    return PlainTextResponse("Server error", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def create_app() -> FastAPI:
    fastapi_app = FastAPI(
        title="Hotel Louvain",
        version="1.0.0",
        lifespan=lifespan,
    )
    fastapi_app.add_exception_handler(StarletteHTTPException, _http_error)
    fastapi_app.add_exception_handler(LoginRequired, _login_required)
    fastapi_app.add_exception_handler(SQLAlchemyError, _store_error)
    apply_rate_limiter(fastapi_app)
    add_audit_middleware(fastapi_app, "hotel")
    if settings.metrics_enabled:
        Instrumentator().instrument(fastapi_app).expose(fastapi_app, include_in_schema=False)

    # Pages resolve the session user; /health and /metrics never touch the store.
    for router in (auth.router, rooms.router, reservations.router, admin.router):
        fastapi_app.include_router(router, dependencies=[Depends(get_session_user)])
    return fastapi_app


app = create_app()


@app.get("/health", tags=["health"])
def health() -> dict[str, str]:
    return {"status": "ok", "service": "hotel"}
