import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from starlette.exceptions import HTTPException

from . import config, database
from .api import admin as admin_api
from .api import applications as applications_api
from .api import auth as auth_api
from .api import jobs as jobs_api
from .api import stats as stats_api
from .utils.error_handlers import AppError, create_error_response, get_error_message

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

ROUTERS = (
    auth_api.router,
    jobs_api.router,
    applications_api.router,
    stats_api.router,
    admin_api.router,
)


async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s %s", request.method, request.url.path, exc.message, exc.details)
    return create_error_response(exc.status_code, exc.message)


async def http_exception_handler(request: Request, exc: HTTPException):
    return create_error_response(exc.status_code, str(exc.detail))


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Schema violations (missing, unknown or mistyped fields) are plain 400s."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    else:
        message = get_error_message("validation_error")
    return create_error_response(400, message)


async def sqlalchemy_operational_error_handler(request: Request, exc: OperationalError):
    logger.exception("Database OperationalError: %s", exc)
    return create_error_response(503, get_error_message("database_error"))


async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database SQLAlchemyError: %s", exc)
    return create_error_response(500, get_error_message("database_error"))


async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    return create_error_response(500, get_error_message("server_error"))


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(OperationalError, sqlalchemy_operational_error_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)


def create_app(*, init_database: bool = True) -> FastAPI:
    app = FastAPI(title="CareerCraft Placement Portal")

    for router in ROUTERS:
        app.include_router(router)
    install_error_handlers(app)

    _default_origins = ["http://localhost:3000", "http://localhost:5000"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[*_default_origins, *config.FRONTEND_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health_check():
        return {"status": "Backend running", "service": "CareerCraft"}

    @app.get("/api/test-db")
    def db_check():
        try:
            with database.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error("Database check failed: %s", e)
            return JSONResponse(status_code=503, content={"message": "Database error"})
        return {"message": "Database connected"}

    if init_database:
        @app.on_event("startup")
        def on_startup() -> None:
            database.init_db()
            logger.info("Database tables created/verified")

    return app


app = create_app()
