import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from notetaker.api.auth import router as auth_router
from notetaker.api.notes import router as notes_router
from notetaker.config import Settings
from notetaker.errors import AppError, InternalError, ValidationFailed
from notetaker.logging_setup import configure_logging
from notetaker.services.accounts import AccountService
from notetaker.services.notes import NoteService
from notetaker.storage.event_log import EventLog
from notetaker.storage.notes_store import NotesStore
from notetaker.storage.users_store import UsersStore
from notetaker.utils.auth_hash import PasswordHasher
from notetaker.utils.identity import build_resolver
from notetaker.utils.jwt_auth import TokenService

logger = logging.getLogger(__name__)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = []
    for err in exc.errors():
        # drop the "body"/"query" prefix FastAPI adds
        loc = [str(p) for p in err.get("loc", ())][1:]
        details.append({"field": ".".join(loc), "message": err.get("msg", "Invalid value")})
    failed = ValidationFailed(details)
    return JSONResponse(status_code=failed.status_code, content=failed.to_dict())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    err = InternalError()
    return JSONResponse(status_code=err.status_code, content=err.to_dict())


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    app = FastAPI(title="NoteTaker API")

    tokens = TokenService(settings)
    events = EventLog(settings.data_dir)
    app.state.settings = settings
    app.state.identity = build_resolver(tokens, allow_header_identity=settings.allow_header_identity)
    app.state.note_service = NoteService(NotesStore(settings.data_dir), events)
    app.state.account_service = AccountService(
        UsersStore(settings.data_dir),
        PasswordHasher(settings.bcrypt_rounds),
        tokens,
        events,
    )

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(auth_router)
    app.include_router(notes_router)

    @app.get("/health")
    def health():
        return {"ok": True}

    if settings.allow_header_identity:
        logger.warning("X-User-Id header identity is enabled; do not use in production")
    logger.info("NoteTaker API ready, data dir %s", settings.data_dir)
    return app


_app: Optional[FastAPI] = None


def __getattr__(name: str):
    # `uvicorn notetaker.main:app` builds the app on first lookup, so importing
    # this module reads no settings and touches no data dir
    global _app
    if name == "app":
        if _app is None:
            _app = create_app()
        return _app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
