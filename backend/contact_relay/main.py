# contact_relay/main.py
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from contact_relay.core.errors import SubmissionError, error_response, submission_error_handler
from contact_relay.core.mailer import Mailer, SmtpMailer
from contact_relay.core.settings import Settings, get_settings
from contact_relay.routers.contact import router as contact_router
from contact_relay.routers.health import router as health_router

log = logging.getLogger("uvicorn.error")


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # unknown paths and wrong methods on known paths both read as "no such endpoint"
    if exc.status_code in (404, 405):
        return error_response(404, "Endpoint not found")
    return error_response(exc.status_code, str(exc.detail))


async def unhandled_error_handler(request: Request, exc: Exception):
    log.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(500, "Internal server error")


def create_app(settings: Optional[Settings] = None, mailer: Optional[Mailer] = None) -> FastAPI:
    settings = settings or get_settings()
    mailer = mailer or SmtpMailer(settings)

    app = FastAPI(title=settings.api_title)
    app.state.settings = settings
    app.state.mailer = mailer

    @app.middleware("http")
    async def catch_unhandled(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            return await unhandled_error_handler(request, exc)

    @app.middleware("http")
    async def limit_body_size(request: Request, call_next):
        length = request.headers.get("content-length")
        if length and length.isdigit() and int(length) > settings.max_body_bytes:
            return error_response(413, "Request body too large.")
        return await call_next(request)

    # outermost layer; unhandled errors are turned into responses beneath it
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(SubmissionError, submission_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)

    app.include_router(health_router)
    app.include_router(contact_router)

    log.info("[main] EMAIL_USER: %s", settings.email_user or "MISSING")
    log.info("[main] EMAIL_PASS: %s", "LOADED" if settings.email_pass else "MISSING")
    log.info("[main] mail recipient = %s, allowed origin = %s", settings.recipient, settings.frontend_url)
    return app


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run("contact_relay.main:create_app", factory=True, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
