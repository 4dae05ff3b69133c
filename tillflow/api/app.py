import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from .error import AccessDenied, ClientError, ServerError
from .middleware import REQUEST_ID_HEADER, register_middleware

logger = logging.getLogger(__name__)


def _wants_json(request: Request, ApplicationConfig) -> bool:
    mode = ApplicationConfig.DENIAL_MODE
    if mode == "json":
        return True
    if mode == "redirect":
        return False
    prefix = ApplicationConfig.API_PREFIX.rstrip("/")
    path = request.url.path
    return path == prefix or path.startswith(prefix + "/")


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": error_dict},
        headers=exc.headers,
    )


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {"code": exc.base_error.code, "message": "Internal server error"}
    logger.error(f"Server error: {exc.base_error.code}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": error_dict}
    )


def create_app(ApplicationConfig) -> FastAPI:
    logging.basicConfig(
        level=ApplicationConfig.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    from tillflow.depends import get_maintenance_sweeper

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        # Let in-flight maintenance sweeps finish before the engine goes away
        await get_maintenance_sweeper().drain()

    app = FastAPI(title="TillFlow Auth API", version="0.1.0", lifespan=lifespan)

    async def handle_access_denied(request: Request, exc: AccessDenied):
        if _wants_json(request, ApplicationConfig) or not exc.redirect_to:
            return await handle_client_error(request, exc)
        logger.info(f"{exc.base_error.code}: redirecting {request.url.path} to {exc.redirect_to}")
        return RedirectResponse(exc.redirect_to, status_code=status.HTTP_303_SEE_OTHER)

    register_middleware(app, ApplicationConfig)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )

    from tillflow.api.routes import approvals, audit, auth, two_factor, user, users

    prefix = ApplicationConfig.API_PREFIX
    app.include_router(auth.router, prefix=prefix, tags=["Authentication"])
    app.include_router(user.router, prefix=prefix, tags=["Account"])
    app.include_router(two_factor.router, prefix=prefix, tags=["Two-Factor"])
    app.include_router(users.router, prefix=prefix, tags=["Staff"])
    app.include_router(audit.router, prefix=prefix, tags=["Audit"])
    app.include_router(approvals.router, prefix=prefix, tags=["Approvals"])

    app.add_exception_handler(AccessDenied, handle_access_denied)
    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)

    return app
