from __future__ import annotations

import logging
import os
from collections.abc import Callable

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.background import BackgroundTask
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from installer_web.assets import AssetResolver, DirectoryAssetResolver
from installer_web.installer import ConfigSerializationError, InstallerFramework
from installer_web.models import fail
from installer_web.routing import (
    JSON_CONTENT_TYPE,
    NotFound,
    ResponseAction,
    ServeAsset,
    ServeJson,
    Terminate,
    route,
)

logger = logging.getLogger(__name__)

TerminateHook = Callable[[int], None]

# Every method reaches the router, which answers anything but GET with an empty 404.
DISPATCH_METHODS = ["GET", "HEAD", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"]


def terminate_process(exit_code: int) -> None:
    """Flush logs and end the process without unwinding other threads."""

    logger.info(f"Exit requested by UI; terminating with code {exit_code}")
    logging.shutdown()
    os._exit(exit_code)


def build_response(action: ResponseAction, on_terminate: TerminateHook) -> Response:
    if isinstance(action, ServeJson):
        return Response(content=action.body, media_type=JSON_CONTENT_TYPE)

    if isinstance(action, ServeAsset):
        # Pass the type through verbatim; media_type would append a charset to text/*.
        return Response(content=action.body, headers={"content-type": action.content_type})

    if isinstance(action, Terminate):
        # Nothing is promised to the client; the hook runs once the (empty) reply is flushed.
        return Response(
            status_code=204,
            background=BackgroundTask(on_terminate, action.exit_code),
        )

    if isinstance(action, NotFound):
        return Response(status_code=404)

    raise TypeError(f"Unknown response action: {action!r}")


def create_app(
    framework: InstallerFramework,
    assets: AssetResolver | None = None,
    *,
    on_terminate: TerminateHook | None = None,
) -> FastAPI:
    resolver: AssetResolver = assets if assets is not None else DirectoryAssetResolver()
    terminate: TerminateHook = on_terminate if on_terminate is not None else terminate_process

    # Every path belongs to the dispatcher; the generated docs would shadow static assets.
    app = FastAPI(
        title="Installer UI server",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.installer_framework = framework
    app.state.asset_resolver = resolver

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.info(f"{request.method} {request.url.path} - {response.status_code}")
        return response

    @app.exception_handler(ConfigSerializationError)
    async def _config_serialization_handler(
        request: Request, exc: ConfigSerializationError
    ) -> JSONResponse:
        logger.error(f"Unable to serialize installer config: {exc}")
        return JSONResponse(
            status_code=500,
            content=fail(
                code="internal_error",
                message="Installer configuration could not be serialized",
            ).model_dump(mode="json"),
        )

    @app.exception_handler(StarletteHTTPException)
    async def _starlette_http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> Response:
        # Methods outside DISPATCH_METHODS (TRACE, lowercase "get", ...) are still just 404.
        if exc.status_code == 405:
            return Response(status_code=404)
        return Response(status_code=exc.status_code, headers=exc.headers)

    @app.exception_handler(Exception)
    async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        # Avoid leaking internals to the UI; the traceback goes to the log.
        logger.exception(f"Unhandled error serving {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content=fail(code="internal_error", message="Internal server error").model_dump(
                mode="json"
            ),
        )

    async def dispatch(request: Request) -> Response:
        # Routing may block on the native folder dialog; keep it off the event loop.
        action = await run_in_threadpool(
            route, request.method, request.url.path, framework, resolver
        )
        return build_response(action, terminate)

    app.add_route("/{path:path}", dispatch, methods=DISPATCH_METHODS, include_in_schema=False)

    return app
