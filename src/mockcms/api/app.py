"""FastAPI application over a Repository.

``ToolApi`` owns the app, maps ``StoreError`` onto its status code and
lets a consumer intercept hook answer any request before the route runs
(used to simulate transport failures).
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from fastapi.testclient import TestClient

from mockcms.api.routes import router
from mockcms.errors import StoreError
from mockcms.repository import Repository

logger = logging.getLogger(__name__)

Interceptor = Callable[[Request], Response | tuple | None]


def coerce_response(value: Response | tuple) -> Response:
    """Accept a ``Response`` or a ``(status, body?, headers?)`` tuple."""
    if isinstance(value, Response):
        return value
    status, *rest = value
    body = rest[0] if rest else None
    headers = dict(rest[1]) if len(rest) > 1 else None
    return JSONResponse(body, status_code=int(status), headers=headers)


class ToolApi:
    """HTTP surface of one repository, served in-process."""

    def __init__(self, repository: Repository) -> None:
        self.repository = repository
        self._interceptor: Interceptor | None = None
        self.app = self._build_app()

    def intercept(self, interceptor: Interceptor | None) -> None:
        """Install (or remove with None) the consumer intercept hook."""
        self._interceptor = interceptor

    def client(self, base_url: str = "http://testserver") -> TestClient:
        """In-process HTTP client for the app."""
        return TestClient(self.app, base_url=base_url)

    def _build_app(self) -> FastAPI:
        app = FastAPI(title="mockcms", docs_url=None, redoc_url=None)
        app.state.repository = self.repository
        app.include_router(router)

        @app.middleware("http")
        async def intercept_middleware(request: Request, call_next):
            if self._interceptor is not None:
                intercepted = self._interceptor(request)
                if intercepted is not None:
                    logger.debug("Intercepted %s %s", request.method, request.url.path)
                    return coerce_response(intercepted)
            return await call_next(request)

        @app.exception_handler(StoreError)
        async def store_error_handler(request: Request, exc: StoreError):
            logger.debug("%s %s -> %s %s", request.method, request.url.path, exc.status, exc)
            return JSONResponse({"message": exc.message}, status_code=exc.status)

        @app.exception_handler(RequestValidationError)
        async def validation_error_handler(request: Request, exc: RequestValidationError):
            return JSONResponse(
                {"message": "invalid request", "errors": jsonable_encoder(exc.errors())},
                status_code=400,
            )

        return app
