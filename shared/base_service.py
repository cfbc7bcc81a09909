"""
Base service class for Storefront services.

Each service (gateway, catalog replica, order replica) is one FastAPI app
built by a BaseService subclass. The base wires configuration, logging,
metrics, request correlation, the shared outbound HTTP client, the
``/health`` and ``/metrics`` endpoints and the error-to-response mapping.
"""

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional
import time
import os

import httpx
from prometheus_client import CONTENT_TYPE_LATEST

from shared.config import ServiceConfig, get_config
from shared.logging import configure_logging, get_logger, bind_request_context, reset_request_context
from shared.metrics import get_metrics_collector
from shared.observability import get_observability_manager
from shared.errors import StorefrontException
from shared.replication import REQUEST_ID_HEADER, is_replicated


class BaseService:
    """Base service class with common functionality."""

    def __init__(
        self,
        service_name: str,
        default_port: int,
        config: Optional[ServiceConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.service_name = service_name
        self.config = config or get_config(service_name, default_port)
        self.port = self.config.port or default_port
        self._start_time = time.time()

        configure_logging(service_name, self.config.log_level)
        self.logger = get_logger(f"{service_name}.service")
        self.metrics = get_metrics_collector(service_name)
        self.observability = get_observability_manager(
            service_name,
            self.metrics,
            tracing_enabled=self.config.enable_tracing,
        )

        # One outbound client per service; no timeout unless configured
        self._owns_http_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(timeout=self.config.outbound_timeout)

        self.app = self._create_app()
        self._setup_middleware()
        self._setup_routes()
        self._setup_error_handlers()

        if self.config.enable_tracing:
            from shared.tracing import configure_tracing
            configure_tracing(self.config, app=self.app)

        self.app.state.service = self

    def _create_app(self) -> FastAPI:
        """Create FastAPI application."""

        @asynccontextmanager
        async def lifespan(app: FastAPI):
            await self.start()
            try:
                yield
            finally:
                await self.stop()

        local = self.config.env == "local"
        return FastAPI(
            title=f"{self.service_name.title()} Service",
            description=f"Storefront - {self.service_name.title()} Service",
            version="1.0.0",
            docs_url="/docs" if local else None,
            redoc_url="/redoc" if local else None,
            lifespan=lifespan,
        )

    def _setup_middleware(self):
        """Set up middleware."""

        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"] if self.config.env == "local" else [],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        @self.app.middleware("http")
        async def request_context(request: Request, call_next):
            # Incoming X-Request-ID is kept; a fresh one is generated otherwise
            request_id, tokens = bind_request_context(
                request.headers.get(REQUEST_ID_HEADER),
                replicated=is_replicated(request),
            )
            start_time = time.perf_counter()
            try:
                response = await call_next(request)
            finally:
                reset_request_context(tokens)

            response.headers[REQUEST_ID_HEADER] = request_id
            self._record_request(request, response.status_code, time.perf_counter() - start_time, request_id)
            return response

    def _record_request(self, request: Request, status_code: int, duration: float, request_id: str):
        self.metrics.record_http_request(
            method=request.method,
            endpoint=request.url.path,
            status_code=status_code,
            duration=duration,
        )
        self.logger.info(
            "HTTP request",
            method=request.method,
            path=request.url.path,
            status_code=status_code,
            duration_ms=round(duration * 1000, 2),
            request_id=request_id,
        )

    def _setup_routes(self):
        """Set up common routes."""

        @self.app.get("/health")
        async def health_check():
            return await self.health()

        @self.app.get("/metrics")
        async def metrics_endpoint():
            """Prometheus metrics endpoint."""
            return Response(content=self.metrics.render(), media_type=CONTENT_TYPE_LATEST)

    def _setup_error_handlers(self):
        """Render domain errors with their own status; everything else is a 500."""

        @self.app.exception_handler(StorefrontException)
        async def storefront_exception_handler(request: Request, exc: StorefrontException):
            if exc.status_code >= 500:
                self.observability.log_error(exc.code, exc.message, path=request.url.path, details=exc.details)
            else:
                self.logger.warning(
                    "Request rejected",
                    code=exc.code,
                    message=exc.message,
                    status_code=exc.status_code,
                    path=request.url.path,
                )
            return JSONResponse(status_code=exc.status_code, content=exc.to_content())

        @self.app.exception_handler(Exception)
        async def general_exception_handler(request: Request, exc: Exception):
            self.observability.log_error(
                "INTERNAL_ERROR",
                str(exc),
                path=request.url.path,
                exception=type(exc).__name__,
            )
            return JSONResponse(
                status_code=500,
                content={"code": "INTERNAL_ERROR", "message": "Internal server error", "details": {}},
            )

    async def health(self):
        """Health payload; 503 when a dependency check raises."""
        try:
            dependencies = await self._check_dependencies()
        except Exception as e:
            self.logger.error("Health check failed", error=str(e))
            self.metrics.record_health_check("error")
            return JSONResponse(
                status_code=503,
                content={"service": self.service_name, "status": "error", "error": str(e)},
            )

        self.metrics.record_health_check("ok")
        return {
            "service": self.service_name,
            "status": "ok",
            "port": self.port,
            "uptime_seconds": self._get_uptime(),
            "dependencies": dependencies,
            "version": "1.0.0",
            "commit": os.getenv("GIT_COMMIT", "unknown"),
        }

    async def start(self):
        """Start service components. Override in subclasses."""
        self.logger.info(f"{self.service_name.title()} service started", port=self.port)

    async def stop(self):
        """Release resources held by the service."""
        if self._owns_http_client:
            await self.http_client.aclose()
        self.logger.info(f"{self.service_name.title()} service stopped")

    async def _check_dependencies(self) -> Dict[str, Any]:
        """Check service dependencies. Override in subclasses."""
        return {}

    def _get_uptime(self) -> float:
        return time.time() - self._start_time

    def run(self):
        """Run the service."""
        import uvicorn
        uvicorn.run(
            self.app,
            host=self.config.host,
            port=self.port,
            log_level=self.config.log_level.lower()
        )
