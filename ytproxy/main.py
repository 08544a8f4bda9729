import asyncio
import uuid
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from rich.console import Console
from ytproxy.api import download, formats
from ytproxy.config.settings import config
from ytproxy.core.errors import InvalidRequest, ServiceError, UpstreamError
from ytproxy.core.logging import log_error, log_warning
from ytproxy.core.state import RuntimeState
from ytproxy.services.extractor import Extractor
from ytproxy.services.ytdlp import YtDlpExtractor

console = Console()

@asynccontextmanager
async def lifespan(app: FastAPI):
    runtime: RuntimeState = app.state.runtime
    if isinstance(runtime.extractor, YtDlpExtractor):
        try:
            runtime.ytdlp_version = await runtime.extractor.version()
            console.print(f"[green]✓ yt-dlp {runtime.ytdlp_version}[/green]")
        except (OSError, asyncio.TimeoutError) as e:
            console.print(f"[yellow]⚠ yt-dlp not runnable: {str(e)}[/yellow]")

    yield

    console.print("[dim]✓ Server stopped[/dim]")

async def service_error_handler(request: Request, exc: ServiceError):
    if isinstance(exc, UpstreamError):
        log_error(request, f"{exc.detail} ({exc.kind.value}): {exc.cause}")
    else:
        log_warning(request, exc.detail)
    return PlainTextResponse(exc.detail, status_code=exc.status_code)

async def assign_request_id(request: Request, call_next):
    request.state.request_id = uuid.uuid4().hex[:12]
    response = await call_next(request)
    response.headers["X-Request-ID"] = request.state.request_id
    return response

def create_app(extractor: Optional[Extractor] = None) -> FastAPI:
    """Build the application around an extractor (yt-dlp by default)"""
    app = FastAPI(
        title=config.api.title,
        description=config.api.description,
        version=config.api.version,
        docs_url="/docs" if config.api.debug else None,
        redoc_url=None,
        openapi_url="/openapi.json" if config.api.debug else None,
        lifespan=lifespan,
    )
    app.state.runtime = RuntimeState(extractor=extractor or YtDlpExtractor())

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.api.cors_origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition", "X-Request-ID"],
    )
    app.middleware("http")(assign_request_id)

    app.add_exception_handler(InvalidRequest, service_error_handler)
    app.add_exception_handler(UpstreamError, service_error_handler)

    # Routes
    app.include_router(formats.router, tags=["Formats"])
    app.include_router(download.router, tags=["Download"])

    return app
