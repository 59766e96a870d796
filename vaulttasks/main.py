import logging
from pathlib import Path

import click
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Mount

from vaulttasks.config import get_settings
from vaulttasks.exceptions import PathAccessError, VaultNotFoundError
from vaulttasks.mcp_server import mcp
from vaulttasks.models.common import ErrorResponse, StatusResponse
from vaulttasks.routers.tasks import router as tasks_router

logger = logging.getLogger(__name__)


# --- Localhost-only middleware ---

class LocalhostOnlyMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        client_host = request.client.host if request.client else None
        if client_host not in ("127.0.0.1", "::1", "localhost"):
            return JSONResponse(
                status_code=403,
                content=ErrorResponse(error_code="forbidden", message="Localhost access only").model_dump(),
            )
        return await call_next(request)


# --- FastAPI app ---

api = FastAPI(title="vaulttasks", version="0.1.0")
api.include_router(tasks_router)


@api.get("/api/status")
def api_status() -> StatusResponse:
    vault = get_settings().vault_directory.expanduser().resolve()
    exists = vault.is_dir()
    return StatusResponse(
        vault_directory=str(vault),
        exists=exists,
        message="Vault ready" if exists else f"Vault directory not found: {vault}",
    )


# --- Exception handlers ---

@api.exception_handler(PathAccessError)
async def path_access_error_handler(request: Request, exc: PathAccessError):
    return JSONResponse(status_code=403, content=ErrorResponse(error_code="path_access", message=str(exc)).model_dump())


@api.exception_handler(VaultNotFoundError)
async def not_found_error_handler(request: Request, exc: VaultNotFoundError):
    return JSONResponse(status_code=404, content=ErrorResponse(error_code="not_found", message=str(exc)).model_dump())


# --- Starlette root app ---

mcp_app = mcp.http_app(path="/", stateless_http=True)

app = Starlette(
    middleware=[Middleware(LocalhostOnlyMiddleware)],
    routes=[
        Mount("/mcp", app=mcp_app),
        Mount("/", app=api),
    ],
    lifespan=mcp_app.lifespan,
)


# --- Command line ---

@click.command()
@click.argument("vault_directory", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--transport", type=click.Choice(["http", "stdio"]), default="http", show_default=True,
              help="Serve MCP over HTTP (with the REST API) or over stdio")
@click.option("--host", default=None, help="Bind address for the http transport")
@click.option("--port", type=int, default=None, help="Port for the http transport")
def cli(vault_directory, transport, host, port):
    """Serve Obsidian Tasks from VAULT_DIRECTORY over MCP and HTTP."""
    settings = get_settings()
    settings.vault_directory = vault_directory.expanduser().resolve()
    if host:
        settings.host = host
    if port:
        settings.port = port

    # stderr, so stdio MCP traffic on stdout stays clean
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Vault directory: %s", settings.vault_directory)

    if transport == "stdio":
        mcp.run()
        return

    uvicorn.run(
        "vaulttasks.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    cli()
