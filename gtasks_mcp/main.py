import argparse
import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Mount

from gtasks_mcp.auth import router as auth_router
from gtasks_mcp.config import get_settings
from gtasks_mcp.exceptions import (
    AuthenticationError,
    DueDateParseError,
    IntegrationError,
    RateLimitError,
    TaskNotFoundError,
    TaskValidationError,
    UnknownOperationError,
)
from gtasks_mcp.mcp_server import mcp
from gtasks_mcp.models.common import ErrorResponse
from gtasks_mcp.routers.tasks import router as tasks_router

logger = logging.getLogger(__name__)


# --- Localhost-only middleware ---

class LocalhostOnlyMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        client_host = request.client.host if request.client else None
        if client_host not in ("127.0.0.1", "::1", "localhost"):
            return JSONResponse(
                status_code=403,
                content={"error_code": "forbidden", "message": "Localhost access only"},
            )
        return await call_next(request)


# --- FastAPI app ---

api = FastAPI(title="gtasks-mcp", version="0.1.0")
api.include_router(auth_router)
api.include_router(tasks_router)


@api.get("/api/status")
def api_status() -> dict:
    from gtasks_mcp.auth import _get_token_store

    accounts = _get_token_store().list_accounts()
    return {"tasks": {"authenticated_accounts": accounts, "ready": len(accounts) > 0}}


# --- Exception handlers ---

def _error(status_code: int, error_code: str, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error_code=error_code, message=str(exc)).model_dump())


@api.exception_handler(AuthenticationError)
async def auth_error_handler(request: Request, exc: AuthenticationError):
    return _error(401, "auth_error", exc)


@api.exception_handler(IntegrationError)
async def integration_error_handler(request: Request, exc: IntegrationError):
    logger.error("Tasks API failure on %s: %s", request.url.path, exc)
    return _error(500, "integration_error", exc)


@api.exception_handler(RateLimitError)
async def rate_limit_error_handler(request: Request, exc: RateLimitError):
    return _error(429, "rate_limit", exc)


@api.exception_handler(TaskNotFoundError)
async def not_found_error_handler(request: Request, exc: TaskNotFoundError):
    return _error(404, "not_found", exc)


@api.exception_handler(TaskValidationError)
async def validation_error_handler(request: Request, exc: TaskValidationError):
    return _error(400, "validation_error", exc)


@api.exception_handler(DueDateParseError)
async def date_error_handler(request: Request, exc: DueDateParseError):
    return _error(400, "invalid_date", exc)


@api.exception_handler(UnknownOperationError)
async def unknown_operation_handler(request: Request, exc: UnknownOperationError):
    return _error(404, "unknown_operation", exc)


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


def run():
    settings = get_settings()
    uvicorn.run(
        "gtasks_mcp.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


def cli() -> None:
    parser = argparse.ArgumentParser(prog="gtasks-mcp", description="Google Tasks over MCP and REST")
    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("serve", help="Serve REST and MCP over HTTP (default)")
    subparsers.add_parser("stdio", help="Serve MCP over stdio")
    auth_parser = subparsers.add_parser("auth", help="Authorize a Google account and save its token")
    auth_parser.add_argument("--account", default="default", help="Name to store the token under")
    args = parser.parse_args()

    # stderr keeps the stdio transport clean
    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.command == "auth":
        from gtasks_mcp.auth import run_installed_app_flow

        logger.info("Launching auth flow...")
        run_installed_app_flow(args.account)
        logger.info("Credentials saved. You can now run the server.")
    elif args.command == "stdio":
        mcp.run()
    else:
        run()


if __name__ == "__main__":
    cli()
