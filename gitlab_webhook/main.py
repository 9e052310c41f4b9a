"""FastAPI application with lifespan context manager."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, Response, status

from gitlab_webhook.config import install_reload_handler, remove_reload_handler, settings
from gitlab_webhook.dependencies import get_command_executor, get_config_store
from gitlab_webhook.middleware.methods import AnyMethodMiddleware
from gitlab_webhook.routers import webhooks


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Reload the config on SIGHUP while serving; drain background commands on exit."""
    logger = structlog.get_logger()
    loop = asyncio.get_running_loop()
    store = get_config_store()

    if install_reload_handler(store, loop):
        logger.info("reload_handler_installed", path=str(store.path))

    yield

    remove_reload_handler(loop)
    remaining = await get_command_executor().drain(settings.drain_timeout)
    if remaining:
        logger.warning("background_commands_abandoned", count=remaining)


app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.add_middleware(AnyMethodMiddleware)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> Response:
    """Log any unhandled exception and still answer with an empty 200."""
    logger = structlog.get_logger()
    logger.exception("unhandled_exception", path=request.url.path, method=request.method)
    return Response(status_code=status.HTTP_200_OK)


app.include_router(webhooks.router)
