"""
Keep-alive web server for hosted deployments.
Answers platform health checks while the bot runs.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any, Tuple

import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from utils.logger import get_logger

logger = get_logger("KeepAlive")

VERSION = "1.0.0"

# Seconds to wait for uvicorn to finish in-flight requests
SHUTDOWN_TIMEOUT = 5.0


def create_keep_alive_app(app: Any) -> FastAPI:
    """
    Build the keep-alive FastAPI application.

    Args:
        app: AppContext whose client, settings and monitoring are reported

    Returns:
        FastAPI application
    """

    @asynccontextmanager
    async def lifespan(api: FastAPI):
        """Lifespan context manager for startup/shutdown events."""
        logger.info("Keep-alive server starting...")
        yield
        logger.info("Keep-alive server shutting down...")

    api = FastAPI(
        title="Dispatch Bot",
        description="Discord bot keep-alive server",
        version=VERSION,
        lifespan=lifespan,
    )

    def discord_connected() -> bool:
        client = app.client
        return client is not None and client.is_ready()

    @api.get("/")
    async def root():
        """Root endpoint."""
        return {
            "name": "Dispatch Bot",
            "version": VERSION,
            "status": "ready" if discord_connected() else "starting",
        }

    @api.get("/health")
    async def health():
        """Health check endpoint for monitoring."""
        connected = discord_connected()
        database_expected = bool(app.config.DATABASE_URL)
        database_ok = app.settings.is_connected()

        status = "healthy"
        if not connected:
            status = "degraded"
        if database_expected and not database_ok:
            status = "degraded"

        return JSONResponse(
            status_code=200 if status == "healthy" else 503,
            content={
                "status": status,
                "discord": "connected" if connected else "disconnected",
                "database": "connected" if database_ok else ("disconnected" if database_expected else "disabled"),
                "commands": len(app.commands),
                "metrics": app.monitoring.get_app_metrics(),
            },
        )

    @api.get("/ping")
    async def ping():
        """Simple ping endpoint."""
        return {"pong": True}

    return api


async def start_server(app: Any) -> Tuple[uvicorn.Server, asyncio.Task]:
    """
    Start the keep-alive server in a background task.

    Args:
        app: AppContext providing HOST/PORT configuration

    Returns:
        The uvicorn server and the task serving it; pass both to ``stop_server``
    """
    config_uvicorn = uvicorn.Config(
        create_keep_alive_app(app),
        host=app.config.HOST,
        port=app.config.PORT,
        log_level="warning",
        access_log=False,
    )
    server = uvicorn.Server(config_uvicorn)
    task = asyncio.create_task(server.serve(), name="keep-alive")
    logger.info(f"Keep-alive server listening on port {app.config.PORT}")
    return server, task


async def stop_server(server: uvicorn.Server, task: asyncio.Task, timeout: float = SHUTDOWN_TIMEOUT) -> None:
    """
    Ask the keep-alive server to exit and wait for it.

    Args:
        server: Server returned by ``start_server``
        task: Task returned by ``start_server``
        timeout: Seconds to wait before cancelling the task
    """
    server.should_exit = True
    try:
        await asyncio.wait_for(task, timeout)
    except asyncio.TimeoutError:
        logger.warning("Keep-alive server did not stop in time, cancelled")
    except Exception as e:
        logger.error(f"Keep-alive server failed: {e}")
