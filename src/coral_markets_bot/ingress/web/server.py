# -*- coding: utf-8 -*-
"""WebServer: runs the FastAPI app on uvicorn inside the main event loop."""

from __future__ import annotations

import asyncio
import contextlib
from typing import TYPE_CHECKING, Any, Callable, Iterator, Optional

import structlog
import uvicorn

if TYPE_CHECKING:
    from fastapi import FastAPI

    from coral_markets_bot.config import Settings


class _EmbeddedServer(uvicorn.Server):
    """uvicorn server that leaves SIGINT/SIGTERM to the application entry point."""

    @contextlib.contextmanager
    def capture_signals(self) -> Iterator[None]:
        yield

    def install_signal_handlers(self) -> None:
        pass


class WebServer:
    """Start/stop wrapper around uvicorn.Server (serve() runs as a task)."""

    def __init__(
        self,
        settings: "Settings",
        app: "FastAPI",
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._settings = settings
        self._app = app
        self._logger = get_logger(logger_name or self.__class__.__name__)
        self._server: Optional[_EmbeddedServer] = None
        self._task: Optional[asyncio.Task[None]] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        if self.is_running:
            self._logger.warning("web_server_already_running")
            return
        web = self._settings.web
        config = uvicorn.Config(
            self._app,
            host=web.host,
            port=web.port,
            log_config=None,
            access_log=False,
            lifespan="off",
        )
        self._server = _EmbeddedServer(config)
        self._task = asyncio.create_task(self._server.serve(), name="web-server")
        self._logger.info("web_server_started", host=web.host, port=web.port)

    async def stop(self) -> None:
        if self._server is None or self._task is None:
            return
        self._server.should_exit = True
        try:
            await self._task
        finally:
            self._server = None
            self._task = None
            self._logger.info("web_server_stopped")
